"""Signed session cookie helpers."""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from itsdangerous import BadSignature, Signer

COOKIE_SALT = "soul-log.session"


class SessionCookie:
    """Carries the raw session token, signed with the session secret."""

    def __init__(
        self,
        secret: str,
        name: str,
        *,
        secure: bool,
        samesite: str = "Lax",
        max_age: timedelta = timedelta(days=7),
    ):
        self._signer = Signer(secret, salt=COOKIE_SALT)
        self.name = name
        self.secure = secure
        self.samesite = samesite
        self.max_age = max_age

    @classmethod
    def from_config(cls, config) -> "SessionCookie":
        return cls(
            config["SESSION_SECRET"],
            config.get("AUTH_COOKIE_NAME", "soul_log.sid"),
            secure=bool(config.get("AUTH_COOKIE_SECURE", False)),
            samesite=config.get("AUTH_COOKIE_SAMESITE", "Lax"),
            max_age=timedelta(days=int(config.get("AUTH_SESSION_TTL_DAYS", 7))),
        )

    def read(self, request) -> Optional[str]:
        """Return the verified token, or None when absent or tampered with."""
        raw = request.cookies.get(self.name)
        if not raw:
            return None
        try:
            return self._signer.unsign(raw).decode("utf-8")
        except BadSignature:
            return None

    def present(self, request) -> bool:
        return self.name in request.cookies

    def write(self, response, token: str) -> None:
        response.set_cookie(
            self.name,
            self._signer.sign(token).decode("utf-8"),
            max_age=int(self.max_age.total_seconds()),
            httponly=True,
            secure=self.secure,
            samesite=self.samesite,
            path="/",
        )

    def clear(self, response) -> None:
        response.delete_cookie(
            self.name,
            path="/",
            httponly=True,
            secure=self.secure,
            samesite=self.samesite,
        )


__all__ = ["SessionCookie"]
