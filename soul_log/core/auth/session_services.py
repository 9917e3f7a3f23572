"""Auth session lifecycle: OAuth login, session issuance and resolution, logout."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from hashlib import sha256
from typing import Callable, Iterable, Optional
from urllib.parse import urlencode, urlsplit

from soul_log.core.auth.constants import (
    LOGIN_ERROR_OAUTH_FAILED,
    SESSION_KEY_OAUTH_STATE,
    SESSION_KEY_RETURN_TO,
    SESSION_KEY_USER_ID,
)
from soul_log.core.auth.google_oauth import GoogleOAuthClient
from soul_log.core.auth.schemas import ExternalProfile
from soul_log.core.auth.session_models import (
    CallbackResult,
    LoginRedirect,
    ResolvedSession,
    anonymous,
)
from soul_log.core.auth.session_repository import SessionRepository
from soul_log.core.errors import DependencyUnavailable, OAuthCallbackError, OAuthProviderError
from soul_log.core.users.repository import UserRepository
from soul_log.core.users.schemas import UserProfile, serialize_user

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = timedelta(days=7)


class AuthSessionManager:
    """Maps an external OAuth identity to a local user and keeps a server-side session.

    Built once per application with its stores and provider client. It holds
    no per-request state, so a single instance serves every request.
    Store failures while resolving a session degrade to anonymous; they never
    yield an authenticated result.
    """

    def __init__(
        self,
        identity_store,
        session_store,
        oauth_client,
        *,
        default_landing_url: str,
        login_url: str,
        allowed_origins: Iterable[str] = (),
        session_ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.identity_store = identity_store
        self.session_store = session_store
        self.oauth_client = oauth_client
        self.default_landing_url = default_landing_url
        self.login_url = login_url
        self.allowed_origins = {origin.rstrip("/") for origin in allowed_origins if origin}
        self.session_ttl = session_ttl
        self._clock = clock or datetime.utcnow

    @classmethod
    def from_config(cls, config) -> "AuthSessionManager":
        client_url = config["CLIENT_URL"].rstrip("/")
        return cls(
            UserRepository(),
            SessionRepository(),
            GoogleOAuthClient.from_config(config),
            default_landing_url=f"{client_url}/journal",
            login_url=f"{client_url}/login",
            allowed_origins=[client_url, *(config.get("CORS_ALLOWED_ORIGINS") or [])],
            session_ttl=timedelta(days=int(config.get("AUTH_SESSION_TTL_DAYS", 7))),
        )

    # --- login flow ---

    def initiate_login(self, current: ResolvedSession, return_to: Optional[str] = None) -> LoginRedirect:
        """Record state (and an optional return target) in the session, then point at the consent screen."""
        logger.info("Starting Google login from %s session", current.state)
        state = secrets.token_urlsafe(24)
        data = {SESSION_KEY_OAUTH_STATE: state}
        if current.user is not None:
            data[SESSION_KEY_USER_ID] = current.user.id
        target = self.safe_return_to(return_to)
        if target:
            data[SESSION_KEY_RETURN_TO] = target
        elif return_to:
            logger.info("Ignoring returnTo outside the allowed origins")

        expiry = self._now() + self.session_ttl
        if current.token:
            token = current.token
            self.session_store.save(hash_token(token), data, expiry)
        else:
            token = new_session_token()
            self.session_store.create(hash_token(token), data, expiry)
        return LoginRedirect(url=self.oauth_client.authorization_url(state), token=token)

    def complete_callback(
        self,
        current: ResolvedSession,
        code: Optional[str],
        state: Optional[str],
        error: Optional[str] = None,
    ) -> CallbackResult:
        """Validate the provider redirect, fetch the profile, and finish the login."""
        if current.degraded:
            raise DependencyUnavailable()
        if error:
            raise OAuthCallbackError(f"provider_error:{error}")
        if not code:
            raise OAuthCallbackError("missing_code")
        expected = current.payload.get(SESSION_KEY_OAUTH_STATE)
        if not expected or not state or not secrets.compare_digest(str(state), str(expected)):
            raise OAuthCallbackError("state_mismatch")
        try:
            profile = self.oauth_client.profile_for_code(code)
        except OAuthProviderError as exc:
            raise OAuthCallbackError(str(exc)) from exc
        return self.handle_callback(current, profile)

    def handle_callback(self, current: ResolvedSession, profile: ExternalProfile) -> CallbackResult:
        """Upsert the user, swap the pending session for an authenticated one, consume returnTo."""
        user = self.identity_store.upsert_by_external_id(profile)
        return_to = current.payload.get(SESSION_KEY_RETURN_TO)
        if current.token:
            # Dropping the pending row consumes returnTo before the new session exists.
            self.session_store.destroy(hash_token(current.token))
        token = self.issue_session(user.id)
        logger.info("User %s signed in", user.id)
        return CallbackResult(
            redirect_to=return_to or self.default_landing_url,
            token=token,
            user=user,
        )

    def login_error_url(self, error: str = LOGIN_ERROR_OAUTH_FAILED) -> str:
        return f"{self.login_url}?{urlencode({'error': error})}"

    # --- session primitives ---

    def issue_session(self, user_id: str, payload: Optional[dict] = None) -> str:
        """Persist a new authenticated session and return the raw token for the cookie."""
        token = new_session_token()
        data = dict(payload or {})
        data[SESSION_KEY_USER_ID] = user_id
        self.session_store.create(hash_token(token), data, self._now() + self.session_ttl)
        return token

    def load_user_for_session(self, token: Optional[str]) -> Optional[UserProfile]:
        return self.resolve_session(token).user

    def resolve_session(self, token: Optional[str]) -> ResolvedSession:
        """Resolve a cookie token. Never raises; unknown, expired or broken sessions are anonymous."""
        if not token:
            return anonymous()
        digest = hash_token(token)
        try:
            stored = self.session_store.get(digest)
        except DependencyUnavailable:
            logger.warning("Session store unavailable; serving request as anonymous")
            return anonymous(degraded=True)
        if stored is None:
            return anonymous()

        now = self._now()
        if stored.expiry is not None and stored.expiry <= now:
            self._discard(digest)
            return anonymous()

        payload = dict(stored.data or {})
        user_id = payload.pop(SESSION_KEY_USER_ID, None)
        if not user_id:
            return ResolvedSession(token=token, payload=payload, expiry=stored.expiry)

        try:
            user = self.identity_store.get(user_id)
        except DependencyUnavailable:
            logger.warning("Identity store unavailable; serving request as anonymous")
            return anonymous(degraded=True)
        if user is None:
            logger.info("Session points at missing user %s; serving request as anonymous", user_id)
            return ResolvedSession(token=token, payload=payload, expiry=stored.expiry)

        expiry = now + self.session_ttl
        try:
            self.session_store.touch(digest, expiry)
        except DependencyUnavailable:
            logger.warning("Session store unavailable while extending expiry; serving request as anonymous")
            return anonymous(degraded=True)
        return ResolvedSession(token=token, user=user, payload=payload, expiry=expiry)

    def get_status(self, resolved: ResolvedSession) -> dict:
        return {
            "authenticated": resolved.authenticated,
            "user": serialize_user(resolved.user) if resolved.user else None,
        }

    def logout(self, resolved: ResolvedSession) -> None:
        """Destroy the backing session row if any. Calling it while anonymous is a no-op.

        A degraded session may still have a live row we could not see, so the
        caller gets DependencyUnavailable and keeps its cookie.
        """
        if resolved.degraded:
            raise DependencyUnavailable()
        if not resolved.token:
            return
        self.session_store.destroy(hash_token(resolved.token))
        if resolved.user is not None:
            logger.info("User %s signed out", resolved.user.id)

    # --- helpers ---

    def safe_return_to(self, value: Optional[str]) -> Optional[str]:
        """Accept relative paths, or absolute URLs on an allowed frontend origin."""
        if not value:
            return None
        value = value.strip()
        if "\\" in value or any(ch in value for ch in "\r\n"):
            return None
        parts = urlsplit(value)
        if not parts.scheme and not parts.netloc:
            if value.startswith("/") and not value.startswith("//"):
                return value
            return None
        if parts.scheme in ("http", "https") and parts.netloc:
            if f"{parts.scheme}://{parts.netloc}" in self.allowed_origins:
                return value
        return None

    def _discard(self, digest: str) -> None:
        try:
            self.session_store.destroy(digest)
        except DependencyUnavailable:
            logger.warning("Could not remove expired session")

    def _now(self) -> datetime:
        return self._clock()


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


def hash_token(raw: str) -> str:
    return sha256(raw.encode("utf-8")).hexdigest()


__all__ = ["AuthSessionManager", "hash_token", "new_session_token"]
