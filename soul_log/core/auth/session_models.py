"""Session identity and lifecycle envelopes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from soul_log.core.auth.constants import (
    SESSION_KEY_OAUTH_STATE,
    SESSION_STATE_ANONYMOUS,
    SESSION_STATE_AUTHENTICATED,
    SESSION_STATE_PENDING_CALLBACK,
)
from soul_log.core.users.schemas import UserProfile


@dataclass
class StoredSession:
    """A Session Store row as handed to services (token is the stored digest)."""

    token: str
    data: dict = field(default_factory=dict)
    expiry: Optional[datetime] = None


@dataclass
class ResolvedSession:
    """Outcome of resolving a request's session cookie.

    ``token`` is the raw client token when a live session row backs the
    request. ``degraded`` marks an anonymous result caused by a store failure
    rather than by the absence of a session.
    """

    token: Optional[str] = None
    user: Optional[UserProfile] = None
    payload: dict = field(default_factory=dict)
    expiry: Optional[datetime] = None
    degraded: bool = False

    @property
    def authenticated(self) -> bool:
        return self.user is not None

    @property
    def state(self) -> str:
        if self.user is not None:
            return SESSION_STATE_AUTHENTICATED
        if self.payload.get(SESSION_KEY_OAUTH_STATE):
            return SESSION_STATE_PENDING_CALLBACK
        return SESSION_STATE_ANONYMOUS


@dataclass
class LoginRedirect:
    """Where to send the user agent and which session token the cookie must carry."""

    url: str
    token: str


@dataclass
class CallbackResult:
    redirect_to: str
    token: str
    user: UserProfile


def anonymous(degraded: bool = False) -> ResolvedSession:
    return ResolvedSession(degraded=degraded)


__all__ = ["StoredSession", "ResolvedSession", "LoginRedirect", "CallbackResult", "anonymous"]
