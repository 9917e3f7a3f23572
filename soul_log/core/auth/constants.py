"""Session lifecycle constants."""

from __future__ import annotations

# Lifecycle states reported by ResolvedSession.state
SESSION_STATE_ANONYMOUS = "anonymous"
SESSION_STATE_PENDING_CALLBACK = "pending_callback"
SESSION_STATE_AUTHENTICATED = "authenticated"

# Keys inside the persisted session payload
SESSION_KEY_USER_ID = "user_id"
SESSION_KEY_RETURN_TO = "return_to"
SESSION_KEY_OAUTH_STATE = "oauth_state"

# Providers accepted on /auth/<provider>
PROVIDER_GOOGLE = "google"
SUPPORTED_PROVIDERS = (PROVIDER_GOOGLE,)

# Error indicator appended to the login page after a failed handshake
LOGIN_ERROR_OAUTH_FAILED = "google_oauth_failed"

__all__ = [
    "SESSION_STATE_ANONYMOUS",
    "SESSION_STATE_PENDING_CALLBACK",
    "SESSION_STATE_AUTHENTICATED",
    "SESSION_KEY_USER_ID",
    "SESSION_KEY_RETURN_TO",
    "SESSION_KEY_OAUTH_STATE",
    "PROVIDER_GOOGLE",
    "SUPPORTED_PROVIDERS",
    "LOGIN_ERROR_OAUTH_FAILED",
]
