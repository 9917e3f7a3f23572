"""Per-request session resolution and cookie bookkeeping."""

from __future__ import annotations

from flask import current_app, g, request

from soul_log.core.auth.cookies import SessionCookie
from soul_log.core.auth.session_models import ResolvedSession, anonymous
from soul_log.core.auth.session_services import AuthSessionManager


def get_auth_manager() -> AuthSessionManager:
    return current_app.extensions["auth_session_manager"]


def get_session_cookie() -> SessionCookie:
    return current_app.extensions["session_cookie"]


def current_session() -> ResolvedSession:
    """Resolve the request's cookie once; later calls reuse the result."""
    if "auth_session" not in g:
        token = get_session_cookie().read(request)
        g.auth_session = get_auth_manager().resolve_session(token)
    return g.auth_session


def set_session_token(token: str) -> None:
    g.auth_cookie_token = token


def end_session() -> None:
    g.auth_session = anonymous()
    g.auth_cookie_token = None


def sync_session_cookie(response):
    """after_request hook: write, refresh or clear the session cookie."""
    cookie = get_session_cookie()
    if "auth_cookie_token" in g:
        if g.auth_cookie_token:
            cookie.write(response, g.auth_cookie_token)
        else:
            cookie.clear(response)
        return response

    resolved = g.get("auth_session")
    if resolved is None:
        return response
    if resolved.authenticated and resolved.token:
        cookie.write(response, resolved.token)
    elif resolved.token is None and not resolved.degraded and cookie.present(request):
        cookie.clear(response)
    return response


def reset_request_session() -> None:
    """before_request hook: forget state cached by an earlier request in the same app context."""
    g.pop("auth_session", None)
    g.pop("auth_cookie_token", None)


def init_session_handling(app, manager: AuthSessionManager) -> None:
    app.extensions["auth_session_manager"] = manager
    app.extensions["session_cookie"] = SessionCookie.from_config(app.config)
    app.before_request(reset_request_session)
    app.after_request(sync_session_cookie)


__all__ = [
    "current_session",
    "end_session",
    "get_auth_manager",
    "get_session_cookie",
    "init_session_handling",
    "reset_request_session",
    "set_session_token",
    "sync_session_cookie",
]
