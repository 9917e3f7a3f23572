"""Reusable decorators for controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from flask import jsonify

from soul_log.core.auth.request_session import current_session
from soul_log.core.errors import DependencyUnavailable

F = TypeVar("F", bound=Callable)


def login_required(fn: F) -> F:
    """Reject anonymous callers with 401, or 503 when the session store is down."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        resolved = current_session()
        if resolved.degraded:
            raise DependencyUnavailable()
        if not resolved.authenticated:
            return jsonify({"ok": False, "error": "unauthorized"}), 401
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_user_id() -> str:
    resolved = current_session()
    if resolved.user is None:
        raise RuntimeError("current_user_id() called outside a login_required view")
    return resolved.user.id
