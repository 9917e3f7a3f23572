"""Auth HTTP controllers: OAuth login, callback, status and logout."""

from __future__ import annotations

import logging

from flask import Blueprint, abort, jsonify, redirect, request
from pydantic import ValidationError

from soul_log.core.auth.constants import SUPPORTED_PROVIDERS
from soul_log.core.auth.request_session import (
    current_session,
    end_session,
    get_auth_manager,
    set_session_token,
)
from soul_log.core.auth.schemas import CallbackQuery, LoginQuery
from soul_log.core.errors import OAuthCallbackError
from soul_log.core.utils.validation import parse_model
from soul_log.extensions import limiter

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth_api", __name__)


def _require_provider(provider: str) -> None:
    if provider not in SUPPORTED_PROVIDERS:
        abort(404)


@auth_bp.get("/status")
def status():
    return jsonify(get_auth_manager().get_status(current_session()))


@auth_bp.post("/logout")
def logout():
    get_auth_manager().logout(current_session())
    end_session()
    return jsonify({"success": True})


@auth_bp.get("/<provider>")
@limiter.limit("30/minute")
def login(provider: str):
    _require_provider(provider)
    try:
        return_to = LoginQuery.model_validate(request.args).return_to
    except ValidationError:
        return_to = None
    result = get_auth_manager().initiate_login(current_session(), return_to)
    set_session_token(result.token)
    return redirect(result.url)


@auth_bp.get("/<provider>/callback")
@limiter.limit("30/minute")
def callback(provider: str):
    _require_provider(provider)
    query = parse_model(CallbackQuery, request.args)
    manager = get_auth_manager()
    try:
        result = manager.complete_callback(current_session(), query.code, query.state, query.error)
    except OAuthCallbackError as exc:
        logger.warning("OAuth callback for %s rejected: %s", provider, exc)
        return redirect(manager.login_error_url())
    set_session_token(result.token)
    return redirect(result.redirect_to)
