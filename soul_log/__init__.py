"""Soul Log application factory and bootstrap."""

from __future__ import annotations

import os
import traceback
from typing import Optional

from flask import Flask

from soul_log.config import config_by_name, validate_config
from soul_log.core.errors import ConfigurationError, DependencyUnavailable, ValidationFailure
from soul_log.extensions import init_extensions


def create_app(config_name: Optional[str] = None, config_overrides: Optional[dict] = None) -> Flask:
    """Create and configure the Soul Log Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()

    app = Flask(__name__)
    config_cls = config_by_name.get(env_name)
    if config_cls is None:
        raise ConfigurationError(f"Unknown APP_ENV: {env_name}", missing=["APP_ENV"])
    app.config.from_object(config_cls)
    if config_overrides:
        app.config.update(config_overrides)

    # Flask-SQLAlchemy refuses a missing URI, so check settings before extensions.
    validate_config(app.config)

    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_auth_handlers(app)

    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    # Register CLI commands
    from soul_log.scripts.purge_sessions import register_commands

    register_commands(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from soul_log.core.auth.controllers import auth_bp  # local import to avoid circulars
    from soul_log.domains.journal.controllers.journal_api import journal_api_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(journal_api_bp, url_prefix="/api/journal")


def _register_error_handlers(app: Flask) -> None:
    """JSON error responses."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(DependencyUnavailable)
    def _dependency_unavailable(exc: DependencyUnavailable):
        cause = exc.__cause__.__class__.__name__ if exc.__cause__ else "unknown"
        app.logger.warning("Dependency unavailable (%s)", cause)
        return {"ok": False, "error": "dependency_unavailable", "message": exc.message}, 503

    @app.errorhandler(ValidationFailure)
    def _validation_failure(exc: ValidationFailure):
        return {"ok": False, "error": "validation_error", "details": exc.details}, 400

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        if exc.code is not None and exc.code < 400:
            # Routing redirects (trailing slash) are not errors.
            return exc
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        body = {"ok": False, "error": "unexpected_error"}
        if (app.config.get("ENV") or "").lower() == "development":
            body["message"] = str(exc)
            body["traceback"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
        return body, 500


def _register_auth_handlers(app: Flask) -> None:
    """Auth session manager and the session cookie hook."""
    from soul_log.core.auth.request_session import init_session_handling
    from soul_log.core.auth.session_services import AuthSessionManager

    init_session_handling(app, AuthSessionManager.from_config(app.config))
