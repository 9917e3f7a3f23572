"""Shared extensions for the Soul Log application."""

from pathlib import Path

from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# Persistence and request-guarding primitives
db = SQLAlchemy(session_options={"expire_on_commit": False})
migrate = Migrate()
cors = CORS()
limiter = Limiter(
    key_func=get_remote_address, enabled=True, default_limits=["200 per hour"]
)


def init_extensions(app) -> None:
    """Initialize all extensions with the Flask app."""
    db.init_app(app)
    migrations_dir = Path(__file__).resolve().parent / "migrations"
    migrate.init_app(app, db, directory=str(migrations_dir))
    cors.init_app(
        app,
        origins=_cors_origins(app.config),
        supports_credentials=True,
    )
    limiter.enabled = app.config.get("RATELIMIT_ENABLED", True)
    limiter.default_limits = [app.config.get("RATELIMIT_DEFAULT", "200 per hour")]
    limiter.storage_uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
    limiter.init_app(app)


def _cors_origins(config) -> list[str] | str:
    # With credentials enabled flask-cors echoes the caller's origin for "*".
    if config.get("CORS_ALLOW_ANY_ORIGIN", False):
        return "*"
    origins = [config.get("CLIENT_URL", "")]
    origins.extend(config.get("CORS_ALLOWED_ORIGINS") or [])
    return [origin for origin in origins if origin]
