"""Application configuration for Soul Log."""

from __future__ import annotations

import os
from typing import Dict, Type

from dotenv import load_dotenv
from sqlalchemy.engine.url import make_url

from soul_log.core.errors import ConfigurationError

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def _split_origins(raw: str | None) -> list[str]:
    return [item.strip().rstrip("/") for item in (raw or "").split(",") if item.strip()]


def _engine_options_from_uri(uri: str | None) -> dict:
    if not uri:
        return {"pool_pre_ping": True}
    url = make_url(uri)
    # Always keep pool_pre_ping, vary connect_args by dialect.
    if url.get_backend_name() == "sqlite":
        return {"pool_pre_ping": True, "connect_args": {"timeout": 30}}
    if url.get_backend_name() in {"postgresql", "postgres"}:
        timeout = int(os.environ.get("DB_CONNECT_TIMEOUT_SECONDS", "10"))
        return {"pool_pre_ping": True, "connect_args": {"connect_timeout": timeout}}
    return {"pool_pre_ping": True}


def _database_uri(raw: str | None) -> str | None:
    # Hosted Postgres providers still hand out the legacy postgres:// scheme.
    if raw and raw.startswith("postgres://"):
        return "postgresql://" + raw[len("postgres://"):]
    return raw


class BaseConfig:
    """Base configuration loaded for all environments."""

    ENV = "development"
    SESSION_SECRET = os.environ.get("SESSION_SECRET")
    SECRET_KEY = SESSION_SECRET
    SQLALCHEMY_DATABASE_URI = _database_uri(os.environ.get("DATABASE_URL"))
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options_from_uri(SQLALCHEMY_DATABASE_URI)

    # Frontend origin; default landing and login pages live there.
    CLIENT_URL = os.environ.get("CLIENT_URL", "http://localhost:5173").rstrip("/")
    CORS_ALLOWED_ORIGINS = _split_origins(os.environ.get("CORS_ALLOWED_ORIGINS"))
    CORS_ALLOW_ANY_ORIGIN = _flag("CORS_ALLOW_ANY_ORIGIN", "true")

    AUTH_COOKIE_NAME = "soul_log.sid"
    AUTH_COOKIE_SECURE = _flag("AUTH_COOKIE_SECURE", "false")
    AUTH_COOKIE_SAMESITE = "Lax"
    AUTH_SESSION_TTL_DAYS = int(os.environ.get("AUTH_SESSION_TTL_DAYS", "7"))

    # Google OAuth login
    GOOGLE_CLIENT_ID = os.environ.get("GOOGLE_CLIENT_ID", "")
    GOOGLE_CLIENT_SECRET = os.environ.get("GOOGLE_CLIENT_SECRET", "")
    GOOGLE_CALLBACK_URL = os.environ.get(
        "GOOGLE_CALLBACK_URL",
        "http://localhost:4000/auth/google/callback",
    )
    GOOGLE_SCOPES = ["openid", "profile", "email"]
    OAUTH_HTTP_TIMEOUT_SECONDS = int(os.environ.get("OAUTH_HTTP_TIMEOUT_SECONDS", "10"))

    RATELIMIT_DEFAULT = "200/hour"
    RATELIMIT_STORAGE_URI = os.environ.get("REDIS_URL", "memory://")
    RATELIMIT_ENABLED = _flag("RATELIMIT_ENABLED", "true")

    # (config key, environment variable) pairs required at startup.
    REQUIRED_SETTINGS = (
        ("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_ID"),
        ("GOOGLE_CLIENT_SECRET", "GOOGLE_CLIENT_SECRET"),
        ("SQLALCHEMY_DATABASE_URI", "DATABASE_URL"),
        ("SESSION_SECRET", "SESSION_SECRET"),
    )


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"


class TestingConfig(BaseConfig):
    TESTING = True
    ENV = "testing"
    SESSION_SECRET = "testing-session-secret"
    SECRET_KEY = SESSION_SECRET
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite://")
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options_from_uri(SQLALCHEMY_DATABASE_URI)
    GOOGLE_CLIENT_ID = "test-client-id"
    GOOGLE_CLIENT_SECRET = "test-client-secret"
    GOOGLE_CALLBACK_URL = "http://localhost/auth/google/callback"
    CLIENT_URL = "http://localhost:5173"
    RATELIMIT_ENABLED = False


class ProductionConfig(BaseConfig):
    ENV = "production"
    AUTH_COOKIE_SECURE = True
    AUTH_COOKIE_SAMESITE = "Lax"


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    # CI pipelines set APP_ENV=ci; map to testing defaults.
    "ci": TestingConfig,
}


def validate_config(config) -> None:
    """Fail fast when required settings are missing."""
    missing = [env_name for key, env_name in config.get("REQUIRED_SETTINGS", ()) if not config.get(key)]
    if missing:
        raise ConfigurationError(
            "Missing required configuration: " + ", ".join(missing),
            missing=missing,
        )
