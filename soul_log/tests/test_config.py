"""Startup configuration validation."""

import pytest

from soul_log import create_app
from soul_log.config import TestingConfig, _database_uri, validate_config
from soul_log.core.errors import ConfigurationError
from soul_log.extensions import _cors_origins

pytestmark = pytest.mark.unit


def _settings(**overrides):
    config = {key: getattr(TestingConfig, key) for key in dir(TestingConfig) if key.isupper()}
    config.update(overrides)
    return config


def test_testing_config_is_complete():
    validate_config(_settings())


def test_missing_settings_are_all_listed():
    with pytest.raises(ConfigurationError) as excinfo:
        validate_config(_settings(GOOGLE_CLIENT_ID="", SESSION_SECRET=None, SQLALCHEMY_DATABASE_URI=None))

    assert excinfo.value.missing == ["GOOGLE_CLIENT_ID", "DATABASE_URL", "SESSION_SECRET"]
    assert "GOOGLE_CLIENT_ID" in str(excinfo.value)


def test_create_app_aborts_without_secrets():
    with pytest.raises(ConfigurationError):
        create_app("testing", config_overrides={"GOOGLE_CLIENT_SECRET": ""})


def test_legacy_postgres_scheme_is_normalised():
    assert _database_uri("postgres://u:p@db/soul") == "postgresql://u:p@db/soul"
    assert _database_uri("sqlite://") == "sqlite://"
    assert _database_uri(None) is None


def test_cors_origins():
    assert _cors_origins({"CORS_ALLOW_ANY_ORIGIN": True}) == "*"
    assert _cors_origins(
        {
            "CORS_ALLOW_ANY_ORIGIN": False,
            "CLIENT_URL": "http://localhost:5173",
            "CORS_ALLOWED_ORIGINS": ["https://soul.example.com"],
        }
    ) == ["http://localhost:5173", "https://soul.example.com"]


@pytest.mark.parametrize("name", ["prod", "staging"])
def test_unknown_environment_aborts(name, monkeypatch):
    with pytest.raises(ConfigurationError) as excinfo:
        create_app(name)
    assert excinfo.value.missing == ["APP_ENV"]

    monkeypatch.setenv("APP_ENV", name)
    with pytest.raises(ConfigurationError):
        create_app()
