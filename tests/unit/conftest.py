"""
Unit test configuration.

Patches dotenv so pydantic-settings never reads the project's real .env file
during unit tests, and clears the service's env vars so defaults are
predictable. Tests control config exclusively through monkeypatch.setenv().
"""

import pytest

_SERVICE_ENV_VARS = (
    "ENV",
    "APP_NAME",
    "CORS_ORIGINS",
    "DOCS_URL",
    "CAPTCHA_SECRET",
    "CAPTCHA_VERIFY_URL",
    "CAPTCHA_TIMEOUT_SECONDS",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "SENTRY_DSN",
)


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all unit tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in _SERVICE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch
