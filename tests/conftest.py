from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = REPO_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

TWILIO_ENV = {
    "TWILIO_ACCOUNT_SID": "AC" + "0" * 32,
    "TWILIO_API_KEY": "SK" + "1" * 32,
    "TWILIO_API_SECRET": "test-api-secret",
    "TWILIO_TWIML_APP_SID": "AP" + "2" * 32,
}

OPTIONAL_ENV = (
    "TWILIO_CALLER_ID",
    "ALLOWED_ORIGIN",
    "DEFAULT_IDENTITY",
    "DIALER_TOKEN_ENDPOINT",
    "DIALER_DEFAULT_IDENTITY",
    "TOKEN_TTL_SECONDS",
)


@pytest.fixture(autouse=True)
def twilio_env(monkeypatch: pytest.MonkeyPatch):
    """Complete Twilio configuration; individual tests remove or add values."""

    from config.settings import get_settings

    for key, value in TWILIO_ENV.items():
        monkeypatch.setenv(key, value)
    for key in OPTIONAL_ENV:
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def configure(monkeypatch: pytest.MonkeyPatch):
    """Set (or, with ``None``, unset) environment values and reload settings."""

    from config.settings import get_settings

    def _configure(**env: str | None) -> None:
        for key, value in env.items():
            if value is None:
                monkeypatch.delenv(key, raising=False)
            else:
                monkeypatch.setenv(key, value)
        get_settings.cache_clear()

    return _configure


@pytest.fixture(scope="session")
def app():
    import importlib

    # Settings are read per request, so one import serves every test.
    main = importlib.import_module("main")
    return main.app


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
