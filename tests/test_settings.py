from __future__ import annotations

from config.settings import REQUIRED_TWILIO_SETTINGS, get_settings


def test_allowed_origins_unset_means_any(configure):
    configure(ALLOWED_ORIGIN=None)
    assert get_settings().allowed_origins is None


def test_allowed_origins_are_split_and_trimmed(configure):
    configure(ALLOWED_ORIGIN=" https://a.example , https://b.example ,")
    assert get_settings().allowed_origins == ["https://a.example", "https://b.example"]


def test_missing_twilio_settings_lists_every_absent_value(configure):
    configure(**{name: None for name in REQUIRED_TWILIO_SETTINGS})
    assert get_settings().missing_twilio_settings() == list(REQUIRED_TWILIO_SETTINGS)


def test_blank_values_count_as_missing(configure):
    configure(TWILIO_API_SECRET="   ")
    assert get_settings().missing_twilio_settings() == ["TWILIO_API_SECRET"]


def test_defaults():
    settings = get_settings()
    assert settings.port == 3001
    assert settings.default_identity == "clickup-user"
    assert settings.dialer_default_identity == "clickup-agent"
    assert settings.twilio_caller_id is None
