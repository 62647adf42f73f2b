from __future__ import annotations

from dataclasses import dataclass

from config.settings import Settings, get_settings
from voice.errors import ConfigurationError


@dataclass(frozen=True)
class TwilioConfig:
    account_sid: str
    api_key: str
    api_secret: str
    twiml_app_sid: str
    caller_id: str | None = None

    def __repr__(self) -> str:
        # Keeps the API secret out of logs and tracebacks.
        return (
            f"TwilioConfig(account_sid={self.account_sid!r}, api_key={self.api_key!r}, "
            f"twiml_app_sid={self.twiml_app_sid!r}, caller_id={self.caller_id!r})"
        )


def get_twilio_config(settings: Settings | None = None) -> TwilioConfig:
    settings = settings or get_settings()
    missing = settings.missing_twilio_settings()
    if missing:
        raise ConfigurationError(missing)

    return TwilioConfig(
        account_sid=settings.twilio_account_sid,
        api_key=settings.twilio_api_key,
        api_secret=settings.twilio_api_secret,
        twiml_app_sid=settings.twilio_twiml_app_sid,
        caller_id=settings.twilio_caller_id,
    )
