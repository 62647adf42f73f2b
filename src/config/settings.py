"""Application-wide configuration loading and validation."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Environment names of the values without which no credential can be issued.
REQUIRED_TWILIO_SETTINGS: tuple[str, ...] = (
    "TWILIO_ACCOUNT_SID",
    "TWILIO_API_KEY",
    "TWILIO_API_SECRET",
    "TWILIO_TWIML_APP_SID",
)


class Settings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(default="INFO")
    port: int = Field(default=3001, description="Listen port of the token server.")

    # Token issuance
    default_identity: str = Field(
        default="clickup-user",
        description="Identity used when a token request does not name one.",
    )
    token_ttl_seconds: int = Field(default=3600, ge=60, le=24 * 3600)

    # Twilio (Voice)
    twilio_account_sid: str | None = Field(default=None)
    twilio_api_key: str | None = Field(default=None)
    twilio_api_secret: str | None = Field(default=None)
    twilio_twiml_app_sid: str | None = Field(default=None)
    twilio_caller_id: str | None = Field(default=None, description="E.164, e.g. +1415...")

    # CORS
    allowed_origin: str | None = Field(
        default=None,
        description="Comma-separated origin allow-list. Unset means any origin.",
    )

    # Dialer client
    dialer_token_endpoint: str | None = Field(
        default=None,
        description="Token endpoint used by the dialer client (e.g. https://dialer.example/api/token).",
    )
    dialer_default_identity: str = Field(default="clickup-agent")

    @field_validator(
        "twilio_account_sid",
        "twilio_api_key",
        "twilio_api_secret",
        "twilio_twiml_app_sid",
        "twilio_caller_id",
        "allowed_origin",
        "dialer_token_endpoint",
    )
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        return value or None

    @property
    def allowed_origins(self) -> list[str] | None:
        """Parsed allow-list, or ``None`` when every origin is permitted."""

        if not self.allowed_origin:
            return None
        origins = [origin.strip() for origin in self.allowed_origin.split(",")]
        return [origin for origin in origins if origin] or None

    def missing_twilio_settings(self) -> list[str]:
        return [name for name in REQUIRED_TWILIO_SETTINGS if not getattr(self, name.lower())]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
