"""Short-lived Twilio Voice access tokens for the browser softphone."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from twilio.jwt.access_token import AccessToken
from twilio.jwt.access_token.grants import VoiceGrant

from config.settings import get_settings
from integrations.twilio_client import TwilioConfig, get_twilio_config
from voice.errors import IssuanceError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credential:
    token: str
    identity: str
    outgoing_application_sid: str
    incoming_allow: bool
    expires_at: datetime


class CredentialIssuer:
    """Signs access tokens carrying a single voice grant.

    The grant allows outbound calls through one TwiML application and
    accepting inbound calls addressed to the identity. The identity is taken
    as given; no uniqueness or authentication check is made.
    """

    def __init__(self, config: TwilioConfig, *, ttl_seconds: int = 3600) -> None:
        self._config = config
        self._ttl = ttl_seconds

    def issue(self, identity: str) -> Credential:
        try:
            token = AccessToken(
                self._config.account_sid,
                self._config.api_key,
                self._config.api_secret,
                identity=identity,
                ttl=self._ttl,
            )
            token.add_grant(
                VoiceGrant(
                    outgoing_application_sid=self._config.twiml_app_sid,
                    incoming_allow=True,
                )
            )
            jwt = token.to_jwt()
        except Exception as exc:
            LOGGER.error("Access token signing failed for identity=%s: %s", identity, exc)
            raise IssuanceError(str(exc) or None) from exc

        LOGGER.info("Issued voice access token identity=%s ttl=%ss", identity, self._ttl)
        return Credential(
            token=jwt.decode("utf-8") if isinstance(jwt, bytes) else str(jwt),
            identity=identity,
            outgoing_application_sid=self._config.twiml_app_sid,
            incoming_allow=True,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=self._ttl),
        )


def build_credential_issuer() -> CredentialIssuer:
    """Issuer for the process-wide configuration; raises ConfigurationError."""

    return CredentialIssuer(get_twilio_config(), ttl_seconds=get_settings().token_ttl_seconds)
