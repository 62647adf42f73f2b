"""Serverless variant of ``POST /token``."""

from __future__ import annotations

import json
import logging

from config.settings import get_settings
from functions.gateway import Event, Result, header, method, raw_body, result
from voice.cors import OriginPolicy
from voice.credentials import build_credential_issuer
from voice.errors import DialerError, ProtocolViolation, ValidationError

LOGGER = logging.getLogger(__name__)


def _json(status_code: int, headers: dict[str, str], payload: dict) -> Result:
    return result(status_code, {**headers, "Content-Type": "application/json"}, json.dumps(payload))


def _identity_from(event: Event) -> str | None:
    body = raw_body(event)
    if not body:
        return None
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise ValidationError("Invalid JSON body") from exc
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON body")

    identity = payload.get("identity")
    if identity is not None and not isinstance(identity, str):
        raise ValidationError("Invalid token request")
    return identity


def handler(event: Event, context: object | None = None) -> Result:
    cors = OriginPolicy.from_settings().headers(header(event, "origin"))

    if method(event) == "OPTIONS":
        return result(204, cors)

    try:
        if method(event) != "POST":
            raise ProtocolViolation()
        identity = _identity_from(event) or get_settings().default_identity
        credential = build_credential_issuer().issue(identity)
    except DialerError as exc:
        LOGGER.warning("Token function failed: %s", exc.detail)
        return _json(exc.status_code, cors, {"error": exc.detail})

    return _json(200, cors, {"token": credential.token, "identity": credential.identity})
