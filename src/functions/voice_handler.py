"""Serverless variant of ``POST /voice``; errors are plain text."""

from __future__ import annotations

import logging
from urllib.parse import parse_qs

from functions.gateway import Event, Result, method, query_param, raw_body, result
from integrations.twilio_client import get_twilio_config
from voice.errors import DialerError, ProtocolViolation
from voice.routing import render_voice_response

LOGGER = logging.getLogger(__name__)

TEXT = {"Content-Type": "text/plain"}


def handler(event: Event, context: object | None = None) -> Result:
    try:
        if method(event) != "POST":
            raise ProtocolViolation()
        cfg = get_twilio_config()
        params = parse_qs(raw_body(event))
    except DialerError as exc:
        LOGGER.warning("Voice function failed: %s", exc.detail)
        return result(exc.status_code, TEXT, exc.detail)

    to_values = params.get("To") or []
    destination = ((to_values[0] if to_values else "") or query_param(event, "To") or "").strip()
    twiml = render_voice_response(destination or None, caller_id=cfg.caller_id)
    return result(200, {"Content-Type": "text/xml"}, twiml)
