"""TwiML for the calling application's voice webhook.

When the softphone dials out, Twilio requests these instructions for the
inbound leg it received from the browser and bridges it to the PSTN number.
"""

from __future__ import annotations

import logging

from twilio.twiml.voice_response import VoiceResponse

LOGGER = logging.getLogger(__name__)

MISSING_DESTINATION_MESSAGE = "Missing destination number."


def build_voice_response(destination: str | None, *, caller_id: str | None = None) -> VoiceResponse:
    response = VoiceResponse()

    if not destination:
        LOGGER.info("Voice webhook without destination; announcing and ending the call")
        response.say(MISSING_DESTINATION_MESSAGE)
        return response

    # callerId is omitted entirely unless an override is configured.
    dial = response.dial(caller_id=caller_id) if caller_id else response.dial()
    dial.number(destination)
    LOGGER.info("Dialing %s (caller id override: %s)", destination, bool(caller_id))
    return response


def render_voice_response(destination: str | None, *, caller_id: str | None = None) -> str:
    return str(build_voice_response(destination, caller_id=caller_id))
