"""FastAPI routes for the long-running token server.

- ``/token`` issues Voice access tokens for the browser softphone.
- ``/voice`` is the TwiML application's voice webhook.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import pydantic
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from starlette.formparsers import MultiPartException

from api.dependencies import get_origin_policy
from api.schemas import ErrorResponse, HealthResponse, TokenRequest, TokenResponse
from config.settings import get_settings
from integrations.twilio_client import get_twilio_config
from voice.cors import OriginPolicy
from voice.credentials import build_credential_issuer
from voice.errors import DialerError, ProtocolViolation, ValidationError
from voice.routing import render_voice_response

LOGGER = logging.getLogger(__name__)

router = APIRouter(tags=["voice"])

UNSUPPORTED_METHODS = ["GET", "PUT", "PATCH", "DELETE"]


def error_response(exc: DialerError, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=headers)


async def _read_payload(request: Request) -> dict[str, Any]:
    """Body as a flat dict, from either JSON or form encoding."""

    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        raw = await request.body()
        if not raw.strip():
            return {}
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise ValidationError("Invalid JSON body") from exc
        if not isinstance(payload, dict):
            raise ValidationError("Invalid JSON body")
        return payload

    try:
        form = await request.form()
    except MultiPartException as exc:
        raise ValidationError("Invalid form body") from exc
    return {key: value for key, value in form.items()}


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()


@router.options("/token", status_code=204)
async def token_preflight(
    request: Request,
    policy: OriginPolicy = Depends(get_origin_policy),
) -> Response:
    return Response(status_code=204, headers=policy.headers(request.headers.get("origin")))


@router.post(
    "/token",
    response_model=TokenResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def issue_token(
    request: Request,
    policy: OriginPolicy = Depends(get_origin_policy),
) -> Response:
    cors = policy.headers(request.headers.get("origin"))

    try:
        try:
            payload = TokenRequest.model_validate(await _read_payload(request))
        except pydantic.ValidationError as exc:
            raise ValidationError("Invalid token request") from exc

        identity = payload.identity or get_settings().default_identity
        credential = build_credential_issuer().issue(identity)
    except DialerError as exc:
        LOGGER.warning("Token request failed: %s", exc.detail)
        return error_response(exc, cors)

    body = TokenResponse(token=credential.token, identity=credential.identity)
    return JSONResponse(body.model_dump(), headers=cors)


@router.api_route("/token", methods=UNSUPPORTED_METHODS, include_in_schema=False)
async def token_unsupported(
    request: Request,
    policy: OriginPolicy = Depends(get_origin_policy),
) -> Response:
    return error_response(ProtocolViolation(), policy.headers(request.headers.get("origin")))


@router.post("/voice")
async def voice_webhook(request: Request) -> Response:
    cfg = get_twilio_config()
    payload = await _read_payload(request)

    destination = str(payload.get("To") or request.query_params.get("To") or "").strip()
    twiml = render_voice_response(destination or None, caller_id=cfg.caller_id)
    return Response(content=twiml, media_type="text/xml")


@router.api_route("/voice", methods=[*UNSUPPORTED_METHODS, "OPTIONS", "HEAD"], include_in_schema=False)
async def voice_unsupported() -> Response:
    raise ProtocolViolation()
