from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from softphone.token_client import TokenClient
from voice.errors import TransportError

ENDPOINT = "https://dialer.example/api/token"


def _client(handler) -> TokenClient:
    return TokenClient(ENDPOINT, transport=httpx.MockTransport(handler))


def test_fetch_posts_identity_and_returns_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"token": "jwt-token", "identity": "clickup-agent"})

    token = asyncio.run(_client(handler).fetch("clickup-agent"))

    assert token == "jwt-token"
    assert seen == {"method": "POST", "body": {"identity": "clickup-agent"}}


def test_fetch_surfaces_server_error_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "Twilio environment variables not configured: TWILIO_API_KEY"})

    with pytest.raises(TransportError) as excinfo:
        asyncio.run(_client(handler).fetch("clickup-agent"))

    assert excinfo.value.detail == "Twilio environment variables not configured: TWILIO_API_KEY"


def test_fetch_falls_back_to_status_code():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    with pytest.raises(TransportError) as excinfo:
        asyncio.run(_client(handler).fetch("clickup-agent"))

    assert excinfo.value.detail == "Token request failed (502)"


def test_fetch_wraps_network_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(TransportError) as excinfo:
        asyncio.run(_client(handler).fetch("clickup-agent"))

    assert "Connection refused" in excinfo.value.detail


def test_fetch_rejects_response_without_token():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"identity": "clickup-agent"})

    with pytest.raises(TransportError):
        asyncio.run(_client(handler).fetch("clickup-agent"))
