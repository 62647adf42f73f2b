"""HTTP client for the dialer's token endpoint."""

from __future__ import annotations

import logging

import httpx

from voice.errors import TransportError

LOGGER = logging.getLogger(__name__)


class TokenClient:
    def __init__(
        self,
        endpoint: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._timeout = timeout
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def fetch(self, identity: str) -> str:
        """POST the identity and return the signed access token."""

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._endpoint, json={"identity": identity})
        except httpx.HTTPError as exc:
            LOGGER.error("Token request to %s failed: %s", self._endpoint, exc)
            raise TransportError(str(exc) or None) from exc

        if response.is_error:
            raise TransportError(
                _api_error(response) or f"Token request failed ({response.status_code})"
            )

        try:
            token = response.json()["token"]
        except (ValueError, KeyError, TypeError) as exc:
            raise TransportError("Token response did not contain a token") from exc
        if not isinstance(token, str) or not token:
            raise TransportError("Token response did not contain a token")
        return token


def _api_error(response: httpx.Response) -> str | None:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return payload["error"] or None
    return None
