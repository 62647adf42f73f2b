"""Domain-specific exceptions shared by the voice backend and the dialer client.

Each error carries the HTTP status it maps to at a request boundary.
"""

from __future__ import annotations


class DialerError(Exception):
    status_code: int = 500
    default_detail: str = "Dialer error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.default_detail)
        self.detail = detail or self.default_detail


class ConfigurationError(DialerError):
    """Required provider settings are absent.

    ``missing`` always lists every absent setting, never just the first.
    """

    status_code = 500
    default_detail = "Twilio environment variables not configured"

    def __init__(self, missing: list[str] | tuple[str, ...]) -> None:
        self.missing = list(missing)
        super().__init__(f"{self.default_detail}: {', '.join(self.missing)}")


class IssuanceError(DialerError):
    status_code = 500
    default_detail = "Failed to create access token"


class ValidationError(DialerError):
    status_code = 400
    default_detail = "Invalid request"


class TransportError(DialerError):
    status_code = 502
    default_detail = "Token request failed"


class DeviceError(DialerError):
    status_code = 500
    default_detail = "Unknown Twilio error"


class ProtocolViolation(DialerError):
    status_code = 405
    default_detail = "Method Not Allowed"
