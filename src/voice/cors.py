"""Cross-origin policy for the token and voice endpoints."""

from __future__ import annotations

from dataclasses import dataclass

from config.settings import get_settings

ALLOW_HEADERS = "Content-Type"
ALLOW_METHODS = "POST, OPTIONS"


@dataclass(frozen=True)
class OriginPolicy:
    """Decides which origin to echo in ``Access-Control-Allow-Origin``.

    An origin outside the allow-list gets the first configured entry back
    rather than a rejection. Browsers then refuse the response because the
    echoed origin does not match, so this only narrows what is advertised;
    it is not an access control boundary.
    """

    allowed_origins: tuple[str, ...] = ()

    @classmethod
    def from_settings(cls) -> OriginPolicy:
        return cls(tuple(get_settings().allowed_origins or ()))

    @property
    def allows_any(self) -> bool:
        return not self.allowed_origins or "*" in self.allowed_origins

    def allow_origin(self, request_origin: str | None) -> str:
        if self.allows_any or not request_origin:
            return "*"
        if request_origin in self.allowed_origins:
            return request_origin
        return self.allowed_origins[0]

    def headers(self, request_origin: str | None) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.allow_origin(request_origin),
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
            "Access-Control-Allow-Methods": ALLOW_METHODS,
        }
