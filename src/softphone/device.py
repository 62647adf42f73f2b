from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

# SDK options applied to every device the session creates.
DEVICE_OPTIONS: dict[str, Any] = {
    "codec_preferences": ["opus", "pcmu"],
    "log_level": "error",
}

DEVICE_EVENTS = ("registered", "unregistered", "error", "incoming", "cancel", "connect", "disconnect")


class Connection(Protocol):
    """One call leg, inbound or outbound."""

    parameters: dict[str, str]

    def accept(self) -> None: ...

    def disconnect(self) -> None: ...


class Device(Protocol):
    """A registered softphone endpoint."""

    def on(self, event: str, callback: Callable[..., None]) -> None: ...

    async def register(self) -> None: ...

    async def connect(self, params: dict[str, str]) -> Connection: ...

    def disconnect_all(self) -> None: ...

    def destroy(self) -> None: ...


# (token, options) -> device
DeviceFactory = Callable[[str, dict[str, Any]], Awaitable[Device]]
