"""Call session state and the transition function driving it.

``reduce`` is pure: it never touches the device or connection it stores, so
every transition can be checked without a live SDK. Side effects live in
``softphone.session.DialerSession``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class SessionStatus(str, Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    READY = "ready"
    CONNECTING = "connecting"
    ON_CALL = "on-call"
    INCOMING = "incoming"
    ERROR = "error"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


STATUS_LABELS: dict[SessionStatus, str] = {
    SessionStatus.IDLE: "Idle",
    SessionStatus.INITIALIZING: "Initializing device…",
    SessionStatus.READY: "Ready to call",
    SessionStatus.CONNECTING: "Connecting…",
    SessionStatus.ON_CALL: "On call",
    SessionStatus.INCOMING: "Incoming call",
    SessionStatus.ERROR: "Error",
}

# A leg is being set up or is live in these states.
LEG_STATUSES = frozenset({SessionStatus.CONNECTING, SessionStatus.INCOMING, SessionStatus.ON_CALL})


@dataclass(frozen=True)
class SessionState:
    status: SessionStatus = SessionStatus.IDLE
    device: Any = None
    connection: Any = None
    last_error: str | None = None


# Events raised by the session's own actions.


@dataclass(frozen=True)
class DialRejected:
    message: str


@dataclass(frozen=True)
class InitializeStarted:
    pass


@dataclass(frozen=True)
class DeviceCreated:
    device: Any


@dataclass(frozen=True)
class DialStarted:
    pass


@dataclass(frozen=True)
class OutgoingConnection:
    connection: Any


@dataclass(frozen=True)
class ActionFailed:
    message: str


@dataclass(frozen=True)
class TornDown:
    pass


# Events emitted by the device.


@dataclass(frozen=True)
class Registered:
    pass


@dataclass(frozen=True)
class Unregistered:
    pass


@dataclass(frozen=True)
class DeviceErrored:
    message: str


@dataclass(frozen=True)
class IncomingReceived:
    connection: Any


@dataclass(frozen=True)
class Cancelled:
    pass


@dataclass(frozen=True)
class Connected:
    connection: Any


@dataclass(frozen=True)
class Disconnected:
    pass


Event = (
    DialRejected
    | InitializeStarted
    | DeviceCreated
    | DialStarted
    | OutgoingConnection
    | ActionFailed
    | TornDown
    | Registered
    | Unregistered
    | DeviceErrored
    | IncomingReceived
    | Cancelled
    | Connected
    | Disconnected
)


def reduce(state: SessionState, event: Event) -> SessionState:
    """Return the state following ``event``; unknown events leave it unchanged."""

    if isinstance(event, DialRejected):
        return replace(state, last_error=event.message)

    if isinstance(event, InitializeStarted):
        return replace(state, status=SessionStatus.INITIALIZING, last_error=None)

    if isinstance(event, DeviceCreated):
        return replace(state, device=event.device)

    if isinstance(event, DialStarted):
        return replace(state, status=SessionStatus.CONNECTING, last_error=None)

    if isinstance(event, OutgoingConnection):
        # The leg may already have ended before the dial request returned.
        if state.device is None or state.status not in {SessionStatus.CONNECTING, SessionStatus.ON_CALL}:
            return state
        return replace(state, connection=event.connection)

    if isinstance(event, (ActionFailed, DeviceErrored)):
        return replace(state, status=SessionStatus.ERROR, last_error=event.message)

    if isinstance(event, TornDown):
        return replace(state, status=SessionStatus.IDLE, device=None, connection=None)

    if isinstance(event, Registered):
        # Re-registration must not mask a leg in progress, nor one left over from an error.
        if state.status in LEG_STATUSES or state.connection is not None:
            return state
        return replace(state, status=SessionStatus.READY)

    if isinstance(event, Unregistered):
        return state

    if isinstance(event, (IncomingReceived, Connected)):
        if state.device is None:
            return state
        status = SessionStatus.INCOMING if isinstance(event, IncomingReceived) else SessionStatus.ON_CALL
        return replace(state, status=status, connection=event.connection)

    if isinstance(event, (Cancelled, Disconnected)):
        return replace(state, status=SessionStatus.READY, connection=None)

    return state
