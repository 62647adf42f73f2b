"""The dialer's call session.

``DialerSession`` owns the one device and the at most one connection of a
page load. User actions (``call``, ``answer``, ``hang_up``, ``close``) and
device callbacks both end up in ``dispatch``, which applies
``softphone.state.reduce``.
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any

import httpx

from config.settings import get_settings
from softphone.activity_log import ActivityLog
from softphone.device import DEVICE_EVENTS, DEVICE_OPTIONS, Connection, Device, DeviceFactory
from softphone.links import number_from_url, token_endpoint_for_page
from softphone.state import (
    ActionFailed,
    Cancelled,
    Connected,
    DeviceCreated,
    DeviceErrored,
    Disconnected,
    DialRejected,
    DialStarted,
    Event,
    IncomingReceived,
    InitializeStarted,
    LEG_STATUSES,
    OutgoingConnection,
    Registered,
    SessionState,
    SessionStatus,
    TornDown,
    Unregistered,
    reduce,
)
from softphone.token_client import TokenClient
from voice.errors import DeviceError, DialerError

LOGGER = logging.getLogger(__name__)

EMPTY_DESTINATION_MESSAGE = "Enter a number to dial (E.164, e.g. +14155552671)"


def error_message(error: Any, fallback: str) -> str:
    """Prefer the error's own text, fall back to a generic description."""

    if error is None:
        return fallback
    if isinstance(error, str):
        return error or fallback
    message = getattr(error, "detail", None) or getattr(error, "message", None)
    if not message and isinstance(error, BaseException):
        message = str(error)
    return message or fallback


class DialerSession:
    def __init__(
        self,
        *,
        token_client: TokenClient,
        device_factory: DeviceFactory,
        identity: str | None = None,
        destination: str = "",
        activity_log: ActivityLog | None = None,
    ) -> None:
        self.identity = identity if identity is not None else get_settings().dialer_default_identity
        self.destination = destination
        self.activity_log = activity_log or ActivityLog()
        self.state = SessionState()
        # True while a credential fetch, device setup or dial request is outstanding.
        self.busy = False

        self._token_client = token_client
        self._device_factory = device_factory
        self._device_lock = asyncio.Lock()
        self._hangup_deferred = False

    @classmethod
    def for_page(
        cls,
        page_url: str,
        *,
        device_factory: DeviceFactory,
        token_transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> DialerSession:
        """Session for a dialer page, pre-filling the destination from ``?number=``."""

        settings = get_settings()
        endpoint = token_endpoint_for_page(page_url, settings.dialer_token_endpoint)
        token_client = TokenClient(endpoint, transport=token_transport)
        session = cls(token_client=token_client, device_factory=device_factory, **kwargs)

        number = number_from_url(page_url)
        if number:
            session.destination = number
            session.activity_log.append(f"Pre-filled number from URL: {number}")
        return session

    # State accessors

    @property
    def status(self) -> SessionStatus:
        return self.state.status

    @property
    def status_label(self) -> str:
        return self.state.status.label

    @property
    def device(self) -> Device | None:
        return self.state.device

    @property
    def connection(self) -> Connection | None:
        return self.state.connection

    @property
    def last_error(self) -> str | None:
        return self.state.last_error

    @property
    def can_call(self) -> bool:
        return not self.busy and self.state.connection is None and self.state.status not in LEG_STATUSES

    @property
    def can_hang_up(self) -> bool:
        return self.state.connection is not None

    def dispatch(self, event: Event) -> SessionState:
        previous = self.state
        self.state = reduce(previous, event)
        if self.state.status is not previous.status:
            LOGGER.debug("session %s -> %s on %s", previous.status.value, self.state.status.value, type(event).__name__)
        return self.state

    # User actions

    async def call(self) -> None:
        destination = self.destination.strip()
        if not destination:
            self.dispatch(DialRejected(EMPTY_DESTINATION_MESSAGE))
            return
        if self.busy:
            LOGGER.info("Ignoring call request while another attempt is outstanding")
            return
        # One leg at a time: hang up or let the current leg end first.
        if self.state.connection is not None or self.state.status in LEG_STATUSES:
            LOGGER.info("Ignoring call request while a call is %s", self.state.status.value)
            return

        self.busy = True
        try:
            try:
                device = await self._ensure_device()
            except DialerError as exc:
                self._fail("Failed to initialize device", error_message(exc, "Unexpected error"))
                return

            self.dispatch(DialStarted())
            try:
                connection = await device.connect({"To": destination, "identity": self.identity})
            except Exception as exc:
                self._fail("Call failed", error_message(exc, "Failed to start call"))
                return

            self.dispatch(OutgoingConnection(connection))
            self.activity_log.append(f"Dialing {destination}")
        finally:
            self.busy = False
            if self._hangup_deferred:
                self._hangup_deferred = False
                self._drop_calls()

    def answer(self) -> None:
        connection = self.state.connection
        if self.state.status is not SessionStatus.INCOMING or connection is None:
            return
        connection.accept()
        self.activity_log.append("Incoming call accepted")

    def hang_up(self) -> None:
        if self.busy:
            self._hangup_deferred = True
            self.activity_log.append("Hang up requested; waiting for the call attempt to settle")
            return
        self._drop_calls()

    def close(self) -> None:
        """Release the device so Twilio unregisters the endpoint."""

        device = self.state.device
        if device is not None:
            device.destroy()
            self.activity_log.append("Twilio Device destroyed")
        self.dispatch(TornDown())

    async def __aenter__(self) -> DialerSession:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    # Internals

    def _fail(self, prefix: str, message: str) -> None:
        self.dispatch(ActionFailed(message))
        self.activity_log.append(f"{prefix}: {message}")

    def _drop_calls(self) -> None:
        connection = self.state.connection
        device = self.state.device
        if connection is not None:
            connection.disconnect()
            self.activity_log.append("Call disconnected manually")
        # Also covers a connect that raced the manual hang up.
        if device is not None:
            device.disconnect_all()

    async def _ensure_device(self) -> Device:
        async with self._device_lock:
            if self.state.device is not None:
                return self.state.device

            self.dispatch(InitializeStarted())
            token = await self._token_client.fetch(self.identity)

            try:
                device = await self._device_factory(token, dict(DEVICE_OPTIONS))
            except Exception as exc:
                raise DeviceError(error_message(exc, "Failed to create device")) from exc

            for name in DEVICE_EVENTS:
                device.on(name, partial(self._on_device_event, name))
            self.dispatch(DeviceCreated(device))
            self.activity_log.append("Twilio Device created")

            try:
                await device.register()
            except Exception as exc:
                device.destroy()
                self.dispatch(TornDown())
                raise DeviceError(error_message(exc, "Device registration failed")) from exc
            return device

    def _on_device_event(self, name: str, payload: Any = None, *_: Any) -> None:
        """Single entry point for every device callback."""

        if name == "registered":
            self.activity_log.append("Device registered with Twilio")
            self.dispatch(Registered())
        elif name == "unregistered":
            self.activity_log.append("Device unregistered")
            self.dispatch(Unregistered())
        elif name == "error":
            message = error_message(payload, DeviceError.default_detail)
            self.activity_log.append(f"Device error: {message}")
            self.dispatch(DeviceErrored(message))
        elif name == "incoming":
            self.activity_log.append("Incoming call received")
            self.dispatch(IncomingReceived(payload))
        elif name == "cancel":
            self.activity_log.append("Incoming call cancelled")
            self.dispatch(Cancelled())
        elif name == "connect":
            parameters = getattr(payload, "parameters", None) or {}
            self.activity_log.append(f"Call connected ({parameters.get('call_sid') or 'no SID'})")
            self.dispatch(Connected(payload))
        elif name == "disconnect":
            self.activity_log.append("Call disconnected")
            self.dispatch(Disconnected())
        else:
            LOGGER.debug("Ignoring device event %s", name)
