"""Time-stamped record of what the session did, newest first."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import datetime

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    message: str


class ActivityLog:
    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock
        self._entries: list[LogEntry] = []

    def append(self, message: str) -> LogEntry:
        entry = LogEntry(timestamp=self._clock().strftime("%H:%M:%S"), message=message)
        self._entries.insert(0, entry)
        LOGGER.debug("activity: %s", message)
        return entry

    @property
    def entries(self) -> tuple[LogEntry, ...]:
        return tuple(self._entries)

    @property
    def latest(self) -> LogEntry | None:
        return self._entries[0] if self._entries else None

    def __iter__(self) -> Iterator[LogEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self._entries)

    def render(self) -> list[str]:
        return [f"[{entry.timestamp}] {entry.message}" for entry in self._entries]
