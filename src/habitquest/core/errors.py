"""Exception hierarchy for the reminder service.

Every failure the service knows how to recover from is a
:class:`ReminderError`.  Most of them are caught where they occur and
turned into a log entry; only explicit user-initiated calls let them
reach the caller.
"""

from __future__ import annotations

from pathlib import Path


class ReminderError(Exception):
    """Base class for recoverable reminder-service failures."""


class ConfigDirectoryUnresolved(ReminderError):
    """The host could not provide a writable per-user directory.

    Fatal to persistence only; in-memory operation continues.
    """


class PersistenceError(ReminderError):
    """A persisted document could not be read or written."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class DeserializationError(PersistenceError):
    """A persisted document exists but is malformed or fails validation."""


class NotifierDispatchError(ReminderError):
    """The desktop notification could not be delivered."""
