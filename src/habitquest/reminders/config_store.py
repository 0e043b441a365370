"""Configuration store: the current notification policy, replaced as a whole."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from habitquest.core.types import NotificationConfig
from habitquest.reminders.persistence import StatePersister

logger = logging.getLogger(__name__)


class ConfigurationStore:
    """Thread-safe holder of the active :class:`NotificationConfig`.

    The config model is frozen, so handing out the current instance is
    safe; replacing it is the only way to change policy.
    """

    def __init__(
        self,
        persister: StatePersister | None = None,
        config: NotificationConfig | None = None,
    ) -> None:
        self._persister = persister
        self._lock = threading.Lock()
        self._config = config or NotificationConfig()

    def get(self) -> NotificationConfig:
        with self._lock:
            return self._config

    @contextmanager
    def locked(self) -> Iterator[NotificationConfig]:
        """Hold the config lock for the duration of a multi-record evaluation."""
        with self._lock:
            yield self._config

    def replace(self, config: NotificationConfig) -> None:
        """Install *config* and persist it.

        The in-memory swap happens first and is never rolled back.

        Raises:
            ReminderError: If the directory cannot be resolved or the
                document cannot be written.
        """
        with self._lock:
            self._config = config
            if self._persister is not None:
                self._persister.save_config(config)
        logger.info(
            "Notification config updated (enabled=%s, hours=%d-%d, max_per_day=%d)",
            config.enabled, config.reminder_start_hour,
            config.reminder_end_hour, config.max_reminders_per_day,
        )

    def load(self, config: NotificationConfig) -> None:
        """Swap in a loaded config without writing it back."""
        with self._lock:
            self._config = config
