"""Persistence adapter binding the two reminder documents to a config directory.

Typical layout::

    <config_dir>/notification_config.json
    <config_dir>/activity_data.json

The directory is resolved on every call, so a host whose storage becomes
available later (or moves) is picked up without restarting the service.
"""

from __future__ import annotations

import logging
from pathlib import Path

from habitquest.core.defaults import ACTIVITY_FILENAME, CONFIG_FILENAME
from habitquest.core.paths import ConfigDirectory
from habitquest.core.store import load_document, save_document
from habitquest.core.types import ActivityData, NotificationConfig

logger = logging.getLogger(__name__)


class StatePersister:
    """Reads and writes ``NotificationConfig`` and ``ActivityData`` documents.

    All methods propagate :class:`~habitquest.core.errors.ReminderError`
    subclasses; deciding whether a failure is logged or surfaced is the
    caller's business.
    """

    def __init__(self, directory: ConfigDirectory) -> None:
        self._directory = directory

    def config_path(self) -> Path:
        return self._directory.resolve() / CONFIG_FILENAME

    def activity_path(self) -> Path:
        return self._directory.resolve() / ACTIVITY_FILENAME

    def save_config(self, config: NotificationConfig) -> Path:
        path = save_document(config, self.config_path())
        logger.debug("Saved notification config to %s", path)
        return path

    def save_activity(self, activity: ActivityData) -> Path:
        path = save_document(activity, self.activity_path())
        logger.debug("Saved activity data to %s", path)
        return path

    def load_config(self) -> NotificationConfig | None:
        return load_document(NotificationConfig, self.config_path())

    def load_activity(self) -> ActivityData | None:
        return load_document(ActivityData, self.activity_path())
