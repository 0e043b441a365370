"""Reminder service facade.

Bundles the configuration store, activity tracker and scheduler behind one
explicitly constructed object.  The host creates a single instance and
passes it to whatever needs it::

    from habitquest.core.errors import ReminderError
    from habitquest.core.paths import UserConfigDirectory
    from habitquest.notify.notifier import PlyerNotifier
    from habitquest.service import ReminderService

    service = ReminderService(PlyerNotifier(), UserConfigDirectory())
    try:
        service.load_persisted_state()
    except ReminderError:
        logger.warning("Could not load reminder state", exc_info=True)
    service.start()
    ...
    service.record_activity()
    service.record_habit_completion("morning-run")
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import Callable

from habitquest.core.defaults import (
    DEFAULT_INACTIVITY_THRESHOLD_HOURS,
    DEFAULT_TICK_SECONDS,
    REMINDER_BODY,
    REMINDER_ICON,
    REMINDER_TITLE,
)
from habitquest.core.errors import ConfigDirectoryUnresolved, ReminderError
from habitquest.core.paths import ConfigDirectory
from habitquest.core.time import is_new_local_date, local_now
from habitquest.core.types import (
    ActivityData,
    NotificationConfig,
    ServiceStatus,
    TickOutcome,
)
from habitquest.notify.notifier import Notifier
from habitquest.reminders.activity import ActivityTracker
from habitquest.reminders.config_store import ConfigurationStore
from habitquest.reminders.persistence import StatePersister
from habitquest.reminders.scheduler import ReminderScheduler

logger = logging.getLogger(__name__)


class ReminderService:
    """Thread-safe entry point for the external command layer.

    Config and activity are guarded by independent locks, so reading one
    never waits on a write to the other.

    Args:
        notifier: Delivery backend for reminders.
        directory: Resolves where the two JSON documents live.
        clock: Returns the current aware local time.
        tick_seconds: Seconds between scheduler evaluations.
        inactivity_threshold_hours: Inactivity needed before a reminder.
        background_dispatch: Forwarded to :class:`ReminderScheduler`.
    """

    def __init__(
        self,
        notifier: Notifier,
        directory: ConfigDirectory,
        *,
        clock: Callable[[], dt.datetime] = local_now,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
        inactivity_threshold_hours: int = DEFAULT_INACTIVITY_THRESHOLD_HOURS,
        background_dispatch: bool = True,
    ) -> None:
        self._notifier = notifier
        self._directory = directory
        self._clock = clock
        self._persister = StatePersister(directory)
        self._config = ConfigurationStore(self._persister)
        self._activity = ActivityTracker(self._persister, clock=clock)
        self._scheduler = ReminderScheduler(
            self._config,
            self._activity,
            notifier,
            clock=clock,
            tick_seconds=tick_seconds,
            inactivity_threshold_hours=inactivity_threshold_hours,
            background_dispatch=background_dispatch,
        )

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> None:
        """Begin the background tick loop."""
        self._scheduler.start()

    def stop(self, timeout: float | None = None) -> None:
        """Stop the tick loop and wait up to *timeout* seconds for it to exit."""
        self._scheduler.stop(timeout=timeout)

    def tick(self) -> TickOutcome:
        """Run one scheduler evaluation immediately."""
        return self._scheduler.tick()

    def load_persisted_state(self) -> None:
        """Replace defaults with the persisted documents, where present.

        A missing document keeps the corresponding defaults.  Each document
        is applied as soon as it has been read, so a malformed activity file
        does not discard a valid config.

        Raises:
            ConfigDirectoryUnresolved: If the directory cannot be resolved.
            DeserializationError: If a document exists but is malformed.
            PersistenceError: If a document exists but cannot be read.
        """
        config = self._persister.load_config()
        if config is not None:
            self._config.load(config)
            logger.info("Loaded notification config from %s", self._persister.config_path())

        activity = self._persister.load_activity()
        if activity is not None:
            self._activity.replace(activity)
            logger.info("Loaded activity data from %s", self._persister.activity_path())

    # -- facade operations ---------------------------------------------------

    def update_config(self, config: NotificationConfig) -> None:
        """Replace the notification policy and persist it.

        The new policy is in effect before this returns, even when it
        raises.

        Raises:
            ReminderError: If the config could not be persisted.
        """
        try:
            self._config.replace(config)
        except ReminderError as exc:
            logger.error("Notification config applied but not saved: %s", exc)
            raise

    def record_activity(self) -> None:
        """Mark the user as active now."""
        self._activity.record_activity()

    def record_habit_completion(self, habit_id: str) -> None:
        """Record that *habit_id* was completed now.

        Raises:
            ValueError: If *habit_id* is empty.
        """
        self._activity.record_habit_completion(habit_id)
        logger.debug("Recorded completion habit_id=%r", habit_id)

    def send_test_notification(
        self,
        title: str | None = None,
        body: str | None = None,
        icon: str | None = None,
    ) -> None:
        """Send a notification immediately, outside the daily quota.

        Omitted *title*, *body* and *icon* fall back to the reminder text.

        Raises:
            NotifierDispatchError: If delivery fails.
        """
        config = self._config.get()
        self._notifier.show(
            title or REMINDER_TITLE,
            body or REMINDER_BODY,
            icon or REMINDER_ICON,
            sound=config.sound_enabled,
        )

    # -- queries -------------------------------------------------------------

    @property
    def config(self) -> NotificationConfig:
        return self._config.get()

    @property
    def activity(self) -> ActivityData:
        return self._activity.snapshot()

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def status(self) -> ServiceStatus:
        """Current scheduler state and today's reminder count.

        A counter stamped on an earlier local date reads as 0; the stored
        value is only reset by the next tick inside active hours.
        """
        try:
            config_dir: str | None = str(self._directory.resolve())
        except ConfigDirectoryUnresolved:
            config_dir = None
        activity = self._activity.snapshot()
        sent_today = activity.notifications_sent_today
        if is_new_local_date(activity.last_notification_date, self._clock()):
            sent_today = 0
        last = self._scheduler.last_outcome
        return ServiceStatus(
            running=self._scheduler.running,
            state=self._scheduler.state,
            tick_count=self._scheduler.tick_count,
            last_tick_at=last.at if last is not None else None,
            last_decision=last.decision if last is not None else None,
            notifications_sent_today=sent_today,
            config_dir=config_dir,
        )
