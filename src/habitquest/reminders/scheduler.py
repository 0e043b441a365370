"""Background reminder scheduler: a tick loop on a daemon thread.

Every ``tick_seconds`` the loop wakes up, evaluates the notification
policy against tracked activity, and, when the decision is positive,
hands a reminder to the notifier.  The loop waits on a
:class:`threading.Event` between ticks so :meth:`ReminderScheduler.stop`
takes effect immediately.

Lock order inside a tick is always config, then activity.  Both locks are
released before the notifier is called.
"""

from __future__ import annotations

import datetime as dt
import logging
import threading
from typing import Callable

from habitquest.core.defaults import (
    DEFAULT_INACTIVITY_THRESHOLD_HOURS,
    DEFAULT_TICK_SECONDS,
    REMINDER_BODY,
    REMINDER_ICON,
    REMINDER_TITLE,
)
from habitquest.core.errors import NotifierDispatchError
from habitquest.core.time import local_now
from habitquest.core.types import SchedulerState, TickOutcome
from habitquest.notify.notifier import Notifier
from habitquest.reminders.activity import ActivityTracker
from habitquest.reminders.config_store import ConfigurationStore
from habitquest.reminders.policy import evaluate_tick

logger = logging.getLogger(__name__)


class ReminderScheduler:
    """Periodically decides whether to send a habit reminder.

    Args:
        config_store: Source of the active notification policy.
        tracker: Owner of the activity record the policy reads and updates.
        notifier: Delivery backend for reminders.
        clock: Returns the current aware local time.
        tick_seconds: Seconds between evaluations.
        inactivity_threshold_hours: Whole hours of inactivity required
            before a reminder fires.
        background_dispatch: Deliver reminders on a separate daemon thread
            so a slow notifier never delays the next tick.  Tests turn this
            off to observe delivery synchronously.
    """

    def __init__(
        self,
        config_store: ConfigurationStore,
        tracker: ActivityTracker,
        notifier: Notifier,
        *,
        clock: Callable[[], dt.datetime] = local_now,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
        inactivity_threshold_hours: int = DEFAULT_INACTIVITY_THRESHOLD_HOURS,
        background_dispatch: bool = True,
    ) -> None:
        if tick_seconds <= 0:
            raise ValueError(f"tick_seconds must be positive, got {tick_seconds}")
        self._config_store = config_store
        self._tracker = tracker
        self._notifier = notifier
        self._clock = clock
        self._tick_seconds = tick_seconds
        self._threshold = inactivity_threshold_hours
        self._background_dispatch = background_dispatch

        self._state_lock = threading.Lock()
        self._state = SchedulerState.IDLE
        self._tick_count = 0
        self._last_outcome: TickOutcome | None = None

        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    # -- state ---------------------------------------------------------------

    @property
    def state(self) -> SchedulerState:
        with self._state_lock:
            return self._state

    @property
    def tick_count(self) -> int:
        with self._state_lock:
            return self._tick_count

    @property
    def last_outcome(self) -> TickOutcome | None:
        with self._state_lock:
            return self._last_outcome

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _set_state(self, state: SchedulerState) -> None:
        with self._state_lock:
            self._state = state

    # -- evaluation ----------------------------------------------------------

    def tick(self) -> TickOutcome:
        """Run one evaluation and dispatch a reminder if warranted.

        Exposed as a public method so the decision path can be unit-tested
        without waiting on the loop's timer.
        """
        self._set_state(SchedulerState.EVALUATING)
        try:
            now = self._clock()
            with self._config_store.locked() as config:
                sound = config.sound_enabled
                outcome = self._tracker.transact(
                    lambda data: evaluate_tick(
                        config, data, now,
                        inactivity_threshold_hours=self._threshold,
                    )
                )
        except BaseException:
            self._set_state(SchedulerState.IDLE)
            raise

        with self._state_lock:
            self._tick_count += 1
            self._last_outcome = outcome

        logger.debug(
            "Tick at %s: decision=%s sent_today=%d",
            now.isoformat(timespec="seconds"), outcome.decision,
            outcome.notifications_sent_today,
        )

        if not outcome.notify:
            self._set_state(SchedulerState.IDLE)
            return outcome

        logger.info(
            "Sending reminder (%s h inactive, %d sent today)",
            outcome.hours_inactive, outcome.notifications_sent_today,
        )
        self._set_state(SchedulerState.NOTIFYING)
        if self._background_dispatch:
            threading.Thread(
                target=self._deliver, args=(sound,), daemon=True,
                name="habitquest-reminder-dispatch",
            ).start()
        else:
            self._deliver(sound)
        return outcome

    def _deliver(self, sound: bool) -> None:
        try:
            self._notifier.show(REMINDER_TITLE, REMINDER_BODY, REMINDER_ICON, sound=sound)
        except NotifierDispatchError as exc:
            logger.warning("Reminder dispatch failed: %s", exc)
        except Exception:
            logger.warning("Reminder dispatch failed", exc_info=True)
        finally:
            with self._state_lock:
                if self._state is SchedulerState.NOTIFYING:
                    self._state = SchedulerState.IDLE

    # -- loop ----------------------------------------------------------------

    def run(self, stop: threading.Event | None = None) -> None:
        """Blocking tick loop until *stop* (default: the scheduler's own) is set."""
        stop = stop or self._stop
        while not stop.wait(timeout=self._tick_seconds):
            try:
                self.tick()
            except Exception:
                logger.exception("Reminder tick failed; continuing")

    def start(self) -> None:
        """Start :meth:`run` on a daemon thread with a fresh stop signal."""
        if self.running:
            logger.warning("Reminder scheduler already running")
            return
        self._stop = threading.Event()
        self._thread = threading.Thread(
            target=self.run, args=(self._stop,), daemon=True,
            name="habitquest-reminder-scheduler",
        )
        self._thread.start()
        logger.info("Reminder scheduler started (tick every %ss)", self._tick_seconds)

    def stop(self, timeout: float | None = None) -> None:
        """Signal the tick loop to stop and wait for the thread to exit.

        If the thread outlives *timeout*, it stays registered so
        :attr:`running` remains true and :meth:`start` refuses to spawn a
        second loop.
        """
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        if thread is not None and thread.is_alive():
            logger.warning("Reminder scheduler did not stop within %ss", timeout)
            return
        self._thread = None
        logger.info("Reminder scheduler stopped")
