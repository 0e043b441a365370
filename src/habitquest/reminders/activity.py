"""Activity tracker: last interaction, rolling sessions, and habit completions.

The tracker owns the live :class:`~habitquest.core.types.ActivityData`
record.  Callers get deep-copied snapshots; the scheduler mutates the
record through :meth:`ActivityTracker.transact` while the tracker's lock
is held.
"""

from __future__ import annotations

import datetime as dt
import logging
import threading
from typing import Callable, TypeVar

from habitquest.core.defaults import SESSION_WINDOW_HOURS
from habitquest.core.errors import ReminderError
from habitquest.core.time import local_now, within_window
from habitquest.core.types import ActivityData
from habitquest.reminders.persistence import StatePersister

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ActivityTracker:
    """Thread-safe owner of the activity record.

    Every mutation is persisted before the lock is released.  Persistence
    failures are logged and swallowed: the in-memory record stays
    authoritative until the next successful write.

    Args:
        persister: Where to write the record after each mutation.  ``None``
            keeps the tracker purely in memory.
        clock: Returns the current aware local time.
        session_window_hours: Age beyond which session marks are pruned.
    """

    def __init__(
        self,
        persister: StatePersister | None = None,
        *,
        clock: Callable[[], dt.datetime] = local_now,
        session_window_hours: int = SESSION_WINDOW_HOURS,
    ) -> None:
        self._persister = persister
        self._clock = clock
        self._session_window = dt.timedelta(hours=session_window_hours)
        self._lock = threading.Lock()
        self._data = ActivityData(last_activity=clock())

    def snapshot(self) -> ActivityData:
        """Deep copy of the current record."""
        with self._lock:
            return self._data.model_copy(deep=True)

    def replace(self, data: ActivityData) -> None:
        """Swap in a loaded record without persisting it again."""
        with self._lock:
            self._data = data.model_copy(deep=True)

    def record_activity(self) -> dt.datetime:
        """Mark the user as active now and prune stale session marks.

        Returns:
            The timestamp that was recorded.
        """
        now = self._clock()
        with self._lock:
            self._data.last_activity = now
            self._data.daily_sessions.append(now)
            self._data.daily_sessions = [
                s for s in self._data.daily_sessions
                if within_window(s, now, self._session_window)
            ]
            self._save_locked()
        return now

    def record_habit_completion(self, habit_id: str) -> dt.datetime:
        """Store now as the last completion time of *habit_id*.

        Raises:
            ValueError: If *habit_id* is empty or whitespace.
        """
        if not habit_id or not habit_id.strip():
            raise ValueError("habit_id must not be empty")
        now = self._clock()
        with self._lock:
            self._data.habit_completions[habit_id] = now
            self._save_locked()
        return now

    def transact(self, fn: Callable[[ActivityData], tuple[T, bool]]) -> T:
        """Run *fn* on the live record under the lock.

        *fn* returns ``(result, dirty)``; the record is persisted before the
        lock is released when ``dirty`` is true.
        """
        with self._lock:
            result, dirty = fn(self._data)
            if dirty:
                self._save_locked()
            return result

    def _save_locked(self) -> None:
        if self._persister is None:
            return
        try:
            self._persister.save_activity(self._data)
        except ReminderError as exc:
            logger.warning("Could not persist activity data: %s", exc)
