"""Core data contracts: notification policy, tracked activity, and tick outcomes."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, model_validator

from habitquest.core.defaults import (
    DEFAULT_MAX_REMINDERS_PER_DAY,
    DEFAULT_REMINDER_END_HOUR,
    DEFAULT_REMINDER_START_HOUR,
    DEFAULT_STREAK_PROTECTION_HOURS,
    DEFAULT_STREAK_WARNING_THRESHOLD,
)
from habitquest.core.time import local_now


class NotificationConfig(BaseModel, frozen=True):
    """Scheduling policy for background reminders.

    The record is replaced as a whole, never patched in place.  Field
    names are persisted verbatim (snake_case) in ``notification_config.json``.

    Only ``enabled``, the active-hours window and ``max_reminders_per_day``
    drive the reminder decision.  ``sound_enabled`` is handed to the
    notifier.  The remaining policy fields are stored and round-tripped but
    not consulted by any decision:

    - ``streak_reminders``, ``random_reminders``
    - ``streak_warning_threshold``
    - ``intelligent_timing``, ``adaptive_frequency``
    - ``streak_protection_hours``
    """

    enabled: bool = Field(default=True, description="Master switch; the scheduler is a no-op when False.")
    streak_reminders: bool = Field(default=True, description="Reserved policy flag.")
    random_reminders: bool = Field(default=True, description="Reserved policy flag.")
    reminder_start_hour: int = Field(
        default=DEFAULT_REMINDER_START_HOUR, ge=0, le=23,
        description="First local hour (inclusive) in which reminders may fire.",
    )
    reminder_end_hour: int = Field(
        default=DEFAULT_REMINDER_END_HOUR, ge=0, le=23,
        description="Last local hour (inclusive) in which reminders may fire.",
    )
    max_reminders_per_day: int = Field(
        default=DEFAULT_MAX_REMINDERS_PER_DAY, ge=0,
        description="Hard cap on reminders per local calendar day.",
    )
    streak_warning_threshold: int = Field(
        default=DEFAULT_STREAK_WARNING_THRESHOLD, ge=0,
        description="Reserved streak-risk threshold.",
    )
    sound_enabled: bool = Field(default=False, description="Passed through to the notifier.")
    intelligent_timing: bool = Field(default=True, description="Reserved policy flag.")
    adaptive_frequency: bool = Field(default=True, description="Reserved policy flag.")
    streak_protection_hours: list[int] = Field(
        default_factory=lambda: list(DEFAULT_STREAK_PROTECTION_HOURS),
        description="Reserved candidate hours for streak-protection reminders.",
    )

    @model_validator(mode="after")
    def _check_invariants(self) -> NotificationConfig:
        if self.reminder_start_hour > self.reminder_end_hour:
            raise ValueError(
                f"reminder_start_hour ({self.reminder_start_hour}) must not be "
                f"after reminder_end_hour ({self.reminder_end_hour})"
            )
        bad = [h for h in self.streak_protection_hours if not 0 <= h <= 23]
        if bad:
            raise ValueError(f"streak_protection_hours out of range 0-23: {bad}")
        return self

    def in_active_hours(self, hour: int) -> bool:
        return self.reminder_start_hour <= hour <= self.reminder_end_hour


class ActivityData(BaseModel):
    """Tracked user activity and today's reminder bookkeeping.

    Mutated in place by :class:`~habitquest.reminders.activity.ActivityTracker`
    while it holds its lock; everyone else only sees deep copies.

    ``habit_completions`` keeps the most recent completion per habit id and
    is never pruned.
    """

    last_activity: datetime = Field(default_factory=local_now, description="Most recent recorded interaction.")
    daily_sessions: list[datetime] = Field(
        default_factory=list,
        description="Activity marks from the trailing 24 hours.",
    )
    habit_completions: dict[str, datetime] = Field(
        default_factory=dict,
        description="Last completion time per habit id.",
    )
    notifications_sent_today: int = Field(default=0, ge=0, description="Reminders sent on the current local date.")
    last_notification_date: datetime | None = Field(
        default=None,
        description="Marks the local date the counter belongs to.",
    )


class SchedulerState(StrEnum):
    """Logical states of the reminder tick loop."""

    IDLE = "idle"
    EVALUATING = "evaluating"
    NOTIFYING = "notifying"


class Decision(StrEnum):
    """Why a tick did or did not notify."""

    DISABLED = "disabled"
    OUTSIDE_ACTIVE_HOURS = "outside_active_hours"
    DAILY_QUOTA_REACHED = "daily_quota_reached"
    RECENTLY_ACTIVE = "recently_active"
    INACTIVE = "inactive"


class TickOutcome(BaseModel, frozen=True):
    """Result of one scheduler evaluation."""

    at: datetime
    decision: Decision
    notify: bool
    day_rolled_over: bool = False
    notifications_sent_today: int = Field(ge=0)
    hours_inactive: int | None = None


class ServiceStatus(BaseModel, frozen=True):
    """Snapshot of the reminder service for status displays."""

    running: bool
    state: SchedulerState
    tick_count: int = Field(ge=0)
    last_tick_at: datetime | None = None
    last_decision: Decision | None = None
    notifications_sent_today: int = Field(ge=0)
    config_dir: str | None = None
