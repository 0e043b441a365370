"""Reminder decision policy: pure inactivity-duration threshold.

One tick of the scheduler runs :func:`evaluate_tick` against the current
config and the live activity record:

1. Disabled config -> skip, activity untouched.
2. Local hour outside ``[reminder_start_hour, reminder_end_hour]`` -> skip.
3. New local date since ``last_notification_date`` (or none yet) -> reset
   the daily counter and stamp the date, even if the tick then skips.
4. Daily counter at ``max_reminders_per_day`` -> skip.
5. Whole hours since ``last_activity`` >= threshold -> count and notify.
6. Otherwise skip.

The counter increment happens here, before any dispatch, so a failed
notification still consumes the daily quota.
"""

from __future__ import annotations

import datetime as dt

from habitquest.core.defaults import DEFAULT_INACTIVITY_THRESHOLD_HOURS
from habitquest.core.time import is_new_local_date, whole_hours_between
from habitquest.core.types import ActivityData, Decision, NotificationConfig, TickOutcome


def evaluate_tick(
    config: NotificationConfig,
    activity: ActivityData,
    now: dt.datetime,
    *,
    inactivity_threshold_hours: int = DEFAULT_INACTIVITY_THRESHOLD_HOURS,
) -> tuple[TickOutcome, bool]:
    """Decide whether this tick notifies, updating *activity* in place.

    Args:
        config: Active notification policy.
        activity: Live activity record (mutated: day rollover and counter).
        now: Current aware local time; its ``hour`` and ``date()`` are the
            local wall-clock values the policy uses.
        inactivity_threshold_hours: Minimum whole hours since the last
            activity before a reminder fires.

    Returns:
        ``(outcome, dirty)`` where *dirty* says whether *activity* changed
        and must be persisted.
    """
    if not config.enabled:
        return _skip(now, Decision.DISABLED, activity), False

    if not config.in_active_hours(now.hour):
        return _skip(now, Decision.OUTSIDE_ACTIVE_HOURS, activity), False

    rolled_over = is_new_local_date(activity.last_notification_date, now)
    if rolled_over:
        activity.notifications_sent_today = 0
        activity.last_notification_date = now

    if activity.notifications_sent_today >= config.max_reminders_per_day:
        return _skip(now, Decision.DAILY_QUOTA_REACHED, activity, rolled_over), rolled_over

    hours_inactive = whole_hours_between(activity.last_activity, now)
    if hours_inactive < inactivity_threshold_hours:
        outcome = _skip(now, Decision.RECENTLY_ACTIVE, activity, rolled_over, hours_inactive)
        return outcome, rolled_over

    activity.notifications_sent_today += 1
    outcome = TickOutcome(
        at=now,
        decision=Decision.INACTIVE,
        notify=True,
        day_rolled_over=rolled_over,
        notifications_sent_today=activity.notifications_sent_today,
        hours_inactive=hours_inactive,
    )
    return outcome, True


def _skip(
    now: dt.datetime,
    decision: Decision,
    activity: ActivityData,
    rolled_over: bool = False,
    hours_inactive: int | None = None,
) -> TickOutcome:
    return TickOutcome(
        at=now,
        decision=decision,
        notify=False,
        day_rolled_over=rolled_over,
        notifications_sent_today=activity.notifications_sent_today,
        hours_inactive=hours_inactive,
    )
