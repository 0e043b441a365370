"""Local wall-clock helpers used by the reminder policy.

All reminder timestamps are timezone-aware local datetimes.  Naive inputs
are interpreted as local time so that values loaded from older documents
(or written by hand) still compare cleanly against ``local_now()``.
"""

from __future__ import annotations

from datetime import datetime, timedelta

_SECONDS_PER_HOUR = 3600


def local_now() -> datetime:
    """Return the current time as a timezone-aware local datetime."""
    return datetime.now().astimezone()


def as_local(ts: datetime, reference: datetime | None = None) -> datetime:
    """Express *ts* in the timezone of *reference*.

    Args:
        ts: Timestamp to convert.  Naive values are assumed to be local.
        reference: Optional aware datetime whose ``tzinfo`` is the target.
            Without one, aware values are returned unchanged.

    Returns:
        An aware datetime denoting the same instant as *ts*.
    """
    if ts.tzinfo is None:
        ts = ts.astimezone()
    if reference is not None and reference.tzinfo is not None:
        return ts.astimezone(reference.tzinfo)
    return ts


def whole_hours_between(earlier: datetime, later: datetime) -> int:
    """Number of complete hours from *earlier* to *later* (floored)."""
    delta = as_local(later) - as_local(earlier)
    return int(delta.total_seconds() // _SECONDS_PER_HOUR)


def is_new_local_date(previous: datetime | None, now: datetime) -> bool:
    """True when *previous* is unset or falls on another calendar date than *now*.

    The comparison uses the timezone of *now*, so a marker written shortly
    before midnight in one offset still rolls over correctly after a DST
    change.
    """
    if previous is None:
        return True
    return as_local(previous, now).date() != as_local(now).date()


def within_window(ts: datetime, now: datetime, window: timedelta) -> bool:
    """True when *ts* is no older than *window* relative to *now*."""
    return as_local(now) - as_local(ts) <= window
