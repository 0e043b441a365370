"""Centralised default constants for habitquest.

Every project-wide magic number / string lives here.
Import these instead of hard-coding values in function signatures or CLI options.
"""

from __future__ import annotations

from typing import Final

# ── Scheduling ──
DEFAULT_TICK_SECONDS: Final[int] = 300
DEFAULT_INACTIVITY_THRESHOLD_HOURS: Final[int] = 12
STREAK_PROTECTION_INACTIVITY_HOURS: Final[int] = 20
SESSION_WINDOW_HOURS: Final[int] = 24

# ── Notification policy ──
DEFAULT_REMINDER_START_HOUR: Final[int] = 8
DEFAULT_REMINDER_END_HOUR: Final[int] = 22
DEFAULT_MAX_REMINDERS_PER_DAY: Final[int] = 2
DEFAULT_STREAK_WARNING_THRESHOLD: Final[int] = 3
DEFAULT_STREAK_PROTECTION_HOURS: Final[tuple[int, ...]] = (12, 18, 20)

# ── Paths ──
APP_NAME: Final[str] = "habitquest"
CONFIG_DIR_ENVVAR: Final[str] = "HABITQUEST_CONFIG_DIR"
CONFIG_FILENAME: Final[str] = "notification_config.json"
ACTIVITY_FILENAME: Final[str] = "activity_data.json"

# ── Reminder text ──
REMINDER_TITLE: Final[str] = "🎯 HabitQuest Reminder"
REMINDER_BODY: Final[str] = (
    "Don't forget to check in with your habits today! "
    "Your streaks are waiting for you."
)
REMINDER_ICON: Final[str] = "habitquest-icon"
NOTIFICATION_TIMEOUT_SECONDS: Final[int] = 10
