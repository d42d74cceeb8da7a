"""Eligibility predicates: is it the right local moment to notify a user?

All functions here are pure. They take a user's preferences and a
``LocalClock`` produced by the timezone resolver and never touch the
database or the wall clock.
"""

from collections.abc import Iterator
from datetime import datetime, time, timedelta

import structlog
from pydantic import ValidationError

from core.models.notification_preference import (
    DEFAULT_NOTIFICATION_TIME,
    DEFAULT_QUIET_HOURS_END,
    DEFAULT_QUIET_HOURS_START,
    UserNotificationPreference,
)
from core.schemas import DailyReminderConfig, LocalClock

logger = structlog.get_logger(__name__)

# Half-width of the expiry window; matches the fine cadence
EXPIRY_WINDOW_MINUTES = 30
# Width of a reminder window, starting at the configured minute
REMINDER_WINDOW_MINUTES = 30

EMAIL_WINDOW_HOUR = 7
EMAIL_WINDOW_START_MINUTE = 45
WEEKLY_SUMMARY_DAY = "sunday"

_FALLBACK_REMINDER_TIME = (17, 30)


def is_in_quiet_hours(local_time: time, start: time | None, end: time | None) -> bool:
    """Check whether a local time falls in the ``[start, end)`` quiet window.

    When ``start > end`` the window wraps past midnight. ``start == end``
    means no quiet window at all.
    """
    start = start if start is not None else DEFAULT_QUIET_HOURS_START
    end = end if end is not None else DEFAULT_QUIET_HOURS_END
    local_time = local_time.replace(second=0, microsecond=0, tzinfo=None)

    if start == end:
        return False
    if start < end:
        return start <= local_time < end
    return local_time >= start or local_time < end


def is_expiry_window(preference: UserNotificationPreference, clock: LocalClock) -> bool:
    """Return True if the user's expiry notification window is open now.

    The window is open when the local time is within 30 minutes of the
    preferred notification time on the same local day and outside quiet
    hours.
    """
    notification_time = preference.notification_time or DEFAULT_NOTIFICATION_TIME
    target = datetime.combine(clock.local_date, notification_time).replace(
        tzinfo=clock.local_now.tzinfo
    )
    diff = abs(clock.local_now.replace(second=0, microsecond=0) - target)
    if diff > timedelta(minutes=EXPIRY_WINDOW_MINUTES):
        return False

    return not is_in_quiet_hours(
        clock.local_time,
        preference.quiet_hours_start,
        preference.quiet_hours_end,
    )


def parse_reminder_time(value: str | None) -> tuple[int, int]:
    """Parse an ``HH:MM`` string, falling back to 17:30 when malformed."""
    try:
        hour_text, minute_text = (value or "").split(":")[:2]
        hour, minute = int(hour_text), int(minute_text)
    except ValueError:
        logger.warning("Invalid reminder time", value=value)
        return _FALLBACK_REMINDER_TIME

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        logger.warning("Invalid reminder time", value=value)
        return _FALLBACK_REMINDER_TIME
    return hour, minute


def is_daily_reminder_window(config: DailyReminderConfig, clock: LocalClock) -> bool:
    """Return True if a reminder should fire at the current local time.

    The window spans ``[minute, minute + 30)`` within the configured hour
    and does not carry into the next hour. A configured ``day`` restricts
    the reminder to that weekday.
    """
    if not config.enabled:
        return False

    hour, minute = parse_reminder_time(config.time)
    if clock.hour != hour:
        return False
    if not (minute <= clock.minute < minute + REMINDER_WINDOW_MINUTES):
        return False

    if config.day and config.day.strip().lower() != clock.weekday:
        return False
    return True


def reminder_configs(
    preference: UserNotificationPreference,
) -> dict[str, DailyReminderConfig]:
    """Parse the stored ``daily_reminders`` mapping, skipping invalid entries."""
    raw = preference.daily_reminders
    if not isinstance(raw, dict):
        return {}

    configs: dict[str, DailyReminderConfig] = {}
    for reminder_type, value in raw.items():
        if not isinstance(value, dict):
            continue
        try:
            configs[reminder_type] = DailyReminderConfig.model_validate(value)
        except ValidationError as e:
            logger.warning(
                "Invalid reminder configuration",
                user_id=str(preference.user_id),
                reminder_type=reminder_type,
                error=str(e),
            )
    return configs


def due_daily_reminders(
    preference: UserNotificationPreference, clock: LocalClock
) -> Iterator[tuple[str, DailyReminderConfig]]:
    """Yield every ``(reminder_type, config)`` whose window is open now."""
    for reminder_type, config in reminder_configs(preference).items():
        if is_daily_reminder_window(config, clock):
            yield reminder_type, config


def is_email_window(clock: LocalClock) -> bool:
    """Return True during the local 07:45-07:59 summary email window."""
    return clock.hour == EMAIL_WINDOW_HOUR and clock.minute >= EMAIL_WINDOW_START_MINUTE


def is_weekly_summary_day(clock: LocalClock) -> bool:
    """Return True if the weekly summary goes out today (local Sunday)."""
    return clock.weekday == WEEKLY_SUMMARY_DAY
