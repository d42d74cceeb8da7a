"""Resolve a user's local wall-clock time from an IANA zone id."""

from datetime import UTC, datetime
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from django.conf import settings

import structlog

from core.exceptions import ConfigurationError
from core.schemas import LocalClock

logger = structlog.get_logger(__name__)

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)


@lru_cache(maxsize=512)
def _load_zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def _default_zone_name() -> str:
    return getattr(settings, "DEFAULT_TIMEZONE", "America/Los_Angeles")


def get_zone(timezone_name: str | None, user_id: str | None = None) -> ZoneInfo:
    """Return the zone for a stored timezone string.

    Absent or unknown ids fall back to ``DEFAULT_TIMEZONE``; the fallback is
    logged rather than raised.
    """
    if timezone_name:
        try:
            return _load_zone(timezone_name)
        except (ZoneInfoNotFoundError, ValueError) as e:
            error = ConfigurationError("timezone", timezone_name, user_id=user_id)
            logger.warning(
                "Invalid timezone, using default",
                user_id=user_id,
                timezone=timezone_name,
                fallback=_default_zone_name(),
                error=str(error),
                reason=type(e).__name__,
            )
    return _load_zone(_default_zone_name())


def resolve_local_clock(
    timezone_name: str | None,
    now: datetime | None = None,
    user_id: str | None = None,
) -> LocalClock:
    """Express an instant in the user's timezone.

    Args:
        timezone_name: IANA zone id from the user's preferences
        now: Instant to convert (naive values are taken as UTC); defaults
            to the current time
        user_id: Used only to correlate fallback warnings

    Returns:
        LocalClock with local datetime, calendar date and weekday name
    """
    zone = get_zone(timezone_name, user_id=user_id)
    instant = now or datetime.now(UTC)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)

    local_now = instant.astimezone(zone)
    return LocalClock(
        timezone=zone.key,
        local_now=local_now,
        local_date=local_now.date(),
        weekday=WEEKDAY_NAMES[local_now.weekday()],
    )
