"""Per-user notification preference model.

One row per user, created with defaults by the main application on the first
preference write. The scheduler only reads it, except for the last-sent
timestamps of the summary emails.
"""

from datetime import time
from typing import Any, ClassVar

from django.db import models

DEFAULT_DAYS_BEFORE_EXPIRY = [1, 3]
DEFAULT_NOTIFICATION_TIME = time(9, 0)
DEFAULT_QUIET_HOURS_START = time(22, 0)
DEFAULT_QUIET_HOURS_END = time(8, 0)
DEFAULT_TIMEZONE = "America/Los_Angeles"


def default_days_before_expiry() -> list[int]:
    """Return a fresh copy of the default expiry thresholds."""
    return list(DEFAULT_DAYS_BEFORE_EXPIRY)


def default_daily_reminders() -> dict[str, dict[str, Any]]:
    """Return the reminder configuration new users start with."""
    return {
        "inventory_check": {
            "enabled": True,
            "time": "17:30",
            "message": "See what's in your fridge",
            "emoji": "🥗",
        },
        "meal_planning": {
            "enabled": False,
            "time": "10:00",
            "day": "Sunday",
            "message": "Plan your meals for the week",
            "emoji": "📅",
        },
        "dinner_prep": {
            "enabled": False,
            "time": "16:00",
            "message": "Time to prep dinner!",
            "emoji": "👨‍🍳",
        },
        "breakfast_reminder": {
            "enabled": False,
            "time": "08:00",
            "message": "Start your day right - check breakfast options",
            "emoji": "🌅",
        },
        "lunch_reminder": {
            "enabled": False,
            "time": "12:00",
            "message": "Lunch time! See what you can make",
            "emoji": "🥙",
        },
        "shopping_reminder": {
            "enabled": False,
            "time": "18:00",
            "day": "Saturday",
            "message": "Time to plan your grocery shopping",
            "emoji": "🛒",
        },
    }


class UserNotificationPreference(models.Model):
    """Notification settings for a single user.

    Attributes:
        user: Owner of the preferences.
        enabled: Master switch for expiry and reminder push notifications.
        days_before_expiry: Thresholds (in days) at which to warn about items.
        notification_time: Preferred local time for expiry notifications.
        timezone: IANA zone id used to resolve the user's local time.
        quiet_hours_start: Start of the local window with no expiry alerts.
        quiet_hours_end: End (exclusive) of the quiet window; may be before
            the start, in which case the window crosses midnight.
        daily_reminders: Mapping of reminder type to its configuration.
        email_daily_expiry: Opt-in for the daily expiry email.
        email_weekly_summary: Opt-in for the Sunday summary email.
        last_daily_email_sent: When the daily email last went out.
        last_weekly_email_sent: When the weekly email last went out.
    """

    user = models.OneToOneField(
        "core.User",
        on_delete=models.CASCADE,
        related_name="notification_preference",
        db_column="user_id",
    )
    enabled = models.BooleanField(default=True)
    days_before_expiry = models.JSONField(default=default_days_before_expiry)
    notification_time = models.TimeField(default=DEFAULT_NOTIFICATION_TIME)
    timezone = models.CharField(max_length=64, default=DEFAULT_TIMEZONE)
    quiet_hours_start = models.TimeField(default=DEFAULT_QUIET_HOURS_START)
    quiet_hours_end = models.TimeField(default=DEFAULT_QUIET_HOURS_END)
    daily_reminders = models.JSONField(default=default_daily_reminders)
    email_daily_expiry = models.BooleanField(default=True)
    email_weekly_summary = models.BooleanField(default=True)
    last_daily_email_sent = models.DateTimeField(null=True, blank=True)
    last_weekly_email_sent = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Django model metadata."""

        db_table = "notification_preferences"
        managed = False
        indexes: ClassVar[list] = [
            models.Index(fields=["enabled"]),
        ]

    def __str__(self) -> str:
        """Return string representation of the preference record."""
        return f"Notification preferences for {self.user_id}"

    @classmethod
    def defaults_for(
        cls, user_id, timezone: str | None = None
    ) -> "UserNotificationPreference":
        """Build an unsaved preference record with default values.

        The zone stored on the user row is used when present.
        """
        return cls(user_id=user_id, timezone=timezone or DEFAULT_TIMEZONE)

    def get_days_before_expiry(self) -> list[int]:
        """Return thresholds as a sorted, de-duplicated list of non-negative ints.

        Non-integer and negative entries are dropped. An empty or unusable
        value yields the defaults.
        """
        raw = self.days_before_expiry
        if not isinstance(raw, (list, tuple, set)):
            return default_days_before_expiry()
        days = {
            value
            for value in raw
            if isinstance(value, int) and not isinstance(value, bool) and value >= 0
        }
        return sorted(days) or default_days_before_expiry()
