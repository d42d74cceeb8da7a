"""Notification-related enumerations.

This module contains enums for notification categories, delivery methods,
push target kinds and sweep kinds used throughout the scheduler.
"""

from enum import Enum


class NotificationCategory(str, Enum):
    """Delivery log categories.

    Daily reminders are logged as ``daily-reminder:<type>``; use
    ``reminder_category`` to build that value.
    """

    EXPIRY = "expiry"
    EXPIRED = "expired"
    DAILY_REMINDER = "daily-reminder"
    DAILY_EXPIRY_EMAIL = "daily-expiry-email"
    WEEKLY_EXPIRY_EMAIL = "weekly-expiry-email"
    TEST = "test"


def reminder_category(reminder_type: str) -> str:
    """Return the delivery log category for a daily reminder type."""
    return f"{NotificationCategory.DAILY_REMINDER.value}:{reminder_type}"


class NotificationMethod(str, Enum):
    """Channel family a delivery log row was sent through."""

    PUSH = "push"
    EMAIL = "email"


class PushTargetKind(str, Enum):
    """Kinds of registered push endpoints."""

    WEB = "web"
    EXPO = "expo"


class SummaryEmailKind(str, Enum):
    """Periodic expiry summary emails."""

    DAILY = "daily"
    WEEKLY = "weekly"


class SweepKind(str, Enum):
    """Units of per-user work guarded against overlapping sweeps."""

    EXPIRY = "expiry"
    DAILY_REMINDER = "daily_reminder"
    EMAIL = "email"


class CadenceKind(str, Enum):
    """Recurring triggers owned by the cadence driver."""

    DAILY = "daily"
    FINE = "fine"
