"""Database models for core application."""

from core.models.delivery_log import DailyReminderLogEntry, DeliveryLogEntry
from core.models.inventory_item import InventoryItem
from core.models.notification_preference import UserNotificationPreference
from core.models.push_target import MobilePushToken, PushSubscription
from core.models.user import User

__all__ = [
    "DailyReminderLogEntry",
    "DeliveryLogEntry",
    "InventoryItem",
    "MobilePushToken",
    "PushSubscription",
    "User",
    "UserNotificationPreference",
]
