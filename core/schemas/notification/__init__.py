"""Notification schemas."""

from core.schemas.notification.daily_reminder_config import DailyReminderConfig
from core.schemas.notification.delivery_result import DeliveryResult, DispatchSummary
from core.schemas.notification.local_clock import LocalClock
from core.schemas.notification.push_payload import PushPayload
from core.schemas.notification.sweep_report import SweepReport

__all__ = [
    "DailyReminderConfig",
    "DeliveryResult",
    "DispatchSummary",
    "LocalClock",
    "PushPayload",
    "SweepReport",
]
