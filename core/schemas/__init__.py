"""Pydantic schemas for the core app."""

from core.schemas.base_schema_model import BaseSchemaModel
from core.schemas.notification import (
    DailyReminderConfig,
    DeliveryResult,
    DispatchSummary,
    LocalClock,
    PushPayload,
    SweepReport,
)

__all__ = [
    "BaseSchemaModel",
    "DailyReminderConfig",
    "DeliveryResult",
    "DispatchSummary",
    "LocalClock",
    "PushPayload",
    "SweepReport",
]
