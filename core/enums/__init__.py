"""Enumerations for the core app."""

from core.enums.notification import (
    CadenceKind,
    NotificationCategory,
    NotificationMethod,
    PushTargetKind,
    SummaryEmailKind,
    SweepKind,
    reminder_category,
)

__all__ = [
    "CadenceKind",
    "NotificationCategory",
    "NotificationMethod",
    "PushTargetKind",
    "SummaryEmailKind",
    "SweepKind",
    "reminder_category",
]
