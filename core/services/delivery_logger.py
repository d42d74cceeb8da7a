"""Delivery logger: append one row per dispatch attempt.

Rows written here are what the dedup guard reads on the next sweep. A
failed insert is logged and swallowed so one bad write cannot abort the
sweep it happens in.
"""

from collections.abc import Sequence
from datetime import date, datetime
from uuid import UUID

from django.db import DatabaseError
from django.utils import timezone

import structlog

from core.enums import NotificationCategory, NotificationMethod, reminder_category
from core.models import DeliveryLogEntry, InventoryItem
from core.repositories import DeliveryLogRepository
from core.schemas import DispatchSummary, PushPayload

logger = structlog.get_logger(__name__)

_ITEM_LOG_TEXT = {
    NotificationCategory.EXPIRY.value: ("Food Expiring Soon", "is expiring soon"),
    NotificationCategory.EXPIRED.value: ("Expired Food Alert", "has expired"),
}


class DeliveryLogger:
    """Writes DeliveryLogEntry and DailyReminderLogEntry rows."""

    def __init__(self, logs: type[DeliveryLogRepository] = DeliveryLogRepository):
        """Initialize with the delivery log repository to write to."""
        self.logs = logs

    def record(
        self,
        user_id: UUID,
        items: Sequence[InventoryItem] | None,
        category: str,
        summary: DispatchSummary,
        payload: PushPayload | None = None,
        method: NotificationMethod = NotificationMethod.PUSH,
        now: datetime | None = None,
    ) -> int:
        """Log one dispatch, one row per contributing item.

        Every row shares the dispatch outcome: ``success`` is true when at
        least one target accepted the notification.

        Args:
            user_id: UUID of the recipient
            items: Contributing items, or None for item-less notifications
            category: Delivery log category
            summary: Per-target results of the fan-out
            payload: The notification as sent
            method: Channel family
            now: Timestamp for the rows (defaults to the current time)

        Returns:
            Number of rows written (0 if the insert failed)
        """
        sent_at = now or timezone.now()
        category = getattr(category, "value", category)
        success = summary.delivered
        error_message = summary.error_message()

        if items:
            entries = [
                self._item_entry(
                    user_id, item, category, payload, method, sent_at, success,
                    error_message,
                )
                for item in items
            ]
        else:
            entries = [
                DeliveryLogEntry(
                    user_id=user_id,
                    item=None,
                    notification_type=category,
                    notification_method=NotificationMethod(method).value,
                    title=payload.title if payload else None,
                    body=payload.body if payload else None,
                    data=payload.data if payload else None,
                    sent_at=sent_at,
                    success=success,
                    error_message=error_message,
                )
            ]
        return self._insert(user_id, category, entries)

    def record_reminder(
        self,
        user_id: UUID,
        reminder_type: str,
        sent_date: date,
        summary: DispatchSummary,
        payload: PushPayload | None = None,
        now: datetime | None = None,
    ) -> None:
        """Log a daily reminder in both the general and the reminder log."""
        sent_at = now or timezone.now()
        entry = DeliveryLogEntry(
            user_id=user_id,
            notification_type=reminder_category(reminder_type),
            notification_method=NotificationMethod.PUSH.value,
            reminder_type=reminder_type,
            title=payload.title if payload else None,
            body=payload.body if payload else None,
            data=payload.data if payload else None,
            sent_at=sent_at,
            success=summary.delivered,
            error_message=summary.error_message(),
        )
        self._insert(user_id, entry.notification_type, [entry])

        try:
            self.logs.insert_reminder_entry(
                user_id=user_id,
                reminder_type=reminder_type,
                sent_date=sent_date,
                sent_at=sent_at,
                success=summary.delivered,
            )
        except DatabaseError as e:
            logger.error(
                "Failed to write reminder log",
                user_id=str(user_id),
                reminder_type=reminder_type,
                error=str(e),
            )

    def record_email(
        self,
        user_id: UUID,
        category: str,
        success: bool,
        item_count: int,
        error: str | None = None,
        now: datetime | None = None,
    ) -> int:
        """Log one summary email attempt."""
        category = getattr(category, "value", category)
        entry = DeliveryLogEntry(
            user_id=user_id,
            notification_type=category,
            notification_method=NotificationMethod.EMAIL.value,
            title=category.replace("-", " ").capitalize(),
            data={"itemCount": item_count},
            sent_at=now or timezone.now(),
            success=success,
            error_message=error or (None if success else "Email delivery failed"),
        )
        return self._insert(user_id, category, [entry])

    def _item_entry(
        self,
        user_id: UUID,
        item: InventoryItem,
        category: str,
        payload: PushPayload | None,
        method: NotificationMethod,
        sent_at: datetime,
        success: bool,
        error_message: str | None,
    ) -> DeliveryLogEntry:
        if category in _ITEM_LOG_TEXT:
            title, verb = _ITEM_LOG_TEXT[category]
            body = f"{item.item_name} {verb}"
        else:
            title = payload.title if payload else category
            body = payload.body if payload else item.item_name
        return DeliveryLogEntry(
            user_id=user_id,
            item_id=item.id,
            notification_type=category,
            notification_method=NotificationMethod(method).value,
            title=title,
            body=body,
            data={
                "item": {
                    "id": item.id,
                    "name": item.item_name,
                    "expiryDate": item.expiration_date.isoformat()
                    if item.expiration_date
                    else None,
                }
            },
            sent_at=sent_at,
            success=success,
            error_message=error_message,
        )

    def _insert(self, user_id: UUID, category: str, entries: list) -> int:
        try:
            written = self.logs.insert_entries(entries)
        except DatabaseError as e:
            logger.error(
                "Failed to write delivery log",
                user_id=str(user_id),
                category=category,
                rows=len(entries),
                error=str(e),
            )
            return 0

        logger.debug(
            "Delivery logged",
            user_id=str(user_id),
            category=category,
            rows=len(written),
        )
        return len(written)
