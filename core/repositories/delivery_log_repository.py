"""Repository for the append-only delivery log tables."""

from collections.abc import Iterable
from datetime import date, datetime
from uuid import UUID

from core.models import DailyReminderLogEntry, DeliveryLogEntry


class DeliveryLogRepository:
    """Inserts and dedup lookups for delivery logs.

    Both lookups hit the ``(user, category/type, sent_at/sent_date)`` indexes.
    """

    @staticmethod
    def insert_entries(entries: Iterable[DeliveryLogEntry]) -> list[DeliveryLogEntry]:
        """Persist delivery log rows in one statement."""
        return DeliveryLogEntry.objects.bulk_create(list(entries))

    @staticmethod
    def exists_since(
        user_id: UUID,
        category: str,
        item_ids: Iterable[int],
        since: datetime,
    ) -> bool:
        """Check for any log row (successful or not) matching the key.

        Args:
            user_id: UUID of the recipient
            category: Delivery log category
            item_ids: Items of the notification about to be sent
            since: Lower bound on ``sent_at``

        Returns:
            True if at least one matching row exists
        """
        return DeliveryLogEntry.objects.filter(
            user_id=user_id,
            notification_type=category,
            item_id__in=list(item_ids),
            sent_at__gte=since,
        ).exists()

    @staticmethod
    def insert_reminder_entry(
        user_id: UUID,
        reminder_type: str,
        sent_date: date,
        sent_at: datetime,
        success: bool,
    ) -> DailyReminderLogEntry:
        """Persist one daily reminder log row."""
        return DailyReminderLogEntry.objects.create(
            user_id=user_id,
            reminder_type=reminder_type,
            sent_date=sent_date,
            sent_at=sent_at,
            success=success,
        )

    @staticmethod
    def successful_reminder_exists(
        user_id: UUID, reminder_type: str, sent_date: date
    ) -> bool:
        """Check whether a reminder already went out on the given local date."""
        return DailyReminderLogEntry.objects.filter(
            user_id=user_id,
            reminder_type=reminder_type,
            sent_date=sent_date,
            success=True,
        ).exists()
