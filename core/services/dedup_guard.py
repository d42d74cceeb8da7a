"""Duplicate suppression backed by the delivery log tables."""

from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta
from uuid import UUID

from django.db import DatabaseError
from django.utils import timezone

import structlog

from core.enums import SummaryEmailKind
from core.models import UserNotificationPreference
from core.repositories import DeliveryLogRepository
from core.schemas import LocalClock

logger = structlog.get_logger(__name__)

DEFAULT_DEDUP_HOURS = 24


class DedupGuard:
    """Decides whether a notification has already been sent.

    Lookup failures are logged and answered with "not sent"; a duplicate
    is preferred over a silently dropped notification.
    """

    def __init__(self, logs: type[DeliveryLogRepository] = DeliveryLogRepository):
        """Initialize with the delivery log repository to read from."""
        self.logs = logs

    def has_been_sent(
        self,
        user_id: UUID,
        item_ids: Iterable[int],
        category: str,
        within_hours: int = DEFAULT_DEDUP_HOURS,
        now: datetime | None = None,
    ) -> bool:
        """Check for any attempt on these items in the recent past.

        Any logged attempt counts, successful or not.

        Args:
            user_id: UUID of the recipient
            item_ids: Contributing items of the notification about to be sent
            category: Delivery log category
            within_hours: Look-back window
            now: Reference instant (defaults to the current time)

        Returns:
            True if the notification should be suppressed
        """
        item_ids = list(item_ids)
        if not item_ids:
            return False

        since = (now or timezone.now()) - timedelta(hours=within_hours)
        try:
            return self.logs.exists_since(user_id, category, item_ids, since)
        except DatabaseError as e:
            logger.error(
                "Dedup lookup failed",
                user_id=str(user_id),
                category=category,
                error=str(e),
            )
            return False

    def has_reminder_been_sent(
        self, user_id: UUID, reminder_type: str, sent_date: date
    ) -> bool:
        """Check for a successful reminder on the user's local date."""
        try:
            return self.logs.successful_reminder_exists(
                user_id, reminder_type, sent_date
            )
        except DatabaseError as e:
            logger.error(
                "Dedup lookup failed",
                user_id=str(user_id),
                category=reminder_type,
                error=str(e),
            )
            return False

    def has_summary_email_been_sent(
        self,
        preference: UserNotificationPreference,
        kind: SummaryEmailKind,
        clock: LocalClock,
    ) -> bool:
        """Check the preference timestamps for an earlier summary email.

        The daily email goes out once per local date, the weekly one once per
        local ISO week.
        """
        if kind == SummaryEmailKind.DAILY:
            last_sent = preference.last_daily_email_sent
        else:
            last_sent = preference.last_weekly_email_sent
        if last_sent is None:
            return False

        if last_sent.tzinfo is None:
            last_sent = last_sent.replace(tzinfo=UTC)
        last_local = last_sent.astimezone(clock.local_now.tzinfo).date()

        if kind == SummaryEmailKind.DAILY:
            return last_local == clock.local_date
        return last_local.isocalendar()[:2] == clock.local_date.isocalendar()[:2]
