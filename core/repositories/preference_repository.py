"""Repository for notification preference queries."""

from datetime import datetime
from uuid import UUID

from django.db.models import Q, QuerySet

from core.enums import SummaryEmailKind
from core.models import InventoryItem, User, UserNotificationPreference


class PreferenceRepository:
    """Read access to preferences plus the summary-email timestamps.

    The scheduler never edits user settings; the only write is recording
    when a summary email went out.
    """

    @staticmethod
    def get_enabled_preferences() -> QuerySet[UserNotificationPreference]:
        """Return preferences with notifications switched on.

        Returns:
            QuerySet of enabled preferences with their users preloaded
        """
        return UserNotificationPreference.objects.filter(enabled=True).select_related(
            "user"
        )

    @staticmethod
    def get_email_subscribed_preferences() -> QuerySet[UserNotificationPreference]:
        """Return preferences opted in to at least one summary email.

        The email opt-ins are independent of the push master switch.
        """
        return UserNotificationPreference.objects.filter(
            Q(email_daily_expiry=True) | Q(email_weekly_summary=True)
        ).select_related("user")

    @staticmethod
    def get_preference(user_id: UUID) -> UserNotificationPreference:
        """Return a user's preferences, or unsaved defaults if none exist.

        Args:
            user_id: UUID of the user

        Returns:
            The stored preference record or a default one
        """
        preference = (
            UserNotificationPreference.objects.filter(user_id=user_id)
            .select_related("user")
            .first()
        )
        if preference is None:
            zone = User.objects.filter(user_id=user_id).values_list(
                "timezone", flat=True
            ).first()
            return UserNotificationPreference.defaults_for(user_id, zone)
        return preference

    @staticmethod
    def get_users_without_preferences() -> list[tuple[UUID, str | None]]:
        """Return users holding live inventory but no preference row.

        Returns:
            List of (user_id, stored timezone) pairs
        """
        return list(
            InventoryItem.live.filter(user__notification_preference__isnull=True)
            .values_list("user_id", "user__timezone")
            .distinct()
            .order_by()
        )

    @staticmethod
    def update_last_email_sent(
        user_id: UUID, kind: SummaryEmailKind, timestamp: datetime
    ) -> int:
        """Record when a summary email was sent.

        Args:
            user_id: UUID of the user
            kind: Which summary email was sent
            timestamp: Send time (aware datetime)

        Returns:
            Number of rows updated (0 if the user has no preference row)
        """
        field = (
            "last_daily_email_sent"
            if kind == SummaryEmailKind.DAILY
            else "last_weekly_email_sent"
        )
        return UserNotificationPreference.objects.filter(user_id=user_id).update(
            **{field: timestamp}
        )
