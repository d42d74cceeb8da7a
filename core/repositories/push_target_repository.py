"""Repository for registered push targets."""

from collections.abc import Iterable
from uuid import UUID

from core.models import MobilePushToken, PushSubscription


class PushTargetRepository:
    """Lookups and pruning for web push subscriptions and Expo tokens."""

    @staticmethod
    def get_web_subscriptions(user_id: UUID) -> list[PushSubscription]:
        """Return every browser subscription registered by the user."""
        return list(PushSubscription.objects.filter(user_id=user_id))

    @staticmethod
    def get_mobile_tokens(user_id: UUID) -> list[MobilePushToken]:
        """Return every Expo token registered by the user."""
        return list(MobilePushToken.objects.filter(user_id=user_id))

    @staticmethod
    def delete_web_subscriptions(subscription_ids: Iterable[str]) -> int:
        """Remove expired browser subscriptions.

        Returns:
            Number of rows deleted
        """
        deleted, _ = PushSubscription.objects.filter(
            id__in=list(subscription_ids)
        ).delete()
        return deleted

    @staticmethod
    def delete_mobile_tokens(token_ids: Iterable[str]) -> int:
        """Remove unregistered Expo tokens.

        Returns:
            Number of rows deleted
        """
        deleted, _ = MobilePushToken.objects.filter(id__in=list(token_ids)).delete()
        return deleted
