"""Repository for inventory item queries."""

from datetime import date
from uuid import UUID

from core.models import InventoryItem


class InventoryRepository:
    """Read-only queries over a user's live (not soft-deleted) inventory."""

    @staticmethod
    def find_expiring_on(user_id: UUID, target_date: date) -> list[InventoryItem]:
        """Return live items expiring exactly on the given date.

        Args:
            user_id: UUID of the owner
            target_date: Calendar date to match

        Returns:
            List of matching items
        """
        return list(
            InventoryItem.live.filter(user_id=user_id, expiration_date=target_date)
        )

    @staticmethod
    def find_expired_before(user_id: UUID, cutoff: date) -> list[InventoryItem]:
        """Return live items whose expiration date is strictly before cutoff."""
        return list(
            InventoryItem.live.filter(user_id=user_id, expiration_date__lt=cutoff)
        )

    @staticmethod
    def find_expiring_between(
        user_id: UUID, start: date, end: date
    ) -> list[InventoryItem]:
        """Return live items expiring within ``[start, end]`` inclusive."""
        return list(
            InventoryItem.live.filter(
                user_id=user_id,
                expiration_date__gte=start,
                expiration_date__lte=end,
            )
        )

    @staticmethod
    def sample_items(user_id: UUID, limit: int = 3) -> list[InventoryItem]:
        """Return up to ``limit`` live items for a test notification."""
        return list(InventoryItem.live.filter(user_id=user_id)[:limit])
