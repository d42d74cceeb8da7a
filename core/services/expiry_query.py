"""Expiry window query: which of a user's items cross a threshold today."""

from dataclasses import dataclass, field
from datetime import date, timedelta
from uuid import UUID

from django.db import DatabaseError

import structlog

from core.exceptions import QueryError
from core.models import InventoryItem
from core.repositories import InventoryRepository

logger = structlog.get_logger(__name__)

UPCOMING_DAYS = 7


@dataclass
class ExpiryWindow:
    """Items due for an expiry notification, relative to the user's today."""

    expiring_by_threshold: dict[int, list[InventoryItem]] = field(
        default_factory=dict
    )
    expired_items: list[InventoryItem] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when nothing is expiring or expired."""
        return not self.expired_items and not any(
            self.expiring_by_threshold.values()
        )


class ExpiryWindowQuery:
    """Finds expiring and expired items for one user.

    A failing read for one subset is logged and treated as empty, so the
    remaining thresholds are still evaluated.
    """

    def __init__(self, inventory: type[InventoryRepository] = InventoryRepository):
        """Initialize with the inventory repository to read from."""
        self.inventory = inventory

    def find(self, user_id: UUID, thresholds: list[int], today: date) -> ExpiryWindow:
        """Collect items expiring exactly ``d`` days from today, plus expired ones.

        Args:
            user_id: UUID of the owner
            thresholds: Days-before-expiry values from the user's preferences
            today: The user's local calendar date

        Returns:
            ExpiryWindow with one (possibly empty) list per threshold
        """
        window = ExpiryWindow()
        for days in thresholds:
            target_date = today + timedelta(days=days)
            window.expiring_by_threshold[days] = self._safe_read(
                user_id,
                f"threshold:{days}",
                lambda target_date=target_date: self.inventory.find_expiring_on(
                    user_id, target_date
                ),
            )

        window.expired_items = self._safe_read(
            user_id,
            "expired",
            lambda: self.inventory.find_expired_before(user_id, today),
        )
        return window

    def find_upcoming(
        self, user_id: UUID, today: date, days: int = UPCOMING_DAYS
    ) -> list[InventoryItem]:
        """Return items expiring between today and ``today + days`` inclusive."""
        return self._safe_read(
            user_id,
            "upcoming",
            lambda: self.inventory.find_expiring_between(
                user_id, today, today + timedelta(days=days)
            ),
        )

    def sample(self, user_id: UUID, limit: int = 3) -> list[InventoryItem]:
        """Return up to ``limit`` live items for a test notification."""
        return self._safe_read(
            user_id, "sample", lambda: self.inventory.sample_items(user_id, limit)
        )

    def _safe_read(self, user_id: UUID, scope: str, read) -> list[InventoryItem]:
        try:
            return read()
        except DatabaseError as e:
            error = QueryError(str(e), user_id=str(user_id), scope=scope)
            logger.error(
                "Expiry query failed",
                user_id=error.user_id,
                scope=error.scope,
                error=str(error),
            )
            return []
