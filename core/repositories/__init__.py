"""Repositories encapsulating the scheduler's database access."""

from core.repositories.delivery_log_repository import DeliveryLogRepository
from core.repositories.inventory_repository import InventoryRepository
from core.repositories.preference_repository import PreferenceRepository
from core.repositories.push_target_repository import PushTargetRepository

__all__ = [
    "DeliveryLogRepository",
    "InventoryRepository",
    "PreferenceRepository",
    "PushTargetRepository",
]
