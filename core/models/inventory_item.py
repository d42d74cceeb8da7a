"""Inventory item model (read-only view of fridge_items)."""

from typing import ClassVar

from django.db import models


class LiveInventoryManager(models.Manager):
    """Manager that hides soft-deleted items."""

    def get_queryset(self):
        """Return only rows that have not been soft-deleted."""
        return super().get_queryset().filter(deleted_at__isnull=True)


class InventoryItem(models.Model):
    """A tracked perishable item.

    Inventory is owned entirely by the main application; the scheduler only
    reads the fields below and never writes to this table.
    """

    id = models.AutoField(primary_key=True)
    user = models.ForeignKey(
        "core.User",
        on_delete=models.CASCADE,
        related_name="inventory_items",
        db_column="user_id",
    )
    item_name = models.CharField(max_length=255)
    expiration_date = models.DateField(null=True, blank=True)
    quantity = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    category = models.CharField(max_length=100, null=True, blank=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = models.Manager()
    live = LiveInventoryManager()

    class Meta:
        """Django model metadata."""

        db_table = "fridge_items"
        managed = False
        ordering: ClassVar[list[str]] = ["expiration_date", "id"]
        indexes: ClassVar[list] = [
            models.Index(fields=["user", "expiration_date"]),
        ]

    def __str__(self) -> str:
        """Return string representation of the item."""
        return f"{self.item_name} (expires {self.expiration_date})"
