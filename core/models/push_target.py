"""Registered push endpoints: browser web-push subscriptions and Expo tokens.

The two tables are independent at the data layer; the push service reads
both and fans a notification out to every row.
"""

import uuid
from typing import ClassVar

from django.db import models


class PushSubscription(models.Model):
    """Browser push subscription (Web Push protocol).

    Attributes:
        user: Owner of the subscription.
        endpoint: Push service URL for this browser.
        keys: ``{"p256dh": ..., "auth": ...}`` encryption keys.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        "core.User",
        on_delete=models.CASCADE,
        related_name="push_subscriptions",
        db_column="user_id",
    )
    endpoint = models.TextField()
    keys = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Django model metadata."""

        db_table = "push_subscriptions"
        managed = False
        unique_together: ClassVar[list[list[str]]] = [["user", "endpoint"]]

    def __str__(self) -> str:
        """Return string representation of the subscription."""
        return f"web push {self.endpoint[:60]}"

    def subscription_info(self) -> dict:
        """Return the structure expected by pywebpush."""
        return {"endpoint": self.endpoint, "keys": self.keys or {}}


class MobilePushToken(models.Model):
    """Expo push token registered by the mobile app."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        "core.User",
        on_delete=models.CASCADE,
        related_name="mobile_push_tokens",
        db_column="user_id",
    )
    expo_token = models.TextField()
    device_name = models.CharField(max_length=255, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Django model metadata."""

        db_table = "mobile_push_tokens"
        managed = False
        unique_together: ClassVar[list[list[str]]] = [["user", "expo_token"]]

    def __str__(self) -> str:
        """Return string representation of the token."""
        return f"expo {self.device_name or self.expo_token}"
