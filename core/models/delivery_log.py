"""Append-only delivery logs.

These two tables are the substrate of duplicate suppression: every dispatch
attempt is recorded here and the next sweep reads them back before sending.
Rows are never updated once written.
"""

import uuid
from typing import ClassVar

from django.db import models
from django.utils import timezone


class DeliveryLogEntry(models.Model):
    """One delivery attempt for one (user, category, contributing item).

    A sweep that notifies about several items writes one row per item, all
    sharing the same outcome.

    Attributes:
        user: Recipient.
        item: Contributing inventory item, or None for reminders and emails.
        notification_type: Category (``expiry``, ``expired``,
            ``daily-reminder:<type>``, ``daily-expiry-email``,
            ``weekly-expiry-email``, ``test``).
        notification_method: ``push`` or ``email``.
        reminder_type: Reminder type for daily reminder rows.
        title: Notification title as sent.
        body: Notification body as sent.
        data: Extra payload data.
        sent_at: When the attempt was made.
        success: True if at least one target accepted the notification.
        error_message: Failure summary, if any target failed.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        "core.User",
        on_delete=models.CASCADE,
        related_name="notification_logs",
        db_column="user_id",
    )
    item = models.ForeignKey(
        "core.InventoryItem",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notification_logs",
        db_column="item_id",
    )
    notification_type = models.CharField(max_length=100)
    notification_method = models.CharField(max_length=10, default="push")
    reminder_type = models.CharField(max_length=50, null=True, blank=True)
    title = models.TextField(null=True, blank=True)
    body = models.TextField(null=True, blank=True)
    data = models.JSONField(null=True, blank=True)
    sent_at = models.DateTimeField(default=timezone.now)
    success = models.BooleanField(default=True)
    error_message = models.TextField(null=True, blank=True)

    class Meta:
        """Django model metadata."""

        db_table = "notification_logs"
        managed = False
        ordering: ClassVar[list[str]] = ["-sent_at"]
        indexes: ClassVar[list] = [
            models.Index(fields=["user", "notification_type", "sent_at"]),
        ]

    def __str__(self) -> str:
        """Return string representation of the log row."""
        outcome = "ok" if self.success else "failed"
        return f"{self.notification_type} -> {self.user_id} ({outcome})"


class DailyReminderLogEntry(models.Model):
    """One daily/weekly reminder attempt, keyed by the user's local date.

    There is intentionally no uniqueness constraint on
    (user, reminder_type, sent_date); the dedup pre-check enforces one
    successful row per key.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        "core.User",
        on_delete=models.CASCADE,
        related_name="daily_reminder_logs",
        db_column="user_id",
    )
    reminder_type = models.CharField(max_length=50)
    sent_date = models.DateField()
    sent_at = models.DateTimeField(default=timezone.now)
    success = models.BooleanField(default=True)

    class Meta:
        """Django model metadata."""

        db_table = "daily_reminder_logs"
        managed = False
        ordering: ClassVar[list[str]] = ["-sent_at"]
        indexes: ClassVar[list] = [
            models.Index(fields=["user", "reminder_type", "sent_date"]),
        ]

    def __str__(self) -> str:
        """Return string representation of the log row."""
        return f"{self.reminder_type} on {self.sent_date} -> {self.user_id}"
