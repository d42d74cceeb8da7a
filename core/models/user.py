"""User model."""

import uuid
from typing import ClassVar

from django.db import models


class User(models.Model):
    """User model matching the public.users table.

    This model is unmanaged as the database schema is owned by the main
    application. It provides read-only access to the fields the scheduler
    needs to address summary emails.
    """

    user_id = models.UUIDField(
        primary_key=True, default=uuid.uuid4, editable=False, db_column="id"
    )
    email = models.EmailField(max_length=255, unique=True)
    first_name = models.CharField(max_length=255, null=True, blank=True)
    timezone = models.CharField(max_length=64, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        """Django model metadata."""

        db_table = "users"
        managed = False  # Schema is managed externally
        ordering: ClassVar[list[str]] = ["-created_at"]

    def __str__(self) -> str:
        """Return string representation of user."""
        return self.email

    def __repr__(self) -> str:
        """Return detailed representation of user."""
        return f"<User(user_id={self.user_id}, email='{self.email}')>"

    @property
    def display_name(self) -> str:
        """Name used in email greetings."""
        return self.first_name or "there"
