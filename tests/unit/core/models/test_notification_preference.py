"""Unit tests for the scheduler's models."""

import unittest
import uuid
from datetime import date, time

from django.utils import timezone

from core.models import InventoryItem, User, UserNotificationPreference
from core.models.notification_preference import default_daily_reminders
from tests.base import BaseUnitTest
from tests.factories import make_item, make_user


class TestUserNotificationPreference(unittest.TestCase):
    """Tests for UserNotificationPreference."""

    def test_db_table_name(self):
        """Test that the model maps to the shared preference table."""
        self.assertEqual(UserNotificationPreference._meta.db_table, "notification_preferences")

    def test_defaults_for_builds_unsaved_record(self):
        """Test the defaults used for users without a preference row."""
        user_id = uuid.uuid4()

        preference = UserNotificationPreference.defaults_for(user_id)

        self.assertIsNone(preference.pk)
        self.assertEqual(preference.user_id, user_id)
        self.assertTrue(preference.enabled)
        self.assertEqual(preference.days_before_expiry, [1, 3])
        self.assertEqual(preference.notification_time, time(9, 0))
        self.assertEqual(preference.timezone, "America/Los_Angeles")
        self.assertEqual(preference.quiet_hours_start, time(22, 0))
        self.assertEqual(preference.quiet_hours_end, time(8, 0))

    def test_defaults_for_uses_stored_user_zone(self):
        """Test the user row's zone replaces the default zone."""
        preference = UserNotificationPreference.defaults_for(uuid.uuid4(), "Asia/Tokyo")

        self.assertEqual(preference.timezone, "Asia/Tokyo")

    def test_thresholds_are_sorted_and_deduplicated(self):
        """Test normalization of stored thresholds."""
        preference = UserNotificationPreference(days_before_expiry=[3, 1, 3, 0])
        self.assertEqual(preference.get_days_before_expiry(), [0, 1, 3])

    def test_invalid_thresholds_are_dropped(self):
        """Test that negatives, booleans and strings are ignored."""
        preference = UserNotificationPreference(
            days_before_expiry=[-1, True, "2", 5, 2.5]
        )
        self.assertEqual(preference.get_days_before_expiry(), [5])

    def test_unusable_thresholds_fall_back_to_defaults(self):
        """Test empty and non-list values."""
        for raw in ([], None, "1,3", {"days": 1}, [-2]):
            with self.subTest(raw=raw):
                preference = UserNotificationPreference(days_before_expiry=raw)
                self.assertEqual(preference.get_days_before_expiry(), [1, 3])

    def test_default_reminders_are_fresh_copies(self):
        """Test that mutating one default mapping does not leak."""
        first = default_daily_reminders()
        first["inventory_check"]["enabled"] = False

        self.assertTrue(default_daily_reminders()["inventory_check"]["enabled"])

    def test_only_inventory_check_enabled_by_default(self):
        """Test the reminder set new users start with."""
        enabled = [
            name for name, config in default_daily_reminders().items() if config["enabled"]
        ]
        self.assertEqual(enabled, ["inventory_check"])


class TestUserModel(unittest.TestCase):
    """Tests for User."""

    def test_display_name_falls_back(self):
        """Test the email greeting name."""
        self.assertEqual(User(first_name="Ana").display_name, "Ana")
        self.assertEqual(User(first_name=None).display_name, "there")

    def test_repr(self):
        """Test the detailed representation."""
        user_id = uuid.uuid4()
        user = User(user_id=user_id, email="ana@example.com")
        self.assertEqual(repr(user), f"<User(user_id={user_id}, email='ana@example.com')>")


class TestInventoryItem(BaseUnitTest):
    """Tests for InventoryItem and its live manager."""

    def test_live_manager_hides_soft_deleted_items(self):
        """Test that soft-deleted rows are excluded."""
        user = make_user()
        kept = make_item(user, date(2026, 3, 11))
        make_item(user, date(2026, 3, 11), deleted_at=timezone.now())

        self.assertEqual(list(InventoryItem.live.filter(user=user)), [kept])
        self.assertEqual(InventoryItem.objects.filter(user=user).count(), 2)

    def test_str(self):
        """Test the string representation."""
        item = InventoryItem(item_name="Milk", expiration_date=date(2026, 3, 11))
        self.assertEqual(str(item), "Milk (expires 2026-03-11)")
