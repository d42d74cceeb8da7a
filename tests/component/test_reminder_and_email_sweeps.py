"""Component tests for engagement reminders and summary emails."""

from datetime import date, timedelta

from core.models import DailyReminderLogEntry, DeliveryLogEntry, UserNotificationPreference
from core.services.expiry_notification_service import ExpiryNotificationService
from tests.base import BaseComponentTest, at_local, dispatch_summary
from tests.factories import make_item, make_preference, make_user

NEW_YORK = "America/New_York"
TUESDAY = date(2026, 3, 10)
SUNDAY = date(2026, 3, 15)
MONDAY = date(2026, 3, 16)


class SweepTestCase(BaseComponentTest):
    """Service wired to the mocked channels."""

    def setUp(self):
        """Set up the service and a New York user."""
        super().setUp()
        self.service = ExpiryNotificationService(
            push_service=self.push_service, email_service=self.email_service
        )
        self.user = make_user(timezone=NEW_YORK)


class TestDailyReminders(SweepTestCase):
    """Reminders fire once per local day inside their 30 minute window."""

    def setUp(self):
        """Give the user only the default inventory_check reminder at 17:30."""
        super().setUp()
        self.preference = make_preference(
            self.user,
            timezone=NEW_YORK,
            email_daily_expiry=False,
            email_weekly_summary=False,
        )

    def reminder_rows(self):
        """Return reminder log rows for the user."""
        return DailyReminderLogEntry.objects.filter(user=self.user)

    def test_reminder_sent_once_per_local_day(self):
        """Test the 17:30 and 17:45 ticks send one reminder."""
        first = self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 10, 17, 30))
        second = self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 10, 17, 45))

        self.assertEqual(first.sent, 1)
        self.assertEqual(second.suppressed, 1)
        self.push_service.send_to_user.assert_called_once()
        payload = self.push_service.send_to_user.call_args[0][1]
        self.assertEqual(payload.tag, "daily-reminder-inventory_check")

        row = self.reminder_rows().get()
        self.assertEqual(row.reminder_type, "inventory_check")
        self.assertEqual(row.sent_date, TUESDAY)
        self.assertTrue(row.success)
        self.assertEqual(
            DeliveryLogEntry.objects.filter(
                user=self.user, notification_type="daily-reminder:inventory_check"
            ).count(),
            1,
        )

    def test_reminder_outside_window_not_sent(self):
        """Test ticks before the window and after the hour."""
        self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 10, 17, 15))
        self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 10, 18, 15))

        self.push_service.send_to_user.assert_not_called()

    def test_reminder_next_day_is_sent_again(self):
        """Test the local date keys reminder dedup."""
        self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 10, 17, 45))
        self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 11, 17, 45))

        self.assertEqual(self.reminder_rows().count(), 2)

    def test_failed_reminder_is_retried(self):
        """Test that only successful rows suppress a reminder."""
        self.push_service.send_to_user.return_value = dispatch_summary(False)
        first = self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 10, 17, 30))

        self.push_service.send_to_user.return_value = dispatch_summary(True)
        second = self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 10, 17, 45))

        self.assertEqual(first.failed, 1)
        self.assertEqual(second.sent, 1)
        self.assertEqual(
            list(self.reminder_rows().order_by("sent_at").values_list("success", flat=True)),
            [False, True],
        )

    def test_weekly_reminder_only_on_its_day(self):
        """Test a reminder restricted to Sunday."""
        reminders = self.preference.daily_reminders
        reminders["inventory_check"]["enabled"] = False
        reminders["meal_planning"]["enabled"] = True
        self.preference.daily_reminders = reminders
        self.preference.save()

        self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 10, 10, 15))
        self.push_service.send_to_user.assert_not_called()

        self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 15, 10, 15))
        self.push_service.send_to_user.assert_called_once()
        self.assertEqual(self.reminder_rows().get().reminder_type, "meal_planning")

    def test_disabled_user_gets_no_reminders(self):
        """Test the master switch also covers reminders."""
        self.preference.enabled = False
        self.preference.save()

        self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 10, 17, 45))

        self.push_service.send_to_user.assert_not_called()
        self.assertFalse(self.reminder_rows().exists())

    def test_invalid_reminder_entries_are_skipped(self):
        """Test malformed stored reminders do not break the others."""
        reminders = self.preference.daily_reminders
        reminders["broken"] = "not a mapping"
        reminders["bad_time"] = {"enabled": True, "time": "25:99"}
        self.preference.daily_reminders = reminders
        self.preference.save()

        report = self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 10, 17, 45))

        self.assertEqual(report.errors, 0)
        # bad_time falls back to 17:30 and fires alongside inventory_check
        self.assertEqual(
            set(self.reminder_rows().values_list("reminder_type", flat=True)),
            {"inventory_check", "bad_time"},
        )


class TestSummaryEmails(SweepTestCase):
    """Daily and weekly summary emails in the local 07:45 window."""

    def setUp(self):
        """Give the user two items expiring this week."""
        super().setUp()
        self.preference = make_preference(
            self.user, timezone=NEW_YORK, email_weekly_summary=False
        )
        self.items = [
            make_item(self.user, TUESDAY + timedelta(days=2), item_name="Yogurt"),
            make_item(self.user, TUESDAY + timedelta(days=6), item_name="Spinach"),
        ]
        make_item(self.user, TUESDAY + timedelta(days=30), item_name="Rice")

    def email_rows(self, category="daily-expiry-email"):
        """Return email log rows for the user."""
        return DeliveryLogEntry.objects.filter(
            user=self.user, notification_type=category, notification_method="email"
        )

    def test_daily_email_sent_once_per_local_day(self):
        """Test the 07:45 tick sends and the next tick does not."""
        now = at_local(NEW_YORK, 2026, 3, 10, 7, 45)

        self.service.run_timezone_sweep(now)
        self.service.run_timezone_sweep(now + timedelta(minutes=10))

        self.email_service.send_daily_expiry_email.assert_called_once()
        args, kwargs = self.email_service.send_daily_expiry_email.call_args
        self.assertEqual(args[0], self.user)
        self.assertEqual({item.item_name for item in args[1]}, {"Yogurt", "Spinach"})
        self.assertEqual(kwargs["today"], TUESDAY)

        row = self.email_rows().get()
        self.assertTrue(row.success)
        self.assertEqual(row.data, {"itemCount": 2})
        self.preference.refresh_from_db()
        self.assertEqual(self.preference.last_daily_email_sent, now)

    def test_daily_email_outside_window(self):
        """Test ticks at 07:15 and 08:15 send nothing."""
        self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 10, 7, 15))
        self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 10, 8, 15))

        self.email_service.send_daily_expiry_email.assert_not_called()

    def test_daily_email_sent_again_next_day(self):
        """Test the once-per-local-date rule."""
        self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 10, 7, 45))
        self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 11, 7, 45))

        self.assertEqual(self.email_service.send_daily_expiry_email.call_count, 2)

    def test_no_email_without_upcoming_items(self):
        """Test an inventory with nothing expiring this week."""
        other = make_user(timezone=NEW_YORK)
        make_preference(other, timezone=NEW_YORK, email_weekly_summary=False)
        make_item(other, TUESDAY + timedelta(days=20))
        self.preference.delete()

        self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 10, 7, 45))

        self.email_service.send_daily_expiry_email.assert_not_called()
        self.assertFalse(DeliveryLogEntry.objects.filter(user=other).exists())

    def test_failed_email_is_logged_and_retried(self):
        """Test a failed send leaves the timestamp unset."""
        self.email_service.send_daily_expiry_email.return_value = False
        now = at_local(NEW_YORK, 2026, 3, 10, 7, 45)

        report = self.service.run_timezone_sweep(now)

        self.assertEqual(report.failed, 1)
        row = self.email_rows().get()
        self.assertFalse(row.success)
        self.assertEqual(row.error_message, "Email delivery failed")
        self.preference.refresh_from_db()
        self.assertIsNone(self.preference.last_daily_email_sent)

        self.email_service.send_daily_expiry_email.return_value = True
        self.service.run_timezone_sweep(now + timedelta(minutes=10))
        self.assertEqual(self.email_service.send_daily_expiry_email.call_count, 2)

    def test_email_independent_of_push_switch(self):
        """Test that enabled=false leaves the email opt-in alone."""
        self.preference.enabled = False
        self.preference.save()

        self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 10, 7, 45))

        self.email_service.send_daily_expiry_email.assert_called_once()
        self.push_service.send_to_user.assert_not_called()

    def test_weekly_email_not_sent_on_monday(self):
        """Test the weekly summary only goes out on local Sunday."""
        UserNotificationPreference.objects.filter(pk=self.preference.pk).update(
            email_daily_expiry=False, email_weekly_summary=True
        )
        make_item(self.user, MONDAY + timedelta(days=1))

        self.service.run_timezone_sweep(at_local(NEW_YORK, 2026, 3, 16, 7, 45))

        self.email_service.send_weekly_expiry_email.assert_not_called()
        self.assertFalse(self.email_rows("weekly-expiry-email").exists())

    def test_weekly_email_sent_once_on_sunday(self):
        """Test the Sunday summary and its per-week dedup."""
        UserNotificationPreference.objects.filter(pk=self.preference.pk).update(
            email_daily_expiry=False, email_weekly_summary=True
        )
        make_item(self.user, SUNDAY + timedelta(days=3))
        now = at_local(NEW_YORK, 2026, 3, 15, 7, 45)

        self.service.run_timezone_sweep(now)
        self.service.run_timezone_sweep(now + timedelta(minutes=10))

        self.email_service.send_weekly_expiry_email.assert_called_once()
        self.assertEqual(self.email_rows("weekly-expiry-email").count(), 1)
        self.preference.refresh_from_db()
        self.assertEqual(self.preference.last_weekly_email_sent, now)
