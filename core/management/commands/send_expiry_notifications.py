"""Manually trigger expiry notifications."""

from uuid import UUID

from django.core.management.base import BaseCommand, CommandError

from core.services.expiry_notification_service import ExpiryNotificationService


class Command(BaseCommand):
    """Run the expiry check for one user, or a full daily sweep.

    Examples:
        python manage.py send_expiry_notifications
        python manage.py send_expiry_notifications --user <uuid>
        python manage.py send_expiry_notifications --user <uuid> --test
    """

    help = "Send expiry notifications now, bypassing the scheduler cadence"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument("--user", help="UUID of a single user to check")
        parser.add_argument(
            "--test",
            action="store_true",
            help="Send a test notification to --user instead of checking expiry",
        )

    def handle(self, *_args, **options):
        """Dispatch to the matching service hook and print the outcome."""
        user_id = self._parse_user_id(options["user"])
        if options["test"] and not user_id:
            raise CommandError("--test requires --user")

        service = ExpiryNotificationService()

        if options["test"]:
            delivered = service.send_test_notification(user_id)
            if delivered:
                message = self.style.SUCCESS(f"Test notification sent to {user_id}")
            else:
                message = self.style.WARNING(
                    f"No test notification delivered to {user_id}"
                )
            self.stdout.write(message)
            return

        if user_id:
            report = service.trigger_user_expiry_check(user_id)
        else:
            report = service.run_daily_sweep()

        self.stdout.write(
            self.style.SUCCESS(
                f"Evaluated {report.users_evaluated} user(s): "
                f"{report.sent} sent, {report.suppressed} suppressed, "
                f"{report.failed} failed, {report.errors} errors"
            )
        )

    def _parse_user_id(self, value: str | None) -> UUID | None:
        if value is None:
            return None
        try:
            return UUID(value)
        except ValueError as e:
            raise CommandError(f"Invalid user id: {value}") from e
