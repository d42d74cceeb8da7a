"""Expiry notification sweeps.

A sweep is one pass over every eligible user, started by one cadence tick:

- the daily sweep checks every enabled user's inventory regardless of local
  time;
- the timezone sweep runs every 30 minutes and, in order, checks users whose
  local notification window is open, sends due engagement reminders and
  sends the 07:45 summary emails.

Every per-user unit runs under the single-flight guard and its own error
boundary, so one user's failure is logged and the sweep moves on.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime
from uuid import UUID

from django.utils import timezone

import structlog

from core.enums import (
    CadenceKind,
    NotificationCategory,
    SummaryEmailKind,
    SweepKind,
)
from core.logging import clear_sweep_id, get_sweep_id, new_sweep_id, set_sweep_id
from core.models import InventoryItem, UserNotificationPreference
from core.repositories import PreferenceRepository
from core.schemas import LocalClock, PushPayload, SweepReport
from core.services.dedup_guard import DedupGuard
from core.services.delivery_logger import DeliveryLogger
from core.services.eligibility import (
    due_daily_reminders,
    is_email_window,
    is_expiry_window,
    is_in_quiet_hours,
    is_weekly_summary_day,
)
from core.services.email_service import EmailService
from core.services.expiry_query import ExpiryWindowQuery
from core.services.notification_templates import (
    build_expired_payload,
    build_expiry_payload,
    build_reminder_payload,
    build_test_payload,
)
from core.services.push import PushService
from core.services.single_flight import SingleFlight
from core.services.timezone_resolver import resolve_local_clock

logger = structlog.get_logger(__name__)

_EMAIL_CATEGORIES = {
    SummaryEmailKind.DAILY: NotificationCategory.DAILY_EXPIRY_EMAIL,
    SummaryEmailKind.WEEKLY: NotificationCategory.WEEKLY_EXPIRY_EMAIL,
}


class ExpiryNotificationService:
    """Runs the scheduled sweeps and the manual per-user hooks.

    Collaborators are injectable so tests can substitute the push and email
    channels; the defaults are built from Django settings.
    """

    def __init__(
        self,
        push_service: PushService | None = None,
        email_service: EmailService | None = None,
        preferences: type[PreferenceRepository] = PreferenceRepository,
        query: ExpiryWindowQuery | None = None,
        dedup: DedupGuard | None = None,
        delivery_logger: DeliveryLogger | None = None,
        single_flight: SingleFlight | None = None,
    ) -> None:
        """Initialize the service and its collaborators."""
        self.push = push_service or PushService()
        self.email = email_service or EmailService()
        self.preferences = preferences
        self.query = query or ExpiryWindowQuery()
        self.dedup = dedup or DedupGuard()
        self.delivery_logger = delivery_logger or DeliveryLogger()
        self.single_flight = single_flight or SingleFlight()

    # ------------------------------------------------------------------
    # Sweeps
    # ------------------------------------------------------------------

    def run_daily_sweep(self, now: datetime | None = None) -> SweepReport:
        """Check every enabled user's inventory, ignoring local windows.

        Users who hold live inventory but never saved preferences are
        checked with the default thresholds in the zone stored on their user
        row. Users inside their quiet hours are skipped; the fine sweep
        reaches them in their own notification window.
        """
        now = now or timezone.now()
        with self._sweep(CadenceKind.DAILY.value) as report:
            preferences = list(self.preferences.get_enabled_preferences())
            preferences += [
                UserNotificationPreference.defaults_for(user_id, zone)
                for user_id, zone in self.preferences.get_users_without_preferences()
            ]
            for preference in preferences:
                self._run_guarded(
                    report,
                    preference.user_id,
                    SweepKind.EXPIRY,
                    lambda preference=preference: self._process_daily_expiry(
                        preference, now, report
                    ),
                )
        return report

    def run_timezone_sweep(self, now: datetime | None = None) -> SweepReport:
        """Run the fine-cadence work: expiry windows, reminders, then emails."""
        now = now or timezone.now()
        with self._sweep(CadenceKind.FINE.value) as report:
            report.merge(self.run_expiry_window_sweep(now))
            report.merge(self.run_daily_reminders(now))
            report.merge(self.run_email_notifications(now))
        return report

    def run_expiry_window_sweep(self, now: datetime | None = None) -> SweepReport:
        """Check enabled users whose local notification window is open."""
        now = now or timezone.now()
        with self._sweep(SweepKind.EXPIRY.value) as report:
            for preference in self.preferences.get_enabled_preferences():

                def work(preference=preference) -> None:
                    clock = self._clock_for(preference, now)
                    if not is_expiry_window(preference, clock):
                        return
                    self.process_user_expiry(preference, now, report, clock=clock)

                self._run_guarded(report, preference.user_id, SweepKind.EXPIRY, work)
        return report

    def run_daily_reminders(self, now: datetime | None = None) -> SweepReport:
        """Send every engagement reminder whose local window is open."""
        now = now or timezone.now()
        with self._sweep(SweepKind.DAILY_REMINDER.value) as report:
            for preference in self.preferences.get_enabled_preferences():
                self._run_guarded(
                    report,
                    preference.user_id,
                    SweepKind.DAILY_REMINDER,
                    lambda preference=preference: self._process_user_reminders(
                        preference, now, report
                    ),
                )
        return report

    def run_email_notifications(self, now: datetime | None = None) -> SweepReport:
        """Send daily and weekly summary emails inside the 07:45 window."""
        now = now or timezone.now()
        with self._sweep(SweepKind.EMAIL.value) as report:
            for preference in self.preferences.get_email_subscribed_preferences():
                self._run_guarded(
                    report,
                    preference.user_id,
                    SweepKind.EMAIL,
                    lambda preference=preference: self._process_user_emails(
                        preference, now, report
                    ),
                )
        return report

    # ------------------------------------------------------------------
    # Manual hooks
    # ------------------------------------------------------------------

    def trigger_user_expiry_check(
        self, user_id: UUID, now: datetime | None = None
    ) -> SweepReport:
        """Evaluate one user immediately, outside the cadence and the window.

        The dedup guard still applies, and users who switched notifications
        off are left alone.
        """
        now = now or timezone.now()
        with self._sweep("manual") as report:
            preference = self.preferences.get_preference(user_id)
            if not preference.enabled:
                logger.info("Manual trigger skipped for disabled user", user_id=str(user_id))
                return report
            self._run_guarded(
                report,
                user_id,
                SweepKind.EXPIRY,
                lambda: self.process_user_expiry(preference, now, report),
            )
        return report

    def send_test_notification(
        self, user_id: UUID, now: datetime | None = None
    ) -> bool:
        """Push a test notification listing up to three of the user's items.

        Returns:
            True if at least one device accepted it; False when nothing was
            sent or every device failed
        """
        now = now or timezone.now()
        items = self.query.sample(user_id)
        if not items:
            logger.info("Test notification skipped, no items", user_id=str(user_id))
            return False

        payload = build_test_payload(items)
        summary = self.push.send_to_user(user_id, payload)
        self.delivery_logger.record(
            user_id, items, NotificationCategory.TEST.value, summary, payload, now=now
        )
        logger.info(
            "Test notification sent",
            user_id=str(user_id),
            delivered=summary.delivered,
            targets=len(summary.results),
        )
        return summary.delivered

    # ------------------------------------------------------------------
    # Per-user units
    # ------------------------------------------------------------------

    def process_user_expiry(
        self,
        preference: UserNotificationPreference,
        now: datetime | None = None,
        report: SweepReport | None = None,
        clock: LocalClock | None = None,
    ) -> SweepReport:
        """Notify one user about items crossing a threshold or already expired.

        Each threshold is dedup-checked and sent separately; all expired
        items are aggregated into one payload.
        """
        now = now or timezone.now()
        report = report if report is not None else SweepReport(kind=SweepKind.EXPIRY.value)
        clock = clock or self._clock_for(preference, now)
        user_id = preference.user_id
        today = clock.local_date

        window = self.query.find(user_id, preference.get_days_before_expiry(), today)

        for days, items in window.expiring_by_threshold.items():
            if items:
                self._dispatch_items(
                    user_id,
                    items,
                    NotificationCategory.EXPIRY,
                    build_expiry_payload(items, today),
                    now,
                    report,
                    days=days,
                )

        if window.expired_items:
            self._dispatch_items(
                user_id,
                window.expired_items,
                NotificationCategory.EXPIRED,
                build_expired_payload(window.expired_items),
                now,
                report,
            )
        return report

    def _process_daily_expiry(
        self,
        preference: UserNotificationPreference,
        now: datetime,
        report: SweepReport,
    ) -> None:
        clock = self._clock_for(preference, now)
        if is_in_quiet_hours(
            clock.local_time, preference.quiet_hours_start, preference.quiet_hours_end
        ):
            logger.info(
                "Skipping user in quiet hours",
                user_id=str(preference.user_id),
                local_time=clock.local_time.isoformat(timespec="minutes"),
            )
            return
        self.process_user_expiry(preference, now, report, clock=clock)

    def _dispatch_items(
        self,
        user_id: UUID,
        items: list[InventoryItem],
        category: NotificationCategory,
        payload: PushPayload,
        now: datetime,
        report: SweepReport,
        days: int | None = None,
    ) -> None:
        item_ids = [item.id for item in items]
        if self.dedup.has_been_sent(user_id, item_ids, category.value, now=now):
            report.suppressed += 1
            logger.info(
                "Notification suppressed by dedup",
                user_id=str(user_id),
                category=category.value,
                item_count=len(items),
            )
            return

        summary = self.push.send_to_user(user_id, payload)
        self.delivery_logger.record(
            user_id, items, category.value, summary, payload, now=now
        )

        if summary.delivered:
            report.sent += 1
        else:
            report.failed += 1
        logger.info(
            "Expiry notification processed",
            category=category.value,
            user_id=str(user_id),
            item_count=len(items),
            days_before_expiry=days,
            delivered=summary.delivered,
            succeeded=summary.success_count,
            failed=summary.failure_count,
        )

    def _process_user_reminders(
        self,
        preference: UserNotificationPreference,
        now: datetime,
        report: SweepReport,
    ) -> None:
        user_id = preference.user_id
        clock = self._clock_for(preference, now)

        for reminder_type, config in due_daily_reminders(preference, clock):
            if self.dedup.has_reminder_been_sent(
                user_id, reminder_type, clock.local_date
            ):
                report.suppressed += 1
                continue

            payload = build_reminder_payload(reminder_type, config)
            summary = self.push.send_to_user(user_id, payload)
            self.delivery_logger.record_reminder(
                user_id, reminder_type, clock.local_date, summary, payload, now=now
            )

            if summary.delivered:
                report.sent += 1
            else:
                report.failed += 1
            logger.info(
                "Daily reminder processed",
                user_id=str(user_id),
                reminder_type=reminder_type,
                local_date=clock.local_date.isoformat(),
                delivered=summary.delivered,
            )

    def _process_user_emails(
        self,
        preference: UserNotificationPreference,
        now: datetime,
        report: SweepReport,
    ) -> None:
        clock = self._clock_for(preference, now)
        if not is_email_window(clock):
            return

        due: list[SummaryEmailKind] = []
        if preference.email_daily_expiry:
            due.append(SummaryEmailKind.DAILY)
        if preference.email_weekly_summary and is_weekly_summary_day(clock):
            due.append(SummaryEmailKind.WEEKLY)

        pending = []
        for kind in due:
            if self.dedup.has_summary_email_been_sent(preference, kind, clock):
                report.suppressed += 1
            else:
                pending.append(kind)
        if not pending:
            return

        user_id = preference.user_id
        items = self.query.find_upcoming(user_id, clock.local_date)
        if not items:
            logger.info(
                "Summary email skipped, no upcoming items",
                user_id=str(user_id),
                kinds=[kind.value for kind in pending],
            )
            return

        for kind in pending:
            sender = (
                self.email.send_daily_expiry_email
                if kind == SummaryEmailKind.DAILY
                else self.email.send_weekly_expiry_email
            )
            success = sender(preference.user, items, today=clock.local_date)
            self.delivery_logger.record_email(
                user_id, _EMAIL_CATEGORIES[kind].value, success, len(items), now=now
            )

            if success:
                self.preferences.update_last_email_sent(user_id, kind, now)
                report.sent += 1
            else:
                report.failed += 1
            logger.info(
                "Summary email processed",
                user_id=str(user_id),
                kind=kind.value,
                item_count=len(items),
                success=success,
            )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _clock_for(
        self, preference: UserNotificationPreference, now: datetime
    ) -> LocalClock:
        return resolve_local_clock(
            preference.timezone, now, user_id=str(preference.user_id)
        )

    def _run_guarded(
        self,
        report: SweepReport,
        user_id: UUID,
        kind: SweepKind,
        work: Callable[[], object],
    ) -> None:
        with self.single_flight.hold(user_id, kind) as acquired:
            if not acquired:
                report.in_flight_skipped += 1
                return

            report.users_evaluated += 1
            try:
                work()
            except Exception:
                # One user's failure must not abort the sweep for the others
                report.errors += 1
                logger.exception(
                    "Failed to process user",
                    user_id=str(user_id),
                    sweep_kind=kind.value,
                )

    @contextmanager
    def _sweep(self, kind: str) -> Iterator[SweepReport]:
        owns_sweep_id = get_sweep_id() is None
        if owns_sweep_id:
            set_sweep_id(new_sweep_id())

        report = SweepReport(kind=kind)
        logger.info("Sweep started", kind=kind)
        try:
            yield report
        finally:
            logger.info("Sweep finished", **report.model_dump())
            if owns_sweep_id:
                clear_sweep_id()
