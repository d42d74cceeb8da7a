"""Cadence driver: the two recurring triggers that start sweeps.

One APScheduler ``BackgroundScheduler`` owns both jobs:

- ``daily``: a cron trigger (``DAILY_SWEEP_CRON``, server time) running the
  coarse sweep over every enabled user;
- ``fine``: every ``FINE_SWEEP_MINUTES`` minutes, running the timezone-aware
  sweep (expiry windows, reminders, summary emails).

Jobs may overlap; per-user single-flight in the sweep service is what keeps
overlapping runs from double-sending.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime

from django.conf import settings
from django.db import close_old_connections

import structlog
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.base import BaseTrigger
from apscheduler.triggers.cron import CronTrigger

from core.enums import CadenceKind
from core.exceptions import FatalSchedulerError
from core.schemas import SweepReport
from core.services.expiry_notification_service import ExpiryNotificationService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SchedulerHandle:
    """Lifecycle state of the cadence driver, owned by the entry point."""

    running: bool = False
    job_ids: dict[str, str] = field(default_factory=dict)
    scheduler: BackgroundScheduler | None = None


class CadenceDriver:
    """Builds, starts and stops the sweep jobs."""

    def __init__(
        self,
        service: ExpiryNotificationService | None = None,
        daily_cron: str | None = None,
        fine_minutes: int | None = None,
        fine_offset_minutes: int | None = None,
        max_instances: int | None = None,
        timezone_name: str | None = None,
    ) -> None:
        """Initialize the driver; unset arguments come from Django settings."""
        self.service = service or ExpiryNotificationService()
        self.daily_cron = daily_cron or settings.DAILY_SWEEP_CRON
        self.fine_minutes = (
            fine_minutes if fine_minutes is not None else settings.FINE_SWEEP_MINUTES
        )
        self.fine_offset_minutes = (
            fine_offset_minutes
            if fine_offset_minutes is not None
            else settings.FINE_SWEEP_OFFSET_MINUTES
        )
        self.max_instances = max_instances or settings.SCHEDULER_MAX_INSTANCES
        self.timezone_name = timezone_name or settings.TIME_ZONE

    def build_triggers(self) -> dict[CadenceKind, BaseTrigger]:
        """Validate the cadence configuration and build both triggers.

        Raises:
            FatalSchedulerError: If either cadence is invalid
        """
        try:
            daily = CronTrigger.from_crontab(self.daily_cron, timezone=self.timezone_name)
        except (ValueError, TypeError) as e:
            msg = f"Invalid DAILY_SWEEP_CRON {self.daily_cron!r}: {e}"
            raise FatalSchedulerError(msg) from e

        if not isinstance(self.fine_minutes, int) or not 1 <= self.fine_minutes <= 60:
            msg = f"FINE_SWEEP_MINUTES must be between 1 and 60, got {self.fine_minutes!r}"
            raise FatalSchedulerError(msg)
        if not 0 <= self.fine_offset_minutes < self.fine_minutes:
            msg = (
                "FINE_SWEEP_OFFSET_MINUTES must be below FINE_SWEEP_MINUTES, "
                f"got {self.fine_offset_minutes!r}"
            )
            raise FatalSchedulerError(msg)

        fine = CronTrigger(
            minute=f"{self.fine_offset_minutes}-59/{self.fine_minutes}",
            timezone=self.timezone_name,
        )
        return {CadenceKind.DAILY: daily, CadenceKind.FINE: fine}

    def start(self, handle: SchedulerHandle | None = None) -> SchedulerHandle:
        """Start both jobs; a handle that is already running is returned as is.

        Raises:
            FatalSchedulerError: If the cadence configuration is invalid or
                the scheduler cannot start
        """
        handle = handle or SchedulerHandle()
        if handle.running:
            logger.info("Scheduler already running", job_ids=handle.job_ids)
            return handle

        triggers = self.build_triggers()
        scheduler = BackgroundScheduler(timezone=self.timezone_name)

        job_ids: dict[str, str] = {}
        for kind, trigger in triggers.items():
            job = scheduler.add_job(
                self.run_job,
                trigger=trigger,
                args=[kind],
                id=f"expiry_sweep_{kind.value}",
                replace_existing=True,
                max_instances=self.max_instances,
                coalesce=True,
                misfire_grace_time=60,
            )
            job_ids[kind.value] = job.id

        try:
            scheduler.start()
        except Exception as e:
            raise FatalSchedulerError(f"Scheduler failed to start: {e}") from e

        logger.info(
            "Scheduler started",
            daily_cron=self.daily_cron,
            fine_minutes=self.fine_minutes,
            fine_offset_minutes=self.fine_offset_minutes,
            max_instances=self.max_instances,
            timezone=self.timezone_name,
        )
        return replace(handle, running=True, job_ids=job_ids, scheduler=scheduler)

    def stop(self, handle: SchedulerHandle) -> SchedulerHandle:
        """Cancel both jobs; a sweep already in progress runs to completion."""
        if not handle.running or handle.scheduler is None:
            return replace(handle, running=False, job_ids={}, scheduler=None)

        for job_id in handle.job_ids.values():
            if handle.scheduler.get_job(job_id) is not None:
                handle.scheduler.remove_job(job_id)
        handle.scheduler.shutdown(wait=False)

        logger.info("Scheduler stopped", job_ids=handle.job_ids)
        return replace(handle, running=False, job_ids={}, scheduler=None)

    def tick(self, kind: CadenceKind, now: datetime | None = None) -> SweepReport:
        """Run one sweep for a cadence synchronously."""
        kind = CadenceKind(kind)
        if kind == CadenceKind.DAILY:
            return self.service.run_daily_sweep(now)
        return self.service.run_timezone_sweep(now)

    def run_job(self, kind: CadenceKind) -> None:
        """Scheduler entry point: one tick with fresh database connections."""
        close_old_connections()
        try:
            self.tick(kind)
        except Exception:
            logger.exception("Sweep failed", cadence=CadenceKind(kind).value)
        finally:
            close_old_connections()
