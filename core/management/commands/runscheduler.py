"""Run the expiry notification scheduler in the foreground."""

import signal
import threading

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

import structlog

from core.enums import CadenceKind
from core.exceptions import FatalSchedulerError
from core.jobs.scheduler import CadenceDriver
from core.logging import cleanup_old_logs, setup_logging

logger = structlog.get_logger(__name__)


class Command(BaseCommand):
    """Start both sweep cadences and block until interrupted.

    The schema belongs to the main application, so no migration or system
    checks run before the scheduler starts.
    """

    help = "Start the expiry notification scheduler"
    requires_system_checks: list = []
    requires_migrations_checks = False

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--run-now",
            action="store_true",
            help="Run one daily sweep immediately after starting",
        )

    def handle(self, *_args, **options):
        """Start the driver and wait for SIGINT or SIGTERM."""
        setup_logging()
        cleanup_old_logs()

        driver = CadenceDriver()
        try:
            handle = driver.start()
        except FatalSchedulerError as e:
            logger.error("Failed to start scheduler", error=str(e))
            raise CommandError(str(e)) from e

        self.stdout.write(self.style.SUCCESS("Expiry notification scheduler started"))

        if options["run_now"] or settings.SCHEDULER_RUN_ON_START:
            logger.info("Running initial sweep")
            driver.run_job(CadenceKind.DAILY)

        stop_requested = threading.Event()

        def request_stop(signum, _frame):
            logger.info("Scheduler received stop signal", signal=signum)
            stop_requested.set()

        signal.signal(signal.SIGINT, request_stop)
        signal.signal(signal.SIGTERM, request_stop)

        try:
            stop_requested.wait()
        finally:
            driver.stop(handle)
            self.stdout.write(self.style.WARNING("Expiry notification scheduler stopped"))
