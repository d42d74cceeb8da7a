"""Structlog setup for the scheduler process.

Two sinks share one processor chain: a rotating JSON file for shipping and a
colored console for whoever is watching ``runscheduler``. Records emitted by
stdlib loggers (APScheduler, Django) go through the same chain via
``foreign_pre_chain`` so every line carries the sweep id.
"""

import logging
import logging.handlers
import os
import time
from pathlib import Path

import structlog
from colorama import just_fix_windows_console

from core.logging.processors import (
    add_process_info,
    add_service_context,
    add_sweep_context,
    console_renderer,
)

DEFAULT_LOG_FILE = "./logs/expiry-notifier.log"
LOG_MAX_BYTES = 50 * 1024 * 1024
LOG_BACKUP_COUNT = 20


def _log_file_path() -> str:
    return os.getenv("LOG_FILE_PATH", DEFAULT_LOG_FILE)


def _metadata_processors(include_service: bool = True) -> list:
    processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_sweep_context,
    ]
    if include_service:
        processors += [add_service_context, add_process_info]
    return processors


def setup_logging() -> None:
    """Route structlog and stdlib logging to the JSON file and the console.

    Environment Variables:
    - LOG_FILE_PATH: JSON log destination (default: ./logs/expiry-notifier.log)
    - LOG_LEVEL: Minimum level for both sinks (default: INFO)
    - SERVICE_NAME / ENVIRONMENT: Metadata stamped on JSON lines
    """
    log_file_path = _log_file_path()
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, log_level, logging.INFO)

    Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)
    just_fix_windows_console()

    structlog.configure(
        processors=[
            *_metadata_processors(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file_path,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.processors.JSONRenderer(),
            foreign_pre_chain=_metadata_processors(),
        )
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=console_renderer,
            foreign_pre_chain=_metadata_processors(include_service=False),
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in (file_handler, console_handler):
        handler.setLevel(level)
        root_logger.addHandler(handler)

    # APScheduler logs every job execution at INFO
    logging.getLogger("apscheduler").setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured", log_file=log_file_path, log_level=log_level
    )


def cleanup_old_logs(
    log_file_path: str | None = None, retention_days: int = 10
) -> int:
    """Delete rotated log files not modified within ``retention_days``.

    The live log file is never touched.

    Returns:
        Number of files deleted
    """
    live = Path(log_file_path or _log_file_path())
    cutoff = time.time() - retention_days * 24 * 60 * 60
    logger = structlog.get_logger(__name__)

    deleted = 0
    for rotated in live.parent.glob(f"{live.name}.*"):
        if rotated.stat().st_mtime > cutoff:
            continue
        try:
            rotated.unlink()
        except OSError as e:
            logger.warning("Failed to delete old log file", file=str(rotated), error=str(e))
        else:
            deleted += 1

    if deleted:
        logger.info(
            "Removed old log files", deleted_count=deleted, retention_days=retention_days
        )
    return deleted
