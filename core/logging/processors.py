"""Custom structlog processors for sweep context and service metadata."""

import os
import threading

from colorama import Fore, Style
from structlog.typing import EventDict, WrappedLogger

from core.logging.context import get_sweep_id


def add_sweep_context(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add the sweep ID from thread-local context to log events.

    Args:
        _logger: The wrapped logger instance (unused).
        _method_name: The name of the method called on the logger (unused).
        event_dict: The event dictionary to be logged.

    Returns:
        The event dictionary with sweep_id added if a sweep is running.
    """
    sweep_id = get_sweep_id()
    if sweep_id:
        event_dict["sweep_id"] = sweep_id
    return event_dict


def add_service_context(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service_name and environment to all log events."""
    event_dict["service_name"] = os.getenv("SERVICE_NAME", "expiry-notifier")
    event_dict["environment"] = os.getenv("ENVIRONMENT", "development")
    return event_dict


def add_process_info(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add process and thread identifiers to log events.

    Sweeps from the two cadences and push fan-out workers run on separate
    threads; thread_id tells them apart in the JSON log.
    """
    event_dict["process_id"] = os.getpid()
    event_dict["thread_id"] = threading.get_ident()
    return event_dict


LEVEL_COLORS = {
    "DEBUG": Fore.CYAN,
    "INFO": Fore.GREEN,
    "WARNING": Fore.YELLOW,
    "ERROR": Fore.RED,
    "CRITICAL": Fore.RED + Style.BRIGHT,
}

# Shown in the line prefix, or only useful in the JSON file
_CONSOLE_HIDDEN = frozenset(
    {
        "level",
        "timestamp",
        "sweep_id",
        "logger",
        "event",
        "process_id",
        "thread_id",
        "service_name",
        "environment",
    }
)


def console_renderer(
    _logger: WrappedLogger, _method_name: str, event_dict: EventDict
) -> str:
    """Render one event as ``[LEVEL] time | sweep | logger | event key=value...``.

    Events logged outside a sweep show ``-`` in the sweep column.
    """
    level = str(event_dict.get("level", "info")).upper()
    color = LEVEL_COLORS.get(level, Fore.WHITE)
    sweep_id = event_dict.get("sweep_id") or "-"

    line = (
        f"{color}[{level:<8}]{Style.RESET_ALL} "
        f"{event_dict.get('timestamp', '')} | "
        f"{Fore.MAGENTA}{sweep_id:<12}{Style.RESET_ALL} | "
        f"{Fore.BLUE}{event_dict.get('logger', 'root')}{Style.RESET_ALL} | "
        f"{event_dict.get('event', '')}"
    )

    extras = " ".join(
        f"{key}={value}"
        for key, value in event_dict.items()
        if key not in _CONSOLE_HIDDEN
    )
    if extras:
        line += f" {Fore.YELLOW}{extras}{Style.RESET_ALL}"
    return line
