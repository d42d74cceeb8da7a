"""Logging utilities for the expiry notifier."""

from core.logging.config import cleanup_old_logs, setup_logging
from core.logging.context import (
    clear_sweep_id,
    get_sweep_id,
    new_sweep_id,
    set_sweep_id,
)

__all__ = [
    "cleanup_old_logs",
    "clear_sweep_id",
    "get_sweep_id",
    "new_sweep_id",
    "set_sweep_id",
    "setup_logging",
]
