"""Thread-local context management for sweep tracking."""

import threading
import uuid

# Thread-local storage for sweep context
_sweep_context = threading.local()


def new_sweep_id() -> str:
    """Generate a short identifier for one sweep."""
    return uuid.uuid4().hex[:12]


def set_sweep_id(sweep_id: str) -> None:
    """Store the sweep ID in thread-local storage.

    Args:
        sweep_id: The unique sweep identifier to store.
    """
    _sweep_context.sweep_id = sweep_id


def get_sweep_id() -> str | None:
    """Retrieve the sweep ID from thread-local storage.

    Returns:
        The current sweep ID, or None if not set.
    """
    return getattr(_sweep_context, "sweep_id", None)


def clear_sweep_id() -> None:
    """Clear the sweep ID from thread-local storage.

    Scheduler jobs run on pooled threads, so this must be called when a sweep
    finishes to keep one sweep's ID from bleeding into the next job.
    """
    if hasattr(_sweep_context, "sweep_id"):
        delattr(_sweep_context, "sweep_id")
