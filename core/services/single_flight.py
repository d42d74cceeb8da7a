"""Per-user single-flight guard for overlapping sweeps."""

import threading
from collections.abc import Hashable, Iterator
from contextlib import contextmanager

import structlog

logger = structlog.get_logger(__name__)


class SingleFlight:
    """Non-blocking per-key lock.

    The cadence driver lets sweeps overlap; holding ``(user_id, sweep_kind)``
    for the check-send-log sequence keeps two sweeps from both passing the
    dedup check for the same user before either has logged.
    """

    def __init__(self) -> None:
        """Initialize with no keys held."""
        self._lock = threading.Lock()
        self._held: set[Hashable] = set()

    @contextmanager
    def hold(self, user_id, sweep_kind) -> Iterator[bool]:
        """Try to take the key; yields False if another sweep holds it.

        Example:
            >>> with guard.hold(user_id, SweepKind.EXPIRY) as acquired:
            ...     if acquired:
            ...         process(user_id)
        """
        key = _key(user_id, sweep_kind)
        with self._lock:
            acquired = key not in self._held
            if acquired:
                self._held.add(key)

        if not acquired:
            logger.info(
                "Sweep already in flight for user", user_id=key[0], sweep_kind=key[1]
            )

        try:
            yield acquired
        finally:
            if acquired:
                with self._lock:
                    self._held.discard(key)

    def is_held(self, user_id, sweep_kind) -> bool:
        """Return True if the key is currently held."""
        with self._lock:
            return _key(user_id, sweep_kind) in self._held


def _key(user_id, sweep_kind) -> tuple[str, str]:
    return str(user_id), str(getattr(sweep_kind, "value", sweep_kind))
