"""Single owner of the shared count.

The count lives in memory only and starts from zero on every restart.
``increment`` is the sole mutation and is serialised by a lock, so concurrent
callers (event-loop coroutines or worker threads) never read the same
pre-value.
"""
from __future__ import annotations

import logging
import threading

logger = logging.getLogger(__name__)


class CounterUnavailableError(RuntimeError):
    """Raised once the authority has been shut down."""


class CounterAuthority:
    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("count cannot start below zero")
        self._count = start
        self._closed = False
        self._lock = threading.Lock()

    def increment(self) -> int:
        """Add one and return the new count."""
        with self._lock:
            if self._closed:
                raise CounterUnavailableError("counter authority is shut down")
            self._count += 1
            count = self._count
        logger.debug("Count incremented to %d", count)
        return count

    def current(self) -> int:
        with self._lock:
            return self._count

    def close(self) -> None:
        with self._lock:
            self._closed = True
        logger.info("Counter authority closed at %d", self._count)

    @property
    def closed(self) -> bool:
        return self._closed
