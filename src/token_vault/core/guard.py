"""
Access guard for the vault.

Serializes every read-check-insert-persist sequence so that concurrent
callers never interleave. The lock is reentrant: an engine call that holds
the guard can call into VaultStore, which takes the same guard again.
"""

import threading
import time
from contextlib import contextmanager
from typing import Iterator

from token_vault.metrics.collectors import GUARD_WAIT_DURATION


class AccessGuard:
    """Process-wide mutual exclusion around vault operations.

    Acquisition blocks until the guard is free. There is no timeout.
    Release happens on every exit path of the ``with`` block.

    Example:
        >>> guard = AccessGuard()
        >>> with guard.exclusive():
        ...     pass  # at most one thread runs here at a time
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        """Hold the guard for the duration of the block."""
        start = time.perf_counter()
        self._lock.acquire()
        GUARD_WAIT_DURATION.observe(time.perf_counter() - start)
        try:
            yield
        finally:
            self._lock.release()
