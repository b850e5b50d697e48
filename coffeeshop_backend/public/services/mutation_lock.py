# public/services/mutation_lock.py

"""
MUTATION LOCK

One process-wide mutex guards every write action, so no two mutations
interleave. Acquisition waits a bounded time; if the lock is not free by
then the caller gets ServerBusyError and should retry.

Serialization holds within one server process (run a single worker).
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager

from public.services.exceptions import ServerBusyError

logger = logging.getLogger(__name__)


class MutationLock:
    def __init__(self, *, timeout: float = 15.0):
        self.timeout = float(timeout)
        self._lock = threading.Lock()

    def acquire(self, timeout: float | None = None) -> bool:
        wait = self.timeout if timeout is None else float(timeout)
        return self._lock.acquire(timeout=max(wait, 0))

    def release(self) -> None:
        self._lock.release()

    def locked(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def hold(self, timeout: float | None = None):
        if not self.acquire(timeout):
            logger.warning(
                "Mutation lock busy",
                extra={"timeout": self.timeout if timeout is None else timeout},
            )
            raise ServerBusyError("Server busy, please retry")
        try:
            yield self
        finally:
            self.release()
