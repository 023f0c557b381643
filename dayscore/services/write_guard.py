"""
Write Guard - serialisation and retry for read-modify-write on day records.

Two layers:
- in-process: one asyncio.Lock per (kind, owner_id, bucket) key, so writers
  inside this process queue up instead of racing. Different keys never share
  a lock.
- cross-process: repositories do version-checked updates and raise
  ConflictError on a lost race; conflict_retrying() re-runs the whole
  read-modify-write a bounded number of times, then lets the error surface.
"""

import asyncio
import logging
import weakref
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from dayscore.config import config
from dayscore.core.errors import ConflictError

logger = logging.getLogger(__name__)


class KeyedLocks:
    """Lazily created per-key locks, dropped once nobody holds or waits on them."""

    def __init__(self) -> None:
        self._locks: "weakref.WeakValueDictionary[Hashable, asyncio.Lock]" = (
            weakref.WeakValueDictionary()
        )

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        async with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)


def conflict_retrying(max_attempts: int | None = None) -> AsyncRetrying:
    """
    Retry policy for conditional writes.

    Usage:
        async for attempt in conflict_retrying():
            with attempt:
                await read_modify_write()
    """
    return AsyncRetrying(
        retry=retry_if_exception_type(ConflictError),
        stop=stop_after_attempt(max_attempts or config.MAX_WRITE_ATTEMPTS),
        wait=wait_exponential(multiplier=0.01, max=0.2),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


# Singleton instance
write_locks = KeyedLocks()
