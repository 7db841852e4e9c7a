"""
In-memory TTL cache for upstream results and assembled playlists.
- Storage is a cachetools.TTLCache: fixed TTL from insertion, bounded size
  (expired entries are dropped first, then the least recently used).
- Concurrent misses on one key share a single computation.
Safe for asyncio without locks (single-threaded event loop).
"""
import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, TypeVar

import cachetools

from app.config.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TTLCache:
    def __init__(
        self,
        ttl_seconds: float = settings.CACHE_TTL_SECONDS,
        max_entries: int = settings.CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._entries: cachetools.TTLCache[str, Any] = cachetools.TTLCache(
            maxsize=max_entries, ttl=ttl_seconds, timer=clock
        )
        self._in_flight: dict[str, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    async def get_or_compute(self, key: str, producer: Callable[[], Awaitable[T]]) -> T:
        """Return the fresh value for `key`, or await `producer()` and store it.

        Producer errors propagate to every caller waiting on the key and
        nothing is stored. The computation runs as its own task: a caller
        that gets cancelled stops waiting, but the other waiters still get
        the result.
        """
        try:
            value = self._entries[key]
        except KeyError:
            pass
        else:
            logger.debug("Cache hit", extra={"key": key})
            return value

        task = self._in_flight.get(key)
        if task is None:
            logger.debug("Cache miss", extra={"key": key})
            task = asyncio.ensure_future(self._compute(key, producer))
            self._in_flight[key] = task
            task.add_done_callback(lambda t: self._finish(key, t))
        else:
            logger.debug("Cache miss joined in-flight computation", extra={"key": key})
        return await asyncio.shield(task)

    def clear(self) -> None:
        self._entries.clear()

    async def _compute(self, key: str, producer: Callable[[], Awaitable[T]]) -> T:
        value = await producer()
        self._entries[key] = value
        return value

    def _finish(self, key: str, task: asyncio.Task) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        # Mark a failure retrieved even if every waiter was cancelled
        if not task.cancelled():
            task.exception()
