"""Read-through cache with optional background refresh.

Fresh entries live in a cachetools TTLCache. The last loaded value for each
key is also kept after expiry so callers can tell a stale hit from a miss via
``get``. When warming is enabled, each load schedules a refresh shortly after
the TTL runs out so the next read finds a fresh entry.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

from cachetools import TTLCache

logger = logging.getLogger(__name__)

T = TypeVar("T")

# (delay_seconds, job) -> None; job is awaited once the delay has passed
RefreshScheduler = Callable[[float, Callable[[], Awaitable[None]]], None]

_pending_refreshes: set[asyncio.Task] = set()


def schedule_on_loop(delay: float, job: Callable[[], Awaitable[None]]) -> None:
    """Default scheduler: run job on the current event loop after delay seconds."""
    loop = asyncio.get_running_loop()

    def _start() -> None:
        task = loop.create_task(job())
        _pending_refreshes.add(task)
        task.add_done_callback(_pending_refreshes.discard)

    loop.call_later(delay, _start)


class ReadThroughCache(Generic[T]):
    """Cache values produced by an async loader, keyed by an arbitrary hashable."""

    def __init__(
        self,
        loader: Callable[[Hashable], Awaitable[T]],
        ttl: float,
        *,
        warm: bool = False,
        refresh_delay: float = 1.0,
        scheduler: RefreshScheduler | None = None,
        timer: Callable[[], float] = time.monotonic,
        maxsize: int = 128,
    ) -> None:
        self._loader = loader
        self._ttl = ttl
        self._warm = warm
        self._refresh_delay = refresh_delay
        self._scheduler = scheduler or schedule_on_loop
        self._fresh: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)
        self._last: dict[Hashable, T] = {}
        self._scheduled: set[Hashable] = set()

    def get(self, key: Hashable) -> tuple[T | None, bool]:
        """Return (value, fresh) without loading.

        An expired entry comes back with fresh=False; an unknown key gives
        (None, False).
        """
        if key in self._fresh:
            return self._fresh[key], True
        return self._last.get(key), False

    async def fetch(self, key: Hashable) -> T:
        """Return a fresh value for key, loading it on a miss or expiry."""
        value, fresh = self.get(key)
        if fresh:
            return value

        logger.info("Cache miss for %s, loading", key)
        value = await self._loader(key)
        self._store(key, value)
        self._schedule_refresh(key)
        return value

    async def refresh(self, key: Hashable) -> None:
        """Reload key in the background. On failure the last value is kept."""
        self._scheduled.discard(key)
        try:
            value = await self._loader(key)
        except Exception:
            logger.warning("Background refresh of %s failed", key, exc_info=True)
            return
        self._store(key, value)
        self._schedule_refresh(key)

    def invalidate(self) -> None:
        """Drop every entry, fresh or stale."""
        self._fresh.clear()
        self._last.clear()

    def _store(self, key: Hashable, value: T) -> None:
        self._fresh[key] = value
        self._last[key] = value

    def _schedule_refresh(self, key: Hashable) -> None:
        if not self._warm or key in self._scheduled:
            return
        self._scheduled.add(key)
        self._scheduler(self._ttl + self._refresh_delay, lambda: self.refresh(key))
