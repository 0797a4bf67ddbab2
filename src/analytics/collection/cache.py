"""Time-bounded in-memory cache for collected order listings.

Entries are keyed by a stable serialization of the upstream query and live
for ``ttl``. A read never extends an entry's life. A background task sweeps
expired entries every ``ttl`` so memory does not grow with every window a
user has ever asked for.

Concurrent misses on the same key are not coalesced: both callers compute and
the later write wins. The results are equivalent, so this only costs an extra
upstream walk.
"""

import asyncio
import json
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

DEFAULT_TTL = timedelta(minutes=5)


def cache_key(params: dict[str, Any]) -> str:
    """Deterministic key for a query: identical parameters always collide, different ones never do."""
    return json.dumps(params, sort_keys=True, separators=(",", ":"), default=str)


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    captured_at: float

    def age(self, now: float) -> float:
        return now - self.captured_at


class ResultCache:
    """TTL cache with a periodic sweep task."""

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._sweeper: asyncio.Task | None = None

    @property
    def ttl_seconds(self) -> float:
        return self.ttl.total_seconds()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Any | None:
        """Return the live value for ``key``, or None when absent or expired."""
        entry = self._entries.get(key)
        if entry is None or entry.age(self._clock()) >= self.ttl_seconds:
            return None
        return entry.value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, captured_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    async def get_or_compute(self, key: str, compute: Callable[[], Awaitable[Any]]) -> Any:
        """Serve ``key`` from cache, or await ``compute()`` and store its result.

        Exceptions from ``compute`` propagate and nothing is stored.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug("cache_hit", key=key)
            return cached

        logger.debug("cache_miss", key=key)
        value = await compute()
        self.set(key, value)
        return value

    def sweep(self) -> int:
        """Drop every entry whose age has reached the TTL. Returns how many were dropped."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.age(now) >= self.ttl_seconds]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.info("cache_swept", removed=len(expired), remaining=len(self._entries))
        return len(expired)

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self.ttl_seconds)
            self.sweep()

    def start(self) -> None:
        """Start the periodic sweep on the running event loop."""
        if self._sweeper is None or self._sweeper.done():
            self._sweeper = asyncio.get_running_loop().create_task(self._sweep_forever())

    async def stop(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None

    @property
    def running(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()
