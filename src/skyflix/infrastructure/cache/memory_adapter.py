"""In-process TTL cache - the default result cache backend."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import structlog

log = structlog.get_logger(__name__)

# Expired entries are swept every N writes.
_EVICT_INTERVAL = 100


class MemoryCacheAdapter:
    """Dict-backed cache storing ``(value, expires_at)`` per key.

    Expiry is checked on read. Entries nobody reads again are swept every
    ``_EVICT_INTERVAL`` writes, and the oldest entries are dropped once the
    store holds more than ``max_entries``. All access happens on the event
    loop thread, so no locking is needed.

    Args:
        ttl_seconds: Default TTL for ``set()`` without explicit value.
        max_entries: Upper bound on stored entries.
        clock: Monotonic time source (seconds); injectable for tests.
    """

    def __init__(
        self,
        ttl_seconds: int = 3600,
        *,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._store: dict[str, tuple[Any, float]] = {}
        self._set_count = 0

    async def __aenter__(self) -> MemoryCacheAdapter:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        self._store.clear()

    def _live_entry(self, key: str) -> tuple[Any, float] | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        if self._clock() >= entry[1]:
            del self._store[key]
            return None
        return entry

    def _evict_expired(self) -> None:
        now = self._clock()
        expired = [k for k, (_, expires_at) in self._store.items() if now >= expires_at]
        for k in expired:
            del self._store[k]
        log.debug("cache_evict", expired=len(expired), size=len(self._store))

    def _enforce_max_size(self) -> None:
        if len(self._store) <= self._max_entries:
            return
        # Dicts keep insertion order; the front holds the oldest writes.
        excess = len(self._store) - self._max_entries
        for k in list(self._store)[:excess]:
            del self._store[k]

    async def get(self, key: str) -> Any:
        entry = self._live_entry(key)
        log.debug("cache_get", key=key, hit=entry is not None)
        return entry[0] if entry is not None else None

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        expire = ttl if ttl is not None else self.default_ttl
        self._store.pop(key, None)
        self._store[key] = (value, self._clock() + expire)
        log.debug("cache_set", key=key, ttl=expire)

        self._set_count += 1
        if self._set_count % _EVICT_INTERVAL == 0:
            self._evict_expired()
        self._enforce_max_size()

    async def delete(self, key: str) -> bool:
        return self._store.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        return self._live_entry(key) is not None

    async def clear(self) -> None:
        self._store.clear()
        log.info("cache_cleared", backend="memory")

    def __len__(self) -> int:
        return len(self._store)
