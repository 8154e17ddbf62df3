"""Cache port - TTL key/value store shared by request-path consumers."""

from __future__ import annotations

from typing import Any, Protocol


class CachePort(Protocol):
    """Async key-value cache with per-entry TTL.

    Implementations:
      - MemoryCacheAdapter (process-local dict, default)
      - DiskcacheAdapter (SQLite-backed, survives worker restarts)

    Adapters support async context-manager semantics::

        async with cache:
            await cache.set("key", value, ttl=600)
    """

    async def get(self, key: str) -> Any:
        """Return the stored value. None = not found / expired."""
        ...

    async def set(self, key: str, value: Any, *, ttl: int | None = None) -> None:
        """Store value with optional TTL (seconds)."""
        ...

    async def delete(self, key: str) -> bool:
        """Delete key. True = deleted, False = did not exist."""
        ...

    async def exists(self, key: str) -> bool:
        """Check if key exists (not expired)."""
        ...

    async def clear(self) -> None:
        """Delete ALL keys."""
        ...

    async def aclose(self) -> None:
        """Release backend resources."""
        ...

    async def __aenter__(self) -> CachePort: ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...
