"""Cache factory - builds the configured CachePort adapter."""

from __future__ import annotations

import structlog

from skyflix.domain.ports.cache import CachePort
from skyflix.infrastructure.cache.diskcache_adapter import DiskcacheAdapter
from skyflix.infrastructure.cache.memory_adapter import MemoryCacheAdapter
from skyflix.infrastructure.config.schema import CacheBackend

log = structlog.get_logger(__name__)


def create_cache(
    backend: CacheBackend = "memory",
    *,
    directory: str = "./.cache/skyflix",
    ttl_seconds: int = 3600,
    max_entries: int = 10_000,
) -> CachePort:
    """Create the cache adapter for *backend*.

    Raises:
        ValueError: If `backend` is unknown.
    """
    log.info("cache_factory_create", backend=backend, ttl=ttl_seconds)
    if backend == "memory":
        return MemoryCacheAdapter(ttl_seconds=ttl_seconds, max_entries=max_entries)
    if backend == "diskcache":
        return DiskcacheAdapter(directory=directory, ttl_seconds=ttl_seconds)
    raise ValueError(
        f"Unknown cache backend: {backend!r}. Must be 'memory' or 'diskcache'."
    )
