"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from skyflix.application.use_cases import IndexLookupUseCase, VideoResolveUseCase
from skyflix.infrastructure.cache.cache_factory import create_cache
from skyflix.infrastructure.hosting import HttpxHostPageFetcher
from skyflix.infrastructure.index import (
    IndexBuilder,
    IndexRefreshScheduler,
    IndexStore,
)
from skyflix.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

_DRAIN_TIMEOUT_SECONDS = 10.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create and release every long-lived resource.

    Order matters:
        1. Cache
        2. HTTP client
        3. Index store, builder and refresh scheduler
        4. Use cases (lookup over the store, resolver over fetcher + cache)
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) Cache
    cache = create_cache(
        backend=config.cache.backend,
        directory=str(config.cache.directory),
        ttl_seconds=config.cache.ttl_seconds,
        max_entries=config.cache.max_entries,
    )
    await cache.__aenter__()
    state.cache = cache
    log.info("cache_initialized", backend=config.cache.backend)

    # 2) HTTP client shared by index builds and live resolution
    max_requests = config.hosting.max_concurrent_requests
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        limits=httpx.Limits(
            max_connections=max_requests,
            max_keepalive_connections=max_requests,
        ),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=True,
    )
    fetcher = HttpxHostPageFetcher(
        http_client=state.http_client, max_concurrency=max_requests
    )
    log.info(
        "http_client_initialized",
        timeout=config.http_timeout_seconds,
        max_connections=max_requests,
    )

    # 3) Index
    state.index_store = IndexStore()
    state.index_builder = IndexBuilder(
        fetcher=fetcher,
        store=state.index_store,
        hosting=config.hosting,
    )
    state.index_scheduler = IndexRefreshScheduler(
        state.index_builder,
        interval_seconds=config.hosting.refresh_interval_seconds,
        build_on_startup=config.hosting.build_on_startup,
    )
    state.index_scheduler.start()

    # 4) Use cases
    state.index_lookup_uc = IndexLookupUseCase(state.index_store)
    state.video_resolve_uc = VideoResolveUseCase(
        fetcher=fetcher,
        cache=state.cache,
        config=config.hosting,
        result_ttl_seconds=config.cache.video_result_ttl_seconds,
        index_lookup=state.index_lookup_uc,
    )

    enabled = list(config.hosting.enabled_hosts())
    log.info(
        "app_startup_complete",
        hosts=enabled,
        prefer_index=config.hosting.prefer_index,
    )
    state.graceful_shutdown.mark_ready()

    try:
        yield
    finally:
        await state.index_scheduler.stop()
        log.info("index_scheduler_stopped")

        await state.graceful_shutdown.wait_for_drain(timeout=_DRAIN_TIMEOUT_SECONDS)

        await state.http_client.aclose()
        log.info("http_client_closed")

        await state.cache.aclose()
        log.info("cache_closed")

        log.info("app_shutdown_complete")
