"""Typed application state for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from skyflix.infrastructure.config import AppConfig
from skyflix.infrastructure.graceful_shutdown import GracefulShutdown

if TYPE_CHECKING:
    from skyflix.application.use_cases import (
        IndexLookupUseCase,
        VideoResolveUseCase,
    )
    from skyflix.domain.ports import CachePort
    from skyflix.infrastructure.index import (
        IndexBuilder,
        IndexRefreshScheduler,
        IndexStore,
    )


class AppState(State):
    """All long-lived resources, created in composition.py::lifespan()."""

    config: AppConfig

    cache: CachePort
    http_client: httpx.AsyncClient

    # Pre-built index
    index_store: IndexStore
    index_builder: IndexBuilder
    index_scheduler: IndexRefreshScheduler

    index_lookup_uc: IndexLookupUseCase
    video_resolve_uc: VideoResolveUseCase

    graceful_shutdown: GracefulShutdown
