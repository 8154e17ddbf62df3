"""Index builder - pulls every host's listing and builds a fresh VideoIndex."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, cast

import structlog

from skyflix.domain.entities.video import (
    HostBuildCount,
    HostFetchError,
    IndexStats,
    VideoEntry,
)
from skyflix.domain.index_keys import episode_key, movie_key
from skyflix.domain.links import build_entry, video_name_of
from skyflix.domain.ports.video_index import HostPageFetcherPort
from skyflix.domain.titles import parse_video_filename
from skyflix.infrastructure.config.schema import (
    ApiEndpointConfig,
    HostConfig,
    HostingConfig,
)
from skyflix.infrastructure.index.store import IndexStore, VideoIndex

log = structlog.get_logger(__name__)


@dataclass
class _HostShard:
    """Movie/series buckets contributed by one host during one rebuild."""

    host: str
    total: int = 0
    indexed: int = 0
    movies: dict[str, list[VideoEntry]] = field(default_factory=dict)
    series: dict[str, list[VideoEntry]] = field(default_factory=dict)

    def add(self, record: dict[str, Any], cfg: HostConfig) -> None:
        parsed = parse_video_filename(video_name_of(record))
        if parsed is None or not parsed.title:
            return
        entry = build_entry(
            self.host,
            record,
            embed_base=cfg.embed_base,
            download_base=cfg.download_base,
        )
        if entry is None:
            return

        kind = parsed.key_kind
        if kind == "episode":
            key = episode_key(
                parsed.normalized_title, cast(int, parsed.season), cast(int, parsed.episode)
            )
            self.series.setdefault(key, []).append(entry)
            self.indexed += 1
        elif kind == "movie":
            self.movies.setdefault(
                movie_key(parsed.normalized_title, parsed.year), []
            ).append(entry)
            self.indexed += 1
        else:
            # Year-agnostic entries are served but not counted as indexed.
            self.movies.setdefault(
                movie_key(parsed.normalized_title, None), []
            ).append(entry)


def _merge(target: dict[str, list[VideoEntry]], source: dict[str, list[VideoEntry]]) -> None:
    for key, entries in source.items():
        target.setdefault(key, []).extend(entries)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class IndexBuilder:
    """Builds a VideoIndex from all enabled hosts and swaps it into the store.

    Hosts are fetched concurrently. A host whose primary listing comes back
    empty (or fails) is retried once against its fallback endpoint. Host
    failures are isolated: they show up as zero counts plus an error in the
    stats, never as a failed rebuild.
    """

    def __init__(
        self,
        *,
        fetcher: HostPageFetcherPort,
        store: IndexStore,
        hosting: HostingConfig,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._fetcher = fetcher
        self._store = store
        self._hosting = hosting
        self._clock = clock

    async def _fetch_or_empty(
        self, host: str, role: str, api: ApiEndpointConfig
    ) -> list[dict[str, Any]]:
        try:
            return await self._fetcher.fetch_all_pages(
                api.endpoint, api.headers, self._hosting.page_timeout_seconds
            )
        except HostFetchError as e:
            log.warning("index_host_fetch_failed", host=host, role=role, error=str(e))
            return []

    async def _build_host(self, host: str, cfg: HostConfig) -> _HostShard:
        videos = await self._fetch_or_empty(host, "primary", cfg.primary)
        if not videos:
            log.info("index_host_primary_empty", host=host)
            videos = await self._fetch_or_empty(host, "fallback", cfg.fallback)

        shard = _HostShard(host=host, total=len(videos))
        for record in videos:
            shard.add(record, cfg)

        log.info(
            "index_host_built",
            host=host,
            total=shard.total,
            indexed=shard.indexed,
        )
        return shard

    async def rebuild(self) -> IndexStats:
        """Build a new index off to the side, then swap it in atomically."""
        log.info("index_rebuild_started")
        start = self._clock()

        hosts = self._hosting.hosts
        enabled = [(name, cfg) for name, cfg in hosts.items() if cfg.enabled]
        results = await asyncio.gather(
            *(self._build_host(name, cfg) for name, cfg in enabled),
            return_exceptions=True,
        )
        outcome = dict(zip((name for name, _ in enabled), results))

        movies: dict[str, list[VideoEntry]] = {}
        series: dict[str, list[VideoEntry]] = {}
        counts: dict[str, HostBuildCount] = {}

        # Merge in configured host order so entry order is deterministic.
        for name, cfg in hosts.items():
            if not cfg.enabled:
                counts[name] = HostBuildCount(error="disabled")
                continue
            result = outcome[name]
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                log.error("index_host_failed", host=name, error=str(result))
                counts[name] = HostBuildCount(error=str(result) or type(result).__name__)
                continue
            _merge(movies, result.movies)
            _merge(series, result.series)
            counts[name] = HostBuildCount(indexed=result.indexed, total=result.total)

        stats = IndexStats(
            built=True,
            build_time=_utc_now_iso(),
            duration_ms=int((self._clock() - start) * 1000),
            movie_count=len(movies),
            series_count=len(series),
            counts=counts,
        )
        self._store.swap(VideoIndex.from_buckets(movies, series, stats))

        log.info(
            "index_rebuild_complete",
            duration_ms=stats.duration_ms,
            movie_keys=stats.movie_count,
            series_keys=stats.series_count,
        )
        return stats
