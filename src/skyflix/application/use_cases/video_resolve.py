"""On-demand video resolution use case.

Title request -> per-host listing scan (primary, then fallback)
-> detail fetch -> playable URLs, for all hosts concurrently.

Per host:

- primary scan: fetch every listing page, stop at the first filename whose
  parsed title/year/episode matches the request
- on a match: fetch the video detail for explicit embed/download URLs,
  falling back to the host's URL templates
- no match or scan failure: same procedure against the fallback endpoint
- both exhausted: ``available=False`` with a reason; never raises
"""

from __future__ import annotations

import asyncio
import dataclasses
import time
from collections.abc import Mapping
from typing import Any, Protocol, cast

import structlog

from skyflix.domain.entities.video import (
    ContentType,
    HostFetchError,
    HostResult,
    InvalidVideoRequest,
    ParsedFilename,
    ResultSource,
    VideoAggregate,
    VideoEntry,
    VideoRequest,
)
from skyflix.domain.links import (
    download_url_for,
    embed_url_for,
    urls_from_detail,
    video_id_of,
    video_name_of,
)
from skyflix.domain.ports.cache import CachePort
from skyflix.domain.ports.video_index import HostPageFetcherPort
from skyflix.domain.titles import normalize_title, parse_video_filename, titles_match

from .index_lookup import IndexLookupUseCase

# ---------------------------------------------------------------------------
# Protocols: what this use case needs from configuration.
# ---------------------------------------------------------------------------


class _EndpointSettings(Protocol):
    endpoint: str

    @property
    def headers(self) -> dict[str, str]: ...


class _HostSettings(Protocol):
    enabled: bool
    primary: _EndpointSettings
    fallback: _EndpointSettings
    embed_base: str
    download_base: str


class _ResolveSettings(Protocol):
    primary_timeout_seconds: float
    fallback_timeout_seconds: float
    resolve_deadline_seconds: float
    prefer_index: bool

    @property
    def hosts(self) -> Mapping[str, _HostSettings]: ...


log = structlog.get_logger(__name__)

_YEAR_TOLERANCE = 1
_SERIES_ALIASES = {"series", "tv"}


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------


def _optional_int(payload: Mapping[str, Any], name: str) -> int | None:
    value = payload.get(name)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise InvalidVideoRequest(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidVideoRequest(f"{name} must be an integer") from e


def parse_video_request(payload: Mapping[str, Any]) -> VideoRequest:
    """Validate a raw fetch payload. Raises InvalidVideoRequest.

    ``type`` accepts ``movie``, ``series`` and ``tv`` (alias of series).
    """
    title = payload.get("title")
    raw_type = payload.get("type")
    if not title or not raw_type or not isinstance(title, str):
        raise InvalidVideoRequest(
            "Missing required fields", required=["title", "type"]
        )

    if raw_type == "movie":
        content_type: ContentType = "movie"
    elif raw_type in _SERIES_ALIASES:
        content_type = "series"
    else:
        raise InvalidVideoRequest(f"Unsupported type: {raw_type!r}")

    year = _optional_int(payload, "year")
    season = _optional_int(payload, "season")
    episode = _optional_int(payload, "episode")

    if content_type == "movie" and year is None:
        raise InvalidVideoRequest("Year is required for movies")
    if content_type == "series" and (season is None or episode is None):
        raise InvalidVideoRequest("Season and episode are required for series")

    return VideoRequest(
        title=title.strip(),
        content_type=content_type,
        year=year,
        season=season,
        episode=episode,
    )


def cache_key_for(request: VideoRequest) -> str:
    def part(v: int | None) -> str:
        return "" if v is None else str(v)

    return (
        f"vh:{request.content_type}:{normalize_title(request.title)}:"
        f"{part(request.year)}:{part(request.season)}:{part(request.episode)}"
    )


def matches_request(request: VideoRequest, parsed: ParsedFilename | None) -> bool:
    """Content-match predicate for one parsed listing filename.

    Title must match loosely (see ``titles_match``). Movies additionally
    need the filename year to be absent or within one year of the request;
    series need the exact season and episode.
    """
    if parsed is None or not titles_match(request.title, parsed.title):
        return False
    if request.content_type == "movie":
        if parsed.year is None or request.year is None:
            return True
        return abs(parsed.year - request.year) <= _YEAR_TOLERANCE
    return parsed.season == request.season and parsed.episode == request.episode


def servers_from_entries(entries: list[VideoEntry]) -> dict[str, HostResult]:
    """One available server per host; the first entry of a host wins."""
    servers: dict[str, HostResult] = {}
    for e in entries:
        if e.host in servers:
            continue
        servers[e.host] = HostResult(
            host=e.host,
            available=True,
            embed_url=e.embed_url,
            download_url=e.download_url,
            source="index",
        )
    return servers


class VideoResolveUseCase:
    """Resolves playable links for one title across all configured hosts.

    Successful aggregates (at least one available host) are cached; misses
    are not, so the next identical request retries immediately.
    """

    def __init__(
        self,
        *,
        fetcher: HostPageFetcherPort,
        cache: CachePort,
        config: _ResolveSettings,
        result_ttl_seconds: int = 600,
        index_lookup: IndexLookupUseCase | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._config = config
        self._ttl = result_ttl_seconds
        self._index_lookup = index_lookup

    async def execute(self, request: VideoRequest) -> VideoAggregate:
        key = cache_key_for(request)
        cached = await self._cache.get(key)
        if cached is not None:
            log.info("video_cache_hit", key=key)
            # Same key, possibly different spelling: echo this request.
            return dataclasses.replace(cast(VideoAggregate, cached), request=request)

        aggregate = self._from_index(request)
        if aggregate is None:
            aggregate = await self._live_scan(request)

        if aggregate.available_count > 0:
            await self._cache.set(key, aggregate, ttl=self._ttl)
        return aggregate

    def _from_index(self, request: VideoRequest) -> VideoAggregate | None:
        lookup = self._index_lookup
        if not self._config.prefer_index or lookup is None or not lookup.is_ready:
            return None
        entries = lookup.lookup(request)
        if not entries:
            return None
        log.info("video_index_hit", title=request.title, entries=len(entries))
        return VideoAggregate(
            servers=servers_from_entries(entries), request=request, source="index"
        )

    async def _live_scan(self, request: VideoRequest) -> VideoAggregate:
        start = time.perf_counter()
        hosts = list(self._config.hosts.items())
        servers: dict[str, HostResult] = {}

        if hosts:
            tasks = {
                name: asyncio.create_task(self._resolve_host(name, cfg, request))
                for name, cfg in hosts
            }
            done, pending = await asyncio.wait(
                tasks.values(), timeout=self._config.resolve_deadline_seconds
            )
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

            for name, task in tasks.items():
                if task in done:
                    servers[name] = task.result()
                else:
                    log.warning("video_host_deadline_exceeded", host=name)
                    servers[name] = HostResult(host=name, available=False, error="Timeout")

        aggregate = VideoAggregate(servers=servers, request=request, source="live-scan")
        log.info(
            "video_resolve_complete",
            title=request.title,
            type=request.content_type,
            available=aggregate.available_count,
            hosts=len(servers),
            duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
        )
        return aggregate

    async def _resolve_host(
        self, host: str, cfg: _HostSettings, request: VideoRequest
    ) -> HostResult:
        try:
            return await self._resolve_host_unguarded(host, cfg, request)
        except Exception as e:
            log.error("video_host_resolve_error", host=host, exc_info=True)
            return HostResult(
                host=host, available=False, error=str(e) or type(e).__name__
            )

    async def _resolve_host_unguarded(
        self, host: str, cfg: _HostSettings, request: VideoRequest
    ) -> HostResult:
        if not cfg.enabled:
            return HostResult(host=host, available=False, error="disabled")

        attempts: tuple[tuple[ResultSource, _EndpointSettings, float], ...] = (
            ("primary", cfg.primary, self._config.primary_timeout_seconds),
            ("fallback", cfg.fallback, self._config.fallback_timeout_seconds),
        )
        reasons: list[str] = []

        for source, api, timeout in attempts:
            try:
                record = await self._scan(api, timeout, request)
            except HostFetchError as e:
                log.warning(
                    "video_host_scan_failed", host=host, source=source, error=str(e)
                )
                reasons.append(f"{source}: {e}")
                continue
            if record is None:
                log.debug("video_host_no_match", host=host, source=source)
                reasons.append(f"{source}: no match")
                continue

            video_id = cast(str, video_id_of(record))
            embed, download = await self._final_urls(host, cfg, api, timeout, video_id)
            log.info("video_host_match", host=host, source=source, video_id=video_id)
            return HostResult(
                host=host,
                available=True,
                embed_url=embed,
                download_url=download,
                source=source,
            )

        return HostResult(
            host=host, available=False, error="No match found (" + "; ".join(reasons) + ")"
        )

    async def _scan(
        self, api: _EndpointSettings, timeout: float, request: VideoRequest
    ) -> dict[str, Any] | None:
        videos = await self._fetcher.fetch_all_pages(api.endpoint, api.headers, timeout)
        for record in videos:
            if video_id_of(record) is None:
                continue
            if matches_request(request, parse_video_filename(video_name_of(record))):
                return record
        return None

    async def _final_urls(
        self,
        host: str,
        cfg: _HostSettings,
        api: _EndpointSettings,
        timeout: float,
        video_id: str,
    ) -> tuple[str, str]:
        embed: str | None = None
        download: str | None = None
        try:
            detail = await self._fetcher.fetch_video_detail(
                api.endpoint, video_id, api.headers, timeout
            )
            embed, download = urls_from_detail(detail)
        except HostFetchError as e:
            log.warning(
                "video_detail_failed", host=host, video_id=video_id, error=str(e)
            )
        return (
            embed or embed_url_for(cfg.embed_base, video_id),
            download or download_url_for(cfg.download_base, video_id),
        )
