"""Hosting API client - exhaustive paginated listing and per-video detail."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from skyflix.domain.entities.video import HostFetchError
from skyflix.infrastructure.hosting.page_decoder import decode_page

log = structlog.get_logger(__name__)

# Upper bound on pages fetched per listing; protects against bogus metadata.
MAX_PAGES = 500

DEFAULT_MAX_CONCURRENCY = 16


class HttpxHostPageFetcher:
    """Fetches video listings from hosting APIs via a shared httpx client.

    Implements ``HostPageFetcherPort`` from domain.ports.video_index.

    Every request first takes a slot from a fetcher-wide semaphore sized to
    the client's connection pool. The per-request timeout only starts once
    the slot is held, so queued pages never time out locally.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self._http = http_client
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def _get_json(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        timeout: float,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """GET *url* bounded by *timeout* seconds; raise HostFetchError on failure."""
        try:
            async with self._semaphore:
                resp = await asyncio.wait_for(
                    self._http.get(
                        url,
                        params=params,
                        headers=dict(headers),
                        timeout=timeout,
                    ),
                    timeout=timeout,
                )
            resp.raise_for_status()
            return resp.json()
        except (TimeoutError, asyncio.TimeoutError) as e:
            raise HostFetchError(f"timeout after {timeout}s: {url}") from e
        except httpx.HTTPStatusError as e:
            raise HostFetchError(
                f"HTTP {e.response.status_code} from {url}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise HostFetchError(f"{type(e).__name__} for {url}: {e}") from e
        except ValueError as e:
            raise HostFetchError(f"invalid JSON from {url}") from e

    async def _fetch_page_or_empty(
        self,
        endpoint: str,
        page: int,
        headers: Mapping[str, str],
        timeout: float,
    ) -> list[dict[str, Any]]:
        try:
            body = await self._get_json(
                endpoint, params={"page": page}, headers=headers, timeout=timeout
            )
        except HostFetchError as e:
            log.warning("host_page_failed", endpoint=endpoint, page=page, error=str(e))
            return []
        return decode_page(body).videos

    async def fetch_all_pages(
        self,
        endpoint: str,
        headers: Mapping[str, str],
        timeout: float,
    ) -> list[dict[str, Any]]:
        """Fetch every page of *endpoint*'s listing and concatenate the videos.

        Page 1 is fetched first to learn the page count; its failure raises
        ``HostFetchError``. Pages 2..N run concurrently and a failing page
        contributes nothing. Result order across pages is not guaranteed.
        """
        first = decode_page(
            await self._get_json(
                endpoint, params={"page": 1}, headers=headers, timeout=timeout
            )
        )
        videos = list(first.videos)
        if first.kind == "bare" or first.total_pages <= 1:
            return videos

        total_pages = first.total_pages
        if total_pages > MAX_PAGES:
            log.warning(
                "host_page_count_capped",
                endpoint=endpoint,
                advertised=total_pages,
                cap=MAX_PAGES,
            )
            total_pages = MAX_PAGES

        rest = await asyncio.gather(
            *(
                self._fetch_page_or_empty(endpoint, page, headers, timeout)
                for page in range(2, total_pages + 1)
            )
        )
        for page_videos in rest:
            videos.extend(page_videos)

        log.debug(
            "host_pages_fetched",
            endpoint=endpoint,
            pages=total_pages,
            videos=len(videos),
        )
        return videos

    async def fetch_video_detail(
        self,
        endpoint: str,
        video_id: str,
        headers: Mapping[str, str],
        timeout: float,
    ) -> dict[str, Any]:
        """Fetch ``{endpoint}/{video_id}``; the body must be a JSON object."""
        url = f"{endpoint.rstrip('/')}/{video_id}"
        body = await self._get_json(url, headers=headers, timeout=timeout)
        if not isinstance(body, dict):
            raise HostFetchError(f"unexpected detail payload from {url}")
        return body
