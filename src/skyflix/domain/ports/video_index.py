"""Ports consumed by the index lookup and video resolve use cases."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from skyflix.domain.entities.video import IndexStats, VideoEntry


@runtime_checkable
class VideoIndexSnapshot(Protocol):
    """An immutable movie/series index pair plus its build stats."""

    @property
    def movies(self) -> Mapping[str, tuple[VideoEntry, ...]]: ...

    @property
    def series(self) -> Mapping[str, tuple[VideoEntry, ...]]: ...

    @property
    def stats(self) -> IndexStats: ...


class VideoIndexReader(Protocol):
    """Read side of the index store: hands out the current snapshot."""

    @property
    def current(self) -> VideoIndexSnapshot: ...


class HostPageFetcherPort(Protocol):
    """Network access to a hosting provider's video listing API."""

    async def fetch_all_pages(
        self,
        endpoint: str,
        headers: Mapping[str, str],
        timeout: float,
    ) -> list[dict[str, Any]]: ...

    async def fetch_video_detail(
        self,
        endpoint: str,
        video_id: str,
        headers: Mapping[str, str],
        timeout: float,
    ) -> dict[str, Any]: ...
