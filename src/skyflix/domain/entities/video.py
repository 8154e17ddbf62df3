"""Domain entities for video hosting lookups.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

ContentType = Literal["movie", "series"]
ResultSource = Literal["primary", "fallback", "index"]
AggregateSource = Literal["live-scan", "index"]
KeyKind = Literal["episode", "movie", "movie-any"]


@dataclass(frozen=True)
class ParsedFilename:
    """Structured view of a raw hosting-provider filename.

    ``season`` and ``episode`` are either both set or both ``None``.
    """

    title: str
    normalized_title: str
    original_name: str
    year: int | None = None
    season: int | None = None
    episode: int | None = None

    @property
    def is_episode(self) -> bool:
        return self.season is not None and self.episode is not None

    @property
    def key_kind(self) -> KeyKind:
        """Which index map (and key shape) this filename belongs to."""
        if self.is_episode:
            return "episode"
        if self.year is not None:
            return "movie"
        return "movie-any"


@dataclass(frozen=True)
class VideoEntry:
    """One playable video at one host."""

    host: str
    id: str
    name: str
    embed_url: str
    download_url: str


@dataclass(frozen=True)
class HostBuildCount:
    """Per-host outcome of an index build."""

    indexed: int = 0
    total: int = 0
    error: str | None = None


@dataclass(frozen=True)
class IndexStats:
    """Snapshot metadata for the current video index."""

    built: bool = False
    build_time: str | None = None  # ISO-8601 UTC
    duration_ms: int | None = None
    movie_count: int = 0
    series_count: int = 0
    counts: dict[str, HostBuildCount] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the camelCase shape exposed over HTTP."""
        if not self.built:
            return {"built": False, "buildTime": None, "counts": {}}
        counts: dict[str, Any] = {}
        for host, c in self.counts.items():
            entry: dict[str, Any] = {"indexed": c.indexed, "total": c.total}
            if c.error:
                entry["error"] = c.error
            counts[host] = entry
        return {
            "built": True,
            "buildTime": self.build_time,
            "durationMs": self.duration_ms,
            "movieCount": self.movie_count,
            "seriesCount": self.series_count,
            "counts": counts,
        }


@dataclass(frozen=True)
class VideoRequest:
    """A validated "find a video for this title" request."""

    title: str
    content_type: ContentType
    year: int | None = None
    season: int | None = None
    episode: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "type": self.content_type,
            "year": self.year,
            "season": self.season,
            "episode": self.episode,
        }


@dataclass(frozen=True)
class HostResult:
    """Resolution outcome for a single host."""

    host: str
    available: bool
    embed_url: str | None = None
    download_url: str | None = None
    source: ResultSource | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"hostName": self.host, "available": self.available}
        if self.embed_url is not None:
            out["embedUrl"] = self.embed_url
        if self.download_url is not None:
            out["downloadUrl"] = self.download_url
        if self.source is not None:
            out["source"] = self.source
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class VideoAggregate:
    """Per-host results for one request, as returned to callers."""

    servers: dict[str, HostResult]
    request: VideoRequest
    source: AggregateSource = "live-scan"

    @property
    def available_count(self) -> int:
        return sum(1 for r in self.servers.values() if r.available)

    def to_dict(self) -> dict[str, Any]:
        return {
            "servers": {name: r.to_dict() for name, r in self.servers.items()},
            "availableCount": self.available_count,
            "request": self.request.to_dict(),
            "source": self.source,
        }


class VideoHostingError(Exception):
    """Base error for the video hosting subsystem."""


class InvalidVideoRequest(VideoHostingError):
    """Request is missing required fields (maps to HTTP 400)."""

    def __init__(self, message: str, *, required: list[str] | None = None) -> None:
        super().__init__(message)
        self.required = required


class HostFetchError(VideoHostingError):
    """A hosting API request failed or returned an undecodable body."""
