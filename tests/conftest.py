"""Shared test fixtures for the skyflix test suite."""

from __future__ import annotations

from typing import Any

import pytest

from skyflix.domain.entities.video import IndexStats, VideoEntry, VideoRequest
from skyflix.infrastructure.config.schema import (
    ApiEndpointConfig,
    HostConfig,
    HostingConfig,
)
from skyflix.infrastructure.index.store import IndexStore, VideoIndex

# ---------------------------------------------------------------------------
# Hosting configuration
# ---------------------------------------------------------------------------

ALPHA_PRIMARY = "https://alpha.example/api/v1/video/manage"
ALPHA_FALLBACK = "https://alpha-backup.example/api/v1/video/manage"
BETA_PRIMARY = "https://beta.example/api/v1/video/manage"
BETA_FALLBACK = "https://beta-backup.example/api/v1/video/manage"


def _host(primary: str, fallback: str, player: str, **kwargs: Any) -> HostConfig:
    return HostConfig(
        primary=ApiEndpointConfig(endpoint=primary, api_key="pk"),
        fallback=ApiEndpointConfig(endpoint=fallback, api_key="fk"),
        embed_base=f"https://{player}/#",
        download_base=f"https://{player}/#",
        **kwargs,
    )


@pytest.fixture()
def hosting_config() -> HostingConfig:
    """Two enabled hosts with distinct primary/fallback endpoints."""
    return HostingConfig(
        hosts={
            "alpha": _host(ALPHA_PRIMARY, ALPHA_FALLBACK, "alpha.player"),
            "beta": _host(BETA_PRIMARY, BETA_FALLBACK, "beta.player"),
        },
        resolve_deadline_seconds=5.0,
    )


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


def make_entry(host: str = "alpha", video_id: str = "v1", name: str = "x.mkv") -> VideoEntry:
    return VideoEntry(
        host=host,
        id=video_id,
        name=name,
        embed_url=f"https://{host}.player/#{video_id}",
        download_url=f"https://{host}.player/#{video_id}&dl=1",
    )


@pytest.fixture()
def entry_factory():
    """Build VideoEntry objects with predictable URLs."""
    return make_entry


@pytest.fixture()
def movie_request() -> VideoRequest:
    return VideoRequest(title="Deadpool & Wolverine", content_type="movie", year=2024)


@pytest.fixture()
def episode_request() -> VideoRequest:
    return VideoRequest(
        title="Stranger Things", content_type="series", season=1, episode=1
    )


@pytest.fixture()
def populated_store() -> IndexStore:
    """Store holding a small, already-built index."""
    movies = {
        "deadpool wolverine:2024": [make_entry("alpha", "dp1", "Deadpool & Wolverine (2024).mkv")],
        "spider man no way home:2021": [make_entry("beta", "sm1", "Spider-Man No Way Home (2021).mp4")],
        "the matrix:any": [make_entry("alpha", "mx1", "The Matrix.mkv")],
    }
    series = {
        "stranger things:1:1": [
            make_entry("alpha", "st11", "Stranger Things S01E01.mkv"),
            make_entry("beta", "st11b", "Stranger Things S01E01 {Hindi}.mkv"),
        ],
        "stranger things:1:2": [make_entry("alpha", "st12", "Stranger Things S01E02.mkv")],
    }
    stats = IndexStats(
        built=True,
        build_time="2025-01-01T00:00:00Z",
        duration_ms=12,
        movie_count=len(movies),
        series_count=len(series),
    )
    return IndexStore(VideoIndex.from_buckets(movies, series, stats))
