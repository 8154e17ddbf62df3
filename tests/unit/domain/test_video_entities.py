"""Tests for video domain entities and their HTTP serialization."""

from __future__ import annotations

import dataclasses

import pytest

from skyflix.domain.entities import (
    HostBuildCount,
    HostResult,
    IndexStats,
    InvalidVideoRequest,
    VideoAggregate,
    VideoHostingError,
    VideoRequest,
)


class TestIndexStats:
    def test_unbuilt_shape(self) -> None:
        assert IndexStats().to_dict() == {"built": False, "buildTime": None, "counts": {}}

    def test_built_shape_is_camel_case(self) -> None:
        stats = IndexStats(
            built=True,
            build_time="2025-01-01T00:00:00Z",
            duration_ms=1500,
            movie_count=10,
            series_count=4,
            counts={
                "alpha": HostBuildCount(indexed=8, total=9),
                "beta": HostBuildCount(error="disabled"),
            },
        )
        assert stats.to_dict() == {
            "built": True,
            "buildTime": "2025-01-01T00:00:00Z",
            "durationMs": 1500,
            "movieCount": 10,
            "seriesCount": 4,
            "counts": {
                "alpha": {"indexed": 8, "total": 9},
                "beta": {"indexed": 0, "total": 0, "error": "disabled"},
            },
        }


class TestVideoAggregate:
    def test_available_count_and_shape(self, movie_request: VideoRequest) -> None:
        agg = VideoAggregate(
            servers={
                "alpha": HostResult(
                    host="alpha",
                    available=True,
                    embed_url="https://a/#1",
                    download_url="https://a/#1&dl=1",
                    source="primary",
                ),
                "beta": HostResult(host="beta", available=False, error="Timeout"),
            },
            request=movie_request,
        )
        assert agg.available_count == 1
        data = agg.to_dict()
        assert data["availableCount"] == 1
        assert data["source"] == "live-scan"
        assert data["request"]["type"] == "movie"
        assert data["servers"]["alpha"] == {
            "hostName": "alpha",
            "available": True,
            "embedUrl": "https://a/#1",
            "downloadUrl": "https://a/#1&dl=1",
            "source": "primary",
        }
        assert data["servers"]["beta"] == {
            "hostName": "beta",
            "available": False,
            "error": "Timeout",
        }

    def test_frozen(self, movie_request: VideoRequest) -> None:
        agg = VideoAggregate(servers={}, request=movie_request)
        with pytest.raises(dataclasses.FrozenInstanceError):
            agg.source = "index"  # type: ignore[misc]


class TestErrors:
    def test_invalid_request_carries_required(self) -> None:
        err = InvalidVideoRequest("Missing required fields", required=["title", "type"])
        assert isinstance(err, VideoHostingError)
        assert str(err) == "Missing required fields"
        assert err.required == ["title", "type"]
