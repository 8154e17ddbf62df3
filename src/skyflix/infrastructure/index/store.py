"""In-memory video index: immutable snapshots behind a single reference."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

import structlog

from skyflix.domain.entities.video import IndexStats, VideoEntry

log = structlog.get_logger(__name__)


def _empty_map() -> Mapping[str, tuple[VideoEntry, ...]]:
    return MappingProxyType({})


@dataclass(frozen=True)
class VideoIndex:
    """Movie and series maps plus the stats of the build that produced them.

    Never mutated after construction; a rebuild produces a new instance.
    """

    movies: Mapping[str, tuple[VideoEntry, ...]] = field(default_factory=_empty_map)
    series: Mapping[str, tuple[VideoEntry, ...]] = field(default_factory=_empty_map)
    stats: IndexStats = field(default_factory=IndexStats)

    @classmethod
    def from_buckets(
        cls,
        movies: Mapping[str, list[VideoEntry]],
        series: Mapping[str, list[VideoEntry]],
        stats: IndexStats,
    ) -> VideoIndex:
        return cls(
            movies=MappingProxyType({k: tuple(v) for k, v in movies.items()}),
            series=MappingProxyType({k: tuple(v) for k, v in series.items()}),
            stats=stats,
        )


class IndexStore:
    """Owns the live VideoIndex.

    Single writer (the index builder), many readers. Readers grab
    ``store.current`` once and work on that snapshot; ``swap`` replaces the
    reference in one assignment, so a reader sees either the old or the new
    index in full.
    """

    def __init__(self, initial: VideoIndex | None = None) -> None:
        self._current = initial or VideoIndex()

    @property
    def current(self) -> VideoIndex:
        return self._current

    @property
    def is_ready(self) -> bool:
        return self._current.stats.built

    def swap(self, new_index: VideoIndex) -> VideoIndex:
        """Install *new_index* and return the one it replaced."""
        previous = self._current
        self._current = new_index
        log.info(
            "index_swapped",
            movie_keys=len(new_index.movies),
            series_keys=len(new_index.series),
        )
        return previous
