"""Index lookup use case - tiered exact/tolerant/fuzzy search of the index.

Resolution order for movies (first non-empty tier wins):

1. exact ``title:year``
2. ``title:year-1`` then ``title:year+1`` (catalog vs. filename year drift)
3. year-agnostic ``title:any``
4. fuzzy word-overlap scan over keys in the same year window or ``any``

Episodes: exact ``title:season:episode``, then a fuzzy scan restricted to
the same season and episode.

The thresholds below are the tuning knobs most likely to need revisiting
against real mismatch data.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import structlog

from skyflix.domain.entities.video import VideoEntry, VideoRequest
from skyflix.domain.index_keys import (
    ANY_YEAR,
    episode_key,
    movie_key,
    split_episode_key,
    split_movie_key,
)
from skyflix.domain.ports.video_index import VideoIndexReader
from skyflix.domain.titles import normalize_title, overlap_score

log = structlog.get_logger(__name__)

MOVIE_FUZZY_THRESHOLD = 0.7
EPISODE_FUZZY_THRESHOLD = 0.6
YEAR_TOLERANCE = 1


def _year_offsets(tolerance: int) -> Iterable[int]:
    """-1, +1, -2, +2, ... up to *tolerance*."""
    for d in range(1, tolerance + 1):
        yield -d
        yield d


def _best_fuzzy(
    candidates: Iterable[tuple[str, tuple[VideoEntry, ...]]],
    norm_title: str,
    threshold: float,
) -> tuple[VideoEntry, ...] | None:
    best: tuple[VideoEntry, ...] | None = None
    best_score = 0.0
    for key_title, entries in candidates:
        score = overlap_score(norm_title, key_title)
        if score > best_score and score >= threshold:
            best_score = score
            best = entries
    return best


class IndexLookupUseCase:
    """Answers title lookups from the current index snapshot (no network)."""

    def __init__(self, index: VideoIndexReader) -> None:
        self._index = index

    @property
    def is_ready(self) -> bool:
        return self._index.current.stats.built

    def lookup_movie(self, title: str, year: int | None) -> list[VideoEntry]:
        movies = self._index.current.movies
        norm = normalize_title(title)

        if year is not None:
            hit = movies.get(movie_key(norm, year))
            if hit:
                return list(hit)
            for offset in _year_offsets(YEAR_TOLERANCE):
                hit = movies.get(movie_key(norm, year + offset))
                if hit:
                    return list(hit)

        hit = movies.get(movie_key(norm, None))
        if hit:
            return list(hit)

        window = {ANY_YEAR}
        if year is not None:
            window.update(
                str(year + d) for d in range(-YEAR_TOLERANCE, YEAR_TOLERANCE + 1)
            )
        best = _best_fuzzy(
            self._movie_candidates(movies, window), norm, MOVIE_FUZZY_THRESHOLD
        )
        if best is None:
            log.debug("index_movie_miss", title=title, year=year)
            return []
        return list(best)

    @staticmethod
    def _movie_candidates(
        movies: Mapping[str, tuple[VideoEntry, ...]], window: set[str]
    ) -> Iterable[tuple[str, tuple[VideoEntry, ...]]]:
        for key, entries in movies.items():
            key_title, year_part = split_movie_key(key)
            if year_part in window:
                yield key_title, entries

    def lookup_episode(self, title: str, season: int, episode: int) -> list[VideoEntry]:
        series = self._index.current.series
        norm = normalize_title(title)

        hit = series.get(episode_key(norm, season, episode))
        if hit:
            return list(hit)

        def candidates() -> Iterable[tuple[str, tuple[VideoEntry, ...]]]:
            for key, entries in series.items():
                parts = split_episode_key(key)
                if parts is None:
                    continue
                key_title, key_season, key_episode = parts
                if key_season == season and key_episode == episode:
                    yield key_title, entries

        best = _best_fuzzy(candidates(), norm, EPISODE_FUZZY_THRESHOLD)
        if best is None:
            log.debug(
                "index_episode_miss", title=title, season=season, episode=episode
            )
            return []
        return list(best)

    def lookup(self, request: VideoRequest) -> list[VideoEntry]:
        if request.content_type == "movie":
            return self.lookup_movie(request.title, request.year)
        if request.season is None or request.episode is None:
            return []
        return self.lookup_episode(request.title, request.season, request.episode)
