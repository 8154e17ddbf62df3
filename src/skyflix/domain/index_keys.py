"""Key format of the movie and series index maps.

Movies:  ``"{normalized_title}:{year}"`` or ``"{normalized_title}:any"``
Series:  ``"{normalized_title}:{season}:{episode}"``

Normalized titles never contain ``:``, but keys are still split from the
right so the title part is always recovered whole.
"""

from __future__ import annotations

ANY_YEAR = "any"


def movie_key(normalized_title: str, year: int | None) -> str:
    return f"{normalized_title}:{year if year is not None else ANY_YEAR}"


def episode_key(normalized_title: str, season: int, episode: int) -> str:
    return f"{normalized_title}:{season}:{episode}"


def split_movie_key(key: str) -> tuple[str, str]:
    """Return ``(title, year_part)``; ``year_part`` is digits or ``"any"``."""
    title, _, year_part = key.rpartition(":")
    return title, year_part


def split_episode_key(key: str) -> tuple[str, int, int] | None:
    parts = key.rsplit(":", 2)
    if len(parts) != 3:
        return None
    try:
        return parts[0], int(parts[1]), int(parts[2])
    except ValueError:
        return None
