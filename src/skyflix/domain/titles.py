"""Title normalization, filename parsing and token-overlap matching.

Pure transformation logic without I/O.
Every index key and every fuzzy comparison goes through
:func:`normalize_title`, so its output format is load-bearing.
"""

from __future__ import annotations

import re

from skyflix.domain.entities.video import ParsedFilename

# Anything that is not a lowercase ASCII letter, digit or whitespace.
_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_WS_RE = re.compile(r"\s+")

_EXTENSION_RE = re.compile(
    r"\.(mkv|mp4|avi|mov|wmv|flv|webm|m4v|ts|mpg|mpeg)$", re.IGNORECASE
)
# Language/branding tag groups, e.g. "{Hindi-Spanish}".
_BRACE_GROUP_RE = re.compile(r"\{[^}]*\}")
# Site self-reference appended by the uploaders.
_BRANDING_RE = re.compile(r"\bSKYFLIX(ER)?\b", re.IGNORECASE)
_TRAILING_SEPARATOR_DASH_RE = re.compile(r"\s+-\s*$")
_TRAILING_DASH_RE = re.compile(r"\s*-\s*$")

# S01E08, s1e8, S01E08-E10 (first episode wins).
_SEASON_EPISODE_RE = re.compile(r"S(\d{1,2})E(\d{1,3})", re.IGNORECASE)
_YEAR_RE = re.compile(r"\((\d{4})\)")

# Tokens of this length or shorter do not count towards overlap.
_MIN_TOKEN_LEN = 2

# Word-overlap ratio at which two titles are considered the same content.
CONTENT_MATCH_THRESHOLD = 0.7


def normalize_title(raw: str | None) -> str:
    """Lowercase, replace non-alphanumerics with spaces, collapse ws, trim.

    Total and idempotent: ``None`` and ``""`` yield ``""``.
    """
    if not raw:
        return ""
    text = _NON_ALNUM_RE.sub(" ", raw.lower())
    return _WS_RE.sub(" ", text).strip()


def parse_video_filename(raw_name: str | None) -> ParsedFilename | None:
    """Parse a hosting-provider filename into title/year/season/episode.

    Handles the upload conventions seen on the hosts::

        "Ask Me What You Want (2024) {Hindi-Spanish} SKYFLIXER.mkv"
        "Stranger Things S01E01 {Hindi} SKYFLIXER.mkv"
        "Stranger Things S01E01.mkv"

    Returns ``None`` only for empty input. A name with neither a year nor a
    season/episode token is still returned (title only), so the caller can
    index it as a year-agnostic movie.
    """
    if not raw_name:
        return None

    name = _EXTENSION_RE.sub("", raw_name)
    name = _BRACE_GROUP_RE.sub("", name)
    name = _BRANDING_RE.sub("", name)
    name = name.replace("_", " ")
    name = _TRAILING_SEPARATOR_DASH_RE.sub("", name).strip()

    season: int | None = None
    episode: int | None = None
    title_part = name

    se_match = _SEASON_EPISODE_RE.search(name)
    if se_match:
        season = int(se_match.group(1))
        episode = int(se_match.group(2))
        title_part = name[: se_match.start()].strip()

    year: int | None = None
    year_match = _YEAR_RE.search(title_part)
    if year_match:
        year = int(year_match.group(1))
        title_part = title_part[: year_match.start()].strip()

    title_part = _TRAILING_DASH_RE.sub("", title_part)
    title_part = _WS_RE.sub(" ", title_part).strip()

    return ParsedFilename(
        title=title_part,
        normalized_title=normalize_title(title_part),
        original_name=raw_name,
        year=year,
        season=season,
        episode=episode,
    )


def _token_set(title: str) -> set[str]:
    return {w for w in title.split() if len(w) >= _MIN_TOKEN_LEN}


def overlap_score(a: str, b: str) -> float:
    """Word-overlap similarity of two normalized titles, in ``[0, 1]``.

    ``|A ∩ B| / max(|A|, |B|)`` over the sets of tokens longer than one
    character. Symmetric; 0.0 when either side has no usable tokens.
    """
    set_a = _token_set(a)
    set_b = _token_set(b)
    if not set_a or not set_b:
        return 0.0
    return len(set_a & set_b) / max(len(set_a), len(set_b))


def titles_match(requested: str, candidate: str) -> bool:
    """Loose title equality used when scanning a host's listing live.

    True on normalized equality, containment in either direction, or a
    word overlap of at least :data:`CONTENT_MATCH_THRESHOLD`.
    """
    norm_a = normalize_title(requested)
    norm_b = normalize_title(candidate)
    if not norm_a or not norm_b:
        return False
    if norm_a == norm_b or norm_a in norm_b or norm_b in norm_a:
        return True
    return overlap_score(norm_a, norm_b) >= CONTENT_MATCH_THRESHOLD
