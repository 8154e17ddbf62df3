"""Player/download URL construction for hosted videos."""

from __future__ import annotations

import re
from typing import Any

from skyflix.domain.entities.video import VideoEntry

_IFRAME_SRC_RE = re.compile(r"""src=['"]([^'"]+)['"]""", re.IGNORECASE)

_EMBED_FIELDS = ("embed", "embedUrl", "play")
_DOWNLOAD_FIELDS = ("download", "downloadUrl", "premiumDownload")


def embed_url_for(embed_base: str, video_id: str) -> str:
    return f"{embed_base}{video_id}"


def download_url_for(download_base: str, video_id: str) -> str:
    return f"{download_base}{video_id}&dl=1"


def extract_embed_url(embed_code: str | None) -> str | None:
    """Return a URL from either a plain URL or an ``<iframe src=...>`` snippet."""
    if not embed_code:
        return None
    embed_code = embed_code.strip()
    if embed_code.startswith("http"):
        return embed_code
    m = _IFRAME_SRC_RE.search(embed_code)
    return m.group(1) if m else embed_code


def _first_str(detail: dict[str, Any], fields: tuple[str, ...]) -> str | None:
    for name in fields:
        value = detail.get(name)
        if isinstance(value, str) and value.strip():
            return value
    return None


def urls_from_detail(detail: dict[str, Any]) -> tuple[str | None, str | None]:
    """Pick explicit (embed, download) URLs out of a video detail payload."""
    return (
        extract_embed_url(_first_str(detail, _EMBED_FIELDS)),
        _first_str(detail, _DOWNLOAD_FIELDS),
    )


def video_id_of(record: dict[str, Any]) -> str | None:
    raw = record.get("id")
    if raw is None or raw == "":
        return None
    return str(raw)


def video_name_of(record: dict[str, Any]) -> str:
    name = record.get("name") or record.get("title") or ""
    return name if isinstance(name, str) else str(name)


def build_entry(
    host: str,
    record: dict[str, Any],
    *,
    embed_base: str,
    download_base: str,
) -> VideoEntry | None:
    """Build a VideoEntry from a raw listing record (None without an id)."""
    video_id = video_id_of(record)
    if video_id is None:
        return None
    return VideoEntry(
        host=host,
        id=video_id,
        name=video_name_of(record),
        embed_url=embed_url_for(embed_base, video_id),
        download_url=download_url_for(download_base, video_id),
    )
