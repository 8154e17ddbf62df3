"""Decoder for hosting-provider video listing pages.

Providers disagree on the response shape: some return a bare JSON array,
others wrap the list in ``data`` or ``results`` and report the page count
under one of several field names. Each shape is an explicit extraction rule;
rules are tried in priority order and the first one that applies wins.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal

PageShape = Literal["bare", "data", "results", "empty"]

# Containers searched for pagination metadata, in priority order.
# ``None`` means the response body itself.
_META_CONTAINERS: tuple[str | None, ...] = ("metadata", "meta", None)

# Page-count field names seen across providers, in priority order.
PAGE_COUNT_FIELDS: tuple[str, ...] = (
    "maxPage",
    "max_page",
    "total_pages",
    "last_page",
    "totalPages",
)


@dataclass(frozen=True)
class DecodedPage:
    """One decoded listing page."""

    kind: PageShape
    videos: list[dict[str, Any]] = field(default_factory=list)
    total_pages: int = 1


def _only_records(items: list[Any]) -> list[dict[str, Any]]:
    return [item for item in items if isinstance(item, dict)]


def _bare_array(body: Any) -> list[Any] | None:
    return body if isinstance(body, list) else None


def _wrapped(key: str) -> Callable[[Any], list[Any] | None]:
    def rule(body: Any) -> list[Any] | None:
        if isinstance(body, dict) and isinstance(body.get(key), list):
            return body[key]
        return None

    return rule


VIDEO_LIST_RULES: tuple[tuple[PageShape, Callable[[Any], list[Any] | None]], ...] = (
    ("bare", _bare_array),
    ("data", _wrapped("data")),
    ("results", _wrapped("results")),
)


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def extract_total_pages(body: Any) -> int:
    """Return the advertised page count, or 1 when none is present."""
    if not isinstance(body, dict):
        return 1
    for container_key in _META_CONTAINERS:
        container = body if container_key is None else body.get(container_key)
        if not isinstance(container, dict):
            continue
        for name in PAGE_COUNT_FIELDS:
            pages = _positive_int(container.get(name))
            if pages is not None:
                return pages
    return 1


def decode_page(body: Any) -> DecodedPage:
    """Decode a listing response body into videos plus page count.

    A bare array carries no pagination, so ``total_pages`` is always 1
    for ``kind="bare"``.
    """
    for kind, rule in VIDEO_LIST_RULES:
        items = rule(body)
        if items is None:
            continue
        if kind == "bare":
            return DecodedPage(kind=kind, videos=_only_records(items))
        return DecodedPage(
            kind=kind,
            videos=_only_records(items),
            total_pages=extract_total_pages(body),
        )
    return DecodedPage(kind="empty", total_pages=extract_total_pages(body))
