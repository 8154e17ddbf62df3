"""Hosting-provider API access."""

from .page_decoder import DecodedPage, decode_page, extract_total_pages
from .page_fetcher import HttpxHostPageFetcher

__all__ = [
    "DecodedPage",
    "HttpxHostPageFetcher",
    "decode_page",
    "extract_total_pages",
]
