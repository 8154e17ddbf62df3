"""Tests for the listing page decoder rules."""

from __future__ import annotations

import pytest

from skyflix.infrastructure.hosting.page_decoder import (
    PAGE_COUNT_FIELDS,
    decode_page,
    extract_total_pages,
)

_VIDEOS = [{"id": "1", "name": "A.mkv"}, {"id": "2", "name": "B.mkv"}]


class TestDecodePage:
    def test_bare_array(self) -> None:
        page = decode_page(_VIDEOS)
        assert page.kind == "bare"
        assert page.videos == _VIDEOS
        assert page.total_pages == 1

    def test_data_wrapper_with_metadata(self) -> None:
        page = decode_page({"data": _VIDEOS, "metadata": {"maxPage": 4}})
        assert page.kind == "data"
        assert page.videos == _VIDEOS
        assert page.total_pages == 4

    def test_results_wrapper(self) -> None:
        page = decode_page({"results": _VIDEOS, "total_pages": "3"})
        assert page.kind == "results"
        assert page.total_pages == 3

    def test_data_wins_over_results(self) -> None:
        page = decode_page({"data": _VIDEOS[:1], "results": _VIDEOS})
        assert page.kind == "data"
        assert len(page.videos) == 1

    def test_non_record_items_dropped(self) -> None:
        page = decode_page({"data": [_VIDEOS[0], "junk", 7, None]})
        assert page.videos == [_VIDEOS[0]]

    def test_unknown_shape_is_empty(self) -> None:
        page = decode_page({"status": "ok"})
        assert page.kind == "empty"
        assert page.videos == []

    def test_null_body(self) -> None:
        assert decode_page(None).kind == "empty"


class TestExtractTotalPages:
    @pytest.mark.parametrize("name", PAGE_COUNT_FIELDS)
    def test_every_field_name(self, name: str) -> None:
        assert extract_total_pages({"data": [], name: 6}) == 6

    def test_metadata_before_body(self) -> None:
        body = {"metadata": {"last_page": 2}, "meta": {"last_page": 5}, "last_page": 9}
        assert extract_total_pages(body) == 2

    def test_meta_container(self) -> None:
        assert extract_total_pages({"meta": {"totalPages": 7}}) == 7

    @pytest.mark.parametrize("value", [0, -1, "x", None, True])
    def test_invalid_values_default_to_one(self, value: object) -> None:
        assert extract_total_pages({"maxPage": value}) == 1

    def test_missing_defaults_to_one(self) -> None:
        assert extract_total_pages({"data": []}) == 1
