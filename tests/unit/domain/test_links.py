"""Tests for player/download URL helpers and index key helpers."""

from __future__ import annotations

from skyflix.domain.index_keys import (
    episode_key,
    movie_key,
    split_episode_key,
    split_movie_key,
)
from skyflix.domain.links import (
    build_entry,
    download_url_for,
    embed_url_for,
    extract_embed_url,
    urls_from_detail,
    video_id_of,
    video_name_of,
)


class TestUrlTemplates:
    def test_embed_url_appends_id(self) -> None:
        assert embed_url_for("https://p.example/#", "abc") == "https://p.example/#abc"

    def test_download_url_adds_dl_flag(self) -> None:
        assert download_url_for("https://p.example/#", "abc") == "https://p.example/#abc&dl=1"


class TestExtractEmbedUrl:
    def test_plain_url_passthrough(self) -> None:
        assert extract_embed_url("https://p.example/e/1") == "https://p.example/e/1"

    def test_iframe_src(self) -> None:
        code = '<iframe src="https://p.example/e/1" width="640"></iframe>'
        assert extract_embed_url(code) == "https://p.example/e/1"

    def test_single_quoted_src(self) -> None:
        assert extract_embed_url("<IFRAME SRC='https://p/e/2'>") == "https://p/e/2"

    def test_empty(self) -> None:
        assert extract_embed_url(None) is None
        assert extract_embed_url("") is None


class TestUrlsFromDetail:
    def test_prefers_first_known_field(self) -> None:
        detail = {
            "embed": '<iframe src="https://p/e/1"></iframe>',
            "play": "https://p/play/1",
            "downloadUrl": "https://p/d/1",
        }
        assert urls_from_detail(detail) == ("https://p/e/1", "https://p/d/1")

    def test_blank_fields_skipped(self) -> None:
        detail = {"embed": "  ", "embedUrl": "https://p/e/9", "premiumDownload": "https://p/pd/9"}
        assert urls_from_detail(detail) == ("https://p/e/9", "https://p/pd/9")

    def test_missing_fields(self) -> None:
        assert urls_from_detail({"id": "x"}) == (None, None)


class TestRecordHelpers:
    def test_numeric_id_is_stringified(self) -> None:
        assert video_id_of({"id": 42}) == "42"

    def test_missing_id(self) -> None:
        assert video_id_of({"name": "x"}) is None
        assert video_id_of({"id": ""}) is None

    def test_name_falls_back_to_title(self) -> None:
        assert video_name_of({"title": "Dune.mkv"}) == "Dune.mkv"
        assert video_name_of({}) == ""

    def test_build_entry(self) -> None:
        entry = build_entry(
            "alpha",
            {"id": "v9", "name": "Dune (2021).mkv"},
            embed_base="https://a/#",
            download_base="https://a/#",
        )
        assert entry is not None
        assert entry.host == "alpha"
        assert entry.embed_url == "https://a/#v9"
        assert entry.download_url == "https://a/#v9&dl=1"

    def test_build_entry_without_id(self) -> None:
        assert build_entry("alpha", {"name": "x"}, embed_base="", download_base="") is None


class TestIndexKeys:
    def test_movie_keys(self) -> None:
        assert movie_key("dune", 2021) == "dune:2021"
        assert movie_key("dune", None) == "dune:any"

    def test_episode_key(self) -> None:
        assert episode_key("stranger things", 1, 8) == "stranger things:1:8"

    def test_split_movie_key(self) -> None:
        assert split_movie_key("blade runner 2049:2017") == ("blade runner 2049", "2017")
        assert split_movie_key("dune:any") == ("dune", "any")

    def test_split_episode_key(self) -> None:
        assert split_episode_key("the bear:2:3") == ("the bear", 2, 3)

    def test_split_episode_key_invalid(self) -> None:
        assert split_episode_key("nonsense") is None
        assert split_episode_key("a:b:c") is None
