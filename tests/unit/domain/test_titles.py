"""Tests for title normalization, filename parsing and overlap scoring."""

from __future__ import annotations

import pytest

from skyflix.domain.titles import (
    CONTENT_MATCH_THRESHOLD,
    normalize_title,
    overlap_score,
    parse_video_filename,
    titles_match,
)

# ---------------------------------------------------------------------------
# normalize_title
# ---------------------------------------------------------------------------


class TestNormalizeTitle:
    def test_lowercases_and_strips_punctuation(self) -> None:
        assert normalize_title("Deadpool & Wolverine") == "deadpool wolverine"

    def test_collapses_whitespace(self) -> None:
        assert normalize_title("  It:   Welcome\tto  Derry ") == "it welcome to derry"

    @pytest.mark.parametrize("raw", [None, ""])
    def test_empty_input_yields_empty_string(self, raw: str | None) -> None:
        assert normalize_title(raw) == ""

    def test_non_ascii_letters_become_spaces(self) -> None:
        assert normalize_title("Amélie") == "am lie"

    def test_idempotent(self) -> None:
        once = normalize_title("Spider-Man: No Way Home!")
        assert normalize_title(once) == once

    def test_output_alphabet(self) -> None:
        out = normalize_title("Mission: Impossible – Dead Reckoning (Part One)")
        assert all(c.isdigit() or ("a" <= c <= "z") or c == " " for c in out)
        assert "  " not in out
        assert out == out.strip()


# ---------------------------------------------------------------------------
# parse_video_filename
# ---------------------------------------------------------------------------


class TestParseVideoFilename:
    def test_episode_with_colon_in_title(self) -> None:
        parsed = parse_video_filename("It: Welcome to Derry S01E08.mkv")
        assert parsed is not None
        assert parsed.title == "It: Welcome to Derry"
        assert parsed.normalized_title == "it welcome to derry"
        assert parsed.season == 1
        assert parsed.episode == 8
        assert parsed.year is None
        assert parsed.is_episode is True

    def test_movie_with_language_tag_and_branding(self) -> None:
        raw = "Ask Me What You Want (2024) {Hindi-Spanish} SKYFLIXER.mkv"
        parsed = parse_video_filename(raw)
        assert parsed is not None
        assert parsed.title == "Ask Me What You Want"
        assert parsed.year == 2024
        assert parsed.season is None
        assert parsed.episode is None
        assert parsed.original_name == raw

    def test_branding_without_suffix(self) -> None:
        parsed = parse_video_filename("Dune Part Two (2024) SKYFLIX.mp4")
        assert parsed is not None
        assert parsed.title == "Dune Part Two"
        assert parsed.year == 2024

    def test_underscores_become_spaces(self) -> None:
        parsed = parse_video_filename("Stranger_Things_S04E09.mkv")
        assert parsed is not None
        assert parsed.title == "Stranger Things"
        assert (parsed.season, parsed.episode) == (4, 9)

    def test_trailing_dash_is_trimmed(self) -> None:
        parsed = parse_video_filename("The Bear - S02E03 - .mkv")
        assert parsed is not None
        assert parsed.title == "The Bear"
        assert (parsed.season, parsed.episode) == (2, 3)

    def test_lowercase_episode_marker(self) -> None:
        parsed = parse_video_filename("severance s2e10.mkv")
        assert parsed is not None
        assert (parsed.season, parsed.episode) == (2, 10)

    def test_extension_is_case_insensitive(self) -> None:
        parsed = parse_video_filename("Alien Romulus (2024).MKV")
        assert parsed is not None
        assert parsed.title == "Alien Romulus"

    def test_title_only_name(self) -> None:
        parsed = parse_video_filename("The Matrix.mkv")
        assert parsed is not None
        assert parsed.title == "The Matrix"
        assert parsed.year is None
        assert parsed.is_episode is False

    @pytest.mark.parametrize("raw", [None, ""])
    def test_empty_input_returns_none(self, raw: str | None) -> None:
        assert parse_video_filename(raw) is None

    def test_season_and_episode_set_together(self) -> None:
        for raw in ("A S01E02.mkv", "B (2020).mkv", "C.mkv"):
            parsed = parse_video_filename(raw)
            assert parsed is not None
            assert (parsed.season is None) == (parsed.episode is None)

    @pytest.mark.parametrize(
        ("raw", "kind"),
        [
            ("Dark S02E05.mkv", "episode"),
            ("Dune (2021).mp4", "movie"),
            ("Heat.avi", "movie-any"),
        ],
    )
    def test_key_kind(self, raw: str, kind: str) -> None:
        parsed = parse_video_filename(raw)
        assert parsed is not None
        assert parsed.key_kind == kind


# ---------------------------------------------------------------------------
# overlap_score / titles_match
# ---------------------------------------------------------------------------


class TestOverlapScore:
    def test_identical_titles(self) -> None:
        assert overlap_score("stranger things", "stranger things") == 1.0

    def test_partial_overlap(self) -> None:
        # {deadpool, wolverine} vs {deadpool, and, wolverine}
        assert overlap_score("deadpool wolverine", "deadpool and wolverine") == pytest.approx(2 / 3)

    def test_symmetric(self) -> None:
        a, b = "spider man no way home", "spider man far from home"
        assert overlap_score(a, b) == overlap_score(b, a)

    def test_single_char_tokens_ignored(self) -> None:
        assert overlap_score("a b c", "a b c") == 0.0

    def test_empty_side_scores_zero(self) -> None:
        assert overlap_score("", "anything") == 0.0

    def test_disjoint(self) -> None:
        assert overlap_score("strnger thngs", "stranger things") == 0.0


class TestTitlesMatch:
    def test_equal_after_normalization(self) -> None:
        assert titles_match("Deadpool & Wolverine", "deadpool wolverine")

    def test_containment(self) -> None:
        assert titles_match("Dune", "Dune Part Two")

    def test_overlap_above_threshold(self) -> None:
        assert overlap_score("spider man no way home extended", "spider man no way home") >= CONTENT_MATCH_THRESHOLD
        assert titles_match("Spider-Man No Way Home Extended", "Spider Man: No Way Home")

    def test_unrelated_titles(self) -> None:
        assert not titles_match("Inception", "Interstellar")

    def test_empty_never_matches(self) -> None:
        assert not titles_match("", "Inception")
