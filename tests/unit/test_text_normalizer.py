"""Unit tests for text normalization utilities."""

from __future__ import annotations

import pytest

from showlist.utils.text_normalizer import (
    create_slug,
    fuzzy_match,
    normalize_city,
    normalize_name,
    split_artist_names,
    to_title_case,
)


# ======================================================================
# normalize_name
# ======================================================================


class TestNormalizeName:
    """Tests for the identity-key normalization."""

    def test_lowercases(self) -> None:
        assert normalize_name("Arctic Monkeys") == "arctic monkeys"

    def test_strips_leading_article(self) -> None:
        assert normalize_name("The Strokes") == "strokes"

    def test_article_case_insensitive(self) -> None:
        assert normalize_name("THE STROKES") == normalize_name("the strokes")

    def test_strips_dj_prefix(self) -> None:
        assert normalize_name("DJ Shadow") == "shadow"

    def test_strips_band_suffix(self) -> None:
        assert normalize_name("Beat Happening Band") == "beat happening"

    def test_unifies_typographic_apostrophe(self) -> None:
        assert normalize_name("Guns N’ Roses") == "guns n' roses"

    def test_collapses_whitespace(self) -> None:
        assert normalize_name("  Arctic    Monkeys ") == "arctic monkeys"

    def test_empty_string(self) -> None:
        assert normalize_name("") == ""


# ======================================================================
# create_slug / to_title_case
# ======================================================================


class TestCreateSlug:
    def test_basic(self) -> None:
        assert create_slug("Fox Theater") == "fox-theater"

    def test_drops_punctuation(self) -> None:
        assert create_slug("924 Gilman St.") == "924-gilman-st"

    def test_collapses_dashes(self) -> None:
        assert create_slug("Rock -- Roll") == "rock-roll"

    def test_trims_edge_dashes(self) -> None:
        assert create_slug("!Hello!") == "hello"


class TestToTitleCase:
    def test_title_cases_each_word(self) -> None:
        assert to_title_case("east OAKLAND") == "East Oakland"


# ======================================================================
# normalize_city
# ======================================================================


class TestNormalizeCity:
    """Tests for city alias resolution."""

    @pytest.mark.parametrize(
        "raw",
        ["sf", "SF", "S.F.", "s.f", "san fran", "San Francisco"],
    )
    def test_san_francisco_aliases(self, raw: str) -> None:
        assert normalize_city(raw) == "San Francisco"

    def test_unknown_city_title_cased(self) -> None:
        assert normalize_city("emeryville") == "Emeryville"

    def test_extra_aliases_take_precedence(self) -> None:
        assert normalize_city("eville", {"eville": "Emeryville"}) == "Emeryville"

    def test_empty(self) -> None:
        assert normalize_city("  ") == ""


# ======================================================================
# split_artist_names
# ======================================================================


class TestSplitArtistNames:
    """Tests for the split_artist_names function."""

    def test_comma_and_ampersand(self) -> None:
        result = split_artist_names("The Strokes, Arctic Monkeys & Franz Ferdinand")
        assert result == ["The Strokes", "Arctic Monkeys", "Franz Ferdinand"]

    def test_with_connective(self) -> None:
        assert split_artist_names("Green Day with Rancid") == ["Green Day", "Rancid"]

    def test_unspaced_ampersand_kept(self) -> None:
        assert split_artist_names("AT&T Band") == ["AT&T Band"]

    def test_special_guest_label_removed(self) -> None:
        result = split_artist_names("The Strokes, special guests: Franz Ferdinand")
        assert result == ["The Strokes", "Franz Ferdinand"]

    def test_empty_parts_dropped(self) -> None:
        assert split_artist_names(" , Rancid, ") == ["Rancid"]

    def test_and_prefix_requires_word_boundary(self) -> None:
        assert split_artist_names("Andrew Bird") == ["Andrew Bird"]


# ======================================================================
# fuzzy_match
# ======================================================================


class TestFuzzyMatch:
    def test_close_match_found(self) -> None:
        result = fuzzy_match("mountain goat", ["mountain goats", "rancid"], threshold=0.9)
        assert result is not None
        match, score = result
        assert match == "mountain goats"
        assert 0.9 <= score < 1.0

    def test_word_order_ignored(self) -> None:
        result = fuzzy_match("cox carl", ["carl cox"])
        assert result == ("carl cox", 1.0)

    def test_below_threshold(self) -> None:
        assert fuzzy_match("rancid", ["green day"], threshold=0.9) is None

    def test_no_candidates(self) -> None:
        assert fuzzy_match("rancid", []) is None
