"""Unit tests for the similarity module."""

import pytest

from src.similarity import Match, find_closest, levenshtein, rank_similar, similarity


class TestLevenshtein:
    """Tests for edit distance."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("", "", 0),
            ("abc", "", 3),
            ("", "abc", 3),
            ("kitten", "sitting", 3),
            ("Containr", "Container", 1),
            ("Buton", "Button", 1),
            ("same", "same", 0),
        ],
    )
    def test_known_distances(self, a, b, expected):
        assert levenshtein(a, b) == expected

    @pytest.mark.unit
    def test_symmetric(self):
        assert levenshtein("flaw", "lawn") == levenshtein("lawn", "flaw")


class TestSimilarity:
    """Tests for normalized similarity."""

    @pytest.mark.unit
    def test_identical(self):
        assert similarity("Button", "Button") == 1.0

    @pytest.mark.unit
    def test_case_insensitive(self):
        assert similarity("BUTTON", "button") == 1.0

    @pytest.mark.unit
    def test_both_empty(self):
        assert similarity("", "") == 1.0

    @pytest.mark.unit
    def test_one_empty(self):
        assert similarity("", "Text") == 0.0

    @pytest.mark.unit
    def test_single_typo_is_high(self):
        assert similarity("Containr", "Container") == pytest.approx(1 - 1 / 9)

    @pytest.mark.unit
    def test_unrelated_is_low(self):
        assert similarity("Foo", "Container") < 0.6


class TestFindClosest:
    """Tests for nearest-candidate search."""

    @pytest.mark.unit
    def test_finds_best(self):
        match = find_closest("Buton", ["Text", "Button", "Badge"])
        assert isinstance(match, Match)
        assert match.candidate == "Button"
        assert match.score == pytest.approx(5 / 6)

    @pytest.mark.unit
    def test_tie_keeps_first(self):
        # "ab" is one edit away from both candidates
        assert find_closest("ab", ["ax", "ay"]).candidate == "ax"
        assert find_closest("ab", ["ay", "ax"]).candidate == "ay"

    @pytest.mark.unit
    def test_threshold_rejects(self):
        assert find_closest("Zzz", ["Container"], threshold=0.6) is None

    @pytest.mark.unit
    def test_no_candidates(self):
        assert find_closest("Button", []) is None


class TestRankSimilar:
    """Tests for ranked suggestions."""

    @pytest.mark.unit
    def test_limit_and_order(self):
        ranked = rank_similar("Card", ["Container", "Card", "Cart", "Badge"], limit=2)
        assert [m.candidate for m in ranked] == ["Card", "Cart"]

    @pytest.mark.unit
    def test_threshold_filters(self):
        ranked = rank_similar("Card", ["Card", "Slider"], threshold=0.5)
        assert [m.candidate for m in ranked] == ["Card"]
