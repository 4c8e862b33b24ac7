"""Tests for break-point scoring."""

from horae.models import BreakPoint
from horae.utils.breakpoints import (
    find_break_points,
    is_good_break_context,
    is_poor_break_context,
    score_mark,
)


class TestContext:
    """Tests for context rules around a punctuation mark."""

    def test_capital_after_period(self):
        assert is_good_break_context("Deus est", " Dóminus", ".")

    def test_conjunction_after_comma(self):
        assert is_good_break_context("Pater noster", " qui es in cælis", ",")
        assert not is_good_break_context("Pater noster", " noster", ",")

    def test_colon_prayer_boundary_before(self):
        assert is_good_break_context("sicut in cælo et in terra", " panem", ":")

    def test_semicolon_never_good(self):
        assert not is_good_break_context("terra", " Et", ";")

    def test_abbreviation(self):
        assert is_poor_break_context("Visit St", " Peter", ".")

    def test_trailing_digit(self):
        assert is_poor_break_context("Psalm 3", " and", ".")

    def test_single_letter(self):
        assert is_poor_break_context("John F", " Kennedy", ".")

    def test_word_ending_like_abbreviation(self):
        assert not is_poor_break_context("Deus est", " Dóminus", ".")

    def test_only_periods_are_poor(self):
        assert not is_poor_break_context("Visit St", " Peter", ",")


class TestFindBreakPoints:
    """Tests for candidate extraction and scores."""

    def test_base_score(self):
        assert find_break_points("lux; pax") == [BreakPoint(4, 4, ";", 8)]

    def test_good_period(self):
        points = find_break_points("Deus est. Dóminus")
        assert [(bp.position, bp.score) for bp in points] == [(9, 13)]

    def test_good_and_poor_cancel(self):
        assert score_mark("Visit St. Peter", 8) == 10

    def test_comma_before_conjunction(self):
        points = find_break_points("Pater noster, qui es in cælis")
        assert points[0].punctuation == ","
        assert points[0].score == 8

    def test_colon_before_prayer_phrase(self):
        text = "sicut in cælo et in terra: panem"
        assert score_mark(text, text.index(":")) == 10

    def test_ordered_and_unique(self):
        points = find_break_points("Amen, amen; dico vobis: Quis? Ecce! Fiat. Et sic.")
        positions = [bp.position for bp in points]
        assert positions == sorted(set(positions))
        assert len(points) == 7

    def test_markup_position_after_tags(self):
        markup = "<b>Deus</b>, in te. Amen"
        points = find_break_points(markup)
        assert [bp.position for bp in points] == [5, 12]
        comma = points[0]
        assert comma.markup_position == 12
        assert markup[:comma.markup_position] == "<b>Deus</b>,"
        assert markup[:points[1].markup_position].endswith("te.")

    def test_no_punctuation(self):
        assert find_break_points("Deus in adjutórium meum inténde") == []

    def test_entity_is_not_a_break(self):
        assert find_break_points("Dóminus &amp; Deus noster") == []

    def test_markup_position_after_entity(self):
        markup = "Deus &amp; homo; pax"
        points = find_break_points(markup)
        assert [bp.position for bp in points] == [12]
        assert markup[:points[0].markup_position] == "Deus &amp; homo;"
