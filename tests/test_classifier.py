"""Tests for the verse/prose line classifier."""

from horae.models import FragmentView, LineKind
from horae.reference import ReferenceCollector
from horae.sanitizer import MarkupSanitizer
from horae.utils.classifier import (
    classify_line,
    has_antiphon,
    has_doxology,
    has_psalm_heading,
    has_reference_marker,
    has_verse_marker,
    has_verse_number,
    is_verse,
)
from horae.utils.markup import split_lines


def view(markup):
    return FragmentView.from_markup(markup)


class TestRules:
    """Each verse rule on its own."""

    def test_verse_number(self):
        assert has_verse_number(view("1 Dómine, lábia mea apéries."))
        assert has_verse_number(view("<span>12</span>Beáti"))
        assert not has_verse_number(view("Deus, in adjutórium meum inténde."))
        assert not has_verse_number(view("12Beáti"))

    def test_verse_marker(self):
        assert has_verse_marker(view('<span class="text-sm red v-numbers">2</span> Quia'))
        assert has_verse_marker(view('<span class="text-sm red">2</span> Quia'))
        assert not has_verse_marker(view('<span class="text-sm red">R.</span> Amen.'))

    def test_reference_marker(self):
        assert has_reference_marker(view("Dómine, lábia mea apéries. * Et os meum"))
        assert has_reference_marker(view("Quóniam Deus magnus Dóminus, † et Rex magnus"))
        assert not has_reference_marker(view("Dómine, lábia mea apéries."))

    def test_antiphon(self):
        assert has_antiphon(view("Ant. Dóminus regnávit"))
        assert has_antiphon(view("Antiphon: The Lord is King"))
        assert not has_antiphon(view("O God, come to my assistance."))

    def test_psalm_heading(self):
        assert has_psalm_heading(view("Psalm 94 [1]"))
        assert has_psalm_heading(view("psalm  50"))
        assert not has_psalm_heading(view("Psalmus Davidis"))

    def test_doxology(self):
        assert has_doxology(view("Glória Patri, et Fílio, * et Spirítui Sancto."))
        assert has_doxology(view("Gloria Patri, et Filio"))
        assert has_doxology(view("Glory be to the Father, and to the Son"))
        assert not has_doxology(view("Glória tibi, Dómine."))


class TestClassifyLine:
    """Tests for the combined classification."""

    def test_numbered_verse(self):
        line = "1 Dómine, lábia mea apéries. * Et os meum annuntiábit laudem tuam."
        assert classify_line(line) is LineKind.VERSE
        assert is_verse(line)

    def test_prose(self):
        assert classify_line("Deus, in adjutórium meum inténde.") is LineKind.PROSE
        assert classify_line("O God, come to my assistance.") is LineKind.PROSE

    def test_empty_line_is_prose(self):
        assert classify_line("") is LineKind.PROSE

    def test_accepts_view(self):
        assert classify_line(view("Ant. Dóminus regnávit")) is LineKind.VERSE

    def test_stable_after_sanitization(self):
        """Re-classifying sanitized lines yields the same labels."""
        cell = (
            '<FONT SIZE="1" COLOR="red">1</FONT> Dómine, lábia mea apéries.'
            "<br>Deus, in adjutórium meum inténde."
        )
        raw = f"<html><body><table><tr><td>{cell}</td></tr></table></body></html>"
        before = [classify_line(line) for line in split_lines(cell)]

        soup = MarkupSanitizer().prepare(raw, ReferenceCollector())
        after = [classify_line(line) for line in split_lines(soup.find("td").decode_contents())]

        assert before == [LineKind.VERSE, LineKind.PROSE]
        assert after == before
