"""Tests for the markup sanitizer passes."""

import pytest
from bs4 import BeautifulSoup

from horae.config import TransformConfig
from horae.errors import MalformedMarkupError
from horae.reference import ReferenceCollector
from horae.sanitizer import XHTML_DOCTYPE, MarkupSanitizer, font_class
from horae.utils.text_normalizer import ASCII_TABLE, clean_string, to_ascii


def parse(markup):
    return BeautifulSoup(markup, "html.parser")


@pytest.fixture
def sanitizer():
    return MarkupSanitizer()


class TestCleanString:
    """Tests for string-level cleanup before parsing."""

    def test_font_to_span(self):
        assert clean_string('<FONT SIZE="+1">A</FONT>') == '<span SIZE="+1">A</span>'

    def test_nbsp_and_joiners(self):
        assert clean_string("a&nbsp;&nbsp;b ~ c") == "ab<BR>c"

    def test_drop_cap_unwrapped(self):
        assert clean_string("<B><I>D</I></B>eus") == "Deus"

    def test_form_and_blank_lines(self):
        assert clean_string('<FORM action="x">\n\n  \nAmen.</FORM>') == "Amen."


class TestFontSpans:
    """Tests for turning presentational attributes into classes."""

    def test_size_and_color(self, sanitizer):
        soup = parse('<span size="+1" color="red">A</span>')
        sanitizer.font_spans(soup)
        span = soup.span
        assert span["class"] == ["text-lg", "red"]
        assert "size" not in span.attrs
        assert "color" not in span.attrs

    def test_style(self, sanitizer):
        soup = parse('<span style="font-size:82%; color:grey">x</span>')
        sanitizer.font_spans(soup)
        assert soup.span["class"] == ["text-sm", "grey"]

    def test_font_class_table(self):
        assert font_class("1") == "text-sm"
        assert font_class("-1") == "text-sm"
        assert font_class("1.25em") == "text-lg"
        assert font_class("+2") == "text-xl"

    def test_unknown_size(self, sanitizer):
        with pytest.raises(MalformedMarkupError) as excinfo:
            sanitizer.font_spans(parse('<span size="7">Big</span>'))
        assert 'size="7"' in excinfo.value.fragment
        assert "Big" in excinfo.value.fragment

    def test_unknown_style_size_reports_span(self, sanitizer):
        with pytest.raises(MalformedMarkupError) as excinfo:
            sanitizer.font_spans(parse('<span style="font-size:9pt">Big</span>'))
        assert "Big" in excinfo.value.fragment

    def test_malformed_style(self, sanitizer):
        with pytest.raises(MalformedMarkupError) as excinfo:
            sanitizer.font_spans(parse('<span style="font-size">x</span>'))
        assert "font-size" in excinfo.value.fragment

    def test_unknown_style_property(self, sanitizer):
        with pytest.raises(MalformedMarkupError):
            sanitizer.font_spans(parse('<span style="font-weight:bold">x</span>'))

    def test_verse_numbers(self, sanitizer):
        soup = parse('<span size="1" color="red">3</span><span size="1" color="red">R.</span>')
        sanitizer.font_spans(soup)
        sanitizer.verse_numbers(soup)
        first, second = soup.find_all("span")
        assert "v-numbers" in first["class"]
        assert "v-numbers" not in second["class"]


class TestPreparePasses:
    """Tests for the passes run before table rebuilding."""

    def test_non_content_tags_removed(self, sanitizer):
        raw = (
            "<html><head><style>p {}</style><script>var x;</script></head>"
            '<body><a href="#top">Top</a><label>L</label><select><option>1</option></select>'
            "<p>Amen.</p></body></html>"
        )
        soup = sanitizer.prepare(raw, ReferenceCollector())
        for name in ("style", "script", "a", "label", "select", "option"):
            assert soup.find(name) is None
        assert soup.p.get_text() == "Amen."

    def test_body_center_and_headings(self, sanitizer):
        raw = (
            '<html><body bgcolor="#ffffff" text="black"><h1>Divinum Officium</h1>'
            '<h2 align="center">Ad Primam</h2><h2>Ad Vesperas</h2><h2>Ad</h2>'
            '<p align="CENTER">Feria</p></body></html>'
        )
        soup = sanitizer.prepare(raw, ReferenceCollector())
        assert soup.body.attrs == {}
        assert soup.find("h1") is None
        headings = soup.find_all("h2")
        assert headings[0]["id"] == "Prima"
        assert headings[0]["class"] == ["center"]
        assert "align" not in headings[0].attrs
        assert headings[1]["id"] == "Vesperae"
        assert "id" not in headings[2].attrs
        assert soup.p["class"] == ["center"]

    def test_input_string_untouched(self, sanitizer):
        raw = '<html><body><FONT SIZE="1">x</FONT></body></html>'
        sanitizer.prepare(raw, ReferenceCollector())
        assert raw == '<html><body><FONT SIZE="1">x</FONT></body></html>'


class TestFinalizePasses:
    """Tests for the passes run after table rebuilding."""

    def test_wrong_initials(self, sanitizer):
        soup = parse(
            '<div class="table-row"><div class="table-cell">'
            '<span class="text-xl red">O</span>rémus.</div></div>'
            '<div class="table-row"><div class="table-cell">'
            '<span class="text-xl red">B</span>eátus vir.</div></div>'
        )
        sanitizer.fix_wrong_initials(soup)
        first, second = soup.select(".red")
        assert first["class"] == ["text-lg", "red"]
        assert second["class"] == ["text-xl", "red"]

    def test_omitted_rows(self):
        html = (
            '<html><body><div class="table-row">Te Deum {omittitur}</div>'
            '<div class="table-row">Amen.</div></body></html>'
        )
        soup = MarkupSanitizer(TransformConfig(no_omitted=True)).finalize(parse(html))
        assert [row.get_text() for row in soup.select("div.table-row")] == ["Amen."]

        kept = MarkupSanitizer().finalize(parse(html))
        assert len(kept.select("div.table-row")) == 2

    def test_comments(self):
        html = (
            '<html><body><p><span class="black text-sm">{ex Commune Apostolorum}</span>'
            '<span class="black text-sm">Psalmus</span></p></body></html>'
        )
        soup = MarkupSanitizer(TransformConfig(no_comments=True)).finalize(parse(html))
        assert soup.p.get_text() == "Psalmus"

        kept = MarkupSanitizer().finalize(parse(html))
        assert "{ex Commune Apostolorum}" in kept.p.get_text()

    def test_style_and_namespace(self, sanitizer):
        soup = sanitizer.finalize(parse("<html><body><p>Amen.</p></body></html>"))
        assert soup.html["xmlns"] == "http://www.w3.org/1999/xhtml"
        link = soup.head.find("link")
        assert link["href"] == "../css/style.css"

    def test_ascii(self):
        soup = parse('<html><body><p title="Dómine">Dómine, lábia mea…</p></body></html>')
        MarkupSanitizer(TransformConfig(ascii=True)).finalize(soup)
        assert soup.p.get_text() == "Domine, labia mea..."
        assert soup.p["title"] == "Domine"

    def test_serialize_doctype(self, sanitizer):
        soup = parse("<!DOCTYPE html><html><body></body></html>")
        markup = sanitizer.serialize(soup)
        assert markup.startswith(XHTML_DOCTYPE)
        assert markup.count("<!DOCTYPE") == 1


class TestAscii:
    """Tests for the ASCII substitution table."""

    def test_every_key_replaced(self):
        text = "".join(ASCII_TABLE)
        converted = to_ascii(text)
        assert not any(key in converted for key in ASCII_TABLE)

    def test_idempotent(self):
        text = "Glória Patri, et Fílio, * et Spirítui Sancto. Sǽcula sæculórum — Amen."
        once = to_ascii(text)
        assert to_ascii(once) == once
        assert once == "Gloria Patri, et Filio, * et Spiritui Sancto. Saecula saeculorum - Amen."

    def test_empty(self):
        assert to_ascii("") == ""
