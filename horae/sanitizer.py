"""Markup sanitizer and normalizer.

``prepare`` runs before the structural transformer: it removes non-content
tags, collects references and turns presentational attributes into class
tokens. ``finalize`` runs after it and ends with the optional ASCII rewrite.
"""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup, Doctype, NavigableString, Tag

from .config import TransformConfig
from .errors import MalformedMarkupError
from .reference import ReferenceCollector, expand_anchor
from .utils.text_normalizer import clean_string, to_ascii

logger = logging.getLogger(__name__)

XHTML_DOCTYPE = (
    '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.1//EN" '
    '"http://www.w3.org/TR/xhtml11/DTD/xhtml11.dtd">'
)
XHTML_NAMESPACE = "http://www.w3.org/1999/xhtml"
STYLESHEET_HREF = "../css/style.css"

NON_CONTENT_TAGS = ("style", "script", "label", "select", "a")

FONT_SIZE_CLASSES = {
    "1": "text-sm",
    "82%": "text-sm",
    "-1": "text-sm",
    "+1": "text-lg",
    "1.25em": "text-lg",
    "+2": "text-xl",
}

REFERENCE_PATTERN = re.compile(r'"([$&].*?)"')

# Rows whose large red initial is really a lead-in, not a chapter initial
WRONG_INITIAL_PATTERNS = (
    re.compile(r"Orémus"),
    re.compile(r"Sequéntia"),
    re.compile(r"Allelú[ij]a."),
    re.compile(r"Glória Patri, et Fílio, \* et Spirítui Sancto."),
    re.compile(r"Kýrie, eléison. Christe, eléison. Kýrie, eléison."),
)

COMMENT_PATTERN = re.compile(r"\{.*\}")
OMITTED_MARKER = "{omittitur}"
ASCII_ATTRIBUTES = ("title", "alt")


def font_class(value: str, fragment: str = "") -> str:
    """Map a font size token to its class.

    Args:
        value: Font size token, e.g. ``+1`` or ``82%``
        fragment: Markup the token came from, reported on failure

    Raises:
        MalformedMarkupError: If the token has no mapping
    """
    try:
        return FONT_SIZE_CLASSES[value]
    except KeyError:
        raise MalformedMarkupError(f"Unknown font settings {value}", fragment=fragment or value) from None


def add_class(tag: Tag, *classes: str) -> None:
    """Append class tokens to a tag, skipping ones it already has."""
    current = list(tag.get("class") or [])
    for name in classes:
        if name and name not in current:
            current.append(name)
    if current:
        tag["class"] = current


def _attribute_text(value) -> str:
    return " ".join(value) if isinstance(value, list) else str(value)


class MarkupSanitizer:
    """Cleans a raw office document around the structural transformation."""

    def __init__(self, config: Optional[TransformConfig] = None):
        self.config = config or TransformConfig()

    @staticmethod
    def parse(markup: str) -> BeautifulSoup:
        return BeautifulSoup(markup, "html.parser")

    def prepare(self, raw_markup: str, collector: ReferenceCollector) -> BeautifulSoup:
        """Parse raw markup and apply the passes that precede table rebuilding.

        Args:
            raw_markup: Document as delivered by the retrieval collaborator
            collector: Run-scoped reference collector

        Returns:
            A new parsed document; the input string is left untouched
        """
        soup = self.parse(clean_string(raw_markup))
        self.remove_tags(soup, NON_CONTENT_TAGS)
        self.collect_references(soup, collector)
        self.font_spans(soup)
        self.verse_numbers(soup)
        self.clean_body_tag(soup)
        self.center_style(soup)
        self.remove_h1(soup)
        self.add_id_to_horas(soup)
        return soup

    def finalize(self, soup: BeautifulSoup) -> BeautifulSoup:
        """Apply the passes that follow table rebuilding, ASCII rewrite last."""
        self.fix_wrong_initials(soup)
        if self.config.no_omitted:
            self.omit_omitted(soup)
        if self.config.no_comments:
            self.omit_comments(soup)
        self.add_style(soup)
        self.add_htmlns(soup)
        if self.config.ascii:
            self.convert_to_ascii(soup)
        return soup

    def serialize(self, soup: BeautifulSoup) -> str:
        """Render the document with an XHTML 1.1 doctype."""
        for node in list(soup.contents):
            if isinstance(node, Doctype):
                node.extract()
        return f"{XHTML_DOCTYPE}\n{soup.decode()}"

    def remove_tags(self, soup: BeautifulSoup, names) -> None:
        """Remove the given elements together with their content."""
        for tag in soup.find_all(list(names)):
            if not tag.decomposed:
                tag.decompose()

    def collect_references(self, soup: BeautifulSoup, collector: ReferenceCollector) -> None:
        """Replace radio-choice expanders with links and record their identifiers.

        Every ``input`` element is removed afterwards.
        """
        for field in soup.find_all("input"):
            if _attribute_text(field.get("type", "")).lower() != "radio":
                continue
            onclick = field.get("onclick")
            if not onclick:
                continue
            match = REFERENCE_PATTERN.search(onclick)
            if not match:
                logger.warning(f"No reference identifier in onclick {onclick!r}")
                continue
            identifier = match.group(1)
            link = soup.new_tag("a", href=expand_anchor(identifier))
            link.string = "\xa0…"
            field.parent.append(link)
            collector.add(identifier)

        for field in soup.find_all("input"):
            field.decompose()

    def font_spans(self, soup: BeautifulSoup) -> None:
        """Turn span attributes (ex-FONT size/color, inline styles) into class tokens.

        Raises:
            MalformedMarkupError: On an unparsable style declaration, an
                unknown style property or an unmapped font size
        """
        for span in soup.find_all("span"):
            fragment = str(span)
            classes = []
            for name, value in list(span.attrs.items()):
                value = _attribute_text(value)
                if name == "style":
                    classes.extend(self._style_classes(value, fragment))
                elif re.search(r"[a-z]", value, re.I):
                    classes.extend(value.lower().split())
                else:
                    classes.append(font_class(value.strip(), fragment))
                del span[name]
            add_class(span, *classes)

    def _style_classes(self, style: str, fragment: str) -> list[str]:
        classes = []
        for declaration in re.split(r"\s*;\s*", style):
            if not declaration.strip():
                continue
            prop, sep, value = declaration.partition(":")
            prop, value = prop.strip().lower(), value.strip()
            if not sep or not prop or not value:
                raise MalformedMarkupError(f"Malformed style attribute: {declaration}", fragment=fragment)
            if prop == "font-size":
                classes.append(font_class(value, fragment))
            elif prop == "color":
                classes.append(value)
            else:
                raise MalformedMarkupError(f"Unknown span style {prop}", fragment=fragment)
        return classes

    def verse_numbers(self, soup: BeautifulSoup) -> None:
        """Mark small red digits as verse numbers."""
        for tag in soup.select(".text-sm.red"):
            if tag.get_text()[:1].isdigit():
                add_class(tag, "v-numbers")

    def clean_body_tag(self, soup: BeautifulSoup) -> None:
        if soup.body is not None:
            soup.body.attrs = {}

    def center_style(self, soup: BeautifulSoup) -> None:
        """Replace ``align=center`` with a ``center`` class."""
        for tag in soup.find_all(attrs={"align": True}):
            if _attribute_text(tag["align"]).lower() == "center":
                del tag["align"]
                add_class(tag, "center")

    def remove_h1(self, soup: BeautifulSoup) -> None:
        for tag in soup.find_all("h1"):
            tag.decompose()

    def add_id_to_horas(self, soup: BeautifulSoup) -> None:
        """Give each hour heading an id derived from its name (``Ad Laudes`` -> ``Laudes``)."""
        for heading in soup.find_all("h2"):
            text = heading.get_text()
            if len(text) > 3:
                heading["id"] = re.sub(r"as$", "ae", re.sub(r"am$", "a", text[3:]))

    def fix_wrong_initials(self, soup: BeautifulSoup) -> None:
        """Shrink extra-large red initials in rows that start a prayer formula."""
        for row in soup.select("div.table-row"):
            initials = row.select(".text-xl.red")
            if not initials:
                continue
            if any(
                pattern.search(initial.parent.get_text())
                for initial in initials
                for pattern in WRONG_INITIAL_PATTERNS
            ):
                for initial in initials:
                    initial["class"] = ["text-lg" if c == "text-xl" else c for c in initial["class"]]

    def omit_omitted(self, soup: BeautifulSoup) -> None:
        for row in soup.select("div.table-row"):
            if OMITTED_MARKER in row.get_text():
                row.decompose()

    def omit_comments(self, soup: BeautifulSoup) -> None:
        for span in soup.select("span.black.text-sm"):
            if span.decomposed:
                continue
            if COMMENT_PATTERN.fullmatch(span.get_text()):
                span.decompose()

    def add_style(self, soup: BeautifulSoup) -> None:
        """Link the e-book stylesheet from the document head."""
        head = soup.head
        if head is None:
            if soup.html is None:
                return
            head = soup.new_tag("head")
            soup.html.insert(0, head)
        head.append(soup.new_tag("link", href=STYLESHEET_HREF, rel="stylesheet", type="text/css"))

    def add_htmlns(self, soup: BeautifulSoup) -> None:
        if soup.html is not None:
            soup.html["xmlns"] = XHTML_NAMESPACE

    def convert_to_ascii(self, soup: BeautifulSoup) -> None:
        """Rewrite text nodes and title/alt attributes to ASCII."""
        for node in list(soup.find_all(string=True)):
            if type(node) is not NavigableString:
                continue
            converted = to_ascii(str(node))
            if converted != str(node):
                node.replace_with(converted)
        for tag in soup.find_all(True):
            for name in ASCII_ATTRIBUTES:
                if tag.has_attr(name):
                    tag[name] = to_ascii(_attribute_text(tag[name]))
