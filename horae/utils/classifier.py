"""Line classifier: verse/psalm content versus ordinary prose.

Verse lines are recited as one unit and must never be split across rows.
Each rule is a separate predicate over a FragmentView so that it can be
tested on its own.
"""

import re
from typing import Callable

from ..models import FragmentView, LineKind
from .markup import as_view

VERSE_NUMBER_PATTERN = re.compile(r"^\d+\s")
REFERENCE_MARKER_PATTERN = re.compile(r"[*†‡]")
ANTIPHON_PATTERN = re.compile(r"Ant\.|Antiphon", re.I)
PSALM_PATTERN = re.compile(r"Psalm\s+\d+", re.I)
DOXOLOGY_PATTERN = re.compile(r"Gl[óo]ria Patri|Glory be to the Father", re.I)


def has_verse_number(view: FragmentView) -> bool:
    """Text starts with a verse number: digits followed by whitespace."""
    return bool(VERSE_NUMBER_PATTERN.match(view.spaced_text))


def has_verse_marker(view: FragmentView) -> bool:
    """Markup carries the verse-number class, or a red small digit."""
    if "v-numbers" in view.markup:
        return True
    return "text-sm red" in view.markup and view.spaced_text[:1].isdigit()


def has_reference_marker(view: FragmentView) -> bool:
    """Text contains a mediant/flex marker (*, †, ‡)."""
    return bool(REFERENCE_MARKER_PATTERN.search(view.spaced_text))


def has_antiphon(view: FragmentView) -> bool:
    return bool(ANTIPHON_PATTERN.search(view.spaced_text))


def has_psalm_heading(view: FragmentView) -> bool:
    return bool(PSALM_PATTERN.search(view.spaced_text))


def has_doxology(view: FragmentView) -> bool:
    return bool(DOXOLOGY_PATTERN.search(view.spaced_text))


VERSE_RULES: tuple[Callable[[FragmentView], bool], ...] = (
    has_verse_number,
    has_verse_marker,
    has_reference_marker,
    has_antiphon,
    has_psalm_heading,
    has_doxology,
)


def classify_line(fragment: str | FragmentView) -> LineKind:
    """Classify a line as verse or prose.

    Args:
        fragment: Markup fragment or its view

    Returns:
        LineKind.VERSE if any verse rule matches, LineKind.PROSE otherwise
    """
    if not fragment:
        return LineKind.PROSE
    view = as_view(fragment)
    if any(rule(view) for rule in VERSE_RULES):
        return LineKind.VERSE
    return LineKind.PROSE


def is_verse(fragment: str | FragmentView) -> bool:
    """Shortcut for ``classify_line(fragment) is LineKind.VERSE``."""
    return classify_line(fragment) is LineKind.VERSE
