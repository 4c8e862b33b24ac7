"""Helpers for working with markup fragments and their text views."""

import re

from ..models import TAG_PATTERN, FragmentView

LINE_BREAK_PATTERN = re.compile(r"<br\s*/?>", re.I)


def strip_tags(markup: str) -> str:
    """Remove all tags from a markup fragment."""
    return TAG_PATTERN.sub("", markup)


def as_view(fragment: str | FragmentView) -> FragmentView:
    """Return a FragmentView, building it only when given raw markup."""
    if isinstance(fragment, FragmentView):
        return fragment
    return FragmentView.from_markup(fragment)


def text_position_to_markup(markup: str, text_position: int) -> int:
    """Convert a tag-stripped text offset into an offset in the markup.

    Args:
        markup: Original markup fragment
        text_position: Offset in the text view

    Returns:
        Offset in the markup immediately after ``text_position`` text characters
    """
    return FragmentView.from_markup(markup).markup_position(text_position)


def split_lines(markup: str) -> list[str]:
    """Split cell markup on line-break markers into trimmed, non-empty lines."""
    return [line.strip() for line in LINE_BREAK_PATTERN.split(markup) if line.strip()]


def split_at_positions(markup: str, positions: list[int]) -> list[str]:
    """Split markup at the given offsets into trimmed, non-empty pieces.

    Args:
        markup: Markup fragment
        positions: Offsets to split at

    Returns:
        Pieces in fragment order
    """
    if not positions:
        return [markup.strip()] if markup.strip() else []

    pieces = []
    last = 0
    for pos in sorted(set(positions)):
        piece = markup[last:pos].strip()
        if piece:
            pieces.append(piece)
        last = pos
    tail = markup[last:].strip()
    if tail:
        pieces.append(tail)
    return pieces
