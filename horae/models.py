"""Data models for the markup transformation pipeline."""

import html
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

TAG_PATTERN = re.compile(r"<[^>]*>")
ENTITY_PATTERN = re.compile(r"&(?:[A-Za-z][A-Za-z0-9]*|#[0-9]+|#[xX][0-9A-Fa-f]+);")


class LineKind(str, Enum):
    """Classification of a line of liturgical text."""

    VERSE = "verse"  # recited as one unit, never split
    PROSE = "prose"


@dataclass(frozen=True)
class FragmentView:
    """A markup fragment together with its tag-stripped text view.

    ``offsets[i]`` is the index in ``markup`` of the i-th text character, so
    positions found in ``text`` can be mapped back onto the markup.
    """

    markup: str
    text: str
    offsets: tuple[int, ...]

    @classmethod
    def from_markup(cls, markup: str) -> "FragmentView":
        """Build the view by walking the markup once.

        Characters between ``<`` and ``>`` (inclusive) do not advance the
        text offset counter. A character reference such as ``&amp;`` is one
        text character, mapped to the reference's last markup index.
        """
        chars = []
        offsets = []
        in_tag = False
        index = 0
        while index < len(markup):
            char = markup[index]
            if char == "<":
                in_tag = True
            elif char == ">":
                in_tag = False
            elif not in_tag:
                entity = ENTITY_PATTERN.match(markup, index) if char == "&" else None
                # unknown references stay literal text
                if entity and len(html.unescape(entity.group(0))) == 1:
                    char = html.unescape(entity.group(0))
                    index = entity.end() - 1
                chars.append(char)
                offsets.append(index)
            index += 1
        return cls(markup=markup, text="".join(chars), offsets=tuple(offsets))

    @property
    def spaced_text(self) -> str:
        """Text view with every tag replaced by a space, stripped."""
        return TAG_PATTERN.sub(" ", self.markup).strip()

    def markup_position(self, text_position: int) -> int:
        """Map a text offset to the markup offset right after that many characters."""
        if text_position <= 0:
            return 0
        if text_position > len(self.offsets):
            return len(self.markup)
        return self.offsets[text_position - 1] + 1

    def __len__(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class BreakPoint:
    """A candidate split position inside a fragment."""

    position: int  # offset into the text view, just after the mark
    markup_position: int  # same position in the original markup
    punctuation: str
    score: int


@dataclass(frozen=True)
class Line:
    """One line of a table cell."""

    markup: str
    kind: LineKind = LineKind.PROSE


@dataclass(frozen=True)
class Cell:
    """A table cell split into lines on its line-break markers."""

    lines: tuple[Line, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not any(TAG_PATTERN.sub("", line.markup).strip() for line in self.lines)


@dataclass(frozen=True)
class Row:
    """One source table row holding one cell per displayed language."""

    cells: tuple[Cell, ...]

    def line_pairs(self) -> list[tuple[Line, Line]]:
        """Pair the lines of the first and second cell, padding with empty lines."""
        first = self.cells[0].lines if self.cells else ()
        second = self.cells[1].lines if len(self.cells) > 1 else ()
        pairs = []
        for index in range(max(len(first), len(second))):
            line1 = first[index] if index < len(first) else Line("")
            line2 = second[index] if index < len(second) else Line("")
            pairs.append((line1, line2))
        return pairs


@dataclass(frozen=True)
class Table:
    """A two-column structural block of a document."""

    rows: tuple[Row, ...] = ()


@dataclass(frozen=True)
class RowBlock:
    """One emitted output row: per-language cell contents."""

    cells: tuple[str, ...]
    kind: LineKind


@dataclass
class DocumentMetadata:
    """Metadata for a processed document."""

    date_key: str
    title: str
    source_path: Optional[Path] = None


@dataclass
class TransformResult:
    """Result of transforming one document."""

    date_key: str
    normalized_markup: str
    collected_reference_ids: tuple[str, ...]
    title: str
    row_blocks: list[RowBlock] = field(default_factory=list)
