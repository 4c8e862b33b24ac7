"""Structural transformer: rebuilds two-column tables as aligned row blocks."""

import logging
from typing import Optional

from bs4 import BeautifulSoup, Tag

from .config import TransformConfig
from .engines import FuzzyAligner, RegexSegmenter, SegmentationEngine
from .languages import LanguageCatalog
from .models import Cell, Line, LineKind, Row, RowBlock, Table
from .utils.classifier import classify_line
from .utils.markup import split_lines, strip_tags

logger = logging.getLogger(__name__)

# Display codes whose column drives segmentation when none is configured
PRIVILEGED_REFERENCE_CODES = ("en",)


def _slot(units: list[str], index: int) -> str:
    return units[index] if index < len(units) else ""


class StructuralTransformer:
    """Converts source tables into ``div`` rows, one row per aligned sentence.

    Per line pair:
    - either line is verse: one block, never split
    - no-split mode: one block
    - prose: split the reference column, align the other to it, and zip
      the two sequences, padding the shorter one with empty cells
    """

    def __init__(
        self,
        config: Optional[TransformConfig] = None,
        catalog: Optional[LanguageCatalog] = None,
        segmenter: Optional[SegmentationEngine] = None,
        aligner: Optional[SegmentationEngine] = None,
    ):
        self.config = config or TransformConfig()
        self.catalog = catalog or LanguageCatalog()
        self.segmenter = segmenter or RegexSegmenter()
        self.aligner = aligner or FuzzyAligner()
        self.languages = self.config.languages
        self.codes = [self.catalog.code(name) for name in self.languages]
        self.reference_column = self._resolve_reference_column()

    def _resolve_reference_column(self) -> int:
        """Pick the column whose sentences drive the alignment.

        Raises:
            ValueError: If ``reference_language`` names neither configured language
        """
        if not self.config.bilingual:
            return 0

        wanted = self.config.reference_language
        if wanted:
            for index, (name, code) in enumerate(zip(self.languages, self.codes)):
                if wanted == name or wanted.lower() == code:
                    return index
            raise ValueError(
                f"reference_language {wanted!r} matches neither {self.languages[0]!r} "
                f"nor {self.languages[1]!r}"
            )

        if self.codes[1] in PRIVILEGED_REFERENCE_CODES:
            return 1
        if self.codes[0] in PRIVILEGED_REFERENCE_CODES:
            return 0
        logger.warning(
            f"Neither {self.languages[0]} nor {self.languages[1]} is a reference language; "
            "splitting on the first column (set reference_language to choose)"
        )
        return 0

    def parse_cell(self, td: Tag) -> Cell:
        lines = split_lines(td.decode_contents())
        return Cell(tuple(Line(markup, classify_line(markup)) for markup in lines))

    def parse_row(self, tr: Tag) -> Optional[Row]:
        """Build a Row from a ``tr``; None when it has no cells or no text."""
        tds = tr.find_all("td")
        if not tds:
            return None
        cells = tuple(self.parse_cell(td) for td in tds[: len(self.languages)])
        if all(cell.is_empty for cell in cells):
            return None
        return Row(cells)

    def parse_table(self, table: Tag) -> Table:
        rows = []
        for tr in table.find_all("tr"):
            row = self.parse_row(tr)
            if row is not None:
                rows.append(row)
        return Table(tuple(rows))

    def transform_pair(self, line1: str, line2: str = "") -> list[RowBlock]:
        """Classify and emit the row blocks for one pair of parallel markup lines."""
        return self.transform_lines(Line(line1, classify_line(line1)), Line(line2, classify_line(line2)))

    def transform_lines(self, first: Line, second: Line) -> list[RowBlock]:
        """Emit the row blocks for one pair of classified lines.

        Args:
            first: Line of the first language column
            second: Line of the second language column (ignored when monolingual)

        Returns:
            One block for verse or no-split pairs, else one per sentence slot
        """
        line1, line2 = first.markup, second.markup
        if not self.config.bilingual:
            kind = first.kind
            if kind is LineKind.VERSE or self.config.no_split:
                return [RowBlock((line1,), kind)]
            return [RowBlock((unit,), LineKind.PROSE) for unit in self.segmenter.segment(line1)]

        if LineKind.VERSE in (first.kind, second.kind):
            return [RowBlock((line1, line2), LineKind.VERSE)]
        if self.config.no_split:
            return [RowBlock((line1, line2), LineKind.PROSE)]

        lines = [line1, line2]
        ref = self.reference_column
        units: list[list[str]] = [[], []]
        units[ref] = self.segmenter.segment(lines[ref])
        units[1 - ref] = self.aligner.segment(lines[1 - ref], units[ref])

        count = max(len(units[0]), len(units[1]))
        return [
            RowBlock((_slot(units[0], i), _slot(units[1], i)), LineKind.PROSE)
            for i in range(count)
        ]

    def transform_row(self, row: Row) -> list[RowBlock]:
        blocks = []
        for first, second in row.line_pairs():
            if not strip_tags(first.markup).strip() and not strip_tags(second.markup).strip():
                continue
            blocks.extend(self.transform_lines(first, second))
        return blocks

    def render_block(self, soup: BeautifulSoup, block: RowBlock) -> Tag:
        """Build a ``div.table-row`` with one ``div.table-cell`` per language."""
        row = soup.new_tag("div")
        row["class"] = ["table-row"]
        for index, content in enumerate(block.cells):
            cell = soup.new_tag("div")
            cell["class"] = ["table-cell", f"lang{index + 1}" if self.config.bilingual else "lang0"]
            cell["lang"] = self.codes[index]
            fragment = BeautifulSoup(content, "html.parser")
            for child in list(fragment.contents):
                cell.append(child.extract())
            row.append(cell)
        return row

    def transform_document(self, soup: BeautifulSoup) -> list[RowBlock]:
        """Replace every source table with rebuilt rows.

        Args:
            soup: Sanitized document

        Returns:
            All emitted row blocks, in document order
        """
        for div in soup.find_all("div", attrs={"align": True}):
            if not div.decomposed and str(div["align"]).lower() == "right":
                div.decompose()

        emitted = []
        for table in soup.find_all("table"):
            if table.decomposed or table.find_parent("table") is not None:
                continue
            if table.get_text().strip():
                model = self.parse_table(table)
                container = soup.new_tag("div")
                container["class"] = ["table-container"]
                for row in model.rows:
                    blocks = self.transform_row(row)
                    if not blocks:
                        continue
                    group = soup.new_tag("div")
                    group["class"] = ["table"]
                    for block in blocks:
                        group.append(self.render_block(soup, block))
                    container.append(group)
                    emitted.extend(blocks)
                if container.contents:
                    table.insert_before(container)
            table.decompose()
        return emitted
