"""Regex-based sentence segmentation engine."""

import re
from typing import Optional, Sequence

from .base import SegmentationEngine, TERMINAL_PUNCTUATION


class RegexSegmenter(SegmentationEngine):
    """Splits prose on sentence-final periods.

    A period splits when it is followed by whitespace and an uppercase
    letter, or when it closes the fragment. Abbreviations are not guarded
    here; that guard belongs to the break-point scorer used for alignment.
    """

    def __init__(self):
        self.period_pattern = re.compile(r"\.(\s+)(?=\S)|\.\s*\Z")

    def split_points(self, fragment: str) -> list[re.Match]:
        """Return the period matches that end a sentence.

        Args:
            fragment: Markup fragment

        Returns:
            Matches of the periods (and following whitespace) to split on
        """
        points = []
        for match in self.period_pattern.finditer(fragment):
            if match.group(1) is not None and not fragment[match.end()].isupper():
                continue
            points.append(match)
        return points

    def segment(self, fragment: str, reference: Optional[Sequence[str]] = None) -> list[str]:
        """Split a prose fragment into sentence units.

        Args:
            fragment: Markup fragment of one prose line
            reference: Ignored

        Returns:
            Sentence units; every unit but the last ends with terminal
            punctuation, the last one too when the fragment ended with a period
        """
        if not fragment or not fragment.strip():
            return []

        pieces = []
        last = 0
        closed = False
        for match in self.split_points(fragment):
            pieces.append(fragment[last:match.start()])
            last = match.end()
            closed = match.group(1) is None
        pieces.append(fragment[last:])

        units = [piece.strip() for piece in pieces if piece.strip()]
        sentences = []
        for index, unit in enumerate(units):
            is_last = index == len(units) - 1
            if (not is_last or closed) and not unit.endswith(TERMINAL_PUNCTUATION):
                unit += "."
            sentences.append(unit)
        return sentences
