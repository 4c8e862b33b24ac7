"""Fuzzy aligner: splits a companion-language line to match a reference segmentation."""

from typing import Optional, Sequence

from ..models import BreakPoint, FragmentView
from ..utils.breakpoints import find_break_points
from ..utils.markup import split_at_positions
from .base import MAX_DEVIATION, PROXIMITY_WEIGHT, SegmentationEngine


class FuzzyAligner(SegmentationEngine):
    """Positional aligner for parallel-language prose.

    The companion fragment is cut at the scored break points closest to the
    positions where the reference sentences end, assuming the same
    proportion of text is consumed by the same sentence in both languages.
    Greedy and order-preserving; not guaranteed exact.
    """

    def __init__(self, max_deviation: float = MAX_DEVIATION, proximity_weight: float = PROXIMITY_WEIGHT):
        self.max_deviation = max_deviation
        self.proximity_weight = proximity_weight

    def ideal_positions(self, reference: Sequence[str], total_length: int) -> list[float]:
        """Project the reference sentence ends onto the companion text length.

        Args:
            reference: Reference sentence units
            total_length: Length of the companion text view

        Returns:
            One position per split needed (all reference units but the last)
        """
        lengths = [len(FragmentView.from_markup(unit)) for unit in reference]
        reference_total = sum(lengths)
        if reference_total == 0:
            step = total_length / len(reference)
            return [step * (i + 1) for i in range(len(reference) - 1)]

        positions = []
        consumed = 0.0
        for length in lengths[:-1]:
            consumed += total_length * (length / reference_total)
            positions.append(consumed)
        return positions

    def select_breaks(
        self,
        break_points: list[BreakPoint],
        splits_needed: int,
        reference: Sequence[str],
        total_length: int,
    ) -> list[int]:
        """Choose the markup positions to split at.

        Args:
            break_points: Scored candidates, ascending by position
            splits_needed: Number of splits the reference implies
            reference: Reference sentence units
            total_length: Length of the companion text view

        Returns:
            Ascending markup positions; fewer than ``splits_needed`` when
            some ideal position has no candidate within reach
        """
        if len(break_points) <= splits_needed:
            return [bp.markup_position for bp in break_points]

        max_distance = total_length * self.max_deviation
        selected = []
        used = set()
        for ideal in self.ideal_positions(reference, total_length):
            best = None
            best_score = -1.0
            for bp in break_points:
                if bp.position in used:
                    continue
                distance = abs(bp.position - ideal)
                if distance > max_distance:
                    continue
                proximity = (max_distance - distance) / max_distance if max_distance else 1.0
                total = bp.score + proximity * self.proximity_weight
                if total > best_score:
                    best_score = total
                    best = bp
            if best is not None:
                selected.append(best.markup_position)
                used.add(best.position)
        return sorted(selected)

    def segment(self, fragment: str, reference: Optional[Sequence[str]] = None) -> list[str]:
        """Split ``fragment`` into at most ``len(reference)`` units.

        Args:
            fragment: Companion-language markup fragment
            reference: Sentence units of the reference language

        Returns:
            Trimmed, non-empty pieces in fragment order
        """
        if not fragment or not fragment.strip():
            return []
        if not reference or len(reference) == 1:
            return [fragment.strip()]

        view = FragmentView.from_markup(fragment)
        if not view.text.strip():
            return [fragment.strip()]

        break_points = find_break_points(view)
        if not break_points:
            return [fragment.strip()]

        positions = self.select_breaks(break_points, len(reference) - 1, reference, len(view))
        return split_at_positions(fragment, positions)
