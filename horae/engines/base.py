"""Base classes and constants for sentence segmentation engines."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence


# Aligner tuning
MAX_DEVIATION = 0.3  # fraction of text length a break may drift from its ideal position
PROXIMITY_WEIGHT = 5

TERMINAL_PUNCTUATION = (".", "!", "?")


class SegmentationEngine(ABC):
    """Base class for sentence segmentation engines."""

    @abstractmethod
    def segment(self, fragment: str, reference: Optional[Sequence[str]] = None) -> list[str]:
        """Split a markup fragment into sentence units.

        Args:
            fragment: Markup fragment of one prose line
            reference: Sentence units of the companion language, if any

        Returns:
            Ordered list of non-empty markup fragments
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
