"""Sentence segmentation engines."""

from .base import SegmentationEngine
from .fuzzy_engine import FuzzyAligner
from .regex_engine import RegexSegmenter

__all__ = ["SegmentationEngine", "FuzzyAligner", "RegexSegmenter"]
