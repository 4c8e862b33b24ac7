"""Utility functions."""

from .breakpoints import find_break_points
from .classifier import classify_line, is_verse
from .markup import split_at_positions, split_lines, strip_tags, text_position_to_markup
from .text_normalizer import clean_string, to_ascii

__all__ = [
    "find_break_points",
    "classify_line",
    "is_verse",
    "split_at_positions",
    "split_lines",
    "strip_tags",
    "text_position_to_markup",
    "clean_string",
    "to_ascii",
]
