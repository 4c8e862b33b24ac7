"""Break-point scorer: punctuation-based split candidates with quality scores."""

import re

from ..models import BreakPoint, FragmentView
from .markup import as_view

# Base score of each punctuation mark as a candidate split point
PUNCTUATION_SCORES = {
    ".": 10,
    "!": 9,
    "?": 9,
    ";": 8,
    ":": 7,
    ",": 5,
}

PUNCTUATION_PATTERN = re.compile(r"[.;:,!?]")

# Characters of context inspected on each side of a mark
CONTEXT_WINDOW = 20

GOOD_CONTEXT_BONUS = 3
POOR_CONTEXT_PENALTY = 3

# Text following a mark that makes it a natural boundary
GOOD_AFTER_PATTERNS = (
    re.compile(r"^\s*[A-ZÀ-ÖØ-Þ]"),  # capital letter
    re.compile(r"^\s*(et|and|qui|quae|quod|sed|but|for)\b", re.I),  # conjunctions
    re.compile(r"^\s*(amen|gloria|glória|alleluia|allelúja)", re.I),  # prayer endings/beginnings
)

# Text preceding a colon that closes a prayer phrase
GOOD_BEFORE_PATTERNS = (
    re.compile(r"(amen|terra|cælis|sancto)$", re.I),
    re.compile(r"(nomen|regnum|voluntas|panem|debita)$", re.I),  # Pater noster
)

ABBREVIATION_PATTERN = re.compile(r"\b(st|vs|etc|jr|sr|dr|mr|mrs|ms)$", re.I)
TRAILING_DIGIT_PATTERN = re.compile(r"\d$")
SINGLE_LETTER_PATTERN = re.compile(r"\b[^\W\d_]$")


def is_good_break_context(before: str, after: str, punctuation: str) -> bool:
    """Check if the text around a mark makes it a natural boundary.

    Args:
        before: Text preceding the mark
        after: Text following the mark
        punctuation: The mark itself

    Returns:
        True if a capital letter, conjunction or prayer word follows
        (period, comma, colon) or a prayer-boundary word precedes (colon)
    """
    follows = any(pattern.search(after) for pattern in GOOD_AFTER_PATTERNS)
    if punctuation in (".", ","):
        return follows
    if punctuation == ":":
        return follows or any(pattern.search(before) for pattern in GOOD_BEFORE_PATTERNS)
    return False


def is_poor_break_context(before: str, after: str, punctuation: str) -> bool:
    """Check if a period probably does not end a sentence.

    Args:
        before: Text preceding the mark
        after: Text following the mark
        punctuation: The mark itself

    Returns:
        True if the period follows an abbreviation, a digit or a single letter
    """
    if punctuation != ".":
        return False
    before = before.strip()
    return bool(
        ABBREVIATION_PATTERN.search(before)
        or TRAILING_DIGIT_PATTERN.search(before)
        or SINGLE_LETTER_PATTERN.search(before)
    )


def score_mark(text: str, index: int) -> int:
    """Score the punctuation mark at ``text[index]``."""
    char = text[index]
    score = PUNCTUATION_SCORES[char]
    before = text[max(0, index - CONTEXT_WINDOW):index]
    after = text[index + 1:index + 1 + CONTEXT_WINDOW]
    if is_good_break_context(before, after, char):
        score += GOOD_CONTEXT_BONUS
    if is_poor_break_context(before, after, char):
        score -= POOR_CONTEXT_PENALTY
    return score


def find_break_points(fragment: str | FragmentView) -> list[BreakPoint]:
    """Find and score every punctuation-based split candidate.

    Args:
        fragment: Markup fragment or its view

    Returns:
        Break points with a positive score, ascending by position
    """
    view = as_view(fragment)
    points = {}
    for match in PUNCTUATION_PATTERN.finditer(view.text):
        index = match.start()
        score = score_mark(view.text, index)
        if score <= 0:
            continue
        position = index + 1  # break after the mark
        points[position] = BreakPoint(
            position=position,
            markup_position=view.markup_position(position),
            punctuation=match.group(0),
            score=score,
        )
    return [points[pos] for pos in sorted(points)]
