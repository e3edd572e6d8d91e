"""
Literal term matching for note content.

Splits text into an ordered sequence of segments, each marked as matching the search
term or not. Concatenating the segment values always reconstructs the input text, which
is what the highlight renderer and the filter rely on.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Segment:
    """A contiguous fragment of text classified against the search term."""

    value: str
    is_match: bool


def segment(text: str | None, term: str | None) -> list[Segment]:
    """
    Split text on every non-overlapping literal occurrence of term.

    Matching is case-sensitive and scans left to right, advancing past each match.
    Non-match fragments are kept even when empty (at the start, at the end, and
    between adjacent matches), so match and non-match segments strictly alternate.

    Args:
        text: The text to split (None is treated as empty).
        term: The literal term to find. Empty or None disables matching.

    Returns:
        List of segments. A single non-match segment holding the whole text when
        there is nothing to match.
    """
    text = text or ""
    if not term or not text:
        return [Segment(text, False)]

    segments: list[Segment] = []
    start = 0
    while True:
        pos = text.find(term, start)
        if pos == -1:
            break
        segments.append(Segment(text[start:pos], False))
        segments.append(Segment(term, True))
        start = pos + len(term)  # Non-overlapping
    segments.append(Segment(text[start:], False))
    return segments


def count_matches(text: str | None, term: str | None) -> int:
    """Count non-overlapping occurrences of term in text."""
    return sum(1 for s in segment(text, term) if s.is_match)


def contains_term(text: str | None, term: str | None) -> bool:
    """Return True if term occurs at least once in text."""
    return any(s.is_match for s in segment(text, term))
