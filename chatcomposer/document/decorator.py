"""
Decorator - derives inline style ranges from raw text.

Decorations are presentational only: they tell a renderer which substrings
to style and are never stored in the tree. The delimiters stay in the text.

Grammar, in priority order:
    strikethrough  ~~...~~
    bold           **...**
    italic         *...*
    code           `...`
    spoiler        ||...||

Each rule scans only the text no higher-priority token has consumed, so a
lower-priority match overlapping or nested in a consumed span is dropped.
Unmatched delimiters are plain text.
"""

from __future__ import annotations
from dataclasses import dataclass
import re

from .errors import UnsupportedDelimiterNesting
from .nodes import DELIMITERS, Mark


GRAMMAR: list[tuple[Mark, re.Pattern[str]]] = [
    (Mark.STRIKETHROUGH, re.compile(r"~~(.+?)~~", re.DOTALL)),
    (Mark.BOLD, re.compile(r"\*\*(.+?)\*\*", re.DOTALL)),
    (Mark.ITALIC, re.compile(r"\*([^*]+?)\*")),
    (Mark.CODE, re.compile(r"`([^`]+?)`")),
    (Mark.SPOILER, re.compile(r"\|\|(.+?)\|\|", re.DOTALL)),
]


@dataclass(frozen=True)
class Decoration:
    """
    A styled range of an inline's text.

    start/end delimit the content only (0-based, end exclusive), so
    text[start:end] is what gets styled. token_start/token_end include
    the delimiters.
    """
    mark: Mark
    start: int
    end: int

    @property
    def delimiter(self) -> str:
        return DELIMITERS[self.mark]

    @property
    def token_start(self) -> int:
        return self.start - len(self.delimiter)

    @property
    def token_end(self) -> int:
        return self.end + len(self.delimiter)

    @property
    def length(self) -> int:
        return self.end - self.start

    def model_dump(self) -> dict:
        return {"mark": self.mark.value, "start": self.start, "end": self.end}


def decorate(text: str, *, strict: bool = False) -> list[Decoration]:
    """
    Tokenize text into mark ranges ordered by start offset.

    Args:
        text: Raw text of a single inline
        strict: Raise instead of silently dropping lower-priority matches
            that overlap a consumed span

    Raises:
        UnsupportedDelimiterNesting: only in strict mode
    """
    if not text:
        return []

    consumed: list[tuple[int, int]] = []
    delimiter_chars: set[int] = set()
    decorations: list[Decoration] = []
    suppressed: list[tuple[Mark, int, int]] = []

    for mark, pattern in GRAMMAR:
        found: list[tuple[int, int]] = []
        for seg_start, seg_end in _free_segments(len(text), consumed):
            for match in pattern.finditer(text, seg_start, seg_end):
                decorations.append(Decoration(mark, match.start(1), match.end(1)))
                found.append((match.start(), match.end()))

        if strict and consumed:
            for match in pattern.finditer(text):
                span = (match.start(), match.end())
                if span in found or not _overlaps(span, consumed):
                    continue
                # "*" inside "**" is part of the bold token, not a nested italic
                if delimiter_chars.intersection(_delimiter_positions(match)):
                    continue
                suppressed.append((mark, span[0], span[1]))

        for match_span in found:
            delimiter_chars.update(_token_delimiters(match_span, len(DELIMITERS[mark])))
        consumed = sorted(consumed + found)

    if suppressed:
        raise UnsupportedDelimiterNesting(suppressed)
    return sorted(decorations, key=lambda d: (d.start, d.end))


def _free_segments(length: int, consumed: list[tuple[int, int]]) -> list[tuple[int, int]]:
    """The gaps between consumed spans."""
    segments = []
    cursor = 0
    for start, end in consumed:
        if start > cursor:
            segments.append((cursor, start))
        cursor = max(cursor, end)
    if cursor < length:
        segments.append((cursor, length))
    return segments


def _overlaps(span: tuple[int, int], spans: list[tuple[int, int]]) -> bool:
    return any(span[0] < end and start < span[1] for start, end in spans)


def _delimiter_positions(match: re.Match[str]) -> set[int]:
    return set(range(match.start(), match.start(1))) | set(range(match.end(1), match.end()))


def _token_delimiters(span: tuple[int, int], size: int) -> set[int]:
    start, end = span
    return set(range(start, start + size)) | set(range(end - size, end))
