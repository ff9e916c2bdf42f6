"""
Formats - toolbar and shortcut formatting commands.

A Formatter is registered under one or more names through its
`formats` class attribute, so hosts can ask for a format by name:

    FormatterMeta.get_formatter("bold")(editor).apply()

Inline formats toggle literal Markdown delimiters around the selection;
nothing is stored as a mark on the tree. The blockquote format wraps the
selected paragraphs in a quote, or lifts them out when they are all
quoted already.
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from ..document.nodes import DELIMITERS, Mark
from ..document.path import Position
from .selection import Selection

if TYPE_CHECKING:
    from .editor import Editor

logger = logging.getLogger(__name__)


_format_registry: dict[str, type[Formatter]] = {}


class FormatterMeta(type):
    """
    Metaclass that registers Formatter subclasses by their format names.
    """

    def __new__(mcs, name: str, bases: tuple, attrs: dict):
        new_cls = super().__new__(mcs, name, bases, attrs)
        if formats := attrs.get("formats"):
            for fmt in formats:
                _format_registry[fmt] = new_cls
        return new_cls

    @classmethod
    def get_formatter(mcs, name: str) -> type[Formatter]:
        """
        Get the Formatter class registered for a format name.

        Raises:
            ValueError: if no formatter handles that name
        """
        try:
            return _format_registry[name.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown format {name!r}, expected one of {sorted(_format_registry)}"
            ) from None

    @classmethod
    def list_formats(mcs) -> list[str]:
        return list(_format_registry.keys())


class Formatter(metaclass=FormatterMeta):
    formats: list[str] = []

    def __init__(self, editor: Editor):
        self.editor = editor

    def apply(self) -> None:
        raise NotImplementedError


# =========================================================================
# Inline delimiters
# =========================================================================

class DelimiterFormatter(Formatter):
    """
    Toggle a delimiter pair around the selection.

    - collapsed cursor: insert an empty pair and put the cursor inside
    - selection already wrapped: strip the pair
    - otherwise: wrap the selection and keep it selected
    """
    mark: Mark

    @property
    def delimiter(self) -> str:
        return DELIMITERS[self.mark]

    def is_wrapped(self, text: str) -> bool:
        d = self.delimiter
        if not _wraps(text, d):
            return False
        # "**b**" is bold, not italic; "***b***" is both
        for other in DELIMITERS.values():
            if len(other) > len(d) and other.startswith(d) and _wraps(text, other):
                return _wraps(text, other + d)
        return True

    def apply(self) -> None:
        document = self.editor.document
        selection = self.editor.selection
        d = self.delimiter
        size = len(d)

        if selection.is_collapsed:
            end = document.insert_text(selection.focus, d + d)
            self.editor.select(end.shift(-size))
            return

        start, end = selection.start, selection.end
        same_paragraph = start.path == end.path
        if self.is_wrapped(document.text_between(start, end)):
            document.delete_range(end.shift(-size), end)
            document.delete_range(start, start.shift(size))
            new_end = end.shift(-2 * size if same_paragraph else -size)
            logger.debug("removed %s around %s", self.mark.value, selection)
        else:
            document.insert_text(end, d)
            document.insert_text(start, d)
            new_end = end.shift(2 * size if same_paragraph else size)
            logger.debug("added %s around %s", self.mark.value, selection)
        self.editor.select(_oriented(selection, start, new_end))


class BoldFormatter(DelimiterFormatter):
    formats = ["bold"]
    mark = Mark.BOLD


class ItalicFormatter(DelimiterFormatter):
    formats = ["italic"]
    mark = Mark.ITALIC


class StrikethroughFormatter(DelimiterFormatter):
    formats = ["strikethrough", "strike"]
    mark = Mark.STRIKETHROUGH


class CodeFormatter(DelimiterFormatter):
    formats = ["code"]
    mark = Mark.CODE


class SpoilerFormatter(DelimiterFormatter):
    formats = ["spoiler"]
    mark = Mark.SPOILER


# =========================================================================
# Blocks
# =========================================================================

class BlockquoteFormatter(Formatter):
    formats = ["blockquote", "block-quote", "quote"]

    def apply(self) -> None:
        document = self.editor.document
        selection = self.editor.selection
        anchor = document.linear(selection.anchor)
        focus = document.linear(selection.focus)
        first, last = sorted((anchor[0], focus[0]))
        ordinals = range(first, last + 1)

        if all(document.is_quoted(document.paragraph_paths()[n]) for n in ordinals):
            for n in ordinals:
                document.lift_block(document.paragraph_paths()[n])
            logger.debug("lifted paragraphs %d-%d out of their quote", first, last)
        else:
            for n in ordinals:
                path = document.paragraph_paths()[n]
                if not document.is_quoted(path):
                    document.wrap_block(path)
            logger.debug("quoted paragraphs %d-%d", first, last)

        self.editor.select(Selection(document.position_at(*anchor), document.position_at(*focus)))


def _wraps(text: str, delimiter: str) -> bool:
    return len(text) >= 2 * len(delimiter) and text.startswith(delimiter) and text.endswith(delimiter)


def _oriented(selection: Selection, start: Position, end: Position) -> Selection:
    if selection.is_backward:
        return Selection(end, start)
    return Selection(start, end)
