"""
Transcoder - converts between a Document and the flat text sent to the host.

serialize(document) -> str
    Paragraph  -> its inline text and a newline
    Quote      -> one "> "-prefixed line per non-blank line, and a newline
    Inline     -> text wrapped in the delimiters of its marks

deserialize(text) -> Document
    A run of "> " lines becomes one Quote, every other non-blank line a
    Paragraph. Inline delimiters are kept as plain text: marks are not
    parsed back, so a styled document restored from text loses its marks
    while keeping the delimiters it was written with.

Blank lines never survive serialization (the empty quote line "> "
counts as blank too). Deserialization drops them as well, which is what
makes serialize(deserialize(serialize(d))) == serialize(d) hold.
"""

from __future__ import annotations
import logging
from typing import Any

from .document import Document
from .errors import MalformedInput
from .nodes import DELIMITERS, Block, Inline, Mark, Paragraph, Quote

logger = logging.getLogger(__name__)


QUOTE_PREFIX = "> "

# Outermost to innermost
NESTING_ORDER: tuple[Mark, ...] = (
    Mark.CODE,
    Mark.STRIKETHROUGH,
    Mark.BOLD,
    Mark.ITALIC,
    Mark.SPOILER,
)


# =========================================================================
# Serialization
# =========================================================================

def serialize_inline(inline: Inline) -> str:
    """Wrap an inline's text in its marks' delimiters."""
    if inline.is_empty:
        return ""
    text = inline.text
    for mark in reversed(NESTING_ORDER):
        if mark in inline.marks:
            delimiter = DELIMITERS[mark]
            text = f"{delimiter}{text}{delimiter}"
    return text


def serialize_paragraph(paragraph: Paragraph) -> str:
    return "".join(serialize_inline(child) for child in paragraph.children)


def serialize_block(block: Block) -> str:
    if isinstance(block, Quote):
        lines = [
            QUOTE_PREFIX + line
            for child in block.children
            for line in serialize_paragraph(child).split("\n")
            if line.strip()
        ]
        if not lines:
            return ""
        return "\n".join(lines) + "\n"
    if isinstance(block, Paragraph):
        return serialize_paragraph(block) + "\n"
    raise TypeError(f"Cannot serialize {type(block).__name__}")


def serialize(document: Document) -> str:
    """Serialize a document to text, trimming trailing whitespace."""
    text = "".join(serialize_block(block) for block in document.children)
    lines = [line for line in text.split("\n") if not _is_blank_line(line)]
    return "\n".join(lines).rstrip()


def _is_blank_line(line: str) -> bool:
    if not line.strip():
        return True
    return line.startswith(QUOTE_PREFIX) and not line[len(QUOTE_PREFIX):].strip()


# =========================================================================
# Deserialization
# =========================================================================

def parse_document(text: Any) -> Document:
    """
    Strict parser.

    Raises:
        MalformedInput: if text is neither a string nor None
    """
    if text is None:
        return Document.default()
    if not isinstance(text, str):
        raise MalformedInput(f"Expected serialized text, got {type(text).__name__}")

    blocks: list[Block] = []
    quote_lines: list[Paragraph] | None = None

    def flush_quote():
        """Close the current quote run, joining a quote right before it."""
        nonlocal quote_lines
        if quote_lines is None:
            return
        if blocks and isinstance(blocks[-1], Quote):
            blocks[-1].children.extend(quote_lines)
        else:
            blocks.append(Quote(quote_lines))
        quote_lines = None

    for line in text.split("\n"):
        if line.startswith(QUOTE_PREFIX):
            if quote_lines is None:
                quote_lines = []
            quote_lines.append(Paragraph([Inline(line[len(QUOTE_PREFIX):])]))
            continue
        flush_quote()
        if line.strip():
            blocks.append(Paragraph([Inline(line)]))

    flush_quote()

    if not blocks:
        return Document.default()
    return Document(blocks)


def deserialize(text: Any) -> Document:
    """
    Build a document from serialized text.

    Never raises: anything the strict parser rejects yields the default
    empty document, so a composer always starts.
    """
    try:
        return parse_document(text)
    except MalformedInput as e:
        logger.warning("Falling back to an empty document: %s", e)
        return Document.default()
