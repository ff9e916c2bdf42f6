"""
Document engine - tree model, transcoder and decorations.

This package provides:
- Document: root of the tree, with the structural primitives
- Paragraph, Quote: the two block variants
- Inline, Mark: leaf text runs and their style marks
- IndexPath, Position: structural addresses
- serialize / deserialize: tree <-> flat text
- decorate: text -> inline style ranges
- normalize: restores tree invariants after mutations
- render_html: HTML preview of a document
"""

from .path import IndexPath, Position
from .nodes import Block, BlockType, DELIMITERS, Inline, Mark, Paragraph, Quote
from .document import Document
from .errors import (
    ComposerError,
    EditorClosed,
    InvalidPath,
    InvalidRange,
    MalformedInput,
    UnsupportedDelimiterNesting,
)
from .normalize import normalize, is_normalized
from .transcoder import serialize, deserialize, parse_document
from .decorator import Decoration, decorate
from .render import render_html

__all__ = [
    "IndexPath",
    "Position",
    "Block",
    "BlockType",
    "DELIMITERS",
    "Inline",
    "Mark",
    "Paragraph",
    "Quote",
    "Document",
    "ComposerError",
    "EditorClosed",
    "InvalidPath",
    "InvalidRange",
    "MalformedInput",
    "UnsupportedDelimiterNesting",
    "normalize",
    "is_normalized",
    "serialize",
    "deserialize",
    "parse_document",
    "Decoration",
    "decorate",
    "render_html",
]
