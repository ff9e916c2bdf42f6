"""
Normalization - restores the tree invariants after a batch of mutations.

Rules applied on every pass:
1. Quote children that are not Paragraphs become Paragraphs
   (loose inlines or text are wrapped, a nested quote is spliced in)
2. Adjacent Quote siblings are merged
3. Root children that are not Blocks are wrapped in a Paragraph

Housekeeping on the same pass:
- quotes without lines are dropped
- paragraphs keep at least one inline, empty inline runs are dropped
- adjacent inline runs with identical marks are merged
- an empty document gets the default paragraph

Passes repeat until one makes no change. A fix can surface at most one new
violation, so the node count bounds the number of passes.
"""

from __future__ import annotations
import logging

from .document import Document
from .nodes import Inline, Paragraph, Quote

logger = logging.getLogger(__name__)


def normalize(document: Document) -> int:
    """
    Normalize a document in place until it reaches a fixed point.

    Returns:
        The number of fixes applied (0 when the document was already normal)
    """
    total = 0
    limit = document.node_count() + 2
    for _ in range(limit):
        fixes = _normalize_pass(document)
        if fixes == 0:
            if total:
                logger.debug("normalized document with %d fixes", total)
            return total
        total += fixes
    raise RuntimeError(f"Normalization did not reach a fixed point after {limit} passes")


def is_normalized(document: Document) -> bool:
    return _normalize_pass(document.copy()) == 0


def _normalize_pass(document: Document) -> int:
    fixes = 0
    blocks: list = []

    for child in document.children:
        if isinstance(child, Quote):
            fixes += _normalize_quote(child)
            if not child.children:
                fixes += 1
                continue
            if blocks and isinstance(blocks[-1], Quote):
                blocks[-1].children.extend(child.children)
                fixes += 1
                continue
            blocks.append(child)
        elif isinstance(child, Paragraph):
            fixes += _normalize_paragraph(child)
            blocks.append(child)
        else:
            blocks.append(Paragraph([_as_inline(child)]))
            fixes += 1

    if not blocks:
        blocks.append(Paragraph([Inline("")]))
        fixes += 1

    document.children[:] = blocks
    return fixes


def _normalize_quote(quote: Quote) -> int:
    fixes = 0
    lines: list[Paragraph] = []
    for child in quote.children:
        if isinstance(child, Paragraph):
            fixes += _normalize_paragraph(child)
            lines.append(child)
        elif isinstance(child, Quote):
            lines.extend(child.children)
            fixes += 1
        else:
            lines.append(Paragraph([_as_inline(child)]))
            fixes += 1
    quote.children[:] = lines
    return fixes


def _normalize_paragraph(paragraph: Paragraph) -> int:
    fixes = 0
    runs: list[Inline] = []
    for child in paragraph.children:
        if not isinstance(child, Inline):
            child = _as_inline(child)
            fixes += 1
        if child.is_empty and (runs or len(paragraph.children) > 1):
            fixes += 1
            continue
        if runs and runs[-1].same_marks(child):
            runs[-1].text += child.text
            fixes += 1
            continue
        runs.append(child)

    if not runs:
        runs.append(Inline(""))
        fixes += 1

    paragraph.children[:] = runs
    return fixes


def _as_inline(node) -> Inline:
    """Coerce a stray node into an inline run."""
    if isinstance(node, Inline):
        return node
    if isinstance(node, str):
        return Inline(node)
    if isinstance(node, Paragraph):
        return Inline(node.text)
    raise TypeError(f"Cannot normalize {type(node).__name__} into a document")
