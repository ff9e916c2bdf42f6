"""
Render - HTML preview of a document.

Paragraphs render as <div> lines, quotes as a <blockquote> of lines.
Inline marks and decorations map to the same tags:

    bold           <strong>
    italic         <em>
    strikethrough  <s>
    code           <code class="md-code">
    spoiler        <span class="md-spoiler">

Delimiters typed by the user stay visible around the styled content.
"""

from __future__ import annotations
from html import escape

from .decorator import decorate
from .document import Document
from .nodes import Block, Inline, Mark, Paragraph, Quote
from .transcoder import NESTING_ORDER


TAGS: dict[Mark, tuple[str, str]] = {
    Mark.BOLD: ("<strong>", "</strong>"),
    Mark.ITALIC: ("<em>", "</em>"),
    Mark.STRIKETHROUGH: ("<s>", "</s>"),
    Mark.CODE: ('<code class="md-code">', "</code>"),
    Mark.SPOILER: ('<span class="md-spoiler">', "</span>"),
}


def render_html(document: Document) -> str:
    return "".join(render_block(block) for block in document.children)


def render_block(block: Block) -> str:
    if isinstance(block, Quote):
        lines = "".join(render_paragraph(child) for child in block.children)
        return f'<blockquote class="md-blockquote">{lines}</blockquote>'
    if isinstance(block, Paragraph):
        return render_paragraph(block)
    raise TypeError(f"Cannot render {type(block).__name__}")


def render_paragraph(paragraph: Paragraph) -> str:
    if paragraph.is_empty:
        return "<div><br></div>"
    return "<div>" + "".join(render_inline(child) for child in paragraph.children) + "</div>"


def render_inline(inline: Inline) -> str:
    """Render one inline: decorated segments inside the inline's own marks."""
    text = inline.text
    decorations = decorate(text)

    # Cut the text at every decoration boundary, then style each piece
    # with the marks whose content range covers it.
    cuts = sorted({0, len(text)} | {d.start for d in decorations} | {d.end for d in decorations})
    parts = []
    for start, end in zip(cuts, cuts[1:]):
        marks = {d.mark for d in decorations if d.start <= start and end <= d.end}
        parts.append(_wrap(escape(text[start:end]), marks))
    return _wrap("".join(parts), set(inline.marks))


def _wrap(html: str, marks: set[Mark]) -> str:
    for mark in reversed(NESTING_ORDER):
        if mark in marks:
            open_tag, close_tag = TAGS[mark]
            html = f"{open_tag}{html}{close_tag}"
    return html
