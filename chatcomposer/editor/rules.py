"""
Rules - keystroke-driven structural edits.

Every rule reads the editor's selection, calls document primitives and
leaves a fresh selection behind. Rules run inside `Editor.batch()`, which
normalizes the tree and schedules emission afterwards, so they never
normalize themselves.

Blockquote conventions:
- "> " typed at the start of a paragraph turns it into a quote
- Backspace at the start of a quoted line lifts that line out
- Shift+Enter on an empty quoted line right after another empty quoted
  line lifts both out (the first blank line stays in the quote)
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING

from ..document.nodes import BlockType, Quote
from ..document.path import IndexPath, Position

if TYPE_CHECKING:
    from .editor import Editor

logger = logging.getLogger(__name__)


QUOTE_TRIGGER = ">"


# =========================================================================
# Text input
# =========================================================================

def insert_text(editor: Editor, text: str) -> None:
    """
    Type or paste text at the selection.

    Newlines split the current paragraph, so pasted lines become
    paragraphs in the same container.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if not text:
        return
    delete_selection(editor)
    if text == " " and convert_to_quote(editor):
        return

    document = editor.document
    position = editor.selection.focus
    for i, line in enumerate(text.split("\n")):
        if i:
            position = document.split_block(position)
        if line:
            position = document.insert_text(position, line)
    editor.select(position)


def convert_to_quote(editor: Editor) -> bool:
    """
    Turn "> " at the start of a top-level paragraph into a quote.

    The ">" is removed and the space is swallowed. A quote directly before
    the new one absorbs it.

    Returns:
        True if the paragraph was converted
    """
    document = editor.document
    position = editor.selection.focus
    if not editor.selection.is_collapsed or document.is_quoted(position.path):
        return False
    paragraph = document.paragraph(position.path)
    if paragraph.text[:position.offset] != QUOTE_TRIGGER:
        return False

    start = Position(position.path, 0)
    document.delete_range(start, start.shift(len(QUOTE_TRIGGER)))
    quote_path = document.set_block_type(position.path, BlockType.QUOTE)
    cursor = Position(quote_path.child(0), 0)

    previous = quote_path.previous()
    if previous is not None and isinstance(document.get(previous), Quote):
        merged = document.merge_blocks(previous, quote_path)
        last_line = len(document.get(merged).children) - 1
        cursor = Position(merged.child(last_line), 0)
        logger.debug("'> ' joined the quote at %s", merged)
    else:
        logger.debug("'> ' opened a quote at %s", quote_path)

    editor.select(cursor)
    return True


# =========================================================================
# Deletion
# =========================================================================

def delete_selection(editor: Editor) -> bool:
    """Delete a non-collapsed selection. Returns True if anything was selected."""
    selection = editor.selection
    if selection.is_collapsed:
        return False
    editor.select(editor.document.delete_range(selection.start, selection.end))
    return True


def delete_backward(editor: Editor) -> None:
    """Backspace."""
    if delete_selection(editor):
        return
    document = editor.document
    position = editor.selection.focus
    if position.offset > 0:
        editor.select(document.delete_range(position.shift(-1), position))
        return
    if lift_from_quote(editor):
        return

    paths = document.paragraph_paths()
    index = paths.index(position.path)
    if index == 0:
        return
    previous = paths[index - 1]
    join = document.paragraph(previous).length
    merged = document.merge_blocks(previous, position.path)
    editor.select(Position(merged, join))


def lift_from_quote(editor: Editor) -> bool:
    """
    Backspace at the start of a quoted line: move the line out of the quote.

    On the first line the rest of the quote stays after it; on a later
    line the lines before it stay quoted above it.
    """
    position = editor.selection.focus
    if position.offset != 0 or not editor.document.is_quoted(position.path):
        return False
    assert editor.selection.is_collapsed
    first_line = position.path[1] == 0
    lifted = editor.document.lift_block(position.path)
    logger.debug(
        "backspace lifted %s quote line %s to %s",
        "the first" if first_line else "a later",
        position.path,
        lifted,
    )
    editor.select(Position(lifted, 0))
    return True


def delete_forward(editor: Editor) -> None:
    """Delete key."""
    if delete_selection(editor):
        return
    document = editor.document
    position = editor.selection.focus
    if position.offset < document.paragraph(position.path).length:
        document.delete_range(position, position.shift(1))
        return

    paths = document.paragraph_paths()
    index = paths.index(position.path)
    if index == len(paths) - 1:
        return
    merged = document.merge_blocks(position.path, paths[index + 1])
    editor.select(Position(merged, position.offset))


# =========================================================================
# Line breaks
# =========================================================================

def insert_break(editor: Editor) -> None:
    """
    Shift+Enter.

    Outside a quote, or on a quoted line with text, the paragraph splits
    at the cursor. On an empty quoted line the quote is left only when the
    line before is empty too.
    """
    delete_selection(editor)
    assert editor.selection.is_collapsed
    document = editor.document
    position = editor.selection.focus

    if document.is_quoted(position.path) and document.paragraph(position.path).is_blank:
        previous = position.path.previous()
        if previous is not None and document.paragraph(previous).is_blank:
            exit_quote(editor, previous, position.path)
            return

    editor.select(document.split_block(position))


def exit_quote(editor: Editor, previous: IndexPath, current: IndexPath) -> None:
    """Lift two trailing blank lines out of their quote, keeping the cursor on the second."""
    document = editor.document
    assert current.parent == previous.parent and document.is_quoted(current)
    ordinal, _ = document.linear(Position(current, 0))
    document.lift_block(current)
    document.lift_block(previous)
    logger.debug("double blank line left the quote at %s", previous.parent)
    editor.select(document.position_at(ordinal, 0))


# =========================================================================
# Cursor movement
# =========================================================================

def move(editor: Editor, direction: int) -> None:
    """
    ArrowLeft (-1) / ArrowRight (+1).

    A selection collapses to its start or end. A collapsed cursor moves one
    character, crossing into the neighbouring paragraph at the edges.
    """
    selection = editor.selection
    if not selection.is_collapsed:
        editor.select(selection.start if direction < 0 else selection.end)
        return

    document = editor.document
    position = selection.focus
    ordinal, offset = document.linear(position)
    length = document.paragraph(position.path).length
    if direction < 0:
        if offset > 0:
            editor.select(position.shift(-1))
        elif ordinal > 0:
            editor.select(document.position_at(ordinal - 1, 10 ** 9))
    else:
        if offset < length:
            editor.select(position.shift(1))
        elif ordinal < len(document.paragraph_paths()) - 1:
            editor.select(document.position_at(ordinal + 1, 0))


def move_to_line_edge(editor: Editor, end: bool) -> None:
    """Home / End."""
    path = editor.selection.focus.path
    offset = editor.document.paragraph(path).length if end else 0
    editor.select(Position(path, offset))
