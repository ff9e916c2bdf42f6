"""
Editor - the per-instance controller of a message composer.

The editor owns one Document and one Selection. Every input goes through
`batch()`, which runs the rule, normalizes the tree, records undo history
and restarts the debounce window. Listeners registered with `on_change`
receive the serialized text once input has been quiet for the configured
window; `on_submit` listeners receive it when the user presses Enter.

Usage:
    editor = Editor("hello")
    editor.on_change(lambda text: print("draft:", text))
    editor.on_submit(lambda text: print("sent:", text))
    editor.handle_keydown("!")
    editor.handle_keydown("Enter")
"""

from __future__ import annotations
from contextlib import contextmanager
import logging
from typing import Any, Callable, Iterator

from ..config import ComposerConfig, get_config
from ..document.decorator import Decoration, decorate
from ..document.document import Document
from ..document.errors import EditorClosed
from ..document.normalize import normalize
from ..document.path import Position
from ..document.transcoder import deserialize, serialize
from . import rules
from .debounce import Debouncer, Scheduler
from .formats import FormatterMeta
from .history import History
from .keys import KeyEvent, Modifiers
from .selection import Selection

logger = logging.getLogger(__name__)


TextListener = Callable[[str], Any]


class Editor:
    """
    Args:
        initial_text: Serialized text to start from
        config: Settings; the process-wide config when omitted
        scheduler: Where debounce timers run; see `default_scheduler`
    """

    def __init__(
        self,
        initial_text: str | None = "",
        *,
        config: ComposerConfig | None = None,
        scheduler: Scheduler | None = None,
    ):
        self.config = config or get_config()
        self.document = deserialize(initial_text)
        normalize(self.document)
        self.selection = Selection.collapsed(self.document.end())
        self.history = History(limit=self.config.history_limit)
        self._debouncer = Debouncer(self._emit, delay=self.config.debounce_seconds, scheduler=scheduler)
        self._change_listeners: list[TextListener] = []
        self._submit_listeners: list[TextListener] = []
        self._in_batch = False
        self.is_closed = False

    # =========================================================================
    # Listeners
    # =========================================================================

    def on_change(self, callback: TextListener) -> TextListener:
        """Register a callback for debounced text updates. Usable as a decorator."""
        self._ensure_open()
        self._change_listeners.append(callback)
        return callback

    def on_submit(self, callback: TextListener) -> TextListener:
        self._ensure_open()
        self._submit_listeners.append(callback)
        return callback

    # =========================================================================
    # State
    # =========================================================================

    @property
    def text(self) -> str:
        """The current serialized text, without flushing anything."""
        return serialize(self.document)

    @property
    def has_pending_change(self) -> bool:
        return self._debouncer.pending

    def select(self, anchor: Position | Selection, focus: Position | None = None) -> Selection:
        """Set the selection. A single position collapses it to a cursor."""
        if isinstance(anchor, Selection):
            selection = anchor
        else:
            selection = Selection(anchor, focus if focus is not None else anchor)
        self.document.check(selection.anchor)
        self.document.check(selection.focus)
        self.selection = selection
        return selection

    @contextmanager
    def batch(self) -> Iterator[Editor]:
        """
        Group mutations into one undoable, normalized step.

        If the body raises, the document and selection are restored and the
        error propagates. Nested batches join the outer one.
        """
        self._ensure_open()
        if self._in_batch:
            yield self
            return

        before_document = self.document.copy()
        before_selection = self.selection
        self._in_batch = True
        try:
            yield self
            self._normalize()
        except Exception:
            self.document = before_document
            self.selection = before_selection
            raise
        finally:
            self._in_batch = False

        if self.document != before_document:
            self.history.record(before_document, before_selection)
            self._changed()

    def _normalize(self) -> None:
        anchor = self.document.linear(self.selection.anchor)
        focus = self.document.linear(self.selection.focus)
        fixes = normalize(self.document)
        if fixes:
            self.selection = Selection(
                self.document.position_at(*anchor),
                self.document.position_at(*focus),
            )

    # =========================================================================
    # Editing
    # =========================================================================

    def insert_text(self, text: str) -> None:
        with self.batch():
            rules.insert_text(self, text)

    def delete_backward(self) -> None:
        with self.batch():
            rules.delete_backward(self)

    def delete_forward(self) -> None:
        with self.batch():
            rules.delete_forward(self)

    def insert_break(self) -> None:
        with self.batch():
            rules.insert_break(self)

    def apply_format(self, name: str) -> None:
        """
        Apply a named format to the selection.

        Raises:
            ValueError: for a format no formatter is registered under
        """
        formatter_cls = FormatterMeta.get_formatter(name)
        with self.batch():
            formatter_cls(self).apply()

    def move(self, direction: int) -> None:
        self._ensure_open()
        rules.move(self, direction)

    def move_to_line_edge(self, end: bool) -> None:
        self._ensure_open()
        rules.move_to_line_edge(self, end)

    def undo(self) -> bool:
        self._ensure_open()
        snapshot = self.history.undo(self.document, self.selection)
        if snapshot is None:
            return False
        self.document, self.selection = snapshot.document, snapshot.selection
        self._changed()
        return True

    def redo(self) -> bool:
        self._ensure_open()
        snapshot = self.history.redo(self.document, self.selection)
        if snapshot is None:
            return False
        self.document, self.selection = snapshot.document, snapshot.selection
        self._changed()
        return True

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def flush_and_serialize(self) -> str:
        """Emit any pending change right away and return the current text."""
        self._ensure_open()
        self._debouncer.flush()
        return serialize(self.document)

    def submit(self) -> str:
        """
        Send the message: flush, hand the text to submit listeners, reset.

        Returns:
            The submitted text
        """
        text = self.flush_and_serialize()
        logger.info("submitting message (%d chars)", len(text))
        for callback in list(self._submit_listeners):
            callback(text)
        self.reset()
        return text

    def reset(self) -> None:
        """Clear the composer back to a single empty paragraph."""
        self._ensure_open()
        self.document = Document.default()
        self.selection = Selection.collapsed(self.document.start())
        self.history.clear()
        self._changed()

    def close(self) -> None:
        """Drop pending emissions and listeners. Further use raises EditorClosed."""
        if self.is_closed:
            return
        if self._debouncer.cancel():
            logger.debug("dropped a pending emission on close")
        self._change_listeners.clear()
        self._submit_listeners.clear()
        self.is_closed = True

    # =========================================================================
    # Presentation
    # =========================================================================

    def get_decorations(self, inline_id: str) -> list[Decoration]:
        """
        Style ranges for one inline run.

        Raises:
            KeyError: if no inline has that id
        """
        self._ensure_open()
        _, inline = self.document.find_inline(inline_id)
        return decorate(inline.text)

    # =========================================================================
    # Keyboard
    # =========================================================================

    def handle_keydown(self, key: str | KeyEvent, modifiers: Modifiers | None = None) -> bool:
        """
        Route a key press to its rule.

        Returns:
            True if the editor handled the key, False if the host should
            apply its default behaviour
        """
        if self.is_closed:
            logger.debug("ignoring key %r on a closed editor", key)
            return False
        if isinstance(key, KeyEvent):
            event = key
        else:
            event = KeyEvent(key=key, modifiers=modifiers or Modifiers())
        key, mods = event.key, event.modifiers

        if key == "Enter":
            if not mods.any:
                self.submit()
            elif mods.shift and not (mods.command or mods.alt):
                self.insert_break()
            else:
                return False
            return True

        if mods.command:
            return self._handle_shortcut(key.lower(), mods)

        if key == "Backspace":
            self.delete_backward()
        elif key == "Delete":
            self.delete_forward()
        elif key in ("ArrowLeft", "ArrowRight"):
            self.move(-1 if key == "ArrowLeft" else 1)
        elif key in ("Home", "End"):
            self.move_to_line_edge(key == "End")
        elif len(key) == 1:
            self.insert_text(key)
        else:
            return False
        return True

    def _handle_shortcut(self, key: str, mods: Modifiers) -> bool:
        if key == "b":
            self.apply_format("bold")
        elif key == "i":
            self.apply_format("italic")
        elif key == "z":
            if mods.shift:
                self.redo()
            else:
                self.undo()
        elif key == "y":
            self.redo()
        else:
            return False
        return True

    # =========================================================================
    # Internals
    # =========================================================================

    def _changed(self) -> None:
        self._debouncer.trigger()

    def _emit(self) -> None:
        text = serialize(self.document)
        logger.debug("emitting %d chars to %d listeners", len(text), len(self._change_listeners))
        for callback in list(self._change_listeners):
            callback(text)

    def _ensure_open(self) -> None:
        if self.is_closed:
            raise EditorClosed("editor is closed")

    def __repr__(self) -> str:
        return f"Editor(blocks={len(self.document.children)}, selection={self.selection!r})"
