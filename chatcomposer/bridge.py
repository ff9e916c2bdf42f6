"""
Bridge - the calls a host UI makes into the composer.

A host mounts a composer with `init`, forwards key presses and toolbar
clicks, and receives text through the callbacks it registered. The only
thing that crosses back to the host is the serialized string.

Usage:
    handle = init("draft", scheduler=ManualScheduler())
    on_change(handle, save_draft)
    on_submit(handle, send_message)
    handle_keydown(handle, "Enter", {"shift": True})
    apply_format(handle, "bold")
    close(handle)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import Any, Callable
import uuid

from .config import ComposerConfig
from .document.decorator import Decoration
from .editor.debounce import Scheduler
from .editor.editor import Editor
from .editor.keys import KeyEvent, Modifiers

logger = logging.getLogger(__name__)


SUPPORTED_FORMATS = ("bold", "italic", "strikethrough", "code", "spoiler", "blockquote")


@dataclass
class EditorHandle:
    """Opaque reference a host keeps for one mounted composer."""
    editor: Editor
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    @property
    def is_closed(self) -> bool:
        return self.editor.is_closed


def init(
    initial_text: str | None = "",
    *,
    config: ComposerConfig | None = None,
    scheduler: Scheduler | None = None,
) -> EditorHandle:
    """Mount a composer over `initial_text`. Malformed input yields an empty composer."""
    handle = EditorHandle(Editor(initial_text, config=config, scheduler=scheduler))
    logger.debug("mounted composer %s", handle.id)
    return handle


def on_change(handle: EditorHandle, callback: Callable[[str], Any]) -> None:
    handle.editor.on_change(callback)


def on_submit(handle: EditorHandle, callback: Callable[[str], Any]) -> None:
    handle.editor.on_submit(callback)


def apply_format(handle: EditorHandle, mark: str) -> None:
    """
    Apply a toolbar format to the current selection.

    Args:
        mark: One of SUPPORTED_FORMATS

    Raises:
        ValueError: for any other name
    """
    if mark.lower() not in SUPPORTED_FORMATS:
        raise ValueError(f"Unsupported format {mark!r}, expected one of {SUPPORTED_FORMATS}")
    handle.editor.apply_format(mark)


def flush_and_serialize(handle: EditorHandle) -> str:
    return handle.editor.flush_and_serialize()


def reset(handle: EditorHandle) -> None:
    handle.editor.reset()


def handle_keydown(
    handle: EditorHandle,
    key: str,
    modifiers: Modifiers | dict[str, bool] | list[str] | None = None,
) -> bool:
    """
    Forward a key press.

    Returns:
        True if the composer consumed it and the host should prevent the
        default action
    """
    event = KeyEvent(key=key, modifiers=modifiers if modifiers is not None else {})
    return handle.editor.handle_keydown(event)


def get_decorations(handle: EditorHandle, inline_id: str) -> list[Decoration]:
    return handle.editor.get_decorations(inline_id)


def close(handle: EditorHandle) -> None:
    """Unmount: cancel any pending emission. Nothing reaches the host afterwards."""
    handle.editor.close()
    logger.debug("closed composer %s", handle.id)


__all__ = [
    "EditorHandle",
    "KeyEvent",
    "Modifiers",
    "SUPPORTED_FORMATS",
    "init",
    "on_change",
    "on_submit",
    "apply_format",
    "flush_and_serialize",
    "reset",
    "handle_keydown",
    "get_decorations",
    "close",
]
