"""
chatcomposer - a rich-text message composer engine for chat inputs.

The composer keeps a small block tree (paragraphs and blockquotes), edits
it through keystroke rules, and hands the host a Markdown-like string.
"""

from .config import ComposerConfig, get_config, set_config, setup_logging
from .document import Document, deserialize, decorate, serialize
from .editor import Editor, ManualScheduler
from . import bridge

__all__ = [
    "ComposerConfig",
    "get_config",
    "set_config",
    "setup_logging",
    "Document",
    "deserialize",
    "decorate",
    "serialize",
    "Editor",
    "ManualScheduler",
    "bridge",
]
