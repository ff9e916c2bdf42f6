"""
Editor layer - selection, rules, formatting, history and debounced output.
"""

from .selection import Selection
from .keys import KeyEvent, Modifiers
from .history import History, Snapshot
from .debounce import AsyncioScheduler, Debouncer, ManualScheduler, Scheduler, default_scheduler
from .formats import Formatter, FormatterMeta
from .editor import Editor

__all__ = [
    "Selection",
    "KeyEvent",
    "Modifiers",
    "History",
    "Snapshot",
    "AsyncioScheduler",
    "Debouncer",
    "ManualScheduler",
    "Scheduler",
    "default_scheduler",
    "Formatter",
    "FormatterMeta",
    "Editor",
]
