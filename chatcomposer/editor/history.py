"""
History - in-session undo/redo.

Each settled mutation batch pushes a snapshot of the document and the
selection as they were before the batch. Nothing outlives the editor.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..document.document import Document
from .selection import Selection

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    document: Document
    selection: Selection


class History:

    def __init__(self, limit: int = 100):
        self.limit = limit
        self.undos: list[Snapshot] = []
        self.redos: list[Snapshot] = []

    @property
    def can_undo(self) -> bool:
        return bool(self.undos)

    @property
    def can_redo(self) -> bool:
        return bool(self.redos)

    def record(self, document: Document, selection: Selection) -> None:
        """Push the state before a change. Starts a new redo branch."""
        if self.limit == 0:
            return
        self.undos.append(Snapshot(document.copy(), selection))
        if len(self.undos) > self.limit:
            del self.undos[0]
        self.redos.clear()

    def undo(self, document: Document, selection: Selection) -> Snapshot | None:
        """
        Step back.

        Args:
            document, selection: the current state, kept for redo

        Returns:
            The state to restore, or None when there is nothing to undo
        """
        if not self.undos:
            return None
        self.redos.append(Snapshot(document.copy(), selection))
        snapshot = self.undos.pop()
        logger.debug("undo (%d left)", len(self.undos))
        return Snapshot(snapshot.document.copy(), snapshot.selection)

    def redo(self, document: Document, selection: Selection) -> Snapshot | None:
        if not self.redos:
            return None
        self.undos.append(Snapshot(document.copy(), selection))
        snapshot = self.redos.pop()
        logger.debug("redo (%d left)", len(self.redos))
        return Snapshot(snapshot.document.copy(), snapshot.selection)

    def clear(self) -> None:
        self.undos.clear()
        self.redos.clear()

    def __len__(self) -> int:
        return len(self.undos)
