from __future__ import annotations
from dataclasses import dataclass

from ..document.path import Position


@dataclass(frozen=True)
class Selection:
    """
    The user's selection: where it was started (anchor) and where it ends
    (focus). A collapsed selection is a plain cursor.
    """
    anchor: Position
    focus: Position

    @classmethod
    def collapsed(cls, position: Position) -> Selection:
        return cls(position, position)

    @property
    def is_collapsed(self) -> bool:
        return self.anchor == self.focus

    @property
    def is_backward(self) -> bool:
        return self.focus < self.anchor

    @property
    def start(self) -> Position:
        return min(self.anchor, self.focus)

    @property
    def end(self) -> Position:
        return max(self.anchor, self.focus)

    def collapse_to_start(self) -> Selection:
        return Selection.collapsed(self.start)

    def collapse_to_end(self) -> Selection:
        return Selection.collapsed(self.end)

    def __repr__(self) -> str:
        if self.is_collapsed:
            return f"Selection({self.anchor})"
        return f"Selection({self.anchor} -> {self.focus})"
