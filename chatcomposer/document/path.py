"""
Path - Structural addresses into a Document.

Two immutable value types:
- IndexPath: a block's position via indices (e.g., "1.0" is the first
  paragraph of the quote at index 1)
- Position: an IndexPath to a paragraph plus a character offset into
  that paragraph's inline text

Both are snapshots. They never hold references to nodes, so a path taken
before a mutation has to be re-derived from the value a primitive returns.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import SupportsIndex, overload


@dataclass(frozen=True, order=True)
class IndexPath:
    """
    Child indices from the document root down to a block.

    (2,) is the third top-level block, (1, 0) the first line of the quote
    at index 1. Paths order the way their blocks appear in the document.
    """

    indices: tuple[int, ...]

    def __init__(self, indices: list[int] | tuple[int, ...]):
        object.__setattr__(self, 'indices', tuple(indices))

    @overload
    def __getitem__(self, index: SupportsIndex) -> int: ...

    @overload
    def __getitem__(self, index: slice) -> IndexPath: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return IndexPath(self.indices[index])
        return self.indices[index]

    def __len__(self) -> int:
        return len(self.indices)

    @property
    def depth(self) -> int:
        """1 for a top-level block, 2 for a quoted line."""
        return len(self.indices)

    @property
    def last(self) -> int | None:
        return self.indices[-1] if self.indices else None

    @property
    def parent(self) -> IndexPath | None:
        if not self.indices:
            return None
        return IndexPath(self.indices[:-1])

    def is_ancestor_of(self, other: IndexPath) -> bool:
        """True if other lies inside this path's subtree (or is this path)."""
        return other.indices[:len(self.indices)] == self.indices

    def child(self, index: int) -> IndexPath:
        return IndexPath(self.indices + (index,))

    def sibling(self, index: int) -> IndexPath:
        if not self.indices:
            raise ValueError("The document root has no siblings")
        return IndexPath(self.indices[:-1] + (index,))

    def next(self) -> IndexPath:
        return self.sibling(self.indices[-1] + 1)

    def previous(self) -> IndexPath | None:
        """None for a first child."""
        if not self.indices or self.indices[-1] == 0:
            return None
        return self.sibling(self.indices[-1] - 1)

    def __str__(self) -> str:
        return ".".join(map(str, self.indices))

    def __repr__(self) -> str:
        return f"IndexPath({list(self.indices)})"

    @classmethod
    def from_string(cls, s: str) -> IndexPath:
        """Inverse of str(): "1.0" -> IndexPath([1, 0])."""
        return cls([int(part) for part in s.split(".")] if s else [])


@dataclass(frozen=True, order=True)
class Position:
    """
    A location between two characters of a paragraph.

    Ordering follows document order: first by path, then by offset.

    Attributes:
        path: IndexPath of a Paragraph (top-level or inside a Quote)
        offset: Character offset into the paragraph's concatenated inline text
    """

    path: IndexPath
    offset: int = 0

    def __post_init__(self):
        if not isinstance(self.path, IndexPath):
            object.__setattr__(self, 'path', IndexPath(self.path))

    def with_offset(self, offset: int) -> Position:
        return Position(self.path, offset)

    def shift(self, delta: int) -> Position:
        return Position(self.path, self.offset + delta)

    def __str__(self) -> str:
        return f"{self.path}:{self.offset}"

    def __repr__(self) -> str:
        return f"Position({list(self.path.indices)}, {self.offset})"
