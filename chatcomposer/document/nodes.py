"""
Nodes - The tree types of a composer document.

A Document holds Blocks. A Block is one of two variants:
- Paragraph: a run of Inline leaves
- Quote: a run of Paragraphs

Inline leaves carry the text and a set of Marks. Paragraph offsets are
counted across the concatenated text of its inlines, so splitting or
merging inlines never moves a Position.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union
from uuid import uuid4


def _generate_id() -> str:
    """Generate a short unique ID."""
    return uuid4().hex[:8]


class Mark(str, Enum):
    BOLD = "bold"
    ITALIC = "italic"
    STRIKETHROUGH = "strikethrough"
    CODE = "code"
    SPOILER = "spoiler"


class BlockType(str, Enum):
    PARAGRAPH = "paragraph"
    QUOTE = "quote"


# Markdown-style delimiter written on both sides of a marked run
DELIMITERS: dict[Mark, str] = {
    Mark.BOLD: "**",
    Mark.ITALIC: "*",
    Mark.STRIKETHROUGH: "~~",
    Mark.CODE: "`",
    Mark.SPOILER: "||",
}


@dataclass
class Inline:
    """
    A leaf text run.

    Attributes:
        text: The raw text, delimiters included when the user typed them
        marks: Style marks applied to the whole run
        id: Short identifier the host uses to ask for decorations
    """
    text: str = ""
    marks: frozenset[Mark] = field(default_factory=frozenset)
    id: str = field(default_factory=_generate_id, compare=False)

    def __post_init__(self):
        self.marks = frozenset(Mark(m) for m in self.marks)

    @property
    def length(self) -> int:
        return len(self.text)

    @property
    def is_empty(self) -> bool:
        return self.text == ""

    def same_marks(self, other: Inline) -> bool:
        return self.marks == other.marks

    def split(self, offset: int) -> tuple[Inline, Inline]:
        """Split at offset. The left part keeps this inline's id."""
        left = Inline(self.text[:offset], self.marks, id=self.id)
        right = Inline(self.text[offset:], self.marks)
        return left, right

    def copy(self) -> Inline:
        return Inline(self.text, self.marks, id=self.id)

    def model_dump(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "marks": sorted(m.value for m in self.marks),
        }

    @classmethod
    def model_load(cls, data: dict[str, Any]) -> Inline:
        return cls(
            text=data.get("text", ""),
            marks=frozenset(data.get("marks", [])),
            id=data.get("id") or _generate_id(),
        )

    def __repr__(self) -> str:
        preview = self.text[:20] + ("..." if len(self.text) > 20 else "")
        if self.marks:
            marks = ",".join(sorted(m.value for m in self.marks))
            return f"Inline({preview!r}, marks={marks})"
        return f"Inline({preview!r})"


@dataclass
class Paragraph:
    """A line of text made of inline runs."""
    children: list[Inline] = field(default_factory=lambda: [Inline()])

    type: ClassVar[BlockType] = BlockType.PARAGRAPH

    @property
    def text(self) -> str:
        return "".join(child.text for child in self.children)

    @property
    def length(self) -> int:
        return sum(child.length for child in self.children)

    @property
    def is_empty(self) -> bool:
        return self.length == 0

    @property
    def is_blank(self) -> bool:
        """True if the paragraph holds only whitespace."""
        return self.text.strip() == ""

    def locate(self, offset: int) -> tuple[int, int]:
        """
        Find the inline holding a paragraph offset.

        At a boundary between two inlines the left one wins, so typed text
        continues the run before the cursor.

        Returns:
            (inline index, offset inside that inline)
        """
        if offset < 0 or offset > self.length:
            raise IndexError(f"offset {offset} outside paragraph of length {self.length}")
        if not self.children:
            self.children.append(Inline())
        consumed = 0
        for index, child in enumerate(self.children):
            if offset <= consumed + child.length:
                return index, offset - consumed
            consumed += child.length
        last = len(self.children) - 1
        return last, self.children[last].length

    def insert(self, offset: int, text: str) -> None:
        index, inner = self.locate(offset)
        child = self.children[index]
        child.text = child.text[:inner] + text + child.text[inner:]

    def split_off(self, offset: int) -> list[Inline]:
        """
        Cut the paragraph at offset and return the inlines after it.

        Both sides keep at least one inline; the split inline's marks carry
        over to the right side.
        """
        index, inner = self.locate(offset)
        left, right = self.children[index].split(inner)
        tail = [right] + self.children[index + 1:]
        self.children[index:] = [left]
        return tail

    def delete(self, start: int, end: int) -> None:
        """Remove the characters in [start, end)."""
        tail = self.split_off(end)
        self.split_off(start)
        self.children.extend(tail)

    def copy(self) -> Paragraph:
        return Paragraph([child.copy() for child in self.children])

    def model_dump(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "children": [child.model_dump() for child in self.children],
        }

    @classmethod
    def model_load(cls, data: dict[str, Any]) -> Paragraph:
        return cls([Inline.model_load(child) for child in data.get("children", [])])

    def __repr__(self) -> str:
        return f"Paragraph({self.children!r})"


@dataclass
class Quote:
    """A blockquote. Each child paragraph is one quoted line."""
    children: list[Paragraph] = field(default_factory=lambda: [Paragraph()])

    type: ClassVar[BlockType] = BlockType.QUOTE

    @property
    def text(self) -> str:
        return "\n".join(child.text for child in self.children)

    @property
    def is_empty(self) -> bool:
        return all(child.is_empty for child in self.children)

    def copy(self) -> Quote:
        return Quote([child.copy() for child in self.children])

    def model_dump(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "children": [child.model_dump() for child in self.children],
        }

    @classmethod
    def model_load(cls, data: dict[str, Any]) -> Quote:
        return cls([Paragraph.model_load(child) for child in data.get("children", [])])

    def __repr__(self) -> str:
        return f"Quote({self.children!r})"


Block = Union[Paragraph, Quote]


def load_block(data: dict[str, Any]) -> Block:
    """Deserialize a block, dispatching on its "type" field."""
    block_type = BlockType(data.get("type", BlockType.PARAGRAPH.value))
    if block_type is BlockType.QUOTE:
        return Quote.model_load(data)
    return Paragraph.model_load(data)
