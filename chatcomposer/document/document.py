"""
Document - The root of the composer tree and its structural primitives.

The primitives are the only operations that change the tree's shape:
    insert_text, delete_range, split_block, merge_blocks,
    set_block_type, wrap_block, lift_block

Each one validates its addresses, mutates in place and returns the
resulting (possibly shifted) path or position. They raise InvalidPath or
InvalidRange for bad addresses and never for "business" reasons; the
editing rules decide which combinations make sense and run normalization
afterwards.

Usage:
    doc = Document.default()
    end = doc.insert_text(Position(IndexPath([0]), 0), "hello")
    doc.split_block(end)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterator

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from .errors import InvalidPath, InvalidRange
from .nodes import Block, BlockType, Inline, Paragraph, Quote, load_block
from .path import IndexPath, Position


@dataclass
class Document:
    """
    Ordered sequence of blocks. Never empty once normalized.

    Attributes:
        children: Top-level Paragraph and Quote blocks
    """
    children: list[Block] = field(default_factory=list)

    @classmethod
    def default(cls) -> Document:
        """The single empty paragraph every composer starts from."""
        return cls([Paragraph([Inline("")])])

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def is_default(self) -> bool:
        return (
            len(self.children) == 1
            and isinstance(self.children[0], Paragraph)
            and self.children[0].is_empty
        )

    def get(self, path: IndexPath) -> Block:
        """Resolve a block path (depth 1 or 2)."""
        path = _as_path(path)
        if path.depth not in (1, 2):
            raise InvalidPath(path)
        i = path[0]
        if not 0 <= i < len(self.children):
            raise InvalidPath(path)
        block = self.children[i]
        if path.depth == 1:
            return block
        if not isinstance(block, Quote):
            raise InvalidPath(path, "only quotes have child blocks")
        j = path[1]
        if not 0 <= j < len(block.children):
            raise InvalidPath(path)
        return block.children[j]

    def paragraph(self, path: IndexPath) -> Paragraph:
        """Resolve a path that must point at a Paragraph."""
        block = self.get(path)
        if not isinstance(block, Paragraph):
            raise InvalidPath(path, "does not resolve to a paragraph")
        return block

    def check(self, position: Position) -> Paragraph:
        """Resolve a position's paragraph and validate its offset."""
        paragraph = self.paragraph(position.path)
        if not 0 <= position.offset <= paragraph.length:
            raise InvalidPath(position, f"offset outside paragraph of length {paragraph.length}")
        return paragraph

    def is_quoted(self, path: IndexPath) -> bool:
        return _as_path(path).depth == 2

    def iter_paragraphs(self) -> Iterator[tuple[IndexPath, Paragraph]]:
        """Yield every paragraph with its path, in document order."""
        for i, block in enumerate(self.children):
            if isinstance(block, Quote):
                for j, child in enumerate(block.children):
                    yield IndexPath([i, j]), child
            else:
                yield IndexPath([i]), block

    def paragraph_paths(self) -> list[IndexPath]:
        return [path for path, _ in self.iter_paragraphs()]

    def path_of(self, node: Block) -> IndexPath:
        """Find a block by identity. Used right after a mutation shifted it."""
        for i, block in enumerate(self.children):
            if block is node:
                return IndexPath([i])
            if isinstance(block, Quote):
                for j, child in enumerate(block.children):
                    if child is node:
                        return IndexPath([i, j])
        raise InvalidPath(node, "node is not part of this document")

    def find_inline(self, inline_id: str) -> tuple[IndexPath, Inline]:
        for path, paragraph in self.iter_paragraphs():
            for inline in paragraph.children:
                if inline.id == inline_id:
                    return path, inline
        raise KeyError(f"No inline with id {inline_id!r}")

    def start(self) -> Position:
        return Position(self.paragraph_paths()[0], 0)

    def end(self) -> Position:
        path, paragraph = list(self.iter_paragraphs())[-1]
        return Position(path, paragraph.length)

    def node_count(self) -> int:
        count = 0
        for block in self.children:
            count += 1
            if isinstance(block, Quote):
                for child in block.children:
                    count += 1 + len(child.children)
            elif isinstance(block, Paragraph):
                count += len(block.children)
        return count

    # -------------------------------------------------------------------------
    # Linear addressing: (paragraph ordinal, offset)
    # -------------------------------------------------------------------------

    def linear(self, position: Position) -> tuple[int, int]:
        """
        Convert a position to (paragraph ordinal, offset).

        Ordinals survive normalization: merging quotes or inline runs never
        reorders, adds or drops paragraphs.
        """
        for ordinal, path in enumerate(self.paragraph_paths()):
            if path == position.path:
                return ordinal, position.offset
        raise InvalidPath(position)

    def position_at(self, ordinal: int, offset: int) -> Position:
        """Inverse of `linear`, clamped to the document."""
        paragraphs = list(self.iter_paragraphs())
        ordinal = max(0, min(ordinal, len(paragraphs) - 1))
        path, paragraph = paragraphs[ordinal]
        return Position(path, max(0, min(offset, paragraph.length)))

    def text_between(self, start: Position, end: Position) -> str:
        """Plain text in [start, end), paragraphs joined by newline."""
        if start.path == end.path:
            return self.check(start).text[start.offset:end.offset]
        parts = []
        for path, paragraph in self.iter_paragraphs():
            if path == start.path:
                parts.append(paragraph.text[start.offset:])
            elif path == end.path:
                parts.append(paragraph.text[:end.offset])
            elif start.path < path < end.path:
                parts.append(paragraph.text)
        return "\n".join(parts)

    # =========================================================================
    # Primitives
    # =========================================================================

    def insert_text(self, position: Position, text: str) -> Position:
        """
        Insert text at a position.

        Returns:
            The position right after the inserted text
        """
        paragraph = self.check(position)
        paragraph.insert(position.offset, text)
        return position.shift(len(text))

    def delete_range(self, start: Position, end: Position) -> Position:
        """
        Delete everything between two positions.

        Across paragraphs, the text after `end` joins the paragraph holding
        `start`, and every paragraph in between is removed. A quote left
        without paragraphs is removed with them.

        Returns:
            The start position, where the cursor belongs afterwards
        """
        start_paragraph = self.check(start)
        end_paragraph = self.check(end)
        if not start < end:
            raise InvalidRange(start, end)

        if start.path == end.path:
            start_paragraph.delete(start.offset, end.offset)
            return start

        tail = end_paragraph.split_off(end.offset)
        start_paragraph.split_off(start.offset)
        start_paragraph.children.extend(tail)

        doomed = [path for path, _ in self.iter_paragraphs() if start.path < path <= end.path]
        for path in reversed(doomed):
            self._remove_paragraph(path)
        return start

    def split_block(self, position: Position) -> Position:
        """
        Split a paragraph in two at a position.

        The new paragraph is inserted right after the original, inside the
        same container.

        Returns:
            The start of the new paragraph
        """
        paragraph = self.check(position)
        tail = paragraph.split_off(position.offset)
        new_path = position.path.next()
        self._container(position.path).insert(new_path.last, Paragraph(tail))
        return Position(new_path, 0)

    def merge_blocks(self, path_a: IndexPath, path_b: IndexPath) -> IndexPath:
        """
        Merge block B into block A and remove B.

        The result keeps A's type:
        - Paragraph A receives B's inline runs (all of them, for a quote B)
        - Quote A receives B as a line, or B's lines for a quote B

        Returns:
            The path of A after B was removed
        """
        path_a, path_b = _as_path(path_a), _as_path(path_b)
        block_a = self.get(path_a)
        block_b = self.get(path_b)
        if path_a.is_ancestor_of(path_b) or path_b.is_ancestor_of(path_a):
            raise InvalidPath(path_b, f"cannot merge into {path_a}, the blocks are nested")

        self._detach(path_b)
        if isinstance(block_a, Paragraph):
            if isinstance(block_b, Quote):
                for child in block_b.children:
                    block_a.children.extend(child.children)
            else:
                block_a.children.extend(block_b.children)
        else:
            if isinstance(block_b, Quote):
                block_a.children.extend(block_b.children)
            else:
                block_a.children.append(block_b)
        return self.path_of(block_a)

    def set_block_type(self, path: IndexPath, block_type: BlockType | str) -> IndexPath:
        """
        Change a block's variant.

        - top-level Paragraph -> Quote: the paragraph becomes the quote's line
        - Quote -> Paragraph: the quote's lines become top-level paragraphs
        - a quoted line is already inside a quote; setting either type on it
          leaves it in place (use lift_block to move it out)

        Returns:
            The path of the converted block (first paragraph for a quote)
        """
        path = _as_path(path)
        block_type = BlockType(block_type)
        block = self.get(path)
        if block.type is block_type or path.depth == 2:
            return path

        i = path[0]
        if block_type is BlockType.QUOTE:
            self.children[i] = Quote([block])
        else:
            self.children[i:i + 1] = list(block.children)
        return path

    def wrap_block(self, path: IndexPath, block_type: BlockType | str = BlockType.QUOTE) -> IndexPath:
        """
        Wrap a block in a new container.

        Quote is the only container type. A quoted line or a quote is
        already wrapped and stays as it is.

        Returns:
            The path of the enclosing quote
        """
        path = _as_path(path)
        if BlockType(block_type) is not BlockType.QUOTE:
            raise ValueError(f"Only quotes can wrap blocks, got {block_type!r}")
        block = self.get(path)
        if path.depth == 2:
            return path.parent
        if isinstance(block, Paragraph):
            self.children[path[0]] = Quote([block])
        return path

    def lift_block(self, path: IndexPath) -> IndexPath:
        """
        Move a quoted line out of its quote, splitting the quote around it.

        Lines before and after stay quoted in their own quotes. Top-level
        blocks have nothing to be lifted out of and stay in place.

        Returns:
            The top-level path of the lifted paragraph
        """
        path = _as_path(path)
        self.get(path)
        if path.depth == 1:
            return path

        i, j = path[0], path[1]
        quote = self.children[i]
        before, paragraph, after = quote.children[:j], quote.children[j], quote.children[j + 1:]
        replacement: list[Block] = []
        if before:
            replacement.append(Quote(before))
        replacement.append(paragraph)
        if after:
            replacement.append(Quote(after))
        self.children[i:i + 1] = replacement
        return IndexPath([i + 1 if before else i])

    # =========================================================================
    # Internals
    # =========================================================================

    def _container(self, path: IndexPath) -> list:
        """The child list holding the node at path."""
        if path.depth == 1:
            return self.children
        return self.children[path[0]].children

    def _remove_paragraph(self, path: IndexPath) -> None:
        if path.depth == 1:
            del self.children[path[0]]
            return
        quote = self.children[path[0]]
        del quote.children[path[1]]
        if not quote.children:
            del self.children[path[0]]

    def _detach(self, path: IndexPath) -> Block:
        block = self.get(path)
        if isinstance(block, Paragraph):
            self._remove_paragraph(path)
        else:
            del self.children[path[0]]
        return block

    # =========================================================================
    # Serialization
    # =========================================================================

    def copy(self) -> Document:
        return Document([block.copy() for block in self.children])

    def model_dump(self) -> dict[str, Any]:
        return {"children": [block.model_dump() for block in self.children]}

    @classmethod
    def model_load(cls, data: dict[str, Any]) -> Document:
        return cls([load_block(block) for block in data.get("children", [])])

    # =========================================================================
    # pydantic support
    # =========================================================================

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(cls._serialize),
        )

    @staticmethod
    def _validate(v: Any) -> Document:
        if isinstance(v, Document):
            return v
        if isinstance(v, dict):
            return Document.model_load(v)
        raise ValueError(f"Invalid document: {v!r}")

    @staticmethod
    def _serialize(v: Document) -> dict[str, Any]:
        return v.model_dump()

    # =========================================================================
    # Debug
    # =========================================================================

    def debug_tree(self) -> str:
        lines = ["Document("]
        for i, block in enumerate(self.children):
            if isinstance(block, Quote):
                lines.append(f"  [{i}] Quote(")
                for j, child in enumerate(block.children):
                    lines.append(f"    [{i}.{j}] {child!r}")
                lines.append("  )")
            else:
                lines.append(f"  [{i}] {block!r}")
        lines.append(")")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Document(blocks={len(self.children)})"


def _as_path(path: IndexPath | list[int] | tuple[int, ...]) -> IndexPath:
    if isinstance(path, IndexPath):
        return path
    return IndexPath(path)
