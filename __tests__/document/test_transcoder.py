"""Tests for serialize / deserialize."""
import logging

import pytest
from chatcomposer.document import (
    Document,
    IndexPath,
    Inline,
    MalformedInput,
    Mark,
    Paragraph,
    Position,
    Quote,
    deserialize,
    parse_document,
    serialize,
)
from chatcomposer.document.transcoder import serialize_inline


def p(*runs) -> Paragraph:
    return Paragraph([run if isinstance(run, Inline) else Inline(run) for run in runs])


class TestSerialize:
    """Tests for tree -> text."""

    def test_paragraphs_one_per_line(self):
        assert serialize(Document([p("hello"), p("world")])) == "hello\nworld"

    def test_quote_lines_are_prefixed(self):
        doc = Document([p("intro"), Quote([p("a"), p("b")]), p("outro")])
        assert serialize(doc) == "intro\n> a\n> b\noutro"

    def test_marks_become_delimiters(self):
        doc = Document([p("a ", Inline("b", {Mark.BOLD}), " ", Inline("c", {Mark.SPOILER}))])
        assert serialize(doc) == "a **b** ||c||"

    def test_nesting_order_code_outermost(self):
        inline = Inline("x", {Mark.ITALIC, Mark.CODE, Mark.BOLD})
        assert serialize_inline(inline) == "`***x***`"

    def test_strikethrough_inside_code(self):
        assert serialize_inline(Inline("x", {Mark.CODE, Mark.STRIKETHROUGH})) == "`~~x~~`"

    def test_empty_marked_inline_writes_nothing(self):
        assert serialize_inline(Inline("", {Mark.BOLD})) == ""

    def test_default_document_is_empty_string(self):
        assert serialize(Document.default()) == ""

    def test_blank_paragraphs_dropped(self):
        doc = Document([p("a"), p(""), p("   "), p("b")])
        assert serialize(doc) == "a\nb"

    def test_empty_quote_serializes_to_nothing(self):
        assert serialize(Document([Quote([p(""), p(" ")])])) == ""

    def test_blank_quote_lines_dropped(self):
        doc = Document([Quote([p("a"), p(""), p("b")])])
        assert serialize(doc) == "> a\n> b"

    def test_trailing_whitespace_trimmed(self):
        assert serialize(Document([p("hi  ")])) == "hi"


class TestDeserialize:
    """Tests for text -> tree."""

    def test_lines_become_paragraphs(self):
        doc = deserialize("one\ntwo")
        assert [block.text for block in doc.children] == ["one", "two"]

    def test_quote_run_becomes_one_quote(self):
        doc = deserialize("x\n> a\n> b\ny")
        assert isinstance(doc.children[1], Quote)
        assert doc.children[1].text == "a\nb"
        assert len(doc.children) == 3

    def test_quote_runs_split_by_blank_line_join(self):
        doc = deserialize("> a\n\n> b")
        assert len(doc.children) == 1
        assert doc.children[0].text == "a\nb"

    def test_gt_without_space_is_plain_text(self):
        doc = deserialize(">not a quote")
        assert isinstance(doc.children[0], Paragraph)

    def test_delimiters_stay_plain_text(self):
        doc = deserialize("**b**")
        inline = doc.children[0].children[0]
        assert inline.text == "**b**"
        assert inline.marks == frozenset()

    @pytest.mark.parametrize("text", ["", None, "\n\n", "   "])
    def test_empty_input_gives_default(self, text):
        assert deserialize(text).is_default

    def test_non_text_fails_closed(self, caplog):
        with caplog.at_level(logging.WARNING):
            doc = deserialize(42)
        assert doc.is_default
        assert "Falling back" in caplog.text

    def test_strict_parser_raises(self):
        with pytest.raises(MalformedInput):
            parse_document(["not", "text"])


class TestRoundTrip:
    """Tests for the serialize/deserialize contract."""

    @pytest.mark.parametrize("text", [
        "hello",
        "a\nb\nc",
        "> quoted\n> twice",
        "intro\n> q\noutro",
        "a **b** *c* ~~d~~ `e` ||f||",
        "> **bold** in quote",
    ])
    def test_canonical_text_survives(self, text):
        assert serialize(deserialize(text)) == text

    def test_reserialization_is_idempotent(self):
        doc = Document([
            p("a", Inline("b", {Mark.BOLD})),
            p(""),
            Quote([p("q"), p(""), p("  ")]),
            Quote([p("r")]),
            p("tail  "),
        ])
        once = serialize(doc)
        assert serialize(deserialize(once)) == once

    def test_documents_built_by_primitives_reserialize_stably(self):
        doc = Document.default()
        steps = [
            lambda: doc.insert_text(Position([0], 0), "helloworld"),
            lambda: doc.split_block(Position([0], 5)),
            lambda: doc.wrap_block(IndexPath([1])),
            lambda: doc.split_block(Position([1, 0], 5)),
            lambda: doc.insert_text(Position([1, 1], 0), "two"),
            lambda: doc.split_block(Position([1, 1], 3)),
            lambda: doc.insert_text(Position([1, 2], 0), "end"),
            lambda: doc.lift_block(IndexPath([1, 1])),
            lambda: doc.delete_range(Position([0], 4), Position([0], 5)),
        ]
        for step in steps:
            step()
            once = serialize(doc)
            assert serialize(deserialize(once)) == once
        assert serialize(doc) == "hell\n> world\ntwo\n> end"

    def test_marks_are_not_restored(self):
        doc = Document([p(Inline("b", {Mark.BOLD}))])
        restored = deserialize(serialize(doc))
        assert restored.children[0].children[0].marks == frozenset()
        assert restored.children[0].text == "**b**"
