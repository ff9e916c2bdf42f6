"""Tests for the formatter registry and formatting commands."""
import pytest
from chatcomposer.config import ComposerConfig
from chatcomposer.document import Position
from chatcomposer.editor import Editor, FormatterMeta, ManualScheduler, Modifiers, Selection
from chatcomposer.editor.formats import BlockquoteFormatter, BoldFormatter, DelimiterFormatter


def make_editor(text: str = "") -> Editor:
    return Editor(text, config=ComposerConfig(), scheduler=ManualScheduler())


class TestFormatterRegistry:
    """Tests for FormatterMeta lookups."""

    def test_lookup_by_name(self):
        assert FormatterMeta.get_formatter("bold") is BoldFormatter
        assert FormatterMeta.get_formatter("BOLD") is BoldFormatter
        assert FormatterMeta.get_formatter("block-quote") is BlockquoteFormatter

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            FormatterMeta.get_formatter("underline")

    def test_all_marks_registered(self):
        formats = FormatterMeta.list_formats()
        for name in ("bold", "italic", "strikethrough", "code", "spoiler", "blockquote"):
            assert name in formats

    def test_subclass_registers_itself(self):
        class ShoutFormatter(DelimiterFormatter):
            formats = ["test-shout"]

        assert FormatterMeta.get_formatter("test-shout") is ShoutFormatter


class TestDelimiterToggle:
    """Tests for wrapping and unwrapping inline delimiters."""

    def test_wrap_selection(self):
        editor = make_editor("say word now")
        editor.select(Position([0], 4), Position([0], 8))
        editor.apply_format("bold")
        assert editor.text == "say **word** now"
        assert editor.selection == Selection(Position([0], 4), Position([0], 12))

    def test_toggle_twice_restores_text(self):
        editor = make_editor("word")
        editor.select(Position([0], 0), Position([0], 4))
        editor.apply_format("italic")
        assert editor.text == "*word*"
        editor.apply_format("italic")
        assert editor.text == "word"
        assert editor.selection == Selection(Position([0], 0), Position([0], 4))

    def test_collapsed_cursor_gets_empty_pair(self):
        editor = make_editor("x")
        editor.apply_format("spoiler")
        assert editor.text == "x||||"
        assert editor.selection.focus == Position([0], 3)
        editor.insert_text("s")
        assert editor.text == "x||s||"

    def test_backward_selection_keeps_direction(self):
        editor = make_editor("word")
        editor.select(Position([0], 4), Position([0], 0))
        editor.apply_format("code")
        assert editor.text == "`word`"
        assert editor.selection.is_backward

    def test_wrap_across_paragraphs(self):
        editor = make_editor("ab\ncd")
        editor.select(Position([0], 1), Position([1], 1))
        editor.apply_format("strikethrough")
        assert editor.text == "a~~b\nc~~d"
        assert editor.selection.end == Position([1], 3)

    def test_ctrl_b_and_ctrl_i(self):
        editor = make_editor("w")
        editor.select(Position([0], 0), Position([0], 1))
        editor.handle_keydown("b", Modifiers(ctrl=True))
        editor.handle_keydown("i", Modifiers(meta=True))
        assert editor.text == "***w***"

    def test_italic_toggle_inside_bold(self):
        editor = make_editor("***w***")
        editor.select(Position([0], 0), Position([0], 7))
        editor.apply_format("italic")
        assert editor.text == "**w**"
        editor.apply_format("italic")
        assert editor.text == "***w***"

    def test_format_is_undoable(self):
        editor = make_editor("w")
        editor.select(Position([0], 0), Position([0], 1))
        editor.apply_format("bold")
        editor.undo()
        assert editor.text == "w"


class TestBlockquoteFormat:
    """Tests for quoting and unquoting selected paragraphs."""

    def test_wraps_selected_paragraphs_into_one_quote(self):
        editor = make_editor("a\nb\nc")
        editor.select(Position([0], 0), Position([1], 1))
        editor.apply_format("blockquote")
        assert editor.text == "> a\n> b\nc"
        assert len(editor.document.children) == 2
        assert editor.selection == Selection(Position([0, 0], 0), Position([0, 1], 1))

    def test_unquotes_when_all_quoted(self):
        editor = make_editor("> a\n> b")
        editor.select(Position([0, 0], 0), Position([0, 1], 1))
        editor.apply_format("blockquote")
        assert editor.text == "a\nb"

    def test_mixed_selection_quotes_everything(self):
        editor = make_editor("> a\nb")
        editor.select(Position([0, 0], 0), Position([1], 1))
        editor.apply_format("quote")
        assert editor.text == "> a\n> b"
        assert len(editor.document.children) == 1

    def test_cursor_only_quotes_its_line(self):
        editor = make_editor("a\nb")
        editor.apply_format("blockquote")
        assert editor.text == "a\n> b"
        assert editor.selection.focus == Position([1, 0], 1)
