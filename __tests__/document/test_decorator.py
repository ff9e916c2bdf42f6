"""Tests for decorate()."""
import pytest
from chatcomposer.document import Decoration, Mark, UnsupportedDelimiterNesting, decorate


def spans(text: str) -> list:
    return [(d.mark, text[d.start:d.end]) for d in decorate(text)]


class TestDecorateGrammar:
    """Tests for each delimiter rule."""

    def test_bold_range_excludes_delimiters(self):
        assert decorate("a **b** c") == [Decoration(Mark.BOLD, 4, 5)]

    @pytest.mark.parametrize("text,mark,content", [
        ("~~gone~~", Mark.STRIKETHROUGH, "gone"),
        ("**loud**", Mark.BOLD, "loud"),
        ("*soft*", Mark.ITALIC, "soft"),
        ("`x = 1`", Mark.CODE, "x = 1"),
        ("||secret||", Mark.SPOILER, "secret"),
    ])
    def test_each_mark(self, text, mark, content):
        assert spans(text) == [(mark, content)]

    def test_multiple_tokens_ordered_by_start(self):
        assert spans("*a* and **b** and `c`") == [
            (Mark.ITALIC, "a"),
            (Mark.BOLD, "b"),
            (Mark.CODE, "c"),
        ]

    def test_token_bounds(self):
        decoration = decorate("x ||y|| z")[0]
        assert (decoration.token_start, decoration.token_end) == (2, 7)
        assert decoration.length == 1
        assert decoration.model_dump() == {"mark": "spoiler", "start": 4, "end": 5}

    @pytest.mark.parametrize("text", ["", "plain", "**open", "a * b", "``", "|single|"])
    def test_unmatched_delimiters_are_plain(self, text):
        assert decorate(text) == []


class TestDecoratePriority:
    """Tests for overlap resolution."""

    def test_bold_wins_over_italic(self):
        assert spans("**b**") == [(Mark.BOLD, "b")]

    def test_strikethrough_consumes_nested_bold(self):
        assert spans("~~a **b** c~~") == [(Mark.STRIKETHROUGH, "a **b** c")]

    def test_lower_priority_outside_consumed_span_survives(self):
        assert spans("~~a~~ `b`") == [(Mark.STRIKETHROUGH, "a"), (Mark.CODE, "b")]

    def test_overlap_dropped_silently(self):
        assert spans("**a `b** c`") == [(Mark.BOLD, "a `b")]

    def test_strict_mode_reports_suppressed_match(self):
        with pytest.raises(UnsupportedDelimiterNesting) as exc:
            decorate("**a `b** c`", strict=True)
        assert exc.value.suppressed == [(Mark.CODE, 4, 11)]

    def test_strict_mode_passes_clean_text(self):
        assert decorate("**a** `b`", strict=True) == decorate("**a** `b`")
