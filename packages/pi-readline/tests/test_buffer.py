"""Tests for pi.readline.buffer — line buffer editing operations."""

from __future__ import annotations

import pytest

from pi.readline.buffer import (
    DEFAULT_DELIMITERS,
    LineBuffer,
    WordDeleteMode,
    WordTransform,
)
from pi.readline.clipboard import Clipboard


def assert_cursor_in_bounds(buf: LineBuffer) -> None:
    assert 0 <= buf.cursor <= len(buf.text)


# ---------------------------------------------------------------------------
# Insert / delete
# ---------------------------------------------------------------------------


class TestInsertDelete:
    def test_insert_at_position(self) -> None:
        buf = LineBuffer("helo")
        buf.insert("l", 2)
        assert buf.text == "hello"

    def test_insert_clamps_position(self) -> None:
        buf = LineBuffer("ab")
        buf.insert("x", 99)
        buf.insert("y", -5)
        assert buf.text == "yabx"

    def test_insert_at_cursor_advances(self) -> None:
        buf = LineBuffer()
        buf.insert_at_cursor("hi")
        assert buf.text == "hi"
        assert buf.cursor == 2

    def test_delete_out_of_range_is_noop(self) -> None:
        buf = LineBuffer("abc")
        buf.delete(3)
        buf.delete(-1)
        assert buf.text == "abc"

    def test_delete_clamps_cursor(self) -> None:
        buf = LineBuffer("abc")
        buf.delete(2)
        assert buf.text == "ab"
        assert buf.cursor == 2

    def test_backspace_and_forward_delete(self) -> None:
        buf = LineBuffer("abc")
        buf.cursor = 1
        assert buf.delete_backward()
        assert (buf.text, buf.cursor) == ("bc", 0)
        assert not buf.delete_backward()
        assert buf.delete_forward()
        assert (buf.text, buf.cursor) == ("c", 0)

    def test_cursor_invariant_holds_through_mixed_edits(self) -> None:
        buf = LineBuffer()
        ops = [
            lambda: buf.insert_at_cursor("hello world"),
            lambda: setattr(buf, "cursor", 100),
            lambda: buf.delete_backward(),
            lambda: setattr(buf, "cursor", -3),
            lambda: buf.delete_forward(),
            lambda: buf.delete(50),
            lambda: buf.insert("!", 1000),
            lambda: buf.cut(3, 99),
            lambda: buf.paste(-4),
            lambda: buf.cut_to_end(),
            lambda: buf.transpose(),
        ]
        for op in ops:
            op()
            assert_cursor_in_bounds(buf)

    def test_set_text_places_cursor(self) -> None:
        buf = LineBuffer()
        buf.set_text("abcdef")
        assert buf.cursor == 6
        buf.set_text("abc", cursor=10)
        assert buf.cursor == 3

    def test_reset(self) -> None:
        buf = LineBuffer("abc")
        buf.reset()
        assert (buf.text, buf.cursor) == ("", 0)


# ---------------------------------------------------------------------------
# Word motion
# ---------------------------------------------------------------------------


class TestWordMotion:
    def test_default_delimiters(self) -> None:
        buf = LineBuffer()
        for ch in " .,-/_":
            assert buf.is_delimiter(ch)
        assert not buf.is_delimiter("a")
        assert "\\" in DEFAULT_DELIMITERS

    def test_word_start(self) -> None:
        buf = LineBuffer("foo bar.baz")
        assert buf.move_to_word_start(11) == 8
        assert buf.move_to_word_start(8) == 4
        assert buf.move_to_word_start(4) == 0

    def test_word_end(self) -> None:
        buf = LineBuffer("foo bar.baz")
        assert buf.move_to_word_end(0) == 3
        assert buf.move_to_word_end(3) == 7
        assert buf.move_to_word_end(7) == 11

    def test_idempotent_at_boundaries(self) -> None:
        buf = LineBuffer("foo bar")
        assert buf.move_to_word_start(0) == 0
        assert buf.move_to_word_start(buf.move_to_word_start(0)) == 0
        end = len(buf.text)
        assert buf.move_to_word_end(end) == end
        assert buf.move_to_word_end(buf.move_to_word_end(end)) == end

    def test_positions_are_clamped(self) -> None:
        buf = LineBuffer("foo")
        assert buf.move_to_word_start(50) == 0
        assert buf.move_to_word_end(-5) == 3

    def test_custom_delimiters(self) -> None:
        buf = LineBuffer("a-b c")
        buf.set_delimiters(" ")
        assert buf.move_to_word_start(5) == 4
        assert buf.move_to_word_start(3) == 0


# ---------------------------------------------------------------------------
# Transforms
# ---------------------------------------------------------------------------


class TestTransformWord:
    @pytest.mark.parametrize(
        "transform,expected",
        [
            (WordTransform.UPPER, "HELLO world"),
            (WordTransform.LOWER, "hello world"),
            (WordTransform.CAPITALIZE, "Hello world"),
        ],
    )
    def test_transforms(self, transform: WordTransform, expected: str) -> None:
        buf = LineBuffer("hELLo world")
        end = buf.transform_word(0, transform)
        assert buf.text == expected
        assert end == 5

    def test_skips_leading_delimiters(self) -> None:
        buf = LineBuffer("foo  bar")
        end = buf.transform_word(3, WordTransform.UPPER)
        assert buf.text == "foo  BAR"
        assert end == 8

    def test_at_end_is_noop(self) -> None:
        buf = LineBuffer("foo ")
        assert buf.transform_word(4, WordTransform.UPPER) == 4
        assert buf.text == "foo "


# ---------------------------------------------------------------------------
# Cut / paste
# ---------------------------------------------------------------------------


class TestCutPaste:
    def test_cut_then_paste_restores(self) -> None:
        buf = LineBuffer("hello world")
        removed = buf.cut(2, 5)
        assert removed == "llo"
        assert buf.text == "he world"
        assert buf.cursor == 2
        end = buf.paste(2)
        assert buf.text == "hello world"
        assert end == 5

    def test_cut_clamps_range(self) -> None:
        buf = LineBuffer("abc")
        assert buf.cut(-3, 10) == "abc"
        assert buf.text == ""

    def test_inverted_range_is_noop(self) -> None:
        buf = LineBuffer("abc")
        assert buf.cut(2, 1) == ""
        assert buf.text == "abc"

    def test_paste_empty_clipboard_is_noop(self) -> None:
        buf = LineBuffer("abc")
        assert buf.paste(1) == 1
        assert buf.text == "abc"

    def test_paste_is_repeatable(self) -> None:
        buf = LineBuffer("ab")
        buf.cut(0, 1)
        buf.paste(0)
        buf.paste(0)
        assert buf.text == "aab"

    def test_shared_clipboard(self) -> None:
        clipboard = Clipboard()
        first = LineBuffer("copy me", clipboard=clipboard)
        first.cut(0, 4)
        second = LineBuffer("", clipboard=clipboard)
        second.paste(0)
        assert second.text == "copy"

    def test_cut_to_end_and_start(self) -> None:
        buf = LineBuffer("hello world")
        buf.cursor = 5
        assert buf.cut_to_end() == " world"
        assert buf.cut_to_start() == "hello"
        assert buf.text == ""
        assert buf.cursor == 0

    def test_cut_line(self) -> None:
        buf = LineBuffer("whole line")
        buf.cursor = 3
        assert buf.cut_line() == "whole line"
        assert (buf.text, buf.cursor) == ("", 0)
        assert buf.clipboard.peek() == "whole line"

    def test_cut_word_backward_word_mode(self) -> None:
        buf = LineBuffer("cd /usr/local")
        assert buf.cut_word_backward(WordDeleteMode.WORD) == "local"
        assert buf.text == "cd /usr/"

    def test_cut_word_backward_space_mode(self) -> None:
        buf = LineBuffer("cd /usr/local")
        assert buf.cut_word_backward(WordDeleteMode.SPACE) == "/usr/local"
        assert buf.text == "cd "

    def test_cut_word_backward_at_start(self) -> None:
        buf = LineBuffer("abc")
        buf.cursor = 0
        assert buf.cut_word_backward() == ""

    def test_cut_word_forward(self) -> None:
        buf = LineBuffer("one two")
        buf.cursor = 3
        assert buf.cut_word_forward() == " two"
        assert (buf.text, buf.cursor) == ("one", 3)


# ---------------------------------------------------------------------------
# Transpose
# ---------------------------------------------------------------------------


class TestTranspose:
    def test_swaps_around_cursor(self) -> None:
        buf = LineBuffer("abcd")
        buf.cursor = 2
        assert buf.transpose()
        assert (buf.text, buf.cursor) == ("acbd", 3)

    def test_at_end_swaps_last_two(self) -> None:
        buf = LineBuffer("abcd")
        assert buf.transpose()
        assert (buf.text, buf.cursor) == ("abdc", 4)

    def test_at_start_is_noop(self) -> None:
        buf = LineBuffer("ab")
        buf.cursor = 0
        assert not buf.transpose()
        assert buf.text == "ab"

    def test_short_text_is_noop(self) -> None:
        assert not LineBuffer("a").transpose()
