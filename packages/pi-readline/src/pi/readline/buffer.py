"""Editable line buffer with cursor, word motion and clipboard operations.

All positions are character offsets into the text. Out-of-range positions
are clamped or ignored instead of raising, since the display and the buffer
can briefly disagree while keys are arriving quickly.
"""

from __future__ import annotations

import enum

from pi.readline.clipboard import Clipboard

DEFAULT_DELIMITERS = " !\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~"


class WordTransform(enum.Enum):
    UPPER = "upper"
    LOWER = "lower"
    CAPITALIZE = "capitalize"

    def apply(self, word: str) -> str:
        if self is WordTransform.UPPER:
            return word.upper()
        if self is WordTransform.LOWER:
            return word.lower()
        return word[:1].upper() + word[1:].lower()


class WordDeleteMode(enum.Enum):
    """How Ctrl-W finds the start of the text to cut.

    ``WORD`` cuts back to the start of the previous word (Emacs style,
    honours the delimiter set). ``SPACE`` cuts back to the previous
    whitespace (traditional Unix ``werase``).
    """

    WORD = "word"
    SPACE = "space"


class LineBuffer:
    """The in-progress text of one ``readline`` call."""

    def __init__(
        self,
        text: str = "",
        *,
        delimiters: str = DEFAULT_DELIMITERS,
        clipboard: Clipboard | None = None,
    ) -> None:
        self._text: str = text
        self._cursor: int = len(text)
        self.delimiters: frozenset[str] = frozenset(delimiters)
        self.clipboard: Clipboard = clipboard if clipboard is not None else Clipboard()

    # -- state ---------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def cursor(self) -> int:
        return self._cursor

    @cursor.setter
    def cursor(self, value: int) -> None:
        self._cursor = self._clamp(value)

    def __len__(self) -> int:
        return len(self._text)

    def __str__(self) -> str:
        return self._text

    def set_text(self, text: str, cursor: int | None = None) -> None:
        """Replace the whole text; the cursor defaults to the end."""
        self._text = text
        self._cursor = len(text) if cursor is None else self._clamp(cursor)

    def reset(self) -> None:
        self._text = ""
        self._cursor = 0

    def set_delimiters(self, delimiters: str) -> None:
        self.delimiters = frozenset(delimiters)

    def is_delimiter(self, char: str) -> bool:
        return char in self.delimiters

    def _clamp(self, pos: int) -> int:
        return max(0, min(pos, len(self._text)))

    # -- primitive edits -----------------------------------------------------

    def insert(self, char: str, pos: int) -> None:
        """Insert *char* (any string) at *pos*. The cursor is not moved."""
        pos = self._clamp(pos)
        self._text = self._text[:pos] + char + self._text[pos:]

    def insert_at_cursor(self, text: str) -> None:
        self.insert(text, self._cursor)
        self._cursor += len(text)

    def delete(self, pos: int) -> None:
        """Remove the character at *pos*; no-op when *pos* is out of range."""
        if 0 <= pos < len(self._text):
            self._text = self._text[:pos] + self._text[pos + 1 :]
            self._cursor = self._clamp(self._cursor)

    def delete_backward(self) -> bool:
        """Backspace: remove the character before the cursor."""
        if self._cursor == 0:
            return False
        self.delete(self._cursor - 1)
        self._cursor -= 1
        return True

    def delete_forward(self) -> bool:
        """Remove the character under the cursor."""
        if self._cursor >= len(self._text):
            return False
        self.delete(self._cursor)
        return True

    # -- word motion ---------------------------------------------------------

    def move_to_word_start(self, pos: int) -> int:
        """Offset of the start of the word at or before *pos*.

        Delimiters directly before *pos* are skipped first, then the word.
        """
        pos = self._clamp(pos)
        while pos > 0 and self._text[pos - 1] in self.delimiters:
            pos -= 1
        while pos > 0 and self._text[pos - 1] not in self.delimiters:
            pos -= 1
        return pos

    def move_to_word_end(self, pos: int) -> int:
        """Offset just past the end of the word at or after *pos*.

        Delimiters directly after *pos* are skipped first, then the word.
        """
        pos = self._clamp(pos)
        length = len(self._text)
        while pos < length and self._text[pos] in self.delimiters:
            pos += 1
        while pos < length and self._text[pos] not in self.delimiters:
            pos += 1
        return pos

    def transform_word(self, pos: int, transform: WordTransform) -> int:
        """Apply *transform* to the word at or after *pos*.

        Returns the offset of the end of the transformed word.
        """
        start = self._clamp(pos)
        length = len(self._text)
        while start < length and self._text[start] in self.delimiters:
            start += 1
        end = start
        while end < length and self._text[end] not in self.delimiters:
            end += 1
        if end > start:
            word = transform.apply(self._text[start:end])
            self._text = self._text[:start] + word + self._text[end:]
        return end

    # -- clipboard -----------------------------------------------------------

    def cut(self, start: int, end: int) -> str:
        """Remove ``text[start:end]`` into the clipboard; cursor moves to *start*.

        Ranges are clamped to the text; an inverted range is a no-op.
        """
        start = self._clamp(start)
        end = self._clamp(end)
        if start > end:
            return ""
        removed = self._text[start:end]
        self.clipboard.set(removed)
        self._text = self._text[:start] + self._text[end:]
        self._cursor = start
        return removed

    def paste(self, pos: int) -> int:
        """Insert the clipboard at *pos* and return the offset after it."""
        content = self.clipboard.peek()
        pos = self._clamp(pos)
        if not content:
            return pos
        self.insert(content, pos)
        return pos + len(content)

    def cut_to_end(self) -> str:
        if self._cursor >= len(self._text):
            return ""
        return self.cut(self._cursor, len(self._text))

    def cut_to_start(self) -> str:
        if self._cursor == 0:
            return ""
        return self.cut(0, self._cursor)

    def cut_line(self) -> str:
        if not self._text:
            return ""
        return self.cut(0, len(self._text))

    def cut_word_backward(self, mode: WordDeleteMode = WordDeleteMode.WORD) -> str:
        if self._cursor == 0:
            return ""
        if mode is WordDeleteMode.WORD:
            start = self.move_to_word_start(self._cursor)
        else:
            start = self._cursor
            while start > 0 and self._text[start - 1].isspace():
                start -= 1
            while start > 0 and not self._text[start - 1].isspace():
                start -= 1
        return self.cut(start, self._cursor)

    def cut_word_forward(self) -> str:
        if self._cursor >= len(self._text):
            return ""
        cursor = self._cursor
        return self.cut(cursor, self.move_to_word_end(cursor))

    # -- misc ----------------------------------------------------------------

    def transpose(self) -> bool:
        """Swap the character before the cursor with the one under it.

        At the end of the text the last two characters are swapped instead.
        The cursor moves forward by one unless it is already at the end.
        """
        length = len(self._text)
        if length < 2 or self._cursor == 0:
            return False
        pos = self._cursor if self._cursor < length else length - 1
        chars = list(self._text)
        chars[pos - 1], chars[pos] = chars[pos], chars[pos - 1]
        self._text = "".join(chars)
        self._cursor = self._clamp(pos + 1)
        return True
