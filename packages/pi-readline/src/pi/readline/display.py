"""Screen refresh for the prompt and edit buffer.

The renderer keeps track of where it left the terminal cursor relative to
the start of the prompt (the anchor) and how much it drew last time, so a
repaint can move back, clear exactly the rows it used and draw again with
relative cursor motion only.

Layout model: the prompt's visible width plus one column per buffer
character, wrapped at the terminal width.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from pi.readline.terminal import (
    CLEAR_SCREEN,
    CLEAR_TO_EOL,
    CURSOR_DOWN_FMT,
    CURSOR_LEFT_FMT,
    CURSOR_RIGHT_FMT,
    CURSOR_UP_FMT,
    Terminal,
)
from pi.readline.utils import visible_width


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DisplayMetrics:
    """Maps buffer offsets to wrapped ``(line, column)`` screen coordinates.

    A ``columns`` value of zero or less means the width is unknown and is
    treated as unbounded: everything sits on line 0.
    """

    prompt_length: int
    columns: int

    @property
    def bounded(self) -> bool:
        return self.columns > 0

    def position(self, offset: int) -> tuple[int, int]:
        total = self.prompt_length + offset
        if not self.bounded:
            return 0, total
        return divmod(total, self.columns)

    def line_of(self, offset: int) -> int:
        return self.position(offset)[0]

    def line_count(self, buffer_length: int) -> int:
        """Number of wrapped lines the prompt and buffer occupy (at least 1)."""
        if not self.bounded:
            return 1
        total = self.prompt_length + buffer_length
        return max(1, -(-total // self.columns))

    def is_first_line(self, cursor: int) -> bool:
        return self.line_of(cursor) == 0

    def is_last_line(self, cursor: int, buffer_length: int) -> bool:
        return self.line_of(cursor) >= self.line_count(buffer_length) - 1

    def vertical_move(self, cursor: int, buffer_length: int, delta: int) -> int | None:
        """Offset one wrapped line above (``delta=-1``) or below (``+1``).

        Keeps the column, clamped to the buffer. Returns ``None`` when there
        is no such line.
        """
        if not self.bounded:
            return None
        line, column = self.position(cursor)
        target = line + delta
        if target < 0 or target >= self.line_count(buffer_length):
            return None
        offset = target * self.columns + column - self.prompt_length
        return max(0, min(offset, buffer_length))


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


class Renderer:
    """Draws ``prompt + text`` and keeps the terminal cursor in sync.

    Two strategies: ``refresh`` repaints everything from the anchor;
    ``append`` writes a single character typed at the end of the line.
    ``update`` picks ``append`` when ``incremental`` is on and it applies.
    """

    def __init__(self, terminal: Terminal, *, incremental: bool = True) -> None:
        self._terminal = terminal
        self.incremental = incremental
        self._cursor_row: int = 0
        self._last_total: int | None = None
        self._last_prompt: str = ""
        self._last_text: str = ""
        self._last_cursor: int = 0

    # -- geometry ------------------------------------------------------------

    def columns(self) -> int:
        try:
            columns = int(self._terminal.columns)
        except (OSError, TypeError, ValueError):
            return 0
        return max(columns, 0)

    def metrics(self, prompt: str) -> DisplayMetrics:
        return DisplayMetrics(visible_width(prompt), self.columns())

    @property
    def cursor_row(self) -> int:
        return self._cursor_row

    # -- lifecycle -----------------------------------------------------------

    def begin(self) -> None:
        """Forget previous output; the terminal cursor is the new anchor."""
        self._cursor_row = 0
        self._last_total = None
        self._last_prompt = ""
        self._last_text = ""
        self._last_cursor = 0

    def finish(self) -> None:
        """Move below the rendered input and start a new line."""
        if self._last_total is None:
            self._terminal.write("\r\n")
            self.begin()
            return
        columns = self.columns()
        out: list[str] = []
        if columns > 0:
            end_row, end_col = divmod(self._last_total, columns)
        else:
            end_row, end_col = 0, self._last_total
        down = end_row - self._cursor_row
        if down > 0:
            out.append(CURSOR_DOWN_FMT.format(down))
        if columns > 0 and end_col == 0 and self._last_total > 0:
            # Already dropped to a fresh row after a full last line
            out.append("\r")
        else:
            out.append("\r\n")
        self._terminal.write("".join(out))
        self.begin()

    def clear_screen(self) -> None:
        self._terminal.write(CLEAR_SCREEN)
        self.begin()

    def print_below(self, lines: Iterable[str]) -> None:
        """Print *lines* below the input; the next refresh starts fresh."""
        self.finish()
        self._terminal.write("".join(f"{line}\r\n" for line in lines))

    # -- drawing -------------------------------------------------------------

    def update(
        self,
        prompt: str,
        text: str,
        cursor: int,
        *,
        prompt_style: Callable[[str], str] | None = None,
    ) -> None:
        if self.incremental and self.append(prompt, text, cursor):
            return
        self.refresh(prompt, text, cursor, prompt_style=prompt_style)

    def append(self, prompt: str, text: str, cursor: int) -> bool:
        """Write only the last character of *text* if nothing else changed.

        Returns ``False`` (and writes nothing) when a full refresh is needed.
        """
        if self._last_total is None or prompt != self._last_prompt:
            return False
        if cursor != len(text) or self._last_cursor != len(self._last_text):
            return False
        if len(text) != len(self._last_text) + 1 or not text.startswith(self._last_text):
            return False
        columns = self.columns()
        total = self._last_total + 1
        if columns > 0 and total % columns == 0:
            # Landing on the right margin needs the wrap handling in refresh
            return False
        self._terminal.write(text[-1])
        self._last_total = total
        self._last_text = text
        self._last_cursor = cursor
        return True

    def refresh(
        self,
        prompt: str,
        text: str,
        cursor: int,
        *,
        prompt_style: Callable[[str], str] | None = None,
    ) -> None:
        """Repaint prompt and text from the anchor and place the cursor."""
        cursor = max(0, min(cursor, len(text)))
        metrics = self.metrics(prompt)
        out: list[str] = []

        # Back to the anchor
        out.append("\r")
        if self._cursor_row > 0:
            out.append(CURSOR_UP_FMT.format(self._cursor_row))

        # Clear the rows drawn last time
        old_rows = 1 if self._last_total is None else self._rows_for(self._last_total, metrics.columns)
        for row in range(old_rows):
            out.append(CLEAR_TO_EOL)
            if row < old_rows - 1:
                out.append(CURSOR_DOWN_FMT.format(1))
        if old_rows > 1:
            out.append(CURSOR_UP_FMT.format(old_rows - 1))

        # Draw
        out.append(prompt_style(prompt) if prompt_style else prompt)
        out.append(text)
        total = metrics.prompt_length + len(text)
        end_row, end_col = metrics.position(len(text))
        if metrics.bounded and total > 0 and end_col == 0:
            out.append("\r\n")

        # Place the cursor
        cur_row, cur_col = metrics.position(cursor)
        if (cur_row, cur_col) != (end_row, end_col):
            if cur_row == end_row:
                out.append(CURSOR_LEFT_FMT.format(end_col - cur_col))
            else:
                out.append(CURSOR_UP_FMT.format(end_row - cur_row))
                out.append("\r")
                if cur_col > 0:
                    out.append(CURSOR_RIGHT_FMT.format(cur_col))

        self._terminal.write("".join(out))

        self._cursor_row = cur_row
        self._last_total = total
        self._last_prompt = prompt
        self._last_text = text
        self._last_cursor = cursor

    @staticmethod
    def _rows_for(total: int, columns: int) -> int:
        # Counts the row the cursor drops to after a full last line
        if columns <= 0:
            return 1
        return total // columns + 1
