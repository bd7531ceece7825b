"""Transient state of an incremental history search."""

from __future__ import annotations

import enum

from pi.readline.history import HistoryStore

NO_MATCHES = "(no matches)"


class SearchDirection(enum.Enum):
    REVERSE = "reverse"
    FORWARD = "forward"


class IncrementalSearch:
    """Pattern plus a cursor into the live list of matches (newest first).

    Typing or deleting pattern characters refilters and puts the cursor
    back on the newest match. ``older``/``newer`` move the cursor without
    touching the pattern.
    """

    def __init__(
        self,
        history: HistoryStore,
        direction: SearchDirection = SearchDirection.REVERSE,
    ) -> None:
        self._history = history
        self.direction = direction
        self.pattern: str = ""
        self.index: int = 0
        self._matches: list[str] = history.search("")

    @property
    def matches(self) -> list[str]:
        return list(self._matches)

    @property
    def current(self) -> str | None:
        if 0 <= self.index < len(self._matches):
            return self._matches[self.index]
        return None

    def _refilter(self) -> None:
        self.index = 0
        self._matches = self._history.search(self.pattern)

    def append(self, text: str) -> None:
        self.pattern += text
        self._refilter()

    def backspace(self) -> bool:
        if not self.pattern:
            return False
        self.pattern = self.pattern[:-1]
        self._refilter()
        return True

    def older(self) -> bool:
        self.direction = SearchDirection.REVERSE
        if self.index < len(self._matches) - 1:
            self.index += 1
            return True
        return False

    def newer(self) -> bool:
        self.direction = SearchDirection.FORWARD
        if self.index > 0:
            self.index -= 1
            return True
        return False

    @property
    def prompt(self) -> str:
        return f"({self.direction.value}-i-search)`{self.pattern}': "

    @property
    def display_text(self) -> str:
        current = self.current
        return NO_MATCHES if current is None else current
