"""Line history with de-duplication, navigation and substring search.

Entries are kept oldest first. ``position`` ranges over ``[0, len]``; the
value ``len`` means the user is editing live input rather than recalling an
entry, and the live text is parked in a side slot while browsing so that
coming back down restores it exactly.

Persistence is delegated to a ``HistoryPersistence`` collaborator.
``FileHistory`` stores one entry per line, oldest first, without escaping.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterator, Protocol, Sequence

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 256
DEFAULT_SEARCH_LIMIT = 40


# ---------------------------------------------------------------------------
# Persistence collaborators
# ---------------------------------------------------------------------------


class HistoryPersistence(Protocol):
    def load(self) -> list[str]: ...

    def save(self, lines: Sequence[str]) -> bool: ...


class FileHistory:
    """Plain-text history file: one entry per line, oldest first."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"FileHistory({str(self.path)!r})"

    def load(self) -> list[str]:
        if not self.path.exists():
            return []
        with self.path.open(encoding="utf-8") as f:
            return [line.rstrip("\r\n") for line in f if line.rstrip("\r\n")]

    def save(self, lines: Sequence[str]) -> bool:
        with self.path.open("w", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")
        return True


class CallbackHistory:
    """Adapts caller-supplied load/save functions."""

    def __init__(
        self,
        load: Callable[[], Sequence[str]] | None = None,
        save: Callable[[Sequence[str]], bool] | None = None,
    ) -> None:
        self._load = load
        self._save = save

    def load(self) -> list[str]:
        if self._load is None:
            return []
        return list(self._load())

    def save(self, lines: Sequence[str]) -> bool:
        if self._save is None:
            return False
        return bool(self._save(lines))


# ---------------------------------------------------------------------------
# HistoryStore
# ---------------------------------------------------------------------------


class HistoryStore:
    """Ordered, duplicate-free list of past lines with a browsing position."""

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        *,
        search_limit: int = DEFAULT_SEARCH_LIMIT,
        case_sensitive: bool = True,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries
        self.search_limit = search_limit
        self.case_sensitive = case_sensitive
        self._entries: list[str] = []
        self._position: int = 0
        self._live: str = ""

    # -- inspection ----------------------------------------------------------

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def position(self) -> int:
        return self._position

    @property
    def at_live(self) -> bool:
        return self._position >= len(self._entries)

    @property
    def live_input(self) -> str:
        return self._live

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @max_entries.setter
    def max_entries(self, value: int) -> None:
        if value < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = value
        self._evict()
        self.reset_position()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def index_of(self, line: str) -> int | None:
        try:
            return self._entries.index(line)
        except ValueError:
            return None

    # -- mutation ------------------------------------------------------------

    def add(self, line: str) -> None:
        """Append *line*, dropping any earlier copy and the oldest overflow."""
        if not line:
            return
        self._append(line)
        self.reset_position()

    def _append(self, line: str) -> None:
        if line in self._entries:
            self._entries.remove(line)
        self._entries.append(line)
        self._evict()

    def _evict(self) -> None:
        overflow = len(self._entries) - self._max_entries
        if overflow > 0:
            del self._entries[:overflow]

    def clear(self) -> None:
        self._entries = []
        self._position = 0
        self._live = ""

    def reset_position(self) -> None:
        """Stop browsing: the position returns to the live sentinel."""
        self._position = len(self._entries)
        self._live = ""

    # -- navigation ----------------------------------------------------------

    def previous(self, current: str) -> str | None:
        """Step to the next older entry; ``None`` when already at the oldest.

        *current* is the buffer text, saved as live input when leaving it.
        """
        if self._position <= 0 or not self._entries:
            return None
        if self.at_live:
            self._live = current
        self._position -= 1
        return self._entries[self._position]

    def next(self, current: str) -> str | None:
        """Step to the next newer entry, or back to the saved live input."""
        if self.at_live:
            return None
        self._position += 1
        if self.at_live:
            return self._live
        return self._entries[self._position]

    def go_to(self, index: int, current: str) -> str | None:
        """Jump to entry *index* (used after an accepted search)."""
        if not 0 <= index < len(self._entries):
            return None
        if self.at_live:
            self._live = current
        self._position = index
        return self._entries[index]

    # -- search --------------------------------------------------------------

    def matches(self, entry: str, pattern: str) -> bool:
        if self.case_sensitive:
            return pattern in entry
        return pattern.lower() in entry.lower()

    def search(self, pattern: str, limit: int | None = None) -> list[str]:
        """Entries containing *pattern*, newest first, at most *limit*."""
        limit = self.search_limit if limit is None else limit
        results: list[str] = []
        if limit <= 0:
            return results
        for entry in reversed(self._entries):
            if self.matches(entry, pattern):
                results.append(entry)
                if len(results) >= limit:
                    break
        return results

    # -- persistence ---------------------------------------------------------

    def load(self, persistence: HistoryPersistence) -> bool:
        """Replace the entries with those from *persistence*.

        Returns ``False`` if loading failed; the current entries are kept.
        """
        try:
            lines = persistence.load()
        except Exception:
            logger.warning("Failed to load history from %r", persistence, exc_info=True)
            return False
        self._entries = []
        for line in lines:
            if line:
                self._append(line)
        self.reset_position()
        return True

    def save(self, persistence: HistoryPersistence) -> bool:
        try:
            return bool(persistence.save(list(self._entries)))
        except Exception:
            logger.warning("Failed to save history to %r", persistence, exc_info=True)
            return False
