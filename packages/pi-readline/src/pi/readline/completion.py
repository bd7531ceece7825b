"""Bash-style double-Tab completion.

A first Tab completes when exactly one candidate matches the word before
the cursor. When several match, the first Tab only arms the engine; a
second Tab at the same spot lists them. Any other key disarms it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Iterable, Union

from pi.readline.buffer import LineBuffer
from pi.readline.utils import is_whitespace_char


@dataclass(frozen=True)
class CompletionCandidate:
    word: str
    help: str = ""


CandidateLike = Union[CompletionCandidate, tuple[str, str], str]
CompletionProvider = Callable[[str], Iterable[CandidateLike]]


def to_candidate(item: CandidateLike) -> CompletionCandidate:
    if isinstance(item, CompletionCandidate):
        return item
    if isinstance(item, str):
        return CompletionCandidate(item)
    word, help_text = item
    return CompletionCandidate(word, help_text or "")


class CompletionKind(enum.Enum):
    UNAVAILABLE = "unavailable"
    NONE = "none"
    INSERTED = "inserted"
    WAITING = "waiting"
    LISTED = "listed"


@dataclass
class CompletionResult:
    kind: CompletionKind
    matches: list[CompletionCandidate] = field(default_factory=list)
    inserted: str = ""


@dataclass
class CompletionState:
    waiting: bool = False
    last_prefix: str = ""
    last_cursor: int = -1
    last_matches: list[CompletionCandidate] = field(default_factory=list)


def current_word(text: str, cursor: int) -> str:
    """The token between the last whitespace before *cursor* and *cursor*."""
    cursor = max(0, min(cursor, len(text)))
    start = cursor
    while start > 0 and not is_whitespace_char(text[start - 1]):
        start -= 1
    return text[start:cursor]


class CompletionEngine:
    """Runs the double-Tab protocol against a candidate provider."""

    def __init__(self, provider: CompletionProvider | None = None) -> None:
        self.provider = provider
        self.state = CompletionState()

    @property
    def waiting(self) -> bool:
        return self.state.waiting

    def reset(self) -> None:
        self.state = CompletionState()

    def candidates(self, text: str, prefix: str) -> list[CompletionCandidate]:
        if self.provider is None:
            return []
        found = (to_candidate(item) for item in self.provider(text))
        return [c for c in found if c.word.startswith(prefix)]

    def complete(self, buffer: LineBuffer) -> CompletionResult:
        """Handle one Tab press against *buffer*."""
        if self.provider is None:
            self.reset()
            return CompletionResult(CompletionKind.UNAVAILABLE)

        prefix = current_word(buffer.text, buffer.cursor)
        matches = self.candidates(buffer.text, prefix)

        if len(matches) == 1:
            self.reset()
            suffix = matches[0].word[len(prefix) :] + " "
            buffer.insert_at_cursor(suffix)
            return CompletionResult(CompletionKind.INSERTED, matches, suffix)

        if not matches:
            self.reset()
            return CompletionResult(CompletionKind.NONE)

        state = self.state
        if state.waiting and state.last_prefix == prefix and state.last_cursor == buffer.cursor:
            self.reset()
            return CompletionResult(CompletionKind.LISTED, matches)

        self.state = CompletionState(
            waiting=True,
            last_prefix=prefix,
            last_cursor=buffer.cursor,
            last_matches=matches,
        )
        return CompletionResult(CompletionKind.WAITING, matches)


def format_listing(
    matches: Iterable[CompletionCandidate],
    *,
    word_style: Callable[[str], str] | None = None,
    help_style: Callable[[str], str] | None = None,
) -> list[str]:
    """One row per candidate: the word padded to a common width, then help."""
    items = list(matches)
    width = max((len(c.word) for c in items), default=0)
    rows: list[str] = []
    for c in items:
        word = word_style(c.word) if word_style else c.word
        if not c.help:
            rows.append(word)
            continue
        padding = " " * (width - len(c.word) + 2)
        help_text = help_style(c.help) if help_style else c.help
        rows.append(f"{word}{padding}{help_text}")
    return rows
