"""Terminal text utilities: ANSI stripping and prompt width measurement."""

from __future__ import annotations

import re

import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Regex patterns for ANSI / OSC sequences
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(
    r"\x1b\[[0-9;?]*[A-Za-z]"       # CSI
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"  # OSC
)


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from *text*."""
    return _STRIP_RE.sub("", text)


# ---------------------------------------------------------------------------
# visible_width
# ---------------------------------------------------------------------------

def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    Used for prompts, which may carry color codes and non-ASCII glyphs.
    The edit buffer itself is laid out one column per character.
    """
    if not text:
        return 0

    stripped = strip_ansi(text)
    if not stripped:
        return 0

    # Fast ASCII path: all codepoints in 0x20..0x7E
    if all(0x20 <= ord(ch) <= 0x7E for ch in stripped):
        return len(stripped)

    width = _wcwidth.wcswidth(stripped)
    if width >= 0:
        return width

    # wcswidth reports -1 when a control character is present
    return sum(max(_wcwidth.wcwidth(ch), 0) for ch in stripped)


# ---------------------------------------------------------------------------
# Character classification
# ---------------------------------------------------------------------------

def is_whitespace_char(char: str) -> bool:
    """Return ``True`` if *char* is a whitespace character."""
    return char in (" ", "\t", "\n", "\r", "\f", "\v")
