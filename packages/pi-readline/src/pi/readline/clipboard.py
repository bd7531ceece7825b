"""Single-slot clipboard for cut/paste operations."""

from __future__ import annotations


class Clipboard:
    """Holds the most recently cut or copied text.

    Writes replace the previous content. Reading never consumes it, so the
    same text can be pasted any number of times.
    """

    def __init__(self) -> None:
        self._text: str = ""

    def set(self, text: str) -> None:
        """Replace the clipboard content with *text*."""
        self._text = text

    def peek(self) -> str:
        """Get the current content without modifying it."""
        return self._text

    def clear(self) -> None:
        self._text = ""

    @property
    def length(self) -> int:
        return len(self._text)

    def __bool__(self) -> bool:
        return bool(self._text)
