"""Foreground color and text style helpers for prompts and listings.

Styles are plain ``Callable[[str], str]`` values that wrap text in SGR
codes, the same shape pi themes use for colors.
"""

from __future__ import annotations

from typing import Callable, Iterable

StyleFn = Callable[[str], str]

RESET = "\x1b[0m"

COLORS: dict[str, int] = {
    "black": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
    "default": 39,
}

STYLES: dict[str, int] = {
    "bright": 1,
    "dim": 2,
    "italic": 3,
    "underscore": 4,
    "blink": 5,
    "reverse": 7,
    "hidden": 8,
    "strikethrough": 9,
}


def sgr(color: str | None = None, styles: Iterable[str] = ()) -> str:
    """Build the SGR escape that selects *color* and *styles*.

    Raises ``ValueError`` for unknown names. Returns ``""`` when nothing is set.
    """
    codes: list[int] = []
    if color is not None:
        try:
            codes.append(COLORS[color.lower()])
        except KeyError:
            raise ValueError(f"unknown color: {color!r}") from None
    for name in styles:
        try:
            codes.append(STYLES[name.lower()])
        except KeyError:
            raise ValueError(f"unknown style: {name!r}") from None
    if not codes:
        return ""
    return "\x1b[" + ";".join(str(c) for c in codes) + "m"


def make_style(color: str | None = None, styles: Iterable[str] = ()) -> StyleFn:
    """Return a function that wraps text in the given color and styles."""
    prefix = sgr(color, tuple(styles))
    if not prefix:
        return _identity

    def _apply(text: str) -> str:
        return f"{prefix}{text}{RESET}" if text else text

    return _apply


def _identity(text: str) -> str:
    return text
