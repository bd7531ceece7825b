"""Exceptions raised by the line editor."""

from __future__ import annotations


class ReadlineError(Exception):
    """Base class for line editor errors."""


class InputClosed(ReadlineError, EOFError):
    """The input byte stream reached end of file."""
