"""Terminal abstraction for raw-mode stdin/stdout interaction.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal``
implementation that toggles raw mode around a read, reports the window
size and writes escape sequences to stdout. ``FdByteSource`` reads raw
bytes from a file descriptor for the key decoder.
"""

from __future__ import annotations

import contextlib
import logging
import os
import select
import sys
import termios
import tty
from typing import Iterator, Protocol

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

CLEAR_SCREEN = "\x1b[2J\x1b[H"
CLEAR_TO_EOL = "\x1b[K"
CURSOR_UP_FMT = "\x1b[{}A"
CURSOR_DOWN_FMT = "\x1b[{}B"
CURSOR_RIGHT_FMT = "\x1b[{}C"
CURSOR_LEFT_FMT = "\x1b[{}D"

DEFAULT_COLUMNS = 80
DEFAULT_ROWS = 24


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for terminal output and mode switching."""

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...

    def write(self, data: str) -> None: ...

    def raw_mode(self) -> contextlib.AbstractContextManager[None]: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal backed by the process's stdin/stdout.

    Raw mode is managed with :mod:`tty` and :mod:`termios`. When stdin is not
    a terminal (piped input), ``raw_mode`` leaves the descriptor untouched.
    """

    def __init__(self, input_fd: int | None = None, output=None) -> None:
        self._input_fd = sys.stdin.fileno() if input_fd is None else input_fd
        self._output = output if output is not None else sys.stdout

    # -- properties ---------------------------------------------------------

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._output.fileno()).columns
        except (ValueError, OSError):
            return DEFAULT_COLUMNS

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(self._output.fileno()).lines
        except (ValueError, OSError):
            return DEFAULT_ROWS

    # -- raw mode -----------------------------------------------------------

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Put the input descriptor in raw mode for the duration of the block.

        The previous attributes are restored on every exit path.
        """
        fd = self._input_fd
        try:
            original = termios.tcgetattr(fd)
        except termios.error:
            logger.debug("fd %d is not a terminal, skipping raw mode", fd)
            yield
            return

        already_raw = _is_raw_mode(original)
        if not already_raw:
            tty.setraw(fd)
        try:
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, original)

    # -- write --------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write directly to stdout, bypassing buffering."""
        try:
            self._output.write(data)
            self._output.flush()
        except OSError:
            logger.debug("terminal write failed", exc_info=True)


# ---------------------------------------------------------------------------
# Byte source
# ---------------------------------------------------------------------------


class FdByteSource:
    """Reads single bytes from a file descriptor."""

    def __init__(self, fd: int | None = None) -> None:
        self._fd = sys.stdin.fileno() if fd is None else fd

    def read_byte(self) -> int | None:
        while True:
            try:
                data = os.read(self._fd, 1)
            except InterruptedError:
                continue
            except OSError:
                logger.debug("read from fd %d failed", self._fd, exc_info=True)
                return None
            return data[0] if data else None

    def poll(self, timeout: float) -> bool:
        try:
            ready, _, _ = select.select([self._fd], [], [], max(timeout, 0))
        except (OSError, ValueError):
            return False
        return bool(ready)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _is_raw_mode(attrs: list) -> bool:
    """Heuristic check for whether terminal attributes are already raw.

    Raw mode is characterised by the absence of ICANON and ECHO in the
    local-mode flags.
    """
    lflag = attrs[3]  # c_lflag
    return not bool(lflag & (termios.ICANON | termios.ECHO))
