"""Keyboard input decoding for the line editor.

Turns a raw, unbuffered stream of terminal bytes into ``KeyEvent`` values.
Handles legacy VT100/xterm escape sequences (CSI and SS3), the ESC-prefix
convention for Alt+letter, control characters and UTF-8 text.

Key identifiers use the same format as the keybindings table:
e.g. ``"a"``, ``"ctrl+a"``, ``"alt+b"``, ``"pageUp"``, ``"f1"``.
"""

from __future__ import annotations

import enum
import logging
from collections import deque
from dataclasses import dataclass
from typing import Protocol

from pi.readline.errors import InputClosed

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str

# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    # Special keys
    escape = "escape"
    enter = "enter"
    tab = "tab"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    # Function keys
    f1 = "f1"
    f2 = "f2"
    f3 = "f3"
    f4 = "f4"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"

    @staticmethod
    def alt(key: str) -> str:
        return f"alt+{key}"


_KEY_ALIASES: dict[str, str] = {
    "esc": Key.escape,
    "return": Key.enter,
    "pageup": Key.page_up,
    "pagedown": Key.page_down,
}

# ---------------------------------------------------------------------------
# Byte constants and sequence tables
# ---------------------------------------------------------------------------

ESC = 0x1B
_CR = 0x0D
_LF = 0x0A
_TAB = 0x09
_BS = 0x08
_DEL = 0x7F

# CSI final byte -> key (ESC [ X)
CSI_FINAL_KEYS: dict[str, str] = {
    "A": Key.up,
    "B": Key.down,
    "C": Key.right,
    "D": Key.left,
    "H": Key.home,
    "F": Key.end,
}

# CSI numeric parameter terminated by "~" (ESC [ n ~)
CSI_TILDE_KEYS: dict[int, str] = {
    1: Key.home,
    2: Key.insert,
    3: Key.delete,
    4: Key.end,
    5: Key.page_up,
    6: Key.page_down,
    7: Key.home,
    8: Key.end,
    11: Key.f1,
    12: Key.f2,
    13: Key.f3,
    14: Key.f4,
}

# SS3 final byte -> key (ESC O X)
SS3_KEYS: dict[str, str] = {
    "P": Key.f1,
    "Q": Key.f2,
    "R": Key.f3,
    "S": Key.f4,
    "H": Key.home,
    "F": Key.end,
    "A": Key.up,
    "B": Key.down,
    "C": Key.right,
    "D": Key.left,
}

# xterm modifier parameters folded into the Alt variant: 3 = Alt, 5 = Ctrl
ALT_MODIFIER_PARAMS = frozenset({"3", "5"})

# Control bytes outside ctrl+a..ctrl+z, in caret notation
_CARET_KEYS: dict[int, str] = {
    0x00: "ctrl+space",
    0x1C: "ctrl+\\",
    0x1D: "ctrl+]",
    0x1E: "ctrl+^",
    0x1F: "ctrl+_",
}

# ---------------------------------------------------------------------------
# KeyEvent
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyEvent:
    """A single decoded keystroke.

    ``key`` is the base key id; ``alt`` marks the Alt-modified variant.
    ``char`` holds the literal text for printable keys.
    """

    key: KeyId
    alt: bool = False
    char: str | None = None

    @property
    def id(self) -> KeyId:
        return f"alt+{self.key}" if self.alt else self.key

    @property
    def is_printable(self) -> bool:
        return self.char is not None and not self.alt

    def __str__(self) -> str:
        return self.id


def normalize_key_id(key_id: KeyId) -> KeyId:
    """Canonicalize a key id written by hand (``"Alt+B"`` -> ``"alt+b"``)."""
    if len(key_id) == 1:
        return key_id
    parts = key_id.split("+")
    # A trailing "+" means the plus key itself
    if key_id.endswith("+") and len(key_id) > 1:
        parts = parts[:-2] + ["+"]
    base = parts[-1]
    modifiers = [p.lower() for p in parts[:-1]]
    if len(base) > 1:
        base = _KEY_ALIASES.get(base.lower(), base)
        if base not in (Key.page_up, Key.page_down):
            base = base.lower()
    elif modifiers:
        base = base.lower()
    prefix = ""
    if "ctrl" in modifiers:
        prefix += "ctrl+"
    if "alt" in modifiers or "meta" in modifiers:
        prefix = "alt+" + prefix
    return prefix + base


def matches_key(event: KeyEvent, key_id: KeyId) -> bool:
    """Check whether a decoded key corresponds to ``key_id``."""
    return event.id == normalize_key_id(key_id)


# ---------------------------------------------------------------------------
# Byte sources
# ---------------------------------------------------------------------------


class ByteSource(Protocol):
    """Blocking source of raw terminal bytes."""

    def read_byte(self) -> int | None:
        """Return the next byte, or ``None`` at end of stream."""
        ...

    def poll(self, timeout: float) -> bool:
        """Return ``True`` if a byte can be read within *timeout* seconds."""
        ...


class BytesSource:
    """In-memory byte source for scripted input."""

    def __init__(self, data: bytes | str = b"") -> None:
        self._data: deque[int] = deque()
        self.feed(data)

    def feed(self, data: bytes | str) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._data.extend(data)

    def read_byte(self) -> int | None:
        return self._data.popleft() if self._data else None

    def poll(self, timeout: float) -> bool:
        return bool(self._data)

    @property
    def remaining(self) -> int:
        return len(self._data)


# ---------------------------------------------------------------------------
# Decoder
# ---------------------------------------------------------------------------


class DecoderState(enum.Enum):
    GROUND = "ground"
    SAW_ESCAPE = "saw_escape"
    SAW_CSI = "saw_csi"
    SAW_CSI_DIGITS = "saw_csi_digits"
    SAW_SS3 = "saw_ss3"


def _utf8_length(lead: int) -> int:
    if 0xC0 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF7:
        return 4
    return 1


def _is_alt_modified(params: list[str]) -> bool:
    return len(params) >= 2 and params[1] in ALT_MODIFIER_PARAMS


class KeyDecoder:
    """Pulls bytes from a ``ByteSource`` and yields one ``KeyEvent`` per call.

    Escape sequences are parsed with a small state machine and a bounded
    lookahead. Unknown sequences are swallowed and reported as ``escape`` so
    the following reads start on a clean byte boundary.
    """

    def __init__(
        self,
        source: ByteSource,
        *,
        escape_timeout: float = 0.05,
        max_sequence: int = 8,
    ) -> None:
        self._source = source
        self._escape_timeout = escape_timeout
        self._max_sequence = max(3, max_sequence)
        self._pending: deque[int] = deque()
        self.state = DecoderState.GROUND

    # -- public -------------------------------------------------------------

    def next(self) -> KeyEvent:
        """Block until a complete key is available and return it.

        Raises ``InputClosed`` if the stream ends before a key starts.
        """
        byte = self._read()
        if byte is None:
            raise InputClosed("input stream closed")
        if byte == ESC:
            try:
                return self._decode_escape()
            finally:
                self.state = DecoderState.GROUND
        return self._decode_ground(byte)

    def __iter__(self):
        while True:
            try:
                yield self.next()
            except InputClosed:
                return

    # -- private: byte access -----------------------------------------------

    def _read(self) -> int | None:
        if self._pending:
            return self._pending.popleft()
        return self._source.read_byte()

    def _read_continuation(self) -> int | None:
        """Read a byte that belongs to a sequence, waiting only briefly."""
        if self._pending:
            return self._pending.popleft()
        if not self._source.poll(self._escape_timeout):
            return None
        return self._source.read_byte()

    def _push_back(self, byte: int) -> None:
        self._pending.appendleft(byte)

    # -- private: ground state ----------------------------------------------

    def _decode_ground(self, byte: int) -> KeyEvent:
        if byte in (_CR, _LF):
            return KeyEvent(Key.enter)
        if byte == _TAB:
            return KeyEvent(Key.tab)
        if byte in (_DEL, _BS):
            return KeyEvent(Key.backspace)
        if 1 <= byte <= 26:
            return KeyEvent(Key.ctrl(chr(byte + 0x60)))
        if 32 <= byte <= 126:
            ch = chr(byte)
            return KeyEvent(ch, char=ch)
        if byte >= 0x80:
            return self._decode_utf8(byte)
        return KeyEvent(_CARET_KEYS.get(byte, "ctrl+space"))

    def _decode_utf8(self, lead: int) -> KeyEvent:
        raw = bytearray([lead])
        for _ in range(_utf8_length(lead) - 1):
            byte = self._read_continuation()
            if byte is None:
                break
            if not 0x80 <= byte <= 0xBF:
                self._push_back(byte)
                break
            raw.append(byte)
        ch = raw.decode("utf-8", errors="replace")[:1]
        return KeyEvent(ch, char=ch)

    # -- private: escape sequences ------------------------------------------

    def _decode_escape(self) -> KeyEvent:  # noqa: C901
        self.state = DecoderState.SAW_ESCAPE
        consumed = bytearray([ESC])
        params = ""

        while len(consumed) < self._max_sequence:
            byte = self._read_continuation()
            if byte is None:
                if self.state is DecoderState.SAW_ESCAPE:
                    return KeyEvent(Key.escape)
                break
            ch = chr(byte)

            if self.state is DecoderState.SAW_ESCAPE:
                consumed.append(byte)
                if ch == "[":
                    self.state = DecoderState.SAW_CSI
                    continue
                if ch == "O":
                    self.state = DecoderState.SAW_SS3
                    continue
                if "a" <= ch <= "z":
                    return KeyEvent(ch, alt=True)
                if "A" <= ch <= "Z":
                    return KeyEvent(ch.lower(), alt=True)
                if byte in (_DEL, _BS):
                    return KeyEvent(Key.backspace, alt=True)
                if byte in (_CR, _LF):
                    return KeyEvent(Key.enter, alt=True)
                # Not a sequence: emit escape, decode the byte on its own
                self._push_back(byte)
                return KeyEvent(Key.escape)

            if self.state is DecoderState.SAW_SS3:
                consumed.append(byte)
                key = SS3_KEYS.get(ch)
                if key is not None:
                    return KeyEvent(key)
                break

            if self.state is DecoderState.SAW_CSI:
                consumed.append(byte)
                key = CSI_FINAL_KEYS.get(ch)
                if key is not None:
                    return KeyEvent(key)
                if 0x20 <= byte <= 0x3F:
                    params = ch
                    self.state = DecoderState.SAW_CSI_DIGITS
                    continue
                break

            # SAW_CSI_DIGITS
            if 0x20 <= byte <= 0x3F:
                consumed.append(byte)
                params += ch
                continue
            if 0x40 <= byte <= 0x7E:
                consumed.append(byte)
                event = _finish_csi(params, ch)
                if event is not None:
                    return event
                break
            # A control byte cannot continue a CSI sequence
            self._push_back(byte)
            break
        else:
            if self.state in (DecoderState.SAW_CSI, DecoderState.SAW_CSI_DIGITS):
                self._drain_csi(consumed)

        logger.debug("Discarding unknown escape sequence %r", bytes(consumed))
        return KeyEvent(Key.escape)

    def _drain_csi(self, consumed: bytearray) -> None:
        """Swallow the rest of an overlong CSI sequence up to its final byte."""
        while True:
            byte = self._read_continuation()
            if byte is None:
                return
            if 0x20 <= byte <= 0x3F:
                consumed.append(byte)
                continue
            if 0x40 <= byte <= 0x7E:
                consumed.append(byte)
                return
            self._push_back(byte)
            return


def _finish_csi(params: str, final: str) -> KeyEvent | None:
    parts = params.split(";")
    if final == "~":
        try:
            number = int(parts[0])
        except ValueError:
            return None
        key = CSI_TILDE_KEYS.get(number)
        if key is None:
            return None
        return KeyEvent(key, alt=_is_alt_modified(parts))

    key = CSI_FINAL_KEYS.get(final)
    if key is None and final in "PQRS":
        key = SS3_KEYS[final]
    if key is None:
        return None
    return KeyEvent(key, alt=_is_alt_modified(parts))


def decode_keys(data: bytes | str) -> list[KeyEvent]:
    """Decode a complete chunk of input into key events."""
    return list(KeyDecoder(BytesSource(data), escape_timeout=0))
