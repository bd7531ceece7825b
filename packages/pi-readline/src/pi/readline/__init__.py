"""pi-readline: line editing for terminal prompts."""

# Line buffer and clipboard
from pi.readline.buffer import (
    DEFAULT_DELIMITERS,
    LineBuffer,
    WordDeleteMode,
    WordTransform,
)
from pi.readline.clipboard import Clipboard

# Completion
from pi.readline.completion import (
    CompletionCandidate,
    CompletionEngine,
    CompletionKind,
    CompletionResult,
    format_listing,
)

# Configuration
from pi.readline.config import (
    BASIC_FEATURES,
    ESSENTIAL_FEATURES,
    FULL_FEATURES,
    STANDARD_FEATURES,
    Features,
    ReadlineConfig,
)

# Display
from pi.readline.display import DisplayMetrics, Renderer

# Errors
from pi.readline.errors import InputClosed, ReadlineError

# History
from pi.readline.history import (
    CallbackHistory,
    FileHistory,
    HistoryPersistence,
    HistoryStore,
)

# Keybindings
from pi.readline.keybindings import (
    DEFAULT_KEYBINDINGS,
    KeybindingsManager,
    ReadlineAction,
)

# Keyboard input decoding
from pi.readline.keys import (
    ByteSource,
    BytesSource,
    Key,
    KeyDecoder,
    KeyEvent,
    KeyId,
    decode_keys,
    matches_key,
)

# Incremental search
from pi.readline.search import IncrementalSearch, SearchDirection

# Session
from pi.readline.session import Outcome, ReadlineSession

# Styling
from pi.readline.style import make_style

# Terminal
from pi.readline.terminal import FdByteSource, ProcessTerminal, Terminal

# Utilities
from pi.readline.utils import strip_ansi, visible_width

__all__ = [
    # Line buffer and clipboard
    "DEFAULT_DELIMITERS",
    "LineBuffer",
    "WordDeleteMode",
    "WordTransform",
    "Clipboard",
    # Completion
    "CompletionCandidate",
    "CompletionEngine",
    "CompletionKind",
    "CompletionResult",
    "format_listing",
    # Configuration
    "BASIC_FEATURES",
    "ESSENTIAL_FEATURES",
    "FULL_FEATURES",
    "STANDARD_FEATURES",
    "Features",
    "ReadlineConfig",
    # Display
    "DisplayMetrics",
    "Renderer",
    # Errors
    "InputClosed",
    "ReadlineError",
    # History
    "CallbackHistory",
    "FileHistory",
    "HistoryPersistence",
    "HistoryStore",
    # Keybindings
    "DEFAULT_KEYBINDINGS",
    "KeybindingsManager",
    "ReadlineAction",
    # Keyboard input decoding
    "ByteSource",
    "BytesSource",
    "Key",
    "KeyDecoder",
    "KeyEvent",
    "KeyId",
    "decode_keys",
    "matches_key",
    # Incremental search
    "IncrementalSearch",
    "SearchDirection",
    # Session
    "Outcome",
    "ReadlineSession",
    # Styling
    "make_style",
    # Terminal
    "FdByteSource",
    "ProcessTerminal",
    "Terminal",
    # Utilities
    "strip_ansi",
    "visible_width",
]
