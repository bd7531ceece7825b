"""Session configuration and editing feature presets."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from pi.readline.buffer import DEFAULT_DELIMITERS, WordDeleteMode
from pi.readline.history import DEFAULT_MAX_ENTRIES, DEFAULT_SEARCH_LIMIT
from pi.readline.keybindings import KeybindingsConfig
from pi.readline.style import StyleFn


# --- Feature groups ---


@dataclass(frozen=True)
class Features:
    """Optional key groups. Core editing keys are always available."""

    word_movement: bool = False  # Alt-B, Alt-F, Alt+arrows
    text_transform: bool = False  # Alt-U, Alt-L, Alt-C
    advanced_cut_paste: bool = False  # Ctrl-W, Alt-D, Ctrl-X
    multiline_nav: bool = False  # Up/Down walk wrapped lines before history
    history_search: bool = False  # Ctrl-R, Ctrl-S
    advanced_edit: bool = False  # Ctrl-T


BASIC_FEATURES = Features()

ESSENTIAL_FEATURES = Features(word_movement=True, multiline_nav=True)

STANDARD_FEATURES = Features(
    word_movement=True,
    text_transform=True,
    advanced_cut_paste=True,
    multiline_nav=True,
)

FULL_FEATURES = Features(
    word_movement=True,
    text_transform=True,
    advanced_cut_paste=True,
    multiline_nav=True,
    history_search=True,
    advanced_edit=True,
)


# --- Session configuration ---


@dataclass
class ReadlineConfig:
    """Settings for a ``ReadlineSession``."""

    history_enabled: bool = True
    history_search_enabled: bool = False
    max_history: int = DEFAULT_MAX_ENTRIES
    search_limit: int = DEFAULT_SEARCH_LIMIT
    case_sensitive_search: bool = True
    delimiters: str = DEFAULT_DELIMITERS
    word_delete_mode: WordDeleteMode = WordDeleteMode.WORD
    incremental_render: bool = True
    escape_timeout: float = 0.05
    features: Features = STANDARD_FEATURES
    prompt_style: StyleFn | None = None
    candidate_word_style: StyleFn | None = None
    candidate_help_style: StyleFn | None = None
    keybindings: KeybindingsConfig = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.max_history < 1:
            raise ValueError(f"max_history must be at least 1, got {self.max_history}")
        if self.search_limit < 0:
            raise ValueError(f"search_limit must not be negative, got {self.search_limit}")
        if self.escape_timeout < 0:
            raise ValueError(f"escape_timeout must not be negative, got {self.escape_timeout}")

    @property
    def search_enabled(self) -> bool:
        """Incremental search needs history plus the flag or the feature group."""
        return self.history_enabled and (self.history_search_enabled or self.features.history_search)

    def with_features(self, features: Features) -> ReadlineConfig:
        return replace(self, features=features)
