"""Readline keybindings manager."""

from __future__ import annotations

from typing import Literal, Union

from pi.readline.keys import KeyEvent, KeyId, normalize_key_id

ReadlineAction = Literal[
    # Line control
    "submit",
    "interrupt",
    "eof",
    # Cursor movement
    "cursorLeft",
    "cursorRight",
    "cursorLineStart",
    "cursorLineEnd",
    "cursorWordLeft",
    "cursorWordRight",
    # Deletion
    "deleteCharBackward",
    "deleteCharForward",
    "deleteWordBackward",
    "deleteWordForward",
    "cutToLineEnd",
    "cutToLineStart",
    "cutLine",
    # Clipboard
    "paste",
    # Word transforms
    "upcaseWord",
    "downcaseWord",
    "capitalizeWord",
    "transposeChars",
    # History
    "historyUp",
    "historyDown",
    "historyPrevious",
    "historyNext",
    "searchBackward",
    "searchForward",
    "searchCancel",
    # Screen / completion
    "clearScreen",
    "complete",
]

KeybindingsConfig = dict[ReadlineAction, Union[KeyId, list[KeyId]]]

DEFAULT_KEYBINDINGS: KeybindingsConfig = {
    # Line control
    "submit": "enter",
    "interrupt": "ctrl+c",
    "eof": "ctrl+d",
    # Cursor movement
    "cursorLeft": ["left", "ctrl+b"],
    "cursorRight": ["right", "ctrl+f"],
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd": ["end", "ctrl+e"],
    "cursorWordLeft": ["alt+b", "alt+left"],
    "cursorWordRight": ["alt+f", "alt+right"],
    # Deletion
    "deleteCharBackward": "backspace",
    "deleteCharForward": "delete",
    "deleteWordBackward": ["ctrl+w", "alt+backspace"],
    "deleteWordForward": ["alt+d", "alt+delete"],
    "cutToLineEnd": "ctrl+k",
    "cutToLineStart": "ctrl+u",
    "cutLine": "ctrl+x",
    # Clipboard
    "paste": ["ctrl+y", "ctrl+v", "insert"],
    # Word transforms
    "upcaseWord": "alt+u",
    "downcaseWord": "alt+l",
    "capitalizeWord": "alt+c",
    "transposeChars": "ctrl+t",
    # History
    "historyUp": "up",
    "historyDown": "down",
    "historyPrevious": "ctrl+p",
    "historyNext": "ctrl+n",
    "searchBackward": "ctrl+r",
    "searchForward": "ctrl+s",
    "searchCancel": ["ctrl+g", "escape"],
    # Screen / completion
    "clearScreen": "ctrl+l",
    "complete": "tab",
}


class KeybindingsManager:
    """Maps decoded keys to readline actions.

    User configuration replaces the key list of each action it names;
    other actions keep their defaults.
    """

    def __init__(self, config: KeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[ReadlineAction, list[KeyId]] = {}
        self._key_to_action: dict[KeyId, ReadlineAction] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: KeybindingsConfig) -> None:
        self._action_to_keys.clear()
        self._key_to_action.clear()

        # Start with defaults
        for action, keys in DEFAULT_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = [normalize_key_id(k) for k in key_array]

        # Override with user config
        for action, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = [normalize_key_id(k) for k in key_array]

        # Earlier actions win when a key is bound twice
        for action, key_array in self._action_to_keys.items():
            for key in key_array:
                self._key_to_action.setdefault(key, action)

    def matches(self, event: KeyEvent, action: ReadlineAction) -> bool:
        """Check if a key is bound to a specific action."""
        return event.id in self._action_to_keys.get(action, [])

    def action_for(self, event: KeyEvent) -> ReadlineAction | None:
        """Return the action bound to *event*, if any."""
        return self._key_to_action.get(event.id)

    def get_keys(self, action: ReadlineAction) -> list[KeyId]:
        """Get keys bound to an action."""
        return list(self._action_to_keys.get(action, []))

    def set_config(self, config: KeybindingsConfig) -> None:
        """Update configuration."""
        self._build_maps(config)
