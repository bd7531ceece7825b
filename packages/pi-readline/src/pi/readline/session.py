"""Interactive line-reading session.

``ReadlineSession`` owns one line buffer, one history and one clipboard and
reads a line at a time from a byte source while echoing the edit to a
terminal. Each ``readline`` call runs inside ``terminal.raw_mode()``, so the
terminal is restored whichever way the call ends (accept, end of input,
interrupt or an unexpected error).
"""

from __future__ import annotations

import enum
import logging
import os
from typing import Callable, Sequence

from pi.readline.buffer import LineBuffer, WordTransform
from pi.readline.clipboard import Clipboard
from pi.readline.completion import (
    CompletionEngine,
    CompletionKind,
    CompletionProvider,
    format_listing,
)
from pi.readline.config import Features, ReadlineConfig
from pi.readline.display import Renderer
from pi.readline.errors import InputClosed
from pi.readline.history import (
    CallbackHistory,
    FileHistory,
    HistoryPersistence,
    HistoryStore,
)
from pi.readline.keybindings import KeybindingsManager, ReadlineAction
from pi.readline.keys import ByteSource, KeyDecoder, KeyEvent
from pi.readline.search import IncrementalSearch, SearchDirection
from pi.readline.style import StyleFn
from pi.readline.terminal import FdByteSource, ProcessTerminal, Terminal

logger = logging.getLogger(__name__)

CustomKeyCallback = Callable[[KeyEvent, str], bool]
HistoryLoadCallback = Callable[[], Sequence[str]]
HistorySaveCallback = Callable[[Sequence[str]], bool]


class Outcome(enum.Enum):
    ACCEPTED = "accepted"
    END_OF_INPUT = "end_of_input"


# Actions that only work when their feature group is switched on
_FEATURE_GATES: dict[ReadlineAction, str] = {
    "cursorWordLeft": "word_movement",
    "cursorWordRight": "word_movement",
    "deleteWordBackward": "advanced_cut_paste",
    "deleteWordForward": "advanced_cut_paste",
    "cutLine": "advanced_cut_paste",
    "upcaseWord": "text_transform",
    "downcaseWord": "text_transform",
    "capitalizeWord": "text_transform",
    "transposeChars": "advanced_edit",
}

_TRANSFORMS: dict[ReadlineAction, WordTransform] = {
    "upcaseWord": WordTransform.UPPER,
    "downcaseWord": WordTransform.LOWER,
    "capitalizeWord": WordTransform.CAPITALIZE,
}


class ReadlineSession:
    """Reads edited lines from a terminal, one ``readline`` call at a time."""

    def __init__(
        self,
        config: ReadlineConfig | None = None,
        *,
        terminal: Terminal | None = None,
        source: ByteSource | None = None,
        keybindings: KeybindingsManager | None = None,
    ) -> None:
        self.config = config if config is not None else ReadlineConfig()
        self.terminal: Terminal = terminal if terminal is not None else ProcessTerminal()
        self.keybindings = (
            keybindings if keybindings is not None else KeybindingsManager(self.config.keybindings)
        )
        self.clipboard = Clipboard()
        self.buffer = LineBuffer(delimiters=self.config.delimiters, clipboard=self.clipboard)
        self.history = HistoryStore(
            self.config.max_history,
            search_limit=self.config.search_limit,
            case_sensitive=self.config.case_sensitive_search,
        )
        self.completion = CompletionEngine()
        self.renderer = Renderer(self.terminal, incremental=self.config.incremental_render)
        self._decoder = KeyDecoder(
            source if source is not None else FdByteSource(),
            escape_timeout=self.config.escape_timeout,
        )
        self.prompt: str = ""
        self.prompt_style: StyleFn | None = self.config.prompt_style
        self.outcome: Outcome | None = None
        self._custom_key_callback: CustomKeyCallback | None = None
        self._history_load_callback: HistoryLoadCallback | None = None
        self._history_save_callback: HistorySaveCallback | None = None

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def readline(self, prompt: str = "") -> str:
        """Show *prompt* and return the line the user accepts.

        Returns ``""`` with ``outcome`` set to ``Outcome.END_OF_INPUT`` on
        Ctrl-D at an empty line or when the input stream ends. Ctrl-C raises
        ``KeyboardInterrupt`` after the terminal has been restored.
        """
        self.prompt = prompt
        self.buffer.reset()
        self.completion.reset()
        self.history.reset_position()
        self.outcome = None

        with self.terminal.raw_mode():
            self.renderer.begin()
            self._refresh()
            try:
                while True:
                    result = self._process(self._decoder.next())
                    if result is not None:
                        return result
            except InputClosed:
                logger.debug("Input closed while reading a line")
                return self._end_of_input()

    def _process(self, event: KeyEvent) -> str | None:
        """Handle one key in editing mode. Returns the line once it is done."""
        action = self.keybindings.action_for(event)
        if action != "complete":
            self.completion.reset()

        if self._custom_key_callback is not None and self._custom_key_callback(event, self.buffer.text):
            self._refresh()
            return None

        if action is not None and self._action_enabled(action):
            return self._dispatch(action)

        if event.is_printable:
            self.buffer.insert_at_cursor(event.char)
            self._edited()
            self._update()
        return None

    def _action_enabled(self, action: ReadlineAction) -> bool:
        if action in ("searchBackward", "searchForward"):
            return self.config.search_enabled
        if action == "searchCancel":
            return False
        gate = _FEATURE_GATES.get(action)
        return gate is None or getattr(self.features, gate)

    def _dispatch(self, action: ReadlineAction) -> str | None:  # noqa: C901
        buf = self.buffer

        # Line control
        if action == "submit":
            return self._accept()
        if action == "interrupt":
            self.renderer.finish()
            raise KeyboardInterrupt
        if action == "eof":
            if not buf.text:
                return self._end_of_input()
            if buf.delete_forward():
                self._edited()

        # Cursor movement
        elif action == "cursorLeft":
            buf.cursor -= 1
        elif action == "cursorRight":
            buf.cursor += 1
        elif action == "cursorLineStart":
            buf.cursor = 0
        elif action == "cursorLineEnd":
            buf.cursor = len(buf)
        elif action == "cursorWordLeft":
            buf.cursor = buf.move_to_word_start(buf.cursor)
        elif action == "cursorWordRight":
            buf.cursor = buf.move_to_word_end(buf.cursor)

        # Deletion and clipboard
        elif action == "deleteCharBackward":
            if buf.delete_backward():
                self._edited()
        elif action == "deleteCharForward":
            if buf.delete_forward():
                self._edited()
        elif action == "deleteWordBackward":
            self._cut(buf.cut_word_backward(self.config.word_delete_mode))
        elif action == "deleteWordForward":
            self._cut(buf.cut_word_forward())
        elif action == "cutToLineEnd":
            self._cut(buf.cut_to_end())
        elif action == "cutToLineStart":
            self._cut(buf.cut_to_start())
        elif action == "cutLine":
            self._cut(buf.cut_line())
        elif action == "paste":
            if self.clipboard:
                buf.cursor = buf.paste(buf.cursor)
                self._edited()

        # Word transforms
        elif action in _TRANSFORMS:
            buf.cursor = buf.transform_word(buf.cursor, _TRANSFORMS[action])
            self._edited()
        elif action == "transposeChars":
            if buf.transpose():
                self._edited()

        # History
        elif action == "historyUp":
            self._line_up()
        elif action == "historyDown":
            self._line_down()
        elif action == "historyPrevious":
            self._recall_previous()
        elif action == "historyNext":
            self._recall_next()
        elif action == "searchBackward":
            self._search(SearchDirection.REVERSE)
            return None
        elif action == "searchForward":
            self._search(SearchDirection.FORWARD)
            return None

        # Screen and completion
        elif action == "clearScreen":
            self.renderer.clear_screen()
        elif action == "complete":
            self._complete()

        self._update()
        return None

    # ------------------------------------------------------------------
    # Outcomes
    # ------------------------------------------------------------------

    def _accept(self) -> str:
        line = self.buffer.text
        self.renderer.finish()
        self.add_to_history(line)
        self.outcome = Outcome.ACCEPTED
        return line

    def _end_of_input(self) -> str:
        self.renderer.finish()
        self.buffer.reset()
        self.history.reset_position()
        self.outcome = Outcome.END_OF_INPUT
        return ""

    # ------------------------------------------------------------------
    # Editing helpers
    # ------------------------------------------------------------------

    def _edited(self) -> None:
        # An edited recall becomes the new live input
        if not self.history.at_live:
            self.history.reset_position()

    def _cut(self, removed: str) -> None:
        if removed:
            self._edited()

    def _update(self) -> None:
        self.renderer.update(
            self.prompt,
            self.buffer.text,
            self.buffer.cursor,
            prompt_style=self.prompt_style,
        )

    def _refresh(self) -> None:
        self.renderer.refresh(
            self.prompt,
            self.buffer.text,
            self.buffer.cursor,
            prompt_style=self.prompt_style,
        )

    @property
    def features(self) -> Features:
        return self.config.features

    # ------------------------------------------------------------------
    # History navigation
    # ------------------------------------------------------------------

    def _line_up(self) -> None:
        buf = self.buffer
        metrics = self.renderer.metrics(self.prompt)
        single_line = metrics.line_count(len(buf)) == 1
        if self.features.multiline_nav and not single_line and not metrics.is_first_line(buf.cursor):
            target = metrics.vertical_move(buf.cursor, len(buf), -1)
            if target is not None:
                buf.cursor = target
                return
        self._recall_previous()

    def _line_down(self) -> None:
        buf = self.buffer
        metrics = self.renderer.metrics(self.prompt)
        at_bottom = buf.cursor >= len(buf) or metrics.is_last_line(buf.cursor, len(buf))
        if self.features.multiline_nav and not at_bottom:
            target = metrics.vertical_move(buf.cursor, len(buf), 1)
            if target is not None:
                buf.cursor = target
                return
        self._recall_next()

    def _recall_previous(self) -> None:
        if not self.config.history_enabled:
            return
        line = self.history.previous(self.buffer.text)
        if line is not None:
            self.buffer.set_text(line)

    def _recall_next(self) -> None:
        if not self.config.history_enabled:
            return
        line = self.history.next(self.buffer.text)
        if line is not None:
            self.buffer.set_text(line)

    # ------------------------------------------------------------------
    # Incremental search
    # ------------------------------------------------------------------

    def _search(self, direction: SearchDirection) -> None:
        """Run the modal search loop until the match is accepted or cancelled.

        ``InputClosed`` propagates to ``readline``.
        """
        buf = self.buffer
        saved_text, saved_cursor = buf.text, buf.cursor
        search = IncrementalSearch(self.history, direction)
        self._draw_search(search)

        while True:
            event = self._decoder.next()
            action = self.keybindings.action_for(event)
            if action == "searchBackward":
                search.older()
            elif action == "searchForward":
                search.newer()
            elif action == "submit":
                match = search.current
                if match is not None:
                    index = self.history.index_of(match)
                    if index is not None:
                        self.history.go_to(index, saved_text)
                    buf.set_text(match)
                else:
                    buf.set_text(saved_text, saved_cursor)
                break
            elif action == "searchCancel":
                buf.set_text(saved_text, saved_cursor)
                break
            elif action == "deleteCharBackward":
                search.backspace()
            elif event.is_printable:
                search.append(event.char)
            else:
                continue
            self._draw_search(search)

        self._refresh()

    def _draw_search(self, search: IncrementalSearch) -> None:
        text = search.display_text
        self.renderer.refresh(search.prompt, text, len(text))

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def _complete(self) -> None:
        result = self.completion.complete(self.buffer)
        if result.kind is CompletionKind.INSERTED:
            self._edited()
        elif result.kind is CompletionKind.LISTED:
            self.renderer.print_below(
                format_listing(
                    result.matches,
                    word_style=self.config.candidate_word_style,
                    help_style=self.config.candidate_help_style,
                )
            )

    # ------------------------------------------------------------------
    # Registration and configuration API
    # ------------------------------------------------------------------

    def set_delimiters(self, delimiters: str) -> None:
        self.config.delimiters = delimiters
        self.buffer.set_delimiters(delimiters)

    def set_prompt_style(self, style: StyleFn | None) -> None:
        self.prompt_style = style

    def register_custom_key_callback(self, callback: CustomKeyCallback | None) -> None:
        """Install a hook that sees every key first; returning True consumes it."""
        self._custom_key_callback = callback

    def register_completion_callback(self, callback: CompletionProvider | None) -> None:
        self.completion.provider = callback
        self.completion.reset()

    def register_history_load_callback(self, callback: HistoryLoadCallback | None) -> None:
        self._history_load_callback = callback

    def register_history_save_callback(self, callback: HistorySaveCallback | None) -> None:
        self._history_save_callback = callback

    # ------------------------------------------------------------------
    # History API
    # ------------------------------------------------------------------

    def add_to_history(self, line: str) -> None:
        if self.config.history_enabled:
            self.history.add(line)

    def clear_history(self) -> None:
        if self.config.history_enabled:
            self.history.clear()

    def lookup_history(self, pattern: str, limit: int | None = None) -> list[str]:
        """Entries containing *pattern*, newest first."""
        return self.history.search(pattern, limit)

    def load_history(self, path: str | os.PathLike[str] | None = None) -> bool:
        """Replace the history from the load callback, or else from *path*."""
        if not self.config.history_enabled:
            return False
        persistence = self._persistence(path, self._history_load_callback is not None)
        if persistence is None:
            return False
        return self.history.load(persistence)

    def save_history(self, path: str | os.PathLike[str] | None = None) -> bool:
        """Write the history through the save callback, or else to *path*."""
        if not self.config.history_enabled:
            return False
        persistence = self._persistence(path, self._history_save_callback is not None)
        if persistence is None:
            return False
        return self.history.save(persistence)

    def _persistence(
        self, path: str | os.PathLike[str] | None, use_callbacks: bool
    ) -> HistoryPersistence | None:
        if use_callbacks:
            return CallbackHistory(load=self._history_load_callback, save=self._history_save_callback)
        if path is None:
            logger.debug("No history file or callback configured")
            return None
        return FileHistory(path)

    def copy_to_clipboard(self, text: str) -> None:
        self.clipboard.set(text)

