"""Tests for pi.readline.history — history store, navigation and persistence."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from pi.readline.history import CallbackHistory, FileHistory, HistoryStore


def store_with(*lines: str, **kwargs) -> HistoryStore:
    store = HistoryStore(**kwargs)
    for line in lines:
        store.add(line)
    return store


class FailingPersistence:
    def load(self) -> list[str]:
        raise OSError("disk on fire")

    def save(self, lines) -> bool:
        raise OSError("disk on fire")


# ---------------------------------------------------------------------------
# Adding entries
# ---------------------------------------------------------------------------


class TestAdd:
    def test_dedup_moves_to_newest(self) -> None:
        store = store_with("a", "b", "a")
        assert store.entries == ["b", "a"]

    def test_empty_line_ignored(self) -> None:
        store = store_with("", "a", "")
        assert store.entries == ["a"]

    def test_capacity_evicts_oldest(self) -> None:
        store = store_with("1", "2", "3", "4", max_entries=3)
        assert store.entries == ["2", "3", "4"]
        assert len(store) == 3

    def test_default_capacity(self) -> None:
        store = store_with(*(str(i) for i in range(300)))
        assert len(store) == 256
        assert store.entries[0] == "44"

    def test_add_resets_position(self) -> None:
        store = store_with("a", "b")
        store.previous("")
        store.add("c")
        assert store.at_live
        assert store.position == 3

    def test_invalid_capacity(self) -> None:
        with pytest.raises(ValueError):
            HistoryStore(0)

    def test_shrinking_capacity_evicts(self) -> None:
        store = store_with("a", "b", "c")
        store.max_entries = 2
        assert store.entries == ["b", "c"]

    def test_clear(self) -> None:
        store = store_with("a", "b")
        store.clear()
        assert store.entries == []
        assert store.position == 0


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


class TestNavigation:
    def test_previous_walks_back(self) -> None:
        store = store_with("one", "two", "three")
        assert store.previous("") == "three"
        assert store.previous("three") == "two"
        assert store.previous("two") == "one"
        assert store.previous("one") is None
        assert store.position == 0

    def test_live_input_restored_exactly(self) -> None:
        store = store_with("one", "two")
        assert store.previous("draft text") == "two"
        assert store.live_input == "draft text"
        assert store.next("two") == "draft text"
        assert store.at_live

    def test_next_at_live_is_none(self) -> None:
        store = store_with("one")
        assert store.next("x") is None

    def test_previous_on_empty(self) -> None:
        assert HistoryStore().previous("x") is None

    def test_go_to(self) -> None:
        store = store_with("a", "b", "c")
        assert store.go_to(0, "live") == "a"
        assert store.position == 0
        assert store.live_input == "live"
        assert store.go_to(10, "") is None

    def test_index_of(self) -> None:
        store = store_with("a", "b")
        assert store.index_of("b") == 1
        assert store.index_of("z") is None


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class TestSearch:
    def test_substring_newest_first(self) -> None:
        store = store_with("git status", "ls", "git commit", "git push")
        assert store.search("git") == ["git push", "git commit", "git status"]

    def test_empty_pattern_lists_everything(self) -> None:
        store = store_with("a", "b", "c")
        assert store.search("") == ["c", "b", "a"]

    def test_limit(self) -> None:
        store = store_with(*(f"cmd {i}" for i in range(60)))
        assert len(store.search("cmd")) == 40
        assert store.search("cmd", limit=2) == ["cmd 59", "cmd 58"]
        assert store.search("cmd", limit=0) == []

    def test_case_sensitive_by_default(self) -> None:
        store = store_with("Make")
        assert store.search("make") == []

    def test_case_insensitive(self) -> None:
        store = store_with("Make", case_sensitive=False)
        assert store.search("make") == ["Make"]


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


class TestPersistence:
    def test_file_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / "history"
        store = store_with("first", "second", "third")
        assert store.save(FileHistory(path))
        assert path.read_text(encoding="utf-8") == "first\nsecond\nthird\n"

        loaded = HistoryStore()
        assert loaded.load(FileHistory(path))
        assert loaded.entries == ["first", "second", "third"]
        assert loaded.at_live

    def test_missing_file_loads_empty(self, tmp_path: Path) -> None:
        store = store_with("keep")
        assert store.load(FileHistory(tmp_path / "nope"))
        assert store.entries == []

    def test_load_drops_blank_lines_and_dedups(self, tmp_path: Path) -> None:
        path = tmp_path / "history"
        path.write_text("a\n\nb\na\n", encoding="utf-8")
        store = HistoryStore()
        assert store.load(FileHistory(path))
        assert store.entries == ["b", "a"]

    def test_load_applies_capacity(self) -> None:
        store = HistoryStore(2)
        assert store.load(CallbackHistory(load=lambda: ["x", "y", "z"]))
        assert store.entries == ["y", "z"]

    def test_save_to_unwritable_path_fails(self, tmp_path: Path, caplog) -> None:
        store = store_with("a")
        with caplog.at_level(logging.WARNING, logger="pi.readline.history"):
            assert not store.save(FileHistory(tmp_path / "missing-dir" / "history"))
        assert "Failed to save history" in caplog.text

    def test_load_failure_keeps_entries(self, caplog) -> None:
        store = store_with("a")
        with caplog.at_level(logging.WARNING, logger="pi.readline.history"):
            assert not store.load(FailingPersistence())
        assert store.entries == ["a"]
        assert "Failed to load history" in caplog.text

    def test_callback_history(self) -> None:
        saved: list[list[str]] = []

        def save(lines) -> bool:
            saved.append(list(lines))
            return True

        store = store_with("a", "b")
        assert store.save(CallbackHistory(save=save))
        assert saved == [["a", "b"]]

    def test_callback_without_functions(self) -> None:
        store = store_with("a")
        assert not store.save(CallbackHistory())
        assert store.load(CallbackHistory())
        assert store.entries == []
