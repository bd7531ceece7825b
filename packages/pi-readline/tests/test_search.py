"""Tests for pi.readline.search.IncrementalSearch."""

from __future__ import annotations

from pi.readline.history import HistoryStore
from pi.readline.search import NO_MATCHES, IncrementalSearch, SearchDirection


def make_history() -> HistoryStore:
    store = HistoryStore()
    for line in ["git status", "make test", "git commit -m wip", "ls -la", "git push"]:
        store.add(line)
    return store


class TestIncrementalSearch:
    def test_starts_on_newest_entry(self) -> None:
        search = IncrementalSearch(make_history())
        assert search.pattern == ""
        assert search.current == "git push"

    def test_typing_filters_and_resets(self) -> None:
        search = IncrementalSearch(make_history())
        search.append("g")
        search.older()
        search.append("it")
        assert search.index == 0
        assert search.matches == ["git push", "git commit -m wip", "git status"]
        assert search.current == "git push"

    def test_older_and_newer(self) -> None:
        search = IncrementalSearch(make_history())
        search.append("git")
        assert search.older()
        assert search.current == "git commit -m wip"
        assert search.older()
        assert search.current == "git status"
        assert not search.older()
        assert search.newer()
        assert search.current == "git commit -m wip"
        assert search.direction is SearchDirection.FORWARD

    def test_newer_at_newest_stays(self) -> None:
        search = IncrementalSearch(make_history())
        assert not search.newer()
        assert search.current == "git push"

    def test_backspace(self) -> None:
        search = IncrementalSearch(make_history())
        search.append("mak")
        assert search.current == "make test"
        assert search.backspace()
        assert search.pattern == "ma"
        assert search.index == 0
        search.backspace()
        search.backspace()
        assert not search.backspace()

    def test_no_matches(self) -> None:
        search = IncrementalSearch(make_history())
        search.append("zzz")
        assert search.current is None
        assert search.display_text == NO_MATCHES

    def test_prompt(self) -> None:
        search = IncrementalSearch(make_history())
        search.append("git")
        assert search.prompt == "(reverse-i-search)`git': "
        search.newer()
        assert search.prompt == "(forward-i-search)`git': "

    def test_forward_start(self) -> None:
        search = IncrementalSearch(make_history(), SearchDirection.FORWARD)
        assert search.prompt.startswith("(forward-i-search)")
