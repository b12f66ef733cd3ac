# SPDX-License-Identifier: MIT

from __future__ import annotations

import pendulum
import pytest

from chronicle.model.entry import Entry
from chronicle.repository.entry import EntryValidationError, LocalEntryStore
from chronicle.service.entries import EntriesManager, parse_tags


def test_parse_tags() -> None:
    assert parse_tags("work, ideas,,work , ") == ["work", "ideas"]
    assert parse_tags("") == []
    assert parse_tags(None) == []


def test_create_entry_trims_content_and_notifies(store: LocalEntryStore) -> None:
    manager = EntriesManager(store)
    seen: list[list[Entry]] = []
    manager.on_change(seen.append)

    entry_id = manager.create_entry("  Dinner with friends \n", "food", ["social"])

    entry = manager.get_entry(entry_id)
    assert entry is not None
    assert entry["content"] == "Dinner with friends"
    assert entry["tags"] == ["social"]
    assert [e["id"] for e in seen[-1]] == [entry_id]
    assert manager.entries == seen[-1]


@pytest.mark.parametrize("content", ["", "   ", "\n\t"])
def test_blank_content_is_rejected(store: LocalEntryStore, content: str) -> None:
    manager = EntriesManager(store)

    with pytest.raises(EntryValidationError, match="Please enter some content"):
        manager.create_entry(content)

    assert store.list_all() == []


def test_unknown_type_is_rejected(store: LocalEntryStore) -> None:
    with pytest.raises(EntryValidationError):
        EntriesManager(store).create_entry("hello", "dream")


def test_delete_and_clear_reload_the_listing(store: LocalEntryStore) -> None:
    manager = EntriesManager(store)
    first = manager.create_entry("first")
    manager.create_entry("second", "thought")

    manager.delete_entry(first)
    assert [entry["content"] for entry in manager.entries] == ["second"]

    manager.clear_entries()
    assert manager.entries == []


def test_entries_of_type_and_day(store: LocalEntryStore) -> None:
    manager = EntriesManager(store)
    manager.create_entry("Exercise", "habit")
    manager.create_entry("Idea", "thought")

    assert [entry["content"] for entry in manager.entries_of_type("habit")] == [
        "Exercise"
    ]
    today = pendulum.today("local").date()
    assert len(manager.entries_for_day(today)) == 2
    assert manager.entries_for_day(today.subtract(days=1)) == []
