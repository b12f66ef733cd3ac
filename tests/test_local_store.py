# SPDX-License-Identifier: MIT

from __future__ import annotations

import pendulum
import pytest

from chronicle import configuration
from chronicle.repository.entry import (
    EntryNotFoundError,
    EntryValidationError,
    LocalEntryStore,
    StoreNotInitializedError,
)
from chronicle.template import entry as entry_template


def _freeze_creation_time(
    monkeypatch: pytest.MonkeyPatch, moment: pendulum.DateTime
) -> None:
    monkeypatch.setattr(entry_template, "now_utc", lambda: moment)


def test_created_entry_reads_back_with_defaults(store: LocalEntryStore) -> None:
    entry_id = store.create({"content": "Went for a walk"})

    entry = store.get(entry_id)

    assert entry is not None
    assert entry["id"] == entry_id
    assert entry["content"] == "Went for a walk"
    assert entry["type"] == "event"
    assert entry["tags"] == []


def test_create_deduplicates_tags_and_rejects_unknown_types(
    store: LocalEntryStore,
) -> None:
    entry_id = store.create(
        {"content": "x", "type": "thought", "tags": ["a", "b", "a"]}
    )
    entry = store.get(entry_id)
    assert entry is not None
    assert entry["tags"] == ["a", "b"]

    with pytest.raises(EntryValidationError):
        store.create({"content": "x", "type": "dream"})


def test_list_all_is_newest_first(
    store: LocalEntryStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    base = pendulum.datetime(2024, 3, 10, 9)
    for hours, content in ((0, "first"), (2, "third"), (1, "second")):
        _freeze_creation_time(monkeypatch, base.add(hours=hours))
        store.create({"content": content})

    assert [entry["content"] for entry in store.list_all()] == [
        "third",
        "second",
        "first",
    ]


def test_entries_created_in_the_same_millisecond_get_distinct_ids(
    store: LocalEntryStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    _freeze_creation_time(monkeypatch, pendulum.datetime(2024, 3, 10, 9))

    first = store.create({"content": "one"})
    second = store.create({"content": "two"})

    assert first != second
    assert len(store.list_all()) == 2


def test_delete_of_missing_id_raises_and_keeps_store(store: LocalEntryStore) -> None:
    entry_id = store.create({"content": "keep me"})

    with pytest.raises(EntryNotFoundError):
        store.delete("does-not-exist")

    assert store.get(entry_id) is not None
    assert len(store.list_all()) == 1


def test_range_query_is_inclusive(
    store: LocalEntryStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    start = pendulum.datetime(2024, 3, 1)
    end = pendulum.datetime(2024, 3, 31, 23, 59, 59)
    for moment in (start.subtract(seconds=1), start, end, end.add(seconds=1)):
        _freeze_creation_time(monkeypatch, moment)
        store.create({"content": moment.isoformat()})

    in_range = store.list_by_range(start, end)

    assert [entry["timestamp"] for entry in in_range] == [end, start]


def test_list_by_type(store: LocalEntryStore) -> None:
    store.create({"content": "Exercise", "type": "habit"})
    store.create({"content": "Idea", "type": "thought"})

    habits = store.list_by_type("habit")

    assert [entry["content"] for entry in habits] == ["Exercise"]
    assert store.list_by_type("food") == []


def test_update_keeps_id_and_timestamp(store: LocalEntryStore) -> None:
    entry_id = store.create({"content": "draft", "tags": ["a"]})
    before = store.get(entry_id)
    assert before is not None

    store.update(entry_id, {"content": "final", "type": "thought"})

    after = store.get(entry_id)
    assert after is not None
    assert after["id"] == before["id"]
    assert after["timestamp"] == before["timestamp"]
    assert after["content"] == "final"
    assert after["tags"] == ["a"]
    assert store.list_by_type("thought")[0]["id"] == entry_id
    assert store.list_by_type("event") == []


def test_update_of_missing_id_raises(store: LocalEntryStore) -> None:
    with pytest.raises(EntryNotFoundError):
        store.update("missing", {"content": "x"})


def test_clear_removes_everything(store: LocalEntryStore) -> None:
    store.create({"content": "one"})
    store.create({"content": "two"})

    store.clear()

    assert store.list_all() == []
    assert store.list_by_type("event") == []


def test_returned_entries_are_copies(store: LocalEntryStore) -> None:
    entry_id = store.create({"content": "original", "tags": ["a"]})

    entry = store.get(entry_id)
    assert entry is not None
    entry["tags"].append("mutated")

    reread = store.get(entry_id)
    assert reread is not None
    assert reread["tags"] == ["a"]


def test_store_must_be_opened_first() -> None:
    unopened = LocalEntryStore(
        configuration.DATA_ENTRIES_DIR, configuration.DATA_STORE_META_PATH
    )

    with pytest.raises(StoreNotInitializedError):
        unopened.list_all()
    with pytest.raises(StoreNotInitializedError):
        unopened.open()


def test_flushed_entries_survive_reopen(store: LocalEntryStore) -> None:
    kept = store.create({"content": "kept", "type": "food", "tags": ["lunch"]})
    dropped = store.create({"content": "dropped"})
    store.delete(dropped)
    assert store.flush() is True

    reopened = LocalEntryStore(
        configuration.DATA_ENTRIES_DIR, configuration.DATA_STORE_META_PATH
    )
    reopened.open()

    assert reopened.schema_version == 2
    assert [entry["id"] for entry in reopened.list_all()] == [kept]
    assert reopened.list_by_type("food")[0]["tags"] == ["lunch"]
    assert not (configuration.DATA_ENTRIES_DIR / f"{dropped}.yaml").exists()
