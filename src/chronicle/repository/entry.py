# SPDX-License-Identifier: MIT

from bisect import bisect_left, bisect_right, insort
from copy import deepcopy
from pathlib import Path
from typing import Any, Optional, cast

import pendulum
from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from chronicle import time
from chronicle.model.entity_id import EntryId
from chronicle.model.entry import Entry, EntryDraft, EntryPatch
from chronicle.model.entry_type import DEFAULT_ENTRY_TYPE, ENTRY_TYPES
from chronicle.template.entry import get_entry_template

PATCHABLE_FIELDS = ("type", "content", "tags", "custom_fields")


class StoreNotInitializedError(Exception):
    """Raised when the local store is used before it has been opened."""

    pass


class EntryNotFoundError(Exception):
    pass


class EntryValidationError(Exception):
    """Raised when entry validation fails."""

    pass


def validate_entry_type(entry_type: str) -> str:
    if entry_type not in ENTRY_TYPES:
        raise EntryValidationError(
            f"Unknown entry type '{entry_type}'. Valid types: {', '.join(ENTRY_TYPES)}"
        )
    return entry_type


def entry_to_record(entry: Entry) -> dict[str, Any]:
    """Serializable form of an entry, as written to disk and to exports."""
    return {
        "id": entry["id"],
        "type": entry["type"],
        "content": entry["content"],
        "tags": list(entry["tags"]),
        "timestamp": time.datetime_to_epoch_ms(entry["timestamp"]),
        "date": time.datetime_to_iso_str(entry["timestamp"]),
        "custom_fields": deepcopy(entry["custom_fields"]),
    }


def entry_from_record(record: dict[str, Any]) -> Entry:
    # timestamp (epoch ms) wins over the redundant ISO date
    if record.get("timestamp") is not None:
        timestamp = time.datetime_from_epoch_ms(int(record["timestamp"]))
    else:
        timestamp = time.datetime_from_str(record["date"])
    return {
        "id": str(record["id"]) if record.get("id") is not None else None,
        "type": record.get("type") or DEFAULT_ENTRY_TYPE,
        "content": record.get("content") or "",
        "tags": list(record.get("tags") or []),
        "timestamp": timestamp,
        "custom_fields": dict(record.get("custom_fields") or {}),
    }


def sort_newest_first(entries: list[Entry]) -> list[Entry]:
    return sorted(entries, key=lambda entry: entry["timestamp"], reverse=True)


class LocalEntryStore:
    """
    Directory-backed object store for entries, one YAML file per entry.

    The store must be opened before use. Opening reads the schema metadata
    written by the store migrations and rebuilds the secondary indexes the
    schema declares (type, date, timestamp) in memory.
    """

    def __init__(self, entries_dir: Path, meta_path: Path) -> None:
        self._entries_dir = entries_dir
        self._meta_path = meta_path
        self._entries: Optional[dict[EntryId, Entry]] = None
        self._indexes: set[str] = set()
        self._type_index: dict[str, set[EntryId]] = {}
        self._time_index: list[tuple[int, EntryId]] = []
        self.schema_version = 0
        self.is_dirty = False
        self._dirty_ids: set[EntryId] = set()
        self._deleted_ids: set[EntryId] = set()

    @property
    def is_open(self) -> bool:
        return self._entries is not None

    @property
    def entries(self) -> dict[EntryId, Entry]:
        if self._entries is None:
            raise StoreNotInitializedError("Database not initialized")
        return self._entries

    def open(self) -> None:
        if not self._meta_path.is_file() or not self._entries_dir.is_dir():
            raise StoreNotInitializedError(
                f"Local store not found at {self._entries_dir}"
            )
        meta = load(self._meta_path.read_text(), Loader=Loader) or {}
        self.schema_version = int(meta.get("version", 0))
        self._indexes = set(meta.get("indexes") or [])
        self.__load_data()

    def __load_data(self) -> None:
        self._entries = {}
        for file_path in self._entries_dir.iterdir():
            if file_path.suffix != ".yaml" or file_path.name == ".gitkeep":
                continue
            raw_entry = load(file_path.read_text(), Loader=Loader)
            if raw_entry is not None:
                entry = entry_from_record(raw_entry)
                self._entries[cast(EntryId, entry["id"])] = entry
        self.__rebuild_indexes()

    def __save_data(self) -> None:
        # Write dirty entities
        for entry_id in self._dirty_ids:
            if entry_id not in self.entries:
                continue
            file_path = self._entries_dir / f"{entry_id}.yaml"
            file_path.write_text(
                dump(entry_to_record(self.entries[entry_id]), Dumper=Dumper)
            )

        # Remove deleted entity files
        for entry_id in self._deleted_ids:
            file_path = self._entries_dir / f"{entry_id}.yaml"
            if file_path.exists():
                file_path.unlink()

        # Clear tracking sets
        self._dirty_ids.clear()
        self._deleted_ids.clear()

    def flush(self) -> bool:
        if self._entries is not None and self.is_dirty:
            self.__save_data()
            self.is_dirty = False
            return True
        return False

    def __rebuild_indexes(self) -> None:
        self._type_index = {}
        self._time_index = []
        for entry in self.entries.values():
            self.__index_entry(entry)

    def __index_entry(self, entry: Entry) -> None:
        entry_id = cast(EntryId, entry["id"])
        if "type" in self._indexes:
            self._type_index.setdefault(entry["type"], set()).add(entry_id)
        if "date" in self._indexes or "timestamp" in self._indexes:
            epoch_ms = time.datetime_to_epoch_ms(entry["timestamp"])
            insort(self._time_index, (epoch_ms, entry_id))

    def __unindex_entry(self, entry: Entry) -> None:
        entry_id = cast(EntryId, entry["id"])
        if "type" in self._indexes:
            self._type_index.get(entry["type"], set()).discard(entry_id)
        if "date" in self._indexes or "timestamp" in self._indexes:
            key = (time.datetime_to_epoch_ms(entry["timestamp"]), entry_id)
            position = bisect_left(self._time_index, key)
            if position < len(self._time_index) and self._time_index[position] == key:
                del self._time_index[position]

    def __next_id(self, timestamp: pendulum.DateTime) -> EntryId:
        candidate = time.datetime_to_epoch_ms(timestamp)
        while str(candidate) in self.entries:
            candidate += 1
        return str(candidate)

    def create(self, draft: EntryDraft) -> EntryId:
        entries = self.entries
        self.is_dirty = True

        entry = get_entry_template()
        entry["type"] = validate_entry_type(draft.get("type") or DEFAULT_ENTRY_TYPE)
        entry["content"] = draft["content"]
        # Deduplicate tags
        entry["tags"] = list(dict.fromkeys(draft.get("tags") or []))
        entry["custom_fields"] = dict(draft.get("custom_fields") or {})
        entry["id"] = self.__next_id(entry["timestamp"])

        entries[entry["id"]] = entry
        self.__index_entry(entry)
        self._dirty_ids.add(entry["id"])
        self._deleted_ids.discard(entry["id"])

        return entry["id"]

    def list_all(self) -> list[Entry]:
        if "timestamp" in self._indexes:
            return [
                deepcopy(self.entries[entry_id])
                for _, entry_id in reversed(self._time_index)
            ]
        return deepcopy(sort_newest_first(list(self.entries.values())))

    def get(self, id: EntryId) -> Optional[Entry]:
        entry = self.entries.get(id)
        return deepcopy(entry) if entry is not None else None

    def list_by_range(
        self, start: pendulum.DateTime, end: pendulum.DateTime
    ) -> list[Entry]:
        """Entries created between start and end, both inclusive."""
        start_ms = time.datetime_to_epoch_ms(start)
        end_ms = time.datetime_to_epoch_ms(end)
        if "date" in self._indexes:
            low = bisect_left(self._time_index, (start_ms, ""))
            high = bisect_right(self._time_index, (end_ms, "\uffff"))
            matches = [
                self.entries[entry_id] for _, entry_id in self._time_index[low:high]
            ]
        else:
            matches = [
                entry
                for entry in self.entries.values()
                if start_ms <= time.datetime_to_epoch_ms(entry["timestamp"]) <= end_ms
            ]
        return deepcopy(sort_newest_first(matches))

    def list_by_type(self, entry_type: str) -> list[Entry]:
        if "type" in self._indexes:
            matches = [
                self.entries[entry_id]
                for entry_id in self._type_index.get(entry_type, set())
            ]
        else:
            matches = [
                entry for entry in self.entries.values() if entry["type"] == entry_type
            ]
        return deepcopy(sort_newest_first(matches))

    def update(self, id: EntryId, patch: EntryPatch) -> None:
        entry = self.entries.get(id)
        if entry is None:
            raise EntryNotFoundError(f"Entry not found: {id}")

        if "type" in patch:
            validate_entry_type(patch["type"])

        self.__unindex_entry(entry)
        # id and timestamp are never patched
        for field in PATCHABLE_FIELDS:
            if field in patch:
                entry[field] = deepcopy(patch[field])  # type: ignore[literal-required]
        if "tags" in patch:
            entry["tags"] = list(dict.fromkeys(entry["tags"]))
        self.__index_entry(entry)

        self.is_dirty = True
        self._dirty_ids.add(id)

    def delete(self, id: EntryId) -> None:
        entry = self.entries.get(id)
        if entry is None:
            raise EntryNotFoundError(f"Entry not found: {id}")

        self.__unindex_entry(entry)
        del self.entries[id]

        self.is_dirty = True
        self._dirty_ids.discard(id)
        self._deleted_ids.add(id)

    def clear(self) -> None:
        entries = self.entries
        self.is_dirty = True
        self._deleted_ids.update(entries.keys())
        self._dirty_ids.clear()
        entries.clear()
        self._type_index = {}
        self._time_index = []
