# SPDX-License-Identifier: MIT

import logging
from typing import Callable, Optional, TypeAlias

import pendulum

from chronicle.model.entity_id import EntryId
from chronicle.model.entry import Entry
from chronicle.model.entry_type import DEFAULT_ENTRY_TYPE
from chronicle.repository.entry import EntryValidationError, validate_entry_type
from chronicle.service.storage import EntryStorage
from chronicle.time import local_day_key

logger = logging.getLogger(__name__)

EntriesListener: TypeAlias = Callable[[list[Entry]], None]


def parse_tags(tags_input: Optional[str]) -> list[str]:
    """
    Split a comma-separated tag string. Tags are trimmed, empty tags are
    dropped and duplicates are removed keeping the first occurrence.
    """
    if not tags_input:
        return []
    tags = [tag.strip() for tag in tags_input.split(",")]
    return list(dict.fromkeys(tag for tag in tags if tag))


class EntriesManager:
    """
    Creates, lists and deletes entries through the active storage and keeps
    the newest-first listing the views render from.
    """

    def __init__(self, storage: EntryStorage) -> None:
        self._storage = storage
        self.entries: list[Entry] = []
        self._listeners: list[EntriesListener] = []

    def on_change(self, listener: EntriesListener) -> None:
        self._listeners.append(listener)

    def __notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.entries)

    def load_entries(self) -> list[Entry]:
        self.entries = self._storage.list_all()
        self.__notify()
        return self.entries

    def create_entry(
        self,
        content: str,
        entry_type: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> EntryId:
        trimmed_content = content.strip() if content else ""
        if not trimmed_content:
            raise EntryValidationError("Please enter some content")
        entry_type = validate_entry_type(entry_type or DEFAULT_ENTRY_TYPE)

        entry_id = self._storage.create(
            {"type": entry_type, "content": trimmed_content, "tags": tags or []}
        )
        logger.info("created %s entry %s", entry_type, entry_id)
        self.load_entries()
        return entry_id

    def get_entry(self, entry_id: EntryId) -> Optional[Entry]:
        return self._storage.get(entry_id)

    def delete_entry(self, entry_id: EntryId) -> None:
        self._storage.delete(entry_id)
        logger.info("deleted entry %s", entry_id)
        self.load_entries()

    def clear_entries(self) -> None:
        self._storage.clear()
        logger.info("cleared all entries")
        self.load_entries()

    def entries_for_day(self, date: pendulum.Date) -> list[Entry]:
        key = (date.year, date.month, date.day)
        return [
            entry for entry in self.entries if local_day_key(entry["timestamp"]) == key
        ]

    def entries_of_type(self, entry_type: str) -> list[Entry]:
        return self._storage.list_by_type(validate_entry_type(entry_type))
