# SPDX-License-Identifier: MIT

from typing import Any, Optional

import pendulum

from chronicle import time
from chronicle.model.entity_id import EntryId
from chronicle.model.entry import Entry, EntryDraft, EntryPatch
from chronicle.model.entry_type import DEFAULT_ENTRY_TYPE
from chronicle.remote.client import RemoteClient, RemoteError
from chronicle.repository.entry import EntryNotFoundError, validate_entry_type

ENTRIES_TABLE = "entries"

# Columns the client may write; id, timestamps and user_id belong to the service
WRITABLE_COLUMNS = ("type", "content", "tags")


def entry_from_row(row: dict[str, Any]) -> Entry:
    return {
        "id": str(row["id"]),
        "type": row.get("type") or DEFAULT_ENTRY_TYPE,
        "content": row.get("content") or "",
        "tags": list(row.get("tags") or []),
        "timestamp": time.datetime_from_str(row["created_at"]),
        "custom_fields": {},
    }


class RemoteEntryRepository:
    """
    Entries in the remote `entries` table, scoped to one user.

    The service enforces row-level isolation; the user filter on every
    query keeps results to the caller's rows either way.
    """

    def __init__(self, client: RemoteClient, user_id: str) -> None:
        self._client = client
        self._user_id = user_id

    def __user_filter(self) -> tuple[str, str, str]:
        return ("user_id", "eq", self._user_id)

    def create(self, draft: EntryDraft) -> EntryId:
        row = {
            "user_id": self._user_id,
            "type": validate_entry_type(draft.get("type") or DEFAULT_ENTRY_TYPE),
            "content": draft["content"],
            "tags": list(dict.fromkeys(draft.get("tags") or [])),
        }
        inserted = self._client.insert(ENTRIES_TABLE, [row])
        if len(inserted) == 0:
            raise RemoteError("insert returned no rows")
        return str(inserted[0]["id"])

    def list_all(self) -> list[Entry]:
        rows = self._client.select(
            ENTRIES_TABLE, [self.__user_filter()], order="created_at.desc"
        )
        return [entry_from_row(row) for row in rows]

    def get(self, id: EntryId) -> Optional[Entry]:
        rows = self._client.select(
            ENTRIES_TABLE, [("id", "eq", id), self.__user_filter()]
        )
        if len(rows) == 0:
            return None
        return entry_from_row(rows[0])

    def list_by_range(
        self, start: pendulum.DateTime, end: pendulum.DateTime
    ) -> list[Entry]:
        rows = self._client.select(
            ENTRIES_TABLE,
            [
                self.__user_filter(),
                ("created_at", "gte", time.datetime_to_iso_str(start)),
                ("created_at", "lte", time.datetime_to_iso_str(end)),
            ],
            order="created_at.desc",
        )
        return [entry_from_row(row) for row in rows]

    def list_by_type(self, entry_type: str) -> list[Entry]:
        rows = self._client.select(
            ENTRIES_TABLE,
            [self.__user_filter(), ("type", "eq", entry_type)],
            order="created_at.desc",
        )
        return [entry_from_row(row) for row in rows]

    def update(self, id: EntryId, patch: EntryPatch) -> None:
        values: dict[str, Any] = {
            column: patch[column]  # type: ignore[literal-required]
            for column in WRITABLE_COLUMNS
            if column in patch
        }
        if "type" in values:
            validate_entry_type(values["type"])
        updated = self._client.update(
            ENTRIES_TABLE, values, [("id", "eq", id), self.__user_filter()]
        )
        if len(updated) == 0:
            raise EntryNotFoundError(f"Entry not found: {id}")

    def delete(self, id: EntryId) -> None:
        deleted = self._client.delete(
            ENTRIES_TABLE, [("id", "eq", id), self.__user_filter()]
        )
        if len(deleted) == 0:
            raise EntryNotFoundError(f"Entry not found: {id}")

    def clear(self) -> None:
        self._client.delete(ENTRIES_TABLE, [self.__user_filter()])
