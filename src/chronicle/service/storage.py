# SPDX-License-Identifier: MIT

import logging
from typing import Callable, Optional, Protocol, TypeVar

import pendulum

from chronicle.model.divergence import DivergentOperation
from chronicle.model.entity_id import EntryId
from chronicle.model.entry import Entry, EntryDraft, EntryPatch
from chronicle.remote.client import RemoteClient, RemoteError
from chronicle.remote.entry import RemoteEntryRepository
from chronicle.repository.divergence import DivergenceRepository
from chronicle.repository.entry import EntryNotFoundError, LocalEntryStore
from chronicle.service.auth import AuthService

logger = logging.getLogger(__name__)

T = TypeVar("T")

CLEAR_MARKER_ID = "*"


class EntryStorage(Protocol):
    def create(self, draft: EntryDraft) -> EntryId: ...

    def list_all(self) -> list[Entry]: ...

    def get(self, id: EntryId) -> Optional[Entry]: ...

    def list_by_range(
        self, start: pendulum.DateTime, end: pendulum.DateTime
    ) -> list[Entry]: ...

    def list_by_type(self, entry_type: str) -> list[Entry]: ...

    def update(self, id: EntryId, patch: EntryPatch) -> None: ...

    def delete(self, id: EntryId) -> None: ...

    def clear(self) -> None: ...


class FallbackEntryStorage:
    """
    Remote-first storage: every call goes to the signed-in user's remote
    rows, and runs against the local store instead when there is no session
    or the remote call fails.

    Writes that land locally are logged and recorded in the divergence
    ledger. They are not copied to the remote store until `chronicle sync
    push` is run.
    """

    def __init__(
        self,
        client: RemoteClient,
        local: LocalEntryStore,
        auth: AuthService,
        ledger: DivergenceRepository,
    ) -> None:
        self._client = client
        self.local = local
        self._auth = auth
        self._ledger = ledger

    def __remote(self) -> Optional[RemoteEntryRepository]:
        user_id = self._auth.get_user_id()
        if user_id is None:
            return None
        return RemoteEntryRepository(self._client, user_id)

    def __attempt(
        self,
        operation: str,
        remote_call: Callable[[RemoteEntryRepository], T],
        local_call: Callable[[], T],
        fall_back_when_missing: bool = False,
    ) -> tuple[T, Optional[str]]:
        """Run remote_call, or local_call on fallback. Returns (result, reason)."""
        remote = self.__remote()
        if remote is None:
            reason = "not signed in"
            logger.warning("user not authenticated, %s uses local storage", operation)
        else:
            try:
                return remote_call(remote), None
            except RemoteError as e:
                reason = f"remote error: {e}"
                logger.warning(
                    "remote %s failed, using local storage: %s", operation, e
                )
            except EntryNotFoundError:
                if not fall_back_when_missing:
                    raise
                reason = "not in remote store"
                logger.info("%s: entry not in remote store, trying local", operation)
        return local_call(), reason

    def __record(
        self, entry_id: EntryId, operation: DivergentOperation, reason: Optional[str]
    ) -> None:
        if reason is None:
            return
        self._ledger.record(entry_id, operation, reason)
        logger.warning(
            "divergence: %s of entry %s written locally only (%s)",
            operation,
            entry_id,
            reason,
        )

    def create(self, draft: EntryDraft) -> EntryId:
        entry_id, reason = self.__attempt(
            "create",
            lambda remote: remote.create(draft),
            lambda: self.local.create(draft),
        )
        self.__record(entry_id, "create", reason)
        return entry_id

    def list_all(self) -> list[Entry]:
        entries, _ = self.__attempt(
            "list", lambda remote: remote.list_all(), self.local.list_all
        )
        return entries

    def get(self, id: EntryId) -> Optional[Entry]:
        entry, reason = self.__attempt(
            "get", lambda remote: remote.get(id), lambda: self.local.get(id)
        )
        if entry is None and reason is None:
            # Entries written through a fallback keep their local ids
            return self.local.get(id)
        return entry

    def list_by_range(
        self, start: pendulum.DateTime, end: pendulum.DateTime
    ) -> list[Entry]:
        entries, _ = self.__attempt(
            "range query",
            lambda remote: remote.list_by_range(start, end),
            lambda: self.local.list_by_range(start, end),
        )
        return entries

    def list_by_type(self, entry_type: str) -> list[Entry]:
        entries, _ = self.__attempt(
            "type query",
            lambda remote: remote.list_by_type(entry_type),
            lambda: self.local.list_by_type(entry_type),
        )
        return entries

    def update(self, id: EntryId, patch: EntryPatch) -> None:
        _, reason = self.__attempt(
            "update",
            lambda remote: remote.update(id, patch),
            lambda: self.local.update(id, patch),
            fall_back_when_missing=True,
        )
        self.__record(id, "update", reason)

    def delete(self, id: EntryId) -> None:
        _, reason = self.__attempt(
            "delete",
            lambda remote: remote.delete(id),
            lambda: self.local.delete(id),
            fall_back_when_missing=True,
        )
        if reason is not None and id in self._ledger.get_pending_creates():
            # A deleted local-only entry has nothing left to push
            self._ledger.resolve(id)
            return
        self.__record(id, "delete", reason)

    def clear(self) -> None:
        _, reason = self.__attempt(
            "clear", lambda remote: remote.clear(), self.local.clear
        )
        self.__record(CLEAR_MARKER_ID, "clear", reason)


def select_storage(
    client: Optional[RemoteClient],
    local: LocalEntryStore,
    auth: AuthService,
    ledger: DivergenceRepository,
) -> EntryStorage:
    """Pick the storage strategy once, at startup."""
    if client is None:
        logger.info("using local storage")
        return local
    logger.info("using remote storage with local fallback")
    return FallbackEntryStorage(client, local, auth, ledger)
