# SPDX-License-Identifier: MIT

from __future__ import annotations

import pendulum
import pytest
from conftest import FakeRemote

from chronicle.remote.client import RemoteClient
from chronicle.repository.divergence import DivergenceRepository
from chronicle.repository.entry import EntryNotFoundError, LocalEntryStore
from chronicle.repository.session import SessionRepository
from chronicle.service.auth import AuthService
from chronicle.service.storage import (
    CLEAR_MARKER_ID,
    FallbackEntryStorage,
    select_storage,
)
from chronicle.service.sync import NotSignedInError, push_local_entries


def _signed_in_auth(
    client: RemoteClient, session_repo: SessionRepository
) -> AuthService:
    session_repo.save_session(
        {
            "user": {"id": "user-1", "email": "ada@example.test"},
            "access_token": "access-1",
            "refresh_token": "refresh-1",
            "expires_at": pendulum.now("UTC").add(hours=1),
        }
    )
    auth = AuthService(client, session_repo)
    auth.init()
    return auth


def test_local_only_mode_uses_the_local_store(
    store: LocalEntryStore,
    session_repo: SessionRepository,
    ledger: DivergenceRepository,
) -> None:
    storage = select_storage(None, store, AuthService(None, session_repo), ledger)

    assert storage is store


def test_signed_in_writes_go_remote_without_markers(
    fake_remote: FakeRemote,
    store: LocalEntryStore,
    session_repo: SessionRepository,
    ledger: DivergenceRepository,
) -> None:
    client = fake_remote.client()
    storage = select_storage(
        client, store, _signed_in_auth(client, session_repo), ledger
    )
    assert isinstance(storage, FallbackEntryStorage)

    entry_id = storage.create({"content": "remote entry"})

    assert entry_id == "remote-1"
    assert fake_remote.rows[0]["user_id"] == "user-1"
    assert store.list_all() == []
    assert ledger.get_all_markers() == []
    assert [entry["content"] for entry in storage.list_all()] == ["remote entry"]


def test_remote_failure_falls_back_and_records_divergence(
    fake_remote: FakeRemote,
    store: LocalEntryStore,
    session_repo: SessionRepository,
    ledger: DivergenceRepository,
) -> None:
    client = fake_remote.client()
    storage = FallbackEntryStorage(
        client, store, _signed_in_auth(client, session_repo), ledger
    )
    fake_remote.fail_rest = True

    entry_id = storage.create({"content": "written offline"})

    entry = storage.get(entry_id)
    assert entry is not None
    assert entry["content"] == "written offline"
    [marker] = ledger.get_all_markers()
    assert marker["entry_id"] == entry_id
    assert marker["operation"] == "create"
    assert marker["reason"].startswith("remote error")


def test_entries_written_locally_stay_readable_once_remote_recovers(
    fake_remote: FakeRemote,
    store: LocalEntryStore,
    session_repo: SessionRepository,
    ledger: DivergenceRepository,
) -> None:
    client = fake_remote.client()
    storage = FallbackEntryStorage(
        client, store, _signed_in_auth(client, session_repo), ledger
    )
    fake_remote.fail_rest = True
    entry_id = storage.create({"content": "written offline"})
    fake_remote.fail_rest = False

    entry = storage.get(entry_id)

    assert entry is not None
    assert entry["content"] == "written offline"


def test_without_a_session_writes_go_local(
    fake_remote: FakeRemote,
    store: LocalEntryStore,
    session_repo: SessionRepository,
    ledger: DivergenceRepository,
) -> None:
    client = fake_remote.client()
    auth = AuthService(client, session_repo)
    storage = FallbackEntryStorage(client, store, auth, ledger)

    entry_id = storage.create({"content": "not signed in"})

    assert fake_remote.requests == []
    assert store.get(entry_id) is not None
    assert ledger.get_all_markers()[0]["reason"] == "not signed in"


def test_delete_of_local_only_entry_resolves_its_marker(
    fake_remote: FakeRemote,
    store: LocalEntryStore,
    session_repo: SessionRepository,
    ledger: DivergenceRepository,
) -> None:
    client = fake_remote.client()
    storage = FallbackEntryStorage(
        client, store, _signed_in_auth(client, session_repo), ledger
    )
    fake_remote.fail_rest = True
    entry_id = storage.create({"content": "short lived"})
    fake_remote.fail_rest = False

    storage.delete(entry_id)

    assert store.get(entry_id) is None
    assert ledger.get_all_markers() == []


def test_delete_missing_everywhere_raises(
    fake_remote: FakeRemote,
    store: LocalEntryStore,
    session_repo: SessionRepository,
    ledger: DivergenceRepository,
) -> None:
    client = fake_remote.client()
    storage = FallbackEntryStorage(
        client, store, _signed_in_auth(client, session_repo), ledger
    )

    with pytest.raises(EntryNotFoundError):
        storage.delete("nowhere")


def test_clear_during_outage_is_marked(
    fake_remote: FakeRemote,
    store: LocalEntryStore,
    session_repo: SessionRepository,
    ledger: DivergenceRepository,
) -> None:
    client = fake_remote.client()
    storage = FallbackEntryStorage(
        client, store, _signed_in_auth(client, session_repo), ledger
    )
    fake_remote.fail_rest = True

    storage.clear()

    [marker] = ledger.get_all_markers()
    assert marker["entry_id"] == CLEAR_MARKER_ID
    assert marker["operation"] == "clear"


def test_push_copies_local_entries_and_drops_the_local_copies(
    fake_remote: FakeRemote,
    store: LocalEntryStore,
    session_repo: SessionRepository,
    ledger: DivergenceRepository,
) -> None:
    client = fake_remote.client()
    auth = _signed_in_auth(client, session_repo)
    storage = FallbackEntryStorage(client, store, auth, ledger)
    fake_remote.fail_rest = True
    local_id = storage.create({"content": "offline", "type": "thought", "tags": ["t"]})
    fake_remote.fail_rest = False

    result = push_local_entries(client, store, auth, ledger)

    assert result["error"] is None
    assert list(result["pushed"]) == [local_id]
    assert store.get(local_id) is None
    assert ledger.get_all_markers() == []
    [row] = fake_remote.rows
    assert (row["content"], row["type"], row["tags"]) == ("offline", "thought", ["t"])


def test_push_stops_at_the_first_failure(
    fake_remote: FakeRemote,
    store: LocalEntryStore,
    session_repo: SessionRepository,
    ledger: DivergenceRepository,
) -> None:
    client = fake_remote.client()
    auth = _signed_in_auth(client, session_repo)
    local_id = store.create({"content": "offline"})
    ledger.record(local_id, "create", "remote error: test")
    fake_remote.fail_rest = True

    result = push_local_entries(client, store, auth, ledger)

    assert result["pushed"] == {}
    assert result["error"] is not None
    assert store.get(local_id) is not None
    assert ledger.get_pending_creates() == [local_id]


def test_push_requires_a_session(
    fake_remote: FakeRemote,
    store: LocalEntryStore,
    session_repo: SessionRepository,
    ledger: DivergenceRepository,
) -> None:
    client = fake_remote.client()

    with pytest.raises(NotSignedInError):
        push_local_entries(client, store, AuthService(client, session_repo), ledger)
