# SPDX-License-Identifier: MIT

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pendulum
import pytest

from chronicle import configuration
from chronicle import controller as controller_module
from chronicle.initialize import initialize
from chronicle.migrate import migrate
from chronicle.model.entry import Entry
from chronicle.remote.client import RemoteClient
from chronicle.repository.divergence import DivergenceRepository
from chronicle.repository.entry import LocalEntryStore
from chronicle.repository.key_value import KeyValueRepository
from chronicle.repository.migrate import MigrateRepository
from chronicle.repository.session import SessionRepository

DATA_ATTRIBUTES = (
    "DATA_PATH",
    "DATA_MIGRATE_PATH",
    "DATA_ENTRIES_DIR",
    "DATA_STORE_META_PATH",
    "DATA_KEY_VALUE_PATH",
    "DATA_SESSION_PATH",
    "DATA_DIVERGENCE_PATH",
    "DATA_ID_MAP_PATH",
)

REMOTE_URL = "https://diary.example.test"
ANON_KEY = "anon-key"


@pytest.fixture(autouse=True)
def _isolate_app_dirs(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config_dir = tmp_path / "config"
    monkeypatch.setattr(configuration, "CONFIG_PATH", config_dir)
    monkeypatch.setattr(configuration, "APP_CONFIG_PATH", config_dir / "config.yaml")
    # Record the current values so set_data_path is undone after each test
    for name in DATA_ATTRIBUTES:
        monkeypatch.setattr(configuration, name, getattr(configuration, name))
    configuration.set_data_path(tmp_path / "data")

    monkeypatch.delenv(configuration.REMOTE_URL_ENV, raising=False)
    monkeypatch.delenv(configuration.REMOTE_ANON_KEY_ENV, raising=False)
    monkeypatch.setattr(controller_module, "is_voice_supported", lambda: False)


@pytest.fixture
def store() -> LocalEntryStore:
    initialize()
    migrate.run_required_migrations(MigrateRepository(configuration.DATA_MIGRATE_PATH))
    local_store = LocalEntryStore(
        configuration.DATA_ENTRIES_DIR, configuration.DATA_STORE_META_PATH
    )
    local_store.open()
    return local_store


@pytest.fixture
def key_value(tmp_path: Path) -> KeyValueRepository:
    return KeyValueRepository(tmp_path / "local_storage.json")


@pytest.fixture
def ledger(tmp_path: Path) -> DivergenceRepository:
    return DivergenceRepository(tmp_path / "divergence.yaml")


@pytest.fixture
def session_repo(tmp_path: Path) -> SessionRepository:
    return SessionRepository(tmp_path / "session.yaml")


def make_entry(
    content: str,
    timestamp: pendulum.DateTime,
    entry_type: str = "event",
    tags: Optional[list[str]] = None,
    entry_id: Optional[str] = None,
) -> Entry:
    return {
        "id": entry_id or str(int(timestamp.timestamp() * 1000)),
        "type": entry_type,
        "content": content,
        "tags": tags or [],
        "timestamp": timestamp,
        "custom_fields": {},
    }


def token_response(
    user_id: str = "user-1",
    email: str = "ada@example.test",
    access_token: str = "access-1",
    expires_in: int = 3600,
) -> dict[str, Any]:
    return {
        "access_token": access_token,
        "refresh_token": "refresh-1",
        "expires_in": expires_in,
        "user": {"id": user_id, "email": email},
    }


class FakeRemote:
    """
    In-memory stand-in for the remote service, served through
    httpx.MockTransport. Handles the entries table and the auth endpoints.
    """

    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []
        self.requests: list[httpx.Request] = []
        self.fail_rest = False
        self.next_id = 1
        self.auth_responses: dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def client(self) -> RemoteClient:
        return RemoteClient(REMOTE_URL, ANON_KEY, http_client=self.http_client())

    def http_client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handle))

    def __matches(self, row: dict[str, Any], request: httpx.Request) -> bool:
        for column, condition in request.url.params.multi_items():
            if column in ("select", "order"):
                continue
            operator, _, value = condition.partition(".")
            cell = str(row.get(column))
            if operator == "eq" and cell != value:
                return False
            if operator == "gte" and cell < value:
                return False
            if operator == "lte" and cell > value:
                return False
        return True

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.startswith("/auth/v1/"):
            handler = self.auth_responses.get(path)
            if handler is None:
                return httpx.Response(404, json={"msg": "not found"})
            return handler(request)

        if self.fail_rest:
            return httpx.Response(503, json={"message": "service unavailable"})

        if request.method == "GET":
            rows = [row for row in self.rows if self.__matches(row, request)]
            rows.sort(key=lambda row: row["created_at"], reverse=True)
            return httpx.Response(200, json=rows)
        if request.method == "POST":
            inserted = []
            for row in json.loads(request.content):
                created = pendulum.datetime(2024, 5, 1, 12).add(minutes=self.next_id)
                stored = {
                    **row,
                    "id": f"remote-{self.next_id}",
                    "created_at": created.isoformat(),
                }
                self.next_id += 1
                self.rows.append(stored)
                inserted.append(stored)
            return httpx.Response(201, json=inserted)
        if request.method == "PATCH":
            values = json.loads(request.content)
            updated = [row for row in self.rows if self.__matches(row, request)]
            for row in updated:
                row.update(values)
            return httpx.Response(200, json=updated)
        if request.method == "DELETE":
            deleted = [row for row in self.rows if self.__matches(row, request)]
            self.rows = [row for row in self.rows if row not in deleted]
            return httpx.Response(200, json=deleted)
        return httpx.Response(405)


@pytest.fixture
def fake_remote() -> FakeRemote:
    return FakeRemote()
