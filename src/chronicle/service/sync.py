# SPDX-License-Identifier: MIT

import logging
from typing import Optional, TypedDict

from chronicle.model.entity_id import EntryId
from chronicle.model.entry import EntryDraft
from chronicle.remote.client import RemoteClient, RemoteError, RemoteNotConfiguredError
from chronicle.remote.entry import RemoteEntryRepository
from chronicle.repository.divergence import DivergenceRepository
from chronicle.repository.entry import LocalEntryStore
from chronicle.service.auth import AuthService

logger = logging.getLogger(__name__)


class NotSignedInError(Exception):
    pass


class PushResult(TypedDict):
    pushed: dict[EntryId, EntryId]  # local id -> remote id
    skipped: list[EntryId]  # marked, but no longer in the local store
    error: Optional[str]


def push_local_entries(
    client: Optional[RemoteClient],
    local: LocalEntryStore,
    auth: AuthService,
    ledger: DivergenceRepository,
) -> PushResult:
    """
    Copy entries that were created locally while remote storage was active
    to the remote store, then drop the local copies and their markers.

    Pushed entries get remote ids and remote creation times. Stops at the
    first remote failure; what was pushed before it stays pushed.
    """
    if client is None:
        raise RemoteNotConfiguredError("Remote service not configured")
    user_id = auth.get_user_id()
    if user_id is None:
        raise NotSignedInError("Sign in before pushing local entries")

    remote = RemoteEntryRepository(client, user_id)
    result: PushResult = {"pushed": {}, "skipped": [], "error": None}

    for local_id in ledger.get_pending_creates():
        entry = local.get(local_id)
        if entry is None:
            ledger.resolve(local_id)
            result["skipped"].append(local_id)
            continue

        draft: EntryDraft = {
            "type": entry["type"],
            "content": entry["content"],
            "tags": entry["tags"],
        }
        try:
            remote_id = remote.create(draft)
        except RemoteError as e:
            logger.warning("push of entry %s failed: %s", local_id, e)
            result["error"] = str(e)
            break

        local.delete(local_id)
        ledger.resolve(local_id)
        result["pushed"][local_id] = remote_id
        logger.info("pushed local entry %s as %s", local_id, remote_id)

    return result
