# SPDX-License-Identifier: MIT

from chronicle.model.entry import Entry
from chronicle.model.entry_type import DEFAULT_ENTRY_TYPE
from chronicle.time import now_utc


def get_entry_template() -> Entry:
    return {
        "id": None,
        "type": DEFAULT_ENTRY_TYPE,
        "content": "",
        "tags": [],
        "timestamp": now_utc(),
        "custom_fields": {},
    }
