# SPDX-License-Identifier: MIT

from typing import Any, NotRequired, Optional, TypedDict

import pendulum

from chronicle.model.entity_id import EntryId


class Entry(TypedDict):
    id: Optional[EntryId]
    type: str  # one of EntryType
    content: str
    tags: list[str]
    timestamp: pendulum.DateTime  # creation instant
    custom_fields: dict[str, Any]  # local store only


class EntryDraft(TypedDict):
    """Input to a create call. Anything else a caller passes is ignored."""

    content: str
    type: NotRequired[str]
    tags: NotRequired[Optional[list[str]]]
    custom_fields: NotRequired[Optional[dict[str, Any]]]


class EntryPatch(TypedDict, total=False):
    type: str
    content: str
    tags: list[str]
    custom_fields: dict[str, Any]
