# SPDX-License-Identifier: MIT

from typing import Literal, TypedDict

import pendulum

from chronicle.model.entity_id import EntryId

DivergentOperation = Literal["create", "update", "delete", "clear"]


class DivergenceMarker(TypedDict):
    """A write that landed in the local store while remote storage was active."""

    entry_id: EntryId
    operation: DivergentOperation
    reason: str
    recorded: pendulum.DateTime
