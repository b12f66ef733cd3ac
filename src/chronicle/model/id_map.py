# SPDX-License-Identifier: MIT

from typing import TypedDict

from chronicle.model.entity_id import EntryId


class IdMap(TypedDict):
    """
    Synthetic display ids for the last entries listing.

    Entries are listed with short 1-based ids so they can be referenced from
    the command line. synthetic_to_real maps those back to real entry ids.
    """

    synthetic_to_real: dict[int, EntryId]
    real_to_synthetic: dict[EntryId, int]
