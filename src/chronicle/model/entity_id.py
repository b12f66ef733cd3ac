# SPDX-License-Identifier: MIT

from typing import TypeAlias

# Local ids are epoch-millisecond strings, remote ids are server-generated
# UUIDs. The two are not interchangeable.
EntryId: TypeAlias = str
