# SPDX-License-Identifier: MIT

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Dumper  # type: ignore[assignment]
    from yaml import Loader  # type: ignore[assignment]

from chronicle import configuration
from chronicle.migrate.registry import migration

ENTRY_INDEXES = ["type", "date", "timestamp"]


@migration(2)
def migrate() -> None:
    meta = load(configuration.DATA_STORE_META_PATH.read_text(), Loader=Loader)

    if meta is None:
        meta = {"name": "entries", "key": "id"}

    indexes = list(meta.get("indexes") or [])
    for index in ENTRY_INDEXES:
        if index not in indexes:
            indexes.append(index)

    meta["indexes"] = indexes
    meta["version"] = 2
    configuration.DATA_STORE_META_PATH.write_text(dump(meta, Dumper=Dumper))
