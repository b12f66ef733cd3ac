# SPDX-License-Identifier: MIT

from yaml import dump

try:
    from yaml import CDumper as Dumper
except ImportError:
    from yaml import Dumper  # type: ignore[assignment]

from chronicle import configuration
from chronicle.migrate.registry import migration


@migration(1)
def migrate() -> None:
    """
    Create the local entry store: the entries directory and the schema
    metadata file, without secondary indexes.
    """
    configuration.DATA_ENTRIES_DIR.mkdir(parents=True, exist_ok=True)
    (configuration.DATA_ENTRIES_DIR / ".gitkeep").touch()

    if not configuration.DATA_STORE_META_PATH.is_file():
        meta = {"name": "entries", "key": "id", "version": 1, "indexes": []}
        configuration.DATA_STORE_META_PATH.write_text(dump(meta, Dumper=Dumper))
