# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]


class MigrateRepository:
    """Version of the newest store migration applied to the data directory."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._version: Optional[int] = None
        self.is_dirty = False

    @property
    def version(self) -> int:
        if self._version is None:
            self._version = self.__load_version()
        return self._version

    def __load_version(self) -> int:
        if not self._path.is_file():
            return 0
        migrate_data = load(self._path.read_text(), Loader=Loader) or {}
        return int(migrate_data.get("version", 0))

    def flush(self) -> None:
        if self._version is not None and self.is_dirty:
            self._path.write_text(dump({"version": self._version}, Dumper=Dumper))
            self.is_dirty = False

    def get_latest_migration_number(self) -> int:
        return self.version

    def set_new_migration_number(self, migration_number: int) -> None:
        if migration_number <= self.version:
            raise ValueError(
                f"migration {migration_number} is not newer than the applied "
                f"migration {self.version}"
            )
        self._version = migration_number
        self.is_dirty = True
