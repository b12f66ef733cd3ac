# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from chronicle.model.entity_id import EntryId
from chronicle.model.id_map import IdMap
from chronicle.template.id_map import get_id_map_template


class IdMapRepository:
    def __init__(self, path: Path) -> None:
        self._path = path
        self._id_map: Optional[IdMap] = None
        self.is_dirty = False

    @property
    def id_map(self) -> IdMap:
        if self._id_map is None:
            self.__load_data()
        if self._id_map is None:
            raise ValueError()
        return self._id_map

    def __load_data(self) -> None:
        if not self._path.is_file():
            self._id_map = get_id_map_template()
            return
        self._id_map = load(self._path.read_text(), Loader=Loader)
        if self._id_map is None:
            self._id_map = get_id_map_template()

    def __save_data(self, id_map: IdMap) -> None:
        self._path.write_text(dump(dict(id_map), Dumper=Dumper))

    def flush(self) -> None:
        if self._id_map is not None and self.is_dirty:
            self.__save_data(self._id_map)
            self.is_dirty = False

    def clear_ids(self) -> None:
        self.is_dirty = True
        self._id_map = get_id_map_template()

    def associate_id(self, entry_id: EntryId) -> int:
        """
        Create a new synthetic id to associate with an entry id
        """
        if entry_id in self.id_map["real_to_synthetic"]:
            return self.id_map["real_to_synthetic"][entry_id]

        self.is_dirty = True
        next_id = len(self.id_map["real_to_synthetic"]) + 1
        self.id_map["real_to_synthetic"][entry_id] = next_id
        self.id_map["synthetic_to_real"][next_id] = entry_id
        return next_id

    def get_real_id(self, synthetic_id: int) -> EntryId:
        """
        Get the entry id associated with a synthetic id
        """
        if synthetic_id not in self.id_map["synthetic_to_real"]:
            raise KeyError(f"No entry is listed with id {synthetic_id}")
        return self.id_map["synthetic_to_real"][synthetic_id]
