# SPDX-License-Identifier: MIT

import json
from pathlib import Path
from typing import Optional


class KeyValueRepository:
    """
    String key/value storage backed by one JSON file, shared by every
    command run on this machine. Values are stored as strings; callers
    serialize their own payloads.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._items: Optional[dict[str, str]] = None
        self.is_dirty = False

    @property
    def items(self) -> dict[str, str]:
        if self._items is None:
            self.__load_data()
        if self._items is None:
            raise ValueError()
        return self._items

    def __load_data(self) -> None:
        if not self._path.is_file():
            self._items = {}
            return
        text = self._path.read_text()
        self._items = json.loads(text) if text.strip() else {}

    def __save_data(self, items: dict[str, str]) -> None:
        self._path.write_text(json.dumps(items, indent=2, ensure_ascii=False))

    def flush(self) -> None:
        if self._items is not None and self.is_dirty:
            self.__save_data(self._items)
            self.is_dirty = False

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.is_dirty = True
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        if key in self.items:
            self.is_dirty = True
            del self.items[key]
