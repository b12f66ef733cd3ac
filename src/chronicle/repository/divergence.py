# SPDX-License-Identifier: MIT

from copy import deepcopy
from pathlib import Path
from typing import Any, Optional, cast

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from chronicle import time
from chronicle.model.divergence import DivergenceMarker, DivergentOperation
from chronicle.model.entity_id import EntryId


class DivergenceRepository:
    """
    Ledger of writes that landed in the local store while remote storage was
    the active strategy. Nothing is reconciled automatically; the ledger is
    what `chronicle sync` reads.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._markers: Optional[list[DivergenceMarker]] = None
        self.is_dirty = False

    @property
    def markers(self) -> list[DivergenceMarker]:
        if self._markers is None:
            self.__load_data()
        if self._markers is None:
            raise ValueError()
        return self._markers

    def __load_data(self) -> None:
        self._markers = []
        if not self._path.is_file():
            return
        raw_data = load(self._path.read_text(), Loader=Loader) or {}
        for raw_marker in raw_data.get("markers") or []:
            raw_marker["recorded"] = time.datetime_from_str(raw_marker["recorded"])
            self._markers.append(cast(DivergenceMarker, raw_marker))

    def __save_data(self, markers: list[DivergenceMarker]) -> None:
        serializable_markers: list[dict[str, Any]] = []
        for marker in markers:
            serializable_marker = cast(dict[str, Any], deepcopy(marker))
            serializable_marker["recorded"] = time.datetime_to_iso_str(
                marker["recorded"]
            )
            serializable_markers.append(serializable_marker)
        self._path.write_text(dump({"markers": serializable_markers}, Dumper=Dumper))

    def flush(self) -> None:
        if self._markers is not None and self.is_dirty:
            self.__save_data(self._markers)
            self.is_dirty = False

    def record(
        self, entry_id: EntryId, operation: DivergentOperation, reason: str
    ) -> DivergenceMarker:
        self.is_dirty = True
        marker: DivergenceMarker = {
            "entry_id": entry_id,
            "operation": operation,
            "reason": reason,
            "recorded": time.now_utc(),
        }
        self.markers.append(marker)
        return deepcopy(marker)

    def get_all_markers(self) -> list[DivergenceMarker]:
        return deepcopy(self.markers)

    def get_pending_creates(self) -> list[EntryId]:
        return [
            marker["entry_id"]
            for marker in self.markers
            if marker["operation"] == "create"
        ]

    def resolve(self, entry_id: EntryId) -> None:
        remaining = [
            marker for marker in self.markers if marker["entry_id"] != entry_id
        ]
        if len(remaining) != len(self.markers):
            self.is_dirty = True
            self._markers = remaining
