# SPDX-License-Identifier: MIT

import json
import logging
from pathlib import Path
from typing import Any, Callable, Optional, cast

import pendulum

from chronicle import time
from chronicle.model.entry import EntryDraft
from chronicle.model.entry_type import ENTRY_TYPES
from chronicle.model.export import EXPORT_FORMAT_VERSION, ExportDocument
from chronicle.model.settings import Settings
from chronicle.repository.entry import entry_to_record
from chronicle.repository.key_value import KeyValueRepository
from chronicle.service.storage import EntryStorage
from chronicle.template.settings import get_settings_template

logger = logging.getLogger(__name__)

STORAGE_KEY = "chronicle_settings"

# Exports written by earlier versions used camelCase keys
LEGACY_SETTING_KEYS = {"darkMode": "dark_mode"}


class ImportFormatError(Exception):
    pass


def export_filename(date: Optional[pendulum.DateTime] = None) -> str:
    date = date if date is not None else time.now_utc()
    return f"chronicle_backup_{date.in_tz('UTC').format('YYYY-MM-DD')}.json"


def _normalize_settings(raw_settings: dict[str, Any]) -> dict[str, Any]:
    return {
        LEGACY_SETTING_KEYS.get(key, key): value for key, value in raw_settings.items()
    }


def _draft_from_record(record: dict[str, Any]) -> EntryDraft:
    draft: EntryDraft = {"content": record["content"]}
    if record.get("type"):
        draft["type"] = record["type"]
    if record.get("tags") is not None:
        draft["tags"] = list(record["tags"])
    custom_fields = record.get("custom_fields", record.get("customFields"))
    if custom_fields:
        draft["custom_fields"] = dict(custom_fields)
    return draft


class SettingsService:
    """User preferences, plus export and import of the whole diary."""

    def __init__(self, key_value: KeyValueRepository, storage: EntryStorage) -> None:
        self._key_value = key_value
        self._storage = storage
        self.settings: Settings = get_settings_template()

    def load(self) -> Settings:
        self.settings = get_settings_template()
        stored = self._key_value.get_item(STORAGE_KEY)
        if stored is None:
            return self.settings
        try:
            loaded = json.loads(stored)
        except ValueError as e:
            logger.error("error loading settings: %s", e)
            return self.settings
        if isinstance(loaded, dict):
            self.settings = cast(
                Settings, {**self.settings, **_normalize_settings(loaded)}
            )
        return self.settings

    def __save(self) -> None:
        self._key_value.set_item(STORAGE_KEY, json.dumps(self.settings))

    def get_setting(self, key: str) -> Any:
        return self.settings.get(key)

    def set_dark_mode(self, dark_mode: bool) -> None:
        self.settings["dark_mode"] = dark_mode
        self.__save()

    def export_data(self) -> ExportDocument:
        return {
            "version": EXPORT_FORMAT_VERSION,
            "timestamp": time.datetime_to_iso_str(time.now_utc()),
            "entries": [entry_to_record(entry) for entry in self._storage.list_all()],
            "settings": cast(Settings, dict(self.settings)),
        }

    def write_export(self, path: Optional[Path] = None) -> Path:
        """
        Write an export document. A directory or no path at all gets the
        default dated file name.
        """
        if path is None:
            path = Path.cwd() / export_filename()
        elif path.is_dir():
            path = path / export_filename()
        document = self.export_data()
        path.write_text(json.dumps(document, indent=2, ensure_ascii=False))
        logger.info("exported %s entries to %s", len(document["entries"]), path)
        return path

    def import_data(
        self, document: Any, confirm: Callable[[int], bool]
    ) -> Optional[int]:
        """
        Replay the entries of an export document through the normal create
        path, then merge its settings. Imported entries get new ids and
        creation times.

        The document is validated before anything is written. Returns the
        number of imported entries, or None when confirm declines.
        """
        if not isinstance(document, dict) or not isinstance(
            document.get("entries"), list
        ):
            raise ImportFormatError("Invalid data format")
        records = document["entries"]
        for position, record in enumerate(records):
            if not isinstance(record, dict) or not isinstance(
                record.get("content"), str
            ):
                raise ImportFormatError(
                    f"Invalid data format: entry {position + 1} has no content"
                )
            if record.get("type") and record["type"] not in ENTRY_TYPES:
                raise ImportFormatError(
                    f"Invalid data format: entry {position + 1} has unknown type "
                    f"'{record['type']}'"
                )
            tags = record.get("tags")
            if tags is not None and (
                not isinstance(tags, list)
                or not all(isinstance(tag, str) for tag in tags)
            ):
                raise ImportFormatError(
                    f"Invalid data format: entry {position + 1} tags must be a "
                    "list of strings"
                )
            custom_fields = record.get("custom_fields", record.get("customFields"))
            if custom_fields is not None and not isinstance(custom_fields, dict):
                raise ImportFormatError(
                    f"Invalid data format: entry {position + 1} custom fields "
                    "must be an object"
                )

        if not confirm(len(records)):
            return None

        for record in records:
            self._storage.create(_draft_from_record(record))

        raw_settings = document.get("settings")
        if isinstance(raw_settings, dict):
            self.settings = cast(
                Settings,
                {**get_settings_template(), **_normalize_settings(raw_settings)},
            )
            self.__save()

        logger.info("imported %s entries", len(records))
        return len(records)

    def import_file(self, path: Path, confirm: Callable[[int], bool]) -> Optional[int]:
        try:
            document = json.loads(path.read_text())
        except ValueError as e:
            raise ImportFormatError(f"Invalid JSON in {path}: {e}") from e
        return self.import_data(document, confirm)
