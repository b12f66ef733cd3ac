# SPDX-License-Identifier: MIT

import json
import logging
from typing import Optional, cast

from chronicle.model.entity_id import EntryId
from chronicle.model.entry_type import QUICK_LOG_TYPES
from chronicle.model.quick_log import QuickLogOptions
from chronicle.repository.key_value import KeyValueRepository
from chronicle.service.storage import EntryStorage
from chronicle.template.quick_log import get_quick_log_options_template

logger = logging.getLogger(__name__)

STORAGE_KEY = "chronicle_quicklog_options"
QUICK_LOG_TAG = "quick-log"

DEFAULT_OPTIONS: dict[str, list[str]] = {
    "habit": [
        "Morning meditation",
        "Exercise",
        "Read for 30min",
        "Drink 8 glasses of water",
        "No social media",
        "Early to bed",
        "Journaling",
        "Gratitude practice",
    ],
    "food": [
        "Breakfast",
        "Lunch",
        "Dinner",
        "Snack",
        "Healthy meal",
        "Cheat meal",
        "Skipped meal",
        "Ate out",
        "Meal prep",
    ],
    "health": [
        "Took medication",
        "8+ hours sleep",
        "Feeling energetic",
        "Feeling tired",
        "Headache",
        "Workout completed",
        "Doctor appointment",
        "Vitamins taken",
        "Feeling great",
    ],
}


class QuickLogCatalog:
    """
    Canned quick-log phrases per category: the built-in list plus the
    user's own additions, which are kept in key/value storage.
    """

    def __init__(self, key_value: KeyValueRepository) -> None:
        self._key_value = key_value
        self._custom_options: QuickLogOptions = get_quick_log_options_template()

    def load(self) -> None:
        stored = self._key_value.get_item(STORAGE_KEY)
        if stored is None:
            return
        try:
            loaded = json.loads(stored)
        except ValueError as e:
            logger.error("error loading custom quick-log options: %s", e)
            return
        options = get_quick_log_options_template()
        for entry_type in QUICK_LOG_TYPES:
            values = loaded.get(entry_type) if isinstance(loaded, dict) else None
            if isinstance(values, list):
                options[entry_type] = [str(value) for value in values]  # type: ignore[literal-required]
        self._custom_options = options

    def __save(self) -> None:
        self._key_value.set_item(STORAGE_KEY, json.dumps(self._custom_options))

    def __custom_list(self, entry_type: str) -> Optional[list[str]]:
        if entry_type not in QUICK_LOG_TYPES:
            return None
        return cast(list[str], self._custom_options[entry_type])  # type: ignore[literal-required]

    def list_options(self, entry_type: str) -> list[str]:
        """Built-in and custom options for a category, deduplicated and sorted."""
        if entry_type not in DEFAULT_OPTIONS:
            return []
        custom = self.__custom_list(entry_type) or []
        return sorted(set(DEFAULT_OPTIONS[entry_type]) | set(custom))

    def add_custom(self, entry_type: str, option: str) -> bool:
        """Returns False for blank options, unknown categories and duplicates."""
        trimmed_option = option.strip() if option else ""
        if not trimmed_option:
            return False

        custom = self.__custom_list(entry_type)
        if custom is None:
            return False
        if trimmed_option in self.list_options(entry_type):
            return False

        custom.append(trimmed_option)
        self.__save()
        return True

    def remove_custom(self, entry_type: str, option: str) -> bool:
        custom = self.__custom_list(entry_type)
        if custom is None or option not in custom:
            return False

        custom.remove(option)
        self.__save()
        return True

    def get_custom(self, entry_type: str) -> list[str]:
        return list(self.__custom_list(entry_type) or [])

    def is_custom(self, entry_type: str, option: str) -> bool:
        return option in self.get_custom(entry_type)


def create_quick_log_entry(
    storage: EntryStorage, entry_type: str, option: str
) -> EntryId:
    return storage.create(
        {"type": entry_type, "content": option, "tags": [QUICK_LOG_TAG]}
    )
