# SPDX-License-Identifier: MIT

from typing import Any, TypedDict

from chronicle.model.settings import Settings

EXPORT_FORMAT_VERSION = 1


class ExportDocument(TypedDict):
    version: int
    timestamp: str
    entries: list[dict[str, Any]]
    settings: Settings
