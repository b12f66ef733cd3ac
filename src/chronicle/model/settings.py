# SPDX-License-Identifier: MIT

from typing import TypedDict


class Settings(TypedDict):
    dark_mode: bool
