# SPDX-License-Identifier: MIT

from typing import TypedDict


class QuickLogOptions(TypedDict):
    habit: list[str]
    food: list[str]
    health: list[str]
