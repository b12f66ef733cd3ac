# SPDX-License-Identifier: MIT

from typing import Optional

from chronicle.model.entry_type import TYPE_ICONS

TYPE_COLORS: dict[str, str] = {
    "event": "dodger_blue1",
    "thought": "medium_purple1",
    "habit": "green3",
    "food": "dark_orange",
    "health": "indian_red1",
}


def format_tags(tags: Optional[list[str]]) -> str:
    """Format a list of tags as a comma-separated string without brackets or quotes."""
    if tags is None or len(tags) == 0:
        return ""
    return ", ".join(tags)


def format_type(entry_type: str, use_color: bool = True) -> str:
    label = f"{TYPE_ICONS.get(entry_type, '•')} {entry_type}"
    color = TYPE_COLORS.get(entry_type)
    if use_color and color is not None:
        return f"[{color}]{label}[/{color}]"
    return label


def first_line(content: str, width: int = 60) -> str:
    line = content.split("\n")[0].strip()
    if len(line) > width:
        return line[: width - 1] + "…"
    return line
