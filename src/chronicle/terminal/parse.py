# SPDX-License-Identifier: MIT

import os
import re
import subprocess
import tempfile
from typing import Optional

import pendulum
import typer

from chronicle.model.entity_id import EntryId
from chronicle.model.entry_type import ENTRY_TYPES
from chronicle.repository.id_map import IdMapRepository

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DAY_OFFSET = re.compile(r"^[+-]?\d+$")
_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")
_ID_RANGE = re.compile(r"^(\d+)\s*-\s*(\d+)$")

# Relative day names and their offset from today
_DAY_NAMES = {"today": 0, "t": 0, "yesterday": -1, "y": -1, "tomorrow": 1}


def parse_date(date_param: Optional[str]) -> Optional[pendulum.Date]:
    """Local calendar date from YYYY-MM-DD, a day name or a day offset like -2."""
    if date_param is None:
        return None

    date = str(date_param).strip().lower()
    today = pendulum.today("local").date()

    if _ISO_DATE.match(date):
        try:
            return pendulum.from_format(date, "YYYY-MM-DD", tz="local").date()
        except ValueError as e:
            raise typer.BadParameter(f"Invalid date '{date}': {e}")
    if _DAY_OFFSET.match(date):
        return today.add(days=int(date))
    if date in _DAY_NAMES:
        return today.add(days=_DAY_NAMES[date])
    raise typer.BadParameter(
        "Incorrect date format, expected YYYY-MM-DD, a day offset or "
        f"one of {', '.join(_DAY_NAMES)}"
    )


def parse_month(month_param: Optional[str]) -> Optional[pendulum.Date]:
    """First day of the month given as YYYY-MM."""
    if month_param is None:
        return None

    month_match = _MONTH.match(str(month_param).strip())
    if not month_match:
        raise typer.BadParameter("Incorrect month format, expected YYYY-MM")
    year, month = int(month_match.group(1)), int(month_match.group(2))
    if not 1 <= month <= 12:
        raise typer.BadParameter(f"Month must be between 1 and 12, got {month}")
    return pendulum.date(year, month, 1)


def parse_entry_type(entry_type: Optional[str]) -> Optional[str]:
    if entry_type is None:
        return None
    normalized = entry_type.strip().lower()
    if normalized not in ENTRY_TYPES:
        raise typer.BadParameter(
            f"'{entry_type}' is not one of: {', '.join(ENTRY_TYPES)}"
        )
    return normalized


def parse_id_list(id_param: str) -> list[int]:
    """
    Short ids from "3", "1,4,7", "2-5" or any mix such as "1,3-5".
    Returned sorted without duplicates.
    """
    ids: set[int] = set()
    for part in filter(None, (piece.strip() for piece in id_param.split(","))):
        if part.isdigit():
            ids.add(int(part))
            continue

        range_match = _ID_RANGE.match(part)
        if range_match is None:
            raise typer.BadParameter(f"'{part}' is not an id or an id range like 2-5")
        first, last = int(range_match.group(1)), int(range_match.group(2))
        if first > last:
            raise typer.BadParameter(f"Range '{part}' runs backwards")
        ids.update(range(first, last + 1))

    if not ids:
        raise typer.BadParameter("No ids given")
    return sorted(ids)


def resolve_entry_ids(id_param: str, id_map: IdMapRepository) -> list[EntryId]:
    """Map the short ids of the last listing back to stored entry ids."""
    try:
        return [
            id_map.get_real_id(synthetic_id) for synthetic_id in parse_id_list(id_param)
        ]
    except KeyError as e:
        raise typer.BadParameter(f"{e.args[0]}; list entries first")


def open_editor_for_text(initial_text: Optional[str] = None) -> Optional[str]:
    """
    Open the user's preferred editor to write entry content.
    Returns the edited text with trailing newlines removed, or None if empty.
    """
    editor = os.environ.get("EDITOR", "nano")

    with tempfile.NamedTemporaryFile(mode="w+", suffix=".txt") as tf:
        if initial_text is not None:
            tf.write(initial_text)
            tf.flush()

        subprocess.run([editor, tf.name], check=True)
        tf.seek(0)
        text = tf.read()
        if not text.strip():
            return None
        return text.rstrip("\n")
