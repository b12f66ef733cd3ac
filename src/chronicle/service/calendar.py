# SPDX-License-Identifier: MIT

import calendar
from typing import Optional, TypeAlias, TypedDict

import pendulum

from chronicle.model.entry import Entry
from chronicle.time import DayKey, local_day_key

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]
DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


class CalendarCell(TypedDict):
    day: int
    count: int
    is_today: bool
    is_selected: bool


# None marks a padding cell before the first or after the last day
CalendarWeek: TypeAlias = list[Optional[CalendarCell]]


def bucket_entries(entries: list[Entry]) -> dict[DayKey, list[Entry]]:
    """Group entries by the local calendar day they were created on."""
    buckets: dict[DayKey, list[Entry]] = {}
    for entry in entries:
        buckets.setdefault(local_day_key(entry["timestamp"]), []).append(entry)
    return buckets


def month_layout(year: int, month: int) -> tuple[int, int]:
    """
    Returns (offset, days): the number of empty cells before day 1 in a
    Sunday-first week, and the number of days in the month.
    """
    monday_based_weekday, days_in_month = calendar.monthrange(year, month)
    return (monday_based_weekday + 1) % 7, days_in_month


def month_weeks(
    year: int,
    month: int,
    buckets: dict[DayKey, list[Entry]],
    today: Optional[pendulum.Date] = None,
    selected: Optional[pendulum.Date] = None,
) -> list[CalendarWeek]:
    offset, days_in_month = month_layout(year, month)
    if today is None:
        today = pendulum.today("local").date()

    cells: list[Optional[CalendarCell]] = [None] * offset
    for day in range(1, days_in_month + 1):
        key = (year, month, day)
        cells.append(
            {
                "day": day,
                "count": len(buckets.get(key, [])),
                "is_today": (today.year, today.month, today.day) == key,
                "is_selected": selected is not None
                and (selected.year, selected.month, selected.day) == key,
            }
        )
    while len(cells) % 7 != 0:
        cells.append(None)

    return [cells[i : i + 7] for i in range(0, len(cells), 7)]


def marked_days(
    year: int, month: int, buckets: dict[DayKey, list[Entry]]
) -> dict[int, int]:
    """Day of month -> entry count, for days in the month that have entries."""
    return {
        day: len(day_entries)
        for (entry_year, entry_month, day), day_entries in buckets.items()
        if entry_year == year and entry_month == month and len(day_entries) > 0
    }


class CalendarState:
    """The month on display, the selected day and the bucketed entries."""

    def __init__(self, month: Optional[pendulum.Date] = None) -> None:
        current = month if month is not None else pendulum.today("local").date()
        self.year = current.year
        self.month = current.month
        self.selected: Optional[pendulum.Date] = None
        self.buckets: dict[DayKey, list[Entry]] = {}

    @property
    def title(self) -> str:
        return f"{MONTH_NAMES[self.month - 1]} {self.year}"

    def load_entries(self, entries: list[Entry]) -> None:
        self.buckets = bucket_entries(entries)

    def go_to(self, month: pendulum.Date) -> None:
        self.year = month.year
        self.month = month.month

    def next_month(self) -> None:
        if self.month == 12:
            self.year, self.month = self.year + 1, 1
        else:
            self.month += 1

    def previous_month(self) -> None:
        if self.month == 1:
            self.year, self.month = self.year - 1, 12
        else:
            self.month -= 1

    def select(self, date: pendulum.Date) -> list[Entry]:
        self.selected = date
        return list(self.buckets.get((date.year, date.month, date.day), []))

    def weeks(self, today: Optional[pendulum.Date] = None) -> list[CalendarWeek]:
        return month_weeks(self.year, self.month, self.buckets, today, self.selected)
