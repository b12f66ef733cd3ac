# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from chronicle.model.entry import Entry
from chronicle.repository.id_map import IdMapRepository
from chronicle.service.calendar import DAY_NAMES, CalendarState
from chronicle.view.views.entry import entries_view
from chronicle.view.views.header import header


def calendar_month_view(
    mode: str,
    state: CalendarState,
    today: Optional[pendulum.Date] = None,
    cell_width: int = 6,
) -> None:
    """
    Display a Sunday-first month grid. Days with entries show their entry
    count; today and the selected day are highlighted.
    """
    header(mode, "calendar")

    console = Console()
    console.print(f"\n[bold]{state.title}[/bold]\n")

    table = Table(box=box.SIMPLE, show_header=True, padding=(0, 1))
    for day_name in DAY_NAMES:
        table.add_column(day_name, style="bold", width=cell_width, justify="center")

    marked = 0
    for week in state.weeks(today):
        row: list[Text] = []
        for cell in week:
            cell_content = Text()
            if cell is not None:
                if cell["is_today"]:
                    day_style = "bold black on bright_cyan"
                elif cell["is_selected"]:
                    day_style = "bold black on plum1"
                else:
                    day_style = "bold"
                cell_content.append(f"{cell['day']:2d}", style=day_style)
                if cell["count"] > 0:
                    marked += 1
                    cell_content.append(f"\n●{cell['count']}", style="green3")
            row.append(cell_content)
        table.add_row(*row)

    console.print(table)
    console.print(f"[dim]{marked} day(s) with entries[/dim]")


def calendar_day_view(
    mode: str,
    date: pendulum.Date,
    entries: list[Entry],
    id_map: IdMapRepository,
) -> None:
    date_label = date.format("dddd, MMMM D, YYYY")
    entries_view(
        mode,
        date_label,
        entries,
        id_map,
        columns=["id", "type", "content", "tags"],
        empty_message=f"No entries for {date_label}",
    )
