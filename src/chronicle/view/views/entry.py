# SPDX-License-Identifier: MIT

from typing import cast

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from chronicle.model.entity_id import EntryId
from chronicle.model.entry import Entry
from chronicle.repository.id_map import IdMapRepository
from chronicle.time import datetime_to_display_local_datetime_str
from chronicle.view.util import TYPE_COLORS, first_line, format_tags, format_type
from chronicle.view.views.header import header

EMPTY_ENTRIES_MESSAGE = "No entries yet. Start recording your thoughts!"


def entries_view(
    mode: str,
    report_name: str,
    entries: list[Entry],
    id_map: IdMapRepository,
    columns: list[str] = ["id", "type", "content", "tags", "timestamp"],
    empty_message: str = EMPTY_ENTRIES_MESSAGE,
) -> None:
    """Display entries newest first, numbered with short ids for later commands."""
    header(mode, report_name)

    console = Console()
    if len(entries) == 0:
        console.print(f"\n  [dim]{empty_message}[/dim]\n")
        return

    entries_table = Table(box=box.SIMPLE)
    for column in columns:
        if column == "content":
            entries_table.add_column(column, ratio=1)
        else:
            entries_table.add_column(column, no_wrap=True)

    for entry in entries:
        row = []
        for column in columns:
            column_value = ""
            if column == "id":
                column_value = str(id_map.associate_id(cast(EntryId, entry["id"])))
            elif column == "type":
                column_value = format_type(entry["type"])
            elif column == "content":
                column_value = first_line(entry["content"])
            elif column == "tags":
                column_value = format_tags(entry["tags"])
            elif column == "timestamp":
                column_value = datetime_to_display_local_datetime_str(
                    entry["timestamp"]
                )
            row.append(column_value)
        entries_table.add_row(*row)

    console.print(entries_table)


def single_entry_view(mode: str, entry: Entry, id_map: IdMapRepository) -> None:
    header(mode, "entry")

    entry_table = Table(box=box.SIMPLE)
    entry_table.add_column("property")
    entry_table.add_column("value")

    entry_table.add_row("id", str(id_map.associate_id(cast(EntryId, entry["id"]))))
    entry_table.add_row("stored id", str(entry["id"]))
    entry_table.add_row("type", format_type(entry["type"]))
    entry_table.add_row("tags", format_tags(entry["tags"]))
    entry_table.add_row(
        "timestamp", datetime_to_display_local_datetime_str(entry["timestamp"])
    )
    for key, value in entry["custom_fields"].items():
        entry_table.add_row(key, str(value))

    console = Console()
    console.print(entry_table)
    console.print(
        Panel(
            entry["content"],
            title="content",
            border_style=TYPE_COLORS.get(entry["type"], "blue"),
        )
    )
