# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.table import Table

from chronicle.service.quick_log import QuickLogCatalog
from chronicle.view.util import format_type
from chronicle.view.views.header import header


def quick_log_options_view(
    mode: str, entry_type: str, catalog: QuickLogCatalog
) -> None:
    """Numbered options for a quick-log category; custom options are marked."""
    header(mode, "quick log")

    console = Console()
    options = catalog.list_options(entry_type)
    if len(options) == 0:
        console.print(f"[red]No quick-log options for {entry_type}[/red]")
        return

    options_table = Table(box=box.SIMPLE, title=format_type(entry_type))
    options_table.add_column("#")
    options_table.add_column("option")
    options_table.add_column("custom")
    for position, option in enumerate(options, start=1):
        options_table.add_row(
            str(position),
            option,
            "✓" if catalog.is_custom(entry_type, option) else "",
        )

    console.print(options_table)
