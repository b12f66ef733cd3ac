# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from chronicle.terminal.controller import get_controller
from chronicle.terminal.custom_typer import AliasedTyperGroup
from chronicle.terminal.error import reported_errors

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("view, v")
def view(ctx: typer.Context) -> None:
    """Display preferences and where entries are stored."""
    controller = get_controller(ctx)
    with reported_errors():
        controller.switch_view("settings")


@app.command("set, s", no_args_is_help=True)
def set_(
    ctx: typer.Context,
    dark_mode: Annotated[
        Optional[bool],
        typer.Option("--dark-mode/--no-dark-mode", help="Enable/disable dark mode"),
    ] = None,
) -> None:
    """Update preferences."""
    controller = get_controller(ctx)
    if dark_mode is not None:
        controller.context.settings.set_dark_mode(dark_mode)
    Console().print("[green]Settings updated[/green]")


@app.command("export, ex")
def export(
    ctx: typer.Context,
    path: Annotated[
        Optional[Path],
        typer.Argument(
            help="file or directory (default: chronicle_backup_<date>.json here)"
        ),
    ] = None,
) -> None:
    """Export all entries and settings to a JSON file."""
    controller = get_controller(ctx)
    with reported_errors():
        written = controller.context.settings.write_export(path)
    Console().print(f"[green]Data exported successfully[/green] to {written}")


@app.command("import, im", no_args_is_help=True)
def import_(
    ctx: typer.Context,
    path: Annotated[
        Path, typer.Argument(exists=True, dir_okay=False, help="export file")
    ],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="do not ask")] = False,
) -> None:
    """
    Import entries from an export file. Imported entries are created anew,
    with new ids and the current time.
    """
    controller = get_controller(ctx)
    console = Console()

    def confirm(count: int) -> bool:
        return yes or typer.confirm(f"This will import {count} entries. Continue?")

    with reported_errors():
        imported = controller.context.settings.import_file(path, confirm)
    if imported is None:
        console.print("[cyan]Operation cancelled.[/cyan]")
        return
    console.print(f"[green]Data imported successfully[/green] ({imported} entries)")
