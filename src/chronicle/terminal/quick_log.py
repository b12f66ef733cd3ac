# SPDX-License-Identifier: MIT

from typing import Annotated

import typer
from rich.console import Console

from chronicle.model.entry_type import QUICK_LOG_TYPES
from chronicle.service.quick_log import create_quick_log_entry
from chronicle.terminal.controller import get_controller
from chronicle.terminal.custom_typer import AliasedTyperGroup
from chronicle.terminal.error import reported_errors
from chronicle.view.views.quick_log import quick_log_options_view

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def parse_quick_log_type(entry_type: str) -> str:
    normalized = entry_type.strip().lower()
    if normalized not in QUICK_LOG_TYPES:
        raise typer.BadParameter(
            f"'{entry_type}' is not one of: {', '.join(QUICK_LOG_TYPES)}"
        )
    return normalized


QuickLogTypeArgument = Annotated[
    str,
    typer.Argument(parser=parse_quick_log_type, help="habit, food or health"),
]


@app.command("options, o", no_args_is_help=True)
def options(ctx: typer.Context, entry_type: QuickLogTypeArgument) -> None:
    """List the quick-log options of a category."""
    controller = get_controller(ctx)
    quick_log_options_view(controller.mode, entry_type, controller.context.quick_log)


@app.command("log, l", no_args_is_help=True)
def log(
    ctx: typer.Context,
    entry_type: QuickLogTypeArgument,
    option: Annotated[
        str, typer.Argument(help="option text, or its number from `options`")
    ],
) -> None:
    """Log an entry straight from a quick-log option."""
    controller = get_controller(ctx)
    catalog = controller.context.quick_log
    console = Console()

    available = catalog.list_options(entry_type)
    if option.isdigit():
        position = int(option)
        if position < 1 or position > len(available):
            console.print(f"[red]Error: No {entry_type} option number {position}[/red]")
            raise typer.Exit(1)
        option = available[position - 1]
    elif option.strip() not in available:
        console.print(
            f"[red]Error: '{option}' is not a {entry_type} quick-log option[/red]"
        )
        raise typer.Exit(1)
    else:
        option = option.strip()

    with reported_errors():
        create_quick_log_entry(controller.context.storage, entry_type, option)
    console.print(f"[green]{entry_type} logged: {option}[/green]")


@app.command("add-option, ao", no_args_is_help=True)
def add_option(
    ctx: typer.Context,
    entry_type: QuickLogTypeArgument,
    option: str,
) -> None:
    """Add a custom quick-log option."""
    controller = get_controller(ctx)
    console = Console()
    if not option.strip():
        console.print("[red]Error: Option cannot be empty[/red]")
        raise typer.Exit(1)
    if not controller.context.quick_log.add_custom(entry_type, option):
        console.print("[red]Error: Option already exists[/red]")
        raise typer.Exit(1)
    console.print("[green]Custom option added[/green]")


@app.command("remove-option, ro", no_args_is_help=True)
def remove_option(
    ctx: typer.Context,
    entry_type: QuickLogTypeArgument,
    option: str,
) -> None:
    """Remove a custom quick-log option. Built-in options cannot be removed."""
    controller = get_controller(ctx)
    console = Console()
    if not controller.context.quick_log.remove_custom(entry_type, option):
        console.print(
            f"[red]Error: '{option}' is not a custom {entry_type} option[/red]"
        )
        raise typer.Exit(1)
    console.print("[green]Custom option removed[/green]")
