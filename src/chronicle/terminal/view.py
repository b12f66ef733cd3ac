# SPDX-License-Identifier: MIT

import typer

from chronicle.terminal.controller import get_controller
from chronicle.terminal.custom_typer import AliasedTyperGroup
from chronicle.terminal.error import reported_errors

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("entries, e")
def entries(ctx: typer.Context) -> None:
    """All entries, newest first."""
    with reported_errors():
        get_controller(ctx).switch_view("entries")


@app.command("calendar, c")
def calendar(ctx: typer.Context) -> None:
    """This month's calendar."""
    with reported_errors():
        get_controller(ctx).switch_view("calendar")


@app.command("settings, s")
def settings(ctx: typer.Context) -> None:
    with reported_errors():
        get_controller(ctx).switch_view("settings")
