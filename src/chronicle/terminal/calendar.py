# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import pendulum
import typer

from chronicle.terminal.controller import get_controller
from chronicle.terminal.custom_typer import AliasedTyperGroup
from chronicle.terminal.error import reported_errors
from chronicle.terminal.parse import parse_date, parse_month
from chronicle.view.views.calendar import calendar_month_view

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("show, s")
def show(
    ctx: typer.Context,
    month: Annotated[
        Optional[pendulum.Date],
        typer.Option(
            "--month", "-m", parser=parse_month, help="YYYY-MM (default: this month)"
        ),
    ] = None,
    previous: Annotated[
        int, typer.Option("--previous", "-p", help="months back from --month")
    ] = 0,
    next: Annotated[
        int, typer.Option("--next", "-n", help="months forward from --month")
    ] = 0,
) -> None:
    """Month grid with the number of entries per day."""
    controller = get_controller(ctx)
    with reported_errors():
        controller.context.entries.load_entries()

    if month is not None:
        controller.calendar.go_to(month)
    for _ in range(previous):
        controller.calendar.previous_month()
    for _ in range(next):
        controller.calendar.next_month()

    calendar_month_view(controller.mode, controller.calendar)


@app.command("day, d")
def day(
    ctx: typer.Context,
    date: Annotated[
        Optional[pendulum.Date],
        typer.Argument(
            parser=parse_date, help="YYYY-MM-DD, today, yesterday or offset like -1"
        ),
    ] = None,
) -> None:
    """Entries recorded on one day."""
    controller = get_controller(ctx)
    with reported_errors():
        controller.context.entries.load_entries()
    controller.show_day(date if date is not None else pendulum.today("local").date())
