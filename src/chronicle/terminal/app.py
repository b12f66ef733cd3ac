# SPDX-License-Identifier: MIT

from typing import Annotated

import typer

from chronicle.controller import ApplicationController
from chronicle.terminal import (
    auth,
    calendar,
    configuration,
    entry,
    quick_log,
    settings,
    sync,
    view,
)
from chronicle.terminal.custom_typer import OrderedAliasedTyperGroup
from chronicle.terminal.error import reported_errors
from chronicle.view import state as view_state

app = typer.Typer(
    cls=OrderedAliasedTyperGroup,
    help="Chronicle - a diary in the CLI",
    no_args_is_help=True,
)
app.add_typer(entry.app, name="entry, e", help="Record and browse entries")
app.add_typer(
    quick_log.app, name="quick-log, q", help="One-step habit, food and health logging"
)
app.add_typer(calendar.app, name="calendar, cal", help="Entries by calendar day")
app.add_typer(
    view.app, name="view, v", help="The entries, calendar and settings views"
)
app.add_typer(settings.app, name="settings, s", help="Preferences, export and import")
app.add_typer(auth.app, name="auth, a", help="Remote service account")
app.add_typer(
    sync.app,
    name="sync, sy",
    help="Local writes made while remote storage was active",
)
app.add_typer(configuration.app, name="config, c", help="Application configuration")


@app.callback()
def main_callback(
    ctx: typer.Context,
    no_header: Annotated[
        bool,
        typer.Option(
            "--no-header",
            "-nh",
            help="Suppress header output in views",
        ),
    ] = False,
) -> None:
    """
    Chronicle - a diary in the CLI

    Global options that apply to all commands.
    """
    if ctx.resilient_parsing:
        return

    with reported_errors():
        controller = ApplicationController.start()
    ctx.obj = controller
    # Persist whatever the command changed once it finishes
    ctx.call_on_close(controller.context.close)

    if no_header:
        view_state.configure_views(show_header=False)


def run() -> None:
    app()
