# SPDX-License-Identifier: MIT

from typing import Annotated

import typer
from rich.console import Console

from chronicle.service.sync import push_local_entries
from chronicle.terminal.controller import get_controller
from chronicle.terminal.custom_typer import AliasedTyperGroup
from chronicle.terminal.error import reported_errors
from chronicle.view.views.sync import divergence_view, push_result_view

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


@app.command("status, st")
def status(ctx: typer.Context) -> None:
    """List writes that went to local storage while remote storage was active."""
    controller = get_controller(ctx)
    divergence_view(controller.mode, controller.context.ledger.get_all_markers())


@app.command("push, p")
def push(ctx: typer.Context) -> None:
    """Copy local-only entries to remote storage and drop the local copies."""
    controller = get_controller(ctx)
    context = controller.context
    with reported_errors():
        result = push_local_entries(
            context.remote_client, context.local_store, context.auth, context.ledger
        )
    push_result_view(result)
    if result["error"] is not None:
        raise typer.Exit(1)


@app.command("forget, f")
def forget(
    ctx: typer.Context,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="do not ask")] = False,
) -> None:
    """Drop all divergence markers without copying anything."""
    controller = get_controller(ctx)
    console = Console()
    markers = controller.context.ledger.get_all_markers()
    if len(markers) == 0:
        console.print("Nothing to forget")
        return
    if not yes and not typer.confirm(f"Forget {len(markers)} divergence markers?"):
        console.print("[cyan]Operation cancelled.[/cyan]")
        return
    for entry_id in {marker["entry_id"] for marker in markers}:
        controller.context.ledger.resolve(entry_id)
    console.print(f"[green]Forgot {len(markers)} markers[/green]")
