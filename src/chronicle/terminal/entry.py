# SPDX-License-Identifier: MIT

import signal
import threading
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel

from chronicle.model.entry_type import DEFAULT_ENTRY_TYPE
from chronicle.service.entries import parse_tags
from chronicle.service.voice import (
    SpeechRecognitionEngine,
    TranscriptBuffer,
    TranscriptUpdate,
    VoiceCapture,
    VoiceError,
)
from chronicle.terminal.controller import get_controller
from chronicle.terminal.custom_typer import AliasedTyperGroup
from chronicle.terminal.error import reported_errors
from chronicle.terminal.parse import (
    open_editor_for_text,
    parse_entry_type,
    resolve_entry_ids,
)
from chronicle.view.views.entry import single_entry_view

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

TypeOption = Annotated[
    Optional[str],
    typer.Option(
        "--type",
        "-t",
        parser=parse_entry_type,
        help="event, thought, habit, food or health (default: event)",
    ),
]
TagsOption = Annotated[
    Optional[str],
    typer.Option("--tags", "-g", help="comma-separated tags, e.g. work,ideas"),
]


@app.command("add, a")
def add(
    ctx: typer.Context,
    content: Annotated[
        Optional[str],
        typer.Argument(help="entry text; opens $EDITOR when omitted"),
    ] = None,
    entry_type: TypeOption = None,
    tags: TagsOption = None,
) -> None:
    """Record a new entry."""
    controller = get_controller(ctx)

    if content is None:
        content = open_editor_for_text()
        if content is None:
            typer.echo("Entry creation cancelled (no text provided)")
            return

    with reported_errors():
        entry_id = controller.context.entries.create_entry(
            content, entry_type or DEFAULT_ENTRY_TYPE, parse_tags(tags)
        )
        entry = controller.context.entries.get_entry(entry_id)

    Console().print("[green]Entry saved![/green]")
    if entry is not None:
        single_entry_view(controller.mode, entry, controller.context.id_map)


@app.command("list, ls")
def list_entries(
    ctx: typer.Context,
    entry_type: TypeOption = None,
) -> None:
    """List entries, newest first."""
    controller = get_controller(ctx)
    with reported_errors():
        if entry_type is None:
            entries = controller.context.entries.load_entries()
            report_name = "entries"
        else:
            entries = controller.context.entries.entries_of_type(entry_type)
            report_name = f"{entry_type} entries"
    controller.show_entries(entries, report_name)


@app.command("show, sh", no_args_is_help=True)
def show(ctx: typer.Context, id: int) -> None:
    """Show one entry by its id from the last listing."""
    controller = get_controller(ctx)
    real_id = resolve_entry_ids(str(id), controller.context.id_map)[0]
    with reported_errors():
        entry = controller.context.entries.get_entry(real_id)
    if entry is None:
        Console().print(f"[red]Error: Entry not found: {id}[/red]")
        raise typer.Exit(1)
    single_entry_view(controller.mode, entry, controller.context.id_map)


@app.command("delete, d", no_args_is_help=True)
def delete(
    ctx: typer.Context,
    ids: Annotated[str, typer.Argument(help="ids from the last listing: 1 or 1,3-5")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="do not ask")] = False,
) -> None:
    """Delete entries."""
    controller = get_controller(ctx)
    real_ids = resolve_entry_ids(ids, controller.context.id_map)

    console = Console()
    if not yes:
        question = (
            "Are you sure you want to delete this entry?"
            if len(real_ids) == 1
            else f"Are you sure you want to delete these {len(real_ids)} entries?"
        )
        if not typer.confirm(question):
            console.print("[cyan]Operation cancelled.[/cyan]")
            return

    with reported_errors():
        for real_id in real_ids:
            controller.context.entries.delete_entry(real_id)
    console.print(
        "[green]Entry deleted[/green]"
        if len(real_ids) == 1
        else f"[green]{len(real_ids)} entries deleted[/green]"
    )


@app.command("clear")
def clear(
    ctx: typer.Context,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="do not ask")] = False,
) -> None:
    """Delete every entry."""
    controller = get_controller(ctx)
    console = Console()
    console.print("[yellow]WARNING: This will permanently delete all entries.[/yellow]")
    if not yes and not typer.confirm("Are you sure you want to continue?"):
        console.print("[cyan]Operation cancelled.[/cyan]")
        return

    with reported_errors():
        controller.context.entries.clear_entries()
    console.print("[green]All entries deleted[/green]")


@app.command("voice, vo")
def voice(
    ctx: typer.Context,
    entry_type: TypeOption = None,
    tags: TagsOption = None,
) -> None:
    """
    Dictate an entry. Speak, then press Ctrl-C to stop and save the transcript.
    """
    controller = get_controller(ctx)
    config = controller.context.config_repo.get_config()
    console = Console()

    if not controller.voice_supported:
        console.print("[red]Error: Voice input not supported on this machine[/red]")
        raise typer.Exit(1)

    buffer = TranscriptBuffer()
    errors: list[str] = []
    finished = threading.Event()

    def render() -> Panel:
        return Panel(
            buffer.display or "[dim]Listening...[/dim]",
            title="🎤 Recording... (Ctrl-C to stop)",
            border_style="red",
        )

    with Live(render(), console=console, refresh_per_second=8) as live:

        def on_transcript(update: TranscriptUpdate) -> None:
            buffer.apply(update)
            live.update(render())

        def on_error(code: str) -> None:
            errors.append(code)
            finished.set()

        capture = VoiceCapture(
            SpeechRecognitionEngine(language=config["voice_language"]),
            on_transcript,
            on_error,
            max_restarts=config["voice_max_restarts"],
            restart_delay=config["voice_restart_delay"],
        )
        previous_handler = signal.signal(
            signal.SIGINT, lambda signum, frame: finished.set()
        )
        try:
            capture.start()
            finished.wait()
        finally:
            capture.stop()
            signal.signal(signal.SIGINT, previous_handler)

    with reported_errors():
        if errors and not buffer.text:
            raise VoiceError(errors[0])
        if errors:
            console.print(
                f"[yellow]{VoiceError(errors[0])}, saving what was heard[/yellow]"
            )

        entry_id = controller.context.entries.create_entry(
            buffer.text, entry_type or DEFAULT_ENTRY_TYPE, parse_tags(tags)
        )
        entry = controller.context.entries.get_entry(entry_id)

    console.print("[green]Entry saved![/green]")
    if entry is not None:
        single_entry_view(controller.mode, entry, controller.context.id_map)
