# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.table import Table

from chronicle.model.divergence import DivergenceMarker
from chronicle.service.storage import CLEAR_MARKER_ID
from chronicle.service.sync import PushResult
from chronicle.time import datetime_to_display_local_datetime_str
from chronicle.view.views.header import header


def divergence_view(mode: str, markers: list[DivergenceMarker]) -> None:
    """Writes that landed in the local store while remote storage was active."""
    header(mode, "sync status")

    console = Console()
    if len(markers) == 0:
        console.print("\n  [green]Local and remote storage have not diverged[/green]\n")
        return

    markers_table = Table(box=box.SIMPLE)
    markers_table.add_column("recorded")
    markers_table.add_column("operation")
    markers_table.add_column("entry")
    markers_table.add_column("reason")
    for marker in markers:
        markers_table.add_row(
            datetime_to_display_local_datetime_str(marker["recorded"]),
            marker["operation"],
            "all" if marker["entry_id"] == CLEAR_MARKER_ID else marker["entry_id"],
            marker["reason"],
        )

    console.print(markers_table)
    pending = sum(1 for marker in markers if marker["operation"] == "create")
    if pending > 0:
        console.print(
            f"[yellow]{pending} local-only entries; "
            "run `chronicle sync push` to copy them to remote storage[/yellow]"
        )


def push_result_view(result: PushResult) -> None:
    console = Console()
    for local_id, remote_id in result["pushed"].items():
        console.print(f"[green]pushed[/green] {local_id} -> {remote_id}")
    for local_id in result["skipped"]:
        console.print(f"[dim]skipped {local_id} (no longer stored locally)[/dim]")
    console.print(f"{len(result['pushed'])} entries pushed")
    if result["error"] is not None:
        console.print(f"[red]Push stopped: {result['error']}[/red]")
