# SPDX-License-Identifier: MIT

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from chronicle.model.session import User
from chronicle.model.settings import Settings
from chronicle.view.views.header import header


def _enabled(value: bool) -> str:
    return "✓ Enabled" if value else "✗ Disabled"


def settings_view(
    mode: str,
    settings: Settings,
    user: Optional[User],
    remote_configured: bool,
    entry_count: int,
    voice_supported: Optional[bool] = None,
) -> None:
    header(mode, "settings")

    table = Table(box=box.SIMPLE)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("dark_mode", _enabled(settings["dark_mode"]))
    if not remote_configured:
        table.add_row("storage", "local")
    elif user is None:
        table.add_row("storage", "remote (not signed in, using local)")
    else:
        table.add_row("storage", f"remote ({user['email'] or user['id']})")
    table.add_row("entries", str(entry_count))
    if voice_supported is not None:
        table.add_row(
            "voice input", "available" if voice_supported else "not available"
        )

    console = Console()
    console.print(table)
