# SPDX-License-Identifier: MIT

from typing import Optional

from rich.console import Console
from rich.padding import Padding

from chronicle.view.state import view_options


def header(mode: str, sub_header: Optional[str] = None) -> None:
    """
    Print the app name, the view being shown and where entries are stored.
    Skipped when headers are turned off.
    """
    if not view_options()["show_header"]:
        return

    lines = ["[dark_orange]chronicle[/dark_orange]"]
    if sub_header is not None:
        lines.append(f"[sandy_brown]{sub_header}[/sandy_brown]")
    lines.append(f"[plum1]{mode}[/plum1]")

    Console().print(Padding("\n".join(lines), (1, 0, 0, 1)))
