# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from chronicle import configuration
from chronicle.terminal.controller import get_controller
from chronicle.terminal.custom_typer import AliasedTyperGroup

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def _masked(value: Optional[str]) -> str:
    if not value:
        return "None"
    if len(value) <= 8:
        return "****"
    return f"{value[:4]}…{value[-4:]}"


def _configuration_table(
    config: configuration.Configuration, title: Optional[str] = None
) -> Table:
    table = Table(title=title)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    credentials = configuration.resolve_remote_credentials(config)
    table.add_row("remote_url", config["remote_url"] or "None")
    table.add_row("remote_anon_key", _masked(config["remote_anon_key"]))
    table.add_row(
        "remote service",
        "✗ Not configured" if credentials is None else f"✓ {credentials['url']}",
    )
    table.add_row("magic_link_redirect", config.get("magic_link_redirect") or "None")
    table.add_row(
        "data_path",
        config["data_path"] if config["data_path"] else "None (default location)",
    )
    table.add_row(
        "show_header", "✓ Enabled" if config["show_header"] else "✗ Disabled"
    )
    table.add_row("log_level", config["log_level"])
    table.add_row("voice_language", config["voice_language"])
    table.add_row("voice_max_restarts", str(config["voice_max_restarts"]))
    table.add_row("voice_restart_delay", str(config["voice_restart_delay"]))
    return table


@app.command("view, v")
def view(ctx: typer.Context) -> None:
    """Display current configuration settings."""
    controller = get_controller(ctx)
    config = controller.context.config_repo.get_config()

    console = Console()
    console.print(_configuration_table(config))
    console.print(f"\nConfig file: {configuration.APP_CONFIG_PATH}")
    console.print(f"Data directory: {configuration.DATA_PATH}")

    yaml_library_type = "untested"
    try:
        from yaml import CDumper as Dumper  # noqa: F401
        from yaml import CLoader as Loader  # noqa: F401

        yaml_library_type = "C"
    except ImportError:
        yaml_library_type = "Python"
    console.print(f"YAML Library Type: {yaml_library_type}")


@app.command("set, s", no_args_is_help=True)
def set(
    ctx: typer.Context,
    remote_url: Annotated[
        Optional[str],
        typer.Option("--remote-url", help="Base URL of the remote service"),
    ] = None,
    remote_anon_key: Annotated[
        Optional[str],
        typer.Option(
            "--remote-anon-key", help="Public (anon) key of the remote service"
        ),
    ] = None,
    remove_remote: Annotated[
        bool,
        typer.Option("--remove-remote", help="Forget the remote service, run locally"),
    ] = False,
    magic_link_redirect: Annotated[
        Optional[str],
        typer.Option("--magic-link-redirect", help="URL magic links redirect to"),
    ] = None,
    data_path: Annotated[
        Optional[str],
        typer.Option("--data-path", help="Directory path for storing data files"),
    ] = None,
    remove_data_path: Annotated[
        bool,
        typer.Option("--remove-data-path", help="Reset data path to the default"),
    ] = False,
    show_header: Annotated[
        Optional[bool],
        typer.Option("--show-header/--no-show-header", help="Show the view header"),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="DEBUG, INFO, WARNING or ERROR"),
    ] = None,
    voice_language: Annotated[
        Optional[str],
        typer.Option("--voice-language", help="Recognition language, e.g. en-US"),
    ] = None,
    voice_max_restarts: Annotated[
        Optional[int],
        typer.Option(
            "--voice-max-restarts",
            min=0,
            help="Silent recognition restarts before voice capture stops",
        ),
    ] = None,
    voice_restart_delay: Annotated[
        Optional[float],
        typer.Option(
            "--voice-restart-delay", min=0.0, help="Seconds to wait before a restart"
        ),
    ] = None,
) -> None:
    """
    Update configuration settings.
    """
    controller = get_controller(ctx)
    config_repo = controller.context.config_repo
    config_repo.update_config(
        remote_url=remote_url,
        remote_anon_key=remote_anon_key,
        remove_remote=remove_remote,
        data_path=data_path,
        remove_data_path=remove_data_path,
        show_header=show_header,
        log_level=log_level,
        voice_language=voice_language,
        voice_max_restarts=voice_max_restarts,
        voice_restart_delay=voice_restart_delay,
        magic_link_redirect=magic_link_redirect,
    )

    console = Console()
    console.print("[green]Configuration updated successfully![/green]\n")
    console.print(
        _configuration_table(config_repo.get_config(), "Updated Configuration")
    )
