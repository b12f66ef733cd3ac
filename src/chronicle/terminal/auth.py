# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console

from chronicle.terminal.controller import get_controller
from chronicle.terminal.custom_typer import AliasedTyperGroup
from chronicle.terminal.error import reported_errors

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)

EmailArgument = Annotated[str, typer.Argument(help="account email address")]


@app.command("sign-up, up", no_args_is_help=True)
def sign_up(
    ctx: typer.Context,
    email: EmailArgument,
    password: Annotated[
        str,
        typer.Option(prompt=True, hide_input=True, confirmation_prompt=True),
    ],
) -> None:
    """Create an account on the remote service."""
    controller = get_controller(ctx)
    with reported_errors():
        controller.context.auth.sign_up(email, password)
    if not controller.context.auth.is_authenticated():
        Console().print(
            "[green]Account created.[/green] Check your email to confirm it, "
            "then run `chronicle auth sign-in`."
        )


@app.command("sign-in, in", no_args_is_help=True)
def sign_in(
    ctx: typer.Context,
    email: EmailArgument,
    code: Annotated[
        Optional[str],
        typer.Option("--code", "-c", help="one-time code from a magic link email"),
    ] = None,
) -> None:
    """Sign in with a password, or with the code from a magic link email."""
    controller = get_controller(ctx)
    with reported_errors():
        if code is not None:
            controller.context.auth.verify_magic_link_code(email, code)
        else:
            password = typer.prompt("Password", hide_input=True)
            controller.context.auth.sign_in(email, password)


@app.command("magic-link, ml", no_args_is_help=True)
def magic_link(ctx: typer.Context, email: EmailArgument) -> None:
    """Email a passwordless sign-in link and code."""
    controller = get_controller(ctx)
    with reported_errors():
        controller.context.auth.sign_in_with_magic_link(email)
    Console().print(
        f"[green]Check {email} for your sign-in link.[/green] "
        f"To sign in here, run `chronicle auth sign-in {email} --code <code>`."
    )


@app.command("sign-out, out")
def sign_out(ctx: typer.Context) -> None:
    """Sign out and forget the stored session."""
    controller = get_controller(ctx)
    with reported_errors():
        controller.context.auth.sign_out()


@app.command("status, st")
def status(ctx: typer.Context) -> None:
    """Show who is signed in."""
    controller = get_controller(ctx)
    console = Console()
    if not controller.context.auth.is_configured:
        console.print("Remote service not configured; entries are stored locally.")
        return
    user = controller.context.auth.get_current_user()
    if user is None:
        console.print("Not signed in; entries are stored locally.")
    else:
        console.print(f"Signed in as {user['email'] or user['id']}")
