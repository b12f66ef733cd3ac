# SPDX-License-Identifier: MIT

import typer

from chronicle.controller import ApplicationController


def get_controller(ctx: typer.Context) -> ApplicationController:
    """The controller the top-level callback started for this invocation."""
    controller = ctx.find_object(ApplicationController)
    if controller is None:
        raise RuntimeError("application controller not started")
    return controller
