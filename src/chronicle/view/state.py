# SPDX-License-Identifier: MIT

from contextvars import ContextVar
from typing import TypedDict


class ViewOptions(TypedDict):
    show_header: bool


# Replaced as a whole, never mutated in place
_view_options: ContextVar[ViewOptions] = ContextVar(
    "view_options", default={"show_header": True}
)


def configure_views(show_header: bool) -> None:
    """Set the rendering options for the rest of this invocation."""
    _view_options.set({"show_header": show_header})


def view_options() -> ViewOptions:
    return _view_options.get()
