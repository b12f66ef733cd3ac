# SPDX-License-Identifier: MIT

import re
from typing import Optional

import click
import typer.core

_ALIAS_SEPARATOR = re.compile(r"\s*,\s*")

# Top-level groups by their primary name, in the order `chronicle --help` lists them
COMMAND_ORDER = [
    "entry",
    "quick-log",
    "calendar",
    "view",
    "settings",
    "auth",
    "sync",
    "config",
]


def command_names(registered_name: str) -> list[str]:
    """'entry, e' -> ['entry', 'e']"""
    return _ALIAS_SEPARATOR.split(registered_name.strip())


class AliasedTyperGroup(typer.core.TyperGroup):
    """
    Group whose commands are registered as "name, alias, ..." and can be
    invoked by any of those names.
    """

    def resolve_name(self, cmd_name: str) -> str:
        for registered_name in self.commands:
            if cmd_name in command_names(registered_name):
                return registered_name
        return cmd_name

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, self.resolve_name(cmd_name))


class OrderedAliasedTyperGroup(AliasedTyperGroup):
    def list_commands(self, ctx: click.Context) -> list[str]:
        def position(registered_name: str) -> int:
            primary = command_names(registered_name)[0]
            if primary in COMMAND_ORDER:
                return COMMAND_ORDER.index(primary)
            return len(COMMAND_ORDER)

        return sorted(self.commands, key=position)
