# SPDX-License-Identifier: MIT

import logging
from contextlib import contextmanager
from typing import Iterator

import typer
from rich.console import Console
from rich.markup import escape

from chronicle.remote.client import RemoteError, RemoteNotConfiguredError
from chronicle.repository.entry import (
    EntryNotFoundError,
    EntryValidationError,
    StoreNotInitializedError,
)
from chronicle.service.settings import ImportFormatError
from chronicle.service.sync import NotSignedInError
from chronicle.service.voice import VoiceError

logger = logging.getLogger(__name__)

# Errors a user can cause or fix; anything else is a bug and keeps its traceback
USER_ERRORS = (
    StoreNotInitializedError,
    EntryNotFoundError,
    EntryValidationError,
    RemoteError,
    RemoteNotConfiguredError,
    NotSignedInError,
    ImportFormatError,
    VoiceError,
)


@contextmanager
def reported_errors() -> Iterator[None]:
    """Print user-facing errors in red and exit non-zero."""
    try:
        yield
    except USER_ERRORS as e:
        logger.debug("command failed", exc_info=True)
        Console().print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)
