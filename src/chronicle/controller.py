# SPDX-License-Identifier: MIT

import logging
from typing import Literal, Optional

import httpx
import pendulum
from rich.console import Console

from chronicle.context import AppContext, build_context
from chronicle.initialize import initialize
from chronicle.log import configure_logging
from chronicle.model.entry import Entry
from chronicle.model.session import AuthEvent, Session
from chronicle.service.calendar import CalendarState
from chronicle.service.voice import is_voice_supported
from chronicle.view.views.calendar import calendar_day_view, calendar_month_view
from chronicle.view.views.entry import entries_view
from chronicle.view.views.settings import settings_view

logger = logging.getLogger(__name__)

View = Literal["entries", "calendar", "settings"]
VIEWS: tuple[View, ...] = ("entries", "calendar", "settings")


class ApplicationController:
    """Startup sequence, view switching and reactions to auth changes."""

    def __init__(self, context: AppContext) -> None:
        self.context = context
        self.current_view: View = "entries"
        self.calendar = CalendarState()
        self._voice_supported: Optional[bool] = None
        self._console = Console()
        context.entries.on_change(self.on_entries_change)
        context.auth.on_auth_state_change(self.on_auth_state_change)

    @classmethod
    def start(
        cls, http_client: Optional[httpx.Client] = None
    ) -> "ApplicationController":
        config_repo = initialize()
        configure_logging(config_repo.get_config()["log_level"])
        return cls(build_context(config_repo, http_client))

    @property
    def mode(self) -> str:
        if not self.context.is_remote_mode:
            return "local storage"
        user = self.context.auth.get_current_user()
        if user is None:
            return "local storage (not signed in)"
        return f"signed in as {user['email'] or user['id']}"

    @property
    def voice_supported(self) -> bool:
        # Probing opens the audio system, so it waits until voice is needed
        if self._voice_supported is None:
            self._voice_supported = is_voice_supported()
            if not self._voice_supported:
                logger.warning("voice recognition not supported")
        return self._voice_supported

    def on_entries_change(self, entries: list[Entry]) -> None:
        self.calendar.load_entries(entries)

    def on_auth_state_change(
        self, event: AuthEvent, session: Optional[Session]
    ) -> None:
        if event == "SIGNED_IN" and session is not None:
            self._console.print(
                f"[green]Signed in as {session['user']['email']}[/green]"
            )
            self.switch_view("entries")
        elif event == "SIGNED_OUT":
            self._console.print(
                "Signed out. Sign in again with `chronicle auth sign-in`."
            )

    def show_entries(self, entries: list[Entry], report_name: str = "entries") -> None:
        self.context.id_map.clear_ids()
        entries_view(self.mode, report_name, entries, self.context.id_map)

    def show_day(self, date: pendulum.Date) -> None:
        entries = self.calendar.select(date)
        self.context.id_map.clear_ids()
        calendar_day_view(self.mode, date, entries, self.context.id_map)

    def switch_view(self, view: View) -> None:
        self.current_view = view
        entries = self.context.entries.load_entries()

        if view == "entries":
            self.show_entries(entries)
        elif view == "calendar":
            calendar_month_view(self.mode, self.calendar)
        elif view == "settings":
            settings_view(
                self.mode,
                self.context.settings.settings,
                self.context.auth.get_current_user(),
                self.context.is_remote_mode,
                len(entries),
                self.voice_supported,
            )
