"""Irreversible project deletion card (owner / superuser only)."""

from __future__ import annotations

from typing import Any

from rich.markup import escape
from textual.app import ComposeResult
from textual.widgets import Button, Label, Static

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.dashboard.actions import DangerZone
from hangar_dashboard.i18n import Translator
from hangar_dashboard.tui.events import GoHome
from hangar_dashboard.tui.screens.confirm import ConfirmModal
from hangar_dashboard.tui.widgets.card import Card


class DangerZoneCard(Card):
    DEFAULT_CSS = """
    DangerZoneCard {
        border: round $error;
    }
    DangerZoneCard #danger-error {
        color: $error;
    }
    """

    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        project_name: str,
        has_linked_database: bool,
        i18n: Translator,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._i18n = i18n
        self.project_name = project_name
        self.has_linked_database = has_linked_database
        self.zone = DangerZone(client, project_id, i18n, self._on_deleted, on_state=self.refresh_state)

    def compose(self) -> ComposeResult:
        yield Label(self._i18n.t("project_dashboard.card_title_danger"), classes="card-title")
        yield Button(self._i18n.t("project_dashboard.delete_button"), variant="error", id="btn-delete-project")
        yield Static("", id="danger-error")

    def update_project(self, project_name: str, has_linked_database: bool) -> None:
        self.project_name = project_name
        self.has_linked_database = has_linked_database

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id != "btn-delete-project":
            return

        def _on_confirm(confirmed: bool | None) -> None:
            if confirmed:
                self.run_worker(self.zone.delete(), name="delete-project", exclusive=True)

        self.app.push_screen(
            ConfirmModal(
                self.zone.confirmation(self.project_name, self.has_linked_database),
                confirm_label=self._i18n.t("common.confirm"),
                cancel_label=self._i18n.t("common.cancel"),
            ),
            _on_confirm,
        )

    def refresh_state(self) -> None:
        self.query_one("#danger-error", Static).update(escape(self.zone.error or ""))

    def _on_deleted(self) -> None:
        self.post_message(GoHome())
