"""Participant management card (owner / superuser only)."""

from __future__ import annotations

from typing import Any, List, Sequence

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label, Static

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.dashboard.actions import ParticipantManager
from hangar_dashboard.i18n import Translator
from hangar_dashboard.tui.events import ReloadRequested
from hangar_dashboard.tui.screens.confirm import ConfirmModal
from hangar_dashboard.tui.widgets.card import Card
from hangar_dashboard.tui.widgets.error_message import ErrorMessage


class _RemoveButton(Button):
    def __init__(self, login: str, label: str) -> None:
        super().__init__(label, variant="error", classes="remove-participant")
        self.login = login


class ParticipantsCard(Card):
    DEFAULT_CSS = """
    ParticipantsCard .participant-row {
        height: auto;
    }
    ParticipantsCard .participant-name {
        width: 1fr;
        padding: 1 0 0 0;
    }
    ParticipantsCard #participant-input {
        width: 1fr;
    }
    """

    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        participants: Sequence[str],
        i18n: Translator,
        *,
        github_app_name: str,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._i18n = i18n
        self._github_app_name = github_app_name
        self._participants: List[str] = list(participants)
        self.manager = ParticipantManager(
            client, project_id, self._request_reload, i18n, on_state=self.refresh_state
        )

    def compose(self) -> ComposeResult:
        t = self._i18n.t
        yield Label(t("project_dashboard.manage_participants_title"), classes="card-title")
        with Vertical(id="participant-list"):
            yield from self._participant_rows()
        yield Label(t("project_dashboard.add_participant_label"))
        with Horizontal():
            yield Input(
                placeholder=t("project_dashboard.add_participant_placeholder"),
                id="participant-input",
            )
            yield Button(t("project_dashboard.add_participant_button"), variant="primary", id="btn-add-participant")
        yield ErrorMessage(self._i18n, self._github_app_name, id="participant-error")

    def _participant_rows(self) -> List[Any]:
        if not self._participants:
            return [Static(self._i18n.t("project_dashboard.no_participants"), classes="card-muted")]
        label = self._i18n.t("project_dashboard.remove_participant_button")
        return [
            Horizontal(
                Static(escape(login), classes="participant-name"),
                _RemoveButton(login, label),
                classes="participant-row",
            )
            for login in self._participants
        ]

    async def update_participants(self, participants: Sequence[str]) -> None:
        if list(participants) == self._participants:
            return
        self._participants = list(participants)
        container = self.query_one("#participant-list", Vertical)
        await container.remove_children()
        await container.mount_all(self._participant_rows())

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "participant-input":
            self.manager.new_participant = event.value

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "participant-input":
            self._add()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if isinstance(event.button, _RemoveButton):
            self._confirm_remove(event.button.login)
        elif event.button.id == "btn-add-participant":
            self._add()

    def _add(self) -> None:
        if not self.manager.new_participant.strip():
            return
        self.run_worker(self.manager.add(), name="add-participant", exclusive=True)

    def _confirm_remove(self, login: str) -> None:
        def _on_confirm(confirmed: bool | None) -> None:
            if confirmed:
                self.run_worker(self.manager.remove(login), name="remove-participant")

        self.app.push_screen(
            ConfirmModal(
                self.manager.removal_confirmation(login),
                confirm_label=self._i18n.t("common.confirm"),
                cancel_label=self._i18n.t("common.cancel"),
            ),
            _on_confirm,
        )

    def refresh_state(self) -> None:
        manager = self.manager
        button = self.query_one("#btn-add-participant", Button)
        button.disabled = manager.is_loading
        button.label = self._i18n.t(
            "project_dashboard.add_participant_button_loading"
            if manager.is_loading
            else "project_dashboard.add_participant_button"
        )
        field = self.query_one("#participant-input", Input)
        if field.value != manager.new_participant:
            field.value = manager.new_participant
        self.query_one("#participant-error", ErrorMessage).show_error(manager.error)

    def _request_reload(self) -> None:
        self.post_message(ReloadRequested())
