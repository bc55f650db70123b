"""Environment variable editor."""

from __future__ import annotations

from typing import Any, Dict, Optional

from textual.app import ComposeResult
from textual.widgets import Button, Label, Static, TextArea

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.dashboard.actions import EnvManager
from hangar_dashboard.i18n import Translator
from hangar_dashboard.tui.events import ReloadRequested
from hangar_dashboard.tui.widgets.card import Card
from hangar_dashboard.tui.widgets.error_message import ErrorMessage


class EnvManagerCard(Card):
    """``KEY=VALUE`` per line; the buffer is seeded once and survives reloads."""

    DEFAULT_CSS = """
    EnvManagerCard #env-text {
        height: 10;
    }
    """

    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        env_vars: Optional[Dict[str, str]],
        i18n: Translator,
        *,
        github_app_name: str,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._i18n = i18n
        self._github_app_name = github_app_name
        self.manager = EnvManager(client, project_id, env_vars, self._request_reload, on_state=self.refresh_state)

    def compose(self) -> ComposeResult:
        t = self._i18n.t
        yield Label(t("project_dashboard.card_title_env_vars"), classes="card-title")
        yield Static(t("project_dashboard.env_vars_description"), classes="card-muted")
        yield TextArea(self.manager.text, id="env-text")
        yield Button(t("project_dashboard.save_and_restart_button"), variant="primary", id="btn-env-save")
        yield Static("", id="env-success", classes="card-success")
        yield ErrorMessage(self._i18n, self._github_app_name, id="env-error")

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if event.text_area.id == "env-text":
            self.manager.edit(event.text_area.text)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-env-save":
            self.run_worker(self.manager.save(), name="env-save", exclusive=True)

    def refresh_state(self) -> None:
        manager = self.manager
        button = self.query_one("#btn-env-save", Button)
        button.disabled = manager.is_loading
        button.label = self._i18n.t(
            "project_dashboard.save_and_restart_button_loading"
            if manager.is_loading
            else "project_dashboard.save_and_restart_button"
        )
        success = self.query_one("#env-success", Static)
        success.update(self._i18n.t("project_dashboard.env_vars_updated_success") if manager.success else "")
        self.query_one("#env-error", ErrorMessage).show_error(manager.error)

    def _request_reload(self) -> None:
        self.post_message(ReloadRequested())
