"""Rebuild-from-GitHub or update-image card, chosen by the project source."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.widgets import Button, Input, Label, Static

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.dashboard.actions import ImageUpdateForm
from hangar_dashboard.i18n import Translator
from hangar_dashboard.models import Project
from hangar_dashboard.tui.events import ReloadRequested
from hangar_dashboard.tui.screens.confirm import ConfirmModal
from hangar_dashboard.tui.widgets.card import Card
from hangar_dashboard.tui.widgets.error_message import ErrorMessage


class ImageUpdateCard(Card):
    def __init__(
        self,
        client: ApiClient,
        project: Project,
        i18n: Translator,
        *,
        github_app_name: str,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._i18n = i18n
        self._github_app_name = github_app_name
        self.form = ImageUpdateForm(client, project, self._request_reload, i18n, on_state=self.refresh_state)

    def compose(self) -> ComposeResult:
        labels = self.form.labels
        t = self._i18n.t
        yield Label(t(labels.title), classes="card-title")
        yield Static(t(labels.description), classes="card-muted")
        if not self.form.is_github:
            yield Label(t("create_project.image_label"))
            yield Input(placeholder=t("create_project.image_placeholder"), id="image-url-input")
        yield Button(t(labels.button), variant="primary", id="btn-image-submit")
        yield ErrorMessage(self._i18n, self._github_app_name, id="image-error")

    def on_mount(self) -> None:
        self.refresh_state()

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "image-url-input":
            self.form.new_image_url = event.value
            self.refresh_state()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id != "btn-image-submit" or not self.form.can_submit():
            return

        def _on_confirm(confirmed: bool | None) -> None:
            if confirmed:
                self.run_worker(self.form.submit(), name="image-update", exclusive=True)

        self.app.push_screen(
            ConfirmModal(
                self.form.confirmation(),
                confirm_label=self._i18n.t("common.confirm"),
                cancel_label=self._i18n.t("common.cancel"),
            ),
            _on_confirm,
        )

    def refresh_state(self) -> None:
        form = self.form
        button = self.query_one("#btn-image-submit", Button)
        button.disabled = not form.can_submit()
        button.label = self._i18n.t(form.labels.button_loading if form.is_updating else form.labels.button)
        if not form.is_github:
            field = self.query_one("#image-url-input", Input)
            if field.value != form.new_image_url:
                field.value = form.new_image_url
        self.query_one("#image-error", ErrorMessage).show_error(form.error)

    def _request_reload(self) -> None:
        self.post_message(ReloadRequested())
