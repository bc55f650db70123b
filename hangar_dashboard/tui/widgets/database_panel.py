"""Database linkage card.

The card re-composes on every reload: its shape depends on the derived
:class:`~hangar_dashboard.dashboard.linkage.LinkageState` and on whether the
caller has strong access.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Button, Label, Static

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.constants import DEFAULT_PHPMYADMIN_URL
from hangar_dashboard.dashboard.actions import DatabaseManager
from hangar_dashboard.dashboard.linkage import DatabaseAction, LinkageState, shows_connection_details
from hangar_dashboard.display.logging_config import secret_redaction_filter
from hangar_dashboard.i18n import Translator
from hangar_dashboard.models import DatabaseDetails
from hangar_dashboard.tui.events import ReloadRequested
from hangar_dashboard.tui.screens.confirm import ConfirmModal
from hangar_dashboard.tui.widgets.card import Card
from hangar_dashboard.tui.widgets.error_message import ErrorMessage

# DatabaseAction -> (button id, label key, variant)
_ACTION_BUTTONS = {
    DatabaseAction.UNLINK: ("btn-db-unlink", "database.unlink_button", "warning"),
    DatabaseAction.DELETE: ("btn-db-delete", "database.delete_button", "error"),
    DatabaseAction.LINK_EXISTING: ("btn-db-link-existing", "database.link_this_db_button", "primary"),
    DatabaseAction.CREATE_AND_LINK: ("btn-db-create", "database.create_and_link_button", "primary"),
}


def connection_lines(database: DatabaseDetails, i18n: Translator) -> List[str]:
    t = i18n.t
    return [
        f"[b]{t('database.host')}:[/b] {escape(database.host)}",
        f"[b]{t('database.port')}:[/b] {database.port}",
        f"[b]{t('database.db_name')}:[/b] {escape(database.database_name)}",
        f"[b]{t('database.username')}:[/b] {escape(database.username)}",
        f"[b]{t('database.password')}:[/b] {escape(database.password)}",
    ]


class DatabaseCard(Card):
    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        i18n: Translator,
        *,
        phpmyadmin_url: str = DEFAULT_PHPMYADMIN_URL,
        github_app_name: str,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._i18n = i18n
        self._phpmyadmin_url = phpmyadmin_url
        self._github_app_name = github_app_name
        self.linkage: Optional[LinkageState] = None
        self.actions: Tuple[DatabaseAction, ...] = ()
        self.linked_database: Optional[DatabaseDetails] = None
        self.personal_database: Optional[DatabaseDetails] = None
        self.manager = DatabaseManager(client, project_id, self._request_reload, i18n, on_state=self.refresh_state)

    def compose(self) -> ComposeResult:
        t = self._i18n.t
        yield Label(t("database.title"), classes="card-title")
        if self.linkage is None:
            yield Static(t("common.loading"), classes="card-muted")
            return
        if shows_connection_details(self.linkage) and self.linked_database is not None:
            yield Label(t("database.connection_info_title"))
            yield Static("\n".join(connection_lines(self.linked_database, self._i18n)))
            url = self._phpmyadmin_url
            yield Static(f"[link={url}]{t('database.open_phpmyadmin')}[/link]")
        elif self.linkage is LinkageState.PERSONAL_UNLINKED and self.actions:
            name = self.personal_database.database_name if self.personal_database else ""
            yield Static(escape(t("database.unlinked_db_found", name=name)))
        else:
            yield Static(t("database.no_db_linked"), classes="card-muted")
        if self.actions:
            with Horizontal():
                for action in self.actions:
                    button_id, label_key, variant = _ACTION_BUTTONS[action]
                    yield Button(t(label_key), variant=variant, id=button_id)
        yield ErrorMessage(self._i18n, self._github_app_name, id="db-error")

    async def update_view(
        self,
        linkage: Optional[LinkageState],
        actions: Tuple[DatabaseAction, ...],
        linked_database: Optional[DatabaseDetails],
        personal_database: Optional[DatabaseDetails],
    ) -> None:
        self.linkage = linkage
        self.actions = actions
        self.linked_database = linked_database
        self.personal_database = personal_database
        if linked_database is not None:
            secret_redaction_filter.register(linked_database.password)
        await self.recompose()
        self.refresh_state()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "btn-db-unlink":
            self.run_worker(self.manager.unlink(), name="db-unlink")
        elif button_id == "btn-db-delete":
            self._confirm_delete()
        elif button_id == "btn-db-link-existing" and self.personal_database is not None:
            self.run_worker(self.manager.link_existing(self.personal_database), name="db-link")
        elif button_id == "btn-db-create":
            self.run_worker(self.manager.create_and_link(), name="db-create", exclusive=True)

    def _confirm_delete(self) -> None:
        def _on_confirm(confirmed: bool | None) -> None:
            if confirmed:
                self.run_worker(self.manager.delete(), name="db-delete")

        self.app.push_screen(
            ConfirmModal(
                self.manager.delete_confirmation(),
                confirm_label=self._i18n.t("common.confirm"),
                cancel_label=self._i18n.t("common.cancel"),
            ),
            _on_confirm,
        )

    def refresh_state(self) -> None:
        for button in self.query(Button):
            button.disabled = self.manager.is_loading
        errors = self.query(ErrorMessage)
        if errors:
            errors.first().show_error(self.manager.error)

    def _request_reload(self) -> None:
        self.post_message(ReloadRequested())
