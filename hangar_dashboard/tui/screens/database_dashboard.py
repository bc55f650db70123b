"""Personal database screen: connection details, link and delete."""

from __future__ import annotations

from typing import Any

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Label, Select, Static

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.constants import DEFAULT_PHPMYADMIN_URL
from hangar_dashboard.dashboard.actions import PersonalDatabase
from hangar_dashboard.display.logging_config import secret_redaction_filter
from hangar_dashboard.i18n import Translator
from hangar_dashboard.tui.events import GoHome, OpenProject
from hangar_dashboard.tui.screens.base import HangarScreen
from hangar_dashboard.tui.screens.confirm import ConfirmModal
from hangar_dashboard.tui.widgets.database_panel import connection_lines


class DatabaseDashboardScreen(HangarScreen):
    BINDINGS = [
        ("escape", "go_home", "Home"),
    ]

    DEFAULT_CSS = """
    DatabaseDashboardScreen #db-panel {
        height: auto;
        margin: 1 2;
        border: round $accent;
        padding: 1 2;
    }
    DatabaseDashboardScreen .section-title {
        text-style: bold;
        color: $primary;
        margin-top: 1;
    }
    DatabaseDashboardScreen Horizontal {
        height: auto;
    }
    """

    def __init__(
        self,
        client: ApiClient,
        i18n: Translator,
        *,
        phpmyadmin_url: str = DEFAULT_PHPMYADMIN_URL,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._i18n = i18n
        self._phpmyadmin_url = phpmyadmin_url
        self.personal = PersonalDatabase(client)
        self._loaded = False

    def compose_content(self) -> ComposeResult:
        t = self._i18n.t
        with Vertical(id="db-panel"):
            yield Label(t("database.dashboard_title"), classes="section-title")
            if not self._loaded:
                yield Static(t("common.loading"))
                return
            personal = self.personal
            if personal.database is None:
                code = personal.error.error_code if personal.error else "NOT_FOUND"
                yield Static(escape(t("database.load_error", error=code)))
                return
            yield Label(t("database.connection_info_title"), classes="section-title")
            yield Static("\n".join(connection_lines(personal.database, self._i18n)))
            yield Static(f"[link={self._phpmyadmin_url}]{t('database.open_phpmyadmin')}[/link]")

            yield Label(t("database.link_to_project_title"), classes="section-title")
            if personal.projects:
                options = [(f"{p.name} (#{p.id})", p.id) for p in personal.projects]
                with Horizontal():
                    yield Select(options, prompt=t("database.select_project"), id="db-project-select")
                    yield Button(t("database.link_button"), variant="primary", id="btn-db-link")
            else:
                yield Static(t("database.no_projects_to_link"))
            yield Button(t("database.delete_button"), variant="error", id="btn-db-delete")

    def on_mount(self) -> None:
        self.sub_title = self._i18n.t("database.dashboard_title")
        self.run_worker(self._load(), name="database-load", exclusive=True)

    async def _load(self) -> None:
        await self.personal.load()
        if self.personal.database is not None:
            secret_redaction_filter.register(self.personal.database.password)
        self._loaded = True
        await self.recompose()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-db-link":
            selected = self.query_one("#db-project-select", Select).value
            if isinstance(selected, int):
                self.run_worker(self._link(selected), name="database-link", exclusive=True)
        elif event.button.id == "btn-db-delete":
            self._confirm_delete()

    async def _link(self, project_id: int) -> None:
        if await self.personal.link(project_id):
            self.post_message(OpenProject(project_id))

    async def _delete(self) -> None:
        if await self.personal.delete():
            self.post_message(GoHome())

    def _confirm_delete(self) -> None:
        def _on_confirm(confirmed: bool | None) -> None:
            if confirmed:
                self.run_worker(self._delete(), name="database-delete", exclusive=True)

        self.app.push_screen(
            ConfirmModal(
                self._i18n.t("database.confirm_delete"),
                confirm_label=self._i18n.t("common.confirm"),
                cancel_label=self._i18n.t("common.cancel"),
            ),
            _on_confirm,
        )

    def action_go_home(self) -> None:
        self.post_message(GoHome())
