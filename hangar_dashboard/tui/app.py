"""Hangar Dashboard Textual application.

Resolves the caller identity once at startup, then navigates between the
home screen, the create-project form, per-project dashboards and the
personal database screen.
"""

from __future__ import annotations

import logging
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.config.schema import HangarConfig, IdentityConfig
from hangar_dashboard.constants import APP_NAME, SERVER_VERSION
from hangar_dashboard.errors import ApiError
from hangar_dashboard.i18n import Translator
from hangar_dashboard.models import CurrentUser
from hangar_dashboard.tui.events import GoHome, OpenCreateProject, OpenDatabase, OpenProject
from hangar_dashboard.tui.screens.create_project import CreateProjectScreen
from hangar_dashboard.tui.screens.database_dashboard import DatabaseDashboardScreen
from hangar_dashboard.tui.screens.home import HomeScreen
from hangar_dashboard.tui.screens.project_dashboard import ProjectDashboardScreen
from hangar_dashboard.tui.settings import DEFAULT_THEME, load_settings, save_settings

logger = logging.getLogger(__name__)


def resolve_identity(
    fetched: Optional[CurrentUser],
    identity: IdentityConfig,
) -> Optional[CurrentUser]:
    """Apply the configured identity override on top of ``auth/me``.

    A configured login replaces the fetched user entirely; ``is_admin`` alone
    only adjusts the fetched user.
    """
    if identity.login:
        return CurrentUser(login=identity.login, is_admin=bool(identity.is_admin))
    if fetched is None:
        return None
    if identity.is_admin is not None:
        return fetched.model_copy(update={"is_admin": identity.is_admin})
    return fetched


class HangarApp(App):
    """Textual TUI for the Hangar project dashboard."""

    TITLE = f"{APP_NAME} v{SERVER_VERSION}"
    SUB_TITLE = ""

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("h", "home", "Home"),
        Binding("n", "next_theme", "Next Theme", show=False),
    ]

    def __init__(
        self,
        config: HangarConfig,
        *,
        client: Optional[ApiClient] = None,
        project_id: Optional[int] = None,
        open_database: bool = False,
    ) -> None:
        super().__init__()
        self.config = config
        self.client = client or ApiClient(config.client.server_url, config.client.token)
        self.user: Optional[CurrentUser] = None
        self._settings = load_settings()
        if "language" in config.client.model_fields_set:
            language = config.client.language
        else:
            language = self._settings.get("language", config.client.language)
        self.i18n = Translator(language)
        self._initial_project = project_id
        self._initial_database = open_database

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Footer()

    # ── Lifecycle ───────────────────────────────────────────────

    def on_mount(self) -> None:
        saved_theme = self._settings.get("theme", DEFAULT_THEME)
        if saved_theme in self.available_themes:
            self.theme = saved_theme
        self.run_worker(self._startup(), name="startup", exclusive=True)

    async def _startup(self) -> None:
        if not self.client.is_connected:
            await self.client.connect()
        fetched: Optional[CurrentUser] = None
        if not self.config.identity.login:
            try:
                fetched = await self.client.get_current_user()
            except ApiError as exc:
                logger.warning("Could not resolve the current user: %s", exc)
                self.notify(self.i18n.error(exc), title=self.i18n.t("common.error"), severity="warning")
        self.user = resolve_identity(fetched, self.config.identity)
        logger.info("Caller identity: %s", self.user.login if self.user else "<anonymous>")

        self.push_screen(HomeScreen(self.i18n))
        if self._initial_project is not None:
            self._open_project(self._initial_project)
        elif self._initial_database:
            self._open_database()

    async def on_unmount(self) -> None:
        self._settings["theme"] = self.theme or DEFAULT_THEME
        self._settings["language"] = self.i18n.language
        save_settings(self._settings)
        await self.client.close()

    # ── Navigation ──────────────────────────────────────────────

    def on_open_project(self, message: OpenProject) -> None:
        self._open_project(message.project_id)

    def on_open_database(self, message: OpenDatabase) -> None:
        self._open_database()

    def on_open_create_project(self, message: OpenCreateProject) -> None:
        self.push_screen(
            CreateProjectScreen(
                self.client,
                self.i18n,
                self.user.login if self.user else None,
                github_app_name=self.config.links.github_app_name,
            )
        )

    def on_go_home(self, message: GoHome) -> None:
        self.action_home()

    def _open_project(self, project_id: int) -> None:
        logger.info("Opening dashboard for project %s", project_id)
        self.push_screen(
            ProjectDashboardScreen(self.client, project_id, self.i18n, self.config, self.user)
        )

    def _open_database(self) -> None:
        self.push_screen(
            DatabaseDashboardScreen(
                self.client,
                self.i18n,
                phpmyadmin_url=self.config.links.phpmyadmin_url,
            )
        )

    def action_home(self) -> None:
        """Pop back to the home screen, unmounting every dashboard above it."""
        while len(self.screen_stack) > 1 and not isinstance(self.screen, HomeScreen):
            self.pop_screen()
        if not isinstance(self.screen, HomeScreen):
            self.push_screen(HomeScreen(self.i18n))

    def action_next_theme(self) -> None:
        """Cycle to the next registered theme."""
        themes = sorted(self.available_themes)
        current = self.theme or DEFAULT_THEME
        try:
            idx = themes.index(current)
            next_theme = themes[(idx + 1) % len(themes)]
        except ValueError:
            next_theme = themes[0]
        self.theme = next_theme
        self.notify(f"Theme: {next_theme}", timeout=2)
