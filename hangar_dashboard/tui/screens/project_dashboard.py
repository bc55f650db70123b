"""Per-project dashboard screen.

Hosts a :class:`~hangar_dashboard.dashboard.orchestrator.DashboardOrchestrator`
and renders its derived view.  The card body is mounted once, on the first
successful load; later reloads update the cards in place so their pollers
keep running.  Card visibility follows the caller's capabilities.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Vertical, VerticalScroll
from textual.widgets import Button, Label, Static

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.config.schema import HangarConfig
from hangar_dashboard.dashboard.orchestrator import (
    DashboardOrchestrator,
    ErrorView,
    LoadingView,
    ReadyView,
)
from hangar_dashboard.i18n import Translator
from hangar_dashboard.models import CurrentUser
from hangar_dashboard.tui.events import GoHome, ReloadRequested
from hangar_dashboard.tui.screens.base import HangarScreen
from hangar_dashboard.tui.widgets.card import Card
from hangar_dashboard.tui.widgets.controls import ControlPanelCard
from hangar_dashboard.tui.widgets.danger_zone import DangerZoneCard
from hangar_dashboard.tui.widgets.database_panel import DatabaseCard
from hangar_dashboard.tui.widgets.env_manager import EnvManagerCard
from hangar_dashboard.tui.widgets.image_update import ImageUpdateCard
from hangar_dashboard.tui.widgets.log_viewer import LogViewerCard
from hangar_dashboard.tui.widgets.metrics_panel import MetricsPanel
from hangar_dashboard.tui.widgets.participants import ParticipantsCard
from hangar_dashboard.tui.widgets.project_info import ProjectInfoCard

logger = logging.getLogger(__name__)


class ProjectDashboardScreen(HangarScreen):
    BINDINGS = [
        ("escape", "go_home", "Home"),
        ("r", "reload", "Reload"),
    ]

    DEFAULT_CSS = """
    ProjectDashboardScreen #dashboard-scroll {
        padding: 0 1;
    }
    ProjectDashboardScreen #dashboard-error {
        border: round $error;
    }
    """

    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        i18n: Translator,
        config: HangarConfig,
        user: Optional[CurrentUser],
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._client = client
        self._i18n = i18n
        self._config = config
        self._user = user
        self.orchestrator = DashboardOrchestrator(client, project_id)
        self._body_mounted = False
        self._error_shown = False
        self._render_lock = asyncio.Lock()

    def compose_content(self) -> ComposeResult:
        with VerticalScroll(id="dashboard-scroll"):
            yield Static(self._i18n.t("common.loading"), id="dashboard-loading")

    def on_mount(self) -> None:
        self.sub_title = f"{self._i18n.t('project_dashboard.title')} #{self.orchestrator.project_id}"
        self._start_load()

    # ── Reload cycle ────────────────────────────────────────────

    def on_reload_requested(self, message: ReloadRequested) -> None:
        message.stop()
        self.orchestrator.request_reload()
        self._start_load()

    def action_reload(self) -> None:
        self.post_message(ReloadRequested())

    def action_go_home(self) -> None:
        self.post_message(GoHome())

    def _start_load(self) -> None:
        # Not exclusive: overlapping reloads both land, last write wins.
        self.run_worker(self._load(), name="dashboard-load", exclusive=False)

    async def _load(self) -> None:
        await self.orchestrator.load()
        await self._render_view()

    async def _render_view(self) -> None:
        async with self._render_lock:
            view = self.orchestrator.view(self._user)
            if isinstance(view, LoadingView):
                return
            if isinstance(view, ErrorView):
                await self._show_error(view.message)
                return
            if not self._body_mounted:
                self._body_mounted = True
                await self._mount_body(view)
            await self._update_body(view)

    # ── Rendering ───────────────────────────────────────────────

    async def _mount_body(self, view: ReadyView) -> None:
        details = view.details
        project = details.project
        cfg = self._config
        app_name = cfg.links.github_app_name
        logger.debug("Mounting dashboard cards for project %s", project.id)
        scroll = self.query_one("#dashboard-scroll", VerticalScroll)
        await self.query_one("#dashboard-loading", Static).remove()
        body = Vertical(
            ProjectInfoCard(
                self._client,
                details,
                self._i18n,
                app_domain=cfg.links.app_domain,
                poll_interval=cfg.polling.status_interval,
                id="card-info",
            ),
            DatabaseCard(
                self._client,
                project.id,
                self._i18n,
                phpmyadmin_url=cfg.links.phpmyadmin_url,
                github_app_name=app_name,
                id="card-database",
            ),
            ControlPanelCard(
                self._client,
                project.id,
                self._i18n,
                reload_delay=cfg.polling.reload_delay,
                id="card-controls",
            ),
            LogViewerCard(self._client, project.id, self._i18n, id="card-logs"),
            MetricsPanel(
                self._client,
                project.id,
                self._i18n,
                poll_interval=cfg.polling.metrics_interval,
                id="card-metrics",
            ),
            ParticipantsCard(
                self._client,
                project.id,
                details.participants,
                self._i18n,
                github_app_name=app_name,
                id="card-participants",
            ),
            EnvManagerCard(
                self._client,
                project.id,
                project.env_vars,
                self._i18n,
                github_app_name=app_name,
                id="card-env",
            ),
            ImageUpdateCard(self._client, project, self._i18n, github_app_name=app_name, id="card-image"),
            DangerZoneCard(
                self._client,
                project.id,
                project.name,
                details.database is not None,
                self._i18n,
                id="card-danger",
            ),
            id="dashboard-body",
        )
        await scroll.mount(body)

    async def _update_body(self, view: ReadyView) -> None:
        details = view.details
        cards = view.cards
        visibility = {
            "#card-info": cards.info,
            "#card-database": cards.database,
            "#card-controls": cards.controls,
            "#card-logs": cards.logs,
            "#card-metrics": cards.metrics,
            "#card-participants": cards.participants,
            "#card-env": cards.env,
            "#card-image": cards.image,
            "#card-danger": cards.danger,
        }
        for selector, visible in visibility.items():
            self.query_one(selector, Card).display = visible

        self.query_one(ProjectInfoCard).update_details(details)
        await self.query_one(ParticipantsCard).update_participants(details.participants)
        self.query_one(DangerZoneCard).update_project(details.project.name, details.database is not None)
        await self.query_one(DatabaseCard).update_view(
            view.linkage,
            view.database_actions,
            details.database,
            view.personal_database,
        )

    async def _show_error(self, message: str) -> None:
        if self._error_shown:
            return
        self._error_shown = True
        # Unmounting the body cancels every poller it owns.
        for node in self.query("#dashboard-body, #dashboard-loading"):
            await node.remove()
        t = self._i18n.t
        card = Card(
            Label(t("project_dashboard.access_error_title"), classes="card-title"),
            Static(escape(t("project_dashboard.load_error_message", error=message))),
            Button(t("common.back_to_home"), variant="primary", id="btn-back-home"),
            id="dashboard-error",
        )
        await self.query_one("#dashboard-scroll", VerticalScroll).mount(card)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-back-home":
            self.post_message(GoHome())
