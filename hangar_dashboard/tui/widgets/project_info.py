"""Project info card: run-state badge plus the static project record."""

from __future__ import annotations

from typing import Any, List, Optional

from rich.markup import escape
from textual.app import ComposeResult
from textual.widgets import Label, Static

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.constants import DEFAULT_APP_DOMAIN, STATUS_POLL_INTERVAL
from hangar_dashboard.dashboard.polling import StatusPoller
from hangar_dashboard.i18n import Translator
from hangar_dashboard.models import GitHubSource, ProjectDetails
from hangar_dashboard.tui.widgets.card import Card
from hangar_dashboard.tui.widgets.status_badge import StatusBadge


def app_url(project_name: str, app_domain: str = DEFAULT_APP_DOMAIN) -> str:
    """Public URL under which the project is served."""
    return f"https://{project_name}.{app_domain}"


def info_lines(details: ProjectDetails, i18n: Translator, app_domain: str = DEFAULT_APP_DOMAIN) -> List[str]:
    project = details.project
    lines = [f"[b]{i18n.t('common.owner')}:[/b] {escape(project.owner)}"]
    if details.participants:
        names = ", ".join(escape(p) for p in details.participants)
        lines.append(f"[b]{i18n.t('project_dashboard.participants_list_label')}[/b] {names}")
    if project.created_at:
        lines.append(i18n.t("common.created_on", date=project.created_at.split("T")[0]))
    lines.append(f"[b]{i18n.t('common.source_url')}:[/b] {escape(project.source_url)}")
    source = project.source_descriptor
    if isinstance(source, GitHubSource):
        if source.branch:
            lines.append(f"[b]{i18n.t('project_dashboard.github_branch_label')}:[/b] {escape(source.branch)}")
        if source.root_dir:
            lines.append(f"[b]{i18n.t('project_dashboard.github_root_dir_label')}:[/b] {escape(source.root_dir)}")
    lines.append(f"[b]{i18n.t('common.deployed_image')}:[/b] {escape(project.deployed_image_tag)}")
    if project.persistent_volume_path:
        lines.append(
            f"[b]{i18n.t('project_dashboard.persistent_volume_label')}:[/b] "
            f"{escape(project.persistent_volume_path)}"
        )
    url = app_url(project.name, app_domain)
    lines.append(f"[b]{i18n.t('project_dashboard.visit_app_button')}:[/b] [link={url}]{url}[/link]")
    return lines


class ProjectInfoCard(Card):
    """Owns the status poller for its project; the poller dies with the card."""

    def __init__(
        self,
        client: ApiClient,
        details: ProjectDetails,
        i18n: Translator,
        *,
        app_domain: str = DEFAULT_APP_DOMAIN,
        poll_interval: float = STATUS_POLL_INTERVAL,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._details = details
        self._i18n = i18n
        self._app_domain = app_domain
        self._poller: Optional[StatusPoller] = StatusPoller(
            client, details.project.id, self._on_status, poll_interval
        )

    def compose(self) -> ComposeResult:
        yield Label(escape(self._details.project.name), classes="card-title")
        yield StatusBadge(self._i18n, id="status-badge")
        yield Static(self._render_info(), id="project-info-body")

    def on_mount(self) -> None:
        if self._poller is not None:
            self._poller.start()

    def on_unmount(self) -> None:
        if self._poller is not None:
            self._poller.cancel()
            self._poller = None

    def update_details(self, details: ProjectDetails) -> None:
        self._details = details
        self.query_one("#project-info-body", Static).update(self._render_info())

    def _render_info(self) -> str:
        return "\n".join(info_lines(self._details, self._i18n, self._app_domain))

    def _on_status(self, status: Optional[str]) -> None:
        self.query_one("#status-badge", StatusBadge).set_status(status)
