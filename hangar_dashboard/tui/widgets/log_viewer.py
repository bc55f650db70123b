"""On-demand container log viewer."""

from __future__ import annotations

from typing import Any, Dict

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Button, Label, Static

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.dashboard.actions import LogViewer
from hangar_dashboard.dashboard.logs import LogLevel, LogLine
from hangar_dashboard.i18n import Translator
from hangar_dashboard.tui.widgets.card import Card

_LEVEL_COLORS: Dict[LogLevel, str] = {
    LogLevel.ERROR: "red",
    LogLevel.WARN: "yellow",
    LogLevel.INFO: "default",
}


def line_markup(line: LogLine) -> str:
    color = _LEVEL_COLORS[line.level]
    message = f"[{color}]{escape(line.message)}[/{color}]"
    if line.timestamp:
        return f"[dim]{escape(line.display_timestamp)}[/dim] {message}"
    return message


class LogViewerCard(Card):
    DEFAULT_CSS = """
    LogViewerCard #log-scroll {
        height: 20;
        border: solid $panel;
    }
    """

    def __init__(self, client: ApiClient, project_id: int, i18n: Translator, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._i18n = i18n
        self.viewer = LogViewer(client, project_id, i18n, on_state=self.refresh_state)

    def compose(self) -> ComposeResult:
        yield Label(self._i18n.t("project_dashboard.card_title_logs"), classes="card-title")
        yield Button(self._i18n.t("project_dashboard.fetch_logs_button"), id="btn-fetch-logs")
        with VerticalScroll(id="log-scroll"):
            yield Static("", id="log-body")

    def on_mount(self) -> None:
        self.refresh_state()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-fetch-logs":
            self.run_worker(self.viewer.fetch(), name="fetch-logs", exclusive=True)

    def refresh_state(self) -> None:
        viewer = self.viewer
        button = self.query_one("#btn-fetch-logs", Button)
        button.disabled = viewer.is_loading
        button.label = self._i18n.t(
            "project_dashboard.fetch_logs_loading"
            if viewer.is_loading
            else "project_dashboard.fetch_logs_button"
        )
        body = self.query_one("#log-body", Static)
        if viewer.error is not None:
            body.update(f"[red]{escape(viewer.error)}[/red]")
        elif viewer.placeholder_key is not None:
            body.update(f"[dim]{escape(self._i18n.t(viewer.placeholder_key))}[/dim]")
        else:
            body.update("\n".join(line_markup(line) for line in viewer.lines))
