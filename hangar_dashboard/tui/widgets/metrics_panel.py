"""Live CPU / memory gauges for one project."""

from __future__ import annotations

from typing import Any, Optional

from textual.app import ComposeResult
from textual.widgets import Label, ProgressBar, Static

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.constants import METRICS_POLL_INTERVAL
from hangar_dashboard.dashboard.polling import MetricsPoller
from hangar_dashboard.i18n import Translator
from hangar_dashboard.models import ProjectMetrics
from hangar_dashboard.tui.widgets.card import Card


def memory_percent(metrics: ProjectMetrics) -> float:
    if metrics.memory_limit <= 0:
        return 0.0
    return min(100.0, metrics.memory_usage / metrics.memory_limit * 100.0)


class MetricsPanel(Card):
    """CPU and memory usage, refreshed by a :class:`MetricsPoller`.

    Shows the loading text whenever no sample is available, including
    after a failed fetch.
    """

    DEFAULT_CSS = """
    MetricsPanel ProgressBar {
        margin-bottom: 1;
    }
    """

    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        i18n: Translator,
        *,
        poll_interval: float = METRICS_POLL_INTERVAL,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._i18n = i18n
        self._poller: Optional[MetricsPoller] = MetricsPoller(
            client, project_id, self._on_metrics, poll_interval
        )

    def compose(self) -> ComposeResult:
        yield Label(self._i18n.t("project_dashboard.card_title_metrics"), classes="card-title")
        yield Static(self._i18n.t("common.loading"), id="metrics-loading", classes="card-muted")
        yield Static("CPU", id="cpu-label")
        yield ProgressBar(total=100, show_eta=False, id="cpu-bar")
        yield Static("RAM", id="mem-label")
        yield ProgressBar(total=100, show_eta=False, id="mem-bar")

    def on_mount(self) -> None:
        self._show(None)
        if self._poller is not None:
            self._poller.start()

    def on_unmount(self) -> None:
        if self._poller is not None:
            self._poller.cancel()
            self._poller = None

    def _on_metrics(self, metrics: Optional[ProjectMetrics]) -> None:
        self._show(metrics)

    def _show(self, metrics: Optional[ProjectMetrics]) -> None:
        loading = metrics is None
        self.query_one("#metrics-loading", Static).display = loading
        for widget_id in ("#cpu-label", "#cpu-bar", "#mem-label", "#mem-bar"):
            self.query_one(widget_id).display = not loading
        if metrics is None:
            return
        self.query_one("#cpu-label", Static).update(f"CPU  {metrics.cpu_usage:.1f}%")
        self.query_one("#cpu-bar", ProgressBar).update(progress=min(100.0, metrics.cpu_usage))
        self.query_one("#mem-label", Static).update(
            f"RAM  {metrics.memory_usage:.0f} / {metrics.memory_limit:.0f} MiB"
        )
        self.query_one("#mem-bar", ProgressBar).update(progress=memory_percent(metrics))
