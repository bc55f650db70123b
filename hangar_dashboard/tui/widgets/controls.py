"""Start / stop / restart buttons."""

from __future__ import annotations

from typing import Any, Callable

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Button, Label, Static

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.constants import RELOAD_DELAY
from hangar_dashboard.dashboard.actions import ControlAction, ControlPanel
from hangar_dashboard.i18n import Translator
from hangar_dashboard.tui.events import ReloadRequested
from hangar_dashboard.tui.widgets.card import Card

_BUTTONS = (
    (ControlAction.START, "success"),
    (ControlAction.STOP, "error"),
    (ControlAction.RESTART, "warning"),
)


class ControlPanelCard(Card):
    """All three buttons are disabled while any action is in flight.

    Failures are not shown; they only reach the log file.
    """

    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        i18n: Translator,
        *,
        reload_delay: float = RELOAD_DELAY,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._i18n = i18n
        self.panel = ControlPanel(
            client,
            project_id,
            self._request_reload,
            reload_delay=reload_delay,
            schedule=self._schedule,
            on_state=self.refresh_state,
        )

    def compose(self) -> ComposeResult:
        yield Label(self._i18n.t("project_dashboard.card_title_controls"), classes="card-title")
        with Horizontal():
            for action, variant in _BUTTONS:
                yield Button(
                    self._i18n.t(f"project_dashboard.{action.value}_button"),
                    variant=variant,
                    id=f"btn-{action.value}",
                )
        yield Static("", id="controls-banner", classes="card-success")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if not button_id.startswith("btn-"):
            return
        action = ControlAction(button_id[len("btn-"):])
        self.run_worker(self.panel.run(action), name=f"control-{action.value}", exclusive=False)

    def refresh_state(self) -> None:
        for action, _ in _BUTTONS:
            self.query_one(f"#btn-{action.value}", Button).disabled = self.panel.in_flight
        key = self.panel.success_key
        self.query_one("#controls-banner", Static).update(self._i18n.t(key) if key else "")

    def _schedule(self, delay: float, callback: Callable[[], None]) -> None:
        self.set_timer(delay, callback)

    def _request_reload(self) -> None:
        self.post_message(ReloadRequested())
