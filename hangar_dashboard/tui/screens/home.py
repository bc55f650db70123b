"""Home screen: open a project by id, the personal database, or the create form."""

from __future__ import annotations

from typing import Any, Optional

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label, Static

from hangar_dashboard.i18n import Translator
from hangar_dashboard.tui.events import OpenCreateProject, OpenDatabase, OpenProject
from hangar_dashboard.tui.screens.base import HangarScreen


def parse_project_id(text: str) -> Optional[int]:
    """Return the positive integer in *text*, or ``None``."""
    text = text.strip()
    if not text.isdigit():
        return None
    value = int(text)
    return value if value > 0 else None


class HomeScreen(HangarScreen):
    DEFAULT_CSS = """
    HomeScreen #home-panel {
        width: 72;
        height: auto;
        margin: 2 4;
        border: round $accent;
        padding: 1 2;
    }
    HomeScreen #home-title {
        text-style: bold;
        color: $primary;
    }
    HomeScreen #home-actions {
        height: auto;
        margin-top: 1;
    }
    HomeScreen #home-error {
        color: $error;
    }
    """

    def __init__(self, i18n: Translator, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._i18n = i18n

    def compose_content(self) -> ComposeResult:
        t = self._i18n.t
        with Vertical(id="home-panel"):
            yield Label(t("home.title"), id="home-title")
            yield Static(t("home.description"))
            yield Label(t("home.project_id_label"))
            yield Input(placeholder="42", id="project-id-input")
            with Horizontal(id="home-actions"):
                yield Button(t("home.open_project_button"), variant="primary", id="btn-open-project")
                yield Button(t("home.my_database_button"), id="btn-open-database")
                yield Button(t("home.create_project_button"), id="btn-create-project")
            yield Static("", id="home-error")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "project-id-input":
            self._open_project()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-open-project":
            self._open_project()
        elif event.button.id == "btn-open-database":
            self.post_message(OpenDatabase())
        elif event.button.id == "btn-create-project":
            self.post_message(OpenCreateProject())

    def _open_project(self) -> None:
        raw = self.query_one("#project-id-input", Input).value
        project_id = parse_project_id(raw)
        error = self.query_one("#home-error", Static)
        if project_id is None:
            error.update(self._i18n.t("home.invalid_project_id"))
            return
        error.update("")
        self.post_message(OpenProject(project_id))
