"""Create-project screen.

Three methods share one form: deploy from a GitHub repository, deploy a
prebuilt Docker image, or only create the caller's personal database.  On
success the app navigates to the new project (or database) dashboard.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import Button, Input, Label, Static, Switch, TextArea

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.constants import DEFAULT_GITHUB_APP_NAME
from hangar_dashboard.dashboard.actions import DeployMethod, ProjectCreator
from hangar_dashboard.display.logging_config import secret_redaction_filter
from hangar_dashboard.i18n import Translator
from hangar_dashboard.tui.events import GoHome, OpenDatabase, OpenProject
from hangar_dashboard.tui.screens.base import HangarScreen
from hangar_dashboard.tui.widgets.error_message import ErrorMessage

_METHOD_BUTTONS: Dict[str, DeployMethod] = {
    "btn-method-github": DeployMethod.GITHUB,
    "btn-method-direct": DeployMethod.DIRECT,
    "btn-method-database": DeployMethod.DATABASE,
}

# Input id -> ProjectCreator attribute
_INPUT_FIELDS: Dict[str, str] = {
    "create-name": "project_name",
    "create-repo-url": "github_repo_url",
    "create-branch": "github_branch",
    "create-root-dir": "github_root_dir",
    "create-image-url": "image_url",
    "create-volume-path": "volume_path",
    "create-participants": "participants",
}


class CreateProjectScreen(HangarScreen):
    BINDINGS = [
        ("escape", "go_home", "Home"),
    ]

    DEFAULT_CSS = """
    CreateProjectScreen #create-panel {
        margin: 1 2;
        border: round $accent;
        padding: 1 2;
    }
    CreateProjectScreen #create-title {
        text-style: bold;
        color: $primary;
    }
    CreateProjectScreen Horizontal {
        height: auto;
    }
    CreateProjectScreen Vertical {
        height: auto;
    }
    CreateProjectScreen .create-muted {
        color: $text-muted;
    }
    CreateProjectScreen #create-missing {
        color: $error;
    }
    CreateProjectScreen #create-env {
        height: 6;
    }
    CreateProjectScreen #create-db-label {
        padding: 1 1;
    }
    """

    def __init__(
        self,
        client: ApiClient,
        i18n: Translator,
        owner_login: Optional[str],
        *,
        github_app_name: str = DEFAULT_GITHUB_APP_NAME,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._i18n = i18n
        self._github_app_name = github_app_name
        self.creator = ProjectCreator(client, owner_login, on_state=self.refresh_state)

    def compose_content(self) -> ComposeResult:
        t = self._i18n.t
        with VerticalScroll(id="create-panel"):
            yield Label(t("create_project.title"), id="create-title")
            with Horizontal(id="create-methods"):
                yield Button(t("create_project.github_tab"), id="btn-method-github")
                yield Button(t("create_project.direct_tab"), id="btn-method-direct")
                yield Button(t("create_project.database_tab"), id="btn-method-database")
            yield Static("", id="create-description", classes="create-muted")

            with Vertical(id="project-fields"):
                yield Label(t("create_project.name_label"))
                yield Input(placeholder=t("create_project.name_placeholder"), id="create-name")
                yield Static(t("create_project.name_help"), classes="create-muted")

                with Vertical(id="github-fields"):
                    yield Label(t("create_project.github_repo_url_label"))
                    yield Input(
                        placeholder=t("create_project.github_repo_url_placeholder"),
                        id="create-repo-url",
                    )
                    yield Label(t("create_project.github_branch_label"))
                    yield Input(placeholder="main", id="create-branch")
                    yield Static(t("create_project.github_branch_help"), classes="create-muted")
                    yield Label(t("create_project.github_root_dir_label"))
                    yield Input(placeholder="/", id="create-root-dir")
                    yield Static(t("create_project.github_root_dir_help"), classes="create-muted")

                with Vertical(id="direct-fields"):
                    yield Label(t("create_project.image_label"))
                    yield Input(placeholder=t("create_project.image_placeholder"), id="create-image-url")
                    yield Label(t("create_project.volume_path_label"))
                    yield Input(placeholder="/data/uploads", id="create-volume-path")
                    yield Static(t("create_project.volume_path_help"), classes="create-muted")

                yield Label(t("create_project.participants_label"))
                yield Input(placeholder=t("create_project.participants_placeholder"), id="create-participants")
                yield Static(t("create_project.participants_help"), classes="create-muted")
                yield Label(t("create_project.env_vars_label"))
                yield TextArea("", id="create-env")
                yield Static(t("create_project.env_vars_help"), classes="create-muted")
                with Horizontal(id="create-db-row"):
                    yield Switch(value=False, id="create-db")
                    yield Label(t("create_project.create_db_checkbox"), id="create-db-label")

            yield ErrorMessage(self._i18n, self._github_app_name, id="create-error")
            yield Static("", id="create-missing")
            yield Button(t("create_project.submit_button"), variant="primary", id="btn-create-submit")

    def on_mount(self) -> None:
        self.sub_title = self._i18n.t("create_project.title")
        self.refresh_state()

    # ── Form events ─────────────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        field = _INPUT_FIELDS.get(event.input.id or "")
        if field is not None:
            setattr(self.creator, field, event.value)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if event.text_area.id == "create-env":
            self.creator.env_text = event.text_area.text

    def on_switch_changed(self, event: Switch.Changed) -> None:
        if event.switch.id == "create-db":
            self.creator.create_database = event.value

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id in _METHOD_BUTTONS:
            self.creator.select_method(_METHOD_BUTTONS[button_id])
        elif button_id == "btn-create-submit":
            self._submit()

    def action_go_home(self) -> None:
        self.post_message(GoHome())

    # ── Submit ──────────────────────────────────────────────────

    def _submit(self) -> None:
        missing = self.query_one("#create-missing", Static)
        if self.creator.missing_fields():
            missing.update(self._i18n.t("create_project.missing_fields"))
            return
        missing.update("")
        self.run_worker(self._deploy(), name="create-project", exclusive=True)

    async def _deploy(self) -> None:
        creator = self.creator
        if not await creator.submit():
            return
        if creator.created_database is not None:
            secret_redaction_filter.register(creator.created_database.password)
            self.post_message(OpenDatabase())
        elif creator.created_project_id is not None:
            self.post_message(OpenProject(creator.created_project_id))

    # ── Rendering ───────────────────────────────────────────────

    def refresh_state(self) -> None:
        t = self._i18n.t
        creator = self.creator
        method = creator.method
        for button_id, button_method in _METHOD_BUTTONS.items():
            button = self.query_one(f"#{button_id}", Button)
            button.variant = "primary" if button_method is method else "default"
        self.query_one("#create-description", Static).update(t(f"create_project.description_{method.value}"))
        self.query_one("#project-fields").display = method is not DeployMethod.DATABASE
        self.query_one("#github-fields").display = method is DeployMethod.GITHUB
        self.query_one("#direct-fields").display = method is DeployMethod.DIRECT

        submit = self.query_one("#btn-create-submit", Button)
        submit.disabled = creator.is_loading
        if creator.is_loading:
            submit.label = t("create_project.submit_button_loading")
        elif method is DeployMethod.DATABASE:
            submit.label = t("database.create_button")
        else:
            submit.label = t("create_project.submit_button")
        self.query_one("#create-error", ErrorMessage).show_error(creator.error)
