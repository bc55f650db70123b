"""Controllers behind the mutating dashboard cards.

Each controller owns the local state cells of one card (in-flight flag,
inline error, success banner, input buffers) and talks to the API.  On
success it calls the shared ``on_update`` notifier, which asks the
orchestrator for a full reload; it never patches project data itself.
``on_state`` is called whenever a state cell changes so the widget can
re-render.

Confirmation is two-phase: widgets show ``*_confirmation`` text in a modal
and only call the matching coroutine once the user acknowledges.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.constants import RELOAD_DELAY
from hangar_dashboard.dashboard.env_vars import env_to_text, parse_env_text
from hangar_dashboard.dashboard.logs import LogLine, parse_logs
from hangar_dashboard.errors import ApiError
from hangar_dashboard.i18n import Translator
from hangar_dashboard.models import DatabaseDetails, DeployPayload, OwnedProject, Project

logger = logging.getLogger(__name__)

ReloadNotifier = Callable[[], None]
Scheduler = Callable[[float, Callable[[], None]], Any]


def _noop() -> None:
    pass


def call_later(delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
    """Default :data:`Scheduler`: run *callback* on the event loop after *delay*."""
    return asyncio.get_running_loop().call_later(delay, callback)


class _CardController:
    def __init__(self, on_state: Optional[Callable[[], None]] = None) -> None:
        self._on_state = on_state or _noop

    def _changed(self) -> None:
        self._on_state()


# ── Controls ─────────────────────────────────────────────────────────────


class ControlAction(str, Enum):
    START = "start"
    STOP = "stop"
    RESTART = "restart"


class ControlPanel(_CardController):
    """Start / stop / restart with one shared in-flight flag.

    While any action runs, all three are refused.  Success sets a banner and
    schedules the reload notifier after ``reload_delay`` so the backend has
    time to reflect the new state.  Failures are logged only.
    """

    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        on_update: ReloadNotifier,
        *,
        reload_delay: float = RELOAD_DELAY,
        schedule: Scheduler = call_later,
        on_state: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__(on_state)
        self.project_id = project_id
        self.in_flight = False
        self.success_action: Optional[ControlAction] = None
        self._client = client
        self._on_update = on_update
        self._reload_delay = reload_delay
        self._schedule = schedule

    @property
    def success_key(self) -> Optional[str]:
        if self.success_action is None:
            return None
        return f"project_dashboard.{self.success_action.value}_success"

    async def run(self, action: ControlAction) -> bool:
        if self.in_flight:
            return False
        self.in_flight = True
        self.success_action = None
        self._changed()
        try:
            if action is ControlAction.START:
                await self._client.start_project(self.project_id)
            elif action is ControlAction.STOP:
                await self._client.stop_project(self.project_id)
            else:
                await self._client.restart_project(self.project_id)
        except ApiError as exc:
            logger.error("Control action '%s' failed for project %s: %s", action.value, self.project_id, exc)
            return False
        else:
            self.success_action = action
            self._schedule(self._reload_delay, self._on_update)
            return True
        finally:
            self.in_flight = False
            self._changed()


# ── Logs ─────────────────────────────────────────────────────────────────


class LogViewer(_CardController):
    """On-demand log fetch.

    ``logs is None`` means never fetched (or the last fetch failed);
    ``logs == ""`` means the container printed nothing.
    """

    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        i18n: Translator,
        on_state: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__(on_state)
        self.project_id = project_id
        self.logs: Optional[str] = None
        self.error: Optional[str] = None
        self.is_loading = False
        self._client = client
        self._i18n = i18n

    @property
    def lines(self) -> List[LogLine]:
        return parse_logs(self.logs or "")

    @property
    def placeholder_key(self) -> Optional[str]:
        """Placeholder to show instead of lines, if any."""
        if self.error is not None:
            return None
        if self.logs is None:
            return "project_dashboard.logs_placeholder"
        if self.logs == "":
            return "project_dashboard.logs_empty"
        return None

    async def fetch(self) -> None:
        self.is_loading = True
        self.error = None
        self._changed()
        try:
            self.logs = await self._client.get_project_logs(self.project_id)
        except ApiError as exc:
            self.error = self._i18n.t("project_dashboard.logs_error", error=str(exc))
            self.logs = None
        finally:
            self.is_loading = False
            self._changed()


# ── Participants ─────────────────────────────────────────────────────────


class ParticipantManager(_CardController):
    """Add and remove project participants.

    Add failures are shown inline; remove failures are only logged.
    """

    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        on_update: ReloadNotifier,
        i18n: Translator,
        on_state: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__(on_state)
        self.project_id = project_id
        self.new_participant = ""
        self.is_loading = False
        self.error: Optional[ApiError] = None
        self._client = client
        self._on_update = on_update
        self._i18n = i18n

    def removal_confirmation(self, login: str) -> str:
        return self._i18n.t("project_dashboard.confirm_remove_participant", name=login)

    async def add(self) -> bool:
        login = self.new_participant.strip()
        if not login:
            return False
        self.is_loading = True
        self.error = None
        self._changed()
        try:
            await self._client.add_participant(self.project_id, login)
        except ApiError as exc:
            self.error = exc
            return False
        else:
            self.new_participant = ""
            self._on_update()
            return True
        finally:
            self.is_loading = False
            self._changed()

    async def remove(self, login: str) -> bool:
        try:
            await self._client.remove_participant(self.project_id, login)
        except ApiError as exc:
            logger.error("Failed to remove participant '%s' from project %s: %s", login, self.project_id, exc)
            return False
        self._on_update()
        return True


# ── Image update / rebuild ───────────────────────────────────────────────


@dataclass(frozen=True)
class FormLabels:
    title: str
    description: str
    button: str
    button_loading: str
    confirm: str


_REBUILD_LABELS = FormLabels(
    title="project_dashboard.card_title_rebuild",
    description="project_dashboard.rebuild_description",
    button="project_dashboard.rebuild_button",
    button_loading="project_dashboard.rebuild_button_loading",
    confirm="project_dashboard.confirm_rebuild",
)

_UPDATE_IMAGE_LABELS = FormLabels(
    title="project_dashboard.card_title_update_image",
    description="project_dashboard.update_image_description",
    button="project_dashboard.update_image_button",
    button_loading="project_dashboard.update_image_button_loading",
    confirm="project_dashboard.confirm_update_image",
)


class ImageUpdateForm(_CardController):
    """Rebuild-from-source or update-image, depending on the project source.

    GitHub projects always rebuild from their existing repository and have
    no input; direct-image projects take a new image URL.
    """

    def __init__(
        self,
        client: ApiClient,
        project: Project,
        on_update: ReloadNotifier,
        i18n: Translator,
        on_state: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__(on_state)
        self.project_id = project.id
        self.project_name = project.name
        self.is_github = project.is_github
        self.new_image_url = ""
        self.is_updating = False
        self.error: Optional[ApiError] = None
        self._client = client
        self._on_update = on_update
        self._i18n = i18n

    @property
    def labels(self) -> FormLabels:
        return _REBUILD_LABELS if self.is_github else _UPDATE_IMAGE_LABELS

    def confirmation(self) -> str:
        return self._i18n.t(self.labels.confirm, name=self.project_name)

    def can_submit(self) -> bool:
        if self.is_updating:
            return False
        return self.is_github or bool(self.new_image_url.strip())

    async def submit(self) -> bool:
        if not self.can_submit():
            return False
        self.is_updating = True
        self.error = None
        self._changed()
        try:
            if self.is_github:
                await self._client.rebuild_project(self.project_id)
            else:
                await self._client.update_project_image(self.project_id, self.new_image_url.strip())
        except ApiError as exc:
            self.error = exc
            return False
        else:
            self.new_image_url = ""
            self._on_update()
            return True
        finally:
            self.is_updating = False
            self._changed()


# ── Environment variables ────────────────────────────────────────────────


class EnvManager(_CardController):
    """Free-text editor for the project's environment variables.

    The buffer is seeded once; later reloads do not overwrite edits.
    """

    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        current_env_vars: Optional[dict],
        on_update: ReloadNotifier,
        on_state: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__(on_state)
        self.project_id = project_id
        self.text = env_to_text(current_env_vars)
        self.is_loading = False
        self.success = False
        self.error: Optional[ApiError] = None
        self._client = client
        self._on_update = on_update

    def edit(self, text: str) -> None:
        self.text = text
        if self.success:
            self.success = False
            self._changed()

    async def save(self) -> bool:
        env_vars = parse_env_text(self.text)
        self.is_loading = True
        self.error = None
        self.success = False
        self._changed()
        try:
            await self._client.update_env_vars(self.project_id, env_vars)
        except ApiError as exc:
            self.error = exc
            return False
        else:
            self.success = True
            self._on_update()
            return True
        finally:
            self.is_loading = False
            self._changed()


# ── Database linkage ─────────────────────────────────────────────────────


class DatabaseManager(_CardController):
    """Transitions of the database linkage state machine.

    Only *create & link* reports errors inline; the other transitions log
    failures and leave the card unchanged.
    """

    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        on_update: ReloadNotifier,
        i18n: Translator,
        on_state: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__(on_state)
        self.project_id = project_id
        self.is_loading = False
        self.error: Optional[ApiError] = None
        self._client = client
        self._on_update = on_update
        self._i18n = i18n

    def delete_confirmation(self) -> str:
        return self._i18n.t("database.confirm_delete")

    async def unlink(self) -> bool:
        try:
            await self._client.unlink_database_from_project(self.project_id)
        except ApiError as exc:
            logger.warning("Unlinking database from project %s failed: %s", self.project_id, exc)
            return False
        self._on_update()
        return True

    async def delete(self) -> bool:
        try:
            await self._client.delete_linked_database(self.project_id)
        except ApiError as exc:
            logger.warning("Deleting database of project %s failed: %s", self.project_id, exc)
            return False
        self._on_update()
        return True

    async def link_existing(self, database: DatabaseDetails) -> bool:
        try:
            await self._client.link_database_to_project(self.project_id, database.id)
        except ApiError as exc:
            logger.warning(
                "Linking database %s to project %s failed: %s", database.id, self.project_id, exc
            )
            return False
        self._on_update()
        return True

    async def create_and_link(self) -> bool:
        """Create a personal database, then link it.

        If the link step fails the new database stays unlinked and
        ``LINK_FAILED`` is reported.
        """
        self.is_loading = True
        self.error = None
        self._changed()
        try:
            database = await self._client.create_database()
        except ApiError as exc:
            self.error = exc
            return False
        else:
            try:
                await self._client.link_database_to_project(self.project_id, database.id)
            except ApiError as exc:
                logger.warning(
                    "Database %s created but linking to project %s failed: %s",
                    database.id,
                    self.project_id,
                    exc,
                )
                self.error = ApiError("LINK_FAILED")
                return False
            self._on_update()
            return True
        finally:
            self.is_loading = False
            self._changed()


# ── Danger zone ──────────────────────────────────────────────────────────


class DangerZone(_CardController):
    """Irreversible project deletion."""

    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        i18n: Translator,
        on_deleted: Callable[[], None],
        on_state: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__(on_state)
        self.project_id = project_id
        self.error: Optional[str] = None
        self._client = client
        self._i18n = i18n
        self._on_deleted = on_deleted

    def confirmation(self, project_name: str, has_linked_database: bool) -> str:
        message = self._i18n.t("project_dashboard.confirm_delete", name=project_name)
        if has_linked_database:
            message += "\n\n" + self._i18n.t("project_dashboard.confirm_delete_db_warning")
        return message

    async def delete(self) -> bool:
        try:
            await self._client.purge_project(self.project_id)
        except ApiError as exc:
            logger.error("Deleting project %s failed: %s", self.project_id, exc)
            self.error = self._i18n.t("errors.DELETE_FAILED")
            self._changed()
            return False
        self._on_deleted()
        return True


# ── Personal database dashboard ──────────────────────────────────────────


class PersonalDatabase(_CardController):
    """State of the standalone personal-database screen."""

    def __init__(
        self,
        client: ApiClient,
        on_state: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__(on_state)
        self.database: Optional[DatabaseDetails] = None
        self.projects: List[OwnedProject] = []
        self.error: Optional[ApiError] = None
        self._client = client

    async def load(self) -> None:
        try:
            self.database = await self._client.get_my_database()
        except ApiError as exc:
            self.error = exc
        try:
            self.projects = await self._client.get_owned_projects()
        except ApiError as exc:
            # Linking is simply unavailable without the project list.
            logger.info("Could not list owned projects: %s", exc)
        self._changed()

    async def link(self, project_id: int) -> bool:
        if self.database is None:
            return False
        try:
            await self._client.link_database_to_project(project_id, self.database.id)
        except ApiError as exc:
            logger.warning("Linking database %s to project %s failed: %s", self.database.id, project_id, exc)
            return False
        return True

    async def delete(self) -> bool:
        if self.database is None:
            return False
        try:
            await self._client.delete_database(self.database.id)
        except ApiError as exc:
            logger.warning("Deleting database %s failed: %s", self.database.id, exc)
            return False
        return True


# ── Project creation ─────────────────────────────────────────────────────


class DeployMethod(str, Enum):
    GITHUB = "github"
    DIRECT = "direct"
    DATABASE = "database"


_PROJECT_NAME_RE = re.compile(r"^[A-Za-z0-9-]+$")


def parse_participants(text: str) -> List[str]:
    """Comma-separated logins, trimmed, without blanks or duplicates."""
    logins: List[str] = []
    for item in text.split(","):
        login = item.strip()
        if login and login not in logins:
            logins.append(login)
    return logins


def _blank_to_none(value: str) -> Optional[str]:
    value = value.strip()
    return value or None


class ProjectCreator(_CardController):
    """Form state of the create-project screen.

    The ``GITHUB`` and ``DIRECT`` methods deploy a new project; ``DATABASE``
    only creates the caller's personal database.  After a successful submit
    exactly one of :attr:`created_project_id` / :attr:`created_database` is
    set so the screen can navigate to it.
    """

    def __init__(
        self,
        client: ApiClient,
        owner_login: Optional[str],
        on_state: Optional[Callable[[], None]] = None,
    ) -> None:
        super().__init__(on_state)
        self.method = DeployMethod.GITHUB
        self.project_name = ""
        self.participants = ""
        self.github_repo_url = ""
        self.github_branch = ""
        self.github_root_dir = ""
        self.image_url = ""
        self.volume_path = ""
        self.env_text = ""
        self.create_database = False
        self.is_loading = False
        self.error: Optional[ApiError] = None
        self.created_project_id: Optional[int] = None
        self.created_database: Optional[DatabaseDetails] = None
        self._client = client
        self._owner_login = owner_login

    def select_method(self, method: DeployMethod) -> None:
        self.method = method
        self.error = None
        self._changed()

    def missing_fields(self) -> List[str]:
        """Names of required fields left blank for the current method."""
        if self.method is DeployMethod.DATABASE:
            return []
        missing = []
        if not self.project_name.strip():
            missing.append("project_name")
        if self.method is DeployMethod.GITHUB and not self.github_repo_url.strip():
            missing.append("github_repo_url")
        if self.method is DeployMethod.DIRECT and not self.image_url.strip():
            missing.append("image_url")
        return missing

    def can_submit(self) -> bool:
        return not self.is_loading and not self.missing_fields()

    def build_payload(self) -> DeployPayload:
        """Validate the form and build the deploy body.

        Raises :class:`ApiError` (``OWNER_CANNOT_BE_PARTICIPANT`` or
        ``INVALID_PROJECT_NAME``) without contacting the server.
        """
        participants = parse_participants(self.participants)
        if self._owner_login is not None and self._owner_login in participants:
            raise ApiError("OWNER_CANNOT_BE_PARTICIPANT")
        name = self.project_name.strip()
        if not _PROJECT_NAME_RE.match(name):
            raise ApiError("INVALID_PROJECT_NAME")

        payload = DeployPayload(
            project_name=name,
            participants=participants,
            env_vars=parse_env_text(self.env_text) or None,
            create_database=True if self.create_database else None,
        )
        if self.method is DeployMethod.GITHUB:
            payload.github_repo_url = self.github_repo_url.strip()
            payload.github_branch = _blank_to_none(self.github_branch)
            payload.github_root_dir = _blank_to_none(self.github_root_dir)
        else:
            payload.image_url = self.image_url.strip()
            payload.persistent_volume_path = _blank_to_none(self.volume_path)
        return payload

    async def submit(self) -> bool:
        if not self.can_submit():
            return False
        self.is_loading = True
        self.error = None
        self.created_project_id = None
        self.created_database = None
        self._changed()
        try:
            if self.method is DeployMethod.DATABASE:
                self.created_database = await self._client.create_database()
                logger.info("Created personal database %s", self.created_database.id)
            else:
                details = await self._client.deploy_project(self.build_payload())
                self.created_project_id = details.project.id
                logger.info("Deployed project '%s' as #%s", details.project.name, details.project.id)
        except ApiError as exc:
            self.error = exc
            return False
        else:
            return True
        finally:
            self.is_loading = False
            self._changed()
