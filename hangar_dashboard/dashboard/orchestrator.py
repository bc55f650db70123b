"""Project dashboard orchestration.

:class:`DashboardOrchestrator` owns the project-wide state cells and
refetches them on every reload tick.  What the screen shows is a pure
function of those cells and the caller identity, see :func:`derive_view`.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple, Union

from hangar_dashboard.api_client import ApiClient
from hangar_dashboard.dashboard.linkage import (
    DatabaseAction,
    LinkageState,
    available_actions,
    linkage_state,
)
from hangar_dashboard.dashboard.permissions import Capabilities, compute_capabilities
from hangar_dashboard.errors import ApiError
from hangar_dashboard.models import CurrentUser, DatabaseDetails, ProjectDetails

logger = logging.getLogger(__name__)


@dataclass
class DashboardState:
    """State cells of one project dashboard.

    ``personal_database_loaded`` separates "not fetched yet" from "the
    caller has no personal database" (``personal_database is None``).
    """

    details: Optional[ProjectDetails] = None
    personal_database_loaded: bool = False
    personal_database: Optional[DatabaseDetails] = None
    load_error: Optional[str] = None
    reload_counter: int = 0


# ── Derived views ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CardVisibility:
    info: bool = True
    database: bool = True
    logs: bool = True
    metrics: bool = True
    controls: bool = False
    participants: bool = False
    env: bool = False
    image: bool = False
    danger: bool = False


@dataclass(frozen=True)
class LoadingView:
    pass


@dataclass(frozen=True)
class ErrorView:
    message: str


@dataclass(frozen=True)
class ReadyView:
    details: ProjectDetails
    capabilities: Capabilities
    cards: CardVisibility
    # None until the personal database fetch settles (and nothing is linked).
    linkage: Optional[LinkageState]
    database_actions: Tuple[DatabaseAction, ...] = field(default_factory=tuple)
    personal_database: Optional[DatabaseDetails] = None


DashboardView = Union[LoadingView, ErrorView, ReadyView]


def card_visibility(capabilities: Capabilities) -> CardVisibility:
    weak = capabilities.can_control_weak
    strong = capabilities.can_control_strong
    return CardVisibility(
        controls=weak,
        participants=strong,
        env=weak,
        image=weak,
        danger=strong,
    )


def derive_view(state: DashboardState, user: Optional[CurrentUser]) -> DashboardView:
    """Compose the dashboard view from *state* as seen by *user*.

    A load error wins over stale details: once a reload fails the whole
    dashboard is replaced by the error card.
    """
    if state.load_error is not None:
        return ErrorView(state.load_error)
    details = state.details
    if details is None:
        return LoadingView()

    caps = compute_capabilities(user, details.project.owner, details.participants)
    linkage: Optional[LinkageState]
    if details.database is None and not state.personal_database_loaded:
        linkage = None
    else:
        linkage = linkage_state(details, state.personal_database)
    actions = available_actions(linkage, caps.can_control_strong) if linkage is not None else ()
    return ReadyView(
        details=details,
        capabilities=caps,
        cards=card_visibility(caps),
        linkage=linkage,
        database_actions=actions,
        personal_database=state.personal_database,
    )


# ── Orchestrator ─────────────────────────────────────────────────────────


class DashboardOrchestrator:
    """Fetches and owns the project-wide cells for one project id.

    Children never write these cells; they call :meth:`request_reload`
    (through the screen's reload notifier) and the next :meth:`load`
    replaces everything.  Overlapping loads are not deduplicated: each cell
    keeps whichever response arrives last.
    """

    def __init__(
        self,
        client: ApiClient,
        project_id: int,
        on_state: Optional[Callable[[], None]] = None,
    ) -> None:
        self.project_id = project_id
        self.state = DashboardState()
        self._client = client
        self._on_state = on_state

    def request_reload(self) -> int:
        self.state.reload_counter += 1
        logger.debug("Reload #%d requested for project %s", self.state.reload_counter, self.project_id)
        return self.state.reload_counter

    async def load(self) -> None:
        """Fetch project details and the personal database concurrently."""
        await asyncio.gather(self._load_details(), self._load_personal_database())

    def view(self, user: Optional[CurrentUser]) -> DashboardView:
        return derive_view(self.state, user)

    async def _load_details(self) -> None:
        try:
            details = await self._client.get_project_details(self.project_id)
        except ApiError as exc:
            logger.warning("Loading project %s failed: %s", self.project_id, exc)
            self.state.load_error = str(exc)
        else:
            self.state.details = details
        self._notify()

    async def _load_personal_database(self) -> None:
        try:
            database = await self._client.get_my_database()
        except ApiError as exc:
            logger.debug("No personal database available: %s", exc)
            database = None
        self.state.personal_database = database
        self.state.personal_database_loaded = True
        self._notify()

    def _notify(self) -> None:
        if self._on_state is not None:
            self._on_state()
