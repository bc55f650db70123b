"""Database linkage state machine.

The state is never stored: it is derived on every render from the project
details and the caller's personal database.

* ``NONE`` → create & link → ``LINKED``
* ``LINKED`` → unlink → ``PERSONAL_UNLINKED``
* ``LINKED`` → delete → ``NONE``
* ``PERSONAL_UNLINKED`` → link existing → ``LINKED``

A create that succeeds followed by a failed link leaves an orphan personal
database; the next render offers *link existing* for it.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from hangar_dashboard.models import DatabaseDetails, ProjectDetails


class LinkageState(str, Enum):
    LINKED = "linked"
    PERSONAL_UNLINKED = "personal_unlinked"
    NONE = "none"


class DatabaseAction(str, Enum):
    UNLINK = "unlink"
    DELETE = "delete"
    LINK_EXISTING = "link_existing"
    CREATE_AND_LINK = "create_and_link"


def linkage_state(
    details: ProjectDetails,
    personal_database: Optional[DatabaseDetails],
) -> LinkageState:
    if details.database is not None:
        return LinkageState.LINKED
    if personal_database is not None and personal_database.project_id is None:
        return LinkageState.PERSONAL_UNLINKED
    return LinkageState.NONE


def available_actions(state: LinkageState, has_strong_access: bool) -> Tuple[DatabaseAction, ...]:
    """Actions offered for *state*.

    Callers without strong access get a read-only card and no actions.
    """
    if not has_strong_access:
        return ()
    if state is LinkageState.LINKED:
        return (DatabaseAction.UNLINK, DatabaseAction.DELETE)
    if state is LinkageState.PERSONAL_UNLINKED:
        return (DatabaseAction.LINK_EXISTING,)
    return (DatabaseAction.CREATE_AND_LINK,)


def shows_connection_details(state: LinkageState) -> bool:
    """Connection details are visible at any access level once linked."""
    return state is LinkageState.LINKED
