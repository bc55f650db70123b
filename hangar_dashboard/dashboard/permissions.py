"""Caller capability computation.

Capabilities are derived on every render from the caller identity and the
freshly fetched project details; they are never cached.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from hangar_dashboard.models import CurrentUser


@dataclass(frozen=True)
class Capabilities:
    """Access level of the caller on one project.

    ``can_control_strong``
        Owner or superuser: participants, danger zone, database linkage.
    ``can_control_weak``
        Strong access or listed participant: controls, env vars, image.
    """

    can_control_strong: bool = False
    can_control_weak: bool = False


NO_ACCESS = Capabilities()


def compute_capabilities(
    user: Optional[CurrentUser],
    owner: str,
    participants: Sequence[str],
) -> Capabilities:
    """Return the :class:`Capabilities` of *user* on a project."""
    if user is None:
        return NO_ACCESS
    strong = user.is_admin or user.login == owner
    weak = strong or user.login in participants
    return Capabilities(can_control_strong=strong, can_control_weak=weak)
