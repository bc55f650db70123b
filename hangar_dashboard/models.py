"""Pydantic models for the Hangar API payloads.

These mirror the JSON returned by the Hangar backend.  ``Project`` keeps the
flat wire fields (``source``, ``source_url`` ...) and exposes the tagged
:attr:`Project.source_descriptor` used by the image-update form.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

# ── Project source ───────────────────────────────────────────────────────


class ProjectSourceType(str, Enum):
    GITHUB = "github"
    DIRECT = "direct"


class GitHubSource(BaseModel):
    """Project built from a GitHub repository."""

    url: str
    branch: Optional[str] = None
    root_dir: Optional[str] = None


class DirectImageSource(BaseModel):
    """Project deployed straight from a container image."""

    image_url: str


ProjectSource = Union[GitHubSource, DirectImageSource]


# ── Projects ─────────────────────────────────────────────────────────────


class Project(BaseModel):
    id: int
    name: str
    owner: str
    source: ProjectSourceType = ProjectSourceType.DIRECT
    source_url: str = ""
    source_branch: Optional[str] = None
    source_root_dir: Optional[str] = None
    deployed_image_tag: str = ""
    persistent_volume_path: Optional[str] = None
    env_vars: Optional[Dict[str, str]] = None
    created_at: str = ""  # ISO-8601

    @property
    def source_descriptor(self) -> ProjectSource:
        if self.source == ProjectSourceType.GITHUB:
            return GitHubSource(
                url=self.source_url,
                branch=self.source_branch,
                root_dir=self.source_root_dir,
            )
        return DirectImageSource(image_url=self.source_url)

    @property
    def is_github(self) -> bool:
        return self.source == ProjectSourceType.GITHUB


class DatabaseDetails(BaseModel):
    id: int
    host: str
    port: int
    database_name: str
    username: str
    password: str
    project_id: Optional[int] = None

    @property
    def is_personal_unlinked(self) -> bool:
        return self.project_id is None


class ProjectDetails(BaseModel):
    """Aggregate returned by ``GET projects/{id}/details``."""

    project: Project
    participants: List[str] = Field(default_factory=list)
    database: Optional[DatabaseDetails] = None


class OwnedProject(BaseModel):
    """Short project summary used when picking a project to link."""

    id: int
    name: str


class ProjectMetrics(BaseModel):
    cpu_usage: float = 0.0
    memory_usage: float = 0.0
    memory_limit: float = 0.0


class CurrentUser(BaseModel):
    login: str
    is_admin: bool = False


class DeployPayload(BaseModel):
    """Body of ``POST projects``.

    Exactly one of ``github_repo_url`` / ``image_url`` is set; optionals left
    at ``None`` are dropped from the JSON.
    """

    project_name: str
    participants: List[str] = Field(default_factory=list)
    github_repo_url: Optional[str] = None
    github_branch: Optional[str] = None
    github_root_dir: Optional[str] = None
    image_url: Optional[str] = None
    env_vars: Optional[Dict[str, str]] = None
    persistent_volume_path: Optional[str] = None
    create_database: Optional[bool] = None
