"""Shared fixtures for the Hangar Dashboard test suite."""

from typing import Any, Dict, List, Optional

import pytest

from hangar_dashboard.i18n import Translator
from hangar_dashboard.models import DatabaseDetails, Project, ProjectDetails


def _project(**overrides: Any) -> Project:
    data: Dict[str, Any] = {
        "id": 7,
        "name": "webapp",
        "owner": "alice",
        "source": "direct",
        "source_url": "ghcr.io/alice/webapp:1.0",
        "deployed_image_tag": "ghcr.io/alice/webapp:1.0",
        "env_vars": {"A": "1"},
        "created_at": "2024-05-01T10:00:00Z",
    }
    data.update(overrides)
    return Project.model_validate(data)


def _database(**overrides: Any) -> DatabaseDetails:
    data: Dict[str, Any] = {
        "id": 3,
        "host": "db.hangar.local",
        "port": 3306,
        "database_name": "alice_db",
        "username": "alice",
        "password": "s3cretpass",
        "project_id": None,
    }
    data.update(overrides)
    return DatabaseDetails.model_validate(data)


@pytest.fixture()
def make_project():
    return _project


@pytest.fixture()
def make_database():
    return _database


@pytest.fixture()
def make_details():
    def _make(
        participants: Optional[List[str]] = None,
        database: Optional[DatabaseDetails] = None,
        **project_overrides: Any,
    ) -> ProjectDetails:
        return ProjectDetails(
            project=_project(**project_overrides),
            participants=participants if participants is not None else ["bob"],
            database=database,
        )

    return _make


@pytest.fixture()
def i18n() -> Translator:
    return Translator("en")
