"""Custom Textual messages for the Hangar Dashboard TUI."""

from __future__ import annotations

from textual.message import Message


class ReloadRequested(Message):
    """Posted by a card after a successful mutation.

    The project dashboard screen answers by bumping its reload counter and
    refetching everything; cards never patch project data themselves.
    """


class OpenProject(Message):
    """Ask the app to show the dashboard of one project."""

    def __init__(self, project_id: int) -> None:
        self.project_id = project_id
        super().__init__()


class OpenDatabase(Message):
    """Ask the app to show the caller's personal database."""


class GoHome(Message):
    """Ask the app to return to the home screen."""


class OpenCreateProject(Message):
    """Ask the app to show the create-project form."""
