"""Localized display of an :class:`~hangar_dashboard.errors.ApiError`.

Some error codes come with a remediation link; ``IMAGE_SCAN_FAILED``
carries the scanner report in ``details``, shown verbatim.
"""

from __future__ import annotations

from typing import Any, Optional

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text
from textual.widgets import Static

from hangar_dashboard.constants import DEFAULT_GITHUB_APP_NAME, GITHUB_INSTALLATIONS_URL
from hangar_dashboard.errors import ApiError
from hangar_dashboard.i18n import Translator


def remediation_link(err: ApiError, github_app_name: str = DEFAULT_GITHUB_APP_NAME) -> Optional[str]:
    """URL the user should visit to fix *err*, if any."""
    if err.error_code == "GITHUB_ACCOUNT_NOT_LINKED":
        return f"https://github.com/apps/{github_app_name}/installations/new"
    if err.error_code == "GITHUB_REPO_NOT_ACCESSIBLE":
        return GITHUB_INSTALLATIONS_URL
    return None


def render_error(
    err: ApiError,
    i18n: Translator,
    github_app_name: str = DEFAULT_GITHUB_APP_NAME,
) -> RenderableType:
    parts: list[RenderableType] = [Text(i18n.error(err), style="bold red")]
    link = remediation_link(err, github_app_name)
    if link is not None:
        parts.append(Text(link, style=f"underline link {link}"))
    if err.error_code == "IMAGE_SCAN_FAILED" and err.details:
        parts.append(Panel(Text(err.details, no_wrap=True), border_style="red"))
    return Group(*parts)


class ErrorMessage(Static):
    """Inline error slot; hidden while there is nothing to show."""

    DEFAULT_CSS = """
    ErrorMessage {
        height: auto;
        margin: 1 0 0 0;
    }
    """

    def __init__(
        self,
        i18n: Translator,
        github_app_name: str = DEFAULT_GITHUB_APP_NAME,
        **kwargs: Any,
    ) -> None:
        super().__init__("", **kwargs)
        self._i18n = i18n
        self._github_app_name = github_app_name
        self.display = False

    def show_error(self, err: Optional[ApiError]) -> None:
        if err is None:
            self.update("")
            self.display = False
            return
        self.update(render_error(err, self._i18n, self._github_app_name))
        self.display = True
