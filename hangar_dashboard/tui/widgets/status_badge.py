"""Run-state badge fed by a :class:`~hangar_dashboard.dashboard.polling.StatusPoller`."""

from __future__ import annotations

from typing import Any, Dict, Optional

from textual.widgets import Static

from hangar_dashboard.i18n import Translator

# Raw run-state -> badge color
_STATUS_COLORS: Dict[str, str] = {
    "running": "green",
    "restarting": "yellow",
    "created": "yellow",
    "paused": "yellow",
    "exited": "red",
    "stopped": "red",
    "dead": "red",
}
_UNKNOWN_COLOR = "grey50"


def badge_markup(status: Optional[str], i18n: Translator) -> str:
    """Markup for *status*; ``None`` renders as loading in the unknown style."""
    if status is None:
        return f"[{_UNKNOWN_COLOR}]● {i18n.t('common.loading')}[/{_UNKNOWN_COLOR}]"
    color = _STATUS_COLORS.get(status, _UNKNOWN_COLOR)
    return f"[{color}]● {i18n.status(status)}[/{color}]"


class StatusBadge(Static):
    def __init__(self, i18n: Translator, **kwargs: Any) -> None:
        super().__init__(badge_markup(None, i18n), **kwargs)
        self._i18n = i18n

    def set_status(self, status: Optional[str]) -> None:
        self.update(badge_markup(status, self._i18n))
