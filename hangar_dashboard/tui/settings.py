"""Persistent TUI settings (theme and language preference)."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict

from hangar_dashboard.constants import DEFAULT_LANGUAGE

logger = logging.getLogger(__name__)

DEFAULT_THEME = "textual-dark"

_SETTINGS_DIR = os.path.join(
    os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config")),
    "hangar-dashboard",
)
_SETTINGS_FILE = os.path.join(_SETTINGS_DIR, "settings.json")


def _default_settings() -> Dict[str, Any]:
    return {
        "theme": DEFAULT_THEME,
        "language": DEFAULT_LANGUAGE,
    }


def load_settings(path: str = _SETTINGS_FILE) -> Dict[str, Any]:
    """Load settings from disk, returning defaults if missing/corrupt."""
    defaults = _default_settings()
    try:
        with open(path, encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        return defaults
    except (OSError, ValueError):
        logger.debug("Could not load settings, using defaults", exc_info=True)
        return defaults
    if not isinstance(data, dict):
        return defaults
    for key, val in defaults.items():
        data.setdefault(key, val)
    return data


def save_settings(settings: Dict[str, Any], path: str = _SETTINGS_FILE) -> None:
    """Persist settings to disk."""
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(settings, fh, indent=2)
    except OSError:
        logger.debug("Could not save settings", exc_info=True)
