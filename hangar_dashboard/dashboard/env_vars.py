"""Conversion between an environment-variable map and its editable text."""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from hangar_dashboard.dashboard.logs import split_lines


def env_to_text(env_vars: Optional[Mapping[str, str]]) -> str:
    """Render *env_vars* as ``KEY=VALUE`` lines in mapping order."""
    if not env_vars:
        return ""
    return "\n".join(f"{key}={value}" for key, value in env_vars.items())


def parse_env_text(text: str) -> Dict[str, str]:
    """Parse a ``KEY=VALUE`` text buffer into a map.

    Each line is split on its first ``=``; key and value are trimmed.  Lines
    without ``=`` or with a blank key are dropped, and a repeated key keeps
    its last value.
    """
    env_vars: Dict[str, str] = {}
    for line in split_lines(text):
        key, sep, value = line.strip().partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key:
            continue
        env_vars[key] = value.strip()
    return env_vars
