"""Hangar Dashboard - terminal console for Hangar project deployments."""

from hangar_dashboard.constants import SERVER_VERSION as __version__

__all__ = ["__version__"]
