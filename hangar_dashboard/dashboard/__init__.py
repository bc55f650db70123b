"""UI-independent synchronization core of the project dashboard."""

from hangar_dashboard.dashboard.orchestrator import (
    DashboardOrchestrator,
    DashboardState,
    ErrorView,
    LoadingView,
    ReadyView,
    derive_view,
)
from hangar_dashboard.dashboard.permissions import Capabilities, compute_capabilities

__all__ = [
    "Capabilities",
    "DashboardOrchestrator",
    "DashboardState",
    "ErrorView",
    "LoadingView",
    "ReadyView",
    "compute_capabilities",
    "derive_view",
]
