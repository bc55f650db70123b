"""Base screen with shared chrome for all Hangar Dashboard screens."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Footer, Header


class HangarScreen(Screen):
    """Base screen providing shared chrome (Header, Footer).

    Subclasses override :meth:`compose_content` to supply their widgets.
    """

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield from self.compose_content()
        yield Footer()

    def compose_content(self) -> ComposeResult:
        """Override in subclasses to add screen-specific content."""
        return
        yield  # pragma: no cover
