"""Bordered container shared by every dashboard card."""

from __future__ import annotations

from textual.widget import Widget


class Card(Widget):
    """Base class for dashboard cards; subclasses yield their own title."""

    DEFAULT_CSS = """
    Card {
        height: auto;
        border: round $accent;
        padding: 0 1;
        margin: 0 0 1 0;
    }
    Card .card-title {
        text-style: bold;
        color: $primary;
        margin-bottom: 1;
    }
    Card .card-success {
        color: $success;
    }
    Card .card-muted {
        color: $text-muted;
    }
    Card Horizontal {
        height: auto;
    }
    Card Button {
        margin: 0 1 0 0;
    }
    """
