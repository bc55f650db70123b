"""Screens of the Hangar Dashboard TUI."""
