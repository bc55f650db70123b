"""Textual front-end for Hangar Dashboard."""
