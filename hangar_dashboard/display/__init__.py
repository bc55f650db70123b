"""Logging and console display helpers."""
