"""Dashboard card widgets."""
