"""Errors, ports and application state."""
