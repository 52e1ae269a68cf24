"""Presentation collaborators (console REPL)."""
