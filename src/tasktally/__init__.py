"""
tasktally: a small personal task tracker.

Subpackages:
- tasks: task records, validation rules, repository, undo controller
- core: errors, ports and application state
- cli / connectors: console shell that drives the task API
"""

__version__ = "0.1.0"
