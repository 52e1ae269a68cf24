"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, TaskStatus)
- task_rules.py: title / numeric / notes normalization and derived fields
- task_repository.py: in-memory authoritative set of live tasks
- undo_controller.py: single-slot, time-bounded staging for deletes
- timers.py: countdown implementations (thread / asyncio)
- task_api.py: entry points used by presentation collaborators
"""
