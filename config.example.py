# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKTALLY_APP_NAME": "App display name (default: tasktally).",
    "TASKTALLY_LOG_LEVEL": "Console logging level (default: WARNING; the log file gets DEBUG).",
    "TASKTALLY_DATA_DIR": "Local data directory for log files (default: .local/tasktally).",
    # Connectors
    "TASKTALLY_CONSOLE_ENABLED": "Enable console connector (true/false, default: true).",
    # Tasks
    "TASKTALLY_UNDO_TIMEOUT_MS": "Undo window after a delete, in milliseconds (default: 4000).",
    "TASKTALLY_DEFAULT_PRIORITY": "Priority used when a new task has none (High/Medium/Low, default: Medium).",
    "TASKTALLY_DEFAULT_STATUS": "Status used when a new task has none (Todo/In Progress/Done, default: Todo).",
}
