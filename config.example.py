# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "GENTASK_APP_NAME": "App display name (default: gentask).",
    "GENTASK_LOG_LEVEL": "Console logging level (default: INFO).",
    "GENTASK_FILE_LOG_LEVEL": "Level of <data_dir>/gentask.log (default: DEBUG).",
    "GENTASK_REMINDER_LOG_LEVEL": (
        "Console level for the reminder delivery thread (default: WARNING)."
    ),
    # Front-end
    "GENTASK_CONSOLE_ENABLED": "Run the console REPL (true/false). Off => reminders only.",
    # Notifications
    "GENTASK_NOTIFICATIONS_PERMITTED": "Whether the local notification center accepts reminders.",
    "GENTASK_REMINDER_POLL_SECONDS": "How often due reminders are checked (default: 15, min 0.5).",
    # Paths (gitignored)
    "GENTASK_DATA_DIR": "Local data directory (default: .local/gentask).",
    "GENTASK_SETTINGS_DB_PATH": (
        "Settings SQLite path holding tasks and preferences (default: <data_dir>/settings.sqlite3)."
    ),
}
