# src/gentask/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every key has a local default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "GENTASK"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    file_log_level: str
    reminder_log_level: str

    # ---- Front-end ----
    console_enabled: bool

    # ---- Notifications ----
    notifications_permitted: bool
    reminder_poll_seconds: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    settings_db_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "gentask") or "gentask"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        file_log_level = _env(_k("FILE_LOG_LEVEL"), "DEBUG")
        reminder_log_level = _env(_k("REMINDER_LOG_LEVEL"), "WARNING")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        notifications_permitted = _env_bool(_k("NOTIFICATIONS_PERMITTED"), True)
        reminder_poll_seconds = max(0.5, _env_float(_k("REMINDER_POLL_SECONDS"), 15.0))

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/gentask"))
        settings_db_path = _env_path(_k("SETTINGS_DB_PATH"), data_dir / "settings.sqlite3")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            file_log_level=file_log_level,
            reminder_log_level=reminder_log_level,
            console_enabled=console_enabled,
            notifications_permitted=notifications_permitted,
            reminder_poll_seconds=reminder_poll_seconds,
            data_dir=data_dir,
            settings_db_path=settings_db_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
