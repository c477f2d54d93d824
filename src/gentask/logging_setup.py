# src/gentask/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

from .config import Settings

APP_LOGGER = "gentask"
REMINDER_LOGGER = "gentask.notifications"
LOG_FILE_NAME = "gentask.log"

_LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def level_from_name(name: str, default: int) -> int:
    """'debug' -> logging.DEBUG; unknown names fall back to `default`."""
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else default


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keeps the interactive console readable.

    App records pass, except the reminder delivery thread, which must reach
    `reminder_level` (reminders themselves are printed by the console sink).
    Everything else, py.warnings included, needs `foreign_level`.
    """

    def __init__(self, *, reminder_level: int, foreign_level: int = logging.ERROR) -> None:
        super().__init__()
        self.reminder_level = reminder_level
        self.foreign_level = foreign_level

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == REMINDER_LOGGER or name.startswith(REMINDER_LOGGER + "."):
            return record.levelno >= self.reminder_level
        if name == APP_LOGGER or name.startswith(APP_LOGGER + "."):
            return True
        return record.levelno >= self.foreign_level


def setup_logging(settings: Settings) -> Path:
    """
    Install a filtered stderr handler and a full file log under
    `settings.data_dir`. Replaces any handlers already on the root logger.

    Call this once, before the first log record. Returns the log file path.
    """
    log_dir = Path(settings.data_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    console_level = level_from_name(settings.log_level, logging.INFO)
    file_level = level_from_name(settings.file_log_level, logging.DEBUG)
    reminder_level = level_from_name(settings.reminder_log_level, logging.WARNING)

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    fmt = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter(reminder_level=reminder_level))
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    # warnings.warn(...) -> 'py.warnings'
    logging.captureWarnings(True)
    return log_file
