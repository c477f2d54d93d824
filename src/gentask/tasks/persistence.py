# src/gentask/tasks/persistence.py

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from ..core.ports import SettingsRepo
from ..core.state import (
    DEFAULT_CUSTOM_LEAD_MINUTES,
    DEFAULT_LEAD_TIME_SECONDS,
    LEAD_TIME_OPTIONS,
    SessionContext,
)
from .task_codec import decode_forest, encode_forest
from .task_models import Task

logger = logging.getLogger(__name__)

TASKS_KEY = "savedTasks_v2"
NOTIFICATIONS_ENABLED_KEY = "notificationsEnabled"
LEAD_TIME_KEY = "notificationLeadTime"
CUSTOM_LEAD_MINUTES_KEY = "customLeadTimeMinutes"


class PersistenceBridge:
    """
    Best-effort persistence of the forest and the user preferences.

    Nothing here raises: failures are logged and the caller's in-memory
    state stays authoritative. A failed load behaves like "no saved data".
    """

    def __init__(self, settings_store: SettingsRepo) -> None:
        self._settings = settings_store

    # ---- forest ----

    def save(self, tasks: Iterable[Task]) -> bool:
        try:
            data = encode_forest(tasks)
        except Exception:
            logger.exception("Failed to encode tasks; nothing saved.")
            return False
        try:
            self._settings.set(TASKS_KEY, data)
        except Exception:
            logger.exception("Failed to save tasks key=%s", TASKS_KEY)
            return False
        return True

    def load(self) -> list[Task]:
        try:
            data = self._settings.get(TASKS_KEY)
        except Exception:
            logger.exception("Failed to read tasks key=%s", TASKS_KEY)
            return []
        if data is None:
            logger.info("No saved tasks yet.")
            return []
        try:
            tasks = decode_forest(data)
        except Exception:
            logger.exception("Failed to decode saved tasks; starting empty.")
            return []
        logger.info("Loaded %d root tasks.", len(tasks))
        return tasks

    # ---- preferences ----

    def _get_json(self, key: str):
        try:
            raw = self._settings.get(key)
        except Exception:
            logger.exception("Failed to read preference key=%s", key)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw.decode("utf-8"))
        except Exception:
            logger.warning("Ignoring garbled preference key=%s", key)
            return None

    def load_preferences(self, session: SessionContext) -> SessionContext:
        """Fill the preference fields of `session` from storage (defaults when missing)."""
        enabled = self._get_json(NOTIFICATIONS_ENABLED_KEY)
        session.notifications_enabled = enabled if isinstance(enabled, bool) else True

        lead = self._get_json(LEAD_TIME_KEY)
        if isinstance(lead, (int, float)) and not isinstance(lead, bool) and float(lead) in LEAD_TIME_OPTIONS:
            session.lead_time_seconds = float(lead)
        else:
            session.lead_time_seconds = DEFAULT_LEAD_TIME_SECONDS

        custom = self._get_json(CUSTOM_LEAD_MINUTES_KEY)
        session.custom_lead_time_minutes = (
            custom if isinstance(custom, str) else str(DEFAULT_CUSTOM_LEAD_MINUTES)
        )
        return session

    def save_preferences(self, session: SessionContext) -> bool:
        values = {
            NOTIFICATIONS_ENABLED_KEY: session.notifications_enabled,
            LEAD_TIME_KEY: session.lead_time_seconds,
            CUSTOM_LEAD_MINUTES_KEY: session.custom_lead_time_minutes,
        }
        ok = True
        for key, value in values.items():
            try:
                self._settings.set(key, json.dumps(value).encode("utf-8"))
            except Exception:
                logger.exception("Failed to save preference key=%s", key)
                ok = False
        return ok
