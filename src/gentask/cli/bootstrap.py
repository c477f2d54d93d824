# src/gentask/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState
  (settings store, persistence, notification center, scheduler, task store),
- restores reminders for the loaded forest.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState, SessionContext
from ..notifications.local_center import LocalNotificationCenter
from ..tasks.persistence import PersistenceBridge
from ..tasks.settings_store import SqliteSettingsStore
from ..tasks.task_notifier import NotificationScheduler
from ..tasks.task_sort import SortMode
from ..tasks.task_tree import ForestChange, TaskTreeStore

logger = logging.getLogger(__name__)


def _log_change(change: ForestChange) -> None:
    logger.debug(
        "Forest changed kind=%s task_id=%s roots=%d", change.kind.value, change.task_id, len(change.forest)
    )


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.settings_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    persistence = PersistenceBridge(SqliteSettingsStore(settings.settings_db_path))

    session = persistence.load_preferences(SessionContext())
    center = LocalNotificationCenter(permitted=settings.notifications_permitted)
    notifier = NotificationScheduler(center, session, persistence=persistence)
    notifier.request_permission()

    store = TaskTreeStore(session, persistence=persistence, notifier=notifier)
    store.subscribe(_log_change)

    # The in-process center starts empty; rebuild reminders for what was loaded.
    notifier.reevaluate_all(store.tasks)
    logger.info(
        "Reminders restored: %d pending (notifications=%s).",
        len(center.pending()),
        "on" if session.notifications_enabled else "off",
    )

    return AppState(
        settings=settings,
        session=session,
        store=store,
        notifier=notifier,
        persistence=persistence,
        notification_center=center,
        sort_mode=SortMode.SMART,
    )
