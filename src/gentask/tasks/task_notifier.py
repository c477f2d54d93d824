# src/gentask/tasks/task_notifier.py

from __future__ import annotations

"""
Reminder scheduling.

Keeps one pending reminder per task that has a future, non-completed
deadline while notifications are enabled. Every change that could affect
that (creation, deadline edit, completion toggle, preference change) runs
`reevaluate`, which is cancel-then-maybe-schedule and therefore idempotent.

Notification backend failures are logged and swallowed; a task that missed
its reminder gets another chance on its next re-evaluation.
"""

import logging
import time
from collections.abc import Callable, Iterable

from ..core.ports import (
    ACTION_COMPLETE,
    ACTION_SNOOZE,
    TASK_REMINDER_CATEGORY,
    NotificationService,
    TaskTreeRepo,
)
from ..core.state import LEAD_TIME_OPTIONS, SessionContext
from .persistence import PersistenceBridge
from .task_models import Task

logger = logging.getLogger(__name__)

REMINDER_TITLE = "Task Reminder"


def truncate_to_minute(ts: float) -> float:
    return float(int(ts // 60) * 60)


def compute_fire_at(task: Task, session: SessionContext, *, now_ts: float) -> float | None:
    """
    When the reminder for `task` should fire, or None if it should not exist.

    The strictly-in-the-future check uses the exact time; the returned value
    is truncated to the minute.
    """
    if not session.notifications_enabled:
        return None
    if task.deadline is None or task.is_completed:
        return None

    fire_at = task.deadline - session.resolve_lead_time()
    if fire_at <= now_ts:
        return None
    return truncate_to_minute(fire_at)


def reminder_body(task: Task) -> str:
    return f"'{task.title}' is due soon."


class NotificationScheduler:
    def __init__(
        self,
        service: NotificationService,
        session: SessionContext,
        *,
        persistence: PersistenceBridge | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._service = service
        self._session = session
        self._persistence = persistence
        self._clock = clock

    @property
    def session(self) -> SessionContext:
        return self._session

    # ---- service wrappers ----

    def _cancel(self, task_id: str) -> None:
        try:
            self._service.cancel(task_id)
        except Exception:
            logger.exception("cancel reminder failed task_id=%s", task_id)

    def _schedule(self, task: Task, fire_at: float) -> bool:
        try:
            self._service.schedule(
                task.id,
                fire_at,
                REMINDER_TITLE,
                reminder_body(task),
                TASK_REMINDER_CATEGORY,
            )
        except Exception:
            logger.exception("schedule reminder failed task_id=%s", task.id)
            return False
        logger.debug("Reminder scheduled task_id=%s fire_at=%s", task.id, fire_at)
        return True

    def request_permission(self) -> bool:
        try:
            granted = bool(self._service.request_permission())
        except Exception:
            logger.exception("Notification permission request failed.")
            return False
        if granted:
            logger.info("Notification permission granted.")
        else:
            logger.warning("Notification permission denied.")
        return granted

    # ---- eligibility ----

    def reevaluate(self, task: Task) -> bool:
        """Cancel, then schedule again if still eligible. Returns True if scheduled."""
        self._cancel(task.id)
        fire_at = compute_fire_at(task, self._session, now_ts=self._clock())
        if fire_at is None:
            return False
        return self._schedule(task, fire_at)

    def reevaluate_tree(self, task: Task) -> None:
        for node in task.walk():
            self.reevaluate(node)

    def reevaluate_all(self, tasks: Iterable[Task]) -> None:
        for root in tasks:
            self.reevaluate_tree(root)

    def cancel_tree(self, task: Task) -> None:
        for node in task.walk():
            self._cancel(node.id)

    # ---- preferences ----

    def _preferences_changed(self, tasks: Iterable[Task]) -> None:
        if self._persistence is not None:
            self._persistence.save_preferences(self._session)
        self.reevaluate_all(tasks)

    def set_notifications_enabled(self, enabled: bool, tasks: Iterable[Task]) -> None:
        self._session.notifications_enabled = bool(enabled)
        logger.info("Notifications %s.", "enabled" if enabled else "disabled")
        self._preferences_changed(tasks)

    def set_lead_time(self, seconds: float, tasks: Iterable[Task]) -> bool:
        if float(seconds) not in LEAD_TIME_OPTIONS:
            logger.warning("Unsupported lead time %s; keeping %s", seconds, self._session.lead_time_seconds)
            return False
        self._session.lead_time_seconds = float(seconds)
        self._preferences_changed(tasks)
        return True

    def set_custom_lead_time_minutes(self, raw: str, tasks: Iterable[Task]) -> None:
        self._session.custom_lead_time_minutes = raw
        self._preferences_changed(tasks)


def handle_notification_response(store: TaskTreeRepo, task_id: str, action: str) -> bool:
    """
    Route an action taken on a delivered reminder.

    "complete" marks the task done through the store's mutation primitive.
    "snooze" is acknowledged only; no new reminder is scheduled.
    Returns True if the store was changed.
    """
    if action == ACTION_COMPLETE:

        def mark_done(task: Task) -> None:
            task.is_completed = True

        found = store.find_and_mutate(task_id, mark_done)
        if found:
            logger.info("Task %s marked as complete via notification.", task_id)
        else:
            logger.info("Notification response for unknown task %s ignored.", task_id)
        return found

    if action == ACTION_SNOOZE:
        logger.info("Snooze action for task %s selected.", task_id)
        return False

    logger.debug("Ignoring notification action %r for task %s", action, task_id)
    return False
