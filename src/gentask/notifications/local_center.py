# src/gentask/notifications/local_center.py

from __future__ import annotations

"""
In-process notification center.

Implements the NotificationService port for environments without an OS
notification API: reminders are kept in a table keyed by task id and a small
polling loop hands due reminders to a ReminderSink (the console, in the CLI).

The store thread schedules/cancels while the delivery loop pops, so the
table is guarded by a lock.
"""

import asyncio
import logging
import threading
import time
from dataclasses import dataclass

from ..core.ports import ACTION_COMPLETE, ACTION_SNOOZE, ReminderSink

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Reminder:
    task_id: str
    fire_at: float
    title: str
    body: str
    category_id: str

    @property
    def actions(self) -> tuple[str, ...]:
        return (ACTION_COMPLETE, ACTION_SNOOZE)


class LocalNotificationCenter:
    def __init__(self, *, permitted: bool = True) -> None:
        self._permitted = permitted
        self._pending: dict[str, Reminder] = {}
        self._lock = threading.Lock()

    def request_permission(self) -> bool:
        return self._permitted

    def schedule(
        self,
        task_id: str,
        fire_at: float,
        title: str,
        body: str,
        category_id: str,
    ) -> None:
        if not self._permitted:
            logger.debug("Notifications not permitted; dropping reminder task_id=%s", task_id)
            return
        reminder = Reminder(
            task_id=task_id,
            fire_at=float(fire_at),
            title=title,
            body=body,
            category_id=category_id,
        )
        with self._lock:
            self._pending[task_id] = reminder

    def cancel(self, task_id: str) -> None:
        with self._lock:
            self._pending.pop(task_id, None)

    def pending(self) -> list[Reminder]:
        with self._lock:
            return sorted(self._pending.values(), key=lambda r: (r.fire_at, r.task_id))

    def pop_due(self, now_ts: float) -> list[Reminder]:
        """Remove and return reminders with fire_at <= now_ts, oldest first."""
        with self._lock:
            due = [r for r in self._pending.values() if r.fire_at <= now_ts]
            for r in due:
                del self._pending[r.task_id]
        due.sort(key=lambda r: (r.fire_at, r.task_id))
        return due


async def run_reminder_loop(
        center: LocalNotificationCenter,
        sink: ReminderSink,
        *,
        interval_seconds: float = 15.0,
) -> None:
    """
    Simple polling delivery loop.

    Every interval_seconds:
    - pop reminders whose fire time has passed
    - hand each one to sink.deliver(...)
      A failing delivery is logged and dropped (no retry).

    To stop the loop, cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        now_ts = time.time()

        try:
            due = center.pop_due(now_ts)
        except Exception:
            logger.exception("pop_due failed")
            due = []

        for reminder in due:
            try:
                await sink.deliver(reminder)
                logger.info("Reminder delivered task_id=%s", reminder.task_id)
            except Exception:
                logger.exception("Reminder delivery failed task_id=%s", reminder.task_id)

        await asyncio.sleep(sleep_s)
