# src/gentask/core/ports.py

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the settings storage and the notification backend swappable
and makes testing easier.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol

from ..tasks.task_models import Task

TASK_REMINDER_CATEGORY = "TASK_REMINDER_CATEGORY"
ACTION_COMPLETE = "complete"
ACTION_SNOOZE = "snooze"


class SettingsRepo(Protocol):
    """Key-value settings store (bytes values, fixed string keys)."""

    def get(self, key: str) -> bytes | None: ...
    def set(self, key: str, value: bytes) -> None: ...


class NotificationService(Protocol):
    """
    Local notification backend.

    Reminders are keyed by task id: scheduling an id that is already pending
    replaces it, cancelling an unknown id is a no-op.
    """

    def schedule(
            self,
            task_id: str,
            fire_at: float,
            title: str,
            body: str,
            category_id: str,
    ) -> None: ...

    def cancel(self, task_id: str) -> None: ...
    def request_permission(self) -> bool: ...


class ReminderSink(Protocol):
    """Where delivered reminders go (console, desktop banner, ...)."""

    def deliver(self, reminder: object) -> Awaitable[None]: ...


class TaskTreeRepo(Protocol):
    """The slice of the task store the notification layer relies on."""

    @property
    def tasks(self) -> tuple[Task, ...]: ...

    def find_and_mutate(self, task_id: str, mutator: Callable[[Task], None]) -> bool: ...
