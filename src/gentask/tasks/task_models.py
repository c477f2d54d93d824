# src/gentask/tasks/task_models.py

from __future__ import annotations

import time
import uuid
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum


class TaskPriority(StrEnum):
    """
    Task priority.

    The string value is the persisted token. Sorting uses `sort_order`
    (high first), not the string value.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def sort_order(self) -> int:
        return _PRIORITY_ORDER[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def color(self) -> str:
        return _PRIORITY_COLOR[self]

    @classmethod
    def parse(cls, raw: str | None) -> TaskPriority | None:
        if not raw:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


_PRIORITY_ORDER = {
    TaskPriority.HIGH: 0,
    TaskPriority.MEDIUM: 1,
    TaskPriority.LOW: 2,
}

_PRIORITY_COLOR = {
    TaskPriority.LOW: "green",
    TaskPriority.MEDIUM: "yellow",
    TaskPriority.HIGH: "red",
}


class DeadlineUrgency(StrEnum):
    NONE = "none"
    OVERDUE = "overdue"
    SOON = "soon"
    LATER = "later"

    @property
    def color(self) -> str:
        return {
            DeadlineUrgency.NONE: "default",
            DeadlineUrgency.OVERDUE: "red",
            DeadlineUrgency.SOON: "yellow",
            DeadlineUrgency.LATER: "green",
        }[self]


SOON_WINDOW_DAYS = 2
NEW_SUBTASK_TITLE = "New Subtask"


def new_task_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class Task:
    """
    One node of the task forest.

    `subtasks` is owned by this node; order is insertion order.
    `creation_date` is None for records saved before the field existed.
    """

    title: str
    is_completed: bool = False
    deadline: float | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    notes: str | None = None
    subtasks: list[Task] = field(default_factory=list)
    creation_date: float | None = None
    id: str = field(default_factory=new_task_id)

    def walk(self) -> Iterator[Task]:
        """Pre-order walk: this node, then every descendant."""
        yield self
        for sub in self.subtasks:
            yield from sub.walk()

    @property
    def has_notes(self) -> bool:
        return bool(self.notes)


def deadline_urgency(deadline: float | None, *, now_ts: float | None = None) -> DeadlineUrgency:
    """
    Classify a deadline for display.

    Overdue when already past; soon when at most SOON_WINDOW_DAYS whole days
    remain.
    """
    if deadline is None:
        return DeadlineUrgency.NONE
    if now_ts is None:
        now_ts = time.time()
    if deadline < now_ts:
        return DeadlineUrgency.OVERDUE
    whole_days = int((deadline - now_ts) // 86400)
    if whole_days <= SOON_WINDOW_DAYS:
        return DeadlineUrgency.SOON
    return DeadlineUrgency.LATER
