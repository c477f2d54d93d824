# tests/test_task_models.py

from __future__ import annotations

from gentask.tasks.task_models import DeadlineUrgency, Task, TaskPriority, deadline_urgency

from .conftest import NOW

DAY = 86400.0


def test_priority_order_names_and_colors() -> None:
    ranked = sorted(TaskPriority, key=lambda p: p.sort_order)
    assert ranked == [TaskPriority.HIGH, TaskPriority.MEDIUM, TaskPriority.LOW]
    assert [p.display_name for p in ranked] == ["High", "Medium", "Low"]
    assert [p.color for p in ranked] == ["red", "yellow", "green"]
    assert TaskPriority.parse(" Low ") is TaskPriority.LOW
    assert TaskPriority.parse("urgent") is None


def test_new_task_defaults() -> None:
    task = Task(title="x")
    assert task.priority is TaskPriority.MEDIUM
    assert task.is_completed is False
    assert task.subtasks == []
    assert task.creation_date is None
    assert task.id != Task(title="x").id


def test_walk_is_preorder() -> None:
    tree = Task(
        id="a",
        title="a",
        subtasks=[Task(id="b", title="b", subtasks=[Task(id="c", title="c")]), Task(id="d", title="d")],
    )
    assert [t.id for t in tree.walk()] == ["a", "b", "c", "d"]


def test_deadline_urgency() -> None:
    assert deadline_urgency(None, now_ts=NOW) is DeadlineUrgency.NONE
    assert deadline_urgency(NOW - 1, now_ts=NOW) is DeadlineUrgency.OVERDUE
    assert deadline_urgency(NOW + DAY, now_ts=NOW) is DeadlineUrgency.SOON
    assert deadline_urgency(NOW + 2.5 * DAY, now_ts=NOW) is DeadlineUrgency.SOON
    assert deadline_urgency(NOW + 3 * DAY, now_ts=NOW) is DeadlineUrgency.LATER
    assert DeadlineUrgency.OVERDUE.color == "red"
