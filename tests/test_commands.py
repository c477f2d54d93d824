# tests/test_commands.py

from __future__ import annotations

from datetime import datetime

import pytest

from gentask.cli.commands import (
    CommandRegistry,
    parse_deadline,
    registry,
    resolve_task_id,
    short_id,
)
from gentask.connectors.console_connector import handle_plain_text
from gentask.core.state import CUSTOM_LEAD_TIME
from gentask.tasks.task_models import TaskPriority

from .conftest import NOW


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    notes: list[str] = []
    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_plain_text_adds_task_then_renames_while_editing(state) -> None:
    reply = handle_plain_text(state, "Write report")
    (task,) = state.store.tasks
    assert reply == f"Added {short_id(task.id)}."
    assert state.session.editing_task_id is None

    registry.handle(state, f"/sub {short_id(task.id)}")
    sub_id = state.session.editing_task_id
    assert sub_id is not None

    handle_plain_text(state, "Collect numbers")
    assert state.store.find(sub_id).title == "Collect numbers"
    assert state.session.editing_task_id is None


def test_edit_title_and_cancel(state) -> None:
    task_id = state.store.add_root_task("Draft")
    state.store.end_editing()

    assert "Nothing is being edited" in registry.handle(state, "/title New")
    registry.handle(state, f"/edit {task_id[:6]}")
    assert state.session.editing_task_id == task_id
    registry.handle(state, "/title Final draft")
    assert state.store.find(task_id).title == "Final draft"
    assert state.session.editing_task_id is None

    registry.handle(state, f"/edit {task_id}")
    registry.handle(state, "/cancel")
    assert state.session.editing_task_id is None


def test_done_undone_and_delete(state) -> None:
    parent = state.store.add_root_task("Parent")
    child = state.store.add_subtask(parent)

    registry.handle(state, f"/done {parent}")
    assert state.store.find(child).is_completed is True

    registry.handle(state, f"/undone {parent}")
    assert state.store.find(child).is_completed is False

    registry.handle(state, f"/del {child}")
    assert state.store.find(child) is None
    assert state.store.find(parent) is not None


def test_deadline_priority_notes(state) -> None:
    task_id = state.store.add_root_task("Taxes")

    registry.handle(state, f"/deadline {task_id} 2030-04-15 09:30")
    assert state.store.find(task_id).deadline == datetime(2030, 4, 15, 9, 30).timestamp()
    # Fake clock is far in the past, so the reminder is pending.
    assert [r.task_id for r in state.notification_center.pending()] == [task_id]

    registry.handle(state, f"/deadline {task_id} clear")
    assert state.store.find(task_id).deadline is None
    assert state.notification_center.pending() == []

    assert "Usage" in registry.handle(state, f"/deadline {task_id} someday")

    registry.handle(state, f"/priority {task_id} HIGH")
    assert state.store.find(task_id).priority is TaskPriority.HIGH
    assert "Usage" in registry.handle(state, f"/priority {task_id} urgent")

    registry.handle(state, f"/notes {task_id} bring receipts")
    assert "bring receipts" in registry.handle(state, f"/notes {task_id}")
    registry.handle(state, f"/notes {task_id} -")
    assert state.store.find(task_id).notes is None


def test_unknown_or_ambiguous_ids_are_reported(state) -> None:
    state.store.add_root_task("One")
    state.store.add_root_task("Two")

    assert "No single task matches" in registry.handle(state, "/done zzz")
    # The empty prefix would match everything.
    assert resolve_task_id(state, "") is None
    assert "Usage" in registry.handle(state, "/done")


def test_list_respects_sort_mode(state, clock) -> None:
    first = state.store.add_root_task("first")
    clock.advance(10)
    second = state.store.add_root_task("second")
    state.store.set_priority(first, TaskPriority.HIGH)

    smart = registry.handle(state, "/list").splitlines()
    assert smart[0] == "Tasks (sort by Smart):"
    assert short_id(second) in smart[1]

    by_priority = registry.handle(state, "/list priority").splitlines()
    assert short_id(first) in by_priority[1]
    assert "(High)" in by_priority[1]


def test_list_shows_subtasks_indented(state) -> None:
    parent = state.store.add_root_task("parent")
    child = state.store.add_subtask(parent)

    lines = registry.handle(state, "/list").splitlines()

    assert lines[1].startswith("[ ] " + short_id(parent))
    assert lines[2].startswith("  [ ] " + short_id(child))
    assert "<editing>" in lines[2]


def test_list_streams_one_block_per_root_through_emit(state) -> None:
    parent = state.store.add_root_task("parent")
    child = state.store.add_subtask(parent)
    other = state.store.add_root_task("other")
    streamed: list[str] = []

    footer = registry.handle(state, "/list", emit=streamed.append)

    assert footer == "2 root / 3 total."
    assert streamed[0] == "Tasks (sort by Smart):"
    assert len(streamed) == 3
    blocks = {block.split()[2]: block for block in streamed[1:]}
    assert short_id(child) in blocks[short_id(parent)]
    assert blocks[short_id(other)].count("\n") == 0


def test_notify_and_lead_commands(state) -> None:
    task_id = state.store.add_root_task("Meeting")
    state.store.set_deadline(task_id, NOW + 3600)
    assert len(state.notification_center.pending()) == 1

    registry.handle(state, "/notify off")
    assert state.session.notifications_enabled is False
    assert state.notification_center.pending() == []
    assert "already OFF" in registry.handle(state, "/notify off")

    registry.handle(state, "/notify on")
    assert len(state.notification_center.pending()) == 1

    reply = registry.handle(state, "/lead custom 25")
    assert state.session.lead_time_seconds == CUSTOM_LEAD_TIME
    assert "25 min" in reply
    (reminder,) = state.notification_center.pending()
    assert reminder.fire_at == NOW + 3600 - 25 * 60

    assert "Usage" in registry.handle(state, "/lead 7")


def test_complete_and_snooze_responses(state) -> None:
    task_id = state.store.add_root_task("Call back")
    state.store.set_deadline(task_id, NOW + 3600)

    registry.handle(state, f"/snooze {task_id}")
    assert state.store.find(task_id).is_completed is False

    registry.handle(state, f"/complete {task_id}")
    assert state.store.find(task_id).is_completed is True
    assert state.notification_center.pending() == []


def test_status_reports_counts(state) -> None:
    parent = state.store.add_root_task("parent")
    state.store.add_subtask(parent)

    status = registry.handle(state, "/status")

    assert "1 root / 2 total" in status
    assert "Notifications: ON" in status
    assert "Lead time: 10 min" in status


def test_parse_deadline_relative() -> None:
    assert parse_deadline(["+30m"], now_ts=NOW) == NOW + 1800
    assert parse_deadline(["+2h"], now_ts=NOW) == NOW + 7200


@pytest.mark.parametrize("raw", ["+99999999999999m", "+99999999999999h", "+" + "9" * 400 + "m"])
def test_parse_deadline_rejects_unrepresentable_dates(raw: str) -> None:
    with pytest.raises(ValueError):
        parse_deadline([raw], now_ts=NOW)


def test_out_of_range_deadline_leaves_task_listable(state) -> None:
    task_id = state.store.add_root_task("Someday")

    reply = registry.handle(state, f"/deadline {task_id} +99999999999999m")

    assert reply.startswith("Usage")
    assert state.store.find(task_id).deadline is None
    assert "Someday" in registry.handle(state, "/list")
