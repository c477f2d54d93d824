# src/gentask/cli/commands.py

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import Callable, Iterator
from datetime import datetime
from typing import cast

from ..core.ports import ACTION_COMPLETE, ACTION_SNOOZE
from ..core.state import CUSTOM_LEAD_TIME, AppState
from ..tasks.task_models import Task, TaskPriority, deadline_urgency
from ..tasks.task_notifier import handle_notification_response
from ..tasks.task_sort import SortMode, sort_tasks

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

SHORT_ID_LEN = 8
DEADLINE_FORMAT = "%Y-%m-%d %H:%M"

LEAD_TIME_ARGS = {
    "5": 60.0 * 5,
    "10": 60.0 * 10,
    "30": 60.0 * 30,
    "60": 60.0 * 60,
    "custom": CUSTOM_LEAD_TIME,
}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def short_id(task_id: str) -> str:
    return task_id[:SHORT_ID_LEN]


def resolve_task_id(state: AppState, raw: str) -> str | None:
    """Accept a full id or any unique prefix of one."""
    raw = raw.strip().lower()
    if not raw:
        return None
    matches = [t.id for t in state.store.iter_tasks() if t.id.lower().startswith(raw)]
    if len(matches) != 1:
        return None
    return matches[0]


def parse_deadline(args: list[str], *, now_ts: float | None = None) -> float | None:
    """
    Parse "YYYY-MM-DD HH:MM" (local time), "+<n>m" or "+<n>h".

    Raises ValueError on anything else, including results that cannot be
    shown as a local date.
    """
    if now_ts is None:
        now_ts = time.time()
    text = " ".join(args).strip()
    if text.startswith("+") and len(text) > 2 and text[-1] in ("m", "h"):
        amount = int(text[1:-1])
        try:
            deadline = now_ts + amount * (60 if text[-1] == "m" else 3600)
        except OverflowError as exc:
            raise ValueError(f"deadline out of range: {text!r}") from exc
    else:
        deadline = datetime.strptime(text, DEADLINE_FORMAT).timestamp()

    try:
        _fmt_ts(deadline)
    except (OverflowError, OSError) as exc:
        raise ValueError(f"deadline out of range: {text!r}") from exc
    return deadline


def _fmt_ts(ts: float) -> str:
    return datetime.fromtimestamp(ts).astimezone().strftime(DEADLINE_FORMAT)


def format_task_line(task: Task, depth: int, *, editing_id: str | None, now_ts: float) -> str:
    mark = "[x]" if task.is_completed else "[ ]"
    parts = [f"{'  ' * depth}{mark} {short_id(task.id)}  {task.title}"]
    if task.priority is not TaskPriority.MEDIUM:
        parts.append(f"({task.priority.display_name})")
    if task.deadline is not None:
        urgency = deadline_urgency(task.deadline, now_ts=now_ts)
        parts.append(f"due {_fmt_ts(task.deadline)} [{urgency.value}]")
    if task.has_notes:
        parts.append("*notes")
    if task.id == editing_id:
        parts.append("<editing>")
    return " ".join(parts)


def _root_blocks(state: AppState, roots: list[Task]) -> Iterator[str]:
    """One rendered block per root: the root line plus its indented subtree."""
    now_ts = time.time()
    editing_id = state.session.editing_task_id

    def walk(task: Task, depth: int, lines: list[str]) -> None:
        lines.append(format_task_line(task, depth, editing_id=editing_id, now_ts=now_ts))
        for sub in task.subtasks:
            walk(sub, depth + 1, lines)

    for root in roots:
        lines: list[str] = []
        walk(root, 0, lines)
        yield "\n".join(lines)


def render_forest(state: AppState, mode: SortMode) -> str:
    roots = sort_tasks(state.store.tasks, mode)
    if not roots:
        return "No tasks yet."
    return "\n".join([f"Tasks (sort by {mode.label}):", *_root_blocks(state, roots)])


def _with_task_id(state: AppState, args: list[str], usage: str) -> tuple[str | None, str | None]:
    """Returns (task_id, error_reply)."""
    if not args:
        return None, usage
    task_id = resolve_task_id(state, args[0])
    if task_id is None:
        return None, f"No single task matches id {args[0]!r}."
    return task_id, None


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    session = state.session
    total = sum(1 for _ in state.store.iter_tasks())
    lead = session.resolve_lead_time() / 60
    lead_src = "custom" if session.lead_time_seconds == CUSTOM_LEAD_TIME else "preset"
    pending = (
        len(state.notification_center.pending()) if state.notification_center is not None else 0
    )
    return (
        "Status:\n"
        f"  Tasks: {len(state.store.tasks)} root / {total} total\n"
        f"  Notifications: {'ON' if session.notifications_enabled else 'OFF'}\n"
        f"  Lead time: {lead:g} min ({lead_src})\n"
        f"  Pending reminders: {pending}\n"
        f"  Sort mode: {(state.sort_mode or SortMode.SMART).label}"
    )


def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if args:
        state.sort_mode = SortMode.parse(args[0])
    mode = state.sort_mode or SortMode.SMART
    if emit is None:
        return render_forest(state, mode)

    # Streamed: one root tree per emit, the reply is only the footer.
    roots = sort_tasks(state.store.tasks, mode)
    if not roots:
        return "No tasks yet."
    emit(f"Tasks (sort by {mode.label}):")
    for block in _root_blocks(state, roots):
        emit(block)
    total = sum(1 for _ in state.store.iter_tasks())
    return f"{len(roots)} root / {total} total."


def cmd_add(state: AppState, args: list[str]) -> str:
    task_id = state.store.add_root_task(" ".join(args))
    if task_id is None:
        return "Usage: /add <title>"
    return f"Added {short_id(task_id)}."


def cmd_sub(state: AppState, args: list[str]) -> str:
    parent_id, err = _with_task_id(state, args, "Usage: /sub <parent id>")
    if parent_id is None:
        return err or ""
    sub_id = state.store.add_subtask(parent_id)
    if sub_id is None:
        return "Parent task not found."
    return f"Added subtask {short_id(sub_id)}. Type its title (or /cancel to keep the placeholder)."


def cmd_edit(state: AppState, args: list[str]) -> str:
    task_id, err = _with_task_id(state, args, "Usage: /edit <id>")
    if task_id is None:
        return err or ""
    state.store.start_editing(task_id)
    return f"Editing {short_id(task_id)}. Type the new title (or /cancel)."


def cmd_title(state: AppState, args: list[str]) -> str:
    editing_id = state.session.editing_task_id
    if editing_id is None:
        return "Nothing is being edited. Use /edit <id> first."
    title = " ".join(args).strip()
    if not title:
        return "Usage: /title <new title>"
    state.store.rename(editing_id, title)
    state.store.end_editing()
    return f"Renamed {short_id(editing_id)}."


def cmd_cancel(state: AppState, args: list[str]) -> str:
    state.store.end_editing()
    return "Editing finished."


def _set_completion(state: AppState, args: list[str], value: bool) -> str:
    task_id, err = _with_task_id(state, args, f"Usage: /{'done' if value else 'undone'} <id>")
    if task_id is None:
        return err or ""
    state.store.toggle_completion(task_id, value)
    return f"{short_id(task_id)} marked {'complete' if value else 'incomplete'} (with subtasks)."


def cmd_done(state: AppState, args: list[str]) -> str:
    return _set_completion(state, args, True)


def cmd_undone(state: AppState, args: list[str]) -> str:
    return _set_completion(state, args, False)


def cmd_del(state: AppState, args: list[str]) -> str:
    task_id, err = _with_task_id(state, args, "Usage: /del <id>")
    if task_id is None:
        return err or ""
    state.store.delete_task(task_id)
    return f"Deleted {short_id(task_id)}."


def cmd_deadline(state: AppState, args: list[str]) -> str:
    usage = "Usage: /deadline <id> <YYYY-MM-DD HH:MM | +<n>m | +<n>h | clear>"
    task_id, err = _with_task_id(state, args, usage)
    if task_id is None:
        return err or ""
    rest = args[1:]
    if not rest:
        return usage
    if rest[0].lower() == "clear":
        state.store.set_deadline(task_id, None)
        return f"Deadline cleared for {short_id(task_id)}."
    try:
        deadline = parse_deadline(rest)
    except ValueError:
        return usage
    state.store.set_deadline(task_id, deadline)
    return f"Deadline for {short_id(task_id)} set to {_fmt_ts(deadline)}."


def cmd_priority(state: AppState, args: list[str]) -> str:
    usage = "Usage: /priority <id> <low|medium|high>"
    task_id, err = _with_task_id(state, args, usage)
    if task_id is None:
        return err or ""
    priority = TaskPriority.parse(args[1] if len(args) > 1 else None)
    if priority is None:
        return usage
    state.store.set_priority(task_id, priority)
    return f"Priority of {short_id(task_id)} set to {priority.display_name}."


def cmd_notes(state: AppState, args: list[str]) -> str:
    task_id, err = _with_task_id(state, args, "Usage: /notes <id> [text]")
    if task_id is None:
        return err or ""
    text = " ".join(args[1:]).strip()
    if not text:
        task = state.store.find(task_id)
        if task is not None and task.notes:
            return f"Notes for {short_id(task_id)}:\n{task.notes}"
        return f"No notes for {short_id(task_id)}."
    if text == "-":
        state.store.set_notes(task_id, None)
        return f"Notes cleared for {short_id(task_id)}."
    state.store.set_notes(task_id, text)
    return f"Notes saved for {short_id(task_id)}."


def cmd_notify(state: AppState, args: list[str]) -> str:
    """
    /notify       -> show status
    /notify on    -> enable reminders
    /notify off   -> disable reminders (pending ones are cancelled)
    """
    enabled = state.session.notifications_enabled
    if not args:
        return f"Notifications are currently {'ON' if enabled else 'OFF'}. Use /notify on or /notify off."

    arg = args[0].lower()
    if arg in ("on", "1", "true", "yes"):
        if enabled:
            return "Notifications are already ON."
        state.notifier.set_notifications_enabled(True, state.store.tasks)
        return "Notifications enabled."

    if arg in ("off", "0", "false", "no"):
        if not enabled:
            return "Notifications are already OFF."
        state.notifier.set_notifications_enabled(False, state.store.tasks)
        return "Notifications disabled."

    return "Usage: /notify on or /notify off."


def cmd_lead(state: AppState, args: list[str]) -> str:
    usage = "Usage: /lead <5|10|30|60|custom> [minutes]"
    if not args:
        return usage
    seconds = LEAD_TIME_ARGS.get(args[0].lower())
    if seconds is None:
        return usage

    if seconds == CUSTOM_LEAD_TIME and len(args) > 1:
        state.session.custom_lead_time_minutes = args[1]
    state.notifier.set_lead_time(seconds, state.store.tasks)
    return f"Reminders fire {state.session.resolve_lead_time() / 60:g} min before deadlines."


def _respond(state: AppState, args: list[str], action: str) -> str:
    task_id, err = _with_task_id(state, args, f"Usage: /{action} <id>")
    if task_id is None:
        return err or ""
    handle_notification_response(state.store, task_id, action)
    if action == ACTION_COMPLETE:
        return f"{short_id(task_id)} marked complete."
    return f"Snoozed {short_id(task_id)}."


def cmd_complete(state: AppState, args: list[str]) -> str:
    return _respond(state, args, ACTION_COMPLETE)


def cmd_snooze(state: AppState, args: list[str]) -> str:
    return _respond(state, args, ACTION_SNOOZE)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show counts and notification settings.")
registry.register(
    "list", cmd_list, help_text="Show tasks: /list [smart|deadline|priority].", aliases=["ls"]
)
registry.register("add", cmd_add, help_text="Add a task: /add <title>.")
registry.register("sub", cmd_sub, help_text="Add a subtask: /sub <parent id>.")
registry.register("edit", cmd_edit, help_text="Start editing a task title: /edit <id>.")
registry.register("title", cmd_title, help_text="Rename the task being edited: /title <text>.")
registry.register("cancel", cmd_cancel, help_text="Stop editing.")
registry.register("done", cmd_done, help_text="Complete a task and its subtasks: /done <id>.")
registry.register("undone", cmd_undone, help_text="Reopen a task and its subtasks: /undone <id>.")
registry.register("del", cmd_del, help_text="Delete a task and its subtasks: /del <id>.", aliases=["rm"])
registry.register(
    "deadline",
    cmd_deadline,
    help_text="Set a deadline: /deadline <id> <YYYY-MM-DD HH:MM | +30m | +2h | clear>.",
)
registry.register("priority", cmd_priority, help_text="Set priority: /priority <id> <low|medium|high>.")
registry.register("notes", cmd_notes, help_text="Show/set notes: /notes <id> [text | -].")
registry.register("notify", cmd_notify, help_text="Enable/disable reminders: /notify on | /notify off.")
registry.register("lead", cmd_lead, help_text="Reminder lead time: /lead <5|10|30|60|custom> [minutes].")
registry.register("complete", cmd_complete, help_text="Reminder action: /complete <id>.")
registry.register("snooze", cmd_snooze, help_text="Reminder action: /snooze <id>.")
