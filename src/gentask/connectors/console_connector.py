# src/gentask/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import short_id
from ..core.state import AppState
from ..notifications.local_center import Reminder

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleReminderSink:
    """Prints delivered reminders between prompts."""

    async def deliver(self, reminder: Reminder) -> None:
        sid = short_id(reminder.task_id)
        actions = " or ".join(f"/{a} {sid}" for a in reminder.actions)
        sys.stdout.write(f"\n[{_ts_local()}] [REMINDER] {reminder.title}: {reminder.body} ({actions})\n")
        sys.stdout.flush()


def handle_plain_text(state: AppState, text: str) -> str:
    """
    Non-command input.

    While a task is being edited the text becomes its title and editing ends;
    otherwise it adds a new root task.
    """
    editing_id = state.session.editing_task_id
    if editing_id is not None:
        state.store.rename(editing_id, text)
        state.store.end_editing()
        return f"Renamed {short_id(editing_id)}."

    task_id = state.store.add_root_task(text)
    if task_id is None:
        return ""
    # A typed title is final; there is no inline edit to wait for in the console.
    state.store.end_editing()
    return f"Added {short_id(task_id)}."


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a task title to add it. Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        _print_ts(text)

    while True:
        try:
            editing = state.session.editing_task_id
            prompt = f"({short_id(editing)}) title> " if editing else "> "
            user_input = input(prompt).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = command_registry.handle(state, user_input, emit=emit)
            if reply is None:
                reply = handle_plain_text(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply:
            _print_ts(reply)

    logger.info("Console connector finished.")
