# src/gentask/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts:
- the reminder delivery loop in a background thread,
- the console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import ConsoleReminderSink, run_console_loop
from ..logging_setup import setup_logging
from ..notifications.reminder_runner import ReminderBackgroundRunner, start_reminders_in_background

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort final save (no exceptions should escape)."""
    try:
        state.persistence.save(state.store.tasks)
        state.persistence.save_preferences(state.session)
    except Exception:
        logger.exception("Failed to save tasks on shutdown.")


def main() -> None:
    settings = get_settings()

    setup_logging(settings)

    logger.info("Starting %s...", settings.app_name)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    reminders: ReminderBackgroundRunner | None = None
    if state.notification_center is not None:
        reminders = start_reminders_in_background(
            state.notification_center,
            ConsoleReminderSink(),
            interval_seconds=settings.reminder_poll_seconds,
        )

    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        if settings.console_enabled:
            # input() gets Ctrl+C as KeyboardInterrupt; no handler needed here.
            run_console_loop(state)
            stop_main.set()
        else:
            try:
                signal.signal(signal.SIGINT, _handle_signal)
                signal.signal(signal.SIGTERM, _handle_signal)
            except (ValueError, OSError):
                logger.debug("Signal handlers not installed.", exc_info=True)
            logger.info("Console disabled. Delivering reminders only. Press Ctrl+C to stop.")
            stop_main.wait()

    finally:
        if reminders is not None:
            reminders.stop()
            reminders.join(timeout=10.0)

        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
