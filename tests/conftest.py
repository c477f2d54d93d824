# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from gentask.core.state import AppState, SessionContext
from gentask.notifications.local_center import LocalNotificationCenter
from gentask.tasks.persistence import PersistenceBridge
from gentask.tasks.settings_store import SqliteSettingsStore
from gentask.tasks.task_notifier import NotificationScheduler
from gentask.tasks.task_sort import SortMode
from gentask.tasks.task_tree import TaskTreeStore

from .fakes import FakeClock, FakeNotificationService, MemorySettingsRepo

# Minute-aligned so reminder fire times are exact in assertions.
NOW = 1_700_000_040.0


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture()
def session() -> SessionContext:
    return SessionContext()


@pytest.fixture()
def settings_repo() -> MemorySettingsRepo:
    return MemorySettingsRepo()


@pytest.fixture()
def persistence(settings_repo: MemorySettingsRepo) -> PersistenceBridge:
    return PersistenceBridge(settings_repo)


@pytest.fixture()
def notifications() -> FakeNotificationService:
    return FakeNotificationService()


@pytest.fixture()
def notifier(
    notifications: FakeNotificationService,
    session: SessionContext,
    persistence: PersistenceBridge,
    clock: FakeClock,
) -> NotificationScheduler:
    return NotificationScheduler(notifications, session, persistence=persistence, clock=clock)


@pytest.fixture()
def store(
    session: SessionContext,
    persistence: PersistenceBridge,
    notifier: NotificationScheduler,
    clock: FakeClock,
) -> TaskTreeStore:
    return TaskTreeStore(session, persistence=persistence, notifier=notifier, clock=clock)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="gentask-test",
        log_level="DEBUG",
        file_log_level="DEBUG",
        reminder_log_level="WARNING",
        console_enabled=False,
        notifications_permitted=True,
        reminder_poll_seconds=0.01,
        data_dir=tmp_path,
        settings_db_path=tmp_path / "settings.sqlite3",
    )


@pytest.fixture()
def state(settings: SimpleNamespace, session: SessionContext, clock: FakeClock) -> AppState:
    """
    AppState wired like bootstrap does, with a real SQLite settings store
    and the in-process notification center.
    """
    persistence = PersistenceBridge(SqliteSettingsStore(settings.settings_db_path))
    center = LocalNotificationCenter(permitted=True)
    notifier = NotificationScheduler(center, session, persistence=persistence, clock=clock)
    store = TaskTreeStore(session, persistence=persistence, notifier=notifier, clock=clock)
    return AppState(
        settings=settings,
        session=session,
        store=store,
        notifier=notifier,
        persistence=persistence,
        notification_center=center,
        sort_mode=SortMode.SMART,
    )
