# src/gentask/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..notifications.local_center import LocalNotificationCenter
    from ..tasks.persistence import PersistenceBridge
    from ..tasks.task_notifier import NotificationScheduler
    from ..tasks.task_sort import SortMode
    from ..tasks.task_tree import TaskTreeStore

CUSTOM_LEAD_TIME = -1.0
DEFAULT_LEAD_TIME_SECONDS = 60.0 * 10
DEFAULT_CUSTOM_LEAD_MINUTES = 15

# Selectable lead times in seconds; CUSTOM_LEAD_TIME defers to custom_lead_time_minutes.
LEAD_TIME_OPTIONS: tuple[float, ...] = (
    60.0 * 5,
    60.0 * 10,
    60.0 * 30,
    60.0 * 60,
    CUSTOM_LEAD_TIME,
)


@dataclass(slots=True)
class SessionContext:
    """
    Process-wide mutable session fields.

    Only the preferences are persisted (see tasks/persistence.py);
    editing_task_id lives for the process only.
    """

    editing_task_id: str | None = None
    notifications_enabled: bool = True
    lead_time_seconds: float = DEFAULT_LEAD_TIME_SECONDS
    custom_lead_time_minutes: str = str(DEFAULT_CUSTOM_LEAD_MINUTES)

    def resolve_lead_time(self) -> float:
        """Lead time in seconds, resolving the custom sentinel."""
        if self.lead_time_seconds != CUSTOM_LEAD_TIME:
            return float(self.lead_time_seconds)
        return float(parse_custom_minutes(self.custom_lead_time_minutes) * 60)


def parse_custom_minutes(raw: str | None) -> int:
    if raw is None or raw.strip() == "":
        return DEFAULT_CUSTOM_LEAD_MINUTES
    try:
        minutes = int(raw.strip())
    except ValueError:
        return DEFAULT_CUSTOM_LEAD_MINUTES
    return minutes if minutes > 0 else DEFAULT_CUSTOM_LEAD_MINUTES


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    session: SessionContext
    store: TaskTreeStore
    notifier: NotificationScheduler
    persistence: PersistenceBridge
    notification_center: LocalNotificationCenter | None = None

    sort_mode: SortMode | None = None
