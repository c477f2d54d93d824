# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class ScheduledCall:
    task_id: str
    fire_at: float
    title: str
    body: str
    category_id: str


class FakeNotificationService:
    """
    In-memory NotificationService.

    - `pending` mirrors what the OS would have queued (one entry per task id)
    - `scheduled` / `cancelled` capture every call for assertions
    - `fail` makes every call raise, to exercise error absorption
    """

    def __init__(self, *, granted: bool = True) -> None:
        self.granted = granted
        self.fail = False
        self.pending: dict[str, ScheduledCall] = {}
        self.scheduled: list[ScheduledCall] = []
        self.cancelled: list[str] = []

    def schedule(
        self,
        task_id: str,
        fire_at: float,
        title: str,
        body: str,
        category_id: str,
    ) -> None:
        if self.fail:
            raise RuntimeError("notification backend unavailable")
        call = ScheduledCall(task_id, fire_at, title, body, category_id)
        self.scheduled.append(call)
        self.pending[task_id] = call

    def cancel(self, task_id: str) -> None:
        if self.fail:
            raise RuntimeError("notification backend unavailable")
        self.cancelled.append(task_id)
        self.pending.pop(task_id, None)

    def request_permission(self) -> bool:
        return self.granted


class FakeClock:
    """Callable clock with a settable `now`."""

    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MemorySettingsRepo:
    """Dict-backed SettingsRepo; `fail_reads` / `fail_writes` simulate I/O errors."""

    def __init__(self) -> None:
        self.data: dict[str, bytes] = {}
        self.fail_reads = False
        self.fail_writes = False
        self.writes = 0

    def get(self, key: str) -> bytes | None:
        if self.fail_reads:
            raise OSError("disk read failed")
        return self.data.get(key)

    def set(self, key: str, value: bytes) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes += 1
        self.data[key] = value


@dataclass(slots=True)
class RecordingSink:
    """ReminderSink that records deliveries; optionally fails the first N."""

    delivered: list = field(default_factory=list)
    fail_first: int = 0

    async def deliver(self, reminder) -> None:
        if self.fail_first > 0:
            self.fail_first -= 1
            raise RuntimeError("sink down")
        self.delivered.append(reminder)
