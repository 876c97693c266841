from __future__ import annotations

from contextlib import contextmanager
from threading import Lock, RLock
from typing import Dict, Iterator, Optional

from schednet_core.exceptions import SchedulingTimeoutError


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock: RLock = RLock()
        self.users: int = 0


class ScheduleLockRegistry:
    """
    One re-entrant lock per schedule id. Operations on the same schedule are
    serialised; different schedules never contend.

    An entry lives only while some thread holds or waits for it, so the
    registry stays as small as the number of schedules currently in use.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, _Entry] = {}
        self._guard: Lock = Lock()

    def active_count(self) -> int:
        """Schedules currently held or waited on."""
        with self._guard:
            return len(self._entries)

    def _checkout(self, schedule_id: str) -> _Entry:
        with self._guard:
            entry = self._entries.get(schedule_id)
            if entry is None:
                entry = _Entry()
                self._entries[schedule_id] = entry
            entry.users += 1
            return entry

    def _checkin(self, schedule_id: str, entry: _Entry) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._entries[schedule_id]

    @contextmanager
    def hold(self, schedule_id: str, timeout_seconds: Optional[float] = None) -> Iterator[None]:
        entry = self._checkout(schedule_id)
        try:
            acquired = entry.lock.acquire(
                timeout=timeout_seconds if timeout_seconds is not None else -1
            )
            if not acquired:
                raise SchedulingTimeoutError(
                    f"Timed out waiting for schedule {schedule_id}.",
                    code="SCHEDULE_LOCK_TIMEOUT",
                )
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            self._checkin(schedule_id, entry)


# Process-wide default
schedule_locks = ScheduleLockRegistry()


__all__ = ["ScheduleLockRegistry", "schedule_locks"]
