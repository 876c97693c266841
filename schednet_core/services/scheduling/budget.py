from __future__ import annotations

import time
from typing import Optional

from schednet_core.exceptions import SchedulingTimeoutError


class PassBudget:
    """Wall-clock budget shared by every pass of one engine operation."""

    def __init__(self, timeout_seconds: Optional[float] = None):
        self._timeout_seconds: Optional[float] = timeout_seconds
        self._deadline: Optional[float] = (
            time.monotonic() + timeout_seconds if timeout_seconds is not None else None
        )

    def check(self) -> None:
        if self._deadline is not None and time.monotonic() > self._deadline:
            raise SchedulingTimeoutError(
                f"Scheduling pass exceeded its {self._timeout_seconds:g}s budget.",
                code="SCHEDULE_TIMEOUT",
            )


UNLIMITED = PassBudget()
