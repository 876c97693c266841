from __future__ import annotations

from enum import Enum


class TaskStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ON_HOLD = "ON_HOLD"
    CANCELLED = "CANCELLED"


class SchedulingMode(str, Enum):
    MANUAL = "MANUAL"
    AUTO = "AUTO"


class DependencyType(str, Enum):
    FINISH_TO_START = "FS"
    START_TO_START = "SS"
    FINISH_TO_FINISH = "FF"
    START_TO_FINISH = "SF"


class ChildPolicy(str, Enum):
    """What happens to the children of a deleted task."""

    PROMOTE_TO_ROOT = "PROMOTE_TO_ROOT"
    REPARENT_TO_GRANDPARENT = "REPARENT_TO_GRANDPARENT"


__all__ = ["TaskStatus", "SchedulingMode", "DependencyType", "ChildPolicy"]
