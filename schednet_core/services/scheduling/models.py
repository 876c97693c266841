from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from schednet_core.models import Task


class BoundSide(str, Enum):
    START = "START"
    FINISH = "FINISH"


@dataclass(frozen=True)
class ConstraintBound:
    """One edge's bound on a task: a start date or a finish boundary."""
    side: BoundSide
    value: date
    dependency_id: str


@dataclass
class CPMTaskInfo:
    task: Task
    early_start: date
    early_finish: date
    late_start: date
    late_finish: date
    total_float: int
    free_float: int
    is_critical: bool


@dataclass
class PropagationResult:
    scope: list[str]
    changed_task_ids: list[str]
