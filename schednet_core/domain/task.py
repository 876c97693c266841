from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date
from typing import Any, Optional

from schednet_core.domain.enums import DependencyType, SchedulingMode, TaskStatus
from schednet_core.domain.identifiers import generate_id


def compute_duration_days(start_date: date, end_date: date, is_milestone: bool) -> int:
    """Inclusive day count; milestones are zero-duration."""
    if is_milestone:
        return 0
    return (end_date - start_date).days + 1


@dataclass
class Task:
    id: str
    schedule_id: str
    title: str
    start_date: date
    end_date: date
    description: str = ""
    notes: str = ""
    duration_days: int = 1

    parent_task_id: Optional[str] = None
    order_index: int = 1
    wbs_code: str = ""
    level: int = 0

    scheduling_mode: SchedulingMode = SchedulingMode.MANUAL
    is_milestone: bool = False
    status: TaskStatus = TaskStatus.NOT_STARTED
    progress: int = 0

    # CPM fields; None until a critical-path run. Finish values are finish
    # boundaries (early_start + duration_days), not inclusive last days.
    early_start: Optional[date] = None
    early_finish: Optional[date] = None
    late_start: Optional[date] = None
    late_finish: Optional[date] = None
    total_float: Optional[int] = None
    free_float: Optional[int] = None
    is_critical_path: Optional[bool] = None

    baseline_start_date: Optional[date] = None
    baseline_end_date: Optional[date] = None
    baseline_duration: Optional[int] = None

    version: int = 1

    @staticmethod
    def create(
        schedule_id: str,
        title: str,
        start_date: date,
        end_date: date,
        is_milestone: bool = False,
        **extra,
    ) -> "Task":
        return Task(
            id=generate_id(),
            schedule_id=schedule_id,
            title=title,
            start_date=start_date,
            end_date=end_date,
            is_milestone=is_milestone,
            duration_days=compute_duration_days(start_date, end_date, is_milestone),
            **extra,
        )

    def refresh_duration(self) -> None:
        self.duration_days = compute_duration_days(self.start_date, self.end_date, self.is_milestone)

    def snapshot(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class TaskDependency:
    id: str
    predecessor_task_id: str
    successor_task_id: str
    dependency_type: DependencyType = DependencyType.FINISH_TO_START
    lag_days: int = 0

    @staticmethod
    def create(
        predecessor_id: str,
        successor_id: str,
        dependency_type: DependencyType = DependencyType.FINISH_TO_START,
        lag_days: int = 0,
    ) -> "TaskDependency":
        return TaskDependency(
            id=generate_id(),
            predecessor_task_id=predecessor_id,
            successor_task_id=successor_id,
            dependency_type=dependency_type,
            lag_days=lag_days,
        )


__all__ = ["Task", "TaskDependency", "compute_duration_days"]
