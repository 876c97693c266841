from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from schednet_core.interfaces import TaskRepository
from schednet_core.models import Task
from schednet_core.services.scheduling.store import wbs_sort_key


@dataclass(frozen=True)
class BaselineVariance:
    task_id: str
    wbs_code: str
    title: str
    start_variance_days: Optional[int]
    finish_variance_days: Optional[int]
    duration_variance_days: Optional[int]


class TaskQueryMixin:
    _task_repo: TaskRepository

    def get_task(self, task_id: str) -> Task:
        return self._require_task(task_id)

    def list_tasks(self, schedule_id: str) -> List[Task]:
        tasks = self._task_repo.list_by_schedule(schedule_id)
        return sorted(tasks, key=lambda t: (wbs_sort_key(t.wbs_code), t.order_index, t.id))

    def get_baseline_variance(self, schedule_id: str) -> List[BaselineVariance]:
        """
        Slip of each baselined task against its captured baseline, in days.
        Positive means later or longer than planned. Tasks without any baseline
        field are left out.
        """
        rows: List[BaselineVariance] = []
        for task in self.list_tasks(schedule_id):
            if (
                task.baseline_start_date is None
                and task.baseline_end_date is None
                and task.baseline_duration is None
            ):
                continue
            rows.append(
                BaselineVariance(
                    task_id=task.id,
                    wbs_code=task.wbs_code,
                    title=task.title,
                    start_variance_days=(
                        (task.start_date - task.baseline_start_date).days
                        if task.baseline_start_date
                        else None
                    ),
                    finish_variance_days=(
                        (task.end_date - task.baseline_end_date).days
                        if task.baseline_end_date
                        else None
                    ),
                    duration_variance_days=(
                        task.duration_days - task.baseline_duration
                        if task.baseline_duration is not None
                        else None
                    ),
                )
            )
        return rows
