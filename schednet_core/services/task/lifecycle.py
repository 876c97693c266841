from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from schednet_core.events.domain_events import domain_events
from schednet_core.exceptions import ConcurrencyError
from schednet_core.interfaces import TaskRepository
from schednet_core.models import ChildPolicy, SchedulingMode, Task, TaskStatus
from schednet_core.services.common.transaction import ScheduleTransaction
from schednet_core.services.scheduling.auto_scheduler import AutoScheduler
from schednet_core.services.scheduling.budget import PassBudget
from schednet_core.services.scheduling.hierarchy import HierarchyValidator
from schednet_core.services.scheduling.store import TaskStore


logger = logging.getLogger(__name__)


class _Unchanged:
    def __repr__(self) -> str:
        return "UNCHANGED"


# Marks "leave the parent alone" in update_task, since None means "make it a root".
UNCHANGED = _Unchanged()


class TaskLifecycleMixin:
    _task_repo: TaskRepository
    _transaction: ScheduleTransaction

    def create_task(
        self,
        schedule_id: str,
        title: str,
        start_date: date,
        end_date: Optional[date] = None,
        description: str = "",
        notes: str = "",
        parent_task_id: Optional[str] = None,
        order_index: Optional[int] = None,
        scheduling_mode: SchedulingMode = SchedulingMode.MANUAL,
        is_milestone: bool = False,
        status: TaskStatus = TaskStatus.NOT_STARTED,
        progress: int = 0,
        baseline_start_date: Optional[date] = None,
        baseline_end_date: Optional[date] = None,
        baseline_duration: Optional[int] = None,
    ) -> Task:
        if end_date is None:
            end_date = start_date
        self._validate_task_title(title)
        self._validate_dates(start_date, end_date, is_milestone)
        self._validate_progress(progress)
        self._validate_order_index(order_index)

        def work(store: TaskStore, budget: PassBudget) -> Task:
            if parent_task_id is not None:
                self._require_parent_in_store(store, parent_task_id)
            task = Task.create(
                schedule_id=schedule_id,
                title=title.strip(),
                start_date=start_date,
                end_date=end_date,
                is_milestone=is_milestone,
                description=description.strip(),
                notes=notes,
                parent_task_id=parent_task_id,
                scheduling_mode=scheduling_mode,
                status=status,
                progress=progress,
                baseline_start_date=baseline_start_date,
                baseline_end_date=baseline_end_date,
                baseline_duration=baseline_duration,
            )
            hierarchy = HierarchyValidator(store)
            store.add(task)
            hierarchy.place(task, order_index)
            hierarchy.recompute_codes()
            return task

        task = self._transaction.run(schedule_id, work, action="create_task")
        logger.info(f"Created task {task.id} - {task.title} ({task.wbs_code}) in schedule {schedule_id}")
        domain_events.tasks_changed.emit(schedule_id)
        return task

    def update_task(
        self,
        task_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        notes: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        parent_task_id: Optional[str] | _Unchanged = UNCHANGED,
        order_index: Optional[int] = None,
        scheduling_mode: Optional[SchedulingMode] = None,
        is_milestone: Optional[bool] = None,
        status: Optional[TaskStatus] = None,
        progress: Optional[int] = None,
        baseline_start_date: Optional[date] = None,
        baseline_end_date: Optional[date] = None,
        baseline_duration: Optional[int] = None,
        expected_version: Optional[int] = None,
    ) -> Task:
        existing = self._require_task(task_id)
        if title is not None:
            self._validate_task_title(title)
        if progress is not None:
            self._validate_progress(progress)
        self._validate_order_index(order_index)

        def work(store: TaskStore, budget: PassBudget) -> Task:
            task = store.get(task_id)
            if expected_version is not None and task.version != expected_version:
                raise ConcurrencyError(
                    "Task changed since you opened it. Refresh and try again.",
                    code="STALE_WRITE",
                )

            milestone = task.is_milestone if is_milestone is None else is_milestone
            new_start = start_date if start_date is not None else task.start_date
            if end_date is not None:
                new_end = end_date
            elif milestone:
                new_end = new_start
            else:
                new_end = task.end_date
            self._validate_dates(new_start, new_end, milestone)

            hierarchy = HierarchyValidator(store)
            moves = parent_task_id is not UNCHANGED and parent_task_id != task.parent_task_id
            if moves and parent_task_id is not None:
                self._require_parent_in_store(store, parent_task_id)
                hierarchy.validate_parent(task_id, parent_task_id)

            reschedule = (
                (new_start, new_end) != (task.start_date, task.end_date)
                or milestone != task.is_milestone
                or (scheduling_mode is not None and scheduling_mode != task.scheduling_mode)
            )

            task.start_date = new_start
            task.end_date = new_end
            task.is_milestone = milestone
            task.refresh_duration()

            if title is not None:
                task.title = title.strip()
            if description is not None:
                task.description = description.strip()
            if notes is not None:
                task.notes = notes
            if scheduling_mode is not None:
                task.scheduling_mode = scheduling_mode
            if status is not None:
                task.status = status
            if progress is not None:
                task.progress = progress
            if baseline_start_date is not None:
                task.baseline_start_date = baseline_start_date
            if baseline_end_date is not None:
                task.baseline_end_date = baseline_end_date
            if baseline_duration is not None:
                task.baseline_duration = baseline_duration

            if moves:
                hierarchy.set_parent(task_id, parent_task_id, order_index)
            elif order_index is not None and order_index != task.order_index:
                hierarchy.place(task, order_index)
            if moves or order_index is not None:
                hierarchy.recompute_codes()

            if reschedule:
                # A task switched to AUTO without explicit dates snaps to its own constraints too.
                explicit_dates = start_date is not None or end_date is not None
                include_start = task.scheduling_mode == SchedulingMode.AUTO and not explicit_dates
                AutoScheduler(budget).schedule_from(store, task_id, include_start=include_start)
            return task

        task = self._transaction.run(existing.schedule_id, work, action="update_task")
        logger.info(f"Updated task {task.id} - {task.title}")
        domain_events.tasks_changed.emit(task.schedule_id)
        return task

    def delete_task(self, task_id: str, child_policy: ChildPolicy = ChildPolicy.PROMOTE_TO_ROOT) -> None:
        """
        Remove a task, detaching its dependency edges. Its children become roots
        or move up to the deleted task's parent, depending on child_policy.
        """
        existing = self._require_task(task_id)

        def work(store: TaskStore, budget: PassBudget) -> int:
            task = store.get(task_id)
            new_parent_id = (
                task.parent_task_id if child_policy == ChildPolicy.REPARENT_TO_GRANDPARENT else None
            )
            hierarchy = HierarchyValidator(store)
            for child in store.children(task_id):
                child.parent_task_id = new_parent_id
                hierarchy.place(child)
            _removed, detached = store.remove(task_id)
            hierarchy.recompute_codes()
            AutoScheduler(budget).schedule_all(store)
            return len(detached)

        detached_count = self._transaction.run(existing.schedule_id, work, action="delete_task")
        logger.info(f"Deleted task {task_id}; detached {detached_count} dependency edge(s)")
        domain_events.tasks_changed.emit(existing.schedule_id)
        if detached_count:
            domain_events.dependencies_changed.emit(existing.schedule_id)
