from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from schednet_core.exceptions import UnknownScheduleError, UnknownTaskError
from schednet_core.interfaces import DependencyRepository, ScheduleRepository, TaskRepository
from schednet_core.models import Schedule, Task, TaskDependency
from schednet_core.services.scheduling.graph import DependencyGraph


logger = logging.getLogger(__name__)


def wbs_sort_key(wbs_code: str) -> tuple[int, ...]:
    """'2.10.1' -> (2, 10, 1), so '10' sorts after '9'."""
    parts: list[int] = []
    for part in (wbs_code or "").split("."):
        if part.isdigit():
            parts.append(int(part))
    return tuple(parts)


class TaskStore:
    """
    Arena of one schedule's tasks for the duration of a single engine operation.
    Loaded once, mutated in memory, flushed once.
    """

    def __init__(
        self,
        schedule: Schedule,
        tasks: Iterable[Task],
        dependencies: Iterable[TaskDependency] = (),
    ):
        self.schedule: Schedule = schedule
        self._tasks: Dict[str, Task] = {t.id: t for t in tasks}
        self._snapshots: Dict[str, dict] = {t.id: t.snapshot() for t in self._tasks.values()}
        self._added: set[str] = set()
        self._removed: Dict[str, Task] = {}
        self.graph: DependencyGraph = DependencyGraph(self._tasks.keys(), dependencies)

    @classmethod
    def load(
        cls,
        schedule_id: str,
        schedule_repo: ScheduleRepository,
        task_repo: TaskRepository,
        dependency_repo: DependencyRepository,
    ) -> "TaskStore":
        schedule = schedule_repo.get(schedule_id)
        if schedule is None:
            raise UnknownScheduleError("Schedule not found.", code="SCHEDULE_NOT_FOUND")
        tasks = task_repo.list_by_schedule(schedule_id)
        deps = dependency_repo.list_by_schedule(schedule_id)
        logger.debug(
            "Loaded schedule %s: %d tasks, %d dependencies", schedule_id, len(tasks), len(deps)
        )
        return cls(schedule, tasks, deps)

    # ---------- lookups ----------

    def get(self, task_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise UnknownTaskError(f"Task {task_id} not found in schedule.", code="TASK_NOT_FOUND")
        return task

    def find(self, task_id: Optional[str]) -> Optional[Task]:
        if task_id is None:
            return None
        return self._tasks.get(task_id)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def all(self) -> List[Task]:
        return sorted(self._tasks.values(), key=lambda t: self.sort_key(t.id))

    def ids(self) -> List[str]:
        return list(self._tasks.keys())

    def children(self, parent_id: Optional[str]) -> List[Task]:
        kids = [t for t in self._tasks.values() if t.parent_task_id == parent_id]
        return sorted(kids, key=lambda t: (t.order_index, t.id))

    def roots(self) -> List[Task]:
        return self.children(None)

    def siblings(self, task_id: str) -> List[Task]:
        task = self.get(task_id)
        return [t for t in self.children(task.parent_task_id) if t.id != task_id]

    def predecessors(self, task_id: str) -> List[Task]:
        return [self._tasks[d.predecessor_task_id] for d in self.graph.incoming(task_id)]

    def successors(self, task_id: str) -> List[Task]:
        return [self._tasks[d.successor_task_id] for d in self.graph.outgoing(task_id)]

    def sort_key(self, task_id: str) -> tuple:
        task = self._tasks[task_id]
        return (wbs_sort_key(task.wbs_code), task.order_index, task.id)

    # ---------- mutation ----------

    def add(self, task: Task) -> None:
        self._tasks[task.id] = task
        self._added.add(task.id)
        self.graph.add_node(task.id)

    def remove(self, task_id: str) -> tuple[Task, List[TaskDependency]]:
        task = self.get(task_id)
        detached = self.graph.remove_node(task_id)
        del self._tasks[task_id]
        if task_id in self._added:
            self._added.discard(task_id)
        else:
            self._removed[task_id] = task
        return task, detached

    # ---------- persistence ----------

    def changed_tasks(self) -> List[Task]:
        changed: List[Task] = []
        for task_id, task in self._tasks.items():
            if task_id in self._added:
                continue
            before = self._snapshots.get(task_id)
            if before is not None and before != task.snapshot():
                changed.append(task)
        return changed

    def has_pending_changes(self) -> bool:
        return bool(
            self._added
            or self._removed
            or self.graph.added_edges()
            or self.graph.removed_edges()
            or self.changed_tasks()
        )

    def flush(self, task_repo: TaskRepository, dependency_repo: DependencyRepository) -> List[Task]:
        """Write every pending change through the repositories; returns updated tasks."""
        for dep in self.graph.removed_edges():
            dependency_repo.delete(dep.id)
        for task_id in self._removed:
            task_repo.delete(task_id)
        for task_id in self._added:
            task_repo.add(self._tasks[task_id])

        changed = self.changed_tasks()
        for task in changed:
            task.version += 1
            task_repo.update(task)

        for dep in self.graph.added_edges():
            dependency_repo.add(dep)

        logger.debug(
            "Flushed schedule %s: +%d/-%d tasks, %d updated, +%d/-%d dependencies",
            self.schedule.id,
            len(self._added),
            len(self._removed),
            len(changed),
            len(self.graph.added_edges()),
            len(self.graph.removed_edges()),
        )
        return changed


__all__ = ["TaskStore", "wbs_sort_key"]
