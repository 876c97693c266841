from __future__ import annotations

import logging
from typing import List

from schednet_core.events.domain_events import domain_events
from schednet_core.exceptions import UnknownDependencyError, ValidationError
from schednet_core.interfaces import DependencyRepository, TaskRepository
from schednet_core.models import DependencyType, TaskDependency
from schednet_core.services.common.transaction import ScheduleTransaction
from schednet_core.services.scheduling.auto_scheduler import AutoScheduler
from schednet_core.services.scheduling.budget import PassBudget
from schednet_core.services.scheduling.store import TaskStore


logger = logging.getLogger(__name__)


class TaskDependencyMixin:
    _task_repo: TaskRepository
    _dependency_repo: DependencyRepository
    _transaction: ScheduleTransaction

    def add_dependency(
        self,
        predecessor_id: str,
        successor_id: str,
        dependency_type: DependencyType = DependencyType.FINISH_TO_START,
        lag_days: int = 0,
    ) -> TaskDependency:
        self._validate_not_self_dependency(predecessor_id, successor_id)
        self._validate_lag(lag_days)
        predecessor = self._require_task(predecessor_id)
        successor = self._require_task(successor_id)
        if predecessor.schedule_id != successor.schedule_id:
            raise ValidationError(
                "Cannot create dependency between tasks in different schedules.",
                code="DEPENDENCY_CROSS_SCHEDULE",
            )

        def work(store: TaskStore, budget: PassBudget) -> TaskDependency:
            dep = store.graph.add_edge(predecessor_id, successor_id, dependency_type, lag_days)
            AutoScheduler(budget).schedule_from(store, predecessor_id)
            return dep

        dep = self._transaction.run(predecessor.schedule_id, work, action="add_dependency")
        logger.info(
            f"Added dependency {dep.id}: {predecessor_id} -> {successor_id} "
            f"({dep.dependency_type.value}, lag {dep.lag_days})"
        )
        domain_events.dependencies_changed.emit(predecessor.schedule_id)
        domain_events.tasks_changed.emit(predecessor.schedule_id)
        return dep

    def delete_dependency(self, dependency_id: str) -> None:
        dep = self._dependency_repo.get(dependency_id)
        if dep is None:
            raise UnknownDependencyError("Dependency not found.", code="DEPENDENCY_NOT_FOUND")
        schedule_id = self._require_task(dep.predecessor_task_id).schedule_id

        def work(store: TaskStore, budget: PassBudget) -> None:
            store.graph.remove_edge(dependency_id)
            # Removing an edge only relaxes constraints; a full pass settles anything it held back.
            AutoScheduler(budget).schedule_all(store)

        self._transaction.run(schedule_id, work, action="delete_dependency")
        logger.info(f"Deleted dependency {dependency_id}")
        domain_events.dependencies_changed.emit(schedule_id)
        domain_events.tasks_changed.emit(schedule_id)

    def list_dependencies_for_task(self, task_id: str) -> List[TaskDependency]:
        self._require_task(task_id)
        return self._dependency_repo.list_by_task(task_id)
