from __future__ import annotations

from sqlalchemy.orm import Session

from schednet_core.interfaces import DependencyRepository, ScheduleRepository, TaskRepository
from schednet_core.services.common.transaction import ScheduleTransaction
from schednet_core.services.task.dependency import TaskDependencyMixin
from schednet_core.services.task.lifecycle import TaskLifecycleMixin
from schednet_core.services.task.query import TaskQueryMixin
from schednet_core.services.task.validation import TaskValidationMixin


class TaskService(
    TaskLifecycleMixin,
    TaskDependencyMixin,
    TaskQueryMixin,
    TaskValidationMixin,
):
    def __init__(
        self,
        session: Session,
        schedule_repo: ScheduleRepository,
        task_repo: TaskRepository,
        dependency_repo: DependencyRepository,
        transaction: ScheduleTransaction | None = None,
    ):
        self._session: Session = session
        self._schedule_repo: ScheduleRepository = schedule_repo
        self._task_repo: TaskRepository = task_repo
        self._dependency_repo: DependencyRepository = dependency_repo
        self._transaction: ScheduleTransaction = transaction or ScheduleTransaction(
            session, schedule_repo, task_repo, dependency_repo
        )
