# schednet_core/interfaces.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from schednet_core.models import Schedule, Task, TaskDependency


class ScheduleRepository(ABC):
    @abstractmethod
    def add(self, schedule: Schedule) -> None: ...

    @abstractmethod
    def update(self, schedule: Schedule) -> int:
        """Version-checked write of the schedule fields; returns the new version."""

    @abstractmethod
    def get(self, schedule_id: str) -> Optional[Schedule]: ...

    @abstractmethod
    def list_all(self, include_archived: bool = False) -> List[Schedule]: ...

    @abstractmethod
    def delete(self, schedule_id: str) -> None:
        """Remove the schedule together with its tasks and their dependencies."""

    @abstractmethod
    def bump_version(self, schedule_id: str, expected_version: int) -> int:
        """Compare-and-set the schedule version; raises ConcurrencyError when stale."""


class TaskRepository(ABC):
    @abstractmethod
    def add(self, task: Task) -> None: ...

    @abstractmethod
    def update(self, task: Task) -> None: ...

    @abstractmethod
    def delete(self, task_id: str) -> None: ...

    @abstractmethod
    def get(self, task_id: str) -> Optional[Task]: ...

    @abstractmethod
    def list_by_schedule(self, schedule_id: str) -> List[Task]: ...


class DependencyRepository(ABC):
    @abstractmethod
    def add(self, dependency: TaskDependency) -> None: ...

    @abstractmethod
    def get(self, dependency_id: str) -> Optional[TaskDependency]: ...

    @abstractmethod
    def delete(self, dependency_id: str) -> None: ...

    @abstractmethod
    def list_by_schedule(self, schedule_id: str) -> List[TaskDependency]: ...

    @abstractmethod
    def list_by_task(self, task_id: str) -> List[TaskDependency]: ...


__all__ = ["ScheduleRepository", "TaskRepository", "DependencyRepository"]
