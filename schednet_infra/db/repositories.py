# schednet_infra/db/repositories.py
from __future__ import annotations
from typing import List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session

from schednet_core.interfaces import DependencyRepository, ScheduleRepository, TaskRepository
from schednet_core.models import Schedule, Task, TaskDependency
from schednet_infra.db.mappers import (
    dependency_from_orm,
    dependency_to_orm,
    schedule_from_orm,
    schedule_to_orm,
    task_from_orm,
    task_to_orm,
)
from schednet_infra.db.models import ScheduleORM, TaskDependencyORM, TaskORM
from schednet_infra.db.optimistic import update_with_version_check


class SqlAlchemyScheduleRepository(ScheduleRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, schedule: Schedule) -> None:
        self.session.add(schedule_to_orm(schedule))

    def update(self, schedule: Schedule) -> int:
        return update_with_version_check(
            self.session,
            ScheduleORM,
            schedule.id,
            schedule.version,
            {
                "name": schedule.name,
                "schedule_start_date": schedule.schedule_start_date,
                "schedule_end_date": schedule.schedule_end_date,
                "is_archived": schedule.is_archived,
            },
            not_found_message="Schedule not found.",
            stale_message="Schedule changed since you opened it. Refresh and try again.",
            not_found_code="SCHEDULE_NOT_FOUND",
        )

    def get(self, schedule_id: str) -> Optional[Schedule]:
        obj = self.session.get(ScheduleORM, schedule_id)
        return schedule_from_orm(obj) if obj else None

    def list_all(self, include_archived: bool = False) -> List[Schedule]:
        stmt = select(ScheduleORM).order_by(ScheduleORM.name, ScheduleORM.id)
        if not include_archived:
            stmt = stmt.where(ScheduleORM.is_archived.is_(False))
        rows = self.session.execute(stmt).scalars().all()
        return [schedule_from_orm(row) for row in rows]

    def delete(self, schedule_id: str) -> None:
        task_ids_subq = select(TaskORM.id).where(TaskORM.schedule_id == schedule_id)
        self.session.execute(
            delete(TaskDependencyORM).where(
                or_(
                    TaskDependencyORM.predecessor_task_id.in_(task_ids_subq),
                    TaskDependencyORM.successor_task_id.in_(task_ids_subq),
                )
            )
        )
        self.session.execute(delete(TaskORM).where(TaskORM.schedule_id == schedule_id))
        self.session.query(ScheduleORM).filter_by(id=schedule_id).delete()

    def bump_version(self, schedule_id: str, expected_version: int) -> int:
        return update_with_version_check(
            self.session,
            ScheduleORM,
            schedule_id,
            expected_version,
            {},
            not_found_message="Schedule not found.",
            stale_message="Schedule was modified by another writer.",
            not_found_code="SCHEDULE_NOT_FOUND",
            stale_code="SCHEDULE_STALE",
        )


class SqlAlchemyTaskRepository(TaskRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, task: Task) -> None:
        self.session.add(task_to_orm(task))

    def update(self, task: Task) -> None:
        self.session.merge(task_to_orm(task))

    def delete(self, task_id: str) -> None:
        self.session.query(TaskORM).filter_by(id=task_id).delete()

    def get(self, task_id: str) -> Optional[Task]:
        obj = self.session.get(TaskORM, task_id)
        return task_from_orm(obj) if obj else None

    def list_by_schedule(self, schedule_id: str) -> List[Task]:
        stmt = select(TaskORM).where(TaskORM.schedule_id == schedule_id)
        rows = self.session.execute(stmt).scalars().all()
        return [task_from_orm(row) for row in rows]


class SqlAlchemyDependencyRepository(DependencyRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, dependency: TaskDependency) -> None:
        self.session.add(dependency_to_orm(dependency))

    def get(self, dependency_id: str) -> Optional[TaskDependency]:
        obj = self.session.get(TaskDependencyORM, dependency_id)
        return dependency_from_orm(obj) if obj else None

    def delete(self, dependency_id: str) -> None:
        self.session.query(TaskDependencyORM).filter_by(id=dependency_id).delete()

    def list_by_schedule(self, schedule_id: str) -> List[TaskDependency]:
        task_ids_subq = select(TaskORM.id).where(TaskORM.schedule_id == schedule_id)
        stmt = select(TaskDependencyORM).where(
            TaskDependencyORM.predecessor_task_id.in_(task_ids_subq),
            TaskDependencyORM.successor_task_id.in_(task_ids_subq),
        )
        rows = self.session.execute(stmt).scalars().all()
        return [dependency_from_orm(row) for row in rows]

    def list_by_task(self, task_id: str) -> List[TaskDependency]:
        stmt = select(TaskDependencyORM).where(
            or_(
                TaskDependencyORM.predecessor_task_id == task_id,
                TaskDependencyORM.successor_task_id == task_id,
            )
        )
        rows = self.session.execute(stmt).scalars().all()
        return [dependency_from_orm(row) for row in rows]


__all__ = [
    "SqlAlchemyScheduleRepository",
    "SqlAlchemyTaskRepository",
    "SqlAlchemyDependencyRepository",
]
