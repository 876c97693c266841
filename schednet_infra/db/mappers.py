from __future__ import annotations

from schednet_core.models import Schedule, Task, TaskDependency
from schednet_infra.db.models import ScheduleORM, TaskDependencyORM, TaskORM


def schedule_to_orm(schedule: Schedule) -> ScheduleORM:
    return ScheduleORM(
        id=schedule.id,
        name=schedule.name,
        schedule_start_date=schedule.schedule_start_date,
        schedule_end_date=schedule.schedule_end_date,
        version=schedule.version,
        is_archived=schedule.is_archived,
    )


def schedule_from_orm(obj: ScheduleORM) -> Schedule:
    return Schedule(
        id=obj.id,
        name=obj.name,
        schedule_start_date=obj.schedule_start_date,
        schedule_end_date=obj.schedule_end_date,
        version=obj.version,
        is_archived=bool(obj.is_archived),
    )


def task_to_orm(task: Task) -> TaskORM:
    return TaskORM(
        id=task.id,
        schedule_id=task.schedule_id,
        title=task.title,
        description=task.description,
        notes=task.notes,
        start_date=task.start_date,
        end_date=task.end_date,
        duration_days=task.duration_days,
        parent_task_id=task.parent_task_id,
        order_index=task.order_index,
        wbs_code=task.wbs_code,
        level=task.level,
        scheduling_mode=task.scheduling_mode,
        is_milestone=task.is_milestone,
        status=task.status,
        progress=task.progress,
        early_start=task.early_start,
        early_finish=task.early_finish,
        late_start=task.late_start,
        late_finish=task.late_finish,
        total_float=task.total_float,
        free_float=task.free_float,
        is_critical_path=task.is_critical_path,
        baseline_start_date=task.baseline_start_date,
        baseline_end_date=task.baseline_end_date,
        baseline_duration=task.baseline_duration,
        version=task.version,
    )


def task_from_orm(obj: TaskORM) -> Task:
    return Task(
        id=obj.id,
        schedule_id=obj.schedule_id,
        title=obj.title,
        description=obj.description or "",
        notes=obj.notes or "",
        start_date=obj.start_date,
        end_date=obj.end_date,
        duration_days=obj.duration_days,
        parent_task_id=obj.parent_task_id,
        order_index=obj.order_index,
        wbs_code=obj.wbs_code or "",
        level=obj.level,
        scheduling_mode=obj.scheduling_mode,
        is_milestone=bool(obj.is_milestone),
        status=obj.status,
        progress=obj.progress,
        early_start=obj.early_start,
        early_finish=obj.early_finish,
        late_start=obj.late_start,
        late_finish=obj.late_finish,
        total_float=obj.total_float,
        free_float=obj.free_float,
        is_critical_path=obj.is_critical_path,
        baseline_start_date=obj.baseline_start_date,
        baseline_end_date=obj.baseline_end_date,
        baseline_duration=obj.baseline_duration,
        version=obj.version,
    )


def dependency_to_orm(dependency: TaskDependency) -> TaskDependencyORM:
    return TaskDependencyORM(
        id=dependency.id,
        predecessor_task_id=dependency.predecessor_task_id,
        successor_task_id=dependency.successor_task_id,
        dependency_type=dependency.dependency_type,
        lag_days=dependency.lag_days,
    )


def dependency_from_orm(obj: TaskDependencyORM) -> TaskDependency:
    return TaskDependency(
        id=obj.id,
        predecessor_task_id=obj.predecessor_task_id,
        successor_task_id=obj.successor_task_id,
        dependency_type=obj.dependency_type,
        lag_days=obj.lag_days,
    )


__all__ = [
    "schedule_to_orm",
    "schedule_from_orm",
    "task_to_orm",
    "task_from_orm",
    "dependency_to_orm",
    "dependency_from_orm",
]
