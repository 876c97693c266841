# schednet_infra/db/models.py
from __future__ import annotations
from datetime import date
from typing import Optional

from sqlalchemy import (
    Boolean,
    Date,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from schednet_infra.db.base import Base
from schednet_core.models import DependencyType, SchedulingMode, TaskStatus


class ScheduleORM(Base):
    __tablename__ = "schedules"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    schedule_start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    schedule_end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class TaskORM(Base):
    __tablename__ = "schedule_tasks"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    schedule_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("schedules.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(String, default="")
    notes: Mapped[str] = mapped_column(String, default="")
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    parent_task_id: Mapped[Optional[str]] = mapped_column(
        String, ForeignKey("schedule_tasks.id", ondelete="SET NULL"), nullable=True
    )
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    wbs_code: Mapped[str] = mapped_column(String, nullable=False, default="")
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    scheduling_mode: Mapped[SchedulingMode] = mapped_column(
        SAEnum(SchedulingMode), default=SchedulingMode.MANUAL, nullable=False
    )
    is_milestone: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    status: Mapped[TaskStatus] = mapped_column(
        SAEnum(TaskStatus), default=TaskStatus.NOT_STARTED, nullable=False
    )
    progress: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    early_start: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    early_finish: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    late_start: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    late_finish: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    total_float: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    free_float: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_critical_path: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    baseline_start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    baseline_end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    baseline_duration: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
Index("idx_schedules_is_archived", ScheduleORM.is_archived)
Index("idx_schedule_tasks_schedule_id", TaskORM.schedule_id)
Index("idx_schedule_tasks_parent", TaskORM.parent_task_id)


class TaskDependencyORM(Base):
    __tablename__ = "task_dependencies"
    __table_args__ = (
        UniqueConstraint("predecessor_task_id", "successor_task_id", name="uq_dep_pred_succ"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    predecessor_task_id: Mapped[str] = mapped_column(String, ForeignKey("schedule_tasks.id", ondelete="CASCADE"), nullable=False)
    successor_task_id: Mapped[str] = mapped_column(String, ForeignKey("schedule_tasks.id", ondelete="CASCADE"), nullable=False)
    dependency_type: Mapped[DependencyType] = mapped_column(
        SAEnum(DependencyType), default=DependencyType.FINISH_TO_START, nullable=False
    )
    lag_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
Index("idx_dep_predecessor", TaskDependencyORM.predecessor_task_id)
Index("idx_dep_successor", TaskDependencyORM.successor_task_id)
