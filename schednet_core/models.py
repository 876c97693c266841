from schednet_core.domain import (
    ChildPolicy,
    DependencyType,
    Schedule,
    SchedulingMode,
    Task,
    TaskDependency,
    TaskStatus,
    compute_duration_days,
    generate_id,
)

__all__ = [
    "generate_id",
    "TaskStatus",
    "SchedulingMode",
    "DependencyType",
    "ChildPolicy",
    "Schedule",
    "Task",
    "TaskDependency",
    "compute_duration_days",
]
