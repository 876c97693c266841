from schednet_core.domain.enums import ChildPolicy, DependencyType, SchedulingMode, TaskStatus
from schednet_core.domain.identifiers import generate_id
from schednet_core.domain.schedule import Schedule
from schednet_core.domain.task import Task, TaskDependency, compute_duration_days

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
