from .schedule import ScheduleService
from .scheduling import CPMTaskInfo, PropagationResult, SchedulingEngine
from .task import BaselineVariance, TaskService

__all__ = [
    "ScheduleService",
    "TaskService",
    "SchedulingEngine",
    "CPMTaskInfo",
    "PropagationResult",
    "BaselineVariance",
]
