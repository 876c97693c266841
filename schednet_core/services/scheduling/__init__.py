from .auto_scheduler import AutoScheduler
from .engine import SchedulingEngine
from .graph import DependencyGraph
from .hierarchy import HierarchyValidator
from .models import BoundSide, ConstraintBound, CPMTaskInfo, PropagationResult
from .store import TaskStore

__all__ = [
    "SchedulingEngine",
    "AutoScheduler",
    "DependencyGraph",
    "HierarchyValidator",
    "TaskStore",
    "CPMTaskInfo",
    "ConstraintBound",
    "BoundSide",
    "PropagationResult",
]
