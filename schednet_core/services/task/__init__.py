from .lifecycle import UNCHANGED
from .query import BaselineVariance
from .service import TaskService

__all__ = ["TaskService", "BaselineVariance", "UNCHANGED"]
