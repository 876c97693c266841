from __future__ import annotations

from datetime import date
from typing import Optional

from schednet_core.exceptions import (
    InvalidDateRangeError,
    SelfDependencyError,
    UnknownTaskError,
    ValidationError,
)
from schednet_core.interfaces import TaskRepository
from schednet_core.models import Task
from schednet_core.services.scheduling.store import TaskStore

MAX_TITLE_LENGTH = 255


class TaskValidationMixin:
    _task_repo: TaskRepository

    def _validate_dates(self, start_date: date, end_date: date, is_milestone: bool) -> None:
        if start_date is None or end_date is None:
            raise InvalidDateRangeError(
                "Task start and end dates are required.", code="TASK_DATES_REQUIRED"
            )
        if end_date < start_date:
            raise InvalidDateRangeError(
                f"Task end date ({end_date}) cannot be before start date ({start_date}).",
                code="TASK_INVALID_DATE_RANGE",
            )
        if is_milestone and start_date != end_date:
            raise InvalidDateRangeError(
                "A milestone must start and end on the same day.",
                code="MILESTONE_SPAN",
            )

    def _validate_task_title(self, title: str) -> None:
        if not (title or "").strip():
            raise ValidationError("Task title cannot be empty.", code="TASK_TITLE_EMPTY")
        if len(title.strip()) > MAX_TITLE_LENGTH:
            raise ValidationError(
                f"Task title must be at most {MAX_TITLE_LENGTH} characters.",
                code="TASK_TITLE_TOO_LONG",
            )

    def _validate_progress(self, progress: int) -> None:
        if progress < 0 or progress > 100:
            raise ValidationError("progress must be between 0 and 100.", code="TASK_INVALID_PROGRESS")

    def _validate_order_index(self, order_index: Optional[int]) -> None:
        if order_index is not None and order_index < 0:
            raise ValidationError("order_index cannot be negative.", code="TASK_INVALID_ORDER")

    def _validate_lag(self, lag_days: int) -> None:
        if isinstance(lag_days, bool) or not isinstance(lag_days, int):
            raise ValidationError("lag_days must be a whole number of days.", code="DEPENDENCY_INVALID_LAG")

    def _validate_not_self_dependency(self, predecessor_id: str, successor_id: str) -> None:
        if predecessor_id == successor_id:
            raise SelfDependencyError("A task cannot depend on itself.", code="DEPENDENCY_SELF")

    def _require_task(self, task_id: str) -> Task:
        task = self._task_repo.get(task_id)
        if not task:
            raise UnknownTaskError("Task not found.", code="TASK_NOT_FOUND")
        return task

    def _require_parent_in_store(self, store: TaskStore, parent_task_id: str) -> Task:
        parent = store.find(parent_task_id)
        if parent is not None:
            return parent
        if self._task_repo.get(parent_task_id) is not None:
            raise ValidationError(
                "Parent task must belong to the same schedule.", code="PARENT_CROSS_SCHEDULE"
            )
        raise UnknownTaskError("Parent task not found.", code="TASK_NOT_FOUND")
