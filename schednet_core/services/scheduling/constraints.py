from __future__ import annotations

from datetime import date, timedelta

from schednet_core.models import DependencyType, Task, TaskDependency
from schednet_core.services.scheduling.models import BoundSide, ConstraintBound


def finish_boundary(task: Task) -> date:
    """
    Day after the task's last day, or the start itself for a milestone.
    Equivalent to start_date + duration_days.
    """
    if task.is_milestone:
        return task.start_date
    return task.end_date + timedelta(days=1)


def end_from_finish_boundary(start: date, finish: date, is_milestone: bool) -> date:
    if is_milestone:
        return start
    return finish - timedelta(days=1)


def resolve_successor_bound(
    dep: TaskDependency,
    pred_start: date,
    pred_finish: date,
) -> ConstraintBound:
    """
    Bound that one edge places on its successor, given the predecessor's
    start and finish boundary.
    FS: start >= pred finish + lag
    SS: start >= pred start + lag
    FF: finish >= pred finish + lag
    SF: finish >= pred start + lag
    """
    lag = timedelta(days=dep.lag_days)
    if dep.dependency_type == DependencyType.FINISH_TO_START:
        return ConstraintBound(BoundSide.START, pred_finish + lag, dep.id)
    if dep.dependency_type == DependencyType.START_TO_START:
        return ConstraintBound(BoundSide.START, pred_start + lag, dep.id)
    if dep.dependency_type == DependencyType.FINISH_TO_FINISH:
        return ConstraintBound(BoundSide.FINISH, pred_finish + lag, dep.id)
    if dep.dependency_type == DependencyType.START_TO_FINISH:
        return ConstraintBound(BoundSide.FINISH, pred_start + lag, dep.id)
    raise ValueError(f"Unsupported dependency type: {dep.dependency_type!r}")


def resolve_predecessor_bound(
    dep: TaskDependency,
    succ_start: date,
    succ_finish: date,
) -> ConstraintBound:
    """Backward-pass mirror: latest start/finish the predecessor may take."""
    lag = timedelta(days=dep.lag_days)
    if dep.dependency_type == DependencyType.FINISH_TO_START:
        return ConstraintBound(BoundSide.FINISH, succ_start - lag, dep.id)
    if dep.dependency_type == DependencyType.START_TO_START:
        return ConstraintBound(BoundSide.START, succ_start - lag, dep.id)
    if dep.dependency_type == DependencyType.FINISH_TO_FINISH:
        return ConstraintBound(BoundSide.FINISH, succ_finish - lag, dep.id)
    if dep.dependency_type == DependencyType.START_TO_FINISH:
        return ConstraintBound(BoundSide.START, succ_finish - lag, dep.id)
    raise ValueError(f"Unsupported dependency type: {dep.dependency_type!r}")


def earliest_start_from_bounds(bounds: list[ConstraintBound], duration_days: int) -> date | None:
    """
    Latest start-side bound and latest finish-side bound, reconciled so the
    duration is preserved. None when there are no bounds.
    """
    candidates: list[date] = []
    for bound in bounds:
        if bound.side == BoundSide.START:
            candidates.append(bound.value)
        else:
            candidates.append(bound.value - timedelta(days=duration_days))
    if not candidates:
        return None
    return max(candidates)


def latest_finish_from_bounds(bounds: list[ConstraintBound], duration_days: int) -> date | None:
    candidates: list[date] = []
    for bound in bounds:
        if bound.side == BoundSide.FINISH:
            candidates.append(bound.value)
        else:
            candidates.append(bound.value + timedelta(days=duration_days))
    if not candidates:
        return None
    return min(candidates)


def edge_slack_days(
    dep: TaskDependency,
    pred_start: date,
    pred_finish: date,
    succ_start: date,
    succ_finish: date,
) -> int:
    """Days the predecessor could slip before this edge pushes its successor."""
    bound = resolve_successor_bound(dep, pred_start, pred_finish)
    if bound.side == BoundSide.START:
        return (succ_start - bound.value).days
    return (succ_finish - bound.value).days


__all__ = [
    "finish_boundary",
    "end_from_finish_boundary",
    "resolve_successor_bound",
    "resolve_predecessor_bound",
    "earliest_start_from_bounds",
    "latest_finish_from_bounds",
    "edge_slack_days",
]
