from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable, List, Optional

from schednet_core.models import SchedulingMode, Task
from schednet_core.services.scheduling.budget import UNLIMITED, PassBudget
from schednet_core.services.scheduling.constraints import (
    earliest_start_from_bounds,
    finish_boundary,
    resolve_successor_bound,
)
from schednet_core.services.scheduling.models import ConstraintBound, PropagationResult
from schednet_core.services.scheduling.store import TaskStore


logger = logging.getLogger(__name__)


class AutoScheduler:
    """
    Pushes dates through the dependency graph in topological order.
    AUTO tasks are rewritten to the earliest placement every incoming edge
    allows; MANUAL tasks are only read.
    """

    def __init__(self, budget: PassBudget = UNLIMITED):
        self._budget: PassBudget = budget

    def schedule_from(
        self,
        store: TaskStore,
        task_id: str,
        include_start: bool = False,
    ) -> PropagationResult:
        """
        Recompute `task_id`'s downstream closure. The starting task is the anchor
        and keeps its dates unless include_start is set.
        """
        store.get(task_id)
        scope = store.graph.successor_closure(task_id)
        anchor = None if include_start else task_id
        return self._run(store, scope, anchor)

    def schedule_all(self, store: TaskStore) -> PropagationResult:
        return self._run(store, store.ids(), anchor=None)

    def _run(self, store: TaskStore, scope: Iterable[str], anchor: Optional[str]) -> PropagationResult:
        order = store.graph.topological_order(scope, store.sort_key)
        changed: List[str] = []
        for task_id in order:
            self._budget.check()
            if task_id == anchor:
                continue
            task = store.get(task_id)
            if not self._writes_back(task):
                continue
            placement = self._placement(store, task)
            if placement is None:
                continue
            start, end = placement
            if (start, end) != (task.start_date, task.end_date):
                logger.debug(
                    "Auto-scheduled %s: %s..%s -> %s..%s",
                    task.id, task.start_date, task.end_date, start, end,
                )
                task.start_date = start
                task.end_date = end
                changed.append(task_id)
        return PropagationResult(scope=order, changed_task_ids=changed)

    @staticmethod
    def _writes_back(task: Task) -> bool:
        return task.scheduling_mode == SchedulingMode.AUTO

    def _placement(self, store: TaskStore, task: Task) -> Optional[tuple[date, date]]:
        bounds: List[ConstraintBound] = []
        for dep in store.graph.incoming(task.id):
            pred = store.get(dep.predecessor_task_id)
            bounds.append(resolve_successor_bound(dep, pred.start_date, finish_boundary(pred)))

        duration = 0 if task.is_milestone else task.duration_days
        start = earliest_start_from_bounds(bounds, duration)
        if start is None:
            return None
        if task.is_milestone:
            return start, start
        return start, start + timedelta(days=duration - 1)


__all__ = ["AutoScheduler"]
