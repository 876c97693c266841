# schednet_core/services/scheduling/engine.py
from __future__ import annotations

import logging
from typing import Dict, List

from schednet_core.events.domain_events import domain_events
from schednet_core.exceptions import UnknownTaskError
from schednet_core.interfaces import TaskRepository
from schednet_core.models import Task
from schednet_core.services.common.transaction import ScheduleTransaction
from schednet_core.services.scheduling.auto_scheduler import AutoScheduler
from schednet_core.services.scheduling.budget import PassBudget
from schednet_core.services.scheduling.models import CPMTaskInfo, PropagationResult
from schednet_core.services.scheduling.passes import run_backward_pass, run_forward_pass
from schednet_core.services.scheduling.results import build_schedule_result
from schednet_core.services.scheduling.store import TaskStore, wbs_sort_key


logger = logging.getLogger(__name__)


def compute_critical_path(store: TaskStore, budget: PassBudget) -> Dict[str, CPMTaskInfo]:
    if not len(store):
        return {}
    tasks_by_id: Dict[str, Task] = {t.id: t for t in store.all()}
    topo_order = store.graph.topological_order(tasks_by_id.keys(), store.sort_key)

    es, ef, project_early_finish = run_forward_pass(
        tasks_by_id=tasks_by_id,
        topo_order=topo_order,
        graph=store.graph,
        budget=budget,
    )
    ls, lf = run_backward_pass(
        tasks_by_id=tasks_by_id,
        topo_order=topo_order,
        graph=store.graph,
        project_early_finish=project_early_finish,
        budget=budget,
    )
    return build_schedule_result(
        tasks_by_id=tasks_by_id,
        graph=store.graph,
        es=es,
        ef=ef,
        ls=ls,
        lf=lf,
    )


class SchedulingEngine:
    """
    Schedule-wide passes:
    - auto-scheduling (one task's downstream closure, or the whole schedule)
    - CPM forward/backward pass with total/free float and critical flags

    The critical-path pass is on demand only; auto-scheduling also runs
    implicitly after task and dependency mutations (see TaskService).
    """

    def __init__(self, task_repo: TaskRepository, transaction: ScheduleTransaction):
        self._task_repo: TaskRepository = task_repo
        self._transaction: ScheduleTransaction = transaction

    def auto_schedule_task(self, task_id: str) -> PropagationResult:
        """Re-place every AUTO task downstream of task_id, which stays as the anchor."""
        task = self._task_repo.get(task_id)
        if task is None:
            raise UnknownTaskError("Task not found.", code="TASK_NOT_FOUND")

        def work(store: TaskStore, budget: PassBudget) -> PropagationResult:
            return AutoScheduler(budget).schedule_from(store, task_id)

        result = self._transaction.run(task.schedule_id, work, action="auto_schedule_task")
        logger.info(
            f"Auto-scheduled from {task_id}: {len(result.changed_task_ids)} of "
            f"{len(result.scope)} task(s) moved"
        )
        if result.changed_task_ids:
            domain_events.tasks_changed.emit(task.schedule_id)
        return result

    def auto_schedule_all(self, schedule_id: str) -> PropagationResult:
        def work(store: TaskStore, budget: PassBudget) -> PropagationResult:
            return AutoScheduler(budget).schedule_all(store)

        result = self._transaction.run(schedule_id, work, action="auto_schedule_all")
        logger.info(
            f"Auto-scheduled schedule {schedule_id}: {len(result.changed_task_ids)} task(s) moved"
        )
        if result.changed_task_ids:
            domain_events.tasks_changed.emit(schedule_id)
        return result

    def calculate_critical_path(self, schedule_id: str) -> Dict[str, CPMTaskInfo]:
        """
        Full CPM calculation for a schedule:
        - computes ES/EF (forward) and LS/LF (backward)
        - derives total float, free float and the critical flag
        - persists the CPM fields; task dates are not moved
        """
        result = self._transaction.run(
            schedule_id, compute_critical_path, action="calculate_critical_path"
        )
        critical = sum(1 for info in result.values() if info.is_critical)
        logger.info(
            f"Critical path for schedule {schedule_id}: {critical} of {len(result)} task(s) critical"
        )
        domain_events.critical_path_changed.emit(schedule_id)
        return result

    def get_critical_path_tasks(self, schedule_id: str) -> List[Task]:
        """Tasks flagged by the last critical-path run, in WBS order."""
        tasks = [t for t in self._task_repo.list_by_schedule(schedule_id) if t.is_critical_path]
        return sorted(tasks, key=lambda t: (wbs_sort_key(t.wbs_code), t.order_index, t.id))


__all__ = ["SchedulingEngine", "compute_critical_path"]
