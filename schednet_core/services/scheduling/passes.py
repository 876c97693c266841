from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List

from schednet_core.exceptions import ValidationError
from schednet_core.models import Task
from schednet_core.services.scheduling.budget import UNLIMITED, PassBudget
from schednet_core.services.scheduling.constraints import (
    earliest_start_from_bounds,
    latest_finish_from_bounds,
    resolve_predecessor_bound,
    resolve_successor_bound,
)
from schednet_core.services.scheduling.graph import DependencyGraph


def _duration(task: Task) -> int:
    return 0 if task.is_milestone else task.duration_days


def run_forward_pass(
    tasks_by_id: Dict[str, Task],
    topo_order: List[str],
    graph: DependencyGraph,
    budget: PassBudget = UNLIMITED,
) -> tuple[Dict[str, date], Dict[str, date], date]:
    es: Dict[str, date] = {}
    ef: Dict[str, date] = {}

    for task_id in topo_order:
        budget.check()
        task = tasks_by_id[task_id]
        duration = _duration(task)
        incoming = graph.incoming(task_id)
        if not incoming:
            est = task.start_date
        else:
            bounds = [
                resolve_successor_bound(
                    dep, es[dep.predecessor_task_id], ef[dep.predecessor_task_id]
                )
                for dep in incoming
            ]
            est = earliest_start_from_bounds(bounds, duration)
        es[task_id] = est
        ef[task_id] = est + timedelta(days=duration)

    if not ef:
        raise ValidationError("No computed finish dates; schedule has no tasks.")
    return es, ef, max(ef.values())


def run_backward_pass(
    tasks_by_id: Dict[str, Task],
    topo_order: List[str],
    graph: DependencyGraph,
    project_early_finish: date,
    budget: PassBudget = UNLIMITED,
) -> tuple[Dict[str, date], Dict[str, date]]:
    ls: Dict[str, date] = {}
    lf: Dict[str, date] = {}

    for task_id in reversed(topo_order):
        budget.check()
        duration = _duration(tasks_by_id[task_id])
        outgoing = graph.outgoing(task_id)
        if not outgoing:
            lft = project_early_finish
        else:
            bounds = [
                resolve_predecessor_bound(
                    dep, ls[dep.successor_task_id], lf[dep.successor_task_id]
                )
                for dep in outgoing
            ]
            # late finish never passes the project end, even behind start-side edges
            lft = min(project_early_finish, latest_finish_from_bounds(bounds, duration))
        lf[task_id] = lft
        ls[task_id] = lft - timedelta(days=duration)

    return ls, lf
