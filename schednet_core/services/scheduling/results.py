from __future__ import annotations

from datetime import date
from typing import Dict

from schednet_core.models import Task
from schednet_core.services.scheduling.constraints import edge_slack_days
from schednet_core.services.scheduling.graph import DependencyGraph
from schednet_core.services.scheduling.models import CPMTaskInfo


def build_schedule_result(
    tasks_by_id: Dict[str, Task],
    graph: DependencyGraph,
    es: Dict[str, date],
    ef: Dict[str, date],
    ls: Dict[str, date],
    lf: Dict[str, date],
) -> Dict[str, CPMTaskInfo]:
    """
    Derive float and criticality and write the CPM fields onto each task.
    start_date/end_date are left untouched.
    """
    result: Dict[str, CPMTaskInfo] = {}

    for task_id, task in tasks_by_id.items():
        est, eft, lst, lft = es[task_id], ef[task_id], ls[task_id], lf[task_id]

        total_float = max(0, (lst - est).days)

        outgoing = graph.outgoing(task_id)
        if not outgoing:
            free_float = total_float
        else:
            free_float = min(
                edge_slack_days(
                    dep,
                    est,
                    eft,
                    es[dep.successor_task_id],
                    ef[dep.successor_task_id],
                )
                for dep in outgoing
            )
            free_float = max(0, free_float)

        is_critical = total_float == 0

        task.early_start = est
        task.early_finish = eft
        task.late_start = lst
        task.late_finish = lft
        task.total_float = total_float
        task.free_float = free_float
        task.is_critical_path = is_critical

        result[task_id] = CPMTaskInfo(
            task=task,
            early_start=est,
            early_finish=eft,
            late_start=lst,
            late_finish=lft,
            total_float=total_float,
            free_float=free_float,
            is_critical=is_critical,
        )

    return result
