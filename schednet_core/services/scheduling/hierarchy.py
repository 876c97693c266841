from __future__ import annotations

import logging
from typing import List, Optional

from schednet_core.exceptions import CircularHierarchyError, ScheduleIntegrityError
from schednet_core.models import Task
from schednet_core.services.scheduling.store import TaskStore


logger = logging.getLogger(__name__)


class HierarchyValidator:
    """
    Keeps the parent/child tree of a TaskStore well-formed:
    - no task becomes its own ancestor
    - order_index is unique among siblings
    - wbs_code / level reflect the current tree shape
    """

    def __init__(self, store: TaskStore):
        self._store: TaskStore = store

    def ancestors(self, task_id: Optional[str]) -> List[str]:
        """Ids from task_id upward to its root, inclusive."""
        chain: List[str] = []
        current = task_id
        limit = len(self._store)
        while current is not None:
            if len(chain) > limit:
                raise ScheduleIntegrityError(
                    "Task hierarchy contains a cycle in stored data.",
                    code="HIERARCHY_CORRUPT",
                )
            chain.append(current)
            task = self._store.find(current)
            current = task.parent_task_id if task else None
        return chain

    def validate_parent(self, task_id: str, new_parent_id: Optional[str]) -> None:
        if new_parent_id is None:
            return
        self._store.get(new_parent_id)
        if new_parent_id == task_id:
            raise CircularHierarchyError(
                "A task cannot be its own parent.", code="HIERARCHY_CYCLE"
            )
        if task_id in self.ancestors(new_parent_id):
            raise CircularHierarchyError(
                "Cannot set parent task: would create circular hierarchy.",
                code="HIERARCHY_CYCLE",
            )

    def set_parent(
        self,
        task_id: str,
        new_parent_id: Optional[str],
        order_index: Optional[int] = None,
    ) -> None:
        self.validate_parent(task_id, new_parent_id)
        task = self._store.get(task_id)
        task.parent_task_id = new_parent_id
        self.place(task, order_index)

    def place(self, task: Task, order_index: Optional[int] = None) -> None:
        """
        Position `task` among the children of its current parent.
        No index: append after the last sibling. A taken index pushes that
        sibling and every later one up by one.
        """
        siblings = self._store.siblings(task.id)
        if order_index is None:
            task.order_index = (siblings[-1].order_index + 1) if siblings else 1
            return

        task.order_index = order_index
        if any(s.order_index == order_index for s in siblings):
            for sibling in siblings:
                if sibling.order_index >= order_index:
                    sibling.order_index += 1

    def recompute_codes(self, root_id: Optional[str] = None) -> None:
        """
        Depth-first WBS numbering. With root_id, only that subtree is renumbered
        and the root keeps its current code.

        A full renumbering must reach every task from the roots; tasks caught in
        a stored parent cycle never are, and are reported instead of skipped.
        """
        if root_id is None:
            assigned = self._assign_all(self._store.roots(), "", 0)
            if assigned < len(self._store):
                logger.error(
                    f"WBS renumbering reached {assigned} of {len(self._store)} tasks; "
                    f"parent links contain a cycle"
                )
                raise ScheduleIntegrityError(
                    "Task hierarchy contains a cycle in stored data.",
                    code="HIERARCHY_CORRUPT",
                )
            return
        root = self._store.get(root_id)
        self._assign_all(self._store.children(root.id), root.wbs_code, root.level + 1)

    def _assign_all(self, tasks: List[Task], prefix: str, level: int) -> int:
        assigned = 0
        for position, child in enumerate(tasks, start=1):
            code = f"{prefix}.{position}" if prefix else str(position)
            child.wbs_code = code
            child.level = level
            assigned += 1 + self._assign_all(self._store.children(child.id), code, level + 1)
        return assigned


__all__ = ["HierarchyValidator"]
