from __future__ import annotations

import heapq
import logging
from typing import Callable, Dict, Iterable, List, Optional

from schednet_core.exceptions import (
    CyclicDependencyError,
    DuplicateDependencyError,
    ScheduleIntegrityError,
    SelfDependencyError,
    UnknownDependencyError,
    UnknownTaskError,
)
from schednet_core.models import DependencyType, TaskDependency


logger = logging.getLogger(__name__)

SortKey = Callable[[str], tuple]


class DependencyGraph:
    """
    Precedence edges of one schedule, stored as id adjacency lists.
    Edges added or removed through this object are tracked so the caller
    can persist them once at the end of an operation.
    """

    def __init__(self, task_ids: Iterable[str], dependencies: Iterable[TaskDependency] = ()):
        self._task_ids: set[str] = set(task_ids)
        self._edges: Dict[str, TaskDependency] = {}
        self._succ: Dict[str, List[str]] = {}
        self._pred: Dict[str, List[str]] = {}
        self._added: Dict[str, TaskDependency] = {}
        self._removed: Dict[str, TaskDependency] = {}

        for dep in dependencies:
            if dep.predecessor_task_id in self._task_ids and dep.successor_task_id in self._task_ids:
                self._link(dep)

    # ---------- nodes ----------

    def add_node(self, task_id: str) -> None:
        self._task_ids.add(task_id)

    def remove_node(self, task_id: str) -> List[TaskDependency]:
        detached = self.incoming(task_id) + self.outgoing(task_id)
        for dep in detached:
            self.remove_edge(dep.id)
        self._task_ids.discard(task_id)
        return detached

    # ---------- edges ----------

    def get_edge(self, edge_id: str) -> TaskDependency:
        dep = self._edges.get(edge_id)
        if dep is None:
            raise UnknownDependencyError("Dependency not found.", code="DEPENDENCY_NOT_FOUND")
        return dep

    def find_edge(self, predecessor_id: str, successor_id: str) -> Optional[TaskDependency]:
        for edge_id in self._succ.get(predecessor_id, []):
            dep = self._edges[edge_id]
            if dep.successor_task_id == successor_id:
                return dep
        return None

    def validate_edge(self, predecessor_id: str, successor_id: str) -> None:
        if predecessor_id == successor_id:
            raise SelfDependencyError("A task cannot depend on itself.", code="DEPENDENCY_SELF")
        for task_id in (predecessor_id, successor_id):
            if task_id not in self._task_ids:
                raise UnknownTaskError(f"Task {task_id} not found in schedule.", code="TASK_NOT_FOUND")
        if self.find_edge(predecessor_id, successor_id) is not None:
            raise DuplicateDependencyError(
                "This dependency already exists.", code="DEPENDENCY_DUPLICATE"
            )
        # the new edge closes a cycle iff pred is already reachable from succ
        if self.has_path(successor_id, predecessor_id):
            raise CyclicDependencyError(
                "Adding this dependency would create a circular dependency.",
                code="DEPENDENCY_CYCLE",
            )

    def add_edge(
        self,
        predecessor_id: str,
        successor_id: str,
        dependency_type: DependencyType = DependencyType.FINISH_TO_START,
        lag_days: int = 0,
    ) -> TaskDependency:
        self.validate_edge(predecessor_id, successor_id)
        dep = TaskDependency.create(predecessor_id, successor_id, dependency_type, lag_days)
        self._link(dep)
        self._added[dep.id] = dep
        return dep

    def remove_edge(self, edge_id: str) -> TaskDependency:
        dep = self.get_edge(edge_id)
        del self._edges[edge_id]
        self._succ[dep.predecessor_task_id].remove(edge_id)
        self._pred[dep.successor_task_id].remove(edge_id)
        if self._added.pop(edge_id, None) is None:
            self._removed[edge_id] = dep
        return dep

    def _link(self, dep: TaskDependency) -> None:
        self._edges[dep.id] = dep
        self._succ.setdefault(dep.predecessor_task_id, []).append(dep.id)
        self._pred.setdefault(dep.successor_task_id, []).append(dep.id)

    # ---------- navigation ----------

    def incoming(self, task_id: str) -> List[TaskDependency]:
        return [self._edges[edge_id] for edge_id in self._pred.get(task_id, [])]

    def outgoing(self, task_id: str) -> List[TaskDependency]:
        return [self._edges[edge_id] for edge_id in self._succ.get(task_id, [])]

    def edges(self) -> List[TaskDependency]:
        return list(self._edges.values())

    def has_path(self, source_id: str, target_id: str) -> bool:
        stack = [source_id]
        visited: set[str] = set()
        while stack:
            cur = stack.pop()
            if cur == target_id:
                return True
            if cur in visited:
                continue
            visited.add(cur)
            for dep in self.outgoing(cur):
                if dep.successor_task_id not in visited:
                    stack.append(dep.successor_task_id)
        return False

    def successor_closure(self, task_id: str) -> set[str]:
        """The task plus everything transitively downstream of it."""
        closure = {task_id}
        stack = [task_id]
        while stack:
            cur = stack.pop()
            for dep in self.outgoing(cur):
                if dep.successor_task_id not in closure:
                    closure.add(dep.successor_task_id)
                    stack.append(dep.successor_task_id)
        return closure

    def topological_order(self, scope: Iterable[str], sort_key: SortKey) -> List[str]:
        """
        Kahn ordering of `scope`, considering only edges with both ends in scope.
        Ready tasks come out smallest sort_key first.
        """
        scope_ids = set(scope)
        indegree: Dict[str, int] = {task_id: 0 for task_id in scope_ids}
        for task_id in scope_ids:
            for dep in self.outgoing(task_id):
                if dep.successor_task_id in scope_ids:
                    indegree[dep.successor_task_id] += 1

        heap: list[tuple[tuple, str]] = []
        for task_id, degree in indegree.items():
            if degree == 0:
                heapq.heappush(heap, (sort_key(task_id), task_id))

        topo_order: list[str] = []
        while heap:
            _key, task_id = heapq.heappop(heap)
            topo_order.append(task_id)
            for dep in self.outgoing(task_id):
                succ_id = dep.successor_task_id
                if succ_id not in scope_ids:
                    continue
                indegree[succ_id] -= 1
                if indegree[succ_id] == 0:
                    heapq.heappush(heap, (sort_key(succ_id), succ_id))

        if len(topo_order) != len(scope_ids):
            stuck = sorted(task_id for task_id, degree in indegree.items() if degree > 0)
            logger.error("Cycle in persisted dependency data among tasks %s", stuck)
            raise ScheduleIntegrityError(
                "Cannot schedule: circular dependency detected in stored data.",
                code="SCHEDULE_CYCLE",
            )
        return topo_order

    # ---------- pending changes ----------

    def added_edges(self) -> List[TaskDependency]:
        return list(self._added.values())

    def removed_edges(self) -> List[TaskDependency]:
        return list(self._removed.values())


__all__ = ["DependencyGraph"]
