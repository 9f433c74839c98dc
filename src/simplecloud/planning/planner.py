"""Creation and deletion ordering over declared resources."""

from __future__ import annotations

import heapq
from typing import Any, Dict, List, Protocol

from simplecloud.core.errors import ErrorCode, PlanningError
from simplecloud.resources.models import LazyResource


class Planner(Protocol):
    """Produces safe creation and deletion orders from declared dependencies."""

    def add_resource(self, resource: LazyResource[Any]) -> None:
        ...

    def topo_sort_for_creation(self) -> List[LazyResource[Any]]:
        ...

    def topo_sort_for_deletion(self) -> List[LazyResource[Any]]:
        ...


class TopologicalPlanner:
    """Orders resources so every dependency precedes its dependents.

    Ties are broken by declaration order, so a plan with no dependencies
    runs exactly as declared. Dependencies on ids that were never declared
    here (for example resources recorded by an earlier run) impose no
    ordering constraint.
    """

    def __init__(self) -> None:
        self._resources: List[LazyResource[Any]] = []

    def add_resource(self, resource: LazyResource[Any]) -> None:
        self._resources.append(resource)

    def resources(self) -> List[LazyResource[Any]]:
        return list(self._resources)

    def topo_sort_for_creation(self) -> List[LazyResource[Any]]:
        index = {r.id: i for i, r in enumerate(self._resources)}
        dependents: Dict[str, List[str]] = {r.id: [] for r in self._resources}
        pending: Dict[str, int] = {}

        for resource in self._resources:
            deps = [d for d in resource.depends_on if d in index and d != resource.id]
            pending[resource.id] = len(deps)
            for dep in deps:
                dependents[dep].append(resource.id)
            if resource.id in resource.depends_on:
                raise PlanningError(
                    "Resource depends on itself",
                    code=ErrorCode.DEPENDENCY_CYCLE,
                    resource_id=resource.id,
                    details={"cycle": f"{resource.id} -> {resource.id}"},
                )

        ready = [index[rid] for rid, count in pending.items() if count == 0]
        heapq.heapify(ready)
        order: List[LazyResource[Any]] = []

        while ready:
            resource = self._resources[heapq.heappop(ready)]
            order.append(resource)
            for dependent in dependents[resource.id]:
                pending[dependent] -= 1
                if pending[dependent] == 0:
                    heapq.heappush(ready, index[dependent])

        if len(order) != len(self._resources):
            blocked = [r.id for r in self._resources if pending[r.id] > 0]
            cycle = self._find_cycle(blocked, index)
            raise PlanningError(
                "Dependency cycle detected",
                code=ErrorCode.DEPENDENCY_CYCLE,
                resource_id=cycle[0] if cycle else None,
                details={"cycle": " -> ".join(cycle)},
            )
        return order

    def topo_sort_for_deletion(self) -> List[LazyResource[Any]]:
        return list(reversed(self.topo_sort_for_creation()))

    def _find_cycle(self, blocked: List[str], index: Dict[str, int]) -> List[str]:
        graph = {
            r.id: [d for d in r.depends_on if d in index] for r in self._resources
        }

        def dfs(node: str, path: List[str], visited: set[str]) -> List[str]:
            if node in path:
                return path[path.index(node):] + [node]
            if node in visited:
                return []
            visited.add(node)
            for dep in graph.get(node, []):
                found = dfs(dep, path + [node], visited)
                if found:
                    return found
            return []

        visited: set[str] = set()
        for start in blocked:
            found = dfs(start, [], visited)
            if found:
                return found
        return blocked
