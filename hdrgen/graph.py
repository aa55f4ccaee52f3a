"""Dependency graph over registered declarations."""

from __future__ import annotations

import heapq
from typing import Dict, Iterable, List, Set

from .errors import CycleError, MissingDependencyError
from .registry import DeclarationRegistry


class DependencyGraph:
    """Edges point from a declaration to the declarations it needs defined first.

    The graph reads the registry lazily on every call, so it always reflects
    the current registrations. References to unregistered names are dangling
    edges: they are reported by :meth:`missing_dependencies` and otherwise
    ignored.
    """

    def __init__(self, registry: DeclarationRegistry) -> None:
        self.registry = registry

    def dependencies_of(self, name: str) -> List[str]:
        declaration = self.registry.lookup(name)
        return [dep for dep in declaration.dependencies if dep in self.registry]

    def closure(self, names: Iterable[str]) -> Set[str]:
        """Return ``names`` plus every declaration reachable through dependencies."""
        result: Set[str] = set()
        stack = list(names)
        while stack:
            name = stack.pop()
            if name in result:
                continue
            result.add(name)
            stack.extend(dep for dep in self.dependencies_of(name) if dep not in result)
        return result

    def topological_order(self, subset: Iterable[str]) -> List[str]:
        """Order ``subset`` so each name follows its in-subset dependencies.

        Ties are broken by registration order. Raises :class:`CycleError` when
        the subset contains a cycle.
        """
        members = set(subset)
        for name in members:
            self.registry.lookup(name)

        remaining: Dict[str, int] = {}
        dependents: Dict[str, List[str]] = {name: [] for name in members}
        for name in members:
            deps = {dep for dep in self.dependencies_of(name) if dep in members}
            remaining[name] = len(deps)
            for dep in deps:
                dependents[dep].append(name)

        ready = [(self.registry.position(name), name) for name, count in remaining.items() if count == 0]
        heapq.heapify(ready)
        ordered: List[str] = []
        while ready:
            _, name = heapq.heappop(ready)
            ordered.append(name)
            for dependent in dependents[name]:
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    heapq.heappush(ready, (self.registry.position(dependent), dependent))

        if len(ordered) != len(members):
            stuck = members.difference(ordered)
            cycles = self._strongly_connected(stuck)
            on_cycle = sorted(
                {name for component in cycles for name in component},
                key=self.registry.position,
            )
            raise CycleError(on_cycle or self._by_position(stuck))
        return ordered

    def find_cycles(self) -> List[CycleError]:
        """Detect every cycle in the full graph, assigned or not."""
        return [CycleError(component) for component in self._strongly_connected(self.registry.names())]

    def missing_dependencies(self) -> List[MissingDependencyError]:
        errors: List[MissingDependencyError] = []
        for declaration in self.registry:
            missing = [dep for dep in declaration.dependencies if dep not in self.registry]
            if missing:
                errors.append(MissingDependencyError(declaration.name, missing))
        return errors

    def _strongly_connected(self, names: Iterable[str]) -> List[List[str]]:
        """Tarjan's algorithm restricted to ``names``; only cyclic components are returned.

        Components and their members come back in registration order.
        """
        members = self._by_position(names)
        allowed = set(members)
        index_of: Dict[str, int] = {}
        lowlink: Dict[str, int] = {}
        on_stack: Set[str] = set()
        stack: List[str] = []
        components: List[List[str]] = []
        counter = 0

        for root in members:
            if root in index_of:
                continue
            # Iterative DFS; each frame holds a node and its pending successors.
            work = [(root, iter(self._successors(root, allowed)))]
            index_of[root] = lowlink[root] = counter
            counter += 1
            stack.append(root)
            on_stack.add(root)
            while work:
                node, successors = work[-1]
                advanced = False
                for succ in successors:
                    if succ not in index_of:
                        index_of[succ] = lowlink[succ] = counter
                        counter += 1
                        stack.append(succ)
                        on_stack.add(succ)
                        work.append((succ, iter(self._successors(succ, allowed))))
                        advanced = True
                        break
                    if succ in on_stack:
                        lowlink[node] = min(lowlink[node], index_of[succ])
                if advanced:
                    continue
                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlink[parent] = min(lowlink[parent], lowlink[node])
                if lowlink[node] == index_of[node]:
                    component: List[str] = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        component.append(member)
                        if member == node:
                            break
                    if len(component) > 1 or node in self._successors(node, allowed):
                        components.append(self._by_position(component))

        components.sort(key=lambda component: self.registry.position(component[0]))
        return components

    def _successors(self, name: str, allowed: Set[str]) -> List[str]:
        return [dep for dep in self.dependencies_of(name) if dep in allowed]

    def _by_position(self, names: Iterable[str]) -> List[str]:
        return sorted(set(names), key=self.registry.position)


__all__ = ["DependencyGraph"]
