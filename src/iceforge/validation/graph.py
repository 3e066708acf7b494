"""Subproject dependency graph: subprojects as nodes, depends-on references as edges."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

import networkx as nx

from iceforge.models.config import Subproject


class NodeState(StrEnum):
    UNVISITED = "unvisited"
    ON_STACK = "on-stack"
    VISITED = "visited"


@dataclass
class Cycle:
    """A circular reference found during traversal."""

    origin: str  # subproject whose traversal re-entered the stack
    path: list[str]

    def describe(self) -> str:
        return " -> ".join(self.path)


class SubprojectGraph:
    """Directed graph where ``a -> b`` means subproject ``a`` depends on ``b``.

    Only references to other subprojects become edges; external dependencies
    cannot take part in a cycle. Node and successor order follow declaration
    order, which makes traversal deterministic.
    """

    def __init__(self, subprojects: list[Subproject]) -> None:
        self._graph: nx.DiGraph[str] = nx.DiGraph()
        self._build(subprojects)

    def _build(self, subprojects: list[Subproject]) -> None:
        for subproject in subprojects:
            self._graph.add_node(subproject.name.value)
        for subproject in subprojects:
            for dep_name in subproject.dependency_names():
                if dep_name in self._graph:
                    self._graph.add_edge(subproject.name.value, dep_name)

    @property
    def nodes(self) -> list[str]:
        return list(self._graph.nodes)

    def dependencies_of(self, name: str) -> list[str]:
        return list(self._graph.successors(name))

    def find_cycle(self) -> Cycle | None:
        """Depth-first search with unvisited / on-stack / visited states."""
        state = {node: NodeState.UNVISITED for node in self._graph}
        path: list[str] = []

        def _visit(node: str) -> Cycle | None:
            state[node] = NodeState.ON_STACK
            path.append(node)
            for neighbor in self._graph.successors(node):
                if state[neighbor] is NodeState.ON_STACK:
                    return Cycle(origin=node, path=path[path.index(neighbor) :] + [neighbor])
                if state[neighbor] is NodeState.UNVISITED:
                    cycle = _visit(neighbor)
                    if cycle is not None:
                        return cycle
            path.pop()
            state[node] = NodeState.VISITED
            return None

        for node in self._graph:
            if state[node] is NodeState.UNVISITED:
                cycle = _visit(node)
                if cycle is not None:
                    return cycle
        return None

    def build_order(self) -> list[str]:
        """Depth-first finish order: every subproject after the ones it depends on.

        Only meaningful on an acyclic graph; call ``find_cycle`` first.
        """
        return list(nx.dfs_postorder_nodes(self._graph))
