"""Topological Sorter - Order acyclic issues and compute their depth."""

from dataclasses import dataclass
from typing import Dict, List

from sdlc_controller.scheduler.graph_builder import DependencyGraph


@dataclass
class TopologicalOrder:
    """Execution order and depth per issue."""

    order: List[str]
    depths: Dict[str, int]

    @property
    def max_depth(self) -> int:
        return max(self.depths.values(), default=0)


class TopologicalSorter:
    """Orders issues with Kahn's algorithm, one depth level at a time."""

    def sort(self, graph: DependencyGraph) -> TopologicalOrder:
        """Sort an acyclic graph.

        Every round takes all issues whose in-degree is zero, in ascending
        id order, so the result is fully deterministic. An issue released in
        round ``k`` has depth ``k``: one more than its deepest dependency.

        Args:
            graph: Dependency graph with cycles already removed

        Returns:
            TopologicalOrder with the order and depth of every issue
        """
        in_degree: Dict[str, int] = {
            issue_id: len(deps) for issue_id, deps in graph.dependencies.items()
        }
        depths: Dict[str, int] = {}
        order: List[str] = []

        level = sorted(issue_id for issue_id, degree in in_degree.items() if degree == 0)
        depth = 0

        while level:
            next_level: List[str] = []
            for issue_id in level:
                order.append(issue_id)
                depths[issue_id] = depth
                for dependent in graph.dependents[issue_id]:
                    in_degree[dependent] -= 1
                    if in_degree[dependent] == 0:
                        next_level.append(dependent)

            level = sorted(next_level)
            depth += 1

        if len(order) != len(graph):
            # Cycles are removed before sorting, so this is a caller error
            remaining = sorted(set(graph.nodes) - set(order))
            raise ValueError(f"Graph still contains a cycle through: {', '.join(remaining)}")

        return TopologicalOrder(order=order, depths=depths)
