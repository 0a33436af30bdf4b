"""Critical Path Analyzer - Longest effort-weighted dependency chain."""

from typing import Dict, List, Optional

from sdlc_controller.scheduler.graph_builder import DependencyGraph
from sdlc_controller.scheduler.models import CriticalPath


class CriticalPathAnalyzer:
    """Finds the chain of dependent issues with the largest total effort."""

    def analyze(self, graph: DependencyGraph, order: List[str]) -> CriticalPath:
        """Compute the critical path.

        ``longest[v]`` is the effort of ``v`` plus the largest ``longest``
        among its dependencies. Ties pick the lowest id, both for the
        predecessor and for the end of the path.

        Args:
            graph: Acyclic dependency graph
            order: Topological order of ``graph``

        Returns:
            CriticalPath from a root issue to the end issue
        """
        longest: Dict[str, float] = {}
        predecessor: Dict[str, Optional[str]] = {}

        for issue_id in order:
            best_dep: Optional[str] = None
            for dep in graph.dependencies[issue_id]:
                # dependencies are sorted, so strict > keeps the lowest id on ties
                if best_dep is None or longest[dep] > longest[best_dep]:
                    best_dep = dep
            base = longest[best_dep] if best_dep is not None else 0
            longest[issue_id] = graph.effort(issue_id) + base
            predecessor[issue_id] = best_dep

        if not longest:
            return CriticalPath()

        end = min(longest, key=lambda issue_id: (-longest[issue_id], issue_id))

        path: List[str] = []
        current: Optional[str] = end
        while current is not None:
            path.append(current)
            current = predecessor[current]
        path.reverse()

        return CriticalPath(
            issue_ids=path,
            total_effort=longest[end],
            bottleneck=self._find_bottleneck(graph, path),
        )

    def _find_bottleneck(self, graph: DependencyGraph, path: List[str]) -> Optional[str]:
        """Highest-effort issue on the path (first one on ties)."""
        bottleneck: Optional[str] = None
        for issue_id in path:
            if bottleneck is None or graph.effort(issue_id) > graph.effort(bottleneck):
                bottleneck = issue_id
        return bottleneck
