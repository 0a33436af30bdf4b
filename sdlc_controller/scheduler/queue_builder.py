"""Queue Builder - Rank issues and assemble the analysis result."""

from collections import deque
from typing import Dict, List, Set

from sdlc_controller.scheduler.cycle_detector import CycleReport
from sdlc_controller.scheduler.graph_builder import DependencyGraph
from sdlc_controller.scheduler.models import (
    ACTIVE_OR_DONE,
    AnalyzedIssue,
    CriticalPath,
    GraphAnalysisResult,
    GraphStatistics,
    IssueStatus,
    ParallelGroup,
    PrioritizedQueue,
)
from sdlc_controller.scheduler.topological_sorter import TopologicalOrder


class QueueBuilder:
    """Builds the prioritized queue and the final GraphAnalysisResult."""

    def build_queue(
        self,
        graph: DependencyGraph,
        topo: TopologicalOrder,
        scores: Dict[str, float],
        resolved: Dict[str, bool],
    ) -> PrioritizedQueue:
        """Rank scored issues and split them into ready and blocked.

        Ranking is score descending, then depth ascending, then id
        ascending. Issues already in progress or completed are ranked but
        are neither ready nor blocked.

        Args:
            graph: Acyclic dependency graph
            topo: Depths from the TopologicalSorter
            scores: Score per issue of ``graph``
            resolved: Whether each issue's dependencies are resolved

        Returns:
            PrioritizedQueue
        """
        queue = sorted(
            scores,
            key=lambda issue_id: (-scores[issue_id], topo.depths[issue_id], issue_id),
        )

        ready: List[str] = []
        blocked: List[str] = []
        for issue_id in queue:
            if graph.nodes[issue_id].status in ACTIVE_OR_DONE:
                continue
            if resolved[issue_id]:
                ready.append(issue_id)
            else:
                blocked.append(issue_id)

        return PrioritizedQueue(queue=queue, ready_for_execution=ready, blocked=blocked)

    def resolve_dependencies(self, graph: DependencyGraph, cycles: CycleReport) -> Dict[str, bool]:
        """Decide, per eligible issue, whether all its dependencies are done.

        An issue that still waits on a cycle-blocked issue is never resolved.
        """
        clean = cycles.clean_graph
        return {
            issue_id: issue_id not in cycles.cycle_blocked_dependencies
            and all(
                graph.nodes[dep].status == IssueStatus.COMPLETED
                for dep in clean.dependencies[issue_id]
            )
            for issue_id in clean.nodes
        }

    def assemble(
        self,
        graph: DependencyGraph,
        cycles: CycleReport,
        topo: TopologicalOrder,
        critical_path: CriticalPath,
        parallel_groups: List[ParallelGroup],
        scores: Dict[str, float],
    ) -> GraphAnalysisResult:
        """Merge the outputs of every stage into one result."""
        clean = cycles.clean_graph
        resolved = self.resolve_dependencies(graph, cycles)
        queue = self.build_queue(clean, topo, scores, resolved)
        on_path = set(critical_path.issue_ids)
        blocked_set = set(cycles.blocked_by_cycle)

        issues: Dict[str, AnalyzedIssue] = {}
        for issue_id, node in graph.nodes.items():
            if issue_id in blocked_set:
                issues[issue_id] = AnalyzedIssue(
                    node=node,
                    dependencies=list(graph.dependencies[issue_id]),
                    dependents=list(graph.dependents[issue_id]),
                    transitive_dependencies=self._ancestors(graph, issue_id),
                    is_blocked_by_cycle=True,
                )
                continue

            issues[issue_id] = AnalyzedIssue(
                node=node,
                dependencies=list(clean.dependencies[issue_id]),
                dependents=list(clean.dependents[issue_id]),
                cycle_blocked_dependencies=list(cycles.cycle_blocked_dependencies.get(issue_id, [])),
                transitive_dependencies=self._ancestors(clean, issue_id),
                depth=topo.depths[issue_id],
                priority_score=scores[issue_id],
                is_on_critical_path=issue_id in on_path,
                dependencies_resolved=resolved[issue_id],
            )

        return GraphAnalysisResult(
            issues=issues,
            execution_order=list(topo.order),
            parallel_groups=parallel_groups,
            critical_path=critical_path,
            prioritized_queue=queue,
            statistics=self._statistics(graph, cycles, topo, critical_path),
            cycles=cycles.cycles,
            blocked_by_cycle=list(cycles.blocked_by_cycle),
            warnings=list(graph.warnings),
        )

    def _ancestors(self, graph: DependencyGraph, issue_id: str) -> List[str]:
        """Transitive dependencies of an issue, ascending id."""
        seen: Set[str] = set()
        queue = deque([issue_id])
        while queue:
            current = queue.popleft()
            for dep in graph.dependencies[current]:
                if dep not in seen:
                    seen.add(dep)
                    queue.append(dep)
        return sorted(seen)

    def _statistics(
        self,
        graph: DependencyGraph,
        cycles: CycleReport,
        topo: TopologicalOrder,
        critical_path: CriticalPath,
    ) -> GraphStatistics:
        clean = cycles.clean_graph
        stats = GraphStatistics(
            total_issues=len(graph),
            total_dependencies=graph.edge_count,
            cycles=len(cycles.cycles),
            max_depth=topo.max_depth,
            root_issues=sum(1 for deps in clean.dependencies.values() if not deps),
            leaf_issues=sum(1 for deps in clean.dependents.values() if not deps),
            critical_path_length=len(critical_path.issue_ids),
            blocked_by_cycle=len(cycles.blocked_by_cycle),
            dangling_references=len(graph.dangling),
        )
        for node in graph.nodes.values():
            stats.by_priority[node.priority.value] += 1
            stats.by_status[node.status.value] += 1
        return stats
