"""Parallel Grouper - Batch issues that can run at the same time."""

from typing import Dict, List, Optional

from sdlc_controller.scheduler.graph_builder import DependencyGraph
from sdlc_controller.scheduler.models import ParallelGroup
from sdlc_controller.scheduler.topological_sorter import TopologicalOrder


class ParallelGrouper:
    """Groups issues by depth.

    A dependency edge always raises depth by at least one, so issues at the
    same depth never depend on each other, and everything an issue in group
    ``k`` needs sits in groups ``0..k-1``.
    """

    def group(
        self,
        graph: DependencyGraph,
        topo: TopologicalOrder,
        scores: Optional[Dict[str, float]] = None,
    ) -> List[ParallelGroup]:
        """Build the ordered parallel groups.

        Args:
            graph: Acyclic dependency graph
            topo: Order and depths from the TopologicalSorter
            scores: Optional priority scores; members are then listed highest
                score first, otherwise by ascending id

        Returns:
            One ParallelGroup per depth level, ``group_index`` equal to depth
        """
        levels: Dict[int, List[str]] = {}
        for issue_id in topo.order:
            levels.setdefault(topo.depths[issue_id], []).append(issue_id)

        groups: List[ParallelGroup] = []
        for depth in sorted(levels):
            members = levels[depth]
            if scores is not None:
                members = sorted(members, key=lambda issue_id: (-scores[issue_id], issue_id))
            else:
                members = sorted(members)

            groups.append(ParallelGroup(
                group_index=depth,
                issue_ids=members,
                total_effort=sum(graph.effort(issue_id) for issue_id in members),
            ))

        return groups
