"""Cycle Detector - Find circular dependencies and split off blocked issues."""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Set, Tuple

from sdlc_controller.scheduler.graph_builder import DependencyGraph
from sdlc_controller.scheduler.models import CycleInfo

logger = logging.getLogger(__name__)

UNVISITED = 0
IN_PROGRESS = 1
DONE = 2


@dataclass
class CycleReport:
    """Outcome of cycle detection."""

    cycles: List[CycleInfo]
    blocked_by_cycle: List[str]
    clean_graph: DependencyGraph
    # Eligible issue id -> its direct dependencies that are cycle-blocked
    cycle_blocked_dependencies: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def has_cycles(self) -> bool:
        return len(self.cycles) > 0


class CycleDetector:
    """Detects dependency cycles with a depth-first search.

    Nodes carry three states (unvisited, in progress, done). An edge into
    an in-progress node closes a cycle. Lowlink bookkeeping in the same walk
    groups cycles that share nodes into one strongly connected component,
    so each issue is reported in at most one cycle.
    """

    def detect(self, graph: DependencyGraph) -> CycleReport:
        """Detect cycles and derive the acyclic graph used downstream.

        Args:
            graph: Full dependency graph

        Returns:
            CycleReport with merged cycles, blocked ids and the clean graph
        """
        components = self._find_cyclic_components(graph)
        cycles = [CycleInfo(issue_ids=component) for component in components]

        members: Set[str] = {issue_id for component in components for issue_id in component}
        anchored = self._anchored_issues(graph, members)
        blocked = sorted(issue_id for issue_id in graph.nodes if issue_id not in anchored)

        for cycle in cycles:
            logger.warning(f"Circular dependency detected: {' -> '.join(cycle.issue_ids)}")
        stranded = [issue_id for issue_id in blocked if issue_id not in members]
        if stranded:
            logger.warning(f"Issues reachable only through a cycle: {', '.join(stranded)}")

        blocked_set = set(blocked)
        cycle_blocked_dependencies = {
            issue_id: [dep for dep in graph.dependencies[issue_id] if dep in blocked_set]
            for issue_id in anchored
            if any(dep in blocked_set for dep in graph.dependencies[issue_id])
        }

        return CycleReport(
            cycles=cycles,
            blocked_by_cycle=blocked,
            clean_graph=graph.without(blocked_set),
            cycle_blocked_dependencies=cycle_blocked_dependencies,
        )

    def _find_cyclic_components(self, graph: DependencyGraph) -> List[List[str]]:
        """Return every strongly connected component that contains a cycle.

        Members are listed in discovery order; components are listed in the
        order their first member was discovered. Roots and neighbours are
        visited by ascending id.
        """
        state: Dict[str, int] = {issue_id: UNVISITED for issue_id in graph.nodes}
        index: Dict[str, int] = {}
        lowlink: Dict[str, int] = {}
        stack: List[str] = []
        on_stack: Set[str] = set()
        components: List[List[str]] = []

        def visit(issue_id: str) -> Tuple[str, Iterator[str]]:
            index[issue_id] = lowlink[issue_id] = len(index)
            state[issue_id] = IN_PROGRESS
            stack.append(issue_id)
            on_stack.add(issue_id)
            return issue_id, iter(graph.dependencies[issue_id])

        for root in graph.sorted_ids:
            if state[root] != UNVISITED:
                continue

            work = [visit(root)]
            while work:
                node, neighbours = work[-1]
                descended = False

                for dep in neighbours:
                    if state[dep] == UNVISITED:
                        work.append(visit(dep))
                        descended = True
                        break
                    if state[dep] == IN_PROGRESS or dep in on_stack:
                        # Back edge, or a cross edge into a component still open
                        lowlink[node] = min(lowlink[node], index[dep])

                if descended:
                    continue

                work.pop()
                state[node] = DONE
                if work:
                    parent = work[-1][0]
                    lowlink[parent] = min(lowlink[parent], lowlink[node])

                if lowlink[node] == index[node]:
                    component: List[str] = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        component.append(member)
                        if member == node:
                            break
                    if len(component) > 1 or node in graph.dependencies[node]:
                        components.append(sorted(component, key=index.__getitem__))

        components.sort(key=lambda component: index[component[0]])
        return components

    def _anchored_issues(self, graph: DependencyGraph, members: Set[str]) -> Set[str]:
        """Issues that reach a root without passing through a cycle."""
        roots = [
            issue_id
            for issue_id in graph.sorted_ids
            if issue_id not in members and not graph.dependencies[issue_id]
        ]
        anchored: Set[str] = set(roots)
        queue = deque(roots)

        while queue:
            current = queue.popleft()
            for dependent in graph.dependents[current]:
                if dependent not in members and dependent not in anchored:
                    anchored.add(dependent)
                    queue.append(dependent)

        return anchored
