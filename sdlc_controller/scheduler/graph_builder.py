"""Graph Builder - Build the issue dependency graph and check references."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence, Set, Tuple, Union

from sdlc_controller.scheduler.errors import DuplicateIssueError
from sdlc_controller.scheduler.models import IssueNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DependencyGraph:
    """Adjacency in both directions, keyed by issue id.

    ``dependencies[v]`` lists the issues ``v`` needs first and
    ``dependents[v]`` the issues waiting on ``v``. Both are sorted by id.
    """

    nodes: Dict[str, IssueNode]
    dependencies: Dict[str, Tuple[str, ...]]
    dependents: Dict[str, Tuple[str, ...]]
    warnings: Tuple[str, ...] = ()
    dangling: Tuple[Tuple[str, str], ...] = field(default=())

    @property
    def ids(self) -> List[str]:
        """Issue ids in input order."""
        return list(self.nodes)

    @property
    def sorted_ids(self) -> List[str]:
        return sorted(self.nodes)

    @property
    def edge_count(self) -> int:
        return sum(len(deps) for deps in self.dependencies.values())

    def __contains__(self, issue_id: str) -> bool:
        return issue_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def effort(self, issue_id: str) -> float:
        return self.nodes[issue_id].effort

    def without(self, excluded: Iterable[str]) -> "DependencyGraph":
        """Return the subgraph that drops the given issues and their edges."""
        excluded_set: Set[str] = set(excluded)
        if not excluded_set:
            return self

        nodes = {i: n for i, n in self.nodes.items() if i not in excluded_set}
        return DependencyGraph(
            nodes=nodes,
            dependencies={
                i: tuple(d for d in self.dependencies[i] if d not in excluded_set) for i in nodes
            },
            dependents={
                i: tuple(d for d in self.dependents[i] if d not in excluded_set) for i in nodes
            },
            warnings=self.warnings,
            dangling=self.dangling,
        )


class GraphBuilder:
    """Builds a DependencyGraph from raw issue records."""

    def build(self, issues: Sequence[Union[IssueNode, Dict[str, Any]]]) -> DependencyGraph:
        """Build the graph.

        Dependency ids that do not match any issue are dropped and reported
        as warnings. A self-dependency is kept so cycle detection can report
        it.

        Args:
            issues: IssueNode records or raw dicts, in input order

        Returns:
            DependencyGraph for the whole input

        Raises:
            DuplicateIssueError: If two records share an id
            GraphValidationError: If a raw record is malformed
        """
        nodes = [
            issue if isinstance(issue, IssueNode) else IssueNode.from_dict(issue, index)
            for index, issue in enumerate(issues)
        ]

        counts = Counter(node.id for node in nodes)
        duplicates = [issue_id for issue_id, count in counts.items() if count > 1]
        if duplicates:
            raise DuplicateIssueError(duplicates)

        node_map: Dict[str, IssueNode] = {node.id: node for node in nodes}
        dependencies: Dict[str, Set[str]] = {node.id: set() for node in nodes}
        dependents: Dict[str, Set[str]] = {node.id: set() for node in nodes}
        warnings: List[str] = []
        dangling: List[Tuple[str, str]] = []

        for node in nodes:
            for dep_id in node.dependencies:
                if dep_id not in node_map:
                    message = f"Issue {node.id} depends on unknown issue {dep_id}; dependency dropped"
                    logger.warning(message)
                    warnings.append(message)
                    dangling.append((node.id, dep_id))
                    continue
                dependencies[node.id].add(dep_id)
                dependents[dep_id].add(node.id)

        return DependencyGraph(
            nodes=node_map,
            dependencies={i: tuple(sorted(d)) for i, d in dependencies.items()},
            dependents={i: tuple(sorted(d)) for i, d in dependents.items()},
            warnings=tuple(warnings),
            dangling=tuple(dangling),
        )
