"""Priority Scorer - Weighted priority score per issue."""

from typing import Dict, Iterable

from sdlc_controller.core.config import AnalyzerConfig
from sdlc_controller.scheduler.graph_builder import DependencyGraph
from sdlc_controller.scheduler.models import IssueNode


class PriorityScorer:
    """Scores issues from their priority, position and size."""

    def __init__(self, config: AnalyzerConfig):
        """Initialize scorer.

        Args:
            config: Weights, bonuses and quick-win threshold
        """
        self.config = config

    def score(self, node: IssueNode, on_critical_path: bool, dependent_count: int) -> float:
        """Score a single issue (higher runs first).

        The score adds up:
        1. The weight of its priority level
        2. A bonus when it lies on the critical path
        3. A fixed amount per issue waiting on it
        4. A bonus for quick wins (effort at or under the threshold)
        """
        config = self.config
        score = config.weights.weight_for(node.priority)
        score += dependent_count * config.dependent_multiplier
        if on_critical_path:
            score += config.critical_path_bonus
        if node.effort <= config.quick_win_threshold:
            score += config.quick_win_bonus
        return score

    def score_all(self, graph: DependencyGraph, critical_path: Iterable[str]) -> Dict[str, float]:
        """Score every issue of an acyclic graph.

        Args:
            graph: Graph with cycle-blocked issues already removed
            critical_path: Issue ids on the critical path

        Returns:
            Mapping of issue id to score
        """
        on_path = set(critical_path)
        return {
            issue_id: self.score(
                node,
                on_critical_path=issue_id in on_path,
                dependent_count=len(graph.dependents[issue_id]),
            )
            for issue_id, node in graph.nodes.items()
        }
