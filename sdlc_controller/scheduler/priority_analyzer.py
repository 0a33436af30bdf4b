"""Priority Analyzer - Runs the scheduling pipeline for a list of issues."""

import logging
import time
from typing import Any, Dict, Optional, Sequence, Union

from sdlc_controller.core.config import AnalyzerConfig
from sdlc_controller.scheduler.critical_path import CriticalPathAnalyzer
from sdlc_controller.scheduler.cycle_detector import CycleDetector
from sdlc_controller.scheduler.graph_builder import GraphBuilder
from sdlc_controller.scheduler.loader import load_issues
from sdlc_controller.scheduler.models import GraphAnalysisResult, IssueNode
from sdlc_controller.scheduler.parallel_grouper import ParallelGrouper
from sdlc_controller.scheduler.priority_scorer import PriorityScorer
from sdlc_controller.scheduler.queue_builder import QueueBuilder
from sdlc_controller.scheduler.topological_sorter import TopologicalSorter

logger = logging.getLogger(__name__)


class PriorityAnalyzer:
    """Main entry point for issue scheduling.

    Each call to :meth:`analyze` is independent: nothing computed for one
    issue list is kept for the next.
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        """Initialize analyzer.

        Args:
            config: Scoring configuration; defaults to ``AnalyzerConfig()``
        """
        self.config = config or AnalyzerConfig()
        self.graph_builder = GraphBuilder()
        self.cycle_detector = CycleDetector()
        self.topological_sorter = TopologicalSorter()
        self.critical_path_analyzer = CriticalPathAnalyzer()
        self.parallel_grouper = ParallelGrouper()
        self.priority_scorer = PriorityScorer(self.config)
        self.queue_builder = QueueBuilder()

    def analyze(self, issues: Sequence[Union[IssueNode, Dict[str, Any]]]) -> GraphAnalysisResult:
        """Analyze issues and build the execution plan.

        Dangling dependencies are dropped with a warning and cycles are
        reported in the result; only invalid input aborts the run.

        Args:
            issues: IssueNode records or raw issue dicts

        Returns:
            GraphAnalysisResult for the whole input

        Raises:
            DuplicateIssueError: If two issues share an id
            GraphValidationError: If a raw issue record is malformed
        """
        start_time = time.time()

        graph = self.graph_builder.build(issues)
        cycles = self.cycle_detector.detect(graph)
        clean = cycles.clean_graph

        topo = self.topological_sorter.sort(clean)
        critical_path = self.critical_path_analyzer.analyze(clean, topo.order)
        scores = self.priority_scorer.score_all(clean, critical_path.issue_ids)
        parallel_groups = self.parallel_grouper.group(clean, topo, scores)

        result = self.queue_builder.assemble(
            graph=graph,
            cycles=cycles,
            topo=topo,
            critical_path=critical_path,
            parallel_groups=parallel_groups,
            scores=scores,
        )

        elapsed_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Analyzed {len(graph)} issues: {len(result.parallel_groups)} groups, "
            f"{len(result.cycles)} cycles, {len(result.blocked_by_cycle)} blocked by cycle, "
            f"{len(result.prioritized_queue.ready_for_execution)} ready"
        )
        logger.debug(f"Analysis took {elapsed_ms:.2f}ms")

        return result

    def analyze_file(self, file_path: str) -> GraphAnalysisResult:
        """Load a dependency graph file and analyze it."""
        return self.analyze(load_issues(file_path))
