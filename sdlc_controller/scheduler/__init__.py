"""Scheduler module - Issue dependency analysis and execution planning."""

from sdlc_controller.scheduler.errors import (
    ControllerError,
    DuplicateIssueError,
    GraphNotFoundError,
    GraphParseError,
    GraphValidationError,
    IssueNotFoundError,
)
from sdlc_controller.scheduler.models import (
    AnalyzedIssue,
    CriticalPath,
    CycleInfo,
    GraphAnalysisResult,
    GraphStatistics,
    IssueNode,
    IssueStatus,
    ParallelGroup,
    PrioritizedQueue,
    Priority,
)
from sdlc_controller.scheduler.graph_builder import DependencyGraph, GraphBuilder
from sdlc_controller.scheduler.cycle_detector import CycleDetector, CycleReport
from sdlc_controller.scheduler.topological_sorter import TopologicalOrder, TopologicalSorter
from sdlc_controller.scheduler.critical_path import CriticalPathAnalyzer
from sdlc_controller.scheduler.parallel_grouper import ParallelGrouper
from sdlc_controller.scheduler.priority_scorer import PriorityScorer
from sdlc_controller.scheduler.queue_builder import QueueBuilder
from sdlc_controller.scheduler.loader import load_issues, parse_issues
from sdlc_controller.scheduler.priority_analyzer import PriorityAnalyzer

__all__ = [
    "ControllerError",
    "DuplicateIssueError",
    "GraphNotFoundError",
    "GraphParseError",
    "GraphValidationError",
    "IssueNotFoundError",
    "AnalyzedIssue",
    "CriticalPath",
    "CycleInfo",
    "GraphAnalysisResult",
    "GraphStatistics",
    "IssueNode",
    "IssueStatus",
    "ParallelGroup",
    "PrioritizedQueue",
    "Priority",
    "DependencyGraph",
    "GraphBuilder",
    "CycleDetector",
    "CycleReport",
    "TopologicalOrder",
    "TopologicalSorter",
    "CriticalPathAnalyzer",
    "ParallelGrouper",
    "PriorityScorer",
    "QueueBuilder",
    "load_issues",
    "parse_issues",
    "PriorityAnalyzer",
]
