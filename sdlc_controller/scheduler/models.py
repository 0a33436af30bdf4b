"""Data models for the issue scheduler - inputs, analysis records and results."""

import json
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from sdlc_controller.scheduler.errors import GraphValidationError, IssueNotFoundError


class Priority(str, Enum):
    """Issue priority, P0 is the most urgent."""
    P0 = "P0"
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"


class IssueStatus(str, Enum):
    """Issue status as tracked by the caller."""
    PENDING = "pending"
    READY = "ready"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    BLOCKED = "blocked"
    FAILED = "failed"


# Statuses that take an issue out of the work queue split
ACTIVE_OR_DONE = (IssueStatus.IN_PROGRESS, IssueStatus.COMPLETED)


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


@dataclass(frozen=True)
class IssueNode:
    """A work item handed to the scheduler."""

    id: str
    title: str = ""
    effort: float = 0
    priority: Priority = Priority.P2
    dependencies: Tuple[str, ...] = ()
    status: IssueStatus = IssueStatus.PENDING
    url: Optional[str] = None
    component_id: Optional[str] = None

    def __post_init__(self):
        if not _is_number(self.effort) or self.effort < 0:
            raise GraphValidationError(
                [f"Issue {self.id}: invalid effort {self.effort!r} (must be a finite non-negative number)"]
            )
        try:
            # Accept "P0" or "pending" labels as well as enum members
            object.__setattr__(self, "priority", Priority(self.priority))
            object.__setattr__(self, "status", IssueStatus(self.status))
        except (TypeError, ValueError) as e:
            raise GraphValidationError([f"Issue {self.id}: {e}"]) from e
        object.__setattr__(self, "dependencies", tuple(self.dependencies))

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int = 0) -> "IssueNode":
        """Create from a raw issue record.

        Accepts ``effort``, ``effortHours`` or ``effort_hours`` for the
        estimate and ``componentId`` or ``component_id`` for the component.

        Raises:
            GraphValidationError: If the record is malformed.
        """
        prefix = f"Issue at index {index}"
        if not isinstance(data, dict):
            raise GraphValidationError([f"{prefix}: must be an object"])

        errors: List[str] = []

        issue_id = data.get("id")
        if not isinstance(issue_id, str) or not issue_id:
            errors.append(f'{prefix}: missing or invalid "id"')

        effort = data.get("effort", data.get("effortHours", data.get("effort_hours", 0)))
        if not _is_number(effort) or effort < 0:
            errors.append(f'{prefix}: invalid "effort" (must be a finite non-negative number)')

        priority = data.get("priority", Priority.P2.value)
        if not isinstance(priority, str) or priority not in Priority._value2member_map_:
            errors.append(f'{prefix}: invalid "priority" (must be P0, P1, P2, or P3)')

        status = data.get("status", IssueStatus.PENDING.value)
        if not isinstance(status, str) or status not in IssueStatus._value2member_map_:
            errors.append(f'{prefix}: invalid "status"')

        dependencies = data.get("dependencies", [])
        if not isinstance(dependencies, (list, tuple)) or not all(
            isinstance(dep, str) for dep in dependencies
        ):
            errors.append(f'{prefix}: "dependencies" must be a list of issue IDs')

        if errors:
            raise GraphValidationError(errors)

        return cls(
            id=issue_id,
            title=data.get("title", "") or "",
            effort=effort,
            priority=Priority(priority),
            dependencies=tuple(dependencies),
            status=IssueStatus(status),
            url=data.get("url"),
            component_id=data.get("componentId", data.get("component_id")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "effort": self.effort,
            "priority": self.priority.value,
            "dependencies": list(self.dependencies),
            "status": self.status.value,
            "url": self.url,
            "component_id": self.component_id,
        }


@dataclass
class AnalyzedIssue:
    """An issue with the metrics computed for one scheduling run."""

    node: IssueNode
    dependencies: List[str] = field(default_factory=list)
    dependents: List[str] = field(default_factory=list)
    cycle_blocked_dependencies: List[str] = field(default_factory=list)
    transitive_dependencies: List[str] = field(default_factory=list)
    depth: Optional[int] = None
    priority_score: Optional[float] = None
    is_on_critical_path: bool = False
    is_blocked_by_cycle: bool = False
    dependencies_resolved: bool = False

    @property
    def id(self) -> str:
        return self.node.id

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "node": self.node.to_dict(),
            "dependencies": self.dependencies,
            "dependents": self.dependents,
            "cycle_blocked_dependencies": self.cycle_blocked_dependencies,
            "transitive_dependencies": self.transitive_dependencies,
            "depth": self.depth,
            "priority_score": self.priority_score,
            "is_on_critical_path": self.is_on_critical_path,
            "is_blocked_by_cycle": self.is_blocked_by_cycle,
            "dependencies_resolved": self.dependencies_resolved,
        }


@dataclass
class CycleInfo:
    """One circular dependency chain (overlapping chains are merged)."""

    issue_ids: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"issue_ids": self.issue_ids}


@dataclass
class CriticalPath:
    """Longest effort-weighted chain through the acyclic subgraph."""

    issue_ids: List[str] = field(default_factory=list)
    total_effort: float = 0
    bottleneck: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "issue_ids": self.issue_ids,
            "total_effort": self.total_effort,
            "bottleneck": self.bottleneck,
        }


@dataclass
class ParallelGroup:
    """Issues at the same depth, safe to run concurrently."""

    group_index: int
    issue_ids: List[str]
    total_effort: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group_index": self.group_index,
            "issue_ids": self.issue_ids,
            "total_effort": self.total_effort,
        }


@dataclass
class PrioritizedQueue:
    """Work queue split into ready and blocked issues."""

    queue: List[str] = field(default_factory=list)
    ready_for_execution: List[str] = field(default_factory=list)
    blocked: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "queue": self.queue,
            "ready_for_execution": self.ready_for_execution,
            "blocked": self.blocked,
        }


def _zero_counts(enum_cls) -> Dict[str, int]:
    return {member.value: 0 for member in enum_cls}


@dataclass
class GraphStatistics:
    """Counts describing the analyzed graph."""

    total_issues: int = 0
    total_dependencies: int = 0
    cycles: int = 0
    max_depth: int = 0
    root_issues: int = 0
    leaf_issues: int = 0
    critical_path_length: int = 0
    blocked_by_cycle: int = 0
    dangling_references: int = 0
    by_priority: Dict[str, int] = field(default_factory=lambda: _zero_counts(Priority))
    by_status: Dict[str, int] = field(default_factory=lambda: _zero_counts(IssueStatus))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_issues": self.total_issues,
            "total_dependencies": self.total_dependencies,
            "cycles": self.cycles,
            "max_depth": self.max_depth,
            "root_issues": self.root_issues,
            "leaf_issues": self.leaf_issues,
            "critical_path_length": self.critical_path_length,
            "blocked_by_cycle": self.blocked_by_cycle,
            "dangling_references": self.dangling_references,
            "by_priority": dict(self.by_priority),
            "by_status": dict(self.by_status),
        }


@dataclass
class GraphAnalysisResult:
    """Complete output of one scheduling run."""

    issues: Dict[str, AnalyzedIssue] = field(default_factory=dict)
    execution_order: List[str] = field(default_factory=list)
    parallel_groups: List[ParallelGroup] = field(default_factory=list)
    critical_path: CriticalPath = field(default_factory=CriticalPath)
    prioritized_queue: PrioritizedQueue = field(default_factory=PrioritizedQueue)
    statistics: GraphStatistics = field(default_factory=GraphStatistics)
    cycles: List[CycleInfo] = field(default_factory=list)
    blocked_by_cycle: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "issues": {issue_id: issue.to_dict() for issue_id, issue in self.issues.items()},
            "execution_order": self.execution_order,
            "parallel_groups": [g.to_dict() for g in self.parallel_groups],
            "critical_path": self.critical_path.to_dict(),
            "prioritized_queue": self.prioritized_queue.to_dict(),
            "statistics": self.statistics.to_dict(),
            "cycles": [c.to_dict() for c in self.cycles],
            "blocked_by_cycle": self.blocked_by_cycle,
            "warnings": self.warnings,
        }

    def to_json(self) -> str:
        """Serialize to canonical JSON (sorted keys, stable separators)."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))

    # Lookups

    def _get(self, issue_id: str, context: str) -> AnalyzedIssue:
        issue = self.issues.get(issue_id)
        if issue is None:
            raise IssueNotFoundError(issue_id, context)
        return issue

    def get_dependencies(self, issue_id: str) -> List[str]:
        """Direct dependencies of an issue."""
        return list(self._get(issue_id, "get_dependencies").dependencies)

    def get_dependents(self, issue_id: str) -> List[str]:
        """Direct dependents of an issue."""
        return list(self._get(issue_id, "get_dependents").dependents)

    def get_transitive_dependencies(self, issue_id: str) -> List[str]:
        """All ancestors of an issue, ascending id."""
        return list(self._get(issue_id, "get_transitive_dependencies").transitive_dependencies)

    def depends_on(self, issue_a: str, issue_b: str) -> bool:
        """Check if issue A depends on issue B directly or transitively."""
        return issue_b in self.get_transitive_dependencies(issue_a)

    def has_cycles(self) -> bool:
        return len(self.cycles) > 0

    def is_blocked_by_cycle(self, issue_id: str) -> bool:
        return issue_id in self.blocked_by_cycle

    def get_executable_issues(self) -> List[str]:
        """Issues not blocked by a cycle, highest priority first."""
        return list(self.prioritized_queue.queue)

    def get_next_executable_issue(self) -> Optional[str]:
        """Highest priority issue that can start now, or None."""
        ready = self.prioritized_queue.ready_for_execution
        return ready[0] if ready else None
