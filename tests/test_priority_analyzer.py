"""Tests for Priority Analyzer and Queue Builder."""

import pytest

from factories import make_issue, random_dag
from sdlc_controller.core.config import AnalyzerConfig
from sdlc_controller.scheduler.errors import DuplicateIssueError, IssueNotFoundError
from sdlc_controller.scheduler.models import GraphAnalysisResult
from sdlc_controller.scheduler.priority_analyzer import PriorityAnalyzer


class TestScenarios:
    """End-to-end scenarios for the analyzer."""

    def setup_method(self):
        """Set up test fixtures."""
        self.analyzer = PriorityAnalyzer(AnalyzerConfig())

    def test_scenario_a_plan(self, scenario_a):
        """Test order, groups and critical path for a small tree."""
        result = self.analyzer.analyze(scenario_a)
        assert result.execution_order == ["A", "B", "C"]
        assert [g.issue_ids for g in result.parallel_groups] == [["A"], ["B", "C"]]
        assert result.critical_path.issue_ids == ["A", "B"]
        assert result.critical_path.total_effort == 5

    def test_scenario_a_queue(self, scenario_a):
        """Test ranking and ready/blocked split for a small tree."""
        result = self.analyzer.analyze(scenario_a)
        assert result.prioritized_queue.queue == ["B", "A", "C"]
        assert result.prioritized_queue.ready_for_execution == ["A"]
        assert result.prioritized_queue.blocked == ["B", "C"]

    def test_scenario_a_issues(self, scenario_a):
        """Test the per-issue analysis records."""
        result = self.analyzer.analyze(scenario_a)
        a, b = result.issues["A"], result.issues["B"]
        assert a.dependents == ["B", "C"]
        assert a.depth == 0
        assert a.is_on_critical_path
        assert a.dependencies_resolved
        assert a.priority_score == 160
        assert b.dependencies == ["A"]
        assert b.transitive_dependencies == ["A"]
        assert b.depth == 1
        assert not b.dependencies_resolved
        assert not result.issues["C"].is_on_critical_path

    def test_scenario_a_statistics(self, scenario_a):
        """Test graph statistics for a small tree."""
        stats = self.analyzer.analyze(scenario_a).statistics
        assert stats.total_issues == 3
        assert stats.total_dependencies == 2
        assert stats.cycles == 0
        assert stats.max_depth == 1
        assert stats.root_issues == 1
        assert stats.leaf_issues == 2
        assert stats.critical_path_length == 2
        assert stats.by_priority == {"P0": 1, "P1": 1, "P2": 1, "P3": 0}
        assert stats.by_status["pending"] == 3

    def test_scenario_b_cycle(self, two_node_cycle):
        """Test that a two-issue cycle is reported and excluded."""
        result = self.analyzer.analyze(two_node_cycle)
        assert len(result.cycles) == 1
        assert sorted(result.cycles[0].issue_ids) == ["X", "Y"]
        assert result.blocked_by_cycle == ["X", "Y"]
        assert result.execution_order == []
        assert result.parallel_groups == []
        assert result.critical_path.issue_ids == []
        assert result.prioritized_queue.queue == []
        assert result.statistics.cycles == 1
        assert result.issues["X"].is_blocked_by_cycle
        assert result.issues["X"].priority_score is None
        assert result.issues["X"].depth is None

    def test_scenario_c_dangling_reference(self):
        """Test that a missing dependency is dropped with a warning."""
        result = self.analyzer.analyze([make_issue("A", deps=["Z"])])
        assert len(result.warnings) == 1
        assert "Z" in result.warnings[0]
        assert result.issues["A"].dependencies == []
        assert result.issues["A"].depth == 0
        assert result.execution_order == ["A"]
        assert result.prioritized_queue.ready_for_execution == ["A"]
        assert result.statistics.dangling_references == 1

    def test_scenario_d_empty_input(self):
        """Test that an empty list yields an empty result."""
        result = self.analyzer.analyze([])
        assert result.to_dict() == GraphAnalysisResult().to_dict()
        stats = result.statistics
        assert stats.total_issues == 0
        assert stats.max_depth == 0
        assert set(stats.by_priority.values()) == {0}
        assert result.critical_path.total_effort == 0

    def test_duplicate_ids_abort(self):
        """Test that duplicate ids raise instead of returning a result."""
        with pytest.raises(DuplicateIssueError):
            self.analyzer.analyze([make_issue("A"), make_issue("A")])


class TestCycleHandling:
    """Tests for issues around dependency cycles."""

    def setup_method(self):
        """Set up test fixtures."""
        self.analyzer = PriorityAnalyzer()

    def test_rest_of_graph_still_scheduled(self, two_node_cycle):
        """Test that clean issues are planned next to a cycle."""
        result = self.analyzer.analyze(two_node_cycle + [
            make_issue("A"),
            make_issue("B", deps=["A"]),
        ])
        assert result.execution_order == ["A", "B"]
        assert result.critical_path.issue_ids == ["A", "B"]
        for group in result.parallel_groups:
            assert not set(group.issue_ids) & {"X", "Y"}

    def test_dependent_of_cycle_only_is_blocked(self, two_node_cycle):
        """Test that an issue reachable only through the cycle is excluded."""
        result = self.analyzer.analyze(two_node_cycle + [make_issue("D", deps=["X"])])
        assert result.blocked_by_cycle == ["D", "X", "Y"]
        assert result.statistics.blocked_by_cycle == 3
        assert "D" not in result.execution_order

    def test_mixed_dependent_never_resolved(self, two_node_cycle):
        """Test that an issue with one cyclic dependency stays blocked."""
        result = self.analyzer.analyze(two_node_cycle + [
            make_issue("A", status="completed"),
            make_issue("D", deps=["A", "X"]),
        ])
        d = result.issues["D"]
        assert "D" in result.execution_order
        assert d.dependencies == ["A"]
        assert d.cycle_blocked_dependencies == ["X"]
        assert d.depth == 1
        assert not d.dependencies_resolved
        assert result.prioritized_queue.blocked == ["D"]
        assert result.prioritized_queue.ready_for_execution == []

    def test_queue_sets_are_disjoint(self, two_node_cycle):
        """Test that no issue is both ready, blocked or cycle-blocked."""
        result = self.analyzer.analyze(two_node_cycle + [
            make_issue("A"),
            make_issue("B", deps=["A"]),
            make_issue("D", deps=["A", "Y"]),
        ])
        ready = set(result.prioritized_queue.ready_for_execution)
        blocked = set(result.prioritized_queue.blocked)
        cyclic = set(result.blocked_by_cycle)
        assert not ready & blocked
        assert not ready & cyclic
        assert not blocked & cyclic
        assert ready | blocked | cyclic == {"A", "B", "D", "X", "Y"}


class TestQueueStatus:
    """Tests for status-driven readiness."""

    def setup_method(self):
        """Set up test fixtures."""
        self.analyzer = PriorityAnalyzer()

    def test_completed_dependency_makes_dependents_ready(self):
        """Test that finishing the root releases its dependents."""
        result = self.analyzer.analyze([
            make_issue("A", effort=2, priority="P1", status="completed"),
            make_issue("B", deps=["A"], effort=3, priority="P0"),
            make_issue("C", deps=["A"], effort=1, priority="P2"),
        ])
        assert result.prioritized_queue.ready_for_execution == ["B", "C"]
        assert result.prioritized_queue.blocked == []
        assert result.get_next_executable_issue() == "B"

    def test_in_progress_issue_is_neither_ready_nor_blocked(self):
        """Test that running issues leave the ready/blocked split."""
        result = self.analyzer.analyze([
            make_issue("A", status="in_progress"),
            make_issue("B", deps=["A"]),
        ])
        assert result.prioritized_queue.queue == ["A", "B"]
        assert result.prioritized_queue.ready_for_execution == []
        assert result.prioritized_queue.blocked == ["B"]
        assert result.get_next_executable_issue() is None

    def test_queue_ties_break_by_depth_then_id(self):
        """Test the ranking tie-break."""
        config = AnalyzerConfig(critical_path_bonus=0, dependent_multiplier=0, quick_win_bonus=0)
        result = PriorityAnalyzer(config).analyze([
            make_issue("b"),
            make_issue("a", deps=["c"]),
            make_issue("c"),
        ])
        assert result.prioritized_queue.queue == ["b", "c", "a"]


class TestResultLookups:
    """Tests for the lookup helpers on GraphAnalysisResult."""

    def setup_method(self):
        """Set up test fixtures."""
        self.result = PriorityAnalyzer().analyze([
            make_issue("A"),
            make_issue("B", deps=["A"]),
            make_issue("C", deps=["B"]),
        ])

    def test_direct_lookups(self):
        """Test dependencies and dependents lookups."""
        assert self.result.get_dependencies("B") == ["A"]
        assert self.result.get_dependents("B") == ["C"]

    def test_transitive_lookup(self):
        """Test transitive dependencies and depends_on."""
        assert self.result.get_transitive_dependencies("C") == ["A", "B"]
        assert self.result.depends_on("C", "A")
        assert not self.result.depends_on("A", "C")

    def test_unknown_issue_raises(self):
        """Test that lookups on unknown ids raise."""
        with pytest.raises(IssueNotFoundError) as exc_info:
            self.result.get_dependencies("nope")
        assert exc_info.value.issue_id == "nope"

    def test_executable_issues(self):
        """Test executable issues and cycle checks."""
        assert sorted(self.result.get_executable_issues()) == ["A", "B", "C"]
        assert not self.result.has_cycles()
        assert not self.result.is_blocked_by_cycle("A")


class TestDeterminism:
    """Tests for reproducible output."""

    @pytest.mark.parametrize("seed", [11, 12])
    def test_identical_input_gives_identical_json(self, seed):
        """Test that two runs serialize byte for byte the same."""
        issues = random_dag(seed) + [
            make_issue("x1", deps=["x2"]),
            make_issue("x2", deps=["x1"]),
        ]
        first = PriorityAnalyzer().analyze(issues).to_json()
        second = PriorityAnalyzer().analyze(list(issues)).to_json()
        assert first == second

    def test_input_order_does_not_matter(self):
        """Test that shuffling the input does not change the plan."""
        issues = random_dag(13)
        first = PriorityAnalyzer().analyze(issues).to_json()
        second = PriorityAnalyzer().analyze(list(reversed(issues))).to_json()
        assert first == second
