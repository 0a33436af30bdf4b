"""Tests for Parallel Grouper."""

import pytest

from factories import make_issue, random_dag
from sdlc_controller.scheduler.graph_builder import GraphBuilder
from sdlc_controller.scheduler.parallel_grouper import ParallelGrouper
from sdlc_controller.scheduler.topological_sorter import TopologicalSorter


class TestParallelGrouper:
    """Test suite for ParallelGrouper."""

    def setup_method(self):
        """Set up test fixtures."""
        self.builder = GraphBuilder()
        self.sorter = TopologicalSorter()
        self.grouper = ParallelGrouper()

    def _group(self, issues, scores=None):
        graph = self.builder.build(issues)
        topo = self.sorter.sort(graph)
        return graph, topo, self.grouper.group(graph, topo, scores)

    def test_empty_graph(self):
        """Test that an empty graph has no groups."""
        _, _, groups = self._group([])
        assert groups == []

    def test_scenario_a(self, scenario_a):
        """Test grouping a root with two dependents."""
        _, _, groups = self._group(scenario_a)
        assert [g.issue_ids for g in groups] == [["A"], ["B", "C"]]
        assert [g.group_index for g in groups] == [0, 1]
        assert [g.total_effort for g in groups] == [2, 4]

    def test_members_follow_scores(self):
        """Test that members are listed highest score first."""
        issues = [make_issue("a"), make_issue("b"), make_issue("c")]
        _, _, groups = self._group(issues, scores={"a": 10, "b": 30, "c": 30})
        assert groups[0].issue_ids == ["b", "c", "a"]

    def test_independent_issues_share_one_group(self):
        """Test that issues without dependencies all run together."""
        _, _, groups = self._group([make_issue("t1"), make_issue("t2"), make_issue("t3")])
        assert len(groups) == 1
        assert groups[0].issue_ids == ["t1", "t2", "t3"]

    @pytest.mark.parametrize("seed", [7, 8, 9])
    def test_groups_cover_order_and_are_independent(self, seed):
        """Test that groups partition the order with no edges inside a group."""
        graph, topo, groups = self._group(random_dag(seed))

        flattened = [issue_id for g in groups for issue_id in g.issue_ids]
        assert sorted(flattened) == sorted(topo.order)
        assert len(flattened) == len(set(flattened))

        group_of = {issue_id: g.group_index for g in groups for issue_id in g.issue_ids}
        for issue_id in graph.nodes:
            for dep in graph.dependencies[issue_id]:
                assert group_of[dep] < group_of[issue_id]
