"""Tests for community detection strategies and the assigner."""

import pytest

from cerebro.adapters.community.leiden import LeidenCommunityComputer
from cerebro.adapters.community.louvain import LouvainCommunityComputer
from cerebro.domain.models import FlowGraph
from cerebro.ports.community import CommunityComputer
from cerebro.services.community_assignment import CommunityAssigner


class _OrderedComputer(CommunityComputer):
    def __init__(self):
        self.calls = []

    def compute(self):
        self.calls.append("compute")

    def assign_community(self):
        self.calls.append("assign_community")


class TestCommunityAssigner:
    def test_call_order(self):
        computer = _OrderedComputer()
        CommunityAssigner().assign_communities(computer)
        assert computer.calls == ["compute", "assign_community"]

    def test_missing_computer(self):
        with pytest.raises(RuntimeError, match="community computer"):
            CommunityAssigner().assign_communities(None)


@pytest.mark.parametrize("computer_cls", [LeidenCommunityComputer, LouvainCommunityComputer])
class TestStrategies:
    def test_labels_cover_range(self, computer_cls, two_loop_flow):
        computer = computer_cls(two_loop_flow)
        CommunityAssigner().assign_communities(computer)

        n = two_loop_flow.community_count
        assert n is not None and n >= 1
        labels = [two_loop_flow.get_node(i).community for i in two_loop_flow.referenced_node_ids()]
        assert all(label is not None for label in labels)
        assert set(labels) == set(range(n))

    def test_loops_separate(self, computer_cls, two_loop_flow):
        CommunityAssigner().assign_communities(computer_cls(two_loop_flow))
        community = {i: two_loop_flow.get_node(i).community for i in range(6)}
        assert community[0] == community[1] == community[2]
        assert community[3] == community[4] == community[5]
        assert community[0] != community[3]

    def test_assign_before_compute(self, computer_cls, two_loop_flow):
        with pytest.raises(RuntimeError):
            computer_cls(two_loop_flow).assign_community()

    def test_empty_flow(self, computer_cls, empty_flow):
        CommunityAssigner().assign_communities(computer_cls(empty_flow))
        assert empty_flow.community_count == 0

    def test_self_loop_node_gets_own_community(self, computer_cls):
        flow = FlowGraph()
        flow.add_edge(0, 1, 3)
        flow.add_edge(7, 7, 2)
        CommunityAssigner().assign_communities(computer_cls(flow))

        assert flow.community_count == 2
        assert flow.get_node(0).community == flow.get_node(1).community
        assert flow.get_node(7).community != flow.get_node(0).community
