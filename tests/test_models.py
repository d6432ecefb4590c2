"""Tests for domain models."""

import io
import json

import pytest

from cerebro.domain.models import FlowEdge, FlowGraph, FlowNode


class TestFlowNode:
    def test_creation(self):
        n = FlowNode(id=3)
        assert n.position is None
        assert n.color_group is None
        assert n.community is None

    def test_init_xy(self):
        n = FlowNode(id=3)
        n.init_xy(1.5, -2.0)
        assert n.position == (1.5, -2.0)


class TestFlowGraph:
    def test_duplicate_pair_increments(self):
        g = FlowGraph()
        g.add_edge(0, 1, 2)
        g.add_edge(0, 1, 3)
        assert len(g) == 1
        assert g.edge_count(0, 1) == 5
        assert g.edges() == [FlowEdge(0, 1, 5)]

    def test_reverse_pair_is_distinct(self):
        g = FlowGraph()
        g.add_edge(0, 1)
        g.add_edge(1, 0)
        assert len(g) == 2
        assert g.edge_count(1, 0) == 1

    def test_add_node_idempotent(self):
        g = FlowGraph()
        a = g.add_node(4)
        b = g.add_node(4)
        assert a is b
        assert len(g.nodes) == 1

    def test_max_edge_count(self, triangle_flow):
        assert triangle_flow.max_edge_count() == 5

    def test_max_edge_count_empty(self, empty_flow):
        assert empty_flow.max_edge_count() == 0

    def test_missing_pair_count(self, triangle_flow):
        assert triangle_flow.edge_count(2, 0) == 0

    def test_get_node_unknown(self, triangle_flow):
        with pytest.raises(KeyError):
            triangle_flow.get_node(99)

    def test_referenced_node_ids_first_seen_order(self):
        g = FlowGraph()
        g.add_edge(5, 2)
        g.add_edge(2, 9)
        g.add_edge(9, 5)
        g.add_edge(7, 2)
        g.add_node(42)  # isolated, never referenced
        assert g.referenced_node_ids() == [5, 2, 9, 7]

    def test_dump_and_load(self, triangle_flow, tmp_path):
        triangle_flow.get_node(0).init_xy(10.0, 20.0)
        triangle_flow.get_node(0).init_color_group(1)
        triangle_flow.set_cluster_count(2)

        path = tmp_path / "flow.json"
        with open(path, "w") as f:
            triangle_flow.dump(f)

        loaded = FlowGraph.load(path)
        assert loaded.edges() == triangle_flow.edges()
        assert loaded.get_node(0).position == (10.0, 20.0)
        assert loaded.get_node(0).color_group == 1
        assert loaded.get_node(1).position is None
        assert loaded.cluster_count == 2

    def test_dump_shape(self, triangle_flow):
        buf = io.StringIO()
        triangle_flow.dump(buf)
        data = json.loads(buf.getvalue())
        assert [n["id"] for n in data["nodes"]] == [0, 1, 2]
        assert data["edges"][0] == {"from": 0, "to": 1, "count": 5}
        assert data["cluster_count"] is None
