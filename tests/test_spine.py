"""Integration test: the full spine with real adapters."""

import json

import pytest

from cerebro.adapters.community.leiden import LeidenCommunityComputer
from cerebro.adapters.layout.springbox import SpringBoxLayout
from cerebro.adapters.renderers.matplotlib_png import MatplotlibRenderer
from cerebro.services.spine import Spine


class TestSpine:
    def test_full_pipeline(self, two_loop_flow, dbscan, tmp_path):
        spine = Spine.get_instance(
            two_loop_flow,
            clustering=dbscan,
            renderer=MatplotlibRenderer(),
            output_dir=tmp_path,
        )
        paths = (
            spine.init_visual_graph()
            .set_layout_computer(SpringBoxLayout())
            .set_community_computer(LeidenCommunityComputer(two_loop_flow))
            .compute_layout()
            .compute_visual_clusters()
            .detect_communities()
            .spit_graph("loops")
        )

        assert paths.json_path.name == "loops_springbox_k1_s0.9.json"
        assert paths.image_path.exists()

        data = json.loads(paths.json_path.read_text())
        assert len(data["nodes"]) == 6
        assert all(n["x"] is not None and n["y"] is not None for n in data["nodes"])
        assert all(n["community"] is not None for n in data["nodes"])
        assert data["cluster_count"] == two_loop_flow.cluster_count

        for vnode in spine.visual_graph.nodes():
            assert vnode.get_attribute("ui.group") == two_loop_flow.get_node(int(vnode.id)).color_group

    def test_layout_before_wiring(self, triangle_flow, dbscan):
        spine = Spine.get_instance(triangle_flow, clustering=dbscan).init_visual_graph()
        with pytest.raises(RuntimeError):
            spine.compute_layout()

    def test_null_computers_rejected(self, triangle_flow, dbscan):
        spine = Spine.get_instance(triangle_flow, clustering=dbscan)
        with pytest.raises(RuntimeError):
            spine.set_layout_computer(None)
        with pytest.raises(RuntimeError):
            spine.set_community_computer(None)

    def test_detect_without_computer(self, triangle_flow, dbscan):
        spine = Spine.get_instance(triangle_flow, clustering=dbscan)
        with pytest.raises(RuntimeError):
            spine.detect_communities()

    def test_wiring_before_projection(self, triangle_flow, dbscan, mock_engine, recording_renderer, tmp_path):
        spine = Spine.get_instance(
            triangle_flow, clustering=dbscan, renderer=recording_renderer, output_dir=tmp_path,
        )
        spine.set_layout_computer(mock_engine).init_visual_graph().compute_layout()

        assert sorted(mock_engine.nodes) == ["0", "1", "2"]
        assert all(triangle_flow.get_node(i).position is not None for i in range(3))
        paths = spine.spit_graph("tri")
        assert paths.json_path.name == "tri-mock.json"

    def test_empty_flow(self, empty_flow, dbscan, mock_engine):
        spine = (
            Spine.get_instance(empty_flow, clustering=dbscan)
            .init_visual_graph()
            .set_layout_computer(mock_engine)
            .compute_layout()
            .compute_visual_clusters()
        )
        assert spine.visual_graph.node_count() == 0
        assert empty_flow.cluster_count == 0
