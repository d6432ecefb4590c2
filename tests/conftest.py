"""Shared test fixtures — mock ports and sample flow graphs."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from cerebro.adapters.clustering.dbscan import DBSCANClustering
from cerebro.domain.models import FlowGraph
from cerebro.ports.community import CommunityComputer
from cerebro.ports.layout import AttributeSink, LayoutEnginePort
from cerebro.ports.renderer import DEFAULT_RESOLUTION, RendererPort
from cerebro.services.visual_graph import VisualGraph


# ── Mock layout engine ──


class MockLayoutEngine(LayoutEnginePort):
    """Places node ``i`` (in arrival order) at ``(i, i / 2, 7)``.

    Stabilization grows by *step* on every ``compute()``.
    """

    def __init__(self, limit: float = 0.9, step: float = 0.25):
        self._limit = limit
        self._step = step
        self._stab = 0.0
        self.compute_calls = 0
        self.nodes: list[str] = []
        self.edges: dict[str, tuple[str, str]] = {}
        self.edge_attributes: dict[str, dict[str, Any]] = {}
        self._sinks: list[AttributeSink] = []

    @property
    def stabilization_limit(self) -> float:
        return self._limit

    def node_added(self, node_id: str) -> None:
        self.nodes.append(node_id)

    def edge_added(self, edge_id: str, source_id: str, target_id: str, directed: bool) -> None:
        self.edges[edge_id] = (source_id, target_id)

    def edge_attribute_changed(self, edge_id: str, key: str, value: Any) -> None:
        self.edge_attributes.setdefault(edge_id, {})[key] = value

    def compute(self) -> None:
        self.compute_calls += 1
        self._stab = min(1.0, self._stab + self._step)
        for i, nid in enumerate(self.nodes):
            for sink in self._sinks:
                sink.node_attribute_changed(nid, "xyz", [float(i), i / 2.0, 7.0])

    def stabilization(self) -> float:
        return self._stab

    def add_attribute_sink(self, sink: AttributeSink) -> None:
        self._sinks.append(sink)

    def remove_attribute_sink(self, sink: AttributeSink) -> None:
        self._sinks.remove(sink)

    def has_attribute_sink(self, sink: AttributeSink) -> bool:
        return sink in self._sinks

    def config_suffix(self) -> str:
        return "-mock"


class NeverStableEngine(MockLayoutEngine):
    """Stabilization never leaves zero."""

    def __init__(self) -> None:
        super().__init__(limit=0.9, step=0.0)


# ── Mock community computer ──


class RecordingCommunityComputer(CommunityComputer):
    """Puts every node in community 0 and records the call order."""

    def __init__(self, flow_graph: FlowGraph):
        self._flow = flow_graph
        self.calls: list[str] = []

    def compute(self) -> None:
        self.calls.append("compute")

    def assign_community(self) -> None:
        self.calls.append("assign_community")
        for nid in self._flow.referenced_node_ids():
            self._flow.get_node(nid).init_community(0)
        self._flow.set_community_count(1)


# ── Mock renderer ──


class RecordingRenderer(RendererPort):
    def __init__(self) -> None:
        self.calls: list[tuple[Path, tuple[int, int], int]] = []

    def render(
        self,
        graph: VisualGraph,
        out_path: str | Path,
        resolution: tuple[int, int] = DEFAULT_RESOLUTION,
    ) -> Path:
        out_path = Path(out_path)
        out_path.write_bytes(b"\x89PNG\r\n\x1a\n")
        self.calls.append((out_path, resolution, graph.node_count()))
        return out_path


# ── Fixtures ──


@pytest.fixture
def mock_engine():
    return MockLayoutEngine()


@pytest.fixture
def dbscan():
    return DBSCANClustering()


@pytest.fixture
def recording_renderer():
    return RecordingRenderer()


@pytest.fixture
def triangle_flow():
    """0→1 (5), 1→2 (1), 0→2 (1): max count 5."""
    flow = FlowGraph()
    flow.add_edge(0, 1, 5)
    flow.add_edge(1, 2, 1)
    flow.add_edge(0, 2, 1)
    return flow


@pytest.fixture
def empty_flow():
    return FlowGraph()


@pytest.fixture
def two_loop_flow():
    """Two tight loops joined by a single rare edge."""
    flow = FlowGraph()
    for src, dst, count in [
        (0, 1, 12), (1, 2, 9), (2, 0, 7),
        (2, 3, 1),
        (3, 4, 10), (4, 5, 8), (5, 3, 6),
    ]:
        flow.add_edge(src, dst, count)
    return flow


@pytest.fixture
def never_stable_engine():
    return NeverStableEngine()


@pytest.fixture
def make_engine():
    return MockLayoutEngine
