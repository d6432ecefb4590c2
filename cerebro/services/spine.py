"""Spine: the pipeline that lays out, clusters and renders a flow graph.

The spine does not implement or configure any of the computations it
runs.  It holds the flow graph and its visual mirror and executes the
stages in whatever order the caller chains them::

    (Spine.get_instance(flow, clustering=..., renderer=...)
        .init_visual_graph()
        .set_layout_computer(engine)
        .compute_layout()
        .compute_visual_clusters()
        .spit_graph("subject"))

Clustering works on flow-node positions, so it only makes sense after the
layout has been computed.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cerebro.domain.models import FlowGraph
from cerebro.ports.clustering import DensityClusteringPort
from cerebro.ports.community import CommunityComputer
from cerebro.ports.layout import LayoutEnginePort
from cerebro.ports.renderer import DEFAULT_RESOLUTION, RendererPort
from cerebro.services.artifacts import ArtifactPaths, ArtifactWriter
from cerebro.services.cluster_assignment import (
    DEFAULT_EPS,
    DEFAULT_MIN_PTS,
    ClusterAssigner,
)
from cerebro.services.community_assignment import CommunityAssigner
from cerebro.services.layout_driver import (
    DEFAULT_MAX_ITERATIONS,
    LayoutDriver,
    LayoutResult,
    LayoutSubscription,
)
from cerebro.services.projection import EdgeWeighter, GraphProjector
from cerebro.services.visual_graph import VisualGraph

log = logging.getLogger(__name__)

GROUP_ATTR = "ui.group"


class Spine:
    """Container that runs layout, clustering and community detection."""

    def __init__(
        self,
        flow_graph: FlowGraph,
        visual_graph: VisualGraph,
        *,
        clustering: DensityClusteringPort,
        renderer: RendererPort | None = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        eps: float = DEFAULT_EPS,
        min_pts: int = DEFAULT_MIN_PTS,
        output_dir: str | Path = ".",
        resolution: tuple[int, int] = DEFAULT_RESOLUTION,
    ):
        self.flow_graph = flow_graph
        self.visual_graph = visual_graph
        self._clustering = clustering
        self._renderer = renderer
        self._output_dir = output_dir
        self._resolution = resolution
        self._eps = eps
        self._min_pts = min_pts

        self._projector = GraphProjector()
        self._weighter = EdgeWeighter()
        self._driver = LayoutDriver(max_iterations=max_iterations)

        self._layout_computer: LayoutEnginePort | None = None
        self._subscription: LayoutSubscription | None = None
        self._community_computer: CommunityComputer | None = None
        self.last_layout: LayoutResult | None = None

    @classmethod
    def get_instance(cls, flow_graph: FlowGraph, **kwargs) -> Spine:
        return cls(flow_graph, VisualGraph("cerebro"), **kwargs)

    # ── wiring ──

    def set_layout_computer(self, computer: LayoutEnginePort) -> Spine:
        if computer is None:
            raise RuntimeError("The layout computer cannot be None")
        if self._subscription is not None:
            self._subscription.close()
        self._layout_computer = computer
        self._subscription = LayoutDriver.wire(computer, self.visual_graph)
        return self

    @property
    def has_community_computer(self) -> bool:
        return self._community_computer is not None

    def set_community_computer(self, computer: CommunityComputer) -> Spine:
        if computer is None:
            raise RuntimeError("The community computer cannot be None")
        self._community_computer = computer
        return self

    # ── stages ──

    def init_visual_graph(self) -> Spine:
        log.info("Projecting %d flow edges", len(self.flow_graph))
        self._projector.project(self.flow_graph, self.visual_graph)
        self._weighter.weigh(self.visual_graph, self.flow_graph)
        return self

    def compute_layout(self) -> Spine:
        self.last_layout = self._driver.run(
            self._layout_computer, self.visual_graph, self.flow_graph,
        )
        return self

    def compute_visual_clusters(
        self,
        eps: float | None = None,
        min_pts: int | None = None,
    ) -> Spine:
        ClusterAssigner(self._clustering).assign_clusters(
            self.flow_graph,
            self._eps if eps is None else eps,
            self._min_pts if min_pts is None else min_pts,
        )
        for vnode in self.visual_graph.nodes():
            group = self.flow_graph.get_node(int(vnode.id)).color_group
            self.visual_graph.set_node_attribute(vnode.id, GROUP_ATTR, group)
        return self

    def detect_communities(self) -> Spine:
        CommunityAssigner().assign_communities(self._community_computer)
        return self

    def spit_graph(self, subject: str, layout_config_suffix: str | None = None) -> ArtifactPaths:
        if self._renderer is None:
            raise RuntimeError("No renderer configured")
        if layout_config_suffix is None:
            layout_config_suffix = (
                self._layout_computer.config_suffix() if self._layout_computer else ""
            )
        writer = ArtifactWriter(self._renderer, self._output_dir, self._resolution)
        return writer.write(self.flow_graph, self.visual_graph, subject, layout_config_suffix)

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
