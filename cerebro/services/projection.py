"""Service: project a flow graph into a visual graph and weigh its edges."""

from __future__ import annotations

import logging

from cerebro.domain.models import FlowGraph
from cerebro.services.visual_graph import (
    IdAlreadyInUseError,
    VisualEdge,
    VisualGraph,
    VisualNode,
)

log = logging.getLogger(__name__)

HIDE_ATTR = "ui.hide"
WEIGHT_ATTR = "layout.weight"


class GraphProjector:
    """Mirror every flow edge as at most one hidden visual edge."""

    def project(
        self,
        flow_graph: FlowGraph,
        visual_graph: VisualGraph | None = None,
    ) -> VisualGraph:
        if visual_graph is None:
            visual_graph = VisualGraph()

        next_id = visual_graph.edge_count()
        created = 0
        for edge in flow_graph.edges():
            log.debug("%s %s %s", edge.source_id, edge.target_id, edge.count)
            source = self._add_node(visual_graph, str(edge.source_id))
            target = self._add_node(visual_graph, str(edge.target_id))
            if source.has_edge_toward(target):
                continue
            # Caller-supplied graphs may hold ids outside 0..n-1
            while visual_graph.get_edge(str(next_id)) is not None:
                next_id += 1
            self._add_edge(visual_graph, source, target, next_id)
            next_id += 1
            created += 1

        log.info(
            "Projected flow graph: %d visual nodes, %d visual edges (%d new)",
            visual_graph.node_count(),
            visual_graph.edge_count(),
            created,
        )
        return visual_graph

    @staticmethod
    def _add_node(graph: VisualGraph, node_id: str) -> VisualNode:
        try:
            return graph.add_node(node_id)
        except IdAlreadyInUseError:
            return graph.get_node(node_id)

    @staticmethod
    def _add_edge(
        graph: VisualGraph,
        source: VisualNode,
        target: VisualNode,
        edge_id: int,
    ) -> VisualEdge:
        eid = str(edge_id)
        try:
            edge = graph.add_edge(eid, source, target)
        except IdAlreadyInUseError:
            existing = graph.get_edge(eid)
            if existing.source != source.id or existing.target != target.id:
                raise
            return existing
        graph.set_edge_attribute(edge.id, HIDE_ATTR, True)
        return edge


class EdgeWeighter:
    """Frequent edges get small weights, i.e. strong attraction in the layout."""

    def weigh(self, visual_graph: VisualGraph, flow_graph: FlowGraph) -> None:
        max_count = flow_graph.max_edge_count() + 1.0
        for edge in visual_graph.edges():
            count = flow_graph.edge_count(int(edge.source), int(edge.target))
            weight = (max_count - count) / max_count
            visual_graph.set_edge_attribute(edge.id, WEIGHT_ATTR, weight)
        log.debug("Weighed %d edges (max count %d)", visual_graph.edge_count(), max_count - 1)
