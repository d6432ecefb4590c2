"""Visual graph: the geometry-bearing mirror of a flow graph.

Backed by a ``networkx.DiGraph``.  Nodes are keyed by the string form of
the flow-node id; edges carry a sequential string id.  Structural and
edge-attribute changes are pushed to registered :class:`GraphSink`s (the
layout engine), and node positions flow back in through the
:class:`AttributeSink` interface.
"""

from __future__ import annotations

import logging
from typing import Any

import networkx as nx

from cerebro.ports.layout import AttributeSink, GraphSink

log = logging.getLogger(__name__)


class IdAlreadyInUseError(KeyError):
    """A node or edge with this id already exists."""


class VisualNode:
    """Handle on a node of a :class:`VisualGraph`."""

    __slots__ = ("_graph", "id")

    def __init__(self, graph: VisualGraph, node_id: str):
        self._graph = graph
        self.id = node_id

    @property
    def attributes(self) -> dict[str, Any]:
        return self._graph._g.nodes[self.id]

    def get_attribute(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def has_edge_toward(self, other: VisualNode) -> bool:
        return self._graph._g.has_edge(self.id, other.id)

    def __repr__(self) -> str:
        return f"VisualNode({self.id!r})"


class VisualEdge:
    """Handle on a directed edge of a :class:`VisualGraph`."""

    __slots__ = ("_graph", "id", "source", "target")

    def __init__(self, graph: VisualGraph, edge_id: str, source: str, target: str):
        self._graph = graph
        self.id = edge_id
        self.source = source
        self.target = target

    @property
    def attributes(self) -> dict[str, Any]:
        return self._graph._g.edges[self.source, self.target]

    def get_attribute(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    def __repr__(self) -> str:
        return f"VisualEdge({self.id!r}: {self.source} -> {self.target})"


class VisualGraph(AttributeSink):
    """Simple directed graph with push notifications to layout sinks."""

    def __init__(self, name: str = "cerebro"):
        self.name = name
        self._g = nx.DiGraph(name=name)
        self._edge_ends: dict[str, tuple[str, str]] = {}
        self._sinks: list[GraphSink] = []

    # ── nodes ──

    def add_node(self, node_id: str) -> VisualNode:
        if node_id in self._g:
            raise IdAlreadyInUseError(f"Node id already in use: {node_id}")
        self._g.add_node(node_id)
        for sink in list(self._sinks):
            sink.node_added(node_id)
        return VisualNode(self, node_id)

    def get_node(self, node_id: str) -> VisualNode | None:
        if node_id not in self._g:
            return None
        return VisualNode(self, node_id)

    def nodes(self) -> list[VisualNode]:
        return [VisualNode(self, nid) for nid in self._g.nodes]

    def node_count(self) -> int:
        return self._g.number_of_nodes()

    def set_node_attribute(self, node_id: str, key: str, value: Any) -> None:
        self._g.nodes[node_id][key] = value

    # ── edges ──

    def add_edge(self, edge_id: str, source: VisualNode, target: VisualNode) -> VisualEdge:
        if edge_id in self._edge_ends:
            raise IdAlreadyInUseError(f"Edge id already in use: {edge_id}")
        if self._g.has_edge(source.id, target.id):
            raise ValueError(f"Nodes {source.id} and {target.id} are already connected")
        self._g.add_edge(source.id, target.id, id=edge_id)
        self._edge_ends[edge_id] = (source.id, target.id)
        for sink in list(self._sinks):
            sink.edge_added(edge_id, source.id, target.id, True)
        return VisualEdge(self, edge_id, source.id, target.id)

    def get_edge(self, edge_id: str) -> VisualEdge | None:
        ends = self._edge_ends.get(edge_id)
        if ends is None:
            return None
        return VisualEdge(self, edge_id, *ends)

    def edges(self) -> list[VisualEdge]:
        return [VisualEdge(self, eid, s, t) for eid, (s, t) in self._edge_ends.items()]

    def edge_count(self) -> int:
        return len(self._edge_ends)

    def set_edge_attribute(self, edge_id: str, key: str, value: Any) -> None:
        source, target = self._edge_ends[edge_id]
        self._g.edges[source, target][key] = value
        for sink in list(self._sinks):
            sink.edge_attribute_changed(edge_id, key, value)

    # ── sinks ──

    def add_sink(self, sink: GraphSink, *, replay: bool = True) -> None:
        """Register *sink*; with *replay*, feed it the graph built so far."""
        self._sinks.append(sink)
        if not replay:
            return
        for nid in self._g.nodes:
            sink.node_added(nid)
        for eid, (source, target) in self._edge_ends.items():
            sink.edge_added(eid, source, target, True)
            for key, value in self._g.edges[source, target].items():
                if key != "id":
                    sink.edge_attribute_changed(eid, key, value)

    def remove_sink(self, sink: GraphSink) -> None:
        if sink in self._sinks:
            self._sinks.remove(sink)

    def has_sink(self, sink: GraphSink) -> bool:
        return sink in self._sinks

    def node_attribute_changed(self, node_id: str, key: str, value: Any) -> None:
        if node_id not in self._g:
            log.debug("Ignoring %s update for unknown node %s", key, node_id)
            return
        self._g.nodes[node_id][key] = value

    # ── views ──

    def to_networkx(self) -> nx.DiGraph:
        return self._g.copy()
