"""Community adapter: Louvain modularity optimisation (via networkx)."""

from __future__ import annotations

import logging

import networkx as nx

from cerebro.domain.models import FlowGraph
from cerebro.ports.community import CommunityComputer

log = logging.getLogger(__name__)


class LouvainCommunityComputer(CommunityComputer):
    def __init__(self, flow_graph: FlowGraph, resolution: float = 1.0, seed: int | None = 42):
        self._flow = flow_graph
        self._resolution = resolution
        self._seed = seed
        self._communities: list[list[int]] | None = None

    @property
    def communities(self) -> list[list[int]] | None:
        return self._communities

    def compute(self) -> None:
        G = nx.Graph()
        G.add_nodes_from(self._flow.referenced_node_ids())
        for e in self._flow.edges():
            if e.source_id == e.target_id:
                continue
            # Opposite directions collapse into one undirected edge
            if G.has_edge(e.source_id, e.target_id):
                G[e.source_id][e.target_id]["weight"] += e.count
            else:
                G.add_edge(e.source_id, e.target_id, weight=e.count)

        if G.number_of_nodes() == 0:
            self._communities = []
            return

        found = nx.community.louvain_communities(
            G, weight="weight", resolution=self._resolution, seed=self._seed,
        )
        # Largest first, ties by smallest member id, so labels are stable
        self._communities = sorted(
            (sorted(c) for c in found), key=lambda c: (-len(c), c[0]),
        )
        log.info("Louvain found %d communities", len(self._communities))

    def assign_community(self) -> None:
        if self._communities is None:
            raise RuntimeError("compute() must run before assign_community()")
        for label, members in enumerate(self._communities):
            for nid in members:
                self._flow.get_node(nid).init_community(label)
        self._flow.set_community_count(len(self._communities))
