"""Service: spatial clustering of laid-out flow nodes."""

from __future__ import annotations

import logging

from cerebro.domain.models import FlowGraph
from cerebro.ports.clustering import DensityClusteringPort

log = logging.getLogger(__name__)

DEFAULT_EPS = 30.0
DEFAULT_MIN_PTS = 2


class ClusterAssigner:
    """Label each edge-referenced node with the index of its density cluster."""

    def __init__(self, clustering: DensityClusteringPort):
        self._clustering = clustering

    def assign_clusters(
        self,
        flow_graph: FlowGraph,
        eps: float = DEFAULT_EPS,
        min_pts: int = DEFAULT_MIN_PTS,
    ) -> list[list[int]]:
        """Cluster node positions and write ``color_group`` labels.

        Returns the clusters as lists of flow-node ids, in label order.
        """
        log.info("Clustering with eps=%.2f, min_pts=%d", eps, min_pts)
        nodes = [flow_graph.get_node(nid) for nid in flow_graph.referenced_node_ids()]

        points: list[tuple[float, float]] = []
        for node in nodes:
            position = node.position
            if position is None:
                raise RuntimeError(f"Flow node {node.id} has no position; compute the layout first")
            points.append(position)
            # Noise must come out unlabelled, even on a re-run
            node.init_color_group(None)

        index_clusters = self._clustering.cluster(points, eps, min_pts) if points else []

        clusters: list[list[int]] = []
        for cluster_id, members in enumerate(index_clusters):
            ids = [nodes[i].id for i in members]
            for nid in ids:
                flow_graph.get_node(nid).init_color_group(cluster_id)
            clusters.append(ids)
            log.debug("cluster %d: %s", cluster_id, ids)

        flow_graph.set_cluster_count(len(clusters))
        log.info("Clustered %d nodes into %d clusters", len(nodes), len(clusters))
        return clusters
