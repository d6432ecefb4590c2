"""Pure domain models — zero external dependencies."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, TextIO


# ── Flow nodes & edges ──────────────────────────────────────────────────────

@dataclass
class FlowNode:
    """A point in an execution flow."""

    id: int
    x: float | None = None
    y: float | None = None
    color_group: int | None = None  # spatial cluster label
    community: int | None = None

    @property
    def position(self) -> tuple[float, float] | None:
        if self.x is None or self.y is None:
            return None
        return (self.x, self.y)

    def init_xy(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def init_color_group(self, group: int | None) -> None:
        self.color_group = group

    def init_community(self, community: int | None) -> None:
        self.community = community

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "color_group": self.color_group,
            "community": self.community,
        }


@dataclass(frozen=True)
class FlowEdge:
    """A directed (source, target) pair with its aggregated traversal count."""

    source_id: int
    target_id: int
    count: int


# ── Flow graph ──────────────────────────────────────────────────────────────

class FlowGraph:
    """Nodes by integer id plus a two-key edge table of traversal counts.

    The edge table holds at most one entry per ordered pair; inserting an
    existing pair adds to its count.
    """

    def __init__(self) -> None:
        self.nodes: dict[int, FlowNode] = {}
        self._edges: dict[tuple[int, int], int] = {}
        self.cluster_count: int | None = None
        self.community_count: int | None = None

    # ── mutation ──

    def add_node(self, node_id: int) -> FlowNode:
        node = self.nodes.get(node_id)
        if node is None:
            node = FlowNode(id=node_id)
            self.nodes[node_id] = node
        return node

    def add_edge(self, source_id: int, target_id: int, count: int = 1) -> None:
        self.add_node(source_id)
        self.add_node(target_id)
        key = (source_id, target_id)
        self._edges[key] = self._edges.get(key, 0) + count

    def set_cluster_count(self, count: int) -> None:
        self.cluster_count = count

    def set_community_count(self, count: int) -> None:
        self.community_count = count

    # ── queries ──

    def edges(self) -> list[FlowEdge]:
        return [FlowEdge(s, t, c) for (s, t), c in self._edges.items()]

    def __iter__(self) -> Iterator[FlowEdge]:
        return iter(self.edges())

    def __len__(self) -> int:
        return len(self._edges)

    def get_node(self, node_id: int) -> FlowNode:
        try:
            return self.nodes[node_id]
        except KeyError:
            raise KeyError(f"Unknown flow node: {node_id}") from None

    def max_edge_count(self) -> int:
        return max(self._edges.values(), default=0)

    def edge_count(self, source_id: int, target_id: int) -> int:
        return self._edges.get((source_id, target_id), 0)

    def referenced_node_ids(self) -> list[int]:
        """Distinct node ids referenced by any edge, in first-seen order."""
        seen: set[int] = set()
        ordered: list[int] = []
        for source_id, target_id in self._edges:
            for nid in (source_id, target_id):
                if nid not in seen:
                    seen.add(nid)
                    ordered.append(nid)
        return ordered

    # ── serialization ──

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [self.nodes[nid].to_dict() for nid in sorted(self.nodes)],
            "edges": [
                {"from": e.source_id, "to": e.target_id, "count": e.count}
                for e in self.edges()
            ],
            "cluster_count": self.cluster_count,
            "community_count": self.community_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FlowGraph:
        graph = cls()
        for raw in data.get("nodes", []):
            node = graph.add_node(int(raw["id"]))
            if raw.get("x") is not None and raw.get("y") is not None:
                node.init_xy(float(raw["x"]), float(raw["y"]))
            node.init_color_group(raw.get("color_group"))
            node.init_community(raw.get("community"))
        for raw in data.get("edges", []):
            graph.add_edge(int(raw["from"]), int(raw["to"]), int(raw.get("count", 1)))
        graph.cluster_count = data.get("cluster_count")
        graph.community_count = data.get("community_count")
        return graph

    def dump(self, stream: TextIO) -> None:
        json.dump(self.to_dict(), stream, indent=2)
        stream.write("\n")

    @classmethod
    def load(cls, path: str | Path) -> FlowGraph:
        with open(path, encoding="utf-8") as f:
            return cls.from_dict(json.load(f))
