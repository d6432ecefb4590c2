"""Layout adapter: step-wise spring-box force-directed simulation (numpy).

Fruchterman–Reingold style forces with a cooling temperature:

* every pair of nodes repels with ``k² / d``;
* every edge attracts with ``d² / (k · w)`` where ``w`` is the edge's
  ``layout.weight`` (smaller weight → stronger pull → shorter edge).

Stabilization is the fraction of nodes that moved less than ``tolerance``
during the last step, so it reaches 1.0 once the temperature has cooled.
"""

from __future__ import annotations

import logging
from typing import Any

import numpy as np

from cerebro.ports.layout import AttributeSink, LayoutEnginePort

log = logging.getLogger(__name__)

WEIGHT_ATTR = "layout.weight"
POSITION_ATTR = "xyz"


class SpringBoxLayout(LayoutEnginePort):
    """Force-directed layout that publishes ``xyz`` after every step."""

    def __init__(
        self,
        *,
        stabilization_limit: float = 0.9,
        ideal_length: float = 1.0,
        initial_temperature: float = 0.1,
        cooling: float = 0.95,
        tolerance: float = 1e-3,
        seed: int | None = 42,
    ):
        self._limit = stabilization_limit
        self._k = ideal_length
        self._initial_temperature = initial_temperature
        self._temperature = initial_temperature
        self._cooling = cooling
        self._tolerance = tolerance
        self._seed = seed
        self._rng = np.random.RandomState(seed)

        self._ids: list[str] = []
        self._index: dict[str, int] = {}
        self._pos = np.zeros((0, 3), dtype=np.float64)
        self._edges: dict[str, tuple[str, str]] = {}
        self._weights: dict[str, float] = {}
        self._stab = 0.0
        self._sinks: list[AttributeSink] = []

    # ── GraphSink ──

    def node_added(self, node_id: str) -> None:
        if node_id in self._index:
            return
        self._index[node_id] = len(self._ids)
        self._ids.append(node_id)
        xy = self._rng.uniform(-1.0, 1.0, size=2) * self._k
        self._pos = np.vstack([self._pos, [xy[0], xy[1], 0.0]])
        # New nodes unsettle the layout
        self._temperature = self._initial_temperature
        self._stab = 0.0
        self._publish_node(len(self._ids) - 1)

    def edge_added(self, edge_id: str, source_id: str, target_id: str, directed: bool) -> None:
        self._edges[edge_id] = (source_id, target_id)
        self._temperature = self._initial_temperature
        self._stab = 0.0

    def edge_attribute_changed(self, edge_id: str, key: str, value: Any) -> None:
        if key == WEIGHT_ATTR:
            self._weights[edge_id] = float(value)

    # ── LayoutEnginePort ──

    @property
    def stabilization_limit(self) -> float:
        return self._limit

    def stabilization(self) -> float:
        return self._stab

    def compute(self) -> None:
        n = len(self._ids)
        if n == 0:
            self._stab = 1.0
            return

        xy = self._pos[:, :2]
        k2 = self._k * self._k

        # Repulsion between every pair
        delta = xy[:, None, :] - xy[None, :, :]
        dist2 = np.maximum((delta ** 2).sum(axis=2), 1e-4)
        disp = (delta * (k2 / dist2)[:, :, None]).sum(axis=1)

        # Attraction along edges
        src, tgt, weights = self._edge_arrays()
        if src.size:
            d = xy[src] - xy[tgt]
            dist = np.maximum(np.linalg.norm(d, axis=1), 1e-2)
            pull = (d * (dist / (self._k * weights))[:, None])
            np.add.at(disp, src, -pull)
            np.add.at(disp, tgt, pull)

        # Cap each displacement by the current temperature
        length = np.linalg.norm(disp, axis=1)
        step = np.minimum(length, self._temperature) / np.maximum(length, 1e-12)
        moved = disp * step[:, None]
        self._pos[:, :2] += moved

        self._stab = float(np.mean(np.linalg.norm(moved, axis=1) < self._tolerance))
        self._temperature *= self._cooling

        for i in range(n):
            self._publish_node(i)

    def add_attribute_sink(self, sink: AttributeSink) -> None:
        self._sinks.append(sink)
        for i, nid in enumerate(self._ids):
            sink.node_attribute_changed(nid, POSITION_ATTR, self._xyz(i))

    def remove_attribute_sink(self, sink: AttributeSink) -> None:
        if sink in self._sinks:
            self._sinks.remove(sink)

    def has_attribute_sink(self, sink: AttributeSink) -> bool:
        return sink in self._sinks

    def config_suffix(self) -> str:
        return f"_springbox_k{self._k:g}_s{self._limit:g}"

    # ── helpers ──

    def _edge_arrays(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        src: list[int] = []
        tgt: list[int] = []
        weights: list[float] = []
        for eid, (s, t) in self._edges.items():
            si = self._index.get(s)
            ti = self._index.get(t)
            if si is None or ti is None or si == ti:
                continue
            src.append(si)
            tgt.append(ti)
            weights.append(max(self._weights.get(eid, 1.0), 1e-6))
        return np.array(src, dtype=int), np.array(tgt, dtype=int), np.array(weights)

    def _xyz(self, i: int) -> list[float]:
        return [float(v) for v in self._pos[i]]

    def _publish_node(self, i: int) -> None:
        xyz = self._xyz(i)
        nid = self._ids[i]
        for sink in list(self._sinks):
            sink.node_attribute_changed(nid, POSITION_ATTR, xyz)
