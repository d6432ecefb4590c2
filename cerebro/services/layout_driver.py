"""Service: drive a layout engine to stabilization and pin positions.

The engine and the visual graph observe each other: the graph pushes
structural/weight events into the engine, the engine publishes ``xyz``
node attributes back.  That wiring is set up once with
:meth:`LayoutDriver.wire` and must exist before :meth:`LayoutDriver.run`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cerebro.domain.models import FlowGraph
from cerebro.ports.layout import LayoutEnginePort
from cerebro.services.visual_graph import VisualGraph

log = logging.getLogger(__name__)

POSITION_ATTR = "xyz"
POSITION_SCALE = 20.0
DEFAULT_MAX_ITERATIONS = 100_000


@dataclass(frozen=True)
class LayoutResult:
    """Outcome of one stabilization loop."""

    iterations: int
    stabilization: float
    converged: bool


class LayoutSubscription:
    """Mutual registration between a visual graph and a layout engine."""

    def __init__(self, engine: LayoutEnginePort, graph: VisualGraph):
        self.engine = engine
        self.graph = graph
        self._closed = False

    @property
    def active(self) -> bool:
        return (
            not self._closed
            and self.graph.has_sink(self.engine)
            and self.engine.has_attribute_sink(self.graph)
        )

    def close(self) -> None:
        if self._closed:
            return
        self.graph.remove_sink(self.engine)
        self.engine.remove_attribute_sink(self.graph)
        self._closed = True

    def __enter__(self) -> LayoutSubscription:
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class LayoutDriver:
    """Bounded stabilization loop around a :class:`LayoutEnginePort`."""

    def __init__(
        self,
        *,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        scale: float = POSITION_SCALE,
    ):
        self._max_iterations = max_iterations
        self._scale = scale

    @staticmethod
    def wire(engine: LayoutEnginePort, graph: VisualGraph) -> LayoutSubscription:
        if engine is None:
            raise RuntimeError("The layout computer cannot be None")
        graph.add_sink(engine)
        engine.add_attribute_sink(graph)
        return LayoutSubscription(engine, graph)

    def run(
        self,
        engine: LayoutEnginePort,
        visual_graph: VisualGraph,
        flow_graph: FlowGraph,
        stabilization_limit: float | None = None,
        max_iterations: int | None = None,
    ) -> LayoutResult:
        if engine is None:
            raise RuntimeError("No layout computer configured")
        if not (visual_graph.has_sink(engine) and engine.has_attribute_sink(visual_graph)):
            raise RuntimeError(
                "Layout computer is not wired to the visual graph; call LayoutDriver.wire() first"
            )

        limit = engine.stabilization_limit if stabilization_limit is None else stabilization_limit
        cap = self._max_iterations if max_iterations is None else max_iterations

        stab = 0.0
        iterations = 0
        while stab < limit:
            if iterations >= cap:
                log.warning(
                    "Layout did not stabilize within %d iterations (%.4f < %.4f); "
                    "using current positions",
                    cap,
                    stab,
                    limit,
                )
                break
            engine.compute()
            iterations += 1
            stab = engine.stabilization()
            log.debug("iteration %d: stabilization %.6f", iterations, stab)

        converged = stab >= limit
        if converged:
            log.info("Layout stabilized after %d iterations (%.4f)", iterations, stab)

        self._pin_nodes(visual_graph, flow_graph)
        return LayoutResult(iterations=iterations, stabilization=stab, converged=converged)

    def _pin_nodes(self, visual_graph: VisualGraph, flow_graph: FlowGraph) -> None:
        for vnode in visual_graph.nodes():
            xyz = vnode.get_attribute(POSITION_ATTR)
            if xyz is None:
                raise RuntimeError(f"Layout computer produced no position for node {vnode.id}")
            x = float(xyz[0]) * self._scale
            y = float(xyz[1]) * self._scale
            flow_graph.get_node(int(vnode.id)).init_xy(x, y)
            log.debug("node %s -> (%.3f, %.3f)", vnode.id, x, y)
