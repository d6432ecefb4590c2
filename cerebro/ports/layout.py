"""Port: force-directed layout engine and the graph event channel it listens on."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class GraphSink(ABC):
    """Receives structural and attribute events from a visual graph."""

    @abstractmethod
    def node_added(self, node_id: str) -> None: ...

    @abstractmethod
    def edge_added(
        self,
        edge_id: str,
        source_id: str,
        target_id: str,
        directed: bool,
    ) -> None: ...

    @abstractmethod
    def edge_attribute_changed(self, edge_id: str, key: str, value: Any) -> None: ...


class AttributeSink(ABC):
    """Receives node attribute updates published by a layout engine."""

    @abstractmethod
    def node_attribute_changed(self, node_id: str, key: str, value: Any) -> None: ...


class LayoutEnginePort(GraphSink):
    """Step-wise force-directed simulation.

    Observes a visual graph through the :class:`GraphSink` events and
    publishes each node's ``xyz`` position to its attribute sinks.
    """

    @property
    @abstractmethod
    def stabilization_limit(self) -> float:
        """Stabilization value at which the layout is considered done."""

    @abstractmethod
    def compute(self) -> None:
        """Advance the simulation by one step."""

    @abstractmethod
    def stabilization(self) -> float:
        """Return the current convergence measure in ``[0, 1]``."""

    @abstractmethod
    def add_attribute_sink(self, sink: AttributeSink) -> None: ...

    @abstractmethod
    def remove_attribute_sink(self, sink: AttributeSink) -> None: ...

    @abstractmethod
    def has_attribute_sink(self, sink: AttributeSink) -> bool: ...

    def config_suffix(self) -> str:
        """Suffix appended to artifact names to tell layout settings apart."""
        return ""
