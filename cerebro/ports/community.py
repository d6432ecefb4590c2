"""Port: pluggable community detection over a flow graph."""

from __future__ import annotations

from abc import ABC, abstractmethod


class CommunityComputer(ABC):
    """Two-step community strategy: analyse, then label nodes."""

    @abstractmethod
    def compute(self) -> None:
        """Run the strategy's analysis."""

    @abstractmethod
    def assign_community(self) -> None:
        """Write community labels onto the flow nodes."""
