"""Port: density-based clustering of positioned points."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

Point = tuple[float, float]


class DensityClusteringPort(ABC):
    """Group points that lie in dense neighbourhoods."""

    @abstractmethod
    def cluster(
        self,
        points: Sequence[Point],
        eps: float,
        min_pts: int,
    ) -> list[list[int]]:
        """Return clusters as lists of indices into *points*.

        *min_pts* is the number of neighbours within *eps* (not counting the
        point itself) a point needs to be a core point.  Noise points appear
        in no cluster.
        """
