"""Clustering adapter: DBSCAN over 2-D positions (via scikit-learn)."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from cerebro.ports.clustering import DensityClusteringPort, Point


class DBSCANClustering(DensityClusteringPort):
    """Euclidean DBSCAN; clusters come back in order of discovery."""

    def cluster(
        self,
        points: Sequence[Point],
        eps: float,
        min_pts: int,
    ) -> list[list[int]]:
        from sklearn.cluster import DBSCAN  # lazy

        if eps <= 0.0:
            raise ValueError("eps must be positive")
        if not points:
            return []

        X = np.asarray(points, dtype=float)
        # sklearn counts the point itself towards min_samples
        labels = DBSCAN(eps=float(eps), min_samples=int(min_pts) + 1).fit(X).labels_

        clusters: dict[int, list[int]] = {}
        for idx, label in enumerate(labels):
            if label >= 0:
                clusters.setdefault(int(label), []).append(idx)
        return [clusters[label] for label in sorted(clusters)]
