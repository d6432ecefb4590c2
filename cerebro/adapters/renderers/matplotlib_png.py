"""Renderer adapter: draw the laid-out visual graph to a PNG (matplotlib).

Nodes are placed at their ``xyz`` attribute and coloured by ``ui.group``
(spatial cluster); unclustered nodes are grey.  Edges marked ``ui.hide``
are not drawn.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cerebro.ports.renderer import DEFAULT_RESOLUTION, RendererPort
from cerebro.services.visual_graph import VisualGraph

log = logging.getLogger(__name__)

NOISE_COLOUR = (0.6, 0.6, 0.6)


class MatplotlibRenderer(RendererPort):
    def __init__(self, palette: str = "Spectral", dpi: int = 100, node_size: float = 18.0):
        self._palette = palette
        self._dpi = dpi
        self._node_size = node_size

    def render(
        self,
        graph: VisualGraph,
        out_path: str | Path,
        resolution: tuple[int, int] = DEFAULT_RESOLUTION,
    ) -> Path:
        import seaborn as sns
        from matplotlib.figure import Figure

        out_path = Path(out_path)
        width, height = resolution
        fig = Figure(figsize=(width / self._dpi, height / self._dpi), dpi=self._dpi)
        ax = fig.add_axes([0.02, 0.02, 0.96, 0.96])
        ax.axis("off")

        positions: dict[str, tuple[float, float]] = {}
        groups: dict[str, int | None] = {}
        for node in graph.nodes():
            xyz = node.get_attribute("xyz")
            if xyz is None:
                continue
            positions[node.id] = (float(xyz[0]), float(xyz[1]))
            groups[node.id] = node.get_attribute("ui.group")

        for edge in graph.edges():
            if edge.get_attribute("ui.hide"):
                continue
            if edge.source in positions and edge.target in positions:
                (x0, y0), (x1, y1) = positions[edge.source], positions[edge.target]
                ax.plot([x0, x1], [y0, y1], color="#888888", linewidth=0.5, alpha=0.5, zorder=1)

        if positions:
            labels = sorted({g for g in groups.values() if g is not None})
            palette = sns.color_palette(self._palette, n_colors=max(len(labels), 1))
            colour_of = {g: palette[i % len(palette)] for i, g in enumerate(labels)}

            ids = list(positions)
            ax.scatter(
                [positions[nid][0] for nid in ids],
                [positions[nid][1] for nid in ids],
                s=self._node_size,
                c=[colour_of.get(groups[nid], NOISE_COLOUR) for nid in ids],
                edgecolors="black",
                linewidths=0.3,
                zorder=2,
            )
            ax.set_aspect("equal", adjustable="datalim")

        out_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(out_path, dpi=self._dpi)
        log.info("Rendered %d nodes → %s", len(positions), out_path)
        return out_path
