"""Service: persist the annotated flow graph and its rendered layout."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from cerebro.domain.models import FlowGraph
from cerebro.ports.renderer import DEFAULT_RESOLUTION, RendererPort
from cerebro.services.visual_graph import VisualGraph

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ArtifactPaths:
    json_path: Path
    image_path: Path


class ArtifactWriter:
    """Write ``<subject><suffix>.json`` and ``<subject><suffix>.png``."""

    def __init__(
        self,
        renderer: RendererPort,
        output_dir: str | Path = ".",
        resolution: tuple[int, int] = DEFAULT_RESOLUTION,
    ):
        self._renderer = renderer
        self._output_dir = Path(output_dir)
        self._resolution = resolution

    def write(
        self,
        flow_graph: FlowGraph,
        visual_graph: VisualGraph,
        subject: str,
        layout_config_suffix: str = "",
    ) -> ArtifactPaths:
        name = subject + layout_config_suffix
        self._output_dir.mkdir(parents=True, exist_ok=True)

        json_path = self._output_dir / f"{name}.json"
        with open(json_path, "w", encoding="utf-8") as f:
            flow_graph.dump(f)

        image_path = self._output_dir / f"{name}.png"
        self._renderer.render(visual_graph, image_path, self._resolution)

        log.info("Artifacts written → %s, %s", json_path, image_path)
        return ArtifactPaths(json_path=json_path, image_path=image_path)
