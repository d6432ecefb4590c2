"""Port: raster image sink for a visual graph."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cerebro.services.visual_graph import VisualGraph

# Output resolutions in pixels (width, height)
RESOLUTIONS: dict[str, tuple[int, int]] = {
    "qvga": (320, 240),
    "vga": (640, 480),
    "svga": (800, 600),
    "xga": (1024, 768),
    "hd720": (1280, 720),
    "hd1080": (1920, 1080),
}

DEFAULT_RESOLUTION = RESOLUTIONS["vga"]


class RendererPort(ABC):
    """Rasterize a visual graph to an image file."""

    @abstractmethod
    def render(
        self,
        graph: VisualGraph,
        out_path: str | Path,
        resolution: tuple[int, int] = DEFAULT_RESOLUTION,
    ) -> Path: ...
