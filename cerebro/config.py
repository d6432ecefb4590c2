"""Configuration loading and adapter factory.

Reads a YAML config file and instantiates the correct adapter
for each port, then wires them into a :class:`Spine`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

# Walk up from this file (cerebro/config.py) to the project root and load .env
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

from cerebro.domain.models import FlowGraph
from cerebro.ports.clustering import DensityClusteringPort
from cerebro.ports.community import CommunityComputer
from cerebro.ports.layout import LayoutEnginePort
from cerebro.ports.renderer import RESOLUTIONS, RendererPort
from cerebro.services.cluster_assignment import DEFAULT_EPS, DEFAULT_MIN_PTS
from cerebro.services.layout_driver import DEFAULT_MAX_ITERATIONS
from cerebro.services.spine import Spine


def load_config(path: str = "config.yaml") -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(p) as f:
        return yaml.safe_load(f) or {}


# ── Adapter factories ──


def build_layout_engine(cfg: dict[str, Any]) -> LayoutEnginePort:
    adapter = cfg.get("adapter", "springbox")

    if adapter == "springbox":
        from cerebro.adapters.layout.springbox import SpringBoxLayout
        return SpringBoxLayout(
            stabilization_limit=cfg.get("stabilization_limit", 0.9),
            ideal_length=cfg.get("ideal_length", 1.0),
            initial_temperature=cfg.get("initial_temperature", 0.1),
            cooling=cfg.get("cooling", 0.95),
            tolerance=cfg.get("tolerance", 1e-3),
            seed=cfg.get("seed", 42),
        )

    raise ValueError(f"Unknown layout adapter: {adapter}")


def build_density_clustering(cfg: dict[str, Any]) -> DensityClusteringPort:
    adapter = cfg.get("adapter", "dbscan")

    if adapter == "dbscan":
        from cerebro.adapters.clustering.dbscan import DBSCANClustering
        return DBSCANClustering()

    raise ValueError(f"Unknown clustering adapter: {adapter}")


def build_community_computer(
    cfg: dict[str, Any],
    flow_graph: FlowGraph,
) -> CommunityComputer | None:
    adapter = cfg.get("adapter", "leiden")
    resolution = cfg.get("resolution", 1.0)
    seed = cfg.get("seed", 42)

    if adapter == "leiden":
        from cerebro.adapters.community.leiden import LeidenCommunityComputer
        return LeidenCommunityComputer(flow_graph, resolution=resolution, seed=seed)

    elif adapter == "louvain":
        from cerebro.adapters.community.louvain import LouvainCommunityComputer
        return LouvainCommunityComputer(flow_graph, resolution=resolution, seed=seed)

    elif adapter == "none":
        return None

    raise ValueError(f"Unknown community adapter: {adapter}")


def build_renderer(cfg: dict[str, Any]) -> RendererPort:
    adapter = cfg.get("adapter", "matplotlib")

    if adapter == "matplotlib":
        from cerebro.adapters.renderers.matplotlib_png import MatplotlibRenderer
        return MatplotlibRenderer(
            palette=cfg.get("palette", "Spectral"),
            dpi=cfg.get("dpi", 100),
        )

    raise ValueError(f"Unknown renderer adapter: {adapter}")


def resolve_resolution(name: str) -> tuple[int, int]:
    try:
        return RESOLUTIONS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown resolution: {name}") from None


# ── Top-level builder ──


def build_spine(config_path: str, flow_graph: FlowGraph) -> Spine:
    """Load config and wire all adapters around *flow_graph*."""
    import logging
    log = logging.getLogger(__name__)

    cfg = load_config(config_path)
    config_parent = Path(config_path).resolve().parent

    layout_cfg = cfg.get("layout", {})
    clustering_cfg = cfg.get("clustering", {})
    renderer_cfg = cfg.get("renderer", {})
    output_cfg = cfg.get("output", {})

    log.info("  → building layout engine …")
    engine = build_layout_engine(layout_cfg)
    log.info("  ✓ layout engine ready")

    log.info("  → building clustering …")
    clustering = build_density_clustering(clustering_cfg)
    log.info("  ✓ clustering ready")

    log.info("  → building community computer …")
    community = build_community_computer(cfg.get("community", {}), flow_graph)
    log.info("  ✓ community computer: %s", type(community).__name__ if community else "none")

    log.info("  → building renderer …")
    renderer = build_renderer(renderer_cfg)
    log.info("  ✓ renderer ready")

    # Output dir is resolved relative to the config file's parent directory.
    output_dir = (config_parent / output_cfg.get("dir", "output")).resolve()
    log.info("  → output directory: %s", output_dir)

    spine = Spine.get_instance(
        flow_graph,
        clustering=clustering,
        renderer=renderer,
        max_iterations=layout_cfg.get("max_iterations", DEFAULT_MAX_ITERATIONS),
        eps=float(clustering_cfg.get("eps", DEFAULT_EPS)),
        min_pts=int(clustering_cfg.get("min_pts", DEFAULT_MIN_PTS)),
        output_dir=output_dir,
        resolution=resolve_resolution(renderer_cfg.get("resolution", "vga")),
    )
    spine.set_layout_computer(engine)
    if community is not None:
        spine.set_community_computer(community)
    return spine

