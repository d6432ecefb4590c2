"""Cerebro command-line interface."""

from __future__ import annotations

import logging

import click


@click.group()
@click.option("--config", "-c", default="config.yaml", envvar="CEREBRO_CONFIG",
              help="Path to config YAML.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config: str, verbose: bool) -> None:
    """Cerebro: lay out, cluster and render execution-flow graphs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@main.command()
@click.argument("flow_json", type=click.Path(exists=True, dir_okay=False))
@click.option("--subject", "-s", required=True, help="Base name of the output artifacts.")
@click.option("--skip-communities", is_flag=True, help="Do not run community detection.")
@click.pass_context
def run(ctx: click.Context, flow_json: str, subject: str, skip_communities: bool) -> None:
    """Lay out, cluster and render the flow graph in FLOW_JSON."""
    from cerebro.config import build_spine
    from cerebro.domain.models import FlowGraph

    flow = FlowGraph.load(flow_json)
    spine = build_spine(ctx.obj["config"], flow)

    spine.init_visual_graph().compute_layout().compute_visual_clusters()
    if spine.has_community_computer and not skip_communities:
        spine.detect_communities()
    paths = spine.spit_graph(subject)
    spine.close()

    layout = spine.last_layout
    click.echo(
        f"Layout: {layout.iterations} iterations, stabilization {layout.stabilization:.3f}"
        f"{'' if layout.converged else ' (iteration cap reached)'}"
    )
    click.echo(f"Clusters: {flow.cluster_count}")
    if flow.community_count is not None:
        click.echo(f"Communities: {flow.community_count}")
    click.echo(f"Wrote {paths.json_path}")
    click.echo(f"Wrote {paths.image_path}")


@main.command()
@click.argument("flow_json", type=click.Path(exists=True, dir_okay=False))
def info(flow_json: str) -> None:
    """Show node/edge totals of the flow graph in FLOW_JSON."""
    from cerebro.domain.models import FlowGraph

    flow = FlowGraph.load(flow_json)
    click.echo("=== Flow Graph ===")
    click.echo(f"  Nodes:            {len(flow.nodes)}")
    click.echo(f"  Edges:            {len(flow)}")
    click.echo(f"  Referenced nodes: {len(flow.referenced_node_ids())}")
    click.echo(f"  Max edge count:   {flow.max_edge_count()}")


if __name__ == "__main__":
    main()
