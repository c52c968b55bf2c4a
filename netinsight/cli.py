"""netinsight command-line interface."""

from __future__ import annotations

import json
import logging

import click
import yaml


@click.group()
@click.option("--config", "-c", default=None, help="Path to config YAML (built-in defaults if omitted).")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """netinsight: influence ranking and community detection for contact networks."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


def _load(ctx: click.Context, graph_file: str):
    from netinsight.config import build_service, build_source

    service = build_service(ctx.obj["config"])
    graph, contacts = build_source(ctx.obj["config"], path_override=graph_file).load()
    return service, graph, contacts


@main.command()
@click.argument("graph_file", type=click.Path(exists=True))
@click.option("--top", "-n", default=10, show_default=True, help="How many contacts to list.")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON instead of a table.")
@click.pass_context
def influence(ctx: click.Context, graph_file: str, top: int, as_json: bool) -> None:
    """Rank contacts in GRAPH_FILE by influence."""
    service, graph, _ = _load(ctx, graph_file)
    ranked = service.rank_influence(graph)[:top]

    if as_json:
        click.echo(json.dumps([s.to_dict() for s in ranked], indent=2))
        return

    if not ranked:
        click.echo("No contacts in graph.")
        return

    click.echo(f"--- Top {len(ranked)} contacts by influence ---")
    for s in ranked:
        name = graph.nodes[s.node_id].name
        f = s.factors
        click.echo(
            f"  #{s.rank:<3} {name:<30} {s.score:6.2f}  "
            f"(deg {f.degree:.2f}, btw {f.betweenness:.2f}, "
            f"clu {f.clustering:.2f}, eig {f.eigenvector:.2f})"
        )


@main.command()
@click.argument("graph_file", type=click.Path(exists=True))
@click.option("--json", "as_json", is_flag=True, help="Emit JSON instead of a summary.")
@click.pass_context
def communities(ctx: click.Context, graph_file: str, as_json: bool) -> None:
    """Detect attribute and structural communities in GRAPH_FILE."""
    service, graph, contacts = _load(ctx, graph_file)
    report = service.get_communities(graph, contacts)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    click.echo(f"--- Communities ({len(report.communities)}) ---")
    for c in report.communities:
        click.echo(f"  [{c.type.value}] {c.label}: {c.size} members, density {c.density:.2f}")
    status = "converged" if report.clusters_converged else "NOT converged"
    click.echo(f"\nLabel propagation: {report.cluster_passes} passes, {status}.")
    click.echo(f"Contacts with a community: {len(report.memberships)}")


@main.command()
@click.argument("graph_file", type=click.Path(exists=True))
@click.option("--json", "as_json", is_flag=True, help="Emit JSON instead of a summary.")
@click.pass_context
def metrics(ctx: click.Context, graph_file: str, as_json: bool) -> None:
    """Summarise size and connectivity of GRAPH_FILE."""
    service, graph, _ = _load(ctx, graph_file)
    m = service.get_metrics(graph)

    if as_json:
        click.echo(json.dumps(m.to_dict(), indent=2))
        return

    click.echo("=== Network Metrics ===")
    click.echo(f"  Contacts:          {m.total_nodes}")
    click.echo(f"  Connections:       {m.total_edges}")
    click.echo(f"  Average degree:    {m.avg_degree:.2f}")
    click.echo(f"  Density:           {m.network_density * 100:.1f}%")
    click.echo(f"  Largest component: {m.largest_component_size}")
    click.echo(f"  Avg path length:   {m.avg_path_length:.2f}")
    names = [graph.nodes[nid].name for nid in m.key_connectors]
    click.echo(f"  Key connectors:    {', '.join(names) or '-'}")


@main.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show the effective analytics settings."""
    from netinsight.settings import load_settings

    settings = load_settings(ctx.obj["config"])
    click.echo("=== Settings ===")
    click.echo(yaml.dump(settings.to_dict(), default_flow_style=False, sort_keys=False))


if __name__ == "__main__":
    main()
