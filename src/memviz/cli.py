from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.text import Text

from .config import GraphOptions, Settings
from .graph.build import build_graph_from_root
from .graph.model import Graph
from .graph.query import query_graph, summarize
from .ingest.runner import DiscoveryError


app = typer.Typer(add_completion=False, help="memviz: explore markdown memory notes as a graph.")
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _build(root: Path | None, workers: int | None, options: GraphOptions | None = None) -> Graph:
    settings = Settings()
    try:
        return build_graph_from_root(
            root or Path(settings.root),
            options=options,
            workers=workers or settings.workers,
        )
    except DiscoveryError as e:
        console.print(str(e), style="red")
        raise typer.Exit(code=2)


@app.command()
def build(
    root: Path | None = typer.Option(None, "--root", help="Memory root (default: MEMVIZ_ROOT)"),
    out: Path | None = typer.Option(None, "--out", help="Write the graph as JSON"),
    workers: int | None = typer.Option(None, "--workers", help="Parallel file parsers"),
    max_similarity_edges: int | None = typer.Option(None, help="Keep at most this many similarity edges"),
):
    """Build the graph once; optionally dump it as JSON."""
    options = GraphOptions()
    if max_similarity_edges is not None:
        options = replace(options, max_similarity_edges=int(max_similarity_edges))

    graph = _build(root, workers, options)

    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        with out.open("w", encoding="utf-8") as f:
            json.dump(graph.to_dict(), f, ensure_ascii=False, indent=2)
        console.print(f"Wrote {len(graph.nodes)} nodes, {len(graph.links)} links to {out}")
    else:
        console.print(f"Nodes: {len(graph.nodes)}")
        console.print(f"Links: {len(graph.links)}")


@app.command()
def stats(
    root: Path | None = typer.Option(None, "--root", help="Memory root (default: MEMVIZ_ROOT)"),
    workers: int | None = typer.Option(None, "--workers"),
):
    """Show node and link counts by type."""
    res = summarize(_build(root, workers))

    table = Table(title="Memory Graph")
    table.add_column("Kind")
    table.add_column("Type")
    table.add_column("Count", justify="right")
    for t, n in res["nodes_by_type"].items():
        table.add_row("node", t, str(n))
    for t, n in res["links_by_type"].items():
        table.add_row("link", t, str(n))
    table.add_row("total", "nodes", str(res["nodes"]))
    table.add_row("total", "links", str(res["links"]))
    console.print(table)


@app.command()
def query(
    text: str = typer.Argument(...),
    root: Path | None = typer.Option(None, "--root", help="Memory root (default: MEMVIZ_ROOT)"),
    node_limit: int = typer.Option(5, help="Max matching nodes"),
    neighbor_limit: int = typer.Option(8, help="Max neighbors per node"),
):
    """Find nodes by label and show what they connect to."""
    res = query_graph(
        graph=_build(root, None),
        query=text,
        node_limit=int(node_limit),
        neighbor_limit=int(neighbor_limit),
    )

    if not res["nodes"]:
        console.print("No matching nodes.", style="yellow")
        raise typer.Exit(code=1)

    for item in res["nodes"]:
        node = item["node"]
        console.print("\n" + "=" * 80, markup=False)
        console.print(f"{node['labelFull']} [{node['type']}] (degree={item['degree']})", markup=False, style="bold")
        if item["neighbors"]:
            table = Table(show_header=True)
            table.add_column("link")
            table.add_column("weight", justify="right")
            table.add_column("node")
            for nb in item["neighbors"]:
                w = nb["weight"]
                table.add_row(Text(nb["type"]), Text("" if w is None else str(w)), Text(nb["node"]["labelFull"]))
            console.print(table)


@app.command()
def serve(
    root: Path | None = typer.Option(None, "--root", help="Memory root (default: MEMVIZ_ROOT)"),
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
    allow_write: bool | None = typer.Option(None, "--allow-write/--no-allow-write", help="Enable PUT /api/source"),
    allow_delete: bool | None = typer.Option(None, "--allow-delete/--no-allow-delete", help="Enable DELETE /api/source"),
):
    """Run the graph API server (FastAPI)."""
    try:
        import uvicorn
    except Exception:
        console.print("Missing web dependencies. Install: `pip install -e '.[web]'`", style="red")
        raise typer.Exit(code=2)

    from .web.server import create_app

    settings = Settings()
    overrides = {}
    if root is not None:
        overrides["root"] = str(root)
    if allow_write is not None:
        overrides["allow_write"] = bool(allow_write)
    if allow_delete is not None:
        overrides["allow_delete"] = bool(allow_delete)
    settings = replace(settings, **overrides)

    console.print(f"Memory root: {settings.root}")
    console.print(f"Write allowed: {settings.allow_write}")
    console.print(f"Delete allowed: {settings.allow_delete}")

    app_ = create_app(settings=settings)
    uvicorn.run(app_, host=host or settings.host, port=int(port or settings.port))


if __name__ == "__main__":
    app()
