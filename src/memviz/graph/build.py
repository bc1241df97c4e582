from __future__ import annotations

import logging
import os
import posixpath
import re
from collections import Counter
from typing import Sequence

from ..config import GraphOptions
from ..ingest.runner import discover_files, parse_corpus
from .model import Edge, FileParse, Graph, Node
from .resolve import FileIndex
from .similarity import keyword_similarity_edges, shared_token_edges


logger = logging.getLogger(__name__)

_DAILY_LOG_RE = re.compile(r"^\d{4}-\d{2}-\d{2}\.md$")


def _merge_nodes(parses: Sequence[FileParse]) -> dict[str, Node]:
    nodes: dict[str, Node] = {}
    for p in parses:
        for n in p.nodes:
            # First seen wins; concepts and tags recur across files.
            nodes.setdefault(n.id, n)
    return nodes


def _ref_edges(parses: Sequence[FileParse], index: FileIndex) -> list[Edge]:
    out: list[Edge] = []
    for p in parses:
        if p.relative_path not in index:
            continue
        source = p.file_id
        for raw in p.refs:
            target = index.resolve(raw, from_path=p.relative_path)
            if target is None or target == source:
                continue
            out.append(Edge(source=source, target=target, type="ref"))
    return out


def _timeline_edges(nodes: dict[str, Node]) -> list[Edge]:
    daily = [
        n
        for n in nodes.values()
        if n.type == "file" and _DAILY_LOG_RE.match(posixpath.basename(n.path or ""))
    ]
    # YYYY-MM-DD names sort chronologically.
    daily.sort(key=lambda n: n.label)
    return [
        Edge(source=a.id, target=b.id, type="timeline")
        for a, b in zip(daily, daily[1:])
    ]


def build_graph(parses: Sequence[FileParse], options: GraphOptions | None = None) -> Graph:
    """Assemble per-file parse results into one graph.

    Edges are never merged: a pair of files may be linked by both a
    shared-token and a similarity `related` edge, plus `ref`/`timeline`.
    """
    opts = options or GraphOptions()

    nodes = _merge_nodes(parses)
    links: list[Edge] = []
    for p in parses:
        links.extend(p.edges)

    links.extend(_ref_edges(parses, FileIndex(nodes.values())))
    links.extend(shared_token_edges(links))
    links.extend(keyword_similarity_edges(parses, opts))
    links.extend(_timeline_edges(nodes))

    return Graph(nodes=list(nodes.values()), links=links)


def build_graph_from_root(
    root: str | os.PathLike[str],
    *,
    options: GraphOptions | None = None,
    workers: int = 8,
) -> Graph:
    """Discovery -> parse every file -> assemble. Raises DiscoveryError."""
    opts = options or GraphOptions()

    logger.info("Parsing memory at: %s", root)
    files = discover_files(root)
    parses = parse_corpus(files, root, workers=workers, keyword_cap=opts.keyword_cap)
    graph = build_graph(parses, opts)

    by_type = Counter(e.type for e in graph.links)
    logger.info(
        "Built graph from %d files: %d nodes, %d links (%s)",
        len(files),
        len(graph.nodes),
        len(graph.links),
        ", ".join(f"{k}={v}" for k, v in sorted(by_type.items())) or "none",
    )
    return graph
