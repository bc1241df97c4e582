from __future__ import annotations

from collections import Counter, defaultdict
from typing import Any

from ..ingest.markdown import MIN_KEYWORD_CHARS, STOPWORDS
from .model import Edge, Graph, Node


def summarize(graph: Graph) -> dict[str, Any]:
    return {
        "nodes": len(graph.nodes),
        "links": len(graph.links),
        "nodes_by_type": dict(sorted(Counter(n.type for n in graph.nodes).items())),
        "links_by_type": dict(sorted(Counter(e.type for e in graph.links).items())),
    }


def _adjacency(graph: Graph) -> dict[str, list[tuple[str, Edge]]]:
    # Undirected view: every edge is listed under both endpoints.
    adj: dict[str, list[tuple[str, Edge]]] = defaultdict(list)
    for e in graph.links:
        adj[e.source].append((e.target, e))
        adj[e.target].append((e.source, e))
    return adj


def _query_terms(query: str, *, max_terms: int = 8) -> list[str]:
    out: list[str] = []
    for t in query.lower().split():
        if len(t) < MIN_KEYWORD_CHARS or t in STOPWORDS:
            continue
        if t not in out:
            out.append(t)
        if len(out) >= max_terms:
            break
    return out


def _match(nodes: list[Node], needle: str) -> list[Node]:
    return [n for n in nodes if needle in n.label_full.lower() or needle in n.id.lower()]


def query_graph(
    *,
    graph: Graph,
    query: str,
    node_limit: int = 5,
    neighbor_limit: int = 8,
) -> dict[str, Any]:
    """Find nodes whose label contains the query and list their neighbors.

    Falls back to per-term matching when the whole query matches nothing.
    Matches are ranked by degree, neighbors by edge weight.
    """
    q = " ".join(query.split()).lower()
    terms = [q] if q else []
    matches = _match(graph.nodes, q) if q else []
    if not matches:
        terms = _query_terms(q)
        seen: set[str] = set()
        for t in terms:
            for n in _match(graph.nodes, t):
                if n.id not in seen:
                    seen.add(n.id)
                    matches.append(n)

    adj = _adjacency(graph)
    by_id = {n.id: n for n in graph.nodes}
    top = sorted(matches, key=lambda n: len(adj.get(n.id, [])), reverse=True)[:node_limit]

    out_nodes = []
    for n in top:
        neighbors = []
        for other, edge in sorted(adj.get(n.id, []), key=lambda x: x[1].weight or 0, reverse=True):
            onode = by_id.get(other)
            if onode is None:
                continue
            neighbors.append({"node": onode.to_dict(), "type": edge.type, "weight": edge.weight})
            if len(neighbors) >= neighbor_limit:
                break
        out_nodes.append({"node": n.to_dict(), "degree": len(adj.get(n.id, [])), "neighbors": neighbors})

    return {"terms": terms, "nodes": out_nodes}
