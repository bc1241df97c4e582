"""Derived file-to-file edges.

Both derivations compare every pair of files, so cost grows quadratically
with the number of files. That is fine for personal memory logs (hundreds of
files); a much larger corpus would need candidate pruning that still yields
the same pairwise overlaps.
"""

from __future__ import annotations

from itertools import combinations
from typing import Iterable

from ..config import GraphOptions
from .model import Edge, FileParse


TOKEN_KINDS = ("concept:", "tag:")


def _overlap(a: frozenset[str] | set[str], b: frozenset[str] | set[str]) -> int:
    small, big = (a, b) if len(a) <= len(b) else (b, a)
    return sum(1 for t in small if t in big)


def jaccard(a: frozenset[str] | set[str], b: frozenset[str] | set[str]) -> tuple[int, float]:
    """Return (shared, shared / union). Symmetric in its arguments."""
    shared = _overlap(a, b)
    union = len(a) + len(b) - shared
    return shared, (shared / union if union else 0.0)


def shared_token_edges(links: Iterable[Edge]) -> list[Edge]:
    """One `related` edge per file pair that links to a common concept or tag."""
    file_tokens: dict[str, set[str]] = {}
    for link in links:
        if not link.source.startswith("file:"):
            continue
        if not link.target.startswith(TOKEN_KINDS):
            continue
        file_tokens.setdefault(link.source, set()).add(link.target)

    out: list[Edge] = []
    for a, b in combinations(file_tokens, 2):
        shared = _overlap(file_tokens[a], file_tokens[b])
        if shared > 0:
            out.append(Edge(source=a, target=b, type="related", weight=shared, via="tags"))
    return out


def keyword_similarity_edges(parses: Iterable[FileParse], options: GraphOptions | None = None) -> list[Edge]:
    """Top-N `related` edges by Jaccard overlap of keyword sets."""
    opts = options or GraphOptions()

    file_keywords: dict[str, frozenset[str]] = {}
    for p in parses:
        if p.keywords:
            file_keywords.setdefault(p.file_id, p.keywords)

    candidates: list[Edge] = []
    for a, b in combinations(file_keywords, 2):
        shared, score = jaccard(file_keywords[a], file_keywords[b])
        if shared < opts.min_shared_keywords:
            continue
        if score < opts.min_jaccard:
            continue
        candidates.append(Edge(source=a, target=b, type="related", weight=shared, score=score, via="text"))

    # Stable sort: ties keep pair order.
    candidates.sort(key=lambda e: (-e.score, -e.weight))
    return candidates[: opts.max_similarity_edges]
