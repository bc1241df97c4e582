from __future__ import annotations

import posixpath
from pathlib import Path

from ..ingest import markdown as md
from ..ingest.utils import relpath
from .model import Edge, FileParse, Node, node_id


def parse_markdown(text: str, relative_path: str, *, keyword_cap: int = 4000) -> FileParse:
    """Extract nodes, file-scoped edges, raw references and keywords.

    Deterministic for a given (text, relative_path). The same concept or tag
    may be emitted several times; deduplication is the assembler's job.
    """
    file_id = node_id("file", relative_path)
    nodes = [
        Node(
            id=file_id,
            type="file",
            label=relative_path,
            label_short=md.shorten(posixpath.basename(relative_path), 24),
            label_full=relative_path,
            path=relative_path,
        )
    ]
    edges: list[Edge] = []
    refs: list[str] = []

    for concept in md.iter_wikilinks(text):
        cid = node_id("concept", concept)
        nodes.append(
            Node(
                id=cid,
                type="concept",
                label=concept,
                label_short=md.shorten(concept, 24),
                label_full=concept,
            )
        )
        edges.append(Edge(source=file_id, target=cid, type="contains"))
        # [[2026-02-14]] or [[MEMORY]] may also name a file.
        refs.append(concept)

    for tag in md.iter_tags(text):
        tid = node_id("tag", tag)
        nodes.append(
            Node(
                id=tid,
                type="tag",
                label=f"#{tag}",
                label_short=md.shorten(f"#{tag}", 18),
                label_full=f"#{tag}",
            )
        )
        edges.append(Edge(source=file_id, target=tid, type="tagged"))

    for header in md.iter_headers(text):
        hid = node_id("event", f"{relative_path}#{header}")
        nodes.append(
            Node(
                id=hid,
                type="event",
                label=header,
                label_short=md.shorten(header, 28),
                label_full=header,
                path=relative_path,
            )
        )
        edges.append(Edge(source=file_id, target=hid, type="header"))

    refs.extend(md.iter_link_targets(text))

    return FileParse(
        relative_path=relative_path,
        nodes=nodes,
        edges=edges,
        refs=refs,
        keywords=md.extract_keywords(text, cap=keyword_cap),
    )


def parse_file(path: Path, root: Path, *, keyword_cap: int = 4000) -> FileParse:
    # Strict UTF-8; decode errors propagate to the caller.
    text = path.read_text(encoding="utf-8")
    return parse_markdown(text, relpath(path, root), keyword_cap=keyword_cap)
