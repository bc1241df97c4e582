from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def node_id(kind: str, key: str) -> str:
    return f"{kind}:{key}"


@dataclass(frozen=True)
class Node:
    id: str
    type: str
    label: str
    label_short: str
    label_full: str
    # Relative path of the backing file (file and event nodes only).
    path: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "label": self.label,
            "labelShort": self.label_short,
            "labelFull": self.label_full,
        }
        if self.path is not None:
            d["path"] = self.path
        return d


@dataclass(frozen=True)
class Edge:
    source: str
    target: str
    type: str
    weight: int | None = None
    # Jaccard score, similarity edges only.
    score: float | None = None
    # "tags" or "text" for related edges.
    via: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"source": self.source, "target": self.target, "type": self.type}
        if self.weight is not None:
            d["weight"] = self.weight
        if self.score is not None:
            d["score"] = self.score
        if self.via is not None:
            d["via"] = self.via
        return d


@dataclass(frozen=True)
class FileParse:
    """Everything extracted from one file, before cross-file assembly."""

    relative_path: str
    nodes: list[Node] = field(default_factory=list)
    edges: list[Edge] = field(default_factory=list)
    refs: list[str] = field(default_factory=list)
    keywords: frozenset[str] = frozenset()

    @property
    def file_id(self) -> str:
        return node_id("file", self.relative_path)

    @classmethod
    def empty(cls, relative_path: str) -> "FileParse":
        return cls(relative_path=relative_path)


@dataclass(frozen=True)
class Graph:
    nodes: list[Node]
    links: list[Edge]

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [e.to_dict() for e in self.links],
        }

    def node(self, nid: str) -> Node | None:
        for n in self.nodes:
            if n.id == nid:
                return n
        return None
