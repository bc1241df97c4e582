from __future__ import annotations

import posixpath
import re
from typing import Iterable

from .model import Node


_SCHEME_RE = re.compile(r"^(https?:|mailto:|tel:|data:)", re.IGNORECASE)


def file_stem(name: str) -> str:
    return name[:-3] if name.lower().endswith(".md") else name


class FileIndex:
    """Lookup of known file nodes by relative path, basename and stem.

    When two files share a basename or stem, the last one indexed wins.
    """

    def __init__(self, nodes: Iterable[Node]):
        self.by_path: dict[str, str] = {}
        self.by_basename: dict[str, str] = {}
        self.by_stem: dict[str, str] = {}

        for n in nodes:
            if n.type != "file":
                continue
            p = n.path or n.label
            if not p:
                continue
            self.by_path[p] = n.id
            base = posixpath.basename(p)
            self.by_basename[base] = n.id
            self.by_stem[file_stem(base)] = n.id

    def __contains__(self, relative_path: str) -> bool:
        return relative_path in self.by_path

    def resolve(self, raw_ref: str, *, from_path: str) -> str | None:
        """Map a raw reference found in `from_path` to a file node id.

        Returns None for URLs, empty references and misses.
        """
        ref = str(raw_ref).strip()
        if not ref or _SCHEME_RE.match(ref):
            return None

        target = ref.split("#", 1)[0].split("?", 1)[0].strip()
        if not target:
            return None

        from_dir = posixpath.dirname(from_path)
        # "/memory/x.md" is root-relative, not filesystem-absolute.
        normalized = posixpath.normpath(posixpath.join(from_dir, target.lstrip("/")))
        base = posixpath.basename(target)

        for candidate in (normalized, target, base):
            if candidate in self.by_path:
                return self.by_path[candidate]
            if candidate in self.by_basename:
                return self.by_basename[candidate]

        # (MEMORY) or [[2026-02-14]] without the extension.
        return self.by_stem.get(file_stem(base))
