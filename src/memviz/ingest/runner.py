from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable

from ..graph.extract import parse_file
from ..graph.model import FileParse
from .utils import relpath


logger = logging.getLogger(__name__)

# Durable memory plus the daily logs; nothing else in the workspace.
MEMORY_PATTERNS = ("MEMORY.md", "memory/**/*.md")


class DiscoveryError(RuntimeError):
    pass


def _expand(root: Path, pattern: str) -> Iterable[Path]:
    if "/**/" not in pattern:
        p = root / pattern
        if p.is_file() and not p.is_symlink():
            yield p
        return

    base, _, name_glob = pattern.partition("/**/")
    top = root / base
    if top.is_symlink() or not top.is_dir():
        return
    for dirpath, dirnames, filenames in os.walk(top, followlinks=False):
        # Hidden entries (.trash/, .draft.md) are not memory.
        dirnames[:] = [d for d in dirnames if not d.startswith(".")]
        for name in filenames:
            if name.startswith("."):
                continue
            if not fnmatchcase(name, name_glob):
                continue
            p = Path(dirpath) / name
            if p.is_symlink() or not p.is_file():
                continue
            yield p


def discover_files(root: str | os.PathLike[str], patterns: Iterable[str] = MEMORY_PATTERNS) -> list[Path]:
    """Absolute paths of memory markdown files under `root`.

    Symlinks are never followed. The result is sorted by relative path so
    that builds over the same tree are reproducible.
    """
    root_path = Path(root).expanduser().absolute()
    if not root_path.exists():
        raise DiscoveryError(f"Memory root not found: {root_path}")
    if not root_path.is_dir():
        raise DiscoveryError(f"Memory root is not a directory: {root_path}")

    found: dict[str, Path] = {}
    for pattern in patterns:
        for p in _expand(root_path, pattern):
            found.setdefault(relpath(p, root_path), p)
    return [found[k] for k in sorted(found)]


def _parse_one(path: Path, root: Path, keyword_cap: int) -> FileParse:
    try:
        return parse_file(path, root, keyword_cap=keyword_cap)
    except Exception as e:
        # One bad file costs coverage, not the build.
        logger.warning("Failed to parse %s: %s", path, e)
        return FileParse.empty(relpath(path, root))


def parse_corpus(
    files: list[Path],
    root: str | os.PathLike[str],
    *,
    workers: int = 8,
    keyword_cap: int = 4000,
) -> list[FileParse]:
    """Parse every file; returns only once all of them are done (or failed).

    Results keep the order of `files`.
    """
    root_path = Path(root).expanduser().absolute()
    if not files:
        return []

    workers = max(1, min(int(workers), len(files)))
    if workers == 1:
        return [_parse_one(p, root_path, keyword_cap) for p in files]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(lambda p: _parse_one(p, root_path, keyword_cap), files))
