"""Read, edit and delete memory source files.

Writes and deletes keep a copy next to the original (`.bak-<ms>` /
`.del-<ms>`); neither suffix ends in `.md`, so backups never show up in the
graph. Callers are responsible for invalidating any cached graph.
"""

from __future__ import annotations

import os
import shutil
import time
from pathlib import Path

from ..ingest.utils import is_within, relpath


class SourceError(RuntimeError):
    status_code = 400


class SourceAccessError(SourceError):
    status_code = 403


class SourceNotFoundError(SourceError):
    status_code = 404


def resolve_source(root: str | os.PathLike[str], rel: str) -> Path:
    """Canonical absolute path for `rel`, which must stay under `root`."""
    if not rel or not isinstance(rel, str):
        raise SourceError("Missing path")
    root_path = Path(root).expanduser().resolve()
    full = (root_path / rel).resolve()
    if not is_within(full, root_path):
        raise SourceAccessError("Access denied")
    return full


def _editable(root: str | os.PathLike[str], rel: str, verb: str) -> Path:
    full = resolve_source(root, rel)
    if full.suffix.lower() != ".md":
        raise SourceError(f"Only .md files can be {verb}")
    if not full.is_file():
        raise SourceNotFoundError("File not found")
    return full


def _backup(full: Path, tag: str) -> Path:
    backup = full.with_name(f"{full.name}.{tag}-{int(time.time() * 1000)}")
    shutil.copy2(full, backup)
    return backup


def read_source(root: str | os.PathLike[str], rel: str) -> str:
    full = resolve_source(root, rel)
    if not full.is_file():
        raise SourceNotFoundError("File not found")
    return full.read_text(encoding="utf-8", errors="replace")


def write_source(root: str | os.PathLike[str], rel: str, content: str) -> str:
    """Overwrite an existing markdown file; returns the backup's relative path."""
    if not isinstance(content, str):
        raise SourceError("Missing content")
    full = _editable(root, rel, "edited")
    backup = _backup(full, "bak")
    full.write_text(content, encoding="utf-8")
    return relpath(backup, Path(root).expanduser().resolve())


def delete_source(root: str | os.PathLike[str], rel: str) -> str:
    """Remove a markdown file after backing it up; returns the backup's relative path."""
    full = _editable(root, rel, "deleted")
    backup = _backup(full, "del")
    full.unlink()
    return relpath(backup, Path(root).expanduser().resolve())
