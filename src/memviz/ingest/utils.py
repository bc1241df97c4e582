from __future__ import annotations

import os
from pathlib import Path


def relpath(path: str | os.PathLike[str], root: str | os.PathLike[str]) -> str:
    """Path of `path` relative to `root`, always with forward slashes."""
    return Path(os.path.relpath(path, root)).as_posix()


def is_within(path: Path, root: Path) -> bool:
    # Both sides must already be canonical (Path.resolve()).
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True
