from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() == "true"


@dataclass(frozen=True)
class Settings:
    # Directory holding MEMORY.md and memory/.
    root: str = os.getenv("MEMVIZ_ROOT", ".")

    # Seconds a built graph is served from cache before a rebuild.
    cache_ttl: float = float(os.getenv("MEMVIZ_CACHE_TTL", "30"))

    # Source edit/delete API (off unless explicitly enabled).
    allow_write: bool = _env_flag("MEMVIZ_ALLOW_WRITE")
    allow_delete: bool = _env_flag("MEMVIZ_ALLOW_DELETE")

    # Server
    host: str = os.getenv("MEMVIZ_HOST", "127.0.0.1")
    port: int = int(os.getenv("MEMVIZ_PORT", "18791"))

    # Parallel file parsing
    workers: int = int(os.getenv("MEMVIZ_WORKERS", "8"))


@dataclass(frozen=True)
class GraphOptions:
    """Assembler constants.

    The similarity thresholds are tuned for short daily logs; they are fixed
    configuration, not derived from the corpus.
    """

    min_shared_keywords: int = 8
    min_jaccard: float = 0.03
    max_similarity_edges: int = 120
    keyword_cap: int = 4000
