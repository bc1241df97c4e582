from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from .model import Graph


@dataclass(frozen=True)
class CacheEntry:
    graph: Graph
    built_at: float


class GraphCache:
    """Time-bound memo of the last built graph.

    The entry is replaced in a single assignment, so readers see either the
    old graph or the new one. A failed rebuild leaves the old entry in place
    and re-raises.
    """

    def __init__(
        self,
        builder: Callable[[], Graph],
        *,
        ttl_s: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.builder = builder
        self.ttl_s = float(ttl_s)
        self.clock = clock
        self._entry: CacheEntry | None = None
        self._lock = threading.Lock()
        # Bumped by clear(); a build that started before a clear is not stored.
        self._generation = 0
        self._gen_lock = threading.Lock()

    def is_fresh(self) -> bool:
        entry = self._entry
        return entry is not None and (self.clock() - entry.built_at) < self.ttl_s

    def peek(self) -> Graph | None:
        entry = self._entry
        return entry.graph if entry is not None else None

    def get(self) -> Graph:
        entry = self._entry
        if entry is not None and (self.clock() - entry.built_at) < self.ttl_s:
            return entry.graph

        with self._lock:
            # Another thread may have rebuilt while we waited.
            entry = self._entry
            now = self.clock()
            if entry is not None and (now - entry.built_at) < self.ttl_s:
                return entry.graph

            generation = self._generation
            graph = self.builder()
            with self._gen_lock:
                if self._generation == generation:
                    self._entry = CacheEntry(graph=graph, built_at=now)
            return graph

    def clear(self) -> None:
        with self._gen_lock:
            self._generation += 1
            self._entry = None
