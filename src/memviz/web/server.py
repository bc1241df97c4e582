from __future__ import annotations

import logging
from typing import Any

from ..config import GraphOptions, Settings
from ..graph.build import build_graph_from_root
from ..graph.cache import GraphCache
from ..ingest.runner import DiscoveryError
from .files import SourceError, delete_source, read_source, write_source


logger = logging.getLogger(__name__)


def create_app(
    *,
    settings: Settings | None = None,
    options: GraphOptions | None = None,
    cache: GraphCache | None = None,
):
    # Lazy import so core CLI works without web deps.
    from fastapi import FastAPI
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse, PlainTextResponse

    settings = settings or Settings()
    root = settings.root

    if cache is None:
        cache = GraphCache(
            lambda: build_graph_from_root(root, options=options, workers=settings.workers),
            ttl_s=settings.cache_ttl,
        )

    app = FastAPI(title="memviz", version="0.1.0")
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.state.cache = cache
    app.state.settings = settings

    def _error(e: SourceError) -> JSONResponse:
        return JSONResponse({"ok": False, "error": str(e)}, status_code=e.status_code)

    @app.get("/api/health")
    def health():
        return {
            "ok": True,
            "root": root,
            "cache_fresh": cache.is_fresh(),
            "allow_write": settings.allow_write,
            "allow_delete": settings.allow_delete,
        }

    @app.get("/api/graph")
    def graph():
        try:
            g = cache.get()
        except DiscoveryError as e:
            logger.error("Graph build failed: %s", e)
            return JSONResponse({"ok": False, "error": str(e)}, status_code=500)
        return g.to_dict()

    @app.get("/api/source")
    def source(path: str = ""):
        try:
            text = read_source(root, path)
        except SourceError as e:
            return _error(e)
        return PlainTextResponse(text)

    @app.put("/api/source")
    def update_source(payload: dict[str, Any]):
        if not settings.allow_write:
            return JSONResponse({"ok": False, "error": "Write access disabled"}, status_code=403)

        try:
            backup = write_source(root, payload.get("path") or "", payload.get("content"))
        except SourceError as e:
            return _error(e)
        except OSError as e:
            return JSONResponse({"ok": False, "error": str(e)}, status_code=500)

        # Next /api/graph re-scans the corpus.
        cache.clear()
        logger.info("Updated %s (backup %s)", payload.get("path"), backup)
        return {"ok": True, "backup": backup}

    @app.delete("/api/source")
    def remove_source(path: str = ""):
        if not settings.allow_delete:
            return JSONResponse({"ok": False, "error": "Delete access disabled"}, status_code=403)

        try:
            backup = delete_source(root, path)
        except SourceError as e:
            return _error(e)
        except OSError as e:
            return JSONResponse({"ok": False, "error": str(e)}, status_code=500)

        cache.clear()
        logger.info("Deleted %s (backup %s)", path, backup)
        return {"ok": True, "backup": backup}

    return app
