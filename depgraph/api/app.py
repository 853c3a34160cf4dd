"""FastAPI application factory for the graph viewer service.

Lifespan
--------
On startup the app builds one :class:`~depgraph.controller.GraphController`
from ``settings`` and shares it across requests via
``request.app.state.controller``.  A rendering surface polls the decorated
view and forwards hover / timeline / editor events back.

Routers
-------
    /graph     — search, run-query, view and UI-state endpoints
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from depgraph.api.routers import graph as graph_router
from depgraph.config import settings
from depgraph.controller import GraphController


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared controller on startup."""
    app.state.controller = GraphController.from_settings(settings)
    yield


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="depgraph viewer",
        description=(
            "Serves a laid-out, spotlight- and timeline-decorated dependency "
            "graph to a rendering surface, and proxies field searches, "
            "natural-language questions and raw queries to the graph API."
        ),
        version="0.3.0",
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(graph_router.router, prefix="/graph", tags=["graph"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn depgraph.api.app:app --reload
app = create_app()
