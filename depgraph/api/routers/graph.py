"""Graph viewer endpoints.

Routes
------
GET  /graph               Decorated view (nodes, edges, timeline, summary)
GET  /graph/state         Controller flags (mode, loading, errors, query text)
POST /graph/search        Field search, or AI question when ``ai_mode``
POST /graph/run           Execute the query text (optionally replacing it first)
PUT  /graph/hover         Set or clear the hovered node
PUT  /graph/timeline      Move the timeline slider (0-100)
PUT  /graph/editor        Show or hide the query editor

Action endpoints always answer 200; a failed request shows up in the
``error`` field rather than as an HTTP error.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from depgraph.controller import GraphController

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class SearchRequest(BaseModel):
    term: Optional[str] = None
    ai_mode: Optional[bool] = None


class RunRequest(BaseModel):
    query: Optional[str] = None


class HoverRequest(BaseModel):
    node_id: Optional[str] = None


class TimelineRequest(BaseModel):
    value: int = Field(ge=0, le=100)


class EditorRequest(BaseModel):
    visible: bool


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _controller(request: Request) -> GraphController:
    return request.app.state.controller


def _view_response(controller: GraphController, now: datetime | None = None) -> dict[str, Any]:
    return {**controller.view(now=now).to_dict(), "state": controller.state()}


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("")
def get_view(request: Request, now: Optional[datetime] = None) -> dict[str, Any]:
    """Return the current decorated view.

    Args:
        now: Reference time for the timeline filter (defaults to the
            current time).
    """
    return _view_response(_controller(request), now)


@router.get("/state")
def get_state(request: Request) -> dict[str, Any]:
    return _controller(request).state()


@router.post("/search")
async def search(body: SearchRequest, request: Request) -> dict[str, Any]:
    """Run a field search or, in AI mode, a natural-language question."""
    controller = _controller(request)
    if body.term is not None:
        controller.set_search_term(body.term)
    if body.ai_mode is not None:
        controller.set_ai_mode(body.ai_mode)
    await controller.submit()
    return _view_response(controller)


@router.post("/run")
async def run(body: RunRequest, request: Request) -> dict[str, Any]:
    """Execute the current (or supplied) query text."""
    controller = _controller(request)
    if body.query is not None:
        controller.set_query_text(body.query)
    await controller.run_query()
    return _view_response(controller)


@router.put("/hover")
def hover(body: HoverRequest, request: Request) -> dict[str, Any]:
    controller = _controller(request)
    controller.hover(body.node_id)
    return _view_response(controller)


@router.put("/timeline")
def timeline(body: TimelineRequest, request: Request) -> dict[str, Any]:
    controller = _controller(request)
    controller.set_timeline(body.value)
    return _view_response(controller)


@router.put("/editor")
def editor(body: EditorRequest, request: Request) -> dict[str, Any]:
    controller = _controller(request)
    if body.visible:
        controller.open_query_editor()
    else:
        controller.close_query_editor()
    return controller.state()
