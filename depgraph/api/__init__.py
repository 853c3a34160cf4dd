"""FastAPI viewer-service package.

Public re-export so callers can write::

    from depgraph.api import app

    uvicorn depgraph.api:app --reload
"""

from depgraph.api.app import app

__all__ = ["app"]
