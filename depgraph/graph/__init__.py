"""Graph core package.

Public re-exports so callers can write::

    from depgraph.graph import transform_payload, layout_snapshot, build_view
"""

from depgraph.graph.layout import LayeredLayout, LayoutEngine, layout_snapshot
from depgraph.graph.models import (
    GraphEdge,
    GraphNode,
    GraphSnapshot,
    NodeKind,
    Position,
    RiskLevel,
    TimelineStatus,
)
from depgraph.graph.spotlight import Spotlight, compute_spotlight
from depgraph.graph.timeline import TimelineResult, evaluate_timeline
from depgraph.graph.transform import transform_payload
from depgraph.graph.view import GraphView, build_view

__all__ = [
    "GraphEdge",
    "GraphNode",
    "GraphSnapshot",
    "GraphView",
    "LayeredLayout",
    "LayoutEngine",
    "NodeKind",
    "Position",
    "RiskLevel",
    "Spotlight",
    "TimelineResult",
    "TimelineStatus",
    "build_view",
    "compute_spotlight",
    "evaluate_timeline",
    "layout_snapshot",
    "transform_payload",
]
