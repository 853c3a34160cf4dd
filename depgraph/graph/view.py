"""Per-render composition of a snapshot with spotlight and timeline state."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from depgraph.graph.models import GraphEdge, GraphNode, GraphSnapshot
from depgraph.graph.spotlight import compute_spotlight, highlight_edges, highlight_nodes
from depgraph.graph.timeline import TimelineResult, apply_timeline, evaluate_timeline

EMPTY_HINTS = {
    False: (
        "Enter a field name to trace dependencies",
        "Field → Apex Classes → Flows & Triggers",
    ),
    True: (
        "Ask a question about your Salesforce metadata",
        'e.g., "Show me all flows that update Account"',
    ),
}


@dataclass(frozen=True)
class GraphView:
    """Everything a rendering surface needs for one frame."""

    nodes: list[GraphNode]
    edges: list[GraphEdge]
    hovered_node_id: str | None
    timeline: TimelineResult
    hint: tuple[str, str] | None = None

    @property
    def summary(self) -> str:
        if not self.nodes:
            return ""
        return f"{len(self.nodes)} nodes · {len(self.edges)} connections"

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "hoveredNodeId": self.hovered_node_id,
            "timeline": self.timeline.to_dict(),
            "summary": self.summary,
            "hint": list(self.hint) if self.hint else None,
        }


def build_view(
    snapshot: GraphSnapshot,
    hovered_node_id: str | None = None,
    timeline_value: int = 100,
    now: datetime | None = None,
    ai_mode: bool = False,
) -> GraphView:
    """Decorate *snapshot* for display without touching its positions.

    A hover target that is not in the snapshot is ignored.
    """
    node_ids = {n.id for n in snapshot.nodes}
    if hovered_node_id not in node_ids:
        hovered_node_id = None

    spotlight = compute_spotlight(hovered_node_id, snapshot.edges)
    timeline = evaluate_timeline(snapshot.nodes, timeline_value, now=now)

    nodes = apply_timeline(highlight_nodes(snapshot.nodes, spotlight), timeline)
    edges = highlight_edges(snapshot.edges, spotlight)
    return GraphView(
        nodes=nodes,
        edges=edges,
        hovered_node_id=hovered_node_id,
        timeline=timeline,
        hint=None if nodes else EMPTY_HINTS[ai_mode],
    )
