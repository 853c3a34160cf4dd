"""Dataclass models for a fetched dependency graph.

These are plain, immutable Python objects.  Per-render decoration
(highlight, dim, timeline status) is applied by building new instances
with :func:`dataclasses.replace`, never by mutating a snapshot in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NodeKind(str, Enum):
    FIELD = "Field"
    APEX = "Apex"
    FLOW = "Flow"


class RiskLevel(str, Enum):
    CRITICAL = "Critical"
    SAFE = "Safe"


class TimelineStatus(str, Enum):
    NEW = "new"
    UNCHANGED = "unchanged"
    # Needs server-side soft deletes (a ``deletedAt`` timestamp); nothing
    # produces it yet.
    DELETED = "deleted"


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class GraphNode:
    id: str
    label: str
    kind: NodeKind = NodeKind.FLOW
    risk: RiskLevel = RiskLevel.SAFE
    created_at: str | None = None
    position: Position = field(default_factory=Position)

    # Transient, recomputed per render
    is_highlighted: bool = False
    is_dimmed: bool = False
    timeline_status: TimelineStatus = TimelineStatus.UNCHANGED

    @property
    def api_name(self) -> str:
        """Fully-qualified metadata name; the graph API uses it as the id."""
        return self.id

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "kind": self.kind.value,
            "risk": self.risk.value,
            "apiName": self.api_name,
            "createdAt": self.created_at,
            "position": {"x": self.position.x, "y": self.position.y},
            "isHighlighted": self.is_highlighted,
            "isDimmed": self.is_dimmed,
            "timelineStatus": self.timeline_status.value,
        }


@dataclass(frozen=True)
class GraphEdge:
    id: str
    source: str
    target: str
    relation_type: str | None = None

    # Transient, recomputed per render
    is_highlighted: bool = False
    is_dimmed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "relationType": self.relation_type,
            "isHighlighted": self.is_highlighted,
            "isDimmed": self.is_dimmed,
        }


@dataclass
class GraphSnapshot:
    """The complete ``(nodes, edges)`` pair currently held by a controller."""

    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.nodes and not self.edges
