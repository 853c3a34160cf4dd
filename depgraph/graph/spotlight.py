"""Hover spotlight: highlight a node's direct neighbourhood, dim the rest."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Sequence

from depgraph.graph.models import GraphEdge, GraphNode


@dataclass(frozen=True)
class Spotlight:
    """Ids lit up by the current hover target.

    With no hovered node every element is neutral: neither highlighted nor
    dimmed.
    """

    hovered_node_id: str | None = None
    node_ids: frozenset[str] = frozenset()
    edge_ids: frozenset[str] = frozenset()

    @property
    def active(self) -> bool:
        return self.hovered_node_id is not None

    def node_flags(self, node_id: str) -> tuple[bool, bool]:
        """Return ``(is_highlighted, is_dimmed)`` for a node."""
        if not self.active:
            return False, False
        lit = node_id in self.node_ids
        return lit, not lit

    def edge_flags(self, edge_id: str) -> tuple[bool, bool]:
        """Return ``(is_highlighted, is_dimmed)`` for an edge."""
        if not self.active:
            return False, False
        lit = edge_id in self.edge_ids
        return lit, not lit


def compute_spotlight(hovered_node_id: str | None, edges: Iterable[GraphEdge]) -> Spotlight:
    """Collect the hovered node, its depth-1 neighbours and incident edges.

    Adjacency is undirected.  Single pass over *edges*.
    """
    if not hovered_node_id:
        return Spotlight()

    node_ids = {hovered_node_id}
    edge_ids: set[str] = set()
    for edge in edges:
        if edge.source == hovered_node_id:
            node_ids.add(edge.target)
            edge_ids.add(edge.id)
        if edge.target == hovered_node_id:
            node_ids.add(edge.source)
            edge_ids.add(edge.id)

    return Spotlight(
        hovered_node_id=hovered_node_id,
        node_ids=frozenset(node_ids),
        edge_ids=frozenset(edge_ids),
    )


def highlight_nodes(nodes: Sequence[GraphNode], spotlight: Spotlight) -> list[GraphNode]:
    decorated = []
    for node in nodes:
        lit, dim = spotlight.node_flags(node.id)
        decorated.append(replace(node, is_highlighted=lit, is_dimmed=dim))
    return decorated


def highlight_edges(edges: Sequence[GraphEdge], spotlight: Spotlight) -> list[GraphEdge]:
    decorated = []
    for edge in edges:
        lit, dim = spotlight.edge_flags(edge.id)
        decorated.append(replace(edge, is_highlighted=lit, is_dimmed=dim))
    return decorated
