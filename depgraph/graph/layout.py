"""Hierarchical (layered) graph layout.

A layout engine is a one-shot strategy: it runs once per fetched snapshot
and assigns every node a 2D position.  Hover and timeline changes only
touch highlight flags, never positions.

The default :class:`LayeredLayout` follows the classic Sugiyama pipeline
on a ``networkx.DiGraph``:

1. Drop self-loops and reverse DFS back edges so the graph is acyclic.
2. Rank nodes by longest path from a source (topological generations).
3. Order nodes inside each rank with a few barycenter sweeps.
4. Place ranks ``rank_sep`` apart along the flow axis and nodes
   ``node_sep`` apart across it, centring every rank on a shared midline.

Engine coordinates are node centres; :func:`layout_snapshot` shifts them
by :data:`ANCHOR_OFFSET` to the renderer's top-left anchor convention.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Iterable, Sequence

import networkx as nx

from depgraph.graph.models import GraphEdge, GraphNode, GraphSnapshot, Position

NODE_WIDTH = 220
NODE_HEIGHT = 100
NODE_SEP = 20
RANK_SEP = 200

ANCHOR_OFFSET = Position(x=100, y=40)

DIRECTIONS = ("LR", "RL", "TB", "BT")


def validate_direction(direction: str) -> str:
    if direction not in DIRECTIONS:
        raise ValueError(
            f"Unknown layout direction {direction!r}; expected one of {', '.join(DIRECTIONS)}"
        )
    return direction


# ---------------------------------------------------------------------------
# Strategy interface
# ---------------------------------------------------------------------------

class LayoutEngine(ABC):
    """Assigns positions to nodes.  Swap in any implementation."""

    @abstractmethod
    def layout(
        self,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
        direction: str = "LR",
    ) -> list[GraphNode]:
        """Return *nodes* in input order with engine-space centre positions."""


# ---------------------------------------------------------------------------
# Layered (Sugiyama-style) engine
# ---------------------------------------------------------------------------

class LayeredLayout(LayoutEngine):
    """Rank-based layout that tolerates cycles and self-loops."""

    def __init__(
        self,
        node_width: float = NODE_WIDTH,
        node_height: float = NODE_HEIGHT,
        node_sep: float = NODE_SEP,
        rank_sep: float = RANK_SEP,
        sweeps: int = 4,
    ) -> None:
        self.node_width = node_width
        self.node_height = node_height
        self.node_sep = node_sep
        self.rank_sep = rank_sep
        self.sweeps = sweeps

    def layout(
        self,
        nodes: Sequence[GraphNode],
        edges: Sequence[GraphEdge],
        direction: str = "LR",
    ) -> list[GraphNode]:
        validate_direction(direction)
        if not nodes:
            return []

        graph = _acyclic_graph((n.id for n in nodes), edges)
        layers = [list(generation) for generation in nx.topological_generations(graph)]
        layers = [_stable_order(layer, nodes) for layer in layers]
        self._reduce_crossings(graph, layers)

        centres = self._place(layers, direction)
        return [replace(node, position=centres[node.id]) for node in nodes]

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def _reduce_crossings(self, graph: nx.DiGraph, layers: list[list[str]]) -> None:
        """Barycenter heuristic, alternating downward and upward sweeps."""
        for sweep in range(self.sweeps):
            downward = sweep % 2 == 0
            indices = range(1, len(layers)) if downward else range(len(layers) - 2, -1, -1)
            for i in indices:
                slot = _slots(layers)
                neighbours = graph.predecessors if downward else graph.successors

                def barycenter(node_id: str) -> float:
                    adjacent = [slot[n] for n in neighbours(node_id)]
                    if not adjacent:
                        return float(slot[node_id])
                    return sum(adjacent) / len(adjacent)

                layers[i].sort(key=barycenter)

    # ------------------------------------------------------------------
    # Coordinates
    # ------------------------------------------------------------------

    def _place(self, layers: list[list[str]], direction: str) -> dict[str, Position]:
        horizontal = direction in ("LR", "RL")
        # Footprint along the flow axis and across it
        along = self.node_width if horizontal else self.node_height
        across = self.node_height if horizontal else self.node_width

        def extent(layer: list[str]) -> float:
            return len(layer) * across + (len(layer) - 1) * self.node_sep

        widest = max(extent(layer) for layer in layers)
        last_rank = len(layers) - 1

        centres: dict[str, Position] = {}
        for rank, layer in enumerate(layers):
            if direction in ("RL", "BT"):
                rank = last_rank - rank
            flow = rank * (along + self.rank_sep) + along / 2
            start = (widest - extent(layer)) / 2
            for i, node_id in enumerate(layer):
                cross = start + i * (across + self.node_sep) + across / 2
                centres[node_id] = (
                    Position(x=flow, y=cross) if horizontal else Position(x=cross, y=flow)
                )
        return centres


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _acyclic_graph(node_ids: Iterable[str], edges: Sequence[GraphEdge]) -> nx.DiGraph:
    """Build a DAG over *node_ids*, reversing the back edges of a DFS.

    Self-loops and edges touching unknown ids are left out of the ranking
    graph altogether.
    """
    graph = nx.DiGraph()
    graph.add_nodes_from(node_ids)
    for edge in edges:
        if edge.source == edge.target:
            continue
        if edge.source in graph and edge.target in graph:
            graph.add_edge(edge.source, edge.target)

    back_edges: list[tuple[str, str]] = []
    on_stack: set[str] = set()
    for u, v, kind in nx.dfs_labeled_edges(graph):
        if kind == "forward":
            on_stack.add(v)
        elif kind == "reverse":
            on_stack.discard(v)
        elif kind == "nontree" and v in on_stack:
            back_edges.append((u, v))

    for u, v in back_edges:
        graph.remove_edge(u, v)
        graph.add_edge(v, u)
    return graph


def _stable_order(layer: list[str], nodes: Sequence[GraphNode]) -> list[str]:
    order = {node.id: i for i, node in enumerate(nodes)}
    return sorted(layer, key=order.__getitem__)


def _slots(layers: list[list[str]]) -> dict[str, int]:
    return {node_id: i for layer in layers for i, node_id in enumerate(layer)}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def layout_snapshot(
    snapshot: GraphSnapshot,
    engine: LayoutEngine | None = None,
    direction: str = "LR",
) -> GraphSnapshot:
    """Lay out *snapshot* and shift engine centres to top-left anchors.

    Returns:
        A new :class:`GraphSnapshot`; the input is not modified.
    """
    engine = engine or LayeredLayout()
    positioned = engine.layout(snapshot.nodes, snapshot.edges, direction)
    anchored = [
        replace(
            node,
            position=Position(
                x=node.position.x - ANCHOR_OFFSET.x,
                y=node.position.y - ANCHOR_OFFSET.y,
            ),
        )
        for node in positioned
    ]
    return GraphSnapshot(nodes=anchored, edges=list(snapshot.edges))
