"""Unit tests for depgraph.graph.spotlight."""

from __future__ import annotations

from depgraph.graph.models import GraphEdge, GraphNode
from depgraph.graph.spotlight import compute_spotlight, highlight_edges, highlight_nodes

EDGES = [
    GraphEdge(id="e-0", source="field", target="apex"),
    GraphEdge(id="e-1", source="apex", target="flow"),
    GraphEdge(id="e-2", source="other", target="flow"),
]
NODES = [GraphNode(id=n, label=n) for n in ("field", "apex", "flow", "other", "lonely")]


def test_no_hover_is_neutral():
    spot = compute_spotlight(None, EDGES)
    nodes = highlight_nodes(NODES, spot)
    edges = highlight_edges(EDGES, spot)
    assert all(not n.is_highlighted and not n.is_dimmed for n in nodes)
    assert all(not e.is_highlighted and not e.is_dimmed for e in edges)


def test_neighbours_in_both_directions():
    spot = compute_spotlight("apex", EDGES)
    assert spot.node_ids == {"apex", "field", "flow"}
    assert spot.edge_ids == {"e-0", "e-1"}


def test_depth_is_exactly_one():
    spot = compute_spotlight("field", EDGES)
    assert "flow" not in spot.node_ids
    assert spot.node_ids == {"field", "apex"}


def test_symmetry_for_every_edge():
    for edge in EDGES:
        from_source = compute_spotlight(edge.source, EDGES)
        from_target = compute_spotlight(edge.target, EDGES)
        assert edge.target in from_source.node_ids
        assert edge.source in from_target.node_ids
        assert edge.id in from_source.edge_ids
        assert edge.id in from_target.edge_ids


def test_flags_highlight_connected_and_dim_the_rest():
    spot = compute_spotlight("apex", EDGES)
    nodes = {n.id: n for n in highlight_nodes(NODES, spot)}
    edges = {e.id: e for e in highlight_edges(EDGES, spot)}

    assert nodes["apex"].is_highlighted and not nodes["apex"].is_dimmed
    assert nodes["field"].is_highlighted
    assert nodes["other"].is_dimmed and not nodes["other"].is_highlighted
    assert nodes["lonely"].is_dimmed
    assert edges["e-1"].is_highlighted
    assert edges["e-2"].is_dimmed


def test_self_loop_counts_once():
    spot = compute_spotlight("a", [GraphEdge(id="e-0", source="a", target="a")])
    assert spot.node_ids == {"a"}
    assert spot.edge_ids == {"e-0"}


def test_isolated_node_highlights_only_itself():
    spot = compute_spotlight("lonely", EDGES)
    assert spot.node_ids == {"lonely"}
    assert spot.edge_ids == frozenset()


def test_inputs_are_not_mutated():
    spot = compute_spotlight("apex", EDGES)
    highlight_nodes(NODES, spot)
    highlight_edges(EDGES, spot)
    assert not any(n.is_highlighted or n.is_dimmed for n in NODES)
    assert not any(e.is_highlighted or e.is_dimmed for e in EDGES)
