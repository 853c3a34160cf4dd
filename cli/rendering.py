"""Utilities for rendering a decorated graph view in the CLI."""

from __future__ import annotations

import json

from depgraph.graph.models import GraphNode, RiskLevel, TimelineStatus
from depgraph.graph.view import GraphView


def _get_icon(kind: str) -> str:
    icons = {
        "Field": "🔷",
        "Apex": "⚙️",
        "Flow": "🌊",
    }
    return icons.get(kind, "📦")


def _node_line(node: GraphNode) -> str:
    marks = []
    if node.risk is RiskLevel.CRITICAL:
        marks.append("CRITICAL")
    if node.timeline_status is TimelineStatus.NEW:
        marks.append("new")
    if node.is_highlighted:
        marks.append("*")
    suffix = f"  ({', '.join(marks)})" if marks else ""
    text = f"{_get_icon(node.kind.value)} {node.label} [{node.kind.value}]{suffix}"
    # Dimmed nodes are greyed in the UI; bracket them here
    return f"({text})" if node.is_dimmed else text


def render_list(view: GraphView) -> str:
    """Render nodes and their outgoing connections as a flat list."""
    if not view.nodes:
        return "\n".join(view.hint or ())

    labels = {n.id: n.label for n in view.nodes}
    lines = []
    for node in view.nodes:
        lines.append(f"  {_node_line(node)}")
        for edge in view.edges:
            if edge.source == node.id:
                rel = edge.relation_type or "→"
                target = labels.get(edge.target, edge.target)
                lines.append(f"      --[{rel}]--> {target}")
    lines.append("")
    lines.append(f"{view.summary}  ·  Timeline: {view.timeline.label}")
    return "\n".join(lines)


def render_tree(view: GraphView) -> str:
    """Render the view as an ASCII forest rooted at nodes with no inbound edges.

    Nodes already printed are shown once; revisits (shared dependencies or
    cycles) are cut short with a ``[Ref]`` marker.
    """
    if not view.nodes:
        return "\n".join(view.hint or ())

    node_map = {n.id: n for n in view.nodes}
    adj: dict[str, list[tuple[str, str]]] = {}
    inbound: set[str] = set()
    for e in view.edges:
        if e.source == e.target or e.target not in node_map:
            continue
        adj.setdefault(e.source, []).append((e.target, e.relation_type or "→"))
        inbound.add(e.target)

    lines: list[str] = []
    visited: set[str] = set()

    def _render_node(node_id: str, relation: str, prefix: str, is_last: bool, is_root: bool) -> None:
        node = node_map[node_id]
        if is_root:
            lines.append(_node_line(node))
            child_prefix = ""
        else:
            connector = "└── " if is_last else "├── "
            if node_id in visited:
                lines.append(f"{prefix}{connector}[{relation}] [Ref] {node.label}")
                return
            lines.append(f"{prefix}{connector}[{relation}] {_node_line(node)}")
            child_prefix = prefix + ("    " if is_last else "│   ")
        visited.add(node_id)

        children = adj.get(node_id, [])
        for i, (child_id, rel) in enumerate(children):
            _render_node(child_id, rel, child_prefix, i == len(children) - 1, False)

    roots = [n.id for n in view.nodes if n.id not in inbound]
    for root_id in roots:
        _render_node(root_id, "", "", True, True)
    # Whatever is left sits only on cycles
    for node in view.nodes:
        if node.id not in visited:
            _render_node(node.id, "", "", True, True)

    lines.append("")
    lines.append(f"{view.summary}  ·  Timeline: {view.timeline.label}")
    return "\n".join(lines)


def render_json(view: GraphView) -> str:
    return json.dumps(view.to_dict(), indent=2, ensure_ascii=False)
