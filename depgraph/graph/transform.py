"""Map graph API JSON onto the typed graph model.

This is a structural mapping, not a validator: edges whose ``source`` or
``target`` match no node are passed through untouched.
"""

from __future__ import annotations

from typing import Any, Mapping

from depgraph.graph.models import GraphEdge, GraphNode, GraphSnapshot, NodeKind, RiskLevel

_KINDS = {kind.value: kind for kind in NodeKind}
_RISKS = {risk.value: risk for risk in RiskLevel}


# ---------------------------------------------------------------------------
# Classification coercion
# ---------------------------------------------------------------------------

def coerce_kind(value: Any) -> NodeKind:
    """Return the matching :class:`NodeKind`, or ``Flow`` for anything else."""
    if isinstance(value, str):
        return _KINDS.get(value, NodeKind.FLOW)
    return NodeKind.FLOW


def coerce_risk(value: Any) -> RiskLevel:
    """Return the matching :class:`RiskLevel`, or ``Safe`` for anything else."""
    if isinstance(value, str):
        return _RISKS.get(value, RiskLevel.SAFE)
    return RiskLevel.SAFE


# ---------------------------------------------------------------------------
# Record transforms
# ---------------------------------------------------------------------------

def transform_node(record: Mapping[str, Any]) -> GraphNode:
    """Build a :class:`GraphNode` from an API node record.

    Raises:
        KeyError: If the record has no ``id``.
    """
    node_id = str(record["id"])
    label = record.get("label")
    created_at = record.get("createdAt")
    return GraphNode(
        id=node_id,
        label=str(label) if label is not None else node_id,
        kind=coerce_kind(record.get("type")),
        risk=coerce_risk(record.get("risk")),
        created_at=created_at if isinstance(created_at, str) else None,
    )


def transform_edge(record: Mapping[str, Any], index: int) -> GraphEdge:
    """Build a :class:`GraphEdge` whose id is ``e-<index>``.

    The id is positional, so the same logical edge gets a different id when
    the graph API returns edges in a different order.

    Raises:
        KeyError: If the record has no ``source`` or ``target``.
    """
    relation = record.get("relationType")
    return GraphEdge(
        id=f"e-{index}",
        source=str(record["source"]),
        target=str(record["target"]),
        relation_type=str(relation) if relation else None,
    )


def transform_payload(payload: Any) -> GraphSnapshot:
    """Transform a whole ``{nodes, edges}`` response body.

    Missing or non-list ``nodes`` / ``edges`` are read as empty, and records
    that are not objects or lack their identifying keys are skipped, so one
    bad response never takes the view down.
    """
    if not isinstance(payload, Mapping):
        return GraphSnapshot()

    raw_nodes = payload.get("nodes")
    raw_edges = payload.get("edges")
    if not isinstance(raw_nodes, list):
        raw_nodes = []
    if not isinstance(raw_edges, list):
        raw_edges = []

    nodes: list[GraphNode] = []
    for record in raw_nodes:
        if isinstance(record, Mapping) and record.get("id") is not None:
            nodes.append(transform_node(record))

    edges: list[GraphEdge] = []
    for index, record in enumerate(raw_edges):
        if (
            isinstance(record, Mapping)
            and record.get("source") is not None
            and record.get("target") is not None
        ):
            edges.append(transform_edge(record, index))

    return GraphSnapshot(nodes=nodes, edges=edges)
