"""
Subflow Virtualization - Rewrites the visible graph around collapsed subflows.

This module provides:
- classify_edges: Split edges into internal/incoming/outgoing for a node set
- resolve_edge_endpoints: Reroute edges through a collapsed subflow's
  exposed ports, or hide them when they cannot be drawn
- get_visible_nodes: Filter out nodes hidden inside collapsed subflows
- Subflow lifecycle helpers (create, collapse, expand, delete)

Collapsing is purely a view filter: member nodes and edges are never
removed, only hidden or rerouted when the renderable graph is computed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from flow_canvas.core.bounds import calculate_bounds_min_max, calculate_collapsed_size
from flow_canvas.core.data_types import DataType
from flow_canvas.core.graph import (
    Edge,
    Node,
    Point2D,
    Subflow,
    SubflowPortMapping,
    new_id,
)
from flow_canvas.core.settings import SubflowStyle


logger = logging.getLogger(__name__)


class SubflowError(ValueError):
    """Raised when a subflow cannot be created from the given nodes."""


@dataclass
class ClassifiedEdges:
    """Edges classified relative to a set of node IDs."""
    internal: list[Edge] = field(default_factory=list)
    incoming: list[Edge] = field(default_factory=list)
    outgoing: list[Edge] = field(default_factory=list)


@dataclass(frozen=True)
class ResolvedEdgeEndpoint:
    """
    One end of an edge as it should be drawn.

    When is_subflow_port is True, node_id is the collapsed subflow's ID
    and port_id is one of its exposed ports.
    """
    node_id: str
    port_id: str
    is_subflow_port: bool = False
    subflow_id: str | None = None


@dataclass(frozen=True)
class ResolvedEdge:
    """An edge together with its drawable endpoints."""
    edge: Edge
    source: ResolvedEdgeEndpoint
    target: ResolvedEdgeEndpoint
    hidden: bool = False


def classify_edges(edges: list[Edge], node_ids: list[str] | set[str]) -> ClassifiedEdges:
    """
    Classify edges relative to a node set.

    - internal: both endpoints in the set
    - incoming: only the target in the set
    - outgoing: only the source in the set

    Edges touching neither endpoint are left out of all three buckets.
    """
    node_id_set = set(node_ids)
    result = ClassifiedEdges()

    for edge in edges:
        source_in_set = edge.source in node_id_set
        target_in_set = edge.target in node_id_set

        if source_in_set and target_in_set:
            result.internal.append(edge)
        elif target_in_set:
            result.incoming.append(edge)
        elif source_in_set:
            result.outgoing.append(edge)

    return result


def _collapsed_owner_index(subflows: list[Subflow]) -> dict[str, Subflow]:
    """Map each node in a collapsed subflow to that subflow (last write wins)."""
    owner: dict[str, Subflow] = {}
    for subflow in subflows:
        if subflow.collapsed:
            for node_id in subflow.node_ids:
                previous = owner.get(node_id)
                if previous is not None and previous.id != subflow.id:
                    logger.debug(
                        "Node %s is in collapsed subflows %s and %s, using the last one",
                        node_id, previous.id, subflow.id,
                    )
                owner[node_id] = subflow
    return owner


def find_overlapping_memberships(subflows: list[Subflow]) -> dict[str, list[str]]:
    """
    Find nodes claimed by more than one collapsed subflow.

    Returns a mapping of node ID to the IDs of every collapsed subflow
    that lists it. Edge resolution assigns such a node to the last one.
    """
    claims: dict[str, list[str]] = {}
    for subflow in subflows:
        if subflow.collapsed:
            for node_id in dict.fromkeys(subflow.node_ids):
                claims.setdefault(node_id, []).append(subflow.id)
    overlaps = {node_id: ids for node_id, ids in claims.items() if len(ids) > 1}
    if overlaps:
        logger.warning(
            "Nodes belong to several collapsed subflows, using the last one: %s",
            overlaps,
        )
    return overlaps


def _raw_endpoint(node_id: str, port_id: str) -> ResolvedEdgeEndpoint:
    return ResolvedEdgeEndpoint(node_id=node_id, port_id=port_id)


def _exposed_endpoint(subflow: Subflow, mapping: SubflowPortMapping) -> ResolvedEdgeEndpoint:
    return ResolvedEdgeEndpoint(
        node_id=subflow.id,
        port_id=mapping.exposed_port_id,
        is_subflow_port=True,
        subflow_id=subflow.id,
    )


def resolve_edge_endpoints(edges: list[Edge], subflows: list[Subflow]) -> list[ResolvedEdge]:
    """
    Resolve where each edge should be drawn.

    - Both ends inside the same collapsed subflow: hidden, raw endpoints.
    - An end inside a collapsed subflow is rerouted to the exposed port
      mapped to its internal port (output mappings for the source, input
      mappings for the target).
    - An end inside a collapsed subflow with no matching mapping hides the
      whole edge; no line is ever drawn into a collapsed box's interior.

    Runs once per frame, so overlapping membership is only logged at
    DEBUG here; find_overlapping_memberships reports it as a warning.

    Returns one ResolvedEdge per input edge, in input order.
    """
    owner = _collapsed_owner_index(subflows)

    result: list[ResolvedEdge] = []

    for edge in edges:
        source_subflow = owner.get(edge.source)
        target_subflow = owner.get(edge.target)
        raw_source = _raw_endpoint(edge.source, edge.source_port)
        raw_target = _raw_endpoint(edge.target, edge.target_port)

        if (source_subflow is not None and target_subflow is not None
                and source_subflow.id == target_subflow.id):
            result.append(ResolvedEdge(edge, raw_source, raw_target, hidden=True))
            continue

        source = raw_source
        if source_subflow is not None:
            mapping = source_subflow.find_mapping(edge.source, edge.source_port, is_output=True)
            if mapping is None:
                logger.debug(
                    "Hiding edge %s: port %s.%s is not exposed by subflow %s",
                    edge.id, edge.source, edge.source_port, source_subflow.id,
                )
                result.append(ResolvedEdge(edge, raw_source, raw_target, hidden=True))
                continue
            source = _exposed_endpoint(source_subflow, mapping)

        target = raw_target
        if target_subflow is not None:
            mapping = target_subflow.find_mapping(edge.target, edge.target_port, is_output=False)
            if mapping is None:
                logger.debug(
                    "Hiding edge %s: port %s.%s is not exposed by subflow %s",
                    edge.id, edge.target, edge.target_port, target_subflow.id,
                )
                result.append(ResolvedEdge(edge, source, raw_target, hidden=True))
                continue
            target = _exposed_endpoint(target_subflow, mapping)

        result.append(ResolvedEdge(edge, source, target, hidden=False))

    return result


def get_visible_nodes(nodes: list[Node], subflows: list[Subflow]) -> list[Node]:
    """Get the nodes that are not hidden inside any collapsed subflow."""
    hidden_ids: set[str] = set()
    for subflow in subflows:
        if subflow.collapsed:
            hidden_ids.update(subflow.node_ids)
    return [node for node in nodes if node.id not in hidden_ids]


# --- Lifecycle ---

def _build_mappings(
    edges: list[Edge],
    node_map: dict[str, Node],
    is_output: bool,
) -> list[SubflowPortMapping]:
    """Expose each distinct internal port that a boundary edge touches."""
    mappings: list[SubflowPortMapping] = []
    seen: set[tuple[str, str]] = set()
    prefix = "out" if is_output else "in"

    for edge in edges:
        if is_output:
            key = (edge.source, edge.source_port)
        else:
            key = (edge.target, edge.target_port)
        if key in seen:
            continue
        seen.add(key)

        node_id, port_id = key
        node = node_map.get(node_id)
        port = node.find_port(port_id, is_output) if node else None
        mappings.append(SubflowPortMapping(
            exposed_port_id=f"{prefix}_{len(mappings)}",
            exposed_port_name=port.name if port else port_id,
            internal_node_id=node_id,
            internal_port_id=port_id,
            data_type=port.data_type if port else DataType.ANY,
            is_output=is_output,
        ))

    return mappings


def create_subflow(
    name: str,
    node_ids: list[str],
    nodes: list[Node],
    edges: list[Edge],
    subflow_id: str | None = None,
) -> Subflow:
    """
    Group existing nodes into a new, expanded subflow.

    Edges between members become internal edges. Every member port
    reached by an edge from outside becomes an exposed input, and every
    member port feeding an edge to the outside becomes an exposed output.

    Raises:
        SubflowError: If fewer than two of the given nodes exist.
    """
    node_map = {node.id: node for node in nodes}
    member_ids = [nid for nid in dict.fromkeys(node_ids) if nid in node_map]
    if len(member_ids) < 2:
        raise SubflowError("A subflow needs at least two existing nodes")

    classified = classify_edges(edges, member_ids)
    subflow = Subflow(
        id=subflow_id or new_id("subflow"),
        name=name,
        node_ids=member_ids,
        internal_edge_ids=[edge.id for edge in classified.internal],
        input_mappings=_build_mappings(classified.incoming, node_map, is_output=False),
        output_mappings=_build_mappings(classified.outgoing, node_map, is_output=True),
    )
    logger.info(
        "Created subflow %s with %d nodes, %d inputs, %d outputs",
        subflow.id, len(member_ids),
        len(subflow.input_mappings), len(subflow.output_mappings),
    )
    return subflow


def _copy_subflow(subflow: Subflow, **changes: Any) -> Subflow:
    """Copy a subflow without sharing any mutable part with the original."""
    position = changes.pop("collapsed_position", subflow.collapsed_position)
    size = changes.pop("collapsed_size", subflow.collapsed_size)
    return replace(
        subflow,
        node_ids=list(subflow.node_ids),
        internal_edge_ids=list(subflow.internal_edge_ids),
        input_mappings=[replace(m) for m in subflow.input_mappings],
        output_mappings=[replace(m) for m in subflow.output_mappings],
        collapsed_position=replace(position) if position is not None else None,
        collapsed_size=replace(size) if size is not None else None,
        **changes,
    )


def collapse_subflow(
    subflow: Subflow,
    nodes: list[Node],
    style: SubflowStyle | None = None,
) -> Subflow:
    """
    Return a collapsed copy of a subflow.

    The first collapse places the box at the top-left of the member
    nodes and fixes its size; later collapses reuse the stored values.
    """
    if subflow.collapsed:
        return _copy_subflow(subflow)

    position = subflow.collapsed_position
    if position is None:
        members = set(subflow.node_ids)
        bounds = calculate_bounds_min_max(node for node in nodes if node.id in members)
        position = Point2D(bounds.min_x, bounds.min_y) if bounds else Point2D()

    size = subflow.collapsed_size or calculate_collapsed_size(subflow, style)

    logger.info("Collapsing subflow %s", subflow.id)
    return _copy_subflow(
        subflow,
        collapsed=True,
        collapsed_position=position,
        collapsed_size=size,
    )


def expand_subflow(subflow: Subflow) -> Subflow:
    """Return an expanded copy of a subflow, keeping its collapsed geometry."""
    if subflow.collapsed:
        logger.info("Expanding subflow %s", subflow.id)
    return _copy_subflow(subflow, collapsed=False)


def toggle_subflow(
    subflow: Subflow,
    nodes: list[Node],
    style: SubflowStyle | None = None,
) -> Subflow:
    if subflow.collapsed:
        return expand_subflow(subflow)
    return collapse_subflow(subflow, nodes, style)


def delete_subflow(subflows: list[Subflow], subflow_id: str) -> list[Subflow]:
    """Remove a subflow record. Member nodes and edges are untouched."""
    return [subflow for subflow in subflows if subflow.id != subflow_id]
