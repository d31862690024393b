"""
Core module - Graph snapshot model, settings, bounds and subflow virtualization.

This module provides the building blocks the canvas queries read:
- Graph: Node, edge, group and subflow snapshot data structures
- Data Types: Port data types
- Settings: Layout and interaction constants
- Bounds: Bounding boxes for nodes, groups and subflows
- Subflow: Edge rerouting and node filtering for collapsed subflows
"""

from flow_canvas.core.data_types import DataType

from flow_canvas.core.graph import (
    CanvasSize,
    Edge,
    FlowGraph,
    Node,
    NodeGroup,
    Point2D,
    PortDefinition,
    Size2D,
    Subflow,
    SubflowPortMapping,
    Viewport,
    new_id,
)

from flow_canvas.core.settings import (
    DEFAULT_SETTINGS,
    CanvasSettings,
    GroupStyle,
    HitTestSettings,
    NodeStyle,
    SnapSettings,
    SubflowStyle,
)

from flow_canvas.core.bounds import (
    BoundsMinMax,
    BoundsRect,
    bounds_to_rect,
    calculate_bounds_min_max,
    calculate_bounds_rect,
    calculate_collapsed_size,
    expand_bounds,
    expand_bounds_asymmetric,
    get_bounds_center,
    get_group_bounds,
    get_subflow_bounds,
    get_subflow_nodes_bounds,
    is_node_in_selection_box,
    merge_bounds,
)

from flow_canvas.core.subflow import (
    ClassifiedEdges,
    ResolvedEdge,
    ResolvedEdgeEndpoint,
    SubflowError,
    classify_edges,
    collapse_subflow,
    create_subflow,
    delete_subflow,
    expand_subflow,
    find_overlapping_memberships,
    get_visible_nodes,
    resolve_edge_endpoints,
    toggle_subflow,
)


__all__ = [
    # data_types.py
    "DataType",
    # graph.py
    "CanvasSize",
    "Edge",
    "FlowGraph",
    "Node",
    "NodeGroup",
    "Point2D",
    "PortDefinition",
    "Size2D",
    "Subflow",
    "SubflowPortMapping",
    "Viewport",
    "new_id",
    # settings.py
    "DEFAULT_SETTINGS",
    "CanvasSettings",
    "GroupStyle",
    "HitTestSettings",
    "NodeStyle",
    "SnapSettings",
    "SubflowStyle",
    # bounds.py
    "BoundsMinMax",
    "BoundsRect",
    "bounds_to_rect",
    "calculate_bounds_min_max",
    "calculate_bounds_rect",
    "calculate_collapsed_size",
    "expand_bounds",
    "expand_bounds_asymmetric",
    "get_bounds_center",
    "get_group_bounds",
    "get_subflow_bounds",
    "get_subflow_nodes_bounds",
    "is_node_in_selection_box",
    "merge_bounds",
    # subflow.py
    "ClassifiedEdges",
    "ResolvedEdge",
    "ResolvedEdgeEndpoint",
    "SubflowError",
    "classify_edges",
    "collapse_subflow",
    "create_subflow",
    "delete_subflow",
    "expand_subflow",
    "find_overlapping_memberships",
    "get_visible_nodes",
    "resolve_edge_endpoints",
    "toggle_subflow",
]
