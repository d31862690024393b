"""
Canvas interaction components.

This package provides the pointer-facing geometry of the node editor:
viewport transforms, hit-testing, drag snapping and the canvas theme.
"""

from flow_canvas.canvas.viewport import (
    cull_edges_by_viewport,
    cull_nodes_by_viewport,
    get_viewport_bounds,
    is_node_in_viewport,
    pan_by,
    screen_to_world,
    world_to_screen,
    zoom_at,
)
from flow_canvas.canvas.hit_test import (
    PointerTarget,
    PointerTargetKind,
    PortHitResult,
    ResizeHandle,
    ResizeHandleHit,
    SubflowPortHitResult,
    distance_to_bezier,
    get_collapsed_subflow_port_position,
    get_port_position,
    hit_test_collapsed_subflow,
    hit_test_edge,
    hit_test_group_header,
    hit_test_groups,
    hit_test_node,
    hit_test_port,
    hit_test_resize_handle,
    hit_test_resolved_edge,
    hit_test_subflow_header,
    hit_test_subflow_port,
    pointer_highlight,
    resolve_pointer,
)
from flow_canvas.canvas.snap import (
    SnapLine,
    SnapResult,
    apply_snap,
    calculate_snap,
    snap_to_grid,
)
from flow_canvas.canvas.theme import (
    DARK_THEME,
    LIGHT_THEME,
    CanvasTheme,
    get_data_type_color,
    get_theme,
    hex_to_rgba,
)

__all__ = [
    "cull_edges_by_viewport",
    "cull_nodes_by_viewport",
    "get_viewport_bounds",
    "is_node_in_viewport",
    "pan_by",
    "screen_to_world",
    "world_to_screen",
    "zoom_at",
    "PointerTarget",
    "PointerTargetKind",
    "PortHitResult",
    "ResizeHandle",
    "ResizeHandleHit",
    "SubflowPortHitResult",
    "distance_to_bezier",
    "get_collapsed_subflow_port_position",
    "get_port_position",
    "hit_test_collapsed_subflow",
    "hit_test_edge",
    "hit_test_group_header",
    "hit_test_groups",
    "hit_test_node",
    "hit_test_port",
    "hit_test_resize_handle",
    "hit_test_resolved_edge",
    "hit_test_subflow_header",
    "hit_test_subflow_port",
    "pointer_highlight",
    "resolve_pointer",
    "SnapLine",
    "SnapResult",
    "apply_snap",
    "calculate_snap",
    "snap_to_grid",
    "DARK_THEME",
    "LIGHT_THEME",
    "CanvasTheme",
    "get_data_type_color",
    "get_theme",
    "hex_to_rgba",
]
