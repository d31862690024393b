"""
Viewport Transform - Mapping between world and screen coordinates.

The viewport stores the world point shown at the centre of the canvas
and a zoom factor. All functions here return new values and never
modify the viewport they are given.
"""

from __future__ import annotations

from flow_canvas.core.bounds import BoundsMinMax
from flow_canvas.core.graph import CanvasSize, Edge, Node, Point2D, Viewport
from flow_canvas.core.settings import DEFAULT_SETTINGS


def world_to_screen(world_pos: Point2D, viewport: Viewport, canvas_size: CanvasSize) -> Point2D:
    """Convert world coordinates to screen coordinates (for drawing)."""
    return Point2D(
        (world_pos.x - viewport.x) * viewport.zoom + canvas_size.width / 2,
        (world_pos.y - viewport.y) * viewport.zoom + canvas_size.height / 2,
    )


def screen_to_world(screen_pos: Point2D, viewport: Viewport, canvas_size: CanvasSize) -> Point2D:
    """Convert screen coordinates to world coordinates (for pointer input)."""
    return Point2D(
        (screen_pos.x - canvas_size.width / 2) / viewport.zoom + viewport.x,
        (screen_pos.y - canvas_size.height / 2) / viewport.zoom + viewport.y,
    )


def get_viewport_bounds(
    viewport: Viewport,
    canvas_size: CanvasSize,
    margin: float = 0,
) -> BoundsMinMax:
    """
    Get the world-space area currently on screen.

    A positive margin grows the area so that culling does not make
    nodes pop in at the very edge of the screen.
    """
    half_width = (canvas_size.width / 2) / viewport.zoom
    half_height = (canvas_size.height / 2) / viewport.zoom

    return BoundsMinMax(
        min_x=viewport.x - half_width - margin,
        min_y=viewport.y - half_height - margin,
        max_x=viewport.x + half_width + margin,
        max_y=viewport.y + half_height + margin,
    )


def zoom_at(
    viewport: Viewport,
    canvas_size: CanvasSize,
    screen_pos: Point2D,
    factor: float,
    min_zoom: float = DEFAULT_SETTINGS.min_zoom,
    max_zoom: float = DEFAULT_SETTINGS.max_zoom,
) -> Viewport:
    """Zoom centred on a screen point, keeping the world point under it fixed."""
    # World position under the cursor before zooming
    anchor = screen_to_world(screen_pos, viewport, canvas_size)

    zoom = max(min_zoom, min(max_zoom, viewport.zoom * factor))

    # Move the centre so the anchor maps back onto the same screen point
    return Viewport(
        x=anchor.x - (screen_pos.x - canvas_size.width / 2) / zoom,
        y=anchor.y - (screen_pos.y - canvas_size.height / 2) / zoom,
        zoom=zoom,
    )


def pan_by(viewport: Viewport, screen_dx: float, screen_dy: float) -> Viewport:
    """Pan by a screen-space drag delta (content follows the pointer)."""
    return Viewport(
        x=viewport.x - screen_dx / viewport.zoom,
        y=viewport.y - screen_dy / viewport.zoom,
        zoom=viewport.zoom,
    )


# --- Culling ---

def is_node_in_viewport(node: Node, bounds: BoundsMinMax) -> bool:
    """AABB overlap between a node and the visible area."""
    return not (
        node.right < bounds.min_x
        or node.left > bounds.max_x
        or node.bottom < bounds.min_y
        or node.top > bounds.max_y
    )


def cull_nodes_by_viewport(
    nodes: list[Node],
    viewport: Viewport,
    canvas_size: CanvasSize,
    margin: float = DEFAULT_SETTINGS.cull_margin,
) -> list[Node]:
    """Keep only the nodes that are (nearly) on screen."""
    bounds = get_viewport_bounds(viewport, canvas_size, margin)
    return [node for node in nodes if is_node_in_viewport(node, bounds)]


def cull_edges_by_viewport(
    edges: list[Edge],
    nodes: list[Node],
    viewport: Viewport,
    canvas_size: CanvasSize,
    margin: float = DEFAULT_SETTINGS.cull_margin,
) -> list[Edge]:
    """
    Keep only the edges that may be on screen.

    An edge is kept when either endpoint node is in view. Edges whose
    nodes are missing from the snapshot are dropped.
    """
    bounds = get_viewport_bounds(viewport, canvas_size, margin)
    node_map = {node.id: node for node in nodes}
    result: list[Edge] = []

    for edge in edges:
        source = node_map.get(edge.source)
        target = node_map.get(edge.target)
        if source is None or target is None:
            continue
        if is_node_in_viewport(source, bounds) or is_node_in_viewport(target, bounds):
            result.append(edge)

    return result
