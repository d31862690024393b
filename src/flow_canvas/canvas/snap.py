"""
Snap Guides - Alignment snapping while dragging nodes.

The dragged selection is treated as one bounding box. Its left, centre
and right edges are compared with those of every other node (and
likewise top, centre, bottom), and the closest match within the
threshold wins on each axis independently.

The threshold is in world units and does not scale with zoom.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from flow_canvas.core.graph import Node, Point2D
from flow_canvas.core.settings import SnapSettings


class SnapAnchor(Enum):
    """Which edge of the dragged box a candidate aligns."""
    START = "start"     # left / top
    CENTER = "center"
    END = "end"         # right / bottom


@dataclass(frozen=True)
class SnapLine:
    """A guide line segment in world coordinates."""
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass
class SnapResult:
    """
    Snapped anchor position per axis.

    None on an axis means no snap: use the raw (or grid) position.
    """
    x: float | None = None
    y: float | None = None
    lines: list[SnapLine] = field(default_factory=list)


@dataclass(frozen=True)
class _Candidate:
    value: float        # the other node's edge coordinate
    diff: float
    anchor: SnapAnchor


def _best_candidate(
    dragged: tuple[float, float, float],
    others: list[tuple[float, float, float]],
    threshold: float,
) -> _Candidate | None:
    """
    Pick the closest alignment on one axis.

    `dragged` and each entry of `others` are (start, center, end).
    Per other node the checks run start-start, start-end, center-center,
    end-start, end-end; the first candidate found wins exact ties.
    """
    d_start, d_center, d_end = dragged
    best: _Candidate | None = None

    for o_start, o_center, o_end in others:
        checks = (
            (d_start, o_start, SnapAnchor.START),
            (d_start, o_end, SnapAnchor.START),
            (d_center, o_center, SnapAnchor.CENTER),
            (d_end, o_start, SnapAnchor.END),
            (d_end, o_end, SnapAnchor.END),
        )
        for dragged_value, other_value, anchor in checks:
            diff = abs(dragged_value - other_value)
            if diff <= threshold and (best is None or diff < best.diff):
                best = _Candidate(other_value, diff, anchor)

    return best


def _snapped(
    proposed: float,
    candidate: _Candidate,
    dragged: tuple[float, float, float],
) -> float:
    """Shift the proposed anchor so the chosen dragged edge lands on the candidate."""
    d_start, d_center, d_end = dragged
    if candidate.anchor is SnapAnchor.START:
        return proposed + (candidate.value - d_start)
    if candidate.anchor is SnapAnchor.CENTER:
        return proposed + (candidate.value - d_center)
    return proposed + (candidate.value - d_end)


def calculate_snap(
    dragged_nodes: list[Node],
    all_nodes: list[Node],
    proposed_position: Point2D,
    settings: SnapSettings | None = None,
) -> SnapResult:
    """
    Calculate snapping for a drag in progress.

    Args:
        dragged_nodes: Nodes being dragged, at their drag-start positions.
            The first one is the anchor the pointer moves.
        all_nodes: Every node on the canvas (dragged nodes are skipped).
        proposed_position: Where the anchor node would land unsnapped.
        settings: Threshold and guide length.

    Returns:
        The snapped anchor position per axis plus 0-2 guide lines.
    """
    settings = settings or SnapSettings()
    if not dragged_nodes:
        return SnapResult()

    dragged_ids = {node.id for node in dragged_nodes}
    other_nodes = [node for node in all_nodes if node.id not in dragged_ids]
    if not other_nodes:
        return SnapResult()

    anchor = dragged_nodes[0]
    offset_x = proposed_position.x - anchor.position.x
    offset_y = proposed_position.y - anchor.position.y

    min_x = min(node.left for node in dragged_nodes) + offset_x
    max_x = max(node.right for node in dragged_nodes) + offset_x
    min_y = min(node.top for node in dragged_nodes) + offset_y
    max_y = max(node.bottom for node in dragged_nodes) + offset_y

    dragged_x = (min_x, (min_x + max_x) / 2, max_x)
    dragged_y = (min_y, (min_y + max_y) / 2, max_y)
    others_x = [(n.left, (n.left + n.right) / 2, n.right) for n in other_nodes]
    others_y = [(n.top, (n.top + n.bottom) / 2, n.bottom) for n in other_nodes]

    best_x = _best_candidate(dragged_x, others_x, settings.threshold)
    best_y = _best_candidate(dragged_y, others_y, settings.threshold)

    result = SnapResult()
    extent = settings.line_extent

    if best_x is not None:
        result.x = _snapped(proposed_position.x, best_x, dragged_x)
        result.lines.append(SnapLine(best_x.value, -extent, best_x.value, extent))

    if best_y is not None:
        result.y = _snapped(proposed_position.y, best_y, dragged_y)
        result.lines.append(SnapLine(-extent, best_y.value, extent, best_y.value))

    return result


def snap_to_grid(value: float, grid_size: float) -> float:
    """Round a coordinate to the nearest grid line."""
    if grid_size <= 0:
        return value
    return round(value / grid_size) * grid_size


def apply_snap(
    result: SnapResult,
    proposed_position: Point2D,
    grid_size: float | None = None,
) -> Point2D:
    """
    Final anchor position for a drag frame.

    Axes with an alignment snap use it; the others use the proposed
    position, rounded to the grid when a grid size is given.
    """
    def fallback(value: float) -> float:
        return snap_to_grid(value, grid_size) if grid_size else value

    return Point2D(
        result.x if result.x is not None else fallback(proposed_position.x),
        result.y if result.y is not None else fallback(proposed_position.y),
    )
