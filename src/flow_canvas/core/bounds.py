"""
Bounds - Axis-aligned bounding boxes for positioned, sized entities.

Used to frame groups and subflows around their member nodes, to size
collapsed subflow boxes and to test drag-selection rectangles.

Every calculation over an empty item set returns None. Callers treat
None as "nothing to draw or hit" and never turn it into NaN geometry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol

from flow_canvas.core.graph import Node, NodeGroup, Point2D, Size2D, Subflow
from flow_canvas.core.settings import GroupStyle, SubflowStyle


class Bounded(Protocol):
    """Anything with a world position and a size."""
    position: Point2D
    size: Size2D


@dataclass(frozen=True)
class BoundsMinMax:
    """Bounding box as min/max corners."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def contains(self, point: Point2D) -> bool:
        return (
            self.min_x <= point.x <= self.max_x
            and self.min_y <= point.y <= self.max_y
        )


@dataclass(frozen=True)
class BoundsRect:
    """Bounding box as origin plus size."""
    x: float
    y: float
    width: float
    height: float

    def contains(self, point: Point2D) -> bool:
        return (
            self.x <= point.x <= self.x + self.width
            and self.y <= point.y <= self.y + self.height
        )


def calculate_bounds_min_max(items: Iterable[Bounded]) -> BoundsMinMax | None:
    """Calculate the bounding box of all items, or None if there are none."""
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    found = False

    for item in items:
        found = True
        min_x = min(min_x, item.position.x)
        min_y = min(min_y, item.position.y)
        max_x = max(max_x, item.position.x + item.size.width)
        max_y = max(max_y, item.position.y + item.size.height)

    if not found:
        return None
    return BoundsMinMax(min_x, min_y, max_x, max_y)


def calculate_bounds_rect(items: Iterable[Bounded]) -> BoundsRect | None:
    """Same as calculate_bounds_min_max, in x/y/width/height form."""
    bounds = calculate_bounds_min_max(items)
    if bounds is None:
        return None
    return bounds_to_rect(bounds)


def expand_bounds(bounds: BoundsMinMax, padding: float) -> BoundsMinMax:
    """Grow a bounding box by the same padding on every side."""
    return BoundsMinMax(
        bounds.min_x - padding,
        bounds.min_y - padding,
        bounds.max_x + padding,
        bounds.max_y + padding,
    )


def expand_bounds_asymmetric(
    bounds: BoundsMinMax,
    top: float,
    right: float,
    bottom: float,
    left: float,
) -> BoundsMinMax:
    """Grow a bounding box by a separate padding per side (CSS order)."""
    return BoundsMinMax(
        bounds.min_x - left,
        bounds.min_y - top,
        bounds.max_x + right,
        bounds.max_y + bottom,
    )


def bounds_to_rect(bounds: BoundsMinMax) -> BoundsRect:
    return BoundsRect(bounds.min_x, bounds.min_y, bounds.width, bounds.height)


def merge_bounds(a: BoundsMinMax, b: BoundsMinMax) -> BoundsMinMax:
    """Smallest box containing both boxes."""
    return BoundsMinMax(
        min(a.min_x, b.min_x),
        min(a.min_y, b.min_y),
        max(a.max_x, b.max_x),
        max(a.max_y, b.max_y),
    )


def get_bounds_center(bounds: BoundsMinMax) -> Point2D:
    return Point2D(
        (bounds.min_x + bounds.max_x) / 2,
        (bounds.min_y + bounds.max_y) / 2,
    )


# --- Groups and subflows ---

def _member_nodes(node_ids: Iterable[str], nodes: list[Node]) -> list[Node]:
    members = set(node_ids)
    return [node for node in nodes if node.id in members]


def get_group_bounds(
    group: NodeGroup,
    nodes: list[Node],
    style: GroupStyle | None = None,
) -> BoundsRect | None:
    """
    Get the frame drawn around a group.

    The frame is the members' bounding box padded on every side, with
    room for the header band added above. Returns None when none of the
    group's nodes are in the snapshot.
    """
    style = style or GroupStyle()
    bounds = calculate_bounds_min_max(_member_nodes(group.node_ids, nodes))
    if bounds is None:
        return None
    padded = expand_bounds_asymmetric(
        bounds,
        top=style.padding + style.header_height,
        right=style.padding,
        bottom=style.padding,
        left=style.padding,
    )
    return bounds_to_rect(padded)


def get_subflow_bounds(
    subflow: Subflow,
    nodes: list[Node],
    style: SubflowStyle | None = None,
) -> BoundsRect | None:
    """Get the frame drawn around an expanded subflow (see get_group_bounds)."""
    style = style or SubflowStyle()
    bounds = calculate_bounds_min_max(_member_nodes(subflow.node_ids, nodes))
    if bounds is None:
        return None
    padded = expand_bounds_asymmetric(
        bounds,
        top=style.padding + style.header_height,
        right=style.padding,
        bottom=style.padding,
        left=style.padding,
    )
    return bounds_to_rect(padded)


def get_subflow_nodes_bounds(subflow: Subflow, nodes: list[Node]) -> BoundsRect | None:
    """Get the unpadded bounding box of a subflow's member nodes."""
    return calculate_bounds_rect(_member_nodes(subflow.node_ids, nodes))


def calculate_collapsed_size(
    subflow: Subflow,
    style: SubflowStyle | None = None,
) -> Size2D:
    """
    Get the size of a subflow's collapsed box.

    A stored collapsed_size wins. Otherwise the box is a fixed width and
    tall enough for the header plus one slot per exposed port on the
    busier side (at least one slot).
    """
    if subflow.collapsed_size is not None:
        return subflow.collapsed_size

    style = style or SubflowStyle()
    port_count = max(len(subflow.input_mappings), len(subflow.output_mappings), 1)
    return Size2D(
        width=style.collapsed_width,
        height=(
            style.header_height
            + port_count * style.port_spacing
            + style.collapsed_padding_bottom
        ),
    )


def is_node_in_selection_box(
    position: Point2D,
    width: float,
    height: float,
    box_start: Point2D,
    box_end: Point2D,
) -> bool:
    """
    Check if a node overlaps a drag-selection rectangle.

    The rectangle may be dragged in any direction, so its corners are
    normalised first. Touching edges count as overlap.
    """
    box_x = min(box_start.x, box_end.x)
    box_y = min(box_start.y, box_end.y)
    box_width = abs(box_end.x - box_start.x)
    box_height = abs(box_end.y - box_start.y)

    return not (
        position.x + width < box_x
        or position.x > box_x + box_width
        or position.y + height < box_y
        or position.y > box_y + box_height
    )
