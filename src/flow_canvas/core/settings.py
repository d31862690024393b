"""
Canvas Settings - Layout and interaction constants.

These settings are plain values threaded through every geometry query,
so nothing in the canvas core depends on hidden global state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class NodeStyle:
    """Node layout used to place ports."""
    header_height: float = 28
    port_radius: float = 6
    port_spacing: float = 24

    def port_offset_y(self, index: int) -> float:
        """Vertical offset of port slot `index` from the node's top edge."""
        return self.header_height + self.port_spacing * (index + 0.5)


@dataclass(frozen=True)
class GroupStyle:
    """Padding around grouped nodes and the clickable header band."""
    padding: float = 20
    header_height: float = 28


@dataclass(frozen=True)
class SubflowStyle:
    """Layout of subflow frames (expanded) and boxes (collapsed)."""
    padding: float = 24
    header_height: float = 28
    port_radius: float = 6
    port_spacing: float = 24
    collapsed_width: float = 180
    collapsed_padding_bottom: float = 12

    def port_offset_y(self, index: int) -> float:
        """Vertical offset of exposed port slot `index` on a collapsed box."""
        return self.header_height + self.port_spacing * (index + 0.5)


@dataclass(frozen=True)
class SnapSettings:
    """Alignment snapping during node drags (world units)."""
    threshold: float = 8
    line_extent: float = 1000
    grid_size: float = 20


@dataclass(frozen=True)
class HitTestSettings:
    """Tolerances for pointer hit-testing (world units)."""
    port_hit_padding: float = 4
    edge_hit_distance: float = 8
    bezier_samples: int = 20
    min_control_offset: float = 50
    resize_handle_size: float = 8
    resize_edge_threshold: float = 6


@dataclass(frozen=True)
class CanvasSettings:
    """
    All canvas-core settings in one place.

    Like project settings, this is a plain value object that can be
    round-tripped through a dictionary. Missing keys keep their defaults.
    """
    node: NodeStyle = field(default_factory=NodeStyle)
    group: GroupStyle = field(default_factory=GroupStyle)
    subflow: SubflowStyle = field(default_factory=SubflowStyle)
    snap: SnapSettings = field(default_factory=SnapSettings)
    hit_test: HitTestSettings = field(default_factory=HitTestSettings)

    # Viewport limits
    min_zoom: float = 0.1
    max_zoom: float = 5.0
    cull_margin: float = 100

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary for serialization."""
        return {
            "node": {
                "header_height": self.node.header_height,
                "port_radius": self.node.port_radius,
                "port_spacing": self.node.port_spacing,
            },
            "group": {
                "padding": self.group.padding,
                "header_height": self.group.header_height,
            },
            "subflow": {
                "padding": self.subflow.padding,
                "header_height": self.subflow.header_height,
                "port_radius": self.subflow.port_radius,
                "port_spacing": self.subflow.port_spacing,
                "collapsed_width": self.subflow.collapsed_width,
                "collapsed_padding_bottom": self.subflow.collapsed_padding_bottom,
            },
            "snap": {
                "threshold": self.snap.threshold,
                "line_extent": self.snap.line_extent,
                "grid_size": self.snap.grid_size,
            },
            "hit_test": {
                "port_hit_padding": self.hit_test.port_hit_padding,
                "edge_hit_distance": self.hit_test.edge_hit_distance,
                "bezier_samples": self.hit_test.bezier_samples,
                "min_control_offset": self.hit_test.min_control_offset,
                "resize_handle_size": self.hit_test.resize_handle_size,
                "resize_edge_threshold": self.hit_test.resize_edge_threshold,
            },
            "min_zoom": self.min_zoom,
            "max_zoom": self.max_zoom,
            "cull_margin": self.cull_margin,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CanvasSettings:
        """Create settings from dictionary."""
        node = data.get("node", {})
        group = data.get("group", {})
        subflow = data.get("subflow", {})
        snap = data.get("snap", {})
        hit_test = data.get("hit_test", {})
        return cls(
            node=NodeStyle(
                header_height=node.get("header_height", 28),
                port_radius=node.get("port_radius", 6),
                port_spacing=node.get("port_spacing", 24),
            ),
            group=GroupStyle(
                padding=group.get("padding", 20),
                header_height=group.get("header_height", 28),
            ),
            subflow=SubflowStyle(
                padding=subflow.get("padding", 24),
                header_height=subflow.get("header_height", 28),
                port_radius=subflow.get("port_radius", 6),
                port_spacing=subflow.get("port_spacing", 24),
                collapsed_width=subflow.get("collapsed_width", 180),
                collapsed_padding_bottom=subflow.get("collapsed_padding_bottom", 12),
            ),
            snap=SnapSettings(
                threshold=snap.get("threshold", 8),
                line_extent=snap.get("line_extent", 1000),
                grid_size=snap.get("grid_size", 20),
            ),
            hit_test=HitTestSettings(
                port_hit_padding=hit_test.get("port_hit_padding", 4),
                edge_hit_distance=hit_test.get("edge_hit_distance", 8),
                bezier_samples=hit_test.get("bezier_samples", 20),
                min_control_offset=hit_test.get("min_control_offset", 50),
                resize_handle_size=hit_test.get("resize_handle_size", 8),
                resize_edge_threshold=hit_test.get("resize_edge_threshold", 6),
            ),
            min_zoom=data.get("min_zoom", 0.1),
            max_zoom=data.get("max_zoom", 5.0),
            cull_margin=data.get("cull_margin", 100),
        )


DEFAULT_SETTINGS = CanvasSettings()
