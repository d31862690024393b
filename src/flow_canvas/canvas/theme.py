"""
Canvas Theme - Colours for canvas drawing, passed around as a value.

A theme is selected by the host application and handed to whatever
draws or highlights canvas entities. There is no module-level "current
theme"; code that needs colours takes a CanvasTheme argument, as
hit_test.pointer_highlight does. get_theme and hex_to_rgba are the
lookups a host renderer uses for everything else it draws.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from flow_canvas.core.data_types import DataType


# Port colours by data type (shared by both themes)
DATA_TYPE_COLORS: dict[DataType, str] = {
    DataType.IMAGE: "#6495ed",      # Cornflower blue
    DataType.NUMBER: "#90ee90",     # Light green
    DataType.STRING: "#ffb66c",     # Peach
    DataType.BOOLEAN: "#ff69b4",    # Hot pink
    DataType.ARRAY: "#ba55d3",      # Orchid
    DataType.OBJECT: "#40e0d0",     # Turquoise
    DataType.ANY: "#a0a0a5",        # Gray
}


@dataclass(frozen=True)
class CanvasTheme:
    """Colours used to draw the canvas, as #rrggbb strings."""
    name: str
    canvas_bg: str
    grid_minor: str
    grid_major: str
    node_bg: str
    node_header: str
    node_border: str
    node_text: str
    node_port_label: str
    group_text: str
    edge: str = "#96969b"
    edge_active: str = "#64b4ff"
    snap_line: str = "#3b82f6"
    selection: str = "#4287f5"
    port_colors: dict[DataType, str] = field(default_factory=lambda: dict(DATA_TYPE_COLORS))


DARK_THEME = CanvasTheme(
    name="dark",
    canvas_bg="#1e1e20",
    grid_minor="#28282d",
    grid_major="#37373c",
    node_bg="#2d2d30",
    node_header="#505055",
    node_border="#646469",
    node_text="#ffffff",
    node_port_label="#b4b4b9",
    group_text="#ffffff",
)

LIGHT_THEME = CanvasTheme(
    name="light",
    canvas_bg="#f8f8f8",
    grid_minor="#c8c8c8",
    grid_major="#aaaaaa",
    node_bg="#ffffff",
    node_header="#f0f0f0",
    node_border="#d0d0d0",
    node_text="#1a1a1a",
    node_port_label="#666666",
    group_text="#333333",
)

THEMES: dict[str, CanvasTheme] = {
    DARK_THEME.name: DARK_THEME,
    LIGHT_THEME.name: LIGHT_THEME,
}


def get_theme(name: str) -> CanvasTheme:
    """Look up a theme by name, falling back to the dark theme."""
    return THEMES.get(name, DARK_THEME)


def get_data_type_color(data_type: DataType | str, theme: CanvasTheme = DARK_THEME) -> str:
    """Get the port colour for a data type; unknown types use the ANY colour."""
    key = DataType.parse(data_type)
    return theme.port_colors.get(key, theme.port_colors[DataType.ANY])


def hex_to_rgba(
    color: str | None,
    alpha: int = 255,
    fallback: tuple[int, int, int, int] = (128, 128, 128, 255),
) -> tuple[int, int, int, int]:
    """Parse a #rrggbb string (the leading # is optional) into an RGBA tuple."""
    if not color:
        return fallback
    value = color[1:] if color.startswith("#") else color
    if len(value) != 6:
        return fallback
    try:
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16), alpha)
    except ValueError:
        return fallback
