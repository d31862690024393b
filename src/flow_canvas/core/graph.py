"""
Graph Snapshot Model - Core data structures read by the canvas core.

This module defines the fundamental building blocks:
- Node: A positioned, sized unit with ordered input and output ports
- Edge: A link from one node's output port to another node's input port
- NodeGroup: A named membership set of nodes
- Subflow: A collapsible grouping that exposes a reduced port interface
- FlowGraph: A snapshot of the complete graph plus its viewport

All of these are owned by the editor store. The canvas core only ever
reads them; every query treats its inputs as an immutable snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from flow_canvas.core.data_types import DataType

if TYPE_CHECKING:
    from flow_canvas.core.subflow import ResolvedEdge


def new_id(prefix: str) -> str:
    """Generate a new unique entity ID such as ``node_1f3a...``."""
    return f"{prefix}_{uuid4().hex[:12]}"


@dataclass
class Point2D:
    """2D point in world or screen coordinates."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Point2D) -> Point2D:
        return Point2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point2D) -> Point2D:
        return Point2D(self.x - other.x, self.y - other.y)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Point2D:
        data = data or {}
        return cls(float(data.get("x", 0.0)), float(data.get("y", 0.0)))

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class Size2D:
    """2D size for node dimensions."""
    width: float = 200.0
    height: float = 100.0

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Size2D:
        data = data or {}
        return cls(float(data.get("width", 200.0)), float(data.get("height", 100.0)))

    def to_dict(self) -> dict[str, float]:
        return {"width": self.width, "height": self.height}


@dataclass
class Viewport:
    """
    Pan/zoom state of the canvas.

    x and y are the world coordinates shown at the centre of the screen.
    zoom is the scale factor (1.0 = 100%) and must be positive.
    """
    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Viewport:
        data = data or {}
        return cls(
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            zoom=float(data.get("zoom", 1.0)),
        )

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "zoom": self.zoom}


@dataclass
class CanvasSize:
    """Render surface size in CSS pixels."""
    width: float
    height: float


@dataclass
class PortDefinition:
    """
    Definition of an input or output port on a node.

    Attributes:
        id: Port identifier, unique per node and direction
        name: Display label
        data_type: Type of data carried
        required: If True, the node cannot run without this input
        multi: If True, the port accepts several connections
    """
    id: str
    name: str
    data_type: DataType = DataType.ANY
    required: bool = False
    multi: bool = False
    default_value: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PortDefinition:
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            data_type=DataType.parse(data.get("dataType")),
            required=bool(data.get("required", False)),
            multi=bool(data.get("multi", False)),
            default_value=data.get("defaultValue"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "dataType": self.data_type.value,
            "required": self.required,
            "multi": self.multi,
        }
        if self.default_value is not None:
            result["defaultValue"] = self.default_value
        return result


@dataclass
class Node:
    """
    A single node on the canvas.

    Nodes have:
    - A unique ID
    - A type (references a node type in the external registry)
    - Position and size in world coordinates
    - Ordered input and output ports (slot = array index)
    - Opaque data owned by the editor
    """
    id: str
    type_id: str = ""
    position: Point2D = field(default_factory=Point2D)
    size: Size2D = field(default_factory=Size2D)
    inputs: list[PortDefinition] = field(default_factory=list)
    outputs: list[PortDefinition] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        type_id: str,
        position: Point2D | None = None,
        size: Size2D | None = None,
    ) -> Node:
        """Factory method to create a new node."""
        return cls(
            id=new_id("node"),
            type_id=type_id,
            position=position or Point2D(),
            size=size or Size2D(),
        )

    # --- Geometry ---

    @property
    def left(self) -> float:
        return self.position.x

    @property
    def right(self) -> float:
        return self.position.x + self.size.width

    @property
    def top(self) -> float:
        return self.position.y

    @property
    def bottom(self) -> float:
        return self.position.y + self.size.height

    @property
    def center(self) -> Point2D:
        return Point2D(
            self.position.x + self.size.width / 2,
            self.position.y + self.size.height / 2,
        )

    def contains(self, point: Point2D) -> bool:
        """Closed point-in-rectangle test."""
        return (
            self.left <= point.x <= self.right
            and self.top <= point.y <= self.bottom
        )

    # --- Ports ---

    def port_index(self, port_id: str, is_output: bool) -> int:
        """Get the slot index of a port, or -1 if the node has no such port."""
        ports = self.outputs if is_output else self.inputs
        for i, port in enumerate(ports):
            if port.id == port_id:
                return i
        return -1

    def find_port(self, port_id: str, is_output: bool) -> PortDefinition | None:
        """Get a port definition by ID."""
        index = self.port_index(port_id, is_output)
        if index == -1:
            return None
        return (self.outputs if is_output else self.inputs)[index]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Node:
        return cls(
            id=data["id"],
            type_id=data.get("type", ""),
            position=Point2D.from_dict(data.get("position")),
            size=Size2D.from_dict(data.get("size")),
            inputs=[PortDefinition.from_dict(p) for p in data.get("inputs") or []],
            outputs=[PortDefinition.from_dict(p) for p in data.get("outputs") or []],
            data=dict(data.get("data") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type_id,
            "position": self.position.to_dict(),
            "size": self.size.to_dict(),
            "inputs": [p.to_dict() for p in self.inputs],
            "outputs": [p.to_dict() for p in self.outputs],
            "data": dict(self.data),
        }


@dataclass
class Edge:
    """
    An edge (wire) between two nodes.

    Connects an output port of the source node to an input port
    of the target node.
    """
    id: str
    source: str
    source_port: str
    target: str
    target_port: str

    @classmethod
    def create(
        cls,
        source: str,
        source_port: str,
        target: str,
        target_port: str,
    ) -> Edge:
        """Factory method to create a new edge."""
        return cls(
            id=new_id("edge"),
            source=source,
            source_port=source_port,
            target=target,
            target_port=target_port,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Edge:
        return cls(
            id=data["id"],
            source=data["source"],
            source_port=data["sourcePort"],
            target=data["target"],
            target_port=data["targetPort"],
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "source": self.source,
            "sourcePort": self.source_port,
            "target": self.target,
            "targetPort": self.target_port,
        }


@dataclass
class NodeGroup:
    """
    A visual grouping of nodes.

    Groups only record membership; nesting is not restricted.
    """
    id: str
    name: str
    node_ids: list[str] = field(default_factory=list)
    color: str | None = None
    collapsed: bool = False

    @classmethod
    def create(cls, name: str, node_ids: list[str] | None = None) -> NodeGroup:
        """Factory method to create a new group."""
        return cls(
            id=new_id("group"),
            name=name,
            node_ids=list(node_ids or []),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NodeGroup:
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            node_ids=list(data.get("nodeIds") or []),
            color=data.get("color"),
            collapsed=bool(data.get("collapsed", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "nodeIds": list(self.node_ids),
            "collapsed": self.collapsed,
        }
        if self.color is not None:
            result["color"] = self.color
        return result


@dataclass
class SubflowPortMapping:
    """Association between a subflow's exposed port and one internal node port."""
    exposed_port_id: str
    exposed_port_name: str
    internal_node_id: str
    internal_port_id: str
    data_type: DataType = DataType.ANY
    is_output: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SubflowPortMapping:
        return cls(
            exposed_port_id=data["exposedPortId"],
            exposed_port_name=data.get("exposedPortName", data["exposedPortId"]),
            internal_node_id=data["internalNodeId"],
            internal_port_id=data["internalPortId"],
            data_type=DataType.parse(data.get("dataType")),
            is_output=bool(data.get("isOutput", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "exposedPortId": self.exposed_port_id,
            "exposedPortName": self.exposed_port_name,
            "internalNodeId": self.internal_node_id,
            "internalPortId": self.internal_port_id,
            "dataType": self.data_type.value,
            "isOutput": self.is_output,
        }


@dataclass
class Subflow:
    """
    A named, collapsible grouping of nodes.

    When collapsed, the member nodes are hidden and the subflow is drawn
    as a single box at collapsed_position whose ports are the exposed
    input/output mappings. Collapsing never touches the member nodes.
    """
    id: str
    name: str
    node_ids: list[str] = field(default_factory=list)
    internal_edge_ids: list[str] = field(default_factory=list)
    input_mappings: list[SubflowPortMapping] = field(default_factory=list)
    output_mappings: list[SubflowPortMapping] = field(default_factory=list)
    collapsed: bool = False
    collapsed_position: Point2D | None = None
    collapsed_size: Size2D | None = None
    color: str | None = None

    def find_mapping(
        self, internal_node_id: str, internal_port_id: str, is_output: bool
    ) -> SubflowPortMapping | None:
        """Find the exposed mapping for an internal node port."""
        mappings = self.output_mappings if is_output else self.input_mappings
        for mapping in mappings:
            if (mapping.internal_node_id == internal_node_id
                    and mapping.internal_port_id == internal_port_id):
                return mapping
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Subflow:
        position = data.get("collapsedPosition")
        size = data.get("collapsedSize")
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            node_ids=list(data.get("nodeIds") or []),
            internal_edge_ids=list(data.get("internalEdgeIds") or []),
            input_mappings=[
                SubflowPortMapping.from_dict(m) for m in data.get("inputMappings") or []
            ],
            output_mappings=[
                SubflowPortMapping.from_dict(m) for m in data.get("outputMappings") or []
            ],
            collapsed=bool(data.get("collapsed", False)),
            collapsed_position=Point2D.from_dict(position) if position else None,
            collapsed_size=Size2D.from_dict(size) if size else None,
            color=data.get("color"),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "nodeIds": list(self.node_ids),
            "internalEdgeIds": list(self.internal_edge_ids),
            "inputMappings": [m.to_dict() for m in self.input_mappings],
            "outputMappings": [m.to_dict() for m in self.output_mappings],
            "collapsed": self.collapsed,
        }
        if self.collapsed_position is not None:
            result["collapsedPosition"] = self.collapsed_position.to_dict()
        if self.collapsed_size is not None:
            result["collapsedSize"] = self.collapsed_size.to_dict()
        if self.color is not None:
            result["color"] = self.color
        return result


class FlowGraph:
    """
    A read-only snapshot of the editor graph.

    Contains nodes (in z-order, last = topmost), edges, groups and
    subflows, plus the viewport they are displayed through. Accessors
    return copies so callers cannot mutate the snapshot by accident.
    """

    def __init__(
        self,
        nodes: list[Node] | None = None,
        edges: list[Edge] | None = None,
        groups: list[NodeGroup] | None = None,
        subflows: list[Subflow] | None = None,
        viewport: Viewport | None = None,
        name: str = "Untitled",
    ):
        self.name: str = name
        self.viewport: Viewport = viewport or Viewport()
        self._nodes: list[Node] = list(nodes or [])
        self._edges: list[Edge] = list(edges or [])
        self._groups: list[NodeGroup] = list(groups or [])
        self._subflows: list[Subflow] = list(subflows or [])

    # --- Accessors ---

    @property
    def nodes(self) -> list[Node]:
        """Get all nodes in z-order (read-only copy)."""
        return self._nodes.copy()

    @property
    def edges(self) -> list[Edge]:
        """Get all edges (read-only copy)."""
        return self._edges.copy()

    @property
    def groups(self) -> list[NodeGroup]:
        """Get all groups (read-only copy)."""
        return self._groups.copy()

    @property
    def subflows(self) -> list[Subflow]:
        """Get all subflows (read-only copy)."""
        return self._subflows.copy()

    def node_map(self) -> dict[str, Node]:
        """Get a node-id lookup table."""
        return {node.id: node for node in self._nodes}

    def get_node(self, node_id: str) -> Node | None:
        """Get a node by ID."""
        for node in self._nodes:
            if node.id == node_id:
                return node
        return None

    def get_edge(self, edge_id: str) -> Edge | None:
        """Get an edge by ID."""
        for edge in self._edges:
            if edge.id == edge_id:
                return edge
        return None

    def get_subflow(self, subflow_id: str) -> Subflow | None:
        """Get a subflow by ID."""
        for subflow in self._subflows:
            if subflow.id == subflow_id:
                return subflow
        return None

    # --- Virtualized view ---

    def visible_nodes(self) -> list[Node]:
        """Get nodes that are not hidden inside a collapsed subflow."""
        from flow_canvas.core.subflow import get_visible_nodes
        return get_visible_nodes(self._nodes, self._subflows)

    def render_edges(self) -> list[ResolvedEdge]:
        """Get edges with endpoints rewritten through collapsed subflows."""
        from flow_canvas.core.subflow import resolve_edge_endpoints
        return resolve_edge_endpoints(self._edges, self._subflows)

    # --- Snapshot input ---

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FlowGraph:
        """Build a snapshot from the store's plain-dict representation."""
        return cls(
            nodes=[Node.from_dict(n) for n in data.get("nodes") or []],
            edges=[Edge.from_dict(e) for e in data.get("edges") or []],
            groups=[NodeGroup.from_dict(g) for g in data.get("groups") or []],
            subflows=[Subflow.from_dict(s) for s in data.get("subflows") or []],
            viewport=Viewport.from_dict(data.get("viewport")),
            name=data.get("name", "Untitled"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "nodes": [n.to_dict() for n in self._nodes],
            "edges": [e.to_dict() for e in self._edges],
            "groups": [g.to_dict() for g in self._groups],
            "subflows": [s.to_dict() for s in self._subflows],
            "viewport": self.viewport.to_dict(),
        }

    def __len__(self) -> int:
        """Return the number of nodes."""
        return len(self._nodes)

    def __contains__(self, node_id: str) -> bool:
        """Check if a node exists in the snapshot."""
        return self.get_node(node_id) is not None
