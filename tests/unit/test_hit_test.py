"""
Tests for the hit testing module.
"""

import pytest

from flow_canvas.canvas.hit_test import (
    PointerTarget,
    PointerTargetKind,
    ResizeHandle,
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
    sample_bezier,
)
from flow_canvas.canvas.theme import LIGHT_THEME
from flow_canvas.core.data_types import DataType
from flow_canvas.core.graph import (
    Edge,
    FlowGraph,
    NodeGroup,
    Point2D,
    PortDefinition,
    Subflow,
    SubflowPortMapping,
)
from flow_canvas.core.subflow import resolve_edge_endpoints


@pytest.fixture
def pair(make_node):
    """Two nodes side by side with an edge a.out -> b.in along y=40."""
    a = make_node("a", x=0, y=0, width=200, height=100, inputs=("in1", "in2"), outputs=("out",))
    b = make_node("b", x=400, y=0, width=200, height=100, inputs=("in",), outputs=("out",))
    edge = Edge("e1", "a", "out", "b", "in")
    return a, b, edge


def collapsed_subflow(**kwargs) -> Subflow:
    defaults = dict(
        id="s1",
        name="Sub",
        node_ids=["b"],
        input_mappings=[SubflowPortMapping("in_0", "In", "b", "in")],
        output_mappings=[SubflowPortMapping("out_0", "Out", "b", "out", is_output=True)],
        collapsed=True,
        collapsed_position=Point2D(500, 500),
    )
    defaults.update(kwargs)
    return Subflow(**defaults)


class TestNodeHit:
    """Tests for hit_test_node."""

    def test_inside(self, pair):
        a, b, _ = pair
        assert hit_test_node(Point2D(10, 10), [a, b]) is a

    def test_outside(self, pair):
        a, b, _ = pair
        assert hit_test_node(Point2D(300, 50), [a, b]) is None

    def test_topmost_wins(self, make_node):
        bottom = make_node("bottom", x=0, y=0)
        top = make_node("top", x=50, y=50)
        assert hit_test_node(Point2D(60, 60), [bottom, top]) is top
        assert hit_test_node(Point2D(60, 60), [top, bottom]) is bottom

    def test_empty(self):
        assert hit_test_node(Point2D(0, 0), []) is None


class TestPortHit:
    """Tests for port positions and hit_test_port."""

    def test_port_positions(self, pair):
        a, _, _ = pair
        assert get_port_position(a, "in1", False) == Point2D(0, 40)
        assert get_port_position(a, "in2", False) == Point2D(0, 64)
        assert get_port_position(a, "out", True) == Point2D(200, 40)
        assert get_port_position(a, "nope", True) is None

    def test_exact_hit(self, pair):
        a, b, _ = pair
        hit = hit_test_port(Point2D(0, 40), [a, b])
        assert hit.node is a
        assert hit.port.id == "in1"
        assert hit.is_output is False
        assert hit.position == Point2D(0, 40)

    def test_output_hit(self, pair):
        a, b, _ = pair
        hit = hit_test_port(Point2D(203, 44), [a, b])
        assert hit.port.id == "out"
        assert hit.is_output is True

    def test_default_radius_boundary(self, pair):
        a, _, _ = pair
        # port radius 6 + 4 slack
        assert hit_test_port(Point2D(-10, 40), [a]) is not None
        assert hit_test_port(Point2D(-11, 40), [a]) is None

    def test_custom_radius(self, pair):
        a, _, _ = pair
        assert hit_test_port(Point2D(-11, 40), [a], hit_radius=12) is not None

    def test_inputs_checked_before_outputs(self, make_node):
        narrow = make_node("n", x=0, y=0, width=4, inputs=("in",), outputs=("out",))
        hit = hit_test_port(Point2D(2, 40), [narrow])
        assert hit.port.id == "in"

    def test_topmost_node_wins(self, make_node):
        under = make_node("under", x=0, y=0, inputs=("in",))
        over = make_node("over", x=0, y=0, inputs=("in",))
        assert hit_test_port(Point2D(0, 40), [under, over]).node is over

    def test_node_without_ports(self, make_node):
        assert hit_test_port(Point2D(0, 40), [make_node("bare")]) is None


class TestBezier:
    """Tests for sampled bezier distance."""

    def test_sample_count_and_endpoints(self):
        curve = sample_bezier(Point2D(0, 0), Point2D(100, 50), 50, samples=20)
        assert curve.shape == (21, 2)
        assert tuple(curve[0]) == (0.0, 0.0)
        assert tuple(curve[-1]) == pytest.approx((100.0, 50.0))

    def test_distance_at_endpoint_is_zero(self):
        assert distance_to_bezier(Point2D(0, 0), Point2D(0, 0), Point2D(100, 50), 50) == 0.0

    def test_straight_curve_midpoint(self):
        d = distance_to_bezier(Point2D(300, 45), Point2D(200, 40), Point2D(400, 40), 100)
        assert d == pytest.approx(5.0)


class TestEdgeHit:
    """Tests for hit_test_edge."""

    def test_near_curve_hits(self, pair):
        a, b, edge = pair
        assert hit_test_edge(Point2D(300, 45), [edge], [a, b]) is edge

    def test_far_from_curve_misses(self, pair):
        a, b, edge = pair
        assert hit_test_edge(Point2D(300, 60), [edge], [a, b]) is None

    def test_threshold_is_inclusive(self, pair):
        a, b, edge = pair
        assert hit_test_edge(Point2D(300, 48), [edge], [a, b]) is edge
        assert hit_test_edge(Point2D(300, 48), [edge], [a, b], hit_distance=7.9) is None

    def test_missing_node_is_skipped(self, pair):
        a, _, edge = pair
        assert hit_test_edge(Point2D(300, 40), [edge], [a]) is None

    def test_missing_port_is_skipped(self, pair):
        a, b, _ = pair
        bad = Edge("bad", "a", "ghost", "b", "in")
        good = Edge("good", "a", "out", "b", "in")
        assert hit_test_edge(Point2D(300, 40), [bad, good], [a, b]) is good

    def test_first_edge_in_list_wins(self, pair):
        a, b, edge = pair
        twin = Edge("e2", "a", "out", "b", "in")
        assert hit_test_edge(Point2D(300, 40), [edge, twin], [a, b]) is edge


class TestResolvedEdgeHit:
    """Tests for hit_test_resolved_edge."""

    def test_rerouted_edge_uses_subflow_port(self, pair):
        a, b, edge = pair
        subflow = collapsed_subflow(collapsed_position=Point2D(400, 0))
        resolved = resolve_edge_endpoints([edge], [subflow])
        hit = hit_test_resolved_edge(Point2D(300, 41), resolved, [a], [subflow])
        assert hit is not None
        assert hit.target.is_subflow_port is True

    def test_hidden_edges_are_not_hit(self, pair):
        a, b, edge = pair
        subflow = collapsed_subflow(node_ids=["a", "b"], collapsed_position=Point2D(400, 0))
        resolved = resolve_edge_endpoints([edge], [subflow])
        assert resolved[0].hidden is True
        assert hit_test_resolved_edge(Point2D(300, 40), resolved, [a, b], [subflow]) is None


class TestResizeHandle:
    """Tests for hit_test_resize_handle."""

    @pytest.fixture
    def node(self, make_node):
        return make_node("n", x=100, y=100, width=200, height=100)

    @pytest.mark.parametrize("point,handle", [
        (Point2D(100, 100), ResizeHandle.NW),
        (Point2D(300, 100), ResizeHandle.NE),
        (Point2D(100, 200), ResizeHandle.SW),
        (Point2D(305, 205), ResizeHandle.SE),
        (Point2D(200, 97), ResizeHandle.N),
        (Point2D(200, 205), ResizeHandle.S),
        (Point2D(102, 150), ResizeHandle.W),
        (Point2D(300, 150), ResizeHandle.E),
    ])
    def test_eight_handles(self, node, point, handle):
        hit = hit_test_resize_handle(point, [node], {"n"})
        assert hit.node is node
        assert hit.handle is handle

    def test_corner_beats_edge_band(self, node):
        # Inside the NW corner square and the top band's row
        hit = hit_test_resize_handle(Point2D(107, 101), [node], {"n"})
        assert hit.handle is ResizeHandle.NW

    def test_interior_misses(self, node):
        assert hit_test_resize_handle(Point2D(200, 150), [node], {"n"}) is None

    def test_unselected_node_has_no_handles(self, node):
        assert hit_test_resize_handle(Point2D(100, 100), [node], set()) is None
        assert hit_test_resize_handle(Point2D(100, 100), [node], {"other"}) is None

    def test_topmost_selected_wins(self, make_node):
        under = make_node("under", x=0, y=0)
        over = make_node("over", x=0, y=0)
        hit = hit_test_resize_handle(Point2D(0, 0), [under, over], {"under", "over"})
        assert hit.node is over


class TestGroupHeader:
    """Tests for group header hits."""

    def test_header_band_only(self, make_node):
        nodes = [make_node("a", x=100, y=100, width=200, height=100)]
        group = NodeGroup(id="g", name="G", node_ids=["a"])
        # frame is (80, 52) 240x168, header band y 52..80
        assert hit_test_group_header(Point2D(150, 60), group, nodes)
        assert hit_test_group_header(Point2D(80, 80), group, nodes)
        assert not hit_test_group_header(Point2D(150, 90), group, nodes)
        assert not hit_test_group_header(Point2D(330, 60), group, nodes)

    def test_empty_group(self, make_node):
        group = NodeGroup(id="g", name="G", node_ids=[])
        assert not hit_test_group_header(Point2D(0, 0), group, [make_node("a")])

    def test_last_group_wins(self, make_node):
        nodes = [make_node("a", x=100, y=100)]
        first = NodeGroup(id="g1", name="G1", node_ids=["a"])
        second = NodeGroup(id="g2", name="G2", node_ids=["a"])
        assert hit_test_groups(Point2D(150, 60), [first, second], nodes) is second
        assert hit_test_groups(Point2D(150, 150), [first, second], nodes) is None


class TestSubflowHits:
    """Tests for subflow header, box and port hits."""

    def test_expanded_header(self, make_node):
        nodes = [make_node("a", x=0, y=0, width=100, height=100)]
        subflow = Subflow(id="s", name="S", node_ids=["a"])
        assert hit_test_subflow_header(Point2D(0, -40), subflow, nodes)
        assert not hit_test_subflow_header(Point2D(0, 10), subflow, nodes)

    def test_collapsed_has_no_header(self, make_node):
        nodes = [make_node("a", x=0, y=0, width=100, height=100)]
        subflow = Subflow(id="s", name="S", node_ids=["a"], collapsed=True)
        assert not hit_test_subflow_header(Point2D(0, -40), subflow, nodes)

    def test_collapsed_box(self):
        subflow = collapsed_subflow()
        # 180 x (28 + 24 + 12)
        assert hit_test_collapsed_subflow(Point2D(600, 550), [subflow]) is subflow
        assert hit_test_collapsed_subflow(Point2D(680, 564), [subflow]) is subflow
        assert hit_test_collapsed_subflow(Point2D(600, 565), [subflow]) is None

    def test_expanded_or_unplaced_box_is_skipped(self):
        expanded = collapsed_subflow(collapsed=False)
        unplaced = collapsed_subflow(collapsed_position=None)
        assert hit_test_collapsed_subflow(Point2D(600, 550), [expanded, unplaced]) is None

    def test_port_positions(self):
        subflow = collapsed_subflow()
        assert get_collapsed_subflow_port_position(subflow, "in_0", False) == Point2D(500, 540)
        assert get_collapsed_subflow_port_position(subflow, "out_0", True) == Point2D(680, 540)
        assert get_collapsed_subflow_port_position(subflow, "out_0", False) is None
        expanded = collapsed_subflow(collapsed=False)
        assert get_collapsed_subflow_port_position(expanded, "in_0", False) is None

    def test_port_hit(self):
        subflow = collapsed_subflow()
        hit = hit_test_subflow_port(Point2D(503, 540), [subflow])
        assert hit.subflow is subflow
        assert hit.mapping.exposed_port_id == "in_0"
        assert hit.is_output is False
        out_hit = hit_test_subflow_port(Point2D(681, 541), [subflow])
        assert out_hit.is_output is True
        assert hit_test_subflow_port(Point2D(590, 540), [subflow]) is None


class TestResolvePointer:
    """Tests for the fixed-priority pointer resolution."""

    @pytest.fixture
    def graph(self, pair, make_node):
        a, b, edge = pair
        c = make_node("c", x=250, y=60, width=100, height=50)
        group = NodeGroup(id="g", name="G", node_ids=["c"])
        return FlowGraph(nodes=[a, b, c], edges=[edge], groups=[group])

    def test_port_beats_node_and_edge(self, graph):
        target = resolve_pointer(Point2D(200, 40), graph, {"a"})
        assert target.kind is PointerTargetKind.PORT
        assert target.port.port.id == "out"

    def test_resize_handle(self, graph):
        target = resolve_pointer(Point2D(0, 0), graph, {"a"})
        assert target.kind is PointerTargetKind.RESIZE_HANDLE
        assert target.resize_handle is ResizeHandle.NW

    def test_unselected_corner_is_node(self, graph):
        target = resolve_pointer(Point2D(0, 0), graph)
        assert target.kind is PointerTargetKind.NODE
        assert target.node.id == "a"

    def test_edge_beats_group_header(self, graph):
        # c's group header band spans y 12..40 over x 230..370
        target = resolve_pointer(Point2D(300, 38), graph)
        assert target.kind is PointerTargetKind.EDGE
        assert target.edge.edge.id == "e1"

    def test_group_header(self, graph):
        target = resolve_pointer(Point2D(240, 20), graph)
        assert target.kind is PointerTargetKind.GROUP_HEADER
        assert target.group.id == "g"

    def test_empty(self, graph):
        assert resolve_pointer(Point2D(2000, 2000), graph).kind is PointerTargetKind.EMPTY

    def test_collapsed_subflow_graph(self, pair):
        a, b, edge = pair
        subflow = collapsed_subflow(collapsed_position=Point2D(400, 0))
        graph = FlowGraph(nodes=[a, b], edges=[edge], subflows=[subflow])

        assert resolve_pointer(Point2D(400, 40), graph).kind is PointerTargetKind.SUBFLOW_PORT
        assert resolve_pointer(Point2D(450, 55), graph).kind is PointerTargetKind.COLLAPSED_SUBFLOW

        edge_target = resolve_pointer(Point2D(300, 40), graph)
        assert edge_target.kind is PointerTargetKind.EDGE
        assert edge_target.edge.target.node_id == "s1"

        # b is hidden inside the collapsed box, so its old area is empty
        assert resolve_pointer(Point2D(550, 90), graph).kind is PointerTargetKind.EMPTY

    def test_expanded_subflow_header(self, pair):
        a, b, edge = pair
        subflow = collapsed_subflow(collapsed=False, collapsed_position=None)
        graph = FlowGraph(nodes=[a, b], edges=[edge], subflows=[subflow])
        target = resolve_pointer(Point2D(500, -40), graph)
        assert target.kind is PointerTargetKind.SUBFLOW_HEADER
        assert target.subflow is subflow


class TestPointerHighlight:
    """Tests for themed highlight colours of pointer targets."""

    @pytest.fixture
    def graph(self, pair):
        a, b, edge = pair
        a.outputs[0] = PortDefinition(id="out", name="Out", data_type=DataType.IMAGE)
        return FlowGraph(nodes=[a, b], edges=[edge])

    def test_port_uses_data_type_colour(self, graph):
        target = resolve_pointer(Point2D(200, 40), graph)
        assert pointer_highlight(target) == (100, 149, 237, 255)

    def test_untyped_port_uses_any_colour(self, graph):
        target = resolve_pointer(Point2D(0, 40), graph)
        assert pointer_highlight(target, alpha=128) == (160, 160, 165, 128)

    def test_subflow_port_uses_mapping_type(self):
        mapping = SubflowPortMapping("in_0", "In", "b", "in", data_type=DataType.NUMBER)
        subflow = collapsed_subflow(input_mappings=[mapping])
        target = resolve_pointer(Point2D(500, 540), FlowGraph(subflows=[subflow]))
        assert target.kind is PointerTargetKind.SUBFLOW_PORT
        assert pointer_highlight(target) == (144, 238, 144, 255)

    def test_edge_and_node(self, graph):
        edge_target = resolve_pointer(Point2D(300, 40), graph)
        node_target = resolve_pointer(Point2D(100, 80), graph)
        assert pointer_highlight(edge_target, LIGHT_THEME) == (100, 180, 255, 255)
        assert pointer_highlight(node_target, LIGHT_THEME) == (66, 135, 245, 255)

    def test_empty_has_no_highlight(self):
        assert pointer_highlight(PointerTarget(PointerTargetKind.EMPTY)) is None
