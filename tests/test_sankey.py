"""Unit tests for the layered flow (Sankey) layout."""

from __future__ import annotations

import logging

import pytest
from pytest import approx

from chartgeometry.errors import GraphCycleError, InvalidInputError
from chartgeometry.layout.sankey import assign_columns, find_cycle, layout_sankey, link_path, node_weights
from chartgeometry.model.datasets import SankeyLink, SankeyNode

pytestmark = pytest.mark.unit


def test_columns_exceed_every_predecessor(flow_nodes, flow_links) -> None:
    """A node reached directly and through a longer path takes the deeper column."""

    columns = assign_columns(flow_nodes, flow_links)

    assert columns == {"A": 0, "B": 1, "C": 2}
    for link in flow_links:
        assert columns[link.target] > columns[link.source]


def test_node_weights_take_larger_side(flow_nodes, flow_links) -> None:
    """Weight is the larger of total inflow and total outflow."""

    assert node_weights(flow_nodes, flow_links) == {"A": 15, "B": 10, "C": 10}


def test_layout_sizes_and_places_nodes(flow_nodes, flow_links) -> None:
    """Heights follow weights; columns are spread over the width; nodes are centred by spacing."""

    layout = layout_sankey(flow_nodes, flow_links, width=800, height=350)

    assert layout.vertical_scale == approx(10)
    assert layout.column_width == approx(400)
    assert layout.column_count == 3
    assert [n.height for n in layout.nodes] == approx([150, 100, 100])
    assert [n.x for n in layout.nodes] == approx([0, 400, 800])
    assert layout.node("A").y == approx(100)
    assert layout.node("B").y == approx(125)
    assert not layout.has_cycle


def test_heights_proportional_to_weight(flow_nodes, flow_links) -> None:
    """Node height divided by weight is the same for every node."""

    layout = layout_sankey(flow_nodes, flow_links, width=600, height=420)

    assert {round(n.height / n.weight, 9) for n in layout.nodes} == {round(layout.vertical_scale, 9)}


def test_link_anchors_stack_on_shared_nodes(flow_nodes, flow_links) -> None:
    """Later links leaving the same node start lower on it."""

    layout = layout_sankey(flow_nodes, flow_links, width=800, height=350)

    first, _, third = layout.links
    assert first.source_anchor.y == approx(100)
    assert third.source_anchor.y == approx(150)
    assert first.path.d == "M 24 100 C 200 100 200 125 400 125"
    assert [link.stroke_width for link in layout.links] == approx([5, 2.5, 2.5])


def test_labels_sit_outside_the_node_bar(flow_nodes, flow_links) -> None:
    """Root labels sit left of the bar, the others to the right."""

    layout = layout_sankey(flow_nodes, flow_links, width=800, height=350)

    root, middle = layout.node("A"), layout.node("B")
    assert (root.label_anchor.x, root.label_side) == (approx(-10), "end")
    assert (middle.label_anchor.x, middle.label_side) == (approx(434), "start")
    assert root.label_anchor.y == approx(root.y + root.height / 2)


def test_thin_links_have_minimum_stroke() -> None:
    """Stroke width never drops below one pixel."""

    nodes = [SankeyNode("a", "A"), SankeyNode("b", "B")]

    layout = layout_sankey(nodes, [SankeyLink("a", "b", 1)], width=100, height=100)

    assert layout.links[0].stroke_width == 1


def test_link_path_is_s_curve() -> None:
    """Control points sit half a column from each end."""

    path = link_path(0, 10, 300, 40, column_width=300, node_width=20)

    assert path.d == "M 20 10 C 150 10 150 40 300 40"


def test_cycle_is_rejected_by_default() -> None:
    """A cyclic flow raises and names the nodes on the cycle."""

    nodes = [SankeyNode("A", "A"), SankeyNode("B", "B")]
    links = [SankeyLink("A", "B", 3), SankeyLink("B", "A", 2)]

    assert find_cycle(nodes, links) == ("A", "B", "A")
    with pytest.raises(GraphCycleError) as excinfo:
        layout_sankey(nodes, links, width=100, height=100)
    assert excinfo.value.cycle == ("A", "B", "A")


def test_allowed_cycle_uses_first_visit_columns(caplog) -> None:
    """With cycles allowed, the first visit fixes a node's column."""

    nodes = [SankeyNode("A", "A"), SankeyNode("B", "B"), SankeyNode("C", "C")]
    links = [SankeyLink("A", "B", 4), SankeyLink("B", "C", 3), SankeyLink("C", "B", 1)]

    with caplog.at_level(logging.WARNING, logger="chartgeometry"):
        layout = layout_sankey(nodes, links, width=200, height=100, allow_cycles=True)

    assert layout.has_cycle
    assert [n.column for n in layout.nodes] == [0, 1, 2]
    assert "cycle" in caplog.text


def test_rootless_cycle_falls_back_to_column_zero() -> None:
    """Nodes reachable from no root are placed in the first column."""

    nodes = [SankeyNode("A", "A"), SankeyNode("B", "B")]
    links = [SankeyLink("A", "B", 3), SankeyLink("B", "A", 2)]

    layout = layout_sankey(nodes, links, width=100, height=100, allow_cycles=True)

    assert [n.column for n in layout.nodes] == [0, 0]
    assert layout.column_width == 100


def test_invalid_graphs_are_rejected(flow_nodes) -> None:
    """Undeclared endpoints, duplicate ids, non-positive values and empty flows fail."""

    with pytest.raises(InvalidInputError):
        layout_sankey(flow_nodes, [SankeyLink("A", "Z", 1)], 100, 100)
    with pytest.raises(InvalidInputError):
        layout_sankey(flow_nodes + [SankeyNode("A", "again")], [], 100, 100)
    with pytest.raises(InvalidInputError):
        layout_sankey(flow_nodes, [SankeyLink("A", "B", 0)], 100, 100)
    with pytest.raises(InvalidInputError):
        layout_sankey(flow_nodes, [], 100, 100)


def test_unknown_node_lookup_raises_key_error(flow_nodes, flow_links) -> None:
    """Looking up an id missing from the layout is a KeyError."""

    layout = layout_sankey(flow_nodes, flow_links, width=800, height=350)

    with pytest.raises(KeyError):
        layout.node("Z")
