"""
Layered Flow Layout (Sankey)
============================
Assigns the nodes of a directed flow graph to columns, sizes them by the flow
passing through them, stacks them vertically inside their column and routes
each link as a cubic Bezier ribbon between its endpoints.

The layout is computed once per call from the static node/link description.

Column assignment
-----------------
Roots (nodes without incoming links) seed a breadth-first queue at column 0.
For an acyclic graph a node is dequeued once all of its incoming links have
been walked, so its column is one more than the deepest predecessor and every
link points strictly to the right.

A graph with a cycle has no such layering. By default it is rejected with
`GraphCycleError`. With ``allow_cycles=True`` the plain breadth-first walk is
used instead: a target gets ``column(source) + 1`` on its first visit and
keeps it; nodes reachable from no root stay in column 0.
"""
from __future__ import annotations

from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence
import logging

from chartgeometry.config import DEFAULT_COLORS, SANKEY_LINK_WIDTH_FACTOR, SANKEY_NODE_WIDTH, palette_color
from chartgeometry.errors import GraphCycleError, InvalidInputError
from chartgeometry.model.datasets import SankeyLink, SankeyNode, ensure_finite
from chartgeometry.model.geometry_primitives import Path, PathBuilder, Point, Rect, Vector

logger = logging.getLogger(__name__)

LABEL_OFFSET: float = 10.0


# ------------------------------------------------------------------------------
# Data Structures
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class SankeyNodeGeometry:
    """
    Attributes:
        node: The source node record.
        index: Position of the node in the input.
        column: Assigned layer (0 = roots).
        weight: max(sum of outgoing values, sum of incoming values).
        rect: Node bar; its height is `weight * vertical_scale`.
        label_anchor: Label position (left of the bar in column 0, right otherwise).
        label_side: Text anchor for the label, ``"end"`` in column 0, ``"start"`` otherwise.
        color: Node color or palette color.
    """
    node: SankeyNode
    index: int
    column: int
    weight: float
    rect: Rect
    label_anchor: Point
    label_side: str
    color: str

    @property
    def x(self) -> float:
        return self.rect.x

    @property
    def y(self) -> float:
        return self.rect.y

    @property
    def height(self) -> float:
        return self.rect.height


@dataclass(frozen=True)
class SankeyLinkGeometry:
    link: SankeyLink
    index: int
    source_anchor: Point
    target_anchor: Point
    path: Path
    stroke_width: float
    color: str


@dataclass(frozen=True)
class SankeyLayout:
    nodes: tuple[SankeyNodeGeometry, ...]
    links: tuple[SankeyLinkGeometry, ...]
    column_width: float
    vertical_scale: float
    has_cycle: bool = False

    def node(self, node_id: str) -> SankeyNodeGeometry:
        for geometry in self.nodes:
            if geometry.node.id == node_id:
                return geometry
        raise KeyError(f"No node with id '{node_id}' in layout")

    @property
    def column_count(self) -> int:
        return max((n.column for n in self.nodes), default=-1) + 1


# ------------------------------------------------------------------------------
# Graph helpers
# ------------------------------------------------------------------------------
def _validate(nodes: Sequence[SankeyNode], links: Sequence[SankeyLink]) -> None:
    ids = [n.id for n in nodes]
    if len(set(ids)) != len(ids):
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        raise InvalidInputError(f"Duplicate Sankey node ids: {duplicates}")

    declared = set(ids)
    for link in links:
        for endpoint in (link.source, link.target):
            if endpoint not in declared:
                raise InvalidInputError(
                    f"Link {link.source!r} -> {link.target!r} references undeclared node {endpoint!r}."
                )

    for link, value in zip(links, ensure_finite((l.value for l in links), "link values")):
        if value <= 0:
            raise InvalidInputError(f"Link {link.source!r} -> {link.target!r} must have a positive value, got {value}.")


def find_cycle(nodes: Sequence[SankeyNode], links: Sequence[SankeyLink]) -> Optional[tuple[str, ...]]:
    """
    Depth-first search for a directed cycle.

    Returns:
        The node ids along the first cycle found, closed (first id repeated
        at the end), or None for an acyclic graph.
    """
    outgoing: Dict[str, List[str]] = defaultdict(list)
    for link in links:
        outgoing[link.source].append(link.target)

    WHITE, GREY, BLACK = 0, 1, 2
    state = {n.id: WHITE for n in nodes}

    for root in (n.id for n in nodes):
        if state[root] != WHITE:
            continue
        # Iterative DFS; `stack` holds (node, iterator over successors)
        trail = [root]
        stack = [(root, iter(outgoing[root]))]
        state[root] = GREY
        while stack:
            current, successors = stack[-1]
            advanced = False
            for nxt in successors:
                if state[nxt] == GREY:
                    return tuple(trail[trail.index(nxt):] + [nxt])
                if state[nxt] == WHITE:
                    state[nxt] = GREY
                    trail.append(nxt)
                    stack.append((nxt, iter(outgoing[nxt])))
                    advanced = True
                    break
            if not advanced:
                state[current] = BLACK
                trail.pop()
                stack.pop()
    return None


def assign_columns(
    nodes: Sequence[SankeyNode],
    links: Sequence[SankeyLink],
    *,
    acyclic: bool = True
) -> Dict[str, int]:
    """
    Breadth-first column assignment from the roots (see module docstring).

    Args:
        nodes: Declared nodes.
        links: Links between declared nodes.
        acyclic: True if the graph is known to have no cycle.

    Returns:
        Column per node id.
    """
    outgoing: Dict[str, List[str]] = defaultdict(list)
    indegree: Dict[str, int] = {n.id: 0 for n in nodes}
    for link in links:
        outgoing[link.source].append(link.target)
        indegree[link.target] += 1

    columns: Dict[str, int] = {}
    queue: deque[str] = deque()
    for node in nodes:
        if indegree[node.id] == 0:
            columns[node.id] = 0
            queue.append(node.id)

    if acyclic:
        remaining = dict(indegree)
        while queue:
            node_id = queue.popleft()
            for target in outgoing[node_id]:
                columns[target] = max(columns.get(target, 0), columns[node_id] + 1)
                remaining[target] -= 1
                if remaining[target] == 0:
                    queue.append(target)
        return columns

    visited: set[str] = set()
    while queue:
        node_id = queue.popleft()
        if node_id in visited:
            continue
        visited.add(node_id)
        for target in outgoing[node_id]:
            if target not in columns:
                columns[target] = columns[node_id] + 1
                queue.append(target)

    for node in nodes:
        if node.id not in columns:
            logger.warning(f"Node '{node.id}' is not reachable from any root; placing it in column 0.")
            columns[node.id] = 0
    return columns


def node_weights(nodes: Sequence[SankeyNode], links: Sequence[SankeyLink]) -> Dict[str, float]:
    """`max(sum(outgoing), sum(incoming))` per node id."""
    out_sum: Dict[str, float] = defaultdict(float)
    in_sum: Dict[str, float] = defaultdict(float)
    for link in links:
        out_sum[link.source] += link.value
        in_sum[link.target] += link.value
    return {n.id: max(out_sum[n.id], in_sum[n.id]) for n in nodes}


def link_path(
    source_x: float,
    source_y: float,
    target_x: float,
    target_y: float,
    column_width: float,
    node_width: float = SANKEY_NODE_WIDTH,
    index: Optional[int] = None
) -> Path:
    """
    S-shaped cubic Bezier from the right edge of the source bar to the left
    edge of the target bar. Control points sit half a column to the right of
    the source bar and half a column to the left of the target bar.

    Args:
        source_x: Left edge of the source node bar.
        source_y: Anchor y on the source bar.
        target_x: Left edge of the target node bar.
        target_y: Anchor y on the target bar.
        column_width: Horizontal distance between columns.
        node_width: Width of a node bar.
        index: Optional index of the link.
    """
    return (
        PathBuilder()
        .move_to(source_x + node_width, source_y)
        .curve_to(
            source_x + column_width / 2, source_y,
            target_x - column_width / 2, target_y,
            target_x, target_y
        )
        .build(index)
    )


# ------------------------------------------------------------------------------
# Layout
# ------------------------------------------------------------------------------
def layout_sankey(
    nodes: Sequence[SankeyNode],
    links: Sequence[SankeyLink],
    width: float,
    height: float,
    node_width: float = SANKEY_NODE_WIDTH,
    allow_cycles: bool = False,
    link_width_factor: float = SANKEY_LINK_WIDTH_FACTOR,
    palette: tuple[str, ...] = DEFAULT_COLORS
) -> SankeyLayout:
    """
    Compute node bars and link ribbons of a Sankey diagram.

    Args:
        nodes: Declared nodes (order is the stacking order inside a column).
        links: Flows between declared nodes, positive values.
        width: Width of the plot area.
        height: Height of the plot area.
        node_width: Width of a node bar.
        allow_cycles: Lay out cyclic graphs with first-visit-wins columns
            instead of raising.
        link_width_factor: Stroke width per unit of link value (min. 1 px).
        palette: Fallback colors.

    Raises:
        InvalidInputError: Duplicate ids, undeclared endpoints, non-positive
            link values, or no flow at all.
        GraphCycleError: The graph has a cycle and `allow_cycles` is False.

    Returns:
        The computed layout.
    """
    _validate(nodes, links)

    cycle = find_cycle(nodes, links)
    if cycle is not None:
        if not allow_cycles:
            raise GraphCycleError(cycle)
        logger.warning(f"Flow graph has a cycle ({' -> '.join(cycle)}); columns follow first-visit order.")

    columns = assign_columns(nodes, links, acyclic=cycle is None)
    max_column = max(columns.values(), default=0)
    column_width = width / max_column if max_column > 0 else width

    weights = node_weights(nodes, links)
    total_weight = sum(weights.values())
    if total_weight <= 0:
        raise InvalidInputError("A Sankey diagram needs at least one link with a positive value.")
    vertical_scale = height / total_weight

    # Vertical placement inside each column, in node order
    by_column: Dict[int, List[SankeyNode]] = defaultdict(list)
    for node in nodes:
        by_column[columns[node.id]].append(node)

    node_y: Dict[str, float] = {}
    for column_nodes in by_column.values():
        total_height = sum(weights[n.id] * vertical_scale for n in column_nodes)
        spacing = (height - total_height) / (len(column_nodes) + 1)
        current_y = spacing
        for node in column_nodes:
            node_y[node.id] = current_y
            current_y += weights[node.id] * vertical_scale + spacing

    node_geometry: Dict[str, SankeyNodeGeometry] = {}
    for i, node in enumerate(nodes):
        column = columns[node.id]
        rect = Rect(
            x=column * column_width,
            y=node_y[node.id],
            width=node_width,
            height=weights[node.id] * vertical_scale,
            index=i
        )
        middle = Point(rect.x, rect.y + rect.height / 2, i)
        if column == 0:
            anchor, side = middle + Vector(-LABEL_OFFSET, 0.0), "end"
        else:
            anchor, side = middle + Vector(node_width + LABEL_OFFSET, 0.0), "start"
        node_geometry[node.id] = SankeyNodeGeometry(
            node=node,
            index=i,
            column=column,
            weight=weights[node.id],
            rect=rect,
            label_anchor=anchor,
            label_side=side,
            color=node.color or palette_color(i, palette)
        )

    # Link anchors stack in link order on both ends
    placed_out: Dict[str, float] = defaultdict(float)
    placed_in: Dict[str, float] = defaultdict(float)
    link_geometry = []
    for i, link in enumerate(links):
        source = node_geometry[link.source]
        target = node_geometry[link.target]

        source_y = source.y + placed_out[link.source] * vertical_scale / 2
        target_y = target.y + placed_in[link.target] * vertical_scale / 2
        placed_out[link.source] += link.value
        placed_in[link.target] += link.value

        start = Point(source.x + node_width, source_y, i)
        end = Point(target.x, target_y, i)
        link_geometry.append(
            SankeyLinkGeometry(
                link=link,
                index=i,
                source_anchor=start,
                target_anchor=end,
                path=link_path(source.x, source_y, target.x, target_y, column_width, node_width, index=i),
                stroke_width=max(1.0, link.value * link_width_factor),
                color=link.color or palette_color(i, palette)
            )
        )

    logger.debug(
        f"Sankey layout: {len(nodes)} nodes in {max_column + 1} columns, {len(links)} links, "
        f"vertical scale {vertical_scale:.4f}."
    )

    return SankeyLayout(
        nodes=tuple(node_geometry[n.id] for n in nodes),
        links=tuple(link_geometry),
        column_width=column_width,
        vertical_scale=vertical_scale,
        has_cycle=cycle is not None
    )
