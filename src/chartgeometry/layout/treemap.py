"""
Treemap Packing
===============
Lays out weighted items as non-overlapping rectangles whose areas are
proportional to the item values.

Two methods are available:

* ``rows`` walks the items in order and appends them to the current row
  while the row still fits the box width. A row's height is fixed by its
  first item to the remaining vertical space, and item widths are kept as
  computed when appended (they are not re-normalized on row close).
* ``squarify`` is the squarified algorithm of Bruls, Huizing & van Wijk:
  items are added to a strip along the shorter side of the free area for
  as long as the worst aspect ratio in the strip improves. Rectangles tile
  the box exactly.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Sequence
import logging

import numpy as np

from chartgeometry.config import TREEMAP_PADDING
from chartgeometry.errors import InvalidInputError
from chartgeometry.model.datasets import TreemapItem, ensure_finite, ensure_non_empty
from chartgeometry.model.geometry_primitives import Rect

logger = logging.getLogger(__name__)

# Relative slack for the row-fit test, absorbs summation error of the widths
ROW_FIT_TOLERANCE: float = 1e-9


class TreemapMethod(StrEnum):
    ROWS = "rows"
    SQUARIFY = "squarify"


@dataclass(frozen=True)
class TreemapCell:
    """
    Attributes:
        index: Position of the item in the input.
        item: The packed item.
        bounds: Full rectangle allotted to the item.
        inner: `bounds` shrunk by the padding on every edge (visual gutter).
    """
    index: int
    item: TreemapItem
    bounds: Rect
    inner: Rect


def _validate(items: Sequence[TreemapItem], width: float, height: float) -> tuple[float, ...]:
    ensure_non_empty(items, "treemap item")
    if width <= 0 or height <= 0:
        raise InvalidInputError(f"Treemap box must have a positive size, got {width}x{height}.")
    values = ensure_finite((item.value for item in items), "treemap values")
    for item, value in zip(items, values):
        if value <= 0:
            raise InvalidInputError(f"Treemap item '{item.label}' must have a positive value, got {value}.")
    return values


def pack_rows(values: Sequence[float], x: float, y: float, width: float, height: float) -> list[Rect]:
    """
    Row-based packing in input order (see module docstring).

    Args:
        values: Positive item weights.
        x: Left edge of the box.
        y: Top edge of the box.
        width: Box width.
        height: Box height.

    Returns:
        One rectangle per value, in input order.
    """
    total = float(np.sum(values))
    scale = (width * height) / total

    rectangles: list[Rect] = []
    current_x = x
    current_y = y
    row_width = 0.0
    row_height = 0.0
    row_len = 0
    slack = ROW_FIT_TOLERANCE * width

    for i, value in enumerate(values):
        ideal_width = (value * scale) / height

        if row_len and row_width + ideal_width > width + slack:
            # Close the row; the next one starts below it
            current_y += row_height
            current_x = x
            row_width = 0.0
            row_len = 0

        if row_len == 0:
            row_height = height - (current_y - y)

        rectangles.append(Rect(current_x, current_y, ideal_width, row_height, index=i))
        current_x += ideal_width
        row_width += ideal_width
        row_len += 1

    return rectangles


def _worst_ratio(row: list[float], side: float) -> float:
    """Worst aspect ratio of a strip of `row` areas laid along `side`."""
    s = sum(row)
    side_sq = side * side
    return max(side_sq * max(row) / (s * s), (s * s) / (side_sq * min(row)))


def pack_squarified(values: Sequence[float], x: float, y: float, width: float, height: float) -> list[Rect]:
    """
    Squarified packing in input order (see module docstring).

    Returns:
        One rectangle per value, in input order.
    """
    total = float(np.sum(values))
    scale = (width * height) / total
    areas = [v * scale for v in values]

    rectangles: list[Rect] = []
    free_x, free_y, free_w, free_h = x, y, width, height
    row: list[float] = []
    start = 0

    def flush(row: list[float], start: int) -> None:
        nonlocal free_x, free_y, free_w, free_h
        s = sum(row)
        if free_w >= free_h:
            # Vertical strip on the left of the free area
            strip_w = s / free_h if free_h else 0.0
            offset = free_y
            for k, area in enumerate(row):
                h = area / strip_w if strip_w else 0.0
                rectangles.append(Rect(free_x, offset, strip_w, h, index=start + k))
                offset += h
            free_x += strip_w
            free_w -= strip_w
        else:
            # Horizontal strip on top of the free area
            strip_h = s / free_w if free_w else 0.0
            offset = free_x
            for k, area in enumerate(row):
                w = area / strip_h if strip_h else 0.0
                rectangles.append(Rect(offset, free_y, w, strip_h, index=start + k))
                offset += w
            free_y += strip_h
            free_h -= strip_h

    for i, area in enumerate(areas):
        side = min(free_w, free_h)
        if row and _worst_ratio(row + [area], side) > _worst_ratio(row, side):
            flush(row, start)
            row = []
            start = i
        row.append(area)

    if row:
        flush(row, start)

    return rectangles


def layout_treemap(
    items: Sequence[TreemapItem],
    width: float,
    height: float,
    padding: float = TREEMAP_PADDING,
    method: TreemapMethod | str = TreemapMethod.ROWS,
    x: float = 0.0,
    y: float = 0.0
) -> tuple[TreemapCell, ...]:
    """
    Pack one level of `items` into the box (`x`, `y`, `width`, `height`).

    Args:
        items: Items with positive values; children are not packed.
        width: Box width.
        height: Box height.
        padding: Gutter removed from every edge of each rectangle.
        method: ``"rows"`` (default) or ``"squarify"``.
        x: Left edge of the box.
        y: Top edge of the box.

    Raises:
        InvalidInputError: On empty input, non-positive values or box size.
        ValueError: On an unknown method.

    Returns:
        One `TreemapCell` per item, in input order.
    """
    values = _validate(items, width, height)
    method = TreemapMethod(method)

    match method:
        case TreemapMethod.ROWS:
            rectangles = pack_rows(values, x, y, width, height)
        case TreemapMethod.SQUARIFY:
            rectangles = pack_squarified(values, x, y, width, height)

    covered = sum(r.area for r in rectangles)
    logger.debug(f"Treemap ({method}) packed {len(rectangles)} items, coverage {covered / (width * height):.6f}.")

    return tuple(
        TreemapCell(index=rect.index, item=items[rect.index], bounds=rect, inner=rect.shrink(padding))
        for rect in sorted(rectangles, key=lambda r: r.index)
    )
