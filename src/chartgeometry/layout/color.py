"""
Color Interpolation
===================
Maps a normalized scalar onto an ordered list of gradient stops, and lays out
heatmap cells colored by value.

Malformed hex colors are tolerated: each unreadable channel reads as 0, since
a miscolored cell is preferable to a failed render.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence
import logging
import math
import string

import numpy as np

from chartgeometry.config import DEFAULT_HEATMAP_STOPS
from chartgeometry.errors import InvalidInputError
from chartgeometry.model.datasets import HeatCell, ensure_finite, ensure_non_empty
from chartgeometry.model.geometry_primitives import Rect

logger = logging.getLogger(__name__)


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    """
    Parse a 6-digit hex color (with or without '#').

    Any channel that is missing or not valid hex defaults to 0.
    """
    digits = color.strip().lstrip("#")
    channels = []
    for i in range(3):
        pair = digits[2 * i:2 * i + 2]
        if len(pair) == 2 and all(c in string.hexdigits for c in pair):
            channels.append(int(pair, 16))
        else:
            logger.debug(f"Malformed color '{color}': channel {i} defaults to 0.")
            channels.append(0)
    return channels[0], channels[1], channels[2]


def rgb_string(r: int, g: int, b: int) -> str:
    return f"rgb({r},{g},{b})"


def normalize(value: float, min_value: float, max_value: float) -> float:
    """`(value - min) / (max - min)`; a degenerate range yields 0."""
    if max_value == min_value:
        return 0.0
    return (value - min_value) / (max_value - min_value)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def interpolate_color(stops: Sequence[str], t: float) -> str:
    """
    Color at position `t` in [0, 1] along the gradient `stops`.

    Args:
        stops: At least two hex colors, in gradient order.
        t: Normalized position; values outside [0, 1] are clamped.

    Raises:
        InvalidInputError: If fewer than two stops are given or `t` is not
            a finite number.

    Returns:
        An `rgb(r,g,b)` string. When `t` lands on the last stop that stop's
        color is returned without interpolation; otherwise each channel is
        interpolated between the two surrounding stops and rounded.
    """
    if len(stops) < 2:
        raise InvalidInputError(f"A gradient needs at least 2 stops, got {len(stops)}.")

    (t,) = ensure_finite((t,), "gradient positions")
    t = min(max(t, 0.0), 1.0)
    position = t * (len(stops) - 1)
    index = math.floor(position)
    remainder = position - index

    if index == len(stops) - 1:
        return rgb_string(*hex_to_rgb(stops[index]))

    start = np.array(hex_to_rgb(stops[index]), dtype=np.float64)
    end = np.array(hex_to_rgb(stops[index + 1]), dtype=np.float64)
    r, g, b = (_round_half_up(c) for c in start + (end - start) * remainder)

    return rgb_string(r, g, b)


class GradientInterpolator:
    """
    A gradient bound to its stops, callable with a normalized position.

    >>> GradientInterpolator(["#000000", "#ffffff"])(0.5)
    'rgb(128,128,128)'
    """

    def __init__(self, stops: Sequence[str] = DEFAULT_HEATMAP_STOPS):
        if len(stops) < 2:
            raise InvalidInputError(f"A gradient needs at least 2 stops, got {len(stops)}.")
        self.stops = tuple(stops)

    def __call__(self, t: float) -> str:
        return interpolate_color(self.stops, t)

    def colors_for(self, values: Iterable[float]) -> list[str]:
        """Color each value by its position within the series' own range."""
        data = ensure_finite(values)
        if not data:
            return []
        lo, hi = min(data), max(data)
        return [self(normalize(v, lo, hi)) for v in data]


# ------------------------------------------------------------------------------
# Heatmap
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class HeatmapCellGeometry:
    rect: Rect
    color: str
    cell: HeatCell


@dataclass(frozen=True)
class HeatmapLayout:
    cells: tuple[HeatmapCellGeometry, ...]
    x_values: tuple[float, ...]
    y_values: tuple[float, ...]
    cell_width: float
    cell_height: float
    min_value: float
    max_value: float


def layout_heatmap(
    cells: Sequence[HeatCell],
    width: float,
    height: float,
    stops: Sequence[str] = DEFAULT_HEATMAP_STOPS
) -> HeatmapLayout:
    """
    Place each cell on the implicit grid of distinct, sorted x and y values
    and color it by its value within the dataset's value range.
    """
    ensure_non_empty(cells, "heatmap cell")

    gradient = GradientInterpolator(stops)
    x_values = tuple(sorted({c.x for c in cells}))
    y_values = tuple(sorted({c.y for c in cells}))
    cell_width = width / len(x_values)
    cell_height = height / len(y_values)

    values = ensure_finite((c.value for c in cells), "cell values")
    min_value, max_value = min(values), max(values)

    x_index = {x: i for i, x in enumerate(x_values)}
    y_index = {y: i for i, y in enumerate(y_values)}

    result = tuple(
        HeatmapCellGeometry(
            rect=Rect(
                x=x_index[cell.x] * cell_width,
                y=y_index[cell.y] * cell_height,
                width=cell_width,
                height=cell_height,
                index=i
            ),
            color=gradient(normalize(cell.value, min_value, max_value)),
            cell=cell
        )
        for i, cell in enumerate(cells)
    )
    logger.debug(f"Heatmap grid {len(x_values)}x{len(y_values)} with {len(result)} cells.")

    return HeatmapLayout(
        cells=result,
        x_values=x_values,
        y_values=y_values,
        cell_width=cell_width,
        cell_height=cell_height,
        min_value=min_value,
        max_value=max_value
    )
