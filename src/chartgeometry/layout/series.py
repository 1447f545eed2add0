"""
Series Geometry
===============
Polylines, step paths and area fills for ordered (multi-)series data, and
marker circles for scatter and bubble data.

The y axis is inverted (screen coordinates): the domain minimum sits at
`height`, the maximum at 0.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, Sequence
import logging

import numpy as np

from chartgeometry.config import MAX_BUBBLE_RADIUS, MIN_BUBBLE_RADIUS, SCATTER_RADIUS, DEFAULT_TICK_COUNT
from chartgeometry.errors import InvalidInputError
from chartgeometry.layout.scale import Bounds, LinearScale, Tick, compute_bounds, data_extent
from chartgeometry.model.datasets import MultiSeriesPoint, ScatterPoint, ensure_finite, series_columns
from chartgeometry.model.geometry_primitives import Circle, Path, PathBuilder, Point

logger = logging.getLogger(__name__)


class SeriesKind(StrEnum):
    LINE = "line"
    AREA = "area"
    STEP = "step"
    STEP_AREA = "step_area"


@dataclass(frozen=True)
class SeriesGeometry:
    """
    Attributes:
        name: Series name.
        index: Position of the series (column) in the dataset.
        points: One vertex per category.
        line: Stroke path through the vertices.
        area: Closed fill down to the baseline, for area kinds only.
    """
    name: str
    index: int
    points: tuple[Point, ...]
    line: Path
    area: Optional[Path] = None


@dataclass(frozen=True)
class MultiSeriesLayout:
    series: tuple[SeriesGeometry, ...]
    x_labels: tuple[Point, ...]
    ticks: tuple[Tick, ...]
    bounds: Bounds
    x_step: float


def line_path(points: Sequence[Point], index: Optional[int] = None) -> Path:
    """`M` to the first point, then `L` through the rest."""
    return PathBuilder().polyline(list(points)).build(index)


def area_path(points: Sequence[Point], baseline: float, index: Optional[int] = None) -> Path:
    """Line path closed back along the baseline."""
    return (
        PathBuilder()
        .polyline(list(points))
        .line_to(points[-1].x, baseline)
        .line_to(points[0].x, baseline)
        .close()
        .build(index)
    )


def step_builder(points: Sequence[Point]) -> PathBuilder:
    """Right-angle transitions: `H` to the next x, then `V` to the next y."""
    builder = PathBuilder().move_to(points[0].x, points[0].y)
    for point in points[1:]:
        builder.horizontal_to(point.x)
        builder.vertical_to(point.y)
    return builder


def step_path(points: Sequence[Point], index: Optional[int] = None) -> Path:
    return step_builder(points).build(index)


def step_area_path(points: Sequence[Point], baseline: float, index: Optional[int] = None) -> Path:
    return (
        step_builder(points)
        .line_to(points[-1].x, baseline)
        .horizontal_to(points[0].x)
        .close()
        .build(index)
    )


def layout_multi_series(
    data: Sequence[MultiSeriesPoint],
    series: Sequence[str],
    width: float,
    height: float,
    kind: SeriesKind | str = SeriesKind.LINE,
    tick_count: int = DEFAULT_TICK_COUNT
) -> MultiSeriesLayout:
    """
    Lay out every series of a multi-series dataset on a shared y scale.

    Args:
        data: Categories in display order, one value per series each.
        series: Series names.
        width: Plot width.
        height: Plot height.
        kind: Path style.
        tick_count: Number of y grid intervals.

    Raises:
        InvalidInputError: Fewer than two categories, no series, or a point
            with the wrong number of values.

    Returns:
        Per-series geometry plus x label anchors and y ticks.
    """
    kind = SeriesKind(kind)
    if len(data) < 2:
        raise InvalidInputError(f"Series geometry needs at least 2 points, got {len(data)}.")
    if not series:
        raise InvalidInputError("At least one series name is required.")

    columns = series_columns(data, series)
    bounds = compute_bounds(v for column in columns for v in column)
    y_scale = LinearScale.from_bounds(bounds, height, 0.0)
    x_step = width / (len(data) - 1)
    xs = np.arange(len(data)) * x_step

    result = []
    for s, (name, column) in enumerate(zip(series, columns)):
        ys = y_scale.map_array(column)
        points = tuple(Point(float(x), float(y), i) for i, (x, y) in enumerate(zip(xs, ys)))

        match kind:
            case SeriesKind.LINE:
                line, area = line_path(points, s), None
            case SeriesKind.AREA:
                line, area = line_path(points, s), area_path(points, height, s)
            case SeriesKind.STEP:
                line, area = step_path(points, s), None
            case SeriesKind.STEP_AREA:
                line, area = step_path(points, s), step_area_path(points, height, s)

        result.append(SeriesGeometry(name=name, index=s, points=points, line=line, area=area))

    logger.debug(f"Laid out {len(result)} {kind} series over {len(data)} points, bounds {bounds}.")

    return MultiSeriesLayout(
        series=tuple(result),
        x_labels=tuple(Point(float(x), height, i) for i, x in enumerate(xs)),
        ticks=y_scale.ticks(tick_count),
        bounds=bounds,
        x_step=x_step
    )


@dataclass(frozen=True)
class SparklineGeometry:
    points: tuple[Point, ...]
    line: Path
    area: Optional[Path] = None


def layout_sparkline(
    values: Sequence[float],
    width: float,
    height: float,
    padding: float = 2.0,
    filled: bool = False
) -> SparklineGeometry:
    """
    A compact line over the raw value extent (no axis padding), inset by
    `padding` on every side.
    """
    data = ensure_finite(values)
    if len(data) < 2:
        raise InvalidInputError(f"A sparkline needs at least 2 values, got {len(data)}.")

    extent = data_extent(data)
    x_scale = LinearScale(0, len(data) - 1, padding, width - padding)
    y_scale = LinearScale(extent.min, extent.max, height - padding, padding)
    points = tuple(Point(x_scale.map(i), y_scale.map(v), i) for i, v in enumerate(data))

    return SparklineGeometry(
        points=points,
        line=line_path(points),
        area=area_path(points, height - padding) if filled else None
    )


# ------------------------------------------------------------------------------
# Scatter & Bubble
# ------------------------------------------------------------------------------
def size_scale(
    size: float,
    size_min: float,
    size_max: float,
    min_radius: float = MIN_BUBBLE_RADIUS,
    max_radius: float = MAX_BUBBLE_RADIUS
) -> float:
    """
    Linear map of a data size onto a display radius. A degenerate size domain
    yields `min_radius`.
    """
    return LinearScale(size_min, size_max, min_radius, max_radius).map(size)


def _xy_scales(points: Sequence[ScatterPoint], width: float, height: float) -> tuple[LinearScale, LinearScale]:
    if not points:
        raise InvalidInputError("At least one point is required.")
    x_extent = data_extent(p.x for p in points)
    y_extent = data_extent(p.y for p in points)
    return (
        LinearScale(x_extent.min, x_extent.max, 0.0, width),
        LinearScale(y_extent.min, y_extent.max, height, 0.0)
    )


def layout_scatter(
    points: Sequence[ScatterPoint],
    width: float,
    height: float,
    default_radius: float = SCATTER_RADIUS
) -> tuple[Circle, ...]:
    """One marker per point; `size` (if given) is used as the radius as is."""
    x_scale, y_scale = _xy_scales(points, width, height)
    return tuple(
        Circle(x_scale.map(p.x), y_scale.map(p.y), p.size or default_radius, index=i)
        for i, p in enumerate(points)
    )


def layout_bubble(
    points: Sequence[ScatterPoint],
    width: float,
    height: float,
    min_radius: float = MIN_BUBBLE_RADIUS,
    max_radius: float = MAX_BUBBLE_RADIUS
) -> tuple[Circle, ...]:
    """
    One bubble per point with radius scaled from the size extent onto
    [`min_radius`, `max_radius`].
    """
    missing = [i for i, p in enumerate(points) if p.size is None]
    if missing:
        raise InvalidInputError(f"Bubble points need a size; missing at indices {missing}.")

    x_scale, y_scale = _xy_scales(points, width, height)
    size_extent = data_extent(p.size for p in points)

    return tuple(
        Circle(
            x_scale.map(p.x),
            y_scale.map(p.y),
            size_scale(p.size, size_extent.min, size_extent.max, min_radius, max_radius),
            index=i
        )
        for i, p in enumerate(points)
    )
