"""
Categorical Geometry
====================
Bars and columns, funnel stages and box plots: one shape per category,
placed in evenly sized slots along one axis.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Sequence
import logging

from chartgeometry.config import BAR_FILL_RATIO, DEFAULT_COLORS, DEFAULT_TICK_COUNT, FUNNEL_TAIL_RATIO, palette_color
from chartgeometry.errors import InvalidInputError
from chartgeometry.layout.scale import Bounds, LinearScale, Tick, compute_bounds
from chartgeometry.model.datasets import BoxStat, CategoricalPoint, ensure_finite, ensure_non_empty
from chartgeometry.model.geometry_primitives import Circle, Path, PathBuilder, Point, Polygon, Rect

logger = logging.getLogger(__name__)

OUTLIER_RADIUS: float = 3.0


def _values(data: Sequence[CategoricalPoint]) -> tuple[float, ...]:
    if not data:
        raise InvalidInputError("At least one data point is required.")
    values = ensure_finite((p.value for p in data), "category values")
    if any(v < 0 for v in values):
        raise InvalidInputError("Category values must not be negative.")
    if max(values) <= 0:
        raise InvalidInputError("At least one category value must be positive.")
    return values


# ------------------------------------------------------------------------------
# Bars & Columns
# ------------------------------------------------------------------------------
class Orientation(StrEnum):
    COLUMN = "column"
    BAR = "bar"


@dataclass(frozen=True)
class BarGeometry:
    index: int
    label: str
    value: float
    rect: Rect
    label_anchor: Point
    color: str


@dataclass(frozen=True)
class BarLayout:
    bars: tuple[BarGeometry, ...]
    ticks: tuple[Tick, ...]
    slot: float
    max_value: float


def layout_bars(
    data: Sequence[CategoricalPoint],
    width: float,
    height: float,
    orientation: Orientation | str = Orientation.COLUMN,
    palette: tuple[str, ...] = DEFAULT_COLORS
) -> BarLayout:
    """
    Lay out one bar per category.

    Columns grow upwards from the bottom edge and are slotted along x; bars
    grow rightwards from the left edge and are slotted along y. Each slot is
    `BAR_FILL_RATIO` filled, the remainder split evenly on both sides.

    Args:
        data: Categories in display order, non-negative values.
        width: Plot width.
        height: Plot height.
        orientation: ``"column"`` (vertical) or ``"bar"`` (horizontal).
        palette: Fallback colors.

    Raises:
        InvalidInputError: Empty data, negative values or no positive value.

    Returns:
        Bar rectangles plus value-axis ticks from the maximum down to 0.
    """
    orientation = Orientation(orientation)
    values = _values(data)
    max_value = max(values)
    n = len(values)

    match orientation:
        case Orientation.COLUMN:
            slot = width / n
            value_scale = LinearScale(0.0, max_value, 0.0, height)
        case Orientation.BAR:
            slot = height / n
            value_scale = LinearScale(0.0, max_value, 0.0, width)

    thickness = slot * BAR_FILL_RATIO
    gap = slot - thickness

    bars = []
    for i, (point, value) in enumerate(zip(data, values)):
        offset = i * slot + gap / 2
        length = value_scale.map(value)
        if orientation == Orientation.COLUMN:
            rect = Rect(offset, height - length, thickness, length, index=i)
            anchor = Point(offset + thickness / 2, height, i)
        else:
            rect = Rect(0.0, offset, length, thickness, index=i)
            anchor = Point(0.0, offset + thickness / 2, i)
        bars.append(
            BarGeometry(
                index=i,
                label=point.label,
                value=value,
                rect=rect,
                label_anchor=anchor,
                color=point.color or palette_color(i, palette)
            )
        )

    # Grid lines run from the maximum down to zero
    if orientation == Orientation.COLUMN:
        tick_scale = LinearScale(0.0, max_value, height, 0.0)
    else:
        tick_scale = value_scale

    logger.debug(f"Laid out {n} {orientation}s, max value {max_value}.")
    return BarLayout(bars=tuple(bars), ticks=tick_scale.ticks(DEFAULT_TICK_COUNT), slot=slot, max_value=max_value)


# ------------------------------------------------------------------------------
# Funnel
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class FunnelStage:
    index: int
    label: str
    value: float
    shape: Polygon
    top_width: float
    bottom_width: float
    label_anchor: Point
    color: str


def layout_funnel(
    data: Sequence[CategoricalPoint],
    width: float,
    height: float,
    palette: tuple[str, ...] = DEFAULT_COLORS
) -> tuple[FunnelStage, ...]:
    """
    Stack one centred trapezoid per stage, top to bottom. A stage's top edge is
    `value / max_value * width` wide and its bottom edge meets the next
    stage's top; the last stage narrows to `FUNNEL_TAIL_RATIO` of its top.
    """
    values = _values(data)
    max_value = max(values)
    stage_height = height / len(values)
    cx = width / 2

    widths = [v / max_value * width for v in values]
    stages = []
    for i, (point, top) in enumerate(zip(data, widths)):
        bottom = widths[i + 1] if i + 1 < len(widths) else top * FUNNEL_TAIL_RATIO
        y_top = i * stage_height
        y_bottom = y_top + stage_height
        shape = Polygon(
            (
                Point(cx - top / 2, y_top),
                Point(cx + top / 2, y_top),
                Point(cx + bottom / 2, y_bottom),
                Point(cx - bottom / 2, y_bottom),
            ),
            index=i
        )
        stages.append(
            FunnelStage(
                index=i,
                label=point.label,
                value=values[i],
                shape=shape,
                top_width=top,
                bottom_width=bottom,
                label_anchor=Point(cx, y_top + stage_height / 2, i),
                color=point.color or palette_color(i, palette)
            )
        )

    return tuple(stages)


# ------------------------------------------------------------------------------
# Box Plot
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class BoxGeometry:
    """
    Attributes:
        index: Position of the category.
        stat: The summary being drawn.
        center_x: Horizontal centre of the box.
        box: Interquartile rectangle (q3 at the top edge).
        median: Horizontal median line across the box.
        whiskers: Vertical lines from min to q1 and from q3 to max.
        caps: Short horizontal lines at min and max.
        outliers: One marker per outlier value.
    """
    index: int
    stat: BoxStat
    center_x: float
    box: Rect
    median: Path
    whiskers: Path
    caps: Path
    outliers: tuple[Circle, ...]
    color: str


@dataclass(frozen=True)
class BoxPlotLayout:
    boxes: tuple[BoxGeometry, ...]
    bounds: Bounds
    ticks: tuple[Tick, ...]


def layout_box_plot(
    stats: Sequence[BoxStat],
    width: float,
    height: float,
    box_width: float = 50.0,
    palette: tuple[str, ...] = DEFAULT_COLORS
) -> BoxPlotLayout:
    """
    Place pre-aggregated box statistics on a shared y scale padded around every
    summary value and outlier. Box centres sit at `(i + 1) * width / (n + 1)`.
    """
    ensure_non_empty(stats, "box plot category")
    for stat in stats:
        if not stat.min <= stat.q1 <= stat.median <= stat.q3 <= stat.max:
            raise InvalidInputError(f"Box statistics of '{stat.label}' are not ordered min <= q1 <= median <= q3 <= max.")

    bounds = compute_bounds(v for stat in stats for v in stat.all_values())
    scale = LinearScale.from_bounds(bounds, height, 0.0)
    y = scale.map
    half = box_width / 2
    cap = box_width / 4

    boxes = []
    for i, stat in enumerate(stats):
        cx = (i + 1) * width / (len(stats) + 1)
        box = Rect(cx - half, y(stat.q3), box_width, y(stat.q1) - y(stat.q3), index=i)
        median = PathBuilder().move_to(cx - half, y(stat.median)).horizontal_to(cx + half).build(i)
        whiskers = (
            PathBuilder()
            .move_to(cx, y(stat.min)).vertical_to(y(stat.q1))
            .move_to(cx, y(stat.q3)).vertical_to(y(stat.max))
            .build(i)
        )
        caps = (
            PathBuilder()
            .move_to(cx - cap, y(stat.min)).horizontal_to(cx + cap)
            .move_to(cx - cap, y(stat.max)).horizontal_to(cx + cap)
            .build(i)
        )
        boxes.append(
            BoxGeometry(
                index=i,
                stat=stat,
                center_x=cx,
                box=box,
                median=median,
                whiskers=whiskers,
                caps=caps,
                outliers=tuple(Circle(cx, y(o), OUTLIER_RADIUS, index=i) for o in stat.outliers),
                color=stat.color or palette_color(i, palette)
            )
        )

    logger.debug(f"Laid out {len(boxes)} boxes over bounds {bounds}.")
    return BoxPlotLayout(boxes=tuple(boxes), bounds=bounds, ticks=scale.ticks(DEFAULT_TICK_COUNT))
