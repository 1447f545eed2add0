"""
Polar Geometry
==============
Angle math shared by the round chart families.

Pie, donut and polar-area charts are variants of one `SliceGeometry`
(selected by `SliceKind`); the gauge and radar layouts reuse the same
polar-to-Cartesian conversion.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Sequence
import logging
import math

from chartgeometry.config import (
    DEFAULT_COLORS, DONUT_THICKNESS, GAUGE_END_ANGLE, GAUGE_START_ANGLE, palette_color
)
from chartgeometry.errors import InvalidInputError
from chartgeometry.model.datasets import CategoricalPoint, MultiSeriesPoint, ensure_finite, series_columns
from chartgeometry.model.geometry_primitives import Arc, Path, PathBuilder, Point, Polygon, Vector
from chartgeometry.model.geometry_utils import describe_arc, describe_arc_from, polar_to_cartesian
from chartgeometry.utils import clamp

logger = logging.getLogger(__name__)

FULL_TURN: float = 360.0


# ------------------------------------------------------------------------------
# Slices (pie / donut / polar area)
# ------------------------------------------------------------------------------
class SliceKind(StrEnum):
    PIE = "pie"
    DONUT = "donut"
    POLAR_AREA = "polar_area"


@dataclass(frozen=True)
class Slice:
    """
    Geometry of one dataset record on a round chart.

    Attributes:
        index: Position of the record in the dataset.
        label: Record label.
        value: Record value.
        percentage: Share of the total (0-100).
        arc: Outer sweep of the slice.
        path: Filled shape (wedge, or ring segment for donuts).
        label_anchor: Where a renderer may centre the slice label.
        color: Record color, or the palette color for its index.
    """
    index: int
    label: str
    value: float
    percentage: float
    arc: Arc
    path: Path
    label_anchor: Point
    color: str


@dataclass(frozen=True)
class SliceGeometry:
    """
    Lays out a categorical dataset as slices around (`cx`, `cy`).

    Args:
        kind: Chart variant.
        cx: Center x.
        cy: Center y.
        radius: Outer radius.
        thickness: Ring thickness (donut only).
        palette: Fallback colors for records without their own color.
    """
    kind: SliceKind
    cx: float
    cy: float
    radius: float
    thickness: float = DONUT_THICKNESS
    palette: tuple[str, ...] = field(default=DEFAULT_COLORS)

    @property
    def inner_radius(self) -> float:
        return self.radius - self.thickness

    def layout(self, data: Sequence[CategoricalPoint]) -> tuple[Slice, ...]:
        """
        Compute one `Slice` per record, walking the dataset in order.

        Raises:
            InvalidInputError: Empty dataset, negative values, zero total
                (pie/donut), non-positive maximum (polar area) or a donut
                thickness that leaves no hole.
        """
        if not data:
            raise InvalidInputError("A round chart needs at least one data point.")
        if self.radius <= 0:
            raise InvalidInputError(f"Radius must be positive, got {self.radius}.")

        values = ensure_finite((p.value for p in data), "slice values")
        if any(v < 0 for v in values):
            raise InvalidInputError("Slice values must not be negative.")

        total = sum(values)
        sweeps, radii = self._sweeps_and_radii(values, total)

        slices = []
        running_angle = 0.0
        for i, (point, sweep, r) in enumerate(zip(data, sweeps, radii)):
            start_angle = running_angle
            end_angle = start_angle + sweep
            running_angle += sweep

            arc = Arc(self.cx, self.cy, r, start_angle, end_angle, index=i)
            slices.append(
                Slice(
                    index=i,
                    label=point.label,
                    value=point.value,
                    percentage=point.value / total * 100 if total else 0.0,
                    arc=arc,
                    path=self._shape(arc),
                    label_anchor=self._label_anchor(arc),
                    color=point.color or palette_color(i, self.palette)
                )
            )

        logger.debug(f"Laid out {len(slices)} {self.kind} slices (total={total}).")
        return tuple(slices)

    def _sweeps_and_radii(self, values: tuple[float, ...], total: float) -> tuple[list[float], list[float]]:
        match self.kind:
            case SliceKind.PIE | SliceKind.DONUT:
                if total == 0:
                    raise InvalidInputError("Cannot compute slice percentages of a zero total.")
                if self.kind == SliceKind.DONUT and self.inner_radius <= 0:
                    raise InvalidInputError(
                        f"Donut thickness {self.thickness} must be smaller than the radius {self.radius}."
                    )
                sweeps = [v / total * FULL_TURN for v in values]
                return sweeps, [self.radius] * len(values)
            case SliceKind.POLAR_AREA:
                max_value = max(values)
                if max_value <= 0:
                    raise InvalidInputError("Polar area charts need at least one positive value.")
                step = FULL_TURN / len(values)
                return [step] * len(values), [v / max_value * self.radius for v in values]
            case _:
                raise ValueError(f"Unknown slice kind: {self.kind}")

    def _shape(self, arc: Arc) -> Path:
        """
        Wedge for pie and polar-area slices. A donut segment is the outer wedge
        followed by the inner wedge traced with reversed angles (end to start).

        The reversed inner wedge has a negative sweep, so its large-arc flag is
        always 0: for a slice wider than 180 deg the inner edge is drawn along
        the short way round. A full-turn donut is split into half arcs and
        is not affected.
        """
        outer = describe_arc_from(arc)
        if self.kind != SliceKind.DONUT:
            return outer
        inner = describe_arc(arc.cx, arc.cy, self.inner_radius, arc.end_angle, arc.start_angle, arc.index)
        return outer + inner

    def _label_anchor(self, arc: Arc) -> Point:
        match self.kind:
            case SliceKind.PIE:
                r = arc.r / 2
            case SliceKind.DONUT:
                r = (arc.r + self.inner_radius) / 2
            case _:
                r = arc.r * 0.7
        anchor = polar_to_cartesian(arc.cx, arc.cy, r, arc.mid_angle)
        return Point(anchor.x, anchor.y, arc.index)


def slice_angles(values: Sequence[float]) -> list[tuple[float, float]]:
    """`(start, end)` angle of each value of a pie, in degrees."""
    data = [CategoricalPoint(label=str(i), value=v) for i, v in enumerate(values)]
    return [(s.arc.start_angle, s.arc.end_angle) for s in SliceGeometry(SliceKind.PIE, 0.0, 0.0, 1.0).layout(data)]


def layout_pie(data: Sequence[CategoricalPoint], cx: float, cy: float, radius: float) -> tuple[Slice, ...]:
    return SliceGeometry(SliceKind.PIE, cx, cy, radius).layout(data)


def layout_donut(
    data: Sequence[CategoricalPoint],
    cx: float,
    cy: float,
    radius: float,
    thickness: float = DONUT_THICKNESS
) -> tuple[Slice, ...]:
    return SliceGeometry(SliceKind.DONUT, cx, cy, radius, thickness=thickness).layout(data)


def layout_polar_area(data: Sequence[CategoricalPoint], cx: float, cy: float, radius: float) -> tuple[Slice, ...]:
    return SliceGeometry(SliceKind.POLAR_AREA, cx, cy, radius).layout(data)


# ------------------------------------------------------------------------------
# Gauge
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class GaugeThreshold:
    value: float
    color: str


@dataclass(frozen=True)
class GaugeTick:
    value: float
    start: Point
    end: Point
    major: bool


@dataclass(frozen=True)
class GaugeGeometry:
    """
    Attributes:
        angle: Needle angle in degrees, math convention (-180 left, 0 right).
        track: Full half-circle background stroke.
        value_arc: Stroke from the minimum to the current value.
        color: Color selected from the thresholds.
        ticks: Tick marks (every 10 %, major every 50 %).
    """
    angle: float
    track: Path
    value_arc: Path
    color: str
    ticks: tuple[GaugeTick, ...]


def gauge_angle(value: float, min_value: float, max_value: float) -> float:
    """
    Map `value` onto the fixed half-circle sweep [-180 deg, 0 deg].
    The value is clamped into [min_value, max_value] first.
    """
    value, min_value, max_value = ensure_finite((value, min_value, max_value), "gauge values")
    if max_value <= min_value:
        raise InvalidInputError(f"Gauge range is empty: min={min_value}, max={max_value}.")
    clamped = clamp(value, min_value, max_value)
    return GAUGE_START_ANGLE + (clamped - min_value) / (max_value - min_value) * (GAUGE_END_ANGLE - GAUGE_START_ANGLE)


def _gauge_point(cx: float, cy: float, r: float, angle: float) -> Point:
    # Math convention angle -> chart convention (0 deg up)
    return polar_to_cartesian(cx, cy, r, angle + 90)


def _gauge_stroke(cx: float, cy: float, r: float, angle: float) -> Path:
    start = _gauge_point(cx, cy, r, GAUGE_START_ANGLE)
    end = _gauge_point(cx, cy, r, angle)
    return (
        PathBuilder()
        .move_to(start.x, start.y)
        .arc_to(r, r, end.x, end.y, large_arc=angle - GAUGE_START_ANGLE > 180, sweep=True)
        .build()
    )


def gauge_color(value: float, thresholds: Sequence[GaugeThreshold], default: str) -> str:
    """Color of the highest threshold not above `value` (unclamped)."""
    for threshold in sorted(thresholds, key=lambda t: t.value, reverse=True):
        if value >= threshold.value:
            return threshold.color
    return default


def layout_gauge(
    value: float,
    cx: float,
    cy: float,
    radius: float,
    min_value: float = 0.0,
    max_value: float = 100.0,
    thickness: float = 20.0,
    thresholds: Sequence[GaugeThreshold] = (),
    color: str = DEFAULT_COLORS[0]
) -> GaugeGeometry:
    angle = gauge_angle(value, min_value, max_value)

    ticks = []
    tick_radius = radius - thickness / 2
    for i in range(11):
        tick_angle = GAUGE_START_ANGLE + i * (GAUGE_END_ANGLE - GAUGE_START_ANGLE) / 10
        length = 10.0 if i % 5 == 0 else 5.0
        ticks.append(
            GaugeTick(
                value=min_value + i * (max_value - min_value) / 10,
                start=_gauge_point(cx, cy, tick_radius, tick_angle),
                end=_gauge_point(cx, cy, tick_radius - length, tick_angle),
                major=i % 5 == 0
            )
        )

    return GaugeGeometry(
        angle=angle,
        track=_gauge_stroke(cx, cy, radius, GAUGE_END_ANGLE),
        value_arc=_gauge_stroke(cx, cy, radius, angle),
        color=gauge_color(value, thresholds, color),
        ticks=tuple(ticks)
    )


# ------------------------------------------------------------------------------
# Radar
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class RadarSeries:
    name: str
    index: int
    vertices: tuple[Point, ...]
    outline: Path


@dataclass(frozen=True)
class RadarLayout:
    series: tuple[RadarSeries, ...]
    axes: tuple[Point, ...]
    grid: tuple[Polygon, ...]


def layout_radar(
    data: Sequence[MultiSeriesPoint],
    series: Sequence[str],
    cx: float,
    cy: float,
    radius: float,
    levels: int = 5
) -> RadarLayout:
    """
    One closed outline per series over one axis per data point. The first
    axis points up; distances are `value / max_value * radius`.
    """
    if len(data) < 3:
        raise InvalidInputError(f"A radar chart needs at least 3 axes, got {len(data)}.")
    columns = series_columns(data, series)
    max_value = max((v for column in columns for v in column), default=0.0)
    if max_value <= 0:
        raise InvalidInputError("Radar charts need at least one positive value.")

    angle_step = 2 * math.pi / len(data)
    center = Point(cx, cy)

    def vertex(distance: float, i: int) -> Point:
        p = center + Vector(distance, 0.0).rotate(i * angle_step - math.pi / 2)
        return Point(p.x, p.y, i)

    result = []
    for s, (name, column) in enumerate(zip(series, columns)):
        vertices = tuple(vertex(v / max_value * radius, i) for i, v in enumerate(column))
        outline = PathBuilder().polyline(list(vertices)).close().build(s)
        result.append(RadarSeries(name=name, index=s, vertices=vertices, outline=outline))

    grid = tuple(
        Polygon(tuple(vertex((level + 1) * radius / levels, i) for i in range(len(data))), index=level)
        for level in range(levels)
    )

    return RadarLayout(
        series=tuple(result),
        axes=tuple(vertex(radius, i) for i in range(len(data))),
        grid=grid
    )
