from __future__ import annotations

from typing import Optional

from math import cos, sin, pi

from chartgeometry.model.geometry_primitives import Arc, Path, PathBuilder, Point

def deg2rad(degrees: float) -> float:
    return degrees * pi / 180

def polar_to_cartesian(
    cx: float,
    cy: float,
    r: float,
    angle_degrees: float
) -> Point:
    """
    Convert a polar coordinate to chart (screen) space.

    The zero direction is rotated -90 deg from the math convention so that
    0 deg points "up" and angles grow clockwise on screen.

    Args:
        cx: Center x.
        cy: Center y.
        r: Radius.
        angle_degrees: Angle in degrees, chart convention.

    Returns:
        The Cartesian point.
    """
    angle_rad = deg2rad(angle_degrees - 90)
    return Point(x=cx + r * cos(angle_rad), y=cy + r * sin(angle_rad))

def describe_arc(
    cx: float,
    cy: float,
    r: float,
    start_angle: float,
    end_angle: float,
    index: Optional[int] = None
) -> Path:
    """
    Build a filled wedge: `M end A r r 0 large 0 start L cx cy Z`.

    The path starts at the point on `end_angle`, sweeps back to the point on
    `start_angle` (sweep flag 0) and closes through the center. The large arc
    flag is set iff the sweep exceeds 180 deg.

    A full turn (|sweep| >= 360 deg) has coinciding end points, which SVG
    renderers drop; it is traced as two half arcs through the opposite point.

    Args:
        cx: Center x.
        cy: Center y.
        r: Radius.
        start_angle: Start angle in degrees (chart convention).
        end_angle: End angle in degrees (chart convention).
        index: Optional index of the source record.

    Returns:
        The wedge path.
    """
    start = polar_to_cartesian(cx, cy, r, end_angle)
    end = polar_to_cartesian(cx, cy, r, start_angle)
    builder = PathBuilder().move_to(start.x, start.y)

    if abs(end_angle - start_angle) >= 360:
        halfway = polar_to_cartesian(cx, cy, r, (start_angle + end_angle) / 2)
        builder.arc_to(r, r, halfway.x, halfway.y, sweep=False)
        builder.arc_to(r, r, end.x, end.y, sweep=False)
    else:
        builder.arc_to(r, r, end.x, end.y, large_arc=end_angle - start_angle > 180, sweep=False)

    return (
        builder
        .line_to(cx, cy)
        .close()
        .build(index)
    )

def describe_arc_from(arc: Arc) -> Path:
    """`describe_arc` for an `Arc` descriptor."""
    return describe_arc(arc.cx, arc.cy, arc.r, arc.start_angle, arc.end_angle, arc.index)

