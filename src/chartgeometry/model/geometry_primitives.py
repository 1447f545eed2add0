"""
Geometry Descriptors for Renderers.

Immutable value objects produced by the layout functions. They carry no
reference to the source data except an optional `index` into the input
sequence, which lets a renderer re-associate styling.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional, Tuple, Union, TYPE_CHECKING
import math

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


def format_coordinate(value: float) -> str:
    """Format a coordinate for path data (max. 6 decimals, no trailing zeros)."""
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


@dataclass(frozen=True)
class Vector:
    """
    A 2D displacement (direction and magnitude).
    """
    x: float
    y: float

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector:
        return Vector(self.x * scalar, self.y * scalar)

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y)

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> Vector:
        mag = self.magnitude
        if mag == 0.0: return Vector(0.0, 0.0)
        return Vector(self.x / mag, self.y / mag)

    def rotate(self, angle_rad: float) -> Vector:
        """Rotate the vector around the origin (screen coordinates, y down)."""
        cos_a = math.cos(angle_rad)
        sin_a = math.sin(angle_rad)
        return Vector(
            self.x * cos_a - self.y * sin_a,
            self.x * sin_a + self.y * cos_a
        )


@dataclass(frozen=True)
class Point:
    """A position in chart space."""
    x: float
    y: float
    index: Optional[int] = None

    def __add__(self, other: Vector) -> Point:
        # Point + Vector = Point (Translation)
        if isinstance(other, Vector):
            return Point(self.x + other.x, self.y + other.y, self.index)
        raise TypeError("Can only add a Vector to a Point.")

    def __sub__(self, other: Union[Vector, Point]) -> Union[Vector, Point]:
        # Point - Point = Vector (Direction)
        if isinstance(other, Point):
            return Vector(self.x - other.x, self.y - other.y)
        # Point - Vector = Point (Inverse translation)
        if isinstance(other, Vector):
            return Point(self.x - other.x, self.y - other.y, self.index)
        raise TypeError("Can only subtract a Vector or Point from a Point.")

    def distance_to(self, other: Point) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y])

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle; `y` grows downwards."""
    x: float
    y: float
    width: float
    height: float
    index: Optional[int] = None

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Point:
        return Point(self.x + self.width / 2, self.y + self.height / 2, self.index)

    def shrink(self, padding: float) -> Rect:
        """
        Inset every edge by `padding`. The size never becomes negative; a
        rectangle narrower than the gutter collapses onto its centre line.
        """
        width = max(0.0, self.width - 2 * padding)
        height = max(0.0, self.height - 2 * padding)
        return Rect(
            x=self.x + (self.width - width) / 2,
            y=self.y + (self.height - height) / 2,
            width=width,
            height=height,
            index=self.index
        )

    def overlap_area(self, other: Rect) -> float:
        dx = min(self.right, other.right) - max(self.x, other.x)
        dy = min(self.bottom, other.bottom) - max(self.y, other.y)
        if dx <= 0.0 or dy <= 0.0:
            return 0.0
        return dx * dy

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Circle:
    """A circle marker (scatter point, bubble)."""
    cx: float
    cy: float
    r: float
    index: Optional[int] = None

    @property
    def center(self) -> Point:
        return Point(self.cx, self.cy, self.index)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Arc:
    """
    A circular sweep in chart angle convention: 0 deg points up and angles grow
    clockwise on screen.
    """
    cx: float
    cy: float
    r: float
    start_angle: float
    end_angle: float
    index: Optional[int] = None

    @property
    def sweep(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def mid_angle(self) -> float:
        return (self.start_angle + self.end_angle) / 2

    @property
    def large_arc(self) -> bool:
        return self.sweep > 180

    def discretize(self, n_points: int = 100) -> npt.NDArray[np.float64]:
        """
        Generates points along the arc from `start_angle` to `end_angle`.
        Useful for renderers without native arc support.

        Returns:
            Array of shape (n_points, 2) with the (x, y) coordinates.
        """
        angles = np.deg2rad(np.linspace(self.start_angle, self.end_angle, max(2, n_points)) - 90.0)

        x = self.cx + self.r * np.cos(angles)
        y = self.cy + self.r * np.sin(angles)

        return np.column_stack((x, y))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PathCommand:
    """One SVG-style path command, e.g. `L 10 20`."""
    op: str
    args: Tuple[float, ...] = ()

    def __str__(self) -> str:
        if not self.args:
            return self.op
        return " ".join([self.op, *(format_coordinate(a) for a in self.args)])


@dataclass(frozen=True)
class Path:
    """An ordered list of path commands."""
    commands: Tuple[PathCommand, ...] = ()
    index: Optional[int] = None

    @property
    def d(self) -> str:
        """SVG path data string."""
        return " ".join(str(c) for c in self.commands)

    def __add__(self, other: Path) -> Path:
        # Concatenation keeps the left-hand index (e.g. donut outer + inner wedge)
        return Path(self.commands + other.commands, self.index)

    def __str__(self) -> str:
        return self.d

    def to_dict(self) -> Dict[str, Any]:
        return {"d": self.d, "index": self.index}


@dataclass(frozen=True)
class Polygon:
    """A closed polygon (funnel stage, radar outline)."""
    points: Tuple[Point, ...] = ()
    index: Optional[int] = None

    @property
    def svg_points(self) -> str:
        return " ".join(f"{format_coordinate(p.x)},{format_coordinate(p.y)}" for p in self.points)

    def to_dict(self) -> Dict[str, Any]:
        return {"points": [(p.x, p.y) for p in self.points], "index": self.index}


@dataclass
class PathBuilder:
    """
    Accumulates path commands and freezes them into a `Path`.
    """
    commands: list[PathCommand] = field(default_factory=list)

    def move_to(self, x: float, y: float) -> PathBuilder:
        self.commands.append(PathCommand("M", (x, y)))
        return self

    def line_to(self, x: float, y: float) -> PathBuilder:
        self.commands.append(PathCommand("L", (x, y)))
        return self

    def horizontal_to(self, x: float) -> PathBuilder:
        self.commands.append(PathCommand("H", (x,)))
        return self

    def vertical_to(self, y: float) -> PathBuilder:
        self.commands.append(PathCommand("V", (y,)))
        return self

    def arc_to(
        self,
        rx: float,
        ry: float,
        x: float,
        y: float,
        *,
        large_arc: bool = False,
        sweep: bool = False,
        rotation: float = 0.0
    ) -> PathBuilder:
        self.commands.append(PathCommand("A", (rx, ry, rotation, int(large_arc), int(sweep), x, y)))
        return self

    def curve_to(
        self,
        c1x: float,
        c1y: float,
        c2x: float,
        c2y: float,
        x: float,
        y: float
    ) -> PathBuilder:
        self.commands.append(PathCommand("C", (c1x, c1y, c2x, c2y, x, y)))
        return self

    def close(self) -> PathBuilder:
        self.commands.append(PathCommand("Z"))
        return self

    def polyline(self, points: list[Point]) -> PathBuilder:
        """`M` to the first point, `L` through the rest."""
        for i, point in enumerate(points):
            if i == 0:
                self.move_to(point.x, point.y)
            else:
                self.line_to(point.x, point.y)
        return self

    def build(self, index: Optional[int] = None) -> Path:
        return Path(tuple(self.commands), index)


# Union type for renderer dispatch
GeometryDescriptor = Union[Point, Rect, Circle, Arc, Path, Polygon]
