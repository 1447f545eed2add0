"""
Input Records
=============
Plain data records describing what a caller wants drawn. These are read by
the layout functions and never mutated.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence
import math

from chartgeometry.errors import InvalidInputError


# ------------------------------------------------------------------------------
# Data Structures
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class CategoricalPoint:
    """One labelled value; a sequence of these is displayed in order."""
    label: str
    value: float
    color: Optional[str] = None


@dataclass(frozen=True)
class MultiSeriesPoint:
    """One category with a value per declared series."""
    label: str
    values: tuple[float, ...]

    def __post_init__(self) -> None:
        # Accept lists from callers, store an immutable copy
        object.__setattr__(self, "values", tuple(self.values))


@dataclass(frozen=True)
class ScatterPoint:
    x: float
    y: float
    size: Optional[float] = None
    label: Optional[str] = None
    color: Optional[str] = None


@dataclass(frozen=True)
class BoxStat:
    """
    Pre-aggregated five-number summary of one category.
    The engine only places these values; it never computes quartiles.
    """
    label: str
    min: float
    q1: float
    median: float
    q3: float
    max: float
    outliers: tuple[float, ...] = ()
    color: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "outliers", tuple(self.outliers))

    def all_values(self) -> tuple[float, ...]:
        return (self.min, self.q1, self.median, self.q3, self.max, *self.outliers)


@dataclass(frozen=True)
class HeatCell:
    x: float
    y: float
    value: float


@dataclass(frozen=True)
class TreemapItem:
    """
    A weighted item. `children` is carried for callers that drill down, but
    only one level is packed per layout call.
    """
    label: str
    value: float
    children: tuple[TreemapItem, ...] = ()
    color: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))


@dataclass(frozen=True)
class SankeyNode:
    id: str
    label: str
    color: Optional[str] = None


@dataclass(frozen=True)
class SankeyLink:
    source: str
    target: str
    value: float
    color: Optional[str] = None


# ------------------------------------------------------------------------------
# Validation helpers
# ------------------------------------------------------------------------------
def ensure_finite(values: Iterable[float], what: str = "values") -> tuple[float, ...]:
    """Copy `values` into a tuple of floats, rejecting NaN/inf."""
    result = tuple(float(v) for v in values)
    for v in result:
        if not math.isfinite(v):
            raise InvalidInputError(f"All {what} must be finite numbers, got {v!r}.")
    return result


def ensure_non_empty(values: Sequence, what: str) -> None:
    if len(values) == 0:
        raise InvalidInputError(f"At least one {what} is required.")


def series_columns(data: Sequence[MultiSeriesPoint], series: Sequence[str]) -> list[tuple[float, ...]]:
    """
    Transpose a multi-series dataset into one value tuple per series.

    Raises:
        InvalidInputError: If a point does not carry exactly one value per series.
    """
    for point in data:
        if len(point.values) != len(series):
            raise InvalidInputError(
                f"Point '{point.label}' has {len(point.values)} values, "
                f"expected {len(series)} (one per series)."
            )
    return [ensure_finite((p.values[i] for p in data), f"'{name}' values") for i, name in enumerate(series)]
