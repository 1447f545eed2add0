"""
Linear Scales
=============
Maps a numeric data domain onto a pixel range and back, and computes padded
axis bounds and tick values.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, TYPE_CHECKING
import logging
import math

import numpy as np

from chartgeometry.config import BOUNDS_PADDING_RATIO, DEFAULT_TICK_COUNT
from chartgeometry.errors import InvalidInputError
from chartgeometry.model.datasets import ensure_finite

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bounds:
    """Axis bounds (domain) computed from data."""
    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min

    @property
    def is_degenerate(self) -> bool:
        return self.max == self.min

    def __iter__(self):
        # Allows `lo, hi = compute_bounds(values)`
        yield self.min
        yield self.max


@dataclass(frozen=True)
class Tick:
    """A tick value and its position along the range."""
    value: float
    position: float


def compute_bounds(values: Iterable[float], padding_ratio: float = BOUNDS_PADDING_RATIO) -> Bounds:
    """
    Compute padded integer axis bounds for a series.

    `padding = (max - min) * padding_ratio`; the result is
    `floor(min - padding)`, `ceil(max + padding)`. A constant series gets
    zero padding; callers must handle the (possibly) degenerate result.

    Args:
        values: The data values (at least one).
        padding_ratio: Fraction of the data span added on each side.

    Raises:
        InvalidInputError: If `values` is empty or contains non-finite numbers.

    Returns:
        The padded bounds.
    """
    data = ensure_finite(values)
    if not data:
        raise InvalidInputError("Cannot compute axis bounds of an empty series.")

    lo = min(data)
    hi = max(data)
    padding = (hi - lo) * padding_ratio

    return Bounds(min=float(math.floor(lo - padding)), max=float(math.ceil(hi + padding)))


def data_extent(values: Iterable[float]) -> Bounds:
    """Raw (unpadded) min/max of a series."""
    data = ensure_finite(values)
    if not data:
        raise InvalidInputError("Cannot compute the extent of an empty series.")
    return Bounds(min=min(data), max=max(data))


@dataclass(frozen=True)
class LinearScale:
    """
    Strictly linear mapping `domain -> range` without clamping.

    An inverted range (e.g. `range_min=height, range_max=0` for a y axis) is
    allowed. A degenerate domain (`domain_min == domain_max`) maps every value
    onto `range_min`.
    """
    domain_min: float
    domain_max: float
    range_min: float
    range_max: float

    @classmethod
    def from_bounds(cls, bounds: Bounds, range_min: float, range_max: float) -> LinearScale:
        return cls(bounds.min, bounds.max, range_min, range_max)

    @property
    def is_degenerate(self) -> bool:
        return self.domain_max == self.domain_min

    def map(self, value: float) -> float:
        if self.is_degenerate:
            logger.debug(f"Degenerate domain [{self.domain_min}, {self.domain_max}]; mapping to range_min.")
            return self.range_min
        t = (value - self.domain_min) / (self.domain_max - self.domain_min)
        return self.range_min + t * (self.range_max - self.range_min)

    def unmap(self, pixel: float) -> float:
        """Inverse of `map`, e.g. to translate a pointer position back into data."""
        if self.is_degenerate or self.range_max == self.range_min:
            return self.domain_min
        t = (pixel - self.range_min) / (self.range_max - self.range_min)
        return self.domain_min + t * (self.domain_max - self.domain_min)

    def map_array(self, values: npt.ArrayLike) -> npt.NDArray[np.float64]:
        """Vectorized `map`."""
        arr = np.asarray(values, dtype=np.float64)
        if self.is_degenerate:
            return np.full_like(arr, self.range_min)
        t = (arr - self.domain_min) / (self.domain_max - self.domain_min)
        return self.range_min + t * (self.range_max - self.range_min)

    def ticks(self, count: int = DEFAULT_TICK_COUNT) -> tuple[Tick, ...]:
        """
        `count + 1` evenly spaced ticks from `domain_max` down to `domain_min`
        (top-to-bottom grid line order on a y axis).
        """
        if count < 1:
            raise InvalidInputError(f"Tick count must be at least 1, got {count}.")
        values = self.domain_max - (self.domain_max - self.domain_min) * np.arange(count + 1) / count
        return tuple(Tick(value=float(v), position=self.map(float(v))) for v in values)


def map_value(value: float, domain: tuple[float, float], range_: tuple[float, float]) -> float:
    """Functional form of `LinearScale.map` on `(min, max)` pairs."""
    return LinearScale(domain[0], domain[1], range_[0], range_[1]).map(value)


def unmap_value(pixel: float, domain: tuple[float, float], range_: tuple[float, float]) -> float:
    """Functional form of `LinearScale.unmap` on `(min, max)` pairs."""
    return LinearScale(domain[0], domain[1], range_[0], range_[1]).unmap(pixel)
