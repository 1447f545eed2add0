"""Unit tests for gradient interpolation and heatmap cells."""

from __future__ import annotations

import pytest

from chartgeometry.errors import InvalidInputError
from chartgeometry.layout.color import (
    GradientInterpolator,
    hex_to_rgb,
    interpolate_color,
    layout_heatmap,
    normalize,
)
from chartgeometry.model.datasets import HeatCell
from chartgeometry.model.geometry_primitives import Rect

pytestmark = pytest.mark.unit

BLACK_TO_WHITE = ["#000000", "#ffffff"]


@pytest.mark.parametrize(
    ("t", "expected"),
    [(0.0, "rgb(0,0,0)"), (1.0, "rgb(255,255,255)"), (0.5, "rgb(128,128,128)")],
)
def test_interpolate_black_to_white(t, expected) -> None:
    """Interpolate channels linearly, rounding half up."""

    assert interpolate_color(BLACK_TO_WHITE, t) == expected


def test_interpolate_clamps_position() -> None:
    """Positions outside [0, 1] resolve to the end stops."""

    assert interpolate_color(BLACK_TO_WHITE, -3) == "rgb(0,0,0)"
    assert interpolate_color(BLACK_TO_WHITE, 7) == "rgb(255,255,255)"


def test_interpolate_lands_on_inner_stop() -> None:
    """The midpoint of a three-stop gradient is exactly the middle stop."""

    assert interpolate_color(["#ff0000", "#00ff00", "#0000ff"], 0.5) == "rgb(0,255,0)"
    assert interpolate_color(["#ff0000", "#00ff00", "#0000ff"], 0.25) == "rgb(128,128,0)"


def test_interpolate_needs_two_stops() -> None:
    """A single stop is not a gradient."""

    with pytest.raises(InvalidInputError):
        interpolate_color(["#ffffff"], 0.5)
    with pytest.raises(InvalidInputError):
        GradientInterpolator(["#ffffff"])


def test_hex_to_rgb_tolerates_malformed_channels() -> None:
    """Unreadable or missing channels read as 0."""

    assert hex_to_rgb("#3b82f6") == (59, 130, 246)
    assert hex_to_rgb("3b82f6") == (59, 130, 246)
    assert hex_to_rgb("#zz8000") == (0, 128, 0)
    assert hex_to_rgb("#fff") == (255, 0, 0)
    assert hex_to_rgb("#-1ff00") == (0, 255, 0)
    assert hex_to_rgb("#ab f00") == (171, 0, 0)


def test_interpolate_keeps_channels_in_byte_range() -> None:
    """Signed channels are malformed, so they read as 0 instead of going negative."""

    assert interpolate_color(["#-1-1-1", "#-1-1-1"], 0.0) == "rgb(0,0,0)"
    assert interpolate_color(["#-1-1-1", "#ffffff"], 0.5) == "rgb(128,128,128)"


def test_interpolate_rejects_nan_position() -> None:
    """A NaN position cannot be clamped and is rejected."""

    with pytest.raises(InvalidInputError):
        interpolate_color(BLACK_TO_WHITE, float("nan"))


def test_normalize_degenerate_range() -> None:
    """A zero-width range normalizes to 0."""

    assert normalize(5, 0, 10) == 0.5
    assert normalize(5, 5, 5) == 0.0


def test_gradient_colors_for_series() -> None:
    """Color a series by its own extent."""

    gradient = GradientInterpolator(BLACK_TO_WHITE)

    assert gradient.colors_for([0, 5, 10]) == ["rgb(0,0,0)", "rgb(128,128,128)", "rgb(255,255,255)"]
    assert gradient.colors_for([]) == []


def test_layout_heatmap_places_cells_on_grid() -> None:
    """Cells sit on the grid of distinct x/y values, colored by value."""

    cells = [HeatCell(0, 0, 1), HeatCell(1, 0, 2), HeatCell(0, 1, 3), HeatCell(1, 1, 4)]

    heatmap = layout_heatmap(cells, 100, 50)

    assert heatmap.cell_width == 50
    assert heatmap.cell_height == 25
    assert heatmap.cells[3].rect == Rect(50, 25, 50, 25, index=3)
    assert heatmap.cells[0].color == "rgb(247,251,255)"
    assert heatmap.cells[3].color == "rgb(8,81,156)"
    assert (heatmap.min_value, heatmap.max_value) == (1, 4)


def test_layout_heatmap_rejects_empty() -> None:
    """An empty grid has no cell size."""

    with pytest.raises(InvalidInputError):
        layout_heatmap([], 100, 50)
