"""Unit tests for treemap packing."""

from __future__ import annotations

from itertools import combinations

import pytest
from pytest import approx

from chartgeometry.errors import InvalidInputError
from chartgeometry.layout.treemap import TreemapMethod, layout_treemap, pack_rows
from chartgeometry.model.datasets import TreemapItem

pytestmark = pytest.mark.unit

VALUES = [6, 6, 4, 3, 2, 2, 1]


def _items(values) -> list[TreemapItem]:
    return [TreemapItem(label=f"item-{i}", value=v) for i, v in enumerate(values)]


@pytest.mark.parametrize("method", list(TreemapMethod))
def test_treemap_covers_box_without_overlap(method) -> None:
    """Rectangle areas sum to the box area and no two rectangles overlap."""

    cells = layout_treemap(_items(VALUES), 600, 400, method=method)

    assert sum(c.bounds.area for c in cells) == approx(600 * 400)
    for a, b in combinations(cells, 2):
        assert a.bounds.overlap_area(b.bounds) == approx(0, abs=1e-6)
    for cell in cells:
        assert cell.bounds.x >= -1e-9 and cell.bounds.right <= 600 + 1e-6
        assert cell.bounds.y >= -1e-9 and cell.bounds.bottom <= 400 + 1e-6


@pytest.mark.parametrize("method", list(TreemapMethod))
def test_treemap_areas_proportional_to_values(method) -> None:
    """Each item gets its share of the box area."""

    cells = layout_treemap(_items(VALUES), 600, 400, method=method)
    total = sum(VALUES)

    assert [c.bounds.area for c in cells] == approx([v / total * 240_000 for v in VALUES])
    assert [c.index for c in cells] == list(range(len(VALUES)))


def test_pack_rows_keeps_input_order_left_to_right() -> None:
    """Rows are filled in input order starting at the box origin."""

    rects = pack_rows([1, 1, 2], 10, 20, 400, 100)

    assert rects[0].x == approx(10)
    assert rects[0].y == approx(20)
    assert [r.x for r in rects] == approx([10, 110, 210])
    assert [r.width for r in rects] == approx([100, 100, 200])


def test_treemap_inner_rect_is_padded() -> None:
    """The inner rectangle leaves the gutter on every edge."""

    (cell,) = layout_treemap(_items([5]), 100, 50, padding=2)

    assert (cell.inner.x, cell.inner.y, cell.inner.width, cell.inner.height) == approx((2, 2, 96, 46))


def test_squarify_produces_reasonable_aspect_ratios() -> None:
    """Squarified cells avoid the thin slivers of a single row."""

    cells = layout_treemap(_items(VALUES), 600, 400, method="squarify")

    for cell in cells:
        ratio = max(cell.bounds.width, cell.bounds.height) / min(cell.bounds.width, cell.bounds.height)
        assert ratio < 4


def test_treemap_rejects_invalid_input() -> None:
    """Empty input, non-positive values or box sizes and unknown methods fail."""

    with pytest.raises(InvalidInputError):
        layout_treemap([], 100, 100)
    with pytest.raises(InvalidInputError):
        layout_treemap(_items([3, 0]), 100, 100)
    with pytest.raises(InvalidInputError):
        layout_treemap(_items([3]), 0, 100)
    with pytest.raises(ValueError):
        layout_treemap(_items([3]), 100, 100, method="spiral")
