"""Pytest fixtures shared across the layout tests."""

from __future__ import annotations

import pytest

from chartgeometry.model.datasets import CategoricalPoint, MultiSeriesPoint, SankeyLink, SankeyNode


@pytest.fixture
def flow_nodes() -> list[SankeyNode]:
    """Return three nodes of a small budget flow."""

    return [
        SankeyNode(id="A", label="Income"),
        SankeyNode(id="B", label="Savings"),
        SankeyNode(id="C", label="Investments"),
    ]


@pytest.fixture
def flow_links() -> list[SankeyLink]:
    """Return an acyclic flow where C is reachable both directly and through B."""

    return [
        SankeyLink(source="A", target="B", value=10),
        SankeyLink(source="B", target="C", value=5),
        SankeyLink(source="A", target="C", value=5),
    ]


@pytest.fixture
def monthly_sales() -> list[CategoricalPoint]:
    """Return a short categorical dataset."""

    return [
        CategoricalPoint(label="Jan", value=30),
        CategoricalPoint(label="Feb", value=70),
    ]


@pytest.fixture
def single_series() -> list[MultiSeriesPoint]:
    """Return four categories of one series whose padded bounds are (0, 55)."""

    return [
        MultiSeriesPoint(label="a", values=[10]),
        MultiSeriesPoint(label="b", values=[20]),
        MultiSeriesPoint(label="c", values=[5]),
        MultiSeriesPoint(label="d", values=[50]),
    ]
