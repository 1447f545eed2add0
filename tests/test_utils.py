"""Unit tests for formatting helpers, errors and logging setup."""

from __future__ import annotations

import io
import logging

import pytest

from chartgeometry.config import DEFAULT_COLORS, palette_color
from chartgeometry.errors import ChartGeometryError, GraphCycleError, InvalidInputError
from chartgeometry.logging_config import setup_logging
from chartgeometry.model.datasets import MultiSeriesPoint, ensure_finite, series_columns
from chartgeometry.utils import aspect_ratio, clamp, format_number

pytestmark = pytest.mark.unit


def test_format_number_compacts_large_values() -> None:
    """Abbreviate thousands, millions and billions with one decimal."""

    assert format_number(12) == "12.0"
    assert format_number(1500) == "1.5K"
    assert format_number(2_500_000) == "2.5M"
    assert format_number(3e9) == "3.0B"
    assert format_number(-4200) == "-4.2K"


def test_aspect_ratio_reduces_by_gcd() -> None:
    """Reduce the ratio of two sides; a zero-sized area has no ratio."""

    assert aspect_ratio(1920, 1080) == "16/9"
    assert aspect_ratio(600, 400) == "3/2"
    with pytest.raises(ValueError):
        aspect_ratio(0, 0)


def test_clamp() -> None:
    """Clamp into a closed interval."""

    assert clamp(5, 0, 10) == 5
    assert clamp(-1, 0, 10) == 0
    assert clamp(11, 0, 10) == 10


def test_error_taxonomy_is_value_error() -> None:
    """All engine errors derive from ValueError."""

    assert issubclass(InvalidInputError, ChartGeometryError)
    assert issubclass(GraphCycleError, ChartGeometryError)
    assert issubclass(ChartGeometryError, ValueError)


def test_graph_cycle_error_names_cycle() -> None:
    """Carry the cycle and name it in the message."""

    error = GraphCycleError(("a", "b", "a"))

    assert error.cycle == ("a", "b", "a")
    assert str(error) == "Flow graph contains a cycle: a -> b -> a"


def test_ensure_finite_rejects_nan() -> None:
    """Reject NaN and infinity in numeric input."""

    assert ensure_finite([1, 2.5]) == (1.0, 2.5)
    with pytest.raises(InvalidInputError):
        ensure_finite([1, float("nan")])
    with pytest.raises(InvalidInputError):
        ensure_finite([float("inf")])


def test_series_columns_transposes_and_checks_length() -> None:
    """Transpose per-category values into per-series columns."""

    data = [MultiSeriesPoint("a", [1, 2]), MultiSeriesPoint("b", [3, 4])]

    assert series_columns(data, ["x", "y"]) == [(1.0, 3.0), (2.0, 4.0)]
    with pytest.raises(InvalidInputError):
        series_columns(data, ["x"])


def test_setup_logging_does_not_duplicate_handlers(tmp_path) -> None:
    """Repeated setup replaces handlers instead of stacking them."""

    log_file = tmp_path / "layout.log"

    logger = setup_logging(logging.DEBUG)
    logger = setup_logging(logging.DEBUG, log_file=str(log_file))

    try:
        assert logger.name == "chartgeometry"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
        assert "Logging initialized at level DEBUG." in log_file.read_text(encoding="utf-8")
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


def test_palette_cycles_by_index() -> None:
    """Indices past the palette length wrap around."""

    assert len(DEFAULT_COLORS) == 10
    assert palette_color(0) == DEFAULT_COLORS[0]
    assert palette_color(12) == DEFAULT_COLORS[2]


def test_setup_logging_writes_to_given_stream() -> None:
    """Console output goes to the stream passed in, using the package format."""

    stream = io.StringIO()
    logger = setup_logging(logging.WARNING, stream=stream)

    try:
        logging.getLogger("chartgeometry.layout.sankey").warning("cycle found")
        logging.getLogger("chartgeometry.layout.scale").debug("not shown")

        output = stream.getvalue()
        assert " - chartgeometry.layout.sankey - WARNING - cycle found" in output
        assert "not shown" not in output
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
