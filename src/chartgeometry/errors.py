"""
Error Taxonomy
==============
Errors surfaced to the caller of a layout function.

Degenerate scale domains and malformed colors are NOT errors: they are
recovered locally (see `layout.scale` and `layout.color`).
"""
from __future__ import annotations


class ChartGeometryError(ValueError):
    """Base class for all errors raised by the geometry engine."""


class InvalidInputError(ChartGeometryError):
    """
    The input cannot produce meaningful geometry (empty values, fewer than two
    series points, zero total, undeclared Sankey node, ...).
    """


class GraphCycleError(ChartGeometryError):
    """A flow graph contains a cycle, so no layered layout exists."""

    def __init__(self, cycle: tuple[str, ...]) -> None:
        self.cycle = cycle
        super().__init__(f"Flow graph contains a cycle: {' -> '.join(cycle)}")
