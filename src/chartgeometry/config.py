"""
Configuration & Defaults
========================
This module serves as the central registry for global constants used by the
layout functions.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (paddings, default sizes, palette)
   scattered throughout the layout code.
2. Consistency: Layouts and renderers read the same palette and spacing
   defaults, so a chart drawn from the geometry matches its own legend.

Exports:
    DEFAULT_COLORS (tuple[str, ...]): Default categorical palette.
    palette_color: Palette lookup by record index.
"""
from __future__ import annotations

# ------------------------------------------------------------------------------
# Palette
# ------------------------------------------------------------------------------
DEFAULT_COLORS: tuple[str, ...] = (
    "#3b82f6",  # blue
    "#ef4444",  # red
    "#22c55e",  # green
    "#f59e0b",  # yellow
    "#8b5cf6",  # purple
    "#ec4899",  # pink
    "#14b8a6",  # teal
    "#f97316",  # orange
    "#6366f1",  # indigo
    "#84cc16",  # lime
)

DEFAULT_HEATMAP_STOPS: tuple[str, ...] = ("#f7fbff", "#08519c")


def palette_color(index: int, palette: tuple[str, ...] = DEFAULT_COLORS) -> str:
    """Cycle through the palette by record index."""
    return palette[index % len(palette)]


# ------------------------------------------------------------------------------
# Numeric constants
# ------------------------------------------------------------------------------
BOUNDS_PADDING_RATIO: float = 0.1
DEFAULT_TICK_COUNT: int = 5

MIN_BUBBLE_RADIUS: float = 10.0
MAX_BUBBLE_RADIUS: float = 50.0
SCATTER_RADIUS: float = 8.0

TREEMAP_PADDING: float = 1.0

SANKEY_NODE_WIDTH: float = 24.0
SANKEY_LINK_WIDTH_FACTOR: float = 0.5

DONUT_THICKNESS: float = 50.0
GAUGE_START_ANGLE: float = -180.0
GAUGE_END_ANGLE: float = 0.0

BAR_FILL_RATIO: float = 0.8
FUNNEL_TAIL_RATIO: float = 0.2

