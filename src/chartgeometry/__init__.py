"""
Chart Geometry
==============
Pure layout engine for data charts: scales, polar slices, gradients,
treemaps, Sankey flows, series paths and categorical shapes.

The public entry points are re-exported here; the layers live in
`chartgeometry.model` (records and descriptors) and `chartgeometry.layout`.
"""
from chartgeometry.errors import ChartGeometryError, GraphCycleError, InvalidInputError
from chartgeometry.layout.categorical import layout_bars, layout_box_plot, layout_funnel
from chartgeometry.layout.color import GradientInterpolator, hex_to_rgb, interpolate_color, layout_heatmap
from chartgeometry.layout.polar import (
    SliceGeometry, SliceKind, layout_donut, layout_gauge, layout_pie, layout_polar_area, layout_radar
)
from chartgeometry.layout.sankey import layout_sankey
from chartgeometry.layout.scale import LinearScale, compute_bounds, map_value, unmap_value
from chartgeometry.layout.series import (
    SeriesKind, layout_bubble, layout_multi_series, layout_scatter, layout_sparkline, size_scale
)
from chartgeometry.layout.treemap import TreemapMethod, layout_treemap
from chartgeometry.model.datasets import (
    BoxStat, CategoricalPoint, HeatCell, MultiSeriesPoint, SankeyLink, SankeyNode, ScatterPoint, TreemapItem
)
from chartgeometry.model.geometry_primitives import Arc, Circle, Path, PathBuilder, Point, Polygon, Rect
from chartgeometry.model.geometry_utils import describe_arc, polar_to_cartesian

__version__ = "0.1.0"
