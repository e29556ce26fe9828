"""
Rasterize the polygon outline onto the compressed grid.
"""

from typing import Iterator, List, Tuple

import numpy as np

from maxrect.coordinate_compressor import CompressedGeometry, Point


def polygon_edges(points: List[Point]) -> Iterator[Tuple[Point, Point]]:
    """Yield (start, end) for every edge of the closed loop, wrapping last -> first."""
    num_vertices = len(points)
    for i in range(num_vertices):
        yield points[i], points[(i + 1) % num_vertices]


def rasterize_boundary(points: List[Point], geometry: CompressedGeometry) -> np.ndarray:
    """
    Mark every compressed cell covered by a polygon edge.

    Each edge is filled as the inclusive rectangle between its two mapped
    endpoints. For a rectilinear edge that is a one cell wide strip, and it
    includes the collapsed cells between consecutive mapped coordinates, so
    the exterior fill cannot leak through a compressed edge.

    Args:
        points: Polygon vertices as (row, col) tuples, in loop order
        geometry: Compressed geometry built from the same points

    Returns:
        np.ndarray: boolean boundary mask of shape geometry.shape
    """
    boundary = np.zeros(geometry.shape, dtype=bool)

    for start, end in polygon_edges(points):
        start_row, start_col = geometry.to_grid(start)
        end_row, end_col = geometry.to_grid(end)

        row_lo, row_hi = min(start_row, end_row), max(start_row, end_row)
        col_lo, col_hi = min(start_col, end_col), max(start_col, end_col)
        boundary[row_lo:row_hi + 1, col_lo:col_hi + 1] = True

    return boundary
