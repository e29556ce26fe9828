"""
Coordinate compression for rectilinear polygons.

Polygon vertices can sit billions of units apart while only a few hundred
distinct rows and columns are actually used. Each axis is compressed
independently:

    original:  2     5        11
    compact:   1  2  3  4  5

Every original value lands on an odd index (1, 3, 5, ...). The even index
between two consecutive odd ones stands for the whole open interval between
the two original values, collapsed into a single cell. Index 0 and the cells
past the last value form an exterior border used as the flood fill seed.
"""

from collections import namedtuple
from typing import Dict, Iterable, List, Tuple


Point = Tuple[int, int]


def compress_axis(values: Iterable[int]) -> Dict[int, int]:
    """
    Map each distinct value to a compact odd index, preserving order.

    Args:
        values: Original coordinate values (duplicates allowed)

    Returns:
        dict: value -> compact index (1, 3, 5, ... in ascending value order)
    """
    index_map = {}
    index = 1
    for value in sorted(set(values)):
        index_map[value] = index
        index += 2
    return index_map


def next_power_of_two(n: int) -> int:
    """Smallest power of two >= n (n >= 1)."""
    if n < 1:
        raise ValueError(f"next_power_of_two needs n >= 1, got {n}")
    return 1 << (n - 1).bit_length()


class CompressedGeometry(namedtuple("CompressedGeometry",
                                    ["row_map", "col_map", "nb_rows", "nb_cols"])):
    """
    Compressed grid geometry shared by rasterizer, flood fill and search.

    Attributes:
        row_map: original row -> compact row index
        col_map: original column -> compact column index
        nb_rows: grid height (power of two)
        nb_cols: grid width (power of two)
    """

    __slots__ = ()

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.nb_rows, self.nb_cols)

    def to_grid(self, point: Point) -> Point:
        # A missing coordinate is a compression defect, let KeyError through
        row, col = point
        return self.row_map[row], self.col_map[col]


def compress_points(points: List[Point]) -> CompressedGeometry:
    """
    Build row and column maps plus the padded grid dimensions.

    Args:
        points: Polygon vertices as (row, col) tuples

    Returns:
        CompressedGeometry for the polygon
    """
    if not points:
        raise ValueError("Cannot compress an empty point list")

    row_map = compress_axis(row for row, _ in points)
    col_map = compress_axis(col for _, col in points)

    # +2 keeps one exterior cell after the last mapped value
    max_row_index = 2 * len(row_map) - 1
    max_col_index = 2 * len(col_map) - 1
    nb_rows = next_power_of_two(max_row_index + 2)
    nb_cols = next_power_of_two(max_col_index + 2)

    return CompressedGeometry(row_map, col_map, nb_rows, nb_cols)
