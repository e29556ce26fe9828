#!/usr/bin/env python3
"""
Maximum interior rectangle finder for rectilinear polygons.

Finds the largest axis-aligned rectangle whose opposite corners are two
polygon vertices and whose tiles all lie inside or on the polygon.

Algorithm:
1. Compress row and column coordinates onto a small odd/even index grid
2. Rasterize every polygon edge onto the compressed grid (boundary mask)
3. Flood fill the exterior from the grid corner; the rest is the filled mask
4. Aggregate the filled mask into 8x8 blocks (block index)
5. Sort vertices by row, then for every vertex pair (i, j > i):
   a. Compute the candidate area from original coordinates
   b. Skip it if it cannot beat the best area found for this i
   c. Map both corners to the compressed grid and check containment,
      skipping fully filled blocks and scanning only the others
6. Return the maximum over all i

Each outer index i is an independent task; with workers > 1 the tasks run
on a process pool that receives the read-only grids once per worker.
"""

import sys
import time
from collections import namedtuple
from concurrent.futures import ProcessPoolExecutor
from typing import List, Tuple

from maxrect.block_index import BLOCK_SIZE, BlockIndex, span_is_filled
from maxrect.boundary_rasterizer import rasterize_boundary
from maxrect.coordinate_compressor import compress_points
from maxrect.flood_fill import flood_fill_exterior
from maxrect.grid_display import render_mask
from maxrect.polygon_input import parse_polygon_text


SearchContext = namedtuple(
    "SearchContext", ["points", "geometry", "block_index", "use_block_index"])

TaskResult = namedtuple("TaskResult", ["max_area", "tested", "pruned", "valid"])


def rectangle_area(point_a: Tuple[int, int], point_b: Tuple[int, int]) -> int:
    """Tile count of the rectangle spanned by two corners, both inclusive."""
    height = abs(point_b[0] - point_a[0]) + 1
    width = abs(point_b[1] - point_a[1]) + 1
    return height * width


def span_is_contained(context: SearchContext, point_a, point_b) -> bool:
    """Check that the rectangle between two original points is inside the polygon."""
    row_a, col_a = context.geometry.to_grid(point_a)
    row_b, col_b = context.geometry.to_grid(point_b)

    row_start, row_end = min(row_a, row_b), max(row_a, row_b)
    col_start, col_end = min(col_a, col_b), max(col_a, col_b)

    if context.use_block_index:
        return context.block_index.contains(row_start, row_end, col_start, col_end)
    return span_is_filled(context.block_index.filled, row_start, row_end, col_start, col_end)


def scan_outer_index(context: SearchContext, index_a: int) -> TaskResult:
    """
    Find the best valid rectangle with its first corner at points[index_a].

    Only partners after index_a are scanned, so every pair is seen once
    across all outer indices.
    """
    points = context.points
    point_a = points[index_a]

    max_area = 0
    tested = pruned = valid = 0

    for point_b in points[index_a + 1:]:
        area = rectangle_area(point_a, point_b)

        # Area pruning: validation can only confirm or reject a candidate
        if area <= max_area:
            pruned += 1
            continue

        tested += 1
        if span_is_contained(context, point_a, point_b):
            max_area = area
            valid += 1

    return TaskResult(max_area, tested, pruned, valid)


# Per-process copy of the search context, installed by the pool initializer
_worker_context = None


def _init_worker(context: SearchContext):
    global _worker_context
    _worker_context = context


def _scan_in_worker(index_a: int) -> TaskResult:
    return scan_outer_index(_worker_context, index_a)


def find_max_unconstrained_area(points: List[Tuple[int, int]]) -> int:
    """
    Largest rectangle between any two vertices, ignoring the polygon interior.

    Returns:
        Maximum area, 0 when fewer than two points are given
    """
    # Sort on one axis first, same traversal as the constrained search
    sorted_points = sorted(points, key=lambda p: p[0])

    max_area = 0
    for index_a, point_a in enumerate(sorted_points):
        for point_b in sorted_points[index_a + 1:]:
            area = rectangle_area(point_a, point_b)
            if area > max_area:
                max_area = area
    return max_area


class MaxRectangleFinder:
    """Grid-based maximum interior rectangle search."""

    def __init__(self, block_size: int = BLOCK_SIZE, workers: int = 1,
                 use_block_index: bool = True):
        """
        Args:
            block_size: Edge length of the block index tiles, in grid cells
            workers: Number of search processes (1 runs in-process)
            use_block_index: Check containment through the block index
                             instead of scanning the filled mask directly
        """
        if block_size < 1:
            raise ValueError(f"block_size must be >= 1, got {block_size}")
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")

        self.block_size = block_size
        self.workers = workers
        self.use_block_index = use_block_index

        self.vertices = []
        self.geometry = None
        self.boundary = None
        self.block_index = None

        self.max_area = 0
        self.rectangles_tested = 0
        self.rectangles_pruned = 0
        self.valid_rectangles_found = 0

    def add_vertex(self, row: int, col: int):
        """Append a polygon vertex; the loop closes back to the first one."""
        self.vertices.append((row, col))
        # Any grid built so far no longer matches the polygon
        self.geometry = None

    @property
    def filled(self):
        return self.block_index.filled if self.block_index is not None else None

    def build_grid(self):
        """
        Run compression, rasterization, flood fill and block aggregation.

        Each step hands its output to the next one; nothing is modified
        once the block index exists.
        """
        if not self.vertices:
            raise ValueError("Polygon has no vertices")

        self.geometry = compress_points(self.vertices)
        self.boundary = rasterize_boundary(self.vertices, self.geometry)
        self.boundary.flags.writeable = False
        filled = flood_fill_exterior(self.boundary)
        self.block_index = BlockIndex(filled, self.block_size)

    def _context(self, points) -> SearchContext:
        if self.geometry is None:
            self.build_grid()
        return SearchContext(points, self.geometry, self.block_index, self.use_block_index)

    def rectangle_is_contained(self, point_a: Tuple[int, int], point_b: Tuple[int, int]) -> bool:
        """Check whether the rectangle with corners at two vertices lies inside the polygon."""
        return span_is_contained(self._context(self.vertices), point_a, point_b)

    def find_max_rectangle(self) -> int:
        """
        Find the maximum rectangle area within the polygon.

        Returns:
            Maximum area in tiles, 0 when the polygon has a single vertex
        """
        self.build_grid()

        self.max_area = 0
        self.rectangles_tested = 0
        self.rectangles_pruned = 0
        self.valid_rectangles_found = 0

        # Sort on one axis for locality, the result does not depend on it
        sorted_points = sorted(self.vertices, key=lambda p: p[0])
        context = self._context(sorted_points)
        outer_indices = range(len(sorted_points))

        if self.workers == 1:
            results = [scan_outer_index(context, i) for i in outer_indices]
        else:
            chunksize = max(1, len(sorted_points) // (self.workers * 4))
            with ProcessPoolExecutor(max_workers=self.workers,
                                     initializer=_init_worker,
                                     initargs=(context,)) as ex:
                results = list(ex.map(_scan_in_worker, outer_indices, chunksize=chunksize))

        for result in results:
            self.max_area = max(self.max_area, result.max_area)
            self.rectangles_tested += result.tested
            self.rectangles_pruned += result.pruned
            self.valid_rectangles_found += result.valid

        return self.max_area

    def get_statistics(self) -> dict:
        """Return algorithm statistics."""
        stats = {
            'vertices': len(self.vertices),
            'rectangles_tested': self.rectangles_tested,
            'rectangles_pruned': self.rectangles_pruned,
            'valid_rectangles': self.valid_rectangles_found,
            'max_area': self.max_area,
        }
        if self.geometry is not None:
            stats['distinct_rows'] = len(self.geometry.row_map)
            stats['distinct_cols'] = len(self.geometry.col_map)
            stats['grid_shape'] = self.geometry.shape
            stats['block_shape'] = self.block_index.shape
        return stats


def main(argv=None):
    """Command-line interface for MaxRectangleFinder."""
    import argparse

    parser = argparse.ArgumentParser(
        description='Find maximum rectangle within rectilinear polygon'
    )
    parser.add_argument('input_file', nargs='?', type=argparse.FileType('r'),
                        default=sys.stdin,
                        help='Input file with polygon vertices (default: stdin)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print algorithm statistics')
    parser.add_argument('--block-size', type=int, default=BLOCK_SIZE,
                        help=f'Block index tile size (default: {BLOCK_SIZE})')
    parser.add_argument('--workers', '-j', type=int, default=1,
                        help='Number of search processes (default: 1)')
    parser.add_argument('--unconstrained', action='store_true',
                        help='Ignore the polygon interior (any two vertices)')
    parser.add_argument('--no-block-index', action='store_true',
                        help='Scan the filled grid directly for every candidate')
    parser.add_argument('--show-grid', action='store_true',
                        help='Dump the compressed boundary and filled grids')
    args = parser.parse_args(argv)

    # Read input
    try:
        vertices = parse_polygon_text(args.input_file.read())
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if len(vertices) < 2:
        print("Error: Need at least 2 vertices", file=sys.stderr)
        return 1

    if args.unconstrained:
        print(find_max_unconstrained_area(vertices))
        return 0

    try:
        finder = MaxRectangleFinder(block_size=args.block_size, workers=args.workers,
                                    use_block_index=not args.no_block_index)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for row, col in vertices:
        finder.add_vertex(row, col)

    if args.verbose:
        print(f"Processing polygon with {len(vertices)} vertices", file=sys.stderr)

    start_time = time.time()
    max_area = finder.find_max_rectangle()
    elapsed = time.time() - start_time

    # Output result
    print(max_area)

    if args.show_grid:
        print("\nBoundary:", file=sys.stderr)
        print(render_mask(finder.boundary), file=sys.stderr)
        print("\nFilled:", file=sys.stderr)
        print(render_mask(finder.filled), file=sys.stderr)

    if args.verbose:
        stats = finder.get_statistics()
        print(f"\nStatistics:", file=sys.stderr)
        print(f"  Vertices: {stats['vertices']}", file=sys.stderr)
        print(f"  Distinct rows/cols: {stats['distinct_rows']}/{stats['distinct_cols']}",
              file=sys.stderr)
        print(f"  Grid: {stats['grid_shape'][0]}x{stats['grid_shape'][1]}"
              f" ({stats['block_shape'][0]}x{stats['block_shape'][1]} blocks)", file=sys.stderr)
        print(f"  Rectangles tested: {stats['rectangles_tested']}", file=sys.stderr)
        print(f"  Rectangles pruned: {stats['rectangles_pruned']}", file=sys.stderr)
        print(f"  Valid rectangles: {stats['valid_rectangles']}", file=sys.stderr)
        print(f"  Max area: {stats['max_area']}", file=sys.stderr)
        print(f"  Time: {elapsed:.3f}s", file=sys.stderr)

    return 0


if __name__ == '__main__':
    sys.exit(main())
