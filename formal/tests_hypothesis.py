"""
Property-based tests for the grid pipeline and rectangle search using Hypothesis.

Checks the invariants that must hold for all inputs: order preserving
compression, a single connected exterior after the flood fill, exact
agreement between block index and direct scan, and agreement of the full
search with an uncompressed tile-grid oracle.
"""

import pytest
import numpy as np
from hypothesis import given, strategies as st, settings, assume
from hypothesis.strategies import lists, integers, tuples, booleans

from maxrect.block_index import BlockIndex, build_block_index, span_is_filled
from maxrect.boundary_rasterizer import rasterize_boundary
from maxrect.coordinate_compressor import compress_axis, compress_points
from maxrect.flood_fill import flood_fill_exterior
from maxrect.max_rectangle_finder import MaxRectangleFinder, find_max_unconstrained_area


# Strategy for histogram shaped polygons: bars standing on row 0.
# Coordinates are multiples of 2 so every collapsed cell of the compressed
# grid stands for at least one real tile line.
@st.composite
def histogram_polygon(draw):
    """Generate a simple rectilinear polygon as a list of (row, col) vertices."""
    bars = draw(lists(tuples(integers(1, 4), integers(1, 5)), min_size=1, max_size=6))
    transpose = draw(booleans())

    cols = [0]
    for width, _ in bars:
        cols.append(cols[-1] + 2 * width)
    heights = [2 * height for _, height in bars]

    points = [(0, cols[0])]
    for i, height in enumerate(heights):
        points.append((height, cols[i]))
        points.append((height, cols[i + 1]))
    points.append((0, cols[-1]))

    if transpose:
        points = [(col, row) for row, col in points]
    return points


@st.composite
def random_mask(draw):
    """Generate a mostly-filled boolean mask of random shape."""
    nb_rows = draw(integers(1, 24))
    nb_cols = draw(integers(1, 24))
    seed = draw(integers(0, 2**32 - 1))
    density = draw(st.sampled_from([0.5, 0.9, 0.98, 1.0]))
    rng = np.random.default_rng(seed)
    return rng.random((nb_rows, nb_cols)) < density


def tile_grid_oracle(points):
    """
    Maximum contained rectangle computed on the raw tile grid.

    No compression and no block index: boundary tiles are enumerated one by
    one, the exterior is flood filled over a padded bounding box, and every
    vertex pair is checked tile by tile.
    """
    rows = [r for r, _ in points]
    cols = [c for _, c in points]
    row_lo, row_hi = min(rows) - 1, max(rows) + 1
    col_lo, col_hi = min(cols) - 1, max(cols) + 1

    boundary = set()
    for i, (r1, c1) in enumerate(points):
        r2, c2 = points[(i + 1) % len(points)]
        for r in range(min(r1, r2), max(r1, r2) + 1):
            for c in range(min(c1, c2), max(c1, c2) + 1):
                boundary.add((r, c))

    exterior = set()
    stack = [(row_lo, col_lo)]
    while stack:
        r, c = stack.pop()
        if (r, c) in exterior or (r, c) in boundary:
            continue
        if not (row_lo <= r <= row_hi and col_lo <= c <= col_hi):
            continue
        exterior.add((r, c))
        stack.extend([(r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)])

    best = 0
    for i, (ra, ca) in enumerate(points):
        for rb, cb in points[i + 1:]:
            area = (abs(rb - ra) + 1) * (abs(cb - ca) + 1)
            if area <= best:
                continue
            inside = all(
                (r, c) not in exterior
                for r in range(min(ra, rb), max(ra, rb) + 1)
                for c in range(min(ca, cb), max(ca, cb) + 1)
            )
            if inside:
                best = area
    return best


def exterior_component(filled):
    """Cells reachable from (0, 0) through unfilled cells."""
    nb_rows, nb_cols = filled.shape
    seen = set()
    stack = [(0, 0)]
    while stack:
        r, c = stack.pop()
        if (r, c) in seen or not (0 <= r < nb_rows and 0 <= c < nb_cols) or filled[r, c]:
            continue
        seen.add((r, c))
        stack.extend([(r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)])
    return seen


# Property 1: compression preserves order and never collides
@given(lists(integers(min_value=-10**12, max_value=10**12), min_size=1, max_size=60))
def test_compression_monotonic(values):
    index_map = compress_axis(values)
    distinct = sorted(set(values))

    assert len(index_map) == len(distinct)
    for a, b in zip(distinct, distinct[1:]):
        assert index_map[a] < index_map[b]
        assert index_map[b] - index_map[a] == 2
    assert all(index % 2 == 1 for index in index_map.values())


# Property 2: grid leaves an exterior border on every side
@given(histogram_polygon())
def test_grid_has_exterior_border(points):
    geometry = compress_points(points)
    max_row = max(geometry.row_map.values())
    max_col = max(geometry.col_map.values())

    assert geometry.nb_rows >= max_row + 2
    assert geometry.nb_cols >= max_col + 2
    assert geometry.nb_rows & (geometry.nb_rows - 1) == 0
    assert geometry.nb_cols & (geometry.nb_cols - 1) == 0


# Property 3: flood fill leaves one connected exterior touching the border
@given(histogram_polygon())
def test_flood_fill_closure(points):
    geometry = compress_points(points)
    boundary = rasterize_boundary(points, geometry)
    filled = flood_fill_exterior(boundary)

    exterior = exterior_component(filled)
    assert len(exterior) == int((~filled).sum()), "Exterior is not a single region"

    # Boundary cells always count as filled
    assert filled[boundary].all()

    # The whole grid border is exterior
    assert not filled[0, :].any()
    assert not filled[-1, :].any()
    assert not filled[:, 0].any()
    assert not filled[:, -1].any()


# Property 4: block index agrees with a direct scan for every span
@given(random_mask(), integers(1, 9), st.data())
@settings(max_examples=300)
def test_block_index_matches_direct_scan(filled, block_size, data):
    nb_rows, nb_cols = filled.shape
    row_a = data.draw(integers(0, nb_rows - 1))
    row_b = data.draw(integers(0, nb_rows - 1))
    col_a = data.draw(integers(0, nb_cols - 1))
    col_b = data.draw(integers(0, nb_cols - 1))
    row_start, row_end = min(row_a, row_b), max(row_a, row_b)
    col_start, col_end = min(col_a, col_b), max(col_a, col_b)

    index = BlockIndex(filled, block_size)
    assert index.contains(row_start, row_end, col_start, col_end) == \
        span_is_filled(filled, row_start, row_end, col_start, col_end)


# Property 5: rebuilding the block index from the same mask is idempotent
@given(random_mask(), integers(1, 9))
def test_block_index_idempotent(filled, block_size):
    first = build_block_index(filled, block_size)
    second = build_block_index(filled, block_size)

    assert first.shape == second.shape
    assert np.array_equal(first, second)


# Property 6: a block entry is True exactly when all its cells are filled
@given(random_mask(), integers(1, 9))
def test_block_entries_are_exact(filled, block_size):
    blocks = build_block_index(filled, block_size)
    for (block_row, block_col), value in np.ndenumerate(blocks):
        cells = filled[block_row * block_size:(block_row + 1) * block_size,
                       block_col * block_size:(block_col + 1) * block_size]
        assert value == cells.all()


# Property 7: the full search matches the uncompressed tile-grid oracle,
# wherever the polygon sits in coordinate space
@given(histogram_polygon(), integers(-10**9, 10**9), integers(-10**9, 10**9), integers(1, 8))
@settings(max_examples=150, deadline=None)
def test_finder_matches_tile_grid_oracle(points, row_offset, col_offset, block_size):
    expected = tile_grid_oracle(points)

    finder = MaxRectangleFinder(block_size=block_size)
    for row, col in points:
        finder.add_vertex(row + row_offset, col + col_offset)

    assert finder.find_max_rectangle() == expected


# Property 8: the contained maximum never exceeds the unconstrained one
@given(histogram_polygon())
@settings(deadline=None)
def test_constrained_bounded_by_unconstrained(points):
    finder = MaxRectangleFinder()
    for row, col in points:
        finder.add_vertex(row, col)

    assert 0 < finder.find_max_rectangle() <= find_max_unconstrained_area(points)


# Property 9: block index and direct scan give the same search result
@given(histogram_polygon(), integers(1, 8))
@settings(deadline=None)
def test_search_with_and_without_block_index(points, block_size):
    results = []
    for use_block_index in (True, False):
        finder = MaxRectangleFinder(block_size=block_size, use_block_index=use_block_index)
        for row, col in points:
            finder.add_vertex(row, col)
        results.append(finder.find_max_rectangle())

    assert results[0] == results[1]


# Property 10: every polygon edge is itself a valid rectangle
@given(histogram_polygon())
@settings(deadline=None)
def test_edges_are_contained(points):
    assume(len(points) >= 2)
    finder = MaxRectangleFinder()
    for row, col in points:
        finder.add_vertex(row, col)

    for i, point in enumerate(points):
        assert finder.rectangle_is_contained(point, points[(i + 1) % len(points)])


if __name__ == "__main__":
    # Run pytest
    pytest.main([__file__, "-v", "--tb=short"])
