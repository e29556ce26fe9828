"""
Unit tests for the grid building steps: compression, rasterization,
flood fill, block index, input parsing and grid rendering.
"""

import numpy as np
import pytest

from maxrect.block_index import BlockIndex, build_block_index, span_is_filled
from maxrect.boundary_rasterizer import polygon_edges, rasterize_boundary
from maxrect.coordinate_compressor import compress_axis, compress_points, next_power_of_two
from maxrect.flood_fill import flood_fill_exterior
from maxrect.grid_display import render_mask
from maxrect.polygon_input import parse_polygon_text


EXAMPLE = [(7, 1), (11, 1), (11, 7), (9, 7), (9, 5), (2, 5), (2, 3), (7, 3)]


def test_compress_axis_assigns_odd_indices():
    assert compress_axis([40, 7, 1000000007, 7, -3]) == {-3: 1, 7: 3, 40: 5, 1000000007: 7}


@pytest.mark.parametrize("n, expected", [(1, 1), (2, 2), (3, 4), (8, 8), (9, 16), (1025, 2048)])
def test_next_power_of_two(n, expected):
    assert next_power_of_two(n) == expected


def test_next_power_of_two_rejects_zero():
    with pytest.raises(ValueError):
        next_power_of_two(0)


def test_compress_points_example():
    geometry = compress_points(EXAMPLE)

    assert geometry.row_map == {2: 1, 7: 3, 9: 5, 11: 7}
    assert geometry.col_map == {1: 1, 3: 3, 5: 5, 7: 7}
    assert geometry.shape == (16, 16)
    assert geometry.to_grid((9, 5)) == (5, 5)


def test_compress_single_coordinate():
    geometry = compress_points([(4, 4)])
    assert geometry.shape == (4, 4)


def test_compress_empty_raises():
    with pytest.raises(ValueError):
        compress_points([])


def test_unknown_coordinate_is_fatal():
    geometry = compress_points(EXAMPLE)
    with pytest.raises(KeyError):
        geometry.to_grid((3, 3))


def test_polygon_edges_wrap_around():
    edges = list(polygon_edges([(0, 0), (0, 5), (5, 5)]))
    assert edges == [((0, 0), (0, 5)), ((0, 5), (5, 5)), ((5, 5), (0, 0))]


def test_rasterize_square():
    points = [(0, 0), (0, 10), (10, 10), (10, 0)]
    geometry = compress_points(points)
    boundary = rasterize_boundary(points, geometry)

    expected = np.zeros((8, 8), dtype=bool)
    expected[1, 1:4] = True
    expected[3, 1:4] = True
    expected[1:4, 1] = True
    expected[1:4, 3] = True

    assert np.array_equal(boundary, expected)
    # Collapsed interior cell is not part of the outline
    assert not boundary[2, 2]


def test_flood_fill_square():
    points = [(0, 0), (0, 10), (10, 10), (10, 0)]
    boundary = rasterize_boundary(points, compress_points(points))
    filled = flood_fill_exterior(boundary)

    expected = np.zeros((8, 8), dtype=bool)
    expected[1:4, 1:4] = True

    assert np.array_equal(filled, expected)
    assert not filled.flags.writeable


def test_flood_fill_example_notch():
    geometry = compress_points(EXAMPLE)
    filled = flood_fill_exterior(rasterize_boundary(EXAMPLE, geometry))

    # Inside the lower part of the shape
    assert filled[geometry.to_grid((9, 3))]
    # Top right notch, outside the polygon
    row, _ = geometry.to_grid((2, 5))
    _, col = geometry.to_grid((7, 7))
    assert not filled[row, col]


def test_flood_fill_large_grid_without_recursion():
    boundary = np.zeros((512, 512), dtype=bool)
    filled = flood_fill_exterior(boundary)
    assert not filled.any()


def test_build_block_index_clips_edge_blocks():
    filled = np.ones((5, 11), dtype=bool)
    filled[4, 10] = False
    blocks = build_block_index(filled, 4)

    assert blocks.shape == (2, 3)
    assert blocks[0].all()
    assert blocks[1, 0] and blocks[1, 1]
    assert not blocks[1, 2]


def test_build_block_index_rejects_bad_size():
    with pytest.raises(ValueError):
        build_block_index(np.ones((4, 4), dtype=bool), 0)


def test_block_index_contains():
    filled = np.ones((16, 16), dtype=bool)
    filled[9, 12] = False
    index = BlockIndex(filled, 8)

    assert index.shape == (2, 2)
    assert index.contains(0, 15, 0, 11)
    assert index.contains(10, 15, 0, 15)
    assert not index.contains(9, 9, 12, 12)
    assert not index.contains(0, 15, 0, 15)
    assert span_is_filled(filled, 0, 15, 0, 11)
    assert not span_is_filled(filled, 8, 9, 8, 12)


def test_parse_polygon_text():
    text = "7,1\n 11,1 \n11,7\n\n99,99\n"
    assert parse_polygon_text(text) == [(7, 1), (11, 1), (11, 7)]


def test_parse_negative_and_large_values():
    assert parse_polygon_text("-5,3000000000") == [(-5, 3000000000)]


def test_parse_empty_text():
    assert parse_polygon_text("") == []


@pytest.mark.parametrize("text", ["1,2\nabc\n", "1,2\n1,2,3\n", "1,2\nx,4\n"])
def test_parse_rejects_malformed_records(text):
    with pytest.raises(ValueError, match="Line 2"):
        parse_polygon_text(text)


def test_render_mask():
    mask = np.array([[True, False], [False, True]])
    assert render_mask(mask) == "#.\n.#"


if __name__ == "__main__":
    # Run pytest
    pytest.main([__file__, "-v", "--tb=short"])
