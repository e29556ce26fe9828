"""
Block index (mipmap) over the filled mask.

The filled mask is tiled into BLOCK_SIZE x BLOCK_SIZE blocks. A block entry
is True only when every cell of the block is filled, so a containment query
can skip whole blocks and only scan the cells of partially filled blocks
that actually intersect the query span.
"""

import numpy as np


BLOCK_SIZE = 8


def build_block_index(filled: np.ndarray, block_size: int = BLOCK_SIZE) -> np.ndarray:
    """
    Aggregate the filled mask per block.

    Args:
        filled: boolean mask, True for inside-or-on-polygon cells
        block_size: block edge length in cells

    Returns:
        np.ndarray: boolean array of shape ceil(rows/bs) x ceil(cols/bs);
                    blocks at the grid edge are clipped
    """
    if block_size < 1:
        raise ValueError(f"block_size must be >= 1, got {block_size}")

    nb_rows, nb_cols = filled.shape
    nb_block_rows = -(-nb_rows // block_size)
    nb_block_cols = -(-nb_cols // block_size)

    blocks = np.zeros((nb_block_rows, nb_block_cols), dtype=bool)
    for block_row in range(nb_block_rows):
        row_start = block_row * block_size
        row_end = min(row_start + block_size, nb_rows)
        for block_col in range(nb_block_cols):
            col_start = block_col * block_size
            col_end = min(col_start + block_size, nb_cols)
            blocks[block_row, block_col] = filled[row_start:row_end, col_start:col_end].all()

    blocks.flags.writeable = False
    return blocks


def span_is_filled(filled: np.ndarray, row_start: int, row_end: int,
                   col_start: int, col_end: int) -> bool:
    """Direct scan: True if every cell of the inclusive span is filled."""
    return bool(filled[row_start:row_end + 1, col_start:col_end + 1].all())


class BlockIndex:
    """
    Containment queries over a filled mask, accelerated by its block index.

    Both arrays are only read after construction, so one instance can be
    shared by every search task.
    """

    def __init__(self, filled: np.ndarray, block_size: int = BLOCK_SIZE):
        self.filled = filled
        self.block_size = block_size
        self.blocks = build_block_index(filled, block_size)

    @property
    def shape(self):
        return self.blocks.shape

    def contains(self, row_start: int, row_end: int, col_start: int, col_end: int) -> bool:
        """
        Check that the inclusive span [row_start..row_end] x [col_start..col_end]
        lies entirely on filled cells.

        Fully filled blocks are accepted without looking at their cells.
        Any other block is scanned, restricted to its intersection with the
        span; the first empty cell rejects the whole query.

        Returns:
            bool: same answer as span_is_filled on the same span
        """
        filled = self.filled
        blocks = self.blocks
        block_size = self.block_size
        nb_rows, nb_cols = filled.shape

        for block_row in range(row_start // block_size, row_end // block_size + 1):
            sub_row_start = max(row_start, block_row * block_size)
            sub_row_end = min((block_row + 1) * block_size - 1, row_end, nb_rows - 1)

            for block_col in range(col_start // block_size, col_end // block_size + 1):
                if blocks[block_row, block_col]:
                    continue

                sub_col_start = max(col_start, block_col * block_size)
                sub_col_end = min((block_col + 1) * block_size - 1, col_end, nb_cols - 1)
                view = filled[sub_row_start:sub_row_end + 1, sub_col_start:sub_col_end + 1]
                if not view.all():
                    return False

        return True
