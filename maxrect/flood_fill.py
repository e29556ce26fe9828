"""
Exterior flood fill over the compressed grid.

Starts from cell (0, 0), which is always outside the polygon thanks to the
border padding added by the coordinate compressor, and clears every cell
reachable through 4-connected non-boundary cells. What stays set is the
polygon interior plus its boundary.
"""

import numpy as np


def flood_fill_exterior(boundary: np.ndarray) -> np.ndarray:
    """
    Derive the filled (inside-or-on-polygon) mask from the boundary mask.

    Uses an explicit stack: the compressed grid can hold around a million
    cells, far more than the interpreter recursion limit allows.

    Args:
        boundary: boolean mask of rasterized polygon edges

    Returns:
        np.ndarray: read-only boolean mask, True for interior and boundary cells
    """
    nb_rows, nb_cols = boundary.shape
    filled = np.ones((nb_rows, nb_cols), dtype=bool)

    stack = [(0, 0)]
    while stack:
        row, col = stack.pop()
        if not filled[row, col] or boundary[row, col]:
            continue
        filled[row, col] = False

        if row > 0:
            stack.append((row - 1, col))
        if row + 1 < nb_rows:
            stack.append((row + 1, col))
        if col > 0:
            stack.append((row, col - 1))
        if col + 1 < nb_cols:
            stack.append((row, col + 1))

    filled.flags.writeable = False
    return filled
