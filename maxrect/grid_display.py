"""ASCII rendering of boolean grid masks, for debugging small inputs."""

import numpy as np


def render_mask(mask: np.ndarray, on: str = '#', off: str = '.') -> str:
    """Render a 2D boolean mask, one text line per grid row."""
    return '\n'.join(
        ''.join(on if cell else off for cell in row)
        for row in mask
    )
