"""
Polygon input parsing.

Format: one "row,col" record per line, no header. An empty line terminates
the polygon; the last vertex connects back to the first.
"""

from typing import List, Tuple


def parse_polygon_text(text: str) -> List[Tuple[int, int]]:
    """
    Parse polygon vertices from text.

    Args:
        text: Text with row,col coordinates per line

    Returns:
        List of (row, col) vertex tuples

    Raises:
        ValueError: a record is not an integer pair
    """
    vertices = []
    for line_number, line in enumerate(text.strip().split('\n'), start=1):
        line = line.strip()
        if not line:
            break  # Empty line terminates polygon

        parts = line.split(',')
        if len(parts) != 2:
            raise ValueError(f"Line {line_number}: expected 'row,col', got {line!r}")
        try:
            row, col = int(parts[0]), int(parts[1])
        except ValueError:
            raise ValueError(f"Line {line_number}: invalid integer pair {line!r}") from None
        vertices.append((row, col))

    return vertices


def read_input(filename):
    """Read and parse a polygon file."""
    with open(filename) as f:
        return parse_polygon_text(f.read())
