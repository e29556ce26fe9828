#!/usr/bin/env python3
"""
Compare the block index search against a direct scan of the filled grid.

Runs both containment strategies on the same input and reports their
results, timings and statistics. Any difference points at a block index bug.
"""

import sys
import time

from maxrect.max_rectangle_finder import MaxRectangleFinder
from maxrect.polygon_input import read_input


def run_finder(vertices, use_block_index, block_size, workers):
    """Run one search and return its statistics plus result and elapsed time."""
    finder = MaxRectangleFinder(block_size=block_size, workers=workers,
                                use_block_index=use_block_index)
    for row, col in vertices:
        finder.add_vertex(row, col)

    start_time = time.time()
    max_area = finder.find_max_rectangle()
    elapsed = time.time() - start_time

    stats = finder.get_statistics()
    stats['elapsed'] = elapsed
    stats['result'] = max_area
    return stats


def print_stats(stats):
    print(f"  Result: {stats['result']}")
    print(f"  Time: {stats['elapsed']:.3f}s")
    print(f"  Rectangles tested: {stats['rectangles_tested']}")
    print(f"  Rectangles pruned: {stats['rectangles_pruned']}")
    print(f"  Valid rectangles: {stats['valid_rectangles']}")
    print()


def main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(
        description='Compare block index search against direct grid scan'
    )
    parser.add_argument('input_file', help='Input file with polygon vertices')
    parser.add_argument('--block-size', type=int, default=8,
                        help='Block index tile size (default: 8)')
    parser.add_argument('--workers', '-j', type=int, default=1,
                        help='Number of search processes (default: 1)')
    args = parser.parse_args(argv)

    vertices = read_input(args.input_file)
    if len(vertices) < 2:
        print("Error: Need at least 2 vertices", file=sys.stderr)
        return 1

    print("=" * 70)
    print("Block Index vs Direct Scan Comparison")
    print("=" * 70)
    print()

    print("Running block index search...")
    indexed = run_finder(vertices, True, args.block_size, args.workers)
    print(f"  Grid: {indexed['grid_shape'][0]}x{indexed['grid_shape'][1]}"
          f" ({indexed['block_shape'][0]}x{indexed['block_shape'][1]} blocks)")
    print_stats(indexed)

    print("Running direct scan search...")
    direct = run_finder(vertices, False, args.block_size, args.workers)
    print_stats(direct)

    print("=" * 70)
    print("Comparison")
    print("=" * 70)

    if indexed['result'] != direct['result']:
        print("✗ Results differ:")
        print(f"    Block index: {indexed['result']}")
        print(f"    Direct scan: {direct['result']}")
        return 1

    print(f"✓ Results match: {indexed['result']}")
    if indexed['elapsed'] > 0:
        speedup = direct['elapsed'] / indexed['elapsed']
        print(f"  Speed: block index {speedup:.2f}x faster")

    print()
    print("✓ All checks passed!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
