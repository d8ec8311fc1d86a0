#!/usr/bin/env python3
"""
Magic Squares - command line entry point

Reads twelve tiles from a file and prints every arrangement of them on the
2-4-4-2 lattice, one block per solution separated by a blank line.
"""

import argparse
import logging
import sys

from config import CFG
from progress import reset as progress_reset, set_done
from render import PrintSink
from solver.orchestrator import ENGINES, solve
from tiles import TileInputError, load_tiles


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Magic Squares lattice solver')
    parser.add_argument('tiles_file', nargs='?',
                        help='File with twelve lines of four integers (prompted when omitted)')
    parser.add_argument('--engine', choices=ENGINES, default=None,
                        help=f'Search engine (default: {CFG.ENGINE})')
    parser.add_argument('--workers', type=int, default=None,
                        help='Worker processes for the backtracking engine')
    parser.add_argument('--out', type=str, default=None,
                        help='Write solutions to this file instead of stdout')
    parser.add_argument('--sequence', action='store_true',
                        help='Print each solution as twelve tile lines in position order')
    parser.add_argument('--verbose', action='store_true',
                        help='Log solver progress to stderr')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_arguments(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    path = args.tiles_file
    if not path:
        try:
            path = input("Type file name: ").strip()
        except EOFError:
            print("error: no tile file name given", file=sys.stderr)
            return 2

    try:
        tiles = load_tiles(path)
    except TileInputError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    progress_reset()
    stream = sys.stdout
    if args.out:
        try:
            stream = open(args.out, "w", encoding="utf-8")
        except OSError as exc:
            print(f"error: cannot open {args.out}: {exc.strerror or exc}", file=sys.stderr)
            return 2
    try:
        sink = PrintSink(stream, sequence=args.sequence)
        ok, count, strategy, reason, meta = solve(
            tiles, sink, engine=args.engine, workers=args.workers
        )
    finally:
        if args.out:
            stream.close()

    set_done(ok, reason=reason)
    if args.verbose:
        print(f"{strategy}: {count} solution(s), {meta.get('nodes', 0)} nodes", file=sys.stderr)
    if not ok:
        print(f"error: {reason}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
