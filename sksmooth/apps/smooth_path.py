#!/usr/bin/env python

import argparse
import logging
import sys

import numpy as np

from sksmooth.errors import SmootherError
from sksmooth.optimizers import SOLVER_TYPES
from sksmooth.smoothing.settings import SolverSettings
from sksmooth.smoothing.settings import Weights
from sksmooth.smoothing.smoother import smooth_points


def load_table(path):
    """Load ``x y x_bound y_bound`` rows from a text or CSV file."""
    delimiter = ',' if path.endswith('.csv') else None
    table = np.loadtxt(path, delimiter=delimiter, ndmin=2, comments='#')
    if table.shape[1] != 4:
        raise ValueError(
            f'{path}: expected 4 columns (x y x_bound y_bound), '
            f'got {table.shape[1]}')
    return table


def main():
    """Smooth a reference path read from a table file."""
    parser = argparse.ArgumentParser(
        description='Smooth a 2D reference path within per-point boxes.\n'
                    'Input rows are "x y x_bound y_bound"; output rows '
                    'are "x y".',
        formatter_class=argparse.RawTextHelpFormatter)
    parser.add_argument(
        'input_file',
        type=str,
        help='Path to the reference table (.csv or whitespace separated)')
    parser.add_argument(
        '-o', '--output',
        type=str, default=None,
        help='Output file. Print to stdout if omitted')
    parser.add_argument(
        '--solver',
        choices=SOLVER_TYPES, default='osqp',
        help='QP backend')
    parser.add_argument(
        '--smoothness', type=float, default=1.0,
        help='Weight of the curvature term')
    parser.add_argument(
        '--length', type=float, default=1.0,
        help='Weight of the path length term')
    parser.add_argument(
        '--deviation', type=float, default=1.0,
        help='Weight of the reference deviation term')
    parser.add_argument(
        '--max-iter', type=int, default=500,
        help='Iteration cap of the backend')
    parser.add_argument(
        '--time-limit', type=float, default=0.0,
        help='Time limit in seconds, 0 disables it')
    parser.add_argument(
        '--legacy-offset',
        action='store_true',
        help='Use the constant offset vector of earlier releases')
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Print verbose output')

    args = parser.parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        table = load_table(args.input_file)
        weights = Weights(smoothness=args.smoothness, length=args.length,
                          deviation=args.deviation)
        settings = SolverSettings(max_iter=args.max_iter,
                                  time_limit=args.time_limit,
                                  verbose=args.verbose)
        x, y = smooth_points(
            table[:, :2], table[:, 2], table[:, 3],
            weights=weights, settings=settings, solver=args.solver,
            legacy_offset=args.legacy_offset)
    except (SmootherError, ImportError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    result = np.column_stack([x, y])
    if args.output is None:
        np.savetxt(sys.stdout, result, fmt='%.9f')
    else:
        delimiter = ',' if args.output.endswith('.csv') else ' '
        np.savetxt(args.output, result, fmt='%.9f', delimiter=delimiter)
        if args.verbose:
            print(f"Wrote {len(result)} points to {args.output}")


if __name__ == '__main__':
    main()
