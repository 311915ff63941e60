#!/usr/bin/env python
"""Benchmark script comparing QP backends of the smoother.

Usage:
    python benchmarks/solver_benchmark.py
    python benchmarks/solver_benchmark.py --points 100 1000 5000
    python benchmarks/solver_benchmark.py --solvers osqp scipy
"""

import argparse
import time

import numpy as np

from sksmooth.optimizers import create_solver
from sksmooth.optimizers import SOLVER_TYPES
from sksmooth.smoothing.metrics import compute_path_smoothness
from sksmooth.smoothing.problem import build_problem
from sksmooth.smoothing.settings import SolverSettings
from sksmooth.smoothing.settings import Weights


def make_reference(n_points, seed=42):
    rng = np.random.RandomState(seed)
    s = np.linspace(0.0, 4.0 * np.pi, n_points)
    ref = np.column_stack([s, np.sin(s)])
    return ref + rng.normal(0.0, 0.05, ref.shape)


def benchmark_solver(solver_type, n_points, n_repeat=3, seed=42):
    """Benchmark one backend.

    Parameters
    ----------
    solver_type : str
        Backend name.
    n_points : int
        Number of reference points.
    n_repeat : int
        Number of timed runs.
    seed : int
        Random seed.

    Returns
    -------
    dict
        Benchmark results.
    """
    print(f"\n{'=' * 60}")
    print(f"Solver: {solver_type}")
    print(f"Points: {n_points:,}")
    print(f"{'=' * 60}")

    ref = make_reference(n_points, seed=seed)
    bounds = np.full(n_points, 0.1)

    t_build_start = time.time()
    problem = build_problem(ref, bounds, bounds,
                            weights=Weights(1e3, 1.0, 1.0))
    t_build = time.time() - t_build_start
    print(f"Build time: {t_build:.4f}s")

    settings = SolverSettings(max_iter=4000)
    times = []
    result = None
    for _ in range(n_repeat):
        solver = create_solver(solver_type)
        t_start = time.time()
        result = solver.run(problem, settings, warm_start=problem.warm_start)
        times.append(time.time() - t_start)
    t_solve = min(times)

    results = {
        'solver': solver_type,
        'n_points': n_points,
        'build_time': t_build,
        'solve_time': t_solve,
        'status': result.status.value,
        'iterations': result.iterations,
        'cost': result.cost,
    }
    if result.success:
        metrics = compute_path_smoothness(
            result.x[0::2], result.x[1::2], ref, bounds, bounds)
        results['max_bound_violation'] = metrics['max_bound_violation']

    print("\nResults:")
    print(f"  Status: {results['status']}")
    print(f"  Best solve time: {t_solve:.4f}s")
    print(f"  Iterations: {results['iterations']}")
    return results


def main():
    parser = argparse.ArgumentParser(
        description="Benchmark QP backends of the path smoother"
    )
    parser.add_argument(
        '--points', type=int, nargs='+',
        default=[100, 1000, 5000],
        help='Reference point counts to test'
    )
    parser.add_argument(
        '--solvers', type=str, nargs='+',
        default=['osqp', 'scipy'],
        choices=SOLVER_TYPES,
        help='Backends to benchmark'
    )
    args = parser.parse_args()

    all_results = []
    for n_points in args.points:
        for solver_type in args.solvers:
            try:
                all_results.append(benchmark_solver(solver_type, n_points))
            except (ModuleNotFoundError, MemoryError) as e:
                print(f"\nError with {solver_type}: {e}")
                continue

    print("\n" + "=" * 70)
    print("DETAILED RESULTS TABLE")
    print("=" * 70)
    print(f"{'Solver':<10} {'Points':>10} {'Time (s)':>12} "
          f"{'Iterations':>12} {'Status':>22}")
    print("-" * 70)
    for r in all_results:
        print(f"{r['solver']:<10} {r['n_points']:>10,} "
              f"{r['solve_time']:>12.4f} {r['iterations']:>12,} "
              f"{r['status']:>22}")


if __name__ == '__main__':
    main()
