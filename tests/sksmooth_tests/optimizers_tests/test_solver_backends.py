import unittest

import numpy as np
from numpy import testing

from sksmooth.errors import SolverSetupError
from sksmooth.optimizers import create_solver
from sksmooth.optimizers import SolverStatus
from sksmooth.pycompat import HAS_CVXOPT
from sksmooth.pycompat import HAS_QUADPROG
from sksmooth.smoothing.problem import build_problem
from sksmooth.smoothing.settings import SolverSettings
from sksmooth.smoothing.settings import Weights


requires_cvxopt = unittest.skipUnless(HAS_CVXOPT, 'cvxopt is required')
requires_quadprog = unittest.skipUnless(HAS_QUADPROG, 'quadprog is required')


def curved_path(n_points=25, seed=3):
    rng = np.random.RandomState(seed)
    s = np.linspace(0.0, 2.0 * np.pi, n_points)
    return np.column_stack([3.0 * np.cos(s), 2.0 * np.sin(s)]) \
        + rng.normal(0.0, 0.05, (n_points, 2))


class BackendTestMixin(object):

    solver_type = None
    solver_kwargs = {}
    decimal = 5

    def create(self):
        return create_solver(self.solver_type, **self.solver_kwargs)

    def test_three_points(self):
        problem = build_problem(
            [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)], [0.1] * 3, [0.1] * 3,
            weights=Weights(1.0, 1.0, 1.0))
        result = self.create().run(problem, SolverSettings(max_iter=4000),
                                   warm_start=problem.warm_start)
        self.assertTrue(result.success)
        testing.assert_almost_equal(
            result.x, [0.1, 0.0, 1.0, 0.0, 1.9, 0.0], decimal=self.decimal)

    def test_matches_reference_solution(self):
        ref = curved_path()
        n = len(ref)
        problem = build_problem(ref, np.full(n, 0.05), np.full(n, 0.2),
                                weights=Weights(50.0, 1.0, 1.0))
        settings = SolverSettings(max_iter=20000)
        expected = create_solver('scipy').run(
            problem, settings, warm_start=problem.warm_start)
        result = self.create().run(problem, settings,
                                   warm_start=problem.warm_start)
        self.assertTrue(expected.success)
        self.assertTrue(result.success)
        testing.assert_almost_equal(result.x, expected.x,
                                    decimal=self.decimal - 1)
        self.assertAlmostEqual(result.cost, problem.objective(result.x),
                               places=self.decimal - 2)

    def test_solver_is_released(self):
        problem = build_problem(curved_path(5), [0.1] * 5, [0.1] * 5)
        solver = self.create()
        solver.run(problem)
        self.assertIsNone(solver.problem)
        # a released solver can be set up again
        self.assertTrue(solver.run(problem).success)


class TestOsqpSolver(BackendTestMixin, unittest.TestCase):

    solver_type = 'osqp'
    solver_kwargs = {'eps_abs': 1e-8, 'eps_rel': 1e-8, 'polish': True}

    def test_settings_pass_through(self):
        problem = build_problem(curved_path(5), [0.1] * 5, [0.1] * 5)
        solver = self.create()
        settings = SolverSettings(max_iter=123, time_limit=0.5,
                                  scaled_termination=False, warm_start=False)
        solver.setup(problem, settings)
        try:
            options = solver._osqp_settings(settings)
        finally:
            solver.teardown()
        self.assertEqual(options['max_iter'], 123)
        self.assertEqual(options['time_limit'], 0.5)
        self.assertFalse(options['scaled_termination'])
        self.assertFalse(options['verbose'])
        self.assertIn(False, [options.get('warm_start'),
                              options.get('warm_starting')])

    def test_default_settings(self):
        problem = build_problem(curved_path(), [0.1] * 25, [0.1] * 25)
        solver = create_solver('osqp')
        settings = SolverSettings()
        solver.setup(problem, settings)
        try:
            self.assertNotIn('time_limit', solver._osqp_settings(settings))
        finally:
            solver.teardown()
        result = solver.run(problem, settings, warm_start=problem.warm_start)
        self.assertTrue(result.success)
        self.assertEqual(result.x.shape, (50,))
        self.assertTrue(np.all(result.x >= problem.lower - 1e-2))
        self.assertTrue(np.all(result.x <= problem.upper + 1e-2))

    def test_setup_rejection(self):
        problem = build_problem(curved_path(5), [0.1] * 5, [0.1] * 5)
        problem.lower[0] = problem.upper[0] + 1.0
        solver = self.create()
        with self.assertRaises(SolverSetupError):
            solver.run(problem)
        self.assertIsNone(solver.problem)

    def test_iteration_limit(self):
        problem = build_problem(curved_path(), [0.5] * 25, [0.5] * 25,
                                weights=Weights(1e3, 1.0, 1.0))
        result = self.create().run(problem, SolverSettings(max_iter=1),
                                   warm_start=problem.warm_start)
        self.assertFalse(result.success)
        self.assertEqual(result.status, SolverStatus.MAX_ITER_REACHED)
        self.assertIsNone(result.x)


class TestScipySolver(BackendTestMixin, unittest.TestCase):

    solver_type = 'scipy'

    def test_solution_inside_box(self):
        ref = curved_path()
        problem = build_problem(ref, [0.02] * 25, [0.02] * 25,
                                weights=Weights(1e3, 1.0, 1.0))
        result = self.create().run(problem)
        self.assertTrue(result.success)
        self.assertTrue(np.all(result.x >= problem.lower))
        self.assertTrue(np.all(result.x <= problem.upper))

    def test_empty_box(self):
        problem = build_problem(curved_path(4), [0.1] * 4, [0.1] * 4)
        problem.lower[0] = problem.upper[0] + 1.0
        solver = self.create()
        with self.assertRaises(SolverSetupError):
            solver.run(problem)
        self.assertIsNone(solver.problem)


@requires_cvxopt
class TestCvxoptSolver(BackendTestMixin, unittest.TestCase):

    solver_type = 'cvxopt'
    decimal = 4


@requires_quadprog
class TestQuadprogSolver(BackendTestMixin, unittest.TestCase):

    solver_type = 'quadprog'

    def test_singular_kernel(self):
        problem = build_problem(curved_path(4), [0.1] * 4, [0.1] * 4,
                                weights=Weights(1.0, 1.0, 0.0))
        result = self.create().run(problem)
        self.assertFalse(result.success)
        self.assertEqual(result.status, SolverStatus.NON_CONVEX)
