import unittest

import numpy as np
from numpy import testing

from sksmooth.errors import SolverSetupError
from sksmooth.optimizers import BaseSolver
from sksmooth.optimizers import create_solver
from sksmooth.optimizers import SolverResult
from sksmooth.optimizers import SolverStatus
from sksmooth.optimizers.osqp_solver import convert_status
from sksmooth.optimizers.osqp_solver import OsqpSolver
from sksmooth.optimizers.scipy_solver import ScipySolver
from sksmooth.smoothing.problem import build_problem
from sksmooth.smoothing.settings import SolverSettings
from sksmooth.smoothing.settings import Weights


class ClosedFormSolver(BaseSolver):
    """Solves the unconstrained problem with a dense linear solve.

    Reports ``PRIMAL_INFEASIBLE`` when the unconstrained optimum leaves
    the box.
    """

    name = 'closed_form'

    def _setup(self, problem, settings):
        self.kernel = problem.full_kernel()
        self.x = None
        self.torn_down = False

    def _solve(self):
        x = np.linalg.solve(self.kernel, -self.problem.offset)
        if np.any(x < self.problem.lower - 1e-12) \
           or np.any(x > self.problem.upper + 1e-12):
            return SolverStatus.PRIMAL_INFEASIBLE
        self.x = x
        self._iterations = 1
        self._cost = self.problem.objective(x)
        return SolverStatus.SOLVED

    def _extract(self):
        return self.x

    def _teardown(self):
        self.torn_down = True


class TestSolverStatus(unittest.TestCase):

    def test_is_success(self):
        self.assertTrue(SolverStatus.SOLVED.is_success)
        self.assertTrue(SolverStatus.SOLVED_INACCURATE.is_success)
        for status in SolverStatus:
            if status not in (SolverStatus.SOLVED,
                              SolverStatus.SOLVED_INACCURATE):
                self.assertFalse(status.is_success)

    def test_result_requires_solution(self):
        result = SolverResult(None, SolverStatus.SOLVED)
        self.assertFalse(result.success)
        result = SolverResult(np.zeros(6), SolverStatus.MAX_ITER_REACHED)
        self.assertFalse(result.success)
        self.assertEqual(result.message, 'maximum iterations reached')
        result = SolverResult(np.zeros(6), SolverStatus.SOLVED_INACCURATE)
        self.assertTrue(result.success)

    def test_convert_osqp_status(self):
        self.assertEqual(convert_status('solved'), SolverStatus.SOLVED)
        self.assertEqual(convert_status('solved inaccurate'),
                         SolverStatus.SOLVED_INACCURATE)
        self.assertEqual(convert_status('primal infeasible inaccurate'),
                         SolverStatus.PRIMAL_INFEASIBLE)
        self.assertEqual(convert_status('dual infeasible'),
                         SolverStatus.DUAL_INFEASIBLE)
        self.assertEqual(convert_status('maximum iterations reached'),
                         SolverStatus.MAX_ITER_REACHED)
        self.assertEqual(convert_status('run time limit reached'),
                         SolverStatus.TIME_LIMIT_REACHED)
        self.assertEqual(convert_status('interrupted'),
                         SolverStatus.INTERRUPTED)
        self.assertEqual(convert_status('something new'), SolverStatus.ERROR)


class TestBaseSolver(unittest.TestCase):

    def setUp(self):
        self.ref = np.array([[0.0, 0.0], [1.0, 0.5], [2.0, 0.0], [3.0, 0.2]])
        self.problem = build_problem(
            self.ref, np.ones(4), np.ones(4),
            weights=Weights(0.0, 0.0, 1.0))

    def test_run(self):
        solver = ClosedFormSolver()
        result = solver.run(self.problem, SolverSettings())
        self.assertTrue(result.success)
        self.assertEqual(result.status, SolverStatus.SOLVED)
        self.assertEqual(result.iterations, 1)
        self.assertEqual(result.info['solver'], 'closed_form')
        testing.assert_almost_equal(result.x, self.ref.reshape(-1))
        self.assertAlmostEqual(result.cost, -np.sum(self.ref ** 2))
        self.assertTrue(solver.torn_down)
        self.assertIsNone(solver.problem)

    def test_failed_run(self):
        problem = build_problem(self.ref, np.ones(4), np.ones(4),
                                weights=Weights(0.0, 0.0, 1.0),
                                legacy_offset=True)
        # the constant offset pulls every coordinate to 1, outside the box
        result = ClosedFormSolver().run(problem)
        self.assertFalse(result.success)
        self.assertIsNone(result.x)
        self.assertEqual(result.status, SolverStatus.PRIMAL_INFEASIBLE)

    def test_manual_lifecycle(self):
        solver = ClosedFormSolver()
        solver.setup(self.problem)
        self.assertEqual(solver.status, SolverStatus.UNSOLVED)
        self.assertIsNone(solver.extract())
        solver.warm_start(self.problem.warm_start)
        self.assertEqual(solver.solve(), SolverStatus.SOLVED)
        testing.assert_almost_equal(solver.extract(), self.ref.reshape(-1))
        solver.teardown()
        solver.teardown()
        self.assertIsNone(solver.extract())

    def test_requires_setup(self):
        solver = ClosedFormSolver()
        with self.assertRaises(SolverSetupError):
            solver.solve()
        with self.assertRaises(SolverSetupError):
            solver.warm_start(np.zeros(8))

    def test_warm_start_shape(self):
        solver = ClosedFormSolver()
        with solver.session(self.problem):
            with self.assertRaises(ValueError):
                solver.warm_start(np.zeros(7))

    def test_session_tears_down_on_error(self):
        solver = ClosedFormSolver()
        with self.assertRaises(RuntimeError):
            with solver.session(self.problem):
                raise RuntimeError('boom')
        self.assertTrue(solver.torn_down)
        self.assertIsNone(solver.problem)


class TestCreateSolver(unittest.TestCase):

    def test_builtin(self):
        self.assertIsInstance(create_solver(), OsqpSolver)
        self.assertIsInstance(create_solver('osqp', eps_abs=1e-5),
                              OsqpSolver)
        solver = create_solver('scipy', ftol=1e-10)
        self.assertIsInstance(solver, ScipySolver)
        self.assertEqual(solver.ftol, 1e-10)

    def test_unknown(self):
        with self.assertRaises(ValueError):
            create_solver('gurobi')
