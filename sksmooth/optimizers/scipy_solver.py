"""SciPy L-BFGS-B backend.

The smoothing QP only has box constraints, so a bound constrained
quasi-Newton method solves it without any QP library. The returned
solution satisfies the bounds exactly.
"""

import numpy as np
from scipy.optimize import Bounds
from scipy.optimize import minimize

from sksmooth.errors import SolverSetupError
from sksmooth.optimizers.base import BaseSolver
from sksmooth.optimizers.base import SolverStatus


class ScipySolver(BaseSolver):
    """Bounded L-BFGS-B solver for box constrained QPs.

    ``time_limit``, ``scaled_termination`` and ``verbose`` have no
    counterpart in L-BFGS-B and are ignored.
    """

    name = 'scipy'

    def __init__(
        self,
        ftol=1e-12,
        gtol=1e-8,
        ptol=1e-6,
        verbose=False,
    ):
        """Initialize scipy solver.

        Parameters
        ----------
        ftol : float
            Relative reduction of the objective that stops the iteration.
        gtol : float
            Projected gradient norm that stops the iteration.
        ptol : float
            Projected gradient norm below which an abnormal line search
            termination is still reported as ``SOLVED_INACCURATE``.
        verbose : bool
            Unused, kept for a uniform constructor.
        """
        super().__init__(verbose=verbose)
        self.ftol = ftol
        self.gtol = gtol
        self.ptol = ptol
        self._kernel = None
        self._x0 = None
        self._result = None

    def _setup(self, problem, settings):
        if np.any(problem.lower > problem.upper):
            raise SolverSetupError(
                'lower bounds exceed upper bounds, the box is empty')
        if problem.n_constraints != problem.n_variables:
            raise SolverSetupError(
                'scipy backend only supports one box bound per variable')
        self._kernel = problem.symmetric_kernel()
        self._x0 = np.clip(np.zeros(problem.n_variables),
                           problem.lower, problem.upper)

    def _warm_start(self, x):
        self._x0 = np.clip(x, self.problem.lower, self.problem.upper)

    def _solve(self):
        kernel = self._kernel
        offset = self.problem.offset

        def objective(x):
            px = kernel.dot(x)
            return 0.5 * x.dot(px) + offset.dot(x), px + offset

        options = {
            'maxiter': self.settings.max_iter,
            'ftol': self.ftol,
            'gtol': self.gtol,
        }
        result = minimize(
            objective, self._x0,
            method='L-BFGS-B',
            jac=True,
            bounds=Bounds(self.problem.lower, self.problem.upper),
            options=options,
        )
        self._result = result
        self._cost = float(result.fun)
        self._iterations = int(result.nit)
        self._message = str(result.message)
        self._info = {'scipy_result': result}

        if result.success:
            return SolverStatus.SOLVED
        if result.nit >= self.settings.max_iter:
            return SolverStatus.MAX_ITER_REACHED
        # line search stalls close to the optimum once the objective
        # stops decreasing in floating point
        if self._projected_gradient_norm(result.x) <= self.ptol:
            return SolverStatus.SOLVED_INACCURATE
        return SolverStatus.ERROR

    def _projected_gradient_norm(self, x):
        gradient = self._kernel.dot(x) + self.problem.offset
        projected = x - np.clip(
            x - gradient, self.problem.lower, self.problem.upper)
        return float(np.max(np.abs(projected)))

    def _extract(self):
        if self._result is None:
            return None
        return self._result.x

    def _teardown(self):
        self._kernel = None
        self._x0 = None
        self._result = None
