from cvxopt import matrix as cvxmat
from cvxopt.solvers import qp
import numpy as np

from sksmooth.optimizers.base import BaseSolver
from sksmooth.optimizers.base import SolverStatus


def box_inequality(lower, upper):
    """Express ``lower <= x <= upper`` as ``G x <= h``."""
    n = len(lower)
    G = np.vstack([np.eye(n), -np.eye(n)])
    h = np.hstack([upper, -lower])
    return G, h


class CvxoptSolver(BaseSolver):
    """Dense interior point backend using cvxopt.

    ``time_limit`` and ``scaled_termination`` are ignored.
    """

    name = 'cvxopt'

    def __init__(self, abstol=1e-9, reltol=1e-8, feastol=1e-9,
                 verbose=False):
        super().__init__(verbose=verbose)
        self.abstol = abstol
        self.reltol = reltol
        self.feastol = feastol
        self._args = None
        self._initvals = None
        self._sol = None

    def _setup(self, problem, settings):
        G, h = box_inequality(problem.lower, problem.upper)
        self._args = [cvxmat(problem.full_kernel()), cvxmat(problem.offset),
                      cvxmat(G), cvxmat(h)]

    def _warm_start(self, x):
        self._initvals = {'x': cvxmat(x)}

    def _solve(self):
        options = {
            'show_progress': self._is_verbose(),
            'maxiters': self.settings.max_iter,
            'abstol': self.abstol,
            'reltol': self.reltol,
            'feastol': self.feastol,
        }
        try:
            sol = qp(*self._args, initvals=self._initvals, options=options)
        except (ValueError, ArithmeticError) as e:
            self._message = str(e)
            return SolverStatus.ERROR
        self._sol = sol
        if sol['primal objective'] is not None:
            self._cost = float(sol['primal objective'])
        self._iterations = int(sol['iterations'])
        self._message = sol['status']
        self._info = {'gap': sol['gap']}
        if 'optimal' in sol['status']:
            return SolverStatus.SOLVED
        if self._iterations >= self.settings.max_iter:
            return SolverStatus.MAX_ITER_REACHED
        return SolverStatus.ERROR

    def _extract(self):
        if self._sol is None or self._sol['x'] is None:
            return None
        return np.array(self._sol['x']).reshape(
            (self.problem.n_variables,))

    def _teardown(self):
        self._args = None
        self._initvals = None
        self._sol = None
