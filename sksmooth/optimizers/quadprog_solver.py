import numpy as np
from quadprog import solve_qp as _solve_qp

from sksmooth.optimizers.base import BaseSolver
from sksmooth.optimizers.base import SolverStatus


class QuadprogSolver(BaseSolver):
    """Dense active set backend using quadprog.

    Solve a Quadratic Program defined as:

    .. math::
        \\begin{eqnarray}
        \\mathrm{minimize} & & (1/2) x^T P x + q^T x \\\\
        \\mathrm{subject\\ to} & & l \\leq x \\leq u
        \\end{eqnarray}

    using the `quadprog <https://pypi.python.org/pypi/quadprog/>`_ QP
    solver, which implements the Goldfarb-Idnani dual algorithm
    [Goldfarb83]_.

    Note
    ----
    quadprog requires a strictly positive definite kernel, which holds
    whenever the deviation weight is positive. It takes no warm start,
    no iteration cap and no time limit.
    """

    name = 'quadprog'

    def __init__(self, verbose=False):
        super().__init__(verbose=verbose)
        self._qp_args = None
        self._x = None

    def _setup(self, problem, settings):
        n = problem.n_variables
        qp_G = problem.full_kernel()
        qp_a = -problem.offset
        # C^T x >= b encodes x >= l and -x >= -u
        qp_C = np.hstack([np.eye(n), -np.eye(n)])
        qp_b = np.hstack([problem.lower, -problem.upper])
        self._qp_args = (qp_G, qp_a, qp_C, qp_b, 0)

    def _solve(self):
        try:
            x, f, _, iterations, _, _ = _solve_qp(*self._qp_args)
        except ValueError as e:
            self._message = str(e)
            if 'inconsistent' in self._message:
                return SolverStatus.PRIMAL_INFEASIBLE
            if 'positive definite' in self._message:
                return SolverStatus.NON_CONVEX
            return SolverStatus.ERROR
        self._x = x
        self._cost = float(f)
        self._iterations = int(iterations[0])
        return SolverStatus.SOLVED

    def _extract(self):
        return self._x

    def _teardown(self):
        self._qp_args = None
        self._x = None
