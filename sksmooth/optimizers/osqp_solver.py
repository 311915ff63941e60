"""OSQP backend, the default solver of the smoother."""

import importlib.metadata
from logging import getLogger

import numpy as np
import osqp

from sksmooth.errors import SolverSetupError
from sksmooth.optimizers.base import BaseSolver
from sksmooth.optimizers.base import SolverStatus


logger = getLogger(__name__)


_STATUS_TABLE = {
    'solved': SolverStatus.SOLVED,
    'solved inaccurate': SolverStatus.SOLVED_INACCURATE,
    'primal infeasible': SolverStatus.PRIMAL_INFEASIBLE,
    'primal infeasible inaccurate': SolverStatus.PRIMAL_INFEASIBLE,
    'dual infeasible': SolverStatus.DUAL_INFEASIBLE,
    'dual infeasible inaccurate': SolverStatus.DUAL_INFEASIBLE,
    'maximum iterations reached': SolverStatus.MAX_ITER_REACHED,
    'run time limit reached': SolverStatus.TIME_LIMIT_REACHED,
    'interrupted': SolverStatus.INTERRUPTED,
    'problem non convex': SolverStatus.NON_CONVEX,
    'unsolved': SolverStatus.UNSOLVED,
}


def _osqp_major_version():
    try:
        return int(importlib.metadata.version('osqp').split('.')[0])
    except (importlib.metadata.PackageNotFoundError, ValueError):
        return 0


# osqp 1.0 renamed the warm start and polish settings.
if _osqp_major_version() >= 1:
    _WARM_START_KEY = 'warm_starting'
    _POLISH_KEY = 'polishing'
else:
    _WARM_START_KEY = 'warm_start'
    _POLISH_KEY = 'polish'


def _setup_errors():
    errors = [ValueError, TypeError]
    # osqp 1.0 raises its own exception class from a rejected setup.
    exception = getattr(osqp, 'OSQPException', None) \
        or getattr(getattr(osqp, 'interface', None), 'OSQPException', None)
    if exception is not None:
        errors.append(exception)
    return tuple(errors)


_SETUP_ERRORS = _setup_errors()


def convert_status(status):
    """Map an OSQP status string to :class:`SolverStatus`."""
    return _STATUS_TABLE.get(str(status).lower(), SolverStatus.ERROR)


class OsqpSolver(BaseSolver):
    """Sparse ADMM backend using `OSQP <https://osqp.org>`_.

    Every field of :class:`SolverSettings` is passed through.

    The default tolerances (1e-3) and disabled polishing favour speed;
    the result can sit up to about ``eps_abs`` outside the box. Use
    ``eps_abs=eps_rel=1e-6`` or tighter with ``polish=True`` when the
    answer must be accurate.
    """

    name = 'osqp'

    def __init__(
        self,
        eps_abs=1e-3,
        eps_rel=1e-3,
        polish=False,
        verbose=False,
        **options,
    ):
        """Initialize OSQP solver.

        Parameters
        ----------
        eps_abs : float
            Absolute termination tolerance.
        eps_rel : float
            Relative termination tolerance.
        polish : bool
            Refine the ADMM solution with an active set step.
        verbose : bool
            Print optimization progress.
        **options
            Any other OSQP setting, e.g. ``rho`` or ``adaptive_rho``.
        """
        super().__init__(verbose=verbose)
        self.eps_abs = eps_abs
        self.eps_rel = eps_rel
        self.polish = polish
        self.options = options
        self._osqp = None
        self._results = None

    def _osqp_settings(self, settings):
        options = dict(self.options)
        options.update(
            eps_abs=self.eps_abs,
            eps_rel=self.eps_rel,
            max_iter=settings.max_iter,
            verbose=self._is_verbose(),
            scaled_termination=settings.scaled_termination,
        )
        # a zero time limit means no limit; osqp >= 1.0 rejects 0
        if settings.time_limit > 0.0:
            options['time_limit'] = settings.time_limit
        options[_WARM_START_KEY] = settings.warm_start
        options[_POLISH_KEY] = self.polish
        return options

    def _setup(self, problem, settings):
        self._osqp = osqp.OSQP()
        try:
            self._osqp.setup(
                problem.kernel_matrix(), problem.offset,
                problem.constraint_matrix(), problem.lower, problem.upper,
                **self._osqp_settings(settings))
        except _SETUP_ERRORS as e:
            raise SolverSetupError(f'OSQP setup failed: {e}') from e

    def _warm_start(self, x):
        self._osqp.warm_start(x=x)

    def _solve(self):
        self._results = self._osqp.solve()
        info = self._results.info
        self._cost = float(info.obj_val)
        self._iterations = int(info.iter)
        self._message = str(info.status)
        self._info = {
            'status_val': int(info.status_val),
            'setup_time': float(info.setup_time),
            'solve_time': float(info.solve_time),
        }
        status = convert_status(info.status)
        if not status.is_success:
            logger.debug('osqp: failed optimization status: %s', info.status)
        return status

    def _extract(self):
        if self._results is None or self._results.x is None:
            return None
        return np.asarray(self._results.x, dtype=np.float64)

    def _teardown(self):
        self._osqp = None
        self._results = None
