"""Base solver interface for smoothing QPs.

A backend is driven through ``setup -> warm_start -> solve -> extract``
and always released with ``teardown``. :meth:`BaseSolver.run` performs
the whole cycle.
"""

from abc import ABC
from abc import abstractmethod
from contextlib import contextmanager
import enum
from logging import getLogger

import numpy as np

from sksmooth.errors import SolverSetupError
from sksmooth.smoothing.settings import SolverSettings


logger = getLogger(__name__)


class SolverStatus(enum.Enum):
    SOLVED = 'solved'
    SOLVED_INACCURATE = 'solved inaccurate'
    PRIMAL_INFEASIBLE = 'primal infeasible'
    DUAL_INFEASIBLE = 'dual infeasible'
    MAX_ITER_REACHED = 'maximum iterations reached'
    TIME_LIMIT_REACHED = 'run time limit reached'
    INTERRUPTED = 'interrupted'
    NON_CONVEX = 'problem non convex'
    ERROR = 'error'
    UNSOLVED = 'unsolved'

    @property
    def is_success(self):
        return self in (SolverStatus.SOLVED, SolverStatus.SOLVED_INACCURATE)


class SolverResult:
    """Result of one solver run.

    Attributes
    ----------
    x : ndarray (2N,) or None
        Primal solution, ``None`` unless the run succeeded.
    status : SolverStatus
        Backend status.
    success : bool
        ``status.is_success`` and a solution was extracted.
    cost : float
        Objective value ``1/2 x^T P x + q^T x`` reported by the backend.
    iterations : int
        Number of iterations.
    message : str
        Status message.
    info : dict
        Additional solver-specific information.
    """

    def __init__(
        self,
        x,
        status,
        cost=np.nan,
        iterations=0,
        message='',
        info=None,
    ):
        self.x = None if x is None else np.asarray(x)
        self.status = status
        self.success = status.is_success and self.x is not None
        self.cost = cost
        self.iterations = iterations
        self.message = message or status.value
        self.info = info or {}

    def __repr__(self):
        return (f'{self.__class__.__name__}(status={self.status.name}, '
                f'success={self.success}, iterations={self.iterations})')


class BaseSolver(ABC):
    """Abstract base class for QP backends.

    Subclasses implement ``_setup``, ``_solve`` and ``_extract`` and may
    override ``_warm_start`` and ``_teardown``. Backends fill
    ``self._cost``, ``self._iterations``, ``self._message`` and
    ``self._info`` while solving.
    """

    name = None

    def __init__(self, verbose=False):
        """Initialize solver.

        Parameters
        ----------
        verbose : bool
            Print optimization progress regardless of
            ``SolverSettings.verbose``.
        """
        self.verbose = verbose
        self._reset()

    def _reset(self):
        self.problem = None
        self.settings = None
        self.status = SolverStatus.UNSOLVED
        self._cost = np.nan
        self._iterations = 0
        self._message = ''
        self._info = {}

    def setup(self, problem, settings=None):
        """Allocate backend state for ``problem``.

        Raises
        ------
        SolverSetupError
            If the backend rejects the problem.
        """
        if settings is None:
            settings = SolverSettings()
        self._reset()
        self.problem = problem
        self.settings = settings
        logger.debug('%s: setup with %d variables and %d constraints',
                     self.name, problem.n_variables, problem.n_constraints)
        self._setup(problem, settings)

    def warm_start(self, x):
        """Seed the primal variables."""
        self._require_setup()
        x = np.asarray(x, dtype=np.float64)
        if x.shape != (self.problem.n_variables,):
            raise ValueError(
                f'warm start has shape {x.shape}, expected '
                f'({self.problem.n_variables},)')
        self._warm_start(x)

    def solve(self):
        """Run the backend and return its :class:`SolverStatus`."""
        self._require_setup()
        self.status = self._solve()
        logger.debug('%s: finished with status %s after %d iterations',
                     self.name, self.status.value, self._iterations)
        return self.status

    def extract(self):
        """Return the primal solution, or ``None`` unless solved."""
        if self.problem is None or not self.status.is_success:
            return None
        x = self._extract()
        if x is None:
            return None
        x = np.asarray(x, dtype=np.float64)
        if x.shape != (self.problem.n_variables,) \
           or not np.all(np.isfinite(x)):
            logger.debug('%s: discarding malformed solution', self.name)
            return None
        return x

    def teardown(self):
        """Release backend state. Safe to call repeatedly."""
        self._teardown()
        self.problem = None
        self.settings = None

    @contextmanager
    def session(self, problem, settings=None):
        """Context manager that always tears the backend down.

        Example
        -------
        >>> with solver.session(problem, settings) as s:
        ...     s.warm_start(problem.warm_start)
        ...     status = s.solve()
        ...     x = s.extract()
        """
        try:
            self.setup(problem, settings)
            yield self
        finally:
            self.teardown()

    def run(self, problem, settings=None, warm_start=None):
        """Solve ``problem`` through the whole backend lifecycle.

        Parameters
        ----------
        problem : SmoothingProblem
            Assembled QP.
        settings : SolverSettings, optional
            Backend options.
        warm_start : ndarray (2N,), optional
            Initial primal guess.

        Returns
        -------
        SolverResult
        """
        with self.session(problem, settings):
            if warm_start is not None:
                self.warm_start(warm_start)
            status = self.solve()
            x = self.extract()
            return SolverResult(
                x=x,
                status=status,
                cost=self._cost,
                iterations=self._iterations,
                message=self._message,
                info=dict(self._info, solver=self.name),
            )

    def _require_setup(self):
        if self.problem is None:
            raise SolverSetupError(
                f'{self.name} solver is not set up, call setup() first')

    def _is_verbose(self):
        return self.verbose or self.settings.verbose

    @abstractmethod
    def _setup(self, problem, settings):
        pass

    def _warm_start(self, x):
        logger.debug('%s: warm start is not supported, ignored', self.name)

    @abstractmethod
    def _solve(self):
        pass

    @abstractmethod
    def _extract(self):
        pass

    def _teardown(self):
        pass
