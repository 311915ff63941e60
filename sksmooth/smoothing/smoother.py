"""FEM position deviation smoother.

Smooths an ordered sequence of reference points inside a box around each
point by solving one QP per call.

Example
-------
>>> from sksmooth.smoothing import FemPosDeviationSmoother
>>> smoother = FemPosDeviationSmoother(
...     [(0.0, 0.0), (1.0, 0.2), (2.0, -0.1), (3.0, 0.0)],
...     x_bounds=[0.3] * 4, y_bounds=[0.3] * 4)
>>> smoother.optimize()
True
>>> smoother.opt_x, smoother.opt_y  # doctest: +SKIP
"""

from logging import getLogger

from sksmooth.errors import InputShapeError
from sksmooth.errors import InputSizeError
from sksmooth.errors import SmootherError
from sksmooth.errors import SolverConvergenceError
from sksmooth.optimizers import BaseSolver
from sksmooth.optimizers import create_solver
from sksmooth.smoothing.problem import build_problem
from sksmooth.smoothing.problem import MAX_POINTS
from sksmooth.smoothing.settings import SmootherConfig
from sksmooth.smoothing.settings import SolverSettings


logger = getLogger(__name__)


def validate_inputs(ref_points, x_bounds, y_bounds):
    """Check the sizes of the inputs before anything is allocated.

    Returns
    -------
    n_points : int

    Raises
    ------
    InputShapeError
        If the reference is empty, shorter than 3 points or the bound
        sequences do not match it.
    InputSizeError
        If there are more points than a 32-bit signed count holds.
    """
    n_points = len(ref_points)
    if n_points == 0:
        raise InputShapeError(
            'reference points empty, smoother early terminates')
    if n_points != len(x_bounds) or len(x_bounds) != len(y_bounds):
        raise InputShapeError(
            'ref_points and bounds size not equal, smoother early '
            f'terminates: {n_points} points, {len(x_bounds)} x bounds, '
            f'{len(y_bounds)} y bounds')
    if n_points < 3:
        raise InputShapeError(
            f'ref_points size smaller than 3, smoother early terminates: '
            f'{n_points}')
    if n_points > MAX_POINTS:
        raise InputSizeError(
            f'ref_points size too large, smoother early terminates: '
            f'{n_points} > {MAX_POINTS}')
    return n_points


def solve_smoothing_problem(problem, settings=None, solver=None):
    """Solve an assembled problem and return the interleaved solution.

    Parameters
    ----------
    problem : SmoothingProblem
        Assembled QP.
    settings : SolverSettings, optional
        Backend options.
    solver : BaseSolver or str, optional
        Backend instance or name. Defaults to ``'osqp'``.

    Returns
    -------
    SolverResult
        A successful result.

    Raises
    ------
    SolverSetupError
        If the backend rejects the problem.
    SolverConvergenceError
        If the backend returns no usable solution.
    """
    if settings is None:
        settings = SolverSettings()
    if not isinstance(solver, BaseSolver):
        solver = create_solver(solver or 'osqp')
    warm_start = problem.warm_start if settings.warm_start else None
    result = solver.run(problem, settings, warm_start=warm_start)
    if not result.success:
        raise SolverConvergenceError(
            f'Failed to find solution. {solver.name} status: '
            f'{result.message}',
            status=result.status, result=result)
    return result


def smooth_points(ref_points, x_bounds, y_bounds, weights=None,
                  settings=None, solver=None, legacy_offset=False):
    """Smooth ``ref_points`` within the given bounds.

    Parameters
    ----------
    ref_points : array-like (N, 2)
        Reference points, N >= 3.
    x_bounds, y_bounds : array-like (N,)
        Allowed half-width around each reference point.
    weights : Weights, optional
        Objective weights.
    settings : SolverSettings, optional
        Backend options.
    solver : BaseSolver or str, optional
        Backend instance or name. Defaults to ``'osqp'``.
    legacy_offset : bool
        Use the historical constant offset vector.

    Returns
    -------
    x, y : ndarray (N,)
        Smoothed coordinates.

    Raises
    ------
    SmootherError
        On invalid input or solver failure. Nothing is returned then.
    """
    validate_inputs(ref_points, x_bounds, y_bounds)
    problem = build_problem(ref_points, x_bounds, y_bounds,
                            weights=weights, legacy_offset=legacy_offset)
    result = solve_smoothing_problem(problem, settings, solver)
    return split_solution(result.x)


def split_solution(x):
    """Split an interleaved solution into its x and y coordinates."""
    return x[0::2].copy(), x[1::2].copy()


class FemPosDeviationSmoother(object):
    """Smoother bound to one reference path.

    Parameters
    ----------
    ref_points : array-like (N, 2)
        Reference points.
    x_bounds, y_bounds : array-like (N,)
        Allowed half-width around each reference point.
    config : SmootherConfig, optional
        Weights, backend name and backend settings.

    Attributes
    ----------
    opt_x, opt_y : ndarray (N,) or None
        Smoothed coordinates of the last successful :meth:`optimize`.
    result : SolverResult or None
        Result of the last solver run.
    """

    def __init__(self, ref_points, x_bounds, y_bounds, config=None):
        if config is None:
            config = SmootherConfig()
        self.config = config
        self.ref_points = ref_points
        self.x_bounds = x_bounds
        self.y_bounds = y_bounds
        self.opt_x = None
        self.opt_y = None
        self.result = None

    def optimize(self, settings=None, solver=None):
        """Run one smoothing cycle.

        Parameters
        ----------
        settings : SolverSettings, optional
            Overrides ``config.settings``.
        solver : BaseSolver or str, optional
            Overrides ``config.solver``.

        Returns
        -------
        bool
            True on success. On failure the reason is logged and
            ``opt_x`` / ``opt_y`` are ``None``.
        """
        self.opt_x = None
        self.opt_y = None
        self.result = None
        if settings is None:
            settings = self.config.settings
        if solver is None:
            solver = self.config.solver
        try:
            validate_inputs(self.ref_points, self.x_bounds, self.y_bounds)
            problem = build_problem(
                self.ref_points, self.x_bounds, self.y_bounds,
                weights=self.config.weights,
                legacy_offset=self.config.legacy_offset)
            self.result = solve_smoothing_problem(problem, settings, solver)
        except SolverConvergenceError as e:
            self.result = e.result
            logger.error('%s', e)
            return False
        except (SmootherError, ImportError, ValueError) as e:
            # ImportError and ValueError: uninstalled or unknown backend
            logger.error('%s', e)
            return False

        self.opt_x, self.opt_y = split_solution(self.result.x)
        return True
