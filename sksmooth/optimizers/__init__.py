"""QP backends of the smoother.

Available solvers:
- 'osqp': sparse ADMM solver (default)
- 'scipy': SciPy L-BFGS-B, no extra dependency
- 'cvxopt': dense interior point solver (optional dependency)
- 'quadprog': dense active set solver (optional dependency)
"""

from sksmooth.optimizers.base import BaseSolver
from sksmooth.optimizers.base import SolverResult
from sksmooth.optimizers.base import SolverStatus


_INSTALL_HINT = "{0} is not installed. "\
                "Please install {0} by 'pip install {0}' "\
                "if wheel is released for your platform."

SOLVER_TYPES = ('osqp', 'scipy', 'cvxopt', 'quadprog')


def create_solver(solver_type='osqp', **kwargs):
    """Create a QP backend.

    Parameters
    ----------
    solver_type : str
        Solver type: 'osqp', 'scipy', 'cvxopt' or 'quadprog'.
    **kwargs
        Solver-specific options.

    Returns
    -------
    BaseSolver
        Solver instance.

    Raises
    ------
    ValueError
        If ``solver_type`` is unknown.
    ModuleNotFoundError
        If the library behind ``solver_type`` is not installed.
    """
    if solver_type not in SOLVER_TYPES:
        raise ValueError(f"Unknown solver type: {solver_type}")
    try:
        if solver_type == 'osqp':
            from sksmooth.optimizers.osqp_solver import OsqpSolver
            return OsqpSolver(**kwargs)
        elif solver_type == 'scipy':
            from sksmooth.optimizers.scipy_solver import ScipySolver
            return ScipySolver(**kwargs)
        elif solver_type == 'cvxopt':
            from sksmooth.optimizers.cvxopt_solver import CvxoptSolver
            return CvxoptSolver(**kwargs)
        else:
            from sksmooth.optimizers.quadprog_solver import QuadprogSolver
            return QuadprogSolver(**kwargs)
    except ModuleNotFoundError as e:
        raise ModuleNotFoundError(
            _INSTALL_HINT.format(e.name or solver_type)) from e


__all__ = [
    'BaseSolver',
    'SOLVER_TYPES',
    'SolverResult',
    'SolverStatus',
    'create_solver',
]
