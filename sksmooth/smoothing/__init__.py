from sksmooth.smoothing.metrics import compute_path_smoothness
from sksmooth.smoothing.metrics import objective_value
from sksmooth.smoothing.problem import build_problem
from sksmooth.smoothing.problem import SmoothingProblem
from sksmooth.smoothing.settings import SmootherConfig
from sksmooth.smoothing.settings import SolverSettings
from sksmooth.smoothing.settings import Weights


__all__ = [
    'FemPosDeviationSmoother',
    'SmootherConfig',
    'SmoothingProblem',
    'SolverSettings',
    'Weights',
    'build_problem',
    'compute_path_smoothness',
    'objective_value',
    'smooth_points',
]


# The smoother depends on sksmooth.optimizers, which imports the settings
# from this package, so it is loaded on first access.
def __getattr__(name):
    if name in ('FemPosDeviationSmoother', 'smooth_points'):
        from sksmooth.smoothing import smoother
        return getattr(smoother, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
