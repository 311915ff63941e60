"""Exceptions raised while smoothing a reference path."""


class SmootherError(Exception):
    """Base class of every terminal smoothing failure."""


class InputShapeError(SmootherError, ValueError):
    """Reference points or bounds are empty, misaligned or too short."""


class InputSizeError(SmootherError, ValueError):
    """More reference points than a 32-bit signed count can index."""


class SolverSetupError(SmootherError, RuntimeError):
    """The QP backend refused to allocate or accept the problem."""


class SolverConvergenceError(SmootherError, RuntimeError):
    """The QP backend ran but produced no usable solution.

    Attributes
    ----------
    status : SolverStatus or None
        Status reported by the backend.
    result : SolverResult or None
        Full result of the failed run.
    """

    def __init__(self, message, status=None, result=None):
        super().__init__(message)
        self.status = status
        self.result = result
