"""Weights and solver settings of the FEM position deviation smoother.

Example
-------
>>> from sksmooth.smoothing.settings import SmootherConfig
>>> config = SmootherConfig.from_dict({
...     'weights': {'smoothness': 10.0, 'length': 1.0, 'deviation': 1.0},
...     'settings': {'max_iter': 1000},
... })
>>> config.settings.max_iter
1000
"""

from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import field
from dataclasses import fields
import math


@dataclass(frozen=True)
class Weights:
    """Objective weights.

    Parameters
    ----------
    smoothness : float
        Weight of the squared second difference (curvature proxy).
    length : float
        Weight of the squared first difference (path length).
    deviation : float
        Weight of the squared distance to the reference points.
    """

    smoothness: float = 1.0
    length: float = 1.0
    deviation: float = 1.0

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value) or value < 0.0:
                raise ValueError(
                    f"weight '{f.name}' must be a finite non-negative "
                    f"number, got {value}")

    def __iter__(self):
        return iter((self.smoothness, self.length, self.deviation))


@dataclass
class SolverSettings:
    """Options handed through to the QP backend.

    Parameters
    ----------
    max_iter : int
        Iteration cap of the backend.
    time_limit : float
        Wall clock limit in seconds. ``0.0`` disables it.
    verbose : bool
        Let the backend print its progress.
    scaled_termination : bool
        Evaluate the termination criteria on the scaled problem.
    warm_start : bool
        Seed the backend with the reference points.
    """

    max_iter: int = 500
    time_limit: float = 0.0
    verbose: bool = False
    scaled_termination: bool = True
    warm_start: bool = True

    def __post_init__(self):
        if int(self.max_iter) <= 0:
            raise ValueError(
                f'max_iter must be positive, got {self.max_iter}')
        if self.time_limit < 0.0:
            raise ValueError(
                f'time_limit must be non-negative, got {self.time_limit}')
        self.max_iter = int(self.max_iter)
        self.time_limit = float(self.time_limit)

    @classmethod
    def from_dict(cls, options):
        _check_keys(options, _field_names(cls), 'solver settings')
        return cls(**options)

    def to_dict(self):
        return asdict(self)


@dataclass
class SmootherConfig:
    """Complete configuration of one smoother.

    Parameters
    ----------
    weights : Weights
        Objective weights.
    settings : SolverSettings
        Backend options.
    solver : str
        Backend name understood by
        :func:`sksmooth.optimizers.create_solver`.
    legacy_offset : bool
        Use the historical constant offset vector ``-2 * deviation``
        instead of ``-2 * deviation * reference``.
    """

    weights: Weights = field(default_factory=Weights)
    settings: SolverSettings = field(default_factory=SolverSettings)
    solver: str = 'osqp'
    legacy_offset: bool = False

    @classmethod
    def from_dict(cls, config):
        """Build a config from a nested or flat mapping.

        Nested keys are ``weights``, ``settings``, ``solver`` and
        ``legacy_offset``. The fields of :class:`Weights` and
        :class:`SolverSettings` may also be given at the top level.

        Raises
        ------
        ValueError
            If a key is unknown.
        """
        config = dict(config)
        weight_keys = _field_names(Weights)
        setting_keys = _field_names(SolverSettings)
        allowed = (weight_keys | setting_keys
                   | {'weights', 'settings', 'solver', 'legacy_offset'})
        _check_keys(config, allowed, 'smoother config')

        weights = dict(config.pop('weights', {}))
        settings = dict(config.pop('settings', {}))
        for key in list(config):
            if key in weight_keys:
                weights[key] = config.pop(key)
            elif key in setting_keys:
                settings[key] = config.pop(key)
        _check_keys(weights, weight_keys, 'weights')
        return cls(weights=Weights(**weights),
                   settings=SolverSettings.from_dict(settings),
                   **config)

    def to_dict(self):
        return {
            'weights': asdict(self.weights),
            'settings': self.settings.to_dict(),
            'solver': self.solver,
            'legacy_offset': self.legacy_offset,
        }


def _field_names(cls):
    return {f.name for f in fields(cls)}


def _check_keys(mapping, allowed, what):
    unknown = sorted(set(mapping) - set(allowed))
    if unknown:
        raise ValueError(
            f"Unknown {what} keys: {unknown}. "
            f"Allowed keys are {sorted(allowed)}")
