import numpy as np

from sksmooth.smoothing.settings import Weights


def objective_value(x, y, ref_points, weights=None):
    """Evaluate the smoothing objective J of a path.

    Parameters
    ----------
    x, y : array-like (N,)
        Path coordinates.
    ref_points : array-like (N, 2)
        Reference points.
    weights : Weights, optional
        Objective weights.

    Returns
    -------
    float
        Sum over both axes of the weighted squared second differences,
        squared first differences and squared deviations.
    """
    if weights is None:
        weights = Weights()
    path = np.column_stack([x, y]).astype(np.float64)
    ref = np.asarray(ref_points, dtype=np.float64)
    second = np.diff(path, n=2, axis=0)
    first = np.diff(path, axis=0)
    return float(weights.smoothness * np.sum(second ** 2)
                 + weights.length * np.sum(first ** 2)
                 + weights.deviation * np.sum((path - ref) ** 2))


def compute_path_smoothness(x, y, ref_points=None,
                            x_bounds=None, y_bounds=None):
    """Compute smoothness metrics for a 2D path.

    Parameters
    ----------
    x, y : array-like (N,)
        Path coordinates.
    ref_points : array-like (N, 2), optional
        Reference points, enables the deviation metrics.
    x_bounds, y_bounds : array-like (N,), optional
        Half-widths around ``ref_points``, enables ``max_bound_violation``.

    Returns
    -------
    metrics : dict
        Dictionary containing:
        - 'max_second_difference': largest second difference norm
        - 'mean_second_difference': mean second difference norm
        - 'total_path_length': sum of segment lengths
        - 'max_deviation': largest distance to the reference
        - 'max_bound_violation': largest excess over the box, 0 if inside
    """
    path = np.column_stack([x, y]).astype(np.float64)
    segments = np.linalg.norm(np.diff(path, axis=0), axis=1)
    second = np.linalg.norm(np.diff(path, n=2, axis=0), axis=1)
    if len(second) == 0:
        second = np.zeros(1)
    metrics = {
        'max_second_difference': float(np.max(second)),
        'mean_second_difference': float(np.mean(second)),
        'total_path_length': float(np.sum(segments)),
    }
    if ref_points is None:
        return metrics

    offset = path - np.asarray(ref_points, dtype=np.float64)
    metrics['max_deviation'] = float(
        np.max(np.linalg.norm(offset, axis=1)))
    if x_bounds is not None and y_bounds is not None:
        half_width = np.column_stack([x_bounds, y_bounds])
        excess = np.abs(offset) - half_width
        metrics['max_bound_violation'] = float(max(np.max(excess), 0.0))
    return metrics
