"""Quadratic program assembly for FEM position deviation smoothing.

The decision vector interleaves the coordinates of the smoothed points,
``(x_0, y_0, x_1, y_1, ..., x_{N-1}, y_{N-1})``, and the objective per
axis is

.. math::

    J = w_s \\sum_{i=1}^{N-2} (p_{i-1} - 2 p_i + p_{i+1})^2
      + w_l \\sum_{i=0}^{N-2} (p_{i+1} - p_i)^2
      + w_d \\sum_{i=0}^{N-1} (p_i - r_i)^2

subject to a box around every reference point. The matrices follow the
``1/2 x^T P x + q^T x`` convention of QP solvers, so every kernel
coefficient is doubled. Only the upper triangle of the kernel is stored,
in compressed sparse column (CSC) form.
"""

from dataclasses import dataclass

import numpy as np
import scipy.sparse

from sksmooth.errors import InputShapeError
from sksmooth.smoothing.settings import Weights


# Largest point count a 32-bit signed integer can hold.
MAX_POINTS = 2 ** 31 - 1


@dataclass
class SmoothingProblem:
    """Assembled QP of one smoothing call.

    Attributes
    ----------
    n_points : int
        Number of reference points N.
    kernel_data, kernel_indices, kernel_indptr : ndarray
        Upper triangle of the kernel P in CSC form.
    constraint_data, constraint_indices, constraint_indptr : ndarray
        Constraint matrix A (identity) in CSC form.
    offset : ndarray (2N,)
        Linear term q.
    lower, upper : ndarray (2N,)
        Box bounds of every variable.
    warm_start : ndarray (2N,)
        Interleaved reference coordinates.
    """

    n_points: int
    kernel_data: np.ndarray
    kernel_indices: np.ndarray
    kernel_indptr: np.ndarray
    constraint_data: np.ndarray
    constraint_indices: np.ndarray
    constraint_indptr: np.ndarray
    offset: np.ndarray
    lower: np.ndarray
    upper: np.ndarray
    warm_start: np.ndarray

    @property
    def n_variables(self):
        return 2 * self.n_points

    @property
    def n_constraints(self):
        return len(self.lower)

    def kernel_matrix(self):
        """Return the upper triangular kernel as ``scipy.sparse.csc_matrix``."""
        n = self.n_variables
        return scipy.sparse.csc_matrix(
            (self.kernel_data, self.kernel_indices, self.kernel_indptr),
            shape=(n, n))

    def constraint_matrix(self):
        return scipy.sparse.csc_matrix(
            (self.constraint_data, self.constraint_indices,
             self.constraint_indptr),
            shape=(self.n_constraints, self.n_variables))

    def symmetric_kernel(self):
        """Return the full symmetric kernel as a sparse matrix."""
        upper = self.kernel_matrix()
        return (upper + scipy.sparse.triu(upper, k=1).T).tocsc()

    def full_kernel(self):
        """Return the full symmetric kernel as a dense array."""
        return self.symmetric_kernel().toarray()

    def objective(self, x):
        """Evaluate ``1/2 x^T P x + q^T x``."""
        x = np.asarray(x, dtype=np.float64)
        return 0.5 * x.dot(self.symmetric_kernel().dot(x)) \
            + self.offset.dot(x)


def _point_coefficients(point_index, n_points, weights):
    """Kernel coefficients of one point, before doubling.

    Returns
    -------
    diagonal : float
        Coefficient of the point with itself.
    adjacent : float or None
        Coupling with the previous point, ``None`` for the first point.
    next_adjacent : float or None
        Coupling with the point two steps back, ``None`` where that point
        does not exist.
    """
    ws, wl, wd = weights
    last = n_points - 1
    if point_index == 0:
        return ws + wl + wd, None, None
    if point_index == last:
        return ws + wl + wd, -2.0 * ws - wl, ws
    if point_index == 1 and last == 2:
        # both second and second-to-last: a single second difference
        return 4.0 * ws + 2.0 * wl + wd, -2.0 * ws - wl, None
    if point_index == 1:
        return 5.0 * ws + 2.0 * wl + wd, -2.0 * ws - wl, None
    if point_index == last - 1:
        return 5.0 * ws + 2.0 * wl + wd, -4.0 * ws - wl, ws
    return 6.0 * ws + 2.0 * wl + wd, -4.0 * ws - wl, ws


def calculate_kernel(n_points, weights):
    """Build the upper triangle of the kernel in CSC form.

    Parameters
    ----------
    n_points : int
        Number of reference points, at least 3.
    weights : Weights
        Objective weights.

    Returns
    -------
    data : ndarray (nnz,)
    indices : ndarray (nnz,)
        Row index of every entry, ascending within a column.
    indptr : ndarray (2N + 1,)
        Column start offsets. ``indptr[-1] == nnz``.
    """
    if n_points < 3:
        raise InputShapeError(
            f'kernel needs at least 3 points, got {n_points}')
    n_variables = 2 * n_points
    columns = [[] for _ in range(n_variables)]
    col_num = 0
    for point_index in range(n_points):
        diagonal, adjacent, next_adjacent = _point_coefficients(
            point_index, n_points, weights)
        for axis in range(2):
            col = 2 * point_index + axis
            if next_adjacent is not None:
                columns[col].append((col - 4, next_adjacent))
            if adjacent is not None:
                columns[col].append((col - 2, adjacent))
            columns[col].append((col, diagonal))
            col_num += 1

    if col_num != n_variables:
        raise ValueError(
            f'kernel has {col_num} columns, expected {n_variables}')

    data = []
    indices = []
    indptr = []
    ind_p = 0
    for column in columns:
        indptr.append(ind_p)
        for row, value in column:
            data.append(2.0 * value)
            indices.append(row)
            ind_p += 1
    indptr.append(ind_p)

    if indptr[-1] != len(data):
        raise ValueError(
            f'kernel column pointers end at {indptr[-1]} '
            f'but {len(data)} values were stored')
    return (np.array(data, dtype=np.float64),
            np.array(indices, dtype=np.int64),
            np.array(indptr, dtype=np.int64))


def calculate_offset(ref_xy, weights, legacy_offset=False):
    """Linear term of the objective.

    With ``legacy_offset=False`` every entry is ``-2 * w_d * r_k`` which
    pulls the optimum towards the reference. ``legacy_offset=True`` gives
    the constant ``-2 * w_d`` of earlier releases.
    """
    ref_xy = np.asarray(ref_xy, dtype=np.float64)
    if legacy_offset:
        return np.full(ref_xy.size, -2.0 * weights.deviation)
    return -2.0 * weights.deviation * ref_xy.reshape(-1)


def calculate_affine_constraint(ref_xy, x_bounds, y_bounds):
    """Identity constraint matrix and interleaved box bounds.

    Returns
    -------
    data, indices, indptr : ndarray
        Identity matrix of size 2N in CSC form.
    lower, upper : ndarray (2N,)
    """
    ref_xy = np.asarray(ref_xy, dtype=np.float64)
    n_variables = ref_xy.size
    data = np.ones(n_variables, dtype=np.float64)
    indices = np.arange(n_variables, dtype=np.int64)
    indptr = np.arange(n_variables + 1, dtype=np.int64)

    half_width = np.column_stack(
        [np.asarray(x_bounds, dtype=np.float64),
         np.asarray(y_bounds, dtype=np.float64)]).reshape(-1)
    center = ref_xy.reshape(-1)
    return data, indices, indptr, center - half_width, center + half_width


def set_primal_warm_start(ref_xy):
    return np.array(ref_xy, dtype=np.float64).reshape(-1)


def _as_points(ref_points):
    try:
        ref_xy = np.asarray(ref_points, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InputShapeError(
            f'reference points are not a numeric (N, 2) array: {e}') from e
    if ref_xy.ndim != 2 or ref_xy.shape[1] != 2:
        raise InputShapeError(
            f'reference points must have shape (N, 2), got {ref_xy.shape}')
    if not np.all(np.isfinite(ref_xy)):
        raise InputShapeError('reference points must be finite')
    return ref_xy


def _as_bounds(bounds, n_points, name):
    try:
        bounds = np.asarray(bounds, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InputShapeError(f'{name} is not a numeric array: {e}') from e
    if bounds.shape != (n_points,):
        raise InputShapeError(
            f'{name} must have shape ({n_points},), got {bounds.shape}')
    if not np.all(np.isfinite(bounds)) or np.any(bounds < 0.0):
        raise InputShapeError(f'{name} must be finite and non-negative')
    return bounds


def build_problem(ref_points, x_bounds, y_bounds, weights=None,
                  legacy_offset=False):
    """Assemble the smoothing QP.

    Parameters
    ----------
    ref_points : array-like (N, 2)
        Reference points.
    x_bounds, y_bounds : array-like (N,)
        Allowed half-width around every reference point.
    weights : Weights, optional
        Objective weights. Defaults to ``Weights()``.
    legacy_offset : bool
        See :func:`calculate_offset`.

    Returns
    -------
    SmoothingProblem
    """
    if weights is None:
        weights = Weights()
    ref_xy = _as_points(ref_points)
    n_points = len(ref_xy)
    x_bounds = _as_bounds(x_bounds, n_points, 'x_bounds')
    y_bounds = _as_bounds(y_bounds, n_points, 'y_bounds')

    kernel_data, kernel_indices, kernel_indptr = calculate_kernel(
        n_points, weights)
    (constraint_data, constraint_indices, constraint_indptr,
     lower, upper) = calculate_affine_constraint(ref_xy, x_bounds, y_bounds)
    return SmoothingProblem(
        n_points=n_points,
        kernel_data=kernel_data,
        kernel_indices=kernel_indices,
        kernel_indptr=kernel_indptr,
        constraint_data=constraint_data,
        constraint_indices=constraint_indices,
        constraint_indptr=constraint_indptr,
        offset=calculate_offset(ref_xy, weights, legacy_offset),
        lower=lower,
        upper=upper,
        warm_start=set_primal_warm_start(ref_xy),
    )
