"""
Pairwise station differences and weighted regression.

The local lapse rate is estimated by regressing value differences on
elevation differences over every unordered pair of stations (see :func:`pairwise_regression`). Pairs are always enumerated by
:func:`unordered_pairs`, so the difference set built once per station set
and the weight products built per target point stay aligned index by index.
"""

from typing import NamedTuple, Tuple, Union

import numpy as np


# Weighted variance of x below this fraction of its weighted second moment
# is treated as zero
_RELATIVE_VARIANCE_TOL = 1e-12


class RegressionResult(NamedTuple):
    """Intercept and slope of a fitted line ``y = intercept + slope * x``."""

    intercept: float
    slope: float


def unordered_pairs(n: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Index arrays of every unordered pair ``(i, j)`` with ``j < i``.

    Pairs are ordered as the nested loop ``for i in range(n): for j in range(i)``,
    giving ``n * (n - 1) / 2`` pairs.

    Parameters
    ----------
    n : int
        Number of stations

    Returns
    -------
    tuple of np.ndarray
        ``(i, j)`` integer index arrays
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    return np.tril_indices(n, k=-1)


def n_pairs(n: int) -> int:
    return n * (n - 1) // 2 if n > 1 else 0


def pairwise_differences(
    z: Union[np.ndarray, list],
    values: Union[np.ndarray, list]
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Elevation and value differences for every unordered pair of stations.

    Pair ``(i, j)`` holds ``z[i] - z[j]`` and ``values[i] - values[j]``.
    Reordering stations may flip the sign of both differences of a pair;
    :func:`pairwise_regression` is unaffected by such flips.

    Parameters
    ----------
    z : array-like
        Station elevations
    values : array-like
        Station values

    Returns
    -------
    tuple of np.ndarray
        ``(z_dif, t_dif)`` arrays of length ``n * (n - 1) / 2``
    """
    z = np.asarray(z, dtype=float)
    values = np.asarray(values, dtype=float)
    if z.shape != values.shape or z.ndim != 1:
        raise ValueError(
            f"z and values must be one-dimensional arrays of the same length, "
            f"got shapes {z.shape} and {values.shape}"
        )

    i, j = unordered_pairs(z.size)
    z_dif = z[i] - z[j]
    t_dif = values[i] - values[j]
    return z_dif, t_dif


def pairwise_weights(weights: Union[np.ndarray, list]) -> np.ndarray:
    """Products ``w[i] * w[j]`` in :func:`unordered_pairs` order."""
    weights = np.asarray(weights, dtype=float)
    i, j = unordered_pairs(weights.size)
    return weights[i] * weights[j]


def _regression_inputs(y, x, w) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    y = np.asarray(y, dtype=float)
    x = np.asarray(x, dtype=float)
    w = np.asarray(w, dtype=float)
    if not (y.shape == x.shape == w.shape) or y.ndim != 1:
        raise ValueError(
            f"y, x and w must be one-dimensional arrays of the same length, "
            f"got shapes {y.shape}, {x.shape} and {w.shape}"
        )
    if np.any(w < 0):
        raise ValueError("Regression weights must be non-negative")
    return y, x, w


def weighted_regression(
    y: Union[np.ndarray, list],
    x: Union[np.ndarray, list],
    w: Union[np.ndarray, list]
) -> RegressionResult:
    """
    Weighted least-squares fit of ``y = intercept + slope * x``.

    Parameters
    ----------
    y : array-like
        Response values
    x : array-like
        Explanatory values
    w : array-like
        Non-negative weights

    Returns
    -------
    RegressionResult
        Fitted intercept and slope. When all weights are zero the result is
        ``(0, 0)``; when the weighted variance of ``x`` vanishes the slope is
        0 and the intercept the weighted mean of ``y``.
    """
    y, x, w = _regression_inputs(y, x, w)

    sum_w = float(np.sum(w))
    if sum_w <= 0.0:
        return RegressionResult(0.0, 0.0)

    mean_x = float(np.sum(w * x)) / sum_w
    mean_y = float(np.sum(w * y)) / sum_w
    dx = x - mean_x
    sxx = float(np.sum(w * dx * dx))
    if sxx <= _RELATIVE_VARIANCE_TOL * float(np.sum(w * x * x)):
        return RegressionResult(mean_y, 0.0)

    slope = float(np.sum(w * dx * (y - mean_y))) / sxx
    return RegressionResult(mean_y - slope * mean_x, slope)


def pairwise_regression(
    t_dif: Union[np.ndarray, list],
    z_dif: Union[np.ndarray, list],
    w: Union[np.ndarray, list]
) -> RegressionResult:
    """
    Weighted fit of value differences on elevation differences.

    Every pair enters the fit in both orientations, ``(z_dif, t_dif)`` and
    ``(-z_dif, -t_dif)``, with the same weight. This is
    :func:`weighted_regression` over the symmetric pair set, whose weighted
    means vanish, so the line goes through the origin:
    ``slope = sum(w * z_dif * t_dif) / sum(w * z_dif ** 2)``.
    The result neither depends on how pairs are oriented nor on the sign of
    the station values.

    Parameters
    ----------
    t_dif : array-like
        Pairwise value differences
    z_dif : array-like
        Pairwise elevation differences
    w : array-like
        Non-negative pair weights

    Returns
    -------
    RegressionResult
        Intercept 0 and the fitted slope; the slope is 0 when no weighted
        pair has an elevation difference.
    """
    t_dif, z_dif, w = _regression_inputs(t_dif, z_dif, w)

    szz = float(np.sum(w * z_dif * z_dif))
    if szz <= 0.0:
        return RegressionResult(0.0, 0.0)
    return RegressionResult(0.0, float(np.sum(w * z_dif * t_dif)) / szz)
