"""
Distance weighting kernels.

This module contains the truncated Gaussian kernel used to weight stations by
their horizontal distance to a target point, and the iterative estimator of
the truncation radius that adapts the kernel to local station density
(Thornton et al., 1997).

The public functions check their arguments. The interpolators validate the
parameters once per call and use the unchecked ``_`` variants per target.
"""

import math
from typing import Union

import numpy as np

from pymeteointerp.params import InterpolationParams


# Cap on the truncation radius, as a multiple of the farthest station distance
RADIUS_CAP_FACTOR = 10.0

# Radius growth applied in a round where no station falls inside the radius
EMPTY_NEIGHBOURHOOD_GROWTH = 2.0


def _check_kernel(radius: float, alpha: float):
    if not (math.isfinite(radius) and radius > 0):
        raise ValueError(f"radius must be a positive finite number, got {radius}")
    if not (math.isfinite(alpha) and alpha >= 0):
        raise ValueError(f"alpha must be a non-negative finite number, got {alpha}")


def gaussian_weight(distance: float, radius: float, alpha: float) -> float:
    """
    Truncated Gaussian weight of a single station.

    Parameters
    ----------
    distance : float
        Horizontal distance between station and target point (>= 0)
    radius : float
        Truncation radius (> 0); stations farther away get a zero weight
    alpha : float
        Shape parameter (>= 0); larger values decay faster

    Returns
    -------
    float
        Weight in [0, 1], equal to 1 at zero distance
    """
    _check_kernel(radius, alpha)
    if distance > radius:
        return 0.0
    return math.exp(-alpha * (distance / radius) ** 2)


def _gaussian_filter(distances: np.ndarray, radius: float, alpha: float) -> np.ndarray:
    weights = np.exp(-alpha * (distances / radius) ** 2)
    return np.where(distances > radius, 0.0, weights)


def gaussian_filter(
    distances: Union[np.ndarray, list],
    radius: float,
    alpha: float
) -> np.ndarray:
    """
    Vectorized form of :func:`gaussian_weight`.

    Parameters
    ----------
    distances : array-like
        Station distances to the target point
    radius : float
        Truncation radius
    alpha : float
        Gaussian shape parameter

    Returns
    -------
    np.ndarray
        New array of weights, same shape as ``distances``
    """
    _check_kernel(radius, alpha)
    return _gaussian_filter(np.asarray(distances, dtype=float), radius, alpha)


def _truncation_radius(
    distances: np.ndarray,
    ini_rp: float,
    alpha: float,
    n_stations: int,
    iterations: int
) -> float:
    rp = float(ini_rp)
    if distances.size == 0:
        return rp

    radius_cap = max(rp, RADIUS_CAP_FACTOR * float(np.max(distances)))
    for _ in range(iterations):
        sum_w = float(np.sum(_gaussian_filter(distances, rp, alpha)))
        if sum_w > 0.0:
            # Dp = sum_w / (pi Rp^2); Rp = sqrt(N / (pi Dp))
            rp = rp * math.sqrt(n_stations / sum_w)
        else:
            rp = rp * EMPTY_NEIGHBOURHOOD_GROWTH
        rp = min(rp, radius_cap)
    return rp


def estimate_truncation_radius(
    distances: Union[np.ndarray, list],
    ini_rp: float = 140000.0,
    alpha: float = 3.0,
    n_stations: int = 30,
    iterations: int = 3
) -> float:
    """
    Estimate the truncation radius giving about ``n_stations`` effective stations.

    Every round computes the sum of kernel weights (the effective number of
    stations) for the current radius, turns it into a station density over
    the disc of that radius and picks the radius whose disc would hold
    ``n_stations`` stations at that density. This amounts to scaling the
    radius by ``sqrt(n_stations / sum_w)``. The number of rounds is fixed.

    Parameters
    ----------
    distances : array-like
        Horizontal distances from the target point to every station
    ini_rp : float, optional
        Starting radius (default: 140000)
    alpha : float, optional
        Gaussian shape parameter (default: 3.0)
    n_stations : int, optional
        Target effective station count (default: 30)
    iterations : int, optional
        Number of refinement rounds (default: 3)

    Returns
    -------
    float
        Truncation radius

    Raises
    ------
    ValueError
        If ``distances`` is not one-dimensional or a parameter is out of range

    Notes
    -----
    A round in which no station falls inside the radius doubles it. The
    radius never exceeds ``max(ini_rp, RADIUS_CAP_FACTOR * max(distances))``,
    which bounds the growth when fewer than ``n_stations`` stations exist.
    """
    InterpolationParams(
        ini_rp=ini_rp, alpha=alpha, n_stations=n_stations, iterations=iterations
    ).validate()
    distances = np.asarray(distances, dtype=float)
    if distances.ndim != 1:
        raise ValueError(f"distances must be one-dimensional, got shape {distances.shape}")
    return _truncation_radius(distances, ini_rp, alpha, n_stations, iterations)
