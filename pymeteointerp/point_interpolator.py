"""
Point temperature interpolation module.

This module interpolates temperature from weather stations to target points.
Each target point gets its own truncation radius and station weights, a local
lapse rate fitted on pairwise station differences, and an elevation-corrected
weighted average of the station values.
"""

import logging
import warnings
from typing import Optional, Union

import numpy as np
from scipy.spatial.distance import cdist

from pymeteointerp.algorithms.kernels import _gaussian_filter, _truncation_radius
from pymeteointerp.algorithms.regression import (
    n_pairs,
    pairwise_differences,
    pairwise_weights,
    pairwise_regression
)
from pymeteointerp.params import InterpolationParams, resolve_params
from pymeteointerp.stations import (
    ArrayLike,
    StationSet,
    as_station_set,
    as_vectors,
    filter_valid_stations
)

log = logging.getLogger(__name__)

# Fewer usable stations than this give a missing (NaN) estimate
MIN_STATIONS = 2

# Target points processed per distance matrix block
DEFAULT_CHUNK_SIZE = 10000


def _interpolate_from_distances(
    distances: np.ndarray,
    zp: float,
    stations: StationSet,
    z_dif: np.ndarray,
    t_dif: np.ndarray,
    params: InterpolationParams
) -> float:
    """Estimate one target value from its station distances."""
    if stations.size < MIN_STATIONS:
        return np.nan
    if not np.isfinite(zp) or not np.all(np.isfinite(distances)):
        return np.nan

    rp = _truncation_radius(
        distances, params.ini_rp, params.alpha, params.n_stations, params.iterations
    )
    weights = _gaussian_filter(distances, rp, params.alpha)
    sum_w = float(np.sum(weights))
    if sum_w <= 0.0:
        if params.debug:
            log.debug("No station inside truncation radius %.6g", rp)
        return np.nan

    wr = pairwise_regression(t_dif, z_dif, pairwise_weights(weights))
    w_num = float(np.sum(weights * (stations.values + wr.intercept + wr.slope * (zp - stations.z))))
    if params.debug:
        log.debug(
            "nstations: %d Rp: %.6g wr0: %.6g wr1: %.6g Wnum: %.6g sumW: %.6g",
            stations.size, rp, wr.intercept, wr.slope, w_num, sum_w
        )
    return w_num / sum_w


def _interpolate_targets(
    xp: np.ndarray,
    yp: np.ndarray,
    zp: np.ndarray,
    stations: StationSet,
    z_dif: np.ndarray,
    t_dif: np.ndarray,
    params: InterpolationParams,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> np.ndarray:
    """
    Interpolate every target against one station set and its pairwise differences.

    Distances are computed in blocks of ``chunk_size`` targets to bound memory.
    """
    result = np.full(xp.size, np.nan)
    if stations.size < MIN_STATIONS:
        return result

    station_xy = np.column_stack([stations.x, stations.y])
    for start in range(0, xp.size, chunk_size):
        end = min(start + chunk_size, xp.size)
        target_xy = np.column_stack([xp[start:end], yp[start:end]])
        distances = cdist(target_xy, station_xy)
        for offset in range(end - start):
            result[start + offset] = _interpolate_from_distances(
                distances[offset], zp[start + offset], stations, z_dif, t_dif, params
            )
    return result


def interpolate_temperature_point(
    xp: float,
    yp: float,
    zp: float,
    x: ArrayLike,
    y: ArrayLike,
    z: ArrayLike,
    values: ArrayLike,
    z_dif: ArrayLike,
    t_dif: ArrayLike,
    ini_rp: Optional[float] = None,
    alpha: Optional[float] = None,
    n_stations: Optional[int] = None,
    iterations: Optional[int] = None,
    debug: Optional[bool] = None,
    params: Optional[InterpolationParams] = None
) -> float:
    """
    Interpolate temperature at a single target point.

    Parameters
    ----------
    xp, yp, zp : float
        Planar coordinates and elevation of the target point
    x, y, z : array-like
        Planar coordinates and elevation of the stations
    values : array-like
        Temperature observed at the stations
    z_dif, t_dif : array-like
        Pairwise elevation and temperature differences of the stations, as
        returned by :func:`pymeteointerp.algorithms.pairwise_differences`
    ini_rp : float, optional
        Initial truncation radius (default: 140000)
    alpha : float, optional
        Gaussian shape parameter (default: 3.0)
    n_stations : int, optional
        Target effective number of stations (default: 30)
    iterations : int, optional
        Truncation radius refinement rounds (default: 3)
    debug : bool, optional
        Log the regression and weighting diagnostics (default: False)
    params : InterpolationParams, optional
        Parameter object; explicit keyword arguments take precedence

    Returns
    -------
    float
        Interpolated temperature, or NaN when the target elevation or
        coordinates are missing, fewer than two stations are given, or no
        station receives a positive weight

    Raises
    ------
    ValueError
        If station arrays differ in length or contain missing values, if the
        pairwise arrays do not match the station count, or if a parameter is
        out of range
    """
    params = resolve_params(
        params, ini_rp=ini_rp, alpha=alpha, n_stations=n_stations,
        iterations=iterations, debug=debug
    )
    stations = as_station_set(x, y, z, values)
    if not all(np.all(np.isfinite(array)) for array in stations):
        raise ValueError(
            "Station coordinates, elevations and values must not contain missing "
            "values; use interpolate_temperature_points to filter them"
        )
    z_dif, t_dif = as_vectors(z_dif=z_dif, t_dif=t_dif)
    expected = n_pairs(stations.size)
    if z_dif.size != expected:
        raise ValueError(
            f"Pairwise difference arrays must have {expected} elements for "
            f"{stations.size} stations, got {z_dif.size}"
        )

    distances = np.hypot(stations.x - float(xp), stations.y - float(yp))
    return float(_interpolate_from_distances(
        distances, float(zp), stations, z_dif, t_dif, params
    ))


def interpolate_temperature_points(
    xp: ArrayLike,
    yp: ArrayLike,
    zp: ArrayLike,
    x: ArrayLike,
    y: ArrayLike,
    z: ArrayLike,
    values: ArrayLike,
    ini_rp: Optional[float] = None,
    alpha: Optional[float] = None,
    n_stations: Optional[int] = None,
    iterations: Optional[int] = None,
    debug: Optional[bool] = None,
    params: Optional[InterpolationParams] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> np.ndarray:
    """
    Interpolate temperature at many target points for one time slice.

    Stations with a missing coordinate, elevation or value are dropped, then
    the pairwise difference set is built once and shared by every target.

    Parameters
    ----------
    xp, yp, zp : array-like
        Planar coordinates and elevation of the target points
    x, y, z : array-like
        Planar coordinates and elevation of the stations
    values : array-like
        Temperature observed at the stations
    ini_rp, alpha, n_stations, iterations, debug : optional
        Interpolation parameters, see :func:`interpolate_temperature_point`
    params : InterpolationParams, optional
        Parameter object; explicit keyword arguments take precedence
    chunk_size : int, optional
        Targets per distance block (default: 10000)

    Returns
    -------
    np.ndarray
        Interpolated temperature per target; NaN marks missing estimates
    """
    params = resolve_params(
        params, ini_rp=ini_rp, alpha=alpha, n_stations=n_stations,
        iterations=iterations, debug=debug
    )
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    xp, yp, zp = as_vectors(xp=xp, yp=yp, zp=zp)
    all_stations = as_station_set(x, y, z, values)
    stations = filter_valid_stations(all_stations)

    excluded = all_stations.size - stations.size
    if excluded:
        warnings.warn(
            f"Excluded {excluded} of {all_stations.size} stations with missing "
            f"coordinates, elevation or value.",
            UserWarning
        )
    if stations.size < MIN_STATIONS:
        warnings.warn(
            f"At least {MIN_STATIONS} valid stations are required, got {stations.size}. "
            f"All {xp.size} target values are missing.",
            UserWarning
        )
        return np.full(xp.size, np.nan)

    z_dif, t_dif = pairwise_differences(stations.z, stations.values)
    result = _interpolate_targets(xp, yp, zp, stations, z_dif, t_dif, params, chunk_size)

    n_missing = int(np.count_nonzero(np.isnan(result)))
    if n_missing:
        warnings.warn(
            f"{n_missing} of {xp.size} target points could not be interpolated "
            f"(missing target data or no station within the truncation radius).",
            UserWarning
        )
    return result
