"""
Time series temperature interpolation module.

This module interpolates a station series (stations x time slices) to target
points. Every slice is handled on its own: stations missing data in that
slice are dropped, the pairwise difference set is rebuilt for the remaining
stations and shared by all target points of the slice.
"""

import logging
import warnings
from functools import partial
from typing import Optional

import numpy as np

from pymeteointerp.algorithms.regression import pairwise_differences
from pymeteointerp.params import InterpolationParams, resolve_params
from pymeteointerp.point_interpolator import (
    DEFAULT_CHUNK_SIZE,
    MIN_STATIONS,
    _interpolate_targets
)
from pymeteointerp.stations import ArrayLike, StationSet, as_vectors, filter_valid_stations

log = logging.getLogger(__name__)


def _interpolate_slice(
    index: int,
    xp: np.ndarray,
    yp: np.ndarray,
    zp: np.ndarray,
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    value_matrix: np.ndarray,
    params: InterpolationParams,
    chunk_size: int
) -> np.ndarray:
    """Interpolate one time slice (one column of ``value_matrix``)."""
    stations = filter_valid_stations(StationSet(x, y, z, value_matrix[:, index]))
    if params.debug:
        log.debug("Slice %d nexcluded = %d", index, x.size - stations.size)
    if stations.size < MIN_STATIONS:
        return np.full(xp.size, np.nan)

    z_dif, t_dif = pairwise_differences(stations.z, stations.values)
    return _interpolate_targets(xp, yp, zp, stations, z_dif, t_dif, params, chunk_size)


def interpolate_temperature_series_points(
    xp: ArrayLike,
    yp: ArrayLike,
    zp: ArrayLike,
    x: ArrayLike,
    y: ArrayLike,
    z: ArrayLike,
    value_matrix: ArrayLike,
    ini_rp: Optional[float] = None,
    alpha: Optional[float] = None,
    n_stations: Optional[int] = None,
    iterations: Optional[int] = None,
    debug: Optional[bool] = None,
    params: Optional[InterpolationParams] = None,
    parallel: bool = False,
    scheduler: str = "threads",
    num_workers: Optional[int] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> np.ndarray:
    """
    Interpolate a temperature series at many target points.

    Parameters
    ----------
    xp, yp, zp : array-like
        Planar coordinates and elevation of the target points
    x, y, z : array-like
        Planar coordinates and elevation of the stations
    value_matrix : array-like
        Station temperature, shape (n_stations, n_slices); NaN marks missing
        observations. A vector of n_stations values is a single slice.
    ini_rp, alpha, n_stations, iterations, debug : optional
        Interpolation parameters, see
        :func:`pymeteointerp.point_interpolator.interpolate_temperature_point`
    params : InterpolationParams, optional
        Parameter object; explicit keyword arguments take precedence
    parallel : bool, optional
        Evaluate slices in parallel with Dask (default: False)
    scheduler : str, optional
        Dask scheduler used when ``parallel`` is True (default: 'threads')
    num_workers : int, optional
        Worker count used when ``parallel`` is True
    chunk_size : int, optional
        Targets per distance block (default: 10000)

    Returns
    -------
    np.ndarray
        Interpolated temperature, shape (n_targets, n_slices). Slices with
        fewer than two valid stations are entirely NaN.
    """
    params = resolve_params(
        params, ini_rp=ini_rp, alpha=alpha, n_stations=n_stations,
        iterations=iterations, debug=debug
    )
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    xp, yp, zp = as_vectors(xp=xp, yp=yp, zp=zp)
    x, y, z = as_vectors(x=x, y=y, z=z)

    value_matrix = np.array(value_matrix, dtype=float)
    if value_matrix.ndim == 1 and value_matrix.size == x.size:
        value_matrix = value_matrix[:, np.newaxis]
    if value_matrix.ndim != 2 or value_matrix.shape[0] != x.size:
        raise ValueError(
            f"value_matrix must have shape (n_stations, n_slices) with "
            f"n_stations={x.size}, got {value_matrix.shape}"
        )
    value_matrix.flags.writeable = False
    n_slices = value_matrix.shape[1]

    slice_function = partial(
        _interpolate_slice,
        xp=xp, yp=yp, zp=zp, x=x, y=y, z=z,
        value_matrix=value_matrix, params=params, chunk_size=chunk_size
    )
    if parallel:
        from pymeteointerp.dask import ParallelProcessor

        processor = ParallelProcessor(scheduler=scheduler, num_workers=num_workers)
        result = processor.interpolate_slices(slice_function, n_slices, xp.size)
    else:
        result = np.full((xp.size, n_slices), np.nan)
        for index in range(n_slices):
            result[:, index] = slice_function(index)

    valid_counts = np.count_nonzero(
        np.isfinite(value_matrix)
        & (np.isfinite(x) & np.isfinite(y) & np.isfinite(z))[:, None],
        axis=0
    )
    insufficient = int(np.count_nonzero(valid_counts < MIN_STATIONS))
    if insufficient:
        warnings.warn(
            f"{insufficient} of {n_slices} time slices have fewer than "
            f"{MIN_STATIONS} valid stations; their values are missing.",
            UserWarning
        )
    return result
