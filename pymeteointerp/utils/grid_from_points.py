"""
Grid from points utility function.

This module provides the grid_from_points function for interpolating station
temperature onto every cell of a digital elevation model.
"""

from typing import Optional, Tuple

import numpy as np
import xarray as xr

from pymeteointerp.crs.crs_manager import CRSLike, crs_manager
from pymeteointerp.params import InterpolationParams
from pymeteointerp.station_interpolator import StationSource, TemperatureInterpolator


def _grid_dims(dem: xr.DataArray) -> Tuple[str, str]:
    """Return the (y, x) dimension names of a 2-D elevation grid."""
    if dem.ndim != 2:
        raise ValueError(f"Elevation grid must be two-dimensional, got dims {dem.dims}")
    y_dim, x_dim = (str(dim) for dim in dem.dims)
    for dim in (y_dim, x_dim):
        if dim not in dem.coords:
            raise ValueError(f"Elevation grid has no coordinate for dimension '{dim}'")
    return y_dim, x_dim


def grid_from_points(
    source_points: StationSource,
    dem: xr.DataArray,
    values=None,
    value_var: Optional[str] = None,
    x_coord: Optional[str] = None,
    y_coord: Optional[str] = None,
    z_coord: Optional[str] = None,
    source_crs: Optional[CRSLike] = None,
    target_crs: Optional[CRSLike] = None,
    working_crs: Optional[CRSLike] = None,
    params: Optional[InterpolationParams] = None,
    output_var: str = 'temperature',
    parallel: bool = False,
    scheduler: str = "threads",
    **kwargs
) -> xr.Dataset:
    """
    Interpolate station temperature onto an elevation grid.

    Parameters
    ----------
    source_points : pandas.DataFrame, xarray.Dataset, or dict
        Station locations (x, y, elevation), optionally with values
    dem : xr.DataArray
        Two-dimensional elevation grid with (y, x) dimensions and coordinates.
        Cells with NaN elevation are left missing.
    values : array-like, pandas.DataFrame or xarray.DataArray, optional
        Station values, one per station or (n_stations, n_slices)
    value_var : str, optional
        Name of the station values inside ``source_points``
    x_coord, y_coord, z_coord : str, optional
        Names of the station coordinates
    source_crs : str, int or CRS, optional
        CRS of the stations
    target_crs : str, int or CRS, optional
        CRS of the grid. If None, read from the grid metadata, else the
        station CRS is assumed.
    working_crs : str, int or CRS, optional
        Projected CRS used for distances
    params : InterpolationParams, optional
        Interpolation parameters
    output_var : str, optional
        Name of the output variable (default: 'temperature')
    parallel : bool, optional
        Evaluate time slices in parallel with Dask (default: False)
    scheduler : str, optional
        Dask scheduler (default: 'threads')
    **kwargs
        Parameter overrides: ini_rp, alpha, n_stations, iterations, debug

    Returns
    -------
    xr.Dataset
        Dataset with the interpolated variable on the grid, shaped (y, x)
        for a single slice or (time, y, x) for a series
    """
    if not isinstance(dem, xr.DataArray):
        raise TypeError(f"dem must be xr.DataArray, got {type(dem)}")
    y_dim, x_dim = _grid_dims(dem)

    if target_crs is None:
        target_crs = crs_manager.parse_crs_from_xarray(dem)

    interpolator = TemperatureInterpolator(
        source_points,
        value_var=value_var,
        x_coord=x_coord,
        y_coord=y_coord,
        z_coord=z_coord,
        crs=source_crs,
        working_crs=working_crs,
        params=params,
        **kwargs
    )

    grid_x, grid_y = np.meshgrid(dem[x_dim].values, dem[y_dim].values)
    elevation = np.asarray(dem.values, dtype=float)
    cells = np.isfinite(elevation)
    targets = np.column_stack([grid_x[cells], grid_y[cells], elevation[cells]])

    station_values = interpolator.station_values(values)
    series = interpolator.interpolate_series(
        targets, values=values, target_crs=target_crs, output_var=output_var,
        parallel=parallel, scheduler=scheduler
    )
    time_dim = str(series.dims[1])
    n_slices = series.sizes[time_dim]

    grid = np.full((n_slices,) + elevation.shape, np.nan)
    grid[:, cells] = series.values.T

    coords = {y_dim: dem[y_dim], x_dim: dem[x_dim]}
    attrs = dict(series.attrs)
    if station_values.ndim == 1:
        data = xr.DataArray(grid[0], dims=[y_dim, x_dim], coords=coords, attrs=attrs)
    else:
        coords[time_dim] = series[time_dim].values
        data = xr.DataArray(grid, dims=[time_dim, y_dim, x_dim], coords=coords, attrs=attrs)

    result = xr.Dataset({output_var: data})
    result.attrs['description'] = f"Grid created from {interpolator.n_stations} stations"
    return result
