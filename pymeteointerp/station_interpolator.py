"""
Station data interpolation front-end.

This module provides the TemperatureInterpolator class, which takes station
tables (pandas DataFrame, xarray Dataset or dict), resolves coordinate names
and coordinate reference systems, and hands plain arrays to the point and
series interpolation engines. Results come back as pandas or xarray objects.
"""

from typing import Dict, Optional, Tuple, Union

import numpy as np
import pandas as pd
import xarray as xr

from pymeteointerp.crs.crs_manager import CRSLike, CRSManager
from pymeteointerp.params import InterpolationParams, resolve_params
from pymeteointerp.point_interpolator import interpolate_temperature_points
from pymeteointerp.series_interpolator import interpolate_temperature_series_points


X_NAMES = ['x', 'lon', 'long', 'longitude', 'lng', 'easting']
Y_NAMES = ['y', 'lat', 'latitude', 'northing']
Z_NAMES = ['z', 'elevation', 'elev', 'altitude', 'alt', 'height']

StationSource = Union[pd.DataFrame, xr.Dataset, Dict[str, np.ndarray]]
TargetSource = Union[pd.DataFrame, xr.Dataset, Dict[str, np.ndarray], np.ndarray]


def _find_name(names, candidates, kind: str, container: str) -> str:
    """Return the first name matching a candidate (case-insensitive)."""
    lookup = {str(name).lower(): name for name in names}
    for candidate in candidates:
        if candidate in lookup:
            return lookup[candidate]
    raise ValueError(
        f"Could not find {kind} coordinate in {container}; "
        f"expected one of {candidates} or an explicit name"
    )


def _extract_columns(
    source: StationSource,
    x_coord: Optional[str],
    y_coord: Optional[str],
    z_coord: Optional[str],
    container: str
) -> Tuple[Tuple[str, str, str], Tuple[np.ndarray, np.ndarray, np.ndarray]]:
    """Locate x/y/elevation entries of a DataFrame, Dataset or dict."""
    if isinstance(source, pd.DataFrame):
        names = list(source.columns)
        getter = lambda name: np.asarray(source[name].values, dtype=float)  # noqa: E731
    elif isinstance(source, xr.Dataset):
        names = list(source.coords) + list(source.data_vars)
        getter = lambda name: np.asarray(source[name].values, dtype=float)  # noqa: E731
    elif isinstance(source, dict):
        names = list(source.keys())
        getter = lambda name: np.asarray(source[name], dtype=float)  # noqa: E731
    else:
        raise TypeError(
            f"{container} must be pandas.DataFrame, xarray.Dataset, or dict, "
            f"got {type(source)}"
        )

    x_coord = x_coord if x_coord is not None else _find_name(names, X_NAMES, 'x', container)
    y_coord = y_coord if y_coord is not None else _find_name(names, Y_NAMES, 'y', container)
    z_coord = z_coord if z_coord is not None else _find_name(names, Z_NAMES, 'elevation', container)
    for name in (x_coord, y_coord, z_coord):
        if name not in names:
            raise ValueError(f"'{name}' not found in {container}")

    return (x_coord, y_coord, z_coord), (getter(x_coord), getter(y_coord), getter(z_coord))


class TemperatureInterpolator:
    """
    Temperature interpolation from weather station tables.

    Station coordinates are projected once to a working CRS in which planar
    distances are meaningful; target points are transformed to the same CRS
    before interpolation.
    """

    def __init__(
        self,
        stations: StationSource,
        value_var: Optional[str] = None,
        x_coord: Optional[str] = None,
        y_coord: Optional[str] = None,
        z_coord: Optional[str] = None,
        crs: Optional[CRSLike] = None,
        working_crs: Optional[CRSLike] = None,
        params: Optional[InterpolationParams] = None,
        **kwargs
    ):
        """
        Initialize the TemperatureInterpolator.

        Parameters
        ----------
        stations : pandas.DataFrame, xarray.Dataset, or dict
            Station locations. Must contain x, y and elevation entries; may also
            contain the observed values (see ``value_var``).
        value_var : str, optional
            Name of the station values used when no values are passed to the
            interpolation methods. For a Dataset this may be a 2-D variable
            (station, time).
        x_coord, y_coord, z_coord : str, optional
            Names of the x, y and elevation entries. If None, inferred from
            common names ('x'/'lon'/'longitude'/'easting', 'y'/'lat'/
            'latitude'/'northing', 'elevation'/'elev'/'z'/'altitude').
        crs : str, int or CRS, optional
            CRS of the station coordinates. If None, read from the source
            metadata or assumed WGS 84 for lat/lon names; otherwise the
            coordinates are taken as planar.
        working_crs : str, int or CRS, optional
            Projected CRS used for distances. Defaults to the station CRS when
            projected, or to the local UTM zone for geographic stations.
        params : InterpolationParams, optional
            Interpolation parameters
        **kwargs
            Parameter overrides: ini_rp, alpha, n_stations, iterations, debug
        """
        self.source_points = stations
        self.value_var = value_var
        self.crs_manager = CRSManager()
        self.params = resolve_params(params, **kwargs)

        (self.x_coord, self.y_coord, self.z_coord), (x, y, z) = _extract_columns(
            stations, x_coord, y_coord, z_coord, 'station data'
        )
        if not (x.shape == y.shape == z.shape) or x.ndim != 1:
            raise ValueError("Station x, y and elevation must be one-dimensional and of equal length")

        self.source_crs = self.crs_manager.to_crs(crs)
        if self.source_crs is None:
            self.source_crs = self.crs_manager.get_crs_from_source(
                stations, x, y, self.x_coord, self.y_coord
            )
        if not self.crs_manager.validate_coordinate_arrays(x, y, self.source_crs):
            raise ValueError("Invalid station coordinate arrays detected")

        self.working_crs = self.crs_manager.resolve_working_crs(
            x, y, self.source_crs, working_crs
        )
        if self.working_crs is not None and self.working_crs != self.source_crs:
            x, y = self.crs_manager.transform_coordinates(x, y, self.source_crs, self.working_crs)

        self.x_coords, self.y_coords, self.elevation = x, y, z
        self.n_stations = x.size

    def station_values(self, values) -> np.ndarray:
        """Return station values as an array whose first axis is the station axis."""
        if values is None:
            if self.value_var is None:
                raise ValueError("No station values given and no value_var set")
            source = self.source_points
            if isinstance(source, xr.Dataset):
                values = source[self.value_var]
            elif isinstance(source, pd.DataFrame):
                values = source[self.value_var].values
            else:
                values = source[self.value_var]

        if isinstance(values, xr.DataArray):
            array = np.asarray(values.values, dtype=float)
        else:
            array = np.asarray(values, dtype=float)
        if array.ndim not in (1, 2) or array.shape[0] != self.n_stations:
            raise ValueError(
                f"Station values must have {self.n_stations} rows (one per station), "
                f"got shape {array.shape}"
            )
        return array

    def _slice_labels(self, values, n_slices: int) -> Tuple[str, np.ndarray]:
        """Name and labels of the time axis of a 2-D value container."""
        if values is None and self.value_var is not None and isinstance(self.source_points, xr.Dataset):
            values = self.source_points[self.value_var]
        if isinstance(values, xr.DataArray) and values.ndim == 2:
            dim = str(values.dims[1])
            labels = values[dim].values if dim in values.coords else np.arange(n_slices)
            return dim, labels
        if isinstance(values, pd.DataFrame):
            return 'time', np.asarray(values.columns)
        return 'time', np.arange(n_slices)

    def _target_coordinates(
        self,
        target_points: TargetSource,
        x_coord: Optional[str],
        y_coord: Optional[str],
        z_coord: Optional[str],
        target_crs: Optional[CRSLike]
    ) -> Tuple[Tuple[str, str, str], np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """
        Extract target coordinates and bring them into the working CRS.

        Returns names, original x/y, working x/y and elevation.
        """
        if isinstance(target_points, np.ndarray):
            if target_points.ndim != 2 or target_points.shape[1] != 3:
                raise ValueError("Target coordinates array must have shape (n, 3) with [x, y, z] format")
            names = (x_coord or 'x', y_coord or 'y', z_coord or 'elevation')
            xs, ys, zs = (np.asarray(target_points[:, k], dtype=float) for k in range(3))
        else:
            names, (xs, ys, zs) = _extract_columns(
                target_points, x_coord, y_coord, z_coord, 'target points'
            )
        if not (xs.shape == ys.shape == zs.shape) or xs.ndim != 1:
            raise ValueError("Target x, y and elevation must be one-dimensional and of equal length")

        target_crs = self.crs_manager.to_crs(target_crs)
        if target_crs is None and not isinstance(target_points, np.ndarray):
            target_crs = self.crs_manager.get_crs_from_source(
                target_points, xs, ys, names[0], names[1]
            )
        if target_crs is None:
            target_crs = self.source_crs

        if self.working_crs is None:
            if target_crs is not None:
                raise ValueError(
                    "Target points have a CRS but the station CRS is unknown; "
                    "pass crs= when creating the interpolator"
                )
            work_xs, work_ys = xs, ys
        else:
            work_xs, work_ys = self.crs_manager.transform_coordinates(
                xs, ys, target_crs, self.working_crs
            )
        return names, xs, ys, work_xs, work_ys, zs

    def interpolate_points(
        self,
        target_points: TargetSource,
        values=None,
        x_coord: Optional[str] = None,
        y_coord: Optional[str] = None,
        z_coord: Optional[str] = None,
        target_crs: Optional[CRSLike] = None,
        output_var: str = 'temperature'
    ) -> pd.DataFrame:
        """
        Interpolate one time slice of station values to target points.

        Parameters
        ----------
        target_points : pandas.DataFrame, xarray.Dataset, dict, or np.ndarray
            Target points with x, y and elevation. An array must have shape
            (n, 3) with [x, y, z] columns.
        values : array-like, optional
            Station values (one per station). Defaults to ``value_var``.
        x_coord, y_coord, z_coord : str, optional
            Names of the target coordinates
        target_crs : str, int or CRS, optional
            CRS of the target points, if different from the station CRS
        output_var : str, optional
            Name of the result column (default: 'temperature')

        Returns
        -------
        pandas.DataFrame
            Target coordinates (as given) and the interpolated values
        """
        station_values = self.station_values(values)
        if station_values.ndim != 1:
            raise ValueError("interpolate_points expects one value per station; use interpolate_series")
        names, xs, ys, work_xs, work_ys, zs = self._target_coordinates(
            target_points, x_coord, y_coord, z_coord, target_crs
        )
        result = interpolate_temperature_points(
            work_xs, work_ys, zs,
            self.x_coords, self.y_coords, self.elevation, station_values,
            params=self.params
        )
        return pd.DataFrame({names[0]: xs, names[1]: ys, names[2]: zs, output_var: result})

    def interpolate_series(
        self,
        target_points: TargetSource,
        values=None,
        x_coord: Optional[str] = None,
        y_coord: Optional[str] = None,
        z_coord: Optional[str] = None,
        target_crs: Optional[CRSLike] = None,
        output_var: str = 'temperature',
        parallel: bool = False,
        scheduler: str = "threads",
        num_workers: Optional[int] = None
    ) -> xr.DataArray:
        """
        Interpolate a series of station values to target points.

        Parameters
        ----------
        target_points : pandas.DataFrame, xarray.Dataset, dict, or np.ndarray
            Target points with x, y and elevation
        values : array-like, pandas.DataFrame or xarray.DataArray, optional
            Station values with shape (n_stations, n_slices). DataFrame columns
            and the second DataArray dimension label the slices. Defaults to
            ``value_var``.
        x_coord, y_coord, z_coord : str, optional
            Names of the target coordinates
        target_crs : str, int or CRS, optional
            CRS of the target points, if different from the station CRS
        output_var : str, optional
            Name of the result (default: 'temperature')
        parallel : bool, optional
            Evaluate slices in parallel with Dask (default: False)
        scheduler : str, optional
            Dask scheduler (default: 'threads')
        num_workers : int, optional
            Dask worker count

        Returns
        -------
        xarray.DataArray
            Interpolated values with dimensions ('point', time dimension)
        """
        station_values = self.station_values(values)
        if station_values.ndim == 1:
            station_values = station_values[:, np.newaxis]
        names, xs, ys, work_xs, work_ys, zs = self._target_coordinates(
            target_points, x_coord, y_coord, z_coord, target_crs
        )
        result = interpolate_temperature_series_points(
            work_xs, work_ys, zs,
            self.x_coords, self.y_coords, self.elevation, station_values,
            params=self.params, parallel=parallel, scheduler=scheduler,
            num_workers=num_workers
        )
        time_dim, labels = self._slice_labels(values, station_values.shape[1])
        return xr.DataArray(
            result,
            dims=['point', time_dim],
            coords={
                'point': np.arange(xs.size),
                time_dim: labels,
                names[0]: ('point', xs),
                names[1]: ('point', ys),
                names[2]: ('point', zs),
            },
            name=output_var,
            attrs={
                'description': 'Temperature interpolated with Gaussian weights and lapse-rate correction',
                **{f'interp_{key}': value for key, value in self.params.to_dict().items()
                   if key != 'debug'},
            }
        )
