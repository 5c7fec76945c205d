"""
pymeteointerp Accessor implementation.

This module implements the xarray accessor that provides the .pymeteointerp
interface on elevation grids.
"""

from typing import Optional

import xarray as xr

from pymeteointerp.params import InterpolationParams


@xr.register_dataarray_accessor("pymeteointerp")
class MeteoInterpAccessor:
    """
    xarray accessor for pymeteointerp functionality.

    The accessed DataArray is an elevation grid; the accessor interpolates
    station temperature onto its cells.
    """

    def __init__(self, xarray_obj: xr.DataArray):
        self._obj = xarray_obj
        self._name = "pymeteointerp"

    def interpolate_temperature(
        self,
        stations,
        values=None,
        params: Optional[InterpolationParams] = None,
        **kwargs
    ) -> xr.Dataset:
        """
        Interpolate station temperature onto this elevation grid.

        Parameters
        ----------
        stations : pandas.DataFrame, xarray.Dataset, or dict
            Station locations (x, y, elevation), optionally with values
        values : array-like, optional
            Station values, one per station or (n_stations, n_slices)
        params : InterpolationParams, optional
            Interpolation parameters
        **kwargs
            Additional keyword arguments for
            :func:`pymeteointerp.utils.grid_from_points.grid_from_points`

        Returns
        -------
        xr.Dataset
            The interpolated grid
        """
        from ..utils.grid_from_points import grid_from_points

        self._validate_source_data()
        return grid_from_points(stations, self._obj, values=values, params=params, **kwargs)

    def _validate_source_data(self):
        """
        Validate that the elevation grid has two dimensions with coordinates.
        """
        if self._obj.ndim != 2:
            raise ValueError(
                f"Elevation grid must be two-dimensional (y, x), got dims {self._obj.dims}"
            )
        missing = [str(dim) for dim in self._obj.dims if dim not in self._obj.coords]
        if missing:
            raise ValueError(f"Elevation grid has no coordinates for dimensions {missing}")
