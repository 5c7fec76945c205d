"""
Coordinate Reference System (CRS) management for pymeteointerp.

Station weighting uses planar Euclidean distances, so station and target
coordinates must share one projected CRS. This module provides:
- CRS detection and parsing from xarray and pandas objects
- Coordinate validation that tolerates missing (NaN) station coordinates
- Selection of a projected working CRS (local UTM zone) for geographic input
- Coordinate transformation between CRS
"""

import warnings
from typing import Any, Optional, Tuple, Union

import numpy as np
import xarray as xr
from pyproj import CRS, Transformer
from pyproj.aoi import AreaOfInterest
from pyproj.database import query_utm_crs_info
from pyproj.exceptions import CRSError


CRSLike = Union[CRS, str, int]

LON_NAMES = ('lon', 'long', 'longitude', 'lng')
LAT_NAMES = ('lat', 'latitude')


class CRSManager:
    """
    A class that handles all Coordinate Reference System operations for pymeteointerp.

    Policy:
    - Explicit CRS information is always prioritized
    - WGS 84 is assumed for coordinates named like lat/lon with values in range
    - Coordinates without CRS information and without lat/lon names are taken
      as already planar
    """

    def __init__(self):
        """Initialize the CRSManager."""
        self.wgs84_crs = CRS.from_epsg(4326)

    @staticmethod
    def to_crs(crs: Optional[CRSLike]) -> Optional[CRS]:
        """Convert a CRS-like value (CRS, string, EPSG code) to a CRS object."""
        if crs is None or isinstance(crs, CRS):
            return crs
        try:
            return CRS.from_user_input(crs)
        except CRSError as e:
            raise ValueError(f"Invalid coordinate reference system {crs!r}: {e}") from e

    def detect_coordinate_system_type(self, crs: Optional[CRS]) -> str:
        """
        Detect if the coordinate system is geographic or projected.

        Args:
            crs: The coordinate reference system to analyze

        Returns:
            'geographic', 'projected', 'other' or 'unknown' when crs is None
        """
        if crs is None:
            return "unknown"
        if crs.is_geographic:
            return "geographic"
        elif crs.is_projected:
            return "projected"
        return "other"

    def parse_crs_from_xarray(self, ds: Union[xr.Dataset, xr.DataArray]) -> Optional[CRS]:
        """
        Parse CRS information from xarray objects.

        Looks at a ``crs``/``spatial_ref`` coordinate (``crs_wkt`` or ``epsg``
        attribute) and at ``crs``/``crs_wkt``/``spatial_ref`` attributes.

        Args:
            ds: xarray Dataset or DataArray with potential CRS information

        Returns:
            Parsed CRS object or None if no CRS is found
        """
        for coord_name in ('crs', 'spatial_ref'):
            if coord_name in ds.coords:
                attrs = ds.coords[coord_name].attrs
                try:
                    if 'crs_wkt' in attrs:
                        return CRS.from_wkt(attrs['crs_wkt'])
                    if 'epsg' in attrs:
                        return CRS.from_epsg(attrs['epsg'])
                except CRSError:
                    pass

        for attr_name in ('crs', 'crs_wkt', 'spatial_ref'):
            if attr_name in ds.attrs:
                try:
                    return CRS.from_user_input(ds.attrs[attr_name])
                except (CRSError, TypeError):
                    continue
        return None

    def parse_crs_from_dataframe(self, df) -> Optional[CRS]:
        """
        Parse CRS information from the ``attrs['crs']`` entry of a pandas DataFrame.

        Args:
            df: pandas DataFrame with potential CRS information

        Returns:
            Parsed CRS object or None if no CRS is found
        """
        if 'crs' in getattr(df, 'attrs', {}):
            try:
                return CRS.from_user_input(df.attrs['crs'])
            except (CRSError, TypeError):
                pass
        return None

    def validate_coordinate_arrays(self,
                                   x_coords: np.ndarray,
                                   y_coords: np.ndarray,
                                   crs: Optional[CRS] = None) -> bool:
        """
        Validate coordinate arrays.

        Missing coordinates (NaN) are allowed since they mark stations that
        are dropped before interpolation; infinite values are not.

        Args:
            x_coords: X coordinate array (longitude or easting)
            y_coords: Y coordinate array (latitude or northing)
            crs: Optional CRS to validate against

        Returns:
            True if coordinates appear valid, False otherwise
        """
        x_coords = np.asarray(x_coords, dtype=float)
        y_coords = np.asarray(y_coords, dtype=float)
        if x_coords.shape != y_coords.shape:
            return False
        if np.any(np.isinf(x_coords)) or np.any(np.isinf(y_coords)):
            return False

        if crs is not None and crs.is_geographic:
            x_valid = x_coords[np.isfinite(x_coords)]
            y_valid = y_coords[np.isfinite(y_coords)]
            if np.any(x_valid < -360) or np.any(x_valid > 360):
                return False
            if np.any(y_valid < -90) or np.any(y_valid > 90):
                return False
        return True

    def detect_crs_from_coordinates(self,
                                    x_coords: np.ndarray,
                                    y_coords: np.ndarray,
                                    x_name: str = 'x',
                                    y_name: str = 'y') -> Optional[CRS]:
        """
        Attempt to detect a geographic CRS from coordinate names and values.

        Args:
            x_coords: X coordinate array
            y_coords: Y coordinate array
            x_name: Name of the x coordinate variable
            y_name: Name of the y coordinate variable

        Returns:
            WGS 84 if the names and values look like lon/lat, otherwise None
        """
        if x_name.lower() not in LON_NAMES or y_name.lower() not in LAT_NAMES:
            return None

        x_valid = np.asarray(x_coords, dtype=float)
        y_valid = np.asarray(y_coords, dtype=float)
        x_valid = x_valid[np.isfinite(x_valid)]
        y_valid = y_valid[np.isfinite(y_valid)]
        if x_valid.size == 0 or y_valid.size == 0:
            return None

        if np.all(np.abs(x_valid) <= 360) and np.all(np.abs(y_valid) <= 90):
            warnings.warn(
                f"Coordinates named '{x_name}' and '{y_name}' appear to be "
                f"geographic (lat/lon) but no explicit CRS was provided. "
                f"Assuming WGS 84 (EPSG:4326) coordinate system.",
                UserWarning
            )
            return self.wgs84_crs

        raise ValueError(
            f"Coordinate variables named '{x_name}' and '{y_name}' suggest "
            f"geographic coordinates (lat/lon), but the coordinate values are "
            f"outside the geographic range. Please provide an explicit "
            f"coordinate reference system (CRS)."
        )

    def estimate_utm_crs(self,
                         x_coords: np.ndarray,
                         y_coords: np.ndarray,
                         crs: CRSLike) -> CRS:
        """
        Pick the UTM zone covering the centre of a set of coordinates.

        Args:
            x_coords: X coordinate array
            y_coords: Y coordinate array
            crs: CRS of the coordinates

        Returns:
            Projected UTM CRS (WGS 84 datum)
        """
        lon, lat = self.transform_coordinates(x_coords, y_coords, crs, self.wgs84_crs)
        lon = np.asarray(lon, dtype=float)
        lat = np.asarray(lat, dtype=float)
        valid = np.isfinite(lon) & np.isfinite(lat)
        if not np.any(valid):
            raise ValueError("Cannot select a projected CRS: no valid coordinates")

        west, east = float(np.min(lon[valid])), float(np.max(lon[valid]))
        south, north = float(np.min(lat[valid])), float(np.max(lat[valid]))
        centre_lon = (west + east) / 2.0
        centre_lat = (south + north) / 2.0
        utm_info = query_utm_crs_info(
            datum_name="WGS 84",
            area_of_interest=AreaOfInterest(
                west_lon_degree=centre_lon,
                south_lat_degree=centre_lat,
                east_lon_degree=centre_lon,
                north_lat_degree=centre_lat,
            ),
        )
        if not utm_info:
            raise ValueError(
                f"No UTM zone found around ({centre_lon:.3f}, {centre_lat:.3f}); "
                f"please provide a projected working CRS"
            )
        return CRS.from_epsg(utm_info[0].code)

    def transform_coordinates(self,
                              x_coords: np.ndarray,
                              y_coords: np.ndarray,
                              source_crs: CRSLike,
                              target_crs: CRSLike) -> Tuple[np.ndarray, np.ndarray]:
        """
        Transform coordinates from one CRS to another.

        Args:
            x_coords: X coordinate array
            y_coords: Y coordinate array
            source_crs: Source coordinate reference system
            target_crs: Target coordinate reference system

        Returns:
            Tuple of (transformed_x, transformed_y) coordinate arrays
        """
        source_crs = self.to_crs(source_crs)
        target_crs = self.to_crs(target_crs)
        if source_crs is None or target_crs is None:
            raise ValueError("Source and target CRS must be defined for coordinate transformation")

        x_coords = np.asarray(x_coords, dtype=float)
        y_coords = np.asarray(y_coords, dtype=float)
        if source_crs == target_crs:
            return x_coords.copy(), y_coords.copy()

        transformer = Transformer.from_crs(source_crs, target_crs, always_xy=True)
        x_transformed, y_transformed = transformer.transform(x_coords, y_coords)
        x_transformed = np.array(x_transformed, dtype=float)
        y_transformed = np.array(y_transformed, dtype=float)
        # Failed or missing points come back as inf; keep them missing
        failed = ~(np.isfinite(x_transformed) & np.isfinite(y_transformed))
        x_transformed[failed] = np.nan
        y_transformed[failed] = np.nan
        return x_transformed, y_transformed

    def get_crs_from_source(self,
                            source: Any,
                            x_coords: np.ndarray,
                            y_coords: np.ndarray,
                            x_name: str = 'x',
                            y_name: str = 'y') -> Optional[CRS]:
        """
        Get the CRS of a data source.

        Args:
            source: The data source (xarray Dataset/DataArray, DataFrame, or dict)
            x_coords: X coordinate array
            y_coords: Y coordinate array
            x_name: Name of the x coordinate variable
            y_name: Name of the y coordinate variable

        Returns:
            Explicit or detected CRS, or None for coordinates taken as planar
        """
        if isinstance(source, (xr.Dataset, xr.DataArray)):
            crs = self.parse_crs_from_xarray(source)
            if crs is not None:
                return crs
        elif hasattr(source, 'columns') and hasattr(source, 'attrs'):
            crs = self.parse_crs_from_dataframe(source)
            if crs is not None:
                return crs
        return self.detect_crs_from_coordinates(x_coords, y_coords, x_name, y_name)

    def resolve_working_crs(self,
                            x_coords: np.ndarray,
                            y_coords: np.ndarray,
                            source_crs: Optional[CRS],
                            working_crs: Optional[CRSLike] = None) -> Optional[CRS]:
        """
        Choose the projected CRS in which distances are computed.

        Args:
            x_coords: Station x coordinates
            y_coords: Station y coordinates
            source_crs: CRS of the stations, or None for planar coordinates
            working_crs: Explicit working CRS, must be projected

        Returns:
            The working CRS, or None when stations are planar without a CRS
        """
        working_crs = self.to_crs(working_crs)
        if working_crs is not None:
            if not working_crs.is_projected:
                raise ValueError(
                    f"Working CRS must be projected for planar distances, got {working_crs.name}"
                )
            if source_crs is None:
                raise ValueError("A working CRS requires the station CRS to be known")
            return working_crs

        coord_type = self.detect_coordinate_system_type(source_crs)
        if coord_type == "projected":
            return source_crs
        if coord_type == "unknown":
            return None

        utm_crs = self.estimate_utm_crs(x_coords, y_coords, source_crs)
        warnings.warn(
            f"Station coordinates are {coord_type}; projecting them to "
            f"{utm_crs.name} (EPSG:{utm_crs.to_epsg()}) to compute planar distances.",
            UserWarning
        )
        return utm_crs


# Global instance for convenience
crs_manager = CRSManager()
