"""
Tests for the CRS management functionality in pymeteointerp.
"""

import warnings

import numpy as np
import pandas as pd
import pytest
import xarray as xr
from pyproj import CRS

from pymeteointerp.crs.crs_manager import CRSManager


class TestCRSManager:
    """Test the CRSManager class functionality."""

    def test_crs_detection_from_xarray_with_crs_coord(self):
        """Test CRS detection from xarray with CRS coordinate."""
        crs_manager = CRSManager()

        ds = xr.Dataset(
            {'temperature': (['station'], np.array([10.0, 12.0]))},
            coords={'crs': ([], 1)}
        )
        ds.coords['crs'].attrs['crs_wkt'] = CRS.from_epsg(4326).to_wkt()

        detected_crs = crs_manager.parse_crs_from_xarray(ds)
        assert detected_crs is not None
        assert detected_crs.to_epsg() == 4326

    def test_crs_detection_from_spatial_ref_epsg(self):
        """Test CRS detection from a spatial_ref coordinate with an EPSG code."""
        crs_manager = CRSManager()

        ds = xr.Dataset(
            {'elevation': (['y', 'x'], np.zeros((2, 2)))},
            coords={'spatial_ref': ([], 0)}
        )
        ds.coords['spatial_ref'].attrs['epsg'] = 32631

        assert crs_manager.parse_crs_from_xarray(ds).to_epsg() == 32631

    def test_crs_detection_from_xarray_with_attrs(self):
        """Test CRS detection from xarray attributes."""
        crs_manager = CRSManager()

        da = xr.DataArray(np.zeros((2, 2)), dims=['y', 'x'])
        da.attrs['crs'] = 'EPSG:25831'

        detected_crs = crs_manager.parse_crs_from_xarray(da)
        assert detected_crs is not None
        assert detected_crs.to_epsg() == 25831

    def test_no_crs_in_xarray(self):
        """Test that objects without CRS information give None."""
        crs_manager = CRSManager()
        da = xr.DataArray(np.zeros((2, 2)), dims=['y', 'x'])
        assert crs_manager.parse_crs_from_xarray(da) is None

    def test_crs_detection_from_dataframe(self):
        """Test CRS detection from DataFrame."""
        crs_manager = CRSManager()

        df = pd.DataFrame({
            'latitude': [40.0, 41.0, 42.0],
            'longitude': [-10.0, -9.0, -8.0],
            'temperature': [11.0, 12.0, 13.0]
        })
        df.attrs = {'crs': 'EPSG:4326'}

        detected_crs = crs_manager.parse_crs_from_dataframe(df)
        assert detected_crs is not None
        assert detected_crs.to_epsg() == 4326

    def test_detect_coordinate_system_type(self):
        """Test coordinate system type detection."""
        crs_manager = CRSManager()

        assert crs_manager.detect_coordinate_system_type(CRS.from_epsg(4326)) == "geographic"
        assert crs_manager.detect_coordinate_system_type(CRS.from_epsg(32631)) == "projected"
        assert crs_manager.detect_coordinate_system_type(None) == "unknown"

    def test_to_crs(self):
        """Test conversion of CRS-like values."""
        assert CRSManager.to_crs(4326).to_epsg() == 4326
        assert CRSManager.to_crs('EPSG:32631').to_epsg() == 32631
        assert CRSManager.to_crs(None) is None

        with pytest.raises(ValueError, match="Invalid coordinate reference system"):
            CRSManager.to_crs('not a crs')

    def test_validate_coordinate_arrays(self):
        """Test coordinate validation with missing and infinite values."""
        crs_manager = CRSManager()
        geographic = CRS.from_epsg(4326)

        assert crs_manager.validate_coordinate_arrays(
            np.array([2.0, np.nan]), np.array([41.0, 42.0]), geographic
        )
        assert not crs_manager.validate_coordinate_arrays(
            np.array([2.0, np.inf]), np.array([41.0, 42.0])
        )
        assert not crs_manager.validate_coordinate_arrays(
            np.array([2.0, 3.0]), np.array([41.0, 95.0]), geographic
        )
        assert not crs_manager.validate_coordinate_arrays(
            np.array([2.0, 3.0]), np.array([41.0])
        )

    def test_detect_crs_from_coordinates(self):
        """Test detection of geographic coordinates from lat/lon names."""
        crs_manager = CRSManager()

        with pytest.warns(UserWarning, match="Assuming WGS 84"):
            crs = crs_manager.detect_crs_from_coordinates(
                np.array([1.0, 2.0]), np.array([41.0, 42.0]), 'lon', 'lat'
            )
        assert crs.to_epsg() == 4326

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert crs_manager.detect_crs_from_coordinates(
                np.array([1000.0, 2000.0]), np.array([5000.0, 6000.0]), 'x', 'y'
            ) is None

    def test_detect_crs_out_of_range(self):
        """Test that lat/lon names with projected values are rejected."""
        crs_manager = CRSManager()
        with pytest.raises(ValueError, match="outside the geographic range"):
            crs_manager.detect_crs_from_coordinates(
                np.array([430000.0]), np.array([4600000.0]), 'longitude', 'latitude'
            )

    def test_estimate_utm_crs(self):
        """Test selection of the UTM zone at the centre of the stations."""
        crs_manager = CRSManager()
        utm = crs_manager.estimate_utm_crs(
            np.array([1.5, 2.5, np.nan]), np.array([41.0, 42.0, 41.5]), 4326
        )
        assert utm.to_epsg() == 32631

    def test_estimate_utm_crs_southern_hemisphere(self):
        """Test selection of a southern UTM zone."""
        crs_manager = CRSManager()
        utm = crs_manager.estimate_utm_crs(np.array([-58.4]), np.array([-34.6]), 4326)
        assert utm.to_epsg() == 32721

    def test_transform_coordinates(self):
        """Test coordinate transformation from geographic to UTM."""
        crs_manager = CRSManager()
        x, y = crs_manager.transform_coordinates(
            np.array([3.0, np.nan]), np.array([0.0, 10.0]), 4326, 32631
        )
        assert x[0] == pytest.approx(500000.0)
        assert y[0] == pytest.approx(0.0, abs=1e-6)
        assert np.isnan(x[1]) and np.isnan(y[1])

    def test_transform_identity(self):
        """Test that transforming to the same CRS returns a copy."""
        crs_manager = CRSManager()
        x_in = np.array([1.0, 2.0])
        x, y = crs_manager.transform_coordinates(x_in, np.array([3.0, 4.0]), 32631, 'EPSG:32631')
        np.testing.assert_array_equal(x, x_in)
        assert x is not x_in

    def test_transform_requires_crs(self):
        """Test that both CRS must be defined."""
        crs_manager = CRSManager()
        with pytest.raises(ValueError):
            crs_manager.transform_coordinates(np.array([1.0]), np.array([1.0]), None, 4326)

    def test_resolve_working_crs(self):
        """Test selection of the working CRS."""
        crs_manager = CRSManager()
        x = np.array([1.5, 2.5])
        y = np.array([41.0, 42.0])

        projected = CRS.from_epsg(25831)
        assert crs_manager.resolve_working_crs(x, y, projected) == projected
        assert crs_manager.resolve_working_crs(x, y, None) is None

        with pytest.warns(UserWarning, match="projecting them"):
            working = crs_manager.resolve_working_crs(x, y, CRS.from_epsg(4326))
        assert working.to_epsg() == 32631

        assert crs_manager.resolve_working_crs(
            x, y, CRS.from_epsg(4326), working_crs=25831
        ).to_epsg() == 25831

    def test_resolve_working_crs_errors(self):
        """Test invalid working CRS choices."""
        crs_manager = CRSManager()
        x = np.array([1.5, 2.5])
        y = np.array([41.0, 42.0])

        with pytest.raises(ValueError, match="must be projected"):
            crs_manager.resolve_working_crs(x, y, CRS.from_epsg(4326), working_crs=4326)
        with pytest.raises(ValueError, match="station CRS"):
            crs_manager.resolve_working_crs(x, y, None, working_crs=32631)
