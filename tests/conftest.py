"""
Test fixtures for pymeteointerp.

This module contains shared test fixtures for creating common station network
scenarios used throughout the test suite.
"""

import pytest
import numpy as np
import pandas as pd


@pytest.fixture
def lapse_stations():
    """Three stations with temperature exactly linear in elevation (-0.006 per m)."""
    return {
        'x': np.array([0.0, 10000.0, 0.0]),
        'y': np.array([0.0, 0.0, 10000.0]),
        'z': np.array([0.0, 500.0, 1000.0]),
        'values': np.array([20.0, 17.0, 14.0])
    }


@pytest.fixture
def flat_stations():
    """Three stations at the same elevation with values that are not constant."""
    return {
        'x': np.array([0.0, 1000.0, 2000.0]),
        'y': np.array([0.0, 0.0, 0.0]),
        'z': np.array([200.0, 200.0, 200.0]),
        'values': np.array([12.0, 14.0, 16.0])
    }


@pytest.fixture
def station_network():
    """A 40 station network over a 200 km square with a noisy lapse rate."""
    rng = np.random.default_rng(42)
    n = 40
    x = rng.uniform(0, 200000, n)
    y = rng.uniform(0, 200000, n)
    z = rng.uniform(0, 2000, n)
    values = 25.0 - 0.0065 * z + 0.00002 * x + rng.normal(0, 0.8, n)
    return {'x': x, 'y': y, 'z': z, 'values': values}


@pytest.fixture
def target_points():
    """Five target points inside the station network."""
    return {
        'xp': np.array([50000.0, 100000.0, 150000.0, 20000.0, 180000.0]),
        'yp': np.array([50000.0, 100000.0, 120000.0, 170000.0, 30000.0]),
        'zp': np.array([300.0, 1200.0, 800.0, 50.0, 1900.0])
    }


@pytest.fixture
def station_series(station_network):
    """Three days of station values derived from the network values."""
    values = station_network['values']
    return np.column_stack([values, values - 2.0, values + 1.5 * np.sin(station_network['x'] / 30000.0)])


@pytest.fixture
def station_dataframe(station_network):
    """Station network as a DataFrame with planar coordinates."""
    return pd.DataFrame({
        'x': station_network['x'],
        'y': station_network['y'],
        'elevation': station_network['z'],
        'temperature': station_network['values']
    })
