"""
pymeteointerp: Daily temperature interpolation from weather station networks.

This library interpolates temperature from irregularly located stations to
arbitrary target points with:
- Truncated Gaussian distance weighting with an adaptive truncation radius
- A local elevation lapse rate fitted on weighted pairwise station differences
- Per time slice filtering of stations with missing data
- Dask parallel evaluation of time slices
- pandas/xarray front-ends and an elevation grid accessor (.pymeteointerp)
"""

__version__ = "0.1.0"

from .params import InterpolationParams  # noqa: F401
from .algorithms import (  # noqa: F401
    gaussian_weight,
    gaussian_filter,
    estimate_truncation_radius,
    RegressionResult,
    pairwise_differences,
    pairwise_weights,
    pairwise_regression,
    weighted_regression
)
from .point_interpolator import (  # noqa: F401
    interpolate_temperature_point,
    interpolate_temperature_points
)
from .series_interpolator import interpolate_temperature_series_points  # noqa: F401
from .station_interpolator import TemperatureInterpolator  # noqa: F401
from .utils.grid_from_points import grid_from_points  # noqa: F401
from .dask import ParallelProcessor  # noqa: F401

# Register the accessor when the package is imported
from .accessors import MeteoInterpAccessor  # noqa: F401

# Public API
__all__ = [
    "InterpolationParams",
    "gaussian_weight",
    "gaussian_filter",
    "estimate_truncation_radius",
    "RegressionResult",
    "pairwise_differences",
    "pairwise_weights",
    "pairwise_regression",
    "weighted_regression",
    "interpolate_temperature_point",
    "interpolate_temperature_points",
    "interpolate_temperature_series_points",
    "TemperatureInterpolator",
    "grid_from_points",
    "ParallelProcessor",
    "MeteoInterpAccessor"
]
