"""
Utility functions module for pymeteointerp.

This module contains helper functions for:
- Interpolating station data onto elevation grids
"""

from .grid_from_points import grid_from_points  # noqa: F401
