"""
Coordinate Reference System (CRS) management module for pymeteointerp.

This module handles CRS parsing, projected working CRS selection and
coordinate transformation using pyproj.
"""

from .crs_manager import CRSManager, crs_manager

__all__ = ['CRSManager', 'crs_manager']
