"""
Dask integration module for pymeteointerp.

This module provides Dask-based parallel evaluation of independent time slices.
"""
from .parallel_processing import ParallelProcessor

__all__ = ['ParallelProcessor']
