"""
pymeteointerp Accessor module.

This module defines the xarray accessor that provides the .pymeteointerp interface.
"""

from .accessor import MeteoInterpAccessor

__all__ = ["MeteoInterpAccessor"]
