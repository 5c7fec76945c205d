"""
Algorithms module for pymeteointerp.

This module contains the numerical building blocks of the interpolation engine:
- Truncated Gaussian distance weighting and truncation radius estimation
- Pairwise station differences and weighted lapse-rate regression
"""

from .kernels import (
    gaussian_weight,
    gaussian_filter,
    estimate_truncation_radius
)
from .regression import (
    RegressionResult,
    unordered_pairs,
    pairwise_differences,
    pairwise_weights,
    pairwise_regression,
    weighted_regression
)

__all__ = [
    'gaussian_weight',
    'gaussian_filter',
    'estimate_truncation_radius',
    'RegressionResult',
    'unordered_pairs',
    'pairwise_differences',
    'pairwise_weights',
    'pairwise_regression',
    'weighted_regression'
]
