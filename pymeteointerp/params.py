"""
Interpolation parameters.

This module holds the tunable parameters of the temperature interpolation
engine together with their defaults and boundary validation.
"""

import dataclasses
import math
import numbers
from dataclasses import dataclass
from typing import Any, Dict, Optional


# Variables sharing the temperature interpolation scheme
TEMPERATURE_VARIABLES = ('MinTemperature', 'MaxTemperature', 'DewTemperature')

# Variables interpolated with other regression forms, not handled here
UNSUPPORTED_VARIABLES = ('Precipitation', 'WindSpeed', 'WindDirection')


@dataclass(frozen=True)
class InterpolationParams:
    """
    Parameters of the Gaussian-weighted, lapse-rate corrected interpolation.

    Parameters
    ----------
    ini_rp : float
        Initial truncation radius, in the units of the station coordinates
        (default: 140000, i.e. 140 km for metric projections).
    alpha : float
        Shape parameter of the Gaussian kernel (default: 3.0).
    n_stations : int
        Target effective number of contributing stations (default: 30).
    iterations : int
        Number of truncation radius refinement rounds (default: 3).
    debug : bool
        Log per-point diagnostics at DEBUG level (default: False).
    """

    ini_rp: float = 140000.0
    alpha: float = 3.0
    n_stations: int = 30
    iterations: int = 3
    debug: bool = False

    @classmethod
    def for_variable(cls, variable: str, **overrides) -> 'InterpolationParams':
        """
        Default parameters for a temperature-like variable.

        Parameters
        ----------
        variable : str
            One of 'MinTemperature', 'MaxTemperature' or 'DewTemperature'
        **overrides
            Field values replacing the defaults

        Returns
        -------
        InterpolationParams
            Validated parameters
        """
        if variable in UNSUPPORTED_VARIABLES:
            raise ValueError(
                f"Variable '{variable}' uses a different regression form and "
                f"is not supported; expected one of {list(TEMPERATURE_VARIABLES)}"
            )
        if variable not in TEMPERATURE_VARIABLES:
            raise ValueError(
                f"Variable must be one of {list(TEMPERATURE_VARIABLES)}, got '{variable}'"
            )
        params = cls(**overrides)
        params.validate()
        return params

    def validate(self) -> 'InterpolationParams':
        """Check parameter ranges, raising ValueError on the first bad value."""
        if isinstance(self.ini_rp, bool) or not isinstance(self.ini_rp, numbers.Real):
            raise ValueError(f"ini_rp must be a real number, got {self.ini_rp!r}")
        if not math.isfinite(self.ini_rp) or self.ini_rp <= 0:
            raise ValueError(f"ini_rp must be a positive finite number, got {self.ini_rp}")

        if isinstance(self.alpha, bool) or not isinstance(self.alpha, numbers.Real):
            raise ValueError(f"alpha must be a real number, got {self.alpha!r}")
        if not math.isfinite(self.alpha) or self.alpha < 0:
            raise ValueError(f"alpha must be a non-negative finite number, got {self.alpha}")

        for name in ('n_stations', 'iterations'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise ValueError(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        return self

    def replace(self, **changes) -> 'InterpolationParams':
        """Return a validated copy with the given fields changed."""
        return dataclasses.replace(self, **changes).validate()

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)


def resolve_params(
    params: Optional[InterpolationParams] = None,
    **kwargs
) -> InterpolationParams:
    """
    Merge an optional parameter object with explicit keyword overrides.

    Keyword arguments whose value is None are ignored, so callers can
    forward their own optional arguments unchanged.
    """
    base = params if params is not None else InterpolationParams()
    if not isinstance(base, InterpolationParams):
        raise TypeError(f"params must be InterpolationParams, got {type(base)}")
    overrides = {key: value for key, value in kwargs.items() if value is not None}
    unknown = set(overrides) - {field.name for field in dataclasses.fields(base)}
    if unknown:
        raise TypeError(f"Unknown interpolation parameters: {sorted(unknown)}")
    return dataclasses.replace(base, **overrides).validate()
