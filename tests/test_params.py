"""
Tests for interpolation parameters and their validation.
"""

import pytest

from pymeteointerp.params import InterpolationParams, resolve_params


class TestInterpolationParams:
    """Test the parameter container."""

    def test_defaults(self):
        """Test the default parameter values."""
        params = InterpolationParams()
        assert params.ini_rp == 140000.0
        assert params.alpha == 3.0
        assert params.n_stations == 30
        assert params.iterations == 3
        assert params.debug is False

    def test_for_variable(self):
        """Test that temperature-like variables share the same defaults."""
        for variable in ['MinTemperature', 'MaxTemperature', 'DewTemperature']:
            assert InterpolationParams.for_variable(variable) == InterpolationParams()

    def test_for_variable_overrides(self):
        """Test overriding defaults for a variable."""
        params = InterpolationParams.for_variable('MaxTemperature', alpha=5.0, n_stations=10)
        assert params.alpha == 5.0
        assert params.n_stations == 10
        assert params.ini_rp == 140000.0

    def test_for_variable_unsupported(self):
        """Test that variables with other regression forms are rejected."""
        for variable in ['Precipitation', 'WindSpeed', 'WindDirection']:
            with pytest.raises(ValueError, match="not supported"):
                InterpolationParams.for_variable(variable)

        with pytest.raises(ValueError, match="Variable must be one of"):
            InterpolationParams.for_variable('Humidity')

    def test_validate_rejects_bad_values(self):
        """Test the parameter range checks."""
        bad = [
            {'ini_rp': 0.0},
            {'ini_rp': -5.0},
            {'ini_rp': float('inf')},
            {'ini_rp': True},
            {'alpha': -0.1},
            {'alpha': float('nan')},
            {'n_stations': 0},
            {'n_stations': 2.5},
            {'iterations': 0},
            {'iterations': False}
        ]
        for fields in bad:
            with pytest.raises(ValueError):
                InterpolationParams(**fields).validate()

    def test_zero_alpha_is_valid(self):
        """Test that a flat kernel is accepted."""
        assert InterpolationParams(alpha=0.0).validate().alpha == 0.0

    def test_replace(self):
        """Test that replace returns a validated copy."""
        params = InterpolationParams()
        changed = params.replace(iterations=5)
        assert changed.iterations == 5
        assert params.iterations == 3

        with pytest.raises(ValueError):
            params.replace(n_stations=-1)

    def test_immutable(self):
        """Test that parameters cannot be modified in place."""
        params = InterpolationParams()
        with pytest.raises(Exception):
            params.alpha = 1.0

    def test_to_dict(self):
        """Test conversion to a plain dictionary."""
        assert InterpolationParams(alpha=2.0).to_dict() == {
            'ini_rp': 140000.0,
            'alpha': 2.0,
            'n_stations': 30,
            'iterations': 3,
            'debug': False
        }


class TestResolveParams:
    """Test merging of parameter objects with keyword overrides."""

    def test_none_overrides_are_ignored(self):
        """Test that None keyword values keep the base values."""
        params = resolve_params(InterpolationParams(alpha=4.0), alpha=None, n_stations=None)
        assert params.alpha == 4.0
        assert params.n_stations == 30

    def test_keyword_overrides(self):
        """Test that keyword values take precedence over the base object."""
        params = resolve_params(InterpolationParams(alpha=4.0), alpha=2.0)
        assert params.alpha == 2.0

    def test_default_base(self):
        """Test resolving without a base object."""
        assert resolve_params() == InterpolationParams()

    def test_invalid_base(self):
        """Test that a non-parameter base object is rejected."""
        with pytest.raises(TypeError):
            resolve_params({'alpha': 3.0})

    def test_unknown_keyword(self):
        """Test that unknown parameters are rejected."""
        with pytest.raises(TypeError, match="Unknown"):
            resolve_params(radius=10.0)

    def test_validates_result(self):
        """Test that the merged parameters are validated."""
        with pytest.raises(ValueError):
            resolve_params(ini_rp=-1.0)
