"""
Basic tests for pymeteointerp.

This module contains basic tests to verify the library can be imported and exposes its API.
"""

import pytest


def test_import():
    """Test that pymeteointerp can be imported."""
    try:
        import pymeteointerp
        assert pymeteointerp is not None
    except ImportError:
        pytest.fail("Failed to import pymeteointerp")


def test_version():
    """Test that pymeteointerp has a version."""
    import pymeteointerp
    assert hasattr(pymeteointerp, '__version__')
    assert isinstance(pymeteointerp.__version__, str)


def test_public_api():
    """Test that every name in __all__ is exported."""
    import pymeteointerp
    for name in pymeteointerp.__all__:
        assert hasattr(pymeteointerp, name), name
