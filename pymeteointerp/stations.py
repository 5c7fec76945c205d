"""
Station set handling.

This module converts caller-supplied station sequences into validated,
immutable float arrays and filters out stations with missing data.
"""

from typing import NamedTuple, Tuple, Union

import numpy as np


ArrayLike = Union[np.ndarray, list, tuple]


class StationSet(NamedTuple):
    """Parallel station arrays: planar coordinates, elevation and observed value."""

    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    values: np.ndarray

    @property
    def size(self) -> int:
        return int(self.x.size)


def _as_vector(name: str, data: ArrayLike) -> np.ndarray:
    array = np.atleast_1d(np.asarray(data, dtype=float))
    if array.ndim != 1:
        raise ValueError(f"{name} must be one-dimensional, got shape {array.shape}")
    # Private read-only copy, callers keep ownership of their data
    array = array.copy()
    array.flags.writeable = False
    return array


def as_vectors(**arrays: ArrayLike) -> Tuple[np.ndarray, ...]:
    """
    Convert named sequences to read-only float vectors of a common length.

    Raises
    ------
    ValueError
        If any input is not one-dimensional or the lengths differ
    """
    vectors = tuple(_as_vector(name, data) for name, data in arrays.items())
    lengths = {name: vector.size for name, vector in zip(arrays, vectors)}
    if len(set(lengths.values())) > 1:
        raise ValueError(f"Input arrays must have the same length, got {lengths}")
    return vectors


def as_station_set(
    x: ArrayLike,
    y: ArrayLike,
    z: ArrayLike,
    values: ArrayLike
) -> StationSet:
    """Build a validated :class:`StationSet` from parallel sequences."""
    return StationSet(*as_vectors(x=x, y=y, z=z, values=values))


def valid_station_mask(stations: StationSet) -> np.ndarray:
    """Boolean mask of stations whose coordinates, elevation and value are all defined."""
    return (
        np.isfinite(stations.x)
        & np.isfinite(stations.y)
        & np.isfinite(stations.z)
        & np.isfinite(stations.values)
    )


def filter_valid_stations(stations: StationSet) -> StationSet:
    """Return a new station set without the stations that have missing data."""
    mask = valid_station_mask(stations)
    if mask.all():
        return stations
    return StationSet(*(_as_vector(name, array[mask])
                        for name, array in zip(StationSet._fields, stations)))
