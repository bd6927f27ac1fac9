"""Test module for splinebuild.geom and splinebuild.settings

The tests are run using pytest.
"""

import dataclasses

import numpy as np
import pytest

from splinebuild.geom import Point, Segment, points_to_array
from splinebuild.settings import DEFAULT_SETTINGS, SplineSettings


def test_point_value_equality():
    """Points with the same coordinates are equal and hashable."""
    assert Point(1.0, 2.0) == Point(1.0, 2.0)
    assert len({Point(1.0, 2.0), Point(1.0, 2.0)}) == 1


def test_point_is_immutable():
    """Coordinates cannot be reassigned."""
    point = Point(1.0, 2.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        point.x = 3.0  # type: ignore[misc]


def test_point_unpacking():
    """Points unpack into x and y."""
    x, y = Point(3.0, 4.0)
    assert (x, y) == (3.0, 4.0)


def test_point_from_any():
    """Tuples, arrays and points are accepted, extra coordinates ignored."""
    assert Point.from_any((1, 2)) == Point(1.0, 2.0)
    assert Point.from_any(np.array([1.0, 2.0, 3.0])) == Point(1.0, 2.0)
    point = Point(5.0, 6.0)
    assert Point.from_any(point) is point


def test_point_from_any_too_short():
    """A single coordinate is rejected."""
    with pytest.raises(ValueError, match="at least 2 coordinates"):
        Point.from_any((1.0,))


@pytest.mark.parametrize("value", [5.0, "12", b"12", {"x": 1.0, "y": 2.0}, np.zeros((2, 2))])
def test_point_from_any_rejects_non_points(value):
    """Scalars, strings, mappings and 2-D arrays are not points."""
    with pytest.raises(ValueError):
        Point.from_any(value)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), -float("inf")])
def test_point_rejects_non_finite(value):
    """NaN and infinite coordinates are rejected."""
    with pytest.raises(ValueError, match="finite"):
        Point(value, 0.0)


def test_segment_as_array():
    """Control points are returned as a (2, 2) array."""
    segment = Segment(Point(1.0, 2.0), Point(3.0, 4.0))
    np.testing.assert_array_equal(segment.as_array(), [[1.0, 2.0], [3.0, 4.0]])


def test_points_to_array():
    """Sequences and arrays are converted to (n, 2) arrays."""
    np.testing.assert_array_equal(points_to_array([(0, 1), Point(2.0, 3.0)]), [[0.0, 1.0], [2.0, 3.0]])
    np.testing.assert_array_equal(points_to_array(np.array([[0.0, 1.0, 9.0]])), [[0.0, 1.0]])
    assert points_to_array([]).shape == (0, 2)


def test_settings_defaults():
    """Default settings polygonize with 50 steps and do not emit 'Z'."""
    assert DEFAULT_SETTINGS.polygonize_steps == 50
    assert DEFAULT_SETTINGS.close_path_command is False


def test_settings_round_trip_dict():
    """Settings survive conversion to and from a dictionary."""
    settings = SplineSettings(polygonize_steps=8, close_path_command=True)
    assert SplineSettings.from_dict(settings.to_dict()) == settings
    assert SplineSettings.from_dict({}) == DEFAULT_SETTINGS


def test_settings_validation():
    """Fewer than one polygonization step is rejected."""
    with pytest.raises(ValueError, match="polygonize_steps"):
        SplineSettings(polygonize_steps=0)
