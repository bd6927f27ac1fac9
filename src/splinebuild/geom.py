"""Value types for knots and curve segments"""

from __future__ import annotations

import collections.abc
import math
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

PointLike = Union["Point", Sequence[float], NDArray[np.float64]]


###############################################################################
# Point
###############################################################################
@dataclass(frozen=True)
class Point:
    """
    Immutable 2D coordinate.

    Attributes:
        x (float): The x-coordinate.
        y (float): The y-coordinate.
    """

    x: float
    y: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValueError(f"Point coordinates must be finite, got ({self.x}, {self.y})")

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    @classmethod
    def from_any(cls, value: PointLike) -> Point:
        """Create a Point from a Point, an (x, y) sequence or a numpy row.

        Only the first two coordinates are used, so (x, y, type) rows are accepted as well.

        Raises:
            ValueError: If the value is not a sequence of at least two finite coordinates.
        """
        if isinstance(value, Point):
            return value
        if isinstance(value, np.ndarray):
            if value.ndim != 1:
                raise ValueError(f"A point must be a one-dimensional array, got shape {value.shape}")
        elif isinstance(value, (str, bytes)) or not isinstance(value, collections.abc.Sequence):
            raise ValueError(f"Cannot interpret {value!r} as a point")
        if len(value) < 2:
            raise ValueError(f"A point needs at least 2 coordinates, got {len(value)}")
        return cls(float(value[0]), float(value[1]))

    def as_tuple(self) -> Tuple[float, float]:
        """Return the point as an (x, y) tuple."""
        return (self.x, self.y)


###############################################################################
# Segment
###############################################################################
@dataclass(frozen=True)
class Segment:
    """
    Control points of one cubic Bezier piece between two consecutive knots.

    The knots themselves are not stored: segment i of a spline connects
    knot i to knot i+1.

    Attributes:
        control1 (Point): Control point next to the start knot.
        control2 (Point): Control point next to the end knot.
    """

    control1: Point
    control2: Point

    def as_array(self) -> NDArray[np.float64]:
        """Return both control points as an array of shape (2, 2)."""
        return np.array([self.control1.as_tuple(), self.control2.as_tuple()], dtype=np.float64)


###############################################################################
# Functions
###############################################################################
def points_to_array(points: Union[Sequence[PointLike], NDArray[np.float64]]) -> NDArray[np.float64]:
    """
    Convert a sequence of points into an array of shape (n, 2).

    Args:
        points: Points as Point instances, (x, y) tuples or an array with at least 2 columns.

    Returns:
        NDArray[np.float64]: The x and y columns as float array.

    Raises:
        ValueError: If the input cannot be interpreted as 2D points.
    """
    if isinstance(points, np.ndarray):
        arr = points.astype(np.float64, copy=False)
        if arr.ndim != 2 or arr.shape[1] < 2:
            raise ValueError(f"points must have shape (n, 2) or (n, 3), got {arr.shape}")
        return arr[:, :2]

    if len(points) == 0:
        return np.empty((0, 2), dtype=np.float64)
    return np.array([Point.from_any(pt).as_tuple() for pt in points], dtype=np.float64)
