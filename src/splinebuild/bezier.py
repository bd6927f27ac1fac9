"""Cubic Bezier evaluation and polygonization for materialized spline paths."""

from __future__ import annotations

from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from splinebuild.common import POINT_TYPE_CUBIC_CONTROL, POINT_TYPE_ON_CURVE

# Step count from which the vectorized polygonization is used
NUMPY_STEPS_THRESHOLD: int = 70

CubicPoints = Union[Sequence[Tuple[float, float]], NDArray[np.float64]]


class BezierCurve:
    """Class to handle cubic Bezier curve operations.

    Provides evaluation and polygonization of a single cubic piece given as
    [start, control1, control2, end], with a pure Python implementation for
    few steps and a NumPy implementation for many.
    """

    @staticmethod
    def evaluate_cubic(
        points: CubicPoints, t: Union[float, NDArray[np.float64]]
    ) -> NDArray[np.float64]:
        """
        Evaluate a cubic Bezier curve.

        B(t) = (1-t)^3*P0 + 3*(1-t)^2*t*P1 + 3*(1-t)*t^2*P2 + t^3*P3

        Args:
            points: The 4 points start, control1, control2, end.
            t: Curve parameter in [0, 1], scalar or array.

        Returns:
            Array of shape (2,) for scalar t, else (len(t), 2).
        """
        pts = np.asarray(points, dtype=np.float64)[:, :2]
        if pts.shape[0] != 4:
            raise ValueError(f"A cubic curve needs exactly 4 points, got {pts.shape[0]}")
        t_arr = np.asarray(t, dtype=np.float64)
        omt = 1.0 - t_arr
        w0 = omt * omt * omt
        w1 = 3.0 * omt * omt * t_arr
        w2 = 3.0 * omt * t_arr * t_arr
        w3 = t_arr * t_arr * t_arr
        return (
            np.multiply.outer(w0, pts[0])
            + np.multiply.outer(w1, pts[1])
            + np.multiply.outer(w2, pts[2])
            + np.multiply.outer(w3, pts[3])
        )

    @classmethod
    def polygonize_cubic_curve_python_inplace(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        cls,
        points: CubicPoints,
        steps: int,
        output_buffer: NDArray[np.float64],
        start_index: int = 0,
        skip_first: bool = False,
    ) -> int:
        """
        Polygonize a cubic Bezier curve directly into pre-allocated buffer using pure Python.
        Uses forward differencing, the end point is written exactly.
        """
        (p0x, p0y), (p1x, p1y), (p2x, p2y), (p3x, p3y) = ((pt[0], pt[1]) for pt in points)

        # Polynomial form B(t) = a*t^3 + b*t^2 + c*t + P0
        ax = p3x - 3.0 * p2x + 3.0 * p1x - p0x
        ay = p3y - 3.0 * p2y + 3.0 * p1y - p0y
        bx = 3.0 * (p2x - 2.0 * p1x + p0x)
        by = 3.0 * (p2y - 2.0 * p1y + p0y)
        cx = 3.0 * (p1x - p0x)
        cy = 3.0 * (p1y - p0y)

        h = 1.0 / steps
        h2 = h * h
        h3 = h2 * h

        # Initial forward differences at t=0
        d1x = ax * h3 + bx * h2 + cx * h
        d1y = ay * h3 + by * h2 + cy * h
        d2x = 6.0 * ax * h3 + 2.0 * bx * h2
        d2y = 6.0 * ay * h3 + 2.0 * by * h2
        d3x = 6.0 * ax * h3
        d3y = 6.0 * ay * h3

        x, y = p0x, p0y
        idx = start_index

        if not skip_first:
            output_buffer[idx, 0] = x
            output_buffer[idx, 1] = y
            output_buffer[idx, 2] = POINT_TYPE_ON_CURVE
            idx += 1

        for _ in range(1, steps):
            x += d1x
            y += d1y
            d1x += d2x
            d1y += d2y
            d2x += d3x
            d2y += d3y
            output_buffer[idx, 0] = x
            output_buffer[idx, 1] = y
            output_buffer[idx, 2] = POINT_TYPE_CUBIC_CONTROL
            idx += 1

        # No accumulated rounding on the knot
        output_buffer[idx, 0] = p3x
        output_buffer[idx, 1] = p3y
        output_buffer[idx, 2] = POINT_TYPE_ON_CURVE

        return steps + (0 if skip_first else 1)

    @classmethod
    def polygonize_cubic_curve_numpy_inplace(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        cls,
        points: CubicPoints,
        steps: int,
        output_buffer: NDArray[np.float64],
        start_index: int = 0,
        skip_first: bool = False,
    ) -> int:
        """
        Polygonize a cubic Bezier curve directly into pre-allocated buffer using NumPy.
        """
        t = np.linspace(0.0, 1.0, steps + 1, dtype=np.float64)
        if skip_first:
            t = t[1:]

        xy = cls.evaluate_cubic(points, t)

        end_idx = start_index + len(t)
        output_buffer[start_index:end_idx, :2] = xy
        output_buffer[start_index:end_idx, 2] = POINT_TYPE_CUBIC_CONTROL
        if not skip_first:
            output_buffer[start_index, 2] = POINT_TYPE_ON_CURVE
        output_buffer[end_idx - 1, 2] = POINT_TYPE_ON_CURVE

        return len(t)

    @classmethod
    def polygonize_cubic_curve_inplace(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        cls,
        points: CubicPoints,
        steps: int,
        output_buffer: NDArray[np.float64],
        start_index: int = 0,
        skip_first: bool = False,
    ) -> int:
        """
        Polygonize a cubic Bezier curve directly into pre-allocated buffer.
        Uses pure Python for small step counts, NumPy for larger ones.

        Args:
            points: Control points as Sequence[Tuple[float, float]] or NDArray[np.float64]
                    Must contain exactly 4 points: start, control1, control2, end
            steps: Number of line pieces to divide the curve into
            output_buffer: Pre-allocated buffer of shape (n, 3) to write points into
            start_index: Starting index in output_buffer
            skip_first: If True, skip writing the first point (to avoid duplication)

        Returns:
            Number of points written to buffer
        """
        if steps < 1:
            raise ValueError(f"steps must be at least 1, got {steps}")
        if steps < NUMPY_STEPS_THRESHOLD:
            return cls.polygonize_cubic_curve_python_inplace(points, steps, output_buffer, start_index, skip_first)
        return cls.polygonize_cubic_curve_numpy_inplace(points, steps, output_buffer, start_index, skip_first)

    @classmethod
    def polygonize_cubic_curve(cls, points: CubicPoints, steps: int) -> NDArray[np.float64]:
        """
        Polygonize a cubic Bezier curve into line segments.

        Returns:
            NDArray[np.float64] of shape (steps+1, 3) containing the points (x, y, type)
        """
        result = np.empty((steps + 1, 3), dtype=np.float64)
        cls.polygonize_cubic_curve_inplace(points, steps, result, start_index=0, skip_first=False)
        return result
