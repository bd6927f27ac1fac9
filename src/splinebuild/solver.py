"""Control point computation for cubic splines through a window of knots."""

from __future__ import annotations

from typing import List, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from splinebuild.geom import Point, PointLike, Segment, points_to_array

###############################################################################
# Coefficients of the tridiagonal system, as (a, b, c) for P1[i-1], P1[i], P1[i+1]
# and (k0, k3) weighting the knots P0, P3 of the segment on the right-hand side.
###############################################################################

FIRST_SEGMENT_COEFFS: Tuple[float, float, float] = (0.0, 2.0, 1.0)
FIRST_SEGMENT_RHS: Tuple[float, float] = (1.0, 2.0)

INNER_SEGMENT_COEFFS: Tuple[float, float, float] = (1.0, 4.0, 1.0)
INNER_SEGMENT_RHS: Tuple[float, float] = (4.0, 2.0)

LAST_SEGMENT_COEFFS: Tuple[float, float, float] = (2.0, 7.0, 0.0)
LAST_SEGMENT_RHS: Tuple[float, float] = (8.0, 1.0)

# Fewer segments than this cannot be solved
MIN_SEGMENTS: int = 2


class SegmentSolver:
    """Computes cubic Bezier control points for consecutive knots.

    For every segment i between knots P0 = K[i] and P3 = K[i+1] the first control
    point P1[i] is obtained from a tridiagonal linear system which is solved
    separately for the x and y column. The second control point P2[i] follows
    from P1 of the next segment, so that consecutive segments join smoothly.

    All methods are stateless.
    """

    @classmethod
    def solve(cls, knots: Union[Sequence[PointLike], NDArray[np.float64]]) -> List[Segment]:
        """
        Compute one segment per consecutive pair of knots.

        Args:
            knots: Ordered knots as Point instances, (x, y) tuples or an (n, 2) array.

        Returns:
            List[Segment]: n-1 segments in knot order, or an empty list if fewer
            than 3 knots are given or the control points exceed the float range.
        """
        knots_arr = points_to_array(knots)
        if knots_arr.shape[0] - 1 < MIN_SEGMENTS:
            return []

        with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
            first = cls.first_control_points(knots_arr)
            second = cls.second_control_points(knots_arr, first)
        if not (np.all(np.isfinite(first)) and np.all(np.isfinite(second))):
            return []

        return [
            Segment(Point(float(p1[0]), float(p1[1])), Point(float(p2[0]), float(p2[1])))
            for p1, p2 in zip(first, second)
        ]

    @staticmethod
    def build_system(
        knots: NDArray[np.float64],
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
        """
        Build the tridiagonal system A * P1 = R for the given knots.

        Args:
            knots: Array of shape (n, 2) with n >= 3.

        Returns:
            Tuple (a, b, c, rhs): sub-diagonal, diagonal and super-diagonal of
            shape (n-1,) and the right-hand side of shape (n-1, 2). a[0] and c[-1]
            lie outside the matrix and are always 0.
        """
        n_segments = knots.shape[0] - 1
        if n_segments < MIN_SEGMENTS:
            raise ValueError(f"At least {MIN_SEGMENTS + 1} knots are required, got {knots.shape[0]}")

        coeffs = np.empty((n_segments, 3), dtype=np.float64)
        weights = np.empty((n_segments, 2), dtype=np.float64)

        coeffs[:] = INNER_SEGMENT_COEFFS
        weights[:] = INNER_SEGMENT_RHS
        coeffs[0] = FIRST_SEGMENT_COEFFS
        weights[0] = FIRST_SEGMENT_RHS
        coeffs[-1] = LAST_SEGMENT_COEFFS
        weights[-1] = LAST_SEGMENT_RHS

        p0 = knots[:-1, :2]
        p3 = knots[1:, :2]
        rhs = weights[:, 0:1] * p0 + weights[:, 1:2] * p3

        return coeffs[:, 0].copy(), coeffs[:, 1].copy(), coeffs[:, 2].copy(), rhs

    @staticmethod
    def solve_tridiagonal(
        a: NDArray[np.float64],
        b: NDArray[np.float64],
        c: NDArray[np.float64],
        rhs: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        """
        Solve a tridiagonal system with the Thomas algorithm.

        Forward elimination followed by back substitution. All right-hand side
        columns are solved in one pass. The inputs are not modified.

        Args:
            a: Sub-diagonal, shape (n,), a[0] unused.
            b: Diagonal, shape (n,).
            c: Super-diagonal, shape (n,), c[-1] unused.
            rhs: Right-hand side, shape (n,) or (n, k).

        Returns:
            Solution with the same shape as rhs.
        """
        n = b.shape[0]
        diag = np.array(b, dtype=np.float64)
        r = np.array(rhs, dtype=np.float64)

        for i in range(1, n):
            m = a[i] / diag[i - 1]
            diag[i] -= m * c[i - 1]
            r[i] -= m * r[i - 1]

        x = np.empty_like(r)
        x[n - 1] = r[n - 1] / diag[n - 1]
        for i in range(n - 2, -1, -1):
            x[i] = (r[i] - c[i] * x[i + 1]) / diag[i]

        return x

    @classmethod
    def first_control_points(cls, knots: NDArray[np.float64]) -> NDArray[np.float64]:
        """Return the first control point P1 of every segment, shape (n-1, 2)."""
        a, b, c, rhs = cls.build_system(knots)
        return cls.solve_tridiagonal(a, b, c, rhs)

    @staticmethod
    def second_control_points(knots: NDArray[np.float64], first: NDArray[np.float64]) -> NDArray[np.float64]:
        """
        Return the second control point P2 of every segment, shape (n-1, 2).

        P2[i] = 2 * P3[i] - P1[i+1] for all but the last segment,
        P2[-1] = (P3[-1] + P1[-1]) / 2 for the last one.
        """
        p3 = knots[1:, :2]
        second = np.empty_like(first)
        second[:-1] = 2.0 * p3[:-1] - first[1:]
        second[-1] = (p3[-1] + first[-1]) / 2.0
        return second
