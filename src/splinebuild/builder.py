"""Incremental construction of a cubic spline through a growing sequence of points."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from splinebuild.common import SplineCmds
from splinebuild.errors import (
    AddOnClosedCurveError,
    AlreadyClosedError,
    CoordinateRangeError,
    InsufficientPointsError,
)
from splinebuild.geom import Point, PointLike, Segment
from splinebuild.path import SplinePath
from splinebuild.settings import DEFAULT_SETTINGS, SplineSettings
from splinebuild.solver import SegmentSolver

logger = logging.getLogger(__name__)

_INITIAL_CAPACITY: int = 16


class SplineBuilder:
    """Builds a smooth cubic spline through points as they arrive.

    Each added point may finalize segments. A segment is final once no later
    point can change its control points: while the curve is open the last two
    points are not constrained yet, after closing only the last one is.
    Final segments are never recomputed or altered; every update re-solves
    only the trailing window starting at the last final segment.

    Example:
        >>> builder = SplineBuilder((0, 0))
        >>> builder.extend([(1, 1), (3, 4), (10, 2)])
        True
        >>> len(builder.segments)
        2
    """

    def __init__(self, start: PointLike, settings: Optional[SplineSettings] = None):
        """
        Initialize the builder from its starting point.

        Args:
            start: First knot of the curve.
            settings: Settings passed on to materialized paths.
        """
        start_point = Point.from_any(start)
        self._settings = settings if settings is not None else DEFAULT_SETTINGS
        self._knots: NDArray[np.float64] = np.empty((_INITIAL_CAPACITY, 2), dtype=np.float64)
        self._knots[0] = start_point.as_tuple()
        self._points: List[Point] = [start_point]
        self._segments: List[Segment] = []
        self._is_open = True

    ###########################################################################
    # Observers
    ###########################################################################

    @property
    def points(self) -> Tuple[Point, ...]:
        """The knots added so far."""
        return tuple(self._points)

    @property
    def knots(self) -> NDArray[np.float64]:
        """The knots added so far as read-only array of shape (n, 2)."""
        view = self._knots[: len(self._points)]
        view.flags.writeable = False
        return view

    @property
    def segments(self) -> Tuple[Segment, ...]:
        """The finalized segments, segments[i] connects points[i] and points[i+1]."""
        return tuple(self._segments)

    @property
    def is_open(self) -> bool:
        """True until close() has been called."""
        return self._is_open

    @property
    def is_closed(self) -> bool:
        """True once close() has been called."""
        return not self._is_open

    @property
    def settings(self) -> SplineSettings:
        """Settings passed on to materialized paths."""
        return self._settings

    def __len__(self) -> int:
        return len(self._points)

    def __repr__(self) -> str:
        state = "open" if self._is_open else "closed"
        return f"SplineBuilder(points={len(self._points)}, segments={len(self._segments)}, {state})"

    ###########################################################################
    # Mutators
    ###########################################################################

    def add(self, point: PointLike) -> bool:
        """
        Append a point and finalize the segments it determines.

        Args:
            point: The knot to append.

        Returns:
            bool: True if at least one new segment was finalized.

        Raises:
            AddOnClosedCurveError: If the curve has been closed.
            CoordinateRangeError: If the point makes the control points overflow;
                the point is not added then.
        """
        if not self._is_open:
            raise AddOnClosedCurveError("Cannot add a point to a closed curve")
        new_point = Point.from_any(point)

        count = len(self._points)
        if count == self._knots.shape[0]:
            grown = np.empty((2 * count, 2), dtype=np.float64)
            grown[:count] = self._knots[:count]
            self._knots = grown
        self._knots[count] = new_point.as_tuple()
        self._points.append(new_point)

        try:
            final = self._solve_final_segments()
        except CoordinateRangeError:
            self._points.pop()
            raise
        return self._commit(final)

    def extend(self, points: Iterable[PointLike]) -> bool:
        """
        Append several points in order.

        Returns:
            bool: True if any of the points finalized a new segment.

        Raises:
            AddOnClosedCurveError: If the curve has been closed.
        """
        changed = False
        for point in points:
            changed = self.add(point) or changed
        return changed

    def close(self) -> bool:
        """
        Close the curve and finalize the trailing segment.

        Returns:
            bool: True if at least one new segment was finalized.

        Raises:
            AlreadyClosedError: If the curve has already been closed.
            CoordinateRangeError: If the trailing control points overflow;
                the curve stays open then.
        """
        if not self._is_open:
            raise AlreadyClosedError("The curve has already been closed")
        self._is_open = False
        try:
            final = self._solve_final_segments()
        except CoordinateRangeError:
            self._is_open = True
            raise
        logger.debug("Closing curve with %d points", len(self._points))
        return self._commit(final)

    ###########################################################################
    # Segment building
    ###########################################################################

    def _max_segments(self) -> int:
        """Number of segments the current points fully determine."""
        return len(self._points) - (2 if self._is_open else 1)

    def _window_start(self) -> int:
        """First knot of the trailing window, overlapping the last final segment."""
        return len(self._segments) - 1 if self._segments else 0

    def _solve_final_segments(self) -> List[Segment]:
        """
        Re-solve the trailing window and return the segments that became final.

        Nothing is committed here.

        Raises:
            CoordinateRangeError: If the window cannot be solved within the float range.
        """
        if len(self._points) <= 2 or len(self._segments) >= self._max_segments():
            return []

        window_start = self._window_start()
        # At least 3 knots here, so an empty result means overflow
        new_segments = SegmentSolver.solve(self._knots[window_start : len(self._points)])
        if not new_segments:
            raise CoordinateRangeError(
                f"Control points for knots {window_start}..{len(self._points) - 1} exceed the float range"
            )

        # The first one duplicates the last final segment, the last one is still open
        first = 1 if self._segments else 0
        last = len(new_segments) - (1 if self._is_open else 0)
        logger.debug(
            "Solved window of %d knots from index %d, %d new segments final",
            len(self._points) - window_start,
            window_start,
            last - first,
        )
        return new_segments[first:last]

    def _commit(self, final: List[Segment]) -> bool:
        """Append final segments, True if there were any."""
        self._segments.extend(final)
        return bool(final)

    def provisional_segments(self) -> List[Segment]:
        """
        Return the segments after the final ones as currently estimated.

        These are recomputed on every call and may change when more points are
        added. The builder state is not modified.

        Returns:
            List[Segment]: Estimates for segments len(segments) .. len(points) - 2,
            empty if they cannot be computed yet.
        """
        if len(self._points) <= 2 or len(self._segments) >= len(self._points) - 1:
            return []
        window_start = self._window_start()
        estimates = SegmentSolver.solve(self._knots[window_start : len(self._points)])
        return estimates[len(self._segments) - window_start :]

    ###########################################################################
    # Path
    ###########################################################################

    def materialize_path(self) -> SplinePath:
        """
        Build a drawable path from the finalized segments.

        The path starts at points[0] and draws segment i as cubic curve to
        points[i+1]. The wrap back to points[0] is not drawn unless
        settings.close_path_command is set, which appends a 'Z' command to a
        closed curve whose segments are complete.

        Returns:
            SplinePath: The materialized path.

        Raises:
            InsufficientPointsError: If fewer than 3 points or no final segment exist.
        """
        n_points = len(self._points)
        n_segments = len(self._segments)
        if not (n_points > 2 and n_segments > 0 and n_points > n_segments):
            raise InsufficientPointsError(
                f"Cannot build a path from {n_points} points and {n_segments} segments"
            )

        coords = np.empty((1 + 3 * n_segments, 2), dtype=np.float64)
        coords[0] = self._knots[0]
        for i, segment in enumerate(self._segments):
            row = 1 + 3 * i
            coords[row] = segment.control1.as_tuple()
            coords[row + 1] = segment.control2.as_tuple()
            coords[row + 2] = self._knots[i + 1]

        commands: List[SplineCmds] = ["M"] + ["C"] * n_segments
        if not self._is_open and n_segments == n_points - 1 and self._settings.close_path_command:
            commands.append("Z")

        return SplinePath(coords, commands, self._settings)
