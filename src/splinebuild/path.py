"""Drawable path materialized from a spline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from splinebuild.bezier import BezierCurve
from splinebuild.common import (
    CMD_POINT_COUNT,
    POINT_TYPE_CUBIC_CONTROL,
    POINT_TYPE_ON_CURVE,
    SplineCmds,
)
from splinebuild.settings import DEFAULT_SETTINGS, SplineSettings

###############################################################################
# PathInstruction
###############################################################################


class PathInstruction(NamedTuple):
    """One drawing instruction of a SplinePath.

    Attributes:
        command: 'M', 'C' or 'Z'.
        points: Array of shape (k, 2): the target point for 'M',
            (control1, control2, end) for 'C', empty for 'Z'.
    """

    command: SplineCmds
    points: NDArray[np.float64]


###############################################################################
# SplinePath
###############################################################################


@dataclass
class SplinePath:
    """Path of cubic Bezier curves represented by points and corresponding commands.

    The path starts with exactly one 'M', is followed by 'C' commands and may end with 'Z'.

    Attributes:
        _points: Array of points (shape: n_points, 3) as (x, y, type)
        _commands: List of commands consuming the points in order
        _settings: Settings used for polygonization
    """

    _points: NDArray[np.float64]
    _commands: List[SplineCmds]
    _settings: SplineSettings = DEFAULT_SETTINGS

    def __init__(
        self,
        points: Union[Sequence[Tuple[float, float]], NDArray[np.float64]],
        commands: Sequence[SplineCmds],
        settings: Optional[SplineSettings] = None,
    ):
        """
        Initialize a SplinePath from 2D points.

        Args:
            points: a sequence of (x, y) or an array of shape (n, 2) or (n, 3).
            commands: List of drawing commands consuming the points.
            settings: Settings used for polygonization, defaults to DEFAULT_SETTINGS.
        """
        arr = np.asarray(points, dtype=np.float64)
        if arr.ndim != 2 or arr.shape[1] not in (2, 3):
            raise ValueError(f"points must have shape (n, 2) or (n, 3), got {arr.shape}")

        commands_list: List[SplineCmds] = list(commands)
        self._validate(arr, commands_list)

        types = np.full(arr.shape[0], POINT_TYPE_ON_CURVE, dtype=np.float64)
        point_idx = 0
        for cmd in commands_list:
            if cmd == "C":
                types[point_idx : point_idx + 2] = POINT_TYPE_CUBIC_CONTROL
            point_idx += CMD_POINT_COUNT[cmd]

        if arr.shape[1] == 3:
            mismatch = np.flatnonzero(arr[:, 2] != types)
            if mismatch.size:
                idx = int(mismatch[0])
                raise ValueError(f"Point {idx} has type {arr[idx, 2]} but its command requires type {types[idx]}")
        arr = np.column_stack([arr[:, :2], types])

        arr.flags.writeable = False
        self._points = arr
        self._commands = commands_list
        self._settings = settings if settings is not None else DEFAULT_SETTINGS

    @staticmethod
    def _validate(points: NDArray[np.float64], commands: List[SplineCmds]) -> None:
        """Check that commands form 'M' ('C')* ['Z'] and match the number of points."""
        if not commands or commands[0] != "M":
            raise ValueError("Path must start with 'M' command")

        for i, cmd in enumerate(commands):
            if cmd not in CMD_POINT_COUNT:
                raise ValueError(f"Unknown command '{cmd}' at position {i}")
            if cmd == "M" and i > 0:
                raise ValueError(f"Path must contain a single 'M' command (found another at position {i})")
            if cmd == "Z" and i < len(commands) - 1:
                raise ValueError(f"'Z' must terminate the path (found 'Z' at position {i})")

        expected = sum(CMD_POINT_COUNT[cmd] for cmd in commands)
        if points.shape[0] != expected:
            raise ValueError(f"Number of points ({points.shape[0]}) does not match commands (requires {expected} points)")

    @property
    def points(self) -> NDArray[np.float64]:
        """
        The points of this path as a read-only numpy array of shape (n_points, 3).
        """
        return self._points

    @property
    def commands(self) -> List[SplineCmds]:
        """
        The commands of this path as a list.
        """
        return list(self._commands)

    @property
    def knots(self) -> NDArray[np.float64]:
        """
        The on-curve points of this path (start point and segment end points), shape (n, 2).
        """
        return self._points[self._points[:, 2] == POINT_TYPE_ON_CURVE, :2]

    @property
    def segment_count(self) -> int:
        """Number of cubic segments."""
        return self._commands.count("C")

    @property
    def is_closed(self) -> bool:
        """Return True if the path ends with a 'Z' command."""
        return self._commands[-1] == "Z"

    @property
    def settings(self) -> SplineSettings:
        """Settings used for polygonization."""
        return self._settings

    def instructions(self) -> Iterator[PathInstruction]:
        """Iterate the drawing instructions in order."""
        point_idx = 0
        for cmd in self._commands:
            consumed = CMD_POINT_COUNT[cmd]
            yield PathInstruction(cmd, self._points[point_idx : point_idx + consumed, :2])
            point_idx += consumed

    def cubic_control_points(self, index: int) -> NDArray[np.float64]:
        """
        Return [start, control1, control2, end] of the cubic segment with the given index.

        Args:
            index: Segment index, negative values count from the end.

        Returns:
            NDArray[np.float64]: Array of shape (4, 2).
        """
        count = self.segment_count
        if index < 0:
            index += count
        if not 0 <= index < count:
            raise IndexError(f"Segment index {index} out of range for {count} segments")
        # 'M' is followed by 3 points per 'C'
        start = 3 * index
        return self._points[start : start + 4, :2].copy()

    def point_at(self, index: int, t: float) -> Tuple[float, float]:
        """Evaluate cubic segment `index` at parameter t in [0, 1]."""
        xy = BezierCurve.evaluate_cubic(self.cubic_control_points(index), t)
        return (float(xy[0]), float(xy[1]))

    def polygonize(self, steps: Optional[int] = None) -> NDArray[np.float64]:
        """
        Approximate this path by a polyline.

        Args:
            steps: Line pieces per cubic segment, defaults to settings.polygonize_steps.

        Returns:
            NDArray[np.float64]: Points (x, y, type) of shape
            (1 + steps * segments [+ 1 if closed], 3).
        """
        if steps is None:
            steps = self._settings.polygonize_steps
        if steps < 1:
            raise ValueError(f"steps must be at least 1, got {steps}")

        count = self.segment_count
        total = 1 + steps * count + (1 if self.is_closed else 0)
        result = np.empty((total, 3), dtype=np.float64)
        result[0, :2] = self._points[0, :2]
        result[0, 2] = POINT_TYPE_ON_CURVE

        out_idx = 1
        for index in range(count):
            out_idx += BezierCurve.polygonize_cubic_curve_inplace(
                self.cubic_control_points(index), steps, result, start_index=out_idx, skip_first=True
            )

        if self.is_closed:
            result[out_idx] = result[0]

        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SplinePath):
            return NotImplemented
        return self._commands == other._commands and np.array_equal(self._points, other._points)

    def __repr__(self) -> str:
        return f"SplinePath(segments={self.segment_count}, closed={self.is_closed})"
