"""Errors raised by the spline builder."""


class SplineError(ValueError):
    """Base class for all spline builder errors."""


class AddOnClosedCurveError(SplineError):
    """A point was added to a curve that has already been closed."""


class AlreadyClosedError(SplineError):
    """The curve was closed a second time."""


class CoordinateRangeError(SplineError):
    """The control points for a new point would exceed the float range."""


class InsufficientPointsError(SplineError):
    """Not enough points or finalized segments to materialize a path."""
