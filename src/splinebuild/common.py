"""Central module containing types and constants for spline path handling."""

from __future__ import annotations

from typing import Literal

###############################################################################
# Types
###############################################################################


SplineCmds = Literal[  # Type-Definition for path commands emitted by SplinePath
    # MoveTo (1) - start the path and move the current point to (x,y)
    "M",
    # Cubic Bezier To (3) - draw a cubic Bezier curve with two control points and an endpoint (x,y)
    "C",
    # ClosePath (0) - close the path by drawing a line from the current point to start point
    "Z",
]


###############################################################################
# Consts
###############################################################################


# Value of the type column for points lying on the curve
POINT_TYPE_ON_CURVE: float = 0.0

# Value of the type column for cubic control points
POINT_TYPE_CUBIC_CONTROL: float = 3.0

# Number of points consumed by each path command
CMD_POINT_COUNT = {"M": 1, "C": 3, "Z": 0}
