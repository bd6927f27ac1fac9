"""Test module for cubic BezierCurve functions in splinebuild.bezier

The tests are run using pytest.
"""

import numpy as np
import pytest

from splinebuild.bezier import NUMPY_STEPS_THRESHOLD, BezierCurve

CONTROL_POINTS = np.array([[30.0, 10.0], [35.0, 15.0], [40.0, 15.0], [45.0, 10.0]], dtype=np.float64)

###############################################################################
# Evaluation
###############################################################################


class TestEvaluateCubic:
    """Test direct evaluation of a cubic curve."""

    def test_end_points(self):
        """t=0 and t=1 give start and end point."""
        assert np.array_equal(BezierCurve.evaluate_cubic(CONTROL_POINTS, 0.0), CONTROL_POINTS[0])
        assert np.array_equal(BezierCurve.evaluate_cubic(CONTROL_POINTS, 1.0), CONTROL_POINTS[3])

    def test_midpoint(self):
        """B(0.5) = (P0 + 3*P1 + 3*P2 + P3) / 8."""
        expected = (CONTROL_POINTS[0] + 3 * CONTROL_POINTS[1] + 3 * CONTROL_POINTS[2] + CONTROL_POINTS[3]) / 8
        assert np.allclose(BezierCurve.evaluate_cubic(CONTROL_POINTS, 0.5), expected)

    def test_array_parameter(self):
        """An array of parameters gives one row per parameter."""
        result = BezierCurve.evaluate_cubic(CONTROL_POINTS, np.array([0.0, 0.25, 1.0]))
        assert result.shape == (3, 2)

    def test_wrong_point_count(self):
        """Exactly four points are required."""
        with pytest.raises(ValueError, match="exactly 4 points"):
            BezierCurve.evaluate_cubic(CONTROL_POINTS[:3], 0.5)


###############################################################################
# Cubic In-place Tests
###############################################################################


class TestCubicInplace:
    """Test cubic in-place polygonization."""

    def test_cubic_inplace_skip_first_variations(self):
        """Test cubic in-place with skip_first variations."""
        steps = 10

        buffer1 = np.empty((steps + 1, 3), dtype=np.float64)
        count1 = BezierCurve.polygonize_cubic_curve_inplace(
            CONTROL_POINTS, steps, buffer1, start_index=0, skip_first=False
        )

        buffer2 = np.empty((steps + 1, 3), dtype=np.float64)
        count2 = BezierCurve.polygonize_cubic_curve_inplace(
            CONTROL_POINTS, steps, buffer2, start_index=0, skip_first=True
        )

        assert count1 == steps + 1, f"skip_first=False should write {steps + 1} points, got {count1}"
        assert count2 == steps, f"skip_first=True should write {steps} points, got {count2}"

        assert np.array_equal(buffer1[count1 - 1, :2], CONTROL_POINTS[3]), "skip_first=False end point should match"
        assert np.array_equal(buffer2[count2 - 1, :2], CONTROL_POINTS[3]), "skip_first=True end point should match"

    @pytest.mark.parametrize("steps", [1, 2, 5, 10, NUMPY_STEPS_THRESHOLD, 120])
    def test_cubic_inplace_different_step_counts(self, steps):
        """Test cubic in-place with different step counts on both implementations."""
        buffer = np.empty((steps + 1, 3), dtype=np.float64)
        count = BezierCurve.polygonize_cubic_curve_inplace(
            CONTROL_POINTS, steps, buffer, start_index=0, skip_first=True
        )

        assert count == steps, f"Steps={steps}: expected count {steps}, got {count}"
        assert np.array_equal(buffer[count - 1, :2], CONTROL_POINTS[3]), f"Steps={steps}: end point should match"

        if count > 1:
            assert all(buffer[i, 2] == 3.0 for i in range(count - 1)), "Middle points should be type 3.0"
        assert buffer[count - 1, 2] == 0.0, "End point should be type 0.0"

    @pytest.mark.parametrize("steps", [3, 16, 69])
    def test_python_matches_numpy(self, steps):
        """Forward differencing matches direct evaluation."""
        python_buffer = np.empty((steps + 1, 3), dtype=np.float64)
        numpy_buffer = np.empty((steps + 1, 3), dtype=np.float64)

        BezierCurve.polygonize_cubic_curve_python_inplace(CONTROL_POINTS, steps, python_buffer)
        BezierCurve.polygonize_cubic_curve_numpy_inplace(CONTROL_POINTS, steps, numpy_buffer)

        assert np.allclose(python_buffer, numpy_buffer)

    def test_start_index(self):
        """Writing starts at the given buffer index."""
        buffer = np.zeros((15, 3), dtype=np.float64)
        count = BezierCurve.polygonize_cubic_curve_inplace(CONTROL_POINTS, 10, buffer, start_index=4)
        assert count == 11
        assert np.array_equal(buffer[4, :2], CONTROL_POINTS[0])
        assert np.array_equal(buffer[14, :2], CONTROL_POINTS[3])
        assert np.all(buffer[:4] == 0.0)

    def test_invalid_steps(self):
        """Zero steps are rejected."""
        buffer = np.empty((2, 3), dtype=np.float64)
        with pytest.raises(ValueError, match="steps"):
            BezierCurve.polygonize_cubic_curve_inplace(CONTROL_POINTS, 0, buffer)

    def test_polygonize_cubic_curve(self):
        """The allocating variant returns steps+1 points."""
        result = BezierCurve.polygonize_cubic_curve([(0.0, 0.0), (50.0, 200.0), (150.0, -100.0), (200.0, 0.0)], 10)
        assert result.shape == (11, 3)
        assert result[0, 2] == 0.0
        assert result[-1, 2] == 0.0
