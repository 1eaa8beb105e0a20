"""Tests for the constant heading motion model."""

import math

import numpy as np
import pytest

from constant_heading.bezier import CubicBezierCurve
from constant_heading.data import Point2D
from constant_heading.dynamics import ConstantHeadingDynamics

V_MAX = 87.0
MASS = 16.09
MU_K = 0.1
C1 = 10.0


@pytest.fixture
def horizontal_curve() -> CubicBezierCurve:
    # Constant tangent (30, 0)
    return CubicBezierCurve(
        Point2D(0.0, 0.0),
        Point2D(10.0, 0.0),
        Point2D(20.0, 0.0),
        Point2D(30.0, 0.0),
    )


def make_dynamics(theta: float, curve: CubicBezierCurve) -> ConstantHeadingDynamics:
    return ConstantHeadingDynamics(
        theta=theta, v_max=V_MAX, mass=MASS, mu_k=MU_K, c1=C1, curve=curve
    )


class TestConstantHeadingDynamics:
    """Tests for the derivative of the position."""

    def test_heading_along_path(self, horizontal_curve: CubicBezierCurve) -> None:
        """Test full drive minus friction when heading matches the path."""
        dynamics = make_dynamics(0.0, horizontal_curve)

        derivative = dynamics(0.0, np.array([15.0, 0.0]))

        assert derivative[0] == pytest.approx(V_MAX - MU_K * MASS)
        assert derivative[1] == pytest.approx(0.0)
        assert dynamics.inversion_fallbacks == 0

    def test_heading_across_path(self, horizontal_curve: CubicBezierCurve) -> None:
        """Test a perpendicular heading only resists motion."""
        dynamics = make_dynamics(math.pi / 2, horizontal_curve)

        derivative = dynamics(0.0, np.array([15.0, 0.0]))

        assert derivative[0] == pytest.approx(-(MU_K * MASS + C1), abs=1e-9)
        assert derivative[1] == pytest.approx(0.0)

    def test_speed_scales_inversely_with_tangent(self) -> None:
        dynamics = make_dynamics(0.0, CubicBezierCurve(*[Point2D(0.0, 0.0)] * 4))

        slow = dynamics.speed(np.array([10.0, 0.0]))
        fast = dynamics.speed(np.array([20.0, 0.0]))

        # speed * |tau| is independent of the tangent magnitude
        assert slow * 10.0 == pytest.approx(fast * 20.0)

    def test_zero_tangent(self) -> None:
        """Test a vanishing tangent stops the robot instead of dividing by zero."""
        point = Point2D(5.0, 5.0)
        dynamics = make_dynamics(0.3, CubicBezierCurve(point, point, point, point))

        derivative = dynamics(0.0, np.array([5.0, 5.0]))

        np.testing.assert_array_equal(derivative, [0.0, 0.0])

    def test_off_curve_state_counts_fallback(self, horizontal_curve: CubicBezierCurve) -> None:
        dynamics = make_dynamics(0.0, horizontal_curve)

        derivative = dynamics(0.0, np.array([15.0, 2.0]))

        assert dynamics.inversion_fallbacks == 1
        assert np.all(np.isfinite(derivative))
