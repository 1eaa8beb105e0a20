"""Constant heading motion model along a Bezier curve."""

import math

import numpy as np

from constant_heading.bezier import CubicBezierCurve
from constant_heading.data import Point2D

_MIN_TANGENT_NORM_SQ = 1e-12


class ConstantHeadingDynamics:
    """First-order ODE of a robot tracking a curve while holding heading ``theta``.

    The state is the robot position ``(x, y)``; the independent variable is a
    progress variable, not wall-clock time. At each state the curve parameter
    is recovered by inversion and the robot moves along the curve tangent
    ``tau`` with

        speed = (tau . (cos theta, sin theta) * v_max
                 - |tau| * (mu_k * mass + c1 * |sin(theta - angle(tau))|)) / |tau|^2

    so that the forward drive is reduced by friction and by the mismatch
    between the commanded heading and the direction of the path.
    """

    def __init__(
        self,
        theta: float,
        v_max: float,
        mass: float,
        mu_k: float,
        c1: float,
        curve: CubicBezierCurve,
    ) -> None:
        self.theta = theta
        self.v_max = v_max
        self.mass = mass
        self.mu_k = mu_k
        self.c1 = c1
        self.curve = curve

        self._heading = np.array([math.cos(theta), math.sin(theta)])
        # Evaluations whose curve inversion had to fall back
        self.inversion_fallbacks = 0

    def speed(self, tangent: np.ndarray) -> float:
        """Scalar multiplier of the tangent for a given tangent vector."""
        norm_sq = float(tangent @ tangent)
        if norm_sq < _MIN_TANGENT_NORM_SQ:
            return 0.0
        norm = math.sqrt(norm_sq)
        mismatch = abs(math.sin(self.theta - math.atan2(tangent[1], tangent[0])))
        drive = float(tangent @ self._heading) * self.v_max
        resistance = norm * (self.mu_k * self.mass + self.c1 * mismatch)
        return (drive - resistance) / norm_sq

    def __call__(self, progress: float, state: np.ndarray) -> np.ndarray:
        """Derivative of the position with respect to progress."""
        inversion = self.curve.locate(Point2D(float(state[0]), float(state[1])))
        if not inversion.matched:
            self.inversion_fallbacks += 1

        tangent = self.curve.tangents(np.array([inversion.t]))[0]
        return self.speed(tangent) * tangent
