"""Cubic Bezier curve between two fixed endpoints."""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from functools import cached_property

import numpy as np
from scipy.integrate import simpson

from constant_heading.data import Point2D

logger = logging.getLogger(__name__)

# Two real roots closer than this (in t) are treated as the same parameter
ROOT_MATCH_TOLERANCE = 1e-6

# Composite Simpson intervals for the arc length quadrature (even)
ARC_LENGTH_INTERVALS = 128

DEFAULT_PARAMETER = 0.5

_IMAGINARY_TOLERANCE = 1e-9
_ZERO_COEFFICIENT = 1e-12


class InversionStatus(Enum):
    """How a point was mapped back onto the curve parameter."""

    MATCHED = "matched"  # x and y root sets share a root within tolerance
    NEAREST_ROOT = "nearest_root"  # closest in-range root of either coordinate
    DEFAULT = "default"  # no root in [0, 1]


@dataclass(frozen=True)
class CurveInversion:
    t: float
    status: InversionStatus

    @property
    def matched(self) -> bool:
        return self.status is InversionStatus.MATCHED


@dataclass(frozen=True)
class CubicBezierCurve:
    """Cubic Bezier curve ``B(t)`` for ``t`` in [0, 1].

    ``p0`` and ``p3`` are the fixed start and end positions, ``p1`` and ``p2`` the
    free control points. The curve is immutable; derived quantities (polynomial
    coefficients, arc length) are computed on first use and cached.
    """

    p0: Point2D
    p1: Point2D
    p2: Point2D
    p3: Point2D

    @cached_property
    def _coefficients(self) -> np.ndarray:
        """Power basis coefficients, shape (2, 4), highest degree first."""
        control = np.array(
            [
                [self.p0.x, self.p0.y],
                [self.p1.x, self.p1.y],
                [self.p2.x, self.p2.y],
                [self.p3.x, self.p3.y],
            ]
        )
        p0, p1, p2, p3 = control
        cube = p3 - 3.0 * p2 + 3.0 * p1 - p0
        square = 3.0 * p2 - 6.0 * p1 + 3.0 * p0
        linear = 3.0 * p1 - 3.0 * p0
        return np.stack([cube, square, linear, p0], axis=1)

    @cached_property
    def _derivative_coefficients(self) -> np.ndarray:
        c = self._coefficients
        return np.stack([3.0 * c[:, 0], 2.0 * c[:, 1], c[:, 2]], axis=1)

    @property
    def control_points(self) -> tuple[Point2D, Point2D, Point2D, Point2D]:
        return (self.p0, self.p1, self.p2, self.p3)

    def position(self, t: float) -> Point2D:
        """Curve position at ``t``. Values outside [0, 1] are extrapolated."""
        if t == 0.0:
            return self.p0
        if t == 1.0:
            return self.p3
        cx, cy = self._coefficients
        return Point2D(float(np.polyval(cx, t)), float(np.polyval(cy, t)))

    def tangent(self, t: float) -> Point2D:
        """First derivative ``dB/dt``."""
        dx, dy = self._derivative_coefficients
        return Point2D(float(np.polyval(dx, t)), float(np.polyval(dy, t)))

    def heading(self, t: float) -> float:
        """Direction of travel of the curve at ``t`` [rad]."""
        tangent = self.tangent(t)
        return math.atan2(tangent.y, tangent.x)

    def positions(self, ts: np.ndarray) -> np.ndarray:
        """Vectorised positions, shape (len(ts), 2)."""
        ts = np.asarray(ts, dtype=float)
        cx, cy = self._coefficients
        return np.column_stack((np.polyval(cx, ts), np.polyval(cy, ts)))

    def tangents(self, ts: np.ndarray) -> np.ndarray:
        ts = np.asarray(ts, dtype=float)
        dx, dy = self._derivative_coefficients
        return np.column_stack((np.polyval(dx, ts), np.polyval(dy, ts)))

    def sample(self, num_samples: int) -> np.ndarray:
        """Positions at ``num_samples`` evenly spaced parameters, endpoints included."""
        return self.positions(np.linspace(0.0, 1.0, num_samples))

    @cached_property
    def arc_length(self) -> float:
        """Length of the curve, integrating ``|B'(t)|`` with composite Simpson."""
        ts = np.linspace(0.0, 1.0, ARC_LENGTH_INTERVALS + 1)
        speeds = np.linalg.norm(self.tangents(ts), axis=1)
        return float(simpson(speeds, x=ts))

    def locate(self, point: Point2D, tolerance: float = ROOT_MATCH_TOLERANCE) -> CurveInversion:
        """Recover the parameter of a point believed to lie on the curve.

        The real roots of ``x(t) - point.x`` and ``y(t) - point.y`` are found
        independently. The closest pair of roots (one from each set) inside
        [0, 1] is accepted when they agree within ``tolerance``. Otherwise the
        in-range root whose position is nearest the point is used, and when no
        root is in range the parameter defaults to 0.5.
        """
        cx, cy = self._coefficients
        roots_x = _roots_in_range(cx, point.x)
        roots_y = _roots_in_range(cy, point.y)

        # A coordinate that is constant along the curve does not constrain t
        if roots_x is None and roots_y is None:
            return CurveInversion(0.0, InversionStatus.MATCHED)
        if roots_x is None:
            return self._nearest(roots_y, point, exact=True)
        if roots_y is None:
            return self._nearest(roots_x, point, exact=True)

        if roots_x.size and roots_y.size:
            gaps = np.abs(roots_x[:, None] - roots_y[None, :])
            i, j = np.unravel_index(np.argmin(gaps), gaps.shape)
            if gaps[i, j] <= tolerance:
                return CurveInversion(
                    float(0.5 * (roots_x[i] + roots_y[j])), InversionStatus.MATCHED
                )

        candidates = np.concatenate((roots_x, roots_y))
        logger.debug(f"No common root for ({point.x:.4f}, {point.y:.4f}), using nearest root")
        return self._nearest(candidates, point, exact=False)

    def invert(self, point: Point2D, tolerance: float = ROOT_MATCH_TOLERANCE) -> float:
        """Parameter ``t`` with ``position(t)`` approximately equal to ``point``."""
        return self.locate(point, tolerance).t

    def _nearest(self, candidates: np.ndarray, point: Point2D, exact: bool) -> CurveInversion:
        if candidates.size == 0:
            return CurveInversion(DEFAULT_PARAMETER, InversionStatus.DEFAULT)
        distances = np.linalg.norm(self.positions(candidates) - point.to_array(), axis=1)
        t = float(candidates[np.argmin(distances)])
        status = InversionStatus.MATCHED if exact else InversionStatus.NEAREST_ROOT
        return CurveInversion(t, status)

    def export_as_line(self, degrees: float, color: str) -> dict:
        """Path visualizer line record for this curve driven at a constant heading."""
        return {
            "endPoint": {
                "x": self.p3.x,
                "y": self.p3.y,
                "heading": "constant",
                "degrees": degrees,
            },
            "controlPoints": [
                {"x": self.p1.x, "y": self.p1.y},
                {"x": self.p2.x, "y": self.p2.y},
            ],
            "color": color,
        }


def _roots_in_range(coefficients: np.ndarray, value: float) -> np.ndarray | None:
    """Real roots in [0, 1] of ``poly(t) - value``.

    Returns None when the shifted polynomial is identically zero.
    """
    shifted = coefficients.astype(float).copy()
    shifted[-1] -= value
    if np.all(np.abs(shifted) <= _ZERO_COEFFICIENT * max(1.0, abs(value))):
        return None
    # np.roots drops leading zeros, so lower degree curves are handled too
    roots = np.roots(shifted)
    real = roots[np.abs(roots.imag) <= _IMAGINARY_TOLERANCE].real
    in_range = real[(real >= -ROOT_MATCH_TOLERANCE) & (real <= 1.0 + ROOT_MATCH_TOLERANCE)]
    return np.sort(np.clip(in_range, 0.0, 1.0))
