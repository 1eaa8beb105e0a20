import math

import pytest

from constant_heading.bezier import CubicBezierCurve
from constant_heading.config import SolverConfig, SolverSettings
from constant_heading.data import AllianceColor, Point2D


@pytest.fixture
def scenario_config() -> SolverConfig:
    """Blue alliance run along the observation zone column."""
    return SolverConfig(
        v_max=87.0,
        mass=16.09,
        mu_k=0.1,
        c1=10.0,
        c2=15.0,
        p0=Point2D(10.0, 5.0),
        p3=Point2D(10.0, 110.0),
        theta_final=math.pi / 2,
        boundary_tolerance=3.0,
        submersible_tolerance=3.0,
        alliance_color=AllianceColor.BLUE,
        theta_initial=0.0,
        angular_velocity=6.0,
        robot_width=12.83,
        robot_height=15.75,
    )


@pytest.fixture
def fast_settings() -> SolverSettings:
    # Coarser numerics keep end-to-end tests quick
    return SolverSettings(step=0.05, max_iterations=5, max_function_evaluations=300)


@pytest.fixture
def straight_curve() -> CubicBezierCurve:
    # Collinear, evenly ordered control points: a straight segment of length 100
    return CubicBezierCurve(
        Point2D(36.0, 20.0),
        Point2D(36.0, 50.0),
        Point2D(36.0, 80.0),
        Point2D(36.0, 120.0),
    )


@pytest.fixture
def s_curve() -> CubicBezierCurve:
    return CubicBezierCurve(
        Point2D(10.0, 5.0),
        Point2D(60.0, 30.0),
        Point2D(-20.0, 80.0),
        Point2D(30.0, 110.0),
    )
