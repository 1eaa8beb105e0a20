"""Constant heading trajectory planner."""

from constant_heading.bezier import CubicBezierCurve, CurveInversion, InversionStatus
from constant_heading.collision import Rectangle, rotated_rectangle, separating_width
from constant_heading.config import SolverConfig, SolverSettings, load_config
from constant_heading.data import AllianceColor, Point2D, SearchBounds, SearchParameters
from constant_heading.dynamics import ConstantHeadingDynamics
from constant_heading.exceptions import (
    ConstantHeadingError,
    EvaluationBudgetExceededError,
    IntegrationError,
)
from constant_heading.field import (
    FieldCollisionModel,
    FieldRegion,
    RegionKind,
    build_field_regions,
)
from constant_heading.integration import DenseTrajectory, FixedStepIntegrator, rk4_step
from constant_heading.solver import (
    ConstantHeadingSolver,
    OptimizationOutcome,
    SimulatedTrajectory,
    TrajectoryResult,
    solve,
)

__all__ = [
    "AllianceColor",
    "ConstantHeadingDynamics",
    "ConstantHeadingError",
    "ConstantHeadingSolver",
    "CubicBezierCurve",
    "CurveInversion",
    "DenseTrajectory",
    "EvaluationBudgetExceededError",
    "FieldCollisionModel",
    "FieldRegion",
    "FixedStepIntegrator",
    "IntegrationError",
    "InversionStatus",
    "OptimizationOutcome",
    "Point2D",
    "Rectangle",
    "RegionKind",
    "SearchBounds",
    "SearchParameters",
    "SimulatedTrajectory",
    "SolverConfig",
    "SolverSettings",
    "TrajectoryResult",
    "build_field_regions",
    "load_config",
    "rk4_step",
    "rotated_rectangle",
    "separating_width",
    "solve",
]
