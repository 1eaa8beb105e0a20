"""Planner configuration."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from constant_heading.data import AllianceColor, Point2D
from constant_heading.field import DEFAULT_COLLISION_SAMPLES, FIELD_SIZE, HALF_FIELD


class SolverConfig(BaseModel):
    """Robot, field and target parameters of one trajectory problem."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    v_max: float = Field(..., gt=0.0, description="Maximum robot speed [in/s]")
    mass: float = Field(..., gt=0.0, description="Robot mass [kg]")
    mu_k: float = Field(..., ge=0.0, description="Kinetic friction coefficient")
    c1: float = Field(..., ge=0.0, description="Heading mismatch penalty coefficient")
    c2: float = Field(..., gt=0.0, description="Collision penalty weight")
    p0: Point2D = Field(..., description="Start position [in]")
    p3: Point2D = Field(..., description="End position [in]")
    theta_final: float = Field(..., description="Heading required at the end [rad]")
    boundary_tolerance: float = Field(..., ge=0.0, description="Clearance from walls [in]")
    submersible_tolerance: float = Field(
        ..., ge=0.0, description="Clearance from the central obstacle [in]"
    )
    alliance_color: AllianceColor = Field(..., description="Alliance side (blue, red)")
    theta_initial: float = Field(..., description="Heading at the start [rad]")
    angular_velocity: float = Field(..., gt=0.0, description="Turning rate [rad/s]")
    robot_width: float = Field(..., gt=0.0, description="Robot footprint width [in]")
    robot_height: float = Field(..., gt=0.0, description="Robot footprint height [in]")

    @property
    def control_point_margin(self) -> float:
        """Distance control points keep from the field edges [in]."""
        return self.boundary_tolerance + min(self.robot_width, self.robot_height)

    @model_validator(mode="after")
    def validate_geometry(self) -> "SolverConfig":
        """Reject footprints and endpoints that do not fit on the field."""
        if max(self.robot_width, self.robot_height) > HALF_FIELD:
            raise ValueError(
                f"Robot footprint {self.robot_width}x{self.robot_height} does not fit "
                f"on a {HALF_FIELD:g} in half field"
            )

        for name, point in (("p0", self.p0), ("p3", self.p3)):
            if not (0.0 <= point.x <= FIELD_SIZE and 0.0 <= point.y <= FIELD_SIZE):
                raise ValueError(f"{name}=({point.x}, {point.y}) lies outside the field")

        if 2.0 * self.control_point_margin >= HALF_FIELD:
            raise ValueError(
                f"Boundary tolerance plus footprint ({self.control_point_margin:g} in) "
                "leaves no room for control points"
            )

        return self

    @classmethod
    def from_yaml(cls, path: str | Path) -> "SolverConfig":
        """Load the ``problem`` section of a YAML file."""
        config, _ = load_config(path)
        return config


class SolverSettings(BaseModel):
    """Numerical settings of the solver."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    progress_span: float = Field(
        30.0, gt=0.0, description="Integration span of the progress variable"
    )
    step: float = Field(0.025, gt=0.0, description="Fixed integration step")
    max_evaluations: int = Field(10000, gt=0, description="Derivative evaluation budget")
    trajectory_samples: int = Field(1000, ge=2, description="Samples of the simulated trajectory")
    collision_samples: int = Field(
        DEFAULT_COLLISION_SAMPLES, ge=2, description="Curve samples per collision penalty"
    )
    max_iterations: int = Field(50, gt=0, description="Optimizer iteration cap")
    max_function_evaluations: int = Field(4000, gt=0, description="Optimizer evaluation cap")
    xtol: float = Field(1e-4, gt=0.0, description="Optimizer parameter tolerance")
    ftol: float = Field(1e-6, gt=0.0, description="Optimizer penalty tolerance")


def load_config(path: str | Path) -> tuple[SolverConfig, SolverSettings]:
    """Load problem and solver settings from YAML.

    Args:
        path: YAML file with a ``problem`` mapping and an optional ``solver`` mapping

    Returns:
        Problem configuration and solver settings
    """
    with open(path) as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    if not isinstance(data, dict) or "problem" not in data:
        raise ValueError(f"Configuration file {path} has no 'problem' section")

    problem = data["problem"]
    solver = data.get("solver") or {}
    for name, section in (("problem", problem), ("solver", solver)):
        if not isinstance(section, dict):
            raise ValueError(f"Section '{name}' in {path} must be a mapping")

    config = SolverConfig(**problem)
    settings = SolverSettings(**solver)
    return config, settings
