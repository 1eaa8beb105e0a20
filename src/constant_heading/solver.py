"""Constant heading trajectory solver.

Pipeline of one ``solve`` call:

    optimize   minimise the field collision penalty over {theta, P1, P2}
    simulate   integrate the constant heading motion model along the curve
    estimate   derive the traversal (T1) and rotation (T2) time estimates
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Any

import numpy as np
from scipy.optimize import minimize

from constant_heading.bezier import CubicBezierCurve
from constant_heading.config import SolverConfig, SolverSettings
from constant_heading.data import Point2D, SearchBounds, SearchParameters
from constant_heading.dynamics import ConstantHeadingDynamics
from constant_heading.field import FIELD_SIZE, HALF_FIELD, FieldCollisionModel
from constant_heading.integration import FixedStepIntegrator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptimizationOutcome:
    """Best parameters found by the optimizer and how they were reached."""

    parameters: SearchParameters
    penalty: float
    initial_penalty: float
    evaluations: int
    improved: bool


@dataclass(frozen=True, eq=False)
class SimulatedTrajectory:
    """Discrete samples of the simulated motion."""

    progress: np.ndarray  # shape (n,)
    positions: np.ndarray  # shape (n, 2)
    evaluations: int
    inversion_fallbacks: int


@dataclass(frozen=True)
class TrajectoryResult:
    """Final answer of one solve."""

    theta: float
    curve: CubicBezierCurve
    t1: float  # Path traversal time estimate [s]
    t2: float  # Rotation time estimate [s]
    penalty: float
    inversion_fallbacks: int
    min_clearance: float

    @property
    def total_time(self) -> float:
        return self.t1 + self.t2

    @property
    def accurate(self) -> bool:
        """False when curve inversion fell back during simulation."""
        return self.inversion_fallbacks == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "theta": self.theta,
            "control_points": [
                {"x": point.x, "y": point.y} for point in self.curve.control_points
            ],
            "arc_length": self.curve.arc_length,
            "t1": self.t1,
            "t2": self.t2,
            "total_time": self.total_time,
            "penalty": self.penalty,
            "min_clearance": self.min_clearance,
            "inversion_fallbacks": self.inversion_fallbacks,
            "accurate": self.accurate,
        }


class ConstantHeadingSolver:
    """Finds a collision-avoiding Bezier curve and constant heading between two poses.

    The solver holds only its configuration. Collision models, motion models
    and integrators are created per call, so ``solve`` is a pure function of
    the configuration.
    """

    def __init__(self, config: SolverConfig, settings: SolverSettings | None = None) -> None:
        """Initialize ConstantHeadingSolver.

        Args:
            config: Problem configuration
            settings: Numerical settings, defaults when omitted
        """
        self.config = config
        self.settings = settings or SolverSettings()

    @property
    def bounds(self) -> SearchBounds:
        """Box bounds of ``[theta, p1.x, p1.y, p2.x, p2.y]``."""
        margin = self.config.control_point_margin
        return SearchBounds(
            lower=(0.0, margin, margin, margin, margin),
            upper=(
                2.0 * math.pi,
                HALF_FIELD - margin,
                FIELD_SIZE - margin,
                HALF_FIELD - margin,
                FIELD_SIZE - margin,
            ),
        )

    def initial_guess(self) -> SearchParameters:
        """Final heading with both control points on the start column, clipped into bounds."""
        p0 = self.config.p0
        p3 = self.config.p3
        guess = SearchParameters(
            theta=self.config.theta_final,
            p1=Point2D(p0.x, (p0.y + p3.y) / 2.0),
            p2=Point2D(p0.x, p3.y),
        )
        return SearchParameters.from_vector(self.bounds.clip(guess.to_vector()))

    def build_curve(self, parameters: SearchParameters) -> CubicBezierCurve:
        return CubicBezierCurve(self.config.p0, parameters.p1, parameters.p2, self.config.p3)

    def optimize(self) -> OptimizationOutcome:
        """Minimise the collision penalty over the search box.

        Always returns a feasible parameter vector. When no collision-free curve
        exists the least penalised vector found is returned, and when the
        optimizer cannot improve on the initial guess the initial guess is kept.
        """
        collision_model = FieldCollisionModel.from_config(
            self.config, self.settings.collision_samples
        )
        bounds = self.bounds

        def objective(vector: np.ndarray) -> float:
            parameters = SearchParameters.from_vector(bounds.clip(vector))
            return collision_model.penalty(self.build_curve(parameters), parameters.theta)

        initial = self.initial_guess()
        x0 = initial.to_vector()
        initial_penalty = objective(x0)
        logger.info(f"Optimizing from initial guess with penalty {initial_penalty:.4f}")

        result = minimize(
            objective,
            x0,
            method="Powell",
            bounds=bounds.as_pairs(),
            options={
                "maxiter": self.settings.max_iterations,
                "maxfev": self.settings.max_function_evaluations,
                "xtol": self.settings.xtol,
                "ftol": self.settings.ftol,
            },
        )

        best_vector = bounds.clip(np.asarray(result.x, dtype=float))
        best_penalty = objective(best_vector)
        if best_penalty < initial_penalty:
            outcome = OptimizationOutcome(
                parameters=SearchParameters.from_vector(best_vector),
                penalty=best_penalty,
                initial_penalty=initial_penalty,
                evaluations=int(result.nfev),
                improved=True,
            )
        else:
            logger.warning(
                f"Optimizer did not improve on the initial guess ({result.message}); keeping it"
            )
            outcome = OptimizationOutcome(
                parameters=initial,
                penalty=initial_penalty,
                initial_penalty=initial_penalty,
                evaluations=int(result.nfev),
                improved=False,
            )

        folded = self.fold_heading(outcome.parameters.theta)
        if folded != outcome.parameters.theta:
            logger.debug(f"Folded heading {outcome.parameters.theta:.4f} to {folded:.4f}")
            outcome = replace(outcome, parameters=replace(outcome.parameters, theta=folded))

        logger.info(
            f"Optimization finished: penalty={outcome.penalty:.4f} "
            f"theta={outcome.parameters.theta:.4f} evaluations={outcome.evaluations}"
        )
        return outcome

    def simulate(self, theta: float, curve: CubicBezierCurve) -> SimulatedTrajectory:
        """Integrate the motion model from the start point and sample it.

        Raises:
            EvaluationBudgetExceededError: The integrator ran out of evaluations
        """
        dynamics = ConstantHeadingDynamics(
            theta=theta,
            v_max=self.config.v_max,
            mass=self.config.mass,
            mu_k=self.config.mu_k,
            c1=self.config.c1,
            curve=curve,
        )
        integrator = FixedStepIntegrator(self.settings.step, self.settings.max_evaluations)
        dense = integrator.integrate(
            dynamics, self.config.p0.to_array(), self.settings.progress_span
        )
        progress, positions = dense.sample(self.settings.trajectory_samples)

        if dynamics.inversion_fallbacks:
            logger.warning(
                f"Curve inversion fell back in {dynamics.inversion_fallbacks} of "
                f"{dense.evaluations} derivative evaluations"
            )

        return SimulatedTrajectory(
            progress=progress,
            positions=positions,
            evaluations=dense.evaluations,
            inversion_fallbacks=dynamics.inversion_fallbacks,
        )

    def find_t1(self, trajectory: np.ndarray, target_arc_length: float) -> float:
        """Progress at which the sampled position's distance from the origin is closest
        to the arc length.

        Args:
            trajectory: Sampled positions, shape (n, 2), evenly spaced over the span
            target_arc_length: Arc length of the curve [in]
        """
        distances = np.abs(np.linalg.norm(trajectory, axis=1) - target_arc_length)
        index = int(np.argmin(distances))
        return index * self.settings.progress_span / (len(trajectory) - 1)

    def fold_heading(self, theta: float) -> float:
        """Heading equivalent to ``theta`` for collisions with the shortest rotation time.

        A rectangle turned by pi covers the same area, so ``theta`` and ``theta +- pi``
        score the same penalty. The one inside [0, 2pi] needing the least turning wins.
        """
        candidates = [
            candidate
            for candidate in (theta, theta - math.pi, theta + math.pi)
            if 0.0 <= candidate <= 2.0 * math.pi
        ]
        return min(candidates, key=self.find_t2)

    def find_t2(self, theta: float) -> float:
        """Time to turn from the initial heading to ``theta`` and then to the final heading."""
        turn = abs(self.config.theta_final - theta) + abs(self.config.theta_initial - theta)
        return turn / self.config.angular_velocity

    def solve(self) -> TrajectoryResult:
        """Optimize, simulate and estimate timing."""
        outcome = self.optimize()
        theta = outcome.parameters.theta
        curve = self.build_curve(outcome.parameters)

        trajectory = self.simulate(theta, curve)
        t1 = self.find_t1(trajectory.positions, curve.arc_length)
        t2 = self.find_t2(theta)
        logger.info(f"Arc length {curve.arc_length:.2f} in, T1={t1:.3f} s, T2={t2:.3f} s")

        collision_model = FieldCollisionModel.from_config(
            self.config, self.settings.collision_samples
        )
        return TrajectoryResult(
            theta=theta,
            curve=curve,
            t1=t1,
            t2=t2,
            penalty=outcome.penalty,
            inversion_fallbacks=trajectory.inversion_fallbacks,
            min_clearance=collision_model.min_clearance(curve, theta),
        )


def solve(config: SolverConfig, settings: SolverSettings | None = None) -> TrajectoryResult:
    """Solve one trajectory problem."""
    return ConstantHeadingSolver(config, settings).solve()
