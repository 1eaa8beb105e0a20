"""Fixed-step numerical integration with dense output."""

import logging
from collections.abc import Callable

import numpy as np
from scipy.interpolate import CubicHermiteSpline

from constant_heading.exceptions import EvaluationBudgetExceededError

logger = logging.getLogger(__name__)

DerivativeFunc = Callable[[float, np.ndarray], np.ndarray]


def rk4_step(
    progress: float,
    state: np.ndarray,
    derivative_func: DerivativeFunc,
    h: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Runge-Kutta 4次法による1ステップ積分.

    Args:
        progress: Independent variable at the start of the step
        state: State at the start of the step
        derivative_func: f(progress, state) -> d state / d progress
        h: Step size

    Returns:
        (state after the step, derivative at the start of the step)
    """
    k1 = derivative_func(progress, state)
    k2 = derivative_func(progress + h / 2, state + k1 * (h / 2))
    k3 = derivative_func(progress + h / 2, state + k2 * (h / 2))
    k4 = derivative_func(progress + h, state + k3 * h)

    # y_{n+1} = y_n + (h/6) * (k1 + 2*k2 + 2*k3 + k4)
    new_state = state + (k1 + 2.0 * k2 + 2.0 * k3 + k4) * (h / 6)
    return new_state, k1


class _BudgetedDerivative:
    """Counts derivative evaluations and fails once the budget is spent."""

    def __init__(self, derivative_func: DerivativeFunc, max_evaluations: int) -> None:
        self.derivative_func = derivative_func
        self.max_evaluations = max_evaluations
        self.evaluations = 0

    def __call__(self, progress: float, state: np.ndarray) -> np.ndarray:
        if self.evaluations >= self.max_evaluations:
            raise EvaluationBudgetExceededError(self.max_evaluations)
        self.evaluations += 1
        return np.asarray(self.derivative_func(progress, state), dtype=float)


class DenseTrajectory:
    """Continuous solution of an integration, re-sampleable anywhere in its span."""

    def __init__(
        self,
        progress: np.ndarray,
        states: np.ndarray,
        derivatives: np.ndarray,
        evaluations: int,
    ) -> None:
        self.progress = progress
        self.states = states
        self.evaluations = evaluations
        self._spline = CubicHermiteSpline(progress, states, derivatives, axis=0)

    @property
    def start(self) -> float:
        return float(self.progress[0])

    @property
    def end(self) -> float:
        return float(self.progress[-1])

    def __call__(self, progress: float | np.ndarray) -> np.ndarray:
        """State at ``progress`` by cubic Hermite interpolation between steps."""
        query = np.asarray(progress, dtype=float)
        if np.any(query < self.start) or np.any(query > self.end):
            msg = f"Progress outside integrated span [{self.start}, {self.end}]"
            raise ValueError(msg)
        return self._spline(query)

    def sample(self, num_samples: int) -> tuple[np.ndarray, np.ndarray]:
        """Evenly spaced samples over the whole span.

        Returns:
            (progress values shape (n,), states shape (n, dim))
        """
        grid = np.linspace(self.start, self.end, num_samples)
        return grid, self(grid)


class FixedStepIntegrator:
    """Explicit fourth-order Runge-Kutta integrator with a fixed step.

    Every call to ``integrate`` owns its own step buffers and evaluation
    counter, so one instance can serve several problems one after another.
    """

    def __init__(self, step: float, max_evaluations: int) -> None:
        """Initialize FixedStepIntegrator.

        Args:
            step: Nominal step size; shrunk slightly so the span is covered exactly
            max_evaluations: Derivative evaluation budget per integration
        """
        if step <= 0.0:
            raise ValueError("step must be positive")
        self.step = step
        self.max_evaluations = max_evaluations

    def integrate(
        self,
        derivative_func: DerivativeFunc,
        initial_state: np.ndarray,
        span: float,
        start: float = 0.0,
    ) -> DenseTrajectory:
        """Integrate from ``start`` to ``start + span``.

        Raises:
            EvaluationBudgetExceededError: The derivative budget ran out
        """
        num_steps = max(1, int(round(span / self.step)))
        h = span / num_steps
        budgeted = _BudgetedDerivative(derivative_func, self.max_evaluations)

        progress = start + h * np.arange(num_steps + 1)
        states = np.empty((num_steps + 1, len(initial_state)))
        derivatives = np.empty_like(states)
        states[0] = initial_state

        for i in range(num_steps):
            states[i + 1], derivatives[i] = rk4_step(progress[i], states[i], budgeted, h)
        derivatives[-1] = budgeted(progress[-1], states[-1])

        logger.debug(f"Integrated {num_steps} steps with {budgeted.evaluations} evaluations")
        return DenseTrajectory(progress, states, derivatives, budgeted.evaluations)
