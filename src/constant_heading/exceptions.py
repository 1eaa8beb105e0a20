"""Exceptions raised by the constant heading planner."""


class ConstantHeadingError(Exception):
    """Base class for planner errors."""


class IntegrationError(ConstantHeadingError):
    """Raised when the motion model cannot be integrated."""


class EvaluationBudgetExceededError(IntegrationError):
    """Raised when the integrator exhausts its derivative evaluation budget."""

    def __init__(self, budget: int) -> None:
        self.budget = budget
        super().__init__(f"Derivative evaluation budget exceeded ({budget} evaluations)")
