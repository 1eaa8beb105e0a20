"""Plain data structures shared by the planner."""

import math
from dataclasses import dataclass
from enum import Enum

import numpy as np


@dataclass(frozen=True)
class Point2D:
    """Field coordinate [in]."""

    x: float
    y: float

    def to_array(self) -> np.ndarray:
        """numpy配列に変換 (x, y)."""
        return np.array([self.x, self.y], dtype=float)

    def distance_to(self, other: "Point2D") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


class AllianceColor(str, Enum):
    """Alliance side, selects which outer wall is a boundary strip."""

    BLUE = "blue"
    RED = "red"


@dataclass(frozen=True)
class SearchParameters:
    """Decision vector of the optimizer: heading and the two free control points."""

    theta: float  # Constant heading [rad]
    p1: Point2D
    p2: Point2D

    def to_vector(self) -> np.ndarray:
        """Flatten to ``[theta, p1.x, p1.y, p2.x, p2.y]``."""
        return np.array([self.theta, self.p1.x, self.p1.y, self.p2.x, self.p2.y], dtype=float)

    @classmethod
    def from_vector(cls, vector: np.ndarray) -> "SearchParameters":
        theta, p1x, p1y, p2x, p2y = (float(v) for v in vector)
        return cls(theta=theta, p1=Point2D(p1x, p1y), p2=Point2D(p2x, p2y))


@dataclass(frozen=True)
class SearchBounds:
    """Box bounds of the search space."""

    lower: tuple[float, ...]
    upper: tuple[float, ...]

    def clip(self, vector: np.ndarray) -> np.ndarray:
        return np.clip(vector, self.lower, self.upper)

    def as_pairs(self) -> list[tuple[float, float]]:
        """Bounds in the ``[(lo, hi), ...]`` form scipy expects."""
        return list(zip(self.lower, self.upper, strict=True))
