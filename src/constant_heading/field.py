"""Field regions and the collision penalty of a robot driving a curve."""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

from constant_heading.bezier import CubicBezierCurve
from constant_heading.collision import (
    Rectangle,
    rectangle_corners,
    rotated_rectangle,
    separating_widths,
)
from constant_heading.data import AllianceColor, Point2D

if TYPE_CHECKING:
    from constant_heading.config import SolverConfig

logger = logging.getLogger(__name__)

FIELD_SIZE = 144.0  # Field side length [in]
HALF_FIELD = FIELD_SIZE / 2.0

# Central obstacle (submersible) footprint before inflation [in]
OBSTACLE_WIDTH = 27.5
OBSTACLE_HEIGHT = 42.75

DEFAULT_COLLISION_SAMPLES = 100


class RegionKind(str, Enum):
    OBSTACLE = "obstacle"
    ALLIANCE_STRIP = "alliance_strip"
    OUTER_BOUNDARY = "outer_boundary"
    LEFT_STRIP = "left_strip"
    RIGHT_STRIP = "right_strip"


@dataclass(frozen=True)
class FieldRegion:
    """A fixed rectangle of the field the robot must stay out of.

    ``inflation`` is the tolerance already included in ``width``/``height``.
    """

    kind: RegionKind
    center: Point2D
    width: float
    height: float
    inflation: float = 0.0
    rotation_deg: float = 0.0

    @property
    def name(self) -> str:
        return self.kind.value

    def rectangle(self) -> Rectangle:
        return rotated_rectangle(self.center, self.width, self.height, self.rotation_deg)


def build_field_regions(
    alliance: AllianceColor, boundary_tolerance: float, submersible_tolerance: float
) -> list[FieldRegion]:
    """Create the five regions for one alliance side.

    Args:
        alliance: Alliance color, picks the outer wall
        boundary_tolerance: Clearance kept from walls and the alliance line [in]
        submersible_tolerance: Clearance kept from the central obstacle [in]

    Returns:
        Regions in a fixed order: obstacle, alliance strip, outer boundary, left, right
    """
    strip = 2.0 * boundary_tolerance
    outer_x = 0.0 if alliance == AllianceColor.BLUE else FIELD_SIZE

    return [
        FieldRegion(
            kind=RegionKind.OBSTACLE,
            center=Point2D(HALF_FIELD, HALF_FIELD),
            width=OBSTACLE_WIDTH + 2.0 * submersible_tolerance,
            height=OBSTACLE_HEIGHT + 2.0 * submersible_tolerance,
            inflation=submersible_tolerance,
        ),
        FieldRegion(
            kind=RegionKind.ALLIANCE_STRIP,
            center=Point2D(HALF_FIELD, HALF_FIELD),
            width=strip,
            height=FIELD_SIZE,
            inflation=boundary_tolerance,
        ),
        FieldRegion(
            kind=RegionKind.OUTER_BOUNDARY,
            center=Point2D(outer_x, HALF_FIELD),
            width=strip,
            height=FIELD_SIZE,
            inflation=boundary_tolerance,
        ),
        FieldRegion(
            kind=RegionKind.LEFT_STRIP,
            center=Point2D(HALF_FIELD, 0.0),
            width=FIELD_SIZE,
            height=strip,
            inflation=boundary_tolerance,
        ),
        FieldRegion(
            kind=RegionKind.RIGHT_STRIP,
            center=Point2D(HALF_FIELD, FIELD_SIZE),
            width=FIELD_SIZE,
            height=strip,
            inflation=boundary_tolerance,
        ),
    ]


class FieldCollisionModel:
    """Scores how deeply a robot footprint penetrates the field regions along a curve."""

    def __init__(
        self,
        regions: list[FieldRegion],
        robot_width: float,
        robot_height: float,
        weight: float,
        num_samples: int = DEFAULT_COLLISION_SAMPLES,
    ) -> None:
        """Initialize FieldCollisionModel.

        Args:
            regions: Regions to avoid
            robot_width: Footprint extent along the robot x axis [in]
            robot_height: Footprint extent along the robot y axis [in]
            weight: Scale applied to the accumulated overlap
            num_samples: Curve parameters sampled per evaluation
        """
        self.regions = regions
        self.robot_width = robot_width
        self.robot_height = robot_height
        self.weight = weight
        self.num_samples = num_samples
        self._region_vertices = [region.rectangle().vertices for region in regions]

    @classmethod
    def from_config(
        cls, config: "SolverConfig", num_samples: int = DEFAULT_COLLISION_SAMPLES
    ) -> "FieldCollisionModel":
        regions = build_field_regions(
            config.alliance_color, config.boundary_tolerance, config.submersible_tolerance
        )
        return cls(
            regions=regions,
            robot_width=config.robot_width,
            robot_height=config.robot_height,
            weight=config.c2 / num_samples,
            num_samples=num_samples,
        )

    def footprints(self, curve: CubicBezierCurve, theta: float) -> np.ndarray:
        """Robot rectangles at each sample, shape (num_samples, 4, 2)."""
        centers = curve.sample(self.num_samples)
        return rectangle_corners(
            centers, self.robot_width, self.robot_height, math.degrees(theta)
        )

    def _overlaps(self, curve: CubicBezierCurve, theta: float) -> np.ndarray:
        """Overlap per region and sample, shape (num_regions, num_samples)."""
        boxes = self.footprints(curve, theta)
        return np.stack([separating_widths(boxes, vertices) for vertices in self._region_vertices])

    def penalty(self, curve: CubicBezierCurve, theta: float) -> float:
        """Weighted sum of the overlap with every region over all samples.

        Zero when the sampled footprints never penetrate any region.
        """
        return float(self.weight * self._overlaps(curve, theta).sum())

    def region_penalties(self, curve: CubicBezierCurve, theta: float) -> dict[str, float]:
        """Penalty broken down by region."""
        overlaps = self._overlaps(curve, theta).sum(axis=1)
        return {
            region.name: float(self.weight * value)
            for region, value in zip(self.regions, overlaps, strict=True)
        }

    def min_clearance(self, curve: CubicBezierCurve, theta: float) -> float:
        """Smallest distance between the footprint and any region along the curve."""
        from shapely.geometry import Polygon

        region_polygons = [Rectangle(vertices).polygon for vertices in self._region_vertices]
        clearance = math.inf
        for box in self.footprints(curve, theta):
            footprint = Polygon(box.tolist())
            for polygon in region_polygons:
                clearance = min(clearance, footprint.distance(polygon))
        return float(clearance)
