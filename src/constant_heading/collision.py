"""Rotated rectangles and the separating-axis overlap measure."""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from constant_heading.data import Point2D

if TYPE_CHECKING:
    from shapely.geometry import Polygon


@dataclass(frozen=True, eq=False)
class Rectangle:
    """Four ordered vertices of a (possibly rotated) box, counter-clockwise."""

    vertices: np.ndarray  # shape (4, 2)

    @property
    def polygon(self) -> "Polygon":
        """Shapely polygon of the rectangle."""
        from shapely.geometry import Polygon

        return Polygon(self.vertices.tolist())


def rectangle_corners(
    centers: np.ndarray, width: float, height: float, rotation_deg: float
) -> np.ndarray:
    """Corners of equally sized boxes rotated about their centers.

    Args:
        centers: Box centers, shape (N, 2)
        width: Extent along the local x axis
        height: Extent along the local y axis
        rotation_deg: Counter-clockwise rotation [deg]

    Returns:
        Vertices, shape (N, 4, 2)
    """
    half_width = width / 2.0
    half_height = height / 2.0

    # Corners in the local frame, counter-clockwise from bottom-left
    local = np.array(
        [
            (-half_width, -half_height),
            (half_width, -half_height),
            (half_width, half_height),
            (-half_width, half_height),
        ]
    )

    rad = math.radians(rotation_deg)
    cos_r = math.cos(rad)
    sin_r = math.sin(rad)
    rotation = np.array([[cos_r, -sin_r], [sin_r, cos_r]])

    rotated = local @ rotation.T
    return np.asarray(centers, dtype=float)[:, None, :] + rotated[None, :, :]


def rotated_rectangle(
    center: Point2D, width: float, height: float, rotation_deg: float
) -> Rectangle:
    """Axis-aligned box of the given size rotated about its center."""
    centers = np.array([[center.x, center.y]])
    return Rectangle(rectangle_corners(centers, width, height, rotation_deg)[0])


def _edge_normals(vertices: np.ndarray) -> np.ndarray:
    """Unit normals of the edges ``v[i] -> v[i+1]``, shape (..., 4, 2)."""
    edges = np.roll(vertices, -1, axis=-2) - vertices
    normals = np.stack((-edges[..., 1], edges[..., 0]), axis=-1)
    return normals / np.linalg.norm(normals, axis=-1, keepdims=True)


def _interval_overlap(
    min_a: np.ndarray, max_a: np.ndarray, min_b: np.ndarray, max_b: np.ndarray
) -> np.ndarray:
    return np.maximum(0.0, np.minimum(max_a, max_b) - np.maximum(min_a, min_b))


def separating_widths(boxes: np.ndarray, region: np.ndarray) -> np.ndarray:
    """Separating-axis overlap of many boxes against one rectangle.

    For every candidate axis (the edge normals of both rectangles) the two
    rectangles are projected and their interval overlap measured. If any axis
    has zero overlap the pair is disjoint and scores 0, otherwise the pair
    scores the smallest overlap over all axes.

    Args:
        boxes: Box vertices, shape (N, 4, 2)
        region: Rectangle vertices, shape (4, 2)

    Returns:
        Overlap widths, shape (N,)
    """
    boxes = np.asarray(boxes, dtype=float)
    region = np.asarray(region, dtype=float)

    # Axes from the boxes' own edges: (N, 4, 2)
    box_axes = _edge_normals(boxes)
    box_on_own = np.einsum("nvk,nak->nav", boxes, box_axes)
    region_on_box = np.einsum("vk,nak->nav", region, box_axes)
    overlap_box_axes = _interval_overlap(
        box_on_own.min(axis=-1),
        box_on_own.max(axis=-1),
        region_on_box.min(axis=-1),
        region_on_box.max(axis=-1),
    )

    # Axes from the region's edges: (4, 2)
    region_axes = _edge_normals(region)
    box_on_region = np.einsum("nvk,ak->nav", boxes, region_axes)
    region_on_own = region @ region_axes.T  # (V, A)
    overlap_region_axes = _interval_overlap(
        box_on_region.min(axis=-1),
        box_on_region.max(axis=-1),
        region_on_own.min(axis=0)[None, :],
        region_on_own.max(axis=0)[None, :],
    )

    overlaps = np.concatenate((overlap_box_axes, overlap_region_axes), axis=1)
    separated = np.any(overlaps == 0.0, axis=1)
    return np.where(separated, 0.0, overlaps.min(axis=1))


def separating_width(rect_a: Rectangle, rect_b: Rectangle) -> float:
    """Minimum overlap of two rectangles over all separating axes, 0 if disjoint."""
    return float(separating_widths(rect_a.vertices[None, :, :], rect_b.vertices)[0])
