"""Tests for rotated rectangles and the separating-axis overlap."""

import numpy as np
import pytest

from constant_heading.collision import (
    Rectangle,
    rectangle_corners,
    rotated_rectangle,
    separating_width,
    separating_widths,
)
from constant_heading.data import Point2D


class TestRotatedRectangle:
    """Tests for rectangle construction."""

    def test_unrotated_corners(self) -> None:
        """Test zero rotation gives the axis-aligned corners."""
        rect = rotated_rectangle(Point2D(5.0, 3.0), 4.0, 2.0, 0.0)

        expected = np.array([(3.0, 2.0), (7.0, 2.0), (7.0, 4.0), (3.0, 4.0)])
        np.testing.assert_array_equal(rect.vertices, expected)

    def test_quarter_turn_swaps_extents(self) -> None:
        rect = rotated_rectangle(Point2D(0.0, 0.0), 4.0, 2.0, 90.0)

        xs = rect.vertices[:, 0]
        ys = rect.vertices[:, 1]
        assert xs.max() - xs.min() == pytest.approx(2.0)
        assert ys.max() - ys.min() == pytest.approx(4.0)

    def test_rotation_keeps_center(self) -> None:
        rect = rotated_rectangle(Point2D(10.0, -4.0), 6.0, 3.0, 33.0)
        assert rect.vertices.mean(axis=0) == pytest.approx([10.0, -4.0])

    def test_batched_corners(self) -> None:
        centers = np.array([(0.0, 0.0), (10.0, 10.0)])
        corners = rectangle_corners(centers, 2.0, 2.0, 0.0)

        assert corners.shape == (2, 4, 2)
        expected = [(9.0, 9.0), (11.0, 9.0), (11.0, 11.0), (9.0, 11.0)]
        np.testing.assert_array_equal(corners[1], expected)

    def test_polygon(self) -> None:
        rect = rotated_rectangle(Point2D(1.0, 1.0), 4.0, 2.0, 30.0)
        assert rect.polygon.area == pytest.approx(8.0)


class TestSeparatingWidth:
    """Tests for the separating-axis overlap measure."""

    def test_disjoint_rectangles(self) -> None:
        """Test far apart rectangles score exactly zero."""
        a = rotated_rectangle(Point2D(0.0, 0.0), 2.0, 2.0, 0.0)
        b = rotated_rectangle(Point2D(100.0, 0.0), 2.0, 2.0, 0.0)
        assert separating_width(a, b) == 0.0

    def test_touching_rectangles(self) -> None:
        a = rotated_rectangle(Point2D(0.0, 0.0), 2.0, 2.0, 0.0)
        b = rotated_rectangle(Point2D(2.0, 0.0), 2.0, 2.0, 0.0)
        assert separating_width(a, b) == 0.0

    def test_identical_rectangles(self) -> None:
        """Test full overlap scores the smaller rectangle extent."""
        # Both projections coincide, so the overlap is the full width, not half of it
        a = rotated_rectangle(Point2D(3.0, 3.0), 2.0, 5.0, 20.0)
        b = rotated_rectangle(Point2D(3.0, 3.0), 2.0, 5.0, 20.0)
        assert separating_width(a, b) == pytest.approx(2.0)

    def test_partial_overlap(self) -> None:
        a = rotated_rectangle(Point2D(0.0, 0.0), 2.0, 2.0, 0.0)
        b = rotated_rectangle(Point2D(1.5, 0.0), 2.0, 2.0, 0.0)
        assert separating_width(a, b) == pytest.approx(0.5)

    def test_symmetric(self) -> None:
        a = rotated_rectangle(Point2D(0.0, 0.0), 4.0, 2.0, 45.0)
        b = rotated_rectangle(Point2D(1.0, 1.0), 3.0, 3.0, 0.0)
        assert separating_width(a, b) == pytest.approx(separating_width(b, a))

    def test_rotated_box_clears_corner(self) -> None:
        """Test a diamond next to a square corner is separated by a diagonal axis."""
        square = rotated_rectangle(Point2D(0.0, 0.0), 2.0, 2.0, 0.0)
        # Axis-aligned bounding boxes overlap, the shapes do not
        diamond = rotated_rectangle(Point2D(2.3, 2.3), 2.0, 2.0, 45.0)
        assert separating_width(square, diamond) == 0.0

    def test_batched_matches_pairwise(self) -> None:
        region = rotated_rectangle(Point2D(0.0, 0.0), 10.0, 4.0, 0.0)
        centers = np.array([(0.0, 0.0), (4.0, 1.0), (20.0, 0.0)])
        boxes = rectangle_corners(centers, 2.0, 3.0, 15.0)

        batched = separating_widths(boxes, region.vertices)

        for box, value in zip(boxes, batched):
            assert value == pytest.approx(separating_width(Rectangle(box), region))
        assert batched[2] == 0.0
        assert batched[0] > 0.0
