"""Tests for bounding boxes."""

import math

import numpy as np
import pytest

from py_geom.core.bounding_box import (
    EMPTY_BOUNDING_BOX, AspectRatioBehavior, BoundingBox, bounding_box, bounding_box_polygon,
    inside_bounding_box, transform_bounding_box,
)
from py_geom.core.errors import PreconditionError
from py_geom.core.lines import Line
from py_geom.core.polygons import Polygon, PolygonOrientation, polygon_orientation
from py_geom.core.transformations import transform
from py_geom.core.vectors import Vec2


def box(x1, y1, x2, y2) -> BoundingBox:
    return BoundingBox(Vec2(x1, y1), Vec2(x2, y2))


class TestUnion:
    """Test the union monoid."""

    def test_neutral_element(self):
        b = box(0, 0, 1, 2)
        assert b | EMPTY_BOUNDING_BOX == b
        assert EMPTY_BOUNDING_BOX | b == b
        assert EMPTY_BOUNDING_BOX.is_empty
        assert EMPTY_BOUNDING_BOX.min_corner == Vec2(math.inf, math.inf)

    def test_commutative_and_associative(self):
        a, b, c = box(0, 0, 1, 1), box(-1, 2, 0, 3), box(5, -5, 6, 0)
        assert a | b == b | a
        assert (a | b) | c == a | (b | c)
        assert a | b | c == box(-1, -5, 6, 3)


class TestBoundingBoxOf:
    """Test bounding boxes of different geometries."""

    def test_vec2_and_line(self):
        assert bounding_box(Vec2(1, 2)) == box(1, 2, 1, 2)
        assert bounding_box(Line(Vec2(3, 0), Vec2(1, 2))) == box(1, 0, 3, 2)

    def test_polygon(self):
        polygon = Polygon([Vec2(0, 0), Vec2(4, 1), Vec2(2, 5)])
        assert bounding_box(polygon) == box(0, 0, 4, 5)

    def test_collections(self):
        geometry = [Vec2(1, 1), (Line(Vec2(-1, 0), Vec2(0, 0)), None), box(2, 2, 3, 3)]
        assert bounding_box(geometry) == box(-1, 0, 3, 3)
        assert bounding_box([]) == EMPTY_BOUNDING_BOX
        assert bounding_box(None) == EMPTY_BOUNDING_BOX

    def test_array(self):
        points = np.array([[0.5, 2.0], [-1.0, 3.0], [4.0, -2.0]])
        assert bounding_box(points) == box(-1, -2, 4, 3)
        assert bounding_box(np.zeros((0, 2))) == EMPTY_BOUNDING_BOX

    def test_unsupported(self):
        with pytest.raises(TypeError):
            bounding_box("box")


class TestBoxProperties:
    """Test accessors and membership."""

    def test_accessors(self):
        b = box(0, 0, 4, 2)
        assert b.width == 4
        assert b.height == 2
        assert b.center == Vec2(2, 1)
        assert b.corners == (Vec2(0, 0), Vec2(4, 0), Vec2(4, 2), Vec2(0, 2))

    def test_polygon_is_positive(self):
        polygon = bounding_box_polygon(box(0, 0, 4, 2))
        assert polygon == Polygon([Vec2(0, 0), Vec2(4, 0), Vec2(4, 2), Vec2(0, 2)])
        assert polygon_orientation(polygon) is PolygonOrientation.POSITIVE

    def test_inside_includes_boundary(self):
        b = box(0, 0, 10, 10)
        assert inside_bounding_box(Vec2(5, 5), b)
        assert inside_bounding_box(Vec2(0, 10), b)
        assert not inside_bounding_box(Vec2(10.5, 5), b)


class TestTransformBoundingBox:
    """Test fitting one box into another."""

    def test_ignore_aspect_ratio(self):
        source, target = box(0, 0, 1, 2), box(10, 10, 30, 20)
        t = transform_bounding_box(source, target, AspectRatioBehavior.IGNORE)
        assert transform(t, Vec2(0, 0)) == Vec2(10, 10)
        assert transform(t, Vec2(1, 2)) == Vec2(30, 20)

    def test_maintain_aspect_ratio(self):
        source, target = box(0, 0, 1, 2), box(10, 10, 30, 20)
        t = transform_bounding_box(source, target, AspectRatioBehavior.MAINTAIN)
        fitted = bounding_box([transform(t, c) for c in source.corners])
        assert fitted.center == target.center
        assert fitted.height == pytest.approx(10)
        assert fitted.width == pytest.approx(5)

    def test_degenerate_source(self):
        with pytest.raises(PreconditionError):
            transform_bounding_box(box(0, 0, 0, 1), box(0, 0, 1, 1))
