"""
Affine transformations of the plane.

A Transformation is the 2x3 matrix

    / a b \\ + / c \\
    \\ d e /   \\ f /

Composition follows function composition: ``(t1 @ t2)`` applied to a point
first applies t2, then t1. So ``rotate(angle) @ translate(v)`` translates before
rotating.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import reduce, singledispatch
from typing import TYPE_CHECKING, Optional

from .errors import SingularTransformationError
from .vectors import Angle, Vec2, rad

if TYPE_CHECKING:
    from .lines import Line


@dataclass(frozen=True)
class Transformation:
    """Affine transformation: linear part (a b / d e) plus translation (c / f)."""

    a: float
    b: float
    c: float
    d: float
    e: float
    f: float

    def __matmul__(self, other: Transformation) -> Transformation:
        if not isinstance(other, Transformation):
            return NotImplemented
        return transformation_product(self, other)

    @property
    def determinant(self) -> float:
        return self.a * self.e - self.b * self.d

    def apply(self, v: Vec2) -> Vec2:
        return Vec2(self.a * v.x + self.b * v.y + self.c, self.d * v.x + self.e * v.y + self.f)


IDENTITY = Transformation(1.0, 0.0, 0.0,
                          0.0, 1.0, 0.0)


def identity_transformation() -> Transformation:
    return IDENTITY


def transformation_product(t1: Transformation, t2: Transformation) -> Transformation:
    """Matrix product; the result applies t2 first, then t1."""
    return Transformation(
        t1.a * t2.a + t1.b * t2.d, t1.a * t2.b + t1.b * t2.e, t1.a * t2.c + t1.b * t2.f + t1.c,
        t1.d * t2.a + t1.e * t2.d, t1.d * t2.b + t1.e * t2.e, t1.d * t2.c + t1.e * t2.f + t1.f,
    )


def compose(*transformations: Transformation) -> Transformation:
    """Chain transformations; the last one is applied first."""
    return reduce(transformation_product, transformations, IDENTITY)


def inverse(t: Transformation) -> Transformation:
    """
    Invert a transformation.

    Raises:
        SingularTransformationError: If the linear part has determinant zero
    """
    determinant = t.determinant
    if determinant == 0:
        raise SingularTransformationError(f"Cannot invert singular transformation {t}")
    x = 1 / determinant
    return Transformation(
        x * t.e, x * -t.b, x * (-t.e * t.c + t.b * t.f),
        x * -t.d, x * t.a, x * (t.d * t.c - t.a * t.f),
    )


def translate(v: Vec2) -> Transformation:
    return Transformation(1.0, 0.0, v.x,
                          0.0, 1.0, v.y)


def rotate(angle: Angle) -> Transformation:
    """Rotate around the origin, counter-clockwise for positive angles."""
    cos_a = math.cos(angle.radians)
    sin_a = math.sin(angle.radians)
    return Transformation(cos_a, -sin_a, 0.0,
                          sin_a, cos_a, 0.0)


def rotate_around(pivot: Vec2, angle: Angle) -> Transformation:
    return compose(translate(pivot), rotate(angle), inverse(translate(pivot)))


def scale(x: float, y: Optional[float] = None) -> Transformation:
    """Scale along the axes; uniform if y is omitted."""
    if y is None:
        y = x
    return Transformation(x, 0.0, 0.0,
                          0.0, y, 0.0)


def scale_around(pivot: Vec2, x: float, y: Optional[float] = None) -> Transformation:
    return compose(translate(pivot), scale(x, y), inverse(translate(pivot)))


def mirror_x() -> Transformation:
    """Mirror along the x axis, i.e. flip x."""
    return scale(-1.0, 1.0)


def mirror_y() -> Transformation:
    """Mirror along the y axis, i.e. flip y."""
    return scale(1.0, -1.0)


def mirror(line: Line) -> Transformation:
    """Mirror across the infinite continuation of a line."""
    p = line.start
    angle = rad(math.atan2(line.end.y - line.start.y, line.end.x - line.start.x))
    return compose(
        translate(p),
        rotate(angle),
        mirror_y(),
        inverse(rotate(angle)),
        inverse(translate(p)),
    )


@singledispatch
def _transform_geometry(geometry, transformation: Transformation):
    raise TypeError(f"Don't know how to transform {type(geometry).__name__}")


register_transform = _transform_geometry.register


def transform(transformation: Transformation, geometry):
    """
    Apply a transformation to a geometric object.

    Supports Vec2, Transformation (composition, geometry applied first), lists
    and tuples of transformable objects, and every type registered with
    ``register_transform`` (Line, Polygon).
    """
    return _transform_geometry(geometry, transformation)


@register_transform(Vec2)
def _transform_vec2(v: Vec2, transformation: Transformation) -> Vec2:
    return transformation.apply(v)


@register_transform(Transformation)
def _transform_transformation(t: Transformation, transformation: Transformation) -> Transformation:
    return transformation_product(transformation, t)


@register_transform(list)
def _transform_list(items: list, transformation: Transformation) -> list:
    return [transform(transformation, item) for item in items]


@register_transform(tuple)
def _transform_tuple(items: tuple, transformation: Transformation) -> tuple:
    return tuple(transform(transformation, item) for item in items)
