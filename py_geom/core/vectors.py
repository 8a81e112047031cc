"""
Vector-space primitives.

This module provides:
- The VectorSpace mixin shared by every addable, scalable quantity
- Vec2, the 2D point/vector type
- Angle, Distance and Area safety wrappers
- VectorTuple, the product of several vector spaces

Vector space laws (for all implementations):
    a + (b + c) == (a + b) + c
    a + b == b + a
    a + (-a) is the neutral element
    s * (a + b) == s * a + s * b
    (s + t) * a == s * a + t * a
    (s * t) * a == s * (t * a)
    1 * a == a
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Iterable, List, Tuple, Union

import numpy as np

TAU = 2 * math.pi


class VectorSpace:
    """Mixin deriving subtraction, scaling and division from ``__add__`` and ``_scaled``.

    Only values of the same type can be added, so a Distance never mixes with a
    raw float or an Area.
    """

    __slots__ = ()

    def __add__(self, other):
        raise NotImplementedError

    def _scaled(self, factor: float):
        raise NotImplementedError

    def __neg__(self):
        return self._scaled(-1.0)

    def __sub__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self + (-other)

    def __mul__(self, factor):
        if not isinstance(factor, numbers.Real):
            return NotImplemented
        return self._scaled(float(factor))

    __rmul__ = __mul__

    def __truediv__(self, divisor):
        if not isinstance(divisor, numbers.Real):
            return NotImplemented
        return self._scaled(1.0 / divisor)


@dataclass(frozen=True, order=True)
class Vec2(VectorSpace):
    """A 2D vector. Equality and ordering are exact and lexicographic."""

    x: float
    y: float

    def __add__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def _scaled(self, factor: float) -> Vec2:
        return Vec2(factor * self.x, factor * self.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=np.float64)


@dataclass(frozen=True, order=True)
class Angle(VectorSpace):
    """An angle, stored in radians and always normalised into [0, 2π)."""

    radians: float

    def __post_init__(self):
        normalized = float(self.radians) % TAU
        # Tiny negative inputs round up to exactly 2π
        if normalized >= TAU:
            normalized = 0.0
        object.__setattr__(self, "radians", normalized)

    def __add__(self, other: Angle) -> Angle:
        if not isinstance(other, Angle):
            return NotImplemented
        return Angle(self.radians + other.radians)

    def __sub__(self, other: Angle) -> Angle:
        if not isinstance(other, Angle):
            return NotImplemented
        return Angle(self.radians - other.radians)

    def __neg__(self) -> Angle:
        return Angle(-self.radians)

    def _scaled(self, factor: float) -> Angle:
        return Angle(factor * self.radians)

    @property
    def degrees(self) -> float:
        return self.radians / math.pi * 180

    def __repr__(self) -> str:
        return f"deg({self.degrees:.8f})"


def deg(degrees: float) -> Angle:
    """Degree-based Angle constructor."""
    return Angle(degrees / 360 * TAU)


def rad(radians: float) -> Angle:
    """Radian-based Angle constructor."""
    return Angle(radians)


@dataclass(frozen=True, order=True)
class Distance(VectorSpace):
    """Length safety wrapper."""

    value: float

    def __add__(self, other: Distance) -> Distance:
        if not isinstance(other, Distance):
            return NotImplemented
        return Distance(self.value + other.value)

    def _scaled(self, factor: float) -> Distance:
        return Distance(factor * self.value)


@dataclass(frozen=True, order=True)
class Area(VectorSpace):
    """Area safety wrapper. Signed areas are allowed."""

    value: float

    def __add__(self, other: Area) -> Area:
        if not isinstance(other, Area):
            return NotImplemented
        return Area(self.value + other.value)

    def _scaled(self, factor: float) -> Area:
        return Area(factor * self.value)


@dataclass(frozen=True)
class VectorTuple(VectorSpace):
    """Product of vector spaces, e.g. a (position, heading) pair.

    Components may be any VectorSpace values or plain floats.
    """

    components: Tuple

    def __post_init__(self):
        object.__setattr__(self, "components", tuple(self.components))

    def __add__(self, other: VectorTuple) -> VectorTuple:
        if not isinstance(other, VectorTuple):
            return NotImplemented
        if len(self.components) != len(other.components):
            raise ValueError(
                f"Cannot add vector tuples of length {len(self.components)} and {len(other.components)}"
            )
        return VectorTuple(tuple(a + b for a, b in zip(self.components, other.components)))

    def __neg__(self) -> VectorTuple:
        return VectorTuple(tuple(-c for c in self.components))

    def _scaled(self, factor: float) -> VectorTuple:
        return VectorTuple(tuple(factor * c for c in self.components))

    def __len__(self) -> int:
        return len(self.components)

    def __getitem__(self, index):
        return self.components[index]


def dot_product(a: Vec2, b: Vec2) -> float:
    return a.x * b.x + a.y * b.y


def det(a: Vec2, b: Vec2) -> float:
    """Determinant of the matrix with columns a and b.

    This is the signed area of the parallelogram spanned by both vectors.
    """
    return a.x * b.y - a.y * b.x


def norm_square(v: Vec2) -> float:
    """Squared Euclidean norm, cheap enough for sorting by distance."""
    return dot_product(v, v)


def norm(v: Vec2) -> Distance:
    """Euclidean norm."""
    return Distance(math.sqrt(norm_square(v)))


def polar(angle: Angle, distance: Distance) -> Vec2:
    """Construct a Vec2 from polar coordinates."""
    return Vec2(distance.value * math.cos(angle.radians), distance.value * math.sin(angle.radians))


PointsLike = Union[np.ndarray, Iterable[Union[Vec2, Tuple[float, float]]]]


def as_vec2_list(points: PointsLike) -> List[Vec2]:
    """
    Convert points to a list of Vec2.

    Args:
        points: An (N, 2) array, or an iterable of Vec2 / (x, y) pairs

    Returns:
        List of Vec2 in input order
    """
    if isinstance(points, np.ndarray):
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError(f"points must be an Nx2 array, got shape {points.shape}")
        return [Vec2(float(x), float(y)) for x, y in points]

    result = []
    for point in points:
        if isinstance(point, Vec2):
            result.append(point)
        else:
            x, y = point
            result.append(Vec2(float(x), float(y)))
    return result
