"""
Axis-aligned bounding boxes.

Boxes form a monoid under union: the empty box (inverted infinite corners) is
the neutral element, so bounding boxes of collections are just folds.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from functools import reduce, singledispatch
from typing import Tuple

import numpy as np

from .errors import PreconditionError
from .lines import Line
from .polygons import Polygon
from .transformations import Transformation, compose, scale_around, translate
from .vectors import Vec2


@dataclass(frozen=True)
class BoundingBox:
    """Box spanned by its lower-left and upper-right corners."""

    min_corner: Vec2
    max_corner: Vec2

    @classmethod
    def empty(cls) -> BoundingBox:
        return cls(Vec2(math.inf, math.inf), Vec2(-math.inf, -math.inf))

    @classmethod
    def from_corners(cls, p: Vec2, q: Vec2) -> BoundingBox:
        """Box spanned by two arbitrary opposite corners."""
        return cls(Vec2(min(p.x, q.x), min(p.y, q.y)), Vec2(max(p.x, q.x), max(p.y, q.y)))

    def union(self, other: BoundingBox) -> BoundingBox:
        return BoundingBox(
            Vec2(min(self.min_corner.x, other.min_corner.x), min(self.min_corner.y, other.min_corner.y)),
            Vec2(max(self.max_corner.x, other.max_corner.x), max(self.max_corner.y, other.max_corner.y)),
        )

    def __or__(self, other: BoundingBox) -> BoundingBox:
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return self.union(other)

    @property
    def is_empty(self) -> bool:
        return self.min_corner.x > self.max_corner.x or self.min_corner.y > self.max_corner.y

    @property
    def width(self) -> float:
        return self.max_corner.x - self.min_corner.x

    @property
    def height(self) -> float:
        return self.max_corner.y - self.min_corner.y

    @property
    def center(self) -> Vec2:
        return 0.5 * (self.min_corner + self.max_corner)

    @property
    def corners(self) -> Tuple[Vec2, Vec2, Vec2, Vec2]:
        """Corners in counter-clockwise order, starting at the lower left."""
        x1, y1 = self.min_corner
        x2, y2 = self.max_corner
        return (Vec2(x1, y1), Vec2(x2, y1), Vec2(x2, y2), Vec2(x1, y2))


EMPTY_BOUNDING_BOX = BoundingBox.empty()


@singledispatch
def bounding_box(geometry) -> BoundingBox:
    """
    Smallest axis-aligned box containing a geometric object.

    Supports Vec2, Line, Polygon, BoundingBox, (N, 2) arrays, None (empty), and
    lists/tuples of any of these.
    """
    raise TypeError(f"Don't know the bounding box of {type(geometry).__name__}")


@bounding_box.register(BoundingBox)
def _bounding_box_of_box(box: BoundingBox) -> BoundingBox:
    return box


@bounding_box.register(Vec2)
def _bounding_box_of_vec2(v: Vec2) -> BoundingBox:
    return BoundingBox(v, v)


@bounding_box.register(Line)
def _bounding_box_of_line(line: Line) -> BoundingBox:
    return BoundingBox.from_corners(line.start, line.end)


@bounding_box.register(Polygon)
def _bounding_box_of_polygon(polygon: Polygon) -> BoundingBox:
    return bounding_box(list(polygon.corners))


@bounding_box.register(type(None))
def _bounding_box_of_none(_) -> BoundingBox:
    return EMPTY_BOUNDING_BOX


@bounding_box.register(list)
@bounding_box.register(tuple)
def _bounding_box_of_collection(items) -> BoundingBox:
    return reduce(BoundingBox.union, (bounding_box(item) for item in items), EMPTY_BOUNDING_BOX)


@bounding_box.register(np.ndarray)
def _bounding_box_of_array(points: np.ndarray) -> BoundingBox:
    if points.ndim != 2 or points.shape[1] != 2:
        raise ValueError(f"points must be an Nx2 array, got shape {points.shape}")
    if len(points) == 0:
        return EMPTY_BOUNDING_BOX
    lower = points.min(axis=0)
    upper = points.max(axis=0)
    return BoundingBox(Vec2(float(lower[0]), float(lower[1])), Vec2(float(upper[0]), float(upper[1])))


def bounding_box_polygon(geometry) -> Polygon:
    """The bounding box of a geometry as a positively oriented polygon."""
    return Polygon(bounding_box(geometry).corners)


def inside_bounding_box(point: Vec2, box: BoundingBox) -> bool:
    """Whether a point lies in a box; the boundary counts as inside."""
    return (
        box.min_corner.x <= point.x <= box.max_corner.x
        and box.min_corner.y <= point.y <= box.max_corner.y
    )


class AspectRatioBehavior(Enum):
    MAINTAIN = "maintain"  # Scale uniformly so the source fits into the target
    IGNORE = "ignore"      # Stretch each axis independently


def transform_bounding_box(
    source: BoundingBox,
    target: BoundingBox,
    behavior: AspectRatioBehavior = AspectRatioBehavior.MAINTAIN,
) -> Transformation:
    """
    Transformation that fits the source box into the target box.

    The source center is moved onto the target center, then scaled around it.

    Raises:
        PreconditionError: If the source box has zero width or height
    """
    if source.width == 0 or source.height == 0:
        raise PreconditionError(f"Cannot scale degenerate bounding box {source}")

    x_scale = target.width / source.width
    y_scale = target.height / source.height
    if behavior is AspectRatioBehavior.MAINTAIN:
        x_scale = y_scale = min(x_scale, y_scale)

    return compose(
        scale_around(target.center, x_scale, y_scale),
        translate(target.center - source.center),
    )
