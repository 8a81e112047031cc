"""
Line segment algebra.

This module handles:
- Directed lines (start -> end) and their angle, length and direction
- Resizing, centering and perpendicular construction
- Line/line intersection with classification of where the hit lies
- Optical reflection of rays and the billiard process built on it
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Iterator, NamedTuple, Optional

from .errors import PreconditionError
from .transformations import Transformation, mirror, register_transform, transform, translate
from .vectors import Angle, Distance, Vec2, det, dot_product, norm, polar, rad


@dataclass(frozen=True, order=True)
class Line:
    """Directed line segment. Reversing it changes its vector and angle."""

    start: Vec2
    end: Vec2


@register_transform(Line)
def _transform_line(line: Line, transformation: Transformation) -> Line:
    return Line(transformation.apply(line.start), transformation.apply(line.end))


def vector_of(line: Line) -> Vec2:
    """Vector pointing from start to end; its norm is the line's length."""
    return line.end - line.start


def angle_of_line(line: Line) -> Angle:
    """Angle of a line relative to the x axis."""
    v = vector_of(line)
    return rad(math.atan2(v.y, v.x))


def angle_between(line1: Line, line2: Line) -> Angle:
    return rad(angle_of_line(line2).radians - angle_of_line(line1).radians)


def angled_line(start: Vec2, angle: Angle, length: Distance) -> Line:
    return Line(start, start + polar(angle, length))


def line_length(line: Line) -> Distance:
    return norm(vector_of(line))


def resize_line(f: Callable[[Distance], Distance], line: Line) -> Line:
    """Resize a line, keeping the starting point."""
    v = vector_of(line)
    length = norm(v)
    if length.value == 0:
        raise PreconditionError(f"Cannot resize zero-length line {line}")
    new_length = f(length)
    return Line(line.start, line.start + (new_length.value / length.value) * v)


def resize_line_symmetric(f: Callable[[Distance], Distance], line: Line) -> Line:
    """Resize a line, keeping the middle point."""
    middle = 0.5 * (line.start + line.end)
    delta = middle - line.start
    return center_line(resize_line(f, transform(translate(delta), line)))


def center_line(line: Line) -> Line:
    """Move the line so that its center is where the start used to be."""
    middle = 0.5 * (line.start + line.end)
    return transform(translate(line.start - middle), line)


def normalize_line(line: Line) -> Line:
    """Move the end point so that the line has length 1."""
    return resize_line(lambda _: Distance(1.0), line)


def direction(line: Line) -> Vec2:
    """Unit vector pointing along the line."""
    return vector_of(normalize_line(line))


def line_reverse(line: Line) -> Line:
    return Line(line.end, line.start)


def distance_from_line(point: Vec2, line: Line) -> Distance:
    """Distance of a point from the infinite continuation of a line."""
    length = line_length(line).value
    return Distance(abs(det(vector_of(line), line.start - point)) / length)


def perpendicular_line_through(point: Vec2, line: Line) -> Line:
    """
    Line perpendicular to a given line through a point.

    The result has the same length as the input, is centered on the point, and
    points to the left (90° counter-clockwise) of the input.
    """
    v = vector_of(line)
    rotated = Vec2(-v.y, v.x)
    return center_line(Line(point, point + rotated))


def perpendicular_bisector(line: Line) -> Line:
    """Perpendicular line through the middle; same length, rotated 90° CCW."""
    middle = 0.5 * (line.start + line.end)
    return perpendicular_line_through(middle, line)


class IntersectionType(Enum):
    """Where the intersection of two lines lies relative to the finite segments."""
    REAL = "real"                                 # Inside both segments
    VIRTUAL_INSIDE_LEFT = "virtual_inside_left"   # Inside the left argument only
    VIRTUAL_INSIDE_RIGHT = "virtual_inside_right" # Inside the right argument only
    VIRTUAL = "virtual"                           # On both infinite continuations


class LLIntersection(NamedTuple):
    point: Vec2
    kind: IntersectionType


def intersection_ll(line_l: Line, line_r: Line) -> Optional[LLIntersection]:
    """
    Calculate the intersection of two lines.

    Args:
        line_l: Left line
        line_r: Right line

    Returns:
        The intersection point of the infinite lines and whether it lies inside
        both, one, or none of the finite segments. None for parallel or
        collinear lines; overlapping collinear segments are not detected.
    """
    v1, v2 = line_l.start, line_l.end
    v3, v4 = line_r.start, line_r.end

    discriminant = det(v1 - v2, v3 - v4)
    if discriminant == 0:
        return None

    det12 = det(v1, v2)
    det34 = det(v3, v4)
    point = Vec2(
        (det12 * (v3.x - v4.x) - (v1.x - v2.x) * det34) / discriminant,
        (det12 * (v3.y - v4.y) - (v1.y - v2.y) * det34) / discriminant,
    )

    t = det(v1 - v3, v3 - v4) / discriminant
    u = -det(v1 - v2, v1 - v3) / discriminant
    inside_l = 0 <= t <= 1
    inside_r = 0 <= u <= 1

    if inside_l and inside_r:
        kind = IntersectionType.REAL
    elif inside_l:
        kind = IntersectionType.VIRTUAL_INSIDE_LEFT
    elif inside_r:
        kind = IntersectionType.VIRTUAL_INSIDE_RIGHT
    else:
        kind = IntersectionType.VIRTUAL
    return LLIntersection(point, kind)


class Reflection(NamedTuple):
    """Result of reflecting a ray on a mirror."""
    ray: Line                      # Outgoing ray, starting at the mirror image of the incoming end
    incidence_point: Vec2          # Not necessarily on the ray or mirror segment
    kind: IntersectionType         # Classification of ray vs. mirror


def reflection(ray: Line, mirror_surface: Line) -> Optional[Reflection]:
    """
    Optical reflection of a ray on a mirror.

    The ray is mirrored across the normal of the mirror at the incidence point
    and then reversed, so it travels away from the mirror like light does.

    Returns:
        Reflection, or None if the ray is parallel to the mirror
    """
    hit = intersection_ll(ray, mirror_surface)
    if hit is None:
        return None
    mirror_axis = perpendicular_line_through(hit.point, mirror_surface)
    mirrored = transform(mirror(mirror_axis), ray)
    return Reflection(line_reverse(mirrored), hit.point, hit.kind)


def _lies_ahead_of(point: Vec2, ray: Line) -> bool:
    return dot_product(point - ray.start, vector_of(ray)) > 0


def billard_process(edges: Iterable[Line], ray: Line) -> Iterator[Vec2]:
    """
    Shoot a billiard ball and record where it bounces off the given edges.

    Args:
        edges: Geometry to bounce off, typically the edges of a polygon
        ray: Initial ball position and direction; only start and direction matter

    Yields:
        Collision points. The sequence is finite only if the ball escapes, in
        which case the final ray's end point is the last value.
    """
    edges = list(edges)
    # Numerical noise would otherwise let the ball hit the edge it just left
    last_edge = None

    while True:
        candidates = []
        for edge in edges:
            if edge == last_edge:
                continue
            bounce = reflection(ray, edge)
            if bounce is None:
                continue
            if bounce.kind not in (IntersectionType.REAL, IntersectionType.VIRTUAL_INSIDE_RIGHT):
                continue
            if not _lies_ahead_of(bounce.incidence_point, ray):
                continue
            candidates.append((edge, Line(bounce.incidence_point, bounce.ray.end)))

        if not candidates:
            yield ray.end
            return

        edge, outgoing = min(candidates, key=lambda c: norm(c[1].start - ray.start))
        yield outgoing.start
        last_edge = edge
        ray = outgoing
