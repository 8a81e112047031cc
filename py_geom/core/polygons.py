"""
Polygon algebra.

This module handles:
- Polygons as cyclic corner sequences with rotation-invariant equality
- Orientation, areas, angles and convexity
- Validation of the invariants most algorithms assume
- Point membership via ray casting
- Convex hulls (Andrew's monotone chain)
- Cutting polygons along a line and clipping lines to polygons
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import InvariantViolation, PreconditionError
from .lines import IntersectionType, Line, angle_between, intersection_ll, line_length, vector_of
from .transformations import Transformation, register_transform
from .vectors import Angle, Area, Distance, Vec2, det, dot_product


def _rotate_to_minimum(corners: Tuple[Vec2, ...]) -> Tuple[Vec2, ...]:
    if not corners:
        return corners
    start = corners.index(min(corners))
    return corners[start:] + corners[:start]


@total_ordering
@dataclass(frozen=True, eq=False)
class Polygon:
    """
    Polygon defined by its corners, without repeating the first one at the end.

    Two polygons are equal if one's corner list is a rotation of the other's.
    Many algorithms assume the invariants checked by ``validate_polygon``.
    """

    corners: Tuple[Vec2, ...]

    def __post_init__(self):
        object.__setattr__(self, "corners", tuple(self.corners))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Polygon):
            return NotImplemented
        return _rotate_to_minimum(self.corners) == _rotate_to_minimum(other.corners)

    def __lt__(self, other: Polygon) -> bool:
        if not isinstance(other, Polygon):
            return NotImplemented
        return _rotate_to_minimum(self.corners) < _rotate_to_minimum(other.corners)

    def __hash__(self) -> int:
        return hash(_rotate_to_minimum(self.corners))

    def __len__(self) -> int:
        return len(self.corners)

    def __iter__(self):
        return iter(self.corners)

    def __repr__(self) -> str:
        return f"Polygon({list(_rotate_to_minimum(self.corners))!r})"

    def to_array(self) -> np.ndarray:
        """Corners as an (N, 2) array."""
        return np.array([[c.x, c.y] for c in self.corners], dtype=np.float64).reshape(-1, 2)


@register_transform(Polygon)
def _transform_polygon(polygon: Polygon, transformation: Transformation) -> Polygon:
    return Polygon(transformation.apply(c) for c in polygon.corners)


def normalize_polygon(polygon: Polygon) -> Polygon:
    """Rotate the corner list until the minimum corner comes first."""
    return Polygon(_rotate_to_minimum(polygon.corners))


def polygon_edges(polygon: Polygon) -> List[Line]:
    corners = polygon.corners
    return [Line(p, q) for p, q in zip(corners, corners[1:] + corners[:1])]


def signed_polygon_area(polygon: Polygon) -> Area:
    """Shoelace formula; positive for counter-clockwise polygons."""
    corners = polygon.corners
    total = sum(det(p, q) for p, q in zip(corners, corners[1:] + corners[:1]))
    return Area(total / 2)


def polygon_area(polygon: Polygon) -> Area:
    return Area(abs(signed_polygon_area(polygon).value))


class PolygonOrientation(Enum):
    POSITIVE = "positive"  # Counter-clockwise in a right-handed coordinate system
    NEGATIVE = "negative"


def polygon_orientation(polygon: Polygon) -> PolygonOrientation:
    if signed_polygon_area(polygon).value >= 0:
        return PolygonOrientation.POSITIVE
    return PolygonOrientation.NEGATIVE


def polygon_average(polygon: Polygon) -> Vec2:
    """Average of the corners (not the centroid of the area)."""
    total = Vec2(0.0, 0.0)
    for corner in polygon.corners:
        total = total + corner
    return total / len(polygon.corners)


def polygon_circumference(polygon: Polygon) -> Distance:
    total = Distance(0.0)
    for edge in polygon_edges(polygon):
        total = total + line_length(edge)
    return total


def polygon_angles(polygon: Polygon) -> List[Angle]:
    """Interior angle at every corner, in corner order."""
    corners = polygon.corners
    n = len(corners)
    positive = polygon_orientation(polygon) is PolygonOrientation.POSITIVE
    angles = []
    for i, corner in enumerate(corners):
        before = Line(corner, corners[i - 1])
        after = Line(corner, corners[(i + 1) % n])
        angles.append(angle_between(after, before) if positive else angle_between(before, after))
    return angles


def is_convex(polygon: Polygon) -> bool:
    """A polygon is convex iff all turns between consecutive edges have the same sign.

    Straight corners (no turn) are ignored.
    """
    edges = polygon_edges(polygon)
    turns = [det(vector_of(e1), vector_of(e2)) for e1, e2 in zip(edges, edges[1:] + edges[:1])]
    signs = {(t > 0) - (t < 0) for t in turns} - {0}
    return len(signs) <= 1


def count_edge_traversals(point: Vec2, edges: Sequence[Line]) -> int:
    """
    Count how often a ray from outside the geometry to the point crosses its edges.

    Args:
        point: Point to check
        edges: Geometry, e.g. the edges of one or more polygons

    Returns:
        Number of edges crossed
    """
    if not edges:
        return 0
    leftmost_x = min(min(e.start.x, e.end.x) for e in edges)
    # Exactly hitting a corner counts twice (once per adjacent edge), so the ray
    # comes in at an odd angle to make that unlikely
    test_ray = Line(Vec2(leftmost_x - 1, point.y - 1), point)

    count = 0
    for edge in edges:
        hit = intersection_ll(test_ray, edge)
        if hit is not None and hit.kind is IntersectionType.REAL:
            count += 1
    return count


def point_in_polygon(point: Vec2, polygon: Polygon) -> bool:
    return count_edge_traversals(point, polygon_edges(polygon)) % 2 == 1


@dataclass(frozen=True)
class NotEnoughCorners:
    count: int


@dataclass(frozen=True)
class IdenticalPoints:
    points: Tuple[Vec2, ...]


@dataclass(frozen=True)
class SelfIntersections:
    pairs: Tuple[Tuple[Line, Line], ...]


PolygonError = Union[NotEnoughCorners, IdenticalPoints, SelfIntersections]


def validate_polygon(polygon: Polygon) -> Optional[PolygonError]:
    """
    Check the invariants many algorithms assume, in this order:

    - At least three corners
    - No identical corners
    - No intersections between non-adjacent edges

    Returns:
        None if the polygon is valid, otherwise the first failed check
    """
    corners = polygon.corners
    if len(corners) < 3:
        return NotEnoughCorners(len(corners))

    seen = set()
    duplicates = []
    for corner in corners:
        if corner in seen:
            duplicates.append(corner)
        seen.add(corner)
    if duplicates:
        return IdenticalPoints(tuple(duplicates))

    edges = polygon_edges(polygon)
    n = len(edges)
    pairs = []
    for i in range(n):
        for j in range(i + 2, n):
            if i == 0 and j == n - 1:
                continue  # Adjacent via the closing edge
            hit = intersection_ll(edges[i], edges[j])
            if hit is not None and hit.kind is IntersectionType.REAL:
                pairs.append((edges[i], edges[j]))
    if pairs:
        return SelfIntersections(tuple(pairs))
    return None


def convex_hull(points: Iterable[Vec2]) -> Polygon:
    """
    The smallest convex polygon containing all points (Andrew's algorithm).

    The result is positively oriented. Points on the hull's edges that are not
    corners are left out.
    """
    sorted_points = sorted(set(points))
    if len(sorted_points) < 3:
        return Polygon(sorted_points)

    def build_chain(ordered: List[Vec2]) -> List[Vec2]:
        chain: List[Vec2] = []
        for p in ordered:
            while len(chain) >= 2 and det(chain[-1] - chain[-2], p - chain[-1]) <= 0:
                chain.pop()
            chain.append(p)
        return chain

    lower = build_chain(sorted_points)
    upper = build_chain(list(reversed(sorted_points)))
    return Polygon(lower[:-1] + upper[:-1])


class CutSide(Enum):
    """Side of a directed cutting line a polygon fragment lies on."""
    INSIDE = "inside"    # Left of the line, where a positively oriented clip edge keeps its interior
    OUTSIDE = "outside"  # Right of the line


class PolygonFragment(NamedTuple):
    polygon: Polygon
    side: CutSide


@dataclass
class _RingNode:
    point: Vec2
    left: bool
    crossing: bool = False


def _compact_corners(points: List[Vec2]) -> List[Vec2]:
    compacted = [p for i, p in enumerate(points) if p != points[i - 1]]
    return compacted if compacted else points[:1]


def cut_polygon(scissors: Line, polygon: Polygon) -> List[PolygonFragment]:
    """
    Cut a polygon along the infinite continuation of a line.

    Corners exactly on the line count as lying on its left (INSIDE) side.
    Fragments that degenerate to fewer than three corners or to zero area are
    dropped.

    Args:
        scissors: Cutting line; its direction decides which side is INSIDE
        polygon: Simple polygon to cut

    Returns:
        Fragments of the polygon, each tagged with the side it lies on
    """
    corners = polygon.corners
    if not corners:
        return []
    cut_vector = vector_of(scissors)
    if cut_vector == Vec2(0.0, 0.0):
        raise PreconditionError(f"Cannot cut with zero-length line {scissors}")
    origin = scissors.start

    sides = [det(cut_vector, p - origin) for p in corners]
    n = len(corners)

    # Corners with crossing points of the cut inserted after the edge's start
    ring: List[_RingNode] = []
    crossings = []
    for i in range(n):
        p, q = corners[i], corners[(i + 1) % n]
        side_p, side_q = sides[i], sides[(i + 1) % n]
        ring.append(_RingNode(p, side_p >= 0))
        if (side_p >= 0) == (side_q >= 0):
            continue
        if side_p >= 0:
            left, right, side_left, side_right = p, q, side_p, side_q
        else:
            left, right, side_left, side_right = q, p, side_q, side_p
        spread = side_left - side_right
        point = left + (side_left / spread) * (right - left)
        # Secondary key: where the crossing drifts when the cut moves right,
        # which orders crossings that coincide on a corner lying on the line
        key = (
            dot_product(point - origin, cut_vector),
            dot_product(right - left, cut_vector) / spread,
        )
        crossings.append((key, len(ring)))
        ring.append(_RingNode(point, side_p >= 0, crossing=True))

    if len(crossings) % 2 != 0:
        raise InvariantViolation(f"Odd number of cut crossings ({len(crossings)}) for {polygon}")

    # Along the line, crossings alternate between entering and leaving the polygon
    ordered = [index for _, index in sorted(crossings)]
    partner = {}
    for a, b in zip(ordered[0::2], ordered[1::2]):
        partner[a] = b
        partner[b] = a

    fragments = []
    visited = set()
    for start in range(len(ring)):
        if ring[start].crossing or start in visited:
            continue
        points = []
        index = start
        for _ in range(2 * len(ring) + 1):
            visited.add(index)
            points.append(ring[index].point)
            if index in partner:
                index = partner[index]
                points.append(ring[index].point)
            index = (index + 1) % len(ring)
            if index == start:
                break
        else:
            raise InvariantViolation(f"Cutting {polygon} along {scissors} did not close a fragment")

        fragment = Polygon(_compact_corners(points))
        if len(fragment) < 3 or signed_polygon_area(fragment).value == 0:
            continue
        side = CutSide.INSIDE if ring[start].left else CutSide.OUTSIDE
        fragments.append(PolygonFragment(fragment, side))
    return fragments


class LineClipType(Enum):
    INSIDE_POLYGON = "inside_polygon"
    OUTSIDE_POLYGON = "outside_polygon"


def clip_polygon_with_line(polygon: Polygon, line: Line) -> List[Tuple[Line, LineClipType]]:
    """
    Split a line at the polygon's edges and tag each piece as inside or outside.

    Args:
        polygon: Clipping polygon
        line: Line segment to clip

    Returns:
        Consecutive pieces covering the whole line, in the line's direction
    """
    v = vector_of(line)
    length_square = dot_product(v, v)
    if length_square == 0:
        tag = LineClipType.INSIDE_POLYGON if point_in_polygon(line.start, polygon) else LineClipType.OUTSIDE_POLYGON
        return [(line, tag)]

    params = {0.0, 1.0}
    for edge in polygon_edges(polygon):
        hit = intersection_ll(line, edge)
        if hit is not None and hit.kind is IntersectionType.REAL:
            params.add(min(1.0, max(0.0, dot_product(hit.point - line.start, v) / length_square)))

    cuts = sorted(params)
    pieces: List[Tuple[Line, LineClipType]] = []
    for t0, t1 in zip(cuts, cuts[1:]):
        start = line.start + t0 * v
        end = line.start + t1 * v
        middle = line.start + (0.5 * (t0 + t1)) * v
        tag = LineClipType.INSIDE_POLYGON if point_in_polygon(middle, polygon) else LineClipType.OUTSIDE_POLYGON
        if pieces and pieces[-1][1] is tag:
            pieces[-1] = (Line(pieces[-1][0].start, end), tag)
        else:
            pieces.append((Line(start, end), tag))
    return pieces
