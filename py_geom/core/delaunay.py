"""
Incremental Delaunay triangulation (Bowyer-Watson).

The mesh starts as two triangles splitting a bounding box along a diagonal.
Inserting a point removes every triangle whose circumcircle contains it and
re-triangulates the resulting cavity around the new point. Each insertion
returns a new DelaunayTriangulation; the old value stays valid.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from functools import reduce
from typing import Dict, FrozenSet, List, Set, Tuple

import structlog

from .bounding_box import BoundingBox, inside_bounding_box
from .errors import CavityBoundaryError, CircumcircleError, PointOutsideBoundsError, PreconditionError
from .lines import Line, intersection_ll, perpendicular_bisector
from .polygons import Polygon
from .vectors import Distance, PointsLike, Vec2, as_vec2_list, det, norm

logger = structlog.get_logger()


def _doubled_signed_area(a: Vec2, b: Vec2, c: Vec2) -> float:
    return det(b - a, c - a)


@dataclass(frozen=True, order=True)
class Triangle:
    """Triangle whose corners are always stored in positive (CCW) orientation."""

    a: Vec2
    b: Vec2
    c: Vec2

    def __post_init__(self):
        if _doubled_signed_area(self.a, self.b, self.c) < 0:
            b, c = self.b, self.c
            object.__setattr__(self, "b", c)
            object.__setattr__(self, "c", b)

    @property
    def corners(self) -> Tuple[Vec2, Vec2, Vec2]:
        return (self.a, self.b, self.c)

    @property
    def polygon(self) -> Polygon:
        return Polygon(self.corners)

    def edges(self) -> Tuple[Tuple[Vec2, Vec2], ...]:
        """Directed edges, following the positive orientation."""
        return ((self.a, self.b), (self.b, self.c), (self.c, self.a))


@dataclass(frozen=True, order=True)
class Circle:
    center: Vec2
    radius: Distance

    def contains(self, point: Vec2) -> bool:
        """Boundary inclusive, so cocircular points count as inside."""
        return norm(self.center - point) <= self.radius


def circumcircle(triangle: Triangle) -> Circle:
    """
    Circle through all three corners of a triangle.

    Raises:
        CircumcircleError: If the perpendicular bisectors are parallel, i.e.
            the triangle is degenerate
    """
    a, b, c = triangle.corners
    hit = intersection_ll(perpendicular_bisector(Line(a, b)), perpendicular_bisector(Line(a, c)))
    if hit is None:
        raise CircumcircleError(f"Circumcircle of degenerate triangle {triangle} does not exist")
    return Circle(hit.point, norm(hit.point - a))


@dataclass(frozen=True)
class DelaunayTriangulation:
    """Mesh of triangles with cached circumcircles, plus the seeding box."""

    triangles: FrozenSet[Tuple[Triangle, Circle]]
    bounds: BoundingBox

    @property
    def vertices(self) -> Set[Vec2]:
        return {corner for triangle, _ in self.triangles for corner in triangle.corners}

    def __len__(self) -> int:
        return len(self.triangles)


def _with_circle(triangle: Triangle) -> Tuple[Triangle, Circle]:
    return (triangle, circumcircle(triangle))


def new_triangulation(bounds: BoundingBox) -> DelaunayTriangulation:
    """
    Seed a triangulation with two triangles spanning the bounding box.

    Raises:
        PreconditionError: If the box has no area
    """
    if bounds.is_empty or bounds.width <= 0 or bounds.height <= 0:
        raise PreconditionError(f"Cannot triangulate degenerate bounding box {bounds}")
    x1, y1 = bounds.min_corner
    x2, y2 = bounds.max_corner
    triangles = frozenset({
        _with_circle(Triangle(Vec2(x1, y1), Vec2(x1, y2), Vec2(x2, y1))),
        _with_circle(Triangle(Vec2(x2, y2), Vec2(x1, y2), Vec2(x2, y1))),
    })
    return DelaunayTriangulation(triangles, bounds)


def _cavity_boundary(bad_triangles: List[Triangle]) -> List[Vec2]:
    """
    Corners of the polygon enclosing the union of the given triangles.

    Directed edges shared by two triangles appear once in each direction and
    cancel out; the surviving edges form the cavity boundary.
    """
    adjacency: Dict[Vec2, Set[Vec2]] = {}
    for triangle in bad_triangles:
        for p, q in triangle.edges():
            reverse = adjacency.get(q)
            if reverse is not None and p in reverse:
                reverse.discard(p)
            else:
                adjacency.setdefault(p, set()).add(q)

    adjacency = {p: qs for p, qs in adjacency.items() if qs}
    if not adjacency:
        raise CavityBoundaryError("Cavity of the new point has no boundary edges")

    successor: Dict[Vec2, Vec2] = {}
    for p, qs in adjacency.items():
        if len(qs) != 1:
            raise CavityBoundaryError(
                f"Cavity boundary branches at {p}: {len(qs)} outgoing edges to {sorted(qs)}"
            )
        successor[p] = next(iter(qs))

    start = min(successor)
    corners = [start]
    current = successor[start]
    while current != start:
        if current not in successor or len(corners) > len(successor):
            raise CavityBoundaryError(f"Cavity boundary does not close at {current}")
        corners.append(current)
        current = successor[current]

    if len(corners) != len(successor):
        raise CavityBoundaryError(
            f"Cavity boundary is disconnected: walked {len(corners)} of {len(successor)} edges"
        )
    return corners


def insert_point(triangulation: DelaunayTriangulation, point: Vec2) -> DelaunayTriangulation:
    """
    Add a point to the triangulation.

    Args:
        triangulation: Current mesh, left unchanged
        point: New vertex; must lie within the seeding bounding box

    Returns:
        New triangulation containing the point as a vertex

    Raises:
        PointOutsideBoundsError: If the point lies outside the bounding box
    """
    if not inside_bounding_box(point, triangulation.bounds):
        raise PointOutsideBoundsError(
            f"Point {point} lies outside of the triangulation's bounding box {triangulation.bounds}"
        )

    if point in triangulation.vertices:
        logger.debug("Ignoring duplicate point", x=point.x, y=point.y)
        return triangulation

    bad = []
    good = []
    for entry in triangulation.triangles:
        triangle, circle = entry
        if circle.contains(point):
            bad.append(triangle)
        else:
            good.append(entry)

    boundary = _cavity_boundary(bad)

    new_triangles = []
    for p, q in zip(boundary, boundary[1:] + boundary[:1]):
        if _doubled_signed_area(p, q, point) == 0:
            # Point lies on this cavity edge, e.g. on the seeding box
            logger.debug("Skipping degenerate cavity edge", start=(p.x, p.y), end=(q.x, q.y))
            continue
        new_triangles.append(_with_circle(Triangle(p, q, point)))

    return dataclasses.replace(triangulation, triangles=frozenset(good + new_triangles))


def bowyer_watson(bounds: BoundingBox, points: PointsLike) -> DelaunayTriangulation:
    """
    Triangulate points within a bounding box.

    Args:
        bounds: Seeding box; every point must lie within it
        points: List of Vec2 or (x, y) pairs, or an (N, 2) numpy array

    Returns:
        The triangulation after inserting all points in order
    """
    vertices = as_vec2_list(points)
    logger.info("Starting Delaunay triangulation", points=len(vertices))
    triangulation = reduce(insert_point, vertices, new_triangulation(bounds))
    logger.info("Delaunay triangulation complete", triangles=len(triangulation.triangles))
    return triangulation


def exported_triangles(triangulation: DelaunayTriangulation, include_artifacts: bool = False) -> List[Polygon]:
    """
    Corner polygons of the mesh triangles.

    Triangles touching a corner of the seeding box are artifacts of the
    initial mesh and are left out unless ``include_artifacts`` is set.
    """
    box_corners = set(triangulation.bounds.corners)
    polygons = []
    for triangle, _ in sorted(triangulation.triangles):
        if not include_artifacts and box_corners.intersection(triangle.corners):
            continue
        polygons.append(triangle.polygon)
    return polygons
