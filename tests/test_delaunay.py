"""Tests for the incremental Delaunay triangulation."""

from collections import Counter

import numpy as np
import pytest
from scipy.spatial import Delaunay

from py_geom.core.bounding_box import BoundingBox
from py_geom.core.delaunay import (
    Circle, DelaunayTriangulation, Triangle, _cavity_boundary, bowyer_watson, circumcircle, exported_triangles,
    insert_point, new_triangulation,
)
from py_geom.core.errors import (
    CavityBoundaryError, CircumcircleError, InvariantViolation, PointOutsideBoundsError, PreconditionError,
)
from py_geom.core.polygons import PolygonOrientation, polygon_area, polygon_orientation
from py_geom.core.vectors import Distance, Vec2, norm


BOX = BoundingBox(Vec2(0, 0), Vec2(100, 100))


@pytest.fixture
def random_points():
    """Reproducible points strictly inside BOX."""
    rng = np.random.default_rng(12345)
    return rng.uniform(1, 99, size=(40, 2))


@pytest.fixture
def random_triangulation(random_points):
    return bowyer_watson(BOX, random_points)


def undirected_edges(triangulation: DelaunayTriangulation) -> Counter:
    counts = Counter()
    for triangle, _ in triangulation.triangles:
        for p, q in triangle.edges():
            counts[frozenset((p, q))] += 1
    return counts


class TestTriangle:
    """Test triangles and their circumcircles."""

    def test_canonical_orientation(self):
        a, b, c = Vec2(0, 0), Vec2(1, 0), Vec2(0, 1)
        assert Triangle(a, c, b) == Triangle(a, b, c)
        assert Triangle(a, c, b).corners == (a, b, c)
        assert polygon_orientation(Triangle(a, c, b).polygon) is PolygonOrientation.POSITIVE

    def test_circumcircle(self):
        circle = circumcircle(Triangle(Vec2(0, 0), Vec2(2, 0), Vec2(0, 2)))
        assert circle.center.x == pytest.approx(1)
        assert circle.center.y == pytest.approx(1)
        assert circle.radius.value == pytest.approx(2 ** 0.5)

    def test_degenerate_circumcircle(self):
        with pytest.raises(CircumcircleError):
            circumcircle(Triangle(Vec2(0, 0), Vec2(1, 1), Vec2(2, 2)))

    def test_circumcircle_error_is_invariant_violation(self):
        with pytest.raises(InvariantViolation, match="report it as a bug"):
            circumcircle(Triangle(Vec2(0, 0), Vec2(1, 0), Vec2(2, 0)))

    def test_circle_boundary_is_inside(self):
        circle = Circle(Vec2(0, 0), Distance(5))
        assert circle.contains(Vec2(3, 4))
        assert circle.contains(Vec2(1, 1))
        assert not circle.contains(Vec2(4, 4))


class TestCavityBoundary:
    """Test recovering the cavity polygon from the removed triangles."""

    def test_shared_edge_cancels(self):
        lower = Triangle(Vec2(0, 0), Vec2(1, 0), Vec2(1, 1))
        upper = Triangle(Vec2(0, 0), Vec2(1, 1), Vec2(0, 1))
        assert _cavity_boundary([lower, upper]) == [Vec2(0, 0), Vec2(1, 0), Vec2(1, 1), Vec2(0, 1)]

    def test_single_triangle(self):
        assert _cavity_boundary([Triangle(Vec2(2, 2), Vec2(0, 3), Vec2(1, 0))]) == [
            Vec2(0, 3), Vec2(1, 0), Vec2(2, 2),
        ]

    def test_branching_boundary(self):
        # Two triangles touching in a single corner
        bowtie = [
            Triangle(Vec2(0, 0), Vec2(1, 0), Vec2(0, 1)),
            Triangle(Vec2(0, 0), Vec2(-1, 0), Vec2(0, -1)),
        ]
        with pytest.raises(CavityBoundaryError, match="branches at"):
            _cavity_boundary(bowtie)

    def test_disconnected_boundary(self):
        apart = [
            Triangle(Vec2(0, 0), Vec2(1, 0), Vec2(0, 1)),
            Triangle(Vec2(5, 5), Vec2(6, 5), Vec2(5, 6)),
        ]
        with pytest.raises(CavityBoundaryError, match="disconnected"):
            _cavity_boundary(apart)

    def test_no_boundary(self):
        with pytest.raises(CavityBoundaryError, match="no boundary edges"):
            _cavity_boundary([])

    def test_is_invariant_violation(self):
        with pytest.raises(InvariantViolation, match="report it as a bug"):
            _cavity_boundary([])


class TestInitialization:
    """Test seeding the mesh."""

    def test_two_triangles_split_box(self):
        triangulation = new_triangulation(BOX)
        assert len(triangulation) == 2
        assert triangulation.vertices == set(BOX.corners)
        total = sum(polygon_area(p).value for p in exported_triangles(triangulation, include_artifacts=True))
        assert total == pytest.approx(10000)

    def test_degenerate_bounds(self):
        with pytest.raises(PreconditionError):
            new_triangulation(BoundingBox(Vec2(0, 0), Vec2(0, 10)))
        with pytest.raises(PreconditionError):
            new_triangulation(BoundingBox.empty())


class TestInsertion:
    """Test single point insertion."""

    def test_single_point_scenario(self):
        triangulation = insert_point(new_triangulation(BOX), Vec2(50, 50))
        triangles = exported_triangles(triangulation, include_artifacts=True)

        assert len(triangles) == 4
        box_edges = {frozenset(pair) for pair in zip(BOX.corners, BOX.corners[1:] + BOX.corners[:1])}
        for polygon in triangles:
            assert Vec2(50, 50) in polygon.corners
            others = frozenset(c for c in polygon.corners if c != Vec2(50, 50))
            assert others in box_edges
            assert polygon_area(polygon).value == pytest.approx(2500)

    def test_artifacts_are_filtered(self):
        triangulation = insert_point(new_triangulation(BOX), Vec2(50, 50))
        # Every triangle touches a box corner
        assert exported_triangles(triangulation) == []

    def test_square_corners_scenario(self):
        corners = [Vec2(0, 0), Vec2(10, 0), Vec2(10, 10), Vec2(0, 10)]
        triangulation = bowyer_watson(BoundingBox(Vec2(0, 0), Vec2(10, 10)), corners)
        triangles = exported_triangles(triangulation, include_artifacts=True)

        assert len(triangles) == 2
        assert [polygon_area(t).value for t in triangles] == [50, 50]
        shared = set(triangles[0].corners) & set(triangles[1].corners)
        assert len(shared) == 2

    def test_duplicate_point_is_ignored(self):
        triangulation = insert_point(new_triangulation(BOX), Vec2(30, 60))
        assert insert_point(triangulation, Vec2(30, 60)) is triangulation

    def test_insertion_is_pure(self):
        before = new_triangulation(BOX)
        snapshot = set(before.triangles)
        after = insert_point(before, Vec2(20, 70))
        assert set(before.triangles) == snapshot
        assert after is not before
        assert Vec2(20, 70) in after.vertices
        assert Vec2(20, 70) not in before.vertices

    def test_point_outside_bounds(self):
        with pytest.raises(PointOutsideBoundsError):
            insert_point(new_triangulation(BOX), Vec2(101, 50))
        with pytest.raises(ValueError):
            insert_point(new_triangulation(BOX), Vec2(-0.5, 50))

    def test_point_on_box_edge(self):
        triangulation = insert_point(new_triangulation(BOX), Vec2(50, 0))
        polygons = exported_triangles(triangulation, include_artifacts=True)
        assert len(polygons) == 3
        assert sum(polygon_area(p).value for p in polygons) == pytest.approx(10000)
        for polygon in polygons:
            assert polygon_area(polygon).value > 0


class TestTriangulationProperties:
    """Test properties of triangulations of random point sets."""

    def test_all_points_are_vertices(self, random_points, random_triangulation):
        expected = {Vec2(float(x), float(y)) for x, y in random_points} | set(BOX.corners)
        assert random_triangulation.vertices == expected

    def test_delaunay_property(self, random_triangulation):
        vertices = random_triangulation.vertices
        for triangle, circle in random_triangulation.triangles:
            for v in vertices:
                if v in triangle.corners:
                    continue
                assert norm(v - circle.center).value >= circle.radius.value - 1e-9

    def test_mesh_consistency(self, random_triangulation):
        counts = undirected_edges(random_triangulation)
        assert set(counts.values()) <= {1, 2}
        boundary = {edge for edge, count in counts.items() if count == 1}
        assert boundary == {frozenset(pair) for pair in zip(BOX.corners, BOX.corners[1:] + BOX.corners[:1])}

    def test_area_is_preserved(self, random_triangulation):
        all_polygons = exported_triangles(random_triangulation, include_artifacts=True)
        exported = exported_triangles(random_triangulation)
        artifacts = [p for p in all_polygons if set(p.corners) & set(BOX.corners)]

        assert sum(polygon_area(p).value for p in all_polygons) == pytest.approx(10000)
        assert len(exported) + len(artifacts) == len(all_polygons)
        assert sum(polygon_area(p).value for p in exported) == pytest.approx(
            10000 - sum(polygon_area(p).value for p in artifacts)
        )
        for polygon in exported:
            assert len(polygon) == 3
            assert not set(polygon.corners) & set(BOX.corners)

    def test_matches_scipy(self, random_points, random_triangulation):
        corners = np.array([[c.x, c.y] for c in BOX.corners])
        all_points = np.vstack([random_points, corners])
        reference = Delaunay(all_points)
        expected = {
            frozenset(Vec2(float(all_points[i, 0]), float(all_points[i, 1])) for i in simplex)
            for simplex in reference.simplices
        }
        actual = {frozenset(triangle.corners) for triangle, _ in random_triangulation.triangles}
        assert actual == expected

    def test_insertion_order_does_not_matter(self, random_points, random_triangulation):
        shuffled = bowyer_watson(BOX, random_points[::-1])
        assert {frozenset(t.corners) for t, _ in shuffled.triangles} == {
            frozenset(t.corners) for t, _ in random_triangulation.triangles
        }

    def test_accepts_pairs(self):
        triangulation = bowyer_watson(BOX, [(25, 25), (75, 40)])
        assert {Vec2(25, 25), Vec2(75, 40)} <= triangulation.vertices

    @pytest.mark.parametrize("step", [10, 20, 25])
    def test_cocircular_grid(self, step):
        grid = [(x, y) for x in range(step, 100, step) for y in range(step, 100, step)]
        triangulation = bowyer_watson(BOX, grid)
        polygons = exported_triangles(triangulation, include_artifacts=True)
        assert len(triangulation.vertices) == len(grid) + 4
        assert sum(polygon_area(p).value for p in polygons) == pytest.approx(10000)
        assert set(undirected_edges(triangulation).values()) <= {1, 2}
