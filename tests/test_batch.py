"""Tests for batch triangulation."""

import numpy as np
import pytest

from py_geom.core.batch import TriangulationResult, triangulate_many
from py_geom.core.bounding_box import BoundingBox
from py_geom.core.delaunay import bowyer_watson
from py_geom.core.errors import PreconditionError
from py_geom.core.polygons import polygon_area
from py_geom.core.vectors import Vec2


BOX = BoundingBox(Vec2(0, 0), Vec2(100, 100))


@pytest.fixture
def jobs():
    rng = np.random.default_rng(99)
    return [(BOX, rng.uniform(1, 99, size=(n, 2))) for n in (5, 12, 20)]


class TestTriangulateMany:
    """Test triangulating independent point sets."""

    def test_serial_matches_single_runs(self, jobs):
        results = triangulate_many(jobs, max_workers=1)
        assert len(results) == 3
        for (bounds, points), result in zip(jobs, results):
            assert isinstance(result, TriangulationResult)
            assert result.voronoi is None
            assert result.triangulation == bowyer_watson(bounds, points)

    def test_parallel_keeps_job_order(self, jobs):
        results = triangulate_many(jobs, max_workers=2)
        for (_, points), result in zip(jobs, results):
            assert len(result.triangulation.vertices) == len(points) + 4

    def test_with_voronoi(self, jobs):
        results = triangulate_many(jobs, max_workers=2, with_voronoi=True)
        for (_, points), result in zip(jobs, results):
            assert len(result.voronoi) == len(points)
            total = sum(polygon_area(cell.region).value for cell in result.voronoi)
            assert total == pytest.approx(10000)

    def test_empty(self):
        assert triangulate_many([]) == []

    def test_invalid_worker_count(self, jobs):
        with pytest.raises(PreconditionError, match="at least 1"):
            triangulate_many(jobs, max_workers=0)
        with pytest.raises(ValueError):
            triangulate_many(jobs, max_workers=-2)
