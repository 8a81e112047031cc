"""
Batch triangulation of independent point sets.

A single triangulation is built sequentially, but separate jobs share nothing
and run in a pool of worker processes.
"""

from __future__ import annotations

import multiprocessing
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

import structlog

from ..config import settings
from ..utils.log_config import configure_logging
from .bounding_box import BoundingBox
from .delaunay import DelaunayTriangulation, bowyer_watson
from .errors import PreconditionError
from .vectors import PointsLike, as_vec2_list
from .voronoi import VoronoiDiagram, to_voronoi

logger = structlog.get_logger()


@dataclass(frozen=True)
class TriangulationResult:
    triangulation: DelaunayTriangulation
    voronoi: Optional[VoronoiDiagram] = None


def _triangulate_worker(args_tuple) -> TriangulationResult:
    bounds, points, with_voronoi = args_tuple
    triangulation = bowyer_watson(bounds, points)
    voronoi = to_voronoi(triangulation) if with_voronoi else None
    return TriangulationResult(triangulation, voronoi)


def triangulate_many(
    jobs: Iterable[Tuple[BoundingBox, PointsLike]],
    max_workers: Optional[int] = None,
    with_voronoi: bool = False,
) -> List[TriangulationResult]:
    """
    Triangulate several independent point sets.

    Args:
        jobs: (bounds, points) pairs
        max_workers: Pool size, defaults to ``settings.max_workers``
        with_voronoi: Also extract each job's Voronoi diagram

    Returns:
        One result per job, in job order

    Raises:
        PreconditionError: If fewer than one worker is requested
    """
    tasks = [(bounds, as_vec2_list(points), with_voronoi) for bounds, points in jobs]
    workers = max_workers if max_workers is not None else settings.max_workers
    if workers < 1:
        raise PreconditionError(f"max_workers must be at least 1, got {workers}")
    workers = min(workers, len(tasks))

    logger.info("Starting batch triangulation", jobs=len(tasks), workers=workers)
    if workers <= 1:
        results = [_triangulate_worker(task) for task in tasks]
    else:
        with multiprocessing.Pool(processes=workers, initializer=configure_logging) as pool:
            results = pool.map(_triangulate_worker, tasks)
    logger.info("Batch triangulation complete", jobs=len(results))
    return results
