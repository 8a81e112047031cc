"""
Voronoi diagram extraction from a Delaunay triangulation.

Every mesh vertex except the four corners of the seeding box gets a cell. A
cell starts out as the bounding box and is cut down by one half-plane per
neighbour: the perpendicular bisector of the Delaunay edge, or for edges to a
box corner the edge rotated 90° about that corner.

Removing the corners from the mesh hands their area to the corners' own
neighbours, so points sharing a corner also constrain each other's cells even
without a Delaunay edge between them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Tuple

import structlog

from .bounding_box import BoundingBox, bounding_box_polygon
from .delaunay import DelaunayTriangulation
from .errors import ClippingError
from .lines import Line, angle_of_line, perpendicular_bisector
from .polygons import CutSide, Polygon, cut_polygon
from .vectors import Vec2

logger = structlog.get_logger()


@dataclass(frozen=True)
class VoronoiCell:
    region: Polygon
    seed: Vec2


@dataclass(frozen=True)
class VoronoiDiagram:
    bounds: BoundingBox
    cells: Tuple[VoronoiCell, ...]

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self):
        return iter(self.cells)


def vertex_graph(triangulation: DelaunayTriangulation) -> Dict[Vec2, Set[Vec2]]:
    """Undirected adjacency of all mesh vertices."""
    graph: Dict[Vec2, Set[Vec2]] = {}
    for triangle, _ in triangulation.triangles:
        corners = triangle.corners
        for p in corners:
            graph.setdefault(p, set()).update(q for q in corners if q != p)
    return graph


def _dual_line(ray: Line, box_corners: Set[Vec2]) -> Line:
    """Line bounding the seed's cell, directed so the seed lies on its left."""
    if ray.end in box_corners:
        # Edges to the seeding corners have no Voronoi dual; close the cell
        # against the box instead. Quarter turn about the corner, kept exact
        # so the line passes through the corner itself.
        offset = ray.start - ray.end
        return Line(ray.end + Vec2(-offset.y, offset.x), ray.end)
    return perpendicular_bisector(ray)


def voronoi_cell(bounds: BoundingBox, seed: Vec2, neighbours: Iterable[Vec2]) -> Optional[VoronoiCell]:
    """
    Voronoi cell of one mesh vertex, clipped to the bounding box.

    Args:
        bounds: Seeding box of the triangulation
        seed: Mesh vertex within the box
        neighbours: Vertices whose bisectors bound the cell, usually the
            seed's Delaunay neighbours

    Returns:
        The cell, or None for corners of the seeding box

    Raises:
        ClippingError: If a cut does not leave exactly one region on the seed's side
    """
    box_corners = set(bounds.corners)
    if seed in box_corners:
        return None

    rays = sorted((Line(seed, n) for n in set(neighbours) if n != seed), key=angle_of_line)
    region = bounding_box_polygon(bounds)
    for ray in rays:
        scissors = _dual_line(ray, box_corners)
        candidates = [f.polygon for f in cut_polygon(scissors, region) if f.side is CutSide.INSIDE]
        if len(candidates) != 1:
            raise ClippingError(
                f"Clipping the cell of {seed} along {scissors} left {len(candidates)} regions around the seed"
            )
        region = candidates[0]

    return VoronoiCell(region, seed)


def _corner_neighbours(graph: Dict[Vec2, Set[Vec2]], seed: Vec2, box_corners: Set[Vec2]) -> Set[Vec2]:
    """Non-corner vertices adjacent to any box corner reachable from the seed via corners."""
    pending = [c for c in graph[seed] if c in box_corners]
    seen = set(pending)
    result = set()
    while pending:
        corner = pending.pop()
        for n in graph[corner]:
            if n not in box_corners:
                result.add(n)
            elif n not in seen:
                seen.add(n)
                pending.append(n)
    result.discard(seed)
    return result


def voronoi_cells(triangulation: DelaunayTriangulation) -> List[VoronoiCell]:
    """Cells of all mesh vertices except the box corners, ordered by seed."""
    graph = vertex_graph(triangulation)
    box_corners = set(triangulation.bounds.corners)
    cells = []
    for seed in sorted(graph):
        if seed in box_corners:
            continue
        neighbours = graph[seed] | _corner_neighbours(graph, seed, box_corners)
        cells.append(voronoi_cell(triangulation.bounds, seed, neighbours))
    return cells


def to_voronoi(triangulation: DelaunayTriangulation) -> VoronoiDiagram:
    cells = voronoi_cells(triangulation)
    logger.info("Voronoi extraction complete", cells=len(cells))
    return VoronoiDiagram(triangulation.bounds, tuple(cells))
