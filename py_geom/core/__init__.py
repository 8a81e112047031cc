"""
Core geometry functionality.
"""

from .vectors import Vec2, Angle, Distance, Area, VectorTuple, deg, rad, polar, norm
from .transformations import Transformation, transform, translate, rotate, rotate_around, scale, scale_around, mirror, inverse
from .lines import Line, IntersectionType, intersection_ll, reflection, billard_process
from .polygons import Polygon, PolygonOrientation, polygon_orientation, validate_polygon, point_in_polygon, convex_hull, cut_polygon
from .bounding_box import BoundingBox, AspectRatioBehavior, bounding_box, transform_bounding_box
from .delaunay import DelaunayTriangulation, new_triangulation, insert_point, bowyer_watson, exported_triangles
from .voronoi import VoronoiCell, VoronoiDiagram, voronoi_cells, to_voronoi
from .batch import TriangulationResult, triangulate_many
from .errors import GeometryError, PreconditionError, PointOutsideBoundsError, SingularTransformationError, InvariantViolation

__all__ = ['Vec2', 'Angle', 'Distance', 'Area', 'VectorTuple', 'deg', 'rad', 'polar', 'norm',
           'Transformation', 'transform', 'translate', 'rotate', 'rotate_around', 'scale', 'scale_around',
           'mirror', 'inverse',
           'Line', 'IntersectionType', 'intersection_ll', 'reflection', 'billard_process',
           'Polygon', 'PolygonOrientation', 'polygon_orientation', 'validate_polygon', 'point_in_polygon',
           'convex_hull', 'cut_polygon',
           'BoundingBox', 'AspectRatioBehavior', 'bounding_box', 'transform_bounding_box',
           'DelaunayTriangulation', 'new_triangulation', 'insert_point', 'bowyer_watson', 'exported_triangles',
           'VoronoiCell', 'VoronoiDiagram', 'voronoi_cells', 'to_voronoi',
           'TriangulationResult', 'triangulate_many',
           'GeometryError', 'PreconditionError', 'PointOutsideBoundsError', 'SingularTransformationError',
           'InvariantViolation']
