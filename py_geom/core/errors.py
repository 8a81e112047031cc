"""
Exception types raised by the geometry kernel.

Caller mistakes raise a PreconditionError (also a ValueError). Broken internal
assumptions raise an InvariantViolation, which always points at a bug rather
than at bad input. Polygon validation problems are not exceptions, see
``py_geom.core.polygons.validate_polygon``.
"""


class GeometryError(Exception):
    """Base error of the geometry kernel."""


class PreconditionError(GeometryError, ValueError):
    """The caller passed input the operation is not defined for."""


class PointOutsideBoundsError(PreconditionError):
    """A point was inserted outside of the triangulation's bounding box."""


class SingularTransformationError(PreconditionError, ZeroDivisionError):
    """Tried to invert a transformation whose linear part is singular."""


class InvariantViolation(GeometryError, RuntimeError):
    """An internal geometric invariant does not hold."""

    def __init__(self, message: str):
        super().__init__(f"{message}\nThis should never happen! Please report it as a bug.")


class CircumcircleError(InvariantViolation):
    """The perpendicular bisectors of a triangle did not intersect."""


class CavityBoundaryError(InvariantViolation):
    """The boundary of the removed triangles is not a single closed polygon."""


class ClippingError(InvariantViolation):
    """Clipping a Voronoi region did not leave exactly one fragment around its seed."""
