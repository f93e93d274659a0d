"""Geometric primitives and ray intersection.

Components:
    base: Intersectable and Geometry abstract bases
    sphere: Sphere with geometric ray-sphere intersection
    plane: Infinite plane
    polygon: Convex polygon and Moller-Trumbore triangle
    radial: Radius and Axis building blocks for round shapes
    tube: Infinite tube and capped cylinder
    geometries: Flat collection of geometries

Every shape follows the same contract:
    hits = shape.intersect(ray, max_distance)   # list[Intersection] | None
    n = shape.normal(point)                     # unit Vector
    box = shape.bounding_box()                  # AABB | None when unbounded
"""

from .base import Geometry, Intersectable
from .geometries import Geometries
from .plane import Plane
from .polygon import Polygon, Triangle
from .radial import Axis, Radius
from .sphere import Sphere
from .tube import Cylinder, Tube

__all__ = [
    "Intersectable",
    "Geometry",
    "Sphere",
    "Plane",
    "Polygon",
    "Triangle",
    "Radius",
    "Axis",
    "Tube",
    "Cylinder",
    "Geometries",
]
