"""Infinite plane primitive.

A plane is stored as an anchor point q and a unit normal n. The ray-plane
intersection distance is

    t = n . (q - head) / (n . direction)

and there is no hit when the ray is parallel to the plane (|n . d| below
EPSILON) or when the ray starts exactly on the anchor point.

Planes are unbounded, so they report no bounding box and are always tested
by linear scan rather than through the voxel grid.
"""

from __future__ import annotations

import math

from src.whitted.core.ray import Point, Ray, Vector, align_zero, is_zero
from src.whitted.geometry.base import Geometry
from src.whitted.scene.intersection import Intersection


class Plane(Geometry):
    """A plane through ``point`` with the given normal (normalized on construction)."""

    def __init__(self, point: Point, normal: Vector, **kwargs) -> None:
        super().__init__(**kwargs)
        self.point = point
        self._normal = normal.normalize()

    @classmethod
    def from_points(cls, p1: Point, p2: Point, p3: Point, **kwargs) -> Plane:
        """Build the plane through three points.

        The normal is (p2 - p1) x (p3 - p1), normalized.

        Raises:
            ValueError: If two points coincide or the three points are collinear.
        """
        if p1 == p2 or p1 == p3 or p2 == p3:
            raise ValueError("Cannot construct a plane from coincident points")
        try:
            normal = p2.subtract(p1).cross(p3.subtract(p1))
        except ValueError:
            raise ValueError("Cannot construct a plane from collinear points") from None
        return cls(p1, normal, **kwargs)

    def __repr__(self) -> str:
        return f"Plane(point={self.point!r}, normal={self._normal!r})"

    def normal(self, point: Point | None = None) -> Vector:
        return self._normal

    def distance_along(self, ray: Ray) -> float | None:
        """Distance from the ray head to the plane, or None when there is no hit."""
        nv = self._normal.dot(ray.direction)
        if is_zero(nv) or self.point == ray.head:
            return None
        t = align_zero(self._normal.dot(self.point.subtract(ray.head)) / nv)
        return t if t > 0 else None

    def intersect(self, ray: Ray, max_distance: float = math.inf) -> list[Intersection] | None:
        t = self.distance_along(ray)
        if t is None or t > max_distance:
            return None
        return self._hits(ray.point_at(t))

    def bounding_box(self) -> None:
        return None
