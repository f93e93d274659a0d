"""Sphere primitive with geometric ray-sphere intersection.

The intersection is solved geometrically rather than with the raw quadratic:

    u  = center - head
    tm = direction . u          (projection of the center on the ray)
    d  = sqrt(|u|^2 - tm^2)     (distance from the center to the ray line)
    th = sqrt(r^2 - d^2)        (half chord length)
    t  = tm -/+ th

Roots outside (0, max_distance] are rejected. A ray whose head is the center
hits once at distance r; a ray tangent to the sphere (d >= r) misses.

Example:
    >>> sphere = Sphere(Point(0, 0, 3), 1.0)
    >>> sphere.find_intersections(Ray(Point(0, 0, 0), Vector(0, 0, 1)))
    [Point(0.0, 0.0, 2.0), Point(0.0, 0.0, 4.0)]
"""

from __future__ import annotations

import math

from src.whitted.accel.aabb import AABB
from src.whitted.core.ray import Point, Ray, Vector, align_zero
from src.whitted.geometry.base import Geometry
from src.whitted.geometry.radial import Radius
from src.whitted.scene.intersection import Intersection


class Sphere(Geometry):
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).

    Raises:
        ValueError: If the radius is not positive.
    """

    def __init__(self, center: Point, radius: float, **kwargs) -> None:
        super().__init__(**kwargs)
        self.center = center
        self._radius = Radius(radius)

    @property
    def radius(self) -> float:
        return self._radius.value

    def __repr__(self) -> str:
        return f"Sphere(center={self.center!r}, radius={self.radius})"

    def normal(self, point: Point) -> Vector:
        return point.subtract(self.center).normalize()

    def intersect(self, ray: Ray, max_distance: float = math.inf) -> list[Intersection] | None:
        radius = self.radius
        head = ray.head
        if head == self.center:
            if radius > max_distance:
                return None
            return self._hits(ray.point_at(radius))

        u = self.center.subtract(head)
        tm = align_zero(ray.direction.dot(u))
        d_squared = u.length_squared() - tm * tm
        if d_squared >= radius * radius:
            return None
        th = math.sqrt(radius * radius - d_squared)

        # Roots in ascending order; at most one is behind the head
        t1 = align_zero(tm - th)
        t2 = align_zero(tm + th)
        hits = [ray.point_at(t) for t in (t1, t2) if 0 < t <= max_distance]
        return self._hits(*hits) if hits else None

    def bounding_box(self) -> AABB:
        c = self.center
        r = self.radius
        return AABB(Point(c.x - r, c.y - r, c.z - r), Point(c.x + r, c.y + r, c.z + r))
