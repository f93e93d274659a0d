"""Infinite tubes and finite capped cylinders.

A tube is the set of points at distance r from an axis line. Writing the
ray as p(t) = head + t*d and removing the axial component of every vector
(x_perp = x - (x . a) a for the unit axis direction a) gives the quadratic

    |d_perp|^2 t^2 + 2 (d_perp . w_perp) t + |w_perp|^2 - r^2 = 0

with w = head - origin. A ray parallel to the axis (d_perp ~ 0) never hits
the side surface.

A cylinder cuts the tube at axial projections 0 and height and closes both
ends with disks.
"""

from __future__ import annotations

import math

from src.whitted.accel.aabb import AABB
from src.whitted.core.ray import EPSILON, Point, Ray, Vector, align_zero, is_zero
from src.whitted.geometry.base import Geometry
from src.whitted.geometry.radial import Axis, Radius
from src.whitted.scene.intersection import Intersection


class Tube(Geometry):
    """An infinite cylinder around an axis ray.

    Attributes:
        axis: The tube axis (origin and unit direction).
        radius: The tube radius (positive).

    Raises:
        ValueError: If the radius is not positive.
    """

    def __init__(self, axis: Ray, radius: float, **kwargs) -> None:
        super().__init__(**kwargs)
        self.axis = Axis(axis)
        self._radius = Radius(radius)

    @property
    def radius(self) -> float:
        return self._radius.value

    def __repr__(self) -> str:
        return f"Tube(axis={self.axis.ray!r}, radius={self.radius})"

    def normal(self, point: Point) -> Vector:
        return self.axis.radial(point)

    def side_distances(self, ray: Ray, max_distance: float = math.inf) -> list[float]:
        """Ray parameters in (0, max_distance] where the ray meets the side surface."""
        a = self.axis.direction
        o = self.axis.origin
        d = ray.direction
        head = ray.head

        da = d.dot(a)
        dpx, dpy, dpz = d.x - da * a.x, d.y - da * a.y, d.z - da * a.z
        qa = dpx * dpx + dpy * dpy + dpz * dpz
        if qa < EPSILON:
            return []

        wx, wy, wz = head.x - o.x, head.y - o.y, head.z - o.z
        wa = wx * a.x + wy * a.y + wz * a.z
        wpx, wpy, wpz = wx - wa * a.x, wy - wa * a.y, wz - wa * a.z

        r = self.radius
        qb = 2.0 * (dpx * wpx + dpy * wpy + dpz * wpz)
        qc = wpx * wpx + wpy * wpy + wpz * wpz - r * r
        disc = align_zero(qb * qb - 4.0 * qa * qc)
        if disc <= 0:
            # Tangent rays graze the surface without entering it
            return []

        root = math.sqrt(disc)
        t1 = align_zero((-qb - root) / (2.0 * qa))
        t2 = align_zero((-qb + root) / (2.0 * qa))
        return [t for t in (t1, t2) if 0 < t <= max_distance]

    def intersect(self, ray: Ray, max_distance: float = math.inf) -> list[Intersection] | None:
        distances = self.side_distances(ray, max_distance)
        if not distances:
            return None
        return self._hits(*(ray.point_at(t) for t in distances))

    def bounding_box(self) -> None:
        return None


class Cylinder(Geometry):
    """A tube segment of finite height closed by two disks.

    The bottom cap is centered on the axis origin, the top cap on
    origin + height * direction. Hits report the cylinder itself as the
    struck geometry.

    Raises:
        ValueError: If the radius or the height is not positive.
    """

    def __init__(self, axis: Ray, radius: float, height: float, **kwargs) -> None:
        super().__init__(**kwargs)
        if not height > 0:
            raise ValueError(f"height must be greater than zero, got {height}")
        self._tube = Tube(axis, radius)
        self.height = float(height)

    @property
    def axis(self) -> Axis:
        return self._tube.axis

    @property
    def radius(self) -> float:
        return self._tube.radius

    @property
    def top_center(self) -> Point:
        return self.axis.ray.point_at(self.height)

    def __repr__(self) -> str:
        return f"Cylinder(axis={self.axis.ray!r}, radius={self.radius}, height={self.height})"

    def normal(self, point: Point) -> Vector:
        t = self.axis.projection(point)
        if t <= EPSILON:
            return self.axis.direction.scale(-1.0)
        if abs(t - self.height) <= EPSILON:
            return self.axis.direction
        return self._tube.normal(point)

    def _cap_distance(self, ray: Ray, center: Point, max_distance: float) -> float | None:
        a = self.axis.direction
        na = a.dot(ray.direction)
        if is_zero(na):
            return None
        head = ray.head
        t = align_zero(
            ((center.x - head.x) * a.x + (center.y - head.y) * a.y + (center.z - head.z) * a.z) / na
        )
        if t <= 0 or t > max_distance:
            return None
        if ray.point_at(t).distance_squared(center) >= self.radius * self.radius:
            return None
        return t

    def intersect(self, ray: Ray, max_distance: float = math.inf) -> list[Intersection] | None:
        distances = []
        for t in self._tube.side_distances(ray, max_distance):
            projection = self.axis.projection(ray.point_at(t))
            if 0 <= projection <= self.height:
                distances.append(t)

        for center in (self.axis.origin, self.top_center):
            t = self._cap_distance(ray, center, max_distance)
            if t is not None:
                distances.append(t)

        if not distances:
            return None
        distances.sort()
        return self._hits(*(ray.point_at(t) for t in distances))

    def bounding_box(self) -> AABB:
        r = self.radius
        boxes = [
            AABB(Point(c.x - r, c.y - r, c.z - r), Point(c.x + r, c.y + r, c.z + r))
            for c in (self.axis.origin, self.top_center)
        ]
        return AABB.union_all(boxes)
