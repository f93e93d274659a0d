"""Shared building blocks for round shapes.

Sphere, Tube and Cylinder all need a validated radius, and Tube and Cylinder
also share an axis. Instead of inheriting these fields, the shapes hold a
``Radius`` and an ``Axis`` value.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.whitted.core.ray import Point, Ray, Vector, is_zero


@dataclass(frozen=True)
class Radius:
    """A strictly positive radius.

    Raises:
        ValueError: If the value is not positive.
    """

    value: float

    def __post_init__(self) -> None:
        if not self.value > 0:
            raise ValueError(f"radius must be greater than zero, got {self.value}")
        object.__setattr__(self, "value", float(self.value))


@dataclass(frozen=True, eq=False)
class Axis:
    """An oriented line: an origin and a unit direction."""

    ray: Ray

    @property
    def origin(self) -> Point:
        return self.ray.head

    @property
    def direction(self) -> Vector:
        return self.ray.direction

    def projection(self, point: Point) -> float:
        """Signed distance along the axis of the point's projection."""
        d = self.direction
        o = self.origin
        return (point.x - o.x) * d.x + (point.y - o.y) * d.y + (point.z - o.z) * d.z

    def radial(self, point: Point) -> Vector:
        """Unit vector from the axis toward ``point``, perpendicular to the axis.

        When the point lies on the axis any vector orthogonal to the axis is
        returned (cross with the X axis, or the Y axis if the axis is along X).
        """
        t = self.projection(point)
        foot = self.ray.point_at(t)
        dx = point.x - foot.x
        dy = point.y - foot.y
        dz = point.z - foot.z
        if is_zero(dx) and is_zero(dy) and is_zero(dz):
            return self.orthogonal()
        return Vector(dx, dy, dz).normalize()

    def orthogonal(self) -> Vector:
        d = self.direction
        try:
            return d.cross(Vector.X).normalize()
        except ValueError:
            return d.cross(Vector.Y).normalize()
