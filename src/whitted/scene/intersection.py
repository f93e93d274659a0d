"""Per-ray intersection records and closest-hit selection.

An ``Intersection`` binds the geometry a ray struck to the hit point. The
shading engine enriches it step by step (view direction, surface normal,
active light source and the related dot products), always producing a new
record instead of mutating the old one, so a record can never leak state
between rays or between the workers rendering different pixels.

Example:
    >>> hit = Intersection(sphere, Point(0, 0, 1))
    >>> hit = hit.with_view(Vector(0, 0, -1))
    >>> hit.nv
    -1.0
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from src.whitted.core.ray import Point, Ray, Vector, align_zero

if TYPE_CHECKING:
    from src.whitted.geometry.base import Geometry
    from src.whitted.lighting.lights import LightSource
    from src.whitted.materials.material import Material


@dataclass(frozen=True, eq=False)
class Intersection:
    """Record of a ray striking a geometry.

    Attributes:
        geometry: The geometry that was hit.
        point: The hit point.
        direction: Direction of the ray that produced the hit (set by with_view).
        normal: Unit surface normal at the hit point (set by with_view).
        nv: align_zero(direction . normal) (set by with_view).
        light: The light currently being evaluated (set by with_light).
        light_direction: Vector from the light toward the point (set by with_light).
        nl: align_zero(light_direction . normal) (set by with_light).
    """

    geometry: Geometry
    point: Point
    direction: Vector | None = None
    normal: Vector | None = None
    nv: float = 0.0
    light: LightSource | None = None
    light_direction: Vector | None = None
    nl: float = 0.0

    @property
    def material(self) -> Material:
        return self.geometry.material

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Intersection):
            return NotImplemented
        return self.geometry is other.geometry and self.point == other.point

    __hash__ = None

    def with_view(self, direction: Vector) -> Intersection:
        """Attach the incoming ray direction and the surface normal."""
        normal = self.geometry.normal(self.point)
        return replace(
            self,
            direction=direction,
            normal=normal,
            nv=align_zero(direction.dot(normal)),
        )

    def with_light(self, light: LightSource) -> Intersection:
        """Attach a light source; requires with_view to have been applied."""
        light_direction = light.direction_from(self.point)
        return replace(
            self,
            light=light,
            light_direction=light_direction,
            nl=align_zero(light_direction.dot(self.normal)),
        )

    @property
    def light_visible(self) -> bool:
        """True when the light and the viewer are on the same side of the surface."""
        return self.nv * self.nl > 0


def closest_intersection(ray: Ray, hits: Iterable[Intersection] | None) -> Intersection | None:
    """Select the hit nearest to the ray head.

    Args:
        ray: The ray that produced the hits.
        hits: Candidate intersections in any order, or None.

    Returns:
        The closest intersection, or None if there are no candidates.
    """
    if not hits:
        return None
    head = ray.head
    closest = None
    best = float("inf")
    for hit in hits:
        dist = head.distance_squared(hit.point)
        if dist < best:
            best = dist
            closest = hit
    return closest
