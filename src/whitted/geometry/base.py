"""Shape capability shared by every geometric primitive.

Every concrete shape implements three operations:

    normal(point)            -> unit Vector at a surface point
    intersect(ray, max_dist) -> list of Intersection, or None for no hit
    bounding_box()           -> AABB, or None for unbounded shapes

Each geometry also carries a Material and an emission Color. Shapes are
immutable after construction; ``with_material`` and ``with_emission`` return
modified copies.
"""

from __future__ import annotations

import copy
import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from src.whitted.core.color import Color
from src.whitted.core.ray import Point, Ray, Vector
from src.whitted.materials.material import DEFAULT_MATERIAL, Material
from src.whitted.scene.intersection import Intersection

if TYPE_CHECKING:
    from src.whitted.accel.aabb import AABB


class Intersectable(ABC):
    """Anything a ray can be tested against (shapes and shape collections)."""

    @abstractmethod
    def intersect(self, ray: Ray, max_distance: float = math.inf) -> list[Intersection] | None:
        """Find the intersections of a ray within (0, max_distance].

        Returns:
            A non-empty list of intersections, or None if there is none.
        """

    @abstractmethod
    def bounding_box(self) -> AABB | None:
        """Axis-aligned bounds, or None for unbounded shapes."""

    def find_intersections(self, ray: Ray, max_distance: float = math.inf) -> list[Point] | None:
        """Like intersect(), returning only the hit points."""
        hits = self.intersect(ray, max_distance)
        return None if hits is None else [hit.point for hit in hits]


class Geometry(Intersectable):
    """A single shape with a material and an emission color."""

    def __init__(self, *, material: Material = DEFAULT_MATERIAL, emission: Color = Color.BLACK) -> None:
        self._material = material
        self._emission = emission

    @property
    def material(self) -> Material:
        return self._material

    @property
    def emission(self) -> Color:
        return self._emission

    def with_material(self, material: Material) -> Geometry:
        clone = copy.copy(self)
        clone._material = material
        return clone

    def with_emission(self, emission: Color) -> Geometry:
        clone = copy.copy(self)
        clone._emission = emission
        return clone

    @abstractmethod
    def normal(self, point: Point) -> Vector:
        """Unit surface normal at ``point``."""

    def _hits(self, *points: Point) -> list[Intersection]:
        return [Intersection(self, point) for point in points]
