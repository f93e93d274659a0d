"""A flat collection of geometries tested as one object."""

from __future__ import annotations

import math
from collections.abc import Iterator

from src.whitted.accel.aabb import AABB
from src.whitted.core.ray import Ray
from src.whitted.geometry.base import Geometry, Intersectable
from src.whitted.scene.intersection import Intersection


class Geometries(Intersectable):
    """Composite of geometries.

    Intersections are the concatenation of every child's hits, in no
    particular order. The bounding box is the union of the children's boxes,
    or None when the collection is empty or holds an unbounded child.
    """

    def __init__(self, *geometries: Geometry) -> None:
        self._geometries: list[Geometry] = []
        self.add(*geometries)

    def add(self, *geometries: Geometry) -> None:
        self._geometries.extend(geometries)

    def __iter__(self) -> Iterator[Geometry]:
        return iter(self._geometries)

    def __len__(self) -> int:
        return len(self._geometries)

    def __repr__(self) -> str:
        return f"Geometries({len(self._geometries)} items)"

    def intersect(self, ray: Ray, max_distance: float = math.inf) -> list[Intersection] | None:
        hits: list[Intersection] = []
        for geometry in self._geometries:
            found = geometry.intersect(ray, max_distance)
            if found:
                hits.extend(found)
        return hits or None

    def bounding_box(self) -> AABB | None:
        if not self._geometries:
            return None
        boxes = []
        for geometry in self._geometries:
            box = geometry.bounding_box()
            if box is None:
                return None
            boxes.append(box)
        return AABB.union_all(boxes)

    def partition(self) -> tuple[list[tuple[Geometry, AABB]], list[Geometry]]:
        """Split the children into (bounded, box) pairs and unbounded geometries."""
        bounded = []
        unbounded = []
        for geometry in self._geometries:
            box = geometry.bounding_box()
            if box is None:
                unbounded.append(geometry)
            else:
                bounded.append((geometry, box))
        return bounded, unbounded
