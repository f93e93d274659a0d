"""Ray query strategies used by the shading engine.

Both accelerators answer the same two questions for a ray:

    closest_intersection(ray)              -> Intersection | None
    all_intersections(ray, max_distance)   -> list[Intersection]

``LinearAccelerator`` tests every geometry. ``VoxelAccelerator`` puts the
bounded geometries in a VoxelGrid and scans only the unbounded ones (planes,
tubes) linearly, merging both answers.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod

from src.whitted.accel.aabb import AABB
from src.whitted.accel.voxel_grid import VOXELS_PER_OBJECT, VoxelGrid
from src.whitted.core.ray import Ray
from src.whitted.geometry.geometries import Geometries
from src.whitted.scene.intersection import Intersection, closest_intersection

logger = logging.getLogger(__name__)


class Accelerator(ABC):
    """Query interface over a fixed collection of geometries."""

    @abstractmethod
    def closest_intersection(self, ray: Ray) -> Intersection | None:
        """Nearest hit along the ray, or None."""

    @abstractmethod
    def all_intersections(self, ray: Ray, max_distance: float = math.inf) -> list[Intersection]:
        """Every hit within ``max_distance`` of the ray head."""


class LinearAccelerator(Accelerator):
    """Brute force: every query tests every geometry."""

    def __init__(self, geometries: Geometries) -> None:
        self.geometries = geometries
        logger.debug("Linear accelerator over %d geometries", len(geometries))

    def closest_intersection(self, ray: Ray) -> Intersection | None:
        return closest_intersection(ray, self.geometries.intersect(ray))

    def all_intersections(self, ray: Ray, max_distance: float = math.inf) -> list[Intersection]:
        return self.geometries.intersect(ray, max_distance) or []


class VoxelAccelerator(Accelerator):
    """Voxel grid over the bounded geometries plus a linear list of unbounded ones.

    Attributes:
        grid: The voxel grid, or None when the scene has no bounded geometry.
        unbounded: Geometries without a bounding box.
    """

    def __init__(self, geometries: Geometries, voxels_per_object: int = VOXELS_PER_OBJECT) -> None:
        bounded, self.unbounded = geometries.partition()
        self.grid: VoxelGrid | None = None
        if bounded:
            bounds = AABB.union_all(box for _, box in bounded)
            self.grid = VoxelGrid.for_object_count(bounds, len(bounded), voxels_per_object)
            for geometry, box in bounded:
                self.grid.add_object(geometry, box)
            logger.debug(
                "Voxel grid %s: %d bounded geometries in %d occupied cells",
                self.grid.resolution,
                len(bounded),
                self.grid.occupied_cells,
            )
        logger.debug("Voxel accelerator keeps %d unbounded geometries", len(self.unbounded))

    def _closest_unbounded(self, ray: Ray) -> Intersection | None:
        """Nearest hit among the geometries kept outside the grid (planes, tubes)."""
        hits: list[Intersection] = []
        for geometry in self.unbounded:
            found = geometry.intersect(ray)
            if found:
                hits.extend(found)
        return closest_intersection(ray, hits)

    def closest_intersection(self, ray: Ray) -> Intersection | None:
        grid_hit = self.grid.closest_intersection(ray) if self.grid is not None else None
        unbounded_hit = self._closest_unbounded(ray)
        if grid_hit is None:
            return unbounded_hit
        if unbounded_hit is None:
            return grid_hit
        head = ray.head
        if head.distance_squared(grid_hit.point) < head.distance_squared(unbounded_hit.point):
            return grid_hit
        return unbounded_hit

    def all_intersections(self, ray: Ray, max_distance: float = math.inf) -> list[Intersection]:
        hits = self.grid.all_intersections(ray, max_distance) if self.grid is not None else []
        for geometry in self.unbounded:
            found = geometry.intersect(ray, max_distance)
            if found:
                hits.extend(found)
        return hits

