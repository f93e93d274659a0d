"""Sparse uniform voxel grid with 3D-DDA ray traversal.

The grid divides a bounding box into nx * ny * nz equal cells. Only cells
that overlap at least one geometry's bounding box are stored, in a dict
keyed by the integer cell index (i, j, k).

Traversal follows Amanatides & Woo, "A Fast Voxel Traversal Algorithm for
Ray Tracing" (1987):

    1. Find where the ray enters the grid box (t = 0 when it starts inside)
       and the cell containing that point.
    2. For every axis keep t_max, the ray parameter of the next cell
       boundary on that axis, and t_delta, the parameter span of one cell.
    3. Repeatedly step along the axis with the smallest t_max until the
       walk leaves the grid.

A geometry spanning several cells is intersected only once per query.

Example:
    >>> grid = VoxelGrid.for_object_count(scene_box, len(shapes))
    >>> for shape in shapes:
    ...     grid.add_object(shape, shape.bounding_box())
    >>> hit = grid.closest_intersection(ray)
"""

from __future__ import annotations

import math
from collections.abc import Iterator

import numpy as np

from src.whitted.accel.aabb import AABB
from src.whitted.core.ray import EPSILON, Ray
from src.whitted.geometry.base import Geometry
from src.whitted.scene.intersection import Intersection

# Default target number of cells per object in the scene
VOXELS_PER_OBJECT = 4

CellIndex = tuple[int, int, int]


class VoxelGrid:
    """A uniform grid over ``bounds`` holding geometries per cell.

    Axes along which the box has zero thickness always get a single cell,
    whatever resolution is requested.

    Raises:
        ValueError: If any resolution is smaller than 1.
    """

    def __init__(self, bounds: AABB, nx: int, ny: int, nz: int) -> None:
        if nx < 1 or ny < 1 or nz < 1:
            raise ValueError(f"Grid resolution must be at least 1 per axis, got ({nx}, {ny}, {nz})")
        self.bounds = bounds
        resolution = []
        cell_size = []
        for extent, n in zip(bounds.size, (nx, ny, nz)):
            if extent < EPSILON:
                resolution.append(1)
                cell_size.append(0.0)
            else:
                resolution.append(int(n))
                cell_size.append(extent / n)
        self.resolution: tuple[int, int, int] = tuple(resolution)
        self.cell_size: tuple[float, float, float] = tuple(cell_size)
        self._cells: dict[CellIndex, list[Geometry]] = {}

    @classmethod
    def for_object_count(
        cls, bounds: AABB, count: int, voxels_per_object: int = VOXELS_PER_OBJECT
    ) -> VoxelGrid:
        """Build a cubic-resolution grid sized for ``count`` objects.

        Uses n = max(1, floor(cbrt(count * voxels_per_object))) cells per axis.
        """
        n = max(1, int(np.cbrt(count * voxels_per_object)))
        return cls(bounds, n, n, n)

    def __repr__(self) -> str:
        return f"VoxelGrid(bounds={self.bounds!r}, resolution={self.resolution})"

    @property
    def occupied_cells(self) -> int:
        return len(self._cells)

    def cell(self, index: CellIndex) -> list[Geometry]:
        """Geometries registered in a cell (empty for unoccupied cells)."""
        return self._cells.get(index, [])

    def _axis_index(self, axis: int, value: float) -> int:
        """Cell index of a coordinate along one axis, clamped into the grid."""
        size = self.cell_size[axis]
        if size == 0.0:
            return 0
        index = math.floor((value - self.bounds.min[axis]) / size)
        return max(0, min(self.resolution[axis] - 1, index))

    def add_object(self, geometry: Geometry, box: AABB) -> None:
        """Register a geometry in every cell its bounding box overlaps."""
        lo = [self._axis_index(axis, box.min[axis]) for axis in range(3)]
        hi = [self._axis_index(axis, box.max[axis]) for axis in range(3)]
        for i in range(lo[0], hi[0] + 1):
            for j in range(lo[1], hi[1] + 1):
                for k in range(lo[2], hi[2] + 1):
                    self._cells.setdefault((i, j, k), []).append(geometry)

    def _walk(self, ray: Ray) -> Iterator[tuple[list[Geometry], float]]:
        """Visit the cells pierced by a ray in front-to-back order (3D-DDA).

        The walk starts where the ray enters the grid bounds and steps one
        cell at a time along the axis whose next boundary is nearest.

        Args:
            ray: Ray to traverse the grid with.

        Yields:
            Tuples of (geometries registered in the cell, ray parameter at
            which the ray leaves the cell). Nothing is yielded when the ray
            misses the grid.
        """
        t_entry = self.bounds.entry_distance(ray)
        if t_entry is None:
            return

        head = ray.head
        direction = ray.direction
        start = ray.point_at(t_entry)

        index = [self._axis_index(axis, start[axis]) for axis in range(3)]
        step = [0, 0, 0]
        t_max = [math.inf, math.inf, math.inf]
        t_delta = [math.inf, math.inf, math.inf]
        for axis in range(3):
            d = direction[axis]
            size = self.cell_size[axis]
            step[axis] = 1 if d >= 0 else -1
            if abs(d) < EPSILON or size == 0.0:
                continue
            lower = self.bounds.min[axis] + index[axis] * size
            boundary = lower + size if d > 0 else lower
            t_max[axis] = (boundary - head[axis]) / d
            t_delta[axis] = size / abs(d)

        nx, ny, nz = self.resolution
        while 0 <= index[0] < nx and 0 <= index[1] < ny and 0 <= index[2] < nz:
            axis = min(range(3), key=t_max.__getitem__)
            following = t_max[axis]
            yield self._cells.get((index[0], index[1], index[2]), []), following
            index[axis] += step[axis]
            t_max[axis] += t_delta[axis]

    def closest_intersection(self, ray: Ray) -> Intersection | None:
        """Nearest hit of the ray with the grid's geometries.

        The walk stops as soon as the next cell starts farther away than the
        best hit found so far.
        """
        head = ray.head
        tested: set[int] = set()
        closest = None
        best = math.inf
        for geometries, following in self._walk(ray):
            for geometry in geometries:
                if id(geometry) in tested:
                    continue
                tested.add(id(geometry))
                hits = geometry.intersect(ray)
                if not hits:
                    continue
                for hit in hits:
                    dist = head.distance(hit.point)
                    if dist < best:
                        best = dist
                        closest = hit
            if following > best:
                break
        return closest

    def all_intersections(self, ray: Ray, max_distance: float = math.inf) -> list[Intersection]:
        """Every hit of the ray within ``max_distance``, in no particular order."""
        tested: set[int] = set()
        found: list[Intersection] = []
        for geometries, following in self._walk(ray):
            for geometry in geometries:
                if id(geometry) in tested:
                    continue
                tested.add(id(geometry))
                hits = geometry.intersect(ray, max_distance)
                if hits:
                    found.extend(hits)
            if following > max_distance:
                break
        return found
