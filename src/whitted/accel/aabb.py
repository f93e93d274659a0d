"""Axis-aligned bounding boxes.

An AABB is described by its minimum and maximum corners. It supports the
classic slab ray test, union with another box and a lazily computed center.

Example:
    >>> box = AABB(Point(-1, -1, -1), Point(1, 1, 1))
    >>> box.intersects(Ray(Point(0, 0, -5), Vector(0, 0, 1)))
    True
    >>> box.union(AABB(Point(0, 0, 0), Point(3, 3, 3))).max
    Point(3.0, 3.0, 3.0)
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from functools import reduce

from src.whitted.core.ray import EPSILON, Point, Ray


class AABB:
    """An axis-aligned box with min <= max on every axis.

    Raises:
        ValueError: If any min component exceeds the matching max component.
    """

    __slots__ = ("min", "max", "_center")

    def __init__(self, min_point: Point, max_point: Point) -> None:
        if min_point.x > max_point.x or min_point.y > max_point.y or min_point.z > max_point.z:
            raise ValueError(f"AABB min {min_point} must not exceed max {max_point}")
        self.min = min_point
        self.max = max_point
        self._center = None

    def __repr__(self) -> str:
        return f"AABB(min={self.min!r}, max={self.max!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AABB):
            return NotImplemented
        return self.min == other.min and self.max == other.max

    __hash__ = None

    def __getstate__(self):
        return (self.min, self.max)

    def __setstate__(self, state) -> None:
        self.min, self.max = state
        self._center = None

    @property
    def center(self) -> Point:
        """Midpoint of the box, computed on first access."""
        if self._center is None:
            self._center = Point(
                (self.min.x + self.max.x) / 2,
                (self.min.y + self.max.y) / 2,
                (self.min.z + self.max.z) / 2,
            )
        return self._center

    @property
    def size(self) -> tuple[float, float, float]:
        return (self.max.x - self.min.x, self.max.y - self.min.y, self.max.z - self.min.z)

    def contains(self, point: Point) -> bool:
        """True when the point lies inside or on the boundary of the box."""
        return (
            self.min.x <= point.x <= self.max.x
            and self.min.y <= point.y <= self.max.y
            and self.min.z <= point.z <= self.max.z
        )

    def contains_box(self, other: AABB) -> bool:
        return self.contains(other.min) and self.contains(other.max)

    def _slab_interval(self, ray: Ray) -> tuple[float, float] | None:
        # Parametric [t_min, t_max] of the ray line inside the box, or None
        t_min = -math.inf
        t_max = math.inf
        head = ray.head
        direction = ray.direction
        for axis in range(3):
            axis_dir = direction[axis]
            axis_origin = head[axis]
            axis_min = self.min[axis]
            axis_max = self.max[axis]
            if abs(axis_dir) < EPSILON:
                if axis_origin < axis_min or axis_origin > axis_max:
                    return None
                continue
            t1 = (axis_min - axis_origin) / axis_dir
            t2 = (axis_max - axis_origin) / axis_dir
            if t1 > t2:
                t1, t2 = t2, t1
            t_min = max(t_min, t1)
            t_max = min(t_max, t2)
            if t_min > t_max:
                return None
        return t_min, t_max

    def intersects(self, ray: Ray) -> bool:
        """Slab test of the (infinite) ray line against the box."""
        return self._slab_interval(ray) is not None

    def entry_distance(self, ray: Ray) -> float | None:
        """Distance along the ray at which it enters the box.

        Returns:
            0.0 if the head is already inside, the entry parameter if the box
            lies ahead of the ray, None if the ray misses or the box is behind.
        """
        interval = self._slab_interval(ray)
        if interval is None:
            return None
        t_min, t_max = interval
        if t_max < 0:
            return None
        return max(t_min, 0.0)

    def union(self, other: AABB) -> AABB:
        """Smallest box containing both boxes."""
        return AABB(
            Point(
                min(self.min.x, other.min.x),
                min(self.min.y, other.min.y),
                min(self.min.z, other.min.z),
            ),
            Point(
                max(self.max.x, other.max.x),
                max(self.max.y, other.max.y),
                max(self.max.z, other.max.z),
            ),
        )

    @staticmethod
    def union_all(boxes: Iterable[AABB]) -> AABB:
        """Fold union() over a non-empty sequence of boxes.

        Raises:
            ValueError: If no boxes are given.
        """
        boxes = list(boxes)
        if not boxes:
            raise ValueError("Cannot build the union of no boxes")
        return reduce(AABB.union, boxes)
