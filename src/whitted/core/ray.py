"""Ray data structure and vector algebra for the Whitted ray tracer.

This module provides the Point, Vector and Ray value types together with the
tolerance helpers every other module relies on. All types are immutable so
that they can be shared freely between rays and worker processes.

Points and vectors compare equal when every component differs by less than
``EPSILON``. A Vector can never be the zero vector: constructing one (directly
or as the result of an operation) raises ValueError.

Example:
    >>> from src.whitted.core.ray import Point, Ray, Vector
    >>> ray = Ray(Point(0, 0, 0), Vector(0, 0, 2))
    >>> ray.direction
    Vector(0.0, 0.0, 1.0)
    >>> ray.point_at(5.0)
    Point(0.0, 0.0, 5.0)
"""

from __future__ import annotations

import math
from collections.abc import Sequence

# Absolute tolerance used for "is this number zero" decisions
EPSILON = 1e-10


def is_zero(value: float) -> bool:
    """Check whether a number is zero within EPSILON."""
    return abs(value) < EPSILON


def align_zero(value: float) -> float:
    """Snap values within EPSILON of zero to exactly 0.0.

    Args:
        value: The number to align.

    Returns:
        0.0 if the value is numerically zero, the value itself otherwise.
    """
    return 0.0 if abs(value) < EPSILON else value


# =============================================================================
# Point
# =============================================================================


class Point:
    """A location in 3D space.

    Attributes:
        x, y, z: The coordinates of the point.
    """

    __slots__ = ("x", "y", "z")

    def __init__(self, x: float, y: float, z: float) -> None:
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    @classmethod
    def of(cls, values: Sequence[float]) -> Point:
        """Build a point from any 3-element sequence."""
        if len(values) != 3:
            raise ValueError(f"Expected 3 components, got {len(values)}")
        return cls(values[0], values[1], values[2])

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, axis: int) -> float:
        return (self.x, self.y, self.z)[axis]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return (
            is_zero(self.x - other.x)
            and is_zero(self.y - other.y)
            and is_zero(self.z - other.z)
        )

    __hash__ = None  # equality is tolerance based

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.x}, {self.y}, {self.z})"

    def __getstate__(self):
        return (self.x, self.y, self.z)

    def __setstate__(self, state) -> None:
        self.x, self.y, self.z = state

    def add(self, vector: Vector) -> Point:
        """Translate the point by a vector."""
        return Point(self.x + vector.x, self.y + vector.y, self.z + vector.z)

    def subtract(self, other: Point) -> Vector:
        """Return the vector pointing from ``other`` to this point.

        Raises:
            ValueError: If the two points coincide.
        """
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def distance_squared(self, other: Point) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return dx * dx + dy * dy + dz * dz

    def distance(self, other: Point) -> float:
        return math.sqrt(self.distance_squared(other))

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


# Origin of the coordinate system
Point.ZERO = Point(0.0, 0.0, 0.0)


# =============================================================================
# Vector
# =============================================================================


class Vector(Point):
    """A non-zero direction in 3D space.

    Raises:
        ValueError: On construction of the zero vector.
    """

    __slots__ = ()

    def __init__(self, x: float, y: float, z: float) -> None:
        super().__init__(x, y, z)
        if is_zero(self.x) and is_zero(self.y) and is_zero(self.z):
            raise ValueError("Vector zero is not allowed")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return super().__eq__(other)

    __hash__ = None

    def add(self, vector: Vector) -> Vector:
        return Vector(self.x + vector.x, self.y + vector.y, self.z + vector.z)

    def scale(self, scalar: float) -> Vector:
        return Vector(self.x * scalar, self.y * scalar, self.z * scalar)

    def dot(self, other: Point) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector) -> Vector:
        """Compute the cross product.

        Raises:
            ValueError: If the vectors are parallel (the product is zero).
        """
        return Vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def is_parallel(self, other: Vector) -> bool:
        """True when the cross product with ``other`` would be the zero vector."""
        return (
            is_zero(self.y * other.z - self.z * other.y)
            and is_zero(self.z * other.x - self.x * other.z)
            and is_zero(self.x * other.y - self.y * other.x)
        )

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalize(self) -> Vector:
        """Return the unit vector with the same direction."""
        length = self.length()
        return Vector(self.x / length, self.y / length, self.z / length)


# Canonical axes
Vector.X = Vector(1.0, 0.0, 0.0)
Vector.Y = Vector(0.0, 1.0, 0.0)
Vector.Z = Vector(0.0, 0.0, 1.0)


def reflect(incident: Vector, normal: Vector) -> Vector:
    """Reflect an incident vector about a normal: r = v - 2(v.n)n.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (unit length).

    Returns:
        The reflected direction vector.

    Raises:
        ValueError: If the reflection degenerates to the zero vector.
    """
    factor = -2.0 * incident.dot(normal)
    return Vector(
        incident.x + factor * normal.x,
        incident.y + factor * normal.y,
        incident.z + factor * normal.z,
    )


# =============================================================================
# Ray
# =============================================================================


class Ray:
    """A half-line with a head point and a unit direction.

    The direction passed to the constructor is normalized.

    Attributes:
        head: The starting point of the ray.
        direction: The unit direction vector.
    """

    __slots__ = ("head", "direction")

    def __init__(self, head: Point, direction: Vector) -> None:
        self.head = head
        self.direction = direction.normalize()

    def __repr__(self) -> str:
        return f"Ray(head={self.head!r}, direction={self.direction!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ray):
            return NotImplemented
        return self.head == other.head and self.direction == other.direction

    __hash__ = None

    def __getstate__(self):
        return (self.head, self.direction)

    def __setstate__(self, state) -> None:
        self.head, self.direction = state

    def point_at(self, t: float) -> Point:
        """Compute the point along the ray at parameter t.

        Returns the head itself for t == 0 so callers can compare by identity.
        """
        if is_zero(t):
            return self.head
        d = self.direction
        return Point(self.head.x + t * d.x, self.head.y + t * d.y, self.head.z + t * d.z)
