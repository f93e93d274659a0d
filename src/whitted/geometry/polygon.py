"""Convex planar polygons and triangles.

A polygon is a list of coplanar vertices in a consistent winding order
forming a convex shape. The constructor validates this and fails loudly on:

    - fewer than 3 vertices, or coincident consecutive vertices
    - three first vertices that are collinear
    - a vertex outside the plane of the first three
    - a reflex (concave) vertex or a reversed winding
    - a vertex lying on the line of its neighbouring edge

Both Polygon and Triangle only report hits strictly inside the shape: a ray
landing exactly on an edge, on a vertex, or on the extension of an edge is
not a hit.

Example:
    >>> triangle = Triangle(Point(0, 0, 1), Point(1, 0, 0), Point(0, 1, 0))
    >>> triangle.find_intersections(Ray(Point(0.2, 0.2, -1), Vector(0, 0, 1)))
    [Point(0.2, 0.2, 0.6)]
"""

from __future__ import annotations

import math

from src.whitted.accel.aabb import AABB
from src.whitted.core.ray import EPSILON, Point, Ray, Vector, align_zero, is_zero
from src.whitted.geometry.base import Geometry
from src.whitted.geometry.plane import Plane
from src.whitted.scene.intersection import Intersection


class Polygon(Geometry):
    """A convex planar polygon.

    Attributes:
        vertices: The vertices in winding order.
        plane: The plane containing the polygon.

    Raises:
        ValueError: If the vertices do not form a valid convex polygon.
    """

    def __init__(self, *vertices: Point, **kwargs) -> None:
        super().__init__(**kwargs)
        if len(vertices) < 3:
            raise ValueError("A polygon can't have less than 3 vertices")
        self.vertices = tuple(vertices)
        self.plane = Plane.from_points(vertices[0], vertices[1], vertices[2])
        self._validate()

    def _validate(self) -> None:
        vertices = self.vertices
        size = len(vertices)
        for i in range(size):
            if vertices[i] == vertices[i - 1]:
                raise ValueError("Polygon vertices must be distinct")
        if size == 3:
            return

        n = self.plane.normal()
        base = n.dot(vertices[0])
        for vertex in vertices[1:]:
            if not is_zero(n.dot(vertex) - base):
                raise ValueError("All vertices of a polygon must lay in the same plane")

        # edges[i] runs from vertex i - 1 to vertex i
        edges = [vertices[i].subtract(vertices[i - 1]) for i in range(size)]
        for i in range(size):
            if edges[i - 1].is_parallel(edges[i]):
                raise ValueError("No vertex of a polygon may lie on an edge")

        positive = edges[-1].cross(edges[0]).dot(n) > 0
        for i in range(1, size):
            if positive != (edges[i - 1].cross(edges[i]).dot(n) > 0):
                raise ValueError("All vertices must be ordered and the polygon must be convex")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(repr(v) for v in self.vertices)})"

    def normal(self, point: Point | None = None) -> Vector:
        return self.plane.normal()

    def intersect(self, ray: Ray, max_distance: float = math.inf) -> list[Intersection] | None:
        t = self.plane.distance_along(ray)
        if t is None or t > max_distance:
            return None

        head = ray.head
        d = ray.direction
        vertices = self.vertices
        sign = 0.0
        for i, vertex in enumerate(vertices):
            following = vertices[(i + 1) % len(vertices)]
            # Edge vectors from the ray head to two consecutive vertices
            ax, ay, az = vertex.x - head.x, vertex.y - head.y, vertex.z - head.z
            bx, by, bz = following.x - head.x, following.y - head.y, following.z - head.z
            nx = ay * bz - az * by
            ny = az * bx - ax * bz
            nz = ax * by - ay * bx
            s = align_zero(nx * d.x + ny * d.y + nz * d.z)
            if s == 0 or (sign != 0 and (s > 0) != (sign > 0)):
                return None
            sign = s
        return self._hits(ray.point_at(t))

    def bounding_box(self) -> AABB:
        xs = [v.x for v in self.vertices]
        ys = [v.y for v in self.vertices]
        zs = [v.z for v in self.vertices]
        return AABB(Point(min(xs), min(ys), min(zs)), Point(max(xs), max(ys), max(zs)))


class Triangle(Polygon):
    """A triangle intersected with the Moller-Trumbore algorithm.

    Barycentric coordinates must satisfy u > 0, v > 0 and u + v < 1 strictly
    (after snapping values within EPSILON of zero), so edges and vertices
    never register as hits.
    """

    def __init__(self, p0: Point, p1: Point, p2: Point, **kwargs) -> None:
        super().__init__(p0, p1, p2, **kwargs)

    def intersect(self, ray: Ray, max_distance: float = math.inf) -> list[Intersection] | None:
        v0, v1, v2 = self.vertices
        head = ray.head
        d = ray.direction

        e1x, e1y, e1z = v1.x - v0.x, v1.y - v0.y, v1.z - v0.z
        e2x, e2y, e2z = v2.x - v0.x, v2.y - v0.y, v2.z - v0.z

        # p = d x e2
        px = d.y * e2z - d.z * e2y
        py = d.z * e2x - d.x * e2z
        pz = d.x * e2y - d.y * e2x
        det = e1x * px + e1y * py + e1z * pz
        if abs(det) < EPSILON:
            # Ray is parallel to the triangle's plane
            return None
        inv_det = 1.0 / det

        sx, sy, sz = head.x - v0.x, head.y - v0.y, head.z - v0.z
        u = align_zero((sx * px + sy * py + sz * pz) * inv_det)
        if u <= 0 or u >= 1:
            return None

        # q = s x e1
        qx = sy * e1z - sz * e1y
        qy = sz * e1x - sx * e1z
        qz = sx * e1y - sy * e1x
        v = align_zero((d.x * qx + d.y * qy + d.z * qz) * inv_det)
        if v <= 0 or align_zero(u + v - 1) >= 0:
            return None

        t = align_zero((e2x * qx + e2y * qy + e2z * qz) * inv_det)
        if t <= 0 or t > max_distance:
            return None
        return self._hits(ray.point_at(t))
