"""Unit tests for intersection records."""


class TestIntersection:
    """Tests for the immutable hit record."""

    def test_with_view_sets_normal_and_nv(self):
        """Test that with_view attaches the normal and the aligned dot product."""
        from src.whitted.core.ray import Point, Vector
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.intersection import Intersection

        sphere = Sphere(Point(0, 0, 0), 1)
        hit = Intersection(sphere, Point(0, 0, 1))
        viewed = hit.with_view(Vector(0, 0, -1))
        assert viewed.normal == Vector(0, 0, 1)
        assert viewed.nv == -1.0
        assert hit.normal is None

    def test_with_light_and_visibility(self):
        """Test that a light on the viewer's side is visible and one behind is not."""
        from src.whitted.core.color import Color
        from src.whitted.core.ray import Point, Vector
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.lighting.lights import DirectionalLight
        from src.whitted.scene.intersection import Intersection

        sphere = Sphere(Point(0, 0, 0), 1)
        hit = Intersection(sphere, Point(0, 0, 1)).with_view(Vector(0, 0, -1))
        front = hit.with_light(DirectionalLight(Color(1, 1, 1), Vector(0, 0, -1)))
        back = hit.with_light(DirectionalLight(Color(1, 1, 1), Vector(0, 0, 1)))
        assert front.light_visible
        assert not back.light_visible
        assert front.nl == -1.0

    def test_grazing_light_not_visible(self):
        """Test that a light parallel to the surface does not light it."""
        from src.whitted.core.color import Color
        from src.whitted.core.ray import Point, Vector
        from src.whitted.geometry.plane import Plane
        from src.whitted.lighting.lights import DirectionalLight
        from src.whitted.scene.intersection import Intersection

        plane = Plane(Point(0, 0, 0), Vector(0, 0, 1))
        hit = Intersection(plane, Point(1, 1, 0)).with_view(Vector(0, 0, -1))
        lit = hit.with_light(DirectionalLight(Color(1, 1, 1), Vector(1, 0, 0)))
        assert lit.nl == 0.0
        assert not lit.light_visible

    def test_closest_intersection(self):
        """Test selecting the hit nearest to the ray head."""
        from src.whitted.core.ray import Point, Ray, Vector
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.scene.intersection import closest_intersection

        sphere = Sphere(Point(0, 0, -5), 1)
        ray = Ray(Point(0, 0, 0), Vector(0, 0, -1))
        hits = sphere.intersect(ray)
        assert closest_intersection(ray, list(reversed(hits))).point == Point(0, 0, -4)
        assert closest_intersection(ray, None) is None
        assert closest_intersection(ray, []) is None
