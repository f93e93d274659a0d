"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    The camera direction kernel and the render target live in Taichi, and
    repeated ti.init() calls reset every field already allocated.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture
def simple_scene():
    """A red sphere lit by a point light over a black background."""
    from src.whitted.core.color import Color
    from src.whitted.core.ray import Point
    from src.whitted.geometry.geometries import Geometries
    from src.whitted.geometry.sphere import Sphere
    from src.whitted.lighting.lights import AmbientLight, PointLight
    from src.whitted.materials.material import Material
    from src.whitted.scene.scene import Scene

    sphere = Sphere(
        Point(0, 0, -100),
        50,
        material=Material(kA=0.2, kD=0.5, kS=0.5, shininess=30),
        emission=Color(100, 0, 0),
    )
    return Scene(
        name="simple",
        background=Color(10, 20, 30),
        ambient_light=AmbientLight(Color(20, 20, 20)),
        geometries=Geometries(sphere),
        lights=[PointLight(Color(500, 500, 500), Point(0, 100, 0), kL=0.001)],
    )


@pytest.fixture
def small_camera():
    """An 8x6 camera at the origin looking down -Z."""
    from src.whitted.camera.pinhole import CameraBuilder
    from src.whitted.core.ray import Point, Vector

    return (
        CameraBuilder()
        .set_location(Point(0, 0, 0))
        .set_direction(Vector(0, 0, -1), Vector(0, 1, 0))
        .set_vp_size(160, 120)
        .set_vp_distance(100)
        .set_resolution(8, 6)
        .build()
    )
