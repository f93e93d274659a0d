"""Unit tests for the recursive shading integrator.

Tests cover:
- Background color for missed rays
- Local Phong terms (emission, ambient, diffuse, specular)
- Lights behind the surface
- Opaque and transparent occluders
- Reflection recursion depth and attenuation
- Transmission through transparent surfaces
- Tracer construction for both intersection strategies
"""

import math

import pytest


def _sphere_scene(lights, *, material=None, extra=()):
    """A sphere at z = -100 (radius 50) facing a camera at the origin."""
    from src.whitted.core.color import Color
    from src.whitted.core.ray import Point
    from src.whitted.geometry.geometries import Geometries
    from src.whitted.geometry.sphere import Sphere
    from src.whitted.lighting.lights import AmbientLight
    from src.whitted.materials.material import Material
    from src.whitted.scene.scene import Scene

    if material is None:
        material = Material(kA=0.2, kD=0.5)
    sphere = Sphere(Point(0, 0, -100), 50, material=material, emission=Color(100, 0, 0))
    return Scene(
        name="sphere",
        background=Color(10, 20, 30),
        ambient_light=AmbientLight(Color(20, 20, 20)),
        geometries=Geometries(sphere, *extra),
        lights=list(lights),
    )


def _forward_ray():
    from src.whitted.core.ray import Point, Ray, Vector

    return Ray(Point(0, 0, 0), Vector(0, 0, -1))


class TestLocalEffects:
    """Tests for the local illumination term."""

    @pytest.mark.parametrize("tracer_name", ["SIMPLE", "VOXEL"])
    def test_background_on_miss(self, simple_scene, tracer_name):
        """Test that a ray missing everything returns the background."""
        from src.whitted.core.color import Color
        from src.whitted.core.integrator import TracerType, create_tracer
        from src.whitted.core.ray import Point, Ray, Vector

        tracer = create_tracer(simple_scene, TracerType[tracer_name])
        color = tracer.trace_ray(Ray(Point(0, 0, 0), Vector(0, 0, 1)))
        assert color == Color(10, 20, 30)

    def test_emission_ambient_and_diffuse(self):
        """Test emission + kA*ambient + I*kD*|n.l| for a light along the view ray."""
        from src.whitted.core.color import Color
        from src.whitted.core.integrator import create_tracer
        from src.whitted.core.ray import Vector
        from src.whitted.lighting.lights import DirectionalLight

        scene = _sphere_scene([DirectionalLight(Color(200, 200, 200), Vector(0, 0, -1))])
        color = create_tracer(scene).trace_ray(_forward_ray())
        # (100, 0, 0) + 0.2 * 20 + 200 * 0.5 * 1
        assert color == Color(204, 104, 104)

    def test_light_behind_surface(self):
        """Test that a light on the far side of the surface adds nothing."""
        from src.whitted.core.color import Color
        from src.whitted.core.integrator import create_tracer
        from src.whitted.core.ray import Vector
        from src.whitted.lighting.lights import DirectionalLight

        scene = _sphere_scene([DirectionalLight(Color(200, 200, 200), Vector(0, 0, 1))])
        color = create_tracer(scene).trace_ray(_forward_ray())
        assert color == Color(104, 4, 4)

    def test_specular_highlight(self):
        """Test the specular term when the light mirrors straight into the viewer."""
        from src.whitted.core.color import Color
        from src.whitted.core.integrator import create_tracer
        from src.whitted.core.ray import Vector
        from src.whitted.lighting.lights import DirectionalLight
        from src.whitted.materials.material import Material

        material = Material(kA=0.2, kD=0.5, kS=0.25, shininess=50)
        scene = _sphere_scene(
            [DirectionalLight(Color(200, 200, 200), Vector(0, 0, -1))], material=material
        )
        color = create_tracer(scene).trace_ray(_forward_ray())
        # r = (0, 0, 1), -v.r = 1, so the specular factor is kS
        assert color == Color(254, 154, 154)

    def test_oblique_light(self):
        """Test diffuse and specular falloff for a light at 60 degrees."""
        from src.whitted.core.color import Color
        from src.whitted.core.integrator import create_tracer
        from src.whitted.core.ray import Vector
        from src.whitted.lighting.lights import DirectionalLight
        from src.whitted.materials.material import Material

        material = Material(kA=0.2, kD=0.5, kS=0.5, shininess=2)
        light_direction = Vector(math.sqrt(3), 0, -1)
        scene = _sphere_scene([DirectionalLight(Color(200, 200, 200), light_direction)], material=material)
        color = create_tracer(scene).trace_ray(_forward_ray())
        # |n.l| = 0.5, r = (sqrt(3)/2, 0, 1/2), -v.r = 0.5
        diffuse = 0.5 * 0.5
        specular = 0.5 * 0.5**2
        expected = 200 * (diffuse + specular)
        assert color == Color(104 + expected, 4 + expected, 4 + expected)

    def test_point_light_attenuation(self):
        """Test that point light intensity is attenuated by distance."""
        from src.whitted.core.color import Color
        from src.whitted.core.integrator import create_tracer
        from src.whitted.core.ray import Point
        from src.whitted.lighting.lights import PointLight

        # Light 50 units in front of the surface point (0, 0, -50)
        scene = _sphere_scene([PointLight(Color(300, 300, 300), Point(0, 0, 0), kL=0.04)])
        color = create_tracer(scene).trace_ray(_forward_ray())
        # 300 / (1 + 0.04 * 50) = 100, times kD = 0.5
        assert color == Color(154, 54, 54)


class TestShadows:
    """Tests for shadow rays and transparency."""

    def _occluded(self, kT):
        from src.whitted.core.color import Color
        from src.whitted.core.ray import Point, Vector
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.lighting.lights import DirectionalLight
        from src.whitted.materials.material import Material

        occluder = Sphere(Point(0, 0, 20), 5, material=Material(kT=kT))
        return _sphere_scene(
            [DirectionalLight(Color(200, 200, 200), Vector(0, 0, -1))],
            extra=(occluder,),
        )

    @pytest.mark.parametrize("tracer_name", ["SIMPLE", "VOXEL"])
    def test_opaque_occluder_blocks_light(self, tracer_name):
        """Test that an opaque object between surface and light casts a full shadow."""
        from src.whitted.core.color import Color
        from src.whitted.core.integrator import TracerType, create_tracer

        tracer = create_tracer(self._occluded(0.0), TracerType[tracer_name])
        assert tracer.trace_ray(_forward_ray()) == Color(104, 4, 4)

    @pytest.mark.parametrize("tracer_name", ["SIMPLE", "VOXEL"])
    def test_transparent_occluder_tints_shadow(self, tracer_name):
        """Test that a transparent object attenuates light once per surface crossing."""
        from src.whitted.core.color import Color
        from src.whitted.core.integrator import TracerType, create_tracer

        tracer = create_tracer(self._occluded(0.5), TracerType[tracer_name])
        # Shadow ray crosses the sphere twice: ktr = 0.5 * 0.5
        assert tracer.trace_ray(_forward_ray()) == Color(104 + 25, 4 + 25, 4 + 25)

    def test_occluder_beyond_point_light(self):
        """Test that objects farther than a point light do not shadow."""
        from src.whitted.core.color import Color
        from src.whitted.core.integrator import create_tracer
        from src.whitted.core.ray import Point
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.lighting.lights import PointLight

        occluder = Sphere(Point(0, 0, 20), 5)
        scene = _sphere_scene(
            [PointLight(Color(100, 100, 100), Point(0, 0, -10))], extra=(occluder,)
        )
        color = create_tracer(scene).trace_ray(_forward_ray())
        # The occluder lies past the light, so the surface stays lit
        assert color == Color(154, 54, 54)


def _mirror_scene(kR, emission=1.0):
    """Two parallel mirrors at z = -10 and z = 10 facing each other."""
    from src.whitted.core.color import Color
    from src.whitted.core.ray import Point, Vector
    from src.whitted.geometry.geometries import Geometries
    from src.whitted.geometry.plane import Plane
    from src.whitted.materials.material import Material
    from src.whitted.scene.scene import Scene

    mirror = Material(kA=0, kR=kR)
    glow = Color(emission, emission, emission)
    return Scene(
        name="mirrors",
        geometries=Geometries(
            Plane(Point(0, 0, -10), Vector(0, 0, 1), material=mirror, emission=glow),
            Plane(Point(0, 0, 10), Vector(0, 0, -1), material=mirror, emission=glow),
        ),
    )


class TestGlobalEffects:
    """Tests for reflection and transmission."""

    def test_facing_mirrors_terminate_at_max_level(self):
        """Test that perfect mirrors stop after max_level bounces."""
        from src.whitted.core.color import Color
        from src.whitted.core.config import RenderConfig
        from src.whitted.core.integrator import create_tracer

        tracer = create_tracer(_mirror_scene(1.0))
        assert tracer.trace_ray(_forward_ray()) == Color(10, 10, 10)

        tracer = create_tracer(_mirror_scene(1.0), config=RenderConfig(max_level=3))
        assert tracer.trace_ray(_forward_ray()) == Color(3, 3, 3)

    def test_single_level_has_no_global_term(self):
        """Test that max_level 1 evaluates only the local term."""
        from src.whitted.core.color import Color
        from src.whitted.core.config import RenderConfig
        from src.whitted.core.integrator import create_tracer

        tracer = create_tracer(_mirror_scene(1.0), config=RenderConfig(max_level=1))
        assert tracer.trace_ray(_forward_ray()) == Color(1, 1, 1)

    def test_partial_mirrors_attenuate(self):
        """Test that each bounce is scaled by kR."""
        from src.whitted.core.integrator import create_tracer

        color = create_tracer(_mirror_scene(0.5)).trace_ray(_forward_ray())
        expected = sum(0.5**n for n in range(10))
        assert abs(color.r - expected) < 1e-9

    def test_min_k_cuts_recursion(self):
        """Test that recursion stops once the accumulated k is below min_k."""
        from src.whitted.core.config import RenderConfig
        from src.whitted.core.integrator import create_tracer

        config = RenderConfig(min_k=0.2)
        color = create_tracer(_mirror_scene(0.5), config=config).trace_ray(_forward_ray())
        # k = 1, 0.5, 0.25 recurse; k = 0.125 is below 0.2
        assert abs(color.r - (1 + 0.5 + 0.25 + 0.125)) < 1e-9

    def test_transmission_sees_through(self):
        """Test that a transparent pane shows the object behind it, scaled by kT."""
        from src.whitted.core.color import Color
        from src.whitted.core.integrator import create_tracer
        from src.whitted.core.ray import Point, Vector
        from src.whitted.geometry.geometries import Geometries
        from src.whitted.geometry.plane import Plane
        from src.whitted.materials.material import Material
        from src.whitted.scene.scene import Scene

        pane = Plane(Point(0, 0, -5), Vector(0, 0, 1), material=Material(kA=0, kT=0.4))
        wall = Plane(
            Point(0, 0, -20), Vector(0, 0, 1), material=Material(kA=0), emission=Color(100, 50, 0)
        )
        scene = Scene(name="pane", background=Color(1, 1, 1), geometries=Geometries(pane, wall))
        color = create_tracer(scene).trace_ray(_forward_ray())
        assert color == Color(40, 20, 0)

    def test_secondary_miss_is_black(self):
        """Test that a reflected ray escaping the scene contributes black, not the background."""
        from src.whitted.core.color import Color
        from src.whitted.core.integrator import create_tracer
        from src.whitted.core.ray import Point, Vector
        from src.whitted.geometry.geometries import Geometries
        from src.whitted.geometry.plane import Plane
        from src.whitted.materials.material import Material
        from src.whitted.scene.scene import Scene

        mirror = Plane(Point(0, 0, -5), Vector(0, 0, 1), material=Material(kA=0, kR=1))
        scene = Scene(name="mirror", background=Color(50, 50, 50), geometries=Geometries(mirror))
        assert create_tracer(scene).trace_ray(_forward_ray()) == Color.BLACK


class TestCreateTracer:
    """Tests for tracer construction."""

    def test_tracer_types(self, simple_scene):
        """Test that each tracer type picks its accelerator."""
        from src.whitted.accel.accelerator import LinearAccelerator, VoxelAccelerator
        from src.whitted.core.integrator import TracerType, create_tracer

        assert isinstance(create_tracer(simple_scene, TracerType.SIMPLE).accelerator, LinearAccelerator)
        assert isinstance(create_tracer(simple_scene, TracerType.VOXEL).accelerator, VoxelAccelerator)

    def test_tracer_type_from_string(self):
        """Test that tracer types can be looked up by their value."""
        from src.whitted.core.integrator import TracerType

        assert TracerType("voxel") is TracerType.VOXEL
        assert TracerType("simple") is TracerType.SIMPLE

    def test_strategies_agree(self, simple_scene):
        """Test that both strategies shade the same colors."""
        from src.whitted.core.integrator import TracerType, create_tracer
        from src.whitted.core.ray import Point, Ray, Vector

        simple = create_tracer(simple_scene, TracerType.SIMPLE)
        voxel = create_tracer(simple_scene, TracerType.VOXEL)
        for x in range(-40, 41, 10):
            for y in range(-40, 41, 10):
                ray = Ray(Point(0, 0, 0), Vector(x, y, -100))
                assert simple.trace_ray(ray) == voxel.trace_ray(ray)
