"""Cornell box demo scene.

An open box of five polygon walls (a red wall at x = 0, a green wall at
x = box_size, white back wall, floor and ceiling) holding three spheres:

    - a matte white sphere
    - a mirror sphere (kR)
    - a glass-like sphere (kT), which casts a tinted, partial shadow

A point light hangs under the ceiling. The camera looks into the box along
+Z through its open front, so the x = 0 wall appears on the right of the
image.

Coordinates span 0..box_size on every axis with Y pointing up.

Example:
    >>> from src.whitted.scene.cornell_box import create_cornell_box_scene
    >>> scene, camera = create_cornell_box_scene(resolution=(200, 200))
    >>> len(scene.geometries)
    8
"""

from __future__ import annotations

from dataclasses import dataclass

from src.whitted.camera.pinhole import Camera, CameraBuilder
from src.whitted.core.color import Color
from src.whitted.core.ray import Point, Vector
from src.whitted.geometry.geometries import Geometries
from src.whitted.geometry.polygon import Polygon
from src.whitted.geometry.sphere import Sphere
from src.whitted.lighting.lights import AmbientLight, PointLight
from src.whitted.materials.material import Material
from src.whitted.scene.scene import Scene

# Classic Cornell box size
BOX_SIZE = 555.0

# Per-channel wall reflectance
RED_WALL_ALBEDO = (0.65, 0.05, 0.05)
GREEN_WALL_ALBEDO = (0.12, 0.45, 0.15)
WHITE_WALL_ALBEDO = (0.73, 0.73, 0.73)


@dataclass
class CornellBoxParams:
    """Adjustable light and wall settings.

    Colors use the 0-255 scene scale; albedos are per-channel reflectances.

    Example:
        >>> params = CornellBoxParams(light_intensity=(900.0, 800.0, 700.0))
        >>> scene, camera = create_cornell_box_scene(params=params)
    """

    light_intensity: tuple[float, float, float] = (600.0, 600.0, 600.0)
    ambient: tuple[float, float, float] = (40.0, 40.0, 40.0)
    left_wall_albedo: tuple[float, float, float] = RED_WALL_ALBEDO
    right_wall_albedo: tuple[float, float, float] = GREEN_WALL_ALBEDO
    back_wall_albedo: tuple[float, float, float] = WHITE_WALL_ALBEDO


def _wall(albedo: tuple[float, float, float]) -> Material:
    return Material(kA=albedo, kD=albedo, kS=0.1, shininess=10)


def create_cornell_box_scene(
    box_size: float = BOX_SIZE,
    params: CornellBoxParams | None = None,
    resolution: tuple[int, int] = (400, 400),
) -> tuple[Scene, Camera]:
    """Build the Cornell box scene and a camera framing it.

    Args:
        box_size: Edge length of the box.
        params: Light and wall settings (defaults to CornellBoxParams()).
        resolution: Image (width, height) in pixels.

    Returns:
        The scene and the camera.
    """
    if params is None:
        params = CornellBoxParams()
    s = box_size

    white = _wall(WHITE_WALL_ALBEDO)
    walls = [
        # Left wall, x = 0
        Polygon(
            Point(0, 0, 0), Point(0, s, 0), Point(0, s, s), Point(0, 0, s),
            material=_wall(params.left_wall_albedo),
        ),
        # Right wall, x = s
        Polygon(
            Point(s, 0, 0), Point(s, 0, s), Point(s, s, s), Point(s, s, 0),
            material=_wall(params.right_wall_albedo),
        ),
        # Back wall, z = s
        Polygon(
            Point(0, 0, s), Point(0, s, s), Point(s, s, s), Point(s, 0, s),
            material=_wall(params.back_wall_albedo),
        ),
        # Floor, y = 0
        Polygon(Point(0, 0, 0), Point(0, 0, s), Point(s, 0, s), Point(s, 0, 0), material=white),
        # Ceiling, y = s
        Polygon(Point(0, s, 0), Point(s, s, 0), Point(s, s, s), Point(0, s, s), material=white),
    ]

    r = s * 0.15
    spheres = [
        Sphere(
            Point(s * 0.25, r, s * 0.65),
            r,
            material=Material(kA=0.5, kD=0.6, kS=0.3, shininess=40),
        ),
        Sphere(
            Point(s * 0.55, r, s * 0.75),
            r,
            material=Material(kA=0.1, kD=0.1, kS=0.5, kR=0.7, shininess=120),
        ),
        Sphere(
            Point(s * 0.78, r, s * 0.4),
            r,
            material=Material(kA=0.1, kD=(0.05, 0.1, 0.2), kS=0.6, kT=0.7, shininess=200),
            emission=Color(0, 0, 15),
        ),
    ]

    scene = Scene(
        name="cornell-box",
        background=Color.BLACK,
        ambient_light=AmbientLight(Color(*params.ambient)),
        geometries=Geometries(*walls, *spheres),
        lights=[
            PointLight(
                Color(*params.light_intensity),
                Point(s * 0.5, s * 0.9, s * 0.5),
                kL=0.0005,
                kQ=0.000005,
            ),
        ],
    )

    width, height = resolution
    camera = (
        CameraBuilder()
        .set_location(Point(s * 0.5, s * 0.5, -1.4 * s))
        .set_direction(Vector(0, 0, 1), Vector(0, 1, 0))
        .set_vp_size(s * 0.5 * width / height, s * 0.5)
        .set_vp_distance(s * 0.65)
        .set_resolution(width, height)
        .build()
    )
    return scene, camera
