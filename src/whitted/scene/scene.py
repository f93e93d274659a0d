"""Scene aggregate and dict-based scene construction.

A scene description is a plain dict whose keys mirror the XML dialect read by
``src.whitted.scene.xml_parser``:

    {
        "name": "demo",
        "background-color": "0 0 0",              # or [0, 0, 0]
        "ambient-light": {"color": "25 25 25"},
        "geometries": [
            {"type": "sphere", "center": "0 0 -100", "radius": 50,
             "kD": 0.5, "kS": 0.5, "nSH": 100, "emission": "0 0 100"},
            {"type": "polygon", "p0": "...", "p1": "...", "p2": "...", "p3": "..."},
        ],
        "lights": [
            {"type": "point-light", "intensity": "500 300 0",
             "position": "50 50 50", "kL": 0.0004, "kQ": 0.0000006},
        ],
    }

Vector-like values are either whitespace separated strings or 3-element
sequences. Material coefficients (kA kD kS kT kR) also accept a single number
applied to all channels.

Loading is strict: the background color and the ambient light color are
required, and every missing attribute, malformed number, unknown element type
and invalid shape is reported. All problems of a description are gathered
into one SceneParseError; no partial scene is ever returned.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, TypedDict

from src.whitted.core.color import Color, Double3
from src.whitted.core.ray import Point, Ray, Vector
from src.whitted.geometry.base import Geometry
from src.whitted.geometry.geometries import Geometries
from src.whitted.geometry.plane import Plane
from src.whitted.geometry.polygon import Polygon, Triangle
from src.whitted.geometry.sphere import Sphere
from src.whitted.geometry.tube import Cylinder, Tube
from src.whitted.lighting.lights import (
    AmbientLight,
    DirectionalLight,
    LightSource,
    PointLight,
    SpotLight,
)
from src.whitted.materials.material import Material

logger = logging.getLogger(__name__)


class SceneParseError(ValueError):
    """A scene description with one or more problems.

    Attributes:
        errors: Every problem found, in document order.
    """

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors = list(errors)
        summary = "\n".join(f"  - {error}" for error in self.errors)
        super().__init__(f"Invalid scene ({len(self.errors)} error(s)):\n{summary}")


# Shape of a dict scene description
SceneConfig = TypedDict(
    "SceneConfig",
    {
        "name": str,
        "background-color": Any,
        "ambient-light": dict[str, Any],
        "geometries": list[dict[str, Any]],
        "lights": list[dict[str, Any]],
    },
    total=False,
)


@dataclass(eq=False)
class Scene:
    """Everything the tracer needs to shade a ray.

    Attributes:
        name: Scene name, used in logs.
        background: Color of rays that hit nothing.
        ambient_light: Uniform light scaled by each material's kA.
        geometries: All shapes in the scene.
        lights: Light sources used for diffuse, specular and shadows.
    """

    name: str
    background: Color = field(default_factory=lambda: Color.BLACK)
    ambient_light: AmbientLight = AmbientLight.NONE
    geometries: Geometries = field(default_factory=Geometries)
    lights: list[LightSource] = field(default_factory=list)

    @classmethod
    def from_dict(cls, config: Mapping[str, Any], *, name: str | None = None) -> Scene:
        """Build a scene from a dict description.

        Raises:
            SceneParseError: If the description has any problem.
        """
        return SceneBuilder().build(config, name=name)


# =============================================================================
# Attribute access with error collection
# =============================================================================

_MATERIAL_KEYS = ("kA", "kD", "kS", "kT", "kR")
_WHITESPACE = re.compile(r"[\s,]+")


class _Attributes:
    """Typed reads from one element's attributes, recording failures."""

    def __init__(self, values: Mapping[str, Any], where: str, errors: list[str]) -> None:
        self.values = values
        self.where = where
        self.errors = errors
        self.failed = False

    def fail(self, message: str) -> None:
        self.failed = True
        self.errors.append(f"{self.where}: {message}")

    def has(self, key: str) -> bool:
        return key in self.values

    def _numbers(self, key: str, value: Any) -> list[float] | None:
        if isinstance(value, str):
            parts = [part for part in _WHITESPACE.split(value.strip()) if part]
        elif isinstance(value, (int, float)):
            parts = [value]
        elif isinstance(value, Sequence):
            parts = list(value)
        else:
            self.fail(f"attribute '{key}' has unsupported value {value!r}")
            return None
        try:
            numbers = [float(part) for part in parts]
        except (TypeError, ValueError):
            self.fail(f"attribute '{key}' is not numeric: {value!r}")
            return None
        if not all(math.isfinite(number) for number in numbers):
            self.fail(f"attribute '{key}' must be finite: {value!r}")
            return None
        return numbers

    def _required(self, key: str) -> Any:
        if key not in self.values:
            self.fail(f"missing required attribute '{key}'")
            return None
        return self.values[key]

    def triple(self, key: str) -> tuple[float, float, float] | None:
        value = self._required(key)
        if value is None:
            return None
        numbers = self._numbers(key, value)
        if numbers is None:
            return None
        if len(numbers) != 3:
            self.fail(f"attribute '{key}' needs 3 numbers, got {len(numbers)}")
            return None
        return numbers[0], numbers[1], numbers[2]

    def point(self, key: str) -> Point | None:
        values = self.triple(key)
        return None if values is None else Point(*values)

    def vector(self, key: str) -> Vector | None:
        values = self.triple(key)
        if values is None:
            return None
        try:
            return Vector(*values)
        except ValueError as e:
            self.fail(f"attribute '{key}': {e}")
            return None

    def color(self, key: str) -> Color | None:
        values = self.triple(key)
        return None if values is None else Color(*values)

    def number(self, key: str, default: float | None = None) -> float | None:
        if key not in self.values and default is not None:
            return default
        value = self._required(key)
        if value is None:
            return None
        numbers = self._numbers(key, value)
        if numbers is None:
            return None
        if len(numbers) != 1:
            self.fail(f"attribute '{key}' needs a single number")
            return None
        return numbers[0]

    def coefficient(self, key: str) -> Double3 | None:
        numbers = self._numbers(key, self.values[key])
        if numbers is None:
            return None
        if len(numbers) == 1:
            return Double3(numbers[0])
        if len(numbers) == 3:
            return Double3(*numbers)
        self.fail(f"attribute '{key}' needs 1 or 3 numbers, got {len(numbers)}")
        return None


# =============================================================================
# Element builders
# =============================================================================


def _build_sphere(attrs: _Attributes) -> Geometry | None:
    center = attrs.point("center")
    radius = attrs.number("radius")
    if attrs.failed:
        return None
    return Sphere(center, radius)


def _build_plane(attrs: _Attributes) -> Geometry | None:
    if attrs.has("normal"):
        p0 = attrs.point("p0")
        normal = attrs.vector("normal")
        if attrs.failed:
            return None
        return Plane(p0, normal)
    p0, p1, p2 = attrs.point("p0"), attrs.point("p1"), attrs.point("p2")
    if attrs.failed:
        return None
    return Plane.from_points(p0, p1, p2)


def _build_triangle(attrs: _Attributes) -> Geometry | None:
    p0, p1, p2 = attrs.point("p0"), attrs.point("p1"), attrs.point("p2")
    if attrs.failed:
        return None
    return Triangle(p0, p1, p2)


def _build_polygon(attrs: _Attributes) -> Geometry | None:
    keys = []
    while attrs.has(f"p{len(keys)}"):
        keys.append(f"p{len(keys)}")
    if len(keys) < 3:
        attrs.fail(f"a polygon needs attributes p0, p1, p2 ... (found {len(keys)} vertices)")
        return None
    vertices = [attrs.point(key) for key in keys]
    if attrs.failed:
        return None
    return Polygon(*vertices)


def _build_tube(attrs: _Attributes) -> Geometry | None:
    radius = attrs.number("radius")
    origin = attrs.point("origin")
    direction = attrs.vector("direction")
    if attrs.failed:
        return None
    return Tube(Ray(origin, direction), radius)


def _build_cylinder(attrs: _Attributes) -> Geometry | None:
    radius = attrs.number("radius")
    height = attrs.number("height")
    origin = attrs.point("origin")
    direction = attrs.vector("direction")
    if attrs.failed:
        return None
    return Cylinder(Ray(origin, direction), radius, height)


def _build_directional_light(attrs: _Attributes) -> LightSource | None:
    intensity = attrs.color("intensity")
    direction = attrs.vector("direction")
    if attrs.failed:
        return None
    return DirectionalLight(intensity, direction)


def _attenuation(attrs: _Attributes) -> dict[str, float]:
    return {
        "kC": attrs.number("kC", 1.0),
        "kL": attrs.number("kL", 0.0),
        "kQ": attrs.number("kQ", 0.0),
    }


def _build_point_light(attrs: _Attributes) -> LightSource | None:
    intensity = attrs.color("intensity")
    position = attrs.point("position")
    attenuation = _attenuation(attrs)
    if attrs.failed:
        return None
    return PointLight(intensity, position, **attenuation)


def _build_spot_light(attrs: _Attributes) -> LightSource | None:
    intensity = attrs.color("intensity")
    position = attrs.point("position")
    direction = attrs.vector("direction")
    attenuation = _attenuation(attrs)
    narrow_beam = attrs.number("narrow-beam", 1.0)
    if attrs.failed:
        return None
    return SpotLight(intensity, position, direction=direction, narrow_beam=narrow_beam, **attenuation)


GEOMETRY_BUILDERS: dict[str, Callable[[_Attributes], Geometry | None]] = {
    "sphere": _build_sphere,
    "plane": _build_plane,
    "triangle": _build_triangle,
    "polygon": _build_polygon,
    "tube": _build_tube,
    "cylinder": _build_cylinder,
}

LIGHT_BUILDERS: dict[str, Callable[[_Attributes], LightSource | None]] = {
    "directional-light": _build_directional_light,
    "point-light": _build_point_light,
    "spot-light": _build_spot_light,
}


class SceneBuilder:
    """Turns a dict description into a Scene, collecting every problem."""

    def __init__(self) -> None:
        self.errors: list[str] = []

    def _material(self, attrs: _Attributes) -> Material | None:
        coefficients = {}
        for key in _MATERIAL_KEYS:
            if attrs.has(key):
                coefficients[key] = attrs.coefficient(key)
        if attrs.has("nSH"):
            shininess = attrs.number("nSH")
            if shininess is not None:
                if shininess != int(shininess):
                    attrs.fail(f"attribute 'nSH' must be an integer, got {shininess}")
                else:
                    coefficients["shininess"] = int(shininess)
        if attrs.failed:
            return None
        return Material(**coefficients)

    def _geometry(self, entry: Mapping[str, Any], where: str) -> Geometry | None:
        kind = entry.get("type")
        builder = GEOMETRY_BUILDERS.get(kind)
        if builder is None:
            self.errors.append(f"{where}: unknown geometry type {kind!r}")
            return None
        attrs = _Attributes(entry, f"{where} <{kind}>", self.errors)
        material = self._material(attrs)
        emission = attrs.color("emission") if attrs.has("emission") else Color.BLACK
        try:
            geometry = builder(attrs)
        except ValueError as e:
            attrs.fail(str(e))
            return None
        if geometry is None or material is None or emission is None:
            return None
        return geometry.with_material(material).with_emission(emission)

    def _light(self, entry: Mapping[str, Any], where: str) -> LightSource | None:
        kind = entry.get("type")
        builder = LIGHT_BUILDERS.get(kind)
        if builder is None:
            self.errors.append(f"{where}: unknown light type {kind!r}")
            return None
        attrs = _Attributes(entry, f"{where} <{kind}>", self.errors)
        try:
            return builder(attrs)
        except ValueError as e:
            attrs.fail(str(e))
            return None

    def build(self, config: Mapping[str, Any], *, name: str | None = None) -> Scene:
        """Build the scene or raise SceneParseError listing every problem."""
        scene_attrs = _Attributes(config, "scene", self.errors)
        background = scene_attrs.color("background-color")

        ambient = None
        ambient_entry = config.get("ambient-light")
        if ambient_entry is None:
            self.errors.append("scene: missing required element 'ambient-light'")
        elif not isinstance(ambient_entry, Mapping):
            self.errors.append("scene: 'ambient-light' must be a mapping with a 'color'")
        else:
            ambient_color = _Attributes(ambient_entry, "ambient-light", self.errors).color("color")
            if ambient_color is not None:
                ambient = AmbientLight(ambient_color)

        geometries = Geometries()
        for index, entry in enumerate(config.get("geometries", [])):
            geometry = self._geometry(entry, f"geometries[{index}]")
            if geometry is not None:
                geometries.add(geometry)

        lights = []
        for index, entry in enumerate(config.get("lights", [])):
            light = self._light(entry, f"lights[{index}]")
            if light is not None:
                lights.append(light)

        if self.errors:
            raise SceneParseError(self.errors)

        scene = Scene(
            name=name or str(config.get("name", "scene")),
            background=background,
            ambient_light=ambient,
            geometries=geometries,
            lights=lights,
        )
        logger.info(
            "Loaded scene %r: %d geometries, %d lights",
            scene.name,
            len(geometries),
            len(lights),
        )
        return scene
