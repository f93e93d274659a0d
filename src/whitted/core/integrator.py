"""Whitted-style recursive ray tracing integrator.

For each primary ray the tracer finds the nearest surface and evaluates

    color = local(p) + global(p)

where the local term is the Phong model summed over every light source:

    local = emission + kA * ambient
          + sum_L  I_L(p) * ktr_L * (kD * |n.l| + kS * max(0, -v.r) ^ shininess)

with r = l - 2(l.n)n the light direction mirrored about the normal, and
ktr_L the product of the kT coefficients of every surface between p and the
light (so transparent occluders tint shadows instead of blocking them). A
light only contributes when it lies on the same side of the surface as the
viewer (sign(n.l) == sign(n.v)).

The global term recursively traces a reflected ray (weighted by kR) and a
transmitted ray continuing straight through the surface (weighted by kT).
Recursion stops at ``max_level`` or once the accumulated attenuation k drops
below ``min_k`` on every channel. Secondary ray heads are pushed ``delta``
along the normal to the correct side of the surface to avoid acne.

The diffuse term uses |n.l| so surfaces are lit the same from both sides.

Example:
    >>> from src.whitted.core.integrator import TracerType, create_tracer
    >>> tracer = create_tracer(scene, TracerType.VOXEL)
    >>> color = tracer.trace_ray(Ray(Point(0, 0, 0), Vector(0, 0, -1)))
"""

from __future__ import annotations

from enum import Enum

from src.whitted.accel.accelerator import Accelerator, LinearAccelerator, VoxelAccelerator
from src.whitted.core.color import Color, Double3
from src.whitted.core.config import RenderConfig
from src.whitted.core.ray import Ray, reflect
from src.whitted.scene.intersection import Intersection
from src.whitted.scene.scene import Scene

# Attenuation carried by a primary ray
INITIAL_K = Double3.ONE


class TracerType(Enum):
    """Intersection strategy used by a tracer."""

    SIMPLE = "simple"
    VOXEL = "voxel"


class RayTracer:
    """Shades rays against a read-only scene.

    Attributes:
        scene: The scene being rendered.
        accelerator: Answers nearest-hit and all-hits ray queries.
        config: Recursion and offset settings.
    """

    def __init__(
        self,
        scene: Scene,
        accelerator: Accelerator | None = None,
        config: RenderConfig | None = None,
    ) -> None:
        self.scene = scene
        self.config = config or RenderConfig()
        self.accelerator = accelerator or LinearAccelerator(scene.geometries)

    def trace_ray(self, ray: Ray) -> Color:
        """Color seen along a primary ray."""
        hit = self.accelerator.closest_intersection(ray)
        if hit is None:
            return self.scene.background
        hit = hit.with_view(ray.direction)
        if hit.nv == 0:
            return Color.BLACK
        return self._calc_color(hit, self.config.max_level, INITIAL_K)

    def _calc_color(self, hit: Intersection, level: int, k: Double3) -> Color:
        """Color of a hit point: local shading plus recursive global effects.

        Args:
            hit: Intersection with its view direction set.
            level: Remaining recursion levels; 1 means local shading only.
            k: Accumulated attenuation along the ray path so far.

        Returns:
            The unscaled color contributed by this hit point.
        """
        color = self._local_effects(hit)
        if level == 1:
            return color
        return color.add(self._global_effects(hit, level, k))

    # -------------------------------------------------------------------------
    # Local illumination
    # -------------------------------------------------------------------------

    def _local_effects(self, hit: Intersection) -> Color:
        """Emission, ambient term and Phong contribution of every visible light.

        Lights on the far side of the surface from the viewer are skipped,
        and each remaining light is attenuated by the transparency of its
        occluders.
        """
        material = hit.material
        color = hit.geometry.emission.add(self.scene.ambient_light.intensity.scale(material.kA))
        for light in self.scene.lights:
            lit = hit.with_light(light)
            if not lit.light_visible:
                continue
            ktr = self._transparency(lit)
            if ktr.product(INITIAL_K).lower_than(self.config.min_k):
                continue
            intensity = light.intensity_at(lit.point)
            color = color.add(
                intensity.scale(ktr).scale(self._diffuse(lit).add(self._specular(lit)))
            )
        return color

    @staticmethod
    def _diffuse(hit: Intersection) -> Double3:
        return hit.material.kD.scale(abs(hit.nl))

    @staticmethod
    def _specular(hit: Intersection) -> Double3:
        r = reflect(hit.light_direction, hit.normal)
        minus_vr = -hit.direction.dot(r)
        factor = max(0.0, minus_vr) ** hit.material.shininess
        return hit.material.kS.scale(factor)

    def _transparency(self, hit: Intersection) -> Double3:
        """Product of kT over the occluders between the hit point and its light."""
        delta = self.config.delta
        point = hit.point
        try:
            offset = hit.normal.scale(delta if hit.nv < 0 else -delta)
            shadow_ray = Ray(point.add(offset), hit.light_direction.scale(-1.0))
        except ValueError:
            return Double3.ONE

        light_distance = hit.light.distance(point)
        ktr = Double3.ONE
        for occluder in self.accelerator.all_intersections(shadow_ray, light_distance):
            if occluder.point.distance(point) < light_distance:
                ktr = ktr.product(occluder.material.kT)
                if ktr.lower_than(self.config.min_k):
                    return Double3.ZERO
        return ktr

    # -------------------------------------------------------------------------
    # Global illumination
    # -------------------------------------------------------------------------

    def _global_effects(self, hit: Intersection, level: int, k: Double3) -> Color:
        """Sum of the reflected and transmitted contributions at a hit.

        Returns black once the recursion is exhausted or the accumulated
        attenuation ``k`` falls below the configured minimum.
        """
        if level == 1 or k.lower_than(self.config.min_k):
            return Color.BLACK

        material = hit.material
        color = Color.BLACK
        if not material.kR.is_zero():
            color = color.add(self._global_effect(self._reflected_ray(hit), level, k, material.kR))
        if not material.kT.is_zero():
            color = color.add(self._global_effect(self._transmitted_ray(hit), level, k, material.kT))
        return color

    def _reflected_ray(self, hit: Intersection) -> Ray | None:
        """Mirror ray, offset by delta toward the viewer's side of the surface."""
        delta = self.config.delta
        try:
            offset = hit.normal.scale(delta if hit.nv < 0 else -delta)
            return Ray(hit.point.add(offset), reflect(hit.direction, hit.normal))
        except ValueError:
            return None

    def _transmitted_ray(self, hit: Intersection) -> Ray | None:
        # Straight through: no refraction index
        delta = self.config.delta
        try:
            offset = hit.normal.scale(delta if hit.nv > 0 else -delta)
            return Ray(hit.point.add(offset), hit.direction)
        except ValueError:
            return None

    def _global_effect(self, ray: Ray | None, level: int, k: Double3, k_effect: Double3) -> Color:
        """Trace one secondary ray and scale its color by ``k_effect`` (kR or kT).

        Args:
            ray: Secondary ray, or None when it could not be built.
            level: Recursion level of the hit that spawned the ray.
            k: Attenuation accumulated before this bounce.
            k_effect: Material coefficient of this bounce.

        Returns:
            The attenuated color, black on a miss or a grazing hit.
        """
        if ray is None:
            return Color.BLACK
        hit = self.accelerator.closest_intersection(ray)
        if hit is None:
            return Color.BLACK
        hit = hit.with_view(ray.direction)
        if hit.nv == 0:
            return Color.BLACK
        return self._calc_color(hit, level - 1, k.product(k_effect)).scale(k_effect)


def create_tracer(
    scene: Scene,
    tracer_type: TracerType = TracerType.VOXEL,
    config: RenderConfig | None = None,
) -> RayTracer:
    """Build a tracer for the scene using the requested intersection strategy."""
    config = config or RenderConfig()
    if tracer_type is TracerType.SIMPLE:
        accelerator = LinearAccelerator(scene.geometries)
    elif tracer_type is TracerType.VOXEL:
        accelerator = VoxelAccelerator(scene.geometries, config.voxels_per_object)
    else:
        raise ValueError(f"Unknown tracer type: {tracer_type!r}")
    return RayTracer(scene, accelerator, config)
