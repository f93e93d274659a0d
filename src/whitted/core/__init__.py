"""Core value types and the rendering pipeline.

Components:
    ray: Point, Vector and Ray with tolerance-based helpers
    color: Double3 coefficient triples and Color
    config: RenderConfig and the recursion/attenuation defaults
    integrator: RayTracer (recursive shading) and create_tracer
    render_target: Taichi-backed image buffer
    renderer: Row-parallel rendering loop with cancellation
"""

from .color import Color, Double3
from .ray import EPSILON, Point, Ray, Vector, align_zero, is_zero, reflect

# Note: config, integrator, render_target and renderer are NOT imported here to
# avoid circular imports (they depend on geometry, accel and scene).
# Import them directly, e.g. from src.whitted.core.integrator import create_tracer

__all__ = [
    "EPSILON",
    "is_zero",
    "align_zero",
    "Point",
    "Vector",
    "Ray",
    "reflect",
    "Double3",
    "Color",
]
