"""Phong-style surface material.

A material holds per-channel coefficients for the local and global
illumination terms used by the shading engine:

    kA: ambient reflection (scales the scene's ambient light)
    kD: diffuse reflection
    kS: specular reflection (with the ``shininess`` exponent)
    kT: transmission (transparency of shadows and refracted rays)
    kR: mirror reflection

Values are taken as given and never range-clamped; keeping them physically
sane is the caller's job.

Example:
    >>> from src.whitted.materials.material import Material
    >>> glass = Material(kD=0.2, kS=0.2, kT=0.6, shininess=30)
    >>> glass.kT
    Double3(0.6, 0.6, 0.6)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.whitted.core.color import Double3


@dataclass(frozen=True)
class Material:
    """Immutable set of shading coefficients.

    Scalars and 3-sequences passed for any coefficient are promoted to
    Double3 on construction.

    Attributes:
        kA: Ambient coefficient (default ONE).
        kD: Diffuse coefficient (default ZERO).
        kS: Specular coefficient (default ZERO).
        kT: Transmission coefficient (default ZERO).
        kR: Reflection coefficient (default ZERO).
        shininess: Phong specular exponent (default 0).
    """

    kA: Double3 = field(default_factory=lambda: Double3.ONE)
    kD: Double3 = field(default_factory=lambda: Double3.ZERO)
    kS: Double3 = field(default_factory=lambda: Double3.ZERO)
    kT: Double3 = field(default_factory=lambda: Double3.ZERO)
    kR: Double3 = field(default_factory=lambda: Double3.ZERO)
    shininess: int = 0

    def __post_init__(self) -> None:
        for name in ("kA", "kD", "kS", "kT", "kR"):
            object.__setattr__(self, name, Double3.of(getattr(self, name)))
        object.__setattr__(self, "shininess", int(self.shininess))


# Shared default material (ambient-only)
DEFAULT_MATERIAL = Material()
