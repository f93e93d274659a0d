"""Light sources for Phong shading.

Every light source answers three questions about a surface point p:

    intensity_at(p)    -> Color reaching p (after attenuation)
    direction_from(p)  -> unit vector L pointing from the light toward p
    distance(p)        -> distance from p to the light (inf for directional)

Point lights attenuate with 1 / (kC + kL*d + kQ*d^2). Spot lights further
scale that by max(0, direction . L) ** narrow_beam, so a larger narrow_beam
gives a tighter cone.

The ambient light is not a light source: it has no position and is applied
uniformly through each material's kA coefficient.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from src.whitted.core.color import Color
from src.whitted.core.ray import Point, Vector


@dataclass(frozen=True, eq=False)
class AmbientLight:
    """Uniform background illumination."""

    intensity: Color

    def __post_init__(self) -> None:
        object.__setattr__(self, "intensity", Color.of(self.intensity))


AmbientLight.NONE = AmbientLight(Color.BLACK)


class LightSource(ABC):
    """A light that illuminates surface points from a direction."""

    @abstractmethod
    def intensity_at(self, point: Point) -> Color:
        """Light color arriving at ``point``."""

    @abstractmethod
    def direction_from(self, point: Point) -> Vector:
        """Unit vector from the light toward ``point``."""

    @abstractmethod
    def distance(self, point: Point) -> float:
        """Distance between the light and ``point``."""


@dataclass(frozen=True, eq=False)
class DirectionalLight(LightSource):
    """A light infinitely far away shining along ``direction``."""

    intensity: Color
    direction: Vector

    def __post_init__(self) -> None:
        object.__setattr__(self, "intensity", Color.of(self.intensity))
        object.__setattr__(self, "direction", self.direction.normalize())

    def intensity_at(self, point: Point) -> Color:
        return self.intensity

    def direction_from(self, point: Point) -> Vector:
        return self.direction

    def distance(self, point: Point) -> float:
        return math.inf


@dataclass(frozen=True, eq=False)
class PointLight(LightSource):
    """An omnidirectional light at ``position`` with distance attenuation.

    Attributes:
        intensity: Color emitted by the light.
        position: Light location.
        kC: Constant attenuation factor.
        kL: Linear attenuation factor.
        kQ: Quadratic attenuation factor.

    Raises:
        ValueError: If an attenuation factor is negative or all of them are zero.
    """

    intensity: Color
    position: Point
    kC: float = 1.0
    kL: float = 0.0
    kQ: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "intensity", Color.of(self.intensity))
        if self.kC < 0 or self.kL < 0 or self.kQ < 0:
            raise ValueError("Attenuation factors must not be negative")
        if self.kC == 0 and self.kL == 0 and self.kQ == 0:
            raise ValueError("At least one attenuation factor must be positive")

    def intensity_at(self, point: Point) -> Color:
        d = point.distance(self.position)
        return self.intensity.scale(1.0 / (self.kC + self.kL * d + self.kQ * d * d))

    def direction_from(self, point: Point) -> Vector:
        return point.subtract(self.position).normalize()

    def distance(self, point: Point) -> float:
        return point.distance(self.position)


@dataclass(frozen=True, eq=False)
class SpotLight(PointLight):
    """A point light focused along ``direction``.

    Raises:
        ValueError: If narrow_beam is not positive.
    """

    direction: Vector = field(kw_only=True)
    narrow_beam: float = field(default=1.0, kw_only=True)

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "direction", self.direction.normalize())
        if not self.narrow_beam > 0:
            raise ValueError(f"narrow_beam must be greater than zero, got {self.narrow_beam}")

    def intensity_at(self, point: Point) -> Color:
        factor = max(0.0, self.direction.dot(self.direction_from(point)))
        if factor == 0.0:
            return Color.BLACK
        return super().intensity_at(point).scale(factor**self.narrow_beam)
