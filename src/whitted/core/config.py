"""Render configuration knobs."""

from __future__ import annotations

from dataclasses import dataclass

from src.whitted.accel.voxel_grid import VOXELS_PER_OBJECT

# Recursion depth of the shading engine
MAX_CALC_COLOR_LEVEL = 10
# Contributions attenuated below this factor are dropped
MIN_CALC_COLOR_K = 0.001
# Offset of secondary ray heads along the surface normal
DELTA = 0.1


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Immutable settings shared by the tracer and the renderer.

    Attributes:
        max_level: Maximum recursion depth for reflection and transmission.
        min_k: Attenuation threshold below which a ray stops contributing.
        delta: Offset applied to secondary ray heads to escape the surface.
        voxels_per_object: Target cells per bounded geometry in the voxel grid.
        workers: Worker processes for rendering; 0 renders in-process.
    """

    max_level: int = MAX_CALC_COLOR_LEVEL
    min_k: float = MIN_CALC_COLOR_K
    delta: float = DELTA
    voxels_per_object: int = VOXELS_PER_OBJECT
    workers: int = 0

    def __post_init__(self) -> None:
        if self.max_level < 1:
            raise ValueError(f"max_level must be at least 1, got {self.max_level}")
        if self.min_k <= 0:
            raise ValueError(f"min_k must be positive, got {self.min_k}")
        if self.delta <= 0:
            raise ValueError(f"delta must be positive, got {self.delta}")
        if self.voxels_per_object < 1:
            raise ValueError(f"voxels_per_object must be at least 1, got {self.voxels_per_object}")
        if self.workers < 0:
            raise ValueError(f"workers must not be negative, got {self.workers}")
