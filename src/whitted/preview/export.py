"""PNG export of render targets.

Images are written as 8-bit RGB through Pillow after the display pipeline
from ``src.whitted.preview.display``.

Example:
    >>> from src.whitted.preview.export import save_png
    >>> save_png(renderer.render(), "scene.png")
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.whitted.preview.display import ToneMapMethod, process_image_for_display

if TYPE_CHECKING:
    from src.whitted.core.render_target import RenderTarget


def image_to_uint8(
    image: npt.NDArray[np.float32],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Run the display pipeline and quantize to 8 bits per channel.

    Args:
        image: Normalized image of shape (H, W, 3).
        tone_map: "none", "reinhard" or "exposure".
        gamma: Display gamma.
        exposure: Exposure for the "exposure" operator.

    Returns:
        Array of shape (H, W, 3) with dtype uint8.
    """
    processed = process_image_for_display(
        image,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )
    return np.round(processed * 255).astype(np.uint8)


def save_png_from_array(
    image: npt.NDArray[np.float32],
    filepath: str | os.PathLike[str],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Write a normalized (H, W, 3) image to a PNG file."""
    pixels = image_to_uint8(image, tone_map=tone_map, gamma=gamma, exposure=exposure)
    PILImage.fromarray(pixels).save(filepath)


def save_png(
    target: RenderTarget,
    filepath: str | os.PathLike[str],
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> None:
    """Write a render target to a PNG file."""
    save_png_from_array(
        target.to_image(),
        filepath,
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Root mean squared difference between two images of the same shape.

    Raises:
        ValueError: If the shapes differ.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")
    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))


def load_png(filepath: str | os.PathLike[str]) -> npt.NDArray[np.float32]:
    """Read a PNG as a normalized RGB image of shape (H, W, 3).

    Args:
        filepath: Image file to read; alpha and palette modes are converted to RGB.

    Returns:
        Float32 array with values in [0, 1], comparable with
        ``RenderTarget.to_image()``.
    """
    with PILImage.open(filepath) as image:
        pixels = np.asarray(image.convert("RGB"), dtype=np.float32)
    return pixels / 255.0
