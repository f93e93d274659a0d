"""Display pipeline and Matplotlib preview for rendered images.

Scene colors are display referred (0-255 mapped linearly to [0, 1]), so the
default pipeline applies no tone mapping and no gamma. Scenes with strong
lights can still be compressed with the Reinhard or exposure operators.

Example:
    >>> from src.whitted.preview.display import show_preview
    >>> target = renderer.render()
    >>> show_preview(target, tone_map="reinhard")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from src.whitted.core.render_target import RenderTarget


# Type alias for tone mapping options
ToneMapMethod = Literal["none", "reinhard", "exposure"]


def tone_map_reinhard(image: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
    """Apply Reinhard tone mapping: L / (1 + L).

    Maps [0, inf) into [0, 1). Useful when strong lights push channel
    values far past white.

    Args:
        image: Normalized image of shape (H, W, 3); negative values are
            clamped to 0 first.

    Returns:
        Tone-mapped image with the same shape, dtype float32.
    """
    image = np.maximum(image, 0.0)
    return (image / (1.0 + image)).astype(np.float32)


def tone_map_exposure(
    image: npt.NDArray[np.float32],
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Apply exposure tone mapping: 1 - exp(-L * exposure).

    Args:
        image: Normalized image of shape (H, W, 3).
        exposure: Multiplier applied before the exponential; larger values
            brighten the result.

    Returns:
        Tone-mapped image in [0, 1), dtype float32.
    """
    image = np.maximum(image, 0.0)
    return (1.0 - np.exp(-image * exposure)).astype(np.float32)


def apply_gamma(
    image: npt.NDArray[np.float32],
    gamma: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Gamma-encode an image: L^(1/gamma).

    Args:
        image: Image with values in [0, 1]; values outside are clamped.
        gamma: Display gamma (2.2 for sRGB-like output). 1.0 returns the
            input unchanged.

    Returns:
        Gamma-encoded image, dtype float32.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0:
        raise ValueError(f"gamma must be positive, got {gamma}")
    if gamma == 1.0:
        return image
    # Negative values would produce NaN under a fractional power
    image = np.clip(image, 0.0, 1.0)
    return np.power(image, 1.0 / gamma).astype(np.float32)


def process_image_for_display(
    image: npt.NDArray[np.float32],
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Tone map, gamma-encode and clamp a normalized image to [0, 1].

    Args:
        image: Image array of shape (H, W, 3).
        tone_map: "none", "reinhard" or "exposure".
        gamma: Display gamma.
        exposure: Exposure for the "exposure" operator.

    Returns:
        Display-ready image in [0, 1], dtype float32.

    Raises:
        ValueError: On an unknown tone mapping method.
    """
    result = image.copy()
    if tone_map == "reinhard":
        result = tone_map_reinhard(result)
    elif tone_map == "exposure":
        result = tone_map_exposure(result, exposure)
    elif tone_map != "none":
        raise ValueError(f"Unknown tone mapping method: {tone_map}")

    result = apply_gamma(result, gamma)
    return np.clip(result, 0.0, 1.0).astype(np.float32)


def show_preview(
    target: RenderTarget,
    *,
    tone_map: ToneMapMethod = "none",
    gamma: float = 1.0,
    exposure: float = 1.0,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Show a render target in a Matplotlib window.

    Matplotlib is imported lazily so headless rendering never loads a GUI
    backend.

    Args:
        target: Render target to display.
        tone_map: "none", "reinhard" or "exposure".
        gamma: Display gamma.
        exposure: Exposure for the "exposure" operator.
        title: Window title; defaults to the resolution and tone mapping.
        figsize: Matplotlib figure size in inches.
        block: Whether to block until the window is closed.
    """
    import matplotlib.pyplot as plt

    display_image = process_image_for_display(
        target.to_image(),
        tone_map=tone_map,
        gamma=gamma,
        exposure=exposure,
    )

    fig, ax = plt.subplots(1, 1, figsize=figsize)
    ax.imshow(display_image)
    ax.axis("off")
    if title is None:
        title = f"Render Preview - {target.width}x{target.height}"
        if tone_map != "none":
            title += f" ({tone_map})"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)
