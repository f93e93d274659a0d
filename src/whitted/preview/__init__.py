"""Output and visualization.

Components:
    display: Tone mapping, gamma and Matplotlib preview
    export: PNG export and loading via Pillow, image comparison

Example:
    >>> from src.whitted.preview import save_png, show_preview
    >>> target = renderer.render()
    >>> save_png(target, "scene.png")
    >>> show_preview(target)
"""

from src.whitted.preview.display import (
    ToneMapMethod,
    apply_gamma,
    process_image_for_display,
    show_preview,
    tone_map_exposure,
    tone_map_reinhard,
)
from src.whitted.preview.export import (
    compute_rmse,
    image_to_uint8,
    load_png,
    save_png,
    save_png_from_array,
)

__all__ = [
    "show_preview",
    "tone_map_reinhard",
    "tone_map_exposure",
    "apply_gamma",
    "process_image_for_display",
    "ToneMapMethod",
    "save_png",
    "save_png_from_array",
    "image_to_uint8",
    "compute_rmse",
    "load_png",
]
