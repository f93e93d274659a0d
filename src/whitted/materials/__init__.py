"""Surface materials."""

from .material import DEFAULT_MATERIAL, Material

__all__ = ["Material", "DEFAULT_MATERIAL"]
