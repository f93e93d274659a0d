"""Camera models."""

from .pinhole import Camera, CameraBuilder, RayDirectionGrid

__all__ = ["Camera", "CameraBuilder", "RayDirectionGrid"]
