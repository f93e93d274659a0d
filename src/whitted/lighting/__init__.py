"""Light sources."""

from .lights import AmbientLight, DirectionalLight, LightSource, PointLight, SpotLight

__all__ = ["AmbientLight", "LightSource", "DirectionalLight", "PointLight", "SpotLight"]
