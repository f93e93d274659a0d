"""Scene description and loading.

Components:
    intersection: Immutable hit records and closest-hit selection
    scene: Scene aggregate, dict loading and SceneParseError
    xml_parser: XML scene loader
    cornell_box: Demo scene with a matching camera

Note: only intersection is imported here. scene, xml_parser and cornell_box
depend on geometry, which imports intersection, so importing them here would
create a cycle. Use e.g. ``from src.whitted.scene.xml_parser import load_scene``.
"""

from .intersection import Intersection, closest_intersection

__all__ = ["Intersection", "closest_intersection"]
