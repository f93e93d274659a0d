"""XML scene loader.

The XML dialect maps one-to-one onto the dict description accepted by
``Scene.from_dict``: element tags become ``"type"`` values and attributes
become keys. A minimal document:

    <scene background-color="0 0 0">
        <ambient-light color="25 25 25"/>
        <geometries>
            <sphere center="0 0 -100" radius="50" kD="0.5" kS="0.5" nSH="100"
                    emission="0 0 100"/>
            <triangle p0="-100 0 0" p1="0 100 0" p2="-100 100 0"/>
        </geometries>
        <lights>
            <spot-light intensity="1000 600 0" position="-100 -100 500"
                        direction="-1 -1 -2" kL="0.0004" kQ="0.0000006"/>
        </lights>
    </scene>

Structural problems found while walking the document (unknown elements,
a repeated ambient light) are reported together with the attribute problems
found by the scene builder in a single SceneParseError.

Example:
    >>> from src.whitted.scene.xml_parser import load_scene
    >>> scene = load_scene("examples/scenes/spheres.xml")
"""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET
from typing import Any

from src.whitted.scene.scene import (
    GEOMETRY_BUILDERS,
    LIGHT_BUILDERS,
    Scene,
    SceneBuilder,
    SceneParseError,
)

__all__ = ["SceneParseError", "load_scene", "parse_scene", "scene_to_dict"]

_SCENE_CHILDREN = ("ambient-light", "geometries", "lights")


def scene_to_dict(root: ET.Element) -> tuple[dict[str, Any], list[str]]:
    """Translate a <scene> element into a dict description.

    Returns:
        The description and the list of structural errors found.
    """
    errors: list[str] = []
    config: dict[str, Any] = dict(root.attrib)
    if root.tag != "scene":
        errors.append(f"root element must be <scene>, got <{root.tag}>")

    geometries: list[dict[str, Any]] = []
    lights: list[dict[str, Any]] = []
    for child in root:
        if child.tag == "ambient-light":
            if "ambient-light" in config:
                errors.append("scene: <ambient-light> appears more than once")
            config["ambient-light"] = dict(child.attrib)
        elif child.tag == "geometries":
            for element in child:
                if element.tag not in GEOMETRY_BUILDERS:
                    errors.append(f"geometries: unknown element <{element.tag}>")
                    continue
                geometries.append({"type": element.tag, **element.attrib})
        elif child.tag == "lights":
            for element in child:
                if element.tag not in LIGHT_BUILDERS:
                    errors.append(f"lights: unknown element <{element.tag}>")
                    continue
                lights.append({"type": element.tag, **element.attrib})
        else:
            errors.append(
                f"scene: unknown element <{child.tag}> (expected one of {', '.join(_SCENE_CHILDREN)})"
            )

    config["geometries"] = geometries
    config["lights"] = lights
    return config, errors


def _build(root: ET.Element, name: str | None) -> Scene:
    config, errors = scene_to_dict(root)
    builder = SceneBuilder()
    builder.errors.extend(errors)
    return builder.build(config, name=name)


def parse_scene(text: str, *, name: str | None = None) -> Scene:
    """Build a scene from an XML document string.

    Raises:
        SceneParseError: If the document is malformed or describes an invalid scene.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise SceneParseError([f"malformed XML: {e}"]) from e
    return _build(root, name)


def load_scene(path: str | os.PathLike[str]) -> Scene:
    """Load a scene from an XML file.

    The scene is named after the ``name`` attribute of the root element, or
    the file name without extension.

    Raises:
        OSError: If the file cannot be read.
        SceneParseError: If the document is malformed or describes an invalid scene.
    """
    path = os.fspath(path)
    try:
        root = ET.parse(path).getroot()
    except ET.ParseError as e:
        raise SceneParseError([f"{path}: malformed XML: {e}"]) from e
    default_name = os.path.splitext(os.path.basename(path))[0]
    return _build(root, root.get("name", default_name))
