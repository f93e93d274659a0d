"""Unit tests for dict-based scene construction.

Tests cover:
- Building every geometry and light type
- Material and emission attributes
- Strict requirements (background color, ambient light)
- Aggregation of every problem into one SceneParseError
"""

import pytest


def _minimal(**extra):
    config = {
        "background-color": "1 2 3",
        "ambient-light": {"color": "10 10 10"},
        "geometries": [],
        "lights": [],
    }
    config.update(extra)
    return config


class TestSceneFromDict:
    """Tests for successful scene construction."""

    def test_minimal_scene(self):
        """Test the smallest valid description."""
        from src.whitted.core.color import Color
        from src.whitted.scene.scene import Scene

        scene = Scene.from_dict(_minimal(), name="tiny")
        assert scene.name == "tiny"
        assert scene.background == Color(1, 2, 3)
        assert scene.ambient_light.intensity == Color(10, 10, 10)
        assert len(scene.geometries) == 0
        assert scene.lights == []

    def test_all_geometry_types(self):
        """Test that every geometry type is built with its class."""
        from src.whitted.geometry.plane import Plane
        from src.whitted.geometry.polygon import Polygon, Triangle
        from src.whitted.geometry.sphere import Sphere
        from src.whitted.geometry.tube import Cylinder, Tube
        from src.whitted.scene.scene import Scene

        geometries = [
            {"type": "sphere", "center": "0 0 -100", "radius": 50},
            {"type": "plane", "p0": "0 0 0", "normal": "0 1 0"},
            {"type": "plane", "p0": "0 0 0", "p1": "1 0 0", "p2": "0 0 1"},
            {"type": "triangle", "p0": "0 0 0", "p1": "1 0 0", "p2": "0 1 0"},
            {"type": "polygon", "p0": "0 0 0", "p1": "1 0 0", "p2": "1 1 0", "p3": "0 1 0"},
            {"type": "tube", "radius": 2, "origin": "0 0 0", "direction": "0 1 0"},
            {"type": "cylinder", "radius": 2, "height": 5, "origin": "0 0 0", "direction": "0 1 0"},
        ]
        scene = Scene.from_dict(_minimal(geometries=geometries))
        types = [type(geometry) for geometry in scene.geometries]
        assert types == [Sphere, Plane, Plane, Triangle, Polygon, Tube, Cylinder]

    def test_sequences_accepted(self):
        """Test that vector values may be lists instead of strings."""
        from src.whitted.core.ray import Point
        from src.whitted.scene.scene import Scene

        config = _minimal(geometries=[{"type": "sphere", "center": [1, 2, 3], "radius": "4"}])
        config["background-color"] = (0, 0, 0)
        sphere = next(iter(Scene.from_dict(config).geometries))
        assert sphere.center == Point(1, 2, 3)
        assert sphere.radius == 4.0

    def test_material_and_emission(self):
        """Test that material coefficients and emission are applied."""
        from src.whitted.core.color import Color, Double3
        from src.whitted.scene.scene import Scene

        entry = {
            "type": "sphere",
            "center": "0 0 0",
            "radius": 1,
            "kA": 0.1,
            "kD": "0.2 0.3 0.4",
            "kS": "0.5",
            "kT": 0.6,
            "kR": 0.7,
            "nSH": "30",
            "emission": "5 6 7",
        }
        sphere = next(iter(Scene.from_dict(_minimal(geometries=[entry])).geometries))
        material = sphere.material
        assert material.kA == Double3(0.1)
        assert material.kD == Double3(0.2, 0.3, 0.4)
        assert material.kS == Double3(0.5)
        assert material.kT == Double3(0.6)
        assert material.kR == Double3(0.7)
        assert material.shininess == 30
        assert sphere.emission == Color(5, 6, 7)

    def test_all_light_types(self):
        """Test that every light type is built with its attributes."""
        from src.whitted.lighting.lights import DirectionalLight, PointLight, SpotLight
        from src.whitted.scene.scene import Scene

        lights = [
            {"type": "directional-light", "intensity": "1 1 1", "direction": "0 0 -1"},
            {"type": "point-light", "intensity": "1 1 1", "position": "0 0 0", "kL": "0.1"},
            {
                "type": "spot-light",
                "intensity": "1 1 1",
                "position": "0 0 0",
                "direction": "0 0 -1",
                "kQ": 0.01,
                "narrow-beam": 8,
            },
        ]
        scene = Scene.from_dict(_minimal(lights=lights))
        directional, point, spot = scene.lights
        assert isinstance(directional, DirectionalLight)
        assert type(point) is PointLight
        assert point.kL == 0.1
        assert point.kC == 1.0
        assert isinstance(spot, SpotLight)
        assert spot.narrow_beam == 8.0
        assert spot.kQ == 0.01


class TestSceneErrors:
    """Tests for error reporting."""

    def test_missing_background(self):
        """Test that the background color is required."""
        from src.whitted.scene.scene import Scene, SceneParseError

        config = _minimal()
        del config["background-color"]
        with pytest.raises(SceneParseError, match="background-color"):
            Scene.from_dict(config)

    def test_missing_ambient_light(self):
        """Test that the ambient light and its color are required."""
        from src.whitted.scene.scene import Scene, SceneParseError

        config = _minimal()
        del config["ambient-light"]
        with pytest.raises(SceneParseError, match="ambient-light"):
            Scene.from_dict(config)

        config = _minimal()
        config["ambient-light"] = {}
        with pytest.raises(SceneParseError, match="color"):
            Scene.from_dict(config)

    def test_errors_are_aggregated(self):
        """Test that every problem is reported in a single error."""
        from src.whitted.scene.scene import Scene, SceneParseError

        config = _minimal(
            geometries=[
                {"type": "sphere", "center": "0 0", "radius": 1},
                {"type": "cube", "size": 1},
                {"type": "sphere", "center": "0 0 0", "radius": "big"},
                {"type": "sphere", "center": "0 0 0", "radius": -1},
            ],
            lights=[{"type": "point-light", "intensity": "1 1 1"}],
        )
        with pytest.raises(SceneParseError) as excinfo:
            Scene.from_dict(config)
        errors = excinfo.value.errors
        assert len(errors) == 5
        assert "needs 3 numbers" in errors[0]
        assert "unknown geometry type 'cube'" in errors[1]
        assert "not numeric" in errors[2]
        assert "radius must be greater than zero" in errors[3]
        assert "missing required attribute 'position'" in errors[4]

    def test_invalid_shape_reported(self):
        """Test that shape construction failures are reported with their location."""
        from src.whitted.scene.scene import Scene, SceneParseError

        config = _minimal(
            geometries=[{"type": "triangle", "p0": "0 0 0", "p1": "1 1 1", "p2": "2 2 2"}]
        )
        with pytest.raises(SceneParseError, match=r"geometries\[0\] <triangle>.*collinear"):
            Scene.from_dict(config)

    def test_fractional_shininess_rejected(self):
        """Test that nSH must be an integer."""
        from src.whitted.scene.scene import Scene, SceneParseError

        entry = {"type": "sphere", "center": "0 0 0", "radius": 1, "nSH": 2.5}
        with pytest.raises(SceneParseError, match="nSH"):
            Scene.from_dict(_minimal(geometries=[entry]))

    @pytest.mark.parametrize("shininess", ["inf", "nan", float("inf"), float("-inf")])
    def test_non_finite_shininess_reported(self, shininess):
        """Test that infinite or NaN nSH is collected with the other errors."""
        from src.whitted.scene.scene import Scene, SceneParseError

        entry = {"type": "sphere", "center": "0 0 0", "radius": 1, "nSH": shininess}
        with pytest.raises(SceneParseError) as excinfo:
            Scene.from_dict(_minimal(geometries=[entry], **{"background-color": "x y z"}))
        errors = excinfo.value.errors
        assert len(errors) == 2
        assert "background-color" in errors[0]
        assert "nSH" in errors[1] and "finite" in errors[1]

    def test_non_finite_coordinate_reported(self):
        """Test that an infinite point coordinate is reported."""
        from src.whitted.scene.scene import Scene, SceneParseError

        entry = {"type": "sphere", "center": "0 inf 0", "radius": 1}
        with pytest.raises(SceneParseError, match="center.*finite"):
            Scene.from_dict(_minimal(geometries=[entry]))

    def test_zero_direction_reported(self):
        """Test that a zero direction vector is reported, not raised raw."""
        from src.whitted.scene.scene import Scene, SceneParseError

        lights = [{"type": "directional-light", "intensity": "1 1 1", "direction": "0 0 0"}]
        with pytest.raises(SceneParseError, match="Vector zero"):
            Scene.from_dict(_minimal(lights=lights))

    def test_parse_error_is_value_error(self):
        """Test that SceneParseError can be caught as ValueError."""
        from src.whitted.scene.scene import SceneParseError

        error = SceneParseError(["a", "b"])
        assert isinstance(error, ValueError)
        assert error.errors == ["a", "b"]
        assert "2 error(s)" in str(error)
