"""Unit tests for the Material type."""

import pytest


class TestMaterial:
    """Tests for material construction and copying."""

    def test_defaults(self):
        """Test the default coefficients."""
        from src.whitted.core.color import Double3
        from src.whitted.materials.material import Material

        m = Material()
        assert m.kA == Double3.ONE
        assert m.kD == Double3.ZERO
        assert m.kS == Double3.ZERO
        assert m.kT == Double3.ZERO
        assert m.kR == Double3.ZERO
        assert m.shininess == 0

    def test_scalars_and_triples_promoted(self):
        """Test that scalar and sequence coefficients become Double3."""
        from src.whitted.core.color import Double3
        from src.whitted.materials.material import Material

        m = Material(kD=0.5, kS=(0.1, 0.2, 0.3))
        assert m.kD == Double3(0.5)
        assert m.kS == Double3(0.1, 0.2, 0.3)

    def test_values_not_clamped(self):
        """Test that out-of-range coefficients are kept as given."""
        from src.whitted.core.color import Double3
        from src.whitted.materials.material import Material

        assert Material(kR=1.5).kR == Double3(1.5)

    def test_frozen(self):
        """Test that materials are immutable."""
        from dataclasses import FrozenInstanceError

        from src.whitted.materials.material import Material

        m = Material()
        with pytest.raises(FrozenInstanceError):
            m.shininess = 5


    def test_default_coefficients_are_shared_constants(self):
        """Test that default coefficients come from the Double3 constants."""
        from src.whitted.core.color import Double3
        from src.whitted.materials.material import Material

        first, second = Material(), Material()
        assert first.kA is Double3.ONE
        assert first.kD is second.kD is Double3.ZERO
