"""Unit tests for Double3 coefficients and Color.

Tests cover:
- Single value and three value construction
- Per-channel arithmetic
- Attenuation threshold checks
- Shared constants
"""

import pytest


class TestDouble3:
    """Tests for coefficient triples."""

    def test_single_value_fills_all_channels(self):
        """Test that Double3(x) sets every channel to x."""
        from src.whitted.core.color import Double3

        d = Double3(0.5)
        assert d.to_tuple() == (0.5, 0.5, 0.5)

    def test_two_values_rejected(self):
        """Test that exactly one or three values are required."""
        from src.whitted.core.color import Double3

        with pytest.raises(ValueError, match="one or three"):
            Double3(0.1, 0.2)

    def test_of_coerces_scalars_and_sequences(self):
        """Test Double3.of with a scalar, a list and a Double3."""
        from src.whitted.core.color import Double3

        assert Double3.of(1) == Double3.ONE
        assert Double3.of([0.1, 0.2, 0.3]) == Double3(0.1, 0.2, 0.3)
        d = Double3(0.4)
        assert Double3.of(d) is d

    def test_product_is_per_channel(self):
        """Test per-channel multiplication."""
        from src.whitted.core.color import Double3

        assert Double3(0.5, 0.2, 1.0).product(Double3(0.5, 0.5, 0.0)) == Double3(0.25, 0.1, 0.0)

    def test_lower_than_requires_every_channel(self):
        """Test that lower_than only holds when all channels are below k."""
        from src.whitted.core.color import Double3

        assert Double3(0.0001).lower_than(0.001)
        assert not Double3(0.0001, 0.0001, 0.5).lower_than(0.001)

    def test_is_zero(self):
        """Test the zero check."""
        from src.whitted.core.color import Double3

        assert Double3.ZERO.is_zero()
        assert not Double3(0, 0, 0.1).is_zero()


class TestColor:
    """Tests for Color arithmetic."""

    def test_add_several(self):
        """Test adding several colors at once."""
        from src.whitted.core.color import Color

        c = Color(1, 2, 3).add(Color(10, 20, 30), Color(100, 200, 300))
        assert c == Color(111, 222, 333)

    def test_scale_by_scalar_and_double3(self):
        """Test scaling by a number and per channel by a Double3."""
        from src.whitted.core.color import Color, Double3

        assert Color(10, 20, 30).scale(0.5) == Color(5, 10, 15)
        assert Color(10, 20, 30).scale(Double3(1, 0.5, 0)) == Color(10, 10, 0)

    def test_reduce(self):
        """Test reduce divides each channel and rejects n < 1."""
        from src.whitted.core.color import Color

        assert Color(10, 20, 30).reduce(10) == Color(1, 2, 3)
        with pytest.raises(ValueError):
            Color(1, 1, 1).reduce(0.5)

    def test_channels_not_clamped(self):
        """Test that values above 255 and negatives are kept."""
        from src.whitted.core.color import Color

        c = Color(300, -5, 0)
        assert c.to_tuple() == (300.0, -5.0, 0.0)

    def test_black_constant(self):
        """Test the shared BLACK constant."""
        from src.whitted.core.color import Color

        assert Color.BLACK == Color(0, 0, 0)
