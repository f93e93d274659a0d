"""Unit tests for the Taichi-backed render target."""

import numpy as np
import pytest


class TestRenderTarget:
    """Tests for pixel storage and conversion."""

    def test_invalid_size(self):
        """Test that the dimensions must be positive."""
        from src.whitted.core.render_target import RenderTarget

        with pytest.raises(ValueError, match="positive"):
            RenderTarget(0, 10)

    def test_starts_black(self):
        """Test that a new target is black."""
        from src.whitted.core.render_target import RenderTarget

        target = RenderTarget(5, 4)
        assert np.all(target.to_numpy() == 0.0)

    def test_write_and_read_pixel(self):
        """Test writing and reading back a single pixel."""
        from src.whitted.core.color import Color
        from src.whitted.core.render_target import RenderTarget

        target = RenderTarget(5, 4)
        target.write_pixel(3, 1, Color(10, 20, 30))
        assert target.pixel(3, 1) == Color(10, 20, 30)

    def test_write_row(self):
        """Test that a row lands at the right image row, left to right."""
        from src.whitted.core.color import Color
        from src.whitted.core.render_target import RenderTarget

        target = RenderTarget(3, 2)
        target.write_row(1, [Color(1, 0, 0), Color(0, 2, 0), Color(0, 0, 3)])
        image = target.to_numpy()
        assert image.shape == (2, 3, 3)
        assert np.allclose(image[1], [[1, 0, 0], [0, 2, 0], [0, 0, 3]])
        assert np.all(image[0] == 0.0)

    def test_write_row_length_checked(self):
        """Test that a row must have exactly width colors."""
        from src.whitted.core.color import Color
        from src.whitted.core.render_target import RenderTarget

        target = RenderTarget(3, 2)
        with pytest.raises(ValueError, match="needs 3 colors"):
            target.write_row(0, [Color.BLACK])

    def test_to_image_normalizes_and_clips(self):
        """Test the 0-255 to [0, 1] conversion with clipping."""
        from src.whitted.core.color import Color
        from src.whitted.core.render_target import RenderTarget

        target = RenderTarget(2, 1)
        target.write_row(0, [Color(255, 51, 0), Color(510, -10, 127.5)])
        image = target.to_image()
        assert np.allclose(image[0, 0], [1.0, 0.2, 0.0], atol=1e-6)
        assert np.allclose(image[0, 1], [1.0, 0.0, 0.5], atol=1e-6)

    def test_clear(self):
        """Test that clear resets every pixel to black."""
        from src.whitted.core.color import Color
        from src.whitted.core.render_target import RenderTarget

        target = RenderTarget(2, 2)
        target.write_pixel(0, 0, Color(9, 9, 9))
        target.clear()
        assert np.all(target.to_numpy() == 0.0)


class TestGridOverlay:
    """Tests for the framing grid drawn over a render."""

    def test_grid_lines(self):
        """Test that every second row and column is painted."""
        from src.whitted.core.color import Color
        from src.whitted.core.render_target import RenderTarget

        target = RenderTarget(5, 4)
        target.write_pixel(1, 1, Color(7, 7, 7))
        target.draw_grid(2, Color(1, 2, 3))
        image = target.to_numpy()

        for row in range(4):
            for column in range(5):
                if row % 2 == 0 or column % 2 == 0:
                    assert np.allclose(image[row, column], [1, 2, 3])
        assert np.allclose(image[1, 1], [7, 7, 7])
        assert np.all(image[3, 3] == 0.0)

    def test_interval_must_be_positive(self):
        """Test that a zero interval is rejected."""
        from src.whitted.core.color import Color
        from src.whitted.core.render_target import RenderTarget

        with pytest.raises(ValueError, match="interval"):
            RenderTarget(2, 2).draw_grid(0, Color(1, 1, 1))
