"""Image buffer backed by a Taichi field.

Pixels are addressed as (column, row) with row 0 at the top of the image,
matching the camera's pixel grid. Scene colors use a 0-255 scale; the
normalized view divides by COLOR_SCALE and clamps to [0, 1] for display
and export.
"""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt
import taichi as ti

from src.whitted.core.color import Color

# Color value mapped to full intensity in exported images
COLOR_SCALE = 255.0


@ti.kernel
def _store_row(pixels: ti.template(), row: ti.i32, values: ti.types.ndarray()):
    for j in range(values.shape[0]):
        pixels[j, row] = ti.Vector([values[j, 0], values[j, 1], values[j, 2]])


@ti.kernel
def _draw_grid(pixels: ti.template(), interval: ti.i32, r: ti.f32, g: ti.f32, b: ti.f32):
    for column, row in pixels:
        if row % interval == 0 or column % interval == 0:
            pixels[column, row] = ti.Vector([r, g, b])


class RenderTarget:
    """A width x height RGB buffer.

    Raises:
        ValueError: If width or height is not positive.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._pixels = ti.Vector.field(3, dtype=ti.f32, shape=(width, height))

    @property
    def field(self):
        return self._pixels

    def clear(self) -> None:
        self._pixels.fill(0.0)

    def write_pixel(self, column: int, row: int, color: Color) -> None:
        self._pixels[column, row] = color.to_tuple()

    def write_row(self, row: int, colors: Sequence[Color]) -> None:
        """Store a full row of colors (left to right)."""
        if len(colors) != self.width:
            raise ValueError(f"Row needs {self.width} colors, got {len(colors)}")
        values = np.array([color.to_tuple() for color in colors], dtype=np.float32)
        _store_row(self._pixels, row, values)

    def pixel(self, column: int, row: int) -> Color:
        value = self._pixels[column, row]
        return Color(value[0], value[1], value[2])

    def to_numpy(self) -> npt.NDArray[np.float32]:
        """Raw buffer as an array of shape (height, width, 3)."""
        return np.transpose(self._pixels.to_numpy(), (1, 0, 2)).astype(np.float32)

    def to_image(self) -> npt.NDArray[np.float32]:
        """Normalized image in [0, 1], shape (height, width, 3)."""
        return np.clip(self.to_numpy() / COLOR_SCALE, 0.0, 1.0).astype(np.float32)

    def draw_grid(self, interval: int, color: Color) -> None:
        """Paint every ``interval``-th row and column with ``color``.

        Used to check camera framing; lines start at row 0 and column 0.

        Raises:
            ValueError: If interval is not positive.
        """
        if interval <= 0:
            raise ValueError(f"Grid interval must be positive, got {interval}")
        _draw_grid(self._pixels, interval, *color.to_tuple())
