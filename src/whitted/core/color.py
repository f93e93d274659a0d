"""Per-channel coefficient triples and RGB colors.

``Double3`` carries material coefficients and attenuation factors (kA, kD, kT,
the shadow transparency ktr, the recursion factor k). ``Color`` carries light
intensities and shaded results. Both are immutable; the shared constants
``Double3.ZERO``, ``Double3.ONE`` and ``Color.BLACK`` are created once at
import time and are safe to share between threads and processes.
"""

from __future__ import annotations

from collections.abc import Sequence

from src.whitted.core.ray import is_zero


class Double3:
    """An immutable triple of real coefficients.

    Attributes:
        d1, d2, d3: The three channel values.
    """

    __slots__ = ("d1", "d2", "d3")

    def __init__(self, d1: float, d2: float | None = None, d3: float | None = None) -> None:
        # A single value fills every channel
        if d2 is None and d3 is None:
            d2 = d3 = d1
        elif d2 is None or d3 is None:
            raise ValueError("Double3 takes either one or three values")
        self.d1 = float(d1)
        self.d2 = float(d2)
        self.d3 = float(d3)

    @classmethod
    def of(cls, value: float | Sequence[float] | Double3) -> Double3:
        """Coerce a scalar, a 3-sequence or a Double3 into a Double3."""
        if isinstance(value, Double3):
            return value
        if isinstance(value, (int, float)):
            return cls(value)
        if len(value) != 3:
            raise ValueError(f"Expected 3 components, got {len(value)}")
        return cls(value[0], value[1], value[2])

    def __iter__(self):
        yield self.d1
        yield self.d2
        yield self.d3

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Double3):
            return NotImplemented
        return (
            is_zero(self.d1 - other.d1)
            and is_zero(self.d2 - other.d2)
            and is_zero(self.d3 - other.d3)
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"Double3({self.d1}, {self.d2}, {self.d3})"

    def __getstate__(self):
        return (self.d1, self.d2, self.d3)

    def __setstate__(self, state) -> None:
        self.d1, self.d2, self.d3 = state

    def add(self, other: Double3) -> Double3:
        return Double3(self.d1 + other.d1, self.d2 + other.d2, self.d3 + other.d3)

    def subtract(self, other: Double3) -> Double3:
        return Double3(self.d1 - other.d1, self.d2 - other.d2, self.d3 - other.d3)

    def scale(self, scalar: float) -> Double3:
        return Double3(self.d1 * scalar, self.d2 * scalar, self.d3 * scalar)

    def product(self, other: Double3) -> Double3:
        """Per-channel multiplication."""
        return Double3(self.d1 * other.d1, self.d2 * other.d2, self.d3 * other.d3)

    def lower_than(self, k: float) -> bool:
        """True when every channel is strictly below ``k``."""
        return self.d1 < k and self.d2 < k and self.d3 < k

    def is_zero(self) -> bool:
        return self == Double3.ZERO

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.d1, self.d2, self.d3)


Double3.ZERO = Double3(0.0)
Double3.ONE = Double3(1.0)


class Color:
    """An immutable RGB color with unbounded, non-clamped channels.

    Attributes:
        r, g, b: The red, green and blue intensities.
    """

    __slots__ = ("r", "g", "b")

    def __init__(self, r: float, g: float, b: float) -> None:
        self.r = float(r)
        self.g = float(g)
        self.b = float(b)

    @classmethod
    def of(cls, value: Sequence[float] | Color) -> Color:
        if isinstance(value, Color):
            return value
        if len(value) != 3:
            raise ValueError(f"Expected 3 color components, got {len(value)}")
        return cls(value[0], value[1], value[2])

    def __iter__(self):
        yield self.r
        yield self.g
        yield self.b

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return is_zero(self.r - other.r) and is_zero(self.g - other.g) and is_zero(self.b - other.b)

    __hash__ = None

    def __repr__(self) -> str:
        return f"Color({self.r}, {self.g}, {self.b})"

    def __getstate__(self):
        return (self.r, self.g, self.b)

    def __setstate__(self, state) -> None:
        self.r, self.g, self.b = state

    def add(self, *others: Color) -> Color:
        r, g, b = self.r, self.g, self.b
        for other in others:
            r += other.r
            g += other.g
            b += other.b
        return Color(r, g, b)

    def scale(self, k: float | Double3) -> Color:
        """Scale by a scalar, or per channel by a Double3."""
        if isinstance(k, Double3):
            return Color(self.r * k.d1, self.g * k.d2, self.b * k.d3)
        return Color(self.r * k, self.g * k, self.b * k)

    def reduce(self, n: float) -> Color:
        """Divide every channel by ``n``."""
        if n < 1:
            raise ValueError("Can only reduce by a number >= 1")
        return Color(self.r / n, self.g / n, self.b / n)

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)


Color.BLACK = Color(0.0, 0.0, 0.0)
