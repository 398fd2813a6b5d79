"""Immutable two-dimensional vector."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator

__all__ = ["Vec2"]


@dataclass(frozen=True)
class Vec2:
    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __add__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Vec2") -> "Vec2":
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> "Vec2":
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> "Vec2":
        return Vec2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> "Vec2":
        return Vec2(-self.x, -self.y)

    def dot(self, other: "Vec2") -> float:
        return self.x * other.x + self.y * other.y

    def perp_dot(self, other: "Vec2") -> float:
        """The z component of the 3D cross product of the two vectors."""
        return self.x * other.y - self.y * other.x

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalize(self) -> "Vec2":
        """Unit vector in the same direction; NaN components for a zero vector."""
        length = self.length()
        if length == 0.0:
            return Vec2(math.nan, math.nan)
        return Vec2(self.x / length, self.y / length)

    def reflect(self, normal: "Vec2") -> "Vec2":
        """Reflect across the plane whose (unit) normal is ``normal``."""
        return self - normal * (2.0 * self.dot(normal))


Vec2.ZERO = Vec2(0.0, 0.0)