"""Small three-component vector type and rotation helper."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Vec3:
    """An immutable 3D vector; hashable so it can key dictionaries."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def __mul__(self, scale: float) -> Vec3:
        return Vec3(self.x * scale, self.y * scale, self.z * scale)

    __rmul__ = __mul__

    def __truediv__(self, scale: float) -> Vec3:
        return Vec3(self.x / scale, self.y / scale, self.z / scale)

    def norm(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def unit(self) -> Vec3:
        """Vector of length one in the same direction; NaN components for the zero vector."""
        n = self.norm()
        if n == 0.0:
            return Vec3(math.nan, math.nan, math.nan)
        return self / n

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def is_finite(self) -> bool:
        return all(math.isfinite(c) for c in self)


def rotate_about_y(vec: Vec3, degrees: float) -> Vec3:
    """Rotate ``vec`` about the +Y axis by ``degrees`` (right-handed)."""
    a = math.radians(degrees)
    c, s = math.cos(a), math.sin(a)
    return Vec3(c * vec.x + s * vec.z, vec.y, -s * vec.x + c * vec.z)