"""Immutable three component vector used for all boid kinematics.

Planar simulations keep ``z`` at 0. Every operation returns a new vector,
so a vector handed to another object can never be changed behind its back.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import ArrayLike


class Vector3:
    """A 3D vector with value semantics.

    Attributes:
        x: first component
        y: second component
        z: third component, 0 for planar simulations

    Notes:
        Numeric edge cases never raise. ``normalize`` of the zero vector
        returns the zero vector, and ``limit`` leaves short vectors untouched.
    """

    __slots__ = ("x", "y", "z")

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        """Create a new vector.

        Args:
            x: first component
            y: second component
            z: third component (default: 0)
        """
        object.__setattr__(self, "x", float(x))
        object.__setattr__(self, "y", float(y))
        object.__setattr__(self, "z", float(z))

    def __setattr__(self, key, value):  # noqa: D105
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, key):  # noqa: D105
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def zero(cls) -> Vector3:
        """Return the zero vector."""
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def random_unit_2d(cls, rng: np.random.Generator | None = None) -> Vector3:
        """Return a planar unit vector at a uniformly random angle in [0, 2π).

        Args:
            rng: numpy random generator, a fresh one is created if None
        """
        if rng is None:
            rng = np.random.default_rng()
        angle = rng.uniform(0.0, 2 * math.pi)
        return cls(math.cos(angle), math.sin(angle), 0.0)

    @classmethod
    def from_array(cls, values: ArrayLike) -> Vector3:
        """Build a vector from a sequence of 2 or 3 numbers.

        Raises:
            ValueError: if values does not hold 2 or 3 components
        """
        arr = np.asarray(values, dtype=float).ravel()
        if arr.shape[0] == 2:
            return cls(arr[0], arr[1], 0.0)
        if arr.shape[0] == 3:
            return cls(arr[0], arr[1], arr[2])
        raise ValueError(f"expected 2 or 3 components, got {arr.shape[0]}")

    def to_array(self) -> np.ndarray:
        """Return the components as a new float numpy array of shape (3,)."""
        return np.array([self.x, self.y, self.z], dtype=float)

    def add(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def sub(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scale(self, scalar: float) -> Vector3:
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def dot(self, other: Vector3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def magnitude_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def magnitude(self) -> float:
        return math.sqrt(self.magnitude_squared())

    def normalize(self) -> Vector3:
        """Return the unit vector in the same direction, or zero for the zero vector."""
        mag = self.magnitude()
        if mag == 0:
            return Vector3.zero()
        return Vector3(self.x / mag, self.y / mag, self.z / mag)

    def limit(self, max_magnitude: float) -> Vector3:
        """Clamp the magnitude to ``max_magnitude``.

        Returns self when already short enough; the squared comparison avoids a
        square root in the common case.
        """
        if self.magnitude_squared() <= max_magnitude * max_magnitude:
            return self
        return self.normalize().scale(max_magnitude)

    def distance_squared(self, other: Vector3) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return dx * dx + dy * dy + dz * dz

    def distance(self, other: Vector3) -> float:
        return math.sqrt(self.distance_squared(other))

    def copy(self) -> Vector3:
        return Vector3(self.x, self.y, self.z)

    def __add__(self, other: Vector3) -> Vector3:  # noqa: D105
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Vector3) -> Vector3:  # noqa: D105
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.sub(other)

    def __mul__(self, scalar: float) -> Vector3:  # noqa: D105
        if isinstance(scalar, Vector3):
            return NotImplemented
        return self.scale(scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector3:  # noqa: D105
        if isinstance(scalar, Vector3):
            return NotImplemented
        return self.scale(1.0 / scalar)

    def __neg__(self) -> Vector3:  # noqa: D105
        return Vector3(-self.x, -self.y, -self.z)

    def __iter__(self):  # noqa: D105
        return iter((self.x, self.y, self.z))

    def __eq__(self, other) -> bool:  # noqa: D105
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.x == other.x and self.y == other.y and self.z == other.z

    def __hash__(self) -> int:  # noqa: D105
        return hash((self.x, self.y, self.z))

    def __repr__(self) -> str:  # noqa: D105
        return f"Vector3({self.x!r}, {self.y!r}, {self.z!r})"
