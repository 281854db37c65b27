"""Three-component vector value type used for control points, tangents and normals."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from bezkit import mathlib
from bezkit.common import AvDim


def format_number(value: float) -> str:
    """Format a coordinate as its shortest round-trip text, dropping a trailing '.0'."""
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    if text == "-0":
        text = "0"
    return text


###############################################################################
# AvVector
###############################################################################
@dataclass(frozen=True)
class AvVector:
    """
    Immutable 3-component vector. 2D vectors carry z = 0.

    Attributes:
        x (float): The x-coordinate.
        y (float): The y-coordinate.
        z (float): The z-coordinate, 0 for 2D vectors.
    """

    x: float
    y: float
    z: float = 0.0

    @classmethod
    def from_array(cls, values: Union[Sequence[float], NDArray[np.float64]]) -> AvVector:
        """Create a vector from 2 or 3 coordinates."""
        if len(values) == 2:
            return cls(float(values[0]), float(values[1]), 0.0)
        if len(values) == 3:
            return cls(float(values[0]), float(values[1]), float(values[2]))
        raise ValueError(f"Expected 2 or 3 coordinates, got {len(values)}")

    def to_array(self) -> NDArray[np.float64]:
        """The vector as float64 array of shape (3,)."""
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z)[index]

    def coordinate(self, dim: AvDim) -> float:
        """Return the coordinate of the named dimension."""
        return getattr(self, dim)

    def add(self, other: AvVector) -> AvVector:
        """Component-wise sum."""
        return AvVector(self.x + other.x, self.y + other.y, self.z + other.z)

    def subtract(self, other: AvVector) -> AvVector:
        """Component-wise difference self - other."""
        return AvVector(self.x - other.x, self.y - other.y, self.z - other.z)

    def scale(self, factor: float) -> AvVector:
        """Vector multiplied by a scalar."""
        return AvVector(self.x * factor, self.y * factor, self.z * factor)

    def length(self) -> float:
        """Euclidean length."""
        return mathlib.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalize(self) -> AvVector:
        """
        Unit vector in the same direction.

        Raises:
            ZeroDivisionError: if the vector has zero length
        """
        length = self.length()
        if length == 0.0:
            raise ZeroDivisionError("Cannot normalize a zero-length vector")
        return AvVector(self.x / length, self.y / length, self.z / length)

    def cross(self, other: AvVector) -> AvVector:
        """Cross product self x other."""
        return AvVector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def dot(self, other: AvVector) -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def lerp(self, ratio: float, other: AvVector) -> AvVector:
        """Linear interpolation from self (ratio 0) to other (ratio 1)."""
        return AvVector(
            self.x + ratio * (other.x - self.x),
            self.y + ratio * (other.y - self.y),
            self.z + ratio * (other.z - self.z),
        )

    def rotate2d(self, angle: float) -> AvVector:
        """Rotate in the xy-plane by angle (radians). The result has z = 0."""
        cos_a = mathlib.cos(angle)
        sin_a = mathlib.sin(angle)
        return AvVector(
            self.x * cos_a - self.y * sin_a,
            self.x * sin_a + self.y * cos_a,
            0.0,
        )

    def apply(self, matrix: Union[Sequence[float], NDArray[np.float64]]) -> AvVector:
        """Multiply by a 3x3 matrix given as shape (3, 3) or row-major flat sequence of 9 values."""
        mat = np.asarray(matrix, dtype=np.float64).reshape(3, 3)
        return AvVector.from_array(mat @ self.to_array())

    def __str__(self) -> str:
        return f"{format_number(self.x)}/{format_number(self.y)}/{format_number(self.z)}"


def quarter_turn_matrix(axis: AvVector) -> NDArray[np.float64]:
    """
    Rodrigues matrix rotating vectors perpendicular to a unit axis by a quarter turn.

    With theta = pi/2 the Rodrigues formula reduces to R = a a^T + [a]x, where
    [a]x is the cross-product matrix of the axis.

    Args:
        axis: Unit rotation axis

    Returns:
        NDArray[np.float64]: Rotation matrix of shape (3, 3)
    """
    ax, ay, az = axis.x, axis.y, axis.z
    return np.array(
        [
            [ax * ax, ax * ay - az, ax * az + ay],
            [ax * ay + az, ay * ay, ay * az - ax],
            [ax * az - ay, ay * az + ax, az * az],
        ],
        dtype=np.float64,
    )
