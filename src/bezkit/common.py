"""Central module containing types, exceptions and settings for curve handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from bezkit.consts import (
    MIN_QUADRATURE_ORDER,
    NORMAL_EPSILON,
    QUADRATURE_ORDER,
    ZERO_TOLERANCE,
)

###############################################################################
# Types
###############################################################################


AvDim = Literal[  # Type-Definition for the spatial dimensions of a curve
    # horizontal coordinate
    "x",
    # vertical coordinate
    "y",
    # depth coordinate, only present for 3D curves
    "z",
]

DIMS_2D = ("x", "y")
DIMS_3D = ("x", "y", "z")


###############################################################################
# Exceptions
###############################################################################


class BezierError(Exception):
    """Base exception for curve-related errors."""


class InvalidControlPointsError(BezierError, ValueError):
    """Raised when control points do not describe a quadratic or cubic curve."""


class InvalidParameterError(BezierError, ValueError):
    """Raised when a curve parameter t lies outside the domain an operation requires."""


class DegenerateCubicError(BezierError, ArithmeticError):
    """Raised when the leading coefficient of a cubic is zero."""


class DegenerateNormalError(BezierError, ArithmeticError):
    """Raised when the normal is undefined (zero tangent or parallel tangent samples)."""


###############################################################################
# CurveSettings
###############################################################################


@dataclass(frozen=True)
class CurveSettings:
    """Numerical settings shared by a curve and the curves derived from it.

    Attributes:
        normal_epsilon: Parameter offset of the second tangent sample for 3D normals.
        quadrature_order: Gauss-Legendre order used by the arc length.
        zero_tolerance: Lengths at or below this value count as zero when checking tangents;
            the root solvers scale it by the largest control value.
        strict_split: If True, split() rejects parameters outside [0, 1].
    """

    normal_epsilon: float = NORMAL_EPSILON
    quadrature_order: int = QUADRATURE_ORDER
    zero_tolerance: float = ZERO_TOLERANCE
    strict_split: bool = False

    def __post_init__(self):
        if self.normal_epsilon <= 0.0:
            raise ValueError(f"normal_epsilon must be positive, got {self.normal_epsilon}")
        if self.quadrature_order < MIN_QUADRATURE_ORDER:
            raise ValueError(
                f"quadrature_order must be at least {MIN_QUADRATURE_ORDER}, got {self.quadrature_order}"
            )
        if self.zero_tolerance < 0.0:
            raise ValueError(f"zero_tolerance must not be negative, got {self.zero_tolerance}")

    def to_dict(self) -> dict:
        """Convert settings to a dictionary for serialization."""
        return {
            "normal_epsilon": self.normal_epsilon,
            "quadrature_order": self.quadrature_order,
            "zero_tolerance": self.zero_tolerance,
            "strict_split": self.strict_split,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CurveSettings":
        """Create CurveSettings from a dictionary."""
        return cls(
            normal_epsilon=data.get("normal_epsilon", NORMAL_EPSILON),
            quadrature_order=data.get("quadrature_order", QUADRATURE_ORDER),
            zero_tolerance=data.get("zero_tolerance", ZERO_TOLERANCE),
            strict_split=data.get("strict_split", False),
        )


DEFAULT_SETTINGS = CurveSettings()
