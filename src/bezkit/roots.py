"""Closed-form root finding for Bezier component functions.

All solvers take the control values of one dimension (Bezier form, not power
form) and return the real roots that lie in [0, 1]. Roots outside that
interval are dropped, not reported as errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, NamedTuple, Sequence

from bezkit import mathlib
from bezkit.common import DegenerateCubicError
from bezkit.consts import ZERO_TOLERANCE
from bezkit.vector import AvVector

logger = logging.getLogger(__name__)


def _in_unit_interval(t: float) -> bool:
    return 0.0 <= t <= 1.0


def _is_negligible(value: float, values: Sequence[float], tolerance: float) -> bool:
    """True if value is rounding noise relative to the largest control value."""
    return mathlib.abs(value) <= tolerance * max(mathlib.abs(v) for v in values)


###############################################################################
# AvLine
###############################################################################
@dataclass(frozen=True)
class AvLine:
    """Reference line through p1 and p2, used to align control points before root finding."""

    p1: AvVector = field(default_factory=lambda: AvVector(0.0, 0.0))
    p2: AvVector = field(default_factory=lambda: AvVector(1.0, 0.0))

    @classmethod
    def x_axis(cls) -> AvLine:
        """The default line (0,0)-(1,0); aligning to it leaves points unchanged."""
        return cls()


def align(points: Sequence[AvVector], line: AvLine) -> List[AvVector]:
    """
    Translate and rotate points so that the line becomes the x-axis.

    Only x and y take part, the result is 2D (z = 0). After alignment the
    y-coordinates are signed distances from the line, so roots of the
    aligned y function are line crossings.

    Args:
        points: Control points
        line: Reference line

    Returns:
        List[AvVector]: The aligned points
    """
    tx = line.p1.x
    ty = line.p1.y
    angle = -mathlib.atan2(line.p2.y - ty, line.p2.x - tx)
    cos_a = mathlib.cos(angle)
    sin_a = mathlib.sin(angle)
    return [
        AvVector(
            (p.x - tx) * cos_a - (p.y - ty) * sin_a,
            (p.x - tx) * sin_a + (p.y - ty) * cos_a,
        )
        for p in points
    ]


###############################################################################
# Linear and quadratic roots
###############################################################################
def linear_roots(values: Sequence[float], tolerance: float = ZERO_TOLERANCE) -> List[float]:
    """Root of the linear Bezier a + (b - a) t, if any lies in [0, 1]."""
    a, b = float(values[0]), float(values[1])
    if _is_negligible(a - b, (a, b), tolerance):
        return []
    return [t for t in (a / (a - b),) if _in_unit_interval(t)]


def quadratic_roots(values: Sequence[float], tolerance: float = ZERO_TOLERANCE) -> List[float]:
    """
    Real roots in [0, 1] of the quadratic Bezier with control values a, b, c.

    Expanding a(1-t)^2 + 2b(1-t)t + ct^2 gives the power form
    (a - 2b + c) t^2 - 2(a - b) t + a, solved with the quadratic formula.
    When a - 2b + c vanishes relative to the control values the function is
    linear, and constant when b - c vanishes as well.

    Args:
        values: Three control values of one dimension
        tolerance: Relative threshold below which a coefficient counts as zero

    Returns:
        List[float]: Roots in [0, 1], unsorted
    """
    a, b, c = float(values[0]), float(values[1]), float(values[2])
    d = a - 2.0 * b + c
    if not _is_negligible(d, (a, b, c), tolerance):
        radicand = b * b - a * c
        if radicand < 0.0:
            return []
        m1 = -mathlib.sqrt(radicand)
        m2 = -a + b
        v1 = -(m1 + m2) / d
        v2 = -(-m1 + m2) / d
        return [t for t in (v1, v2) if _in_unit_interval(t)]
    if not _is_negligible(b - c, (a, b, c), tolerance):
        return [t for t in ((2.0 * b - c) / (2.0 * (b - c)),) if _in_unit_interval(t)]
    return []


###############################################################################
# Cardano
###############################################################################
class DepressedCubic(NamedTuple):
    """Normalized quadratic coefficient a and depressed-cubic parameters p, q with the discriminant."""

    a: float
    p: float
    q: float
    discriminant: float


def depress_cubic(values: Sequence[float], tolerance: float = ZERO_TOLERANCE) -> DepressedCubic:
    """
    Convert four cubic Bezier control values to depressed-cubic form.

    The power form is divided by its leading coefficient
    d = -p0 + 3 p1 - 3 p2 + p3 to get t^3 + a t^2 + b t + c, then substituted
    with t = s - a/3 to get s^3 + p s + q. A leading coefficient within
    tolerance times the largest control value is rounding noise of a
    lower-degree function and counts as zero.

    Raises:
        DegenerateCubicError: if the leading coefficient is zero
    """
    pa, pb, pc, pd = (float(v) for v in values[:4])
    d = -pa + 3.0 * pb - 3.0 * pc + pd
    if _is_negligible(d, (pa, pb, pc, pd), tolerance):
        logger.debug("Zero leading coefficient for cubic values %s", (pa, pb, pc, pd))
        raise DegenerateCubicError(f"Cubic leading coefficient is zero for values {(pa, pb, pc, pd)}")
    a = (3.0 * pa - 6.0 * pb + 3.0 * pc) / d
    b = (-3.0 * pa + 3.0 * pb) / d
    c = pa / d
    p = (3.0 * b - a * a) / 3.0
    p3 = p / 3.0
    q = (2.0 * a * a * a - 9.0 * a * b + 27.0 * c) / 27.0
    q2 = q / 2.0
    discriminant = q2 * q2 + p3 * p3 * p3
    return DepressedCubic(a, p, q, discriminant)


def cubic_roots(values: Sequence[float], tolerance: float = ZERO_TOLERANCE) -> List[float]:
    """
    Real roots in [0, 1] of the cubic Bezier with four control values (Cardano's method).

    The sign of the discriminant selects the branch:
    - < 0: three distinct real roots, trigonometric form
    - == 0: a repeated root, two distinct values
    - > 0: one real root

    Args:
        values: Four control values of one dimension
        tolerance: Relative threshold for a vanishing leading coefficient

    Returns:
        List[float]: Roots in [0, 1], unsorted

    Raises:
        DegenerateCubicError: if the leading coefficient is zero
    """
    a, p, q, discriminant = depress_cubic(values, tolerance)
    shift = a / 3.0
    q2 = q / 2.0

    if discriminant < 0.0:
        logger.debug("Cardano: three real roots (discriminant=%g)", discriminant)
        mp3 = -p / 3.0
        r = mathlib.sqrt(mp3 * mp3 * mp3)
        cosphi = min(1.0, max(-1.0, -q / (2.0 * r)))
        phi = mathlib.acos(cosphi)
        t1 = 2.0 * mathlib.crt(r)
        candidates = [
            t1 * mathlib.cos(phi / 3.0) - shift,
            t1 * mathlib.cos((phi + mathlib.TAU) / 3.0) - shift,
            t1 * mathlib.cos((phi + 2.0 * mathlib.TAU) / 3.0) - shift,
        ]
    elif discriminant == 0.0:
        logger.debug("Cardano: repeated root")
        u1 = mathlib.crt(-q2) if q2 < 0.0 else -mathlib.crt(q2)
        candidates = [2.0 * u1 - shift, -u1 - shift]
    else:
        logger.debug("Cardano: one real root (discriminant=%g)", discriminant)
        sd = mathlib.sqrt(discriminant)
        u1 = mathlib.crt(-q2 + sd)
        v1 = mathlib.crt(q2 + sd)
        candidates = [u1 - v1 - shift]

    return [t for t in candidates if _in_unit_interval(t)]
