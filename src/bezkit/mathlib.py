"""Scalar math functions used by the curve kernel.

Plain module-level functions, imported where needed.
"""

from __future__ import annotations

import math

import numpy as np

from bezkit.consts import PI, QUART, TAU

__all__ = ["abs", "sin", "cos", "acos", "atan2", "pow", "sqrt", "crt", "PI", "QUART", "TAU"]

# pylint: disable=redefined-builtin
abs = math.fabs
sin = math.sin
cos = math.cos
acos = math.acos
atan2 = math.atan2
pow = math.pow
sqrt = math.sqrt


def crt(value: float) -> float:
    """Signed real cube root: sign(v) * |v|^(1/3)."""
    return float(np.cbrt(value))
