"""Central module containing numeric constants used by the curve kernel."""

from __future__ import annotations

import math

###############################################################################
# Angles
###############################################################################

PI: float = math.pi
QUART: float = 0.5 * math.pi  # quarter turn
TAU: float = 2.0 * math.pi

###############################################################################
# Curve defaults
###############################################################################

# Parameter offset of the second tangent sample used for 3D normals
NORMAL_EPSILON: float = 0.001

# Gauss-Legendre order used for arc length, and the lowest accepted order
QUADRATURE_ORDER: int = 24
MIN_QUADRATURE_ORDER: int = 12

# Tangents (or tangent cross products) shorter than this count as zero
ZERO_TOLERANCE: float = 1.0e-12

# Flattened scalar counts accepted by BezierCurve, mapped to (points, is_3d)
FLAT_ARG_LAYOUTS = {
    6: (3, False),
    8: (4, False),
    9: (3, True),
    12: (4, True),
}

SUPPORTED_DEGREES = (2, 3)
