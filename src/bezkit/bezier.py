"""Quadratic and cubic Bezier curves in two or three dimensions.

Evaluation, hodograph, arc length, normals, de Casteljau splitting and
root finding of the component functions.
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from bezkit import mathlib
from bezkit.common import (
    DEFAULT_SETTINGS,
    DIMS_2D,
    DIMS_3D,
    AvDim,
    CurveSettings,
    DegenerateNormalError,
    InvalidControlPointsError,
    InvalidParameterError,
)
from bezkit.consts import FLAT_ARG_LAYOUTS, SUPPORTED_DEGREES
from bezkit.roots import AvLine, align, cubic_roots, linear_roots, quadratic_roots
from bezkit.vector import AvVector, quarter_turn_matrix

logger = logging.getLogger(__name__)


###############################################################################
# Helpers
###############################################################################


def _bernstein(degree: int, t: Union[float, NDArray[np.float64]]) -> NDArray[np.float64]:
    """Bernstein weights of the given degree (1..3); last axis runs over control points."""
    t = np.asarray(t, dtype=np.float64)
    mt = 1.0 - t
    if degree == 1:
        return np.stack([mt, t], axis=-1)
    if degree == 2:
        return np.stack([mt * mt, 2.0 * mt * t, t * t], axis=-1)
    mt2 = mt * mt
    t2 = t * t
    return np.stack([mt2 * mt, 3.0 * mt2 * t, 3.0 * mt * t2, t2 * t], axis=-1)


@lru_cache(maxsize=8)
def _gauss_legendre(order: int) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Gauss-Legendre nodes and weights on [-1, 1]."""
    nodes, weights = np.polynomial.legendre.leggauss(order)
    nodes.setflags(write=False)
    weights.setflags(write=False)
    return nodes, weights


def _is_scalar(value: Any) -> bool:
    return isinstance(value, numbers.Real) or (isinstance(value, np.ndarray) and value.ndim == 0)


def _point_coordinates(point: Any) -> Tuple[float, ...]:
    """Coordinates of a point-like object: x/y[/z] attributes or a sequence of 2 or 3 values."""
    try:
        if hasattr(point, "x") and hasattr(point, "y"):
            z = getattr(point, "z", None)
            if z is None:
                return (float(point.x), float(point.y))
            return (float(point.x), float(point.y), float(z))
        if isinstance(point, (str, bytes)):
            raise TypeError("strings are not points")
        coords = tuple(float(v) for v in point)
    except (TypeError, ValueError) as e:
        raise InvalidControlPointsError(f"Not a point: {point!r}") from e
    if len(coords) not in (2, 3):
        raise InvalidControlPointsError(f"A point needs 2 or 3 coordinates, got {len(coords)}: {point!r}")
    return coords


def _parse_control_points(args: Sequence[Any], is_3d: Optional[bool]) -> Tuple[Tuple[AvVector, ...], bool]:
    """
    Normalize constructor arguments into 3 or 4 control points.

    Args:
        args: Flat scalars, point-like objects, or a single sequence of either
        is_3d: Dimensionality override for point-like input, None to infer

    Returns:
        Tuple[Tuple[AvVector, ...], bool]: The control points and the 3D flag
    """
    if len(args) == 1 and not _is_scalar(args[0]):
        single = args[0]
        if isinstance(single, np.ndarray):
            args = list(single) if single.ndim == 2 else single.tolist()
        elif isinstance(single, (list, tuple)):
            args = list(single)

    if args and all(_is_scalar(v) for v in args):
        layout = FLAT_ARG_LAYOUTS.get(len(args))
        if layout is None:
            raise InvalidControlPointsError(
                f"Expected 6, 8, 9 or 12 coordinates, got {len(args)}"
            )
        num_points, flat_3d = layout
        if is_3d is not None and is_3d != flat_3d:
            raise InvalidControlPointsError(
                f"{len(args)} coordinates describe a {'3D' if flat_3d else '2D'} curve, is_3d={is_3d} given"
            )
        size = 3 if flat_3d else 2
        values = [float(v) for v in args]
        points = tuple(AvVector.from_array(values[i * size : (i + 1) * size]) for i in range(num_points))
        return points, flat_3d

    if len(args) - 1 not in SUPPORTED_DEGREES:
        raise InvalidControlPointsError(f"Expected 3 or 4 control points, got {len(args)}")
    coords = [_point_coordinates(p) for p in args]
    sizes = {len(c) for c in coords}
    if is_3d is None and all(hasattr(p, "z") for p in args) and all(len(c) == 2 or c[2] == 0.0 for c in coords):
        # vectors on the z = 0 plane, e.g. the points of a 2D curve
        is_3d = False
    if is_3d is None:
        if len(sizes) != 1:
            raise InvalidControlPointsError("Control points mix 2D and 3D coordinates")
        is_3d = sizes.pop() == 3
    elif not is_3d and any(len(c) == 3 and c[2] != 0.0 for c in coords):
        raise InvalidControlPointsError("2D curve requested but a control point has a non-zero z")
    points = tuple(AvVector.from_array(c[:2] if not is_3d else c) for c in coords)
    return points, is_3d


###############################################################################
# AvSplitResult
###############################################################################
@dataclass(frozen=True)
class AvSplitResult:
    """
    Result of a de Casteljau split.

    Attributes:
        left: Sub-curve from the start point to the split point
        right: Sub-curve from the split point to the end point
        span: Full interpolation lattice, original points first, then each
            reduction level left to right (6 points for quadratic, 10 for cubic)
    """

    left: BezierCurve
    right: BezierCurve
    span: Tuple[AvVector, ...]


###############################################################################
# BezierCurve
###############################################################################
class BezierCurve:
    """Quadratic or cubic Bezier curve in 2D or 3D.

    The curve is an immutable value. Build it from flat coordinates
    (6, 8, 9 or 12 values) or from 3 or 4 point-like objects. Objects whose
    z attribute is zero on every point, such as the points of a 2D curve,
    build a 2D curve; pass is_3d=True for a 3D curve in the z = 0 plane.

    >>> curve = BezierCurve(0, 0, 0, 1, 1, 1, 1, 0)
    >>> str(curve.get(0.5))
    '0.5/0.75/0'
    """

    def __init__(self, *args: Any, is_3d: Optional[bool] = None, settings: Optional[CurveSettings] = None):
        points, curve_3d = _parse_control_points(args, is_3d)
        self._points: Tuple[AvVector, ...] = points
        self._is_3d: bool = curve_3d
        self._dims: Tuple[AvDim, ...] = DIMS_3D if curve_3d else DIMS_2D
        self._degree: int = len(points) - 1
        self._settings: CurveSettings = settings if settings is not None else DEFAULT_SETTINGS

        array = np.array([p.to_array() for p in points], dtype=np.float64)
        array.setflags(write=False)
        self._array: NDArray[np.float64] = array
        hodograph = self._degree * np.diff(array, axis=0)
        hodograph.setflags(write=False)
        self._hodograph: NDArray[np.float64] = hodograph

        logger.debug("Created %s degree-%d curve: %s", "3D" if curve_3d else "2D", self._degree, self)

    ###########################################################################
    # Properties
    ###########################################################################

    @property
    def points(self) -> Tuple[AvVector, ...]:
        """The control points."""
        return self._points

    @property
    def degree(self) -> int:
        """2 for quadratic, 3 for cubic curves."""
        return self._degree

    @property
    def order(self) -> int:
        """Alias of degree."""
        return self._degree

    @property
    def is_3d(self) -> bool:
        """True if the curve was built from 3-component points."""
        return self._is_3d

    @property
    def dims(self) -> Tuple[AvDim, ...]:
        """The spatial dimensions: ('x', 'y') or ('x', 'y', 'z')."""
        return self._dims

    @property
    def settings(self) -> CurveSettings:
        """Numerical settings, inherited by split children."""
        return self._settings

    def as_array(self) -> NDArray[np.float64]:
        """Read-only control point array of shape (degree+1, 3)."""
        return self._array

    def _dim_index(self, dim: AvDim) -> int:
        if dim not in self._dims:
            raise ValueError(f"Unknown dimension {dim!r} for a curve with dims {self._dims}")
        return DIMS_3D.index(dim)

    ###########################################################################
    # Evaluation
    ###########################################################################

    def get(self, t: float) -> AvVector:
        """
        Point on the curve at parameter t.

        Values of t outside [0, 1] are not clamped and extrapolate the curve.
        """
        return AvVector.from_array(_bernstein(self._degree, t) @ self._array)

    def evaluate(self, t_values: Union[Sequence[float], NDArray[np.float64]]) -> NDArray[np.float64]:
        """
        Evaluate the curve at many parameters at once.

        Args:
            t_values: Parameters

        Returns:
            NDArray[np.float64]: Points of shape (len(t_values), 3)
        """
        t_array = np.asarray(t_values, dtype=np.float64).reshape(-1)
        return _bernstein(self._degree, t_array) @ self._array

    def get_lut(self, steps: int = 100) -> List[AvVector]:
        """
        Look-up table of points evenly spaced in t.

        The first and last entries are the end control points themselves.
        Fewer than 2 steps yield just the two end points.
        """
        steps = int(abs(steps))
        lut = [self._points[0]]
        if steps > 2:
            step = 1.0 / (steps - 1)
            lut.extend(self.get(i * step) for i in range(1, steps - 1))
        lut.append(self._points[-1])
        return lut

    ###########################################################################
    # Derivatives, arc length and normals
    ###########################################################################

    def derivative_dim(self, dim: AvDim, t: float) -> float:
        """Derivative of one dimension's coordinate function at t."""
        index = self._dim_index(dim)
        return float(_bernstein(self._degree - 1, t) @ self._hodograph[:, index])

    def derivative(self, t: float) -> AvVector:
        """Hodograph vector at t (not normalized); z is 0 for 2D curves."""
        return AvVector.from_array(_bernstein(self._degree - 1, t) @ self._hodograph)

    def arcfn(self, t: float) -> float:
        """Speed |B'(t)|, the arc length integrand."""
        return self.derivative(t).length()

    def length(self) -> float:
        """Arc length on [0, 1] by Gauss-Legendre quadrature of the speed."""
        nodes, weights = _gauss_legendre(self._settings.quadrature_order)
        t_values = 0.5 * nodes + 0.5
        speeds = np.linalg.norm(_bernstein(self._degree - 1, t_values) @ self._hodograph, axis=1)
        return float(0.5 * np.sum(weights * speeds))

    def normal(self, t: float) -> AvVector:
        """
        Unit normal at t.

        In 2D the unit tangent is turned by a quarter turn. In 3D the tangents
        at t and t + normal_epsilon span the local osculating plane; the
        tangent is rotated a quarter turn around the plane's normal axis.

        Raises:
            DegenerateNormalError: if the tangent vanishes, or (3D) the two
                tangent samples are parallel so the rotation axis is undefined
        """
        tolerance = self._settings.zero_tolerance
        tangent = self.derivative(t)
        if tangent.length() <= tolerance:
            logger.debug("Zero tangent at t=%s on %s", t, self)
            raise DegenerateNormalError(f"Tangent vanishes at t={t}")
        d = tangent.normalize()
        if not self._is_3d:
            return d.rotate2d(mathlib.QUART)

        t2 = t + self._settings.normal_epsilon
        tangent2 = self.derivative(t2)
        if tangent2.length() <= tolerance:
            logger.debug("Zero tangent at t=%s on %s", t2, self)
            raise DegenerateNormalError(f"Tangent vanishes at t={t2}")
        axis = tangent2.normalize().cross(d)
        if axis.length() <= tolerance:
            logger.debug("Parallel tangents at t=%s and t=%s on %s", t, t2, self)
            raise DegenerateNormalError(f"Tangents at t={t} and t={t2} are parallel, normal axis undefined")
        return d.apply(quarter_turn_matrix(axis.normalize()))

    ###########################################################################
    # Splitting
    ###########################################################################

    def split(self, t: float, strict: Optional[bool] = None) -> AvSplitResult:
        """
        Split the curve at t by de Casteljau subdivision.

        Args:
            t: Split parameter
            strict: Reject t outside [0, 1]; None uses settings.strict_split

        Returns:
            AvSplitResult: left and right sub-curves plus the interpolation lattice

        Raises:
            InvalidParameterError: if strict and t is outside [0, 1]
        """
        if strict is None:
            strict = self._settings.strict_split
        if strict and not 0.0 <= t <= 1.0:
            raise InvalidParameterError(f"Split parameter must lie in [0, 1], got {t}")
        logger.debug("Splitting %s at t=%s", self, t)

        span: List[AvVector] = list(self._points)
        level = list(self._points)
        while len(level) > 1:
            level = [level[i].lerp(t, level[i + 1]) for i in range(len(level) - 1)]
            span.extend(level)

        q = span
        if self._degree == 2:
            left_points = (q[0], q[3], q[5])
            right_points = (q[5], q[4], q[2])
        else:
            left_points = (q[0], q[4], q[7], q[9])
            right_points = (q[9], q[8], q[6], q[3])
        return AvSplitResult(
            left=BezierCurve(*left_points, is_3d=self._is_3d, settings=self._settings),
            right=BezierCurve(*right_points, is_3d=self._is_3d, settings=self._settings),
            span=tuple(span),
        )

    ###########################################################################
    # Roots
    ###########################################################################

    def _solve(self, values: Sequence[float]) -> List[float]:
        tolerance = self._settings.zero_tolerance
        if self._degree == 2:
            return quadratic_roots(values, tolerance)
        return cubic_roots(values, tolerance)

    def dim_roots(self, dim: AvDim) -> List[float]:
        """
        Parameters in [0, 1] where one dimension's coordinate function is zero.

        Raises:
            DegenerateCubicError: for a cubic whose coordinate function has a zero leading coefficient
        """
        index = self._dim_index(dim)
        return self._solve(self._array[:, index])

    def roots(self, derivatives: bool = False) -> List[float]:
        """
        Roots of every dimension's coordinate function, concatenated per dimension.

        Args:
            derivatives: Also append the roots of the first derivative and,
                for cubics, of the second derivative

        Returns:
            List[float]: Parameters in [0, 1], neither sorted nor deduplicated
        """
        result: List[float] = []
        for dim in self._dims:
            result.extend(self.dim_roots(dim))
        if derivatives:
            result.extend(self.extrema())
            if self._degree == 3:
                for dim in self._dims:
                    second = 2.0 * np.diff(self._hodograph[:, self._dim_index(dim)])
                    result.extend(linear_roots(second, self._settings.zero_tolerance))
        return result

    def extrema(self) -> List[float]:
        """Parameters in [0, 1] where a coordinate's derivative is zero, concatenated per dimension."""
        tolerance = self._settings.zero_tolerance
        result: List[float] = []
        for dim in self._dims:
            values = self._hodograph[:, self._dim_index(dim)]
            if self._degree == 2:
                result.extend(linear_roots(values, tolerance))
            else:
                result.extend(quadratic_roots(values, tolerance))
        return result

    def line_roots(self, line: Optional[AvLine] = None) -> List[float]:
        """
        Parameters in [0, 1] where the curve's xy-projection crosses a line.

        Args:
            line: Reference line, the x-axis when None

        Raises:
            DegenerateCubicError: for a cubic whose aligned y function has a zero leading coefficient
        """
        aligned = align(self._points, line if line is not None else AvLine.x_axis())
        return self._solve([p.y for p in aligned])

    ###########################################################################
    # Unimplemented operations
    ###########################################################################

    def bbox(self):
        """Bounding box (not implemented)."""
        raise NotImplementedError("bbox is not implemented")

    def offset(self, *args, **kwargs):
        """Offset curve (not implemented)."""
        raise NotImplementedError("offset is not implemented")

    def reduce(self):
        """Reduction into simple segments (not implemented)."""
        raise NotImplementedError("reduce is not implemented")

    def scale(self, *args, **kwargs):
        """Scaled curve (not implemented)."""
        raise NotImplementedError("scale is not implemented")

    def outline(self, *args, **kwargs):
        """Outline shape (not implemented)."""
        raise NotImplementedError("outline is not implemented")

    def intersects(self, *args, **kwargs):
        """Curve intersections (not implemented)."""
        raise NotImplementedError("intersects is not implemented")

    ###########################################################################
    # Dunder methods
    ###########################################################################

    def __str__(self) -> str:
        return ", ".join(str(p) for p in self._points)

    def __repr__(self) -> str:
        return f"BezierCurve({self})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BezierCurve):
            return NotImplemented
        return self._is_3d == other._is_3d and self._points == other._points

    def __hash__(self) -> int:
        return hash((self._is_3d, self._points))
