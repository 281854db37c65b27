"""Test module for BezierCurve evaluation in bezkit.bezier

The tests are run using pytest.
Covers point evaluation, look-up tables, derivatives, arc length and normals.
svgpathtools serves as an independent reference for 2D curves.
"""

import math

import numpy as np
import pytest
from svgpathtools import CubicBezier, QuadraticBezier

from bezkit.bezier import BezierCurve
from bezkit.common import CurveSettings, DegenerateNormalError
from bezkit.vector import AvVector

QUAD_POINTS = [(0.0, 0.0), (10.0, 20.0), (20.0, 0.0)]
CUBIC_POINTS = [(0.0, 0.0), (10.0, 20.0), (30.0, 20.0), (40.0, 0.0)]
CUBIC_3D = BezierCurve(0, 0, 0, 1, 2, 0, 2, 2, 1, 3, 0, 2)
T_VALUES = [0.0, 0.1, 0.25, 0.321, 0.5, 0.75, 0.9, 1.0]


def _reference(points):
    """svgpathtools segment for 2D control points."""
    cpx = [complex(x, y) for x, y in points]
    if len(cpx) == 3:
        return QuadraticBezier(*cpx)
    return CubicBezier(*cpx)


###############################################################################
# Point Evaluation Tests
###############################################################################


class TestGet:
    """Point evaluation with Bernstein weights."""

    @pytest.mark.parametrize(
        "curve",
        [
            BezierCurve(*QUAD_POINTS),
            BezierCurve(*CUBIC_POINTS),
            BezierCurve(0, 0, 0, 1, 2, 3, 4, 5, 6),
            CUBIC_3D,
        ],
    )
    def test_endpoints(self, curve):
        """get(0) and get(1) reproduce the first and last control points."""
        first = curve.get(0.0)
        last = curve.get(1.0)
        assert np.allclose(first.to_array(), curve.points[0].to_array(), atol=1e-9)
        assert np.allclose(last.to_array(), curve.points[-1].to_array(), atol=1e-9)

    @pytest.mark.parametrize("points", [QUAD_POINTS, CUBIC_POINTS])
    def test_matches_reference(self, points):
        """Evaluation agrees with svgpathtools."""
        curve = BezierCurve(*points)
        ref = _reference(points)
        for t in T_VALUES:
            pt = curve.get(t)
            expected = ref.point(t)
            assert pt.x == pytest.approx(expected.real, abs=1e-9)
            assert pt.y == pytest.approx(expected.imag, abs=1e-9)
            assert pt.z == 0.0

    def test_cubic_weights(self):
        """Cubic midpoint equals (P0 + 3 P1 + 3 P2 + P3) / 8."""
        curve = BezierCurve(0, 0, 0, 1, 1, 1, 1, 0)
        mid = curve.get(0.5)
        assert mid.x == pytest.approx(0.5)
        assert mid.y == pytest.approx(0.75)

    def test_quadratic_3d_weights(self):
        """Quadratic midpoint equals (P0 + 2 P1 + P2) / 4 in every dimension."""
        curve = BezierCurve(0, 0, 0, 2, 4, 8, 4, 0, 0)
        mid = curve.get(0.5)
        assert (mid.x, mid.y, mid.z) == pytest.approx((2.0, 2.0, 4.0))

    def test_extrapolation(self):
        """Parameters outside [0, 1] are not clamped."""
        curve = BezierCurve(0, 0, 1, 0, 2, 0)
        assert curve.get(-1.0).x == pytest.approx(-2.0)
        assert curve.get(2.0).x == pytest.approx(4.0)

    def test_evaluate_matches_get(self):
        """The vectorised form agrees with point-by-point evaluation."""
        result = CUBIC_3D.evaluate(T_VALUES)
        assert result.shape == (len(T_VALUES), 3)
        for row, t in zip(result, T_VALUES):
            assert np.allclose(row, CUBIC_3D.get(t).to_array())


###############################################################################
# Look-up Table Tests
###############################################################################


class TestLut:
    """Evenly spaced look-up tables."""

    def test_lut_size_and_ends(self):
        """The table has the requested size and exact end points."""
        curve = BezierCurve(*CUBIC_POINTS)
        lut = curve.get_lut(11)
        assert len(lut) == 11
        assert lut[0] is curve.points[0]
        assert lut[-1] is curve.points[-1]
        assert np.allclose(lut[5].to_array(), curve.get(0.5).to_array())

    @pytest.mark.parametrize("steps", [0, 1, 2])
    def test_small_lut(self, steps):
        """Fewer than three steps yield just the end points."""
        curve = BezierCurve(*QUAD_POINTS)
        assert curve.get_lut(steps) == [curve.points[0], curve.points[-1]]

    def test_negative_steps_use_magnitude(self):
        """Negative step counts are taken by magnitude."""
        curve = BezierCurve(*QUAD_POINTS)
        assert len(curve.get_lut(-5)) == 5


###############################################################################
# Derivative Tests
###############################################################################


class TestDerivative:
    """Hodograph evaluation."""

    @pytest.mark.parametrize("points", [QUAD_POINTS, CUBIC_POINTS])
    def test_matches_reference(self, points):
        """Derivative agrees with svgpathtools."""
        curve = BezierCurve(*points)
        ref = _reference(points)
        for t in T_VALUES:
            d = curve.derivative(t)
            expected = ref.derivative(t)
            assert d.x == pytest.approx(expected.real, abs=1e-9)
            assert d.y == pytest.approx(expected.imag, abs=1e-9)

    def test_quadratic_endpoint_tangents(self):
        """Quadratic tangents at the ends are 2 (P1 - P0) and 2 (P2 - P1)."""
        curve = BezierCurve(*QUAD_POINTS)
        assert curve.derivative(0.0) == AvVector(20.0, 40.0)
        assert curve.derivative(1.0) == AvVector(20.0, -40.0)

    def test_cubic_endpoint_tangents(self):
        """Cubic tangents at the ends are 3 (P1 - P0) and 3 (P3 - P2)."""
        curve = BezierCurve(*CUBIC_POINTS)
        assert curve.derivative(0.0) == AvVector(30.0, 60.0)
        assert curve.derivative(1.0) == AvVector(30.0, -60.0)

    def test_finite_difference_3d(self):
        """The 3D derivative matches a central finite difference."""
        h = 1e-6
        for t in (0.2, 0.5, 0.8):
            numeric = (CUBIC_3D.get(t + h).to_array() - CUBIC_3D.get(t - h).to_array()) / (2 * h)
            assert np.allclose(CUBIC_3D.derivative(t).to_array(), numeric, atol=1e-6)

    def test_derivative_dim(self):
        """Single-dimension derivatives match the vector components."""
        for t in T_VALUES:
            d = CUBIC_3D.derivative(t)
            assert CUBIC_3D.derivative_dim("x", t) == pytest.approx(d.x)
            assert CUBIC_3D.derivative_dim("y", t) == pytest.approx(d.y)
            assert CUBIC_3D.derivative_dim("z", t) == pytest.approx(d.z)

    def test_derivative_dim_unknown(self):
        """A 2D curve has no z dimension."""
        with pytest.raises(ValueError):
            BezierCurve(*QUAD_POINTS).derivative_dim("z", 0.5)


###############################################################################
# Arc Length Tests
###############################################################################


class TestLength:
    """Gauss-Legendre arc length."""

    def test_straight_lines(self):
        """Collinear control points give the chord length, even with uneven spacing."""
        assert BezierCurve(0, 0, 1, 0, 2, 0).length() == pytest.approx(2.0)
        assert BezierCurve(0, 0, 0.5, 0, 2, 0).length() == pytest.approx(2.0)
        assert BezierCurve(0, 0, 0, 1, 1, 1, 2, 2, 2, 3, 3, 3).length() == pytest.approx(3.0 * math.sqrt(3.0))

    @pytest.mark.parametrize("points", [QUAD_POINTS, CUBIC_POINTS])
    def test_matches_reference(self, points):
        """Arc length agrees with svgpathtools."""
        curve = BezierCurve(*points)
        assert curve.length() == pytest.approx(_reference(points).length(), rel=1e-7)

    def test_3d_against_polyline(self):
        """A dense polyline approximates the 3D arc length."""
        pts = CUBIC_3D.evaluate(np.linspace(0.0, 1.0, 20001))
        polyline = float(np.sum(np.linalg.norm(np.diff(pts, axis=0), axis=1)))
        assert CUBIC_3D.length() == pytest.approx(polyline, rel=1e-6)

    def test_arcfn_is_speed(self):
        """arcfn is the length of the derivative."""
        curve = BezierCurve(*CUBIC_POINTS)
        assert curve.arcfn(0.0) == pytest.approx(math.hypot(30.0, 60.0))

    def test_quadrature_order_setting(self):
        """A lower quadrature order still converges for a smooth curve."""
        low = BezierCurve(*CUBIC_POINTS, settings=CurveSettings(quadrature_order=12))
        high = BezierCurve(*CUBIC_POINTS)
        assert low.length() == pytest.approx(high.length(), rel=1e-6)


###############################################################################
# Normal Tests
###############################################################################


class TestNormal:
    """Normals in 2D and 3D."""

    def test_2d_straight_line(self):
        """The normal of a line along +x points along +y."""
        n = BezierCurve(0, 0, 1, 0, 2, 0).normal(0.5)
        assert (n.x, n.y, n.z) == pytest.approx((0.0, 1.0, 0.0), abs=1e-12)

    @pytest.mark.parametrize("points", [QUAD_POINTS, CUBIC_POINTS])
    def test_2d_unit_and_perpendicular(self, points):
        """2D normals are unit length and perpendicular to the tangent."""
        curve = BezierCurve(*points)
        for t in T_VALUES:
            n = curve.normal(t)
            assert n.length() == pytest.approx(1.0)
            assert n.dot(curve.derivative(t)) == pytest.approx(0.0, abs=1e-9)

    def test_2d_matches_reference(self):
        """The 2D normal is the tangent turned counter-clockwise, like svgpathtools' normal."""
        curve = BezierCurve(*CUBIC_POINTS)
        ref = _reference(CUBIC_POINTS)
        for t in (0.1, 0.5, 0.9):
            n = curve.normal(t)
            # svgpathtools returns -i * unit_tangent, i.e. the clockwise normal
            expected = -ref.normal(t)
            assert n.x == pytest.approx(expected.real, abs=1e-9)
            assert n.y == pytest.approx(expected.imag, abs=1e-9)

    def test_3d_unit_and_perpendicular(self):
        """3D normals are unit length and perpendicular to the tangent."""
        for t in (0.0, 0.2, 0.5, 0.8):
            n = CUBIC_3D.normal(t)
            assert n.length() == pytest.approx(1.0)
            assert n.dot(CUBIC_3D.derivative(t)) == pytest.approx(0.0, abs=1e-9)

    def test_3d_planar_curve(self):
        """A planar clockwise-bending curve in 3D gets the same normal as in 2D."""
        flat = BezierCurve((0, 0), (1, 1), (2, 0))
        spatial = BezierCurve((0, 0, 0), (1, 1, 0), (2, 0, 0))
        n2 = flat.normal(0.0)
        n3 = spatial.normal(0.0)
        assert (n3.x, n3.y, n3.z) == pytest.approx((n2.x, n2.y, 0.0), abs=1e-9)
        assert (n3.x, n3.y) == pytest.approx((-math.sqrt(0.5), math.sqrt(0.5)), abs=1e-9)

    def test_3d_straight_line_is_degenerate(self):
        """Parallel tangent samples leave the rotation axis undefined."""
        curve = BezierCurve(0, 0, 0, 1, 1, 1, 2, 2, 2)
        with pytest.raises(DegenerateNormalError):
            curve.normal(0.5)

    def test_zero_tangent_is_degenerate(self):
        """A vanishing tangent has no normal, in 2D as in 3D."""
        with pytest.raises(DegenerateNormalError):
            BezierCurve(0, 0, 0, 0, 1, 1).normal(0.0)
        with pytest.raises(DegenerateNormalError):
            BezierCurve(0, 0, 0, 0, 0, 0, 1, 1, 1).normal(0.0)

    def test_degenerate_error_is_arithmetic_error(self):
        """DegenerateNormalError can be caught as ArithmeticError."""
        with pytest.raises(ArithmeticError):
            BezierCurve(0, 0, 0, 1, 1, 1, 2, 2, 2).normal(0.0)
