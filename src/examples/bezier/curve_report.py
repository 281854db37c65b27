"""Print evaluation, tangent, normal, length and root data of a few curves.

Run with: python -m examples.bezier.curve_report
"""

from bezkit.bezier import BezierCurve
from bezkit.common import BezierError

CURVES = {
    "quadratic 2D": BezierCurve((0.0, 0.0), (50.0, 200.0), (200.0, 0.0)),
    "cubic 2D": BezierCurve((0.0, 0.0), (100.0, 200.0), (0.0, -200.0), (200.0, 0.0)),
    "cubic 3D": BezierCurve(0, 0, 0, 1, 2, 0, 2, 2, 1, 3, 0, 2),
}


def main():
    """Print a short report per curve."""
    for name, curve in CURVES.items():
        print(f"{name}: {curve}")
        print(f"  length:   {curve.length():.6f}")
        for t in (0.0, 0.5, 1.0):
            print(f"  t={t}: point {curve.get(t)}  tangent {curve.derivative(t)}  normal {curve.normal(t)}")
        print(f"  extrema:  {curve.extrema()}")
        try:
            print(f"  roots:    {curve.roots()}")
        except BezierError as e:
            print(f"  roots:    {e}")
        print()


if __name__ == "__main__":
    main()
