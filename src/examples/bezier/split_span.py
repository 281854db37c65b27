"""Print the de Casteljau lattice of a cubic split.

Run with: python -m examples.bezier.split_span
"""

from bezkit.bezier import BezierCurve


def main():
    """Split the cubic (0,0) (0,1) (1,1) (1,0) at t=0.321 and print all lattice points."""
    curve = BezierCurve(0, 0, 0, 1, 1, 1, 1, 0)
    result = curve.split(0.321)
    print([str(p) for p in result.span])
    print("left: ", result.left)
    print("right:", result.right)


if __name__ == "__main__":
    main()
