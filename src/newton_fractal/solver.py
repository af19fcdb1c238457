"""Newton–Raphson root finding for a single start point and for a whole plane."""

from __future__ import annotations

from typing import List, Optional

from .complex_number import ZERO, ComplexNumber
from .computation import grid_axis
from .constants import EPSILON, SEARCH_ITERATIONS_PER_DEGREE, SEARCH_RANGE, SEARCH_STEP, SLOPE_NUDGE
from .polynomial import ComplexPolynomial, Polynomial

__all__ = [
    "evaluate",
    "slope",
    "find_root",
    "find_all_roots",
    "real_roots",
    "default_search_iterations",
]

_NUDGE = ComplexNumber(SLOPE_NUDGE, SLOPE_NUDGE)


def evaluate(polynomial, point):
    """Value of ``polynomial`` at ``point``."""
    return polynomial.eval(point)


def slope(polynomial, point):
    """Value of the derivative of ``polynomial`` at ``point``."""
    return polynomial.slope(point)


def default_search_iterations(polynomial: ComplexPolynomial) -> int:
    return polynomial.degree * SEARCH_ITERATIONS_PER_DEGREE


def find_root(
    polynomial: ComplexPolynomial,
    start_point: ComplexNumber,
    max_iterations: int,
) -> ComplexNumber:
    """Apply Newton's method from ``start_point`` for at most ``max_iterations`` steps.

    The iteration stops early once the iterate lies within ``EPSILON`` of the
    origin. Otherwise the last iterate is returned, converged or not. A slope
    of exactly zero is nudged by a tiny constant offset instead of dividing by
    zero. If a step would overflow, the last finite iterate is returned.
    """
    if max_iterations < 0:
        raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")

    x = start_point
    for _ in range(max_iterations):
        try:
            s = polynomial.slope(x)
            if s == ZERO:
                s = s.add(_NUDGE)
            x = x.subtract(polynomial.eval(x).divide(s))
        except ArithmeticError:
            break
        if ZERO.distance_to(x) < EPSILON:
            break
    return x


def find_all_roots(
    polynomial: ComplexPolynomial,
    plane_range: float = SEARCH_RANGE,
    step_size: float = SEARCH_STEP,
    max_iterations: Optional[int] = None,
) -> List[ComplexNumber]:
    """Discover the roots of ``polynomial`` by running Newton from a grid of points.

    Start points cover ``[-plane_range, plane_range)`` on both axes, real part
    in the outer loop. A point with a non-zero imaginary part is stored
    together with its conjugate when the coefficients are real. The search
    stops as soon as ``degree`` roots are known; when the grid is exhausted
    first the roots found so far are returned, so ``plane_range`` and
    ``step_size`` must be large and fine enough to reach every basin.
    """
    if max_iterations is None:
        max_iterations = default_search_iterations(polynomial)

    roots: List[ComplexNumber] = []
    if len(roots) >= polynomial.degree:
        return roots

    pair_conjugates = polynomial.has_real_coefficients
    axis = grid_axis(plane_range, step_size)

    for real in axis:
        for imaginary in axis:
            x = find_root(polynomial, ComplexNumber(float(real), float(imaginary)), max_iterations)
            if _is_known(x, roots):
                continue

            roots.append(x)
            if x.imaginary != 0.0 and pair_conjugates:
                conjugate = x.conjugate()
                if not _is_known(conjugate, roots):
                    roots.append(conjugate)

            if len(roots) >= polynomial.degree:
                return roots

    return roots


def real_roots(polynomial: Polynomial, max_iterations: int) -> List[float]:
    """Real roots of a real polynomial, found by the plane search."""
    roots = find_all_roots(polynomial.to_complex(), max_iterations=max_iterations)
    return [z.real for z in roots if z.imaginary == 0.0]


def _is_known(x: ComplexNumber, roots: List[ComplexNumber]) -> bool:
    return any(x.distance_to(root) < EPSILON for root in roots)
