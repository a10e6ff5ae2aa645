from __future__ import annotations

import math

from .schemas import ConicType
from .terms import CoefficientVector

EPSILON = 1e-10


def is_zero(value: float) -> bool:
    return abs(value) < EPSILON


def nearly_equal(left: float, right: float) -> bool:
    return math.isclose(left, right, rel_tol=1e-9, abs_tol=EPSILON)


def classify(coeffs: CoefficientVector) -> ConicType:
    discriminant = coeffs.discriminant
    if is_zero(discriminant):
        if nearly_equal(coeffs.A, coeffs.C) and not is_zero(coeffs.A):
            return ConicType.CIRCLE
        if not is_zero(coeffs.A) or not is_zero(coeffs.C):
            return ConicType.PARABOLA
        return ConicType.UNKNOWN
    if discriminant < 0:
        return ConicType.ELLIPSE
    return ConicType.HYPERBOLA


def refine_type(conic_type: ConicType, coeffs: CoefficientVector) -> ConicType:
    """An axis-aligned ellipse with equal squared coefficients is a circle.

    The discriminant of `A(x^2 + y^2) + ...` is `-4A^2`, so the zero band
    alone never reaches the circle case for real circles.
    """
    if conic_type is ConicType.ELLIPSE and is_zero(coeffs.B) and nearly_equal(coeffs.A, coeffs.C):
        return ConicType.CIRCLE
    return conic_type
