from __future__ import annotations

import re
from tokenize import TokenError
from typing import Optional

import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    parse_expr,
    standard_transformations,
)

from .normalize import explicit_multiplication, split_equation
from .terms import CoefficientVector

TRANSFORMS = standard_transformations + (implicit_multiplication_application, convert_xor)

X, Y = sp.symbols("x y", real=True)

SAFE_LOCALS = {"x": X, "y": Y}

# Only literals, the two variables and arithmetic ever reach parse_expr.
_ALLOWED = re.compile(r"[0-9xy+\-*/^().]*")
_EXPONENT = re.compile(r"\^(\(|\d+)")
MAX_EXPONENT = 2


def _exponents_bounded(side: str) -> bool:
    for match in _EXPONENT.finditer(side):
        token = match.group(1)
        if token == "(" or int(token) > MAX_EXPONENT:
            return False
    return True


def _parse_side(side: str) -> Optional[sp.Expr]:
    if not _ALLOWED.fullmatch(side) or not _exponents_bounded(side):
        return None
    try:
        return parse_expr(side or "0", transformations=TRANSFORMS, local_dict=SAFE_LOCALS)
    except (SyntaxError, TokenError, TypeError, ValueError, sp.SympifyError):
        return None


def equation_polynomial(text: str) -> Optional[sp.Poly]:
    sides = split_equation(explicit_multiplication(text))
    if sides is None:
        return None
    left = _parse_side(sides[0])
    right = _parse_side(sides[1])
    if left is None or right is None:
        return None
    expr = sp.expand(left - right)
    if expr.free_symbols - {X, Y}:
        return None
    try:
        return sp.Poly(expr, X, Y)
    except sp.PolynomialError:
        return None


def expand_coefficients(text: str) -> Optional[CoefficientVector]:
    """Expand an equation with SymPy and read off the general-form coefficients.

    Declines (None) for anything that is not a polynomial of degree at most
    two in x and y.
    """
    poly = equation_polynomial(text)
    if poly is None or poly.is_zero or poly.total_degree() > 2:
        return None

    def coefficient(x_degree: int, y_degree: int) -> float:
        return float(poly.coeff_monomial(X ** x_degree * Y ** y_degree))

    try:
        coeffs = CoefficientVector(
            A=coefficient(2, 0),
            B=coefficient(1, 1),
            C=coefficient(0, 2),
            D=coefficient(1, 0),
            E=coefficient(0, 1),
            F=coefficient(0, 0),
        )
    except TypeError:
        return None
    return coeffs if coeffs.is_finite else None
