from __future__ import annotations

import pytest

from conic_assistant.symbolic import equation_polynomial, expand_coefficients
from conic_assistant.terms import CoefficientVector


def test_expands_products_and_quotients() -> None:
    coeffs = expand_coefficients("(x-2)^2/4+(y+1)^2/9=1")
    assert coeffs is not None
    assert coeffs.A == pytest.approx(0.25)
    assert coeffs.C == pytest.approx(1 / 9)
    assert coeffs.D == pytest.approx(-1.0)
    assert coeffs.E == pytest.approx(2 / 9)
    assert coeffs.F == pytest.approx(1 + 1 / 9 - 1)


def test_implicit_products() -> None:
    assert expand_coefficients("2x*(y+1)=3") == CoefficientVector(B=2.0, D=2.0, F=-3.0)


def test_declines_non_polynomials() -> None:
    assert expand_coefficients("sin(x)+y^2=1") is None
    assert expand_coefficients("1/x+y=2") is None
    assert expand_coefficients("x^3+y=0") is None
    assert expand_coefficients("x^(2)+y=0") is None
    assert expand_coefficients("x*y*x*y=1") is None


def test_declines_structural_errors() -> None:
    assert expand_coefficients("x=y=1") is None
    assert expand_coefficients("(x+1=2") is None
    assert expand_coefficients("x^2=x^2") is None


def test_equation_polynomial_without_equals() -> None:
    poly = equation_polynomial("x^2-y")
    assert poly is not None
    assert poly.total_degree() == 2
