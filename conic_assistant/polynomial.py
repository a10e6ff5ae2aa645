from __future__ import annotations

from typing import Dict

from .classify import classify, refine_type
from .normalize import clean_equation, move_right_side, split_equation
from .schemas import PolynomialAnalysis
from .terms import combine_term_table, combine_terms, scan_equation


def format_term_table(table: Dict[str, float]) -> str:
    parts = []
    for label, value in table.items():
        if value == 0:
            continue
        if label == "const":
            parts.append(f"{value:+.2f}")
        else:
            parts.append(f"{value:+.2f}{label}")
    return " ".join(parts).lstrip("+")


def analyze_polynomial(equation: str) -> PolynomialAnalysis:
    """Combine like terms and report the general-form coefficients."""
    cleaned = clean_equation(equation)
    sides = split_equation(cleaned)
    normalized = move_right_side(cleaned)
    if sides is None or normalized is None:
        return PolynomialAnalysis(
            original_equation=equation,
            error="Formato equazione non valido: usare al massimo un segno '='",
        )
    scan = scan_equation(*sides)
    table = combine_term_table(scan.terms)
    coeffs = combine_terms(scan.terms)
    return PolynomialAnalysis(
        original_equation=equation,
        normalized_equation=normalized,
        terms=table,
        formatted_result=format_term_table(table),
        conic_type=refine_type(classify(coeffs), coeffs),
        coefficients=coeffs.as_dict(),
        discriminant=coeffs.discriminant,
    )
