"""
Ordered recognizers for conic equations.

Each strategy is a pure function `(equation) -> ConicResult | None`. The
cascade tries them in order and the first match wins; when nothing matches,
`unknown_result` is returned so callers always receive a well-formed result.
"""
from __future__ import annotations

import logging
import math
import re
from typing import Callable, Optional, Tuple

from .classify import classify
from .graphing import DEFAULT_SAMPLES, with_graphing_points
from .normalize import clean_equation, split_equation
from .resolve import (
    Resolution,
    circle_resolution,
    ellipse_resolution,
    has_empty_locus,
    hyperbola_resolution,
    resolve,
)
from .schemas import Coefficients, ConicParameters, ConicResult, ConicType, Point
from .symbolic import expand_coefficients
from .terms import CoefficientVector, combine_terms, scan_equation

logger = logging.getLogger(__name__)

Strategy = Callable[[str], Optional[ConicResult]]

EXACT_CONFIDENCE = 0.9
SYMBOLIC_PENALTY = 0.05
LENIENT_PENALTY = 0.1
UNKNOWN_CONFIDENCE = 0.3

_NUM = r"\d+(?:\.\d+)?"

_CIRCLE = re.compile(
    rf"(?:\(x(?P<h>[+-]{_NUM})\)|x)\^?2\+(?:\(y(?P<k>[+-]{_NUM})\)|y)\^?2=(?P<r2>{_NUM})"
)
_ELLIPSE = re.compile(rf"x\^?2/(?P<a2>{_NUM})\+y\^?2/(?P<b2>{_NUM})=1")
_HYPERBOLA_X = re.compile(rf"x\^?2/(?P<a2>{_NUM})-y\^?2/(?P<b2>{_NUM})=1")
_HYPERBOLA_Y = re.compile(rf"y\^?2/(?P<a2>{_NUM})-x\^?2/(?P<b2>{_NUM})=1")
_EQUILATERAL = re.compile(rf"x\*?y=(?P<k>[+-]?{_NUM})")

ACCEPTED_FORMS = "x² + y² = 25, y = x², x²/4 + y²/9 = 1, x²/4 - y²/9 = 1"


def _to_result(resolution: Optional[Resolution]) -> Optional[ConicResult]:
    if resolution is None:
        return None
    return ConicResult(
        type=resolution.conic_type,
        confidence=resolution.confidence,
        standard_form=resolution.standard_form,
        parameters=resolution.parameters,
        explanation=resolution.explanation,
    )


def _equilateral_hyperbola(k: float) -> Optional[ConicResult]:
    if k == 0:
        return None
    semi_axis = math.sqrt(2 * abs(k))
    direction = 1.0 if k > 0 else -1.0
    return ConicResult(
        type=ConicType.HYPERBOLA,
        confidence=EXACT_CONFIDENCE,
        standard_form=f"xy = {k:g}",
        parameters=ConicParameters(
            center=Point(x=0.0, y=0.0),
            semi_major_axis=semi_axis,
            semi_minor_axis=semi_axis,
            focus1=Point(x=semi_axis, y=direction * semi_axis),
            focus2=Point(x=-semi_axis, y=-direction * semi_axis),
            eccentricity=math.sqrt(2.0),
            asymptotes=["x = 0", "y = 0"],
            rotation_angle=direction * math.pi / 4,
        ),
        explanation="Riconosciuta come iperbole equilatera riferita ai propri asintoti",
    )


def match_exact_forms(equation: str) -> Optional[ConicResult]:
    cleaned = clean_equation(equation)

    match = _CIRCLE.fullmatch(cleaned)
    if match:
        h = -float(match.group("h") or 0.0)
        k = -float(match.group("k") or 0.0)
        resolution = circle_resolution(h, k, float(match.group("r2")), EXACT_CONFIDENCE)
        if resolution is not None:
            return _to_result(resolution)

    match = _ELLIPSE.fullmatch(cleaned)
    if match:
        resolution = ellipse_resolution(
            0.0, 0.0, float(match.group("a2")), float(match.group("b2")), EXACT_CONFIDENCE
        )
        if resolution is not None:
            return _to_result(resolution)

    for pattern, vertical in ((_HYPERBOLA_X, False), (_HYPERBOLA_Y, True)):
        match = pattern.fullmatch(cleaned)
        if match:
            resolution = hyperbola_resolution(
                0.0,
                0.0,
                float(match.group("a2")),
                float(match.group("b2")),
                vertical=vertical,
                confidence=EXACT_CONFIDENCE,
            )
            if resolution is not None:
                return _to_result(resolution)

    match = _EQUILATERAL.fullmatch(cleaned)
    if match:
        return _equilateral_hyperbola(float(match.group("k")))
    return None


def _result_from_coefficients(coeffs: CoefficientVector, penalty: float = 0.0) -> Optional[ConicResult]:
    if not coeffs.is_finite:
        return None
    conic_type = classify(coeffs)
    resolution = resolve(conic_type, coeffs)
    if resolution is None:
        logger.debug("no closed form for %s with %s", conic_type.value, coeffs)
        return None
    if penalty:
        resolution = resolution.with_confidence(resolution.confidence - penalty)
    return _to_result(resolution)


def _needs_expansion(side: str) -> bool:
    return any(symbol in side for symbol in "()/")


def solve_general_form(equation: str, strict: bool = True) -> Optional[ConicResult]:
    sides = split_equation(clean_equation(equation))
    if sides is None or any(_needs_expansion(side) for side in sides):
        return None
    scan = scan_equation(*sides)
    if not scan.terms:
        return None
    if strict and not scan.complete:
        logger.debug("unrecognized terms %s, deferring", scan.skipped)
        return None
    penalty = 0.0 if scan.complete else LENIENT_PENALTY
    return _result_from_coefficients(combine_terms(scan.terms), penalty)


def solve_symbolic_form(equation: str) -> Optional[ConicResult]:
    coeffs = expand_coefficients(clean_equation(equation))
    if coeffs is None:
        return None
    return _result_from_coefficients(coeffs, SYMBOLIC_PENALTY)


def solve_lenient_general_form(equation: str) -> Optional[ConicResult]:
    return solve_general_form(equation, strict=False)


def _known_empty_locus(cleaned: str) -> bool:
    sides = split_equation(cleaned)
    if sides is None:
        return False
    if any(_needs_expansion(side) for side in sides):
        coeffs = expand_coefficients(cleaned)
        return coeffs is not None and has_empty_locus(coeffs)
    scan = scan_equation(*sides)
    return scan.complete and bool(scan.terms) and has_empty_locus(combine_terms(scan.terms))


def guess_from_terms(equation: str) -> Optional[ConicResult]:
    """Best-effort type guess from which squared terms appear.

    The parameters are fixed placeholders, not values read from the input.
    """
    cleaned = clean_equation(equation)
    has_x2 = "x^2" in cleaned
    has_y2 = "y^2" in cleaned
    if not (has_x2 or has_y2):
        return None
    if _known_empty_locus(cleaned):
        return None
    if has_x2 and has_y2:
        if "+" in cleaned and "=" in cleaned:
            return ConicResult(
                type=ConicType.CIRCLE,
                confidence=0.5,
                standard_form=equation,
                parameters=ConicParameters(center=Point(x=0.0, y=0.0), radius=5.0),
                explanation="Riconosciuta come possibile circonferenza basata sulla presenza di x² + y²",
            )
        if "-" in cleaned:
            return ConicResult(
                type=ConicType.HYPERBOLA,
                confidence=0.5,
                standard_form=equation,
                parameters=ConicParameters(center=Point(x=0.0, y=0.0), semi_major_axis=4.0, semi_minor_axis=3.0),
                explanation="Riconosciuta come possibile iperbole basata sulla presenza di x² - y²",
            )
        return None
    return ConicResult(
        type=ConicType.PARABOLA,
        confidence=0.6,
        standard_form=equation,
        parameters=ConicParameters(
            coefficients=Coefficients(a=1.0, b=0.0, c=0.0),
            vertex=Point(x=0.0, y=0.0),
        ),
        explanation="Riconosciuta come possibile parabola basata sulla presenza di un solo termine quadratico",
    )


def unknown_result(equation: str) -> ConicResult:
    return ConicResult(
        type=ConicType.UNKNOWN,
        confidence=UNKNOWN_CONFIDENCE,
        standard_form=equation,
        parameters=ConicParameters(),
        explanation=(
            f'Impossibile riconoscere l\'equazione "{equation}". '
            f"Prova con forme più standard come: {ACCEPTED_FORMS}"
        ),
    )


STRATEGIES: Tuple[Strategy, ...] = (
    match_exact_forms,
    solve_general_form,
    solve_symbolic_form,
    solve_lenient_general_form,
    guess_from_terms,
)


def run_cascade(equation: str, strategies: Tuple[Strategy, ...] = STRATEGIES) -> ConicResult:
    for strategy in strategies:
        name = getattr(strategy, "__name__", "strategy")
        try:
            result = strategy(equation)
        except Exception:
            logger.warning("strategy %s failed on %r", name, equation, exc_info=True)
            continue
        if result is not None:
            logger.debug("strategy %s matched %r as %s", name, equation, result.type.value)
            return result
    return unknown_result(equation)


def parse_conic(equation: str, samples: int = DEFAULT_SAMPLES) -> ConicResult:
    return with_graphing_points(run_cascade(equation), samples)
