from __future__ import annotations

import math

import pytest

from conic_assistant.schemas import ConicParameters, ConicType
from conic_assistant.strategies import (
    STRATEGIES,
    UNKNOWN_CONFIDENCE,
    guess_from_terms,
    match_exact_forms,
    parse_conic,
    run_cascade,
    solve_general_form,
    solve_lenient_general_form,
    solve_symbolic_form,
)


def test_centered_circle() -> None:
    result = parse_conic("x^2 + y^2 = 25")
    assert result.type is ConicType.CIRCLE
    assert (result.parameters.center.x, result.parameters.center.y) == (0.0, 0.0)
    assert result.parameters.radius == pytest.approx(5.0)
    assert result.confidence >= 0.9


def test_shifted_circle() -> None:
    result = parse_conic("(x-2)^2 + (y-3)^2 = 16")
    assert result.type is ConicType.CIRCLE
    assert (result.parameters.center.x, result.parameters.center.y) == (2.0, 3.0)
    assert result.parameters.radius == pytest.approx(4.0)


def test_canonical_ellipse() -> None:
    result = parse_conic("x^2/25 + y^2/16 = 1")
    assert result.type is ConicType.ELLIPSE
    assert result.parameters.semi_major_axis == pytest.approx(5.0)
    assert result.parameters.semi_minor_axis == pytest.approx(4.0)
    assert result.parameters.eccentricity == pytest.approx(0.6)


def test_canonical_hyperbola() -> None:
    result = parse_conic("x^2/16 - y^2/9 = 1")
    assert result.type is ConicType.HYPERBOLA
    assert result.parameters.semi_major_axis == pytest.approx(4.0)
    assert result.parameters.semi_minor_axis == pytest.approx(3.0)
    assert result.parameters.eccentricity == pytest.approx(1.25)


def test_explicit_parabola() -> None:
    result = parse_conic("y = 2*x^2 + 3*x - 1")
    coefficients = result.parameters.coefficients
    assert result.type is ConicType.PARABOLA
    assert (coefficients.a, coefficients.b, coefficients.c) == (
        pytest.approx(2.0),
        pytest.approx(3.0),
        pytest.approx(-1.0),
    )
    assert result.parameters.vertex.x == pytest.approx(-0.75)
    assert result.standard_form == "y = 2x² + 3x - 1"


def test_unrecognizable_input() -> None:
    result = parse_conic("qwerty")
    assert result.type is ConicType.UNKNOWN
    assert result.confidence == UNKNOWN_CONFIDENCE
    assert result.parameters == ConicParameters()
    assert result.graphing_points is None
    assert "qwerty" in result.explanation


def test_negative_radius_is_never_a_real_circle() -> None:
    result = parse_conic("x^2+y^2=-5")
    assert not (result.type is ConicType.CIRCLE and result.parameters.radius)
    assert result.confidence < 0.8


@pytest.mark.parametrize(
    "equation, expected",
    [
        ("x^2 + y^2 = 9", ConicType.CIRCLE),
        ("(x+1)^2 + y^2 = 4", ConicType.CIRCLE),
        ("x^2/9 + y^2/4 = 1", ConicType.ELLIPSE),
        ("x^2/4 - y^2/9 = 1", ConicType.HYPERBOLA),
        ("y^2/9 - x^2/16 = 1", ConicType.HYPERBOLA),
        ("y = x^2", ConicType.PARABOLA),
        ("x = y^2 + 1", ConicType.PARABOLA),
        ("xy = 4", ConicType.HYPERBOLA),
        ("x^2 + y^2 - 4x + 6y - 3 = 0", ConicType.CIRCLE),
        ("4x^2 + 9y^2 = 36", ConicType.ELLIPSE),
    ],
)
def test_canonical_inputs_are_confident(equation: str, expected: ConicType) -> None:
    result = parse_conic(equation)
    assert result.type is expected
    assert result.confidence >= 0.8


@pytest.mark.parametrize(
    "equation",
    [
        "x^2 + y^2 = 25",
        "(x-2)^2 + (y-3)^2 = 16",
        "x^2/25 + y^2/16 = 1",
        "x^2/16 - y^2/9 = 1",
        "y^2/9 - x^2/16 = 1",
        "y = 2*x^2 + 3*x - 1",
        "x = y^2 - 2y",
        "x^2 + y^2 - 4x + 6y - 3 = 0",
    ],
)
def test_standard_form_reclassifies_to_same_type(equation: str) -> None:
    first = parse_conic(equation)
    again = parse_conic(first.standard_form)
    assert again.type is first.type


def test_parameters_rebuild_the_same_circle() -> None:
    first = parse_conic("x^2 + y^2 - 4x + 6y - 3 = 0")
    center = first.parameters.center
    rebuilt = f"(x-{center.x:g})^2 + (y+{-center.y:g})^2 = {first.parameters.radius ** 2:g}"
    again = parse_conic(rebuilt)
    assert again.type is ConicType.CIRCLE
    assert again.parameters.radius == pytest.approx(first.parameters.radius)


def test_classification_is_idempotent() -> None:
    for equation in ("x^2 + y^2 = 25", "y = 2*x^2 + 3*x - 1", "qwerty", "x^2 + 3xy - y^2 = 4"):
        assert parse_conic(equation) == parse_conic(equation)


def test_exact_forms_only_match_their_shapes() -> None:
    assert match_exact_forms("x^2+y^2=25") is not None
    assert match_exact_forms("x^2+y^2+2x=25") is None
    assert match_exact_forms("x^2+y^2=0") is None
    equilateral = match_exact_forms("xy=-2")
    assert equilateral.type is ConicType.HYPERBOLA
    assert equilateral.parameters.semi_major_axis == pytest.approx(2.0)
    assert equilateral.parameters.rotation_angle == pytest.approx(-math.pi / 4)


def test_exact_ellipse_with_equal_denominators_is_a_circle() -> None:
    result = match_exact_forms("x^2/4 + y^2/4 = 1")
    assert result.type is ConicType.CIRCLE
    assert result.parameters.radius == pytest.approx(2.0)


def test_general_form_defers_to_symbolic_expansion() -> None:
    equation = "(x-1)^2 + 4(y+2)^2 = 16"
    assert solve_general_form(equation) is None
    result = solve_symbolic_form(equation)
    assert result.type is ConicType.ELLIPSE
    assert result.confidence == pytest.approx(0.8)
    assert (result.parameters.center.x, result.parameters.center.y) == (pytest.approx(1.0), pytest.approx(-2.0))
    assert parse_conic(equation).type is ConicType.ELLIPSE


def test_lenient_general_form_skips_noise() -> None:
    equation = "x^2 + y^2 + foo = 9"
    assert solve_general_form(equation) is None
    assert solve_symbolic_form(equation) is None
    result = solve_lenient_general_form(equation)
    assert result.type is ConicType.CIRCLE
    assert result.confidence == pytest.approx(0.75)


def test_heuristic_guess_placeholders() -> None:
    circle = guess_from_terms("x^2 + y^2 + sin(x) = 1")
    assert circle.type is ConicType.CIRCLE
    assert circle.parameters.radius == 5.0
    assert circle.confidence == 0.5
    parabola = guess_from_terms("y^2 * cos(x)")
    assert parabola.type is ConicType.PARABOLA
    assert parabola.confidence == 0.6
    assert guess_from_terms("x + y = 1") is None


def test_cascade_survives_a_failing_strategy() -> None:
    def broken(equation: str):
        raise RuntimeError("boom")

    result = run_cascade("x^2 + y^2 = 25", (broken,) + STRATEGIES)
    assert result.type is ConicType.CIRCLE


def test_graphing_points_are_attached() -> None:
    result = parse_conic("x^2 + y^2 = 25", samples=20)
    assert len(result.graphing_points) == 21
    for point in result.graphing_points:
        assert math.hypot(point.x, point.y) == pytest.approx(5.0)
    assert parse_conic("x^2 + y^2 = 25", samples=0).graphing_points is None
