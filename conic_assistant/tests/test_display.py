from __future__ import annotations

import pytest

from conic_assistant.display import format_parameters_for_display
from conic_assistant.graphing import graphing_points, hyperbola_points, parabola_points
from conic_assistant.polynomial import analyze_polynomial, format_term_table
from conic_assistant.schemas import ConicResult, ConicType
from conic_assistant.strategies import parse_conic


def _rows(result: ConicResult) -> dict:
    return {row.name: row.value for row in format_parameters_for_display(result)}


def test_circle_rows() -> None:
    rows = _rows(parse_conic("x^2 + y^2 = 25"))
    assert rows["Centro"] == "(0.00, 0.00)"
    assert rows["Raggio"] == "5.00"
    assert rows["Diametro"] == "10.00"
    assert rows["Area"] == "78.54"
    assert rows["Forma standard"] == "x² + y² = 25"


def test_ellipse_rows() -> None:
    rows = _rows(parse_conic("x^2/25 + y^2/16 = 1"))
    assert rows["Semiasse maggiore (a)"] == "5.00"
    assert rows["Fuochi"] == "(3.00, 0.00), (-3.00, 0.00)"
    assert rows["Eccentricità (e)"] == "0.600"


def test_parabola_and_hyperbola_rows() -> None:
    parabola = _rows(parse_conic("y = x^2"))
    assert parabola["a"] == "1.000"
    assert parabola["Direttrice"] == "y = -0.25"
    hyperbola = _rows(parse_conic("x^2/16 - y^2/9 = 1"))
    assert hyperbola["Semiasse trasverso (a)"] == "4.00"
    assert hyperbola["Asintoti"] == "y = 0.75x; y = -0.75x"


def test_unknown_only_has_standard_form() -> None:
    rows = format_parameters_for_display(parse_conic("qwerty"))
    assert [row.name for row in rows] == ["Forma standard"]


def test_hyperbola_points_lie_on_curve() -> None:
    result = parse_conic("x^2/16 - y^2/9 = 1")
    points = hyperbola_points(result.parameters, 40)
    assert len(points) == 40
    for point in points:
        assert point.x ** 2 / 16 - point.y ** 2 / 9 == pytest.approx(1.0)


def test_parabola_points_span_vertex() -> None:
    result = parse_conic("x = y^2 - 2y")
    points = parabola_points(result.parameters, 20)
    assert points[0].y == pytest.approx(-9.0)
    assert points[-1].y == pytest.approx(11.0)
    for point in points:
        assert point.x == pytest.approx(point.y ** 2 - 2 * point.y)


def test_rotated_ellipse_points_satisfy_equation() -> None:
    result = parse_conic("x^2 + xy + y^2 = 3", samples=16)
    assert result.type is ConicType.ELLIPSE
    for point in result.graphing_points:
        assert point.x ** 2 + point.x * point.y + point.y ** 2 == pytest.approx(3.0)


def test_unknown_has_no_points() -> None:
    assert graphing_points(parse_conic("qwerty")) is None


def test_polynomial_analysis() -> None:
    analysis = analyze_polynomial("y = 2x^2 + 3x - 1")
    assert analysis.normalized_equation == "y-(2x^2+3x-1)"
    assert analysis.terms["x^2"] == -2.0
    assert analysis.coefficients == {"A": -2.0, "B": 0.0, "C": 0.0, "D": -3.0, "E": 1.0, "F": 1.0}
    assert analysis.conic_type is ConicType.PARABOLA
    assert analysis.discriminant == 0.0
    assert analysis.error is None


def test_polynomial_analysis_detects_circle() -> None:
    analysis = analyze_polynomial("x^2 + y^2 - 9")
    assert analysis.conic_type is ConicType.CIRCLE
    assert analysis.formatted_result == "1.00x^2 +1.00y^2 -9.00"


def test_polynomial_analysis_rejects_multiple_equals() -> None:
    analysis = analyze_polynomial("x = y = 1")
    assert analysis.error is not None
    assert analysis.terms == {}


def test_format_term_table_skips_zero_terms() -> None:
    assert format_term_table({"x^2": 0.0, "y": -2.0, "const": 4.0}) == "-2.00y +4.00"


def test_rotated_parabola_points_satisfy_equation() -> None:
    result = parse_conic("x^2 + 2xy + y^2 + x = 0", samples=20)
    assert result.type is ConicType.PARABOLA
    assert result.confidence == pytest.approx(0.8)
    assert len(result.graphing_points) == 21
    for point in result.graphing_points:
        assert (point.x + point.y) ** 2 + point.x == pytest.approx(0.0, abs=1e-6)
    rows = _rows(result)
    assert rows["Vertice"] == "(-0.06, -0.19)"
    assert "Direttrice" in rows
