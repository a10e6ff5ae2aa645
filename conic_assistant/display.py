from __future__ import annotations

import math
from typing import List, Optional

from .schemas import ConicResult, ConicType, ParameterRow, Point


def _pair(point: Point) -> str:
    return f"({point.x:.2f}, {point.y:.2f})"


def _row(name: str, value: str, description: str) -> ParameterRow:
    return ParameterRow(name=name, value=value, description=description)


def _center_row(center: Optional[Point], owner: str) -> List[ParameterRow]:
    if center is None:
        return []
    return [_row("Centro", _pair(center), f"Punto centrale {owner}")]


def _circle_rows(result: ConicResult) -> List[ParameterRow]:
    parameters = result.parameters
    rows = _center_row(parameters.center, "della circonferenza")
    radius = parameters.radius
    if radius:
        rows.extend(
            [
                _row("Raggio", f"{radius:.2f}", "Distanza dal centro a qualsiasi punto della circonferenza"),
                _row("Diametro", f"{2 * radius:.2f}", "Doppio del raggio"),
                _row("Area", f"{math.pi * radius * radius:.2f}", "Area del cerchio"),
                _row("Circonferenza", f"{2 * math.pi * radius:.2f}", "Lunghezza della circonferenza"),
            ]
        )
    return rows


def _ellipse_rows(result: ConicResult) -> List[ParameterRow]:
    parameters = result.parameters
    rows = _center_row(parameters.center, "dell'ellisse")
    major = parameters.semi_major_axis
    minor = parameters.semi_minor_axis
    if major:
        rows.append(_row("Semiasse maggiore (a)", f"{major:.2f}", "Metà dell'asse maggiore"))
    if minor:
        rows.append(_row("Semiasse minore (b)", f"{minor:.2f}", "Metà dell'asse minore"))
    if parameters.focus1 and parameters.focus2:
        rows.append(
            _row(
                "Fuochi",
                f"{_pair(parameters.focus1)}, {_pair(parameters.focus2)}",
                "Punti fissi della definizione",
            )
        )
    if parameters.eccentricity:
        rows.append(
            _row("Eccentricità (e)", f"{parameters.eccentricity:.3f}", "Misura della \"schiacciatura\" dell'ellisse")
        )
    if major and minor:
        rows.append(_row("Area", f"{math.pi * major * minor:.2f}", "Area dell'ellisse"))
    return rows


def _parabola_rows(result: ConicResult) -> List[ParameterRow]:
    parameters = result.parameters
    rows: List[ParameterRow] = []
    coefficients = parameters.coefficients
    if coefficients is not None:
        for name, value, description in (
            ("a", coefficients.a, "Coefficiente del termine quadratico"),
            ("b", coefficients.b, "Coefficiente del termine lineare"),
            ("c", coefficients.c, "Termine noto"),
        ):
            if value is not None:
                rows.append(_row(name, f"{value:.3f}", description))
    if parameters.vertex:
        rows.append(_row("Vertice", _pair(parameters.vertex), "Punto di minimo/massimo della parabola"))
    if parameters.focus1:
        rows.append(_row("Fuoco", _pair(parameters.focus1), "Punto fisso della definizione"))
    if parameters.directrix:
        rows.append(_row("Direttrice", parameters.directrix, "Retta fissa della definizione"))
    return rows


def _hyperbola_rows(result: ConicResult) -> List[ParameterRow]:
    parameters = result.parameters
    rows = _center_row(parameters.center, "dell'iperbole")
    if parameters.semi_major_axis:
        rows.append(
            _row("Semiasse trasverso (a)", f"{parameters.semi_major_axis:.2f}", "Metà dell'asse trasverso")
        )
    if parameters.semi_minor_axis:
        rows.append(
            _row(
                "Semiasse non trasverso (b)",
                f"{parameters.semi_minor_axis:.2f}",
                "Metà dell'asse non trasverso",
            )
        )
    if parameters.focus1 and parameters.focus2:
        rows.append(
            _row(
                "Fuochi",
                f"{_pair(parameters.focus1)}, {_pair(parameters.focus2)}",
                "Punti fissi della definizione",
            )
        )
    if parameters.eccentricity:
        rows.append(
            _row("Eccentricità (e)", f"{parameters.eccentricity:.3f}", "Rapporto c/a, sempre > 1 per le iperboli")
        )
    if parameters.asymptotes:
        rows.append(
            _row(
                "Asintoti",
                "; ".join(parameters.asymptotes),
                "Rette a cui l'iperbole si avvicina indefinitamente",
            )
        )
    return rows


_ROW_BUILDERS = {
    ConicType.CIRCLE: _circle_rows,
    ConicType.ELLIPSE: _ellipse_rows,
    ConicType.PARABOLA: _parabola_rows,
    ConicType.HYPERBOLA: _hyperbola_rows,
}


def format_parameters_for_display(result: ConicResult) -> List[ParameterRow]:
    builder = _ROW_BUILDERS.get(result.type)
    rows = builder(result) if builder is not None else []
    rows.append(_row("Forma standard", result.standard_form, "Equazione in forma canonica"))
    return rows
